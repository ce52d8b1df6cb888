"""pyfunks - Go-style service utilities: durations, HTTP clients, sync maps."""

from __future__ import annotations

try:
    from pyfunks._version import __version__
except ModuleNotFoundError:  # editable install without VCS metadata
    __version__ = "0.0.0.dev0"

from pyfunks._constants import (
    HOUR,
    MAX_DURATION,
    MICROSECOND,
    MILLISECOND,
    MIN_DURATION,
    MINUTE,
    NANOSECOND,
    SECOND,
)
from pyfunks._errors import (
    ConfigDecodeError,
    DurationParseError,
    FatalConstructionError,
    FunksError,
    InvalidClientOptionError,
    InvalidDurationFormatError,
)
from pyfunks._format import format_duration
from pyfunks._json import DurationJSONEncoder, dumps
from pyfunks._parser import parse_duration
from pyfunks.config import HTTPClientConfig, decode_toml, load_toml
from pyfunks.duration import (
    Duration,
    force_new_string_duration,
    new_duration,
    new_string_duration,
)
from pyfunks.http_client import HostLimitedTransport, create_http_client
from pyfunks.syncmap import SyncMap, sync_map_size

__all__ = [
    "Duration",
    "new_duration",
    "new_string_duration",
    "force_new_string_duration",
    "parse_duration",
    "format_duration",
    "DurationJSONEncoder",
    "dumps",
    "HTTPClientConfig",
    "decode_toml",
    "load_toml",
    "HostLimitedTransport",
    "create_http_client",
    "SyncMap",
    "sync_map_size",
    "FunksError",
    "DurationParseError",
    "InvalidDurationFormatError",
    "FatalConstructionError",
    "ConfigDecodeError",
    "InvalidClientOptionError",
    "NANOSECOND",
    "MICROSECOND",
    "MILLISECOND",
    "SECOND",
    "MINUTE",
    "HOUR",
    "MIN_DURATION",
    "MAX_DURATION",
]
