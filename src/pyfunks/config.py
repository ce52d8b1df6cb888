"""TOML configuration decoding validated through pydantic."""

from __future__ import annotations

import dataclasses
import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

import httpx
from pydantic import StrictBool, StrictInt, TypeAdapter, ValidationError

from pyfunks._constants import SECOND
from pyfunks._errors import (
    ERR_MSG_CONFIG_MISSING_FIELD,
    ERR_MSG_CONFIG_SYNTAX,
    ERR_MSG_CONFIG_TYPE_MISMATCH,
    ConfigDecodeError,
    DurationParseError,
    FunksError,
)
from pyfunks.duration import TOML_FORMAT, Duration
from pyfunks.http_client import create_http_client

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class HTTPClientConfig:
    """Settings for :func:`~pyfunks.http_client.create_http_client`."""

    timeout: Duration = Duration(30 * SECOND)
    insecure_skip_verify: StrictBool = False
    max_conns_per_host: StrictInt = 0

    def create_client(self) -> httpx.Client:
        return create_http_client(
            self.timeout,
            self.insecure_skip_verify,
            self.max_conns_per_host,
        )


def _format_loc(loc: tuple[int | str, ...]) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else part
    return path


def _convert_validation_error(e: ValidationError, cls: type) -> FunksError:
    errors = e.errors()
    for error in errors:
        cause = error.get("ctx", {}).get("error")
        if isinstance(cause, DurationParseError):
            return cause

    first = errors[0]
    path = _format_loc(first["loc"])
    if first["type"] == "missing":
        return ConfigDecodeError(
            ERR_MSG_CONFIG_MISSING_FIELD,
            f"missing required field {path!r} for {cls.__name__}",
            wrapped=e,
        )
    return ConfigDecodeError(
        ERR_MSG_CONFIG_TYPE_MISMATCH,
        f"{path}: {first['msg']}, got {first['input']!r}",
        wrapped=e,
    )


def decode_toml(document: str | bytes, cls: type[T]) -> T:
    """Decode a TOML document into the dataclass ``cls``.

    The parsed table is validated against ``cls`` with a pydantic
    ``TypeAdapter``. Keys map onto field names, or onto a
    ``pydantic.Field(validation_alias=...)`` given in an ``Annotated``
    field type. Nested dataclasses decode from sub-tables and unknown
    keys are ignored. :class:`Duration` fields accept TOML strings only.

    Raises:
        ConfigDecodeError: If the document is not valid TOML, a value has
            the wrong type, or a required field is missing.
        DurationParseError: If a duration field holds an invalid string.
    """
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"decode_toml target must be a dataclass, got {cls!r}")
    if isinstance(document, bytes):
        document = document.decode("utf-8")

    try:
        table = tomllib.loads(document)
    except tomllib.TOMLDecodeError as e:
        raise ConfigDecodeError(ERR_MSG_CONFIG_SYNTAX, str(e), wrapped=e) from e

    try:
        config = TypeAdapter(cls).validate_python(table, context={"format": TOML_FORMAT})
    except ValidationError as e:
        error = _convert_validation_error(e, cls)
        if isinstance(error, DurationParseError):
            # Keeps the parse error's own cause chain.
            raise error
        raise error from e

    logger.debug("decoded %s from TOML", cls.__name__)
    return config


def load_toml(path: str | Path, cls: type[T]) -> T:
    """Read ``path`` and decode it with :func:`decode_toml`."""
    return decode_toml(Path(path).read_bytes(), cls)
