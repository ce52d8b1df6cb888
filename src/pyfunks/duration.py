"""Duration value type with TOML text and JSON document adapters."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema

from pyfunks._constants import (
    HOUR,
    MAX_DURATION,
    MICROSECOND,
    MILLISECOND,
    MIN_DURATION,
    MINUTE,
    SECOND,
)
from pyfunks._errors import (
    ERR_MSG_FATAL_DURATION,
    ERR_MSG_INVALID_DURATION_FORMAT,
    ERR_MSG_MALFORMED_DURATION,
    DurationParseError,
    FatalConstructionError,
    InvalidDurationFormatError,
)
from pyfunks._format import format_duration
from pyfunks._parser import parse_duration

logger = logging.getLogger(__name__)

TOML_FORMAT = "toml"
"""Validation context ``format`` value under which only duration strings are accepted."""


def _truncate_toward_zero(value: int, unit: int) -> int:
    whole = abs(value) // unit
    return -whole if value < 0 else whole


@dataclass(frozen=True, order=True, repr=False)
class Duration:
    """An elapsed time interval stored as a signed nanosecond count.

    ``str(duration)`` is the canonical text form (``"1m30s"``), which
    always parses back to the same nanosecond count. Counts outside the
    signed 64-bit range saturate to its bounds.
    """

    nanoseconds: int = 0

    def __post_init__(self) -> None:
        clamped = min(max(self.nanoseconds, MIN_DURATION), MAX_DURATION)
        if clamped != self.nanoseconds:
            object.__setattr__(self, "nanoseconds", clamped)

    def __str__(self) -> str:
        return format_duration(self.nanoseconds)

    def __repr__(self) -> str:
        return f"Duration({str(self)!r})"

    # --- Construction ---

    @classmethod
    def parse(cls, text: str) -> Duration:
        """Parse a Go-style duration string such as ``"300ms"`` or ``"2h45m"``.

        Raises:
            DurationParseError: If the text is not a valid duration.
        """
        return cls(parse_duration(text))

    @classmethod
    def from_timedelta(cls, value: timedelta) -> Duration:
        micros = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
        return cls(micros * MICROSECOND)

    # --- Conversions ---

    def microseconds(self) -> int:
        return _truncate_toward_zero(self.nanoseconds, MICROSECOND)

    def milliseconds(self) -> int:
        return _truncate_toward_zero(self.nanoseconds, MILLISECOND)

    def seconds(self) -> float:
        return self.nanoseconds / SECOND

    def minutes(self) -> float:
        return self.nanoseconds / MINUTE

    def hours(self) -> float:
        return self.nanoseconds / HOUR

    def to_timedelta(self) -> timedelta:
        """Convert to a timedelta, truncating below microsecond resolution."""
        return timedelta(microseconds=self.microseconds())

    # --- TOML (text) adapter ---

    @classmethod
    def unmarshal_text(cls, text: str | bytes) -> Duration:
        """Decode the raw string of a text config field.

        Raises:
            DurationParseError: If the text is not a valid duration.
        """
        if isinstance(text, bytes):
            try:
                text = text.decode("utf-8")
            except UnicodeDecodeError as e:
                raise DurationParseError(
                    ERR_MSG_MALFORMED_DURATION,
                    f"duration text is not valid UTF-8: {text!r}",
                    wrapped=e,
                ) from e
        return cls.parse(text)

    def marshal_text(self) -> str:
        return str(self)

    # --- JSON adapter ---

    @classmethod
    def from_json_value(cls, value: Any) -> Duration:
        """Decode an already-decoded JSON value.

        A number is a raw nanosecond count (floats are truncated toward
        zero, values outside the signed 64-bit range saturate). A string
        is parsed as a duration. Anything else is rejected.

        Raises:
            DurationParseError: If a string value is not a valid duration.
            InvalidDurationFormatError: If the value is neither a finite
                number nor a string.
        """
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            if isinstance(value, float) and not math.isfinite(value):
                raise InvalidDurationFormatError(
                    ERR_MSG_INVALID_DURATION_FORMAT,
                    f"non-finite number is not a duration: {value!r}",
                )
            return cls(int(value))
        elif isinstance(value, str):
            return cls.parse(value)
        else:
            raise InvalidDurationFormatError(
                ERR_MSG_INVALID_DURATION_FORMAT,
                f"expected a JSON number or string, got {type(value).__name__}: {value!r}",
            )

    def to_json_value(self) -> str:
        return str(self)

    @classmethod
    def unmarshal_json(cls, data: str | bytes) -> Duration:
        """Decode a JSON document holding a single duration value.

        Raises:
            json.JSONDecodeError: If ``data`` is not valid JSON.
            DurationParseError: If a string value is not a valid duration.
            InvalidDurationFormatError: If the value is neither a number nor a string.
        """
        return cls.from_json_value(json.loads(data))

    def marshal_json(self) -> str:
        return json.dumps(self.to_json_value(), ensure_ascii=False)

    # --- pydantic integration ---

    @classmethod
    def _validate(cls, value: Any, info: core_schema.ValidationInfo) -> Duration:
        if isinstance(value, Duration):
            return value
        if isinstance(value, timedelta):
            return cls.from_timedelta(value)
        context = info.context or {}
        if context.get("format") == TOML_FORMAT:
            if not isinstance(value, str):
                raise InvalidDurationFormatError(
                    ERR_MSG_INVALID_DURATION_FORMAT,
                    f"expected a TOML string, got {type(value).__name__}: {value!r}",
                )
            return cls.unmarshal_text(value)
        return cls.from_json_value(value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.with_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                cls.to_json_value
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return {
            "anyOf": [{"type": "string"}, {"type": "integer"}],
            "description": "Duration as a Go-style string or a nanosecond count",
        }


def new_duration(value: timedelta | int) -> Duration:
    """Wrap a timedelta or a nanosecond count, saturating out-of-range values."""
    if isinstance(value, timedelta):
        return Duration.from_timedelta(value)
    return Duration(value)


def new_string_duration(text: str) -> Duration:
    """Build a Duration from a string.

    Raises:
        DurationParseError: If the text is not a valid duration.
    """
    return Duration.parse(text)


def force_new_string_duration(text: str) -> Duration:
    """Build a Duration from a string the caller asserts is valid.

    Use this for literals and already-validated configuration only. An
    invalid string is a programming error: it raises
    :class:`FatalConstructionError`, which is not an ``Exception`` and is
    not meant to be recovered from.
    """
    try:
        return Duration.parse(text)
    except DurationParseError as e:
        logger.critical("invalid duration literal %r: %s", text, e.internal())
        raise FatalConstructionError(ERR_MSG_FATAL_DURATION, text) from e
