"""Exception hierarchy for pyfunks."""


class FunksError(Exception):
    """Base exception for recoverable pyfunks errors.

    Provides dual messaging: a sanitized user-facing message and
    internal details (including the offending input) for logging.
    """

    def __init__(
        self,
        user_message: str,
        internal_details: str = "",
        wrapped: Exception | None = None,
    ) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.internal_details = internal_details or user_message
        self.wrapped = wrapped

    def internal(self) -> str:
        return self.internal_details


class DurationParseError(FunksError, ValueError):
    """Raised when a string does not match the duration grammar."""


class InvalidDurationFormatError(FunksError, ValueError):
    """Raised when a decoded JSON value is neither a number nor a string."""


class ConfigDecodeError(FunksError):
    """Raised when a TOML document cannot be decoded into a config type."""


class InvalidClientOptionError(FunksError, ValueError):
    """Raised when an HTTP client option is out of range."""


class FatalConstructionError(BaseException):
    """Raised by ``force_new_string_duration`` when its input is invalid.

    Derives from BaseException: the caller asserted the input cannot be
    invalid, so ``except Exception`` recovery paths must not absorb it.
    The parse failure is available as ``__cause__``.
    """

    def __init__(self, message: str, text: str) -> None:
        super().__init__(message)
        self.text = text


# Sanitized user-facing error message constants
ERR_MSG_EMPTY_DURATION = "invalid duration: empty string"
ERR_MSG_MISSING_UNIT = "invalid duration: missing unit"
ERR_MSG_UNKNOWN_UNIT = "invalid duration: unknown unit"
ERR_MSG_MALFORMED_DURATION = "invalid duration"
ERR_MSG_DURATION_OVERFLOW = "invalid duration: value out of range"
ERR_MSG_INVALID_DURATION_FORMAT = "invalid duration"
ERR_MSG_FATAL_DURATION = "cannot construct duration from invalid string"
ERR_MSG_CONFIG_SYNTAX = "invalid TOML document"
ERR_MSG_CONFIG_TYPE_MISMATCH = "config value has the wrong type"
ERR_MSG_CONFIG_MISSING_FIELD = "required config field is missing"
ERR_MSG_INVALID_MAX_CONNS = "max connections per host cannot be negative"
