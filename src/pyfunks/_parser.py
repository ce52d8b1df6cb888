"""Duration string parsing - Lark grammar plus a small tree Transformer."""

from __future__ import annotations

from dataclasses import dataclass

from lark import Lark, Token
from lark.exceptions import UnexpectedInput
from lark.visitors import Transformer

from pyfunks._constants import MAX_DURATION, UNIT_MAP
from pyfunks._errors import (
    ERR_MSG_DURATION_OVERFLOW,
    ERR_MSG_EMPTY_DURATION,
    ERR_MSG_MALFORMED_DURATION,
    ERR_MSG_MISSING_UNIT,
    ERR_MSG_UNKNOWN_UNIT,
    DurationParseError,
)

DURATION_GRAMMAR = r"""
start: SIGN? term+
term: NUMBER UNIT

SIGN: "+" | "-"
NUMBER: /[0-9]+(?:\.[0-9]*)?|\.[0-9]+/
UNIT: /[^0-9.]+/
"""

# Fraction digits past this many are ignored.
MAX_FRACTION_DIGITS = 18

# A whole part with more significant digits always overflows.
MAX_WHOLE_DIGITS = 19

_OVERFLOW_LIMIT = MAX_DURATION + 1

_parser = Lark(DURATION_GRAMMAR, parser="lalr")


@dataclass(frozen=True)
class _Term:
    number: str
    unit: str


class _TermCollector(Transformer):
    """Turns the parse tree into an optional sign plus a list of terms."""

    def term(self, children: list[Token]) -> _Term:
        number, unit = children
        return _Term(number=str(number), unit=str(unit))

    def start(self, children: list) -> tuple[bool, list[_Term]]:
        negative = False
        if children and isinstance(children[0], Token) and children[0].type == "SIGN":
            negative = str(children[0]) == "-"
            children = children[1:]
        return negative, children


def _term_nanoseconds(term: _Term, text: str) -> int:
    unit = UNIT_MAP.get(term.unit)
    if unit is None:
        raise DurationParseError(
            ERR_MSG_UNKNOWN_UNIT,
            f"unknown unit {term.unit!r} in duration {text!r}",
        )

    whole, _, fraction = term.number.partition(".")
    if len(whole.lstrip("0")) > MAX_WHOLE_DIGITS:
        raise DurationParseError(
            ERR_MSG_DURATION_OVERFLOW,
            f"duration {text!r} overflows a signed 64-bit nanosecond count",
        )

    value = int(whole or "0") * unit
    fraction = fraction[:MAX_FRACTION_DIGITS]
    if fraction:
        value += int(fraction) * unit // 10 ** len(fraction)
    return value


def parse_duration(text: str) -> int:
    """Parse a Go-style duration string into a signed nanosecond count.

    Accepts an optional sign followed by one or more ``<number><unit>``
    tokens (``"300ms"``, ``"-1.5h"``, ``"2h45m"``) or the bare string
    ``"0"``. Valid units are ``ns``, ``us`` (or ``µs``/``μs``), ``ms``,
    ``s``, ``m`` and ``h``.

    Raises:
        DurationParseError: If the string is empty, a number has no unit,
            a unit is unknown, a number is malformed, or the total does
            not fit in a signed 64-bit nanosecond count.
    """
    if not text:
        raise DurationParseError(ERR_MSG_EMPTY_DURATION, "cannot parse empty duration")

    body = text[1:] if text[0] in "+-" else text
    if body == "0":
        return 0

    try:
        tree = _parser.parse(text)
    except UnexpectedInput as e:
        expected = getattr(e, "expected", None) or getattr(e, "allowed", None) or ()
        message = ERR_MSG_MISSING_UNIT if "UNIT" in expected else ERR_MSG_MALFORMED_DURATION
        raise DurationParseError(
            message,
            f"cannot parse duration {text!r}: {e}",
            wrapped=e,
        ) from e

    negative, terms = _TermCollector().transform(tree)

    total = 0
    for term in terms:
        total += _term_nanoseconds(term, text)
        if total > _OVERFLOW_LIMIT:
            raise DurationParseError(
                ERR_MSG_DURATION_OVERFLOW,
                f"duration {text!r} overflows a signed 64-bit nanosecond count",
            )

    if negative:
        return -total
    if total > MAX_DURATION:
        raise DurationParseError(
            ERR_MSG_DURATION_OVERFLOW,
            f"duration {text!r} overflows a signed 64-bit nanosecond count",
        )
    return total
