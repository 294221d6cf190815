"""
ELFF Encoding - Turns typed values into entry tokens.

Every FieldType has exactly one encoder in _ENCODERS. A missing value is
written as "-" whatever the type. Dates and times are converted to GMT before
formatting; naive datetimes are taken as local time, the same way
datetime.astimezone() treats them.
"""

from __future__ import annotations

import datetime
from typing import Any, Callable
from urllib.parse import ParseResult, SplitResult

from elff.errors import FieldValueError
from elff.fields import Field, FieldType
from elff.spec import NULL_FIELD_VALUE, TIME_FORMAT_PATTERN


def encode_string(string: str) -> str:
    """
    Make a string safe for a whitespace delimited entry.

    Each "+" is doubled first, then each space becomes a single "+":

        encode_string("a b+c")  ->  "a+b++c"
    """
    return string.replace("+", "++").replace(" ", "+")


def _to_utc(value: datetime.datetime) -> datetime.datetime:
    return value.astimezone(datetime.timezone.utc)


def format_date(value: datetime.datetime) -> str:
    """YYYY-MM-DD of the instant in GMT."""
    utc = _to_utc(value)
    # strftime("%Y") does not pad years below 1000 on every platform
    return f"{utc.year:04d}-{utc.month:02d}-{utc.day:02d}"


def format_time(value: datetime.datetime) -> str:
    """HH:MM:SS:SSS of the instant in GMT."""
    utc = _to_utc(value)
    return f"{utc.strftime(TIME_FORMAT_PATTERN)}:{utc.microsecond // 1000:03d}"


def format_date_time(value: datetime.datetime) -> str:
    """YYYY-MM-DD HH:MM:SS:SSS of the instant in GMT, as used by the Date directive."""
    return f"{format_date(value)} {format_time(value)}"


def _format_fixed(value: Any) -> str:
    return repr(float(value))


def _format_integer(value: Any) -> str:
    return str(int(value))


def _format_uri(value: Any) -> str:
    if isinstance(value, (ParseResult, SplitResult)):
        return value.geturl()
    return value


_ENCODERS: dict[FieldType, Callable[[Any], str]] = {
    FieldType.ADDRESS: str,
    FieldType.DATE: format_date,
    FieldType.FIXED: _format_fixed,
    FieldType.INTEGER: _format_integer,
    FieldType.STRING: encode_string,
    FieldType.TIME: format_time,
    FieldType.URI: _format_uri,
}

_missing = set(FieldType) - set(_ENCODERS)
if _missing:
    raise RuntimeError(f"No encoder for field types: {sorted(t.name for t in _missing)}")


def format_value(field_type: FieldType, value: Any) -> str:
    """
    Encode one value for the given type.

    Returns NULL_FIELD_VALUE for None. Raises FieldValueError when the value
    is not one the type accepts, so a bad value never turns into a
    plausible-looking token.
    """
    if value is None:
        return NULL_FIELD_VALUE
    if not field_type.accepts(value):
        raise FieldValueError(
            f"Cannot encode {type(value).__name__} value {value!r} as {field_type.name}"
        )
    return _ENCODERS[field_type](value)


def format_field_value(field: Field, value: Any) -> str:
    """Encode value using the type declared by field."""
    try:
        return format_value(field.type, value)
    except FieldValueError as e:
        raise FieldValueError(f"Field {field.token}: {e}") from e
