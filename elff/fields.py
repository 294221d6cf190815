"""
ELFF Fields - Typed column definitions.

A field is a (prefix, name, is_header) identifier plus the FieldType of the
values it holds. Fields are immutable and compare by value, so two fields
built separately with the same definition address the same Entry slot.

Well-known fields ship as module constants; anything else is built with
field():

    from elff.fields import field, FieldType, FieldIdentifierPrefix

    region = field("region", FieldType.STRING, prefix=FieldIdentifierPrefix.APPLICATION_SPECIFIC)
"""

from __future__ import annotations

import dataclasses
import datetime
import decimal
import enum
import ipaddress
import math
import numbers
import re
from typing import Any
from urllib.parse import ParseResult, SplitResult

from elff.errors import FieldDefinitionError, FieldValueError
from elff.spec import HEADER_CLOSE, HEADER_OPEN, PREFIX_SEPARATOR


class FieldType(enum.Enum):
    """The primitive value kinds a field can hold."""

    ADDRESS = "address"  # Internet address, written verbatim
    DATE = "date"        # GMT date, YYYY-MM-DD
    FIXED = "fixed"      # Fixed format float, finite only
    INTEGER = "integer"  # Sequence of digits
    STRING = "string"    # Text, "+" doubled and spaces turned into "+"
    TIME = "time"        # GMT time, HH:MM:SS:SSS
    URI = "uri"          # Absolute or relative URI

    def accepts(self, value: Any) -> bool:
        """Whether value is a Python value this type knows how to encode."""
        return _ACCEPTED_VALUES[self](value)


# Whitespace or control characters would split an entry into extra columns or lines
_UNSAFE_TOKEN = re.compile(r"[\s\x00-\x1f\x7f]")


def _is_token(text: str) -> bool:
    return not _UNSAFE_TOKEN.search(text)


def _is_address(value: Any) -> bool:
    if isinstance(value, str):
        return _is_token(value)
    return isinstance(value, (ipaddress.IPv4Address, ipaddress.IPv6Address))


def _is_datetime(value: Any) -> bool:
    return isinstance(value, datetime.datetime)


def _is_fixed(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, decimal.Decimal):
        return value.is_finite()
    return isinstance(value, numbers.Real) and math.isfinite(value)


def _is_integer(value: Any) -> bool:
    return isinstance(value, numbers.Integral)


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _is_uri(value: Any) -> bool:
    if isinstance(value, (ParseResult, SplitResult)):
        value = value.geturl()
    return isinstance(value, str) and _is_token(value)


_ACCEPTED_VALUES = {
    FieldType.ADDRESS: _is_address,
    FieldType.DATE: _is_datetime,
    FieldType.FIXED: _is_fixed,
    FieldType.INTEGER: _is_integer,
    FieldType.STRING: _is_string,
    FieldType.TIME: _is_datetime,
    FieldType.URI: _is_uri,
}


class FieldIdentifierPrefix(enum.Enum):
    """Identifier prefixes; the value is the literal code written in #Fields."""

    CLIENT = "c"
    SERVER = "s"
    REMOTE = "r"
    CLIENT_SERVER = "cs"
    SERVER_CLIENT = "sc"
    SERVER_REMOTE_SERVER = "sr"
    REMOTE_SERVER_SERVER = "rs"
    DCS = "dcs"  # WebTrends
    APPLICATION_SPECIFIC = "x"

    @property
    def id(self) -> str:
        return self.value


@dataclasses.dataclass(frozen=True)
class FieldIdentifier:
    """Identifies a column, e.g. cs-method or cs(User-Agent).

    is_header marks the name as an HTTP header name; it only changes how the
    identifier is written in the #Fields directive.
    """

    name: str
    prefix: FieldIdentifierPrefix | None = None
    is_header: bool = False

    def __post_init__(self) -> None:
        if self.name is None:
            raise FieldDefinitionError("Field name cannot be None")
        if not isinstance(self.name, str):
            raise FieldDefinitionError(f"Field name must be a string, got {self.name!r}")
        if not self.name:
            raise FieldDefinitionError("Field name cannot be empty")
        if self.prefix is not None and not isinstance(self.prefix, FieldIdentifierPrefix):
            raise FieldDefinitionError(f"Invalid field prefix: {self.prefix!r}")

    @property
    def token(self) -> str:
        """The identifier as written in the #Fields directive."""
        if self.prefix is None:
            return self.name
        if self.is_header:
            return f"{self.prefix.id}{HEADER_OPEN}{self.name}{HEADER_CLOSE}"
        return f"{self.prefix.id}{PREFIX_SEPARATOR}{self.name}"

    def __str__(self) -> str:
        return self.token


@dataclasses.dataclass(frozen=True)
class Field(FieldIdentifier):
    """A field identifier bound to the type of value it holds."""

    type: FieldType = dataclasses.field(kw_only=True)

    def __post_init__(self) -> None:
        super().__post_init__()
        if not isinstance(self.type, FieldType):
            raise FieldDefinitionError(f"Invalid field type: {self.type!r}")

    def accepts(self, value: Any) -> bool:
        """Whether value may be stored in this field. None always is (no value)."""
        return value is None or self.type.accepts(value)

    def check(self, value: Any) -> Any:
        """Return value unchanged, or raise FieldValueError if the type doesn't fit."""
        if not self.accepts(value):
            raise FieldValueError(
                f"Field {self.token} of type {self.type.name} cannot hold "
                f"{type(value).__name__} value {value!r}"
            )
        return value


def field(
    name: str,
    type: FieldType,
    prefix: FieldIdentifierPrefix | None = None,
    is_header: bool = False,
) -> Field:
    """Build a custom field."""
    return Field(name, prefix, is_header, type=type)


# =============================================================================
# Standard fields
# =============================================================================

# The date at which the transaction completed
DATE_FIELD = field("date", FieldType.DATE)
# The time at which the transaction completed
TIME_FIELD = field("time", FieldType.TIME)
# Time taken for the transaction to complete, in seconds
TIME_TAKEN_FIELD = field("time-taken", FieldType.FIXED)
# Bytes transferred
BYTES_FIELD = field("bytes", FieldType.INTEGER)
# Whether a cache hit occurred; 0 is a miss
CACHED_FIELD = field("cached", FieldType.INTEGER)
CLIENT_IP_FIELD = field("ip", FieldType.ADDRESS, FieldIdentifierPrefix.CLIENT)
CLIENT_SERVER_USERNAME_FIELD = field("username", FieldType.STRING, FieldIdentifierPrefix.CLIENT_SERVER)
CLIENT_SERVER_HOST_FIELD = field("host", FieldType.STRING, FieldIdentifierPrefix.CLIENT_SERVER)
CLIENT_SERVER_METHOD_FIELD = field("method", FieldType.STRING, FieldIdentifierPrefix.CLIENT_SERVER)
CLIENT_SERVER_URI_STEM_FIELD = field("uri-stem", FieldType.STRING, FieldIdentifierPrefix.CLIENT_SERVER)
CLIENT_SERVER_URI_QUERY_FIELD = field("uri-query", FieldType.STRING, FieldIdentifierPrefix.CLIENT_SERVER)
# HTTP status returned to the client
SERVER_CLIENT_STATUS_FIELD = field("status", FieldType.INTEGER, FieldIdentifierPrefix.SERVER_CLIENT)
SERVER_CLIENT_BYTES_FIELD = field("bytes", FieldType.INTEGER, FieldIdentifierPrefix.SERVER_CLIENT)
CLIENT_SERVER_BYTES_FIELD = field("bytes", FieldType.INTEGER, FieldIdentifierPrefix.CLIENT_SERVER)
# Protocol version of the client, e.g. HTTP/1.1
CLIENT_SERVER_VERSION_FIELD = field("version", FieldType.STRING, FieldIdentifierPrefix.CLIENT_SERVER)
CLIENT_SERVER_USER_AGENT_HEADER_FIELD = field(
    "User-Agent", FieldType.STRING, FieldIdentifierPrefix.CLIENT_SERVER, is_header=True
)
CLIENT_SERVER_COOKIE_HEADER_FIELD = field(
    "Cookie", FieldType.STRING, FieldIdentifierPrefix.CLIENT_SERVER, is_header=True
)
CLIENT_SERVER_REFERER_HEADER_FIELD = field(
    "Referer", FieldType.STRING, FieldIdentifierPrefix.CLIENT_SERVER, is_header=True
)
# WebTrends DCS identification
DCS_ID_FIELD = field("id", FieldType.STRING, FieldIdentifierPrefix.DCS)

STANDARD_FIELDS = (
    DATE_FIELD,
    TIME_FIELD,
    TIME_TAKEN_FIELD,
    BYTES_FIELD,
    CACHED_FIELD,
    CLIENT_IP_FIELD,
    CLIENT_SERVER_USERNAME_FIELD,
    CLIENT_SERVER_HOST_FIELD,
    CLIENT_SERVER_METHOD_FIELD,
    CLIENT_SERVER_URI_STEM_FIELD,
    CLIENT_SERVER_URI_QUERY_FIELD,
    SERVER_CLIENT_STATUS_FIELD,
    SERVER_CLIENT_BYTES_FIELD,
    CLIENT_SERVER_BYTES_FIELD,
    CLIENT_SERVER_VERSION_FIELD,
    CLIENT_SERVER_USER_AGENT_HEADER_FIELD,
    CLIENT_SERVER_COOKIE_HEADER_FIELD,
    CLIENT_SERVER_REFERER_HEADER_FIELD,
    DCS_ID_FIELD,
)
