"""
ELFF Log - Session schema plus directive and entry formatting.

An ELFF object is built once per log stream from the ordered list of fields
that make up each line. It produces text only; writing it somewhere is up to
the caller (see elff.writer).

    log = ELFF([DATE_FIELD, TIME_FIELD, CLIENT_SERVER_METHOD_FIELD, SERVER_CLIENT_STATUS_FIELD])
    log.set_directive("Software", "my-server 2.1")
    header = log.format_directives()
    line = log.format_entry(entry)
"""

from __future__ import annotations

import datetime
import logging
import threading
from collections.abc import Iterable, Mapping
from typing import Union

from elff.encoding import format_date_time, format_field_value
from elff.entry import Entry
from elff.fields import Field
from elff.spec import (
    DATE_DIRECTIVE,
    DIRECTIVE_PREFIX,
    DIRECTIVE_SEPARATOR,
    FIELD_SEPARATOR,
    FIELDS_DIRECTIVE,
    LATEST_VERSION,
    LINE_TERMINATOR,
    VERSION_DIRECTIVE,
)

logger = logging.getLogger(__name__)

DirectiveSource = Union[tuple[str, str], Mapping[str, str]]


def format_directive(name: str, value: str) -> str:
    """Format one directive line: "#name: value\\n". Values are not escaped."""
    return f"{DIRECTIVE_PREFIX}{name}{DIRECTIVE_SEPARATOR}{value}{LINE_TERMINATOR}"


def format_fields(fields: Iterable[Field]) -> str:
    """The value of the #Fields directive: field tokens separated by spaces."""
    return FIELD_SEPARATOR.join(field.token for field in fields)


class DirectiveMap:
    """
    Session directives (Software, Remark, ...) shared between threads.

    Each operation takes the map's own lock, so producers can add and remove
    directives while other threads format entries or directive blocks.
    """

    def __init__(self, directives: Mapping[str, str] | None = None) -> None:
        self._lock = threading.Lock()
        self._directives: dict[str, str] = dict(directives or {})

    def get(self, name: str) -> str | None:
        with self._lock:
            return self._directives.get(name)

    def set(self, name: str, value: str | None) -> str | None:
        """Set a directive, or remove it when value is None. Returns the old value."""
        with self._lock:
            if value is None:
                return self._directives.pop(name, None)
            old = self._directives.get(name)
            self._directives[name] = value
            return old

    def remove(self, name: str) -> str | None:
        return self.set(name, None)

    def items(self) -> list[tuple[str, str]]:
        """Snapshot of (name, value) pairs in insertion order."""
        with self._lock:
            return list(self._directives.items())

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._directives

    def __len__(self) -> int:
        with self._lock:
            return len(self._directives)


def _iter_directives(sources: Iterable[DirectiveSource]) -> Iterable[tuple[str, str]]:
    for source in sources:
        if isinstance(source, Mapping):
            yield from source.items()
        else:
            name, value = source
            yield name, value


class ELFF:
    """
    One log stream: the fields written on every line and the session
    directives written in the header block.
    """

    def __init__(
        self,
        fields: Iterable[Field],
        directives: Mapping[str, str] | None = None,
    ) -> None:
        if fields is None:
            raise TypeError("Fields cannot be None")
        # Copied so later changes to the caller's list don't alter the schema
        self._fields: tuple[Field, ...] = tuple(fields)
        for f in self._fields:
            if not isinstance(f, Field):
                raise TypeError(f"Expected a Field, got {type(f).__name__}")
        self.directives = DirectiveMap(directives)
        logger.debug("ELFF schema: %s", format_fields(self._fields) or "<empty>")

    @property
    def fields(self) -> tuple[Field, ...]:
        return self._fields

    def get_directive(self, name: str) -> str | None:
        return self.directives.get(name)

    def set_directive(self, name: str, value: str | None) -> str | None:
        """Set a session directive; None removes it. Returns the old value."""
        return self.directives.set(name, value)

    def format_fields_directive(self) -> str:
        return format_directive(FIELDS_DIRECTIVE, format_fields(self._fields))

    def format_directives(
        self,
        *directives: DirectiveSource,
        date: datetime.datetime | None = None,
    ) -> str:
        """
        Format the directive block that heads a log.

        Order: stored session directives, then the ones passed here (as
        (name, value) pairs or mappings), then Version, Date and Fields.
        The last three are always written, even if a directive of the same
        name came earlier. date defaults to now.
        """
        if date is None:
            date = datetime.datetime.now(datetime.timezone.utc)
        lines = [format_directive(name, value) for name, value in self.directives.items()]
        lines.extend(format_directive(name, value) for name, value in _iter_directives(directives))
        lines.append(format_directive(VERSION_DIRECTIVE, LATEST_VERSION))
        lines.append(format_directive(DATE_DIRECTIVE, format_date_time(date)))
        lines.append(self.format_fields_directive())
        logger.debug("Formatted %d directives", len(lines))
        return "".join(lines)

    def format_entry(self, entry: Entry) -> str:
        """
        Format one entry line in schema order, "-" for missing values.

        Raises FieldValueError if a stored value does not fit its field.
        """
        if entry is None:
            raise TypeError("Entry cannot be None")
        values = [format_field_value(f, entry.get(f)) for f in self._fields]
        return FIELD_SEPARATOR.join(values) + LINE_TERMINATOR

    def __repr__(self) -> str:
        return f"<ELFF fields={format_fields(self._fields)!r} directives={len(self.directives)}>"
