"""
ELFF Entry - The field values of one logged event.

Values are checked against the field's type when they are stored, so an
Entry only ever holds values its fields can encode.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from elff.fields import Field


class Entry:
    """
    Mutable bag of field values for one event.

    Usage:
        entry = Entry()
        entry.set(CLIENT_SERVER_METHOD_FIELD, "GET")
        entry[SERVER_CLIENT_STATUS_FIELD] = 200
        old = entry.unset(CLIENT_SERVER_METHOD_FIELD)  # -> "GET"

    Not synchronized; an entry belongs to the thread building it.
    """

    def __init__(self, values: Mapping[Field, Any] | None = None) -> None:
        self._values: dict[Field, Any] = {}
        if values:
            for field, value in values.items():
                self.set(field, value)

    def get(self, field: Field) -> Any:
        """The stored value, or None if the field has none."""
        return self._values.get(field)

    def set(self, field: Field, value: Any) -> Any:
        """
        Store a value and return the one it replaced.

        Passing None removes the value, same as unset(). Raises
        FieldValueError (leaving the entry untouched) if the value does not
        match the field type.
        """
        if not isinstance(field, Field):
            raise TypeError(f"Expected a Field, got {type(field).__name__}")
        if value is None:
            return self._values.pop(field, None)
        field.check(value)
        old = self._values.get(field)
        self._values[field] = value
        return old

    def unset(self, field: Field) -> Any:
        """Remove a value and return it (None if there was none)."""
        return self._values.pop(field, None)

    def clear(self) -> None:
        self._values.clear()

    def __getitem__(self, field: Field) -> Any:
        return self._values[field]

    def __setitem__(self, field: Field, value: Any) -> None:
        self.set(field, value)

    def __delitem__(self, field: Field) -> None:
        del self._values[field]

    def __contains__(self, field: object) -> bool:
        return field in self._values

    def __iter__(self) -> Iterator[Field]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        values = ", ".join(f"{field.token}={value!r}" for field, value in self._values.items())
        return f"<Entry {values}>"
