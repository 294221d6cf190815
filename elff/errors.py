"""Typed exceptions for elff."""


class ELFFError(Exception):
    """Base exception for elff failures."""


class FieldDefinitionError(ELFFError, ValueError):
    """Raised when a field identifier cannot be constructed."""


class FieldValueError(ELFFError, TypeError):
    """Raised when a value does not match the type declared by its field."""
