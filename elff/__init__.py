"""
elff - W3C Extended Log File Format writer.

    from elff import ELFF, Entry, ELFFWriter
    from elff.fields import DATE_FIELD, TIME_FIELD, CLIENT_SERVER_METHOD_FIELD
"""

from elff.encoding import encode_string, format_date, format_date_time, format_time, format_value
from elff.entry import Entry
from elff.errors import ELFFError, FieldDefinitionError, FieldValueError
from elff.fields import Field, FieldIdentifier, FieldIdentifierPrefix, FieldType, field
from elff.log import ELFF, DirectiveMap, format_directive, format_fields
from elff.spec import LATEST_VERSION, NULL_FIELD_VALUE
from elff.writer import ELFFWriter

__version__ = "1.0.0"

__all__ = [
    "ELFF",
    "ELFFError",
    "ELFFWriter",
    "DirectiveMap",
    "Entry",
    "Field",
    "FieldDefinitionError",
    "FieldIdentifier",
    "FieldIdentifierPrefix",
    "FieldType",
    "FieldValueError",
    "LATEST_VERSION",
    "NULL_FIELD_VALUE",
    "encode_string",
    "field",
    "format_date",
    "format_date_time",
    "format_directive",
    "format_fields",
    "format_time",
    "format_value",
]
