"""
W3C Extended Log File Format v1.0
=================================

Layout:
    #Software: <name>                  <- Optional session directives (#Name: value)
    #Remark: <text>
    #Version: 1.0                      <- Always written
    #Date: 2024-01-15 10:30:00:000     <- GMT date and time the block was written
    #Fields: date time cs-method ...   <- Schema, one token per column
    2024-01-15 10:30:00:000 GET ...    <- One line per entry, space separated
    2024-01-15 10:30:01:250 - ...      <- "-" for a missing value

Field tokens:
    prefix-name     <- Standard attribute (cs-method, sc-status)
    prefix(name)    <- HTTP header (cs(User-Agent))
    name            <- No prefix (date, time, time-taken)

Design Decisions:
    - Entries are whitespace delimited, so strings double "+" then turn spaces into "+"
    - Dates and times are always GMT, never the local zone
    - Version, Date and Fields are appended to every directive block, even if
      a caller already supplied one with the same name
    - Directive values are written verbatim; callers keep newlines out of them
"""

# Latest supported format version
LATEST_VERSION = "1.0"

# Every directive line starts with this character
DIRECTIVE_PREFIX = "#"
DIRECTIVE_SEPARATOR = ": "

# Directive names
VERSION_DIRECTIVE = "Version"
FIELDS_DIRECTIVE = "Fields"
SOFTWARE_DIRECTIVE = "Software"
START_DATE_DIRECTIVE = "Start-Date"
END_DATE_DIRECTIVE = "End-Date"
DATE_DIRECTIVE = "Date"
REMARK_DIRECTIVE = "Remark"

DIRECTIVE_TYPES = {
    VERSION_DIRECTIVE: "Version of the extended log file format used",
    FIELDS_DIRECTIVE: "Field identifiers recorded in each entry",
    SOFTWARE_DIRECTIVE: "Software that generated the log",
    START_DATE_DIRECTIVE: "Date and time at which the log was started",
    END_DATE_DIRECTIVE: "Date and time at which the log was finished",
    DATE_DIRECTIVE: "Date and time at which the entries were added",
    REMARK_DIRECTIVE: "Comment information, ignored by analysis tools",
}

# strftime pattern; milliseconds are appended separately as ":SSS"
TIME_FORMAT_PATTERN = "%H:%M:%S"

# Written in place of a value that is not present
NULL_FIELD_VALUE = "-"

FIELD_SEPARATOR = " "
LINE_TERMINATOR = "\n"

# Field identifier token framing
PREFIX_SEPARATOR = "-"
HEADER_OPEN = "("
HEADER_CLOSE = ")"
