"""
Log Tests - Directive blocks, entry lines, and the shared directive map.
"""

import datetime
import re
import threading

import pytest

from elff.entry import Entry
from elff.errors import FieldValueError
from elff.fields import (
    CLIENT_IP_FIELD,
    CLIENT_SERVER_METHOD_FIELD,
    CLIENT_SERVER_URI_STEM_FIELD,
    CLIENT_SERVER_USER_AGENT_HEADER_FIELD,
    DATE_FIELD,
    SERVER_CLIENT_BYTES_FIELD,
    SERVER_CLIENT_STATUS_FIELD,
    TIME_FIELD,
    TIME_TAKEN_FIELD,
    FieldIdentifierPrefix,
    FieldType,
    field,
)
from elff.log import ELFF, DirectiveMap, format_directive, format_fields

UTC = datetime.timezone.utc
DATE_LINE = re.compile(r"^#Date: \d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}:\d{3}$")


@pytest.fixture
def access_log():
    return ELFF([
        DATE_FIELD,
        TIME_FIELD,
        CLIENT_SERVER_METHOD_FIELD,
        CLIENT_SERVER_URI_STEM_FIELD,
        SERVER_CLIENT_STATUS_FIELD,
        SERVER_CLIENT_BYTES_FIELD,
    ])


# =============================================================================
# Directive formatting
# =============================================================================

class TestFormatDirective:

    def test_line(self):
        assert format_directive("Software", "httpd 2.4") == "#Software: httpd 2.4\n"

    def test_value_not_escaped(self):
        assert format_directive("Remark", "a+b c") == "#Remark: a+b c\n"

    def test_empty_value(self):
        assert format_directive("Fields", "") == "#Fields: \n"


class TestFormatFields:

    def test_prefix_and_header(self):
        fields = [CLIENT_IP_FIELD, CLIENT_SERVER_USER_AGENT_HEADER_FIELD]
        assert format_fields(fields) == "c-ip cs(User-Agent)"

    def test_bare_names(self):
        assert format_fields([DATE_FIELD, TIME_FIELD, TIME_TAKEN_FIELD]) == "date time time-taken"

    def test_empty(self):
        assert format_fields([]) == ""

    def test_custom_fields(self):
        region = field("region", FieldType.STRING, FieldIdentifierPrefix.APPLICATION_SPECIFIC)
        host = field("Host", FieldType.STRING, FieldIdentifierPrefix.SERVER, is_header=True)
        assert format_fields([region, host]) == "x-region s(Host)"


class TestFormatDirectives:

    def test_example_block(self, access_log):
        when = datetime.datetime(2024, 1, 15, 10, 30, 0, tzinfo=UTC)
        assert access_log.format_directives(date=when) == (
            "#Version: 1.0\n"
            "#Date: 2024-01-15 10:30:00:000\n"
            "#Fields: date time cs-method cs-uri-stem sc-status sc-bytes\n"
        )

    def test_order(self, access_log):
        access_log.set_directive("Software", "httpd")
        text = access_log.format_directives(("Remark", "restarted"), {"Start-Date": "2024-01-15"})
        lines = text.splitlines()
        assert lines[0] == "#Software: httpd"
        assert lines[1] == "#Remark: restarted"
        assert lines[2] == "#Start-Date: 2024-01-15"
        assert lines[3] == "#Version: 1.0"
        assert DATE_LINE.match(lines[4])
        assert lines[5].startswith("#Fields: ")
        assert len(lines) == 6

    def test_mandatory_directives_duplicated(self, access_log):
        access_log.set_directive("Version", "0.9")
        text = access_log.format_directives(("Fields", "custom"), ("Date", "yesterday"))
        lines = text.splitlines()
        assert lines[:3] == ["#Version: 0.9", "#Fields: custom", "#Date: yesterday"]
        assert lines[3] == "#Version: 1.0"
        assert DATE_LINE.match(lines[4])
        assert lines[5] == "#Fields: date time cs-method cs-uri-stem sc-status sc-bytes"
        assert sum(1 for line in lines if line == "#Version: 1.0") == 1

    def test_date_defaults_to_now(self, access_log):
        before = datetime.datetime.now(UTC).replace(microsecond=0)
        text = access_log.format_directives()
        date_line = text.splitlines()[1]
        assert DATE_LINE.match(date_line)
        stamp = datetime.datetime.strptime(date_line[len("#Date: "):-4], "%Y-%m-%d %H:%M:%S")
        assert stamp.replace(tzinfo=UTC) >= before

    def test_date_in_gmt(self, access_log):
        zone = datetime.timezone(datetime.timedelta(hours=-5))
        when = datetime.datetime(2024, 1, 15, 22, 0, 0, 500_000, tzinfo=zone)
        text = access_log.format_directives(date=when)
        assert "#Date: 2024-01-16 03:00:00:500\n" in text

    def test_empty_schema(self):
        text = ELFF([]).format_directives()
        assert text.endswith("#Fields: \n")


# =============================================================================
# Entry formatting
# =============================================================================

class TestFormatEntry:

    def test_example_line(self, access_log):
        when = datetime.datetime(2024, 1, 15, 10, 30, 0, tzinfo=UTC)
        entry = Entry({
            DATE_FIELD: when,
            TIME_FIELD: when,
            CLIENT_SERVER_METHOD_FIELD: "GET",
            CLIENT_SERVER_URI_STEM_FIELD: "/index.html",
            SERVER_CLIENT_STATUS_FIELD: 200,
            SERVER_CLIENT_BYTES_FIELD: 1024,
        })
        assert access_log.format_entry(entry) == "2024-01-15 10:30:00:000 GET /index.html 200 1024\n"

    def test_missing_value_is_dash(self):
        log = ELFF([CLIENT_SERVER_METHOD_FIELD, SERVER_CLIENT_STATUS_FIELD])
        entry = Entry()
        entry.set(CLIENT_SERVER_METHOD_FIELD, "GET")
        assert log.format_entry(entry) == "GET -\n"

    def test_all_missing(self, access_log):
        assert access_log.format_entry(Entry()) == "- - - - - -\n"

    def test_empty_schema(self):
        entry = Entry({CLIENT_SERVER_METHOD_FIELD: "GET"})
        assert ELFF([]).format_entry(entry) == "\n"

    def test_unknown_fields_ignored(self):
        log = ELFF([SERVER_CLIENT_STATUS_FIELD])
        entry = Entry({CLIENT_SERVER_METHOD_FIELD: "GET", SERVER_CLIENT_STATUS_FIELD: 304})
        assert log.format_entry(entry) == "304\n"

    def test_strings_escaped(self):
        log = ELFF([CLIENT_SERVER_USER_AGENT_HEADER_FIELD, TIME_TAKEN_FIELD])
        entry = Entry({CLIENT_SERVER_USER_AGENT_HEADER_FIELD: "Mozilla/5.0 (a+b)", TIME_TAKEN_FIELD: 0.125})
        assert log.format_entry(entry) == "Mozilla/5.0+(a++b) 0.125\n"

    def test_does_not_mutate(self, access_log):
        entry = Entry({CLIENT_SERVER_METHOD_FIELD: "GET"})
        access_log.format_entry(entry)
        access_log.format_entry(entry)
        assert len(entry) == 1
        assert entry.get(CLIENT_SERVER_METHOD_FIELD) == "GET"

    def test_bad_value_fails_render(self):
        log = ELFF([SERVER_CLIENT_STATUS_FIELD])
        entry = Entry()
        # Bypass the check in Entry.set to simulate a corrupted entry
        entry._values[SERVER_CLIENT_STATUS_FIELD] = "200"
        with pytest.raises(FieldValueError, match="sc-status"):
            log.format_entry(entry)

    def test_uri_with_whitespace_never_rendered(self):
        target = field("uri", FieldType.URI, FieldIdentifierPrefix.CLIENT_SERVER)
        log = ELFF([CLIENT_SERVER_METHOD_FIELD, target, SERVER_CLIENT_STATUS_FIELD])
        entry = Entry({CLIENT_SERVER_METHOD_FIELD: "GET", SERVER_CLIENT_STATUS_FIELD: 200})
        with pytest.raises(FieldValueError):
            entry.set(target, "/a b\nc")
        entry._values[target] = "/a b\nc"
        with pytest.raises(FieldValueError, match="cs-uri"):
            log.format_entry(entry)
        entry.set(target, "/a%20b")
        line = log.format_entry(entry)
        assert line == "GET /a%20b 200\n"
        assert len(line.split(" ")) == 3

    def test_none_entry(self, access_log):
        with pytest.raises(TypeError):
            access_log.format_entry(None)


# =============================================================================
# Session
# =============================================================================

class TestELFF:

    def test_fields_copied(self):
        fields = [DATE_FIELD, TIME_FIELD]
        log = ELFF(fields)
        fields.append(CLIENT_IP_FIELD)
        assert log.fields == (DATE_FIELD, TIME_FIELD)

    def test_rejects_non_field(self):
        with pytest.raises(TypeError, match="Expected a Field"):
            ELFF([DATE_FIELD, "time"])

    def test_rejects_none(self):
        with pytest.raises(TypeError):
            ELFF(None)

    def test_initial_directives(self):
        log = ELFF([DATE_FIELD], directives={"Software": "httpd"})
        assert log.get_directive("Software") == "httpd"
        assert log.format_directives().startswith("#Software: httpd\n")

    def test_set_directive(self):
        log = ELFF([])
        assert log.set_directive("Remark", "one") is None
        assert log.set_directive("Remark", "two") == "one"
        assert log.get_directive("Remark") == "two"
        assert log.set_directive("Remark", None) == "two"
        assert log.get_directive("Remark") is None

    def test_repr(self, access_log):
        assert "cs-method" in repr(access_log)


class TestDirectiveMap:

    def test_remove(self):
        directives = DirectiveMap({"Software": "httpd"})
        assert "Software" in directives
        assert directives.remove("Software") == "httpd"
        assert "Software" not in directives
        assert directives.remove("Software") is None

    def test_items_snapshot(self):
        directives = DirectiveMap()
        directives.set("A", "1")
        directives.set("B", "2")
        items = directives.items()
        directives.set("C", "3")
        assert items == [("A", "1"), ("B", "2")]
        assert len(directives) == 3

    def test_concurrent_distinct_names(self):
        directives = DirectiveMap()
        workers = 8
        per_worker = 200

        def produce(worker):
            for i in range(per_worker):
                directives.set(f"X-{worker}-{i}", str(i))
            for i in range(0, per_worker, 2):
                directives.remove(f"X-{worker}-{i}")

        threads = [threading.Thread(target=produce, args=(w,)) for w in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(directives) == workers * per_worker // 2
        for w in range(workers):
            for i in range(per_worker):
                expected = None if i % 2 == 0 else str(i)
                assert directives.get(f"X-{w}-{i}") == expected

    def test_concurrent_format_while_mutating(self):
        log = ELFF([DATE_FIELD])
        stop = threading.Event()

        def churn():
            i = 0
            while not stop.is_set():
                log.set_directive(f"Remark-{i % 10}", str(i))
                log.set_directive(f"Remark-{(i + 5) % 10}", None)
                i += 1

        thread = threading.Thread(target=churn)
        thread.start()
        try:
            for _ in range(200):
                text = log.format_directives()
                assert text.endswith("#Fields: date\n")
                assert all(line.startswith("#") for line in text.splitlines())
        finally:
            stop.set()
            thread.join()
