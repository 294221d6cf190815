"""
ELFF Writer - Hands formatted lines to a text stream.

Each directive block and each entry is written with a single write() followed
by flush(), under a lock, so lines from concurrent threads never interleave.
I/O errors from the stream propagate unchanged.

Usage:
    log = ELFF([DATE_FIELD, TIME_FIELD, CLIENT_SERVER_URI_STEM_FIELD])
    with ELFFWriter.open(log, "access.log") as w:
        w.log_directives()
        w.log(entry)
"""

from __future__ import annotations

import datetime
import logging
import threading
from pathlib import Path
from typing import TextIO

from elff.entry import Entry
from elff.log import ELFF, DirectiveSource, format_directive

logger = logging.getLogger(__name__)


class ELFFWriter:
    """Writes an ELFF session's directives and entries to a stream."""

    def __init__(self, log: ELFF, stream: TextIO, owns_stream: bool = False) -> None:
        if log is None:
            raise TypeError("Log cannot be None")
        if stream is None:
            raise TypeError("Stream cannot be None")
        self.session = log
        self._stream = stream
        self._owns_stream = owns_stream
        self._lock = threading.Lock()
        self._closed = False
        self.entries_written = 0

    @classmethod
    def open(cls, log: ELFF, path: str | Path, mode: str = "a") -> ELFFWriter:
        """Open path as UTF-8 text and write to it; the file is closed with the writer."""
        stream = Path(path).open(mode, encoding="utf-8", newline="")
        logger.debug("Opened ELFF log %s (mode=%s)", path, mode)
        return cls(log, stream, owns_stream=True)

    @property
    def closed(self) -> bool:
        return self._closed

    def _write(self, text: str, entries: int = 0) -> None:
        with self._lock:
            if self._closed:
                raise ValueError("Write to closed ELFFWriter")
            self._stream.write(text)
            self._stream.flush()
            self.entries_written += entries

    def log_directive(self, name: str, value: str) -> None:
        """Write a single directive line."""
        self._write(format_directive(name, value))

    def log_directives(
        self,
        *directives: DirectiveSource,
        date: datetime.datetime | None = None,
    ) -> None:
        """Write the full directive block (session directives, these, Version, Date, Fields)."""
        self._write(self.session.format_directives(*directives, date=date))

    def log(self, entry: Entry) -> None:
        """Write one entry line. Nothing is written if the entry fails to format."""
        self._write(self.session.format_entry(entry), entries=1)

    def close(self) -> None:
        """Close the stream if this writer opened it, otherwise just flush it."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            if self._owns_stream:
                self._stream.close()
            else:
                self._stream.flush()
        logger.debug("Closed ELFF writer after %d entries", self.entries_written)

    def __enter__(self) -> ELFFWriter:
        return self

    def __exit__(self, *args) -> None:
        self.close()
