"""
app/parsers/csv_row_stream.py

Incremental CSV decoding over an async byte source.

Bytes are pulled one chunk at a time, decoded as UTF-8 (a leading BOM is
dropped) and split into physical lines. Lines are grouped into records
by tracking whether a quoted field is still open, so a quoted field may
span lines and chunk boundaries. Only a quote at the start of a cell opens
a quoted field; a quote inside an unquoted cell is literal text.
The first non-blank record is the header. Each later record is yielded as
a dict keyed by header name before the next chunk is requested.

Decode problems surface as ``UnicodeDecodeError`` or ``csv.Error``.
"""

from __future__ import annotations

import codecs
import csv
import io
from collections.abc import AsyncIterator
from typing import Any, Protocol

DEFAULT_CHUNK_SIZE = 64 * 1024

# Values beyond the header width are kept under this key for diagnostics.
EXTRA_FIELDS_KEY = "_extra"


class AsyncByteSource(Protocol):
    """Anything with an awaitable ``read(size)``, e.g. FastAPI's UploadFile."""

    async def read(self, size: int = -1) -> bytes: ...


class CSVRowStream:
    """
    Lazy async iterator of raw CSV rows.
    """

    def __init__(
        self,
        source: AsyncByteSource,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        encoding: str = "utf-8-sig",
    ) -> None:
        self._source = source
        self._chunk_size = max(1, chunk_size)
        self._encoding = encoding
        self.fieldnames: list[str] | None = None

    def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        return self._rows()

    async def _rows(self) -> AsyncIterator[dict[str, Any]]:
        async for values in self._records():
            if not values:
                continue
            if self.fieldnames is None:
                self.fieldnames = [name.strip() for name in values]
                continue
            yield self._to_row(values)

    async def _records(self) -> AsyncIterator[list[str]]:
        decoder = codecs.getincrementaldecoder(self._encoding)(errors="strict")
        pending = ""
        record_lines: list[str] = []
        scanner = _RecordScanner()

        while True:
            chunk = await self._source.read(self._chunk_size)
            final = not chunk
            pending += decoder.decode(chunk, final=final)

            lines = io.StringIO(pending, newline="").readlines()
            pending = ""
            # A trailing "\r" may be the first half of a "\r\n" split across chunks.
            if lines and not final and not lines[-1].endswith("\n"):
                pending = lines.pop()

            for line in lines:
                record_lines.append(line)
                if not scanner.feed(line):
                    continue
                for values in csv.reader(record_lines):
                    yield values
                record_lines = []

            if final:
                break

        if record_lines:
            raise csv.Error("unexpected end of data: quoted field is not closed")

    def _to_row(self, values: list[str]) -> dict[str, Any]:
        fieldnames = self.fieldnames or []
        row: dict[str, Any] = {
            name: values[index] if index < len(values) else None
            for index, name in enumerate(fieldnames)
        }
        if len(values) > len(fieldnames):
            row[EXTRA_FIELDS_KEY] = values[len(fieldnames) :]
        return row


class _RecordScanner:
    """
    Tracks quoting state across physical lines, the way ``csv.reader`` does.

    ``feed`` returns True once the lines fed so far form a complete record.
    """

    _FIELD_START = 0
    _UNQUOTED = 1
    _QUOTED = 2
    _QUOTE_IN_QUOTED = 3

    def __init__(self, delimiter: str = ",", quotechar: str = '"') -> None:
        self._delimiter = delimiter
        self._quotechar = quotechar
        self._state = self._FIELD_START

    def feed(self, line: str) -> bool:
        state = self._state
        for char in line:
            if state == self._QUOTED:
                if char == self._quotechar:
                    state = self._QUOTE_IN_QUOTED
            elif state == self._QUOTE_IN_QUOTED:
                # A doubled quote is an escaped quote inside the field.
                if char == self._quotechar:
                    state = self._QUOTED
                elif char == self._delimiter or char in "\r\n":
                    state = self._FIELD_START
                else:
                    state = self._UNQUOTED
            elif char == self._delimiter or char in "\r\n":
                state = self._FIELD_START
            elif state == self._FIELD_START and char == self._quotechar:
                state = self._QUOTED
            else:
                state = self._UNQUOTED

        if state == self._QUOTED:
            self._state = state
            return False
        self._state = self._FIELD_START
        return True
