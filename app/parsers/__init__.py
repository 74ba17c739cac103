"""
app/parsers package marker.
"""

from app.parsers.csv_row_stream import DEFAULT_CHUNK_SIZE, EXTRA_FIELDS_KEY, AsyncByteSource, CSVRowStream

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "EXTRA_FIELDS_KEY",
    "AsyncByteSource",
    "CSVRowStream",
]
