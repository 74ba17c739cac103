"""
tests/test_csv_row_stream.py

Tests for incremental CSV decoding over an async byte source.
"""

from __future__ import annotations

import csv
import io

import pytest

from app.parsers.csv_row_stream import EXTRA_FIELDS_KEY, CSVRowStream

HEADER = "sku,name,brand,color,size,mrp,price,quantity\n"


async def _collect(stream: CSVRowStream) -> list[dict]:
    return [row async for row in stream]


@pytest.mark.asyncio
async def test_header_names_the_row_keys(make_source) -> None:
    stream = CSVRowStream(make_source(HEADER + "A-1,Shirt,Brand,Red,M,800,500,10\n"))

    rows = await _collect(stream)

    assert stream.fieldnames == ["sku", "name", "brand", "color", "size", "mrp", "price", "quantity"]
    assert rows == [
        {
            "sku": "A-1",
            "name": "Shirt",
            "brand": "Brand",
            "color": "Red",
            "size": "M",
            "mrp": "800",
            "price": "500",
            "quantity": "10",
        }
    ]


@pytest.mark.asyncio
async def test_one_byte_chunks_with_crlf_and_multibyte_text(make_source) -> None:
    data = "sku,name\r\nC-1,Café crème\r\nC-2,Ünïcödé\r\n"

    rows = await _collect(CSVRowStream(make_source(data, chunk_size=1), chunk_size=1))

    assert rows == [
        {"sku": "C-1", "name": "Café crème"},
        {"sku": "C-2", "name": "Ünïcödé"},
    ]


@pytest.mark.asyncio
async def test_byte_order_mark_is_dropped(make_source) -> None:
    stream = CSVRowStream(make_source(b"\xef\xbb\xbfsku,name\nA-1,Shirt\n"))

    rows = await _collect(stream)

    assert stream.fieldnames == ["sku", "name"]
    assert rows[0]["sku"] == "A-1"


@pytest.mark.asyncio
async def test_quoted_field_spanning_lines_and_chunks(make_source) -> None:
    data = 'sku,name,brand\nQ-1,"Shirt, ""classic""\nfit",Brand\nQ-2,Plain,Other\n'

    rows = await _collect(CSVRowStream(make_source(data, chunk_size=3), chunk_size=3))

    assert rows == [
        {"sku": "Q-1", "name": 'Shirt, "classic"\nfit', "brand": "Brand"},
        {"sku": "Q-2", "name": "Plain", "brand": "Other"},
    ]


@pytest.mark.asyncio
async def test_blank_lines_are_not_rows(make_source) -> None:
    data = "\nsku,name\n\nA-1,Shirt\n\n\nA-2,Jeans\n"

    rows = await _collect(CSVRowStream(make_source(data)))

    assert [row["sku"] for row in rows] == ["A-1", "A-2"]


@pytest.mark.asyncio
async def test_last_line_without_newline_is_read(make_source) -> None:
    rows = await _collect(CSVRowStream(make_source("sku,name\nA-1,Shirt")))
    assert rows == [{"sku": "A-1", "name": "Shirt"}]


@pytest.mark.asyncio
async def test_short_and_long_rows(make_source) -> None:
    rows = await _collect(CSVRowStream(make_source("sku,name,brand\nA-1,Shirt\nA-2,Jeans,Brand,extra,more\n")))

    assert rows[0] == {"sku": "A-1", "name": "Shirt", "brand": None}
    assert rows[1] == {"sku": "A-2", "name": "Jeans", "brand": "Brand", EXTRA_FIELDS_KEY: ["extra", "more"]}


@pytest.mark.asyncio
async def test_empty_input_yields_nothing(make_source) -> None:
    stream = CSVRowStream(make_source(b""))
    assert await _collect(stream) == []
    assert stream.fieldnames is None


@pytest.mark.asyncio
async def test_invalid_utf8_raises(make_source) -> None:
    with pytest.raises(UnicodeDecodeError):
        await _collect(CSVRowStream(make_source(b"sku,name\nA-1,\xff\xfe\n")))


@pytest.mark.asyncio
async def test_truncated_multibyte_sequence_raises(make_source) -> None:
    with pytest.raises(UnicodeDecodeError):
        await _collect(CSVRowStream(make_source(b"sku,name\nA-1,Caf\xc3")))


@pytest.mark.asyncio
async def test_unclosed_quote_raises(make_source) -> None:
    with pytest.raises(csv.Error):
        await _collect(CSVRowStream(make_source('sku,name\nA-1,"Shirt\nA-2,Jeans\n')))


@pytest.mark.asyncio
async def test_rows_are_pulled_lazily(make_source) -> None:
    body = "".join(f"S-{i},Name {i}\n" for i in range(200))
    source = make_source("sku,name\n" + body, chunk_size=16)
    stream = CSVRowStream(source, chunk_size=16)

    iterator = stream.__aiter__()
    first = await iterator.__anext__()
    reads_after_first_row = source.reads
    rest = [row async for row in iterator]

    assert first == {"sku": "S-0", "name": "Name 0"}
    assert len(rest) == 199
    assert reads_after_first_row < source.reads


@pytest.mark.asyncio
async def test_quote_inside_unquoted_cell_is_literal(make_source) -> None:
    data = 'sku,name,brand\nM-27,Monitor 27" wide,Brand\nM-32,Monitor 32" curved,Brand\n'

    rows = await _collect(CSVRowStream(make_source(data, chunk_size=5), chunk_size=5))

    assert rows == [
        {"sku": "M-27", "name": 'Monitor 27" wide', "brand": "Brand"},
        {"sku": "M-32", "name": 'Monitor 32" curved', "brand": "Brand"},
    ]
    assert rows == list(csv.DictReader(io.StringIO(data)))


@pytest.mark.asyncio
async def test_text_after_closing_quote_stays_in_the_record(make_source) -> None:
    data = 'sku,name\nQ-1,"Shirt"s\nQ-2,"a ""b"""\n'

    rows = await _collect(CSVRowStream(make_source(data)))

    assert rows == list(csv.DictReader(io.StringIO(data)))
    assert [row["sku"] for row in rows] == ["Q-1", "Q-2"]
