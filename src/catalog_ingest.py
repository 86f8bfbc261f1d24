"""
Turn an uploaded store catalog into Product records.

Python-first, no LLM involved. Accepts comma-separated text, or an Excel
workbook (.xlsx, .xlsm, .xlsb) whose first sheet is converted to
comma-separated text before parsing.

Only three columns are read, matched case-insensitively by header name:
``name``, ``category`` and ``price``. Every other column is ignored and a
missing column never fails the upload.

Examples:
    parse_catalog_csv('name,category,price\\nEVOO,Olive Oil,$18.50')
    -> [Product(id="1", name="EVOO", category="Olive Oil", prices=[18.5])]
"""

import csv
import io
import logging
import math
import re
from typing import List, Optional, Union

import numpy as np
import pandas as pd

from data.models import Product

logger = logging.getLogger(__name__)

SPREADSHEET_EXTENSIONS = (".xlsx", ".xlsm", ".xlsb")

LINE_SPLIT = re.compile(r"\r?\n")
PRICE_JUNK = re.compile(r"[^0-9.]")


def split_csv_line(line: str) -> List[str]:
    """
    Split one CSV line into fields, honouring double quotes.

    A quote toggles quoted mode, a doubled quote inside quotes is a literal
    quote, and commas only separate fields outside quotes. Malformed quoting
    never raises; an unterminated quote simply swallows the rest of the line.
    """
    fields = []
    current = []
    in_quotes = False
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1

    fields.append("".join(current))
    return fields


def _column(headers: List[str], key: str) -> int:
    """Index of the first header equal to ``key`` (case-insensitive), or -1."""
    for idx, header in enumerate(headers):
        if header.lower() == key:
            return idx
    return -1


def _parse_price(raw: str) -> Optional[float]:
    """Keep digits and dots only; None when what is left is not a number."""
    cleaned = PRICE_JUNK.sub("", raw)
    try:
        value = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_catalog_csv(text: str) -> List[Product]:
    """
    Parse catalog CSV text into Products, one per non-empty line after the header.

    Args:
        text: Raw CSV text (``\\n`` or ``\\r\\n`` line endings)

    Returns:
        Products in row order with ids "1".."N". Empty input gives an empty list.
    """
    lines = [line for line in LINE_SPLIT.split(text or "") if line]
    if not lines:
        return []

    headers = [h.strip() for h in split_csv_line(lines[0])]
    name_idx = _column(headers, "name")
    category_idx = _column(headers, "category")
    price_idx = _column(headers, "price")

    products = []
    for row_number, line in enumerate(lines[1:], start=1):
        cells = split_csv_line(line)
        # Pad short rows, never truncate long ones
        if len(cells) < len(headers):
            cells.extend([""] * (len(headers) - len(cells)))

        name = cells[name_idx].strip() if name_idx >= 0 else ""
        if not name:
            name = f"Item {row_number}"

        category = cells[category_idx].strip() if category_idx >= 0 else ""

        price = _parse_price(cells[price_idx]) if price_idx >= 0 else None

        products.append(Product(
            id=str(row_number),
            name=name,
            category=category,
            prices=[price] if price is not None else None,
            available=True,
        ))

    logger.info(f"Parsed {len(products)} products from {len(lines) - 1} catalog rows")
    return products


def is_spreadsheet(filename: str) -> bool:
    """True for Excel workbook uploads (.xlsx, .xlsm, .xlsb)."""
    return (filename or "").lower().endswith(SPREADSHEET_EXTENSIONS)


def _cell_text(value) -> str:
    """Render one workbook cell; floats positionally, never in scientific notation."""
    if pd.isna(value):
        return ""
    if isinstance(value, (float, np.floating)):
        return np.format_float_positional(value, trim="-")
    return str(value)


def spreadsheet_to_csv(data: bytes, filename: str = "") -> str:
    """
    Convert the first sheet of a workbook to comma-separated text.

    Trailing empty cells are stripped from each row and blank rows are
    dropped. An unreadable workbook converts to an empty string, which
    parses as an empty catalog.
    """
    engine = "pyxlsb" if (filename or "").lower().endswith(".xlsb") else None
    try:
        sheet = pd.read_excel(
            io.BytesIO(data),
            sheet_name=0,
            header=None,
            engine=engine,
        )
    except Exception as e:
        logger.warning(f"Could not read workbook {filename or '<upload>'}: {e}")
        return ""

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    for row in sheet.itertuples(index=False):
        cells = [_cell_text(value) for value in row]
        while cells and not cells[-1].strip():
            cells.pop()
        if cells:
            writer.writerow(cells)

    return buffer.getvalue()


def _decode_text(payload: Union[bytes, str]) -> str:
    if isinstance(payload, str):
        return payload
    return payload.decode("utf-8-sig", errors="replace")


def ingest_upload(filename: str, payload: Union[bytes, str]) -> List[Product]:
    """
    Ingest one uploaded catalog file.

    Dispatches on the filename extension: workbooks go through
    ``spreadsheet_to_csv`` first, anything else is read as CSV text.

    Args:
        filename: Name of the uploaded file (only the extension matters)
        payload: Raw file contents

    Returns:
        A fresh list of Products replacing any previous catalog
    """
    if is_spreadsheet(filename):
        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        logger.info(f"Ingesting workbook upload: {filename}")
        return parse_catalog_csv(spreadsheet_to_csv(payload, filename))

    logger.info(f"Ingesting CSV upload: {filename}")
    return parse_catalog_csv(_decode_text(payload))
