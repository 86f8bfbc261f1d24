"""
Pytest configuration and shared fixtures.

Fixtures are reusable test setup that can be injected into tests.
"""

import io
import os
import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

# Never call the real LLM from tests
os.environ["USE_NULL_LLM"] = "true"

from data.models import Product
from builder_state import BuilderState


@pytest.fixture
def sample_csv():
    """Small store catalog with quoting, a missing price and a blank name."""
    return (
        "Name,Category,Price,SKU\r\n"
        "Tuscan Herb EVOO,Extra Virgin Olive Oil,$18.50,A1\r\n"
        "Fig Balsamic,Balsamic Vinegar,\"$16.00\",B2\r\n"
        ",Herb,,C3\r\n"
        "\"Basil, Fresh\",Produce,3.25,D4\r\n"
    )


@pytest.fixture
def sample_products():
    """Catalog with one pantry item, one herb and two priority categories."""
    return [
        Product(id="1", name="Basil", category="Herb"),
        Product(id="2", name="Tomato", category="Produce", prices=[2.0]),
        Product(id="3", name="Sea Salt", category="Seasoning", prices=[6.5]),
        Product(id="4", name="EVOO", category="Extra Virgin Olive Oil", prices=[18.5]),
    ]


@pytest.fixture
def loaded_state(sample_products):
    """BuilderState with the sample catalog loaded and nothing chosen."""
    return BuilderState().with_catalog(sample_products)


@pytest.fixture
def workbook_bytes():
    """
    Build an in-memory .xlsx workbook.

    Usage in tests:
        def test_something(workbook_bytes):
            data = workbook_bytes([["name", "price"], ["EVOO", 18.5]])
    """
    from openpyxl import Workbook

    def _build(rows, extra_sheet_rows=None):
        wb = Workbook()
        sheet = wb.active
        sheet.title = "Products"
        for row in rows:
            sheet.append(row)
        if extra_sheet_rows is not None:
            other = wb.create_sheet("Other")
            for row in extra_sheet_rows:
                other.append(row)
        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    return _build
