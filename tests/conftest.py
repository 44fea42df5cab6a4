import io

import pytest
from openpyxl import Workbook

from app import create_app
from models import LoadOptions
from parsers.file_parser import DatasetLoader


@pytest.fixture
def loader():
    return DatasetLoader()


@pytest.fixture
def load_csv(loader):
    """Build a Table from CSV text"""
    def _load(text, **options):
        return loader.load(text.encode("utf-8"), "csv", LoadOptions(**options), source_name="test.csv")
    return _load


@pytest.fixture
def workbook_bytes():
    """Build an .xlsx file from {sheet name: rows}"""
    def _build(sheets):
        workbook = Workbook()
        workbook.remove(workbook.active)
        for name, rows in sheets.items():
            sheet = workbook.create_sheet(title=name)
            for row in rows:
                sheet.append(row)
        buffer = io.BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()
    return _build


@pytest.fixture
def app():
    return create_app({"TESTING": True, "SECRET_KEY": "test-secret"})


@pytest.fixture
def client(app):
    return app.test_client()
