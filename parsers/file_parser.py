import functools
import io
import logging
from abc import ABC, abstractmethod

import pandas as pd

from config import LoaderConfig
from errors import FileTooLarge, ParseError, UnsupportedFormat
from models import ColumnKind, LoadOptions, Table

SUPPORTED_EXTENSIONS = ('csv', 'xls', 'xlsx')


def file_extension(filename):
    """Return the lower-case extension of ``filename`` without the dot"""
    if not filename or '.' not in filename:
        return ''
    return filename.rsplit('.', 1)[1].lower()


def allowed_file(filename):
    """Check if file extension is allowed"""
    return file_extension(filename) in SUPPORTED_EXTENSIONS


def as_buffer(source):
    """Wrap raw bytes in a fresh binary buffer; paths and file objects pass through"""
    if isinstance(source, (bytes, bytearray)):
        return io.BytesIO(source)
    if hasattr(source, 'seek'):
        source.seek(0)
    return source


class BaseParser(ABC):
    """Abstract base class for file parsers"""

    @abstractmethod
    def parse(self, source, options):
        """Parse source and return pandas DataFrame"""
        pass

    def infer_kinds(self, df):
        """Classify every column of a parsed DataFrame as numeric or categorical"""
        kinds = {}
        for column in df.columns:
            series = df[column]
            is_number = (pd.api.types.is_numeric_dtype(series)
                         and not pd.api.types.is_bool_dtype(series))
            # An all-missing column has nothing that parses as a number
            if is_number and series.notna().any():
                kinds[str(column)] = ColumnKind.NUMERIC
            else:
                kinds[str(column)] = ColumnKind.CATEGORICAL
        return kinds

    def sheet_names(self, source):
        """List the sheets of a workbook; plain text files have none"""
        return []

    def _unique_names(self, names):
        """Stringify column names and suffix repeats so every name is unique"""
        seen = set()
        result = []
        for name in names:
            name = str(name)
            candidate = name
            suffix = 1
            while candidate in seen:
                candidate = f"{name}.{suffix}"
                suffix += 1
            seen.add(candidate)
            result.append(candidate)
        return result


class FileParserFactory:
    """Factory class to get appropriate parser for file type"""

    def __init__(self):
        from .csv_parser import CSVParser
        from .excel_parser import ExcelParser

        excel_parser = ExcelParser()
        self.parsers = {
            'csv': CSVParser(),
            'xls': excel_parser,
            'xlsx': excel_parser,
        }

    def get_parser(self, file_type):
        """Get parser for specific file type"""
        parser = self.parsers.get((file_type or '').lower().lstrip('.'))
        if not parser:
            raise UnsupportedFormat(file_type)
        return parser


class DatasetLoader:
    """Turns an uploaded file into a Table"""

    def __init__(self, config=None):
        self.config = config or LoaderConfig()
        self.factory = FileParserFactory()

    def _check_size(self, source):
        if isinstance(source, (bytes, bytearray)) and len(source) > self.config.max_upload_bytes:
            limit_mb = self.config.max_upload_bytes / (1024 * 1024)
            raise FileTooLarge(f"File is larger than the {limit_mb:g} MB upload limit.")

    def sheet_names(self, source, file_type):
        """Read just the sheet list of a workbook, without parsing any sheet"""
        parser = self.factory.get_parser(file_type)
        self._check_size(source)
        return parser.sheet_names(source)

    def load(self, source, file_type, options=None, source_name=''):
        """Parse ``source`` into a Table; any failure aborts the whole load"""
        options = options or LoadOptions()
        parser = self.factory.get_parser(file_type)
        self._check_size(source)

        df = parser.parse(source, options)
        kinds = parser.infer_kinds(df)

        logging.info(f"Loaded '{source_name or file_type}': {len(df)} rows x {len(df.columns)} columns "
                     f"({sum(k is ColumnKind.NUMERIC for k in kinds.values())} numeric)")
        return Table(frame=df, column_kinds=kinds, source_name=source_name)


def wrap_parse_errors(kind):
    """Decorator turning any parser failure into a ParseError with a readable message"""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, source, *args, **kwargs):
            try:
                return func(self, source, *args, **kwargs)
            except ParseError:
                raise
            except Exception as e:
                logging.error(f"Error parsing {kind} file: {str(e)}")
                raise ParseError(f"Failed to parse {kind} file: {str(e)}") from e
        return wrapper
    return decorator