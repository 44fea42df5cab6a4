import logging

import numpy as np
import pandas as pd

from errors import ParseError
from .file_parser import BaseParser, as_buffer, wrap_parse_errors


class ExcelParser(BaseParser):
    """Parser for Excel files (.xls and .xlsx)"""

    @wrap_parse_errors('Excel')
    def sheet_names(self, source):
        """Read the workbook's sheet list without loading any sheet"""
        with pd.ExcelFile(as_buffer(source)) as workbook:
            return [str(name) for name in workbook.sheet_names]

    @wrap_parse_errors('Excel')
    def parse(self, source, options):
        """Parse one sheet of an Excel file and return pandas DataFrame"""
        with pd.ExcelFile(as_buffer(source)) as workbook:
            sheets = [str(name) for name in workbook.sheet_names]
            if not sheets:
                raise ParseError("The workbook does not contain any sheets.")

            sheet = options.sheet_name if options.sheet_name is not None else sheets[0]
            if sheet not in sheets:
                raise ParseError(f"Sheet '{sheet}' not found. Available sheets: {', '.join(sheets)}")

            # Read raw cell objects so TRUE/FALSE cells are not coerced to 1.0/0.0
            df = workbook.parse(sheet_name=sheet, dtype=object)

        logging.info(f"Using sheet '{sheet}' with {len(df)} rows x {len(df.columns)} columns")
        df.columns = self._clean_columns(df.columns)
        for col in df.columns:
            df[col] = self._native_column(df[col])
        return df

    def _native_column(self, series):
        """Give a column of cell objects the dtype of its cells; logical columns stay booleans"""
        present = series.dropna()
        if len(present) and present.map(lambda value: isinstance(value, (bool, np.bool_))).all():
            if len(present) == len(series):
                return series.astype(bool)
            return series.astype(object).where(series.notna(), None)
        return series.infer_objects()

    def _clean_columns(self, columns):
        """Name the blank header cells and keep every name unique"""
        # Blank header cells come back as 'Unnamed: <n>'
        names = [f'Column_{i + 1}' if str(col).startswith('Unnamed:') else str(col)
                 for i, col in enumerate(columns)]
        return self._unique_names(names)
