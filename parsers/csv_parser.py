import logging

import pandas as pd

from .file_parser import BaseParser, as_buffer, wrap_parse_errors


class CSVParser(BaseParser):
    """Parser for delimited text files"""

    # latin-1 maps every byte, so the last attempt always decodes
    encodings = ['utf-8-sig', 'latin-1']

    @wrap_parse_errors('CSV')
    def parse(self, source, options):
        """Parse CSV file and return pandas DataFrame"""
        df = None
        for encoding in self.encodings:
            try:
                df = pd.read_csv(
                    as_buffer(source),
                    sep=options.delimiter,
                    header=0 if options.has_header else None,
                    dtype=str,
                    encoding=encoding,
                )
            except UnicodeDecodeError:
                logging.debug(f"CSV is not valid {encoding}, trying next encoding")
                continue

            logging.info(f"Parsed CSV with encoding={encoding}, delimiter={options.delimiter!r}, "
                         f"header={options.has_header}: {len(df)} rows x {len(df.columns)} columns")
            break

        if options.has_header:
            df.columns = self._unique_names(df.columns)
        else:
            df.columns = [f"V{i + 1}" for i in range(len(df.columns))]

        return self._convert_numeric(df)

    def _convert_numeric(self, df):
        """Turn every column whose present values all parse as numbers into a numeric column"""
        for col in df.columns:
            present = df[col].dropna()
            if present.empty:
                continue

            if pd.to_numeric(present, errors='coerce').notna().all():
                df[col] = pd.to_numeric(df[col])

        return df
