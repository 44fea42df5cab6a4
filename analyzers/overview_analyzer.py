import math

from utils.serialization import frame_rows

PAGE_LENGTH = 10


class OverviewAnalyzer:
    """Shape of the table and a paged view of its raw rows"""

    def __init__(self, page_length=PAGE_LENGTH):
        self.page_length = page_length

    def analyze(self, table):
        """Row/column counts plus what a client needs to page through the table"""
        return {
            'file_name': table.source_name,
            'row_count': table.row_count,
            'column_count': table.column_count,
            'columns': [{'name': col, 'kind': table.kind(col).value} for col in table.columns],
            'page_length': self.page_length,
            'page_count': self.page_count(table),
        }

    def page_count(self, table):
        return math.ceil(table.row_count / self.page_length)

    def page(self, table, page=1):
        """Rows of one 1-based page; pages outside the table are empty"""
        rows = []
        if page >= 1:
            start = (page - 1) * self.page_length
            rows = frame_rows(table.frame.iloc[start:start + self.page_length])

        return {
            'page': page,
            'page_count': self.page_count(table),
            'page_length': self.page_length,
            'total_rows': table.row_count,
            'columns': table.columns,
            'rows': rows,
        }
