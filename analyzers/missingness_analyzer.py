import logging

import numpy as np
import pandas as pd

from models import PlotResult
from utils.plotting import draw_upset

NO_MISSING_MESSAGE = "Good news: there are no missing values (NA) in this dataset!"
NEEDS_TWO_COLUMNS_MESSAGE = ("The upset plot was not generated because it requires at least "
                             "TWO columns with missing data.")
NO_BLANK_ROWS_MESSAGE = "No completely blank rows were found."

# Number of combinations drawn in the upset plot
MAX_INTERSECTIONS = 40


class MissingnessAnalyzer:
    """Missing-value counts per column, blank rows and co-missingness patterns"""

    def analyze(self, table):
        """Perform the full missingness analysis on a Table"""
        return {
            'summary': self.summarize(table),
            'blank_rows': self.blank_rows(table),
            'combinations': self.combinations(table),
        }

    def summarize(self, table):
        """Missing count and fraction per column, most incomplete column first.

        Columns with equal fractions keep their order in the table.
        """
        df = table.frame
        counts = df.isna().sum()
        rows = len(df)

        summary = pd.DataFrame({
            'name': table.columns,
            'missing_count': counts.to_numpy(dtype=int),
            'missing_fraction': counts.to_numpy(dtype=float) / rows if rows else 0.0,
        })
        summary = summary.sort_values('missing_fraction', ascending=False, kind='mergesort')

        total_missing = int(summary['missing_count'].sum())
        return {
            'columns': [
                {
                    'name': row.name,
                    'missing_count': int(row.missing_count),
                    'missing_fraction': float(row.missing_fraction),
                }
                for row in summary.itertuples(index=False)
            ],
            'total_missing': total_missing,
            'total_cells': rows * table.column_count,
            'columns_with_missing': int((summary['missing_count'] > 0).sum()),
        }

    def blank_rows(self, table):
        """Rows where every column is missing, reported with 1-based indices"""
        if table.column_count == 0:
            indices = []
        else:
            mask = table.frame.isna().all(axis=1).to_numpy()
            indices = (np.flatnonzero(mask) + 1).tolist()

        return {
            'count': len(indices),
            'rows': indices,
            'message': None if indices else NO_BLANK_ROWS_MESSAGE,
        }

    def combinations(self, table):
        """Count the rows for every distinct set of columns that are missing together.

        Only rows with at least one missing cell take part. Sets are ordered by
        row count, highest first, then by first appearance.
        """
        missing = table.frame.isna()
        columns = [col for col in table.columns if missing[col].any()]
        if not columns:
            return []

        matrix = missing[columns].to_numpy()
        counts = {}
        for flags in matrix[matrix.any(axis=1)]:
            key = tuple(flags)
            counts[key] = counts.get(key, 0) + 1

        ranked = sorted(counts.items(), key=lambda item: -item[1])
        return [
            {
                'columns': [col for col, flag in zip(columns, key) if flag],
                'count': count,
            }
            for key, count in ranked
        ]

    def upset_plot(self, table):
        """Upset-style plot of the missing-value combinations, or a message when it would be empty"""
        summary = self.summarize(table)

        if summary['total_missing'] == 0:
            logging.info(f"No missing values in '{table.source_name}', skipping upset plot")
            return PlotResult(message=NO_MISSING_MESSAGE)

        set_sizes = {col['name']: col['missing_count'] for col in summary['columns'] if col['missing_count'] > 0}
        if len(set_sizes) < 2:
            logging.info(f"Only {len(set_sizes)} column(s) with missing values, skipping upset plot")
            return PlotResult(message=NEEDS_TWO_COLUMNS_MESSAGE,
                              data={'columns_with_missing': list(set_sizes)})

        combinations = self.combinations(table)
        shown = combinations[:MAX_INTERSECTIONS]
        image = draw_upset([(combo['columns'], combo['count']) for combo in shown], set_sizes,
                           "Combinations of missing values")
        return PlotResult(image=image, data={
            'set_sizes': set_sizes,
            'combinations': combinations,
            'intersections_shown': len(shown),
        })
