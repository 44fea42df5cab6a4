import logging

import numpy as np

from errors import UnknownColumn
from models import ColumnKind, PlotResult
from utils.frequency import ranked_counts
from utils.plotting import draw_histogram, draw_horizontal_bars
from utils.serialization import make_json_serializable

HISTOGRAM_BINS = 30
TOP_CATEGORIES = 20


class DistributionVisualizer:
    """Plots the distribution of one column: a histogram or a bar chart of its top values"""

    def __init__(self, bins=HISTOGRAM_BINS, top_categories=TOP_CATEGORIES):
        self.bins = bins
        self.top_categories = top_categories

    def plot(self, table, column):
        if column not in table.column_kinds:
            raise UnknownColumn(column)

        if table.kind(column) is ColumnKind.NUMERIC:
            return self._histogram(table, column)
        return self._bar_chart(table, column)

    def _empty(self, column):
        logging.info(f"Column '{column}' has no values to plot")
        return PlotResult(message=f"Column '{column}' has no non-missing values to plot.")

    def _histogram(self, table, column):
        """Equal-width bins spanning the observed range; missing values are left out"""
        series = table.frame[column]
        values = series.dropna().to_numpy(dtype=float)
        values = values[np.isfinite(values)]
        if values.size == 0:
            return self._empty(column)

        counts, edges = np.histogram(values, bins=self.bins)
        image = draw_histogram(values, edges, column)
        return PlotResult(image=image, data={
            'kind': ColumnKind.NUMERIC.value,
            'column': column,
            'bins': len(counts),
            'bin_edges': edges.tolist(),
            'counts': counts.tolist(),
            'excluded': int(len(series) - values.size),
        })

    def _bar_chart(self, table, column):
        """Most frequent values, largest bar on top"""
        ranked = ranked_counts(table.frame[column], dropna=True)
        if not ranked:
            return self._empty(column)

        top = ranked[:self.top_categories]
        # barh draws from the bottom up, so ascending order puts the largest bar on top
        ascending = list(reversed(top))
        image = draw_horizontal_bars(
            [value for value, _ in ascending],
            [count for _, count in ascending],
            f"Count of the top {self.top_categories} categories in {column}",
        )
        return PlotResult(image=image, data={
            'kind': ColumnKind.CATEGORICAL.value,
            'column': column,
            'categories': [{'value': make_json_serializable(value), 'count': count} for value, count in top],
            'distinct_values': len(ranked),
        })
