import numpy as np

from models import ColumnKind
from utils.frequency import ranked_counts
from utils.serialization import make_json_serializable

NO_NUMERIC_MESSAGE = "No numeric columns found."
NO_CATEGORICAL_MESSAGE = "No categorical columns found."


def _quantile(ordered, q):
    """Linearly interpolated quantile of sorted values; an infinite neighbour wins"""
    position = (len(ordered) - 1) * q
    lower = int(np.floor(position))
    upper = int(np.ceil(position))
    low, high = ordered[lower], ordered[upper]
    if lower == upper or low == high or np.isinf(low):
        return float(low)
    if np.isinf(high):
        return float(high)
    return float(low + (high - low) * (position - lower))


class ColumnProfiler:
    """Per-column structure, numeric statistics and categorical frequencies"""

    def __init__(self, sample_size=5, top_k=5):
        self.sample_size = sample_size
        self.top_k = top_k

    def analyze(self, table):
        """Perform the full column profile on a Table"""
        return {
            'structure': self.structure(table),
            'numeric': self.numeric_summary(table),
            'categorical': self.categorical_summary(table),
        }

    def structure(self, table):
        """Kind, dtype and the first few values of every column"""
        return [
            {
                'name': col,
                'kind': table.kind(col).value,
                'dtype': str(table.frame[col].dtype),
                'sample': make_json_serializable(table.frame[col].head(self.sample_size).tolist()),
            }
            for col in table.columns
        ]

    def numeric_summary(self, table):
        columns = table.numeric_columns
        if not columns:
            return {'columns': [], 'message': NO_NUMERIC_MESSAGE}

        return {
            'columns': [self._numeric_profile(col, table.frame[col]) for col in columns],
            'message': None,
        }

    def categorical_summary(self, table):
        columns = table.categorical_columns
        if not columns:
            return {'columns': [], 'message': NO_CATEGORICAL_MESSAGE}

        return {
            'columns': [self._categorical_profile(col, table.frame[col]) for col in columns],
            'message': None,
        }

    def _numeric_profile(self, name, series):
        """Min, quartiles, mean and max of the present values"""
        values = series.dropna()
        ordered = np.sort(values.to_numpy(dtype=float))

        return {
            'name': name,
            'kind': ColumnKind.NUMERIC.value,
            'count': int(len(values)),
            'missing': int(series.isna().sum()),
            'min': float(values.min()),
            'q1': _quantile(ordered, 0.25),
            'median': _quantile(ordered, 0.5),
            'mean': float(values.mean()),
            'q3': _quantile(ordered, 0.75),
            'max': float(values.max()),
        }

    def _categorical_profile(self, name, series):
        # Missing cells count as one more distinct value
        counts = ranked_counts(series, dropna=False)

        return {
            'name': name,
            'kind': ColumnKind.CATEGORICAL.value,
            'distinct_count': len(counts),
            'top_values': [
                {'value': make_json_serializable(value), 'count': count}
                for value, count in counts[:self.top_k]
            ],
        }
