import numpy as np
import pandas as pd


def ranked_counts(series, dropna=True):
    """Count each distinct value and rank by count, highest first.

    Returns (value, count) pairs. Values with equal counts keep the order in
    which they first appear in ``series``. With ``dropna=False`` missing cells
    form one bucket of their own, reported with the value None.
    """
    # uniques come back in order of appearance, missing cells coded as -1
    codes, uniques = pd.factorize(series)
    present = codes >= 0
    counts = np.bincount(codes[present], minlength=len(uniques))
    pairs = [(uniques[i], int(counts[i])) for i in range(len(uniques))]

    missing = ~present
    if not dropna and missing.any():
        first_missing = int(np.argmax(missing))
        position = int(codes[:first_missing].max()) + 1 if first_missing else 0
        pairs.insert(position, (None, int(missing.sum())))

    # sort is stable, so ties stay in encounter order
    pairs.sort(key=lambda pair: -pair[1])
    return pairs
