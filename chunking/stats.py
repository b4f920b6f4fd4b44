"""
Summary statistics used by the semantic threshold search.
"""

from typing import Sequence

import numpy as np


def median(values: Sequence[float]) -> float:
    """
    Median of a sequence; the mean of the two middle values for even lengths.

    Raises:
        ValueError: If values is empty
    """
    if len(values) == 0:
        raise ValueError("Cannot compute median of empty sequence")

    return float(np.median(np.asarray(values, dtype=float)))


def standard_deviation(values: Sequence[float]) -> float:
    """
    Population standard deviation (divides by n, not n - 1).

    Raises:
        ValueError: If values is empty
    """
    if len(values) == 0:
        raise ValueError("Cannot compute standard deviation of empty sequence")

    return float(np.std(np.asarray(values, dtype=float)))
