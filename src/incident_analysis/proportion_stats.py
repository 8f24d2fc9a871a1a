from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

import numpy as np
import pandas as pd

PERCENT_QUANTUM = Decimal("0.1")


def _to_float_array(values: pd.Series | np.ndarray | Sequence[int]) -> np.ndarray:
    if isinstance(values, pd.Series):
        return pd.to_numeric(values, errors="coerce").to_numpy(dtype=float)
    return np.asarray(values, dtype=float)


def percentage_shares(
    counts: pd.Series | np.ndarray | Sequence[int],
    denominator: float,
) -> np.ndarray:
    """Share of ``denominator`` for each count, in percent.

    A zero (or missing) denominator yields 0.0 for every count instead of NaN.
    """
    k = _to_float_array(counts)
    shares = np.zeros(k.shape, dtype=float)
    total = float(denominator or 0.0)
    if not math.isfinite(total) or total <= 0.0:
        return shares
    valid = np.isfinite(k)
    shares[valid] = k[valid] / total * 100.0
    return shares


def format_percentage(value: float) -> str:
    """One-decimal percent label; ties round away from zero on the exact float value."""
    if not math.isfinite(value):
        value = 0.0
    rounded = Decimal(value).quantize(PERCENT_QUANTUM, rounding=ROUND_HALF_UP)
    return f"{rounded}%"


def percentage_labels(
    counts: pd.Series | np.ndarray | Sequence[int],
    denominator: float,
) -> list[str]:
    return [format_percentage(float(share)) for share in percentage_shares(counts, denominator)]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
