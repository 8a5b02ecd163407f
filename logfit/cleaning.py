"""
Curve selection and cleaning.
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd

from logfit.exceptions import ColumnNotFoundError, DegenerateSampleError
from logfit.utils.logging import get_logger

log = get_logger(__name__, component="cleaning")


@dataclass(frozen=True, eq=False)
class Sample:
    """Finite readings of one curve, in depth order. The array is read-only."""

    values: np.ndarray
    name: str = ''
    n_missing: int = 0
    n_negative: int = 0
    n_zero: int = 0
    n_clipped: int = 0

    def __post_init__(self):
        values = np.array(self.values, dtype=float)
        values.setflags(write=False)
        object.__setattr__(self, 'values', values)

    def __len__(self):
        return len(self.values)

    @property
    def n_dropped(self):
        return self.n_missing + self.n_negative + self.n_zero


def _resolve_column(data, column):
    if column in data.columns:
        return column
    # LAS mnemonics are case-insensitive
    matches = [c for c in data.columns if str(c).lower() == str(column).lower()]
    if len(matches) == 1:
        return matches[0]
    raise ColumnNotFoundError(column, data.columns)


def select_sample(data, column, drop_negative=True, remove_zeros=False, clip_outliers=False):
    """
    Extract one curve as a cleaned :class:`Sample`.

    Missing and non-finite readings are always dropped. Negative readings are
    physically invalid for porosity-type curves and are dropped unless
    ``drop_negative`` is False.

    Parameters:
    -----------
    data : pandas.DataFrame or WellLog
        Depth-indexed table of curves
    column : str
        Curve mnemonic (matched case-insensitively)
    drop_negative : bool
        Remove readings below zero
    remove_zeros : bool
        Remove readings equal to zero
    clip_outliers : bool
        Clip readings above the 99th percentile

    Returns:
    --------
    Sample

    Raises:
    -------
    ColumnNotFoundError
        If the curve is not in the table
    DegenerateSampleError
        If nothing survives cleaning
    """
    frame = getattr(data, 'data', data)
    resolved = _resolve_column(frame, column)
    raw = pd.to_numeric(frame[resolved], errors='coerce').to_numpy(dtype=float)

    finite = np.isfinite(raw)
    n_missing = int((~finite).sum())
    cleaned = raw[finite]

    n_negative = 0
    if drop_negative:
        negative = cleaned < 0
        n_negative = int(negative.sum())
        cleaned = cleaned[~negative]

    n_zero = 0
    if remove_zeros:
        zero = cleaned == 0
        n_zero = int(zero.sum())
        cleaned = cleaned[~zero]

    if len(cleaned) == 0:
        raise DegenerateSampleError(
            f"Curve '{resolved}' has no valid readings after cleaning "
            f"({n_missing} missing, {n_negative} negative, {n_zero} zero of {len(raw)})"
        )

    n_clipped = 0
    if clip_outliers:
        p99 = np.percentile(cleaned, 99)
        n_clipped = int((cleaned > p99).sum())
        cleaned = np.clip(cleaned, None, p99)

    log.info(
        "Cleaned curve",
        extra={"curve": str(resolved), "n_samples": len(cleaned), "status": f"dropped={len(raw) - len(cleaned)}"},
    )
    return Sample(
        values=cleaned,
        name=str(resolved),
        n_missing=n_missing,
        n_negative=n_negative,
        n_zero=n_zero,
        n_clipped=n_clipped,
    )
