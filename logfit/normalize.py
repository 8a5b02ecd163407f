"""Standardization of a cleaned sample."""

from dataclasses import dataclass

import numpy as np

from logfit.cleaning import Sample
from logfit.exceptions import DegenerateSampleError


@dataclass(frozen=True, eq=False)
class NormalizedSample:
    """A Sample rescaled by ``(x - mean) / std`` (population standard deviation)."""

    values: np.ndarray
    mean: float
    std: float
    source: Sample

    def __post_init__(self):
        values = np.array(self.values, dtype=float)
        values.setflags(write=False)
        object.__setattr__(self, 'values', values)

    def __len__(self):
        return len(self.values)

    def denormalize(self, x):
        return np.asarray(x, dtype=float) * self.std + self.mean


def normalize(sample):
    """
    Rescale ``sample`` to zero mean and unit variance.

    Raises ``DegenerateSampleError`` for fewer than two readings or zero spread,
    where the transform is undefined.
    """
    if not isinstance(sample, Sample):
        sample = Sample(values=sample)
    values = sample.values
    if len(values) < 2:
        raise DegenerateSampleError(
            f"Cannot normalize curve '{sample.name}': need at least 2 readings, got {len(values)}"
        )
    mean = float(np.mean(values))
    std = float(np.std(values))
    if not np.isfinite(std) or std == 0.0:
        raise DegenerateSampleError(
            f"Cannot normalize curve '{sample.name}': all {len(values)} readings are identical"
        )
    return NormalizedSample(values=(values - mean) / std, mean=mean, std=std, source=sample)
