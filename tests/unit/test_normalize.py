from __future__ import annotations

import numpy as np
import pytest

from logfit.cleaning import Sample
from logfit.exceptions import DegenerateSampleError
from logfit.normalize import normalize


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_normalized_sample_has_zero_mean_unit_std(seed: int) -> None:
    values = np.random.default_rng(seed).gamma(2.0, 0.05, size=400)
    normalized = normalize(Sample(values=values, name="NEUT"))

    assert normalized.values.mean() == pytest.approx(0.0, abs=1e-12)
    assert normalized.values.std() == pytest.approx(1.0)
    assert normalized.mean == pytest.approx(values.mean())
    assert normalized.std == pytest.approx(values.std(ddof=0))
    assert normalized.source.name == "NEUT"


def test_denormalize_restores_original_values() -> None:
    values = np.array([0.1, 0.2, 0.15, 0.4])
    normalized = normalize(values)
    assert np.allclose(normalized.denormalize(normalized.values), values)


def test_constant_sample_is_degenerate() -> None:
    with pytest.raises(DegenerateSampleError, match="identical"):
        normalize(Sample(values=np.full(20, 0.2), name="DPHI"))


def test_single_reading_is_degenerate() -> None:
    with pytest.raises(DegenerateSampleError, match="at least 2"):
        normalize(np.array([0.3]))
