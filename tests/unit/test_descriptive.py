from __future__ import annotations

import numpy as np
import pytest

from logfit.cleaning import Sample
from logfit.descriptive import describe_sample, interpret_p_value, shape_recommendation


def test_describe_sample_percentiles_and_moments() -> None:
    values = np.arange(1.0, 101.0)
    summary = describe_sample(Sample(values=values, name="NEUT"))

    assert summary["Count"] == 100
    assert summary["Mean"] == pytest.approx(50.5)
    assert summary["Minimum"] == 1.0
    assert summary["Maximum"] == 100.0
    assert summary["P50 (Median)"] == pytest.approx(50.5)
    assert summary["P10"] == pytest.approx(np.percentile(values, 10))
    assert summary["Std Dev"] == pytest.approx(values.std())
    assert summary["Skewness"] == pytest.approx(0.0, abs=1e-12)


@pytest.mark.parametrize(
    "p_value,label",
    [(0.5, "Good fit"), (0.07, "Acceptable fit"), (0.02, "Marginal fit"), (0.001, "Poor fit")],
)
def test_interpret_p_value(p_value: float, label: str) -> None:
    assert interpret_p_value(p_value)[0] == label


def test_shape_recommendation() -> None:
    assert "Lognormal" in shape_recommendation(2.0)
    assert "Weibull (maximum)" in shape_recommendation(-2.0)
    assert "symmetric" in shape_recommendation(0.1)
    assert "Moderate" in shape_recommendation(0.7)
