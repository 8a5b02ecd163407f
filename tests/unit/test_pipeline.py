from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from scipy import stats

from logfit.cleaning import Sample
from logfit.config import AnalysisConfig
from logfit.exceptions import (
    ConfigValidationError,
    DegenerateSampleError,
    DistributionFitError,
    InsufficientDataError,
)
from logfit.pipeline import analyze_sample, run_analysis


def test_analyze_sample_ranks_and_refits_on_raw_values(analysis_result) -> None:
    result = analysis_result

    assert len(result.ranking) == 5
    assert result.best is result.ranking[0]
    assert result.normalized.values.mean() == pytest.approx(0.0, abs=1e-12)
    assert [c.name for c in result.overlay_candidates] == result.ranking.names()[:2]
    # Overlays live on the reading scale, not the standardized one
    raw_mean = result.sample.values.mean()
    for candidate in result.overlay_candidates:
        assert candidate.ppf(0.5) == pytest.approx(np.median(result.sample.values), rel=0.3, abs=0.02)
    assert result.statistics["Mean"] == pytest.approx(raw_mean)


def test_gamma_sample_prefers_skewed_families(analysis_result) -> None:
    names = analysis_result.ranking.names()
    assert names.index("gamma") < names.index("uniform")


def test_sample_below_minimum_is_rejected() -> None:
    sample = Sample(values=np.linspace(0.1, 0.2, 5), name="NEUT")
    with pytest.raises(InsufficientDataError, match="at least 10"):
        analyze_sample(sample, AnalysisConfig())


def test_all_families_failing_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    def _boom(*args, **kwargs):
        raise RuntimeError("no convergence")

    monkeypatch.setattr(stats.norm, "fit", _boom)
    values = np.random.default_rng(1).normal(size=100)
    with pytest.raises(DistributionFitError, match="no convergence"):
        analyze_sample(values, AnalysisConfig(families=["norm"]))


def test_run_analysis_end_to_end(porosity_las: Path) -> None:
    config = AnalysisConfig(path=str(porosity_las), column="NEUT", families="norm,beta,gamma", n_bins=25)
    result = run_analysis(config)

    assert result.well_log is not None
    assert result.well_log.well_name == "TEST WELL 1"
    assert len(result.sample) == 292
    assert result.sample.n_negative == 3
    assert 1 <= len(result.ranking) <= 3
    assert len(result.ranking) + len(result.ranking.failures) == 3


def test_run_analysis_on_all_negative_curve(porosity_las: Path) -> None:
    with pytest.raises(DegenerateSampleError):
        run_analysis(AnalysisConfig(path=str(porosity_las), column="NEG"))


def test_run_analysis_requires_path() -> None:
    with pytest.raises(ConfigValidationError, match="path"):
        run_analysis(AnalysisConfig())
