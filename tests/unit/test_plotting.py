from __future__ import annotations

from pathlib import Path

import numpy as np
import plotly.graph_objects as go
from matplotlib.figure import Figure

from logfit.families import DistributionFamily
from logfit.fitting import CandidateDistribution
from logfit.interactive import plot_ranked_fits_plotly
from logfit.plotting import plot_cdf_difference, plot_histogram_with_fits, plot_kde, plot_qq_pp, render_figures

NORMAL = CandidateDistribution(family=DistributionFamily.NORM, params=(0.0, 1.0))


def test_histogram_overlays_one_line_per_candidate(normal_values: np.ndarray) -> None:
    candidates = [NORMAL, CandidateDistribution(family=DistributionFamily.UNIFORM, params=(-3.0, 6.0))]
    fig = plot_histogram_with_fits(normal_values, candidates, bins=30)

    assert isinstance(fig, Figure)
    ax = fig.axes[0]
    assert [line.get_label() for line in ax.get_lines()] == ["Normal", "Uniform"]


def test_histogram_skips_candidates_without_density(normal_values: np.ndarray) -> None:
    far_away = CandidateDistribution(family=DistributionFamily.UNIFORM, params=(100.0, 1.0))
    fig = plot_histogram_with_fits(normal_values, [far_away, NORMAL])
    assert [line.get_label() for line in fig.axes[0].get_lines()] == ["Normal"]


def test_plots_reuse_supplied_axes(normal_values: np.ndarray) -> None:
    fig = Figure()
    ax = fig.add_subplot()
    assert plot_kde(normal_values, ax=ax) is fig
    assert plot_cdf_difference(normal_values, NORMAL) is not fig


def test_qq_pp_has_two_panels_and_is_seeded(normal_values: np.ndarray) -> None:
    first = plot_qq_pp(normal_values, NORMAL, seed=4)
    second = plot_qq_pp(normal_values, NORMAL, seed=4)

    assert len(first.axes) == 2
    qq_first = first.axes[0].get_lines()[0].get_xdata()
    qq_second = second.axes[0].get_lines()[0].get_xdata()
    assert np.array_equal(qq_first, qq_second)
    pp_y = first.axes[1].get_lines()[0].get_ydata()
    assert pp_y[-1] == 1.0


def test_render_figures_writes_pngs(analysis_result, tmp_path: Path) -> None:
    written = render_figures(analysis_result, tmp_path / "plots")

    names = sorted(p.name for p in written)
    expected = ["histogram_fits.png", "kde.png"] + [f"qq_pp_{n}.png" for n in analysis_result.ranking.names()[:2]]
    assert names == sorted(expected)
    assert all(p.stat().st_size > 0 for p in written)


def test_plotly_chart_traces(analysis_result) -> None:
    fig = plot_ranked_fits_plotly(analysis_result.normalized.values, analysis_result.ranking, num_distributions=3)

    assert isinstance(fig, go.Figure)
    # histogram + empirical exceedance + three PDFs
    assert len(fig.data) == 5
    assert fig.data[2].name.startswith(f"#1 {analysis_result.best.label}")
    assert len(fig.layout.shapes) >= 3


class _PartlyUndefined:
    """Fitted distribution whose sampler returns NaN for a quarter of the draws."""

    label = "Partly undefined"

    def rvs(self, size, random_state=None):
        draws = random_state.standard_normal(size)
        draws[: size // 4] = np.nan
        return draws


def test_qq_keeps_observed_upper_tail_when_draws_are_dropped(normal_values: np.ndarray) -> None:
    fig = plot_qq_pp(normal_values, _PartlyUndefined(), seed=1)

    x, y = fig.axes[0].get_lines()[0].get_data()
    assert len(x) == len(y) == 750
    assert y[0] == normal_values.min()
    assert y[-1] == normal_values.max()
