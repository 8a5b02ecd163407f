"""
Diagnostic plots for fitted candidates.

Every function draws on an explicit matplotlib ``Figure``/``Axes`` and returns
the figure. Figures are built with ``matplotlib.figure.Figure`` directly, so
nothing is registered with pyplot's current-figure state.
"""

from pathlib import Path

import numpy as np
import seaborn as sns
from matplotlib.figure import Figure
from scipy.integrate import trapezoid

from logfit.utils.logging import get_logger

log = get_logger(__name__, component="plotting")


def _figure_and_axes(ax, figsize=(8, 6)):
    if ax is None:
        fig = Figure(figsize=figsize)
        ax = fig.add_subplot()
        return fig, ax
    return ax.figure, ax


def _as_candidate(item):
    return getattr(item, 'candidate', item)


def plot_histogram_with_fits(values, candidates, bins=50, ax=None, title=None):
    """
    Histogram of the observed data with each candidate's PDF overlaid.

    Each PDF is scaled so that its area over the plotted range equals the
    histogram area, which keeps the curves on the count axis.
    """
    values = np.asarray(values, dtype=float)
    fig, ax = _figure_and_axes(ax, figsize=(10, 6))

    counts, edges, _ = ax.hist(values, bins=bins, color='coral', alpha=0.6, label='Observed')
    hist_area = float(np.sum(counts * np.diff(edges)))
    x = np.linspace(edges[0], edges[-1], 500)

    candidates = [_as_candidate(c) for c in candidates]
    colors = sns.color_palette("husl", max(len(candidates), 1))
    for candidate, color in zip(candidates, colors):
        with np.errstate(all='ignore'):
            pdf = np.asarray(candidate.pdf(x), dtype=float)
        finite = np.isfinite(pdf)
        integral = trapezoid(pdf[finite], x[finite]) if finite.sum() > 1 else 0.0
        if integral <= 0:
            log.warning("Skipping PDF overlay", extra={"family": candidate.name, "status": "zero area"})
            continue
        ax.plot(x[finite], pdf[finite] * hist_area / integral, color=color, linewidth=2, label=candidate.label)

    ax.set_xlabel('Value', fontsize=12)
    ax.set_ylabel('Frequency', fontsize=12)
    ax.set_title(title or 'Histogram + Fitted PDFs', fontsize=14, fontweight='bold')
    ax.legend()
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    return fig


def plot_kde(values, bins=50, ax=None, title=None):
    """Density histogram with a kernel density estimate."""
    values = np.asarray(values, dtype=float)
    fig, ax = _figure_and_axes(ax)
    sns.histplot(values, bins=bins, stat='density', kde=True, color='steelblue', alpha=0.5, ax=ax)
    ax.set_xlabel('Value', fontsize=12)
    ax.set_ylabel('Density', fontsize=12)
    ax.set_title(title or 'Histogram + Kernel Density Estimate', fontsize=14, fontweight='bold')
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    return fig


def plot_qq_pp(values, candidate, seed=None, fig=None):
    """
    Q-Q and P-P panels comparing observed data with the fitted distribution.

    A random sample the size of the data is drawn from the fitted distribution
    (seeded by ``seed``). The Q-Q panel plots sorted draws against sorted
    observations; the P-P panel plots cumulative fractions of both on the
    percentile bins of the draws.
    """
    candidate = _as_candidate(candidate)
    data = np.sort(np.asarray(values, dtype=float))
    n = len(data)
    rng = np.random.default_rng(seed)
    draws = np.sort(np.asarray(candidate.rvs(n, random_state=rng), dtype=float))
    draws = draws[np.isfinite(draws)]

    if fig is None:
        fig = Figure(figsize=(10, 5))
    ax_qq, ax_pp = fig.subplots(1, 2)

    # qq plot; observed quantiles are taken at as many points as there are finite draws
    observed_q = np.quantile(data, np.linspace(0, 1, len(draws))) if len(draws) != n else data
    ax_qq.plot(draws, observed_q, 'o', alpha=0.6, markersize=4)
    min_value = np.floor(min(draws.min(), data.min()))
    max_value = np.ceil(max(draws.max(), data.max()))
    ax_qq.plot([min_value, max_value], [min_value, max_value], 'r--', linewidth=2)
    ax_qq.set_xlim(min_value, max_value)
    ax_qq.set_xlabel('Theoretical quantiles')
    ax_qq.set_ylabel('Observed quantiles')
    ax_qq.set_title(f'Q-Q plot: {candidate.label}')
    ax_qq.grid(True, alpha=0.3)

    # pp plot
    bins = np.unique(np.percentile(draws, range(0, 101)))
    data_counts, _ = np.histogram(data, bins)
    draw_counts, _ = np.histogram(draws, bins)
    cum_data = np.cumsum(data_counts)
    cum_draws = np.cumsum(draw_counts)
    cum_data = cum_data / max(cum_data.max(), 1)
    cum_draws = cum_draws / max(cum_draws.max(), 1)
    ax_pp.plot(cum_draws, cum_data, 'o', alpha=0.6, markersize=4)
    ax_pp.plot([0, 1], [0, 1], 'r--', linewidth=2)
    ax_pp.set_xlim(0, 1)
    ax_pp.set_ylim(0, 1)
    ax_pp.set_xlabel('Theoretical cumulative distribution')
    ax_pp.set_ylabel('Observed cumulative distribution')
    ax_pp.set_title(f'P-P plot: {candidate.label}')
    ax_pp.grid(True, alpha=0.3)

    fig.tight_layout()
    return fig


def plot_cdf_difference(values, candidate, ax=None):
    """Fitted CDF minus empirical CDF; a perfect fit is a flat line at zero."""
    candidate = _as_candidate(candidate)
    sorted_data = np.sort(np.asarray(values, dtype=float))
    n = len(sorted_data)
    empirical_cdf = np.arange(1, n + 1) / n
    cdf_difference = candidate.cdf(sorted_data) - empirical_cdf

    valid_mask = np.isfinite(cdf_difference)
    fig, ax = _figure_and_axes(ax)
    ax.plot(sorted_data[valid_mask], cdf_difference[valid_mask], 'b-', linewidth=1.5, alpha=0.7, label='CDF Difference')
    ax.axhline(y=0, color='r', linestyle='--', linewidth=2, label='Perfect fit (y=0)')
    ax.set_xlabel('Value', fontsize=12)
    ax.set_ylabel('CDF Difference (Fitted - Empirical)', fontsize=12)
    ax.set_title(f'CDF Difference Plot: {candidate.label}', fontsize=14, fontweight='bold')
    ax.legend()
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    return fig


def render_figures(result, output_dir, top_k=None, dpi=100):
    """
    Write the diagnostic plots of an AnalysisResult as PNG files.

    Returns:
    --------
    list of Path
        Written files: ``histogram_fits.png``, ``kde.png`` and one
        ``qq_pp_<family>.png`` per top-ranked candidate
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    top_k = top_k or result.config.top_k
    curve = result.sample.name or 'curve'
    written = []

    fig = plot_histogram_with_fits(
        result.sample.values,
        result.overlay_candidates,
        bins=result.config.n_bins,
        title=f'{curve}: histogram + top {len(result.overlay_candidates)} fitted PDFs',
    )
    written.append(_save(fig, output_dir / 'histogram_fits.png', dpi))

    fig = plot_kde(result.sample.values, bins=result.config.n_bins, title=f'{curve}: kernel density estimate')
    written.append(_save(fig, output_dir / 'kde.png', dpi))

    for fit in result.ranking.top(top_k):
        fig = plot_qq_pp(result.normalized.values, fit.candidate, seed=result.config.seed)
        written.append(_save(fig, output_dir / f'qq_pp_{fit.name}.png', dpi))

    log.info("Rendered figures", extra={"curve": curve, "status": f"files={len(written)}"})
    return written


def _save(fig, path, dpi):
    fig.savefig(path, dpi=dpi)
    return path
