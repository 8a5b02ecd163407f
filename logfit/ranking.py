"""
Goodness-of-fit scoring and ranking of fitted candidates.

Candidates are ranked by a chi-square statistic computed on equal-probability
(percentile) bins of the sample; a Kolmogorov-Smirnov p-value is reported
alongside as a cross-check.
"""

from dataclasses import dataclass, field

import numpy as np
from scipy import stats

from logfit.fitting import FitFailure, record_fit_failure
from logfit.utils.logging import get_logger

log = get_logger(__name__, component="ranking")

CHI_SQUARE_METHODS = ('cumulative', 'pearson')
KS_METHODS = ('one-sample', 'two-sample')
DEFAULT_BINS = 50


@dataclass(frozen=True)
class FitResult:
    candidate: object
    chi_square: float
    p_value: float
    ks_statistic: float = float('nan')
    log_likelihood: float = float('nan')
    aic: float = float('nan')

    @property
    def family(self):
        return self.candidate.family

    @property
    def name(self):
        return self.candidate.name

    @property
    def label(self):
        return self.candidate.label


@dataclass
class Ranking:
    """FitResults in ascending chi-square order plus the candidates that failed."""

    results: list = field(default_factory=list)
    failures: list = field(default_factory=list)
    n_bins: int = DEFAULT_BINS
    chi_square_method: str = 'cumulative'
    ks_method: str = 'one-sample'

    def __iter__(self):
        return iter(self.results)

    def __len__(self):
        return len(self.results)

    def __getitem__(self, index):
        return self.results[index]

    @property
    def best(self):
        return self.results[0] if self.results else None

    def top(self, k):
        return self.results[:k]

    def names(self):
        return [r.name for r in self.results]


def _check_method(method, valid, what):
    if method not in valid:
        raise ValueError(f"Unknown {what} method '{method}'. Valid methods: {', '.join(valid)}")


def chi_square_statistic(values, candidate, n_bins=DEFAULT_BINS, method='cumulative'):
    """
    Binned chi-square statistic of ``candidate`` against ``values``.

    Bin edges are the percentiles ``linspace(0, 100, n_bins + 1)`` of the data,
    so every bin holds roughly the same number of observations. Expected
    counts come from the fitted CDF at the same edges.

    With ``method='cumulative'`` the squared differences of the cumulative
    expected and cumulative observed counts are divided by the cumulative
    observed counts, which is not the textbook statistic. Leading bins with no
    cumulative observations (a minimum shared by many readings collapses the
    first percentile edges) are left out of the sum. ``method='pearson'``
    gives the conventional per-bin ``sum((O - E)**2 / E)``.
    """
    _check_method(method, CHI_SQUARE_METHODS, 'chi-square')
    values = np.asarray(values, dtype=float)
    n = len(values)

    percentile_bins = np.linspace(0, 100, n_bins + 1)
    edges = np.percentile(values, percentile_bins)
    observed, _ = np.histogram(values, bins=edges)

    with np.errstate(all='ignore'):
        expected = np.diff(candidate.cdf(edges)) * n
        if method == 'cumulative':
            cum_observed = np.cumsum(observed)
            cum_expected = np.cumsum(expected)
            filled = cum_observed > 0
            return float(np.sum((cum_expected[filled] - cum_observed[filled]) ** 2 / cum_observed[filled]))

        valid = expected > 0
        return float(np.sum((observed[valid] - expected[valid]) ** 2 / expected[valid]))


def ks_test(values, candidate, method='one-sample', seed=None):
    """
    Kolmogorov-Smirnov test of ``values`` against the fitted distribution.

    ``one-sample`` compares the empirical CDF with the fitted CDF directly.
    ``two-sample`` compares against ``len(values)`` variates drawn from the fitted
    distribution with a generator seeded by ``seed``.

    Returns:
    --------
    (statistic, p_value) : tuple of float
    """
    _check_method(method, KS_METHODS, 'K-S')
    values = np.asarray(values, dtype=float)
    if method == 'one-sample':
        result = stats.kstest(values, candidate.cdf)
    else:
        rng = np.random.default_rng(seed)
        draws = candidate.rvs(len(values), random_state=rng)
        result = stats.ks_2samp(values, draws)
    return float(result.statistic), float(result.pvalue)


def _information_criteria(values, candidate):
    with np.errstate(all='ignore'):
        log_likelihood = float(np.sum(candidate.logpdf(values)))
    if not np.isfinite(log_likelihood):
        return float('nan'), float('nan')
    # AIC = 2k - 2ln(L)
    aic = 2 * candidate.family.n_params - 2 * log_likelihood
    return log_likelihood, aic


def score_candidate(values, candidate, n_bins=DEFAULT_BINS, chi_square_method='cumulative',
                    ks_method='one-sample', seed=None):
    """Score one candidate; returns a FitResult, or a FitFailure if the scores are unusable."""
    _check_method(chi_square_method, CHI_SQUARE_METHODS, 'chi-square')
    _check_method(ks_method, KS_METHODS, 'K-S')
    values = np.asarray(values, dtype=float)
    try:
        chi_square = chi_square_statistic(values, candidate, n_bins=n_bins, method=chi_square_method)
        ks_stat, p_value = ks_test(values, candidate, method=ks_method, seed=seed)
    except Exception as exc:
        return record_fit_failure(candidate.family, exc, len(values), stage='score')

    if not np.isfinite(chi_square) or chi_square < 0:
        return record_fit_failure(
            candidate.family, f"Chi-square statistic is not usable ({chi_square})", len(values), stage='score'
        )
    if not np.isfinite(p_value) or not 0.0 <= p_value <= 1.0:
        return record_fit_failure(
            candidate.family, f"K-S p-value is not usable ({p_value})", len(values), stage='score'
        )

    log_likelihood, aic = _information_criteria(values, candidate)
    return FitResult(
        candidate=candidate,
        chi_square=chi_square,
        p_value=p_value,
        ks_statistic=ks_stat,
        log_likelihood=log_likelihood,
        aic=aic,
    )


def rank_distributions(sample, candidates, n_bins=DEFAULT_BINS, chi_square_method='cumulative',
                       ks_method='one-sample', seed=None, failures=()):
    """
    Score all candidates and rank them by chi-square (lower is better).

    Parameters:
    -----------
    sample : NormalizedSample or array-like
        Data the candidates were fitted to
    candidates : iterable of CandidateDistribution
        Fitted candidates
    n_bins : int
        Number of equal-probability bins for the chi-square statistic
    chi_square_method : str
        'cumulative' (default) or 'pearson'
    ks_method : str
        'one-sample' (default) or 'two-sample'
    seed : int, optional
        Seed for the two-sample K-S variates
    failures : iterable of FitFailure
        Failures from the fitting step, carried into the ranking

    Returns:
    --------
    Ranking
    """
    _check_method(chi_square_method, CHI_SQUARE_METHODS, 'chi-square')
    _check_method(ks_method, KS_METHODS, 'K-S')
    values = np.asarray(getattr(sample, 'values', sample), dtype=float)

    ranking = Ranking(
        failures=list(failures),
        n_bins=n_bins,
        chi_square_method=chi_square_method,
        ks_method=ks_method,
    )
    for candidate in candidates:
        outcome = score_candidate(
            values,
            candidate,
            n_bins=n_bins,
            chi_square_method=chi_square_method,
            ks_method=ks_method,
            seed=seed,
        )
        if isinstance(outcome, FitFailure):
            ranking.failures.append(outcome)
        else:
            ranking.results.append(outcome)

    # Sort by chi-square statistic (lower is better); ties keep input order
    ranking.results.sort(key=lambda r: r.chi_square)

    if ranking.best is not None:
        log.info(
            "Ranked candidate distributions",
            extra={
                "family": ranking.best.name,
                "n_samples": len(values),
                "status": f"ranked={len(ranking.results)} failed={len(ranking.failures)}",
            },
        )
    return ranking
