"""
Distribution fitting utilities for logfit
"""

import time
import warnings
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

import numpy as np

from logfit.exceptions import DistributionFitError
from logfit.families import DEFAULT_FAMILIES, DistributionFamily
from logfit.utils.logging import get_logger

log = get_logger(__name__, component="fitting")


@dataclass(frozen=True)
class CandidateDistribution:
    """A distribution family with its fitted (shapes..., loc, scale) parameters."""

    family: DistributionFamily
    params: tuple

    @property
    def name(self):
        return self.family.value

    @property
    def label(self):
        return self.family.label

    @property
    def shape_params(self):
        return self.params[:-2]

    @property
    def loc(self):
        return self.params[-2]

    @property
    def scale(self):
        return self.params[-1]

    def cdf(self, x):
        return self.family.cdf(x, self.params)

    def pdf(self, x):
        return self.family.pdf(x, self.params)

    def logpdf(self, x):
        return self.family.logpdf(x, self.params)

    def ppf(self, q):
        return self.family.ppf(q, self.params)

    def rvs(self, size, random_state=None):
        return self.family.rvs(self.params, size, random_state=random_state)

    def param_dict(self):
        return dict(zip(self.family.param_names, self.params))

    def describe(self, precision=4):
        """Parameter string for display, e.g. ``loc (μ)=0.0012, scale (σ)=0.9981``."""
        return ', '.join(f"{k}={v:.{precision}f}" for k, v in self.param_dict().items())


@dataclass
class FitFailure:
    family: DistributionFamily
    n_samples: int
    error: str
    stage: str = 'fit'

    @property
    def name(self):
        return self.family.value


@dataclass
class FitBatch:
    candidates: list = field(default_factory=list)
    failures: list = field(default_factory=list)


def record_fit_failure(family, error, n_samples, stage='fit'):
    """Log diagnostics for a failed fit and return the FitFailure entry."""
    message = str(error) or type(error).__name__
    log.warning(
        "Distribution fit failed",
        extra={
            "family": family.value,
            "stage": stage,
            "n_samples": n_samples,
            "status": "FAILED",
            "error": message,
        },
    )
    return FitFailure(family=family, n_samples=n_samples, error=message, stage=stage)


def _fit_one(values, family):
    n = len(values)
    # MLE needs more observations than free parameters
    if n <= family.n_params:
        return record_fit_failure(
            family,
            f"Insufficient data for {family.value}: need >{family.n_params} readings, got {n}",
            n,
            stage='precheck',
        )
    try:
        with np.errstate(all='ignore'):
            params = family.fit(values)
    except Exception as exc:
        return record_fit_failure(family, exc, n)
    if not np.all(np.isfinite(params)) or params[-1] <= 0:
        return record_fit_failure(family, f"Fit produced invalid parameters {params}", n)
    return CandidateDistribution(family=family, params=params)


def fit_candidate(values, family):
    """
    Fit a single family to data.

    Parameters:
    -----------
    values : array-like
        Input data to fit
    family : DistributionFamily or str
        Family to fit

    Returns:
    --------
    CandidateDistribution

    Raises:
    -------
    DistributionFitError
        If the sample is too small for the family or the fit fails
    """
    values = np.asarray(values, dtype=float)
    family = DistributionFamily.parse(family)
    with warnings.catch_warnings():
        warnings.simplefilter('ignore', RuntimeWarning)
        outcome = _fit_one(values, family)
    if isinstance(outcome, FitFailure):
        raise DistributionFitError(outcome.error)
    return outcome


def fit_candidates(values, families=DEFAULT_FAMILIES, max_workers=None):
    """
    Fit every family in ``families`` to ``values``.

    A family that cannot be fitted is recorded in ``FitBatch.failures`` and the
    remaining families are still fitted. With ``max_workers > 1`` the fits run
    in a thread pool; candidates keep the order of ``families`` either way.

    Returns:
    --------
    FitBatch
    """
    values = np.asarray(values, dtype=float)
    families = [DistributionFamily.parse(f) for f in families]
    started = time.perf_counter()

    with warnings.catch_warnings():
        warnings.simplefilter('ignore', RuntimeWarning)
        if max_workers and max_workers > 1 and len(families) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                outcomes = list(pool.map(lambda f: _fit_one(values, f), families))
        else:
            outcomes = [_fit_one(values, f) for f in families]

    batch = FitBatch()
    for outcome in outcomes:
        if isinstance(outcome, FitFailure):
            batch.failures.append(outcome)
        else:
            batch.candidates.append(outcome)

    log.info(
        "Fitted candidate distributions",
        extra={
            "n_samples": len(values),
            "status": f"fitted={len(batch.candidates)} failed={len(batch.failures)}",
            "duration_ms": round((time.perf_counter() - started) * 1000, 1),
        },
    )
    return batch
