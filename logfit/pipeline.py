"""
End-to-end analysis: load -> clean -> normalize -> fit -> rank.
"""

from dataclasses import dataclass, field
from typing import Optional

from logfit.cleaning import Sample, select_sample
from logfit.config import AnalysisConfig
from logfit.descriptive import describe_sample
from logfit.exceptions import ConfigValidationError, DistributionFitError, InsufficientDataError
from logfit.fitting import fit_candidates
from logfit.loader import WellLog, load_well_log
from logfit.normalize import NormalizedSample, normalize
from logfit.ranking import Ranking, rank_distributions
from logfit.utils.logging import get_logger

log = get_logger(__name__, component="pipeline")


@dataclass
class AnalysisResult:
    config: AnalysisConfig
    sample: Sample
    normalized: NormalizedSample
    ranking: Ranking
    statistics: dict = field(default_factory=dict)
    # Top-ranked families refitted on the raw (unnormalized) readings
    overlay_candidates: list = field(default_factory=list)
    well_log: Optional[WellLog] = None

    @property
    def best(self):
        return self.ranking.best


def analyze_sample(sample, config=None):
    """
    Fit and rank the configured families on a cleaned sample.

    Parameters:
    -----------
    sample : Sample
        Cleaned curve readings
    config : AnalysisConfig, optional
        Defaults to ``AnalysisConfig()``

    Returns:
    --------
    AnalysisResult

    Raises:
    -------
    InsufficientDataError
        If the sample is smaller than ``config.min_samples``
    DegenerateSampleError
        If the sample has zero spread
    DistributionFitError
        If no family could be fitted and scored
    """
    config = config or AnalysisConfig()
    if not isinstance(sample, Sample):
        sample = Sample(values=sample)
    if len(sample) < config.min_samples:
        raise InsufficientDataError(
            f"Need at least {config.min_samples} valid readings for '{sample.name}', got {len(sample)}"
        )

    normalized = normalize(sample)
    batch = fit_candidates(normalized.values, config.families, max_workers=config.max_workers)
    ranking = rank_distributions(
        normalized,
        batch.candidates,
        n_bins=config.n_bins,
        chi_square_method=config.chi_square_method,
        ks_method=config.ks_method,
        seed=config.seed,
        failures=batch.failures,
    )
    if not ranking.results:
        details = '; '.join(f"{f.name}: {f.error}" for f in ranking.failures)
        raise DistributionFitError(f"No distribution could be fitted to '{sample.name}' ({details})")

    overlay = fit_candidates(sample.values, [r.family for r in ranking.top(config.top_k)])

    log.info(
        "Analysis complete",
        extra={"curve": sample.name, "family": ranking.best.name, "n_samples": len(sample)},
    )
    return AnalysisResult(
        config=config,
        sample=sample,
        normalized=normalized,
        ranking=ranking,
        statistics=describe_sample(sample),
        overlay_candidates=overlay.candidates,
    )


def run_analysis(config):
    """Run the full pipeline on the well log at ``config.path``."""
    if not config.path:
        raise ConfigValidationError("path to a well log is required")
    well_log = load_well_log(config.path)
    sample = select_sample(
        well_log,
        config.column,
        drop_negative=config.drop_negative,
        remove_zeros=config.remove_zeros,
        clip_outliers=config.clip_outliers,
    )
    result = analyze_sample(sample, config)
    result.well_log = well_log
    return result
