"""
LogFitFitter - distribution fitting for well-log curves.
"""

from logfit.families import DEFAULT_FAMILIES, DistributionFamily
from logfit.fitting import CandidateDistribution, FitFailure, fit_candidate, fit_candidates
from logfit.loader import WellLog, load_well_log
from logfit.cleaning import Sample, select_sample
from logfit.normalize import NormalizedSample, normalize
from logfit.ranking import FitResult, Ranking, rank_distributions
from logfit.pipeline import AnalysisResult, analyze_sample, run_analysis

__version__ = "0.2.0"

__all__ = [
    "AnalysisResult",
    "CandidateDistribution",
    "DEFAULT_FAMILIES",
    "DistributionFamily",
    "FitFailure",
    "FitResult",
    "NormalizedSample",
    "Ranking",
    "Sample",
    "WellLog",
    "analyze_sample",
    "fit_candidate",
    "fit_candidates",
    "load_well_log",
    "normalize",
    "rank_distributions",
    "run_analysis",
    "select_sample",
]
