"""Descriptive statistics for a cleaned curve."""

import numpy as np
from scipy import stats


def describe_sample(data):
    """Calculate descriptive statistics."""
    data = np.asarray(getattr(data, 'values', data), dtype=float)
    mode_result = stats.mode(data, keepdims=True)
    mode_val = mode_result.mode[0] if len(mode_result.mode) > 0 else np.nan

    return {
        'Count': len(data),
        'Mean': np.mean(data),
        'Mode': mode_val,
        'Minimum': np.min(data),
        'Maximum': np.max(data),
        'Std Dev': np.std(data),
        'P10': np.percentile(data, 10),
        'P50 (Median)': np.percentile(data, 50),
        'P90': np.percentile(data, 90),
        'Skewness': stats.skew(data),
        'Kurtosis': stats.kurtosis(data, fisher=True),  # normal dist = 0 baseline
    }


def interpret_p_value(p_value):
    """Provide verbal interpretation of a K-S p-value."""
    if p_value > 0.10:
        return "Good fit", "Strong evidence that the data could come from this distribution."
    elif p_value > 0.05:
        return "Acceptable fit", "Moderate evidence that the data could come from this distribution."
    elif p_value > 0.01:
        return "Marginal fit", "Weak evidence - the data may not come from this distribution."
    else:
        return "Poor fit", "Strong evidence against the data coming from this distribution."


def shape_recommendation(skewness):
    """Suggest starting families from sample skewness."""
    if skewness > 1:
        return "Strong right skew. Lognormal, Gamma or Weibull families are likely candidates."
    elif skewness < -1:
        return "Strong left skew. Weibull (maximum), Beta or Triangular families are likely candidates."
    elif abs(skewness) < 0.5:
        return "Roughly symmetric. Normal or Pearson Type III are good starting points."
    else:
        return "Moderate skew. Compare a variety of families."
