"""
Candidate distribution families for well-log fitting.

Each family wraps one ``scipy.stats`` continuous distribution. Parameters are
always handled as a flat tuple in scipy order: shape parameters first, then
``loc`` and ``scale``.
"""

from enum import Enum

import numpy as np
from scipy import stats


# Display label and parameter names for each family, keyed by scipy name
_FAMILY_INFO = {
    'weibull_min': ('Weibull (minimum)', ('shape (c)', 'loc', 'scale')),
    'norm': ('Normal', ('loc (μ)', 'scale (σ)')),
    'weibull_max': ('Weibull (maximum)', ('shape (c)', 'loc', 'scale')),
    'beta': ('Beta', ('shape (a)', 'shape (b)', 'loc', 'scale')),
    'invgauss': ('Inverse Gaussian', ('shape (μ)', 'loc', 'scale')),
    'uniform': ('Uniform', ('loc', 'scale')),
    'gamma': ('Gamma', ('shape (a)', 'loc', 'scale')),
    'expon': ('Exponential', ('loc', 'scale (λ)')),
    'lognorm': ('Lognormal', ('shape (s)', 'loc', 'scale')),
    'pearson3': ('Pearson Type III', ('skew', 'loc', 'scale')),
    'triang': ('Triangular', ('shape (c)', 'loc', 'scale')),
}


class DistributionFamily(str, Enum):
    """The eleven parametric families a curve is tested against."""

    WEIBULL_MIN = 'weibull_min'
    NORM = 'norm'
    WEIBULL_MAX = 'weibull_max'
    BETA = 'beta'
    INVGAUSS = 'invgauss'
    UNIFORM = 'uniform'
    GAMMA = 'gamma'
    EXPON = 'expon'
    LOGNORM = 'lognorm'
    PEARSON3 = 'pearson3'
    TRIANG = 'triang'

    def __str__(self):
        return self.value

    @classmethod
    def parse(cls, name):
        """
        Resolve a family from its scipy name or display label.

        Raises
        ------
        ValueError
            If ``name`` matches no family.
        """
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower()
        for family in cls:
            if key in (family.value, family.label.lower()):
                return family
        valid = ', '.join(f.value for f in cls)
        raise ValueError(f"Unknown distribution family '{name}'. Valid families: {valid}")

    @property
    def dist(self):
        """The underlying ``scipy.stats`` distribution object."""
        return getattr(stats, self.value)

    @property
    def label(self):
        return _FAMILY_INFO[self.value][0]

    @property
    def param_names(self):
        return _FAMILY_INFO[self.value][1]

    @property
    def n_params(self):
        return len(self.param_names)

    def fit(self, values):
        """Maximum-likelihood parameter estimate for ``values``."""
        params = self.dist.fit(np.asarray(values, dtype=float))
        return tuple(float(p) for p in params)

    def cdf(self, x, params):
        return self.dist.cdf(x, *params)

    def pdf(self, x, params):
        return self.dist.pdf(x, *params)

    def logpdf(self, x, params):
        return self.dist.logpdf(x, *params)

    def ppf(self, q, params):
        return self.dist.ppf(q, *params)

    def rvs(self, params, size, random_state=None):
        return self.dist.rvs(*params, size=size, random_state=random_state)


DEFAULT_FAMILIES = tuple(DistributionFamily)
