"""Project-wide exception types."""


class LogFitError(Exception):
    """Base exception for all logfit errors."""


class DataSourceError(LogFitError):
    """Raised when a well log cannot be read or lacks the requested data."""


class ColumnNotFoundError(DataSourceError):
    """Raised when the requested curve is not present in the log."""

    def __init__(self, column, available):
        self.column = column
        self.available = list(available)
        super().__init__(
            f"Curve '{column}' not found. Available curves: {', '.join(map(str, self.available)) or 'none'}"
        )


class InsufficientDataError(DataSourceError):
    """Raised when a sample does not meet minimum size requirements."""


class DegenerateSampleError(InsufficientDataError):
    """Raised when a cleaned sample is empty or has zero spread."""


class DistributionFitError(LogFitError):
    """Raised when distribution fitting fails or is implausible."""


class ConfigError(LogFitError):
    """Raised when configuration is missing or malformed."""


class ConfigValidationError(ConfigError):
    """Raised when validation fails for supplied configuration."""
