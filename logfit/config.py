"""Analysis configuration schema and validation."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional, Tuple

import yaml

from logfit.exceptions import ConfigValidationError
from logfit.families import DEFAULT_FAMILIES, DistributionFamily
from logfit.ranking import CHI_SQUARE_METHODS, DEFAULT_BINS, KS_METHODS


@dataclass
class AnalysisConfig:
    path: Optional[str] = None
    column: str = "NEUT"
    top_k: int = 3
    n_bins: int = DEFAULT_BINS
    min_samples: int = 10
    families: Tuple[DistributionFamily, ...] = field(default_factory=lambda: DEFAULT_FAMILIES)
    seed: Optional[int] = 42
    max_workers: Optional[int] = None
    chi_square_method: str = "cumulative"
    ks_method: str = "one-sample"
    drop_negative: bool = True
    remove_zeros: bool = False
    clip_outliers: bool = False
    output_dir: Optional[str] = None
    excel_path: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.column:
            raise ConfigValidationError("column is required")
        if self.top_k <= 0:
            raise ConfigValidationError("top_k must be > 0")
        if self.n_bins < 2:
            raise ConfigValidationError("n_bins must be >= 2")
        if self.min_samples < 2:
            raise ConfigValidationError("min_samples must be >= 2")
        if self.max_workers is not None and self.max_workers <= 0:
            raise ConfigValidationError("max_workers must be positive when set")
        if self.chi_square_method not in CHI_SQUARE_METHODS:
            raise ConfigValidationError(
                f"invalid chi_square_method '{self.chi_square_method}' (expected one of {', '.join(CHI_SQUARE_METHODS)})"
            )
        if self.ks_method not in KS_METHODS:
            raise ConfigValidationError(
                f"invalid ks_method '{self.ks_method}' (expected one of {', '.join(KS_METHODS)})"
            )
        if isinstance(self.families, str):
            self.families = [f for f in self.families.split(",") if f.strip()]
        try:
            self.families = tuple(DistributionFamily.parse(f) for f in self.families)
        except ValueError as exc:
            raise ConfigValidationError(str(exc)) from exc
        if not self.families:
            raise ConfigValidationError("at least one distribution family is required")

    @classmethod
    def from_dict(cls, data: dict) -> "AnalysisConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigValidationError(f"unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "column": self.column,
            "top_k": self.top_k,
            "n_bins": self.n_bins,
            "min_samples": self.min_samples,
            "families": [f.value for f in self.families],
            "seed": self.seed,
            "max_workers": self.max_workers,
            "chi_square_method": self.chi_square_method,
            "ks_method": self.ks_method,
            "drop_negative": self.drop_negative,
            "remove_zeros": self.remove_zeros,
            "clip_outliers": self.clip_outliers,
            "output_dir": self.output_dir,
            "excel_path": self.excel_path,
        }

    def merged(self, **overrides) -> "AnalysisConfig":
        """Return a copy with non-None overrides applied (CLI values win over file values)."""
        data = self.to_dict()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return AnalysisConfig.from_dict(data)


def load_config(path: Path | str) -> AnalysisConfig:
    """Load an AnalysisConfig from a JSON or YAML file."""

    path = Path(path)
    if not path.exists():
        raise ConfigValidationError(f"config file not found: {path}")
    text = path.read_text()
    try:
        if path.suffix.lower() in {".yml", ".yaml"}:
            content = yaml.safe_load(text)
        else:
            content = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigValidationError(f"could not parse config {path}: {exc}") from exc
    if not isinstance(content, dict):
        raise ConfigValidationError(f"config {path} must contain a mapping")
    return AnalysisConfig.from_dict(content)


__all__ = ["AnalysisConfig", "load_config"]
