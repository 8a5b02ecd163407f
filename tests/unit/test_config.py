from __future__ import annotations

import json
from pathlib import Path

import pytest

from logfit.config import AnalysisConfig, load_config
from logfit.exceptions import ConfigError, ConfigValidationError
from logfit.families import DEFAULT_FAMILIES, DistributionFamily


def test_defaults() -> None:
    config = AnalysisConfig()
    assert config.column == "NEUT"
    assert config.n_bins == 50
    assert config.top_k == 3
    assert config.families == DEFAULT_FAMILIES
    assert config.chi_square_method == "cumulative"
    assert config.ks_method == "one-sample"


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"top_k": 0}, "top_k"),
        ({"n_bins": 1}, "n_bins"),
        ({"min_samples": 1}, "min_samples"),
        ({"max_workers": 0}, "max_workers"),
        ({"chi_square_method": "g-test"}, "chi_square_method"),
        ({"ks_method": "anderson"}, "ks_method"),
        ({"families": ["norm", "cauchy"]}, "cauchy"),
        ({"families": []}, "at least one"),
        ({"column": ""}, "column"),
    ],
)
def test_invalid_values_are_rejected(overrides: dict, message: str) -> None:
    with pytest.raises(ConfigValidationError, match=message):
        AnalysisConfig(**overrides)


def test_families_accept_comma_separated_string() -> None:
    config = AnalysisConfig(families="norm, Lognormal,gamma")
    assert config.families == (DistributionFamily.NORM, DistributionFamily.LOGNORM, DistributionFamily.GAMMA)


def test_from_dict_rejects_unknown_keys() -> None:
    with pytest.raises(ConfigValidationError, match="unknown config keys: colour"):
        AnalysisConfig.from_dict({"colour": "red"})


def test_merged_applies_only_set_overrides() -> None:
    base = AnalysisConfig(column="DPHI", n_bins=30)
    merged = base.merged(n_bins=None, top_k=5, families="norm")
    assert merged.column == "DPHI"
    assert merged.n_bins == 30
    assert merged.top_k == 5
    assert merged.families == (DistributionFamily.NORM,)


def test_load_yaml_config(tmp_path: Path) -> None:
    path = tmp_path / "fit.yaml"
    path.write_text("column: DPHI\nn_bins: 20\nfamilies:\n  - norm\n  - beta\nks_method: two-sample\n")
    config = load_config(path)
    assert config.column == "DPHI"
    assert config.n_bins == 20
    assert config.families == (DistributionFamily.NORM, DistributionFamily.BETA)
    assert config.ks_method == "two-sample"


def test_load_json_config_round_trips(tmp_path: Path) -> None:
    path = tmp_path / "fit.json"
    original = AnalysisConfig(column="DPHI", seed=7, clip_outliers=True)
    path.write_text(json.dumps(original.to_dict()))
    assert load_config(path).to_dict() == original.to_dict()


def test_load_config_errors(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "missing.yaml")

    bad = tmp_path / "bad.yaml"
    bad.write_text("- just\n- a list\n")
    with pytest.raises(ConfigValidationError, match="mapping"):
        load_config(bad)
