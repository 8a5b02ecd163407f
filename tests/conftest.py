import matplotlib

matplotlib.use("Agg")

import logging

import numpy as np
import pytest

NULL = -999.25


def write_las(path, depths, curves, well_name="TEST WELL 1"):
    """Write a minimal LAS 2.0 file; NaN readings are written as the NULL value."""
    step = depths[1] - depths[0] if len(depths) > 1 else 0.0
    lines = [
        "~Version Information",
        " VERS.                  2.0 : CWLS LOG ASCII STANDARD - VERSION 2.0",
        " WRAP.                   NO : ONE LINE PER DEPTH STEP",
        "~Well Information",
        f" STRT.M          {depths[0]:.4f} : START DEPTH",
        f" STOP.M          {depths[-1]:.4f} : STOP DEPTH",
        f" STEP.M          {step:.4f} : STEP",
        f" NULL.           {NULL:.4f} : NULL VALUE",
        f" WELL.           {well_name} : WELL",
        "~Curve Information",
        " DEPT.M                     : DEPTH",
    ]
    for name in curves:
        lines.append(f" {name}.V/V                   : {name} POROSITY")
    lines.append("~ASCII")
    columns = list(curves.values())
    for i, depth in enumerate(depths):
        row = [f"{depth:.4f}"]
        for col in columns:
            value = col[i]
            row.append(f"{NULL:.4f}" if np.isnan(value) else f"{value:.6f}")
        lines.append(" " + "  ".join(row))
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def porosity_las(tmp_path):
    rng = np.random.default_rng(11)
    n = 300
    depths = 1000.0 + 0.5 * np.arange(n)
    neut = 0.3 * rng.beta(2.0, 5.0, size=n)
    neut[[3, 50, 120, 200, 250]] = np.nan
    neut[[10, 60, 130]] = -0.02
    dphi = rng.normal(0.2, 0.04, size=n)
    neg = -np.abs(rng.normal(0.1, 0.01, size=n))
    return write_las(tmp_path / "well.las", depths, {"NEUT": neut, "DPHI": dphi, "NEG": neg})


@pytest.fixture
def normal_values():
    return np.random.default_rng(0).standard_normal(1000)


@pytest.fixture(autouse=True)
def _restore_root_logging():
    # The CLI callback replaces the root handlers
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def analysis_result():
    from logfit.cleaning import Sample
    from logfit.config import AnalysisConfig
    from logfit.pipeline import analyze_sample

    values = np.random.default_rng(21).gamma(4.0, 0.04, size=400)
    config = AnalysisConfig(families="norm,gamma,lognorm,expon,uniform", n_bins=20, top_k=2, seed=5)
    return analyze_sample(Sample(values=values, name="NEUT"), config)
