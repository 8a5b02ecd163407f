from __future__ import annotations

from io import BytesIO
from pathlib import Path

import numpy as np
from openpyxl import load_workbook

from logfit.families import DistributionFamily
from logfit.fitting import fit_candidates
from logfit.ranking import rank_distributions
from logfit.report import RANKING_COLUMNS, export_excel, failures_to_frame, format_ranking, ranking_to_frame


def test_ranking_frame_is_best_first(analysis_result) -> None:
    frame = ranking_to_frame(analysis_result.ranking)

    assert list(frame.columns) == RANKING_COLUMNS
    assert frame["rank"].tolist() == list(range(1, len(frame) + 1))
    assert frame["distribution"].tolist() == analysis_result.ranking.names()
    assert frame["chi_square"].is_monotonic_increasing


def test_format_ranking_lists_failures() -> None:
    values = np.random.default_rng(2).normal(size=4)
    batch = fit_candidates(values, ["norm", "beta"])
    ranking = rank_distributions(values, batch.candidates, n_bins=2, failures=batch.failures)

    text = format_ranking(ranking)
    assert "norm" in text
    assert "failed [precheck] beta" in text
    assert failures_to_frame(ranking)["distribution"].tolist() == ["beta"]


def test_format_empty_ranking() -> None:
    ranking = rank_distributions(np.array([1.0, 2.0]), [])
    assert format_ranking(ranking) == "No distributions ranked."


def test_export_excel_returns_workbook_bytes(analysis_result) -> None:
    payload = export_excel(analysis_result)

    wb = load_workbook(BytesIO(payload))
    assert wb.sheetnames == ["Report", "Ranking", "Failures", "Data"]
    ranking = wb["Ranking"]
    assert ranking["A1"].value == "rank"
    assert ranking["B2"].value == analysis_result.best.name
    assert wb["Data"].max_row == len(analysis_result.sample) + 1


def test_export_excel_writes_file(analysis_result, tmp_path: Path) -> None:
    path = export_excel(analysis_result, tmp_path / "out" / "report.xlsx")
    assert path.exists()
    assert load_workbook(path)["Report"]["B6"].value == "NEUT"


def test_family_label_in_failures_frame() -> None:
    batch = fit_candidates(np.array([0.1, 0.2]), [DistributionFamily.TRIANG])
    ranking = rank_distributions(np.array([0.1, 0.2]), batch.candidates, failures=batch.failures)
    assert failures_to_frame(ranking)["label"].tolist() == ["Triangular"]
