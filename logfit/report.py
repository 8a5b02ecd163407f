"""
Tabular and Excel reporting of a ranking.
"""

from datetime import datetime
from io import BytesIO
from pathlib import Path

import numpy as np
import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

RANKING_COLUMNS = ['rank', 'distribution', 'label', 'chi_square', 'p_value', 'ks_statistic', 'aic', 'parameters']
FAILURE_COLUMNS = ['distribution', 'label', 'stage', 'n_samples', 'error']


def format_params(candidate, precision=4):
    """Format fitted parameters for display."""
    return getattr(candidate, 'candidate', candidate).describe(precision=precision)


def ranking_to_frame(ranking):
    """One row per ranked candidate, best first."""
    rows = []
    for i, result in enumerate(ranking, start=1):
        rows.append({
            'rank': i,
            'distribution': result.name,
            'label': result.label,
            'chi_square': result.chi_square,
            'p_value': result.p_value,
            'ks_statistic': result.ks_statistic,
            'aic': result.aic,
            'parameters': format_params(result.candidate),
        })
    return pd.DataFrame(rows, columns=RANKING_COLUMNS)


def failures_to_frame(ranking):
    rows = [{
        'distribution': f.name,
        'label': f.family.label,
        'stage': f.stage,
        'n_samples': f.n_samples,
        'error': f.error,
    } for f in ranking.failures]
    return pd.DataFrame(rows, columns=FAILURE_COLUMNS)


def format_ranking(ranking, top=None):
    """Plain-text ranking table, followed by the candidates that failed."""
    frame = ranking_to_frame(ranking)
    if top is not None:
        frame = frame.head(top)
    lines = []
    if frame.empty:
        lines.append("No distributions ranked.")
    else:
        lines.append(
            frame[['rank', 'distribution', 'chi_square', 'p_value']].to_string(
                index=False,
                formatters={'chi_square': '{:.4f}'.format, 'p_value': '{:.5f}'.format},
            )
        )
    for failure in ranking.failures:
        lines.append(f"  failed [{failure.stage}] {failure.name}: {failure.error}")
    return '\n'.join(lines)


# Styles shared by every sheet
HEADER_FILL = PatternFill(start_color="1f77b4", end_color="1f77b4", fill_type="solid")
HEADER_FONT = Font(bold=True, color="FFFFFF", size=12)
TITLE_FONT = Font(bold=True, size=14, color="1f77b4")
SECTION_FONT = Font(bold=True, size=11)
BORDER_THIN = Border(left=Side(style='thin'), right=Side(style='thin'), top=Side(style='thin'), bottom=Side(style='thin'))
CENTER = Alignment(horizontal='center', vertical='center')


def _excel_value(value):
    if isinstance(value, (np.floating, np.integer)):
        value = value.item()
    if isinstance(value, float) and not np.isfinite(value):
        return None
    return value


def _write_table(sheet, frame, start_row=1):
    for col, name in enumerate(frame.columns, start=1):
        cell = sheet.cell(row=start_row, column=col, value=str(name))
        cell.fill = HEADER_FILL
        cell.font = HEADER_FONT
        cell.alignment = CENTER
        cell.border = BORDER_THIN
    for r, row in enumerate(frame.itertuples(index=False), start=start_row + 1):
        for col, value in enumerate(row, start=1):
            sheet.cell(row=r, column=col, value=_excel_value(value)).border = BORDER_THIN
    for col, name in enumerate(frame.columns, start=1):
        width = max([len(str(name))] + [len(str(v)) for v in frame.iloc[:, col - 1].head(200)])
        sheet.column_dimensions[get_column_letter(col)].width = min(max(width + 2, 10), 80)
    return start_row + len(frame) + 1


def export_excel(result, path=None):
    """
    Write an AnalysisResult to an Excel workbook.

    Sheets: Report (summary and descriptive statistics), Ranking, Failures and
    Data (raw and normalized readings).

    Returns:
    --------
    bytes when ``path`` is None, otherwise the written Path
    """
    wb = Workbook()
    wb.remove(wb.active)
    report_sheet = wb.create_sheet("Report", 0)
    ranking_sheet = wb.create_sheet("Ranking", 1)
    failures_sheet = wb.create_sheet("Failures", 2)
    data_sheet = wb.create_sheet("Data", 3)

    # ========== REPORT SHEET ==========
    row = 1
    report_sheet.merge_cells(f'A{row}:D{row}')
    report_sheet[f'A{row}'] = "LogFitFitter - Well-Log Distribution Report"
    report_sheet[f'A{row}'].font = TITLE_FONT
    report_sheet[f'A{row}'].alignment = CENTER
    row += 1
    report_sheet[f'A{row}'] = f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"
    report_sheet[f'A{row}'].font = Font(size=10, italic=True)
    row += 2

    report_sheet[f'A{row}'] = "Data Summary"
    report_sheet[f'A{row}'].font = SECTION_FONT
    row += 1
    well_name = result.well_log.well_name if result.well_log is not None else ''
    summary = [
        ("Well:", well_name),
        ("Curve:", result.sample.name),
        ("Valid readings:", len(result.sample)),
        ("Dropped (missing):", result.sample.n_missing),
        ("Dropped (negative):", result.sample.n_negative),
        ("Chi-square method:", result.ranking.chi_square_method),
        ("K-S method:", result.ranking.ks_method),
        ("Bins:", result.ranking.n_bins),
        ("Best fit:", result.best.label if result.best else 'N/A'),
    ]
    for label, value in summary:
        report_sheet[f'A{row}'] = label
        report_sheet[f'B{row}'] = _excel_value(value)
        row += 1
    row += 1

    report_sheet[f'A{row}'] = "Descriptive Statistics"
    report_sheet[f'A{row}'].font = SECTION_FONT
    row += 1
    stats_frame = pd.DataFrame(list(result.statistics.items()), columns=['Statistic', 'Value'])
    _write_table(report_sheet, stats_frame, start_row=row)
    report_sheet.column_dimensions['A'].width = 22
    report_sheet.column_dimensions['B'].width = 28

    # ========== TABLE SHEETS ==========
    _write_table(ranking_sheet, ranking_to_frame(result.ranking))
    ranking_sheet.freeze_panes = 'A2'
    _write_table(failures_sheet, failures_to_frame(result.ranking))

    data_frame = pd.DataFrame({
        result.sample.name or 'value': result.sample.values,
        'normalized': result.normalized.values,
    })
    _write_table(data_sheet, data_frame)
    data_sheet.freeze_panes = 'A2'

    if path is None:
        output = BytesIO()
        wb.save(output)
        output.seek(0)
        return output.getvalue()

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)
    return path
