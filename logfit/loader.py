"""
Well-log loading.

LAS files are parsed with lasio; CSV and Excel exports of a log are read with
pandas. Every loader returns a :class:`WellLog` whose ``data`` frame is indexed
by depth with one column per curve mnemonic.
"""

import io
from dataclasses import dataclass, field
from pathlib import Path

import lasio
import numpy as np
import pandas as pd

from logfit.exceptions import DataSourceError
from logfit.utils.logging import get_logger

log = get_logger(__name__, component="loader")

# Column names treated as the depth index in tabular exports
DEPTH_COLUMNS = ('dept', 'depth', 'md', 'tvd', 'tvdss')

# Conventional LAS null markers that also show up in spreadsheet exports
NULL_VALUES = (-999.25, -9999.0)

SUPPORTED_FORMATS = ('las', 'csv', 'txt', 'xlsx', 'xls')


@dataclass
class WellLog:
    data: pd.DataFrame
    well_name: str = ''
    depth_unit: str = ''
    curves: dict = field(default_factory=dict)
    source: str = ''

    @property
    def curve_names(self):
        return [str(c) for c in self.data.columns]


def _header_value(section, mnemonic):
    try:
        return str(section[mnemonic].value).strip()
    except KeyError:
        return ''


def _read_las(source, label):
    las = lasio.read(source)
    frame = las.df()
    curves = {c.mnemonic: (c.unit, c.descr) for c in las.curves}
    depth_unit = las.curves[0].unit if len(las.curves) else ''
    return WellLog(
        data=frame,
        well_name=_header_value(las.well, 'WELL'),
        depth_unit=depth_unit,
        curves=curves,
        source=label,
    )


def _frame_to_well_log(frame, label):
    """Promote a depth column to the index and mask LAS null markers."""
    first = frame.columns[0] if len(frame.columns) else None
    if first is not None and str(first).strip().lower() in DEPTH_COLUMNS:
        frame = frame.set_index(first)
    frame = frame.replace(list(NULL_VALUES), np.nan)
    curves = {str(c): ('', '') for c in frame.columns}
    return WellLog(data=frame, well_name=Path(label).stem if label else '', curves=curves, source=label)


def detect_format(name):
    suffix = Path(str(name)).suffix.lower().lstrip('.')
    if suffix not in SUPPORTED_FORMATS:
        raise DataSourceError(
            f"Unsupported file format: .{suffix or '?'} (supported: {', '.join(SUPPORTED_FORMATS)})"
        )
    return suffix


def load_well_log(source, fmt=None, name=None):
    """
    Load a well log into a depth-indexed table.

    Parameters:
    -----------
    source : str, Path or file-like
        Path to the log file, or an open text/binary buffer
    fmt : str, optional
        One of ``SUPPORTED_FORMATS``. Detected from the file name when omitted.
    name : str, optional
        Label used for buffers (e.g. the uploaded file name)

    Returns:
    --------
    WellLog
    """
    is_path = isinstance(source, (str, Path))
    label = str(source) if is_path else (name or '<buffer>')
    fmt = (fmt or detect_format(name or label)).lower()

    if is_path and not Path(source).exists():
        raise DataSourceError(f"Well log not found: {source}")

    try:
        if fmt == 'las':
            if not is_path and hasattr(source, 'read'):
                content = source.read()
                if isinstance(content, bytes):
                    content = content.decode('utf-8', errors='replace')
                source = io.StringIO(content)
            well_log = _read_las(source if not is_path else str(source), label)
        elif fmt in ('csv', 'txt'):
            frame = pd.read_csv(source, sep=None, engine='python')
            well_log = _frame_to_well_log(frame, label)
        else:
            frame = pd.read_excel(source)
            well_log = _frame_to_well_log(frame, label)
    except DataSourceError:
        raise
    except Exception as exc:
        raise DataSourceError(f"Error reading {label}: {exc}") from exc

    log.info(
        "Loaded well log",
        extra={"n_samples": len(well_log.data), "curve": ",".join(well_log.curve_names)},
    )
    return well_log


def list_curves(well_log):
    """Return one row per curve: mnemonic, unit, description, non-null count."""
    rows = []
    for column in well_log.data.columns:
        unit, descr = well_log.curves.get(str(column), ('', ''))
        series = pd.to_numeric(well_log.data[column], errors='coerce')
        rows.append({
            'curve': str(column),
            'unit': unit,
            'description': descr,
            'non_null': int(series.notna().sum()),
        })
    return pd.DataFrame(rows, columns=['curve', 'unit', 'description', 'non_null'])


def synthetic_porosity_log(n=500, seed=42):
    """
    Build a reproducible demo log with NEUT and DPHI porosity curves.

    Both curves contain a few nulls and negative spikes so the cleaning step
    has something to do.
    """
    rng = np.random.default_rng(seed)
    depth = 1500.0 + 0.5 * np.arange(n)
    neut = 0.45 * rng.beta(2.0, 5.0, size=n)
    dphi = rng.normal(0.18, 0.05, size=n)

    n_bad = max(1, n // 50)
    neut[rng.choice(n, n_bad, replace=False)] = np.nan
    neut[rng.choice(n, n_bad, replace=False)] = -0.05
    dphi[rng.choice(n, n_bad, replace=False)] = np.nan

    frame = pd.DataFrame({'NEUT': neut, 'DPHI': dphi}, index=pd.Index(depth, name='DEPT'))
    return WellLog(
        data=frame,
        well_name='SYNTHETIC-1',
        depth_unit='M',
        curves={'NEUT': ('V/V', 'Neutron porosity'), 'DPHI': ('V/V', 'Density porosity')},
        source='<synthetic>',
    )
