"""Typer CLI entrypoint with structured error handling."""

from __future__ import annotations

import sys
import uuid
from pathlib import Path
from typing import Optional

import click
import typer

from logfit.config import AnalysisConfig, load_config
from logfit.exceptions import ConfigError, DataSourceError, DistributionFitError
from logfit.loader import list_curves, load_well_log
from logfit.pipeline import run_analysis
from logfit.plotting import render_figures
from logfit.report import export_excel, format_ranking
from logfit.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Fit candidate distributions to well-log curves", no_args_is_help=True)

log = get_logger(__name__, component="cli")


@app.callback()
def _root(
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"),
) -> None:
    configure_logging(run_id=uuid.uuid4().hex[:12], component="cli", level=log_level)


@app.command()
def fit(
    path: Path = typer.Argument(..., help="Well log file (.las, .csv, .xlsx)"),
    column: Optional[str] = typer.Option(None, "--column", "-c", help="Curve mnemonic, e.g. NEUT or DPHI"),
    config: Optional[Path] = typer.Option(None, "--config", help="Optional YAML/JSON config path"),
    top: Optional[int] = typer.Option(None, "--top", help="Number of top candidates to plot"),
    bins: Optional[int] = typer.Option(None, "--bins", help="Equal-probability bins for chi-square"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for sampled plots and two-sample K-S"),
    workers: Optional[int] = typer.Option(None, "--workers", help="Fit families in a thread pool of this size"),
    families: Optional[str] = typer.Option(None, "--families", help="Comma-separated subset of families"),
    chi_square_method: Optional[str] = typer.Option(None, "--chi-square-method", help="cumulative or pearson"),
    ks_method: Optional[str] = typer.Option(None, "--ks-method", help="one-sample or two-sample"),
    min_samples: Optional[int] = typer.Option(None, "--min-samples", help="Minimum valid readings required"),
    keep_negative: bool = typer.Option(False, "--keep-negative", help="Keep negative readings"),
    remove_zeros: bool = typer.Option(False, "--remove-zeros", help="Drop readings equal to zero"),
    clip_outliers: bool = typer.Option(False, "--clip-outliers", help="Clip readings above P99"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Directory for PNG plots"),
    excel: Optional[Path] = typer.Option(None, "--excel", help="Write an Excel report to this path"),
) -> None:
    """Fit, rank and plot candidate distributions for one curve."""
    base = load_config(config) if config else AnalysisConfig()
    overrides = {
        "path": str(path),
        "column": column,
        "top_k": top,
        "n_bins": bins,
        "seed": seed,
        "max_workers": workers,
        "families": families,
        "chi_square_method": chi_square_method,
        "ks_method": ks_method,
        "min_samples": min_samples,
        "output_dir": str(output_dir) if output_dir else None,
        "excel_path": str(excel) if excel else None,
    }
    # Flags only override the file when set
    if keep_negative:
        overrides["drop_negative"] = False
    if remove_zeros:
        overrides["remove_zeros"] = True
    if clip_outliers:
        overrides["clip_outliers"] = True
    cfg = base.merged(**overrides)

    result = run_analysis(cfg)
    sample = result.sample
    typer.echo(
        f"{sample.name}: {len(sample)} valid readings "
        f"({sample.n_missing} missing, {sample.n_negative} negative dropped)"
    )
    typer.echo(format_ranking(result.ranking))

    if cfg.output_dir:
        written = render_figures(result, cfg.output_dir, top_k=cfg.top_k)
        typer.echo(f"Wrote {len(written)} plots to {cfg.output_dir}")
    if cfg.excel_path:
        typer.echo(f"Wrote Excel report to {export_excel(result, cfg.excel_path)}")


@app.command()
def curves(path: Path = typer.Argument(..., help="Well log file (.las, .csv, .xlsx)")) -> None:
    """List the curves in a well log."""
    well_log = load_well_log(path)
    if well_log.well_name:
        typer.echo(f"Well: {well_log.well_name}")
    typer.echo(list_curves(well_log).to_string(index=False))


def main() -> None:
    try:
        app(standalone_mode=False)
    except ConfigError as exc:
        log.error(str(exc))
        typer.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)
    except DataSourceError as exc:
        log.error(f"Data validation failed: {exc}")
        typer.echo(f"Error: {exc}", err=True)
        raise SystemExit(2)
    except DistributionFitError as exc:
        log.error(f"Distribution fitting failed: {exc}")
        typer.echo(f"Error: {exc}", err=True)
        raise SystemExit(3)
    except click.ClickException as exc:
        exc.show()
        raise SystemExit(exc.exit_code)
    except (KeyboardInterrupt, typer.Abort):
        log.info("Interrupted")
        raise SystemExit(130)
    except Exception:
        log.exception("Unhandled exception")
        raise SystemExit(255)


if __name__ == "__main__":
    sys.exit(main())
