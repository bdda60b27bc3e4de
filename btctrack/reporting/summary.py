"""Summary table generation."""

from __future__ import annotations

from pathlib import Path
from typing import Dict

import pandas as pd

from btctrack.analysis import days_frame, lots_frame, snapshots_frame, totals_frame, windows_frame
from btctrack.engine.pipeline import PortfolioReport
from btctrack.utils.io import save_table
from btctrack.utils.logging import get_logger

logger = get_logger(__name__)


def report_tables(report: PortfolioReport) -> Dict[str, pd.DataFrame]:
    """Return every tabular view of ``report`` keyed by table name."""

    return {
        "aligned_days": days_frame(report.days),
        "snapshots": snapshots_frame(report.snapshots),
        "windows": windows_frame(report.windows),
        "lots": lots_frame(report.lots, report.currency),
        "totals": totals_frame(report.totals),
    }


def export_report(report: PortfolioReport, out_dir: Path) -> Dict[str, Path]:
    paths = {name: save_table(table, out_dir, name) for name, table in report_tables(report).items()}
    logger.info("Exported %d tables to %s", len(paths), out_dir)
    return paths


__all__ = ["report_tables", "export_report"]
