"""
Report file output
"""

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Union

import structlog

from device_report.core.exceptions import ReportWriteError

logger = structlog.get_logger(__name__)


def format_run_timestamp(run_at: datetime) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2024-05-01T12:00:00.000Z"""
    run_at = run_at.astimezone(timezone.utc)
    return run_at.strftime("%Y-%m-%dT%H:%M:%S.") + f"{run_at.microsecond // 1000:03d}Z"


def build_output_path(output_dir: Union[str, Path], run_at: datetime) -> Path:
    """Path of the report file for a run started at ``run_at``"""
    return Path(output_dir).resolve() / f"{format_run_timestamp(run_at)}.tsv"


def write_report(path: Union[str, Path], content: str) -> Path:
    """
    Write the rendered report as UTF-8, creating the directory when missing.

    Raises:
        ReportWriteError: If the file cannot be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as file:
            file.write(content)
    except OSError as e:
        logger.error("Failed to write report", path=str(path), error=str(e))
        raise ReportWriteError(f"Failed to write report to {path}: {e}", path=str(path)) from e

    logger.info("Report written", path=os.path.relpath(path), size=len(content))
    return path
