"""
Report orchestration.

Lists the registry's devices, computes window statistics for every device
concurrently, classifies each device and writes the spreadsheet. The batch
is fail-fast: the first per-device failure cancels the remaining work and
no report is written. A single wall-clock timeout covers the whole batch.
"""

import asyncio
import os
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import structlog

from device_report.collectors.device_collector import list_devices
from device_report.collectors.measurement_collector import get_window_stats
from device_report.core.config import Settings
from device_report.core.exceptions import BatchTimeoutError, MailError
from device_report.database.connection import DataSource, check_connection, create_data_source
from device_report.kpi.metrics import MEASUREMENTS, METRICS
from device_report.kpi.statistics import validity_percentages
from device_report.kpi.status import as_utc, classify_status
from device_report.reporting.mailer import send_report
from device_report.reporting.output import build_output_path, write_report
from device_report.reporting.spreadsheet import create_spreadsheet
from device_report.schemas.device import DeviceInfo
from device_report.schemas.stats import MeasurementWindowStats

logger = structlog.get_logger(__name__)

ReportRow = Dict[str, Any]

LAST_SEEN_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class ReportResult:
    """Outcome of a report run"""
    path: Path
    rows: List[ReportRow]
    mail_sent: bool = False
    mail_error: Optional[str] = None
    status_counts: Dict[str, int] = field(default_factory=dict)


def format_last_seen(last_timestamp: Optional[datetime]) -> str:
    if last_timestamp is None:
        return ""
    return as_utc(last_timestamp).strftime(LAST_SEEN_FORMAT)


def build_report_row(
    device: DeviceInfo,
    stats: MeasurementWindowStats,
    window_start: datetime,
    window_days: int,
    threshold: float,
) -> ReportRow:
    """One spreadsheet row for a device"""
    percentages = validity_percentages(stats, window_days)
    status = classify_status(
        percentages,
        stats.last_timestamp,
        stats.last_battery_level,
        window_start,
        threshold=threshold,
    )

    row = {
        "Device name": device.name,
        "UDID": device.udid,
        "Template": device.template_name,
        "Last seen": format_last_seen(stats.last_timestamp),
        "Measurements": percentages[MEASUREMENTS],
    }
    for metric in METRICS:
        row[metric.column_title] = percentages[metric.key]
    row["Future rows"] = stats.future_row_count
    row["Status"] = status
    return row


async def collect_report_rows(
    source: DataSource,
    devices: Sequence[DeviceInfo],
    now: datetime,
    settings: Settings,
) -> List[ReportRow]:
    """
    Compute a report row for every device, in directory order.

    Devices are queried concurrently, at most ``settings.max_concurrency``
    at a time, each query running in a worker thread of a pool owned by
    this batch.
    The pool is shut down without waiting, so a hung query cannot hold the
    caller past the timeout.

    Raises:
        QueryError: The first per-device failure; remaining tasks are cancelled
        BatchTimeoutError: If the batch exceeds ``settings.batch_timeout_ms``
    """
    window_start = now - timedelta(days=settings.window_days)
    semaphore = asyncio.Semaphore(settings.max_concurrency)
    rows: List[Optional[ReportRow]] = [None] * len(devices)
    loop = asyncio.get_running_loop()
    # Dedicated pool, shut down without waiting for in-flight queries
    executor = ThreadPoolExecutor(max_workers=settings.max_concurrency, thread_name_prefix="window-stats")

    async def process(index: int, device: DeviceInfo) -> None:
        async with semaphore:
            stats = await loop.run_in_executor(
                executor, get_window_stats, source, device.udid, window_start, now
            )
        rows[index] = build_report_row(
            device, stats, window_start, settings.window_days, settings.status_threshold
        )

    try:
        async with asyncio.timeout(settings.batch_timeout_seconds):
            async with asyncio.TaskGroup() as group:
                for index, device in enumerate(devices):
                    group.create_task(process(index, device))
    except TimeoutError as e:
        logger.error("Batch timed out", timeout_ms=settings.batch_timeout_ms, devices=len(devices))
        raise BatchTimeoutError(settings.batch_timeout_ms) from e
    except ExceptionGroup as group_error:
        first = group_error.exceptions[0]
        logger.error(
            "Batch aborted",
            udid=getattr(first, "udid", None),
            error=str(first),
            failures=len(group_error.exceptions),
        )
        raise first from None
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    return rows


def build_report_rows(
    source: DataSource,
    devices: Sequence[DeviceInfo],
    now: datetime,
    settings: Settings,
) -> List[ReportRow]:
    """Synchronous wrapper around :func:`collect_report_rows`"""
    return asyncio.run(collect_report_rows(source, devices, now, settings))


def summarize_statuses(rows: Sequence[ReportRow]) -> Dict[str, int]:
    """Count devices per status category, e.g. "Problems with" for any metric list"""
    return dict(Counter(str(row.get("Status", "")).split(":")[0] for row in rows))


def generate_report(
    settings: Settings,
    source: Optional[DataSource] = None,
    now: Optional[datetime] = None,
    send_mail: Optional[bool] = None,
) -> ReportResult:
    """
    Run the whole report job and return where it was written.

    A data source is created from ``settings`` when none is given and is
    disposed before returning. Mail failures are logged and recorded on the
    result; every other failure propagates and no file is written.
    """
    now = as_utc(now) if now else datetime.now(timezone.utc)
    send_mail = settings.mail_enabled if send_mail is None else send_mail
    output_path = build_output_path(settings.output_dir, now)
    logger.info("Output file", path=os.path.relpath(output_path))

    owns_source = source is None
    if owns_source:
        source = create_data_source(settings)

    try:
        check_connection(source)
        devices = list_devices(source, settings.device_name_pattern)
        logger.info(
            "Computing device statistics",
            devices=len(devices),
            window_days=settings.window_days,
            max_concurrency=settings.max_concurrency,
        )
        rows = build_report_rows(source, devices, now, settings)
    finally:
        if owns_source:
            source.dispose()

    content = create_spreadsheet(rows, delimiter=settings.delimiter)
    write_report(output_path, content)

    result = ReportResult(path=output_path, rows=rows, status_counts=summarize_statuses(rows))
    logger.info("Report generated", devices=len(rows), statuses=result.status_counts)

    if send_mail:
        try:
            send_report(settings, output_path)
            result.mail_sent = True
        except MailError as e:
            logger.error("Report written but mail delivery failed", path=str(output_path), error=str(e))
            result.mail_error = str(e)

    return result
