"""
Device health report - command line entry point
"""

import argparse
from typing import List, Optional

import structlog
from pydantic import ValidationError

from device_report.core.config import Settings
from device_report.core.exceptions import ReportError
from device_report.core.logging import configure_logging
from device_report.reporting.report import generate_report

logger = structlog.get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Device data-quality report")
    p.add_argument("--filter", dest="name_pattern", help="SQL LIKE pattern for device names, e.g. 'Station%%'")
    p.add_argument("--days", type=int, dest="window_days", help="trailing window size in days")
    p.add_argument("--output-dir", help="directory for the report file")
    p.add_argument("--timeout-ms", type=int, dest="batch_timeout_ms", help="wall-clock budget for the whole batch")
    p.add_argument("--no-mail", action="store_true", help="write the report without mailing it")
    p.add_argument("--log-level", help="logging level (default from LOG_LEVEL)")
    return p.parse_args(argv)


def load_settings(args: argparse.Namespace) -> Settings:
    """Environment settings with command line overrides applied"""
    overrides = {
        "device_name_pattern": args.name_pattern,
        "window_days": args.window_days,
        "output_dir": args.output_dir,
        "batch_timeout_ms": args.batch_timeout_ms,
        "log_level": args.log_level,
    }
    return Settings(**{key: value for key, value in overrides.items() if value is not None})


def main(argv: Optional[List[str]] = None) -> int:
    """Run the report job; returns the process exit code"""
    args = parse_args(argv)
    try:
        settings = load_settings(args)
    except ValidationError as e:
        configure_logging("INFO")
        logger.error("Invalid configuration", error=str(e))
        return 1

    configure_logging(settings.log_level)
    logger.info("Starting device report", window_days=settings.window_days)

    try:
        result = generate_report(settings, send_mail=settings.mail_enabled and not args.no_mail)
    except ReportError as e:
        logger.error("Report failed", error_type=type(e).__name__, udid=getattr(e, "udid", None), error=str(e))
        return 1

    if result.mail_error:
        logger.warning("Report written without mail delivery", path=str(result.path))
    logger.info("Device report completed successfully", path=str(result.path), devices=len(result.rows))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
