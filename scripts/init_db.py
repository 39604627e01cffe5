#!/usr/bin/env python3
"""
Initialize the registry and measurement databases with sample data
"""

from device_report.core.config import Settings
from device_report.core.logging import configure_logging
from device_report.database.connection import create_data_source
from device_report.database.seed import create_sample_data


def main():
    settings = Settings()
    configure_logging(settings.log_level)
    source = create_data_source(settings)
    try:
        create_sample_data(source, days=settings.window_days)
    finally:
        source.dispose()


if __name__ == "__main__":
    main()
