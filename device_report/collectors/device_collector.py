"""
Device directory reader for the registry database
"""

from typing import List, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError

from device_report.core.exceptions import QueryError
from device_report.database.connection import DataSource
from device_report.models.device import Device, Template
from device_report.schemas.device import DeviceInfo

logger = structlog.get_logger(__name__)


def list_devices(source: DataSource, name_pattern: Optional[str] = None) -> List[DeviceInfo]:
    """
    List registered devices with their template, ordered by name.

    Args:
        source: Data source handle
        name_pattern: Optional SQL LIKE pattern matched against the device name

    Returns:
        Devices in name order

    Raises:
        QueryError: If the registry query fails
    """
    session = source.registry_session()
    try:
        query = (
            session.query(Device.name, Device.udid, Template.name.label("template_name"))
            .join(Template, Template.id == Device.template_id)
        )
        if name_pattern:
            query = query.filter(Device.name.like(name_pattern))

        rows = query.order_by(Device.name.asc(), Device.udid.asc()).all()
    except SQLAlchemyError as e:
        logger.error("Failed to list devices", name_pattern=name_pattern, error=str(e))
        raise QueryError(f"Failed to list devices: {e}") from e
    finally:
        session.close()

    devices = [
        DeviceInfo(name=row.name, udid=row.udid, template_name=row.template_name)
        for row in rows
    ]
    logger.info("Devices listed", devices=len(devices), name_pattern=name_pattern)
    return devices
