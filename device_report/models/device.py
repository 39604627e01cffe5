"""
Registry models for devices and their templates
"""

from sqlalchemy import Column, ForeignKey, Integer, String
from device_report.database.connection import RegistryBase


class Template(RegistryBase):
    """Device configuration profile"""

    __tablename__ = "templates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<Template(id={self.id}, name={self.name})>"


class Device(RegistryBase):
    """Registered device; udid keys its measurement stream"""

    __tablename__ = "devices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    udid = Column(String(255), unique=True, nullable=False, index=True)
    template_id = Column(Integer, ForeignKey("templates.id"), nullable=False)

    def __repr__(self):
        return f"<Device(udid={self.udid}, name={self.name})>"
