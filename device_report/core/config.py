"""
Configuration settings for the device health report
"""

from pydantic import Field
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Report job settings"""

    # Database server (registry and measurement store share credentials)
    db_host: str = "localhost"
    db_port: str = "5432"
    db_user: str = "report_user"
    db_password: str = "report_password"
    db_echo: bool = False

    # Registry database (devices, templates)
    registry_db_name: str = "registry"
    registry_database_url: str = ""

    # Measurement store
    measurements_db_name: str = "measurements"
    measurements_database_url: str = ""

    # Report
    window_days: int = Field(7, ge=1)
    status_threshold: float = Field(0.95, gt=0, le=1)
    batch_timeout_ms: int = Field(60000, gt=0)
    max_concurrency: int = Field(10, ge=1)
    output_dir: str = "data"
    delimiter: str = "\t"
    device_name_pattern: Optional[str] = None

    # Mail
    mail_enabled: bool = False
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_starttls: bool = True
    smtp_timeout: int = 30
    mail_from: str = "reports@localhost"
    mail_to: str = ""
    mail_subject: str = "Device health report"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Build database urls from components unless given explicitly
        if not self.registry_database_url:
            self.registry_database_url = self._build_url(self.registry_db_name)
        if not self.measurements_database_url:
            self.measurements_database_url = self._build_url(self.measurements_db_name)

    def _build_url(self, db_name: str) -> str:
        return f"postgresql+psycopg2://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{db_name}"

    @property
    def mail_recipients(self) -> List[str]:
        return [address.strip() for address in self.mail_to.split(",") if address.strip()]

    @property
    def batch_timeout_seconds(self) -> float:
        return self.batch_timeout_ms / 1000
