"""
Database connections for the registry and the measurement store
"""

from dataclasses import dataclass, field

import structlog
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from device_report.core.config import Settings
from device_report.core.exceptions import DataSourceConnectionError

logger = structlog.get_logger(__name__)

# Declarative bases, one per database
RegistryBase = declarative_base()
MeasurementBase = declarative_base()


def make_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine; in-memory sqlite shares one connection across threads"""
    if url.startswith("sqlite") and (":memory:" in url or url.rstrip("/") == "sqlite:"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo,
        )
    return create_engine(url, pool_pre_ping=True, pool_recycle=300, echo=echo)


@dataclass
class DataSource:
    """Explicit handle to both databases, passed into every query function"""

    registry: Engine
    measurements: Engine
    _registry_sessions: sessionmaker = field(init=False, repr=False)
    _measurement_sessions: sessionmaker = field(init=False, repr=False)

    def __post_init__(self):
        self._registry_sessions = sessionmaker(autocommit=False, autoflush=False, bind=self.registry)
        self._measurement_sessions = sessionmaker(autocommit=False, autoflush=False, bind=self.measurements)

    def registry_session(self) -> Session:
        return self._registry_sessions()

    def measurement_session(self) -> Session:
        return self._measurement_sessions()

    def dispose(self) -> None:
        self.registry.dispose()
        self.measurements.dispose()


def create_data_source(settings: Settings) -> DataSource:
    """Build engines for the registry and measurement databases"""
    return DataSource(
        registry=make_engine(settings.registry_database_url, echo=settings.db_echo),
        measurements=make_engine(settings.measurements_database_url, echo=settings.db_echo),
    )


def check_connection(source: DataSource) -> None:
    """Run a trivial query against both databases.

    Raises:
        DataSourceConnectionError: If either database cannot be reached
    """
    for name, engine in (("registry", source.registry), ("measurements", source.measurements)):
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error("Database connection failed", database=name, error=str(e))
            raise DataSourceConnectionError(f"Cannot connect to {name} database: {e}") from e
        logger.info("Database connection OK", database=name)


def init_database(source: DataSource) -> None:
    """Create registry and measurement tables"""
    # Import all models to ensure they are registered
    from device_report.models import device, measurement  # noqa

    RegistryBase.metadata.create_all(bind=source.registry)
    MeasurementBase.metadata.create_all(bind=source.measurements)
    logger.info("Database tables created successfully")
