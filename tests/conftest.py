import pytest

from device_report.core.config import Settings

from helpers import NOW, make_memory_source


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def data_source():
    source = make_memory_source()
    yield source
    source.dispose()


@pytest.fixture
def report_settings(tmp_path):
    return Settings(
        registry_database_url="sqlite:///:memory:",
        measurements_database_url="sqlite:///:memory:",
        output_dir=str(tmp_path),
        max_concurrency=1,
        mail_enabled=False,
    )
