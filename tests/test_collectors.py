from datetime import timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from device_report.collectors.device_collector import list_devices
from device_report.collectors.measurement_collector import get_window_stats
from device_report.core.exceptions import DataSourceConnectionError, QueryError
from device_report.database.connection import DataSource, check_connection, make_engine
from device_report.kpi.metrics import METRICS

from helpers import add_devices, add_measurements, every_five_minutes, full_reading


def test_list_devices_ordered_by_name_with_template(data_source):
    add_devices(data_source, [
        ("Station B", "WS-2", "Weather station"),
        ("Gauge A", "RG-1", "Rain gauge"),
        ("Station A", "WS-1", "Weather station"),
    ])

    devices = list_devices(data_source)

    assert [d.name for d in devices] == ["Gauge A", "Station A", "Station B"]
    assert devices[0].udid == "RG-1"
    assert devices[0].template_name == "Rain gauge"


def test_list_devices_name_pattern(data_source):
    add_devices(data_source, [
        ("Station B", "WS-2", "Weather station"),
        ("Gauge A", "RG-1", "Rain gauge"),
    ])

    devices = list_devices(data_source, "Station%")

    assert [d.udid for d in devices] == ["WS-2"]


def test_list_devices_query_failure(data_source):
    with patch.object(data_source, "registry_session") as mock_session:
        mock_session.return_value.query.side_effect = OperationalError("SELECT", {}, Exception("gone"))
        with pytest.raises(QueryError):
            list_devices(data_source)
        mock_session.return_value.close.assert_called_once()


def test_window_stats_counts_rows_inside_window(data_source, now):
    window_start = now - timedelta(days=7)
    add_measurements(data_source, every_five_minutes("WS-1", now, 100))
    # Before the window, after now, and another device
    add_measurements(data_source, [
        full_reading("WS-1", window_start - timedelta(minutes=1)),
        full_reading("WS-1", now + timedelta(hours=1)),
        full_reading("WS-1", now + timedelta(days=3)),
        full_reading("WS-2", now - timedelta(minutes=1)),
    ])

    stats = get_window_stats(data_source, "WS-1", window_start, now)

    assert stats.row_count == 100
    assert stats.future_row_count == 2
    assert stats.valid_counts == {metric.key: 100 for metric in METRICS}
    assert stats.last_timestamp.replace(tzinfo=None) == now.replace(tzinfo=None)
    assert stats.last_battery_level == 4100.0


def test_window_stats_includes_window_edges(data_source, now):
    window_start = now - timedelta(days=7)
    add_measurements(data_source, [
        full_reading("WS-1", window_start),
        full_reading("WS-1", now),
    ])

    stats = get_window_stats(data_source, "WS-1", window_start, now)

    assert stats.row_count == 2
    assert stats.future_row_count == 0


def test_window_stats_sanity_bounds(data_source, now):
    window_start = now - timedelta(days=7)
    add_measurements(data_source, [
        # At the bound: only humidity is inclusive
        full_reading(
            "WS-1", now - timedelta(minutes=5),
            temperature=300, humidity=100, rainfall=300, wind_direction=360, wind_speed=1000,
            gust_direction=360, gust_speed=1000, pressure=2000, battery=5000,
        ),
        # Missing values never count
        full_reading(
            "WS-1", now - timedelta(minutes=10),
            temperature=None, humidity=None, rainfall=None, wind_direction=None, wind_speed=None,
            gust_direction=None, gust_speed=None, pressure=None, battery=None,
        ),
        full_reading("WS-1", now - timedelta(minutes=15), humidity=100.5, pressure=1999.9),
    ])

    stats = get_window_stats(data_source, "WS-1", window_start, now)

    assert stats.row_count == 3
    assert stats.valid_counts["humidity"] == 1
    assert stats.valid_counts["pressure"] == 1
    for key in ("temperature", "rainfall", "wind_direction", "wind_speed",
                "gust_direction", "gust_speed", "battery"):
        assert stats.valid_counts[key] == 1, key


def test_window_stats_last_reading_before_window(data_source, now):
    window_start = now - timedelta(days=7)
    add_measurements(data_source, [
        full_reading("WS-1", now - timedelta(days=10), battery=3300),
        full_reading("WS-1", now - timedelta(days=12), battery=3500),
        full_reading("WS-1", now + timedelta(minutes=5), battery=4200),
    ])

    stats = get_window_stats(data_source, "WS-1", window_start, now)

    assert stats.row_count == 0
    assert stats.future_row_count == 1
    assert stats.last_battery_level == 3300
    assert stats.last_timestamp.replace(tzinfo=None) == (now - timedelta(days=10)).replace(tzinfo=None)


def test_window_stats_unknown_stream_is_empty(data_source, now):
    stats = get_window_stats(data_source, "UNKNOWN", now - timedelta(days=7), now)

    assert stats.row_count == 0
    assert stats.last_timestamp is None
    assert stats.last_battery_level is None
    assert all(count == 0 for count in stats.valid_counts.values())


def test_window_stats_query_failure_is_tagged(data_source, now):
    with patch.object(data_source, "measurement_session") as mock_session:
        mock_session.return_value.query.side_effect = OperationalError("SELECT", {}, Exception("lost"))
        with pytest.raises(QueryError) as exc_info:
            get_window_stats(data_source, "WS-9", now - timedelta(days=7), now)

    assert exc_info.value.udid == "WS-9"
    assert "WS-9" in str(exc_info.value)


def test_check_connection_failure(tmp_path):
    source = DataSource(
        registry=make_engine(f"sqlite:///{tmp_path / 'missing' / 'registry.db'}"),
        measurements=make_engine("sqlite:///:memory:"),
    )
    try:
        with pytest.raises(DataSourceConnectionError):
            check_connection(source)
    finally:
        source.dispose()


def test_check_connection_ok(data_source):
    check_connection(data_source)
