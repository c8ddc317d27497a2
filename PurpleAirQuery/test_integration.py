"""Integration tests - can optionally hit a real sensor (disabled by default)."""
import os
import pytest
from purpleair_transport import HttpStatusTransport
from sensor_cache import Sensor


@pytest.mark.skipif(
    not os.environ.get("PURPLEAIR_SENSOR"),
    reason="PURPLEAIR_SENSOR not set - skipping integration test"
)
def test_purpleair_integration():
    """
    Integration test that queries a real sensor on the local network.

    Set PURPLEAIR_SENSOR to the sensor's address to run this test.
    """
    transport = HttpStatusTransport(os.environ["PURPLEAIR_SENSOR"])

    doc = transport.fetch_status()

    assert "current_temp_f" in doc
    assert "pm2.5_aqi" in doc


@pytest.mark.skipif(
    not os.environ.get("PURPLEAIR_SENSOR"),
    reason="PURPLEAIR_SENSOR not set - skipping integration test"
)
def test_sensor_integration():
    """Refresh a real sensor and read calibrated values."""
    sensor = Sensor(os.environ["PURPLEAIR_SENSOR"], coefficients=[-8.9037, 1.0441])

    snapshot = sensor.refresh()

    assert sensor.temperature() == pytest.approx(-8.9037 + 1.0441 * snapshot.raw_temp_f)
    assert 0 <= sensor.humidity() <= 100
    assert sensor.pressure() > 0
