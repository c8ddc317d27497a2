"""Tests for sensor_data module."""
import pytest
from sensor_data import SensorSnapshot
from sensor_transport import DecodeError


@pytest.fixture
def status_doc():
    """Trimmed /json?live=true document."""
    return {
        "SensorId": "84:f3:eb:7b:c8:ee",
        "DateTime": "2020/09/18T22:14:52z",
        "Geo": "PurpleAir-c8ee",
        "Mem": 19520,
        "place": "outside",
        "version": "6.01",
        "uptime": 5983,
        "rssi": -63,
        "current_temp_f": 80,
        "current_humidity": 38,
        "current_dewpoint_f": 52,
        "pressure": 1012.34,
        "p25aqic": "rgb(0,228,0)",
        "pm2.5_aqi": 12,
        "pm2.5_aqi_b": 14,
        "pm2_5_atm": 2.93,
    }


def test_from_status(status_doc):
    """Core readings and metadata are projected from the document."""
    snapshot = SensorSnapshot.from_status(status_doc)

    assert snapshot.raw_temp_f == 80
    assert snapshot.raw_dewpoint_f == 52
    assert snapshot.humidity == 38
    assert snapshot.pressure == 1012.34
    assert snapshot.aqi_a == 12
    assert snapshot.aqi_b == 14
    assert snapshot.sensor_id == "84:f3:eb:7b:c8:ee"
    assert snapshot.device_time == "2020/09/18T22:14:52z"
    assert snapshot.place == "outside"
    assert snapshot.uptime == 5983
    assert snapshot.rssi == -63


def test_from_status_without_metadata(status_doc):
    for key in ("SensorId", "DateTime", "place", "version", "uptime", "rssi"):
        del status_doc[key]

    snapshot = SensorSnapshot.from_status(status_doc)

    assert snapshot.sensor_id is None
    assert snapshot.uptime is None
    assert snapshot.describe_device() == "no device metadata"


def test_from_status_integral_float(status_doc):
    """JSON numbers like 80.0 still decode into integer readings."""
    status_doc["current_temp_f"] = 80.0
    status_doc["pressure"] = 1012

    snapshot = SensorSnapshot.from_status(status_doc)

    assert snapshot.raw_temp_f == 80
    assert isinstance(snapshot.raw_temp_f, int)
    assert snapshot.pressure == 1012.0


@pytest.mark.parametrize("field", [
    "current_temp_f",
    "current_dewpoint_f",
    "current_humidity",
    "pressure",
    "pm2.5_aqi",
    "pm2.5_aqi_b",
])
def test_from_status_missing_field(status_doc, field):
    del status_doc[field]

    with pytest.raises(DecodeError) as exc_info:
        SensorSnapshot.from_status(status_doc)

    assert field in str(exc_info.value)


@pytest.mark.parametrize("value", ["80", None, True, 80.5])
def test_from_status_bad_value(status_doc, value):
    status_doc["current_temp_f"] = value

    with pytest.raises(DecodeError):
        SensorSnapshot.from_status(status_doc)


def test_from_status_not_object():
    with pytest.raises(DecodeError):
        SensorSnapshot.from_status([1, 2, 3])


def test_snapshot_is_immutable(status_doc):
    snapshot = SensorSnapshot.from_status(status_doc)

    with pytest.raises(AttributeError):
        snapshot.raw_temp_f = 10


def test_describe_device(status_doc):
    snapshot = SensorSnapshot.from_status(status_doc)

    assert snapshot.describe_device() == (
        "id=84:f3:eb:7b:c8:ee version=6.01 place=outside "
        "time=2020/09/18T22:14:52z uptime=5983s rssi=-63dBm"
    )
