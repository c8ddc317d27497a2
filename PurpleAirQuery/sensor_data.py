"""Sensor domain model - pure data structures independent of the transport."""
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from sensor_transport import DecodeError


# Device field names for the values we care about. The live document carries
# dozens more (memory stats, wifi state, particle counts) which are ignored.
TEMP_FIELD = "current_temp_f"
DEWPOINT_FIELD = "current_dewpoint_f"
HUMIDITY_FIELD = "current_humidity"
PRESSURE_FIELD = "pressure"
AQI_A_FIELD = "pm2.5_aqi"
AQI_B_FIELD = "pm2.5_aqi_b"


def _int_field(doc: Mapping[str, Any], name: str) -> int:
    if name not in doc:
        raise DecodeError(f"Status missing '{name}' field")
    value = doc[name]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"Field '{name}' is not a number: {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise DecodeError(f"Field '{name}' is not an integer: {value!r}")
        value = int(value)
    return value


def _float_field(doc: Mapping[str, Any], name: str) -> float:
    if name not in doc:
        raise DecodeError(f"Status missing '{name}' field")
    value = doc[name]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"Field '{name}' is not a number: {value!r}")
    return float(value)


def _optional(doc: Mapping[str, Any], name: str, kind: type):
    value = doc.get(name)
    if isinstance(value, bool) or not isinstance(value, kind):
        return None
    return value


@dataclass(frozen=True)
class SensorSnapshot:
    """One complete set of raw readings captured by a single fetch."""
    raw_temp_f: int
    raw_dewpoint_f: int
    humidity: int  # percent
    pressure: float  # hPa
    aqi_a: int  # PM2.5 AQI, particle counter A
    aqi_b: int  # PM2.5 AQI, particle counter B

    # Device metadata, reported when the firmware includes it
    sensor_id: Optional[str] = None
    device_time: Optional[str] = None  # e.g. "2020/09/18T22:14:52z"
    place: Optional[str] = None  # "inside" or "outside"
    version: Optional[str] = None
    uptime: Optional[int] = None  # seconds
    rssi: Optional[int] = None  # dBm

    @classmethod
    def from_status(cls, doc: Any) -> "SensorSnapshot":
        """
        Project a decoded /json?live=true document onto a snapshot.

        Args:
            doc: Decoded JSON body

        Returns:
            SensorSnapshot: The projected readings

        Raises:
            DecodeError: If the document is not an object or a reading is missing
        """
        if not isinstance(doc, Mapping):
            raise DecodeError(f"Status is not a JSON object: {type(doc).__name__}")
        return cls(
            raw_temp_f=_int_field(doc, TEMP_FIELD),
            raw_dewpoint_f=_int_field(doc, DEWPOINT_FIELD),
            humidity=_int_field(doc, HUMIDITY_FIELD),
            pressure=_float_field(doc, PRESSURE_FIELD),
            aqi_a=_int_field(doc, AQI_A_FIELD),
            aqi_b=_int_field(doc, AQI_B_FIELD),
            sensor_id=_optional(doc, "SensorId", str),
            device_time=_optional(doc, "DateTime", str),
            place=_optional(doc, "place", str),
            version=_optional(doc, "version", str),
            uptime=_optional(doc, "uptime", int),
            rssi=_optional(doc, "rssi", int),
        )

    def describe_device(self) -> str:
        """Summary of the device metadata, e.g. "id=84:f3:eb:7b:c8:ee version=6.01"."""
        fields = [
            ("id", self.sensor_id),
            ("version", self.version),
            ("place", self.place),
            ("time", self.device_time),
            ("uptime", None if self.uptime is None else f"{self.uptime}s"),
            ("rssi", None if self.rssi is None else f"{self.rssi}dBm"),
        ]
        parts = [f"{name}={value}" for name, value in fields if value is not None]
        return " ".join(parts) or "no device metadata"


@dataclass(frozen=True)
class SensorReading:
    """Derived metrics computed from one snapshot and one set of coefficients."""
    raw_temp_f: float
    temp_f: float
    temp_c: float
    raw_dewpoint_f: float
    dewpoint_f: float
    dewpoint_c: float
    humidity: float
    pressure: float
    aqi_a: float
    aqi_b: float
