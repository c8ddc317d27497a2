"""Cached sensor state with calibrated accessors."""
import logging
import threading
from typing import Optional, Sequence, Tuple

from calibration import apply_calibration, fahrenheit_to_celsius
from purpleair_transport import HttpStatusTransport
from sensor_data import SensorReading, SensorSnapshot
from sensor_transport import SensorTransportBase


class NoDataError(RuntimeError):
    """Exception raised when a reading is requested before any successful refresh."""
    pass


class Sensor:
    """
    A cached summary of one sensor's state.

    Holds the last successfully decoded snapshot and the temperature
    calibration coefficients. Each refresh replaces the snapshot whole;
    readers on other threads see either the old or the new one, never
    a mix of both.
    """

    def __init__(
        self,
        address: str,
        transport: Optional[SensorTransportBase] = None,
        coefficients: Sequence[float] = (),
        timeout: float = 10,
    ):
        """
        Register a sensor. This does not contact the device; use refresh().

        Args:
            address: Network address of the sensor, host or host:port
            transport: Transport to fetch status with (default: HTTP)
            coefficients: Temperature calibration, lowest order first
            timeout: HTTP timeout used when building the default transport
        """
        self.address = address
        self.transport = transport or HttpStatusTransport(address, timeout=timeout)

        self._lock = threading.Lock()
        self._snapshot: Optional[SensorSnapshot] = None
        self._coefficients: Tuple[float, ...] = tuple(coefficients)

    def set_calibration(self, coefficients: Sequence[float]) -> None:
        """
        Set the polynomial used to convert raw temperatures to calibrated values.

        Applied every time temperature() or dew_point() is called, so it also
        affects the snapshot already cached. Empty means no adjustment.
        """
        coefficients = tuple(coefficients)
        with self._lock:
            self._coefficients = coefficients
        logging.debug(f"Calibration for {self.address} set to {coefficients}")

    @property
    def coefficients(self) -> Tuple[float, ...]:
        with self._lock:
            return self._coefficients

    def refresh(self) -> SensorSnapshot:
        """
        Fetch and install a new snapshot.

        The fetch runs without holding the lock. On failure the previous
        snapshot stays in place.

        Returns:
            SensorSnapshot: The newly installed snapshot

        Raises:
            FetchError: TransportError or DecodeError from the fetch
        """
        doc = self.transport.fetch_status()
        snapshot = SensorSnapshot.from_status(doc)
        with self._lock:
            self._snapshot = snapshot
        logging.debug(f"Refreshed {self.address}: {snapshot}")
        return snapshot

    def _view(self) -> Tuple[SensorSnapshot, Tuple[float, ...]]:
        with self._lock:
            snapshot, coefficients = self._snapshot, self._coefficients
        if snapshot is None:
            raise NoDataError(f"No data from sensor {self.address} yet; call refresh() first")
        return snapshot, coefficients

    def has_data(self) -> bool:
        with self._lock:
            return self._snapshot is not None

    def snapshot(self) -> SensorSnapshot:
        """Return the installed snapshot (raises NoDataError if none)."""
        return self._view()[0]

    def temperature(self) -> float:
        """
        Calibrated temperature.

        The unit depends on the calibration; with the default coefficients
        it is Fahrenheit. See fahrenheit_to_celsius for conversion.
        """
        snapshot, coefficients = self._view()
        return apply_calibration(coefficients, float(snapshot.raw_temp_f))

    def dew_point(self) -> float:
        """Calibrated dew point temperature."""
        snapshot, coefficients = self._view()
        return apply_calibration(coefficients, float(snapshot.raw_dewpoint_f))

    def humidity(self) -> float:
        """Percent humidity seen by the sensor."""
        return float(self._view()[0].humidity)

    def pressure(self) -> float:
        """Pressure in hPa."""
        return self._view()[0].pressure

    def aqi_a(self) -> float:
        """AQI (Air Quality Index) for particle counter A."""
        return float(self._view()[0].aqi_a)

    def aqi_b(self) -> float:
        """AQI (Air Quality Index) for particle counter B."""
        return float(self._view()[0].aqi_b)

    def reading(self) -> SensorReading:
        """
        All derived metrics from one snapshot and one set of coefficients.

        Returns:
            SensorReading: Consistent set of calibrated values

        Raises:
            NoDataError: If no refresh has succeeded yet
        """
        snapshot, coefficients = self._view()
        temp_f = apply_calibration(coefficients, float(snapshot.raw_temp_f))
        dewpoint_f = apply_calibration(coefficients, float(snapshot.raw_dewpoint_f))
        return SensorReading(
            raw_temp_f=float(snapshot.raw_temp_f),
            temp_f=temp_f,
            temp_c=fahrenheit_to_celsius(temp_f),
            raw_dewpoint_f=float(snapshot.raw_dewpoint_f),
            dewpoint_f=dewpoint_f,
            dewpoint_c=fahrenheit_to_celsius(dewpoint_f),
            humidity=float(snapshot.humidity),
            pressure=snapshot.pressure,
            aqi_a=float(snapshot.aqi_a),
            aqi_b=float(snapshot.aqi_b),
        )
