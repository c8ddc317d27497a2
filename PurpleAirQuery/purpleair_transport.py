"""PurpleAir local JSON endpoint transport implementation."""
import logging
from typing import Any, Dict

import requests

from sensor_transport import SensorTransportBase, TransportError, DecodeError


class HttpStatusTransport(SensorTransportBase):
    """
    Transport reading the live status document from a sensor on the LAN.

    The device serves one unauthenticated JSON document at
    http://<address>/json?live=true; "live" asks for the most recent
    sample rather than the two minute average.
    """

    STATUS_PATH = "/json?live=true"

    def __init__(self, address: str, timeout: float = 10):
        """
        Initialize the transport.

        Args:
            address: Network address of the sensor, host or host:port
            timeout: HTTP request timeout in seconds
        """
        self.address = address
        self.timeout = timeout

    @property
    def url(self) -> str:
        return f"http://{self.address}{self.STATUS_PATH}"

    def fetch_status(self) -> Dict[str, Any]:
        """
        Fetch the live status document from the sensor.

        Returns:
            dict: Decoded JSON object

        Raises:
            TransportError: If the request fails or the status is not 2xx
            DecodeError: If the body is not a JSON object
        """
        try:
            logging.debug(f"Requesting sensor status: {self.url}")
            response = requests.get(self.url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logging.debug(f"Network error reaching {self.address}: {e}")
            raise TransportError(f"Network error: {str(e)}") from e

        logging.debug(f"Sensor response status: {response.status_code}")
        if not response.ok:
            raise TransportError(
                f"HTTP {response.status_code} from {self.address}: {response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(f"Failed to parse response: {str(e)}") from e

        if not isinstance(data, dict):
            raise DecodeError(f"Expected a JSON object, got {type(data).__name__}")
        logging.debug(f"Sensor response keys: {len(data)}")
        return data
