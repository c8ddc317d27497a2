"""Sensor transport abstraction - allows swapping the HTTP fetch for test doubles."""
from abc import ABC, abstractmethod
from typing import Any, Dict


class FetchError(Exception):
    """Exception raised when a sensor status could not be fetched or decoded."""
    pass


class TransportError(FetchError):
    """The device could not be reached or answered with an HTTP error."""
    pass


class DecodeError(FetchError):
    """The device answered, but the body is not the expected JSON document."""
    pass


class SensorTransportBase(ABC):
    """Abstract base class for fetching raw sensor status documents."""

    @abstractmethod
    def fetch_status(self) -> Dict[str, Any]:
        """
        Fetch the live status document from the device.

        Returns:
            dict: Decoded JSON object as reported by the device

        Raises:
            TransportError: If the device cannot be reached
            DecodeError: If the response body is not a JSON object
        """
        pass
