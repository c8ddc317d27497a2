"""Polling loop with fixed retries and optional exponential backoff."""
import enum
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from sensor_cache import Sensor
from sensor_data import SensorReading
from sensor_transport import FetchError


class PollState(enum.Enum):
    POLLING = "polling"
    RETRYING = "retrying"
    BACKOFF = "backoff"
    DONE = "done"
    FAILED = "failed"
    STOPPED = "stopped"


@dataclass(frozen=True)
class RetryPolicy:
    """
    How the poller reacts to failed refreshes.

    Failures first consume `retries` fixed delays of `retry_delay`. Once
    those are used up the poller either gives up, or with `backoff` keeps
    trying forever, starting at `backoff_initial` and doubling each time.
    Both counters reset after a successful refresh.
    """
    retries: int = 3
    retry_delay: float = 1.0
    backoff: bool = False
    backoff_initial: float = 1.0
    poll_interval: float = 0.0  # 0 means read once and stop


class PollingError(Exception):
    """Exception raised when retries are exhausted and backoff is disabled."""

    def __init__(self, address: str, error: FetchError, attempts: int):
        super().__init__(f"failed to refresh {address}: {error} (after {attempts} attempts)")
        self.address = address
        self.error = error
        self.attempts = attempts


class Poller:
    """Drives Sensor.refresh() according to a RetryPolicy."""

    def __init__(
        self,
        sensor: Sensor,
        policy: RetryPolicy,
        on_reading: Optional[Callable[[SensorReading], None]] = None,
        sleep: Optional[Callable[[float], Optional[bool]]] = None,
        max_polls: Optional[int] = None,
    ):
        """
        Args:
            sensor: Sensor to refresh
            policy: Retry and polling settings
            on_reading: Called with each successful reading
            sleep: Replacement for the interruptible default sleep. May return
                False to signal the wait was interrupted.
            max_polls: Stop after this many successful readings
        """
        self.sensor = sensor
        self.policy = policy
        self.on_reading = on_reading
        self.max_polls = max_polls

        self._stop_event = threading.Event()
        self._sleep = sleep or self._wait

        self.state = PollState.POLLING
        self.polls = 0
        self.failures = 0  # consecutive failed refreshes
        self.retries_left = policy.retries
        self.backoff_delay: Optional[float] = None

    def _wait(self, seconds: float) -> bool:
        return not self._stop_event.wait(seconds)

    def stop(self) -> None:
        """Ask the loop to finish; interrupts a pending sleep."""
        self._stop_event.set()

    def on_failure(self) -> Tuple[PollState, Optional[float]]:
        """
        Advance the retry state machine after a failed refresh.

        Returns:
            Tuple of (next state, delay before the next attempt). The delay
            is None when the next state is FAILED.
        """
        self.failures += 1
        if self.retries_left > 0:
            self.retries_left -= 1
            return PollState.RETRYING, self.policy.retry_delay
        if not self.policy.backoff:
            return PollState.FAILED, None
        if self.backoff_delay is None:
            self.backoff_delay = self.policy.backoff_initial
        else:
            self.backoff_delay *= 2
        return PollState.BACKOFF, self.backoff_delay

    def on_success(self) -> PollState:
        """Reset the failure counters after a successful refresh."""
        self.failures = 0
        self.retries_left = self.policy.retries
        self.backoff_delay = None
        self.polls += 1
        if self.policy.poll_interval <= 0:
            return PollState.DONE
        if self.max_polls is not None and self.polls >= self.max_polls:
            return PollState.DONE
        return PollState.POLLING

    def _pause(self, seconds: float) -> bool:
        if self._sleep(seconds) is False:
            logging.info(f"Sleep of {seconds}s interrupted, stopping poller for {self.sensor.address}")
            self.state = PollState.STOPPED
            return False
        return True

    def run(self) -> PollState:
        """
        Poll until done, stopped or failed.

        Returns:
            PollState: DONE or STOPPED

        Raises:
            PollingError: If retries are exhausted and backoff is disabled
        """
        while True:
            if self._stop_event.is_set():
                self.state = PollState.STOPPED
                return self.state

            try:
                snapshot = self.sensor.refresh()
            except FetchError as err:
                self.state, delay = self.on_failure()
                if self.state is PollState.FAILED:
                    logging.error(f"Refresh of {self.sensor.address} failed: {err}; no retries left")
                    raise PollingError(self.sensor.address, err, self.failures) from err
                logging.warning(
                    "Refresh of %s failed (%s %d): %s; retrying in %.1fs",
                    self.sensor.address,
                    self.state.value,
                    self.failures,
                    err,
                    delay,
                )
                if not self._pause(delay):
                    return self.state
                continue

            if self.polls == 0:
                logging.info(f"Connected to sensor {self.sensor.address}: {snapshot.describe_device()}")
            self.state = self.on_success()
            if self.on_reading is not None:
                self.on_reading(self.sensor.reading())
            if self.state is PollState.DONE:
                return self.state
            if not self._pause(self.policy.poll_interval):
                return self.state
