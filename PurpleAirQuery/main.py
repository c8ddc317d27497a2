"""Query a PurpleAir sensor on the local network and log its measurements."""
import argparse
import logging
import signal
import sys
from typing import List, Optional

from calibration import CalibrationError, parse_coefficients
from config import SensorConfig, load_config, parse_bool, parse_duration
from poller import Poller, PollingError, RetryPolicy
from sensor_cache import Sensor
from sensor_data import SensorReading


def _duration(text: str) -> float:
    try:
        return parse_duration(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _boolean(text: str) -> bool:
    try:
        return parse_bool(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def parse_args(argv: Optional[List[str]] = None, config: Optional[SensorConfig] = None) -> argparse.Namespace:
    config = config or load_config()
    parser = argparse.ArgumentParser("PurpleAir local sensor query")
    parser.add_argument("--sensor", default=config.sensor, help="local network address of sensor")
    parser.add_argument("--poll", type=_duration, default=config.poll,
                        help="non-zero polls with this interval (e.g. 30s, 5m)")
    parser.add_argument("--retry", type=int, default=config.retry,
                        help="number of times to retry a request, once a second")
    parser.add_argument("--backoff", type=_boolean, nargs="?", const=True, default=config.backoff,
                        help="after retries run out, keep trying with exponential backoff")
    parser.add_argument("--coef", default=config.coef,
                        help="comma separated coefficients for temperature conversion")
    parser.add_argument("--timeout", type=_duration, default=config.timeout, help="HTTP timeout")
    parser.add_argument("--count", type=int, default=None, help="stop after this many readings")
    parser.add_argument("--log-file", default=None)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    if not args.sensor:
        parser.error("--sensor <net-address>, is required")
    if args.retry < 0:
        parser.error("--retry must not be negative")
    if args.count is not None and args.count < 1:
        parser.error("--count must be at least 1")
    return args


def setup_logging(log_file: Optional[str], verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def format_reading(reading: SensorReading) -> str:
    return (
        f"temp={reading.temp_f:.1f}F({reading.temp_c:.1f}C) raw={reading.raw_temp_f:g}F "
        f"dewPt={reading.dewpoint_f:.1f}F({reading.dewpoint_c:.1f}C) raw={reading.raw_dewpoint_f:g}F "
        f"hum={reading.humidity:g}% pres={reading.pressure:.1f}hPa "
        f"AQIab={reading.aqi_a:.1f},{reading.aqi_b:.1f}"
    )


def log_reading(reading: SensorReading) -> None:
    logging.info(format_reading(reading))


def build_poller(args: argparse.Namespace) -> Poller:
    try:
        coefficients = parse_coefficients(args.coef)
    except CalibrationError as exc:
        raise SystemExit(str(exc)) from exc

    sensor = Sensor(args.sensor, coefficients=coefficients, timeout=args.timeout)
    policy = RetryPolicy(retries=args.retry, backoff=args.backoff, poll_interval=args.poll)
    logging.info(
        "Sensor %s: poll=%ss retry=%s backoff=%s coef=%s",
        args.sensor,
        args.poll,
        args.retry,
        args.backoff,
        coefficients,
    )
    return Poller(sensor, policy, on_reading=log_reading, max_polls=args.count)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    poller = build_poller(args)

    def signal_handler(signum, frame):
        logging.info("Received signal %s, shutting down", signum)
        poller.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        state = poller.run()
    except PollingError as err:
        logging.error("%s", err)
        raise SystemExit(1) from err
    logging.info("Poller finished: %s", state.value)


if __name__ == "__main__":
    main()
