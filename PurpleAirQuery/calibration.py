"""Temperature calibration - pure functions for testability."""
from typing import Sequence, Tuple


# Linear fit against a digital thermometer placed next to the sensor: raw
# readings run about 9F hot and each raw F step is ~4% smaller than a real one.
DEFAULT_COEFFICIENTS: Tuple[float, ...] = (-8.9037, 1.0441)


class CalibrationError(ValueError):
    """Exception raised when calibration coefficients cannot be parsed."""
    pass


def apply_calibration(coefficients: Sequence[float], raw: float) -> float:
    """
    Expand a raw reading with polynomial coefficients.

    Evaluates c0 + c1*raw + c2*raw^2 + ... with coefficients ordered
    low to high. An empty sequence leaves the reading unchanged.

    Args:
        coefficients: Polynomial coefficients, lowest order first
        raw: Raw value reported by the device

    Returns:
        Calibrated value
    """
    if not coefficients:
        return raw
    total, power = 0.0, 1.0
    for coef in coefficients:
        total += coef * power
        power *= raw
    return total


def fahrenheit_to_celsius(f: float) -> float:
    """Fahrenheit to Celsius conversion."""
    return (f - 32) * 5 / 9


def celsius_to_fahrenheit(c: float) -> float:
    """Celsius to Fahrenheit conversion."""
    return 9 * c / 5 + 32


def parse_coefficients(text: str) -> Tuple[float, ...]:
    """
    Parse a comma separated list of coefficients (e.g. "-8.9037,1.0441").

    Args:
        text: Coefficients, lowest order first. Empty means no calibration.

    Returns:
        Tuple of floats

    Raises:
        CalibrationError: If any entry is not a number
    """
    if not text or not text.strip():
        return ()
    coefficients = []
    for token in text.split(","):
        try:
            coefficients.append(float(token.strip()))
        except ValueError as exc:
            raise CalibrationError(f"failed to parse {token!r} (from {text!r}): {exc}") from exc
    return tuple(coefficients)
