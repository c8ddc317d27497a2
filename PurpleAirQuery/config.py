"""Environment configuration - defaults for the command line flags."""
import math
import os
import re
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from calibration import DEFAULT_COEFFICIENTS

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ms|h|m|s)")
_UNIT_SECONDS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}

_TRUE = {"1", "true", "t", "yes", "y", "on"}
_FALSE = {"0", "false", "f", "no", "n", "off"}


@dataclass(frozen=True)
class SensorConfig:
    sensor: Optional[str]
    poll: float
    retry: int
    backoff: bool
    coef: str
    timeout: float


def parse_duration(text: str) -> float:
    """
    Parse a duration such as "30s", "5m", "1h30m", "250ms" or "2.5" into seconds.

    Raises:
        ValueError: If the text is not a non-negative duration
    """
    candidate = text.strip()
    if not candidate:
        raise ValueError("empty duration")
    try:
        seconds = float(candidate)
    except ValueError:
        pos = 0
        seconds = 0.0
        for match in _DURATION_PART.finditer(candidate):
            if match.start() != pos:
                break
            seconds += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
            pos = match.end()
        if pos == 0 or pos != len(candidate):
            raise ValueError(f"invalid duration {text!r}")
    if not math.isfinite(seconds):
        raise ValueError(f"invalid duration {text!r}")
    if seconds < 0:
        raise ValueError(f"negative duration {text!r}")
    return seconds


def parse_bool(text: str) -> bool:
    candidate = text.strip().lower()
    if candidate in _TRUE:
        return True
    if candidate in _FALSE:
        return False
    raise ValueError(f"invalid boolean {text!r}")


def _read_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip()


def load_config() -> SensorConfig:
    """
    Read PURPLEAIR_* settings from the environment (and a .env file if present).

    Raises:
        SystemExit: If a value is present but malformed
    """
    load_dotenv()
    sensor = _read_env("PURPLEAIR_SENSOR", "") or None
    default_coef = ",".join(str(c) for c in DEFAULT_COEFFICIENTS)
    try:
        return SensorConfig(
            sensor=sensor,
            poll=parse_duration(_read_env("PURPLEAIR_POLL", "0")),
            retry=int(_read_env("PURPLEAIR_RETRY", "3")),
            backoff=parse_bool(_read_env("PURPLEAIR_BACKOFF", "false")),
            coef=_read_env("PURPLEAIR_COEF", default_coef),
            timeout=parse_duration(_read_env("PURPLEAIR_TIMEOUT", "10")),
        )
    except ValueError as exc:
        raise SystemExit(f"Invalid PURPLEAIR_* environment setting: {exc}") from exc
