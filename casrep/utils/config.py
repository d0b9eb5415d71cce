import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ParserSettings:
    """Tunable thresholds for section inference and ASR correction."""
    infer_threshold: int = 3
    readout_ratio: float = 0.55
    low_confidence_threshold: float = 0.6
    log_level: str = "INFO"


def _read_number(name: str, default, cast, low: float, high: float):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not a valid {cast.__name__}, using {default}")
        return default
    if not low <= value <= high:
        logger.warning(f"Ignoring {name}={raw!r}: outside {low}-{high}, using {default}")
        return default
    return value


def load_settings(env_file: Optional[str] = None) -> ParserSettings:
    """
    Load parser settings from the environment.

    Values from a .env file are loaded first without overriding variables
    already set in the process environment. Bad values are logged and
    replaced by their defaults.

    Parameters:
    env_file - Path to a .env file; the nearest .env is used when None

    Returns:
    settings - ParserSettings
    """
    if env_file is not None and not os.path.exists(env_file):
        logger.warning(f"Env file {env_file} not found, using process environment only")
    else:
        load_dotenv(env_file)

    defaults = ParserSettings()

    log_level = os.getenv("CASREP_LOG_LEVEL", defaults.log_level).strip().upper()
    if log_level not in LOG_LEVELS:
        logger.warning(f"Ignoring CASREP_LOG_LEVEL={log_level!r}, using {defaults.log_level}")
        log_level = defaults.log_level

    return ParserSettings(
        infer_threshold=_read_number("CASREP_INFER_THRESHOLD", defaults.infer_threshold, int, 1, 100),
        readout_ratio=_read_number("CASREP_READOUT_RATIO", defaults.readout_ratio, float, 0.0, 1.0),
        low_confidence_threshold=_read_number("CASREP_LOW_CONFIDENCE_THRESHOLD",
                                              defaults.low_confidence_threshold, float, 0.0, 1.0),
        log_level=log_level,
    )
