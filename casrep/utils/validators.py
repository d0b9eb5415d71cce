import logging
import re
from typing import Optional, Tuple

import mgrs

logger = logging.getLogger(__name__)


def validate_mgrs(grid: str) -> Optional[Tuple[float, float]]:
    """
    Validate an MGRS grid reference by converting it to decimal degrees.

    Parameters:
    grid - MGRS string, spaces allowed (e.g. "15T WG 00000 49776")

    Returns:
    (lat, lon) - Tuple of decimal degrees, or None when the grid does not convert
    """
    if not grid:
        return None

    grid_clean = re.sub(r'[^\w]', '', grid.upper())
    try:
        m = mgrs.MGRS()
        lat, lon = m.toLatLon(grid_clean)
        return float(lat), float(lon)
    except Exception as e:
        logger.debug(f"MGRS conversion failed for '{grid}': {e}")
        return None


def validate_laser_code(code: str) -> bool:
    """
    Validate a laser PRF code.

    Codes are four digits: first digit 1, second 1-7, third and fourth 1-8
    (1111 through 1788).
    """
    if not code:
        return False
    return re.fullmatch(r'1[1-7][1-8][1-8]', code.strip()) is not None
