import logging
import re
from typing import List

from casrep.utils.military import CALLSIGN_STOPWORDS, is_blocked_callsign_name

logger = logging.getLogger(__name__)


# Splits one captured text blob into discrete radio transmissions.
# Boundaries in priority order:
#   1. "break break", the explicit inter-transmission separator
#   2. "over" / "out" followed by clearly new content
#   3. a callsign (word(s) + digit group + comma) re-addressed mid-blob

BREAK_MARKER = re.compile(r"\bbreak\s+break\b[\s,.;:]*", re.IGNORECASE)

PROCEDURE_END = re.compile(r"\b(over|out)\b([.,!;]?\s+)(?=\S{3}.{6,})", re.IGNORECASE)

CALLSIGN_ADDRESS = re.compile(r"(?<=\s)([A-Za-z]+(?:\s[A-Za-z]+)?\s\d[\d-]*\s*,\s*)")

LEADING_STOPWORDS = re.compile(
    r"(?:(?:" + "|".join(sorted(CALLSIGN_STOPWORDS, key=len, reverse=True)) + r")\s+)+(?=[A-Za-z])",
    re.IGNORECASE)

CALLSIGN_NAME = re.compile(r"[A-Za-z]+(?:\s[A-Za-z]+)?(?=\s\d)")

SELF_IDENTIFICATION = re.compile(r"\bthis\s+is\s*$", re.IGNORECASE)


def _cut(text: str, offsets: List[int]) -> List[str]:
    pieces = []
    last = 0
    for offset in offsets:
        piece = text[last:offset].strip()
        if piece:
            pieces.append(piece)
        last = offset
    tail = text[last:].strip()
    if tail:
        pieces.append(tail)
    return pieces


def _break_offsets(text: str) -> List[int]:
    return [m.start() for m in BREAK_MARKER.finditer(text) if m.start() > 0]


def _procedure_offsets(text: str) -> List[int]:
    return [m.end(2) for m in PROCEDURE_END.finditer(text)]


def _only_stopwords(piece: str) -> bool:
    return all(word in CALLSIGN_STOPWORDS for word in re.findall(r"[a-z0-9]+", piece.lower()))


def _callsign_offsets(text: str) -> List[int]:
    offsets = []
    last = 0
    for match in CALLSIGN_ADDRESS.finditer(text):
        start = match.start()
        # "copy Viper 1-1," addresses "Viper 1-1"
        lead = LEADING_STOPWORDS.match(match.group(1))
        if lead:
            start += lead.end()
        # "angels 12," and "line 3," are values, not callsigns
        name = CALLSIGN_NAME.match(text, start)
        if name is None or is_blocked_callsign_name(name.group(0)):
            continue
        # A piece holding nothing but stopwords is never cut off
        if _only_stopwords(text[last:start]) or SELF_IDENTIFICATION.search(text[:start]):
            continue
        offsets.append(start)
        last = start
    return offsets


def split(text: str) -> List[str]:
    """
    Split a raw transcript blob into ordered radio transmissions.

    Every returned piece is non-empty and every recursive call works on a
    strictly shorter string, so splitting always terminates.

    Parameters:
    text - Normalized transcript text

    Returns:
    transmissions - Ordered list of transmissions; [text] when no boundary is found
    """
    for rule in (_break_offsets, _procedure_offsets, _callsign_offsets):
        pieces = _cut(text, rule(text))
        if len(pieces) > 1:
            logger.debug(f"{rule.__name__} split transmission into {len(pieces)} pieces")
            result = []
            for piece in pieces:
                result.extend(split(piece))
            return result

    return [text]


def strip_boundary_marker(transmission: str) -> str:
    """Remove a leading "break break" marker left at the head of a transmission."""
    match = BREAK_MARKER.match(transmission)
    if match:
        return transmission[match.end():]
    return transmission
