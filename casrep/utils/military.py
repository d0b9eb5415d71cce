import logging
import re
from typing import Optional

from casrep.utils.validators import validate_mgrs

logger = logging.getLogger(__name__)


# This file contains utilities specific to military terminology and standards

# Phonetic conversion maps
PHONETIC_NUMBERS = {
    "zero": "0", "one": "1", "wun": "1", "two": "2", "tree": "3", "three": "3",
    "fower": "4", "four": "4", "fife": "5", "five": "5",
    "six": "6", "seven": "7", "eight": "8", "niner": "9", "nine": "9"
}

PHONETIC_ALPHABET = {
    "alpha": "A", "bravo": "B", "charlie": "C", "delta": "D", "echo": "E",
    "foxtrot": "F", "golf": "G", "hotel": "H", "india": "I", "juliet": "J",
    "kilo": "K", "lima": "L", "mike": "M", "november": "N", "oscar": "O",
    "papa": "P", "quebec": "Q", "romeo": "R", "sierra": "S", "tango": "T",
    "uniform": "U", "victor": "V", "whiskey": "W", "x-ray": "X", "xray": "X",
    "yankee": "Y", "zulu": "Z"
}

# Words that make up coordinate / code readouts
READOUT_WORDS = frozenset(PHONETIC_ALPHABET) | frozenset(PHONETIC_NUMBERS)

# Regex alternation of spoken digits, longest first so "niner" beats "nine"
NUMBER_WORD_PATTERN = "|".join(sorted(PHONETIC_NUMBERS, key=len, reverse=True))

# Function and procedure words that can sit in front of a callsign
CALLSIGN_STOPWORDS = frozenset([
    "this", "is", "and", "with", "to", "from", "copy", "roger",
    "at", "in", "on", "for", "the", "a", "an", "of", "by", "as", "into",
])

# Words that are never the name part of a callsign
CALLSIGN_BLOCKLIST = CALLSIGN_STOPWORDS | frozenset([
    # JTAC terms
    "type", "gbu", "mk", "line", "laser", "vdl", "abort", "code",
    "fuel", "playtime", "checking", "check", "mission", "number", "id",
    "aircraft", "ordnance", "altitude", "angels", "flight", "level", "feet",
    "heading", "distance", "elevation", "remarks", "restrictions", "game",
    "bda", "cas", "mgrs", "grid", "egress", "ingress", "attack", "initial",
    # number words
    "one", "two", "three", "four", "five", "fife", "six", "seven",
    "eight", "nine", "niner", "zero", "ten", "eleven", "twelve",
    "thirteen", "fourteen", "fifteen", "sixteen", "seventeen",
    "eighteen", "nineteen", "twenty", "thirty", "forty", "fifty",
    # radio procedure
    "standby", "wilco", "over", "out", "break",
    "affirm", "negative", "authentic", "authenticate",
])


def is_blocked_callsign_name(name: str) -> bool:
    """
    True when any word of a callsign name candidate is a blocked word, or
    starts with a blocked word longer than three letters ("checking" -> "check").
    """
    for word in re.split(r"[- ]+", name.lower().strip()):
        if word in CALLSIGN_BLOCKLIST:
            return True
        if any(len(blocked) > 3 and word.startswith(blocked) for blocked in CALLSIGN_BLOCKLIST):
            return True
    return False

# Grid zone + 100km square + numeric location
MGRS_PATTERN = re.compile(r'^(\d{1,2}[C-HJ-NP-X])([A-HJ-NP-Z]{2})(\d{2,})')

GRID_LEAD_PATTERN = re.compile(r'\b(?:grid|mgrs)\b[\s:,\-]*', re.IGNORECASE)

# Compact grid chunks as the ASR writes them: "15TWG", "15T", "WG", "0000"
GRID_CHUNK_PATTERN = re.compile(r'^(?:\d{1,2}[A-Z]{1,3}\d*|[A-Z]{1,3}\d*|\d+)$')


def spoken_digits(text: str) -> Optional[str]:
    """
    Convert a run of spoken digits ("one six eight eight", "16 88") to a digit string.
    Returns None if any token is not a digit or number word.
    """
    tokens = [t for t in re.split(r'[\s,\-]+', text.strip()) if t]
    if not tokens:
        return None

    digits = []
    for token in tokens:
        lower = token.lower()
        if lower in PHONETIC_NUMBERS:
            digits.append(PHONETIC_NUMBERS[lower])
        elif token.isdigit():
            digits.append(token)
        else:
            return None
    return ''.join(digits)


def process_grid_sequence(text: str) -> str:
    """
    Convert a spelled-out grid readout to compact form.
    Reading stops at the first token that is not part of the readout.

    "one five tango whiskey golf zero zero..." -> "15TWG00..."
    """
    result = []

    for part in re.split(r'[\s,\-]+', text):
        if not part:
            continue

        ends_sentence = part[-1] in '.;:'
        part = part.strip('.;:')
        lower = part.lower()

        if lower in PHONETIC_ALPHABET:
            result.append(PHONETIC_ALPHABET[lower])
        elif lower in PHONETIC_NUMBERS:
            result.append(PHONETIC_NUMBERS[lower])
        elif part and GRID_CHUNK_PATTERN.match(part):
            result.append(part)
        else:
            break

        if ends_sentence:
            break

    return ''.join(result)


def format_mgrs_grid(grid_input: str) -> str:
    """
    Format a Military Grid Reference System (MGRS) coordinate string.
    Standardizes different input formats to the standard format.

    Parameters:
    grid_input - Grid reference, compact or spaced

    Returns:
    formatted_grid - Standardized grid reference, e.g. "15T WG 00000 49776"
    """
    if not grid_input:
        return ""

    # Remove any spaces and convert to uppercase
    grid_clean = grid_input.replace(" ", "").upper()

    match = MGRS_PATTERN.match(grid_clean)
    if match and len(match.group(0)) == len(grid_clean):
        grid_zone = match.group(1)
        square_id = match.group(2)
        coords = match.group(3)

        # Ensure even number of digits in coordinates
        if len(coords) % 2 != 0:
            coords = coords + "0"

        half_len = len(coords) // 2
        easting = coords[:half_len]
        northing = coords[half_len:]

        return f"{grid_zone} {square_id} {easting} {northing}"

    return grid_input  # Return original if not matching pattern


def find_grid_reference(text: str) -> Optional[str]:
    """
    Find the first valid MGRS readout introduced by "grid" or "MGRS".

    Returns:
    formatted grid ("15T WG 00000 49776") or None
    """
    for lead in GRID_LEAD_PATTERN.finditer(text):
        compact = process_grid_sequence(text[lead.end():])
        match = MGRS_PATTERN.match(compact)
        if not match:
            continue

        zone, square, coords = match.groups()
        formatted = format_mgrs_grid(zone + square + coords[:10])
        if validate_mgrs(formatted) is None:
            logger.debug(f"Discarding grid readout that does not convert: {formatted}")
            continue
        return formatted

    return None
