import logging
import re
from typing import List, Optional, Pattern, Tuple

from casrep.models.report import CASCheckIn, NineLine, SafetyOfFlight, SituationUpdate
from casrep.utils.military import find_grid_reference, is_blocked_callsign_name, spoken_digits
from casrep.utils.validators import validate_laser_code

logger = logging.getLogger(__name__)


# Per-section field extraction. Every routine is best-effort: a pattern that
# finds nothing leaves its field unset. Fields are set once unless noted.

def _compile(patterns: List[str]) -> List[Pattern]:
    return [re.compile(p, re.IGNORECASE) for p in patterns]


VALUE_STRIP = " \t\r\n.,;:-"

NUM_WORD = r"(?:one|two|three|four|five|six|seven|eight|nine|niner|zero)"
NUM_PART = r"(?:\d[\d-]*|" + NUM_WORD + r"(?:[- ]" + NUM_WORD + r")*)"

NAME_PART = r"[A-Za-z]+(?:[- ](?!" + NUM_WORD + r"\b)[A-Za-z]+)?"

SELF_ID_PATTERN = re.compile(
    r"\bthis\s+is\s+(" + NAME_PART + r")\s+(" + NUM_PART + r")\b", re.IGNORECASE)
CALLSIGN_PATTERN = re.compile(
    r"\b(" + NAME_PART + r")\s+(" + NUM_PART + r")\b", re.IGNORECASE)

CONTROL_TYPE_PATTERN = re.compile(r"\btype[- ](one|1|two|2|three|3)\b", re.IGNORECASE)
CONTROL_NUMBERS = {"one": 1, "1": 1, "two": 2, "2": 2, "three": 3, "3": 3}

AIRCRAFT_PATTERNS = _compile([
    r"\ba-?10[a-z]?\b",
    r"\bf-?16[a-z]?\b",
    r"\bf/?a-?18[a-z]?\b",
    r"\bf-?15[a-z]?\b",
    r"\bb-?52\b",
    r"\bb-?1b?\b",
    r"\bac-?130\b",
    r"\bah-?64[a-z]?\b",
    r"\bmq-?9\b",
])

AIRCRAFT_ALIASES = [
    (re.compile(r"\b(?:warthog|hawg)\b", re.IGNORECASE), "A-10"),
    (re.compile(r"\bviper\b", re.IGNORECASE), "F-16"),
    (re.compile(r"\bhornet\b", re.IGNORECASE), "F/A-18"),
    (re.compile(r"\breaper\b", re.IGNORECASE), "MQ-9"),
    (re.compile(r"\bapache\b", re.IGNORECASE), "AH-64"),
    (re.compile(r"\b(?:spooky|ghostrider)\b", re.IGNORECASE), "AC-130"),
]

ORDNANCE_PATTERNS = _compile([
    r"\bGBU[-\s]?\d+\b",
    r"\bJDAM\b",
    r"\bPaveway\b",
    r"\bHellfire\b",
    r"\bBrimstone\b",
    r"\bMaverick\b",
    r"\bAPKWS\b",
    r"\bMk[-\s]?\d+\b",
    r"\b(?:twenty|thirty|\d+)\s+mike[-\s]mike\b",
    r"\b\d+x\s*[A-Za-z][\w/-]*",
    r"\b(?:two|four|six|eight|\d+)\s+(?:GBU[-\s]?\d+|Mk[-\s]?\d+|JDAM|Hellfire)s?\b",
])

PLAYTIME_PATTERNS = _compile([
    r"\bplaytime\s+([\w\s]+?(?:minutes?|mins?|hours?))(?=[,. ]|$)",
    r"\b(\d+)\s*(?:minutes?|mins?)\s*(?:playtime|on station|loiter)?",
    r"\bplaytime\s+(\w+)(?=[,. ]|$)",
])

LASER_LABELLED_PATTERNS = _compile([
    r"\blaser\s+code\s+(\d{4})\b",
    r"\blaser\s+code\s+(" + NUM_WORD + r"(?:[\s-]+" + NUM_WORD + r"){3})\b",
    r"\blaser\s+(\d{4})\b",
    r"(?<!abort )(?<!vdl )\bcode\s+(\d{4})\b",
])
BARE_CODE_PATTERN = re.compile(r"\b(\d{4})\b")

VDL_PATTERNS = _compile([
    r"\bVDL\s+(?:code\s+)?(\w+)\b",
    r"\bdata\s*link\s+(?:code\s+)?(\w+)\b",
    r"\blink\s+(\d+)\b",
])

ABORT_LABELLED_PATTERN = re.compile(r"\babort\s+(?:code|word)\s+(?:is\s+)?([\w-]+)", re.IGNORECASE)
ABORT_BARE_PATTERN = re.compile(r"\babort\s+(\w+(?:\s+\w+)?)\b", re.IGNORECASE)
ABORT_NOT_A_CODE = {"abort", "criteria", "code", "word"}

ALTITUDE_PATTERNS = _compile([
    r"\b(\d{1,2}[,.]?\d{3}\s*(?:feet|ft|msl|agl))\b",
    r"\bat\s+(\d+\s*(?:feet|ft|thousand))\b",
    r"\b(flight\s+level\s+\d+)\b",
    r"\b(angels\s+\w+)\b",
])

CAPABILITY_TOKENS = [
    (re.compile(r"\bFLIR\b", re.IGNORECASE), "FLIR"),
    (re.compile(r"\bTGP\b", re.IGNORECASE), "TGP"),
    (re.compile(r"\bsniper\b", re.IGNORECASE), "Sniper"),
    (re.compile(r"\blitening\b", re.IGNORECASE), "Litening"),
    (re.compile(r"\bNVG\b", re.IGNORECASE), "NVG"),
    (re.compile(r"\bNVDS\b", re.IGNORECASE), "NVDS"),
    (re.compile(r"\blaser\b", re.IGNORECASE), "Laser"),
    (re.compile(r"\bwing\s*borne?\b", re.IGNORECASE), "Wingborne"),
    (re.compile(r"\bHMD\b", re.IGNORECASE), "HMD"),
    (re.compile(r"\bSDL\b", re.IGNORECASE), "SDL"),
    (re.compile(r"\bRWR\b", re.IGNORECASE), "RWR"),
]
CAPES_FREE_TEXT = re.compile(r"\bcapes?\s*[:\-]?\s*(.+?)(?:\.|,|$)", re.IGNORECASE)

MISSION_PATTERNS = _compile([
    r"\bmission\s+id\s+(\w+)\b",
    r"\bmission\s+(?:number\s+)?(\w+)\b",
])


def _first_capture(patterns: List[Pattern], text: str) -> Optional[str]:
    """Group 1 of the first pattern that matches with a non-empty capture."""
    for pattern in patterns:
        match = pattern.search(text)
        if match and match.group(1) and match.group(1).strip():
            return match.group(1).strip()
    return None


def append_text(existing: Optional[str], new: Optional[str]) -> Optional[str]:
    """
    Space-join new text onto an accumulating field.

    Returns "" rather than None when both sides are empty so a section that
    was heard but carried no content still reads as observed.
    """
    trimmed = (new or "").strip()
    if not trimmed:
        return existing if existing is not None else ""
    if not existing:
        return trimmed
    return f"{existing} {trimmed}"


def _append_unique(existing: Optional[str], new: str) -> str:
    if existing and new.lower() in existing.lower():
        return existing
    return append_text(existing, new)


def _find_callsign(text: str) -> Optional[str]:
    match = SELF_ID_PATTERN.search(text)
    if match:
        return f"{match.group(1)} {match.group(2)}"

    pos = 0
    while True:
        match = CALLSIGN_PATTERN.search(text, pos)
        if not match:
            return None
        name = match.group(1)
        if not is_blocked_callsign_name(name):
            return f"{name} {match.group(2)}"
        # Retry from the next word so "copy Hawg 11" still finds "Hawg 11"
        next_word = re.search(r"[- ]", name)
        pos = match.start(1) + (next_word.end() if next_word else len(name))


def _find_ordnance(text: str) -> List[str]:
    hits: List[Tuple[int, int]] = []
    for pattern in ORDNANCE_PATTERNS:
        for match in pattern.finditer(text):
            hits.append((match.start(), match.end()))

    hits.sort(key=lambda hit: (hit[0], hit[0] - hit[1]))

    mentions = []
    last_end = -1
    for start, end in hits:
        if start < last_end:
            continue
        mention = text[start:end].strip()
        if mention and mention.lower() not in (m.lower() for m in mentions):
            mentions.append(mention)
        last_end = end
    return mentions


def _find_laser_code(text: str) -> Optional[str]:
    for pattern in LASER_LABELLED_PATTERNS:
        match = pattern.search(text)
        if match:
            code = match.group(1)
            return code if code.isdigit() else spoken_digits(code)

    for match in BARE_CODE_PATTERN.finditer(text):
        if validate_laser_code(match.group(1)):
            return match.group(1)
    return None


def _find_abort_code(text: str) -> Optional[str]:
    match = ABORT_LABELLED_PATTERN.search(text)
    if match:
        return match.group(1)

    match = ABORT_BARE_PATTERN.search(text)
    if match and match.group(1).split()[0].lower() not in ABORT_NOT_A_CODE:
        return match.group(1)
    return None


def extract_cas(cas: CASCheckIn, text: str):
    """
    Populate a CAS check-in record from free text.

    Works on partial phrasing; later calls fill the blanks earlier ones left.
    Ordnance is the one accumulating field: new mentions are appended in
    mention order and a mention already recorded is skipped.

    Parameters:
    cas - Record to update in place
    text - Transmission text
    """
    if cas.control_type is None:
        match = CONTROL_TYPE_PATTERN.search(text)
        if match:
            cas.set_control(CONTROL_NUMBERS[match.group(1).lower()])

    if cas.callsign is None:
        cas.callsign = _find_callsign(text)

    if cas.aircraft_type is None:
        for pattern in AIRCRAFT_PATTERNS:
            match = pattern.search(text)
            if match:
                cas.aircraft_type = match.group(0).upper()
                break
    if cas.aircraft_type is None:
        for pattern, designation in AIRCRAFT_ALIASES:
            if pattern.search(text):
                cas.aircraft_type = designation
                break

    for mention in _find_ordnance(text):
        if cas.ordnance and re.search(r"(?<!\w)" + re.escape(mention) + r"(?!\w)",
                                      cas.ordnance, re.IGNORECASE):
            continue
        cas.ordnance = f"{cas.ordnance}, {mention}" if cas.ordnance else mention

    if cas.playtime is None:
        cas.playtime = _first_capture(PLAYTIME_PATTERNS, text)

    if cas.laser_code is None:
        cas.laser_code = _find_laser_code(text)

    if cas.vdl_code is None:
        cas.vdl_code = _first_capture(VDL_PATTERNS, text)

    if cas.abort_code is None:
        cas.abort_code = _find_abort_code(text)

    if cas.pos_and_alt is None:
        cas.pos_and_alt = _first_capture(ALTITUDE_PATTERNS, text)

    if cas.capes is None:
        capes = [label for pattern, label in CAPABILITY_TOKENS if pattern.search(text)]
        if capes:
            cas.capes = ", ".join(capes)
        else:
            cas.capes = _first_capture([CAPES_FREE_TEXT], text)

    if cas.mission is None:
        cas.mission = _first_capture(MISSION_PATTERNS, text)


# Situation update

THREAT_TERMS = (r"(?:small arms|heavy weapons?|machine guns?|mortars?|MANPADS|RPGs?|"
                r"IEDs?|VBIEDs?|AAA|SAM|ZSU|anti[-\s]air)")

THREAT_PATTERNS = _compile([
    r"\bthreats?\s*[:\-]?\s*(.+?)(?:\.|,\s*(?:targets?|enemy|friendl|arty|clearance|ordnance|remarks)|$)",
    r"\b(" + THREAT_TERMS + r"(?:(?:[,\s]+(?:and|possible|with|plus))?\s+" + THREAT_TERMS + r")*)\b",
])

TARGET_PATTERNS = _compile([
    r"\b(?:targets?|enemy)\s*[:\-/]?\s*(.+?)(?:\.|,\s*(?:threats?|friendl|arty|clearance|ordnance|remarks)|$)",
    r"\b(\d+\s+(?:BMP|BTR|T-?\d+|truck|pickup|technical|armed vehicle|dismount|personnel|"
    r"infantry|PKM|KIA|WIA)s?[^,.]*?)(?:[,.]|$)",
])

FRIENDLIES_PATTERN = re.compile(
    r"\bfriendl(?:y|ies)?\s*[:\-]?\s*(.+?)(?:\.|,\s*(?:threats?|targets?|enemy|arty|clearance|ordnance|remarks)|$)",
    re.IGNORECASE)

ARTY_PATTERNS = _compile([
    r"\b(?:arty|artillery)\s*[:\-]?\s*(.+?)(?:\.|,\s*(?:threats?|targets?|enemy|friendl|clearance|ordnance|remarks)|$)",
    r"(\d+\s+(?:cold|hot)\b[^,.]*?)(?:[,.]|$)",
])

CLEARANCE_PATTERN = re.compile(r"\bclearance(?:\s+authority)?\s*[:\-]?\s*(\S+(?:\s+\w{1,4})?)", re.IGNORECASE)

SITREP_ORDNANCE_PATTERN = re.compile(
    r"\b(?:ordnance|ord)\s*[:\-]\s*(.+?)(?:\.|,\s*(?:threats?|targets?|enemy|friendl|arty|clearance|remarks)|$)",
    re.IGNORECASE)

SITREP_REMARKS_PATTERN = re.compile(r"\b(?:remarks?|restrictions?)\s*[:/\-]?\s*(.+?)(?:\.|$)", re.IGNORECASE)


def extract_situation_update(sitrep: SituationUpdate, text: str):
    """Populate a situation update; targets, friendlies and remarks accumulate."""
    lower = text.lower()

    if sitrep.threats is None:
        sitrep.threats = _first_capture(THREAT_PATTERNS, text)

    target = _first_capture(TARGET_PATTERNS, text)
    if target:
        sitrep.targets = _append_unique(sitrep.targets, target)

    if "friendl" in lower:
        match = FRIENDLIES_PATTERN.search(text)
        if match and match.group(1).strip():
            sitrep.friendlies = _append_unique(sitrep.friendlies, match.group(1).strip())

    if sitrep.arty is None:
        sitrep.arty = _first_capture(ARTY_PATTERNS, text)

    if sitrep.clearance is None:
        value = _first_capture([CLEARANCE_PATTERN], text)
        if value:
            sitrep.clearance = value.strip(VALUE_STRIP) or None

    if sitrep.ordnance is None:
        value = _first_capture([SITREP_ORDNANCE_PATTERN], text)
        if value and value != "//":
            sitrep.ordnance = value

    value = _first_capture([SITREP_REMARKS_PATTERN], text)
    if value and value != "//":
        sitrep.remarks = _append_unique(sitrep.remarks, value)


# Nine-line

LINE_NUMBERS = {
    "one": 1, "1": 1,
    "two": 2, "2": 2,
    "three": 3, "3": 3,
    "four": 4, "4": 4,
    "five": 5, "fife": 5, "5": 5,
    "six": 6, "6": 6,
    "seven": 7, "7": 7,
    "eight": 8, "8": 8,
    "nine": 9, "niner": 9, "9": 9,
}

NINE_LINE_LABEL = re.compile(
    r"\bline\s+(" + "|".join(sorted(LINE_NUMBERS, key=len, reverse=True)) + r")\b[:\s,]*",
    re.IGNORECASE)

# Field labels spoken after the line number; line 1 keeps its "IP"
NINE_LINE_FIELD_LABELS = {
    2: r"(?:(?:final\s+)?attack\s+heading|heading|hdg)",
    3: r"distance",
    4: r"(?:target\s+elevation|elevation|elev)",
    5: r"(?:target\s+description|description)",
    6: r"(?:mark\s+type|mark)",
    7: r"(?:friendlies|friendly)",
    8: r"egress",
    9: r"remarks",
}
_FIELD_LABEL_PATTERNS = {
    number: re.compile(r"^" + label + r"\b[\s:,\-]*", re.IGNORECASE)
    for number, label in NINE_LINE_FIELD_LABELS.items()
}


def _strip_field_label(number: int, value: str) -> str:
    pattern = _FIELD_LABEL_PATTERNS.get(number)
    if pattern:
        value = pattern.sub("", value)
    return value.strip(VALUE_STRIP)


def _assign_by_keyword(nine_line: NineLine, text: str, describe: bool = True):
    lower = text.lower()
    if lower.startswith("ip") or "initial point" in lower:
        nine_line.ip = append_text(nine_line.ip, text)
    elif "heading" in lower or lower.startswith("hdg"):
        nine_line.heading = append_text(nine_line.heading, text)
    elif "elev" in lower:
        nine_line.target_elevation = append_text(nine_line.target_elevation, text)
    elif "friendl" in lower:
        nine_line.friendlies = append_text(nine_line.friendlies, text)
    elif lower.startswith("egress"):
        nine_line.egress = append_text(nine_line.egress, text)
    elif "mark" in lower or "smoke" in lower or "laser" in lower:
        nine_line.target_mark = append_text(nine_line.target_mark, text)
    elif describe:
        # grid / MGRS readouts and anything unrecognised go to the description
        nine_line.target_description = append_text(nine_line.target_description, text)


def extract_nine_line(nine_line: NineLine, text: str):
    """
    Populate a nine-line from text.

    Text is split on "line N" labels and each piece overwrites its line.
    Without labels the whole text is appended to the field its vocabulary
    suggests. Text ahead of the first label is routed the same way but is
    dropped when nothing in it names a line.

    Parameters:
    nine_line - Record to update in place
    text - Nine-line content
    """
    if nine_line.target_grid is None:
        nine_line.target_grid = find_grid_reference(text)

    labels = list(NINE_LINE_LABEL.finditer(text))
    if not labels:
        stripped = text.strip(VALUE_STRIP)
        if stripped:
            _assign_by_keyword(nine_line, stripped)
        return

    # Unlabelled text ahead of the first label, e.g. "IP Hammer, line two ..."
    prefix = text[:labels[0].start()].strip(VALUE_STRIP)
    if prefix:
        _assign_by_keyword(nine_line, prefix, describe=False)

    for i, label in enumerate(labels):
        number = LINE_NUMBERS[label.group(1).lower()]
        end = labels[i + 1].start() if i + 1 < len(labels) else len(text)
        value = _strip_field_label(number, text[label.end():end].strip(VALUE_STRIP))
        if value:
            nine_line.set_line(number, value)


# Safety of flight

SOF_FIELD_LABELS = [
    ("threats", r"threats?"),
    ("friendly_assets", r"friendly\s+assets?"),
    ("terrain_obstacles", r"(?:terrains?(?:\s+and\s+obstacles?)?|obstacles?)"),
    ("emergency_considerations", r"emergency(?:\s+considerations?)?"),
]
_SOF_ANY_LABEL = r"\b(?:" + "|".join(label for _, label in SOF_FIELD_LABELS) + r")\b"
SOF_PATTERNS = [
    (name, re.compile(
        r"\b" + label + r"\b\s*[:\-]?\s*(.+?)(?=[.;]|,?\s*" + _SOF_ANY_LABEL + r"|$)",
        re.IGNORECASE))
    for name, label in SOF_FIELD_LABELS
]


def extract_safety_of_flight(sof: SafetyOfFlight, text: str):
    """Populate labelled safety-of-flight fields."""
    for name, pattern in SOF_PATTERNS:
        if getattr(sof, name) is not None:
            continue
        match = pattern.search(text)
        if match:
            value = match.group(1).strip(VALUE_STRIP)
            if value:
                setattr(sof, name, value)
