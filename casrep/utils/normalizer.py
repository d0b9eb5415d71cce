import logging
import re
from typing import List, Tuple

logger = logging.getLogger(__name__)


# This file fixes common speech-to-text mis-recognitions of JTAC vocabulary
# before any structural analysis runs.

LINE_NUMBER_WORDS = "one|two|three|four|five|fife|six|seven|eight|nine|niner|\\d"

NUMBER_WORDS = "one|two|three|four|five|fife|six|seven|eight|nine|niner|zero"

# Keywords that open a report section. A comma is inserted in front of them
# when the recognizer ran them into the preceding content.
COMMA_SECTION_KEYWORDS = [
    "situation update", "sitrep",
    "nine line", "9 line", "niner line",
    "initial point",
    "battle damage assessment", "bda",
    "game plan", "gameplan",
    "safety of flight",
    "restrictions", "remarks",
    "checking in", "check in",
]

# Known callsign mishearings -> canonical callsign
CALLSIGN_CORRECTIONS = {
    "X-men": "Axeman",
    "Xmen": "Axeman",
    "asked man": "Axeman",
    "Axman": "Axeman",
    "Haug": "Hawg",
    "Hogg": "Hawg",
    "Sabre": "Saber",
}

# Ordered (pattern, replacement) rewrite table, all case-insensitive.
# Multi-word patterns come before the single-word rules they contain.
NORMALIZATION_RULES: List[Tuple[str, str]] = [
    # 9-line trigger variants
    (r"\b9[- ]?lin(?:er|ed|e?s)\b", "9 line"),
    (r"\bnine[- ]?lin(?:er|ed|e?s)\b", "nine line"),
    (r"\bniner[- ]?lin(?:er|ed|e?s)?\b", "nine line"),

    # CAS type variants
    (r"\btype[- ]?1\b", "type one"),
    (r"\btype[- ]?2\b", "type two"),
    (r"\btype[- ]?3\b", "type three"),
    (r"\btype[- ]?won\b", "type one"),
    (r"\btype[- ]?to\b", "type two"),

    # Brevity codes
    (r"\bclear(?:ed)?[- ]?the[- ]?hot\b", "cleared hot"),
    (r"\bclear[- ]?hot\b", "cleared hot"),
    (r"\bdanger[- ]?clos(?:e|ed|ure|s)\b", "danger close"),
    (r"\bdanger[- ]?cloth\w*\b", "danger close"),
    (r"\bdanger[- ]?claus\w*\b", "danger close"),
    (r"\bin[- ]?hot\b", "in hot"),
    (r"\bin[- ]?dry\b", "in dry"),
    (r"\boff[- ]?dry\b", "off dry"),
    (r"\bbreak[- ]break\b", "break break"),

    # Radio procedure
    (r"\bstand[- ]by\b", "standby"),
    (r"\bsay[- ]again\b", "say again"),
    (r"\browl?[- ]?co(?:py|pie)?\b", "good copy"),
    (r"\blima[- ]charlie\b", "lima charlie"),
    (r"\blame[- ]charlie\b", "lima charlie"),
    (r"\bcheck(?:ing)?[- ]in\b", "checking in"),

    # Troops in contact
    (r"\btroops?[- ](?:and|in)[- ]contact\b", "troops in contact"),

    # Situation update triggers
    (r"\bsit(?:[- ])?(?:rep|wrap|wrep)\b", "situation update"),

    # Weapons
    (r"\b(?:30|thirty)[- ]?millimeter\b", "thirty mike mike"),
    (r"\b(?:20|twenty)[- ]?millimeter\b", "twenty mike mike"),
    (r"\bgbu[- ]?12\b", "GBU-12"),
    (r"\bgbu[- ]?31\b", "GBU-31"),
    (r"\bgbu[- ]?32\b", "GBU-32"),
    (r"\bgbu[- ]?38\b", "GBU-38"),
    (r"\bgbu[- ]?54\b", "GBU-54"),

    # Phonetic number words; "tree" only right after a digit so "tree line" survives
    (r"\bfife\b", "five"),
    (r"(?<=\d )tree\b", "three"),
]

# Callsigns go between the phonetic words and the count fusions
NORMALIZATION_RULES += [
    (r"\b" + re.escape(heard) + r"\b", canonical)
    for heard, canonical in CALLSIGN_CORRECTIONS.items()
]

NORMALIZATION_RULES += [
    # "two by" fusions: "Dubai", "do buy", "do by"
    (r"\bdubai\b", "2x "),
    (r"\bdo\s+bu?y\b", "2x "),
    (r"\bbuy\b", "by"),

    # Number-word mishearings; "to" is the digit two only between a number
    # word or capitalized callsign name and a following number
    (r"\bwun\b", "one"),
    (r"\b(" + NUMBER_WORDS + r"|(?-i:[A-Z][a-z]+))\s+to(?=\s+(?:" + NUMBER_WORDS + r"|\d+)\b)", r"\1 two"),

    # Ordnance counts: "two by GBU-12" -> "2x GBU-12"
    (r"\bone\s+by\s+", "1x "),
    (r"\btwo\s+by\s+", "2x "),
    (r"\bthree\s+by\s+", "3x "),
    (r"\bfour\s+by\s+", "4x "),
    (r"\bsix\s+by\s+", "6x "),
    (r"\beight\s+by\s+", "8x "),
    (r"\b(\d+)\s+by\s+", r"\g<1>x "),

    (r"\bmike\s+mike\b", "mike-mike"),

    # Acronym spacing
    (r"\bj[- ]?tac\b", "JTAC"),
    (r"\bb[- ]?d[- ]?a\b", "BDA"),
    (r"\bc[- ]?a[- ]?s\b", "CAS"),
    (r"\bm[- ]?g[- ]?r[- ]?s\b", "MGRS"),
    (r"\bi[- ]?p\b", "IP"),

    (r"\bgame[- ]?plan\b", "game plan"),

    # Collapse runs of spaces left by the fusions above
    (r" {2,}", " "),
]

_COMPILED_RULES = [(re.compile(p, re.IGNORECASE), r) for p, r in NORMALIZATION_RULES]

_LINE_BEFORE = re.compile(r"(?<=[^\s,])(\s+)(line\s+(?:" + LINE_NUMBER_WORDS + r")\b)", re.IGNORECASE)
_LINE_AFTER = re.compile(r"\b(line\s+(?:" + LINE_NUMBER_WORDS + r"))\s+(?!,)", re.IGNORECASE)
_KEYWORD_BEFORE = [
    re.compile(r"(?<=[^\s,.;:!?])(\s+)(" + re.escape(kw) + r")", re.IGNORECASE)
    for kw in COMMA_SECTION_KEYWORDS
]
_REPEATED_COMMAS = re.compile(r",(\s*,)+")


def insert_commas(text: str) -> str:
    """
    Insert commas at speech boundaries the recognizer's punctuation misses.
    Later stages use commas to separate adjacent short fields.

    "bravo two one line two heading" -> "bravo two one, line two, heading"
    """
    s = _LINE_BEFORE.sub(r", \2", text)
    s = _LINE_AFTER.sub(r"\1, ", s)
    for pattern in _KEYWORD_BEFORE:
        s = pattern.sub(r", \2", s)
    return _REPEATED_COMMAS.sub(",", s)


def normalize(text: str) -> str:
    """
    Correct common speech-to-text mis-recognitions so the parser always sees
    canonical forms.

    Parameters:
    text - Raw transcript text

    Returns:
    normalized - Text with commas inserted and every rewrite rule applied in order
    """
    s = insert_commas(text)
    for pattern, replacement in _COMPILED_RULES:
        s = pattern.sub(replacement, s)
    return s
