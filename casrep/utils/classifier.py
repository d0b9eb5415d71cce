import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from casrep.models.report import Section
from casrep.utils.military import READOUT_WORDS

logger = logging.getLogger(__name__)


# Section keyword table, most specific first so "type one control" beats "remarks"
SECTION_KEYWORDS: List[Tuple[Section, List[str]]] = [
    (Section.CAS, ["type one control", "type 1 control",
                   "type two control", "type 2 control",
                   "type three control", "type 3 control",
                   "checking in", "check in"]),
    (Section.SITUATION_UPDATE, ["situation update", "sitrep"]),
    # IP is line 1, so "initial point" implies a nine-line
    (Section.NINE_LINE, ["nine line", "9 line", "9-line", "niner line", "initial point"]),
    (Section.BDA, ["battle damage assessment", "bda"]),
    (Section.GAME_PLAN, ["game plan", "gameplan"]),
    (Section.SAFETY_OF_FLIGHT, ["safety of flight"]),
    (Section.RESTRICTIONS, ["restrictions"]),
    (Section.REMARKS, ["remarks"]),
]

# Content scoring tables. Weights:
#   3 - unique to the section, near-conclusive on its own
#   2 - strong signal, rarely seen outside the section
#   1 - weak or shared, only counts alongside other signals
SECTION_INDICATORS: Dict[Section, List[Tuple[int, List[str]]]] = {
    Section.CAS: [
        (3, ["checking in", "check in", "on station", "playtime",
             "abort criteria", "abort code",
             "type one control", "type two control", "type three control",
             "type 1 control", "type 2 control", "type 3 control"]),
        # platforms
        (2, ["a-10", "f-16", "f-18", "f/a-18", "f-15", "b-52", "b-1",
             "ah-64", "ac-130", "mq-9", "reaper", "apache",
             "warthog", "hawg", "viper", "hornet"]),
        # ordnance
        (2, ["gbu-12", "gbu-31", "gbu-32", "gbu-38", "gbu-54", "jdam", "paveway",
             "hellfire", "brimstone", "apkws",
             "twenty mike-mike", "thirty mike-mike",
             "mk-82", "mk-83", "mk-84"]),
        # formation
        (2, ["two ship", "four ship", "single ship", "flight of", "dual ship", "two-ship"]),
        (1, ["type one", "type two", "type three", "requesting", "request cas"]),
    ],
    Section.SITUATION_UPDATE: [
        # explicit field labels
        (3, ["threats:", "threat:", "targets:", "target:", "friendlies:",
             "arty:", "artillery:", "clearance:", "clearance authority",
             "ordnance:", "remarks:", "restrictions:"]),
        (3, ["troops in contact", "contact report", "taking fire", "receiving fire",
             "under fire", "small arms fire", "machine gun fire",
             "manpads", "ied", "rpg", "vbied",
             "enemy forces", "enemy positioned", "hostile forces",
             "bmp", "btr", "technical", "dismounts"]),
        (2, ["small arms", "machine gun", "mortar", "indirect fire",
             "enemy position", "enemy moving", "enemy vehicle",
             "engaged by", "contact at", "hostile", "insurgent",
             "taking contact", "in contact", "forces pinned",
             "cold", "hot arty", "arty cold", "arty hot"]),
        (1, ["vicinity", "located at", "grid", "moving toward",
             "currently", "at this time", "we have", "platoon",
             "section", "company", "battalion", "km",
             "meters south", "meters east", "meters west", "meters north"]),
    ],
    Section.NINE_LINE: [
        (3, ["nine line", "9 line", "niner line", "initial point"]),
        (2, ["egress", "attack heading", "final attack heading",
             "offset left", "offset right", "say when tally", "say when ready",
             "mark type", "laser code", "sparkle", "danger close",
             "friendlies within", "target elevation", "target description"]),
        (1, ["heading", "egress direction", "friendlies", "smoke", "laser",
             "mark", "mgrs", "grid", "elevation", "tally", "no joy", "distance"]),
        # post-brief closing phrases
        (2, ["authentication", "authenticate", "read back", "how copy", "ready to copy"]),
    ],
    Section.BDA: [
        (3, ["splash", "shack", "direct hit", "rounds complete", "battle damage",
             "bda follows", "secondary explosion", "secondary fire",
             "target destroyed", "no effect", "assessed destroyed",
             "gun off target", "off target rounds complete"]),
        (2, ["assessed", "neutralized", "suppressed", "destroyed", "damaged",
             "kill zone", "confirmed kill", "effects on target", "ordnance impact"]),
        (1, ["confirmed", "fire", "impact"]),
    ],
    Section.REMARKS: [
        (3, ["cleared hot", "not cleared hot", "abort abort abort", "guns guns guns",
             "in hot", "in cold", "abort abort", "negative clearance",
             "off dry", "in dry", "off target"]),
        (2, ["rifle", "pickle", "guns", "laser on", "cleared to engage",
             "cleared to fire", "abort", "go around", "no joy abort"]),
        (1, ["cleared", "negative", "approved"]),
    ],
    Section.RESTRICTIONS: [
        (3, ["restrictions follow", "no restrictions", "do not engage", "do not fire",
             "hold fire", "restricted fire area", "no fire area",
             "friendlies within", "civilians in area"]),
        (2, ["safe area", "exclusion zone", "avoid", "do not target",
             "collateral damage", "protected site"]),
    ],
    Section.GAME_PLAN: [
        (3, ["game plan follows", "attack from", "axis of attack", "time on target",
             "tot", "sequence of events", "first pass", "second pass", "multiple passes"]),
        (2, ["attack heading", "ingress route", "egress route",
             "flight will", "aircraft will", "planned"]),
    ],
}

LINE_LABEL_PATTERN = re.compile(
    r"\bline\s+(one|two|three|four|five|fife|six|seven|eight|nine|niner|\d)\b", re.IGNORECASE)

_INDICATOR_PATTERNS = {
    section: [
        (weight, re.compile(r"(?<!\w)" + re.escape(term) + r"(?!\w)"))
        for weight, terms in tiers
        for term in terms
    ]
    for section, tiers in SECTION_INDICATORS.items()
}

# Keywords that belong to the content they open ("initial point Hammer" is line 1)
CONTENT_KEYWORDS = {"initial point"}

_KEYWORD_PATTERNS = [
    (section, re.compile(re.escape(keyword), re.IGNORECASE))
    for section, keywords in SECTION_KEYWORDS
    for keyword in keywords
]

TRAILING_STRIP = " \t\r\n.,;:-"


@dataclass
class Chunk:
    """
    A piece of one transmission.

    section is None for continuation text with no keyword. text runs from the
    keyword to the next keyword; trailing is the text after the keyword alone,
    or from the keyword on for CONTENT_KEYWORDS.
    """
    section: Optional[Section]
    text: str
    trailing: str
    start: int
    end: int


def chunk_transmission(text: str) -> List[Chunk]:
    """
    Split a transmission on every section keyword.

    Matches are ordered by start position, longer keyword first on ties, and
    any match starting inside an accepted one is dropped.

    Parameters:
    text - One radio transmission

    Returns:
    chunks - Ordered chunks; a single untagged chunk when no keyword is present
    """
    hits = []
    for section, pattern in _KEYWORD_PATTERNS:
        for match in pattern.finditer(text):
            hits.append((match.start(), match.end(), section))

    hits.sort(key=lambda hit: (hit[0], -(hit[1] - hit[0])))

    accepted = []
    for hit in hits:
        if accepted and hit[0] < accepted[-1][1]:
            continue
        accepted.append(hit)

    if not accepted:
        return [Chunk(section=None, text=text, trailing="", start=0, end=len(text))]

    chunks = []
    before = text[:accepted[0][0]].strip()
    if before:
        chunks.append(Chunk(section=None, text=before, trailing="", start=0, end=accepted[0][0]))

    for i, (start, end, section) in enumerate(accepted):
        chunk_end = accepted[i + 1][0] if i + 1 < len(accepted) else len(text)
        content_start = start if text[start:end].lower() in CONTENT_KEYWORDS else end
        chunks.append(Chunk(
            section=section,
            text=text[start:chunk_end],
            trailing=text[content_start:chunk_end].strip(TRAILING_STRIP),
            start=start,
            end=chunk_end,
        ))

    return chunks


def count_line_matches(text: str) -> int:
    """Count explicit "line N" labels."""
    return len(LINE_LABEL_PATTERN.findall(text))


def looks_like_readout(text: str, ratio: float = 0.55) -> bool:
    """
    True when the text is mostly phonetic-alphabet words, number words and
    digits, the shape of a grid or 9-line value readout.
    """
    words = [w.strip(".,;:!?") for w in text.lower().split()]
    words = [w for w in words if w]
    if len(words) < 3:
        return False
    scored = sum(1 for w in words if w in READOUT_WORDS or w.isdigit())
    return scored / len(words) >= ratio


def score_sections(text: str, readout_ratio: float = 0.55) -> Dict[Section, int]:
    """Weighted indicator score per inferable section."""
    lower = text.lower()
    scores = {}
    for section, patterns in _INDICATOR_PATTERNS.items():
        scores[section] = sum(weight for weight, pattern in patterns if pattern.search(lower))

    nine_line = count_line_matches(lower) * 3
    if lower.startswith("ip ") or lower.startswith("i.p."):
        nine_line += 3
    if looks_like_readout(lower, readout_ratio):
        nine_line += 2
    scores[Section.NINE_LINE] += nine_line

    return scores


def infer_section(text: str, current: Section = Section.UNKNOWN,
                  threshold: int = 3, readout_ratio: float = 0.55) -> Optional[Section]:
    """
    Infer the section of a chunk that carries no keyword.

    Parameters:
    text - Chunk text
    current - Section currently open; it gets a +1 continuation bonus
    threshold - Minimum winning score
    readout_ratio - Share of readout words for the dense-readout bonus

    Returns:
    section - The unique top-scoring section, or None when the best score is
              below threshold or shared
    """
    if not text.strip():
        return None

    scores = score_sections(text, readout_ratio)
    if current in scores:
        scores[current] += 1

    best = max(scores.values())
    if best < threshold:
        return None

    leaders = [section for section, score in scores.items() if score == best]
    if len(leaders) > 1:
        logger.debug(f"Inference tie between {[s.value for s in leaders]} at {best}")
        return None

    return leaders[0]
