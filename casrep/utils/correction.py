import logging
import re
from typing import List, Tuple

from casrep.models.recognition import CorrectedTranscript, LowConfidenceFlag, RecognitionResult
from casrep.utils.normalizer import CALLSIGN_CORRECTIONS, NUMBER_WORDS

logger = logging.getLogger(__name__)


# Post-recognition rewrite engine. Runs on the recognizer's best hypothesis
# before the text reaches the parser, and flags low-confidence segments.

LOW_CONFIDENCE_THRESHOLD = 0.6

# Safety-critical brevity; a low-confidence hit needs operator re-verification
CRITICAL_PHRASES = [
    "cleared hot", "not cleared hot", "abort", "abort abort abort",
    "danger close", "hold fire", "cease fire", "in hot",
]

# Per-segment corrections for flagged tokens (exact match)
SINGLE_TOKEN_RULES = {
    "wun": "one",
    "Wun": "one",
    "fife": "five",
    "Fife": "five",
    "niner": "9",
    "tree": "3",
}

# Ordered most specific first
MULTI_TOKEN_RULES: List[Tuple[str, str]] = [
    (r"\b" + re.escape(heard) + r"\b", canonical)
    for heard, canonical in CALLSIGN_CORRECTIONS.items()
]

MULTI_TOKEN_RULES += [
    # "N by weapon" fusions; "Dubai" is the usual mishearing of "two by"
    (r"\bDubai\b", "2x"),
    (r"\bdo\s+bu[yi]\b", "2x"),
    (r"\b(?:one|1)\s+by\b", "1x"),
    (r"\b(?:two|2)\s+by\b", "2x"),
    (r"\b(?:three|3)\s+by\b", "3x"),
    (r"\b(?:four|4)\s+by\b", "4x"),
    (r"\b(?:six|6)\s+by\b", "6x"),
    (r"\b(?:eight|8)\s+by\b", "8x"),

    (r"\bmike\s+mike\b", "mike-mike"),

    # Nine-line triggers
    (r"\bniner\s+line\b", "nine line"),
    (r"\b9\s+line\b", "nine line"),
    (r"\bnine\s+liner\b", "nine line"),
    (r"\bnine-line\b", "nine line"),

    # CAS type variants
    (r"\btype\s+(?:1|one)\s+control\b", "type 1 control"),
    (r"\btype\s+(?:2|two)\s+control\b", "type 2 control"),
    (r"\btype\s+(?:3|three)\s+control\b", "type 3 control"),
    (r"\btype\s+(?:1|one)\b", "type 1"),
    (r"\btype\s+(?:2|two)\b", "type 2"),
    (r"\btype\s+(?:3|three)\b", "type 3"),

    # Brevity codes, canonical spacing and case
    (r"\bnot\s+cleared\s+hot\b", "not cleared hot"),
    (r"\bcleared\s+hot\b", "cleared hot"),
    (r"\bin\s+hot\b", "in hot"),
    (r"\bin\s+dry\b", "in dry"),
    (r"\boff\s+dry\b", "off dry"),
    (r"\bdanger\s+close\b", "danger close"),
    (r"\babort\s+abort\s+abort\b", "abort abort abort"),
    (r"\bb\.?d\.?a\b\.?", "BDA"),
    (r"\bsplash\s+out\b", "splash"),

    # Radio procedure
    (r"\bbreak\s+break\b", "break break"),
    (r"\bsay\s+again\b", "say again"),
    (r"\bhow\s+copy\b", "how copy"),
    (r"\bgood\s+copy\b", "good copy"),
    (r"\blima\s+charlie\b", "lima charlie"),
    (r"\bloud\s+and\s+clear\b", "loud and clear"),
    (r"\bstand\s+by\b", "standby"),
    (r"\bwill\s+co\b", "wilco"),
]

_MULTI_TOKEN = [(re.compile(p, re.IGNORECASE), r) for p, r in MULTI_TOKEN_RULES]

_PHONETIC_NUMBER = NUMBER_WORDS + "|wun|tree"
_TO_BETWEEN_NUMBERS = re.compile(
    r"\b(" + _PHONETIC_NUMBER + r")\s+to\s+(" + _PHONETIC_NUMBER + r")\b", re.IGNORECASE)
_WUN = re.compile(r"\bwun\b", re.IGNORECASE)
_FIFE = re.compile(r"\bfife\b", re.IGNORECASE)

_ORDNANCE_DESIGNATOR = re.compile(r"\b(GBU|Mk)\s+(\d+)", re.IGNORECASE)
# Upper-case only so "a 10 minute" is left alone
_AIRFRAME_DESIGNATOR = re.compile(r"\b([ABF])\s+(\d{1,3}[A-Z]?)\b")
_SPACES = re.compile(r"\s{2,}")


def _rewrite(text: str) -> str:
    for pattern, replacement in _MULTI_TOKEN:
        text = pattern.sub(replacement, text)
    return text


def _phonetic(text: str) -> str:
    # "Hawg one to one" -> "Hawg one two one"
    text = _TO_BETWEEN_NUMBERS.sub(r"\1 two \2", text)
    text = _WUN.sub("one", text)
    return _FIFE.sub("five", text)


def _cleanup(text: str) -> str:
    text = _ORDNANCE_DESIGNATOR.sub(r"\1-\2", text)
    text = _AIRFRAME_DESIGNATOR.sub(r"\1-\2", text)
    return _SPACES.sub(" ", text).strip()


class SpeechCorrectionEngine:
    """
    Rule engine fixing common ASR misrecognitions in JTAC transcripts.

    Pipeline: confidence flagging, multi-token rewrites, phonetic number
    normalisation, structural cleanup. Offline and synchronous.
    """

    def __init__(self, threshold: float = LOW_CONFIDENCE_THRESHOLD):
        self.threshold = threshold

    def correct(self, result: RecognitionResult) -> CorrectedTranscript:
        """
        Correct one recognition result.

        Parameters:
        result - Recognizer output: segments with confidences plus the best hypothesis

        Returns:
        CorrectedTranscript - Clean text, low-confidence flags and the critical flag
        """
        flags = []
        for segment in result.segments:
            if segment.confidence >= self.threshold:
                continue
            corrected = self.apply_single_token_rules(segment.text)
            flags.append(LowConfidenceFlag(
                word=segment.text,
                correction=corrected if corrected != segment.text else None,
                confidence=segment.confidence,
            ))

        critical = any(
            phrase in flag.word.lower()
            for flag in flags
            for phrase in CRITICAL_PHRASES
        )
        if critical:
            logger.warning("Safety-critical phrase recognised with low confidence")

        return CorrectedTranscript(
            text=self.quick_correct(result.text),
            low_confidence_flags=flags,
            has_critical_low_confidence=critical,
        )

    def quick_correct(self, raw: str) -> str:
        """Rewrite pipeline only, for live partial results."""
        return _cleanup(_phonetic(_rewrite(raw)))

    @staticmethod
    def apply_single_token_rules(token: str) -> str:
        return SINGLE_TOKEN_RULES.get(token, token)
