from dataclasses import dataclass, field
from typing import List, Optional


# Types exchanged with the speech recognizer. The recognizer itself is external:
# it hands over a best-hypothesis string plus per-segment confidence values.

@dataclass
class RecognizedSegment:
    """One token/segment of a recognition result with its ASR confidence (0-1)."""
    text: str
    confidence: float = 1.0


@dataclass
class RecognitionResult:
    """
    A single recognition result from the ASR.

    Parameters:
    segments - ordered recognized segments
    formatted_text - best transcription string; defaults to the segments joined by spaces
    """
    segments: List[RecognizedSegment] = field(default_factory=list)
    formatted_text: Optional[str] = None

    @property
    def text(self) -> str:
        if self.formatted_text is not None:
            return self.formatted_text
        return " ".join(seg.text for seg in self.segments)


@dataclass
class LowConfidenceFlag:
    word: str
    correction: Optional[str]
    confidence: float


@dataclass
class CorrectedTranscript:
    """Output of the correction engine for one recognition result."""
    text: str
    low_confidence_flags: List[LowConfidenceFlag] = field(default_factory=list)
    # True when a safety-critical phrase sits in a low-confidence segment
    has_critical_low_confidence: bool = False
