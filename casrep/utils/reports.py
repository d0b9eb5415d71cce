import logging
from typing import Optional

from casrep.models.recognition import CorrectedTranscript, RecognitionResult
from casrep.models.report import Report
from casrep.utils.config import ParserSettings
from casrep.utils.correction import SpeechCorrectionEngine
from casrep.utils.parser import ReportParser

logger = logging.getLogger(__name__)


# Display templates per report category. "record" is the Report attribute the
# category renders; categories without fields render the free text as is.
REPORT_TEMPLATES = {
    "CAS": {
        "title": "CAS Check-In",
        "record": "cas",
        "placeholder": "—",
        "show_unset": True,
        "fields": [
            {"id": "callsign", "label": "CALLSIGN"},
            {"id": "mission", "label": "MISSION"},
            {"id": "aircraft_type", "label": "AIRCRAFT TYPE"},
            {"id": "pos_and_alt", "label": "POS AND ALT"},
            {"id": "ordnance", "label": "ORDNANCE"},
            {"id": "playtime", "label": "PLAY TIME"},
            {"id": "capes", "label": "CAPES"},
            {"id": "laser_code", "label": "LASER CODE"},
            {"id": "vdl_code", "label": "VDL CODE"},
            {"id": "abort_code", "label": "ABORT CODE"},
        ]
    },
    "Situation-Update": {
        "title": "Situation Update",
        "record": "situation_update",
        "placeholder": "//",
        "show_unset": True,
        "fields": [
            {"id": "threats", "label": "THREATS"},
            {"id": "targets", "label": "TARGETS/ENEMY"},
            {"id": "friendlies", "label": "FRIENDLIES"},
            {"id": "arty", "label": "ARTY"},
            {"id": "clearance", "label": "CLEARANCE"},
            {"id": "ordnance", "label": "ORDNANCE"},
            {"id": "remarks", "label": "REMARKS/RESTRICTIONS"},
        ]
    },
    "Nine-Line": {
        "title": "9-Line CAS Brief",
        "record": "nine_line",
        "placeholder": None,
        "show_unset": False,
        "fields": [
            {"id": "ip", "label": "Line 1  IP"},
            {"id": "heading", "label": "Line 2  Heading"},
            {"id": "distance", "label": "Line 3  Distance"},
            {"id": "target_elevation", "label": "Line 4  Elevation"},
            {"id": "target_description", "label": "Line 5  Target Desc"},
            {"id": "target_mark", "label": "Line 6  Mark Type"},
            {"id": "friendlies", "label": "Line 7  Friendlies"},
            {"id": "egress", "label": "Line 8  Egress"},
            {"id": "remarks_line", "label": "Line 9  Remarks"},
            {"id": "target_grid", "label": "Grid (MGRS)"},
        ]
    },
    "SOF": {
        "title": "Safety of Flight",
        "record": "safety_of_flight",
        "placeholder": "/",
        "show_unset": True,
        "fields": [
            {"id": "threats", "label": "1-THREATS"},
            {"id": "friendly_assets", "label": "2-FRIENDLY ASSETS"},
            {"id": "terrain_obstacles", "label": "3-TERRAINS AND OBSTACLES"},
            {"id": "emergency_considerations", "label": "4-EMERGENCY CONSIDERATIONS"},
        ]
    },
    "Remarks": {"title": "Remarks", "record": "remarks"},
    "Restrictions": {"title": "Restrictions", "record": "restrictions"},
    "BDA": {"title": "Battle Damage Assessment", "record": "bda"},
    "GamePlan": {"title": "Game Plan", "record": "game_plan"},
}

CATEGORY_ALIASES = {
    "S. UPDATE": "Situation-Update",
    "9 Line": "Nine-Line",
    "Safety-of-Flight": "SOF",
}


def resolve_category(category: str) -> Optional[str]:
    """Canonical category name, or None for an unknown category."""
    category = CATEGORY_ALIASES.get(category, category)
    return category if category in REPORT_TEMPLATES else None


def format_report_for_display(category: str, report: Report) -> str:
    """
    Format one report category for display.

    Parameters:
    category - Category name or alias (e.g. "CAS", "9 Line")
    report - Report to render

    Returns:
    formatted_text - One "LABEL : value" row per field; "" when the category
                     is unknown or has nothing to show
    """
    name = resolve_category(category)
    if name is None:
        return ""

    template = REPORT_TEMPLATES[name]
    record = getattr(report, template["record"])
    if record is None:
        return ""
    if "fields" not in template:
        return record

    # Records with an is_empty check are hidden until something was heard
    if getattr(record, "is_empty", False):
        return ""

    width = max(len(field["label"]) for field in template["fields"])
    lines = []

    if name == "CAS" and record.control_type and record.control:
        lines.append(f"CONTROL : {record.control_type} / {record.control}")

    for field in template["fields"]:
        value = getattr(record, field["id"])
        if value is None:
            if not template["show_unset"]:
                continue
            value = template["placeholder"]
        lines.append(f"{field['label']:<{width}}: {value}")

    return "\n".join(lines)


class ReportStore:
    """
    The report published to display surfaces.

    reparse() is the canonical entry: it resets the parser, processes the full
    session text and swaps in a new snapshot in one assignment, so readers
    never see a half-built report. process() feeds single segments
    incrementally and is kept for manual injection.
    """

    def __init__(self, settings: Optional[ParserSettings] = None,
                 correction_engine: Optional[SpeechCorrectionEngine] = None):
        self.settings = settings or ParserSettings()
        self.parser = ReportParser(self.settings)
        self.correction_engine = correction_engine or SpeechCorrectionEngine(
            self.settings.low_confidence_threshold)
        self.report = Report()
        self.running_transcript = ""

    def reparse(self, full_text: str):
        trimmed = (full_text or "").strip()
        if not trimmed:
            return
        self.running_transcript = trimmed
        self.parser.reset()
        self.parser.process(trimmed)
        self.report = self.parser.snapshot()
        logger.info(f"Reparsed {len(trimmed)} characters of transcript")

    def process(self, segment: str):
        trimmed = (segment or "").strip()
        if not trimmed:
            return
        if self.running_transcript:
            self.running_transcript += "\n" + trimmed
        else:
            self.running_transcript = trimmed
        self.parser.process(trimmed)
        self.report = self.parser.snapshot()

    def commit(self, result: RecognitionResult) -> CorrectedTranscript:
        """
        Correct a committed recognition result and reparse the whole session.

        Returns:
        CorrectedTranscript - Carries the low-confidence flags for the operator
        """
        corrected = self.correction_engine.correct(result)
        if corrected.text.strip():
            if self.running_transcript:
                self.reparse(self.running_transcript + "\n" + corrected.text)
            else:
                self.reparse(corrected.text)
        return corrected

    def reset(self):
        self.running_transcript = ""
        self.parser.reset()
        self.report = Report()
        logger.info("Report store reset")

    def content(self, category: str) -> str:
        return format_report_for_display(category, self.report)

    def has_data(self, category: str) -> bool:
        return bool(self.content(category))
