import copy
import logging
from typing import Optional

from casrep.models.report import (CASCheckIn, NineLine, Report, SafetyOfFlight, Section,
                                  SituationUpdate)
from casrep.utils.classifier import chunk_transmission, infer_section
from casrep.utils.config import ParserSettings
from casrep.utils.extractors import (append_text, extract_cas, extract_nine_line,
                                     extract_safety_of_flight, extract_situation_update)
from casrep.utils.normalizer import normalize
from casrep.utils.splitter import split, strip_boundary_marker

logger = logging.getLogger(__name__)

# Free-text sections -> Report attribute
FREE_TEXT_FIELDS = {
    Section.REMARKS: "remarks",
    Section.RESTRICTIONS: "restrictions",
    Section.BDA: "bda",
    Section.GAME_PLAN: "game_plan",
}


class ReportParser:
    """
    Stateful transcript parser for one recording session.

    Feed completed transcript segments to process(); the report updates in
    place. The section most recently opened is kept in current_section so
    keywordless follow-on text lands in the right place.
    """

    def __init__(self, settings: Optional[ParserSettings] = None):
        self.settings = settings or ParserSettings()
        self.report = Report()
        self.current_section = Section.UNKNOWN

    def reset(self):
        """Wipe all parsed data and the current section."""
        self.report = Report()
        self.current_section = Section.UNKNOWN
        logger.debug("Parser reset")

    def snapshot(self) -> Report:
        """Deep copy of the report for read-only consumers."""
        return copy.deepcopy(self.report)

    def process(self, segment: str):
        """
        Parse one transcript segment into the report.

        Parameters:
        segment - Raw transcript text; blank input is ignored
        """
        if not segment or not segment.strip():
            return

        for transmission in split(normalize(segment)):
            transmission = strip_boundary_marker(transmission)
            if not transmission.strip():
                continue
            self._process_transmission(transmission)

    def _infer(self, text: str) -> Optional[Section]:
        return infer_section(text, self.current_section,
                             threshold=self.settings.infer_threshold,
                             readout_ratio=self.settings.readout_ratio)

    def _process_transmission(self, transmission: str):
        resolved = False
        for chunk in chunk_transmission(transmission):
            if chunk.section is not None:
                if chunk.section == Section.CAS:
                    # Callsign and aircraft usually precede "checking in"
                    content = transmission[:chunk.end]
                else:
                    content = chunk.text
                self._transition(chunk.section, chunk.trailing, content)
                resolved = True
                continue

            inferred = self._infer(chunk.text)
            if inferred is not None:
                self._transition(inferred, chunk.text, chunk.text)
                resolved = True
            else:
                self._append_to_current(chunk.text)
                resolved = False

        # A transmission that trails off into noise must not bleed its section
        # into the next one
        if not resolved and self.current_section != Section.UNKNOWN:
            logger.debug(f"Closing {self.current_section.value} after unresolved transmission")
            self.current_section = Section.UNKNOWN

    def _transition(self, section: Section, trailing: str, content: str):
        if section != self.current_section:
            logger.debug(f"Section {self.current_section.value} -> {section.value}")
        self.current_section = section
        report = self.report

        if section == Section.CAS:
            if report.cas is None:
                report.cas = CASCheckIn()
            extract_cas(report.cas, content)
        elif section == Section.SITUATION_UPDATE:
            if report.situation_update is None:
                report.situation_update = SituationUpdate()
            extract_situation_update(report.situation_update, content)
        elif section == Section.NINE_LINE:
            if report.nine_line is None:
                report.nine_line = NineLine()
            if trailing:
                extract_nine_line(report.nine_line, trailing)
        elif section == Section.SAFETY_OF_FLIGHT:
            if report.safety_of_flight is None:
                report.safety_of_flight = SafetyOfFlight()
            if trailing:
                extract_safety_of_flight(report.safety_of_flight, trailing)
        elif section in FREE_TEXT_FIELDS:
            name = FREE_TEXT_FIELDS[section]
            setattr(report, name, append_text(getattr(report, name), trailing))

    def _append_to_current(self, text: str):
        section = self.current_section
        report = self.report

        if section == Section.UNKNOWN:
            return
        if section == Section.CAS:
            if report.cas is None:
                report.cas = CASCheckIn()
            extract_cas(report.cas, text)
        elif section == Section.SITUATION_UPDATE:
            if report.situation_update is None:
                report.situation_update = SituationUpdate()
            extract_situation_update(report.situation_update, text)
        elif section == Section.NINE_LINE:
            if report.nine_line is None:
                report.nine_line = NineLine()
            extract_nine_line(report.nine_line, text)
        elif section == Section.SAFETY_OF_FLIGHT:
            if report.safety_of_flight is None:
                report.safety_of_flight = SafetyOfFlight()
            extract_safety_of_flight(report.safety_of_flight, text)
        elif section in FREE_TEXT_FIELDS:
            name = FREE_TEXT_FIELDS[section]
            setattr(report, name, append_text(getattr(report, name), text))
