"""Unit tests for report display formatting and the report store."""

import pytest

from casrep.models.report import CASCheckIn, NineLine, Report, SituationUpdate
from casrep.utils.reports import (
    REPORT_TEMPLATES,
    ReportStore,
    format_report_for_display,
    resolve_category,
)


class TestFormatReportForDisplay:
    """Tests for format_report_for_display()."""

    def test_cas_rows_with_placeholder(self):
        report = Report(cas=CASCheckIn(callsign="Hawg 11"))
        lines = format_report_for_display("CAS", report).split("\n")
        assert lines[0] == "CALLSIGN     : Hawg 11"
        assert lines[1] == "MISSION      : —"
        assert len(lines) == len(REPORT_TEMPLATES["CAS"]["fields"])

    def test_cas_control_row(self):
        cas = CASCheckIn(callsign="Hawg 11")
        cas.set_control(2)
        lines = format_report_for_display("CAS", Report(cas=cas)).split("\n")
        assert lines[0] == "CONTROL : Type 2 / Type 2 Control"

    def test_situation_update_placeholder(self):
        report = Report(situation_update=SituationUpdate(threats="small arms"))
        text = format_report_for_display("Situation-Update", report)
        assert "TARGETS/ENEMY       : //" in text.split("\n")

    def test_nine_line_hides_unset_lines(self):
        report = Report(nine_line=NineLine(ip="IP Hammer"))
        text = format_report_for_display("Nine-Line", report)
        assert "\n" not in text
        assert text.startswith("Line 1  IP")
        assert text.endswith(": IP Hammer")

    def test_alias(self):
        report = Report(nine_line=NineLine(ip="IP Hammer"))
        assert format_report_for_display("9 Line", report) == format_report_for_display("Nine-Line", report)

    def test_free_text_category(self):
        assert format_report_for_display("Remarks", Report(remarks="cleared hot")) == "cleared hot"

    @pytest.mark.parametrize("category, report", [
        ("CAS", Report()),
        ("Situation-Update", Report(situation_update=SituationUpdate())),
        ("Remarks", Report(remarks="")),
        ("Unknown", Report(remarks="cleared hot")),
    ])
    def test_nothing_to_show(self, category, report):
        assert format_report_for_display(category, report) == ""

    def test_resolve_category(self):
        assert resolve_category("S. UPDATE") == "Situation-Update"
        assert resolve_category("Safety-of-Flight") == "SOF"
        assert resolve_category("BDA") == "BDA"
        assert resolve_category("nope") is None


class TestReportStore:
    """Tests for the published report store."""

    def test_blank_reparse_ignored(self, store):
        store.reparse("   ")
        assert store.report.is_empty
        assert store.running_transcript == ""

    def test_reparse_is_idempotent(self, store, full_session_text):
        store.reparse(full_session_text)
        first = store.report
        store.reparse(full_session_text)
        assert store.report == first

    def test_process_appends_running_transcript(self, store):
        store.process("Hawg 11 checking in")
        store.process("remarks cleared hot")
        assert store.running_transcript == "Hawg 11 checking in\nremarks cleared hot"
        assert store.report.remarks == "cleared hot"
        assert store.has_data("CAS")

    def test_published_report_is_a_snapshot(self, store):
        store.process("remarks cleared hot")
        published = store.report
        store.process("remarks danger close")
        assert published.remarks == "cleared hot"

    def test_commit_corrects_and_reparses(self, store, make_result):
        result = make_result([("Haug", 0.9)], formatted_text="Haug one one checking in")
        corrected = store.commit(result)
        assert corrected.text == "Hawg one one checking in"
        assert store.report.cas.callsign == "Hawg one one"

    def test_commit_accumulates_session(self, store, make_result):
        store.commit(make_result([], formatted_text="Hawg 11 checking in"))
        store.commit(make_result([], formatted_text="remarks cleared hot"))
        assert store.report.cas.callsign == "Hawg 11"
        assert store.report.remarks == "cleared hot"

    def test_reset(self, store):
        store.process("remarks cleared hot")
        store.reset()
        assert store.report.is_empty
        assert store.running_transcript == ""
        assert not store.has_data("Remarks")
