"""Unit tests for per-section field extraction."""

import pytest

from casrep.models.report import CASCheckIn, NineLine, SafetyOfFlight, SituationUpdate
from casrep.utils.extractors import (
    append_text,
    extract_cas,
    extract_nine_line,
    extract_safety_of_flight,
    extract_situation_update,
)


class TestExtractCAS:
    """Tests for the CAS check-in extractor."""

    def setup_method(self):
        self.cas = CASCheckIn()

    def test_check_in(self, check_in_text):
        extract_cas(self.cas, check_in_text)
        assert self.cas.callsign == "Hawg one-one"
        assert self.cas.aircraft_type == "A-10"
        assert self.cas.ordnance == "2x GBU-12"
        assert self.cas.playtime == "fifteen"
        assert self.cas.control_type is None
        assert self.cas.laser_code is None

    def test_callsign_skips_procedure_words(self):
        """Test a blocked leading word does not hide the callsign behind it."""
        extract_cas(self.cas, "copy Hawg 11 ready")
        assert self.cas.callsign == "Hawg 11"

    @pytest.mark.parametrize("text", [
        "checking in Hawg 11",
        "type two control for Hawg 11",
        "in at angels 12 Hawg 11",
    ])
    def test_callsign_skips_function_words(self, text):
        """Test prepositions and altitude words are never part of a callsign name."""
        extract_cas(self.cas, text)
        assert self.cas.callsign == "Hawg 11"

    def test_control_type(self):
        extract_cas(self.cas, "type two control")
        assert self.cas.control_type == "Type 2"
        assert self.cas.control == "Type 2 Control"

    def test_fields_are_set_once(self):
        extract_cas(self.cas, "this is Hawg 11, playtime 20 minutes")
        extract_cas(self.cas, "this is Viper 21, playtime 40 minutes")
        assert self.cas.callsign == "Hawg 11"
        assert self.cas.playtime == "20 minutes"

    def test_ordnance_keeps_longest_mention(self):
        extract_cas(self.cas, "standing by with 4x GBU-38 and two GBU-12")
        assert self.cas.ordnance == "4x GBU-38, two GBU-12"

    def test_ordnance_accumulates_without_duplicates(self):
        extract_cas(self.cas, "carrying GBU-12")
        extract_cas(self.cas, "also Mk-82")
        extract_cas(self.cas, "GBU-12 again")
        assert self.cas.ordnance == "GBU-12, Mk-82"

    @pytest.mark.parametrize("text, expected", [
        ("laser code 1688", "1688"),
        ("laser code one six eight eight", "1688"),
        ("standing by with 1688", "1688"),
        ("at 1500 feet", None),
    ])
    def test_laser_code(self, text, expected):
        extract_cas(self.cas, text)
        assert self.cas.laser_code == expected

    def test_altitude(self):
        extract_cas(self.cas, "at 1500 feet")
        assert self.cas.pos_and_alt == "1500 feet"

    @pytest.mark.parametrize("text, expected", [
        ("abort code Sunshine", "Sunshine"),
        ("abort word is Hammer", "Hammer"),
        ("abort abort abort", None),
    ])
    def test_abort_code(self, text, expected):
        extract_cas(self.cas, text)
        assert self.cas.abort_code == expected

    def test_vdl_code(self):
        extract_cas(self.cas, "VDL code 45")
        assert self.cas.vdl_code == "45"

    def test_mission_number(self):
        extract_cas(self.cas, "mission number 4521")
        assert self.cas.mission == "4521"
        assert self.cas.laser_code is None

    def test_capabilities(self):
        extract_cas(self.cas, "FLIR and TGP")
        assert self.cas.capes == "FLIR, TGP"


class TestExtractSituationUpdate:
    """Tests for the situation update extractor."""

    def setup_method(self):
        self.sitrep = SituationUpdate()

    def test_labelled_fields(self):
        extract_situation_update(self.sitrep, "threats: MANPADS, targets: 2 BTR")
        assert self.sitrep.threats == "MANPADS"
        assert self.sitrep.targets == "2 BTR"

    def test_friendlies(self):
        extract_situation_update(self.sitrep, "friendlies 1 platoon south 400m.")
        assert self.sitrep.friendlies == "1 platoon south 400m"

    def test_unlabelled_arty(self):
        extract_situation_update(self.sitrep, "1 cold south 13km")
        assert self.sitrep.arty == "1 cold south 13km"

    def test_clearance(self):
        extract_situation_update(self.sitrep, "clearance authority Widow 11")
        assert self.sitrep.clearance == "Widow 11"

    def test_threats_set_once(self):
        extract_situation_update(self.sitrep, "threats small arms")
        extract_situation_update(self.sitrep, "threats MANPADS")
        assert self.sitrep.threats == "small arms"

    def test_targets_accumulate_unique(self):
        extract_situation_update(self.sitrep, "targets 2 BMP")
        extract_situation_update(self.sitrep, "targets 2 BMP")
        extract_situation_update(self.sitrep, "targets 1 truck")
        assert self.sitrep.targets == "2 BMP 1 truck"

    def test_ordnance_needs_label_separator(self):
        """Test sitrep ordnance is only read from "ordnance:" style labels."""
        extract_situation_update(self.sitrep, "ordnance 2x GBU-12")
        assert self.sitrep.ordnance is None
        extract_situation_update(self.sitrep, "ordnance: 2x GBU-12")
        assert self.sitrep.ordnance == "2x GBU-12"


class TestExtractNineLine:
    """Tests for the 9-line extractor."""

    def setup_method(self):
        self.nine_line = NineLine()

    def test_labelled_lines(self):
        extract_nine_line(self.nine_line,
                          "line one, IP Hammer, line two, heading two seven zero, line three 6 miles")
        assert self.nine_line.ip == "IP Hammer"
        assert self.nine_line.heading == "two seven zero"
        assert self.nine_line.distance == "6 miles"

    def test_labelled_line_overwrites(self):
        extract_nine_line(self.nine_line, "line three 6 miles")
        extract_nine_line(self.nine_line, "line three 7 miles")
        assert self.nine_line.distance == "7 miles"

    @pytest.mark.parametrize("text, attribute", [
        ("IP Hammer", "ip"),
        ("heading 270", "heading"),
        ("elevation 450 feet", "target_elevation"),
        ("friendlies 800 meters south", "friendlies"),
        ("egress north", "egress"),
        ("mark laser", "target_mark"),
        ("bunker complex", "target_description"),
    ])
    def test_unlabelled_text_routed_by_keyword(self, text, attribute):
        extract_nine_line(self.nine_line, text)
        assert getattr(self.nine_line, attribute) == text

    def test_unlabelled_ip_before_labels(self):
        extract_nine_line(self.nine_line, "IP Hammer, line two, heading two seven zero")
        assert self.nine_line.ip == "IP Hammer"
        assert self.nine_line.heading == "two seven zero"

    def test_initial_point_before_labels(self):
        extract_nine_line(self.nine_line, "initial point Hammer, line two, heading two seven zero")
        assert self.nine_line.ip == "initial point Hammer"

    def test_unrecognised_prefix_is_not_a_description(self):
        """Test filler ahead of the labels does not land on line 5."""
        extract_nine_line(self.nine_line, "follows, line two, heading 270")
        assert self.nine_line.target_description is None
        assert self.nine_line.heading == "270"

    def test_grid_readout(self):
        extract_nine_line(self.nine_line, "line five bunker grid one five tango whiskey golf "
                                          "zero zero zero zero zero four niner seven seven six")
        assert self.nine_line.target_grid == "15T WG 00000 49776"
        assert self.nine_line.target_description.startswith("bunker grid")


class TestExtractSafetyOfFlight:
    """Tests for the safety-of-flight extractor."""

    def test_labelled_fields(self):
        sof = SafetyOfFlight()
        extract_safety_of_flight(sof, "threats SA-6 north, friendly assets two F-16 at angels twenty, "
                                      "terrain and obstacles towers in the valley, "
                                      "emergency considerations divert to Bagram")
        assert sof.threats == "SA-6 north"
        assert sof.friendly_assets == "two F-16 at angels twenty"
        assert sof.terrain_obstacles == "towers in the valley"
        assert sof.emergency_considerations == "divert to Bagram"

    def test_unlabelled_text_is_ignored(self):
        sof = SafetyOfFlight()
        extract_safety_of_flight(sof, "stay high")
        assert sof.is_empty


class TestAppendText:
    """Tests for append_text()."""

    def test_empty_both_sides(self):
        assert append_text(None, "  ") == ""

    def test_keeps_existing_on_empty(self):
        assert append_text("cleared hot", "") == "cleared hot"

    def test_space_join(self):
        assert append_text("cleared", "hot") == "cleared hot"
