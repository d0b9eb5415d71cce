"""Unit tests for military readout helpers and validators."""

import pytest

from casrep.utils.military import (
    find_grid_reference,
    format_mgrs_grid,
    process_grid_sequence,
    spoken_digits,
)
from casrep.utils.validators import validate_laser_code, validate_mgrs

GRID_READOUT = "one five tango whiskey golf zero zero zero zero zero four niner seven seven six"


class TestSpokenDigits:
    """Tests for spoken_digits()."""

    @pytest.mark.parametrize("spoken, expected", [
        ("one six eight eight", "1688"),
        ("16 88", "1688"),
        ("niner-tree", "93"),
        ("one alpha", None),
        ("", None),
    ])
    def test_conversion(self, spoken, expected):
        assert spoken_digits(spoken) == expected


class TestGridHelpers:
    """Tests for grid readout conversion and formatting."""

    def test_process_grid_sequence(self):
        assert process_grid_sequence(GRID_READOUT) == "15TWG0000049776"

    def test_process_grid_sequence_stops_at_sentence_end(self):
        assert process_grid_sequence("one five tango whiskey golf zero zero. enemy moving") == "15TWG00"

    def test_format_mgrs_grid(self):
        assert format_mgrs_grid("15TWG0000049776") == "15T WG 00000 49776"

    def test_format_mgrs_grid_pads_odd_digits(self):
        assert format_mgrs_grid("15TWG123") == "15T WG 12 30"

    def test_format_mgrs_grid_passthrough(self):
        assert format_mgrs_grid("not a grid") == "not a grid"
        assert format_mgrs_grid("") == ""

    def test_find_grid_reference(self):
        assert find_grid_reference("target bunker, grid " + GRID_READOUT) == "15T WG 00000 49776"

    def test_find_grid_reference_needs_lead_word(self):
        assert find_grid_reference(GRID_READOUT) is None

    def test_find_grid_reference_rejects_non_grid(self):
        assert find_grid_reference("grid alpha bravo") is None


class TestValidators:
    """Tests for MGRS and laser code validation."""

    def test_validate_mgrs(self):
        lat, lon = validate_mgrs("15T WG 00000 49776")
        assert lat == pytest.approx(42.0, abs=0.01)
        assert lon == pytest.approx(-93.0, abs=0.01)

    @pytest.mark.parametrize("grid", ["", "not a grid", "99ZZZ"])
    def test_validate_mgrs_invalid(self, grid):
        assert validate_mgrs(grid) is None

    @pytest.mark.parametrize("code, valid", [
        ("1111", True),
        ("1688", True),
        ("1788", True),
        ("1888", False),
        ("1500", False),
        ("2111", False),
        ("168", False),
        ("", False),
    ])
    def test_validate_laser_code(self, code, valid):
        assert validate_laser_code(code) is valid
