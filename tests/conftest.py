"""Pytest configuration and fixtures for CASRep tests."""

import os
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from casrep.models.recognition import RecognitionResult, RecognizedSegment
from casrep.utils.parser import ReportParser
from casrep.utils.reports import ReportStore


CHECK_IN = "Axeman two-one this is Hawg one-one checking in, 2x GBU-12, playtime fifteen."

MID_BLOB_SWITCH = ("checking in with two by GBU-12. nine line, line one IP Hammer, "
                   "line two heading two seven zero.")

TROOPS_IN_CONTACT = "troops in contact, small arms fire, enemy BMP 400 meters south"

GRID_READOUT = "one five tango whiskey golf zero zero zero zero zero four niner seven seven six"


@pytest.fixture
def parser():
    """Fresh parser session."""
    return ReportParser()


@pytest.fixture
def store():
    """Fresh report store."""
    return ReportStore()


@pytest.fixture
def check_in_text():
    return CHECK_IN


@pytest.fixture
def mid_blob_text():
    return MID_BLOB_SWITCH


@pytest.fixture
def troops_in_contact_text():
    return TROOPS_IN_CONTACT


@pytest.fixture
def full_session_text():
    """A short CAS session covering check-in, situation update, 9-line and remarks."""
    return "\n".join([
        CHECK_IN,
        "Hawg one-one, Axeman two-one, situation update, threats small arms, "
        "enemy 2 BMP north of the river, friendlies 1 platoon south 400m.",
        "Type 2 control, nine line, line one IP Hammer, line two heading two seven zero, "
        "line three 6 miles, line five bunker grid " + GRID_READOUT + ", line eight egress north.",
        "remarks cleared hot",
    ])


@pytest.fixture
def make_result():
    """Build a RecognitionResult from (text, confidence) pairs."""
    def _make(pairs, formatted_text=None):
        segments = [RecognizedSegment(text=text, confidence=confidence) for text, confidence in pairs]
        return RecognitionResult(segments=segments, formatted_text=formatted_text)
    return _make


@pytest.fixture
def clean_env():
    """Remove CASREP_* variables for the test and restore them afterwards."""
    saved = {key: os.environ.pop(key) for key in list(os.environ) if key.startswith("CASREP_")}
    yield
    for key in [key for key in os.environ if key.startswith("CASREP_")]:
        del os.environ[key]
    os.environ.update(saved)
