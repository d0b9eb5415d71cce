from dataclasses import dataclass, fields
from enum import Enum
from typing import Optional


# This file contains the structured JTAC report assembled from radio transcripts

class Section(Enum):
    """Report sections a transcript chunk can be routed to."""
    UNKNOWN = "unknown"
    CAS = "cas"
    SITUATION_UPDATE = "situation_update"
    NINE_LINE = "nine_line"
    REMARKS = "remarks"
    RESTRICTIONS = "restrictions"
    BDA = "bda"
    GAME_PLAN = "game_plan"
    SAFETY_OF_FLIGHT = "safety_of_flight"


def _all_unset(record) -> bool:
    return all(getattr(record, f.name) is None for f in fields(record))


@dataclass
class CASCheckIn:
    """CAS check-in brief from the attacking aircraft."""
    callsign: Optional[str] = None       # e.g. "Viper 1-1"
    mission: Optional[str] = None
    aircraft_type: Optional[str] = None  # e.g. "A-10C"
    pos_and_alt: Optional[str] = None
    ordnance: Optional[str] = None       # append-only, ", " separated
    playtime: Optional[str] = None
    capes: Optional[str] = None
    laser_code: Optional[str] = None
    vdl_code: Optional[str] = None
    abort_code: Optional[str] = None
    # set together by set_control()
    control_type: Optional[str] = None   # "Type 1"
    control: Optional[str] = None        # "Type 1 Control"

    def set_control(self, number: int):
        self.control_type = f"Type {number}"
        self.control = f"Type {number} Control"


@dataclass
class SituationUpdate:
    """Situation update (SITREP) passed by the JTAC."""
    threats: Optional[str] = None
    targets: Optional[str] = None
    friendlies: Optional[str] = None
    arty: Optional[str] = None
    clearance: Optional[str] = None
    ordnance: Optional[str] = None
    remarks: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return _all_unset(self)


# Line number -> NineLine attribute
NINE_LINE_FIELDS = {
    1: "ip",
    2: "heading",
    3: "distance",
    4: "target_elevation",
    5: "target_description",
    6: "target_mark",
    7: "friendlies",
    8: "egress",
    9: "remarks_line",
}


@dataclass
class NineLine:
    """9-line attack brief, one attribute per line plus a derived grid."""
    ip: Optional[str] = None
    heading: Optional[str] = None
    distance: Optional[str] = None
    target_elevation: Optional[str] = None
    target_description: Optional[str] = None
    target_mark: Optional[str] = None
    friendlies: Optional[str] = None
    egress: Optional[str] = None
    remarks_line: Optional[str] = None
    target_grid: Optional[str] = None

    def get_line(self, number: int) -> Optional[str]:
        return getattr(self, NINE_LINE_FIELDS[number])

    def set_line(self, number: int, value: str):
        setattr(self, NINE_LINE_FIELDS[number], value)


@dataclass
class SafetyOfFlight:
    """Safety of flight brief."""
    threats: Optional[str] = None
    friendly_assets: Optional[str] = None
    terrain_obstacles: Optional[str] = None
    emergency_considerations: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return _all_unset(self)


@dataclass
class Report:
    """
    Top-level JTAC report.

    A field stays None until its section is first heard, after which it is
    only extended or overwritten. Only an explicit reset clears it.
    """
    cas: Optional[CASCheckIn] = None
    situation_update: Optional[SituationUpdate] = None
    nine_line: Optional[NineLine] = None
    safety_of_flight: Optional[SafetyOfFlight] = None
    remarks: Optional[str] = None
    restrictions: Optional[str] = None
    bda: Optional[str] = None
    game_plan: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return _all_unset(self)
