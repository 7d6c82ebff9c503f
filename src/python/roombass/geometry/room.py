# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 Tobias Hienzsch

"""Value types shared by the room model, the analysis and the placement code.

Everything is in feet, measured from the front wall (x), the left wall (y) and
the floor (z).
"""
from dataclasses import dataclass, field

SPEED_OF_SOUND = 1130.0  # ft/s
FT3_TO_M3 = 0.0283168

DIPOLE = 'Large Dipole'

SPEAKER_TYPES = [
    'Small Sealed',
    'Small Ported',
    'Large Sealed',
    'Large Ported',
    DIPOLE,
    'Subwoofer Sealed',
    'Subwoofer Ported',
]


@dataclass(frozen=True)
class Room:
    length: float
    width: float
    height: float

    @property
    def volume(self):
        return self.length*self.width*self.height


@dataclass(frozen=True)
class WallOpenings:
    """Percentage of each wall that is open to an adjacent space."""
    front: float = 0.0
    rear: float = 0.0
    left: float = 0.0
    right: float = 0.0


@dataclass(frozen=True)
class Position:
    x: float
    y: float
    z: float

    def as_list(self):
        return [self.x, self.y, self.z]


@dataclass(frozen=True)
class Speaker:
    name: str
    x: float
    y: float
    z: float
    type: str = 'Small Sealed'
    orientation: float = 0.0  # degrees, 0 = dipole axis along the room length
    power_offset: float = 0.0  # dB

    @property
    def position(self):
        return Position(self.x, self.y, self.z)

    @property
    def is_dipole(self):
        return self.type == DIPOLE

    @property
    def power_factor(self):
        return 10.0**(self.power_offset/20.0)


@dataclass(frozen=True)
class Mode:
    n: int
    m: int
    l: int
    freq: float
    type: str
    level: float  # nominal relative level in dB

    @property
    def indices(self):
        return (self.n, self.m, self.l)


@dataclass(frozen=True)
class ResponsePoint:
    freq: float
    db: float
    pressure: float


@dataclass(frozen=True)
class ModeDetail:
    mode: Mode
    listener_coupling: float
    net_excitation: float
    excitation_magnitude: float
    effective_impact: float
    cancelled: bool


@dataclass(frozen=True)
class ScoreResult:
    overall: float
    peak_to_peak: float
    std_dev: float
    frequency_response: list = field(default_factory=list)
    mode_details: list = field(default_factory=list)
