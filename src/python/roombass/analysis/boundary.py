# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 Tobias Hienzsch

from dataclasses import dataclass

from roombass.geometry.math import BOUNDARIES, boundary_distances
from roombass.geometry.room import SPEED_OF_SOUND

SBIR_MIN_DISTANCE = 0.1  # ft
SBIR_MAX_DISTANCE = 15.0  # ft
BOUNDARY_GAIN_THRESHOLD = 2.0  # ft
MONOPOLE_BOUNDARY_GAIN = 3.0  # dB
DIPOLE_BOUNDARY_GAIN = 1.5  # dB


@dataclass(frozen=True)
class SBIRNull:
    boundary: str
    distance: float
    freq: float


def sbir_frequency(distance, c=SPEED_OF_SOUND):
    return c/(2*distance)


def sbir(p, room):
    """First cancellation frequency for each nearby boundary, lowest first.
    """
    nulls = []
    for boundary, d in zip(BOUNDARIES, boundary_distances(p, room)):
        if SBIR_MIN_DISTANCE < d < SBIR_MAX_DISTANCE:
            nulls.append(SBIRNull(boundary, float(d), sbir_frequency(d)))
    return sorted(nulls, key=lambda x: x.freq)


def boundary_gain(speaker, room, wall_openings=None, threshold=BOUNDARY_GAIN_THRESHOLD):
    """Low frequency reinforcement in dB from boundaries within `threshold`.

    Open walls lose their share of the reinforcement; floor and ceiling don't.
    """
    front, rear, left, right, floor, ceiling = boundary_distances(speaker, room)

    is_dipole = getattr(speaker, 'is_dipole', False)
    per_boundary = DIPOLE_BOUNDARY_GAIN if is_dipole else MONOPOLE_BOUNDARY_GAIN

    openings = {'front': 0.0, 'rear': 0.0, 'left': 0.0, 'right': 0.0}
    if wall_openings is not None:
        openings = {
            'front': wall_openings.front,
            'rear': wall_openings.rear,
            'left': wall_openings.left,
            'right': wall_openings.right,
        }

    gain = 0.0
    if floor < threshold:
        gain += per_boundary
    if ceiling < threshold:
        gain += per_boundary
    for wall, d in [('front', front), ('rear', rear), ('left', left), ('right', right)]:
        if d < threshold:
            gain += per_boundary*(1 - openings[wall]/100)
    return gain
