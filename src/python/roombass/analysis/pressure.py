# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 Tobias Hienzsch

"""Standing-wave pressure of a single rigid-wall room mode.

The unsigned pressure is 1 at an antinode and 0 at a node. The signed pressure
keeps the sign of the cosine product so that several sources can be summed with
their relative phase.
"""
import numpy as np

from roombass.geometry.room import SPEED_OF_SOUND

DIPOLE_SPACING = 1.5  # ft, effective front/back path difference
DIPOLE_HEIGHT_FACTOR = 0.9


def axis_factors(p, mode, room):
    px = np.cos(mode.n*np.pi*p.x/room.length) if mode.n > 0 else 1.0
    py = np.cos(mode.m*np.pi*p.y/room.width) if mode.m > 0 else 1.0
    pz = np.cos(mode.l*np.pi*p.z/room.height) if mode.l > 0 else 1.0
    return px, py, pz


def mode_strength(mode, wall_openings=None):
    """How much of the standing wave survives the wall openings, in [0, 1].

    A mode needs reflections from both walls along its axis, so the two
    openings multiply. The height axis is never attenuated.
    """
    if wall_openings is None:
        return 1.0

    strength = 1.0
    if mode.m > 0:
        strength *= (1 - wall_openings.left/100) * (1 - wall_openings.right/100)
    if mode.n > 0:
        strength *= (1 - wall_openings.front/100) * (1 - wall_openings.rear/100)
    return strength


def raw_pressure(p, mode, room):
    px, py, pz = axis_factors(p, mode, room)
    return float(np.abs(px*py*pz))


def signed_pressure(p, mode, room, wall_openings=None):
    px, py, pz = axis_factors(p, mode, room)
    return float(px*py*pz) * mode_strength(mode, wall_openings)


def calc_pressure(p, mode, room, wall_openings=None):
    """Unsigned pressure pulled toward 0.5 as the mode loses strength.
    """
    raw = raw_pressure(p, mode, room)
    return 0.5 + (raw - 0.5) * mode_strength(mode, wall_openings)


def dipole_cancellation(mode, orientation):
    # orientation 0 deg: dipole axis along the room length
    wavelength = SPEED_OF_SOUND/mode.freq
    phase_diff = (DIPOLE_SPACING/wavelength)*360
    term = 1 - np.abs(np.cos(phase_diff*np.pi/360))

    theta = np.deg2rad(orientation or 0.0)
    factor = 1.0
    if mode.n > 0:
        factor *= 1 - np.abs(np.cos(theta))*term
    if mode.m > 0:
        factor *= 1 - np.abs(np.sin(theta))*term
    if mode.l > 0:
        factor *= DIPOLE_HEIGHT_FACTOR
    return float(factor)


def dipole_excitation(speaker, mode, room):
    base = raw_pressure(speaker, mode, room)
    return base*dipole_cancellation(mode, speaker.orientation)


def speaker_excitation(speaker, mode, room, wall_openings=None):
    if getattr(speaker, 'is_dipole', False):
        return dipole_excitation(speaker, mode, room)
    return calc_pressure(speaker, mode, room, wall_openings)


def signed_pressures(points, modes, room, wall_openings=None):
    """Signed pressure for every point (rows) and mode (columns)."""
    xyz = np.array([[p.x, p.y, p.z] for p in points], dtype=np.float64).reshape(-1, 3)
    nml = np.array([mode.indices for mode in modes], dtype=np.float64).reshape(-1, 3)
    dims = np.array([room.length, room.width, room.height], dtype=np.float64)

    # (points, modes, axis), a zero index gives cos(0) = 1
    phase = np.pi*(xyz/dims)[:, None, :]*nml[None, :, :]
    strength = np.array([mode_strength(mode, wall_openings) for mode in modes], dtype=np.float64)
    return np.prod(np.cos(phase), axis=-1)*strength[None, :]
