# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 Tobias Hienzsch

import numpy as np
import pytest

from roombass.analysis.pressure import (
    calc_pressure,
    dipole_cancellation,
    dipole_excitation,
    mode_strength,
    raw_pressure,
    signed_pressure,
    signed_pressures,
    speaker_excitation,
)
from roombass.analysis.room_modes import room_mode, room_mode_kind, room_modes
from roombass.geometry.room import Mode, Position, Room, Speaker, WallOpenings

ROOM = Room(18, 14, 9)


def make_mode(n, m, l, room=ROOM):
    kind = room_mode_kind(n, m, l)
    return Mode(n, m, l, room_mode(room.length, room.width, room.height, n, m, l), kind, 0.0)


@pytest.mark.parametrize(
    'indices,position',
    [
        ((1, 0, 0), Position(9.0, 3.0, 1.0)),
        ((0, 1, 0), Position(2.0, 7.0, 4.0)),
        ((0, 0, 1), Position(5.0, 5.0, 4.5)),
        ((3, 0, 0), Position(3.0, 1.0, 0.0)),
        ((2, 1, 1), Position(4.5, 2.0, 2.0)),
    ]
)
def test_pressure_at_node(indices, position):
    mode = make_mode(*indices)
    assert calc_pressure(position, mode, ROOM, WallOpenings()) == pytest.approx(0.0, abs=1e-12)
    assert calc_pressure(position, mode, ROOM) == pytest.approx(0.0, abs=1e-12)


@pytest.mark.parametrize('x', [0.0, 2.5, 4.5, 9.0, 13.0, 18.0])
def test_pressure_fully_open_walls(x):
    position = Position(x, 3.0, 2.0)
    openings = WallOpenings(front=100, rear=100)
    assert calc_pressure(position, make_mode(1, 0, 0), ROOM, openings) == 0.5
    assert calc_pressure(position, make_mode(2, 1, 0), ROOM, openings) == 0.5

    openings = WallOpenings(left=100, right=100)
    assert calc_pressure(position, make_mode(0, 1, 0), ROOM, openings) == 0.5


def test_pressure_antinode():
    assert calc_pressure(Position(0, 0, 0), make_mode(1, 1, 1), ROOM) == pytest.approx(1.0)
    assert calc_pressure(Position(18, 14, 9), make_mode(2, 0, 0), ROOM) == pytest.approx(1.0)


def test_pressure_partial_opening():
    mode = make_mode(0, 1, 0)
    position = Position(3.0, 2.0, 1.0)
    raw = raw_pressure(position, mode, ROOM)
    openings = WallOpenings(left=50)

    assert mode_strength(mode, openings) == pytest.approx(0.5)
    assert calc_pressure(position, mode, ROOM, openings) == pytest.approx(0.5 + (raw-0.5)*0.5)


def test_height_modes_ignore_wall_openings():
    mode = make_mode(0, 0, 1)
    openings = WallOpenings(100, 100, 100, 100)
    position = Position(3.0, 2.0, 1.0)

    assert mode_strength(mode, openings) == 1.0
    assert calc_pressure(position, mode, ROOM, openings) == raw_pressure(position, mode, ROOM)


def test_signed_pressure():
    mode = make_mode(1, 0, 0)
    assert signed_pressure(Position(0, 3, 1), mode, ROOM) == pytest.approx(1.0)
    assert signed_pressure(Position(18, 3, 1), mode, ROOM) == pytest.approx(-1.0)
    assert raw_pressure(Position(18, 3, 1), mode, ROOM) == pytest.approx(1.0)

    openings = WallOpenings(front=50)
    assert signed_pressure(Position(18, 3, 1), mode, ROOM, openings) == pytest.approx(-0.5)


def test_pressure_at_room_centre():
    room = Room(16, 16, 8)
    centre = Position(8, 8, 4)
    for mode in room_modes(room, 300.0):
        odd = any(i % 2 == 1 for i in mode.indices)
        expected = 0.0 if odd else 1.0
        assert calc_pressure(centre, mode, room) == pytest.approx(expected, abs=1e-12)


def test_dipole_orientation():
    width_mode = make_mode(0, 1, 0)
    length_mode = make_mode(1, 0, 0)

    # along the length: width modes see no orientation driven cancellation
    assert dipole_cancellation(width_mode, 0.0) == 1.0
    assert dipole_cancellation(length_mode, 0.0) < 1.0

    # sideways: length modes see none
    assert dipole_cancellation(length_mode, 90.0) == pytest.approx(1.0)
    assert dipole_cancellation(width_mode, 90.0) < 1.0

    assert dipole_cancellation(make_mode(0, 0, 1), 45.0) == pytest.approx(0.9)


def test_dipole_cancellation_value():
    mode = make_mode(1, 0, 0)
    wavelength = 1130/mode.freq
    phase = 1.5/wavelength*360
    expected = 1 - (1 - abs(np.cos(phase*np.pi/360)))
    assert dipole_cancellation(mode, 0.0) == pytest.approx(expected)


def test_speaker_excitation():
    mode = make_mode(1, 0, 0)
    dipole = Speaker('Main', 0.0, 3.0, 3.0, 'Large Dipole', orientation=0.0)
    sealed = Speaker('Sub', 0.0, 3.0, 0.0, 'Subwoofer Sealed', power_offset=6.0)

    assert speaker_excitation(dipole, mode, ROOM) == pytest.approx(dipole_excitation(dipole, mode, ROOM))
    assert speaker_excitation(dipole, mode, ROOM) < 1.0
    assert speaker_excitation(sealed, mode, ROOM) == pytest.approx(1.0)
    assert sealed.power_factor == pytest.approx(10**(6/20))


def test_signed_pressures_matrix():
    modes = room_modes(ROOM, 120.0)
    points = [Position(0.5, 0.5, 0.0), Position(11.0, 7.0, 3.5), Position(17.5, 9.25, 8.0)]
    openings = WallOpenings(front=30, left=20)

    matrix = signed_pressures(points, modes, ROOM, openings)
    assert matrix.shape == (len(points), len(modes))
    expected = [[signed_pressure(p, mode, ROOM, openings) for mode in modes] for p in points]
    assert np.allclose(matrix, expected)

    assert signed_pressures(points, [], ROOM).shape == (3, 0)
    assert signed_pressures([], modes, ROOM).shape == (0, len(modes))
