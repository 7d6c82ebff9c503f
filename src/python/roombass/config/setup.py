# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 Tobias Hienzsch

"""Room setup files.

Two JSON layouts are understood. The verbose one::

    {"version": 1, "room": {"length": 18, "width": 14, "height": 9},
     "wallOpenings": {...}, "listener": {"x": 11, "y": 7, "z": 3.5},
     "speakers": [{"name": ..., "x": ..., "type": ..., "powerOffset": 0}],
     "eqAvailable": {"main": false, "sub": true}, "crossoverFreq": 80}

and the compact positional one::

    {"v": 1, "r": [L, W, H], "w": [front, rear, left, right], "l": [x, y, z],
     "s": [[name, x, y, z, type, orientation, powerOffset], ...],
     "e": [main, sub], "c": crossover}

Sections that are missing keep their defaults.
"""
from dataclasses import dataclass, field, replace
import json
from pathlib import Path

import click

from roombass.geometry.room import SPEAKER_TYPES, Position, Room, Speaker, WallOpenings

SETUP_VERSION = 1


@dataclass(frozen=True)
class EqAvailable:
    main: bool = False
    sub: bool = True


@dataclass(frozen=True)
class Setup:
    room: Room
    wall_openings: WallOpenings
    listener: Position
    speakers: list = field(default_factory=list)
    eq_available: EqAvailable = EqAvailable()
    crossover_freq: float = None


def default_setup():
    return Setup(
        room=Room(18.0, 14.0, 9.0),
        wall_openings=WallOpenings(),
        listener=Position(11.0, 7.0, 3.5),
        speakers=[
            Speaker('Front Left', 2.0, 2.0, 3.0, 'Small Ported'),
            Speaker('Front Right', 2.0, 12.0, 3.0, 'Small Ported'),
            Speaker('Sub 1', 1.0, 1.0, 0.0, 'Subwoofer Sealed'),
            Speaker('Sub 2', 1.0, 13.0, 0.0, 'Subwoofer Sealed'),
        ],
        eq_available=EqAvailable(main=False, sub=True),
        crossover_freq=None,
    )


def subwoofers(setup):
    return [s for s in setup.speakers if s.type.startswith('Subwoofer')]


def _number(value, what):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{what} must be a number, got {value!r}")
    return float(value)


def _triple(values, what):
    if not isinstance(values, (list, tuple)) or len(values) != 3:
        raise ValueError(f"{what} must be a list of 3 numbers")
    return [_number(v, what) for v in values]


def _room(length, width, height):
    room = Room(_number(length, 'room length'), _number(width, 'room width'),
                _number(height, 'room height'))
    if min(room.length, room.width, room.height) <= 0:
        raise ValueError(f"room dimensions must be positive, got {room}")
    return room


def _wall_openings(front, rear, left, right):
    openings = WallOpenings(*[_number(v, 'wall opening') for v in (front, rear, left, right)])
    for value in (openings.front, openings.rear, openings.left, openings.right):
        if not 0 <= value <= 100:
            raise ValueError(f"wall openings must be within [0, 100] %, got {openings}")
    return openings


def _speaker(name, x, y, z, type, orientation=0.0, power_offset=0.0):
    if type not in SPEAKER_TYPES:
        raise ValueError(f"unknown speaker type {type!r} for {name!r}")
    return Speaker(
        name=str(name),
        x=_number(x, f'{name} x'),
        y=_number(y, f'{name} y'),
        z=_number(z, f'{name} z'),
        type=type,
        orientation=_number(orientation or 0.0, f'{name} orientation'),
        power_offset=_number(power_offset or 0.0, f'{name} power offset'),
    )


def _crossover(value):
    if value is None:
        return None
    value = _number(value, 'crossover frequency')
    if value <= 0:
        raise ValueError(f"crossover frequency must be positive, got {value}")
    return value


def _parse_compact(data, setup):
    if data.get('v') != SETUP_VERSION:
        raise ValueError(f"unsupported setup version {data.get('v')!r}")

    if 'r' in data:
        setup = replace(setup, room=_room(*_triple(data['r'], 'r')))
    if 'w' in data:
        w = data['w']
        if not isinstance(w, list) or len(w) != 4:
            raise ValueError("w must be a list of 4 wall openings")
        setup = replace(setup, wall_openings=_wall_openings(*w))
    if 'l' in data:
        setup = replace(setup, listener=Position(*_triple(data['l'], 'l')))
    if 's' in data:
        if not isinstance(data['s'], list):
            raise ValueError("s must be a list of speakers")
        speakers = []
        for s in data['s']:
            if not isinstance(s, list) or not 5 <= len(s) <= 7:
                raise ValueError(f"speaker entry must have 5 to 7 fields, got {s!r}")
            speakers.append(_speaker(*s))
        setup = replace(setup, speakers=speakers)
    if 'e' in data:
        e = data['e']
        if not isinstance(e, list) or len(e) != 2:
            raise ValueError("e must be a list of 2 flags")
        setup = replace(setup, eq_available=EqAvailable(main=e[0] == 1, sub=e[1] == 1))
    if data.get('c'):
        setup = replace(setup, crossover_freq=_crossover(data['c']))
    return setup


def _parse_verbose(data, setup):
    version = data.get('version', SETUP_VERSION)
    if version != SETUP_VERSION:
        raise ValueError(f"unsupported setup version {version!r}")

    try:
        if 'room' in data:
            r = data['room']
            setup = replace(setup, room=_room(r['length'], r['width'], r['height']))
        if 'wallOpenings' in data:
            w = data['wallOpenings']
            setup = replace(setup, wall_openings=_wall_openings(
                w.get('front', 0), w.get('rear', 0), w.get('left', 0), w.get('right', 0)))
        if 'listener' in data:
            l = data['listener']
            setup = replace(setup, listener=Position(*_triple([l['x'], l['y'], l['z']], 'listener')))
        if 'speakers' in data:
            speakers = [
                _speaker(s['name'], s['x'], s['y'], s['z'], s['type'],
                         s.get('orientation', 0), s.get('powerOffset', 0))
                for s in data['speakers']
            ]
            setup = replace(setup, speakers=speakers)
        if 'eqAvailable' in data:
            e = data['eqAvailable']
            setup = replace(setup, eq_available=EqAvailable(
                main=bool(e.get('main', False)), sub=bool(e.get('sub', False))))
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"malformed setup: {e!r}") from e

    if data.get('crossoverFreq'):
        setup = replace(setup, crossover_freq=_crossover(data['crossoverFreq']))
    return setup


def parse_setup(data):
    """Build a Setup from a decoded JSON object, raising ValueError if it is malformed.
    """
    if not isinstance(data, dict):
        raise ValueError("setup must be a JSON object")

    setup = default_setup()
    if 'v' in data and 'r' in data:
        return _parse_compact(data, setup)
    return _parse_verbose(data, setup)


def load_setup(path):
    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ValueError(f"{path}: invalid JSON: {e}") from e
    return parse_setup(data)


def setup_to_dict(setup, compact=False):
    room = setup.room
    w = setup.wall_openings
    l = setup.listener
    if compact:
        return {
            'v': SETUP_VERSION,
            'r': [room.length, room.width, room.height],
            'w': [w.front, w.rear, w.left, w.right],
            'l': [l.x, l.y, l.z],
            's': [[s.name, s.x, s.y, s.z, s.type, s.orientation, s.power_offset]
                  for s in setup.speakers],
            'e': [int(setup.eq_available.main), int(setup.eq_available.sub)],
            'c': setup.crossover_freq,
        }

    return {
        'version': SETUP_VERSION,
        'room': {'length': room.length, 'width': room.width, 'height': room.height},
        'wallOpenings': {'front': w.front, 'rear': w.rear, 'left': w.left, 'right': w.right},
        'listener': {'x': l.x, 'y': l.y, 'z': l.z},
        'speakers': [
            {
                'name': s.name,
                'x': s.x,
                'y': s.y,
                'z': s.z,
                'type': s.type,
                'orientation': s.orientation,
                'powerOffset': s.power_offset,
            }
            for s in setup.speakers
        ],
        'eqAvailable': {'main': setup.eq_available.main, 'sub': setup.eq_available.sub},
        'crossoverFreq': setup.crossover_freq,
    }


def save_setup(setup, path, compact=False):
    with open(path, "w") as file:
        json.dump(setup_to_dict(setup, compact=compact), file, indent=None if compact else 2)
        print("", file=file)


def setup_from_cli(path):
    """Setup for a command: the file at `path`, or the defaults when it is None."""
    if path is None:
        return default_setup()
    try:
        return load_setup(path)
    except ValueError as e:
        raise click.ClickException(str(e)) from e


@click.command(name="init", help="Write the default room setup.")
@click.argument('filename', type=click.Path(dir_okay=False))
@click.option('--compact', is_flag=True, help='Use the positional layout.')
def main(filename, compact):
    save_setup(default_setup(), filename, compact=compact)
    print(f"wrote {filename}")
