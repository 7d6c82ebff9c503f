# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 Tobias Hienzsch

"""Named subwoofer layouts, all on the floor and 0.5 ft away from the walls.
"""
from dataclasses import dataclass
from typing import Callable

from roombass.geometry.room import Position

WALL_INSET = 0.5  # ft


@dataclass(frozen=True)
class PlacementStrategy:
    name: str
    subs: int
    description: str
    positions: Callable


def _floor(x, y):
    return Position(float(x), float(y), 0.0)


def _front(room, y):
    return _floor(WALL_INSET, y)


def _rear(room, y):
    return _floor(room.length - WALL_INSET, y)


def _left(room, x):
    return _floor(x, WALL_INSET)


def _right(room, x):
    return _floor(x, room.width - WALL_INSET)


def _near(room):
    return WALL_INSET


def _far(room):
    return room.width - WALL_INSET


STRATEGIES = {
    "front_corner": PlacementStrategy(
        name="Front corner",
        subs=1,
        description="Single sub in the front left corner, excites every mode.",
        positions=lambda r: [_front(r, _near(r))],
    ),
    "front_center": PlacementStrategy(
        name="Front wall center",
        subs=1,
        description="Single sub centred on the front wall, sits in the null of odd width modes.",
        positions=lambda r: [_front(r, r.width/2)],
    ),
    "rear_corner": PlacementStrategy(
        name="Rear corner",
        subs=1,
        description="Single sub in the rear left corner.",
        positions=lambda r: [_rear(r, _near(r))],
    ),
    "side_center": PlacementStrategy(
        name="Side wall center",
        subs=1,
        description="Single sub halfway along the left wall, in the null of odd length modes.",
        positions=lambda r: [_left(r, r.length/2)],
    ),
    "front_corners": PlacementStrategy(
        name="Front corners",
        subs=2,
        description="Two subs in the front corners.",
        positions=lambda r: [_front(r, _near(r)), _front(r, _far(r))],
    ),
    "front_quarters": PlacementStrategy(
        name="Front wall quarters",
        subs=2,
        description="Two subs at 1/4 and 3/4 of the front wall, cancels the first width mode.",
        positions=lambda r: [_front(r, r.width/4), _front(r, 3*r.width/4)],
    ),
    "front_rear_centers": PlacementStrategy(
        name="Front and rear wall centers",
        subs=2,
        description="Opposing subs on the front and rear wall, cancels the first length mode.",
        positions=lambda r: [_front(r, r.width/2), _rear(r, r.width/2)],
    ),
    "side_centers": PlacementStrategy(
        name="Side wall centers",
        subs=2,
        description="Opposing subs halfway along the side walls, cancels the first width mode.",
        positions=lambda r: [_left(r, r.length/2), _right(r, r.length/2)],
    ),
    "diagonal_corners": PlacementStrategy(
        name="Diagonal corners",
        subs=2,
        description="Front left and rear right corner.",
        positions=lambda r: [_front(r, _near(r)), _rear(r, _far(r))],
    ),
    "front_corners_rear_center": PlacementStrategy(
        name="Front corners + rear center",
        subs=3,
        description="Two front corner subs and one centred on the rear wall.",
        positions=lambda r: [_front(r, _near(r)), _front(r, _far(r)), _rear(r, r.width/2)],
    ),
    "four_corners": PlacementStrategy(
        name="Four corners",
        subs=4,
        description="One sub in every corner.",
        positions=lambda r: [
            _front(r, _near(r)), _front(r, _far(r)),
            _rear(r, _near(r)), _rear(r, _far(r)),
        ],
    ),
    "four_midwalls": PlacementStrategy(
        name="Four wall midpoints",
        subs=4,
        description="One sub centred on each wall, cancels the first length and width modes.",
        positions=lambda r: [
            _front(r, r.width/2), _rear(r, r.width/2),
            _left(r, r.length/2), _right(r, r.length/2),
        ],
    ),
    "front_rear_quarters": PlacementStrategy(
        name="Front and rear quarters",
        subs=4,
        description="Subs at 1/4 and 3/4 width on the front and rear walls.",
        positions=lambda r: [
            _front(r, r.width/4), _front(r, 3*r.width/4),
            _rear(r, r.width/4), _rear(r, 3*r.width/4),
        ],
    ),
    "side_quarters": PlacementStrategy(
        name="Side wall quarters",
        subs=4,
        description="Subs at 1/4 and 3/4 length on both side walls.",
        positions=lambda r: [
            _left(r, r.length/4), _left(r, 3*r.length/4),
            _right(r, r.length/4), _right(r, 3*r.length/4),
        ],
    ),
}


def strategies_for(subs):
    return {key: s for key, s in STRATEGIES.items() if s.subs == subs}
