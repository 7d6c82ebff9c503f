# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 Tobias Hienzsch

"""Miscellaneous geometry helpers for a rectangular room.
"""
import numpy as np

from roombass.geometry.room import Position

BOUNDARIES = ['Front wall', 'Rear wall', 'Left wall', 'Right wall', 'Floor', 'Ceiling']


def inclusive_range(start, stop, step):
    """np.arange that keeps `stop` when it lies on the grid."""
    assert step > 0
    return np.arange(start, stop + step*1e-6, step)


def boundary_distances(p, room):
    """Distances to front, rear, left, right, floor and ceiling (in that order).
    """
    return [
        p.x,
        room.length - p.x,
        p.y,
        room.width - p.y,
        p.z,
        room.height - p.z,
    ]


def mirror_y(p, room):
    # reflect across the centre line between left and right wall
    return Position(p.x, room.width - p.y, p.z)


def mirror_xy(p, room):
    # point reflection through the vertical centre axis of the room
    return Position(room.length - p.x, room.width - p.y, p.z)
