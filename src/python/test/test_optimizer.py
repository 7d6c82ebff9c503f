# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 Tobias Hienzsch

import itertools

import numpy as np
import pytest

from roombass.analysis.room_modes import room_modes
from roombass.analysis.score import score_configuration
from roombass.geometry.room import Position, Room
from roombass.placement.optimizer import (
    candidate_positions,
    in_front_half,
    mirror_candidate,
    optimize,
    rank_strategies,
    recommend,
)
from roombass.placement.results import load_report_scores, save_report
from roombass.placement.strategies import STRATEGIES, strategies_for

ROOM = Room(18, 14, 9)
LISTENER = Position(11, 7, 3.5)
MODES = room_modes(ROOM, 120.0)


def overall(positions):
    return score_configuration(positions, MODES, ROOM, LISTENER).overall


def test_candidate_positions():
    candidates = candidate_positions(ROOM, 1.5)
    by_wall = {wall: [c.position for c in candidates if c.wall == wall]
               for wall in ('front', 'rear', 'left', 'right')}

    assert len(by_wall['front']) == 9
    assert len(by_wall['rear']) == 9
    assert len(by_wall['left']) == 10
    assert len(by_wall['right']) == 10

    assert all(p.x == 0.5 for p in by_wall['front'])
    assert all(p.x == 17.5 for p in by_wall['rear'])
    assert all(p.y == 0.5 for p in by_wall['left'])
    assert all(p.y == 13.5 for p in by_wall['right'])
    for wall in ('left', 'right'):
        xs = [p.x for p in by_wall[wall]]
        assert min(xs) == pytest.approx(2.0)
        assert max(xs) <= 16.0

    assert all(c.position.z == 0.0 for c in candidates)


def test_mirror_candidate():
    for c in candidate_positions(ROOM, 1.5):
        mirror = mirror_candidate(c, ROOM)
        assert mirror.position.y == pytest.approx(ROOM.width - c.position.y)
        if c.wall == 'front':
            assert mirror.wall == 'front'
            assert mirror.position.x == c.position.x
        if c.wall in ('front', 'left', 'right'):
            assert mirror_candidate(mirror, ROOM).position.as_list() == pytest.approx(c.position.as_list())
        if c.wall in ('left', 'right'):
            assert mirror.wall != c.wall


def test_front_half():
    candidates = candidate_positions(ROOM, 1.5)
    front_half = [c for c in candidates if in_front_half(c, ROOM)]
    assert all(c.wall != 'rear' for c in front_half)
    assert all(c.wall == 'front' or c.position.x < 9.0 for c in front_half)


def test_optimize_single_sub():
    result = optimize(1, MODES, ROOM, LISTENER, grid_resolution=1.5)
    assert result is not None
    assert len(result.positions) == 1
    assert len(result.walls) == 1

    for c in candidate_positions(ROOM, 1.5):
        assert overall([c.position]) <= result.score.overall + 1e-9


def test_optimize_symmetric_pair():
    result = optimize(2, MODES, ROOM, LISTENER, grid_resolution=1.5, symmetry_constraint=True)
    assert result is not None
    first, second = result.positions
    assert second.y == pytest.approx(ROOM.width - first.y)
    assert result.score.overall == pytest.approx(overall(result.positions))


def test_optimize_free_pair():
    result = optimize(2, MODES, ROOM, LISTENER, grid_resolution=4.0, symmetry_constraint=False)
    assert result is not None
    assert len(result.positions) == 2

    candidates = candidate_positions(ROOM, 4.0)
    assert len(candidates) == 14
    best = max(overall([a.position, b.position]) for a, b in itertools.combinations(candidates, 2))
    assert result.score.overall == pytest.approx(best)


def test_optimize_four_subs():
    result = optimize(4, MODES, ROOM, LISTENER)
    assert result is not None
    assert result.strategy in strategies_for(4)
    assert len(result.positions) == 4

    best = max(overall(s.positions(ROOM)) for s in strategies_for(4).values())
    assert result.score.overall == pytest.approx(best)


@pytest.mark.parametrize('num_subs', [0, 3, 5])
def test_optimize_unsupported_counts(num_subs):
    assert optimize(num_subs, MODES, ROOM, LISTENER) is None


def test_optimize_without_modes():
    result = optimize(1, [], ROOM, LISTENER, grid_resolution=4.0)
    assert result is not None
    assert result.score.overall == 100.0
    assert result.positions == [candidate_positions(ROOM, 4.0)[0].position]


def test_rank_strategies():
    ranked = rank_strategies(MODES, ROOM, LISTENER)
    assert len(ranked) == min(10, len(STRATEGIES))

    scores = [r.score.overall for r in ranked]
    assert scores == sorted(scores, reverse=True)
    assert len({r.key for r in ranked}) == len(ranked)

    all_scores = [overall(s.positions(ROOM)) for s in STRATEGIES.values()]
    assert scores[0] == pytest.approx(max(all_scores))

    assert len(rank_strategies(MODES, ROOM, LISTENER, top=3)) == 3


def test_recommend(tmp_path):
    report = recommend(3, MODES, ROOM, LISTENER)
    assert report.best_config is None
    assert report.best_strategy is report.strategies[0]

    report = recommend(1, MODES, ROOM, LISTENER, grid_resolution=3.0, top=5)
    assert report.best_config is not None
    assert len(report.strategies) == 5

    path = tmp_path / 'out' / 'placement.h5'
    save_report(report, path)
    best, strategies = load_report_scores(path)
    assert best == pytest.approx(report.best_config.score.overall)
    assert [key for key, _ in strategies] == [r.key for r in report.strategies]
    assert np.allclose([o for _, o in strategies], [r.score.overall for r in report.strategies])


def test_save_report_without_best(tmp_path):
    report = recommend(3, MODES, ROOM, LISTENER, top=2)
    path = tmp_path / 'placement.h5'
    save_report(report, path)
    best, strategies = load_report_scores(path)
    assert best is None
    assert len(strategies) == 2


def test_rank_strategies_ties_keep_catalog_order():
    ranked = rank_strategies([], ROOM, LISTENER, top=len(STRATEGIES))
    assert all(r.score.overall == 100.0 for r in ranked)
    assert [r.key for r in ranked] == list(STRATEGIES.keys())

    ranked = rank_strategies([], ROOM, LISTENER)
    assert [r.key for r in ranked] == list(STRATEGIES.keys())[:10]
