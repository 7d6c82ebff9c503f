# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 Tobias Hienzsch

"""Grid search for subwoofer positions and ranking of the named layouts.

Candidates are floor positions along the four walls. One sub is searched
exhaustively, two subs either as mirrored pairs or as all unordered pairs and
four subs are picked from the predefined layouts.
"""
from dataclasses import dataclass, field
import itertools

import click
import numpy as np
from tqdm import tqdm

from roombass.analysis.pressure import signed_pressures
from roombass.analysis.response import frequency_sweep, plot_response, pressure_to_db, superpose
from roombass.analysis.room_modes import room_modes
from roombass.analysis.score import flatness, score_configuration
from roombass.config.setup import setup_from_cli, subwoofers
from roombass.geometry.math import inclusive_range, mirror_xy, mirror_y
from roombass.geometry.room import Position
from roombass.placement.results import save_report
from roombass.placement.strategies import STRATEGIES, WALL_INSET, strategies_for

DEFAULT_GRID_RESOLUTION = 1.5  # ft
TOP_STRATEGIES = 10
MODE_LIMIT = 200.0  # Hz

OPPOSITE_WALL = {
    'front': 'front',
    'rear': 'front',
    'left': 'right',
    'right': 'left',
}


@dataclass(frozen=True)
class Candidate:
    position: Position
    wall: str


@dataclass(frozen=True)
class PlacementConfig:
    positions: list
    score: object  # ScoreResult
    walls: list = field(default_factory=list)
    strategy: str = None


@dataclass(frozen=True)
class StrategyResult:
    key: str
    strategy: object  # PlacementStrategy
    positions: list
    score: object  # ScoreResult


@dataclass(frozen=True)
class PlacementReport:
    best_config: PlacementConfig
    strategies: list
    best_strategy: StrategyResult


def candidate_positions(room, grid_resolution=DEFAULT_GRID_RESOLUTION):
    assert grid_resolution > 0

    candidates = []
    for y in inclusive_range(WALL_INSET, room.width - WALL_INSET, grid_resolution):
        candidates.append(Candidate(Position(WALL_INSET, float(y), 0.0), 'front'))
        candidates.append(Candidate(Position(room.length - WALL_INSET, float(y), 0.0), 'rear'))

    # side walls without the strips next to the front and rear wall
    x0 = WALL_INSET + grid_resolution
    x1 = room.length - WALL_INSET - grid_resolution
    for x in inclusive_range(x0, x1, grid_resolution):
        candidates.append(Candidate(Position(float(x), WALL_INSET, 0.0), 'left'))
        candidates.append(Candidate(Position(float(x), room.width - WALL_INSET, 0.0), 'right'))

    return candidates


def mirror_candidate(candidate, room):
    """Mirror image across the width, front wall points stay on the front wall.
    """
    if candidate.wall == 'front':
        return Candidate(mirror_y(candidate.position, room), 'front')
    return Candidate(mirror_xy(candidate.position, room), OPPOSITE_WALL[candidate.wall])


def in_front_half(candidate, room):
    return candidate.position.x < room.length/2 or candidate.wall == 'front'


class _Evaluator:
    """Overall score of a set of positions, reusing per-position mode couplings."""

    def __init__(self, modes, room, listener, wall_openings=None):
        self.modes = modes
        self.room = room
        self.listener = listener
        self.wall_openings = wall_openings
        self.freqs = frequency_sweep()
        self.listener_coupling = np.zeros(len(modes))
        if modes:
            self.listener_coupling = signed_pressures([listener], modes, room, wall_openings)[0]

    def rows(self, positions):
        if not self.modes:
            return np.zeros((len(positions), 0))
        return signed_pressures(positions, self.modes, self.room, self.wall_openings)

    def overall(self, rows):
        net = np.asarray(rows).sum(axis=0)
        db = pressure_to_db(superpose(self.freqs, self.modes, self.listener_coupling, net))
        with np.errstate(invalid='ignore'):
            return flatness(float(np.max(db) - np.min(db)))

    def config(self, positions, walls=None, strategy=None):
        score = score_configuration(positions, self.modes, self.room, self.listener, self.wall_openings)
        return PlacementConfig(list(positions), score, list(walls or []), strategy)


def _best_single(evaluator, candidates, verbose):
    rows = evaluator.rows([c.position for c in candidates])
    best, best_score = None, -np.inf
    for i, c in enumerate(tqdm(candidates, desc='1 sub', ascii=True, disable=not verbose)):
        score = evaluator.overall(rows[i:i+1])
        if np.isfinite(score) and score > best_score:
            best, best_score = [c], score
    return best


def _best_symmetric_pair(evaluator, candidates, room, verbose):
    best, best_score = None, -np.inf
    front_half = [c for c in candidates if in_front_half(c, room)]
    for c in tqdm(front_half, desc='2 subs (symmetric)', ascii=True, disable=not verbose):
        mirror = mirror_candidate(c, room)
        score = evaluator.overall(evaluator.rows([c.position, mirror.position]))
        if np.isfinite(score) and score > best_score:
            best, best_score = [c, mirror], score
    return best


def _best_pair(evaluator, candidates, verbose):
    rows = evaluator.rows([c.position for c in candidates])
    pairs = list(itertools.combinations(range(len(candidates)), 2))
    best, best_score = None, -np.inf
    for i, j in tqdm(pairs, desc='2 subs', ascii=True, disable=not verbose):
        score = evaluator.overall(rows[[i, j]])
        if np.isfinite(score) and score > best_score:
            best, best_score = [candidates[i], candidates[j]], score
    return best


def _best_strategy(evaluator, strategies):
    best, best_score = None, -np.inf
    for key, strategy in strategies.items():
        positions = strategy.positions(evaluator.room)
        score = evaluator.overall(evaluator.rows(positions))
        if np.isfinite(score) and score > best_score:
            best, best_score = (key, positions), score
    return best


def optimize(num_subs, modes, room, listener, grid_resolution=DEFAULT_GRID_RESOLUTION,
             symmetry_constraint=True, wall_openings=None, verbose=False):
    """Best placement for `num_subs` subwoofers or None.

    Only 1, 2 and 4 subs are searched. Ties keep the first configuration found.
    """
    evaluator = _Evaluator(modes, room, listener, wall_openings)

    if num_subs == 4:
        best = _best_strategy(evaluator, strategies_for(4))
        if best is None:
            return None
        key, positions = best
        return evaluator.config(positions, strategy=key)

    if num_subs not in (1, 2):
        return None

    candidates = candidate_positions(room, grid_resolution)
    if verbose:
        print(f'--OPTIM: {num_subs=} {len(candidates)} candidates {grid_resolution=}ft')

    if num_subs == 1:
        best = _best_single(evaluator, candidates, verbose)
    elif symmetry_constraint:
        best = _best_symmetric_pair(evaluator, candidates, room, verbose)
    else:
        best = _best_pair(evaluator, candidates, verbose)

    if best is None:
        return None
    return evaluator.config([c.position for c in best], walls=[c.wall for c in best])


def rank_strategies(modes, room, listener, top=TOP_STRATEGIES, wall_openings=None):
    """Every predefined layout, best overall score first."""
    results = []
    for key, strategy in STRATEGIES.items():
        positions = strategy.positions(room)
        score = score_configuration(positions, modes, room, listener, wall_openings)
        results.append(StrategyResult(key, strategy, positions, score))

    results = sorted(results, key=lambda r: -r.score.overall)
    return results[:top]


def recommend(num_subs, modes, room, listener, grid_resolution=DEFAULT_GRID_RESOLUTION,
              symmetry_constraint=True, wall_openings=None, top=TOP_STRATEGIES, verbose=False):
    best_config = optimize(num_subs, modes, room, listener,
                           grid_resolution=grid_resolution,
                           symmetry_constraint=symmetry_constraint,
                           wall_openings=wall_openings,
                           verbose=verbose)
    strategies = rank_strategies(modes, room, listener, top=top, wall_openings=wall_openings)
    return PlacementReport(
        best_config=best_config,
        strategies=strategies,
        best_strategy=strategies[0] if strategies else None,
    )


def _format_positions(positions):
    return " ".join(f"({p.x:.1f},{p.y:.1f},{p.z:.1f})" for p in positions)


def print_strategies(strategies):
    print("---- STRATEGIES ----")
    for i, r in enumerate(strategies):
        s = r.score
        print(f"{i+1:2d}. {r.strategy.name} [{r.strategy.subs}] score={s.overall:.1f} "
              f"p2p={s.peak_to_peak:.1f}dB {_format_positions(r.positions)}")


def print_report(report):
    print("---- BEST CONFIGURATION ----")
    best = report.best_config
    if best is None:
        print("no grid search result")
    else:
        s = best.score
        label = best.strategy if best.strategy else ",".join(best.walls)
        print(f"{label}: score={s.overall:.1f} p2p={s.peak_to_peak:.2f}dB std={s.std_dev:.2f}dB")
        print(f"positions: {_format_positions(best.positions)}")
        cancelled = [d.mode for d in s.mode_details if d.cancelled]
        if cancelled:
            print("cancelled modes: " + ", ".join(f"{m.freq:.1f}Hz" for m in cancelled))
    print("")
    print_strategies(report.strategies)


@click.command(name="optimize", help="Search subwoofer positions.")
@click.argument('setup_file', required=False, type=click.Path(exists=True, dir_okay=False))
@click.option('--num_subs', default=0, type=int, help='Defaults to the subwoofers in the setup.')
@click.option('--grid', default=DEFAULT_GRID_RESOLUTION, type=float)
@click.option('--symmetry/--no-symmetry', default=True)
@click.option('--top', default=TOP_STRATEGIES, type=int)
@click.option('--out', type=click.Path(dir_okay=False), help='Write results to a HDF5 file.')
@click.option('--plot/--no-plot', default=False)
@click.pass_context
def optimize_main(ctx, setup_file, num_subs, grid, symmetry, top, out, plot):
    if grid <= 0:
        raise click.BadParameter("grid resolution must be positive")

    verbose = bool(ctx.obj and ctx.obj.get('VERBOSE'))
    setup = setup_from_cli(setup_file)
    num_subs = num_subs if num_subs > 0 else max(1, len(subwoofers(setup)))

    modes = room_modes(setup.room, MODE_LIMIT)
    report = recommend(num_subs, modes, setup.room, setup.listener,
                       grid_resolution=grid,
                       symmetry_constraint=symmetry,
                       wall_openings=setup.wall_openings,
                       top=top,
                       verbose=verbose)
    print_report(report)

    if out:
        save_report(report, out)
        print(f"wrote {out}")

    if plot:
        curves = {}
        subs = subwoofers(setup)
        if subs:
            current = score_configuration(subs, modes, setup.room, setup.listener, setup.wall_openings)
            curves["Current"] = current.frequency_response
        if report.best_config is not None:
            curves["Grid search"] = report.best_config.score.frequency_response
        if report.best_strategy is not None:
            curves[report.best_strategy.strategy.name] = report.best_strategy.score.frequency_response
        plot_response(curves, title=f"{num_subs} subs")


@click.command(name="strategies", help="Rank the predefined subwoofer layouts.")
@click.argument('setup_file', required=False, type=click.Path(exists=True, dir_okay=False))
@click.option('--top', default=TOP_STRATEGIES, type=int)
def strategies_main(setup_file, top):
    setup = setup_from_cli(setup_file)
    modes = room_modes(setup.room, MODE_LIMIT)
    print_strategies(rank_strategies(modes, setup.room, setup.listener, top=top,
                                     wall_openings=setup.wall_openings))
