# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 Tobias Hienzsch

"""Placement results in HDF5.

best/positions  (N,3) float64, only when the grid search found something
best/freqs      sweep frequencies
best/db         predicted relative level
best/overall    flatness score
strategies/names, strategies/keys, strategies/subs, strategies/overall
"""
from pathlib import Path

import h5py
import numpy as np


def save_report(report, file_path):
    file_path = Path(file_path)
    if not file_path.parent.exists():
        file_path.parent.mkdir(parents=True)

    h5f = h5py.File(file_path, 'w')

    best = report.best_config
    h5f.attrs['has_best'] = np.int8(best is not None)
    if best is not None:
        curve = best.score.frequency_response
        g = h5f.create_group('best')
        g.create_dataset('positions', data=np.array([p.as_list() for p in best.positions], dtype=np.float64))
        g.create_dataset('freqs', data=np.array([p.freq for p in curve], dtype=np.float64))
        g.create_dataset('db', data=np.array([p.db for p in curve], dtype=np.float64))
        g.create_dataset('overall', data=np.float64(best.score.overall))
        g.create_dataset('peak_to_peak', data=np.float64(best.score.peak_to_peak))
        if best.strategy:
            g.attrs['strategy'] = best.strategy

    g = h5f.create_group('strategies')
    strings = h5py.string_dtype()
    g.create_dataset('keys', data=np.array([r.key for r in report.strategies], dtype=strings))
    g.create_dataset('names', data=np.array([r.strategy.name for r in report.strategies], dtype=strings))
    g.create_dataset('subs', data=np.array([r.strategy.subs for r in report.strategies], dtype=np.int32))
    g.create_dataset('overall', data=np.array([r.score.overall for r in report.strategies], dtype=np.float64))

    h5f.close()


def load_report_scores(file_path):
    """(best overall or None, [(strategy key, overall), ...]) from a saved report."""
    h5f = h5py.File(Path(file_path), 'r')
    best = None
    if h5f.attrs['has_best']:
        best = float(h5f['best/overall'][()])
    keys = list(h5f['strategies/keys'].asstr()[...])
    overall = h5f['strategies/overall'][...]
    h5f.close()
    return best, list(zip(keys, [float(o) for o in overall]))
