# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 Tobias Hienzsch

"""Relative bass response at the listening position by modal superposition.

Only the shape of the curve matters: the values are relative dB, not SPL.
"""
import matplotlib.pyplot as plt
import numpy as np
from scipy.signal import find_peaks

from roombass.analysis.pressure import signed_pressures
from roombass.common.plot import format_bass_axis, plot_styles
from roombass.geometry.math import inclusive_range
from roombass.geometry.room import ResponsePoint

MODAL_Q = 8.0
BASELINE_PRESSURE = 0.5  # direct sound floor, keeps log10 away from zero

TYPE_WEIGHTS = {
    "axial": 1.0,
    "tangential": 0.5,
    "oblique": 0.25,
}


def frequency_sweep(fmin=20.0, fmax=120.0, step=2.0):
    return inclusive_range(fmin, fmax, step)


def modal_window(freqs, mode_freqs):
    """(len(freqs), len(modes)) mask of modes within f/Q of each sweep frequency."""
    freqs = np.asarray(freqs, dtype=np.float64)
    mode_freqs = np.asarray(mode_freqs, dtype=np.float64)
    return np.abs(mode_freqs[None, :] - freqs[:, None]) < freqs[:, None]/MODAL_Q


def type_weights(modes):
    return np.array([TYPE_WEIGHTS[mode.type] for mode in modes], dtype=np.float64)


def superpose(freqs, modes, listener_coupling, net_excitation):
    """Total pressure per sweep frequency from per-mode signed couplings.

    `listener_coupling` and `net_excitation` hold one signed value per mode;
    the excitation is already summed over all sources so that sources in
    opposite phase cancel.
    """
    freqs = np.asarray(freqs, dtype=np.float64)
    if len(modes) == 0:
        return np.full(freqs.shape, BASELINE_PRESSURE)

    contributions = np.asarray(listener_coupling)*np.asarray(net_excitation)*type_weights(modes)
    window = modal_window(freqs, [mode.freq for mode in modes])
    return window.astype(np.float64) @ contributions + BASELINE_PRESSURE


def pressure_to_db(pressure):
    with np.errstate(divide='ignore'):
        return 20*np.log10(np.abs(pressure))


def to_response(freqs, pressure):
    db = pressure_to_db(pressure)
    return [ResponsePoint(float(f), float(d), float(p)) for f, d, p in zip(freqs, db, pressure)]


def predict_response(positions, modes, room, listener, fmin=20.0, fmax=120.0, step=2.0, wall_openings=None):
    freqs = frequency_sweep(fmin, fmax, step)
    if len(modes) == 0:
        return to_response(freqs, superpose(freqs, modes, [], []))

    listener_coupling = signed_pressures([listener], modes, room, wall_openings)[0]
    excitation = signed_pressures(positions, modes, room, wall_openings).sum(axis=0)
    pressure = superpose(freqs, modes, listener_coupling, excitation)
    return to_response(freqs, pressure)


def response_extrema(curve, prominence=1.0):
    """Peaks and dips of a predicted curve as two lists of ResponsePoint."""
    db = np.array([p.db for p in curve])
    finite = np.isfinite(db)
    if not finite.any():
        return [], []
    # a total cancellation (-inf dB) still has to show up as a dip
    db[~finite] = np.min(db[finite]) - 60.0

    peaks, _ = find_peaks(db, prominence=prominence)
    dips, _ = find_peaks(-db, prominence=prominence)
    return [curve[i] for i in peaks], [curve[i] for i in dips]


def plot_response(curves, title=""):
    """Plot one or more named curves, `curves` maps label -> list of ResponsePoint."""
    plt.rcParams.update(plot_styles)

    fig, ax = plt.subplots(1, 1)
    fmin, fmax = np.inf, -np.inf
    for label, curve in curves.items():
        freqs = [p.freq for p in curve]
        db = [p.db for p in curve]
        ax.plot(freqs, db, linestyle='-', label=label)
        fmin, fmax = min(fmin, freqs[0]), max(fmax, freqs[-1])

    ax.set_title(title)
    ax.set_ylabel('Relative level [dB]')
    format_bass_axis(ax, fmin, fmax)
    ax.legend()
    plt.show()
    return fig
