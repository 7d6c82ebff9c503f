# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 Tobias Hienzsch

import numpy as np

from roombass.analysis.pressure import signed_pressure
from roombass.analysis.response import predict_response
from roombass.geometry.room import ModeDetail, ScoreResult

PEAK_TO_PEAK_PENALTY = 3.0  # points per dB
CANCELLED_THRESHOLD = 0.2
DETAIL_MAX_FREQ = 120.0


def flatness(peak_to_peak):
    return max(0.0, 100.0 - peak_to_peak*PEAK_TO_PEAK_PENALTY)


def score_response(curve):
    """overall, peak_to_peak and std_dev of a predicted curve.
    """
    db = np.array([p.db for p in curve], dtype=np.float64)
    if db.size == 0:
        return 100.0, 0.0, 0.0

    with np.errstate(invalid='ignore'):
        peak_to_peak = float(np.max(db) - np.min(db))
        std_dev = float(np.std(db))
    return flatness(peak_to_peak), peak_to_peak, std_dev


def mode_details(positions, modes, room, listener, max_freq=DETAIL_MAX_FREQ, wall_openings=None):
    details = []
    for mode in modes:
        if mode.freq > max_freq:
            continue
        coupling = signed_pressure(listener, mode, room, wall_openings)
        net = sum(signed_pressure(p, mode, room, wall_openings) for p in positions)
        details.append(ModeDetail(
            mode=mode,
            listener_coupling=abs(coupling),
            net_excitation=net,
            excitation_magnitude=abs(net),
            effective_impact=abs(net*coupling),
            cancelled=abs(net) < CANCELLED_THRESHOLD and len(positions) > 1,
        ))
    return details


def score_configuration(positions, modes, room, listener, wall_openings=None):
    curve = predict_response(positions, modes, room, listener, wall_openings=wall_openings)
    overall, peak_to_peak, std_dev = score_response(curve)
    return ScoreResult(
        overall=overall,
        peak_to_peak=peak_to_peak,
        std_dev=std_dev,
        frequency_response=curve,
        mode_details=mode_details(positions, modes, room, listener, wall_openings=wall_openings),
    )
