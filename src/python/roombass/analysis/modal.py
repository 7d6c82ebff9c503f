# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 Tobias Hienzsch

"""Per-mode coupling of the listening position and each speaker.
"""
from dataclasses import dataclass, field

from roombass.analysis.boundary import boundary_gain, sbir
from roombass.analysis.pressure import calc_pressure, speaker_excitation

MODAL_ANALYSIS_MAX_FREQ = 150.0
NULL_THRESHOLD = 0.15
PEAK_THRESHOLD = 0.85
REDUCED_THRESHOLD = 0.35
GOOD_THRESHOLD = 0.65

BASS_BANDS = [
    ("Sub-bass", 20.0, 40.0),
    ("Deep bass", 40.0, 60.0),
    ("Mid-bass", 60.0, 80.0),
    ("Upper bass", 80.0, 120.0),
]


def pressure_label(p):
    if p < NULL_THRESHOLD:
        return "NULL"
    if p < REDUCED_THRESHOLD:
        return "Reduced"
    if p > PEAK_THRESHOLD:
        return "PEAK"
    if p > GOOD_THRESHOLD:
        return "Good"
    return "Moderate"


@dataclass(frozen=True)
class SpeakerExcitation:
    name: str
    excitation: float
    weighted: float


@dataclass(frozen=True)
class ModeAnalysis:
    mode: object
    lp_pressure: float
    speaker_excitation: list = field(default_factory=list)


@dataclass(frozen=True)
class SpeakerAnalysis:
    speaker: object
    sbir: list
    boundary_gain: float


@dataclass(frozen=True)
class BandIssue:
    name: str
    low: float
    high: float
    avg_pressure: float
    issue: str  # 'reduced' or 'elevated'


@dataclass(frozen=True)
class KeyFindings:
    nulls: list
    peaks: list
    problematic_bands: list


def modal_analysis(modes, room, listener, speakers, wall_openings=None, max_freq=MODAL_ANALYSIS_MAX_FREQ):
    result = []
    for mode in modes:
        if mode.freq > max_freq:
            continue
        lp = calc_pressure(listener, mode, room, wall_openings)
        excitation = []
        for speaker in speakers:
            e = speaker_excitation(speaker, mode, room, wall_openings)
            excitation.append(SpeakerExcitation(speaker.name, e, e*speaker.power_factor))
        result.append(ModeAnalysis(mode, lp, excitation))
    return result


def speaker_analysis(speakers, room, wall_openings=None):
    return [
        SpeakerAnalysis(s, sbir(s, room), boundary_gain(s, room, wall_openings))
        for s in speakers
    ]


def key_findings(analysis):
    nulls = [a for a in analysis if a.lp_pressure < NULL_THRESHOLD]
    peaks = [a for a in analysis if a.lp_pressure > PEAK_THRESHOLD]

    bands = []
    for name, low, high in BASS_BANDS:
        in_band = [a for a in analysis if low <= a.mode.freq < high]
        if not in_band:
            continue
        avg = sum(a.lp_pressure for a in in_band)/len(in_band)
        if avg < 0.3:
            bands.append(BandIssue(name, low, high, avg, 'reduced'))
        elif avg > 0.7:
            bands.append(BandIssue(name, low, high, avg, 'elevated'))

    return KeyFindings(nulls, peaks, bands)
