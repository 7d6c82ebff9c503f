# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 Tobias Hienzsch

import pytest

from roombass.analysis.modal import ModeAnalysis, key_findings, modal_analysis, pressure_label, speaker_analysis
from roombass.analysis.room_modes import room_modes
from roombass.config.setup import default_setup
from roombass.geometry.room import Mode, Speaker


def test_modal_analysis_default_setup():
    setup = default_setup()
    modes = room_modes(setup.room, 200.0)
    analysis = modal_analysis(modes, setup.room, setup.listener, setup.speakers)

    assert len(analysis) == len([m for m in modes if m.freq <= 150.0])
    for a in analysis:
        assert 0.0 <= a.lp_pressure <= 1.0 + 1e-12
        assert [e.name for e in a.speaker_excitation] == [s.name for s in setup.speakers]

    # the listener sits on the width centre line
    width_mode = next(a for a in analysis if a.mode.indices == (0, 1, 0))
    assert width_mode.lp_pressure == pytest.approx(0.0, abs=1e-12)

    findings = key_findings(analysis)
    assert width_mode in findings.nulls
    assert all(a.lp_pressure > 0.85 for a in findings.peaks)


def test_power_offset_weighting():
    setup = default_setup()
    modes = room_modes(setup.room, 60.0)
    loud = Speaker('Sub', 0.5, 0.5, 0.0, 'Subwoofer Sealed', power_offset=6.0)
    analysis = modal_analysis(modes, setup.room, setup.listener, [loud])
    for a in analysis:
        e = a.speaker_excitation[0]
        assert e.weighted == pytest.approx(e.excitation*10**(6/20))


def test_problematic_bands():
    def analysed(freq, lp):
        return ModeAnalysis(Mode(1, 0, 0, freq, "axial", 0.0), lp)

    analysis = [
        analysed(25.0, 0.1), analysed(35.0, 0.2),
        analysed(45.0, 0.5),
        analysed(65.0, 0.9), analysed(75.0, 0.8),
    ]
    findings = key_findings(analysis)

    assert [(b.name, b.issue) for b in findings.problematic_bands] == [
        ("Sub-bass", "reduced"), ("Mid-bass", "elevated")]
    assert findings.problematic_bands[0].avg_pressure == pytest.approx(0.15)
    assert [a.mode.freq for a in findings.nulls] == [25.0]
    assert [a.mode.freq for a in findings.peaks] == [65.0]


def test_speaker_analysis():
    setup = default_setup()
    result = speaker_analysis(setup.speakers, setup.room)
    assert [r.speaker.name for r in result] == [s.name for s in setup.speakers]

    sub = next(r for r in result if r.speaker.name == 'Sub 1')
    # floor, front and left wall
    assert sub.boundary_gain == 9.0
    freqs = [null.freq for null in sub.sbir]
    assert freqs == sorted(freqs)


@pytest.mark.parametrize(
    'p,label',
    [
        (0.0, "NULL"),
        (0.149, "NULL"),
        (0.15, "Reduced"),
        (0.349, "Reduced"),
        (0.35, "Moderate"),
        (0.5, "Moderate"),
        (0.65, "Moderate"),
        (0.651, "Good"),
        (0.85, "Good"),
        (0.851, "PEAK"),
        (1.0, "PEAK"),
    ]
)
def test_pressure_label(p, label):
    assert pressure_label(p) == label
