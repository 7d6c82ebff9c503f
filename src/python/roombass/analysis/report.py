# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 Tobias Hienzsch

import click

from roombass.analysis.modal import key_findings, modal_analysis, pressure_label, speaker_analysis
from roombass.analysis.response import plot_response, response_extrema
from roombass.analysis.room_modes import room_modes
from roombass.analysis.score import score_configuration
from roombass.config.setup import setup_from_cli, subwoofers

MODE_LIMIT = 200.0  # Hz, modes generated for every analysis


def print_modal_report(setup, max_rows=30):
    modes = room_modes(setup.room, MODE_LIMIT)
    analysis = modal_analysis(modes, setup.room, setup.listener, setup.speakers,
                              setup.wall_openings)
    findings = key_findings(analysis)

    names = " | ".join(s.name[:10] for s in setup.speakers)
    print(f"---- MODES (first {max_rows}) ----")
    print(f"mode      | freq   | type | LP             | {names}")
    for a in analysis[:max_rows]:
        m = a.mode
        excitation = " | ".join(f"{e.excitation*100:3.0f}%" for e in a.speaker_excitation)
        print(f"({m.n},{m.m},{m.l})   | {m.freq:6.1f} | {m.type[:4]} | {a.lp_pressure*100:3.0f}% {pressure_label(a.lp_pressure):<8} | {excitation}")
    print("")

    print("---- CRITICAL NULLS ----")
    for a in findings.nulls:
        print(f"{a.mode.freq:.1f} Hz ({a.mode.n},{a.mode.m},{a.mode.l}): {a.lp_pressure*100:.0f}% pressure")
    if not findings.nulls:
        print("None identified")

    print("---- CRITICAL PEAKS ----")
    for a in findings.peaks:
        print(f"{a.mode.freq:.1f} Hz ({a.mode.n},{a.mode.m},{a.mode.l}): {a.lp_pressure*100:.0f}% pressure")
    if not findings.peaks:
        print("None identified")

    print("---- PROBLEMATIC BANDS ----")
    for b in findings.problematic_bands:
        print(f"{b.name} ({b.low:.0f}-{b.high:.0f} Hz): {b.issue}, avg {b.avg_pressure*100:.0f}% pressure")
    if not findings.problematic_bands:
        print("None identified")
    print("")

    print("---- SPEAKERS ----")
    for s in speaker_analysis(setup.speakers, setup.room, setup.wall_openings):
        print(f"- {s.speaker.name}: boundary gain +{s.boundary_gain:.1f} dB")
        for null in s.sbir[:5]:
            print(f"    {null.boundary}: {null.distance:.1f} ft -> {null.freq:.0f} Hz null")

    return analysis, findings


@click.command(name="modal", help="Modal coupling of listener and speakers.")
@click.argument('setup_file', required=False, type=click.Path(exists=True, dir_okay=False))
@click.option('--rows', default=30, type=int)
def modal(setup_file, rows):
    setup = setup_from_cli(setup_file)
    print_modal_report(setup, max_rows=rows)


@click.command(name="response", help="Predicted bass response of the subwoofers.")
@click.argument('setup_file', required=False, type=click.Path(exists=True, dir_okay=False))
@click.option('--plot/--no-plot', default=False)
def response(setup_file, plot):
    setup = setup_from_cli(setup_file)
    subs = subwoofers(setup)
    if not subs:
        raise click.ClickException("setup has no subwoofers")

    modes = room_modes(setup.room, MODE_LIMIT)
    result = score_configuration(subs, modes, setup.room, setup.listener, setup.wall_openings)

    print(f"---- RESPONSE ({len(subs)} subs) ----")
    print(f"score={result.overall:.1f} peak_to_peak={result.peak_to_peak:.2f}dB std={result.std_dev:.2f}dB")

    peaks, dips = response_extrema(result.frequency_response)
    print("peaks: " + ", ".join(f"{p.freq:.0f}Hz ({p.db:+.1f}dB)" for p in peaks))
    print("dips:  " + ", ".join(f"{p.freq:.0f}Hz ({p.db:+.1f}dB)" for p in dips))

    cancelled = [d for d in result.mode_details if d.cancelled]
    for d in cancelled:
        m = d.mode
        print(f"cancelled ({m.n},{m.m},{m.l}) {m.freq:.1f}Hz net={d.net_excitation:+.2f}")

    if plot:
        plot_response({"Predicted": result.frequency_response}, title=f"score {result.overall:.1f}")
