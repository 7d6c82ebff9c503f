# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 Tobias Hienzsch

import click
import matplotlib.pyplot as plt
import numpy as np

from roombass.common.plot import plot_styles
from roombass.geometry.room import FT3_TO_M3, SPEED_OF_SOUND, Mode, Room

MODE_LEVELS = {
    "axial": 0.0,
    "tangential": -3.0,
    "oblique": -6.0,
}


NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]


def hz_to_note(frequency):
    """Nearest equal-tempered note (A4 = 440 Hz), "-" for non-positive input."""
    if frequency <= 0:
        return "-"
    midi = int(round(69 + 12*np.log2(frequency/440.0)))
    return f"{NOTE_NAMES[midi % 12]}{midi//12 - 1}"


def room_mode(L, W, H, n, m, l, c=SPEED_OF_SOUND):
    term_l = (n/L)**2 if n > 0 else 0.0
    term_w = (m/W)**2 if m > 0 else 0.0
    term_h = (l/H)**2 if l > 0 else 0.0
    if term_l + term_w + term_h == 0:
        return 0.0
    return c*0.5*np.sqrt(term_l + term_w + term_h)


def room_mode_kind(n, m, l):
    non_zero = (n != 0) + (m != 0) + (l != 0)
    if non_zero == 1:
        return "axial"
    if non_zero == 2:
        return "tangential"
    return "oblique"


def room_modes(room: Room, max_freq, max_order=6):
    """All modes up to max_order per axis with 0 < freq <= max_freq, sorted by frequency.
    """
    modes = []
    for n in range(max_order+1):
        for m in range(max_order+1):
            for l in range(max_order+1):
                if n == 0 and m == 0 and l == 0:
                    continue
                freq = room_mode(room.length, room.width, room.height, n, m, l)
                if 0 < freq <= max_freq:
                    kind = room_mode_kind(n, m, l)
                    modes.append(Mode(n, m, l, float(freq), kind, MODE_LEVELS[kind]))

    return sorted(modes, key=lambda x: x.freq)


def fundamental_modes(room: Room):
    L, W, H = room.length, room.width, room.height
    return (
        room_mode(L, W, H, 1, 0, 0),
        room_mode(L, W, H, 0, 1, 0),
        room_mode(L, W, H, 0, 0, 1),
    )


def schroeder_frequency(volume, rt60=0.4):
    """Schroeder frequency for a volume given in cubic feet."""
    volume_m3 = volume*FT3_TO_M3
    return 2000.0*np.sqrt(rt60/volume_m3)


def modes_below_schroeder(modes, f_sch):
    """Number of modes per type at or below the Schroeder frequency."""
    counts = {kind: 0 for kind in MODE_LEVELS}
    for mode in modes:
        if mode.freq <= f_sch:
            counts[mode.type] += 1
    return counts


def room_ratios(room: Room):
    # H:W:L normalised to height
    return (1.0, room.width/room.height, room.length/room.height)


def frequency_spacing_index(modes):
    num = len(modes)
    if num < 2:
        return np.nan

    f0 = modes[0].freq
    fn = modes[-1].freq
    delta_hat = (fn-f0)/(num-1)
    if delta_hat == 0:
        return np.nan

    psi = 0.0
    for n in range(1, num):
        delta = modes[n].freq - modes[n-1].freq
        psi += (delta/delta_hat)**2
    return psi / (num-1)


def print_room_modes(room: Room, modes, num_modes=10, rt60=0.4, max_order=6):
    L, W, H = room.length, room.width, room.height
    V = room.volume
    f_sch = schroeder_frequency(V, rt60)
    f_l, f_w, f_h = fundamental_modes(room)
    _, w_h, l_h = room_ratios(room)

    print(f"{L=:.2f}ft {W=:.2f}ft {H=:.2f}ft")
    print(f"{V=:.0f}ft^3 schroeder={f_sch:.0f}Hz ({rt60=:.2f}s)")
    print(f"H:W:L = 1 : {w_h:.2f} : {l_h:.2f}")
    print(f"fundamentals: length={f_l:.1f}Hz width={f_w:.1f}Hz height={f_h:.1f}Hz")
    fsi = frequency_spacing_index(modes)
    if np.isfinite(fsi):
        print(f"FSI({len(modes)}): {fsi:.2f}")
    below = modes_below_schroeder(room_modes(room, f_sch, max_order=max_order), f_sch)
    print(f"modes up to schroeder: axial={below['axial']} tangential={below['tangential']} oblique={below['oblique']}")
    print("")

    for mode in modes[:num_modes]:
        note = hz_to_note(mode.freq)
        print(f"[{mode.n},{mode.m},{mode.l}] = {mode.freq:.2f}Hz ({note}) {mode.type}")


def plot_room_modes(room: Room, modes, fmax):
    plt.rcParams.update(plot_styles)

    colors = {"axial": "#D62728", "tangential": "#1F77B4", "oblique": "#AAAAAA"}
    for kind, color in colors.items():
        freqs = [mode.freq for mode in modes if mode.type == kind]
        levels = [mode.level for mode in modes if mode.type == kind]
        plt.vlines(freqs, -12.0, levels, colors=color, label=kind)

    plt.title(f"Room modes {room.length}x{room.width}x{room.height} ft")
    plt.xlabel('Frequency [Hz]')
    plt.ylabel('Nominal level [dB]')
    plt.xlim((0, fmax))
    plt.ylim((-12.0, 1.0))
    plt.legend()
    plt.show()


@click.command(name="room-modes", help="List room modes.")
@click.option('--length', default=18.0, type=float)
@click.option('--width', default=14.0, type=float)
@click.option('--height', default=9.0, type=float)
@click.option('--fmax', default=200.0, type=float)
@click.option('--max_order', default=6, type=int)
@click.option('--num_modes', default=10, type=int)
@click.option('--rt60', default=0.4, type=float)
@click.option('--plot/--no-plot', default=False)
def main(length, width, height, fmax, max_order, num_modes, rt60, plot):
    if min(length, width, height) <= 0:
        raise click.BadParameter("room dimensions must be positive")

    room = Room(length, width, height)
    modes = room_modes(room, fmax, max_order=max_order)
    print_room_modes(room, modes, num_modes=num_modes, rt60=rt60, max_order=max_order)

    if plot:
        plot_room_modes(room, modes, fmax)
