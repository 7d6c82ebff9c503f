# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 Tobias Hienzsch

from matplotlib.ticker import ScalarFormatter

plot_styles = {
    'axes.edgecolor': 'white',
    'axes.facecolor': 'white',
    'axes.grid': True,
    'axes.grid.which': 'both',
    'axes.spines.left': False,
    'axes.spines.right': False,
    'axes.spines.top': False,
    'axes.spines.bottom': False,
    'figure.constrained_layout.use': True,
    'grid.color': '#CCCCCC',
    'grid.linewidth': '0.8',
    'xtick.color': '#666666',
    'ytick.color': '#666666',
    'lines.linewidth': 1.5,
}


def format_bass_axis(ax, fmin, fmax):
    """Log frequency axis without scientific tick labels, limited to [fmin, fmax]."""
    formatter = ScalarFormatter()
    formatter.set_scientific(False)

    ax.set_xscale('log')
    ax.set_xlim((fmin, fmax))
    ax.set_xlabel('Frequency [Hz]')
    ax.xaxis.set_major_formatter(formatter)
    ax.grid(which='minor', color='#DDDDDD', linestyle=':', linewidth=0.5)
    ax.minorticks_on()
