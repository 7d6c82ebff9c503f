# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 Tobias Hienzsch

import click

from roombass.analysis import report
from roombass.analysis import room_modes


@click.group(help='Room analysis.')
def analysis():
    pass


analysis.add_command(report.modal)
analysis.add_command(report.response)
analysis.add_command(room_modes.main)
