# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 Tobias Hienzsch

import click

from roombass.placement import optimizer


@click.group(help='Subwoofer placement.')
def placement():
    pass


placement.add_command(optimizer.optimize_main)
placement.add_command(optimizer.strategies_main)
