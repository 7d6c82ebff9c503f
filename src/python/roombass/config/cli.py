# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 Tobias Hienzsch

import click

from roombass.config import setup


@click.group(help='Room setup files.')
def config():
    pass


config.add_command(setup.main)
