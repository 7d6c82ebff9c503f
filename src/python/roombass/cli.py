# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 Tobias Hienzsch

import click

from roombass.analysis.cli import analysis
from roombass.config.cli import config
from roombass.placement.cli import placement


@click.group()
@click.option('--verbose', is_flag=True, help='Print search progress.')
@click.pass_context
def main(ctx, verbose):
    ctx.ensure_object(dict)
    ctx.obj['VERBOSE'] = verbose


main.add_command(analysis)
main.add_command(config)
main.add_command(placement)
