"""Command-line interface for ec2query.

A few describe calls rendered as tables, plus ``call`` for any action.
"""
import logging
import sys
from typing import Optional, Tuple

import click

from .client import EC2Client
from .config import ClientConfig
from .console_output import ConsoleOutput
from .exceptions import EC2QueryError, UnregisteredActionError


def _parse_pairs(pairs: Tuple[str, ...], what: str) -> list:
    parsed = []
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected Key=Value, got '{pair}'", param_hint=what)
        parsed.append((key, value))
    return parsed


def _filters(pairs: Tuple[str, ...]) -> dict:
    filters: dict = {}
    for name, value in _parse_pairs(pairs, "--filter"):
        filters.setdefault(name, []).append(value)
    return filters


@click.group()
@click.version_option()
@click.option('--region', envvar='AWS_REGION', help='AWS region (default: us-east-1)')
@click.option('--endpoint', envvar='EC2_URL', help='EC2 endpoint URL')
@click.option('--verbose', '-v', is_flag=True, help='Log requests and polling')
@click.pass_context
def cli(ctx, region: Optional[str], endpoint: Optional[str], verbose: bool):
    """ec2query - EC2 Query API client."""
    ctx.ensure_object(dict)
    ctx.obj['console'] = ConsoleOutput()

    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        config = ClientConfig.from_env(region=region, endpoint=endpoint)
        ctx.obj['client'] = EC2Client(config)
    except Exception as e:
        ctx.obj['console'].print_error(f"Failed to initialize EC2 client: {str(e)}")
        sys.exit(1)


@cli.command()
@click.argument('image_ids', nargs=-1)
@click.option('--owner', multiple=True, help='Owner id or alias (self, amazon, ...)')
@click.option('--filter', 'filters', multiple=True, help='Filter as name=value')
@click.pass_context
def images(ctx, image_ids: Tuple[str, ...], owner: Tuple[str, ...], filters: Tuple[str, ...]):
    """Describe images."""
    console = ctx.obj['console']
    client = ctx.obj['client']

    try:
        options = {}
        if owner:
            options['owner'] = owner[0] if len(owner) == 1 else list(owner)
        if filters:
            options['filter'] = _filters(filters)
        console.print_images(client.describe_images(*image_ids, **options))
    except EC2QueryError as e:
        console.print_error(f"Failed to describe images: {str(e)}")
        sys.exit(1)


@cli.command(name='security-groups')
@click.argument('groups', nargs=-1)
@click.option('--filter', 'filters', multiple=True, help='Filter as name=value')
@click.pass_context
def security_groups(ctx, groups: Tuple[str, ...], filters: Tuple[str, ...]):
    """Describe security groups by id or name."""
    console = ctx.obj['console']
    client = ctx.obj['client']

    try:
        options = {'filter': _filters(filters)} if filters else {}
        console.print_security_groups(client.describe_security_groups(*groups, **options))
    except EC2QueryError as e:
        console.print_error(f"Failed to describe security groups: {str(e)}")
        sys.exit(1)


@cli.command()
@click.argument('public_ips', nargs=-1)
@click.pass_context
def addresses(ctx, public_ips: Tuple[str, ...]):
    """Describe elastic IP addresses."""
    console = ctx.obj['console']
    client = ctx.obj['client']

    try:
        console.print_addresses(client.describe_addresses(*public_ips))
    except EC2QueryError as e:
        console.print_error(f"Failed to describe addresses: {str(e)}")
        sys.exit(1)


@cli.command()
@click.argument('action')
@click.argument('params', nargs=-1)
@click.pass_context
def call(ctx, action: str, params: Tuple[str, ...]):
    """Call ACTION with raw Key=Value query parameters.

    The result is decoded when ACTION has a registered decoder; otherwise
    the raw response is printed.
    """
    console = ctx.obj['console']
    client = ctx.obj['client']

    try:
        pairs = _parse_pairs(params, 'PARAMS')
        try:
            result = client.call(action, pairs)
        except UnregisteredActionError:
            console.print_warning(f"No decoder registered for {action}; showing raw response")
            result = client.call_raw(action, pairs)
        console.print_result(result)
    except EC2QueryError as e:
        console.print_error(f"{action} failed: {str(e)}")
        sys.exit(1)


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
