"""
CLI command: strategies

Lists the registered schema conflict strategies.
"""

import click

from openapi_merge.merge import get_strategy_info


@click.command("strategies")
def cli() -> None:
    """
    Show registered schema conflict strategies and their aliases.
    """
    click.echo("Available schema conflict strategies:")
    for name, details in get_strategy_info().items():
        aliases = [a for a in details["aliases"] if a != name]
        suffix = f" (aliases: {', '.join(aliases)})" if aliases else ""
        click.echo(f"  - {name}{suffix}")
        click.echo(f"      {details['description'].splitlines()[0]}")
