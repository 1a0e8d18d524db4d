"""
CLI command: info

Displays the openapi-merge package version and the active settings.
"""

import logging
from importlib.metadata import PackageNotFoundError, version

import click

from openapi_merge.merge import get_available_strategies
from openapi_merge.settings import settings

# Configure module-level logger
logger = logging.getLogger("openapi_merge.cli.info")


@click.command("info")
def cli() -> None:
    """
    Show package metadata and active settings.
    """
    # Retrieve package version, fallback if not installed
    try:
        pkg_version = version("openapi-merge")
        logger.debug("Retrieved package version: %s", pkg_version)
    except PackageNotFoundError:
        pkg_version = "0.0.0-dev"
        logger.debug("Package 'openapi-merge' not installed; using development version.")

    click.echo(f"openapi-merge version: {pkg_version}")

    click.echo("\nSettings (override with OPENAPI_MERGE_* environment variables):")
    for name, value in settings.model_dump().items():
        click.echo(f"  {name}: {value}")

    click.echo("\nSchema conflict strategies:")
    for strategy in get_available_strategies():
        click.echo(f"  - {strategy}")
