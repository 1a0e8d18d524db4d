"""
openapi-merge command line entry point.

Commands live in ``openapi_merge/plugins/cli``; every module there that
exposes a top-level ``cli`` click command is attached to the ``main`` group
when this module is imported.
"""

import importlib
import logging
import pathlib
import pkgutil

import click

from openapi_merge.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]
PLUGIN_PACKAGE = "openapi_merge.plugins.cli"

logger = logging.getLogger("openapi_merge")

_handler = logging.StreamHandler()
_handler.setFormatter(logging.Formatter(LOG_FORMAT))


def configure_logging(level: str) -> None:
    """
    Attach the stderr handler to the package logger and set its level.

    Safe to call repeatedly; the handler is only added once.
    """
    if _handler not in logger.handlers:
        logger.addHandler(_handler)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    settings.log_level = level.upper()


@click.group()
@click.option(
    "--log-level",
    default=settings.log_level,
    show_default=True,
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Verbosity of the openapi_merge loggers.",
)
def main(log_level: str) -> None:
    """
    openapi-merge CLI

    Merge several OpenAPI 3.x documents into a single document.
    """
    configure_logging(log_level)


def load_commands() -> None:
    """Register every plugin command found under ``plugins/cli``."""
    plugins_dir = pathlib.Path(__file__).parent / "plugins" / "cli"
    for module_info in pkgutil.iter_modules([str(plugins_dir)]):
        module_path = f"{PLUGIN_PACKAGE}.{module_info.name}"
        try:
            command = getattr(importlib.import_module(module_path), "cli", None)
        except Exception as e:
            logger.error(f"Failed to load plugin {module_path}: {e}")
            continue
        if isinstance(command, click.Command):
            main.add_command(command)
        else:
            logger.debug("Plugin %s has no cli command", module_path)


load_commands()

if __name__ == "__main__":
    main()
