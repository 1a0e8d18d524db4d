"""
CLI command: merge

Merges OpenAPI documents either from a configuration file or from files given
on the command line.

Exit codes:
    0  merge written
    1  configuration error, missing file or unexpected failure
    2  schema conflict under the 'fail' strategy
    3  invalid input document or invalid merged document
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

import click

from openapi_merge.config import config_from_files, load_merge_config
from openapi_merge.loader import dump_document, load_document
from openapi_merge.merge import (
    ConfigurationError,
    DocumentValidationError,
    MergeConfig,
    OpenApiMerger,
    SchemaConflictStrategy,
    SchemaMergeError,
)
from openapi_merge.settings import settings

# Configure module-level logger
logger = logging.getLogger("openapi_merge.cli.merge")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_SCHEMA_CONFLICT = 2
EXIT_INVALID_DOCUMENT = 3

USAGE_DIRECT = 'openapi-merge merge --title "API Title" --version "1.0.0" file1.json file2.json'
USAGE_CONFIG = "openapi-merge merge --config merge.config.json"


@click.command("merge")
@click.argument("files", nargs=-1, type=click.Path(path_type=Path))
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    help="Path to merge configuration file (JSON or YAML)",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    help="Output file path (JSON, or YAML by .yaml/.yml suffix)",
)
@click.option("--title", help="API title for merged specification")
@click.option("--version", "api_version", help="API version for merged specification")
@click.option(
    "--schema-conflict",
    type=click.Choice([s.value for s in SchemaConflictStrategy], case_sensitive=False),
    help="Strategy for handling schema conflicts",
)
@click.option("-v", "--verbose", is_flag=True, help="Show detailed progress")
@click.pass_context
def cli(
    ctx: click.Context,
    files: Tuple[Path, ...],
    config_path: Optional[Path],
    output: Optional[Path],
    title: Optional[str],
    api_version: Optional[str],
    schema_conflict: Optional[str],
    verbose: bool,
) -> None:
    """
    Merge multiple OpenAPI specifications.

    Use --config for a configuration file, or pass FILES together with
    --title and --version.
    """
    exit_code = run_merge(
        files, config_path, output, title, api_version, schema_conflict, verbose
    )
    ctx.exit(exit_code)


def run_merge(
    files: Tuple[Path, ...],
    config_path: Optional[Path],
    output: Optional[Path],
    title: Optional[str],
    api_version: Optional[str],
    schema_conflict: Optional[str],
    verbose: bool,
) -> int:
    """Run a merge and map failures to exit codes."""
    try:
        config = _build_config(
            files, config_path, output, title, api_version, schema_conflict, verbose
        )
        if config is None:
            return EXIT_ERROR
        return _merge(config, verbose)
    except FileNotFoundError as e:
        _error(f"File not found - {e}")
        return EXIT_ERROR
    except ConfigurationError as e:
        _error(f"Configuration error - {e}")
        return EXIT_ERROR
    except DocumentValidationError as e:
        _error(f"Invalid OpenAPI specification - {e}")
        return EXIT_INVALID_DOCUMENT
    except SchemaMergeError as e:
        _error(f"Schema merge conflict - {e}")
        return EXIT_SCHEMA_CONFLICT
    except Exception as e:
        logger.exception(f"Merge failed: {e}")
        _error(str(e))
        return EXIT_ERROR


def _build_config(
    files, config_path, output, title, api_version, schema_conflict, verbose
) -> Optional[MergeConfig]:
    if config_path is not None:
        if verbose:
            click.echo(f"Loading configuration from: {config_path.resolve()}")
        config = load_merge_config(config_path)
        if output is not None:
            config.output = str(output.resolve())
        if schema_conflict is not None:
            config.schema_conflict = SchemaConflictStrategy.parse(schema_conflict)
        if verbose:
            click.echo(f"  Title: {config.info.title}")
            click.echo(f"  Version: {config.info.version}")
            click.echo(f"  Sources: {len(config.sources)}")
            click.echo(f"  Output: {config.output}")
            click.echo(f"  Schema Conflict Strategy: {config.schema_conflict.value}")
        return config

    if files:
        if not (title or "").strip() or not (api_version or "").strip():
            _error("--title and --version are required when not using a config file.")
            click.echo(f"Usage: {USAGE_DIRECT}", err=True)
            return None
        return config_from_files(
            title, api_version, files, schema_conflict=schema_conflict, output=output
        )

    _error("Either --config or input files must be specified.")
    click.echo(f"Usage: {USAGE_CONFIG}", err=True)
    click.echo(f"   or: {USAGE_DIRECT}", err=True)
    return None


def _merge(config: MergeConfig, verbose: bool) -> int:
    if verbose:
        click.echo(f"Loading {len(config.sources)} source file(s)...")

    documents = []
    for source in config.sources:
        if verbose:
            click.echo(f"  Loading: {source.path}")
        documents.append((source, load_document(source.path)))

    if verbose:
        click.echo("Merging specifications...")

    result = OpenApiMerger().merge(config, documents)

    for warning in result.warnings:
        click.echo(f"Warning: {warning}", err=True)

    if verbose:
        click.echo(f"Writing merged specification to: {config.output}")

    dump_document(result.document, config.output, indent=settings.indent)

    if verbose:
        click.echo(
            f"Merge completed successfully with {len(result.warnings)} warning(s)."
        )
    else:
        click.echo(f"Merged {len(documents)} specifications into {config.output}")

    logger.info(f"Merge written to {config.output}")
    return EXIT_OK


def _error(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
