"""
Loading and validation of merge configuration files.

A configuration file is JSON or YAML:

    {
      "info": {"title": "Gateway API", "version": "1.0.0"},
      "servers": [{"url": "https://api.example.com"}],
      "sources": [
        {"path": "users.json", "name": "users", "pathPrefix": "/users"},
        {"path": "orders.yaml", "operationIdPrefix": "orders_"}
      ],
      "output": "merged-openapi.json",
      "schemaConflict": "rename"
    }

Relative source and output paths are resolved against the directory holding
the configuration file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from pydantic import ValidationError

from .merge.base import ConfigurationError, InfoConfig, MergeConfig, SourceConfig
from .settings import Settings
from .utils import StructuredFileError, read_structured_file

logger = logging.getLogger(__name__)


def validate_merge_config(config: MergeConfig) -> None:
    """
    Check required fields, reporting every missing one at once.

    Raises:
        ConfigurationError: If any required field is missing or blank
    """
    missing = []

    if config.info is None:
        missing.append("info")
    else:
        if not (config.info.title or "").strip():
            missing.append("info.title")
        if not (config.info.version or "").strip():
            missing.append("info.version")

    if not config.sources:
        missing.append("sources")
    else:
        for index, source in enumerate(config.sources):
            if not (source.path or "").strip():
                missing.append(f"sources[{index}].path")

    if missing:
        raise ConfigurationError(f"Missing required fields: {', '.join(missing)}")


def load_merge_config(path: Union[str, Path]) -> MergeConfig:
    """
    Load, validate and resolve a merge configuration file.

    Raises:
        FileNotFoundError: If the configuration file does not exist
        ConfigurationError: If the file is unreadable or incomplete
    """
    path = Path(path)

    try:
        data = read_structured_file(path)
    except StructuredFileError as e:
        raise ConfigurationError(str(e)) from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration in {path} must be an object")

    try:
        config = MergeConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e

    validate_merge_config(config)

    base_dir = path.resolve().parent
    for source in config.sources:
        source.path = str(_resolve(base_dir, source.path))
    config.output = str(_resolve(base_dir, config.output))

    logger.info(
        f"Loaded configuration '{config.info.title}' {config.info.version} "
        f"with {len(config.sources)} sources "
        f"(schema conflict: {config.schema_conflict.value})"
    )
    return config


def config_from_files(
    title: Optional[str],
    version: Optional[str],
    files: Iterable[Union[str, Path]],
    schema_conflict: Optional[str] = None,
    output: Optional[Union[str, Path]] = None,
    description: Optional[str] = None,
) -> MergeConfig:
    """
    Build a configuration for a direct merge of ``files``.

    Each source is named after its file stem.

    Raises:
        ConfigurationError: If title, version or files are missing
    """
    settings = Settings()

    sources = [
        SourceConfig(path=str(Path(f).resolve()), name=Path(f).stem) for f in files
    ]

    try:
        config = MergeConfig(
            info=InfoConfig(title=title, version=version, description=description),
            sources=sources,
            output=str(Path(output or settings.default_output).resolve()),
            schema_conflict=schema_conflict or settings.default_schema_conflict,
            openapi=settings.openapi_version,
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    validate_merge_config(config)
    return config


def _resolve(base_dir: Path, value: str) -> Path:
    candidate = Path(value)
    if candidate.is_absolute():
        return candidate
    return (base_dir / candidate).resolve()
