"""
Helpers for reading and writing structured (JSON/YAML) files.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Union

import yaml

logger = logging.getLogger("openapi_merge.utils")

YAML_SUFFIXES = (".yaml", ".yml")


class StructuredFileError(ValueError):
    """Raised when a file cannot be parsed as JSON or YAML."""

    pass


def is_yaml_path(path: Union[str, Path]) -> bool:
    return Path(path).suffix.lower() in YAML_SUFFIXES


def read_structured_file(path: Union[str, Path]) -> Any:
    """
    Read a JSON or YAML file, chosen by suffix.

    Raises:
        FileNotFoundError: If the file does not exist
        StructuredFileError: If the content cannot be parsed
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        if is_yaml_path(path):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise StructuredFileError(f"Could not parse {path}: {e}") from e

    logger.debug("Read structured file %s", path)
    return data


def write_structured_file(path: Union[str, Path], data: Any, indent: int = 2) -> Path:
    """
    Write ``data`` as JSON or YAML, chosen by suffix, creating parent directories.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if is_yaml_path(path):
        text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    else:
        text = json.dumps(data, indent=indent, ensure_ascii=False) + "\n"

    path.write_text(text, encoding="utf-8")
    logger.debug("Wrote structured file %s", path)
    return path
