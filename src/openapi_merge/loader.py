"""
Reading OpenAPI documents into the document model and writing them back.

The merge engine assumes valid documents; all input validation lives here.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Union

from pydantic import ValidationError

from .document import COMPONENTS_POINTER, SCHEMA_KIND, Document
from .merge.base import DocumentValidationError
from .utils import StructuredFileError, read_structured_file, write_structured_file

logger = logging.getLogger(__name__)

SCHEMA_POINTER = f"{COMPONENTS_POINTER}{SCHEMA_KIND}/"


def load_document(path: Union[str, Path]) -> Document:
    """
    Load an OpenAPI 3.x document from a JSON or YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        DocumentValidationError: If the file is malformed or not OpenAPI 3.x
    """
    path = Path(path)
    logger.debug(f"Loading document {path}")

    try:
        data = read_structured_file(path)
    except StructuredFileError as e:
        raise DocumentValidationError(str(e)) from e

    document = parse_document(data, origin=str(path))
    logger.info(
        f"Loaded {path.name}: {len(document.paths)} paths, "
        f"{len(document.schemas)} schemas"
    )
    return document


def parse_document(data: Any, origin: str = "<document>") -> Document:
    """
    Validate raw ``data`` and build a :class:`Document`.

    Raises:
        DocumentValidationError: Listing every problem found
    """
    if not isinstance(data, dict):
        raise DocumentValidationError(
            f"Invalid OpenAPI specification in {origin}: root must be an object"
        )

    problems = _structural_problems(data)
    if problems:
        raise DocumentValidationError(_format_problems(origin, problems))

    paths = data.get("paths") or {}
    extensions = [key for key in paths if key.startswith("x-")]
    if extensions:
        logger.debug(f"Ignoring paths extensions in {origin}: {extensions}")
        data = dict(data, paths={k: v for k, v in paths.items() if k not in extensions})

    try:
        return Document.model_validate(data)
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        ]
        raise DocumentValidationError(_format_problems(origin, problems)) from e


def _structural_problems(data: dict) -> List[str]:
    problems = []

    version = data.get("openapi")
    if version is None and "swagger" in data:
        problems.append("Swagger 2.0 documents are not supported")
    elif not isinstance(version, str) or not version.startswith("3."):
        problems.append("'openapi' must be a 3.x version string")

    info = data.get("info")
    if not isinstance(info, dict):
        problems.append("'info' object is required")
    else:
        for field in ("title", "version"):
            if not isinstance(info.get(field), str):
                problems.append(f"'info.{field}' is required")

    paths = data.get("paths")
    if paths is not None:
        if not isinstance(paths, dict):
            problems.append("'paths' must be an object")
        else:
            for key in paths:
                if not key.startswith("/") and not key.startswith("x-"):
                    problems.append(f"path '{key}' must start with '/'")

    return problems


def _format_problems(origin: str, problems: List[str]) -> str:
    lines = "\n".join(f"  - {problem}" for problem in problems)
    return f"Invalid OpenAPI specification in {origin}:\n{lines}"


def find_dangling_references(document: Document) -> List[str]:
    """
    Schema pointers in ``document`` that name no component schema.

    Both ``$ref`` values and discriminator mapping values are checked.
    """
    known = set(document.schemas)
    dangling: List[str] = []

    def check(ref: Any) -> None:
        if isinstance(ref, str) and ref.startswith(SCHEMA_POINTER):
            if ref[len(SCHEMA_POINTER):] not in known and ref not in dangling:
                dangling.append(ref)

    def walk(node: Any) -> None:
        if isinstance(node, dict):
            check(node.get("$ref"))
            discriminator = node.get("discriminator")
            if isinstance(discriminator, dict) and isinstance(discriminator.get("mapping"), dict):
                for target in discriminator["mapping"].values():
                    check(target)
            for value in node.values():
                walk(value)
        elif isinstance(node, list):
            for value in node:
                walk(value)

    walk(document.to_dict())
    return dangling


def dump_document(
    document: Document,
    path: Union[str, Path],
    indent: int = 2,
    validate: bool = True,
) -> Path:
    """
    Write ``document`` as JSON or YAML, chosen by the file suffix.

    Raises:
        DocumentValidationError: If ``validate`` is set and a schema
            reference does not resolve
    """
    if validate:
        dangling = find_dangling_references(document)
        if dangling:
            raise DocumentValidationError(
                _format_problems(
                    "merged document",
                    [f"unresolved reference '{ref}'" for ref in dangling],
                )
            )

    written = write_structured_file(path, document.to_dict(), indent=indent)
    logger.info(f"Wrote {written}")
    return written

