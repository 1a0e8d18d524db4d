"""
openapi-merge: combine independently produced OpenAPI 3.x documents into one.

Subpackages
-----------
- merge:    Merge engine, conflict strategies and component mergers
- plugins:  CLI commands discovered at startup

Modules
-------
- document: Typed OpenAPI document model
- loader:   Reading, validating and writing documents
- config:   Merge configuration files
- settings: Environment driven defaults
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__: str = version("openapi-merge")
except PackageNotFoundError:  # local editable install
    __version__ = "0.0.0-dev"

from .document import Document
from .merge import MergeConfig, MergeResult, OpenApiMerger

__all__ = [
    "Document",
    "MergeConfig",
    "MergeResult",
    "OpenApiMerger",
]
