"""
OpenAPI merge engine.

This package merges independently produced OpenAPI documents into a single
document:

- Schema deduplication by structural equality, with pluggable conflict
  strategies (rename, first-wins, fail)
- Path and operationId prefixing with conflict detection
- Schema reference rewriting throughout cloned path items
- Tag, tag group and security scheme consolidation
"""

from .base import (
    ConfigurationError,
    DocumentValidationError,
    InfoConfig,
    MergeConfig,
    MergeError,
    MergeResult,
    MergeWarning,
    MergeWarningType,
    SchemaConflictStrategy,
    SchemaMergeError,
    ServerConfig,
    SourceConfig,
)
from .merger import MergePhase, OpenApiMerger, merge
from .mergers import (
    PathMerger,
    SchemaDeduplicator,
    SecuritySchemeMerger,
    TagGroup,
    TagGroupMerger,
    TagMerger,
    are_structurally_equal,
)
from .registry import (
    create_strategy,
    get_available_strategies,
    get_strategy_info,
    register_strategy,
)
from .strategies import ConflictStrategy

__all__ = [
    # Configuration and results
    "MergeConfig",
    "InfoConfig",
    "ServerConfig",
    "SourceConfig",
    "SchemaConflictStrategy",
    "MergeResult",
    "MergeWarning",
    "MergeWarningType",
    # Errors
    "MergeError",
    "ConfigurationError",
    "DocumentValidationError",
    "SchemaMergeError",
    # Orchestration
    "OpenApiMerger",
    "MergePhase",
    "merge",
    # Components
    "SchemaDeduplicator",
    "PathMerger",
    "SecuritySchemeMerger",
    "TagMerger",
    "TagGroupMerger",
    "TagGroup",
    "are_structurally_equal",
    # Strategy registry
    "ConflictStrategy",
    "create_strategy",
    "register_strategy",
    "get_available_strategies",
    "get_strategy_info",
]
