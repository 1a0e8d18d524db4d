"""
Component mergers used by the merge orchestrator.

Each merger owns one part of the merged document and is instantiated once per
merge, so concurrent merges never share state.
"""

from .path_merger import (
    PathMerger,
    apply_path_prefix,
    clone_schema,
    rewrite_reference,
)
from .schema_deduplicator import SchemaDeduplicator, are_structurally_equal
from .security_merger import SecuritySchemeMerger, are_security_schemes_equivalent
from .tag_merger import (
    TagGroup,
    TagGroupMerger,
    TagMerger,
    read_tag_groups,
    write_tag_groups,
)

__all__ = [
    "PathMerger",
    "SchemaDeduplicator",
    "SecuritySchemeMerger",
    "TagMerger",
    "TagGroupMerger",
    "TagGroup",
    "apply_path_prefix",
    "clone_schema",
    "rewrite_reference",
    "are_structurally_equal",
    "are_security_schemes_equivalent",
    "read_tag_groups",
    "write_tag_groups",
]
