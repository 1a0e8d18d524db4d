"""
Schema deduplication and structural equality.

Schemas published under the same name by several sources collapse into one
entry when they are structurally equal. Differing schemas are handed to the
configured conflict strategy.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ...document import Discriminator, Reference, Schema
from ..base import BaseComponentMerger, MergeWarning, SchemaConflictStrategy
from ..registry import create_strategy
from ..strategies import ConflictStrategy

_SCALAR_FIELDS = (
    "type",
    "format",
    "title",
    "description",
    "nullable",
    "read_only",
    "write_only",
    "deprecated",
    # numeric
    "minimum",
    "maximum",
    "exclusive_minimum",
    "exclusive_maximum",
    "multiple_of",
    # string
    "min_length",
    "max_length",
    "pattern",
    # array
    "min_items",
    "max_items",
    "unique_items",
    # object
    "min_properties",
    "max_properties",
)


class SchemaDeduplicator(BaseComponentMerger):
    """
    Tracks schema names across sources and records per-source renames.
    """

    def __init__(
        self,
        strategy: Union[str, SchemaConflictStrategy, ConflictStrategy] = (
            SchemaConflictStrategy.RENAME
        ),
    ):
        super().__init__()
        if isinstance(strategy, ConflictStrategy):
            self.strategy = strategy
        else:
            self.strategy = create_strategy(strategy)

        self._schemas: Dict[str, Tuple[Schema, str]] = {}
        self._renames: Dict[str, Dict[str, str]] = {}

    def add_schema(
        self, name: str, schema: Schema, source_name: str
    ) -> Tuple[str, Optional[MergeWarning]]:
        """
        Add a schema, resolving name conflicts with the configured strategy.

        Args:
            name: Name the source publishes the schema under
            schema: The schema itself
            source_name: Source providing the schema

        Returns:
            The name the schema is known by in the merged document and the
            warning produced, if any

        Raises:
            SchemaMergeError: On a conflict when the strategy is 'fail'
        """
        if not name:
            raise ValueError("Schema name cannot be empty")
        if schema is None:
            raise ValueError("Schema cannot be None")
        if not source_name:
            raise ValueError("Source name cannot be empty")

        renames = self._renames.setdefault(source_name, {})

        existing = self._schemas.get(name)
        if existing is None:
            self.register(name, schema, source_name)
            renames[name] = name
            self.logger.debug(f"Registered schema '{name}' from '{source_name}'")
            return name, None

        existing_schema, existing_source = existing
        if are_structurally_equal(existing_schema, schema):
            renames[name] = name
            self.logger.debug(
                f"Schema '{name}' from '{source_name}' matches '{existing_source}'"
            )
            return name, None

        final_name, warning = self.strategy.resolve(
            self, name, schema, source_name, existing_source
        )
        renames[name] = final_name
        if warning is not None:
            self._warnings.append(warning)
            self.logger.info(str(warning))
        return final_name, warning

    def register(self, name: str, schema: Schema, source_name: str) -> None:
        """Put ``schema`` in the merged table under ``name``."""
        self._schemas[name] = (schema, source_name)

    def has_schema(self, name: str) -> bool:
        return name in self._schemas

    def get_schemas(self) -> Dict[str, Schema]:
        """All deduplicated schemas, in registration order."""
        return {name: schema for name, (schema, _) in self._schemas.items()}

    def get_schema_sources(self) -> Dict[str, str]:
        """Name of the source that registered each merged schema."""
        return {name: source for name, (_, source) in self._schemas.items()}

    def get_renames(self, source_name: str) -> Dict[str, str]:
        """
        Mapping of original to final schema names for one source.

        Unknown sources yield an empty mapping.
        """
        return dict(self._renames.get(source_name, {}))


def are_structurally_equal(a: Optional[Schema], b: Optional[Schema]) -> bool:
    """
    Exact, recursive, field-by-field comparison of two schemas.

    References are compared by kind and name only and never resolved, so
    self-referencing schema graphs terminate. Enum values and composition
    lists are order-sensitive; required names and property maps are not.
    """
    if a is b:
        return True
    if a is None or b is None:
        return False

    for field in _SCALAR_FIELDS:
        if not _same_value(getattr(a, field), getattr(b, field)):
            return False

    if not _any_equal(a.default, b.default):
        return False
    if not _enums_equal(a.enum, b.enum):
        return False
    if set(a.required or ()) != set(b.required or ()):
        return False
    if not _references_equal(a.ref, b.ref):
        return False
    if not _discriminators_equal(a.discriminator, b.discriminator):
        return False

    if not are_structurally_equal(a.items, b.items):
        return False
    if not _properties_equal(a.properties, b.properties):
        return False
    if not _additional_properties_equal(
        a.additional_properties, b.additional_properties
    ):
        return False

    if not _schema_lists_equal(a.all_of, b.all_of):
        return False
    if not _schema_lists_equal(a.one_of, b.one_of):
        return False
    if not _schema_lists_equal(a.any_of, b.any_of):
        return False

    return are_structurally_equal(a.not_, b.not_)


def _same_value(a: Any, b: Any) -> bool:
    # True == 1 in Python; keep booleans distinct from numbers.
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    return a == b


def _canonical(value: Any) -> str:
    return json.dumps(_string_keys(value), sort_keys=True, default=str)


def _string_keys(value: Any) -> Any:
    # YAML mappings may mix int and str keys, which json cannot sort.
    if isinstance(value, dict):
        return {str(key): _string_keys(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_string_keys(item) for item in value]
    return value


def _any_equal(a: Any, b: Any) -> bool:
    if a is None or b is None:
        return a is None and b is None
    return _canonical(a) == _canonical(b)


def _enums_equal(a: Optional[Sequence[Any]], b: Optional[Sequence[Any]]) -> bool:
    if a is None or b is None:
        return a is None and b is None
    if len(a) != len(b):
        return False
    return all(_any_equal(x, y) for x, y in zip(a, b))


def _references_equal(a: Optional[Reference], b: Optional[Reference]) -> bool:
    if a is None or b is None:
        return a is None and b is None
    return a.kind == b.kind and a.name == b.name and a.external == b.external


def _discriminators_equal(
    a: Optional[Discriminator], b: Optional[Discriminator]
) -> bool:
    if a is None or b is None:
        return a is None and b is None
    return a.property_name == b.property_name and (a.mapping or {}) == (b.mapping or {})


def _properties_equal(
    a: Optional[Dict[str, Schema]], b: Optional[Dict[str, Schema]]
) -> bool:
    a = a or {}
    b = b or {}
    if a.keys() != b.keys():
        return False
    return all(are_structurally_equal(a[key], b[key]) for key in a)


def _additional_properties_equal(
    a: Optional[Union[bool, Schema]], b: Optional[Union[bool, Schema]]
) -> bool:
    if isinstance(a, Schema) and isinstance(b, Schema):
        return are_structurally_equal(a, b)
    if isinstance(a, Schema) or isinstance(b, Schema):
        return False
    return a == b


def _schema_lists_equal(
    a: Optional[List[Schema]], b: Optional[List[Schema]]
) -> bool:
    a = a or []
    b = b or []
    if len(a) != len(b):
        return False
    return all(are_structurally_equal(x, y) for x, y in zip(a, b))
