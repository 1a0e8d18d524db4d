"""
Schema conflict strategies.

A strategy is consulted by the schema deduplicator only when a schema name is
already taken by a structurally different schema. It decides the name the new
source's schema is known by in the merged document.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional, Tuple

from ..document import Schema
from .base import MergeWarning, MergeWarningType, SchemaMergeError

if TYPE_CHECKING:
    from .mergers.schema_deduplicator import SchemaDeduplicator

Resolution = Tuple[str, Optional[MergeWarning]]


class ConflictStrategy(ABC):
    """Base class for schema conflict strategies."""

    def __init__(self):
        self.logger = logging.getLogger(
            f"{self.__class__.__module__}.{self.__class__.__name__}"
        )

    @property
    @abstractmethod
    def strategy_name(self) -> str:
        """Canonical name used in configuration files."""
        pass

    @property
    def supported_names(self) -> List[str]:
        """Every name this strategy answers to."""
        return [self.strategy_name]

    @abstractmethod
    def resolve(
        self,
        deduplicator: "SchemaDeduplicator",
        name: str,
        schema: Schema,
        source_name: str,
        existing_source: str,
    ) -> Resolution:
        """
        Decide the final name for ``schema``, registering it if needed.

        Args:
            deduplicator: Deduplicator holding the merged schema table
            name: Name the schema was published under
            schema: The incoming, conflicting schema
            source_name: Source publishing the incoming schema
            existing_source: Source that registered the current holder of ``name``

        Returns:
            The final schema name and an optional warning
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class RenameStrategy(ConflictStrategy):
    """Register the incoming schema under ``<source>_<name>``."""

    @property
    def strategy_name(self) -> str:
        return "rename"

    def resolve(self, deduplicator, name, schema, source_name, existing_source):
        base_name = f"{source_name}_{name}"

        final_name = base_name
        counter = 1
        while deduplicator.has_schema(final_name):
            final_name = f"{base_name}_{counter}"
            counter += 1

        deduplicator.register(final_name, schema, source_name)
        self.logger.debug(f"Renamed schema '{name}' from '{source_name}' to '{final_name}'")

        warning = MergeWarning(
            type=MergeWarningType.SCHEMA_RENAMED,
            message=(
                f"Schema '{name}' from source '{source_name}' renamed to "
                f"'{final_name}' due to conflict."
            ),
            source_name=source_name,
        )
        return final_name, warning


class FirstWinsStrategy(ConflictStrategy):
    """Keep the schema registered first; the newcomer resolves to it."""

    @property
    def strategy_name(self) -> str:
        return "first-wins"

    @property
    def supported_names(self) -> List[str]:
        return ["first-wins", "firstwins"]

    def resolve(self, deduplicator, name, schema, source_name, existing_source):
        warning = MergeWarning(
            type=MergeWarningType.SCHEMA_CONFLICT,
            message=(
                f"Schema '{name}' from source '{source_name}' conflicts with "
                f"schema from '{existing_source}'. Using first schema "
                f"(first-wins strategy)."
            ),
            source_name=source_name,
        )
        return name, warning


class FailStrategy(ConflictStrategy):
    """Abort the whole merge."""

    @property
    def strategy_name(self) -> str:
        return "fail"

    def resolve(self, deduplicator, name, schema, source_name, existing_source):
        self.logger.error(
            f"Schema '{name}' from '{source_name}' conflicts with '{existing_source}'"
        )
        raise SchemaMergeError(name, source_name)
