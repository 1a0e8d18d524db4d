"""
Merge orchestrator.

Runs the merge phases over all sources in the order they were supplied:

1. schemas       - deduplicate component schemas, build per-source rename maps
2. paths         - prefix, clone and rewrite every path item
3. tags          - first definition of each tag wins
4. security      - first definition of each security scheme wins
5. tag groups    - union of the ``x-tagGroups`` extension

The info block and server list come from the merge configuration only;
servers declared by the sources are ignored.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, List, Sequence, Tuple

from ..document import Components, Document, Info, Server
from .base import (
    DEFAULT_TITLE,
    DEFAULT_VERSION,
    MergeConfig,
    MergeResult,
    MergeWarning,
    SourceConfig,
)
from .mergers.path_merger import PathMerger, clone_schema
from .mergers.schema_deduplicator import SchemaDeduplicator
from .mergers.security_merger import SecuritySchemeMerger
from .mergers.tag_merger import TagGroupMerger, TagMerger, read_tag_groups, write_tag_groups

logger = logging.getLogger(__name__)

Source = Tuple[SourceConfig, Document]


class MergePhase(str, Enum):
    INIT = "init"
    SCHEMAS = "schemas"
    PATHS = "paths"
    TAGS = "tags"
    SECURITY = "security"
    TAG_GROUPS = "tag_groups"
    DONE = "done"
    FAILED = "failed"


class OpenApiMerger:
    """
    Merges several OpenAPI documents into one.

    An instance may be reused, but every call to :meth:`merge` builds its own
    component mergers, so no state leaks from one merge into the next.
    """

    def __init__(self):
        self.phase = MergePhase.INIT
        self.logger = logging.getLogger(
            f"{self.__class__.__module__}.{self.__class__.__name__}"
        )

    def merge(self, config: MergeConfig, sources: Iterable[Source]) -> MergeResult:
        """
        Merge ``sources`` into a single document.

        Args:
            config: Info, servers and schema conflict strategy of the merge
            sources: Ordered (source configuration, document) pairs

        Returns:
            The merged document with every warning raised along the way

        Raises:
            SchemaMergeError: On a schema conflict under the 'fail' strategy
        """
        if config is None:
            raise ValueError("Merge configuration cannot be None")
        if sources is None:
            raise ValueError("Sources cannot be None")

        source_list = list(sources)
        warnings: List[MergeWarning] = []
        self.phase = MergePhase.INIT
        self.logger.info(f"Merging {len(source_list)} source documents")

        try:
            self._enter(MergePhase.SCHEMAS)
            deduplicator = self._merge_schemas(config, source_list, warnings)

            self._enter(MergePhase.PATHS)
            path_merger = PathMerger()
            for source, document in source_list:
                path_merger.add_paths(
                    document.paths,
                    source,
                    deduplicator.get_renames(source.source_name),
                )
            warnings.extend(path_merger.get_warnings())

            self._enter(MergePhase.TAGS)
            tag_merger = TagMerger()
            for _, document in source_list:
                tag_merger.add_tags(document.tags)

            self._enter(MergePhase.SECURITY)
            security_merger = SecuritySchemeMerger()
            for source, document in source_list:
                security_merger.add_schemes(document.security_schemes, source.source_name)
            warnings.extend(security_merger.get_warnings())

            self._enter(MergePhase.TAG_GROUPS)
            tag_group_merger = TagGroupMerger()
            for _, document in source_list:
                tag_group_merger.add_groups(read_tag_groups(document))
        except Exception:
            self.phase = MergePhase.FAILED
            self.logger.error("Merge aborted")
            raise

        merged = Document(
            openapi=config.openapi,
            info=self._create_info(config),
            servers=self._create_servers(config) or None,
            paths=path_merger.get_paths(),
            components=Components(
                schemas=self._rewrite_component_schemas(deduplicator) or None,
                security_schemes=security_merger.get_schemes() or None,
            ),
            tags=tag_merger.get_tags() or None,
        )
        write_tag_groups(merged, tag_group_merger.get_groups())

        self._enter(MergePhase.DONE)
        self.logger.info(
            f"Merged {len(merged.paths)} paths and {len(merged.schemas)} schemas "
            f"with {len(warnings)} warnings"
        )
        return MergeResult(document=merged, warnings=warnings, success=True)

    def _enter(self, phase: MergePhase) -> None:
        self.logger.debug(f"Phase {self.phase.value} -> {phase.value}")
        self.phase = phase

    @staticmethod
    def _merge_schemas(
        config: MergeConfig, sources: Sequence[Source], warnings: List[MergeWarning]
    ) -> SchemaDeduplicator:
        deduplicator = SchemaDeduplicator(config.schema_conflict)
        for source, document in sources:
            for name, schema in document.schemas.items():
                _, warning = deduplicator.add_schema(name, schema, source.source_name)
                if warning is not None:
                    warnings.append(warning)
        return deduplicator

    @staticmethod
    def _rewrite_component_schemas(deduplicator: SchemaDeduplicator):
        # Component schemas may reference siblings that were renamed in the
        # same source; each is rewritten with its own source's rename map.
        sources = deduplicator.get_schema_sources()
        return {
            name: clone_schema(schema, deduplicator.get_renames(sources[name]))
            for name, schema in deduplicator.get_schemas().items()
        }

    @staticmethod
    def _create_info(config: MergeConfig) -> Info:
        info = config.info
        if info is None:
            return Info(title=DEFAULT_TITLE, version=DEFAULT_VERSION)
        return Info(
            title=info.title or DEFAULT_TITLE,
            version=info.version or DEFAULT_VERSION,
            description=info.description,
        )

    @staticmethod
    def _create_servers(config: MergeConfig) -> List[Server]:
        return [
            Server(url=server.url, description=server.description)
            for server in config.servers
        ]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(phase={self.phase.value})"


def merge(config: MergeConfig, sources: Iterable[Source]) -> MergeResult:
    """Merge ``sources`` according to ``config``."""
    return OpenApiMerger().merge(config, sources)
