"""
Configuration, result and error types shared by the merge components.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..document import Document

DEFAULT_TITLE = "Merged API"
DEFAULT_VERSION = "1.0.0"
DEFAULT_OUTPUT = "merged-openapi.json"


class SchemaConflictStrategy(str, Enum):
    """How two differing schemas published under one name are reconciled."""

    RENAME = "rename"
    FIRST_WINS = "first-wins"
    FAIL = "fail"

    @classmethod
    def parse(cls, value: object) -> "SchemaConflictStrategy":
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.RENAME

        normalized = str(value).strip().lower().replace("_", "-")
        if normalized == "":
            return cls.RENAME
        if normalized == "firstwins":
            return cls.FIRST_WINS
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(
                f"Unknown schema conflict strategy: '{value}'. "
                f"Available strategies: {', '.join(s.value for s in cls)}"
            ) from None


class _ConfigModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InfoConfig(_ConfigModel):
    """Info block stamped on the merged document."""

    title: Optional[str] = Field(None, description="API title")
    version: Optional[str] = Field(None, description="API version")
    description: Optional[str] = Field(None, description="API description")


class ServerConfig(_ConfigModel):
    """Server entry copied verbatim into the merged document."""

    url: str = Field("", description="Server URL")
    description: Optional[str] = Field(None, description="Server description")


class SourceConfig(_ConfigModel):
    """Configuration for a single source document."""

    path: str = Field("", description="Location of the source document")
    name: Optional[str] = Field(
        None, description="Friendly name used in warnings and renamed schemas"
    )
    path_prefix: Optional[str] = Field(
        None, description="Prefix prepended to every path of this source"
    )
    operation_id_prefix: Optional[str] = Field(
        None, description="Prefix prepended to every operationId of this source"
    )

    @property
    def source_name(self) -> str:
        """The configured name, or the stem of the source path."""
        if self.name:
            return self.name
        return Path(self.path).stem


class MergeConfig(_ConfigModel):
    """Configuration for a merge operation."""

    info: Optional[InfoConfig] = Field(default_factory=InfoConfig)
    servers: List[ServerConfig] = Field(default_factory=list)
    sources: List[SourceConfig] = Field(default_factory=list)
    output: str = Field(DEFAULT_OUTPUT, description="Output file for the CLI")
    schema_conflict: SchemaConflictStrategy = Field(
        SchemaConflictStrategy.RENAME,
        description="Strategy for schemas that share a name but differ",
    )
    openapi: str = Field("3.0.3", description="Version stamped on the output")

    @field_validator("schema_conflict", mode="before")
    @classmethod
    def _parse_strategy(cls, value):
        return SchemaConflictStrategy.parse(value)


class MergeWarningType(str, Enum):
    PATH_CONFLICT = "PathConflict"
    SCHEMA_CONFLICT = "SchemaConflict"
    SCHEMA_RENAMED = "SchemaRenamed"
    OPERATION_ID_CONFLICT = "OperationIdConflict"
    SECURITY_SCHEME_CONFLICT = "SecuritySchemeConflict"


class MergeWarning(BaseModel):
    """A non-fatal diagnostic produced while merging."""

    type: MergeWarningType
    message: str
    source_name: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        if self.source_name is not None:
            return f"[{self.type.value}] {self.source_name}: {self.message}"
        return f"[{self.type.value}] {self.message}"


class MergeResult(BaseModel):
    """Result container for a merge operation."""

    document: Document
    warnings: List[MergeWarning] = Field(default_factory=list)
    success: bool = True

    def warnings_of(self, warning_type: MergeWarningType) -> List[MergeWarning]:
        return [w for w in self.warnings if w.type == warning_type]


class BaseComponentMerger:
    """
    Common plumbing for the per-merge component mergers.

    Each instance lives for exactly one merge call and owns the warnings it
    records.
    """

    def __init__(self):
        self.logger = logging.getLogger(
            f"{self.__class__.__module__}.{self.__class__.__name__}"
        )
        self._warnings: List[MergeWarning] = []

    def get_warnings(self) -> List[MergeWarning]:
        """Warnings recorded so far, in the order they occurred."""
        return list(self._warnings)

    def _warn(
        self,
        warning_type: MergeWarningType,
        message: str,
        source_name: Optional[str] = None,
    ) -> MergeWarning:
        warning = MergeWarning(
            type=warning_type, message=message, source_name=source_name
        )
        self._warnings.append(warning)
        self.logger.info(str(warning))
        return warning

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(warnings={len(self._warnings)})"


class MergeError(Exception):
    """Base exception for merge operations."""

    pass


class ConfigurationError(MergeError):
    """Exception raised for configuration-related errors."""

    pass


class DocumentValidationError(MergeError):
    """Exception raised when a document is malformed or not a valid OpenAPI description."""

    pass


class SchemaMergeError(MergeError):
    """
    Exception raised when two schemas conflict and the strategy is 'fail'.
    """

    def __init__(self, schema_name: str, source_name: str):
        self.schema_name = schema_name
        self.source_name = source_name
        super().__init__(
            f"Schema conflict: '{schema_name}' from source '{source_name}' "
            f"conflicts with existing schema and strategy is 'fail'"
        )
