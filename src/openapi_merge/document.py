"""
In-memory OpenAPI document model.

Pydantic models for the parts of an OpenAPI 3.x description the merge engine
reads and rewrites. Python attribute names are snake_case; the wire names are
generated as camelCase aliases, with explicit aliases for the keys that are
not valid identifiers (``$ref``, ``in``, ``not``, ``schema``).

Every model accepts unknown keys and keeps them, so vendor extensions
(``x-...``) and fields the engine does not interpret survive a
load/merge/dump cycle.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

COMPONENTS_POINTER = "#/components/"
SCHEMA_KIND = "schemas"
HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")
TAG_GROUPS_EXTENSION = "x-tagGroups"

Number = Union[int, float]


class OpenApiModel(BaseModel):
    """Base for all document models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    @property
    def extensions(self) -> Dict[str, Any]:
        """Vendor extensions (``x-`` keys) attached to this object."""
        return {
            key: value
            for key, value in (self.model_extra or {}).items()
            if key.startswith("x-")
        }


class Reference(BaseModel):
    """
    Parsed ``$ref`` pointer.

    Local component references (``#/components/<kind>/<name>``) are split into
    ``kind`` and ``name``. Anything else keeps its fragment in ``name`` with
    ``kind`` left empty. ``external`` holds the document part of the pointer
    for references into other files.
    """

    kind: Optional[str] = None
    name: str = ""
    external: Optional[str] = None

    @classmethod
    def parse(cls, pointer: str) -> "Reference":
        if "#" not in pointer:
            return cls(external=pointer)

        external, _, fragment = pointer.partition("#")
        external = external or None
        fragment = "#" + fragment

        if fragment.startswith(COMPONENTS_POINTER):
            kind, _, name = fragment[len(COMPONENTS_POINTER):].partition("/")
            if kind and name:
                return cls(kind=kind, name=name, external=external)

        return cls(name=fragment[1:], external=external)

    @classmethod
    def to_schema(cls, name: str) -> "Reference":
        return cls(kind=SCHEMA_KIND, name=name)

    @property
    def is_local_schema(self) -> bool:
        return self.kind == SCHEMA_KIND and self.external is None

    @property
    def pointer(self) -> str:
        prefix = self.external or ""
        if self.kind:
            return f"{prefix}{COMPONENTS_POINTER}{self.kind}/{self.name}"
        if self.name:
            return f"{prefix}#{self.name}"
        return prefix

    def __str__(self) -> str:
        return self.pointer


class Referenceable(OpenApiModel):
    """Model that may be replaced by a ``$ref`` pointer."""

    ref: Optional[Reference] = Field(None, alias="$ref")

    @field_validator("ref", mode="before")
    @classmethod
    def _parse_ref(cls, value: Any) -> Any:
        if isinstance(value, str):
            return Reference.parse(value)
        return value

    @field_serializer("ref")
    def _dump_ref(self, ref: Optional[Reference]) -> Optional[str]:
        return ref.pointer if ref is not None else None


class ExternalDocs(OpenApiModel):
    url: str
    description: Optional[str] = None


class Discriminator(OpenApiModel):
    """
    Polymorphism hint of a schema.

    ``mapping`` values are schema references or bare schema names.
    """

    property_name: Optional[str] = None
    mapping: Optional[Dict[str, str]] = None


class Schema(Referenceable):
    """Recursive schema node."""

    type: Optional[Union[str, List[str]]] = None
    format: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    nullable: Optional[bool] = None
    read_only: Optional[bool] = None
    write_only: Optional[bool] = None
    deprecated: Optional[bool] = None

    minimum: Optional[Number] = None
    maximum: Optional[Number] = None
    exclusive_minimum: Optional[Union[bool, Number]] = None
    exclusive_maximum: Optional[Union[bool, Number]] = None
    multiple_of: Optional[Number] = None

    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None

    min_items: Optional[int] = None
    max_items: Optional[int] = None
    unique_items: Optional[bool] = None

    min_properties: Optional[int] = None
    max_properties: Optional[int] = None

    default: Any = None
    example: Any = None
    enum: Optional[List[Any]] = None
    required: Optional[List[str]] = None

    items: Optional[Schema] = None
    properties: Optional[Dict[str, Schema]] = None
    additional_properties: Optional[Union[bool, Schema]] = None
    all_of: Optional[List[Schema]] = None
    one_of: Optional[List[Schema]] = None
    any_of: Optional[List[Schema]] = None
    not_: Optional[Schema] = Field(None, alias="not")
    discriminator: Optional[Discriminator] = None


class Example(Referenceable):
    summary: Optional[str] = None
    description: Optional[str] = None
    value: Any = None
    external_value: Optional[str] = None


class MediaType(OpenApiModel):
    schema_: Optional[Schema] = Field(None, alias="schema")
    example: Any = None
    examples: Optional[Dict[str, Example]] = None
    encoding: Optional[Dict[str, Any]] = None


class Parameter(Referenceable):
    name: Optional[str] = None
    in_: Optional[str] = Field(None, alias="in")
    description: Optional[str] = None
    required: Optional[bool] = None
    deprecated: Optional[bool] = None
    allow_empty_value: Optional[bool] = None
    style: Optional[str] = None
    explode: Optional[bool] = None
    allow_reserved: Optional[bool] = None
    schema_: Optional[Schema] = Field(None, alias="schema")
    example: Any = None
    examples: Optional[Dict[str, Example]] = None
    content: Optional[Dict[str, MediaType]] = None


class Header(Referenceable):
    description: Optional[str] = None
    required: Optional[bool] = None
    deprecated: Optional[bool] = None
    style: Optional[str] = None
    explode: Optional[bool] = None
    schema_: Optional[Schema] = Field(None, alias="schema")
    example: Any = None
    examples: Optional[Dict[str, Example]] = None
    content: Optional[Dict[str, MediaType]] = None


class RequestBody(Referenceable):
    description: Optional[str] = None
    content: Optional[Dict[str, MediaType]] = None
    required: Optional[bool] = None


class Response(Referenceable):
    description: Optional[str] = None
    headers: Optional[Dict[str, Header]] = None
    content: Optional[Dict[str, MediaType]] = None
    links: Optional[Dict[str, Any]] = None


class Server(OpenApiModel):
    url: str
    description: Optional[str] = None
    variables: Optional[Dict[str, Any]] = None


SecurityRequirement = Dict[str, List[str]]


class Operation(OpenApiModel):
    tags: Optional[List[str]] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    external_docs: Optional[ExternalDocs] = None
    operation_id: Optional[str] = None
    parameters: Optional[List[Parameter]] = None
    request_body: Optional[RequestBody] = None
    responses: Optional[Dict[str, Response]] = None
    # A callback maps runtime expressions to further path items.
    callbacks: Optional[Dict[str, Dict[str, PathItem]]] = None
    deprecated: Optional[bool] = None
    security: Optional[List[SecurityRequirement]] = None
    servers: Optional[List[Server]] = None


class PathItem(OpenApiModel):
    # Path item references point at other documents and are kept verbatim.
    ref: Optional[str] = Field(None, alias="$ref")
    summary: Optional[str] = None
    description: Optional[str] = None
    get: Optional[Operation] = None
    put: Optional[Operation] = None
    post: Optional[Operation] = None
    delete: Optional[Operation] = None
    options: Optional[Operation] = None
    head: Optional[Operation] = None
    patch: Optional[Operation] = None
    trace: Optional[Operation] = None
    servers: Optional[List[Server]] = None
    parameters: Optional[List[Parameter]] = None

    @property
    def operations(self) -> List[Tuple[str, Operation]]:
        """(method, operation) pairs in canonical method order."""
        return [
            (method, getattr(self, method))
            for method in HTTP_METHODS
            if getattr(self, method) is not None
        ]


class OAuthFlow(OpenApiModel):
    authorization_url: Optional[str] = None
    token_url: Optional[str] = None
    refresh_url: Optional[str] = None
    scopes: Optional[Dict[str, str]] = None


class OAuthFlows(OpenApiModel):
    implicit: Optional[OAuthFlow] = None
    password: Optional[OAuthFlow] = None
    client_credentials: Optional[OAuthFlow] = None
    authorization_code: Optional[OAuthFlow] = None


class SecurityScheme(Referenceable):
    type: Optional[str] = None
    description: Optional[str] = None
    name: Optional[str] = None
    in_: Optional[str] = Field(None, alias="in")
    scheme: Optional[str] = None
    bearer_format: Optional[str] = None
    flows: Optional[OAuthFlows] = None
    open_id_connect_url: Optional[str] = None


class Tag(OpenApiModel):
    name: str
    description: Optional[str] = None
    external_docs: Optional[ExternalDocs] = None


class Info(OpenApiModel):
    title: str
    version: str
    description: Optional[str] = None


class Components(OpenApiModel):
    schemas: Optional[Dict[str, Schema]] = None
    security_schemes: Optional[Dict[str, SecurityScheme]] = None


class Document(OpenApiModel):
    """A complete OpenAPI description."""

    openapi: str = "3.0.3"
    info: Info
    servers: Optional[List[Server]] = None
    paths: Dict[str, PathItem] = Field(default_factory=dict)
    components: Optional[Components] = None
    security: Optional[List[SecurityRequirement]] = None
    tags: Optional[List[Tag]] = None
    external_docs: Optional[ExternalDocs] = None

    @property
    def schemas(self) -> Dict[str, Schema]:
        if self.components is None or self.components.schemas is None:
            return {}
        return self.components.schemas

    @property
    def security_schemes(self) -> Dict[str, SecurityScheme]:
        if self.components is None or self.components.security_schemes is None:
            return {}
        return self.components.security_schemes

    def to_dict(self) -> Dict[str, Any]:
        """Wire-format representation (aliases, no unset/null fields)."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


Operation.model_rebuild()
PathItem.model_rebuild()
Document.model_rebuild()
