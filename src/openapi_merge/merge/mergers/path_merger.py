"""
Path merging with prefix support, conflict detection and reference rewriting.

Every path item taken from a source is deep-cloned. Schema references found
anywhere in the clone are rewritten through that source's rename map, so two
sources may use the same schema name for different schemas.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Mapping, Optional, TypeVar

from pydantic import BaseModel

from ...document import (
    Discriminator,
    Example,
    Header,
    MediaType,
    Operation,
    Parameter,
    PathItem,
    Reference,
    RequestBody,
    Response,
    Schema,
)
from ..base import BaseComponentMerger, MergeWarningType, SourceConfig

M = TypeVar("M", bound=BaseModel)


class PathMerger(BaseComponentMerger):
    """
    Accumulates paths from all sources of one merge.

    The first source to contribute a final path owns it. Operation ids are
    tracked globally; duplicates are reported but left untouched.
    """

    def __init__(self):
        super().__init__()
        self._paths: Dict[str, PathItem] = {}
        self._operation_ids: set = set()

    def add_paths(
        self,
        paths: Mapping[str, PathItem],
        source_config: SourceConfig,
        schema_renames: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Add the paths of one source document.

        Args:
            paths: Path items of the source document
            source_config: Configuration of the source
            schema_renames: Original to final schema names for this source
        """
        if paths is None:
            raise ValueError("Source paths cannot be None")
        if source_config is None:
            raise ValueError("Source configuration cannot be None")

        source_name = source_config.source_name
        renames = schema_renames or {}
        added = 0

        for original_path, path_item in paths.items():
            final_path = apply_path_prefix(original_path, source_config.path_prefix)

            if final_path in self._paths:
                self._warn(
                    MergeWarningType.PATH_CONFLICT,
                    f"Path '{final_path}' already exists. "
                    f"Skipping duplicate from source '{source_name}'.",
                    source_name,
                )
                continue

            self._paths[final_path] = self._clone_path_item(
                path_item, source_config, source_name, renames
            )
            added += 1

        self.logger.debug(f"Added {added}/{len(paths)} paths from '{source_name}'")

    def get_paths(self) -> Dict[str, PathItem]:
        """Merged paths in the order they were added."""
        return dict(self._paths)

    def _clone_path_item(
        self,
        path_item: PathItem,
        source_config: SourceConfig,
        source_name: str,
        renames: Mapping[str, str],
    ) -> PathItem:
        operations = {
            method: self._clone_operation(operation, source_config, source_name, renames)
            for method, operation in path_item.operations
        }
        return _copy_with(
            path_item,
            parameters=_clone_parameters(path_item.parameters, renames),
            **operations,
        )

    def _clone_operation(
        self,
        operation: Operation,
        source_config: SourceConfig,
        source_name: str,
        renames: Mapping[str, str],
    ) -> Operation:
        operation_id = operation.operation_id
        if operation_id:
            operation_id = apply_operation_id_prefix(
                operation_id, source_config.operation_id_prefix
            )
            if operation_id in self._operation_ids:
                self._warn(
                    MergeWarningType.OPERATION_ID_CONFLICT,
                    f"OperationId '{operation_id}' already exists. "
                    f"Duplicate from source '{source_name}'.",
                    source_name,
                )
            else:
                self._operation_ids.add(operation_id)

        callbacks = None
        if operation.callbacks is not None:
            callbacks = {
                callback_name: {
                    expression: self._clone_path_item(
                        item, source_config, source_name, renames
                    )
                    for expression, item in callback.items()
                }
                for callback_name, callback in operation.callbacks.items()
            }

        responses = None
        if operation.responses is not None:
            responses = {
                status: clone_response(response, renames)
                for status, response in operation.responses.items()
            }

        request_body = None
        if operation.request_body is not None:
            request_body = clone_request_body(operation.request_body, renames)

        return _copy_with(
            operation,
            operation_id=operation_id,
            parameters=_clone_parameters(operation.parameters, renames),
            request_body=request_body,
            responses=responses,
            callbacks=callbacks,
        )


def apply_path_prefix(path: str, prefix: Optional[str]) -> str:
    """
    Prepend ``prefix`` to ``path`` with exactly one separating slash.

    The prefix is forced to start with '/' and loses any trailing '/'.
    """
    if not prefix:
        return path

    normalized_prefix = prefix if prefix.startswith("/") else "/" + prefix
    normalized_prefix = normalized_prefix.rstrip("/")
    normalized_path = path if path.startswith("/") else "/" + path

    return normalized_prefix + normalized_path


def apply_operation_id_prefix(operation_id: str, prefix: Optional[str]) -> str:
    if not prefix:
        return operation_id
    return prefix + operation_id


def rewrite_reference(
    reference: Optional[Reference], schema_renames: Mapping[str, str]
) -> Optional[Reference]:
    """
    Copy of ``reference`` pointing at the renamed schema, if it was renamed.

    Only local schema references are rewritten.
    """
    if reference is None:
        return None

    if reference.is_local_schema and reference.name in schema_renames:
        return reference.model_copy(update={"name": schema_renames[reference.name]})
    return reference.model_copy()


def clone_schema(
    schema: Optional[Schema], schema_renames: Mapping[str, str]
) -> Optional[Schema]:
    """
    Deep-clone ``schema``, rewriting every schema reference it contains.

    A node carrying a reference is cloned as that reference (plus its
    nullable flag and description) without descending any further.
    """
    if schema is None:
        return None

    if schema.ref is not None:
        return Schema(
            ref=rewrite_reference(schema.ref, schema_renames),
            nullable=schema.nullable,
            description=schema.description,
        )

    additional = schema.additional_properties
    if isinstance(additional, Schema):
        additional = clone_schema(additional, schema_renames)

    properties = None
    if schema.properties is not None:
        properties = {
            name: clone_schema(value, schema_renames)
            for name, value in schema.properties.items()
        }

    return _copy_with(
        schema,
        items=clone_schema(schema.items, schema_renames),
        properties=properties,
        additional_properties=additional,
        all_of=_clone_schema_list(schema.all_of, schema_renames),
        one_of=_clone_schema_list(schema.one_of, schema_renames),
        any_of=_clone_schema_list(schema.any_of, schema_renames),
        not_=clone_schema(schema.not_, schema_renames),
        discriminator=clone_discriminator(schema.discriminator, schema_renames),
    )


def clone_discriminator(
    discriminator: Optional[Discriminator], schema_renames: Mapping[str, str]
) -> Optional[Discriminator]:
    """
    Copy of ``discriminator`` with its mapping pointed at renamed schemas.

    Mapping values are either schema pointers or bare schema names.
    """
    if discriminator is None:
        return None
    if discriminator.mapping is None:
        return _copy_with(discriminator)

    mapping = {}
    for value, target in discriminator.mapping.items():
        if "#" in target or "/" in target:
            target = rewrite_reference(Reference.parse(target), schema_renames).pointer
        else:
            target = schema_renames.get(target, target)
        mapping[value] = target

    return _copy_with(discriminator, mapping=mapping)


def clone_parameter(parameter: Parameter, schema_renames: Mapping[str, str]) -> Parameter:
    return _copy_with(
        parameter,
        ref=rewrite_reference(parameter.ref, schema_renames),
        schema_=clone_schema(parameter.schema_, schema_renames),
        examples=_clone_examples(parameter.examples, schema_renames),
        content=_clone_content(parameter.content, schema_renames),
    )


def clone_request_body(
    request_body: RequestBody, schema_renames: Mapping[str, str]
) -> RequestBody:
    return _copy_with(
        request_body,
        ref=rewrite_reference(request_body.ref, schema_renames),
        content=_clone_content(request_body.content, schema_renames),
    )


def clone_response(response: Response, schema_renames: Mapping[str, str]) -> Response:
    headers = None
    if response.headers is not None:
        headers = {
            name: clone_header(header, schema_renames)
            for name, header in response.headers.items()
        }

    return _copy_with(
        response,
        ref=rewrite_reference(response.ref, schema_renames),
        headers=headers,
        content=_clone_content(response.content, schema_renames),
    )


def clone_header(header: Header, schema_renames: Mapping[str, str]) -> Header:
    return _copy_with(
        header,
        ref=rewrite_reference(header.ref, schema_renames),
        schema_=clone_schema(header.schema_, schema_renames),
        examples=_clone_examples(header.examples, schema_renames),
        content=_clone_content(header.content, schema_renames),
    )


def clone_media_type(
    media_type: MediaType, schema_renames: Mapping[str, str]
) -> MediaType:
    return _copy_with(
        media_type,
        schema_=clone_schema(media_type.schema_, schema_renames),
        examples=_clone_examples(media_type.examples, schema_renames),
    )


def _clone_parameters(
    parameters: Optional[List[Parameter]], schema_renames: Mapping[str, str]
) -> Optional[List[Parameter]]:
    if parameters is None:
        return None
    return [clone_parameter(p, schema_renames) for p in parameters]


def _clone_content(
    content: Optional[Dict[str, MediaType]], schema_renames: Mapping[str, str]
) -> Optional[Dict[str, MediaType]]:
    if content is None:
        return None
    return {
        media: clone_media_type(media_type, schema_renames)
        for media, media_type in content.items()
    }


def _clone_examples(
    examples: Optional[Dict[str, Example]], schema_renames: Mapping[str, str]
) -> Optional[Dict[str, Example]]:
    if examples is None:
        return None
    return {
        name: _copy_with(example, ref=rewrite_reference(example.ref, schema_renames))
        for name, example in examples.items()
    }


def _clone_schema_list(
    schemas: Optional[List[Schema]], schema_renames: Mapping[str, str]
) -> Optional[List[Schema]]:
    if schemas is None:
        return None
    return [clone_schema(s, schema_renames) for s in schemas]


def _copy_with(model: M, **rewritten: Any) -> M:
    """
    Copy ``model`` with the ``rewritten`` fields replaced.

    Every other mutable value (nested models, lists, dicts, extensions) is
    deep-copied so the copy shares nothing with the source document.
    """
    update: Dict[str, Any] = {}
    for name in type(model).model_fields:
        if name in rewritten:
            continue
        value = getattr(model, name)
        if isinstance(value, (BaseModel, dict, list)):
            update[name] = copy.deepcopy(value)

    update.update(copy.deepcopy(model.model_extra or {}))
    update.update(rewritten)
    return model.model_copy(update=update)
