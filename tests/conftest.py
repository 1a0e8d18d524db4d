"""
Fixtures and test configuration for the openapi-merge test suite.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

import pytest
import yaml

from openapi_merge.document import Document, Schema
from openapi_merge.merge import InfoConfig, MergeConfig, SourceConfig


def build_document(
    paths: Optional[Dict[str, Any]] = None,
    schemas: Optional[Dict[str, Any]] = None,
    title: str = "Test API",
    **extra: Any,
) -> Document:
    """Build a Document from plain wire-format dictionaries."""
    data: Dict[str, Any] = {
        "openapi": "3.0.3",
        "info": {"title": title, "version": "1.0.0"},
        "paths": paths or {},
    }
    if schemas is not None:
        data["components"] = {"schemas": schemas}
    data.update(extra)
    return Document.model_validate(data)


def json_response(schema: Dict[str, Any], description: str = "OK") -> Dict[str, Any]:
    return {
        "description": description,
        "content": {"application/json": {"schema": schema}},
    }


def schema_ref(name: str) -> Dict[str, str]:
    return {"$ref": f"#/components/schemas/{name}"}


def make_schema(**fields: Any) -> Schema:
    return Schema.model_validate(fields)


def make_config(schema_conflict: str = "rename", **fields: Any) -> MergeConfig:
    return MergeConfig(
        info=InfoConfig(title="Merged", version="2.0.0"),
        schema_conflict=schema_conflict,
        **fields,
    )


@pytest.fixture
def user_with_name():
    return {
        "type": "object",
        "required": ["id"],
        "properties": {"id": {"type": "string"}, "name": {"type": "string"}},
    }


@pytest.fixture
def user_with_email():
    return {
        "type": "object",
        "required": ["id"],
        "properties": {"id": {"type": "string"}, "email": {"type": "string"}},
    }


@pytest.fixture
def svc1_document(user_with_name):
    """Users service exposing a User schema with a name."""
    return build_document(
        title="Service 1",
        paths={
            "/users": {
                "get": {
                    "operationId": "listUsers",
                    "tags": ["Users"],
                    "responses": {
                        "200": json_response({"type": "array", "items": schema_ref("User")})
                    },
                }
            }
        },
        schemas={"User": user_with_name},
        tags=[{"name": "Users", "description": "User operations"}],
    )


@pytest.fixture
def svc2_document(user_with_email):
    """Second service exposing a different User schema."""
    return build_document(
        title="Service 2",
        paths={
            "/users/{id}": {
                "parameters": [
                    {"name": "id", "in": "path", "required": True, "schema": {"type": "string"}}
                ],
                "get": {
                    "operationId": "getUser",
                    "tags": ["Users"],
                    "responses": {"200": json_response(schema_ref("User"))},
                },
            }
        },
        schemas={"User": user_with_email},
        tags=[{"name": "Users", "description": "Second description"}],
    )


@pytest.fixture
def svc1_source():
    return SourceConfig(path="svc1.json", name="svc1", path_prefix="/svc1")


@pytest.fixture
def svc2_source():
    return SourceConfig(path="svc2.json", name="svc2", path_prefix="/svc2")


@pytest.fixture
def write_json(tmp_path):
    """Write a dictionary as JSON under the temporary directory."""

    def _write(name: str, data: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_yaml(tmp_path):
    """Write a dictionary as YAML under the temporary directory."""

    def _write(name: str, data: Any) -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return path

    return _write
