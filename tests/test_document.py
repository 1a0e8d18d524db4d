"""
Tests for the OpenAPI document model.
"""

import pytest

from openapi_merge.document import Document, PathItem, Reference, Schema

from conftest import build_document, schema_ref


class TestReference:
    """Test cases for $ref parsing and rendering."""

    def test_parse_local_schema_reference(self):
        """Local component pointers are split into kind and name."""
        ref = Reference.parse("#/components/schemas/User")

        assert ref.kind == "schemas"
        assert ref.name == "User"
        assert ref.external is None
        assert ref.is_local_schema
        assert ref.pointer == "#/components/schemas/User"

    def test_parse_other_component_kind(self):
        ref = Reference.parse("#/components/parameters/PageSize")

        assert ref.kind == "parameters"
        assert ref.name == "PageSize"
        assert not ref.is_local_schema

    def test_parse_external_reference(self):
        """External pointers keep the document part."""
        ref = Reference.parse("common.yaml#/components/schemas/Error")

        assert ref.external == "common.yaml"
        assert ref.name == "Error"
        assert not ref.is_local_schema
        assert str(ref) == "common.yaml#/components/schemas/Error"

    def test_parse_whole_document_reference(self):
        ref = Reference.parse("other.json")

        assert ref.external == "other.json"
        assert ref.pointer == "other.json"

    def test_parse_non_component_fragment(self):
        ref = Reference.parse("#/definitions/Legacy")

        assert ref.kind is None
        assert ref.pointer == "#/definitions/Legacy"

    def test_to_schema(self):
        assert Reference.to_schema("Pet").pointer == "#/components/schemas/Pet"


class TestSchemaModel:
    """Test cases for schema parsing and dumping."""

    def test_ref_is_parsed_and_dumped(self):
        schema = Schema.model_validate(schema_ref("User"))

        assert isinstance(schema.ref, Reference)
        assert schema.model_dump(by_alias=True, exclude_none=True) == schema_ref("User")

    def test_camel_case_aliases(self):
        schema = Schema.model_validate(
            {"type": "string", "minLength": 1, "readOnly": True, "not": {"type": "integer"}}
        )

        assert schema.min_length == 1
        assert schema.read_only is True
        assert schema.not_.type == "integer"

        dumped = schema.model_dump(by_alias=True, exclude_none=True)
        assert dumped["minLength"] == 1
        assert dumped["not"] == {"type": "integer"}

    def test_additional_properties_bool_or_schema(self):
        assert Schema.model_validate({"additionalProperties": False}).additional_properties is False

        nested = Schema.model_validate({"additionalProperties": {"type": "string"}})
        assert isinstance(nested.additional_properties, Schema)

    def test_vendor_extensions_survive(self):
        schema = Schema.model_validate({"type": "object", "x-internal": True})

        assert schema.extensions == {"x-internal": True}
        assert schema.model_dump(by_alias=True, exclude_none=True)["x-internal"] is True


class TestDocument:
    """Test cases for whole documents."""

    def test_minimal_document(self):
        document = Document.model_validate(
            {"openapi": "3.0.1", "info": {"title": "A", "version": "1"}}
        )

        assert document.paths == {}
        assert document.schemas == {}
        assert document.security_schemes == {}

    def test_missing_info_is_rejected(self):
        with pytest.raises(ValueError):
            Document.model_validate({"openapi": "3.0.1"})

    def test_to_dict_uses_wire_names(self):
        document = build_document(
            paths={
                "/pets": {
                    "get": {
                        "operationId": "listPets",
                        "parameters": [{"name": "limit", "in": "query", "schema": {"type": "integer"}}],
                        "responses": {"200": {"description": "OK"}},
                    }
                }
            },
            schemas={"Pet": {"type": "object"}},
        )

        data = document.to_dict()

        operation = data["paths"]["/pets"]["get"]
        assert operation["operationId"] == "listPets"
        assert operation["parameters"][0]["in"] == "query"
        assert operation["parameters"][0]["schema"] == {"type": "integer"}
        assert data["components"]["schemas"]["Pet"] == {"type": "object"}
        assert "servers" not in data

    def test_path_order_is_preserved(self):
        document = build_document(paths={"/b": {}, "/a": {}, "/c": {}})

        assert list(document.to_dict()["paths"]) == ["/b", "/a", "/c"]

    def test_operations_in_method_order(self):
        item = PathItem.model_validate(
            {
                "post": {"responses": {}},
                "get": {"responses": {}},
                "delete": {"responses": {}},
            }
        )

        assert [method for method, _ in item.operations] == ["get", "post", "delete"]

    def test_document_extensions(self):
        document = build_document(**{"x-tagGroups": [{"name": "Core", "tags": ["Users"]}]})

        assert document.extensions["x-tagGroups"][0]["name"] == "Core"
        assert document.to_dict()["x-tagGroups"] == [{"name": "Core", "tags": ["Users"]}]
