"""Tests for the definition index: both document renderings and error handling."""

from __future__ import annotations

import json

import pytest

from kubedocs.docs.definitions import ParseError, index_definitions
from kubedocs.models.schema import ItemSchema, ItemsDescriptor
from tests.helpers import CONTAINER, POD, POD_SPEC, definition, document, k8s_document, prop, ref

# ---------------------------------------------------------------------------
# gnostic rendering
# ---------------------------------------------------------------------------


class TestGnosticDocument:
    def test_indexes_every_definition_in_document_order(self) -> None:
        index = index_definitions(k8s_document())
        assert list(index)[:4] == [
            "io.k8s.apimachinery.pkg.apis.meta.v1.ObjectMeta",
            CONTAINER,
            POD_SPEC,
            POD,
        ]
        assert len(index) == 8

    def test_property_fields_are_normalized(self) -> None:
        index = index_definitions(k8s_document())
        pod_spec = index[POD_SPEC]
        containers, restart_policy = pod_spec.properties

        assert containers.type == "array"
        assert containers.items == ItemsDescriptor(schema=(ItemSchema(ref=ref(CONTAINER)),))
        assert containers.items.ref == ref(CONTAINER)
        assert restart_policy.enum == ("Always", "OnFailure", "Never")

    def test_definition_type_is_first_declared_type(self) -> None:
        doc = document(
            {
                "name": "io.example.v1.Quantity",
                "value": {"type": {"value": ["string", "integer"]}, "properties": {"additional_properties": []}},
            }
        )
        assert index_definitions(doc)["io.example.v1.Quantity"].type == "string"

    def test_ref_is_kept_verbatim(self) -> None:
        index = index_definitions(k8s_document())
        metadata = index[POD].properties[2]
        assert metadata.name == "metadata"
        assert metadata.ref == ref("io.k8s.apimachinery.pkg.apis.meta.v1.ObjectMeta")

    def test_inline_nested_properties(self) -> None:
        doc = document(
            definition(
                "io.example.v1.Widget",
                prop("settings", type_="object", properties=[prop("color", type_="string")]),
            )
        )
        settings = index_definitions(doc)["io.example.v1.Widget"].properties[0]
        assert [p.name for p in settings.properties] == ["color"]

    def test_json_text_and_bytes_are_decoded(self) -> None:
        raw = json.dumps(k8s_document())
        assert list(index_definitions(raw)) == list(index_definitions(raw.encode()))

    def test_duplicate_name_keeps_last(self) -> None:
        doc = document(
            definition("io.example.v1.Thing", prop("a")),
            definition("io.example.v1.Thing", prop("b")),
        )
        index = index_definitions(doc)
        assert [p.name for p in index["io.example.v1.Thing"].properties] == ["b"]


# ---------------------------------------------------------------------------
# Plain Swagger 2.0 rendering
# ---------------------------------------------------------------------------


class TestSwaggerDocument:
    def test_plain_swagger_definitions(self) -> None:
        doc = {
            "swagger": "2.0",
            "definitions": {
                POD_SPEC: {
                    "description": "PodSpec is a description of a pod.",
                    "type": "object",
                    "properties": {
                        "containers": {"type": "array", "items": {"$ref": ref(CONTAINER)}},
                        "restartPolicy": {"type": "string", "enum": ["Always", "Never"]},
                        "priority": {"type": "integer", "format": "int32"},
                    },
                },
                CONTAINER: {"type": "object", "properties": {"name": {"type": "string"}}},
            },
        }
        index = index_definitions(doc)
        containers, restart_policy, priority = index[POD_SPEC].properties

        assert index[POD_SPEC].type == "object"
        assert containers.items is not None
        assert containers.items.ref == ref(CONTAINER)
        assert restart_policy.enum == ("Always", "Never")
        assert priority.type == "integer"

    def test_dollar_ref(self) -> None:
        doc = {"definitions": {POD: {"properties": {"spec": {"$ref": ref(POD_SPEC)}}}}}
        assert index_definitions(doc)[POD].properties[0].ref == ref(POD_SPEC)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestDocumentErrors:
    def test_invalid_json_raises_parse_error(self) -> None:
        with pytest.raises(ParseError):
            index_definitions("{not json")

    def test_non_object_document_raises_parse_error(self) -> None:
        with pytest.raises(ParseError):
            index_definitions("[1, 2, 3]")

    def test_missing_definitions_raises_parse_error(self) -> None:
        with pytest.raises(ParseError):
            index_definitions({"swagger": "2.0"})

    def test_definitions_of_wrong_type_raises_parse_error(self) -> None:
        with pytest.raises(ParseError):
            index_definitions({"definitions": ["io.example.v1.Thing"]})

    def test_parse_error_is_a_value_error(self) -> None:
        assert issubclass(ParseError, ValueError)


class TestMalformedDefinitions:
    def test_malformed_definition_is_skipped(self) -> None:
        doc = document(
            definition("io.example.v1.Good", prop("a", type_="string")),
            {"name": "io.example.v1.Bad", "value": "not an object"},
            {"value": {"description": "no name"}},
            "garbage",
            definition("io.example.v1.AlsoGood"),
        )
        index = index_definitions(doc)
        assert list(index) == ["io.example.v1.Good", "io.example.v1.AlsoGood"]

    def test_malformed_property_skips_its_definition_only(self) -> None:
        doc = document(
            definition("io.example.v1.Good"),
            {
                "name": "io.example.v1.Broken",
                "value": {"properties": {"additional_properties": [{"name": "x", "value": 42}]}},
            },
        )
        assert list(index_definitions(doc)) == ["io.example.v1.Good"]

    def test_bad_enum_skips_definition(self) -> None:
        doc = {"definitions": {"io.example.v1.E": {"properties": {"mode": {"enum": "Always"}}}}}
        assert index_definitions(doc) == {}
