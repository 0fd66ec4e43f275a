"""Unit tests for the OpenAPI schema adapter."""

from snippet_graph.schema import OpenAPISchema, schema_from_dict


def test_property_lookup_is_case_sensitive() -> None:
    schema = OpenAPISchema({"properties": {"subject": {"type": "string"}}})
    assert schema.get_property_schema("subject") is not None
    assert schema.get_property_schema("Subject") is None


def test_property_lookup_follows_all_of() -> None:
    schema = OpenAPISchema(
        {
            "allOf": [
                {"title": "entity", "properties": {"id": {"type": "string"}}},
                {"title": "user", "properties": {"displayName": {"type": "string"}}},
            ]
        }
    )
    assert schema.get_property_schema("id") is not None
    assert schema.get_property_schema("displayName") is not None
    assert schema.get_property_schema("missing") is None


def test_property_lookup_follows_array_items() -> None:
    schema = OpenAPISchema({"type": "array", "items": {"properties": {"address": {"type": "string"}}}})
    assert schema.get_property_schema("address") is not None


def test_refs_resolve_against_components() -> None:
    components = {
        "message": {"title": "message", "properties": {"body": {"$ref": "#/components/schemas/itemBody"}}},
        "itemBody": {"title": "itemBody", "properties": {"content": {"type": "string"}}},
    }
    schema = OpenAPISchema({"$ref": "#/components/schemas/message"}, components)

    assert schema.get_schema_title() == "message"
    body = schema.get_property_schema("body")
    assert body is not None
    assert body.get_schema_title() == "itemBody"
    assert body.get_property_schema("content") is not None


def test_unresolved_ref_is_left_as_is() -> None:
    schema = OpenAPISchema({"$ref": "#/components/schemas/missing"})
    assert schema.get_schema_title() is None
    assert schema.get_property_schema("anything") is None


def test_self_referencing_schema_terminates() -> None:
    components = {"node": {"title": "node", "allOf": [{"$ref": "#/components/schemas/node"}]}}
    schema = OpenAPISchema({"$ref": "#/components/schemas/node"}, components)
    assert schema.get_property_schema("missing") is None


def test_title_falls_back_to_items_then_members() -> None:
    assert OpenAPISchema({"items": {"title": "recipient"}}).get_schema_title() == "recipient"
    assert OpenAPISchema({"anyOf": [{"type": "string"}, {"title": "importance"}]}).get_schema_title() == "importance"
    assert OpenAPISchema({"title": ""}).get_schema_title() is None


def test_any_of_exposes_enum_members() -> None:
    schema = OpenAPISchema({"anyOf": [{"title": "importance", "enum": ["low", "high"]}, {"nullable": True}]})
    assert [member.enum for member in schema.any_of] == [["low", "high"], []]


def test_schema_from_dict_treats_empty_as_absent() -> None:
    assert schema_from_dict(None) is None
    assert schema_from_dict({}) is None
    assert schema_from_dict({"title": "x"}) is not None
