import json

import pytest

from deltaschema.core.errors import SchemaError
from deltaschema.core.schema import (
    ArraySchema,
    EnumSchema,
    FixedSchema,
    MapSchema,
    RecordField,
    RecordSchema,
    UnionSchema,
    primitive,
)
from deltaschema.core.serde import parse_schema, schema_to_json, schema_to_json_str

USER = {
    "type": "record",
    "name": "User",
    "namespace": "com.acme",
    "doc": "A user.",
    "fields": [
        {"name": "id", "type": "long", "default": 0, "doc": "Primary key."},
        {"name": "email", "type": ["null", "string"], "default": None},
        {
            "name": "address",
            "type": {
                "type": "record",
                "name": "Address",
                "fields": [{"name": "zip", "type": "string", "default": ""}],
            },
            "default": {"zip": ""},
        },
        {"name": "previous", "type": {"type": "array", "items": "Address"}, "default": []},
        {"name": "color", "type": {"type": "enum", "name": "Color", "symbols": ["RED", "BLUE"]}, "default": "RED"},
        {"name": "hash", "type": {"type": "fixed", "name": "Hash", "size": 4}, "default": "\u0000\u0000\u0000\u0000"},
        {"name": "rank", "type": "int", "default": 0, "order": "descending"},
    ],
}


def test_parse_record_resolves_named_references_and_namespaces() -> None:
    user = parse_schema(USER)
    assert isinstance(user, RecordSchema)
    assert user.fullname == "com.acme.User"
    address = user.field("address").type
    assert isinstance(address, RecordSchema)
    # Nested definitions inherit the enclosing namespace.
    assert address.fullname == "com.acme.Address"
    previous = user.field("previous").type
    assert isinstance(previous, ArraySchema)
    assert previous.items == address
    assert user.field("email").type == UnionSchema(types=(primitive("null"), primitive("string")))
    assert user.field("email").has_default and user.field("email").default is None
    assert isinstance(user.field("color").type, EnumSchema)
    assert isinstance(user.field("hash").type, FixedSchema)
    assert user.field("rank").order == "descending"
    assert user.field("id").doc == "Primary key."


def test_parse_from_text_and_type_names() -> None:
    assert parse_schema('"int"') == primitive("int")
    assert parse_schema("string") == primitive("string")
    assert parse_schema({"type": "map", "values": "long"}) == MapSchema(values=primitive("long"))
    assert parse_schema(json.dumps({"type": "int", "logicalType": "date"})) == primitive("int", "date")


def test_parse_returns_models_unchanged() -> None:
    rec = RecordSchema(name="R")
    assert parse_schema(rec) is rec


def test_parse_field_without_default() -> None:
    rec = parse_schema({"type": "record", "name": "R", "fields": [{"name": "x", "type": "int"}]})
    assert rec.field("x").has_default is False


@pytest.mark.parametrize(
    "bad,match",
    [
        ({"type": "record", "name": "R", "fields": [{"name": "x", "type": "Nope"}]}, "unknown type name"),
        ({"type": "record", "name": "R", "fields": [{"name": "next", "type": ["null", "R"]}]}, "recursive"),
        (["int", "int"], "duplicate member"),
        ({"type": "record", "name": "R"}, "'fields' list"),
        ({"type": "array"}, "requires 'items'"),
        ("{not json", "not valid JSON"),
        (
            {
                "type": "record",
                "name": "R",
                "fields": [
                    {"name": "a", "type": {"type": "record", "name": "S", "fields": []}},
                    {"name": "b", "type": {"type": "record", "name": "S", "fields": []}},
                ],
            },
            "can't redefine",
        ),
    ],
)
def test_parse_rejects_malformed(bad: object, match: str) -> None:
    with pytest.raises(SchemaError, match=match):
        parse_schema(bad)


def test_round_trip_preserves_structure() -> None:
    user = parse_schema(USER)
    again = parse_schema(schema_to_json(user))
    assert again == user


def test_writer_references_repeated_named_types() -> None:
    noop = RecordSchema(name="NoOp", namespace="ns")
    rec = RecordSchema(
        name="R",
        namespace="ns",
        fields=(
            RecordField(name="a", type=UnionSchema(types=(noop, primitive("int"))), default={}),
            RecordField(name="b", type=UnionSchema(types=(noop, primitive("string"))), default={}),
        ),
    )
    out = schema_to_json(rec)
    assert out["fields"][0]["type"][0] == {"type": "record", "name": "NoOp", "fields": []}
    assert out["fields"][1]["type"][0] == "NoOp"


def test_writer_rejects_conflicting_definitions() -> None:
    ops_int = RecordSchema(
        name="ListOps",
        fields=(RecordField(name="setUnion", type=ArraySchema(items=primitive("int")), default=[]),),
    )
    ops_str = RecordSchema(
        name="ListOps",
        fields=(RecordField(name="setUnion", type=ArraySchema(items=primitive("string")), default=[]),),
    )
    rec = RecordSchema(
        name="R",
        fields=(
            RecordField(name="a", type=ops_int, default={}),
            RecordField(name="b", type=ops_str, default={}),
        ),
    )
    with pytest.raises(SchemaError, match="can't redefine"):
        schema_to_json(rec)


def test_schema_to_json_str_canonical_and_indented() -> None:
    rec = parse_schema({"type": "record", "name": "R", "fields": [{"name": "x", "type": "int", "default": 1}]})
    compact = schema_to_json_str(rec)
    assert compact == '{"fields":[{"default":1,"name":"x","type":"int"}],"name":"R","type":"record"}'
    assert json.loads(schema_to_json_str(rec, indent=2)) == json.loads(compact)


@pytest.mark.parametrize(
    "field_type,default",
    [
        ("int", "oops"),
        ("string", 1),
        ({"type": "array", "items": "int"}, {"x": 1}),
        ({"type": "array", "items": "int"}, ["a"]),
        ({"type": "map", "values": "long"}, []),
        (["null", "int"], 1),
        ({"type": "enum", "name": "E", "symbols": ["A"]}, "B"),
        ({"type": "record", "name": "S", "fields": [{"name": "x", "type": "int"}]}, {}),
    ],
)
def test_parse_rejects_defaults_not_matching_field_type(field_type: object, default: object) -> None:
    bad = {"type": "record", "name": "R", "fields": [{"name": "f", "type": field_type, "default": default}]}
    with pytest.raises(SchemaError, match="invalid default for field 'f' of record 'R'"):
        parse_schema(bad)


def test_parse_accepts_defaults_matching_first_union_member() -> None:
    rec = parse_schema(
        {
            "type": "record",
            "name": "R",
            "fields": [
                {"name": "n", "type": ["null", "int"], "default": None},
                {"name": "i", "type": ["int", "null"], "default": 3},
                {"name": "d", "type": "double", "default": 1},
            ],
        }
    )
    assert [f.default for f in rec.fields] == [None, 3, 1]
