import pytest
from pydantic import ValidationError

from deltaschema.core.errors import SchemaError
from deltaschema.core.grammar import SchemaKind
from deltaschema.core.schema import (
    ArraySchema,
    EnumSchema,
    MapSchema,
    RecordField,
    RecordSchema,
    UnionSchema,
    ensure_distinct_members,
    flattened_union,
    is_collection,
    member_key,
    primitive,
)


def test_record_field_default_tracking() -> None:
    assert RecordField(name="id", type=primitive("int"), default=0).has_default is True
    assert RecordField(name="opt", type=primitive("null"), default=None).has_default is True
    assert RecordField(name="id", type=primitive("int")).has_default is False


def test_record_rejects_duplicate_fields() -> None:
    f = RecordField(name="id", type=primitive("int"), default=0)
    with pytest.raises(ValidationError, match="duplicate field"):
        RecordSchema(name="User", fields=(f, f))


def test_record_field_lookup_and_fullname() -> None:
    rec = RecordSchema(
        name="User",
        namespace="com.acme",
        fields=(RecordField(name="id", type=primitive("int"), default=0),),
    )
    assert rec.fullname == "com.acme.User"
    assert rec.field("id").type == primitive("int")
    assert rec.field_names == ("id",)
    with pytest.raises(KeyError):
        rec.field("missing")


def test_empty_namespace_normalizes_to_none() -> None:
    assert RecordSchema(name="User", namespace="").namespace is None


def test_enum_default_must_be_symbol() -> None:
    with pytest.raises(ValidationError, match="not a symbol"):
        EnumSchema(name="Color", symbols=("RED", "GREEN"), default="BLUE")


def test_structural_equality() -> None:
    a = RecordSchema(name="R", fields=(RecordField(name="x", type=ArraySchema(items=primitive("int")), default=[]),))
    b = RecordSchema(name="R", fields=(RecordField(name="x", type=ArraySchema(items=primitive("int")), default=[]),))
    assert a == b
    assert a != RecordSchema(name="R")


def test_union_rejects_nested_union_and_empty() -> None:
    inner = UnionSchema(types=(primitive("null"), primitive("int")))
    with pytest.raises(ValidationError, match="other unions"):
        UnionSchema(types=(primitive("string"), inner))
    with pytest.raises(ValidationError, match="at least one member"):
        UnionSchema(types=())


def test_flattened_union_splices_members() -> None:
    inner = UnionSchema(types=(primitive("null"), primitive("int")))
    u = flattened_union([RecordSchema(name="NoOp"), inner])
    assert [member_key(t) for t in u.types] == ["NoOp", "null", "int"]
    assert not any(isinstance(t, UnionSchema) for t in u.types)


def test_flattened_union_rejects_duplicate_members() -> None:
    with pytest.raises(SchemaError, match="duplicate member"):
        flattened_union([primitive("int"), UnionSchema(types=(primitive("int"),))])


def test_ensure_distinct_members_by_fullname() -> None:
    ensure_distinct_members([RecordSchema(name="A", namespace="x"), RecordSchema(name="A", namespace="y")])
    with pytest.raises(SchemaError, match="x.A"):
        ensure_distinct_members([RecordSchema(name="A", namespace="x"), RecordSchema(name="A", namespace="x")])


def test_kinds_and_collections() -> None:
    assert primitive("long").kind is SchemaKind.LONG
    assert is_collection(ArraySchema(items=primitive("int")))
    assert is_collection(MapSchema(values=primitive("int")))
    assert not is_collection(RecordSchema(name="R"))


def test_models_with_collection_defaults_are_hashable() -> None:
    def tags_record() -> RecordSchema:
        return RecordSchema(
            name="R",
            fields=(
                RecordField(name="tags", type=ArraySchema(items=primitive("string")), default=[]),
                RecordField(name="attrs", type=MapSchema(values=primitive("int")), default={"a": 1}),
            ),
        )

    a, b = tags_record(), tags_record()
    assert a == b and hash(a) == hash(b)
    assert {a: "cached"}[b] == "cached"
    other = RecordSchema(
        name="R",
        fields=(RecordField(name="tags", type=ArraySchema(items=primitive("string")), default=["x"]),),
    )
    assert other not in {a}


def test_union_model_allows_repeated_members() -> None:
    # Distinctness is checked by ensure_distinct_members, not by the model.
    u = UnionSchema(types=(primitive("int"), primitive("int")))
    assert len(u.types) == 2
    with pytest.raises(SchemaError, match="duplicate member"):
        ensure_distinct_members(u.types)
