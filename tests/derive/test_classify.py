from __future__ import annotations

import pytest

from deltaschema.core.datum import GenericRecord, read_json_datum
from deltaschema.core.errors import UnclassifiableDelta
from deltaschema.core.grammar import OperationKind
from deltaschema.core.schema import RecordSchema, UnionSchema, primitive
from deltaschema.derive import (
    classify_field_delta,
    derive_delta_schema,
    field_operations,
    is_whole_value_delete,
)

PROFILE = {
    "type": "record",
    "name": "Profile",
    "namespace": "com.acme",
    "fields": [
        {"name": "id", "type": "int", "default": 0},
        {"name": "tags", "type": {"type": "array", "items": "string"}, "default": []},
        {"name": "attrs", "type": {"type": "map", "values": "long"}, "default": {}},
        {"name": "nick", "type": ["null", "string"], "default": None},
    ],
}


@pytest.fixture(scope="module")
def delta() -> UnionSchema:
    return derive_delta_schema(PROFILE)


def _decode(delta: UnionSchema, fields: dict) -> GenericRecord:
    return read_json_datum(delta, {"ProfileWriteOpRecord": fields})


def test_empty_update_is_all_no_op(delta: UnionSchema) -> None:
    rec = _decode(delta, {})
    assert field_operations(rec) == {
        "id": OperationKind.NO_OP,
        "tags": OperationKind.NO_OP,
        "attrs": OperationKind.NO_OP,
        "nick": OperationKind.NO_OP,
    }


def test_collection_ops_and_replacements(delta: UnionSchema) -> None:
    rec = _decode(
        delta,
        {
            "id": {"int": 7},
            "tags": {"tagsListOps": {"setUnion": ["a"], "setDiff": ["b"]}},
            "attrs": {"com.acme.attrsMapOps": {"mapDiff": ["gone"]}},
            "nick": None,
        },
    )
    assert classify_field_delta(rec["tags"]) is OperationKind.LIST_OPS
    assert rec["tags"]["setUnion"] == ["a"]
    assert classify_field_delta(rec["attrs"]) is OperationKind.MAP_OPS
    assert rec["attrs"]["mapUnion"] == {}
    assert field_operations(rec, strict=True) == {
        "id": OperationKind.PUT_NEW_FIELD,
        "tags": OperationKind.LIST_OPS,
        "attrs": OperationKind.MAP_OPS,
        "nick": OperationKind.PUT_NEW_FIELD,
    }


def test_whole_collection_replacement(delta: UnionSchema) -> None:
    rec = _decode(delta, {"tags": {"array": ["x", "y"]}, "attrs": {"map": {"k": 1}}})
    ops = field_operations(rec, strict=True)
    assert ops["tags"] is OperationKind.PUT_NEW_FIELD
    assert ops["attrs"] is OperationKind.PUT_NEW_FIELD


def test_whole_value_delete(delta: UnionSchema) -> None:
    deleted = read_json_datum(delta, {"DelOp": {}})
    assert is_whole_value_delete(deleted) is True
    assert is_whole_value_delete(_decode(delta, {})) is False
    with pytest.raises(ValueError, match="no field operations"):
        field_operations(deleted)


def test_classification_is_by_runtime_name() -> None:
    assert classify_field_delta(GenericRecord(RecordSchema(name="NoOp"), {})) is OperationKind.NO_OP
    assert classify_field_delta(GenericRecord(RecordSchema(name="xListOps"), {})) is OperationKind.LIST_OPS
    assert classify_field_delta(GenericRecord(RecordSchema(name="ListOps"), {})) is OperationKind.LIST_OPS
    assert classify_field_delta(GenericRecord(RecordSchema(name="yMapOps"), {})) is OperationKind.MAP_OPS
    # Only an exact NoOp name is the marker.
    assert classify_field_delta(GenericRecord(RecordSchema(name="MyNoOp"), {})) is OperationKind.PUT_NEW_FIELD
    assert classify_field_delta(GenericRecord(RecordSchema(name="Address"), {})) is OperationKind.PUT_NEW_FIELD
    assert classify_field_delta("text") is OperationKind.PUT_NEW_FIELD
    assert classify_field_delta(0) is OperationKind.PUT_NEW_FIELD


def test_none_and_non_record_inputs() -> None:
    with pytest.raises(ValueError):
        classify_field_delta(None)
    with pytest.raises(ValueError):
        is_whole_value_delete(None)
    with pytest.raises(TypeError):
        is_whole_value_delete({"DelOp": {}})


def test_strict_mode_rejects_foreign_values() -> None:
    field_type = UnionSchema(types=(RecordSchema(name="NoOp"), primitive("int")))
    assert classify_field_delta(3, field_schema=field_type) is OperationKind.PUT_NEW_FIELD
    with pytest.raises(UnclassifiableDelta, match="'str'"):
        classify_field_delta("3", field_schema=field_type)
    with pytest.raises(UnclassifiableDelta, match="Other"):
        classify_field_delta(GenericRecord(RecordSchema(name="Other"), {}), field_schema=field_type)
    with pytest.raises(UnclassifiableDelta):
        classify_field_delta(True, field_schema=field_type)


def test_operation_kind_wire_names() -> None:
    assert OperationKind.NO_OP.wire_name == "NoOp"
    assert OperationKind.DEL_RECORD_OP.wire_name == "DelOp"
    assert OperationKind.LIST_OPS.wire_name == "ListOps"
    assert OperationKind.MAP_OPS.wire_name == "MapOps"
