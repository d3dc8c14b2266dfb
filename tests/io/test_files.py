from __future__ import annotations

import json
from pathlib import Path

import pytest

from deltaschema.core.errors import DatumError, SchemaError
from deltaschema.core.schema import RecordSchema
from deltaschema.derive import derive_delta_schema, is_whole_value_delete
from deltaschema.io.errors import IoSchemaFileError, IoWriteError
from deltaschema.io.files import read_schema_file, read_update_records, write_schema_file
from deltaschema.io.fs import write_text_atomic

USER = {
    "type": "record",
    "name": "User",
    "fields": [
        {"name": "id", "type": "int", "default": 0},
        {"name": "tags", "type": {"type": "array", "items": "string"}, "default": []},
    ],
}


def _write(tmp: Path, name: str, text: str) -> Path:
    p = tmp / name
    p.write_text(text, encoding="utf-8")
    return p


def test_read_schema_file(tmp_path: Path) -> None:
    p = _write(tmp_path, "user.avsc", json.dumps(USER))
    schema = read_schema_file(p)
    assert isinstance(schema, RecordSchema)
    assert schema.field_names == ("id", "tags")


def test_read_schema_file_errors(tmp_path: Path) -> None:
    with pytest.raises(IoSchemaFileError, match="cannot read"):
        read_schema_file(tmp_path / "missing.avsc")
    with pytest.raises(IoSchemaFileError, match="not valid JSON"):
        read_schema_file(_write(tmp_path, "bad.avsc", "{"))
    with pytest.raises(SchemaError, match="unknown type name"):
        read_schema_file(_write(tmp_path, "ref.avsc", '"Missing"'))


def test_write_schema_file_creates_dirs_and_round_trips(tmp_path: Path) -> None:
    delta = derive_delta_schema(USER)
    dest = tmp_path / "out" / "nested" / "user.delta.avsc"
    returned = write_schema_file(delta, dest)
    assert returned == str(dest)
    text = dest.read_text(encoding="utf-8")
    assert text.endswith("\n")
    assert "\n  " in text  # indented by default
    assert not (tmp_path / "out" / "nested" / "user.delta.avsc.tmp").exists()
    assert read_schema_file(dest) == delta


def test_write_schema_file_compact(tmp_path: Path) -> None:
    dest = write_schema_file(derive_delta_schema(USER), tmp_path / "d.avsc", indent=0)
    assert Path(dest).read_text(encoding="utf-8").count("\n") == 1


def test_write_text_atomic_failure(tmp_path: Path) -> None:
    target = tmp_path / "dir"
    target.mkdir()
    with pytest.raises(IoWriteError):
        write_text_atomic(str(target), "x")
    assert not (tmp_path / "dir.tmp").exists()


def test_read_update_records(tmp_path: Path) -> None:
    delta = derive_delta_schema(USER)
    lines = [
        json.dumps({"UserWriteOpRecord": {"tags": {"tagsListOps": {"setUnion": ["a"]}}}}),
        "",
        json.dumps({"DelOp": {}}),
    ]
    p = _write(tmp_path, "updates.jsonl", "\n".join(lines) + "\n")
    records = list(read_update_records(p, delta))
    assert len(records) == 2
    assert records[0]["tags"]["setUnion"] == ["a"]
    assert is_whole_value_delete(records[1])


def test_read_update_records_errors(tmp_path: Path) -> None:
    delta = derive_delta_schema(USER)
    bad_json = _write(tmp_path, "a.jsonl", '{"DelOp": {}}\n{oops\n')
    with pytest.raises(IoSchemaFileError, match=r"a\.jsonl:2"):
        list(read_update_records(bad_json, delta))
    bad_datum = _write(tmp_path, "b.jsonl", '{"Nope": {}}\n')
    with pytest.raises(DatumError, match="not a member"):
        list(read_update_records(bad_datum, delta))
