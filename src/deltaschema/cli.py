from __future__ import annotations

import argparse
import sys

import polars as pl

from deltaschema.core.errors import DatumError, SchemaError, UnclassifiableDelta
from deltaschema.core.hashing import schema_fingerprint
from deltaschema.core.schema import Schema, UnionSchema
from deltaschema.core.serde import schema_to_json_str
from deltaschema.derive import derive_delta_schema
from deltaschema.io.config import DeltaSettings
from deltaschema.io.errors import IoError
from deltaschema.io.files import read_schema_file, read_update_records, write_schema_file
from deltaschema.io.report import operation_counts, operations_frame
from deltaschema.logging import configure_logging, get_logger

logger = get_logger(__name__)


def _derive_from_file(path: str) -> tuple[Schema, UnionSchema]:
    schema = read_schema_file(path)
    delta = derive_delta_schema(schema)
    logger.debug(
        "delta_schema_derived",
        source=path,
        derived=delta.types[0].fullname,
        fields=len(delta.types[0].fields),
    )
    return schema, delta


def _cmd_derive(argv: list[str], settings: DeltaSettings) -> int:
    p = argparse.ArgumentParser(
        prog="deltaschema derive",
        description="Derive the partial-update (delta) schema of a value record schema.",
    )
    p.add_argument("schema", type=str, help="Path to the value schema JSON file.")
    p.add_argument("--out", type=str, default="", help="Write the delta schema here instead of stdout.")
    p.add_argument(
        "--indent",
        type=int,
        default=settings.indent,
        help="JSON indentation (0 = compact canonical JSON).",
    )
    args = p.parse_args(argv)

    _, delta = _derive_from_file(args.schema)
    if args.out:
        write_schema_file(delta, args.out, indent=args.indent)
        logger.info("delta_schema_written", source=args.schema, out=args.out)
    else:
        print(schema_to_json_str(delta, indent=args.indent))
    return 0


def _cmd_classify(argv: list[str], settings: DeltaSettings) -> int:
    p = argparse.ArgumentParser(
        prog="deltaschema classify",
        description="Classify the operations of JSON-lines update records.",
    )
    p.add_argument("--schema", type=str, required=True, help="Path to the value schema JSON file.")
    p.add_argument("--updates", type=str, required=True, help="Path to JSON-lines update records.")
    p.add_argument(
        "--strict",
        action="store_true",
        default=settings.strict_classification,
        help="Fail on replacement values that match no member of the field's delta type.",
    )
    p.add_argument("--counts", action="store_true", help="Print counts per field and operation.")
    args = p.parse_args(argv)

    _, delta = _derive_from_file(args.schema)
    frame = operations_frame(read_update_records(args.updates, delta), strict=args.strict)
    logger.info("updates_classified", updates=args.updates, rows=frame.height)
    out = operation_counts(frame) if args.counts else frame
    with pl.Config(tbl_rows=-1):
        print(out)
    return 0


def _cmd_fingerprint(argv: list[str], settings: DeltaSettings) -> int:
    p = argparse.ArgumentParser(
        prog="deltaschema fingerprint",
        description="Print the SHA-256 fingerprint of a schema and of its delta schema.",
    )
    p.add_argument("schema", type=str, help="Path to the value schema JSON file.")
    args = p.parse_args(argv)

    schema, delta = _derive_from_file(args.schema)
    print(f"schema {schema_fingerprint(schema)}")
    print(f"delta  {schema_fingerprint(delta)}")
    return 0


_COMMANDS = {
    "derive": _cmd_derive,
    "classify": _cmd_classify,
    "fingerprint": _cmd_fingerprint,
}


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="deltaschema", description="Delta-schema derivation utilities.")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("derive", help="Derive a delta schema from a value schema.")
    sub.add_parser("classify", help="Classify operations of update records.")
    sub.add_parser("fingerprint", help="Fingerprint a schema and its delta schema.")
    return p


def main(argv: list[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        build_argparser().print_help()
        return
    cmd, rest = argv[0], argv[1:]
    handler = _COMMANDS.get(cmd)
    if handler is None:
        print(f"Unknown command: {cmd}", file=sys.stderr)
        raise SystemExit(2)

    try:
        settings = DeltaSettings.load()
    except IoError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    configure_logging(json_output=settings.log_json, level=settings.log_level)

    try:
        code = handler(rest, settings)
    except (SchemaError, DatumError, UnclassifiableDelta, IoError) as exc:
        logger.debug("command_failed", cmd=cmd, error=type(exc).__name__)
        print(f"[ERROR] {exc}", file=sys.stderr)
        code = 1
    raise SystemExit(code)


if __name__ == "__main__":
    main()
