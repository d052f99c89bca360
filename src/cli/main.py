"""Command-line entry point: validate a raw query string against a schema.

The schema is an in-process object referenced as `package.module:attribute` (a `Schema` or a
mapping of field chains). The normalized query string is written to stdout.

Exit statuses:
    0 - the query is valid,
    1 - the query failed validation,
    2 - the schema reference cannot be resolved.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from collections.abc import Mapping, Sequence

from src.config.logging import configure_logging
from src.config.settings import load_settings
from src.query.errors import ValidationError
from src.query.parser import parse_query_string
from src.query.schema import Schema, SchemaLike

logger = logging.getLogger(__name__)


class SchemaReferenceError(LookupError):
    """Raised when a `module:attribute` schema reference cannot be resolved."""


def resolve_schema(reference: str) -> SchemaLike:
    """Import the object named by a `package.module:attribute` reference."""

    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise SchemaReferenceError(f"expected 'package.module:attribute', got {reference!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise SchemaReferenceError(f"cannot import {module_name!r}: {exc}") from exc

    try:
        schema = getattr(module, attribute)
    except AttributeError as exc:
        raise SchemaReferenceError(f"{module_name!r} has no attribute {attribute!r}") from exc

    if not isinstance(schema, (Schema, Mapping)):
        raise SchemaReferenceError(f"{reference!r} is not a Schema or a mapping of field chains")
    return schema


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point for validating a query string."""

    parser = argparse.ArgumentParser(
        description="Validate and normalize a query string against an allow-list schema.",
    )
    parser.add_argument("query", help="Raw query string, e.g. 'a=5&b=yes'.")
    parser.add_argument(
        "--schema",
        help="Schema reference 'package.module:attribute' (defaults to QUERY_SCHEMA).",
    )
    parser.add_argument("--log-level", help="Logging level (defaults to LOG_LEVEL).")
    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging(args.log_level or settings.log_level)

    reference = args.schema or settings.query_schema
    if not reference:
        print("error: no schema given (use --schema or set QUERY_SCHEMA)", file=sys.stderr)
        return 2

    try:
        schema = resolve_schema(reference)
    except SchemaReferenceError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        params = parse_query_string(args.query, schema)
    except ValidationError as exc:
        logger.info("invalid query field=%s reason=%s", exc.field, exc.reason)
        print(f"invalid: {exc}", file=sys.stderr)
        return 1

    print(params.serialize())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
