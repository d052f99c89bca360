"""Query string parsing and schema orchestration.

Parsing is lenient: malformed pairs are skipped, never reported. Validation is strict: the first
failing field validator or cross-field rule aborts the call and no partial result is returned.
"""

from __future__ import annotations

import logging
from urllib.parse import unquote_plus

from src.query.errors import ValidationError
from src.query.params import Params
from src.query.schema import SchemaLike, as_schema

logger = logging.getLogger(__name__)


def parse_pairs(raw: str | None) -> list[tuple[str, str]]:
    """Decode `key=value&key=value` into pairs.

    Rules:
        - A single leading `?` is ignored.
        - Pairs without `=` or with an empty key are skipped.
        - Both sides are form-decoded (`+` is a space).
    """

    pairs: list[tuple[str, str]] = []
    for chunk in (raw or "").removeprefix("?").split("&"):
        key, sep, value = chunk.partition("=")
        if not sep or not key:
            if chunk:
                logger.debug("skipped malformed pair=%r", chunk)
            continue
        pairs.append((unquote_plus(key), unquote_plus(value)))
    return pairs


def parse_query_string(raw: str | None, schema: SchemaLike) -> Params:
    """Parse and validate a raw query string against a schema.

    Only fields declared in the schema survive, in declaration order. Each field's raw value (or
    `None` when absent) is fed through its validator chain; cross-field rules then run against the
    assembled container.

    Returns:
        A frozen `Params` container.

    Raises:
        ValidationError: The first field or cross-field failure.
    """

    schema = as_schema(schema)

    raw_values: dict[str, str] = {}
    for key, value in parse_pairs(raw):
        # First occurrence wins.
        raw_values.setdefault(key, value)

    dropped = [key for key in raw_values if key not in schema.fields]
    if dropped:
        logger.debug("dropped undeclared keys=%s", dropped)

    params = Params()
    try:
        for name, chain in schema.fields.items():
            value = raw_values.get(name)
            for validator in chain:
                value = validator(value, name)
            params.set(name, value)

        for rule in schema.cross_field:
            rule(params)
    except ValidationError as exc:
        logger.debug("rejected field=%s reason=%s", exc.field, exc.reason)
        raise

    return params.freeze()
