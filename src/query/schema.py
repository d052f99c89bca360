"""Validation schema: per-field validator chains plus cross-field rules."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from src.query.cross_field import CrossFieldValidator
from src.query.validators import FieldValidator


@dataclass(frozen=True)
class Schema:
    """Declarative allow-list of fields.

    `fields` maps each accepted field name to its validator chain; declaration order is the order
    of the validated output. `cross_field` rules run after every chain succeeded.
    """

    fields: Mapping[str, Sequence[FieldValidator]] = field(default_factory=dict)
    cross_field: Sequence[CrossFieldValidator] = ()

    def __post_init__(self) -> None:
        chains = {name: tuple(chain) for name, chain in self.fields.items()}
        object.__setattr__(self, "fields", MappingProxyType(chains))
        object.__setattr__(self, "cross_field", tuple(self.cross_field))


SchemaLike = Schema | Mapping[str, Sequence[Any]]

# Key holding cross-field rules in a plain-mapping schema; never a field.
CROSS_FIELD_KEY = "__validators"


def as_schema(schema: SchemaLike) -> Schema:
    """Coerce a plain mapping of field chains into a `Schema`.

    Cross-field rules listed under `__validators` become `Schema.cross_field`.
    """

    if isinstance(schema, Schema):
        return schema
    fields = {name: chain for name, chain in schema.items() if name != CROSS_FIELD_KEY}
    return Schema(fields=fields, cross_field=schema.get(CROSS_FIELD_KEY, ()))
