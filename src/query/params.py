"""Ordered parameter container used as validation working state and result."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any
from urllib.parse import quote_plus

# Characters `application/x-www-form-urlencoded` leaves unescaped besides alphanumerics.
_FORM_SAFE = "*-._~"


def is_empty(value: Any) -> bool:
    """Whether a value counts as absent (`None` or the empty string)."""

    return value is None or value == ""


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class Params:
    """An ordered key -> value mapping.

    Values are strings, integers, booleans or `None`. Keys keep the position of their first
    insertion. Once frozen, the container rejects mutation with `TypeError`.
    """

    __slots__ = ("_data", "_frozen")

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = {}
        self._frozen = False
        for key, value in (initial or {}).items():
            self.set(key, value)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> Params:
        """Make the container immutable and return it."""

        self._frozen = True
        return self

    def _check_mutable(self) -> None:
        if self._frozen:
            raise TypeError("Params container is frozen")

    def get(self, key: str, default: Any = None) -> Any:
        """Value for key, or default when the key is not present."""

        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._check_mutable()
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._check_mutable()
        self._data.pop(key, None)

    def has(self, key: str) -> bool:
        """Whether key holds a non-empty value (`0` and `False` count as present)."""

        return not is_empty(self._data.get(key))

    def keys(self) -> list[str]:
        return list(self._data)

    def items(self) -> list[tuple[str, Any]]:
        return list(self._data.items())

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def serialize(self) -> str:
        """Render a canonical query string.

        Only keys with non-empty values are emitted, in insertion order, form-encoded.
        """

        return "&".join(
            f"{quote_plus(key, safe=_FORM_SAFE)}={quote_plus(_format_value(value), safe=_FORM_SAFE)}"
            for key, value in self._data.items()
            if not is_empty(value)
        )

    def __str__(self) -> str:
        return self.serialize()

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Params):
            return self._data == other._data
        if isinstance(other, dict):
            return self._data == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Params({self._data!r})"
