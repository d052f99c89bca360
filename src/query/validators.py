"""Field validators.

A field validator is a callable `(value, field) -> value`. It returns the (possibly converted)
value or raises a `ValidationError` subclass naming the field. Validators are composed into chains
by the schema; each one receives the previous one's output.

Typed validators (`integer`, `boolean`, `url`) leave absent values (`None` or `""`) untouched, so
absence is only an error when `required` is part of the chain.
"""

from __future__ import annotations

import functools
import re
from collections.abc import Callable, Iterable
from typing import Any

from src.query.errors import InvalidBoolean, InvalidInteger, InvalidUrl, MissingField, NotInSet
from src.query.params import is_empty
from src.query.urls import UrlError, normalize_url

FieldValidator = Callable[..., Any]

_INTEGER_RE = re.compile(r"-?[0-9]+")

_TRUE_TOKENS: frozenset[str] = frozenset({"true", "yes", "on", "1"})
_FALSE_TOKENS: frozenset[str] = frozenset({"false", "no", "off", "0"})


def skip_empty(validator: FieldValidator) -> FieldValidator:
    """Wrap a validator so that `None` and `""` are returned unchanged without calling it."""

    @functools.wraps(validator)
    def wrapper(value: Any, field: str | None = None) -> Any:
        if is_empty(value):
            return value
        return validator(value, field)

    return wrapper


def required(value: Any, field: str | None = None) -> Any:
    if is_empty(value):
        raise MissingField(field, "value is required")
    return value


@skip_empty
def url(value: Any, field: str | None = None) -> str:
    """Normalize to an absolute URL; schemeless input is rewritten to `https://`."""

    try:
        return normalize_url(str(value))
    except UrlError as exc:
        raise InvalidUrl(field, f"invalid URL {value!r}: {exc}") from exc


@skip_empty
def integer(value: Any, field: str | None = None) -> int:
    """Parse a strict signed decimal integer (`-?[0-9]+`)."""

    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if not isinstance(value, str) or _INTEGER_RE.fullmatch(value) is None:
        raise InvalidInteger(field, f"expected an integer, got {value!r}")
    return int(value)


@skip_empty
def boolean(value: Any, field: str | None = None) -> bool:
    """Parse a boolean token: true/yes/on/1 or false/no/off/0, case-insensitive."""

    if isinstance(value, bool):
        return value

    token = str(value).lower()
    if token in _TRUE_TOKENS:
        return True
    if token in _FALSE_TOKENS:
        return False
    raise InvalidBoolean(field, f"expected a boolean, got {value!r}")


def fallback(default: Any) -> FieldValidator:
    """Return a validator substituting `default` for absent values."""

    def validate(value: Any, field: str | None = None) -> Any:
        if is_empty(value):
            return default
        return value

    return validate


def one_of(allowed: Iterable[Any]) -> FieldValidator:
    """Return a validator accepting only values equal to one of `allowed`."""

    choices = tuple(allowed)

    def validate(value: Any, field: str | None = None) -> Any:
        if not any(type(value) is type(choice) and value == choice for choice in choices):
            raise NotInSet(field, f"{value!r} is not one of {list(choices)!r}")
        return value

    return validate


def one_of_or_empty(allowed: Iterable[Any]) -> FieldValidator:
    """Like `one_of`, but absent values are accepted and returned unchanged."""

    return skip_empty(one_of(allowed))
