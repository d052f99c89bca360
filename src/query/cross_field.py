"""Cross-field validators.

A cross-field validator is a callable `(params) -> None` run against the assembled container after
every field chain succeeded. It raises `CrossFieldViolation` to reject the whole request.
"""

from __future__ import annotations

from collections.abc import Callable

from src.query.errors import CrossFieldViolation
from src.query.params import Params

CrossFieldValidator = Callable[[Params], None]


def at_least_one_required(*fields: str | list[str] | tuple[str, ...]) -> CrossFieldValidator:
    """Require a non-empty value in at least one of the named fields.

    Field names can be passed positionally (`at_least_one_required("id", "name")`) or as a single
    list.
    """

    names: list[str] = []
    for item in fields:
        if isinstance(item, (list, tuple)):
            names.extend(item)
        else:
            names.append(item)

    def validate(params: Params) -> None:
        if not any(params.has(name) for name in names):
            raise CrossFieldViolation(names, f"at least one of {names!r} is required")

    return validate
