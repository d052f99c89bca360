"""Tests for query string parsing and schema orchestration."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from src.query.cross_field import at_least_one_required
from src.query.errors import CrossFieldViolation, InvalidInteger, MissingField
from src.query.params import Params
from src.query.parser import parse_pairs, parse_query_string
from src.query.schema import Schema
from src.query.validators import boolean, fallback, integer, one_of_or_empty, required, url

DATA = "a=5&b=6&c=foo.com&d=yes&__validators=abc"


def test_applies_validators_to_values() -> None:
    params = parse_query_string(
        DATA,
        {
            "a": [required, integer],
            "b": [required],
            "c": [url],
            "d": [boolean],
        },
    )

    assert params.serialize() == "a=5&b=6&c=https%3A%2F%2Ffoo.com%2F&d=true"
    assert params.get("a") == 5
    assert params.get("d") is True


def test_fails_on_validator_failure() -> None:
    with pytest.raises(MissingField) as exc_info:
        parse_query_string(DATA, {"f": [required]})
    assert exc_info.value.field == "f"


def test_undeclared_keys_are_dropped() -> None:
    assert parse_query_string(DATA, Schema()).serialize() == ""
    assert parse_query_string(DATA, {"b": []}).to_dict() == {"b": "6"}


def test_applies_cross_field_rules() -> None:
    schema = Schema(fields={"a": [], "f": []}, cross_field=[at_least_one_required("a", "f")])
    params = parse_query_string(DATA, schema)

    assert params.serialize() == "a=5"
    assert params.get("f") is None
    assert "f" in params

    with pytest.raises(CrossFieldViolation):
        parse_query_string(
            DATA,
            Schema(fields={"f": [], "g": []}, cross_field=[at_least_one_required("f", "g")]),
        )


def test_cross_field_rules_run_without_fields() -> None:
    schema = Schema(cross_field=[at_least_one_required("a")])

    with pytest.raises(CrossFieldViolation):
        parse_query_string(DATA, schema)


def test_ignores_invalid_string() -> None:
    assert parse_query_string("&=?=abc&a=5", Schema()).serialize() == ""
    assert parse_query_string("&=?=abc&a=5", {"a": [integer]}).serialize() == "a=5"


def test_output_follows_schema_declaration_order() -> None:
    params = parse_query_string("b=2&c=3&a=1", {"a": [], "b": [], "c": []})

    assert params.keys() == ["a", "b", "c"]
    assert params.serialize() == "a=1&b=2&c=3"


def test_chain_feeds_each_output_into_next_validator() -> None:
    params = parse_query_string(
        "pinned=&color=",
        {
            "pinned": [fallback("no"), boolean],
            "color": [one_of_or_empty(["red", "blue"]), fallback("red")],
            "index": [integer, fallback(0)],
        },
    )

    assert params.to_dict() == {"pinned": False, "color": "red", "index": 0}
    assert params.serialize() == "pinned=false&color=red&index=0"


def test_first_failure_short_circuits() -> None:
    calls: list[str] = []

    def record(value: Any, field: str | None = None) -> Any:
        calls.append(field or "")
        return value

    rule_calls: list[Params] = []

    schema = Schema(
        fields={"a": [record], "b": [integer, record], "c": [record]},
        cross_field=[rule_calls.append],
    )
    with pytest.raises(InvalidInteger):
        parse_query_string("a=1&b=x&c=3", schema)

    assert calls == ["a"]
    assert rule_calls == []


def test_empty_chain_and_absent_key_is_omitted() -> None:
    params = parse_query_string("x=1", {"a": []})

    assert params.get("a") is None
    assert params.serialize() == ""


def test_result_is_frozen() -> None:
    params = parse_query_string("a=1", {"a": []})

    assert params.frozen
    with pytest.raises(TypeError):
        params.set("a", "2")


def test_first_occurrence_wins_and_values_are_decoded() -> None:
    params = parse_query_string("?q=hello+world%21&q=ignored&u=a%3Db", {"q": [], "u": []})

    assert params.get("q") == "hello world!"
    assert params.get("u") == "a=b"
    assert params.serialize() == "q=hello+world%21&u=a%3Db"


def test_none_input_is_treated_as_empty() -> None:
    assert parse_query_string(None, {"a": [fallback("x")]}).serialize() == "a=x"


def test_parse_pairs() -> None:
    assert parse_pairs("&=?=abc&a=5") == [("a", "5")]
    assert parse_pairs("a&b=") == [("b", "")]
    assert parse_pairs("u=a=b") == [("u", "a=b")]
    assert parse_pairs("%61=%2B+") == [("a", "+ ")]
    assert parse_pairs("") == []
    assert parse_pairs(None) == []


def test_rejection_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="src.query.parser"):
        with pytest.raises(MissingField):
            parse_query_string("x=1", {"f": [required]})

    assert "rejected field=f" in caplog.text
    assert "dropped undeclared keys=['x']" in caplog.text


def test_plain_mapping_reserved_key_is_never_a_field() -> None:
    params = parse_query_string(DATA, {"__validators": []})

    assert params.serialize() == ""
    assert "__validators" not in params


def test_plain_mapping_reserved_key_holds_cross_field_rules() -> None:
    schema = {"a": [], "f": [], "__validators": [at_least_one_required("a", "f")]}

    assert parse_query_string(DATA, schema).serialize() == "a=5"
    with pytest.raises(CrossFieldViolation):
        parse_query_string("f=&g=1", schema)
