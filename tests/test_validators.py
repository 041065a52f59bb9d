from typing import Any, Optional, Union

import pytest
from pydantic import ValidationError as PydanticValidationError

from plumpapi import FieldType, SchemaError, derive_validator
from plumpapi.validators import payload_model, python_type

from conftest import Broken, Post


def test_attribute_rules_skip_read_only():
    result = derive_validator(Post)

    assert result.ok
    assert set(result.rules) == {"title", "views", "published"}
    assert result.rules["title"] == (Optional[str], None)
    assert result.rules["views"] == (Optional[int], None)


def test_relationship_rules_contain_other_side_and_extras():
    result = derive_validator(Post, "tags")

    assert result.ok
    assert result.rules == {"tag_id": (int, ...), "weight": (Union[int, float], ...)}


def test_partial_relationship_rules_are_optional():
    result = derive_validator(Post, "tags", partial=True)

    assert result.rules["tag_id"] == (Optional[int], None)
    assert result.rules["weight"] == (Optional[Union[int, float]], None)


def test_unknown_relationship_is_an_error_value():
    result = derive_validator(Post, "authors")

    assert not result.ok
    assert result.rules == {}
    assert isinstance(result.error, SchemaError)
    assert result.error.field == "authors"


def test_unknown_type_tags():
    assert "strang" in derive_validator(Broken).error.message
    assert "rank" in derive_validator(Broken, "links").error.message


def test_malformed_schema():
    class NoSchema:
        name = "nothing"

    class BadSchema:
        name = "bad"
        schema = {"attributes": {"title": "string"}}

    assert "Malformed schema" in derive_validator(NoSchema).error.message
    assert "Malformed schema" in derive_validator(BadSchema).error.message


def test_python_type():
    assert python_type("string") is str
    assert python_type(FieldType.BOOLEAN) is bool
    assert python_type("any") is Any
    with pytest.raises(SchemaError):
        python_type("decimal")


def test_payload_model_rejects_unknown_and_missing_keys():
    Model = payload_model("tags_payload", derive_validator(Post, "tags").rules)

    assert Model.model_validate({"tag_id": "3", "weight": 2}).model_dump() == {"tag_id": 3, "weight": 2}
    with pytest.raises(PydanticValidationError):
        Model.model_validate({"tag_id": 3})
    with pytest.raises(PydanticValidationError):
        Model.model_validate({"tag_id": 3, "weight": 1, "color": "red"})


def test_permissive_model_keeps_unknown_keys():
    Model = payload_model("params", {"item_id": (int, ...)}, permissive=True)

    assert Model.model_validate({"item_id": "5", "field": "x"}).model_dump() == {"item_id": 5, "field": "x"}
