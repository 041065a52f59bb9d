# -*- coding: utf-8 -*-
#
# Payload validators derived from the model schema
#
# A rule set maps a payload key to a pydantic field definition (type, default),
# the framework binding turns it into a model with payload_model()
#
import datetime
from dataclasses import dataclass, field as dc_field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, create_model
from pydantic import ValidationError as PydanticValidationError

from .errors import SchemaError
from .schema import ModelSchema, parse_schema

RuleSet = Dict[str, Tuple[Any, Any]]


class FieldType(str, Enum):
    NUMBER = "number"
    INTEGER = "integer"
    STRING = "string"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"
    OBJECT = "object"
    ANY = "any"


PYTHON_TYPES: Dict[FieldType, Any] = {
    FieldType.NUMBER: Union[int, float],
    FieldType.INTEGER: int,
    FieldType.STRING: str,
    FieldType.BOOLEAN: bool,
    FieldType.DATE: datetime.datetime,
    FieldType.ARRAY: list,
    FieldType.OBJECT: dict,
    FieldType.ANY: Any,
}

# type of the "other side" id of a relationship payload
ID_TYPE = int


class PayloadModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class PermissiveModel(BaseModel):
    model_config = ConfigDict(extra="allow")


@dataclass
class ValidatorResult:
    rules: RuleSet = dc_field(default_factory=dict)
    error: Optional[SchemaError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def python_type(type_name: Any) -> Any:
    """
    :param type_name: type tag declared in the schema
    :return: python type used by pydantic
    :raises SchemaError: unknown type tag
    """
    try:
        return PYTHON_TYPES[FieldType(type_name)]
    except ValueError:
        raise SchemaError(f"Unknown type '{type_name}'")


def _rule(py_type: Any, required: bool) -> Tuple[Any, Any]:
    if required:
        return (py_type, ...)
    return (Optional[py_type], None)


def _relationship_rules(schema: ModelSchema, field: str, partial: bool) -> RuleSet:
    try:
        rel_schema = schema.relationships[field].type
        side = rel_schema.sides[field]
    except KeyError:
        raise SchemaError(f"Unknown relationship '{field}'", field=field)

    rules: RuleSet = {side.other_name: _rule(ID_TYPE, not partial)}
    for extra_name, extra in (rel_schema.extras or {}).items():
        rules[extra_name] = _rule(python_type(extra.type), not partial)
    return rules


def _attribute_rules(schema: ModelSchema) -> RuleSet:
    rules: RuleSet = {}
    for attr_name, attr in schema.attributes.items():
        if attr.read_only:
            continue
        rules[attr_name] = _rule(python_type(attr.type), False)
    return rules


def derive_validator(Model: Any, field: Optional[str] = None, partial: bool = False) -> ValidatorResult:
    """
    Derive the payload rule set of a model

    :param Model: Model type, its `schema` describes attributes and relationships
    :param field: relationship name, if None the (non-readonly) attributes are used
    :param partial: make every rule optional (PATCH)
    :return: ValidatorResult, with `error` set when the schema couldn't be used
    """
    try:
        schema = parse_schema(Model.schema)
        if field:
            rules = _relationship_rules(schema, field, partial)
        else:
            rules = _attribute_rules(schema)
    except SchemaError as exc:
        if exc.field is None:
            exc.field = field
        return ValidatorResult(error=exc)
    except (AttributeError, TypeError, PydanticValidationError) as exc:
        return ValidatorResult(error=SchemaError(f"Malformed schema: {exc}", field=field))
    return ValidatorResult(rules=rules)


def payload_model(name: str, rules: RuleSet, permissive: bool = False) -> Type[BaseModel]:
    """
    :param name: name of the generated model
    :param rules: rule set
    :param permissive: allow keys that are not in the rule set (path and query parameters)
    :return: pydantic model validating the rule set, unknown keys are rejected unless permissive
    """
    base = PermissiveModel if permissive else PayloadModel
    return create_model(name, __base__=base, **rules)  # type: ignore[call-overload]
