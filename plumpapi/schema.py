# -*- coding: utf-8 -*-
#
# Declarative model schema, as exposed by the Model layer:
#
# {
#     "name": "tests",
#     "attributes": {"id": {"type": "number", "readOnly": True}, "name": {"type": "string"}},
#     "relationships": {
#         "children": {"type": {"$sides": {"children": {"otherType": "tests", "otherName": "parents"}},
#                               "$extras": {"perm": {"type": "number"}}}}
#     }
# }
#
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class SchemaModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class AttributeSchema(SchemaModel):
    type: str
    read_only: bool = Field(default=False, alias="readOnly")


class ExtraField(SchemaModel):
    type: str


class RelationshipSide(SchemaModel):
    other_type: Optional[str] = Field(default=None, alias="otherType")
    other_name: str = Field(alias="otherName")
    self_name: Optional[str] = Field(default=None, alias="selfName")


class RelationshipSchema(SchemaModel):
    name: Optional[str] = Field(default=None, alias="$name")
    sides: Dict[str, RelationshipSide] = Field(default_factory=dict, alias="$sides")
    extras: Optional[Dict[str, ExtraField]] = Field(default=None, alias="$extras")


class RelationshipField(SchemaModel):
    type: RelationshipSchema


class ModelSchema(SchemaModel):
    name: Optional[str] = Field(default=None, alias="$name")
    id_attribute: str = Field(default="id", alias="$id")
    attributes: Dict[str, AttributeSchema] = Field(default_factory=dict)
    relationships: Dict[str, RelationshipField] = Field(default_factory=dict)

    def snapshot(self) -> Dict[str, Any]:
        """
        :return: json serializable copy of the schema, using the Model layer key names
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def parse_schema(schema: Union[ModelSchema, Mapping[str, Any]]) -> ModelSchema:
    """
    :param schema: ModelSchema or a mapping with the same structure
    :return: ModelSchema
    :raises pydantic.ValidationError: malformed schema
    """
    if isinstance(schema, ModelSchema):
        return schema
    return ModelSchema.model_validate(schema)
