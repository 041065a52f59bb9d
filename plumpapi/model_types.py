# -*- coding: utf-8 -*-
#
# Interfaces of the Model layer consumed by the controllers
# The Model layer itself (storage, queries) is provided by the application
#
from typing import Any, Dict, List, Mapping, Optional, Protocol, Union

from .schema import ModelSchema


class ModelInstance(Protocol):
    """
    Handle to a single resource. Mutators return the instance so they can be chained with save()
    """

    async def get(self, field: Optional[str] = None) -> Any:
        ...

    def set(self, payload: Mapping[str, Any]) -> "ModelInstance":
        ...

    async def save(self) -> "ModelInstance":
        ...

    async def delete(self) -> Any:
        ...

    def add(self, field: str, payload: Mapping[str, Any]) -> "ModelInstance":
        ...

    def remove(self, field: str, child_id: Any) -> "ModelInstance":
        ...

    def modify_relationship(self, field: str, child_id: Any, payload: Mapping[str, Any]) -> "ModelInstance":
        ...


class ModelType(Protocol):
    name: str
    schema: Union[ModelSchema, Mapping[str, Any]]

    def __call__(self, payload: Mapping[str, Any], store: "Store") -> ModelInstance:
        ...


class Store(Protocol):
    def find(self, name: str, item_id: Any) -> ModelInstance:
        ...

    async def query(self, name: str, params: Dict[str, Any]) -> List[Any]:
        ...
