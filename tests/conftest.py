"""
In-memory Model layer used by the tests

MemoryStore implements the store interface (find, query),
MemoryModel the Model interface (get, set, save, delete, add, remove, modify_relationship)
"""
import asyncio
import itertools
from typing import Any, Dict, List, Optional

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

import plumpapi
from plumpapi import PlumpFastAPI


def _matches(attr: Any, value: Any) -> bool:
    if isinstance(value, list):
        return str(attr) in [str(entry) for entry in value]
    return str(attr) == str(value)


class MemoryStore:
    def __init__(self) -> None:
        self.models: Dict[str, Any] = {}
        self.data: Dict[str, Dict[int, Dict[str, Any]]] = {}
        self.relations: Dict[tuple, List[Dict[str, Any]]] = {}
        # artificial latency of relationship fetches, per field
        self.delays: Dict[str, float] = {}
        self.fetches: List[Any] = []
        self._ids = itertools.count(1)

    def register(self, Model: Any) -> Any:
        self.models[Model.name] = Model
        self.data.setdefault(Model.name, {})
        return Model

    def find(self, name: str, item_id: Any) -> "MemoryModel":
        return self.models[name]({}, self, item_id=int(item_id))

    async def query(self, name: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        await asyncio.sleep(0)
        result = []
        for attrs in self.data[name].values():
            if all(_matches(attrs.get(key), value) for key, value in params.items()):
                result.append(dict(attrs))
        return result

    def next_id(self) -> int:
        return next(self._ids)


class MemoryModel:
    name: str = ""
    schema: Dict[str, Any] = {}

    def __init__(self, payload: Dict[str, Any], store: MemoryStore, item_id: Optional[int] = None) -> None:
        self.store = store
        self.id = item_id
        self.pending: Dict[str, Any] = dict(payload or {})
        self.operations: List[Any] = []

    def _side(self, field: str) -> str:
        return self.schema["relationships"][field]["type"]["$sides"][field]["otherName"]

    def _relation(self, field: str) -> List[Dict[str, Any]]:
        return self.store.relations.setdefault((self.name, self.id, field), [])

    async def get(self, field: Optional[str] = None) -> Any:
        self.store.fetches.append((self.name, self.id, field))
        if field is None:
            await asyncio.sleep(0)
            attrs = self.store.data[self.name].get(self.id)
            return dict(attrs) if attrs is not None else None
        await asyncio.sleep(self.store.delays.get(field, 0))
        return [dict(entry) for entry in self._relation(field)]

    def set(self, payload: Dict[str, Any]) -> "MemoryModel":
        self.pending.update(payload)
        return self

    async def save(self) -> "MemoryModel":
        await asyncio.sleep(0)
        if self.id is None:
            self.id = self.store.next_id()
            self.store.data[self.name][self.id] = {"id": self.id}
        self.store.data[self.name][self.id].update(self.pending)
        self.pending = {}
        for operation in self.operations:
            operation()
        self.operations = []
        return self

    async def delete(self) -> Dict[str, Any]:
        await asyncio.sleep(0)
        attrs = self.store.data[self.name].pop(self.id)
        return {"id": attrs["id"]}

    def add(self, field: str, payload: Dict[str, Any]) -> "MemoryModel":
        self.operations.append(lambda: self._relation(field).append(dict(payload)))
        return self

    def remove(self, field: str, child_id: Any) -> "MemoryModel":
        def remove_child() -> None:
            relation = self._relation(field)
            relation[:] = [entry for entry in relation if entry[self._side(field)] != child_id]

        self.operations.append(remove_child)
        return self

    def modify_relationship(self, field: str, child_id: Any, payload: Dict[str, Any]) -> "MemoryModel":
        def modify_child() -> None:
            for entry in self._relation(field):
                if entry[self._side(field)] == child_id:
                    entry.update(payload)

        self.operations.append(modify_child)
        return self


class Post(MemoryModel):
    name = "posts"
    schema = {
        "attributes": {
            "id": {"type": "number", "readOnly": True},
            "title": {"type": "string"},
            "views": {"type": "integer"},
            "published": {"type": "boolean"},
        },
        "relationships": {
            "comments": {"type": {"$sides": {"comments": {"otherType": "comments", "otherName": "comment_id"}}}},
            "tags": {
                "type": {
                    "$sides": {"tags": {"otherType": "tags", "otherName": "tag_id"}},
                    "$extras": {"weight": {"type": "number"}},
                }
            },
        },
    }


class Broken(MemoryModel):
    name = "broken"
    schema = {
        "attributes": {"id": {"type": "number", "readOnly": True}, "title": {"type": "strang"}},
        "relationships": {
            "links": {"type": {"$sides": {"links": {"otherName": "link_id"}}, "$extras": {"rank": {"type": "rank"}}}},
        },
    }


@pytest.fixture(autouse=True)
def _reset_config():
    plumpapi.config.get_config.cache_clear()
    yield
    plumpapi.config.get_config.cache_clear()


@pytest.fixture
def store():
    result = MemoryStore()
    result.register(Post)
    result.register(Broken)
    return result


@pytest.fixture
def post(store):
    store.data["posts"][100] = {"id": 100, "title": "hello", "views": 3, "published": True}
    store.relations[("posts", 100, "comments")] = [{"comment_id": 1}, {"comment_id": 2}]
    store.relations[("posts", 100, "tags")] = [{"tag_id": 7, "weight": 1}]
    return store.find("posts", 100)


@pytest.fixture
def app():
    return FastAPI()


@pytest.fixture
def api(app):
    return PlumpFastAPI(app, prefix="/api")


@pytest.fixture
def client(app):
    return TestClient(app)
