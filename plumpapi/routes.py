# -*- coding: utf-8 -*-
#
# Route descriptors
#
# RouteOptions describe how an operation should be exposed (defaults in BASE_ROUTES,
# overrides passed to the controller), RouteConfig is the concrete route built by the
# controller and handed to the framework binding.
#
import dataclasses
from dataclasses import dataclass, field as dc_field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Union

from .validators import RuleSet

ITEM_ID = "item_id"
CHILD_ID = "child_id"
FIELD_PLACEHOLDER = "{field}"
WRITE_HTTP_METHODS = ("POST", "PUT", "PATCH")


class Operation(str, Enum):
    READ = "read"
    QUERY = "query"
    SCHEMA = "schema"
    LIST_CHILDREN = "list_children"
    ADD_CHILD = "add_child"
    REMOVE_CHILD = "remove_child"
    MODIFY_CHILD = "modify_child"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class PlumpRequest:
    """
    Request as seen by the pre-handlers and handlers

    `pre` holds the values assigned by the pre-handlers, e.g. pre["item"]
    """

    params: Dict[str, Any] = dc_field(default_factory=dict)
    query: Dict[str, Any] = dc_field(default_factory=dict)
    payload: Any = None
    pre: Dict[str, Any] = dc_field(default_factory=dict)
    raw: Any = None


Handler = Callable[[PlumpRequest], Awaitable[Any]]


@dataclass(frozen=True)
class PreHandler:
    method: Handler
    assign: Optional[str] = None


@dataclass
class ValidateOptions:
    """
    payload:
        - a rule set: used as is
        - True: derive the rule set from the model attributes
        - None: no payload validation
    """

    query: Optional[RuleSet] = None
    params: Optional[RuleSet] = None
    payload: Union[RuleSet, bool, None] = None


@dataclass
class RouteOptions:
    """
    Options used to build the route(s) of an operation

    Precedence when overriding (RouteOptions.merge):
        - fields set in the override replace the defaults
        - pre-handlers of the override are appended to the default ones
        - validate parts (query, params, payload) are replaced one by one
    """

    method: Optional[str] = None
    path: Optional[str] = None
    plural: Optional[bool] = None
    handler: Optional[Handler] = None
    pre: Tuple[PreHandler, ...] = ()
    validate: ValidateOptions = dc_field(default_factory=ValidateOptions)
    field: Optional[str] = None
    summary: Optional[str] = None
    status_code: Optional[int] = None

    def merge(self, override: Optional["RouteOptions"]) -> "RouteOptions":
        if override is None:
            return dataclasses.replace(self, validate=dataclasses.replace(self.validate))
        changes: Dict[str, Any] = {}
        for name in ("method", "path", "plural", "handler", "field", "summary", "status_code"):
            value = getattr(override, name)
            if value is not None:
                changes[name] = value
        changes["pre"] = tuple(self.pre) + tuple(override.pre)
        validate = dataclasses.replace(self.validate)
        for part in ("query", "params", "payload"):
            value = getattr(override.validate, part)
            if value is not None:
                setattr(validate, part, value)
        changes["validate"] = validate
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class RouteConfig:
    operation: Operation
    method: str
    path: str
    handler: Callable[[PlumpRequest], Awaitable[Any]]
    pre: Tuple[PreHandler, ...] = ()
    validate: ValidateOptions = dc_field(default_factory=ValidateOptions)
    field: Optional[str] = None
    summary: Optional[str] = None
    status_code: int = 200

    @property
    def has_item(self) -> bool:
        return references_item(self.path)


def references_item(path: str) -> bool:
    return "{" + ITEM_ID + "}" in path


def create_routes() -> Dict[Operation, RouteOptions]:
    """
    :return: default route options of every operation, paths are relative to the model collection
    """
    item_params: RuleSet = {ITEM_ID: (int, ...)}
    child_params: RuleSet = {ITEM_ID: (int, ...), CHILD_ID: (int, ...)}
    return {
        Operation.READ: RouteOptions(
            method="GET", path="/{item_id}", validate=ValidateOptions(params=item_params), summary="Read"
        ),
        Operation.QUERY: RouteOptions(method="GET", path="", summary="Query"),
        Operation.SCHEMA: RouteOptions(method="GET", path="/schema", summary="Schema"),
        Operation.LIST_CHILDREN: RouteOptions(
            method="GET",
            path="/{item_id}/{field}",
            plural=True,
            validate=ValidateOptions(params=item_params),
            summary="List",
        ),
        Operation.ADD_CHILD: RouteOptions(
            method="PUT",
            path="/{item_id}/{field}",
            plural=True,
            validate=ValidateOptions(params=item_params),
            summary="Add to",
        ),
        Operation.REMOVE_CHILD: RouteOptions(
            method="DELETE",
            path="/{item_id}/{field}/{child_id}",
            plural=True,
            validate=ValidateOptions(params=child_params),
            summary="Remove from",
        ),
        Operation.MODIFY_CHILD: RouteOptions(
            method="PATCH",
            path="/{item_id}/{field}/{child_id}",
            plural=True,
            validate=ValidateOptions(params=child_params),
            summary="Modify",
        ),
        Operation.CREATE: RouteOptions(
            method="POST", path="", validate=ValidateOptions(payload=True), summary="Create"
        ),
        Operation.UPDATE: RouteOptions(
            method="PATCH",
            path="/{item_id}",
            validate=ValidateOptions(params=item_params, payload=True),
            summary="Update",
        ),
        Operation.DELETE: RouteOptions(
            method="DELETE", path="/{item_id}", validate=ValidateOptions(params=item_params), summary="Delete"
        ),
    }
