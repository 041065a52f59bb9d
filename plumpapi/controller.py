# -*- coding: utf-8 -*-
#
# BaseController: derive the routes and handlers of a model
#
# Every operation generator returns an async function taking a PlumpRequest,
# create_handler() wraps it for the framework binding:
#   - the result is serialized with status code 200
#   - exceptions are logged and converted to a GenericError (500)
#
import asyncio
from dataclasses import dataclass, field as dc_field
from typing import Any, Callable, Dict, List, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

import plumpapi
from .config import get_config
from .errors import GenericError, NotFoundError
from .model_types import ModelType, Store
from .routes import (
    CHILD_ID,
    FIELD_PLACEHOLDER,
    ITEM_ID,
    WRITE_HTTP_METHODS,
    Handler,
    Operation,
    PlumpRequest,
    PreHandler,
    RouteConfig,
    RouteOptions,
    ValidateOptions,
    create_routes,
    references_item,
)
from .schema import parse_schema
from .validators import RuleSet, derive_validator


@dataclass
class ControllerOptions:
    """
    :param sideloads: relationships fetched and merged in the read response, in this order
    :param plugin: registration attributes, merged over {"version": ..., "name": Model.name}
    :param routes: per-operation route option overrides
    """

    sideloads: List[str] = dc_field(default_factory=list)
    plugin: Dict[str, Any] = dc_field(default_factory=dict)
    routes: Dict[Operation, RouteOptions] = dc_field(default_factory=dict)


class BaseController:
    """
    Generate the CRUD and relationship routes of a Model

    Subclasses can override approve_handler() to implement authorization
    and extra_routes() to register additional routes
    """

    operations = (
        Operation.READ,
        Operation.QUERY,
        Operation.SCHEMA,
        Operation.LIST_CHILDREN,
        Operation.ADD_CHILD,
        Operation.REMOVE_CHILD,
        Operation.MODIFY_CHILD,
        Operation.CREATE,
        Operation.UPDATE,
        Operation.DELETE,
    )

    def __init__(self, store: Store, Model: ModelType, options: Optional[ControllerOptions] = None, **kwargs: Any) -> None:
        self.store = store
        self.Model = Model
        self.options = options if options is not None else ControllerOptions(**kwargs)
        self.plugin_attributes: Dict[str, Any] = {
            "version": get_config("PLUGIN_VERSION"),
            "name": Model.name,
        }
        self.plugin_attributes.update(self.options.plugin)
        self.base_routes = create_routes()
        self.generators: Dict[Operation, Callable[[Optional[str]], Handler]] = {
            Operation.READ: self.read,
            Operation.QUERY: self.query,
            Operation.SCHEMA: self.schema,
            Operation.LIST_CHILDREN: self.list_children,
            Operation.ADD_CHILD: self.add_child,
            Operation.REMOVE_CHILD: self.remove_child,
            Operation.MODIFY_CHILD: self.modify_child,
            Operation.CREATE: self.create,
            Operation.UPDATE: self.update,
            Operation.DELETE: self.delete,
        }

    @property
    def name(self) -> str:
        return str(self.plugin_attributes["name"])

    def relationship_names(self) -> List[str]:
        return list(parse_schema(self.Model.schema).relationships)

    def extra_routes(self) -> List[RouteConfig]:
        return []

    def routes(self) -> List[RouteConfig]:
        """
        :return: the route table: the routes of every operation followed by the extra routes
        """
        result: List[RouteConfig] = []
        for operation in self.operations:
            opts = self.base_routes[operation].merge(self.options.routes.get(operation))
            result.extend(self.route(operation, opts))
        result.extend(self.extra_routes())
        return result

    #
    # Operations
    #
    def read(self, field: Optional[str] = None) -> Handler:
        sideloads = list(self.options.sideloads)

        async def handler(request: PlumpRequest) -> Any:
            item = request.pre["item"]
            obj = await item.get()
            values = await asyncio.gather(*[item.get(sideload) for sideload in sideloads])
            resp = dict(obj)
            resp.update(zip(sideloads, values))
            return {self.Model.name: [resp]}

        return handler

    def update(self, field: Optional[str] = None) -> Handler:
        async def handler(request: PlumpRequest) -> Any:
            obj = await request.pre["item"].set(request.payload).save()
            return await obj.get()

        return handler

    def delete(self, field: Optional[str] = None) -> Handler:
        async def handler(request: PlumpRequest) -> Any:
            return await request.pre["item"].delete()

        return handler

    def create(self, field: Optional[str] = None) -> Handler:
        async def handler(request: PlumpRequest) -> Any:
            obj = await self.Model(request.payload, self.store).save()
            return await obj.get()

        return handler

    # The relationship mutations answer with the updated relationship, like list_children
    def add_child(self, field: Optional[str] = None) -> Handler:
        async def handler(request: PlumpRequest) -> Any:
            obj = await request.pre["item"].add(field, request.payload).save()
            return {field: await obj.get(field)}

        return handler

    def list_children(self, field: Optional[str] = None) -> Handler:
        async def handler(request: PlumpRequest) -> Any:
            children = await request.pre["item"].get(field)
            return {field: children}

        return handler

    def remove_child(self, field: Optional[str] = None) -> Handler:
        async def handler(request: PlumpRequest) -> Any:
            obj = await request.pre["item"].remove(field, request.params[CHILD_ID]).save()
            return {field: await obj.get(field)}

        return handler

    def modify_child(self, field: Optional[str] = None) -> Handler:
        async def handler(request: PlumpRequest) -> Any:
            item = request.pre["item"]
            obj = await item.modify_relationship(field, request.params[CHILD_ID], request.payload).save()
            return {field: await obj.get(field)}

        return handler

    def query(self, field: Optional[str] = None) -> Handler:
        async def handler(request: PlumpRequest) -> Any:
            return await self.store.query(self.Model.name, request.query)

        return handler

    def schema(self, field: Optional[str] = None) -> Handler:
        async def handler(request: PlumpRequest) -> Any:
            snapshot = parse_schema(self.Model.schema).snapshot()
            snapshot.setdefault("$name", self.Model.name)
            return {"schema": snapshot}

        return handler

    def create_handler(self, operation: Operation, field: Optional[str] = None, status_code: int = 200) -> Handler:
        handler = self.generators[operation](field)

        async def dispatch(request: PlumpRequest) -> JSONResponse:
            try:
                response = await handler(request)
                content = jsonable_encoder(response)
            except Exception as exc:
                plumpapi.log.debug("%s failed", operation.value, exc_info=True)
                raise GenericError(exc) from exc
            return JSONResponse(content, status_code=status_code)

        return dispatch

    #
    # Validators
    #
    def create_validator(self, field: Optional[str] = None, partial: bool = False) -> RuleSet:
        """
        Payload rule set of the model attributes, or of the relationship `field`

        When the schema can't be used, the error is logged and an empty rule set
        (no payload validation) is returned, unless STRICT_VALIDATORS is configured
        """
        result = derive_validator(self.Model, field, partial=partial)
        if result.ok:
            return result.rules
        if get_config("STRICT_VALIDATORS"):
            raise result.error
        plumpapi.log.warning("No payload validation for %s %s: %s", self.Model.name, field or "", result.error.message)
        return {}

    #
    # Pre-handlers
    #
    def load_handler(self) -> PreHandler:
        async def load(request: PlumpRequest) -> Any:
            item_id = request.params.get(ITEM_ID)
            if item_id is None:
                raise NotFoundError(f"No {ITEM_ID}")
            try:
                item = self.store.find(self.Model.name, item_id)
                thing = await item.get()
            except Exception as exc:
                plumpapi.log.debug("Loading %s %s failed", self.Model.name, item_id, exc_info=True)
                raise GenericError(exc) from exc
            if thing is None:
                raise NotFoundError(f"{self.Model.name} {item_id}")
            return item

        return PreHandler(load, assign="item")

    # override approve_handler with whatever per-route
    # logic you want - raise UnAuthorizedError
    # on non-approved status
    def approve_handler(self, operation: Operation, field: Optional[str] = None) -> PreHandler:
        async def approve(request: PlumpRequest) -> bool:
            return True

        return PreHandler(approve, assign="approve")

    #
    # Routes
    #
    def route(self, operation: Operation, opts: RouteOptions) -> List[RouteConfig]:
        if opts.plural:
            return self.route_relationship(operation, opts)
        return self.route_attributes(operation, opts)

    def route_relationship(self, operation: Operation, opts: RouteOptions) -> List[RouteConfig]:
        result: List[RouteConfig] = []
        for field in self.relationship_names():
            generic_opts = opts.merge(RouteOptions(field=field))
            generic_opts.path = str(opts.path).replace(FIELD_PLACEHOLDER, field)
            method = str(generic_opts.method).upper()
            if method in WRITE_HTTP_METHODS:
                generic_opts.validate.payload = self.create_validator(field, partial=method == "PATCH")
            generic_opts.plural = False
            result.extend(self.route_attributes(operation, generic_opts))
        return result

    def route_attributes(self, operation: Operation, opts: RouteOptions) -> List[RouteConfig]:
        path = str(opts.path)
        status_code = opts.status_code or 200
        handler = opts.handler or self.create_handler(operation, opts.field, status_code)
        pre = [self.approve_handler(operation, opts.field)]
        if references_item(path):
            pre.insert(0, self.load_handler())
        pre.extend(opts.pre)

        validate = ValidateOptions()
        if opts.validate.query:
            validate.query = opts.validate.query
        if opts.validate.params:
            validate.params = opts.validate.params
        if opts.validate.payload is True:
            validate.payload = self.create_validator()
        elif opts.validate.payload:
            validate.payload = opts.validate.payload

        summary = opts.summary or operation.value
        if opts.field:
            summary = f"{summary} {opts.field}"
        route = RouteConfig(
            operation=operation,
            method=str(opts.method).upper(),
            path=path,
            handler=handler,
            pre=tuple(pre),
            validate=validate,
            field=opts.field,
            summary=f"{summary} ({self.Model.name})",
            status_code=status_code,
        )
        return [route]
