# -*- coding: utf-8 -*-
#
# FastAPI binding: expose the route table of a controller
#
import re
from http import HTTPStatus
from typing import Any, Dict, List, Optional, Type

from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

import plumpapi
from .config import get_config
from .controller import BaseController
from .errors import PlumpError, ValidationError
from .model_types import ModelType, Store
from .routes import PlumpRequest, RouteConfig
from .validators import RuleSet, payload_model

# FastAPI error locations => hapi validation sources
VALIDATION_SOURCES = {"body": "payload", "path": "params", "query": "query"}


def _validation_error_payload(exc: RequestValidationError) -> Dict[str, Any]:
    errors = exc.errors()
    source = None
    keys: List[str] = []
    messages: List[str] = []
    for raw_error in errors:
        loc = list(raw_error.get("loc", ()))
        if loc and source is None:
            source = VALIDATION_SOURCES.get(str(loc[0]), str(loc[0]))
        key = ".".join(str(item) for item in loc[1:])
        if key:
            keys.append(key)
        messages.append(f"{key or 'value'}: {raw_error.get('msg', 'invalid')}")
    return {
        "statusCode": HTTPStatus.BAD_REQUEST.value,
        "error": HTTPStatus.BAD_REQUEST.phrase,
        "message": "; ".join(messages) or "Invalid request input",
        "validation": {"source": source, "keys": keys},
    }


def _http_exception_payload(exc: StarletteHTTPException) -> Dict[str, Any]:
    status_code = int(exc.status_code)
    try:
        phrase = HTTPStatus(status_code).phrase
    except ValueError:
        phrase = "HTTP Error"
    return {"statusCode": status_code, "error": phrase, "message": str(exc.detail)}


def install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PlumpError)
    async def _plump_error_handler(_request: Request, exc: PlumpError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(_request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=HTTPStatus.BAD_REQUEST.value, content=_validation_error_payload(exc))

    @app.exception_handler(StarletteHTTPException)
    async def _http_error_handler(_request: Request, exc: StarletteHTTPException):
        headers = getattr(exc, "headers", None)
        return JSONResponse(status_code=int(exc.status_code), content=_http_exception_payload(exc), headers=headers)


def _query_params(request: Request) -> Dict[str, Any]:
    """
    Freeform query parameters, repeated keys are collected in a list: ?tag=a&tag=b => {"tag": ["a", "b"]}
    """
    query: Dict[str, Any] = {}
    for key, value in request.query_params.multi_items():
        if key not in query:
            query[key] = value
        elif isinstance(query[key], list):
            query[key].append(value)
        else:
            query[key] = [query[key], value]
    return query


def _model_name(*parts: Optional[str]) -> str:
    name = "_".join(part for part in parts if part)
    return re.sub(r"\W", "_", name)


def _validate(model: Optional[Type[BaseModel]], data: Any, location: str) -> Any:
    if model is None:
        return data
    try:
        validated = model.model_validate({} if data is None else data)
    except PydanticValidationError as exc:
        errors = []
        for error in exc.errors(include_url=False, include_context=False):
            error["loc"] = (location,) + tuple(error.get("loc", ()))
            errors.append(error)
        raise RequestValidationError(errors)
    return validated.model_dump(mode="json", exclude_unset=True)


class PlumpFastAPI:
    """
    Expose BaseController route tables on a FastAPI app

    api = PlumpFastAPI(app, prefix="/api")
    api.expose_object(Person, store, sideloads=["friends"])
    """

    def __init__(self, app: FastAPI, prefix: Optional[str] = None) -> None:
        self.app = app
        self.prefix = prefix if prefix is not None else str(get_config("PREFIX") or "")
        self.controllers: List[BaseController] = []
        install_exception_handlers(app)

    @staticmethod
    def _with_slash_parity(path: str) -> List[str]:
        if path.endswith("/"):
            path = path.rstrip("/")
        return [path, path + "/"]

    @staticmethod
    async def _read_payload(request: Request) -> Any:
        body = await request.body()
        if not body:
            return None
        try:
            return await request.json()
        except ValueError:
            raise ValidationError("Invalid request payload JSON format")

    def _rules_model(self, route: RouteConfig, part: str, rules: Optional[RuleSet]) -> Optional[Type[BaseModel]]:
        if not rules:
            return None
        name = _model_name(route.operation.value, route.field, part)
        return payload_model(name, rules, permissive=part != "payload")

    @staticmethod
    def _openapi_request_body(body_model: Type[BaseModel]) -> Dict[str, Any]:
        return {
            "requestBody": {
                "required": True,
                "content": {"application/json": {"schema": body_model.model_json_schema()}},
            }
        }

    def create_endpoint(self, route: RouteConfig):
        """
        :param route: RouteConfig
        :return: endpoint validating the request, running the pre-handlers and the route handler
        """
        params_model = self._rules_model(route, "params", route.validate.params)
        query_model = self._rules_model(route, "query", route.validate.query)
        body_model = self._rules_model(route, "payload", route.validate.payload)

        async def endpoint(request: Request):
            plump_request = PlumpRequest(
                params=_validate(params_model, dict(request.path_params), "path"),
                query=_validate(query_model, _query_params(request), "query"),
                raw=request,
            )
            payload = await self._read_payload(request)
            plump_request.payload = _validate(body_model, payload, "body")

            for pre in route.pre:
                value = await pre.method(plump_request)
                if pre.assign:
                    plump_request.pre[pre.assign] = value

            result = await route.handler(plump_request)
            if isinstance(result, Response):
                return result
            return JSONResponse(jsonable_encoder(result), status_code=route.status_code)

        return endpoint

    def expose_controller(self, controller: BaseController) -> APIRouter:
        """
        Register the route table of the controller
        """
        tag = controller.name
        router = APIRouter(prefix=f"{self.prefix}/{controller.Model.name}", tags=[tag])
        # static segments (e.g. /schema) have to be matched before /{item_id}
        routes = sorted(controller.routes(), key=lambda route: route.has_item)
        for route in routes:
            endpoint = self.create_endpoint(route)
            body_model = self._rules_model(route, "payload", route.validate.payload)
            openapi_extra = self._openapi_request_body(body_model) if body_model is not None else None
            operation_id = _model_name(route.operation.value, controller.Model.name, route.field)
            for idx, variant in enumerate(self._with_slash_parity(route.path)):
                plumpapi.log.info("Exposing %s %s%s", route.method, router.prefix, variant)
                router.add_api_route(
                    variant,
                    endpoint,
                    methods=[route.method],
                    summary=route.summary,
                    operation_id=operation_id if idx == 0 else None,
                    include_in_schema=idx == 0,
                    status_code=route.status_code,
                    openapi_extra=openapi_extra,
                )
        self.app.include_router(router)
        self.controllers.append(controller)
        # If /docs was opened before exposing controllers, FastAPI may have cached OpenAPI already.
        self.app.openapi_schema = None
        return router

    def expose_object(
        self,
        Model: ModelType,
        store: Store,
        controller_class: Type[BaseController] = BaseController,
        **options: Any,
    ) -> BaseController:
        """
        Create a controller for Model and expose it
        :param options: ControllerOptions arguments (sideloads, plugin, routes)
        """
        controller = controller_class(store, Model, **options)
        self.expose_controller(controller)
        return controller
