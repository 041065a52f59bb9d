# flake8: noqa: F401
from .plump_init import PLUMP, log
from .errors import PlumpError, ValidationError, GenericError, UnAuthorizedError, NotFoundError, SchemaError
from .schema import ModelSchema, parse_schema
from .validators import FieldType, ValidatorResult, derive_validator
from .routes import Operation, PlumpRequest, PreHandler, RouteConfig, RouteOptions, ValidateOptions
from .controller import BaseController, ControllerOptions
from .api import PlumpFastAPI, install_exception_handlers
from .__about__ import __version__, __description__

__all__ = (
    "__version__",
    "__description__",
    #
    "PLUMP",
    "PlumpFastAPI",
    "install_exception_handlers",
    # controller:
    "BaseController",
    "ControllerOptions",
    "Operation",
    "PlumpRequest",
    "PreHandler",
    "RouteConfig",
    "RouteOptions",
    "ValidateOptions",
    # schema and validators:
    "ModelSchema",
    "parse_schema",
    "FieldType",
    "ValidatorResult",
    "derive_validator",
    # Errors:
    "PlumpError",
    "ValidationError",
    "GenericError",
    "UnAuthorizedError",
    "NotFoundError",
    "SchemaError",
)
