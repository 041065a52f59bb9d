# Exception Handlers
#
# The application loglevel determines the level of detail shown to the user.
# If set to debug, too much sensitive info might be shown !
#
# The exceptions are caught by the handlers installed in api.install_exception_handlers
# and formatted like hapi's Boom errors, for example:
# {
#      "statusCode": 404,
#      "error": "Not Found",
#      "message": "NotFoundError (debug logging disabled)"
# }
#
from http import HTTPStatus
from typing import Any, Dict, Optional
import plumpapi
from .config import is_debug

HIDDEN_LOG = "(debug logging disabled)"


class PlumpError(Exception):
    """
    Base class of the errors that are converted to an http response
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
    message = ""

    def to_dict(self) -> Dict[str, Any]:
        """
        :return: Boom style error body
        """
        try:
            error = HTTPStatus(self.status_code).phrase
        except ValueError:  # pragma: no cover
            error = "HTTP Error"
        return {"statusCode": self.status_code, "error": error, "message": self.message}


class NotFoundError(PlumpError):
    """
    This exception is raised when an item was not found
    """

    status_code = HTTPStatus.NOT_FOUND.value
    message = "NotFoundError "

    def __init__(self, message: str = "", status_code: int = HTTPStatus.NOT_FOUND.value) -> None:
        """
        :param message: Message to be returned in the (json) body
        :param status_code: HTTP Status code
        """
        PlumpError.__init__(self, message)
        self.status_code = status_code
        plumpapi.log.error("Not found: %s", message)
        if is_debug():
            self.message += message
        else:
            self.message += HIDDEN_LOG


class UnAuthorizedError(PlumpError):
    """
    This exception is raised when an authorization error occured
    we use FORBIDDEN(403) instead of UNAUTHORIZED(401) (old http status code descriptions were not clear)
    """

    status_code = HTTPStatus.FORBIDDEN.value
    message = "Authorization Error: "

    def __init__(self, message: str = "", status_code: int = HTTPStatus.FORBIDDEN.value) -> None:
        PlumpError.__init__(self, message)
        self.status_code = status_code
        plumpapi.log.error("UnAuthorizedError: %s", message)
        if is_debug():
            self.message += message
        else:
            self.message += HIDDEN_LOG


class GenericError(PlumpError):
    """
    This exception is raised when an error has been detected
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value  # 500
    message = "Generic Error: "

    def __init__(self, message: Any, status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR.value) -> None:
        PlumpError.__init__(self, str(message))
        self.status_code = status_code
        plumpapi.log.error("Generic Error: %s", message)
        if is_debug():
            self.message += str(message)
        else:
            self.message += HIDDEN_LOG


class ValidationError(PlumpError):
    """
    This exception is raised when invalid input has been detected (client side input)
    Always send back the message to the client in the response
    """

    status_code = HTTPStatus.BAD_REQUEST.value
    message = "Validation Error: "

    def __init__(self, message: str = "", status_code: int = HTTPStatus.BAD_REQUEST.value) -> None:
        PlumpError.__init__(self, message)
        self.status_code = status_code
        plumpapi.log.warning("ValidationError: %s", message)
        self.message += message


class SchemaError(PlumpError):
    """
    The model schema could not be turned into validators:
    unknown relationship or attribute type, malformed schema, ...
    These errors are returned as values by the validator derivation,
    they're only raised when strict validators are configured
    """

    message = "Schema Error: "

    def __init__(self, message: str = "", field: Optional[str] = None) -> None:
        PlumpError.__init__(self, message)
        self.field = field
        self.message += message
