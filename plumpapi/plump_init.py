import logging
import os
import sys
from fastapi import FastAPI
from .config import get_config
from typing import Any


class PLUMP:
    """This class holds the plumpapi configuration
    :param app: a FastAPI application
    :param kwargs: configuration overrides, e.g. STRICT_VALIDATORS=True
    """

    # Configuration settings are stored as class variables
    PREFIX = ""
    PLUGIN_VERSION = "1.0.0"
    # raise SchemaError instead of registering routes without payload validation
    STRICT_VALIDATORS = False
    # when False, error messages are sent to the client even without debug logging
    HIDE_ERROR_DETAILS = True
    #
    config: dict = {}

    def __init__(self, app: FastAPI, *args, **kwargs) -> None:
        """
        Constructor
        """
        self.app = app
        if app is not None:
            self.init_app(app, *args, **kwargs)

    def init_app(self, app: FastAPI, **kwargs: Any) -> None:
        """
        Store the configuration overrides
        """
        if not isinstance(app, FastAPI):  # pragma: no cover
            raise TypeError("'app' should be FastAPI.")

        if app.debug:
            log.setLevel(logging.DEBUG)

        for conf_name, conf_val in kwargs.items():
            setattr(PLUMP, conf_name, conf_val)
            PLUMP.config[conf_name] = conf_val

        get_config.cache_clear()

    @staticmethod
    def init_logging(loglevel: int = logging.WARNING) -> logging.Logger:
        """
        Specify the log format used in the webserver logs
        The webserver will catch stderr so we redirect eveything to sys.stderr
        """
        log = logging.getLogger("plumpapi")
        if log.level == logging.NOTSET:
            handler = logging.StreamHandler(sys.stderr)
            formatter = logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s")
            handler.setFormatter(formatter)
            log.setLevel(loglevel)
            log.addHandler(handler)
        return log


#
# logging initialization
#
try:
    DEBUG = os.getenv("DEBUG", logging.WARNING)
    LOGLEVEL = int(DEBUG)
except ValueError:  # pragma: no cover
    print(f'Invalid LogLevel in DEBUG Environment Variable! "{DEBUG}"')
    LOGLEVEL = logging.INFO

log = PLUMP.init_logging(LOGLEVEL)
