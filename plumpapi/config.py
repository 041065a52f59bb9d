# Configuration settings are stored as class variables of plumpapi.PLUMP
# They can be overridden with environment variables of the same name
# or with keyword arguments of PLUMP.init_app()
import os
import logging
from functools import lru_cache
import plumpapi
from typing import Optional, Union

TRUE_VALUES = ("1", "true", "yes", "on")


@lru_cache(maxsize=128)
def get_config(option: str) -> Optional[Union[bool, int, str]]:
    """Retrieve a configuration parameter
    :param option: configuration parameter
    :return: configuration value
    """

    result = os.environ.get(option, None)
    if result is None:
        return getattr(plumpapi.PLUMP, option, None)

    default = getattr(plumpapi.PLUMP, option, None)
    if isinstance(default, bool):
        return result.strip().lower() in TRUE_VALUES
    if isinstance(default, int):
        try:
            return int(result)
        except ValueError:
            plumpapi.log.warning("Invalid value for %s: %s", option, result)
            return default
    return result


def is_debug() -> bool:
    """
    We use the loglevel to check whether we're running in debug mode
    :return: whether the app is in debug mode
    :rtype: Boolean
    """
    if get_config("HIDE_ERROR_DETAILS") is False:
        return True
    return plumpapi.log.getEffectiveLevel() < logging.INFO
