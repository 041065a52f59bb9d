import logging

import plumpapi
from plumpapi import GenericError, NotFoundError, ValidationError
from plumpapi.config import get_config, is_debug


def test_get_config_defaults():
    assert get_config("PLUGIN_VERSION") == "1.0.0"
    assert get_config("STRICT_VALIDATORS") is False
    assert get_config("NO_SUCH_OPTION") is None


def test_get_config_environment(monkeypatch):
    monkeypatch.setenv("STRICT_VALIDATORS", "yes")
    monkeypatch.setenv("PREFIX", "/v2")

    assert get_config("STRICT_VALIDATORS") is True
    assert get_config("PREFIX") == "/v2"


def test_init_app_overrides(app, monkeypatch):
    monkeypatch.setattr(plumpapi.PLUMP, "PREFIX", plumpapi.PLUMP.PREFIX)
    monkeypatch.setattr(plumpapi.PLUMP, "config", {})
    get_config("PREFIX")

    plumpapi.PLUMP(app, PREFIX="/api/v1")

    assert get_config("PREFIX") == "/api/v1"
    assert plumpapi.PLUMP.config == {"PREFIX": "/api/v1"}
    assert plumpapi.PlumpFastAPI(app).prefix == "/api/v1"


def test_is_debug_follows_loglevel(monkeypatch):
    assert not is_debug()
    monkeypatch.setattr(plumpapi.log, "level", logging.DEBUG)
    assert is_debug()


def test_error_messages():
    assert NotFoundError("posts 1").message == "NotFoundError (debug logging disabled)"
    assert GenericError(RuntimeError("boom")).to_dict() == {
        "statusCode": 500,
        "error": "Internal Server Error",
        "message": "Generic Error: (debug logging disabled)",
    }
    # client side errors are always shown
    assert ValidationError("bad input").message == "Validation Error: bad input"
