# tests/test_config.py
from pathlib import Path

import pytest

from sentiment_api.config import (
    DEFAULT_PORT,
    DEFAULT_SEARCH_TERMS,
    PACKAGE_DIR,
    load_server_settings,
    load_settings,
)
from sentiment_api.errors import ConfigurationError


def test_load_settings_from_env(full_env):
    settings = load_settings(full_env)

    assert settings.twitter.consumer_key == "ck"
    assert settings.twitter.access_token_secret == "ats"
    assert settings.nlu.api_key == "nlu-key"
    # trailing slash is stripped so paths can be appended
    assert settings.nlu.url == "https://nlu.example.test"
    assert settings.search.terms == DEFAULT_SEARCH_TERMS
    assert settings.search.count == 200
    assert settings.search.lang == "en"


def test_missing_credentials_are_all_reported(full_env):
    del full_env["TWITTER_CONSUMER_SECRET"]
    full_env["NLU_API_KEY"] = ""

    with pytest.raises(ConfigurationError) as excinfo:
        load_settings(full_env)

    message = str(excinfo.value)
    assert "TWITTER_CONSUMER_SECRET" in message
    assert "NLU_API_KEY" in message
    assert "TWITTER_CONSUMER_KEY" not in message


def test_search_overrides(full_env):
    full_env.update({
        "SEARCH_TERMS": " Nittany Lions , , PSU ",
        "SEARCH_COUNT": "50",
        "SEARCH_LANG": "es",
    })

    search = load_settings(full_env).search

    assert search.terms == ("Nittany Lions", "PSU")
    assert search.count == 50
    assert search.lang == "es"


@pytest.mark.parametrize("value", ["lots", "0", "-5"])
def test_invalid_search_count(full_env, value):
    full_env["SEARCH_COUNT"] = value

    with pytest.raises(ConfigurationError):
        load_settings(full_env)


@pytest.mark.parametrize(
    "env, expected",
    [
        ({}, DEFAULT_PORT),
        ({"VCAP_APP_PORT": "9000"}, 9000),
        ({"PORT": "3000", "VCAP_APP_PORT": "9000"}, 3000),
    ],
)
def test_port_fallback(env, expected):
    assert load_server_settings(env).port == expected


def test_static_dirs_default_to_client_folder():
    server = load_server_settings({})

    assert server.static_dir.parts[-2:] == ("client", "static")
    assert server.js_dir.parts[-2:] == ("client", "js")


def test_default_static_dirs_ship_inside_package():
    server = load_server_settings({})

    assert server.static_dir.is_dir()
    assert server.js_dir.is_dir()
    assert server.static_dir.is_relative_to(PACKAGE_DIR)
    assert (server.static_dir / "index.html").is_file()
    assert (server.js_dir / "app.js").is_file()


def test_static_dirs_from_env():
    server = load_server_settings({"STATIC_DIR": "/srv/static", "JS_DIR": "/srv/js", "LOG_LEVEL": "debug"})

    assert server.static_dir == Path("/srv/static")
    assert server.js_dir == Path("/srv/js")
    assert server.log_level == "DEBUG"
