"""
Configuration

Settings are read from the environment (and a `.env` file) once at startup
and passed explicitly into the clients that need them.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError

load_dotenv()

PACKAGE_DIR = Path(__file__).resolve().parent

DEFAULT_SEARCH_TERMS = ("PSU", "Penn State", "Penn State University")
DEFAULT_SEARCH_COUNT = 200
DEFAULT_PORT = 8080
DEFAULT_NLU_VERSION = "2022-04-07"


@dataclass(frozen=True)
class TwitterCredentials:
    """OAuth 1.0a user-context credentials for the Twitter API."""
    consumer_key: str
    consumer_secret: str
    access_token_key: str
    access_token_secret: str


@dataclass(frozen=True)
class NluSettings:
    """Connection settings for the NLU analysis service."""
    api_key: str
    url: str
    version: str = DEFAULT_NLU_VERSION
    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class SearchSettings:
    """What the sentiment endpoint searches for."""
    terms: tuple[str, ...] = DEFAULT_SEARCH_TERMS
    count: int = DEFAULT_SEARCH_COUNT
    lang: str = "en"


@dataclass(frozen=True)
class ServerSettings:
    """Where the HTTP server listens and what it serves."""
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    static_dir: Path = PACKAGE_DIR / "client" / "static"
    js_dir: Path = PACKAGE_DIR / "client" / "js"
    log_level: str = "INFO"


@dataclass(frozen=True)
class Settings:
    """Everything the service needs, built by `load_settings()`."""
    twitter: TwitterCredentials
    nlu: NluSettings
    search: SearchSettings = field(default_factory=SearchSettings)
    server: ServerSettings = field(default_factory=ServerSettings)


TWITTER_ENV_VARS = {
    "consumer_key": "TWITTER_CONSUMER_KEY",
    "consumer_secret": "TWITTER_CONSUMER_SECRET",
    "access_token_key": "TWITTER_ACCESS_TOKEN_KEY",
    "access_token_secret": "TWITTER_ACCESS_TOKEN_SECRET",
}

NLU_ENV_VARS = {
    "api_key": "NLU_API_KEY",
    "url": "NLU_URL",
}


def _parse_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def _parse_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")


def _parse_terms(raw: Optional[str]) -> tuple[str, ...]:
    if not raw:
        return DEFAULT_SEARCH_TERMS
    terms = tuple(t.strip() for t in raw.split(",") if t.strip())
    return terms or DEFAULT_SEARCH_TERMS


def load_server_settings(environ: Optional[Mapping[str, str]] = None) -> ServerSettings:
    """
    Read listening and static-file settings.

    Never fails on missing credentials, so it is safe to call at import time.
    The port falls back from PORT to VCAP_APP_PORT to 8080.
    """
    env = os.environ if environ is None else environ

    port_var = "PORT" if env.get("PORT") else "VCAP_APP_PORT"
    static_dir = env.get("STATIC_DIR")
    js_dir = env.get("JS_DIR")

    return ServerSettings(
        host=env.get("HOST", "0.0.0.0"),
        port=_parse_int(env, port_var, DEFAULT_PORT),
        static_dir=Path(static_dir) if static_dir else ServerSettings.static_dir,
        js_dir=Path(js_dir) if js_dir else ServerSettings.js_dir,
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
    )


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build the full settings object.

    Raises:
        ConfigurationError: if any Twitter or NLU credential is missing, or a
            numeric setting can't be parsed.
    """
    env = os.environ if environ is None else environ

    missing = [
        var for var in (*TWITTER_ENV_VARS.values(), *NLU_ENV_VARS.values())
        if not env.get(var)
    ]
    if missing:
        raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

    twitter = TwitterCredentials(**{attr: env[var] for attr, var in TWITTER_ENV_VARS.items()})
    nlu = NluSettings(
        api_key=env["NLU_API_KEY"],
        url=env["NLU_URL"].rstrip("/"),
        version=env.get("NLU_VERSION", DEFAULT_NLU_VERSION),
        timeout_seconds=_parse_float(env, "NLU_TIMEOUT_SECONDS", 30.0),
    )

    count = _parse_int(env, "SEARCH_COUNT", DEFAULT_SEARCH_COUNT)
    if count <= 0:
        raise ConfigurationError(f"SEARCH_COUNT must be positive, got {count}")

    search = SearchSettings(
        terms=_parse_terms(env.get("SEARCH_TERMS")),
        count=count,
        lang=env.get("SEARCH_LANG", "en"),
    )

    return Settings(
        twitter=twitter,
        nlu=nlu,
        search=search,
        server=load_server_settings(env),
    )
