"""Environment-driven configuration for the stock ledger.

Values come from the process environment through ``EnvReader``, which never
raises on a malformed value: it records a warning and uses the default, and
the app factory logs those warnings at startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Callable, Mapping

import pytz

ENVIRONMENTS = ("development", "testing", "production")
_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off"})


@dataclass
class EnvReader:
    source: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))
    warnings: list[str] = field(default_factory=list)

    def _get(self, key: str) -> str | None:
        raw = self.source.get(key)
        if raw is None or not raw.strip():
            return None
        return raw.strip()

    def _cast(self, key: str, default, caster: Callable, kind: str):
        raw = self._get(key)
        if raw is None:
            return default
        try:
            return caster(raw)
        except ValueError:
            self.warnings.append(f"{key}={raw!r} is not a valid {kind}; using {default!r}.")
            return default

    def text(self, key: str, default: str | None = None) -> str | None:
        return self._cast(key, default, str, "string")

    def integer(self, key: str, default: int) -> int:
        return self._cast(key, default, int, "integer")

    def flag(self, key: str, default: bool) -> bool:
        def _to_bool(raw: str) -> bool:
            lowered = raw.lower()
            if lowered in _TRUTHY:
                return True
            if lowered in _FALSY:
                return False
            raise ValueError(raw)
        return self._cast(key, default, _to_bool, "boolean")

    def timezone(self, key: str, default: str = "UTC") -> str:
        def _to_zone(raw: str) -> str:
            if raw not in pytz.all_timezones_set:
                raise ValueError(raw)
            return raw
        return self._cast(key, default, _to_zone, "IANA timezone")

    def environment(self, key: str = "FLASK_ENV") -> str:
        def _to_env(raw: str) -> str:
            name = raw.lower()
            if name not in ENVIRONMENTS:
                raise ValueError(raw)
            return name
        return self._cast(key, "development", _to_env, f"environment (one of {', '.join(ENVIRONMENTS)})")


def database_url(reader: EnvReader) -> str | None:
    url = reader.text("DATABASE_URL")
    # Heroku-style URLs still use the old scheme name
    if url and url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


def default_sqlite_uri() -> str:
    instance_path = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "instance"))
    os.makedirs(instance_path, exist_ok=True)
    return "sqlite:///" + os.path.join(instance_path, "stockledger.db")


env = EnvReader()
ACTIVE_ENV = env.environment()


class BaseConfig:
    ENV = ACTIVE_ENV
    SECRET_KEY = env.text("FLASK_SECRET_KEY", "stockledger-dev-secret")

    SQLALCHEMY_DATABASE_URI = database_url(env)
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    LOG_LEVEL = env.text("LOG_LEVEL", "INFO")
    LOG_REDACT_PII = env.flag("LOG_REDACT_PII", True)

    # Calendar "today" for expiry checks and ledger dates is taken in this zone.
    STOCK_TIMEZONE = env.timezone("STOCK_TIMEZONE")
    STOCK_EXPIRING_SOON_DAYS = env.integer("STOCK_EXPIRING_SOON_DAYS", 30)
    STOCK_AUTO_SEED = env.flag("STOCK_AUTO_SEED", True)


class DevelopmentConfig(BaseConfig):
    DEBUG = True


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    STOCK_AUTO_SEED = False


class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_size": env.integer("SQLALCHEMY_POOL_SIZE", 5),
        "max_overflow": env.integer("SQLALCHEMY_MAX_OVERFLOW", 10),
        "pool_pre_ping": True,
        "pool_recycle": 1800,
    }


CONFIGS = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}

Config = CONFIGS[ACTIVE_ENV]
ENV_DIAGNOSTICS = {
    "active": ACTIVE_ENV,
    "warnings": tuple(env.warnings),
}
