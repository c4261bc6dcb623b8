"""Application configuration for jwtsession."""

from __future__ import annotations

import os
from datetime import timedelta
from typing import Dict, Type

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


class BaseConfig:
    """Base configuration loaded for all environments."""

    SECRET_KEY = os.environ.get("SECRET_KEY", "change-me")

    # Token codec (flask-jwt-extended)
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", SECRET_KEY)
    JWT_ALGORITHM = "HS256"
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=int(os.environ.get("JWT_ACCESS_MINUTES", "60")))

    # Cookie sessions. Names must not contain blanks; browsers keep stale
    # cookies after a rename or key change until they expire.
    JWT_SESSION_SECRET_KEY = os.environ.get("JWT_SESSION_SECRET_KEY") or None
    JWT_SESSION_TOKEN_NAME = os.environ.get("JWT_SESSION_TOKEN_NAME", "jwtTokenSession")
    JWT_SESSION_DEFAULT_NAME = os.environ.get("JWT_SESSION_DEFAULT_NAME", "myDefaultSessionName")
    JWT_SESSION_FLASH_NAME = os.environ.get("JWT_SESSION_FLASH_NAME", "myDefaultFlashSessionName")
    JWT_SESSION_COOKIE_PATH = os.environ.get("JWT_SESSION_COOKIE_PATH", "/")
    JWT_SESSION_COOKIE_MAX_AGE = int(os.environ.get("JWT_SESSION_COOKIE_MAX_AGE", "3600"))
    JWT_SESSION_COOKIE_HTTPONLY = _env_flag("JWT_SESSION_COOKIE_HTTPONLY", "true")
    JWT_SESSION_COOKIE_SECURE = _env_flag("JWT_SESSION_COOKIE_SECURE", "false")
    JWT_SESSION_COOKIE_SAMESITE = os.environ.get("JWT_SESSION_COOKIE_SAMESITE", "Lax")
    JWT_SESSION_ENCRYPT = _env_flag("JWT_SESSION_ENCRYPT", "true")
    JWT_SESSION_MAX_COOKIE_AGE = int(os.environ.get("JWT_SESSION_MAX_COOKIE_AGE", str(86400 * 30)))
    # None derives the token cookie lifetime from JWT_ACCESS_TOKEN_EXPIRES.
    JWT_SESSION_TOKEN_COOKIE_MAX_AGE = None

    # Demo allow-list; hashed with bcrypt when the extension starts.
    JWT_SESSION_USERS = {"admin": "admin", "user1": "user1", "user2": "user2"}
    BCRYPT_LOG_ROUNDS = int(os.environ.get("BCRYPT_LOG_ROUNDS", "12"))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    ENV = "development"


class TestingConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "testing-secret"
    JWT_SECRET_KEY = "testing-secret"
    BCRYPT_LOG_ROUNDS = 4


class ProductionConfig(BaseConfig):
    ENV = "production"
    JWT_SESSION_COOKIE_SECURE = _env_flag("JWT_SESSION_COOKIE_SECURE", "true")


config_by_name: Dict[str, Type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}
