from dataclasses import FrozenInstanceError
from datetime import timedelta

import pytest

pytestmark = pytest.mark.unit

from jwtsession.config import TestingConfig
from jwtsession.core.session.errors import SessionConfigError
from jwtsession.core.session.settings import CookieOptions, SessionSettings


def _config(**overrides):
    values = {key: getattr(TestingConfig, key) for key in dir(TestingConfig) if key.isupper()}
    values.update(overrides)
    return values


def test_from_mapping_uses_documented_defaults():
    settings = SessionSettings.from_mapping(_config())

    assert settings.secret_key == "testing-secret"
    assert settings.token_name == "jwtTokenSession"
    assert settings.default_session_name == "myDefaultSessionName"
    assert settings.flash_session_name == "myDefaultFlashSessionName"
    assert settings.default_options == CookieOptions(path="/", max_age=3600, http_only=True)
    assert settings.token_lifetime == timedelta(minutes=60)


def test_session_secret_overrides_app_secret():
    settings = SessionSettings.from_mapping(_config(JWT_SESSION_SECRET_KEY="cookie-only"))
    assert settings.secret_key == "cookie-only"


def test_settings_are_immutable():
    settings = SessionSettings.from_mapping(_config())
    with pytest.raises(FrozenInstanceError):
        settings.token_name = "other"  # type: ignore[misc]
    with pytest.raises(FrozenInstanceError):
        settings.default_options.max_age = 1  # type: ignore[misc]


@pytest.mark.parametrize(
    "overrides",
    [
        {"JWT_SESSION_TOKEN_NAME": "a blank name"},
        {"JWT_SESSION_DEFAULT_NAME": ""},
        {"JWT_SESSION_FLASH_NAME": "default"},
        {"JWT_SESSION_FLASH_NAME": "myDefaultSessionName"},
        {"SECRET_KEY": "", "JWT_SESSION_SECRET_KEY": None},
    ],
)
def test_invalid_settings_are_rejected(overrides):
    with pytest.raises(SessionConfigError):
        SessionSettings.from_mapping(_config(**overrides))


def test_token_cookie_age_follows_token_lifetime_unless_overridden():
    settings = SessionSettings.from_mapping(_config(JWT_ACCESS_TOKEN_EXPIRES=timedelta(minutes=5)))
    assert settings.derived_token_cookie_max_age == 300

    pinned = SessionSettings.from_mapping(
        _config(JWT_ACCESS_TOKEN_EXPIRES=timedelta(minutes=5), JWT_SESSION_TOKEN_COOKIE_MAX_AGE=60)
    )
    assert pinned.derived_token_cookie_max_age == 60


def test_expire_keeps_cookie_scope():
    options = CookieOptions(path="/app", max_age=10, domain="example.com", secure=True)
    expired = options.expire()

    assert expired.expired is True
    assert expired.path == "/app"
    assert expired.domain == "example.com"
    assert options.expired is False
