import secrets

import pytest

pytestmark = pytest.mark.integration

from jwtsession.core.session.errors import SessionRetrievalError, SessionSaveError
from jwtsession.core.session.models import CookieSession
from jwtsession.core.session.settings import CookieOptions
from jwtsession.core.session.store import MAX_COOKIE_SIZE, CookieSessionStore


def _store(**kwargs):
    return CookieSessionStore("store-secret", **kwargs)


def test_encode_decode_preserves_tagged_values():
    store = _store()
    values = {"name": "world", "count": 2017, "pair": ("a", 1), "flags": [True, None]}

    assert store.decode(store.encode(values)) == values


def test_encrypted_cookie_does_not_expose_values():
    raw = _store().encode({"secret-value": "hunter2"})

    assert "hunter2" not in raw
    assert "secret-value" not in raw


def test_cookie_signed_with_other_secret_is_rejected():
    raw = CookieSessionStore("other-secret").encode({"a": 1})

    with pytest.raises(SessionRetrievalError):
        _store().decode(raw)


def test_tampered_unencrypted_cookie_is_rejected():
    store = _store(encrypt=False)
    raw = store.encode({"role": "user"})
    payload, signature = raw.rsplit(".", 1)

    with pytest.raises(SessionRetrievalError):
        store.decode(f"{payload}.{signature[::-1]}")


def test_cookie_older_than_store_max_age_is_rejected(monkeypatch):
    store = _store()
    raw = store.encode({"a": 1})
    monkeypatch.setattr(store, "max_age", -1)

    with pytest.raises(SessionRetrievalError):
        store.decode(raw)


def test_unserializable_value_fails_to_save():
    with pytest.raises(SessionSaveError):
        _store().encode({"obj": object()})


def test_oversized_session_fails_to_save():
    with pytest.raises(SessionSaveError):
        _store(encrypt=False).encode({"blob": secrets.token_urlsafe(MAX_COOKIE_SIZE * 2)})


def test_get_returns_same_session_within_request(app):
    store = _store()
    with app.test_request_context("/"):
        first = store.get("prefs")
        first.values["theme"] = "dark"

        assert store.get("prefs") is first
        assert first.is_new is True


def test_saved_session_round_trips_through_cookie(app, cookie_header):
    store = _store()
    with app.test_request_context("/"):
        session = store.get("prefs")
        session.values["theme"] = "dark"
        store.save(session)
        response = store.write(app.response_class())

    with app.test_request_context("/", headers={"Cookie": cookie_header(response)}):
        loaded = store.get("prefs")

    assert loaded.values == {"theme": "dark"}
    assert loaded.is_new is False


def test_set_cookie_carries_options(app):
    store = _store()
    with app.test_request_context("/"):
        session = store.get("prefs")
        session.options = CookieOptions(path="/app", max_age=120, http_only=True)
        store.save(session)
        header = store.write(app.response_class()).headers["Set-Cookie"]

    assert header.startswith("prefs=")
    assert "Max-Age=120" in header
    assert "Path=/app" in header
    assert "HttpOnly" in header


def test_expired_session_deletes_cookie(app):
    store = _store()
    with app.test_request_context("/"):
        session = store.new("prefs")
        session.options = CookieOptions().expire()
        store.save(session)
        header = store.write(app.response_class()).headers["Set-Cookie"]

    assert header.startswith("prefs=;")
    assert "Max-Age=0" in header


def test_unreadable_cookie_raises_until_replaced(app):
    store = _store()
    with app.test_request_context("/", headers={"Cookie": "prefs=garbage"}):
        with pytest.raises(SessionRetrievalError):
            store.get("prefs")
        with pytest.raises(SessionRetrievalError):
            store.get("prefs")

        fresh = store.new("prefs")
        assert store.get("prefs") is fresh
        assert fresh.values == {}


def test_clear_request_drops_registry(app):
    store = _store()
    with app.test_request_context("/"):
        first = store.get("prefs")
        store.clear_request()

        assert store.get("prefs") is not first


def test_flashes_are_popped_once():
    session = CookieSession("flash")
    session.values = session.with_flash("one", "flash")
    session.values = session.with_flash("two", "flash")

    assert session.flashes("flash") == ["one", "two"]
    assert session.flashes("flash") == []


def test_with_flash_leaves_values_untouched():
    session = CookieSession("flash", values={"flash": ["one"]})

    assert session.with_flash("two", "flash") == {"flash": ["one", "two"]}
    assert session.values == {"flash": ["one"]}


@pytest.mark.parametrize(
    "bad_value",
    [object(), secrets.token_urlsafe(MAX_COOKIE_SIZE * 2)],
    ids=["unserializable", "oversized"],
)
def test_failed_save_leaves_session_unchanged(app, bad_value):
    store = _store()
    with app.test_request_context("/"):
        session = store.get("prefs")
        session.values["theme"] = "dark"
        store.save(session)
        original_options = session.options

        with pytest.raises(SessionSaveError):
            store.save(session, {"theme": "dark", "bad": bad_value}, CookieOptions(max_age=5))

        assert session.values == {"theme": "dark"}
        assert session.options is original_options
        header = store.write(app.response_class()).headers["Set-Cookie"]

    assert header.startswith("prefs=")
