import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from jwtsession import create_app
from jwtsession.extensions import get_state


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no Flask app required)")
    config.addinivalue_line("markers", "integration: Integration tests (Flask app, cookies, HTTP)")


@pytest.fixture()
def app():
    """Per-test app so every test gets its own store and request hooks."""
    app = create_app("testing")
    ctx = app.app_context()
    ctx.push()
    try:
        yield app
    finally:
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def state(app):
    return get_state(app)


@pytest.fixture()
def facade(state):
    return state.facade


@pytest.fixture()
def auth(state):
    return state.auth


def _cookie_header(response) -> str:
    """Turn a response's Set-Cookie headers into a request Cookie header."""
    pairs = [header.split(";", 1)[0] for header in response.headers.getlist("Set-Cookie")]
    return "; ".join(pairs)


@pytest.fixture()
def cookie_header():
    return _cookie_header
