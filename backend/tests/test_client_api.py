import json

import httpx
import pytest

from app.client.api import ApiClient, ApiError
from app.client.auth import login, logout
from app.client.guard import Router
from app.client.pages import DashboardPage, SettingsPage
from app.client.store import AuthStore


class Backend:
    """Minimal stand-in for the HTTP API."""

    def __init__(self):
        self.requests = []
        self.user = {"id": 1, "email": "test@example.com", "display_name": "Test User", "last_login_at": None}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        auth = request.headers.get("Authorization")
        path = request.url.path
        if path == "/auth/login":
            body = json.loads(request.content)
            if body["password"] != "pw":
                return httpx.Response(401, json={"detail": "Invalid credentials"})
            return httpx.Response(200, json={"access_token": "tok", "token_type": "bearer"})
        if auth != "Bearer tok":
            return httpx.Response(401, json={"detail": "Invalid token"})
        if path == "/auth/me":
            return httpx.Response(200, json=self.user)
        if path == "/auth/logout":
            return httpx.Response(200, json={"status": "ok"})
        if path == "/imports/jobs":
            return httpx.Response(200, json=[{"id": 7, "state": "preview"}])
        if path == "/users/me" and request.method == "PUT":
            name = json.loads(request.content)["display_name"]
            if not name:
                return httpx.Response(422, json={"detail": [{"field": "displayName", "message": "too short"}]})
            self.user = {**self.user, "display_name": name}
            return httpx.Response(200, json=self.user)
        return httpx.Response(404, json={"error": {"code": "NOT_FOUND", "message": "No route"}})


@pytest.fixture
def backend():
    return Backend()


@pytest.fixture
def api(backend):
    return ApiClient("http://api.test", transport=httpx.MockTransport(backend))


def test_client_attaches_token_and_raises_api_errors(api, backend):
    with pytest.raises(ApiError) as exc:
        api.get("/auth/me")
    assert exc.value.status_code == 401
    assert exc.value.message == "Invalid token"

    api.set_token("tok")
    assert api.get("/auth/me")["email"] == "test@example.com"
    assert backend.requests[-1].headers["Authorization"] == "Bearer tok"

    with pytest.raises(ApiError) as exc:
        api.delete("/nowhere")
    assert exc.value.message == "No route"


def test_login_and_logout_drive_the_store(api):
    store = AuthStore()
    with pytest.raises(ApiError):
        login("test@example.com", "bad", client=api, store=store)
    assert store.is_authenticated is False

    user = login("test@example.com", "pw", client=api, store=store)
    assert user["display_name"] == "Test User"
    assert store.is_authenticated is True and store.token == "tok"

    logout(client=api, store=store)
    assert store.is_authenticated is False
    assert api.token is None


def test_dashboard_page(api):
    store = AuthStore()
    router = Router()
    page = DashboardPage(router, store=store, client=api)
    assert page.render() == "Redirecting to login..."

    login("test@example.com", "pw", client=api, store=store)
    view = page.render()
    assert view.user["email"] == "test@example.com"
    assert view.import_jobs == [{"id": 7, "state": "preview"}]
    assert router.history == ["/", "/login"]


def test_settings_page_saves_display_name(api):
    store = AuthStore()
    login("test@example.com", "pw", client=api, store=store)
    page = SettingsPage(Router(), store=store, client=api)
    assert page.render().display_name == "Test User"

    assert page.save_display_name("") is False
    assert page.render().error == "too short"

    assert page.save_display_name("Renamed") is True
    view = page.render()
    assert view.display_name == "Renamed"
    assert view.saved is True and view.error is None
    assert store.user["display_name"] == "Renamed"
