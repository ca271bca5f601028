from dataclasses import dataclass, field
from typing import Any

from app.client.api import ApiClient, ApiError, api_client
from app.client.guard import Navigator, ProtectedRoute
from app.client.store import AuthStore, auth_store


@dataclass
class DashboardView:
    user: dict[str, Any]
    import_jobs: list[dict[str, Any]] = field(default_factory=list)
    error: str | None = None


@dataclass
class SettingsView:
    email: str
    display_name: str
    error: str | None = None
    saved: bool = False


class _Page:
    def __init__(self, router: Navigator, store: AuthStore = auth_store, client: ApiClient = api_client):
        self.router = router
        self.store = store
        self.client = client
        self.route = ProtectedRoute(self.content, router=router, store=store, client=client)

    def content(self) -> Any:
        raise NotImplementedError

    def render(self) -> Any:
        return self.route.render()


class DashboardPage(_Page):
    """Landing page after login: who is signed in and their recent imports."""

    def content(self) -> DashboardView:
        view = DashboardView(user=self.store.user or {})
        try:
            view.import_jobs = self.client.get("/imports/jobs") or []
        except ApiError as e:
            view.error = e.message
        return view


class SettingsPage(_Page):
    def __init__(self, router: Navigator, store: AuthStore = auth_store, client: ApiClient = api_client):
        super().__init__(router, store, client)
        self._last_error: str | None = None
        self._saved = False

    def content(self) -> SettingsView:
        user = self.store.user or {}
        return SettingsView(
            email=user.get("email", ""),
            display_name=user.get("display_name", ""),
            error=self._last_error,
            saved=self._saved,
        )

    def save_display_name(self, display_name: str) -> bool:
        self._saved = False
        try:
            user = self.client.put("/users/me", {"display_name": display_name})
        except ApiError as e:
            if isinstance(e.details, list) and e.details:
                self._last_error = "; ".join(str(d.get("message", d)) for d in e.details)
            else:
                self._last_error = e.message
            return False
        self._last_error = None
        self._saved = True
        # keeps the session, only the cached profile changes
        self.store.set_auth(user, self.store.token)
        return True
