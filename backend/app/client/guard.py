from typing import Any, Callable, Protocol

from app.client.api import ApiClient, ApiError, api_client
from app.client.store import AuthState, AuthStore, auth_store
from app.core.logging import logger

LOGIN_PATH = "/login"
REDIRECT_PLACEHOLDER = "Redirecting to login..."


class Navigator(Protocol):
    def push(self, path: str) -> None: ...


class Router:
    """In-process navigator that records where the user was sent."""

    def __init__(self, initial: str = "/"):
        self.history: list[str] = [initial]

    @property
    def current(self) -> str:
        return self.history[-1]

    def push(self, path: str) -> None:
        self.history.append(path)


class ProtectedRoute:
    """Render ``children`` only while the session store says we are logged in.

    Unauthenticated: navigate to ``/login`` and render the redirect placeholder.
    Authenticated: hand the token to the API client, confirm it with
    ``GET /auth/me`` and render the children. A rejected token clears the
    session, which in turn redirects.
    """

    def __init__(
        self,
        children: Callable[[], Any] | Any,
        router: Navigator,
        store: AuthStore = auth_store,
        client: ApiClient = api_client,
        verify: bool = True,
    ):
        self.children = children
        self.router = router
        self.store = store
        self.client = client
        self.verify = verify
        self.output: Any = None
        self._deps: tuple | None = None
        self._redirected = False
        self._rendering = False
        self._unsubscribe: Callable[[], None] | None = None

    @staticmethod
    def _allowed(state: AuthState) -> bool:
        return state.is_authenticated and bool(state.token)

    def mount(self) -> Any:
        self._unsubscribe = self.store.subscribe(self._on_change)
        return self.render()

    def unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def render(self) -> Any:
        self._rendering = True
        try:
            state = self.store.state
            deps = (state.is_authenticated, state.token)
            if deps != self._deps:
                self._deps = deps
                self._run_effect(state)
        finally:
            self._rendering = False
        state = self.store.state
        if not self._allowed(state):
            self.output = REDIRECT_PLACEHOLDER
        else:
            self.output = self.children() if callable(self.children) else self.children
        return self.output

    def _on_change(self, _state: AuthState) -> None:
        # changes made by our own effect are picked up by the render in progress
        if not self._rendering:
            self.render()

    def _redirect(self) -> None:
        if not self._redirected:
            self._redirected = True
            self.router.push(LOGIN_PATH)

    def _run_effect(self, state: AuthState) -> None:
        if not self._allowed(state):
            self._redirect()
            return
        self._redirected = False
        self.client.set_token(state.token)
        if self.verify:
            self._verify()

    def _verify(self) -> None:
        try:
            self.store.set_loading(True)
            self.client.get("/auth/me")
        except ApiError as e:
            logger.warning("token_verification_failed", status=e.status_code, error=e.message)
            self.store.clear_auth()
            self._redirect()
        finally:
            self.store.set_loading(False)
