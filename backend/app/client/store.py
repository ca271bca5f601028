"""Process-wide auth session state for the client.

Readers subscribe to be told about every change; the route guard uses this to
re-evaluate whether protected content may be shown.
"""
import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Callable

from app.core.logging import logger


@dataclass(frozen=True)
class AuthState:
    user: dict[str, Any] | None = None
    token: str | None = None
    is_authenticated: bool = False
    is_loading: bool = False


Listener = Callable[[AuthState], None]


class AuthStore:
    def __init__(self, persist_path: str | Path | None = None):
        self._state = AuthState()
        self._listeners: list[Listener] = []
        self._persist_path = Path(persist_path) if persist_path else None
        self._load()

    # state ----------------------------------------------------------------
    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def user(self) -> dict[str, Any] | None:
        return self._state.user

    @property
    def token(self) -> str | None:
        return self._state.token

    @property
    def is_authenticated(self) -> bool:
        return self._state.is_authenticated

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    # actions --------------------------------------------------------------
    def set_auth(self, user: dict[str, Any], token: str) -> None:
        self._set(user=user, token=token, is_authenticated=True, is_loading=False)

    def clear_auth(self) -> None:
        self._set(user=None, token=None, is_authenticated=False, is_loading=False)

    def set_loading(self, loading: bool) -> None:
        self._set(is_loading=loading)

    # subscriptions --------------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, **changes: Any) -> None:
        new_state = replace(self._state, **changes)
        if new_state == self._state:
            return
        self._state = new_state
        self._save()
        # copy: listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            listener(new_state)

    # persistence (user, token and is_authenticated only) ------------------
    def _load(self) -> None:
        if not self._persist_path or not self._persist_path.exists():
            return
        try:
            data = json.loads(self._persist_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("auth_store_load_failed", path=str(self._persist_path), error=str(e))
            return
        self._state = AuthState(
            user=data.get("user"),
            token=data.get("token"),
            is_authenticated=bool(data.get("is_authenticated")) and bool(data.get("token")),
        )

    def _save(self) -> None:
        if not self._persist_path:
            return
        payload = {
            "user": self._state.user,
            "token": self._state.token,
            "is_authenticated": self._state.is_authenticated,
        }
        self._persist_path.parent.mkdir(parents=True, exist_ok=True)
        self._persist_path.write_text(json.dumps(payload), encoding="utf-8")


auth_store = AuthStore()
