from typing import Any

from app.client.api import ApiClient, ApiError, api_client
from app.client.store import AuthStore, auth_store
from app.core.logging import logger


def login(email: str, password: str, client: ApiClient = api_client, store: AuthStore = auth_store) -> dict[str, Any]:
    store.set_loading(True)
    try:
        token = client.post("/auth/login", {"email": email, "password": password})["access_token"]
        client.set_token(token)
        user = client.get("/auth/me")
    except ApiError:
        client.set_token(None)
        store.set_loading(False)
        raise
    store.set_auth(user, token)
    return user


def logout(client: ApiClient = api_client, store: AuthStore = auth_store) -> None:
    try:
        if store.token:
            client.post("/auth/logout")
    except ApiError as e:
        # session is dropped locally either way
        logger.warning("logout_request_failed", status=e.status_code, error=e.message)
    finally:
        client.set_token(None)
        store.clear_auth()
