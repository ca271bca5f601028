from typing import Any

import httpx

from app.core.config import settings
from app.core.logging import logger


class ApiError(Exception):
    def __init__(self, status_code: int, message: str, details: Any = None):
        self.status_code = status_code
        self.message = message
        self.details = details
        super().__init__(f"{status_code}: {message}")


def _error_message(response: httpx.Response) -> tuple[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return response.text or "API request failed", None
    if isinstance(body, dict):
        if isinstance(body.get("error"), dict):
            err = body["error"]
            return err.get("message") or "API request failed", err.get("details")
        detail = body.get("detail")
        if isinstance(detail, str):
            return detail, None
        if detail is not None:
            return "Validation failed", detail
    return "API request failed", body


class ApiClient:
    """Thin JSON client for the backend; attaches the bearer token when set."""

    def __init__(self, base_url: str, transport: httpx.BaseTransport | None = None, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.token: str | None = None
        self._http = httpx.Client(base_url=self.base_url, transport=transport, timeout=timeout)

    def set_token(self, token: str | None) -> None:
        self.token = token

    def _request(self, method: str, endpoint: str, **kwargs) -> Any:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            response = self._http.request(method, endpoint, headers=headers, **kwargs)
        except httpx.RequestError as exc:
            logger.warning("api_request_failed", method=method, endpoint=endpoint, error=str(exc))
            raise ApiError(0, f"Request failed: {exc}") from exc
        if response.is_error:
            message, details = _error_message(response)
            raise ApiError(response.status_code, message, details)
        if not response.content:
            return None
        return response.json()

    def get(self, endpoint: str) -> Any:
        return self._request("GET", endpoint)

    def post(self, endpoint: str, data: Any = None) -> Any:
        return self._request("POST", endpoint, json=data)

    def put(self, endpoint: str, data: Any = None) -> Any:
        return self._request("PUT", endpoint, json=data)

    def delete(self, endpoint: str) -> Any:
        return self._request("DELETE", endpoint)

    def close(self) -> None:
        self._http.close()


api_client = ApiClient(settings.API_BASE_URL)
