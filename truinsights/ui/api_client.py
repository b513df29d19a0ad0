"""
Synchronous HTTP client for the TruInsights backend API.

Uses ``httpx.Client`` (sync) because Streamlit scripts run synchronously.
The client is shared across browser sessions, so authenticated calls take
the caller's access token explicitly.
"""

import logging

import httpx
import streamlit as st

logger = logging.getLogger(__name__)


class APIError(Exception):
    """User-friendly API error with categorized message.

    Categories: "connection", "timeout", "auth", "http", "network".
    """

    def __init__(self, message: str, category: str = "unknown", status_code: int | None = None) -> None:
        self.message = message
        self.category = category
        self.status_code = status_code
        super().__init__(message)


class APIClient:
    """Thin synchronous wrapper around httpx for calling the FastAPI backend.

    All methods return parsed JSON or raise ``APIError`` with a message
    suitable for display.
    """

    def __init__(self, base_url: str = "http://localhost:8000", client: httpx.Client | None = None) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(base_url=self._base_url, timeout=30.0)

    def _request(self, method: str, path: str, token: str | None = None, **kwargs) -> httpx.Response:
        """Execute an HTTP request with user-friendly error handling.

        Args:
            method: HTTP method name ("get", "post").
            path: API endpoint path (e.g. "/api/v1/journals").
            token: Access token sent as ``Authorization: Bearer``.
            **kwargs: Passed through to httpx (json, params, files, timeout, etc.).

        Raises:
            APIError: On connection, timeout, HTTP status, or network errors.
        """
        if token:
            kwargs["headers"] = {**kwargs.get("headers", {}), "Authorization": f"Bearer {token}"}
        try:
            resp = getattr(self._client, method)(path, **kwargs)
            resp.raise_for_status()
            return resp
        except httpx.ConnectError:
            raise APIError(
                "Backend server is not running. "
                "Start it with: `uvicorn truinsights.api.app:app --reload --port 8000`",
                category="connection",
            ) from None
        except httpx.TimeoutException:
            raise APIError(
                "Request timed out. The server may be overloaded.",
                category="timeout",
            ) from None
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            try:
                detail = exc.response.json().get("detail", exc.response.text)
            except ValueError:
                detail = exc.response.text or str(exc)
            category = "auth" if status == 401 else "http"
            raise APIError(str(detail), category=category, status_code=status) from None
        except httpx.HTTPError as exc:
            raise APIError(f"Network error: {exc}", category="network") from None

    # -- health --

    def check_connection(self) -> tuple[bool, str]:
        """Check if the backend is reachable. Returns (ok, message)."""
        try:
            self._request("get", "/health")
            return True, "Connected"
        except APIError as exc:
            return False, exc.message

    # -- auth --

    def sign_in(self, email: str, password: str) -> dict:
        return self._request(
            "post", "/api/v1/auth/sign-in", json={"email": email, "password": password}
        ).json()

    def get_session(self, token: str) -> dict | None:
        """Return the session for *token*, or None when it is no longer valid."""
        try:
            return self._request("get", "/api/v1/auth/session", token=token).json()
        except APIError as exc:
            if exc.category == "auth":
                return None
            raise

    def sign_out(self, token: str) -> None:
        self._request("post", "/api/v1/auth/sign-out", token=token)

    # -- journals --

    def submit_journal(
        self,
        token: str,
        audio: bytes,
        mime_type: str,
        duration_seconds: int,
        filename: str = "journal.wav",
    ) -> dict:
        """Upload a recording and run transcription and extraction."""
        return self._request(
            "post",
            "/api/v1/journals",
            token=token,
            files={"audio": (filename, audio, mime_type)},
            data={"duration_seconds": str(duration_seconds)},
            timeout=300.0,
        ).json()

    def list_journals(self, token: str, limit: int = 5) -> list[dict]:
        return self._request("get", "/api/v1/journals", token=token, params={"limit": limit}).json()

    def get_stats(self, token: str) -> dict:
        return self._request("get", "/api/v1/journals/stats", token=token).json()

    def get_journal(self, token: str, journal_id: str) -> dict:
        return self._request("get", f"/api/v1/journals/{journal_id}", token=token).json()

    def process_journal(self, token: str, journal_id: str) -> dict:
        return self._request(
            "post", f"/api/v1/journals/{journal_id}/process", token=token, timeout=300.0
        ).json()

    def download_audio(self, token: str, journal_id: str) -> bytes | None:
        """Fetch raw audio bytes for a journal. Returns None on error."""
        try:
            resp = self._request(
                "get", f"/api/v1/journals/{journal_id}/audio", token=token, follow_redirects=True
            )
            return resp.content
        except APIError:
            return None


@st.cache_resource
def get_api_client(base_url: str = "http://localhost:8000") -> APIClient:
    """Return a cached APIClient, keyed by base_url."""
    return APIClient(base_url=base_url)
