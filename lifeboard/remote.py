"""
Remote collaborators: identity session and the hosted task table.

Both speak the usual hosted-Postgres REST dialect:

    POST {base}/auth/v1/token?grant_type=password   sign in
    POST {base}/auth/v1/signup                      sign up
    POST {base}/auth/v1/logout                      sign out
    GET  {base}/rest/v1/tasks?select=*              task rows for the session

Nothing here retries. Callers turn RemoteError into a user notification and
fall back to local/empty data.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from .schema import Quadrant, Task, _str

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


class RemoteError(Exception):
    """Remote collaborator unreachable or answered with an error."""
    pass


class AuthError(RemoteError):
    """Identity collaborator rejected the request."""
    pass


@dataclass
class Session:
    access_token: str
    user_id: str = ""
    email: str = ""
    refresh_token: str = ""

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Session":
        user = payload.get("user") or {}
        return cls(
            access_token=payload.get("access_token", ""),
            user_id=user.get("id", ""),
            email=user.get("email", ""),
            refresh_token=payload.get("refresh_token", ""),
        )


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {response.status_code}"


class IdentityClient:
    """Email/password identity backed by the remote auth endpoints."""

    def __init__(self, base_url: str, api_key: str, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._session: Optional[Session] = None

    def _headers(self, token: Optional[str] = None) -> Dict[str, str]:
        headers = {"apikey": self.api_key, "Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _post(self, path: str, payload: Optional[dict] = None, token: Optional[str] = None) -> dict:
        try:
            r = requests.post(
                f"{self.base_url}{path}",
                json=payload or {},
                headers=self._headers(token),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise AuthError(f"auth request failed: {e}") from e
        if not r.ok:
            raise AuthError(_error_message(r))
        if not r.content:
            return {}
        try:
            data = r.json()
        except ValueError as e:
            raise AuthError("auth response was not JSON") from e
        return data if isinstance(data, dict) else {}

    def get_session(self) -> Optional[Session]:
        return self._session

    def sign_in(self, email: str, password: str) -> Session:
        data = self._post(
            "/auth/v1/token?grant_type=password",
            {"email": email, "password": password},
        )
        session = Session.from_payload(data)
        if not session.access_token:
            raise AuthError("sign-in returned no access token")
        self._session = session
        logger.info("Signed in as %s", session.email or email)
        return session

    def sign_up(self, email: str, password: str) -> Optional[Session]:
        """Register an account. Returns a session when the server issues one immediately."""
        data = self._post(
            "/auth/v1/signup",
            {"email": email, "password": password, "data": {"full_name": email.split("@")[0]}},
        )
        user = data.get("user") or data
        if isinstance(user, dict) and user.get("identities") == []:
            raise AuthError("This email is already registered. Please log in instead.")
        if data.get("access_token"):
            self._session = Session.from_payload(data)
            return self._session
        return None

    def sign_out(self) -> None:
        session, self._session = self._session, None
        if session is None:
            return
        try:
            self._post("/auth/v1/logout", token=session.access_token)
        except AuthError as e:
            # Local session is already cleared; the server token just expires
            logger.warning("Remote sign-out failed: %s", e)


class RemoteTaskSource:
    """Reads the signed-in user's task rows."""

    def __init__(self, base_url: str, api_key: str, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def fetch_tasks(self, session: Session) -> List[Dict[str, Any]]:
        try:
            r = requests.get(
                f"{self.base_url}/rest/v1/tasks",
                params={"select": "*"},
                headers={
                    "apikey": self.api_key,
                    "Authorization": f"Bearer {session.access_token}",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RemoteError(f"task fetch failed: {e}") from e
        if not r.ok:
            raise RemoteError(_error_message(r))
        try:
            rows = r.json()
        except ValueError as e:
            raise RemoteError("task response was not JSON") from e
        if not isinstance(rows, list):
            raise RemoteError("task response was not a list")
        return [row for row in rows if isinstance(row, dict)]


def task_from_remote_row(row: Dict[str, Any]) -> Task:
    """Map a remote row {id, title, is_completed, created_at, quadrant?} onto the local Task."""
    return Task(
        id=str(row.get("id", "")),
        title=_str(row.get("title")),
        completed=bool(row.get("is_completed") or False),
        date=_str(row.get("created_at")),
        quadrant=Quadrant.from_str(row.get("quadrant")),
    )
