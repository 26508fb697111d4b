"""HTTP client mirroring the Bulkmod API.

Every call attaches the stored bearer token. A 401 from any endpoint clears
the token and notifies the registered logout listeners before raising.
"""
import logging
import os
from pathlib import Path
from typing import Callable

import httpx
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

LogoutListener = Callable[[str], None]


class ApiError(Exception):
    """A non-success response from the API."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(ApiError):
    """The server rejected the bearer token (HTTP 401)."""


class TokenStore:
    """Holds the current bearer token, optionally mirrored to a file."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._token: str | None = None
        if path is not None and path.exists():
            self._token = path.read_text().strip() or None

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> None:
        self._token = token
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(token)
            os.chmod(self.path, 0o600)

    def clear(self) -> None:
        self._token = None
        if self.path is not None and self.path.exists():
            self.path.unlink()


class ModListClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000/api",
        token_store: TokenStore | None = None,
        http: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.tokens = token_store or TokenStore()
        self.http = http or httpx.Client(timeout=10)
        self._logout_listeners: list[LogoutListener] = []

    def on_logout(self, listener: LogoutListener) -> None:
        """Register ``listener`` to be called with a reason on forced logout."""
        self._logout_listeners.append(listener)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.tokens.get()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _force_logout(self, reason: str) -> None:
        self.tokens.clear()
        for listener in self._logout_listeners:
            listener(reason)

    def _request(
        self,
        method: str,
        path: str,
        fallback: str,
        *,
        json: dict | None = None,
        params: dict | None = None,
    ):
        response = self.http.request(
            method,
            f"{self.base_url}{path}",
            headers=self._headers(),
            json=json,
            params=params,
        )
        if response.status_code == httpx.codes.UNAUTHORIZED:
            logger.info("%s %s returned 401, clearing token", method, path)
            self._force_logout("token_invalid")
            raise AuthenticationError(fallback, response.status_code)
        if response.is_error:
            raise ApiError(_error_message(response, fallback), response.status_code)
        if not response.content:
            return None
        return response.json()

    def register(self, username: str, email: str, password: str) -> dict:
        data = self._request(
            "POST",
            "/auth/register",
            "Registration failed",
            json={"username": username, "email": email, "password": password},
        )
        self.tokens.set(data["token"])
        return data["user"]

    def login(self, email: str, password: str) -> dict:
        data = self._request(
            "POST",
            "/auth/login",
            "Login failed",
            json={"email": email, "password": password},
        )
        self.tokens.set(data["token"])
        return data["user"]

    def logout(self) -> None:
        """Tell the server, best effort, then drop the local token."""
        if self.tokens.get():
            try:
                self.http.post(f"{self.base_url}/auth/logout", headers=self._headers())
            except httpx.HTTPError as exc:
                logger.warning("Logout request failed: %s", exc)
        self.tokens.clear()

    def profile(self) -> dict:
        return self._request("GET", "/auth/profile", "Failed to fetch profile")["user"]

    def create_mod_list(
        self, name: str, description: str | None = None, is_public: bool = False
    ) -> dict:
        return self._request(
            "POST",
            "/modlists",
            "Failed to create mod list",
            json={"name": name, "description": description, "isPublic": is_public},
        )

    def get_user_mod_lists(self) -> list[dict]:
        return self._request("GET", "/modlists", "Failed to fetch mod lists")

    def get_mod_list(self, list_id: int) -> dict:
        return self._request("GET", f"/modlists/{list_id}", "Failed to fetch mod list")

    def update_mod_list(self, list_id: int, **fields) -> dict | None:
        """Update ``name``, ``description`` and/or ``is_public``.

        Returns the updated list, or None when nothing matched.
        """
        body = {to_camel(key): value for key, value in fields.items()}
        data = self._request(
            "PUT", f"/modlists/{list_id}", "Failed to update mod list", json=body
        )
        return data["modList"]

    def delete_mod_list(self, list_id: int) -> None:
        self._request("DELETE", f"/modlists/{list_id}", "Failed to delete mod list")

    def add_mod(
        self,
        list_id: int,
        slug: str,
        title: str,
        author: str,
        icon_url: str | None = None,
    ) -> dict:
        return self._request(
            "POST",
            f"/modlists/{list_id}/mods",
            "Failed to add mod to mod list",
            json={
                "modSlug": slug,
                "modTitle": title,
                "modIconUrl": icon_url,
                "modAuthor": author,
            },
        )

    def remove_mod(self, list_id: int, slug: str) -> None:
        self._request(
            "DELETE",
            f"/modlists/{list_id}/mods",
            "Failed to remove mod from mod list",
            json={"modSlug": slug},
        )

    def is_mod_in_mod_list(self, list_id: int, slug: str) -> bool:
        data = self._request(
            "GET",
            f"/modlists/{list_id}/mods/check",
            "Failed to check mod in mod list",
            params={"modSlug": slug},
        )
        return data["isInModList"]

    def get_mod_lists_containing(self, slug: str) -> list[dict]:
        return self._request(
            "GET",
            "/modlists/mods/containing",
            "Failed to fetch mod lists containing mod",
            params={"modSlug": slug},
        )

    def get_public_mod_lists(self) -> list[dict]:
        return self._request("GET", "/modlists/public", "Failed to fetch public mod lists")

    def copy_public_mod_list(self, list_id: int) -> dict:
        return self._request(
            "POST",
            f"/modlists/public/{list_id}/copy",
            "Failed to copy public mod list",
        )


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}: {fallback}"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP {response.status_code}: {fallback}"
