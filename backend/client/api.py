"""
Async HTTP client for the HomeHNI API.

Wraps an ``httpx.AsyncClient`` and turns transport failures and non-2xx
responses into the exceptions in :mod:`client.errors`.
"""

import asyncio
import logging
import mimetypes
from pathlib import Path
from typing import Any

import httpx
from pydantic import BaseModel

from client.config import client_settings
from client.errors import (
    AuthRequiredError,
    MediaFileError,
    NetworkError,
    NotFoundError,
    RemoteError,
)

module_logger = logging.getLogger(__name__)


class Session(BaseModel):
    user_id: int | None = None
    token: str | None = None
    is_admin: bool = False

    @property
    def authenticated(self) -> bool:
        return self.user_id is not None and self.token is not None


def _detail(response: httpx.Response) -> Any:
    try:
        return response.json().get("detail")
    except (ValueError, AttributeError):
        return response.text or None


class HomeHNIClient:
    def __init__(
        self,
        base_url: str | None = None,
        session: Session | None = None,
        timeout: float | None = None,
        logger: logging.Logger | None = None,
    ):
        self.session = session or Session()
        self.logger = logger or module_logger
        self.client = httpx.AsyncClient(
            base_url=(base_url or client_settings.api_base_url).rstrip("/"),
            timeout=timeout or client_settings.timeout_seconds,
        )

    async def close(self):
        await self.client.aclose()

    def _headers(self) -> dict[str, str]:
        if self.session.token:
            return {"Authorization": f"Bearer {self.session.token}"}
        return {}

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self.client.request(
                method, path, headers=self._headers(), **kwargs
            )
        except httpx.HTTPError as e:
            self.logger.warning(f"{method} {path} failed: {e}")
            raise NetworkError(str(e) or e.__class__.__name__) from e

        if response.status_code == 401:
            raise AuthRequiredError(_detail(response) or "Login required")
        if response.status_code == 404:
            raise NotFoundError(404, _detail(response))
        if response.is_error:
            raise RemoteError(response.status_code, _detail(response))

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # Auth

    async def login(self, email: str, password: str) -> Session:
        data = await self._request(
            "POST", "/auth/login", json={"email": email, "password": password}
        )
        self.session = Session(token=data["access_token"])
        me = await self._request("GET", "/auth/me")
        self.session = Session(
            user_id=me["id"], token=data["access_token"], is_admin=me["is_admin"]
        )
        return self.session

    # Search

    async def search_listings(self, **params) -> dict:
        query = {k: str(v) for k, v in params.items() if v is not None}
        return await self._request("GET", "/search/listings", params=query)

    async def search_services(self, **params) -> dict:
        query = {k: str(v) for k, v in params.items() if v is not None}
        return await self._request("GET", "/search/services", params=query)

    # Drafts

    async def get_latest_draft(self) -> dict | None:
        try:
            return await self._request("GET", "/drafts/latest")
        except NotFoundError:
            return None

    async def create_draft(
        self, form_type: str, data: dict, current_step: int = 1
    ) -> dict:
        return await self._request(
            "POST",
            "/drafts",
            json={"form_type": form_type, "data": data, "current_step": current_step},
        )

    async def update_draft(
        self, draft_id: str, data: dict, current_step: int | None = None
    ) -> dict:
        return await self._request(
            "PATCH",
            f"/drafts/{draft_id}",
            json={"data": data, "current_step": current_step},
        )

    async def delete_draft(self, draft_id: str) -> None:
        await self._request("DELETE", f"/drafts/{draft_id}")

    async def submit_draft(self, draft_id: str) -> dict:
        return await self._request("POST", f"/drafts/{draft_id}/submit")

    # Favorites

    async def list_favorites(self) -> list[str]:
        data = await self._request("GET", "/favorites")
        return data["listing_ids"]

    async def toggle_favorite(self, listing_id: str) -> bool:
        data = await self._request("POST", f"/favorites/{listing_id}/toggle")
        return data["is_favorite"]

    # Leads and media

    async def create_lead(self, **fields) -> dict:
        return await self._request("POST", "/leads", json=fields)

    async def upload_media(self, path: str | Path) -> str:
        path = Path(path)
        try:
            content = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise MediaFileError(f"Cannot read {path.name}: {e.strerror or e}") from e

        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        files = {"file": (path.name, content, content_type)}
        data = await self._request("POST", "/media", files=files)
        return data["url"]
