"""
ClickUp API access.

OAuth code exchange plus the handful of read-only endpoints the order form
needs. The access token lives in a ClickUpCredentials object owned by the
caller (the API app keeps one on its state) rather than in module globals.
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import httpx
from dotenv import load_dotenv

from titleorder.contexts.intake.exceptions import ClickUpAPIError, NotAuthenticatedError
from titleorder.contexts.intake.logger import _log_debug, _log_error, _log_info

load_dotenv()
CLICKUP_CLIENT_ID = os.getenv("CLICKUP_CLIENT_ID", "")
CLICKUP_CLIENT_SECRET = os.getenv("CLICKUP_CLIENT_SECRET", "")
CLICKUP_REDIRECT_URI = os.getenv("CLICKUP_REDIRECT_URI", "")

CLICKUP_AUTHORIZE_URL = "https://app.clickup.com/api"
CLICKUP_API_URL = "https://api.clickup.com/api/v2"
REQUEST_TIMEOUT_S = 30.0


@dataclass
class ClickUpCredentials:
    """Access token obtained through the OAuth callback."""

    access_token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)

    def auth_headers(self) -> Dict[str, str]:
        """
        Raises:
            NotAuthenticatedError: No token yet
        """
        if not self.is_authenticated:
            raise NotAuthenticatedError("Not authenticated")
        # ClickUp expects the bare token, no "Bearer" prefix
        return {"Authorization": self.access_token}


class ClickUpClient:
    """Thin async wrapper over the ClickUp v2 REST API."""

    def __init__(
        self,
        client_id: str = CLICKUP_CLIENT_ID,
        client_secret: str = CLICKUP_CLIENT_SECRET,
        redirect_uri: str = CLICKUP_REDIRECT_URI,
        base_url: str = CLICKUP_API_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = REQUEST_TIMEOUT_S,
    ):
        """
        Args:
            client_id: OAuth app client id
            client_secret: OAuth app client secret
            redirect_uri: Callback URL registered with the OAuth app
            base_url: API root
            transport: Custom httpx transport (e.g. httpx.MockTransport in tests)
            timeout: Per-request timeout in seconds
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.base_url = base_url
        self.transport = transport
        self.timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self.transport
        )

    def authorize_url(self) -> str:
        """URL that starts the OAuth flow in the user's browser."""
        query = urlencode({"client_id": self.client_id, "redirect_uri": self.redirect_uri})
        return f"{CLICKUP_AUTHORIZE_URL}?{query}"

    async def _request(self, method: str, endpoint: str, **kwargs) -> Any:
        try:
            async with self._client() as client:
                response = await client.request(method, endpoint, **kwargs)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            _log_error(f"ClickUp API error: {method} {endpoint} -> {e.response.status_code}")
            raise ClickUpAPIError(
                "ClickUp request failed", endpoint=endpoint, status_code=e.response.status_code
            ) from e
        except httpx.RequestError as e:
            _log_error(f"ClickUp API error: {method} {endpoint}: {e}")
            raise ClickUpAPIError(f"ClickUp unreachable: {e}", endpoint=endpoint) from e
        except ValueError as e:
            _log_error(f"ClickUp API error: {method} {endpoint} returned invalid JSON")
            raise ClickUpAPIError("ClickUp returned invalid JSON", endpoint=endpoint) from e

    async def exchange_code(self, code: str) -> ClickUpCredentials:
        """
        Exchange an OAuth authorization code for an access token.

        Raises:
            ClickUpAPIError: Exchange failed or no token in the response
        """
        payload = await self._request(
            "POST",
            "/oauth/token",
            json={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "code": code,
            },
        )
        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise ClickUpAPIError("No access token in OAuth response", endpoint="/oauth/token")

        _log_info("Received ClickUp access token")
        return ClickUpCredentials(access_token=token)

    async def fetch_json(
        self,
        endpoint: str,
        credentials: ClickUpCredentials,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        GET an API endpoint with the user's token.

        Raises:
            NotAuthenticatedError: No token yet
            ClickUpAPIError: Request failed
        """
        headers = credentials.auth_headers()
        _log_debug(f"GET {endpoint}")
        return await self._request("GET", endpoint, headers=headers, params=params)

    async def get_list_tasks(self, list_id: str, credentials: ClickUpCredentials) -> List[Dict]:
        data = await self.fetch_json(f"/list/{list_id}/task", credentials)
        return data.get("tasks", [])

    async def get_task(
        self, task_id: str, credentials: ClickUpCredentials, include_subtasks: bool = False
    ) -> Dict[str, Any]:
        params = {"include_subtasks": "true"} if include_subtasks else None
        return await self.fetch_json(f"/task/{task_id}", credentials, params=params)

    async def get_user(self, credentials: ClickUpCredentials) -> Dict[str, Any]:
        return await self.fetch_json("/user", credentials)

    async def get_order_task(
        self, task_id: str, credentials: ClickUpCredentials
    ) -> tuple[Dict[str, Any], List[Dict[str, Any]]]:
        """
        Fetch an order task and the full JSON of each of its subtasks.

        Subtasks are fetched one at a time; the summaries embedded in the
        parent do not carry custom fields.

        Returns:
            (task, subtasks)
        """
        task = await self.get_task(task_id, credentials, include_subtasks=True)
        subtasks = []
        for summary in task.get("subtasks") or []:
            subtasks.append(await self.get_task(summary["id"], credentials))
        return task, subtasks
