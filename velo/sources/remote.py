"""
Remote data source: HTTP calls to the Velo Altitude backend.

Blocking requests calls run in a worker thread so the event loop keeps
serving other coroutines while a request is in flight.
"""
import asyncio
import logging
from typing import Dict, List, Any, Optional
from urllib.parse import quote

import requests

from .base import DataSource
from ..errors import DataSourceError, ResourceNotFoundError
from ..schemas import ChatRequest, Language
from ..storage import LocalStorage

logger = logging.getLogger("sources.remote")


def _segment(value: str) -> str:
    """Escape a value used as one URL path segment."""
    return quote(str(value), safe="")


class RemoteDataSource(DataSource):
    """
    Talks to the backend REST API.

    Every request carries ``Authorization: Bearer <token>`` when local
    storage holds an auth token. Non-2xx answers and transport failures
    raise DataSourceError (ResourceNotFoundError for 404).
    """

    def __init__(
        self,
        base_url: str,
        storage: LocalStorage,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._storage = storage
        self._timeout = timeout
        self._session = session or requests.Session()

    @property
    def source_name(self) -> str:
        return "remote"

    def _get_headers(self) -> dict:
        """Get request headers, with the bearer token when one is stored."""
        headers = {"Accept": "application/json"}
        token = self._storage.get_auth_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _send(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Any = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self._session.request(
                method,
                url,
                headers=self._get_headers(),
                params={k: v for k, v in (params or {}).items() if v is not None},
                json=json,
                timeout=self._timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            if status == 404:
                raise ResourceNotFoundError(f"{method} {url} -> 404", status, url) from e
            raise DataSourceError(f"{method} {url} -> {status}", status, url) from e
        except requests.RequestException as e:
            raise DataSourceError(f"{method} {url} failed: {e}", None, url) from e

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            # Proxies and maintenance pages answer 2xx with HTML
            raise DataSourceError(
                f"{method} {url} returned invalid JSON", response.status_code, url
            ) from e

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Any = None,
    ) -> Any:
        logger.debug(f"{method} {path} params={params}")
        return await asyncio.to_thread(self._send, method, path, params, json)

    # Nutrition

    async def nutrition_log_entries(self, day: str) -> List[Dict[str, Any]]:
        return await self._request("GET", f"/nutrition/log/{_segment(day)}")

    async def create_nutrition_log_entry(self, entry: Dict[str, Any]) -> None:
        await self._request("POST", "/nutrition/log", json=entry)

    async def delete_nutrition_log_entry(self, entry_id: str) -> None:
        await self._request("DELETE", f"/nutrition/log/{_segment(entry_id)}")

    async def nutrition_trends(self, start_date: str, end_date: str) -> Dict[str, Any]:
        return await self._request(
            "GET",
            "/nutrition/trends",
            params={"startDate": start_date, "endDate": end_date},
        )

    async def active_nutrition_plan(self) -> Optional[Dict[str, Any]]:
        try:
            return await self._request("GET", "/nutrition/plans/active")
        except ResourceNotFoundError:
            # No active plan is a normal state, not a failure
            return None

    async def nutrition_plan(self, plan_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/nutrition/plans/{_segment(plan_id)}")

    async def nutrition_training_recommendations(
        self, plan_id: Optional[str] = None
    ) -> Dict[str, Any]:
        return await self._request(
            "GET", "/nutrition/recommendations", params={"planId": plan_id}
        )

    # Training & Strava

    async def upcoming_training_sessions(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/training/sessions/upcoming")

    async def strava_connection_status(self) -> Dict[str, bool]:
        return await self._request("GET", "/integrations/strava/status")

    async def strava_auth_url(self) -> str:
        data = await self._request("GET", "/integrations/strava/auth-url")
        return data["authUrl"]

    async def strava_activities(self) -> Dict[str, Any]:
        return await self._request("GET", "/integrations/strava/activities")

    # AI assistant

    async def ai_suggestions(self, language: Language) -> List[str]:
        return await self._request("GET", "/ai/suggestions", params={"language": language})

    async def ai_chat(self, request: ChatRequest) -> Dict[str, Any]:
        return await self._request("POST", "/ai/chat", json=request.model_dump())

    async def chat_history(self, user_id: str) -> List[Dict[str, Any]]:
        return await self._request("GET", f"/ai/chat/history/{_segment(user_id)}") or []

    async def save_chat_history(self, user_id: str, history: List[Dict[str, Any]]) -> None:
        await self._request(
            "PUT", f"/ai/chat/history/{_segment(user_id)}", json={"history": history}
        )

    async def clear_chat_history(self, user_id: str) -> None:
        await self._request("DELETE", f"/ai/chat/history/{_segment(user_id)}")
