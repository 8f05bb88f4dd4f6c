# src/store/supabase_store.py — v1
"""Supabase data store over the PostgREST HTTP API (httpx).

Endpoints used:
    POST /rest/v1/rpc/decrement_quota      atomic read-and-decrement
    GET  /rest/v1/processing_quota         current quota row
    POST /rest/v1/processing_history       history append

Requests carry the project ``apikey`` plus a bearer token: the signed-in
user's access token when available, otherwise the project key.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from accessibilityhub.core.errors import TransportFailure
from accessibilityhub.core.models import HistoryRecord, Quota, QuotaType
from accessibilityhub.store.base_data_store import BaseDataStore

logger = logging.getLogger(__name__)


class SupabaseDataStore(BaseDataStore):
    """PostgREST-backed quota and history store."""

    def __init__(
        self,
        url: str,
        api_key: str,
        access_token: str | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base = url.rstrip("/") + "/rest/v1"
        self._api_key = api_key
        self._access_token = access_token
        self._timeout = timeout
        self.__client = client

    @property
    def _client(self) -> httpx.AsyncClient:
        if self.__client is None:
            self.__client = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
        return self.__client

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._access_token or self._api_key}",
        }

    async def decrement_quota(self, user_id: str, quota_type: QuotaType, amount: int = 1) -> bool:
        payload = {"user_id": user_id, "quota_type": quota_type, "amount": amount}
        response = await self._request("POST", "/rpc/decrement_quota", json=payload)
        if not response.content:
            logger.warning("decrement_quota returned no body; treating as denied")
            return False
        return _reservation_granted(response.json())

    async def fetch_quota(self, user_id: str) -> Quota | None:
        response = await self._request(
            "GET",
            "/processing_quota",
            params={"user_id": f"eq.{user_id}", "select": "*"},
        )
        rows = response.json()
        if not rows:
            return None
        row: dict[str, Any] = rows[0]
        return Quota(
            user_id=user_id,
            audio_minutes=row.get("audio_minutes") or 0,
            image_count=row.get("image_count") or 0,
            pdf_pages=row.get("pdf_pages") or 0,
        )

    async def record_history(self, record: HistoryRecord) -> None:
        await self._request(
            "POST",
            "/processing_history",
            json=record.model_dump(),
            headers={"Prefer": "return=minimal"},
        )

    async def close(self) -> None:
        if self.__client is not None:
            await self.__client.aclose()
            self.__client = None

    async def _request(
        self,
        method: str,
        path: str,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            response = await self._client.request(
                method,
                f"{self._base}{path}",
                headers={**self._headers(), **(headers or {})},
                **kwargs,
            )
        except httpx.HTTPError as e:
            raise TransportFailure(f"Data store request failed: {e}") from e
        if response.is_error:
            logger.error("Data store %s %s returned HTTP %d", method, path, response.status_code)
            raise TransportFailure(
                f"Data store request failed: HTTP {response.status_code} {response.reason_phrase}"
            )
        return response


def _reservation_granted(result: Any) -> bool:
    """Only an explicit ``true`` or a non-negative remaining count grants."""
    if isinstance(result, bool):
        return result
    if isinstance(result, (int, float)):
        return result >= 0
    return False
