"""Async client for the remote collection service (Supabase REST)."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

import httpx

from kivo_admin.config import Settings
from kivo_admin.mapping import model_for

logger = logging.getLogger(__name__)


class RemoteServiceError(RuntimeError):
    """Raised when the collection service cannot be reached or rejects a call."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class RemoteCollectionService:
    """Select-all and update-by-id calls against the products/orders/sellers tables."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/rest/v1",
            timeout=timeout,
            transport=transport,
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
            },
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> RemoteCollectionService:
        return cls(
            settings.supabase_url,
            settings.supabase_anon_key,
            timeout=settings.request_timeout,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""

        await self._client.aclose()

    async def _request(
        self,
        method: str,
        collection: str,
        *,
        params: Mapping[str, str],
        json_body: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        model_for(collection)  # rejects unknown table names
        try:
            response = await self._client.request(
                method,
                f"/{collection}",
                params=params,
                json=json_body,
                headers=headers,
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise RemoteServiceError(f"Timed out calling {method} {collection}") from exc
        except httpx.HTTPStatusError as exc:
            raise RemoteServiceError(
                f"{method} {collection} returned {exc.response.status_code}: {exc.response.text}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise RemoteServiceError(f"{method} {collection} failed: {exc}") from exc
        return response

    async def select_all(self, collection: str) -> list[dict[str, Any]]:
        response = await self._request("GET", collection, params={"select": "*"})
        try:
            rows = response.json()
        except ValueError as exc:
            raise RemoteServiceError(f"{collection} response is not JSON") from exc
        if not isinstance(rows, list):
            raise RemoteServiceError(f"{collection} response is not a list of rows")
        return rows

    async def update_by_id(
        self,
        collection: str,
        record_id: str,
        fields: Mapping[str, Any],
    ) -> None:
        await self._request(
            "PATCH",
            collection,
            params={"id": f"eq.{record_id}"},
            json_body=fields,
            headers={"Prefer": "return=minimal"},
        )

    async def update_by_ids(
        self,
        collection: str,
        record_ids: Iterable[str],
        fields: Mapping[str, Any],
    ) -> None:
        ids = list(record_ids)
        if not ids:
            return
        await self._request(
            "PATCH",
            collection,
            params={"id": f"in.({','.join(ids)})"},
            json_body=fields,
            headers={"Prefer": "return=minimal"},
        )
        logger.debug("Updated %d %s rows", len(ids), collection)
