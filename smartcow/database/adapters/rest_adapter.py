# ==============================================================================
# REST ADAPTER - Hosted PostgREST Backend over httpx
# ==============================================================================
# Table operations against <url>/rest/v1/<table> using the anonymous key
# One shared AsyncClient per adapter; no retries
# ==============================================================================

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from smartcow.core.exceptions import RemoteStoreError
from smartcow.core.settings import RemoteConfig
from smartcow.database.adapters.base_adapter import BaseRemoteAdapter, Row

logger = logging.getLogger(__name__)


def _filter_value(value: Any) -> str:
    """Encode an equality filter in PostgREST operator syntax."""
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


class RestRemoteAdapter(BaseRemoteAdapter):
    """
    Remote adapter for a hosted PostgREST-style API.

    Requests carry the anonymous key both as ``apikey`` and as a bearer
    token. Writes ask for ``return=representation`` so the stored row is
    echoed back.

    Attributes:
        _config: Remote connection parameters
        _client: Shared httpx client (created on connect)
        _transport: Optional transport override

    Example:
        >>> adapter = RestRemoteAdapter(RemoteConfig(url="https://x.supabase.co", anon_key="k"))
        >>> await adapter.connect()
        >>> await adapter.select("orders", {"buyer_id": "buyer:bob"}, order_by="created_at")
    """

    def __init__(
        self,
        config: RemoteConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def backend_name(self) -> str:
        return "rest"

    # ==========================================================================
    # LIFECYCLE METHODS
    # ==========================================================================

    async def connect(self) -> None:
        if self._client is not None:
            return
        headers = {
            "apikey": self._config.anon_key,
            "Authorization": f"Bearer {self._config.anon_key}",
            "Content-Type": "application/json",
        }
        self._client = httpx.AsyncClient(
            base_url=self._config.url.rstrip("/") + "/rest/v1",
            headers=headers,
            timeout=httpx.Timeout(self._config.timeout),
            transport=self._transport,
        )
        logger.info(f"REST remote adapter ready: {self._config.url[:30]}...")

    async def disconnect(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("REST remote adapter closed")

    async def health_check(self) -> bool:
        try:
            response = await self._request("GET", "/", operation="health")
            return response.status_code < 500
        except RemoteStoreError as e:
            logger.warning(f"REST health check failed: {e.message}")
            return False

    # ==========================================================================
    # REQUEST HELPER
    # ==========================================================================

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        params: Optional[Dict[str, str]] = None,
        json_body: Any = None,
        prefer: Optional[str] = None,
    ) -> httpx.Response:
        """
        Send one request and turn every failure into ``RemoteStoreError``.

        Raises:
            RemoteStoreError: On transport errors and 4xx/5xx answers
        """
        if self._client is None:
            raise RemoteStoreError("REST adapter not connected", operation=operation)

        headers = {"Prefer": prefer} if prefer else None
        try:
            response = await self._client.request(
                method,
                path,
                params=params,
                json=json_body,
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise RemoteStoreError(
                f"Request to remote store failed: {e}",
                operation=operation,
            )

        if response.status_code >= 400:
            raise RemoteStoreError(
                f"Remote store answered {response.status_code}",
                operation=operation,
                details={"status_code": response.status_code, "body": response.text[:500]},
            )
        return response

    @staticmethod
    def _rows(response: httpx.Response, operation: str) -> List[Row]:
        if not response.content:
            return []
        try:
            payload = response.json()
        except ValueError as e:
            raise RemoteStoreError(f"Unparseable remote response: {e}", operation=operation)
        if isinstance(payload, dict):
            return [payload]
        if not isinstance(payload, list):
            raise RemoteStoreError("Unexpected remote payload", operation=operation)
        return payload

    @staticmethod
    def _filters(filters: Optional[Dict[str, Any]]) -> Dict[str, str]:
        return {column: _filter_value(value) for column, value in (filters or {}).items()}

    # ==========================================================================
    # TABLE OPERATIONS
    # ==========================================================================

    async def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Row]:
        operation = f"select {table}"
        params = {"select": "*", **self._filters(filters)}
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"
        if limit is not None:
            params["limit"] = str(limit)
        response = await self._request("GET", f"/{table}", operation, params=params)
        return self._rows(response, operation)

    async def insert(self, table: str, row: Row) -> Row:
        operation = f"insert {table}"
        response = await self._request(
            "POST",
            f"/{table}",
            operation,
            json_body=row,
            prefer="return=representation",
        )
        rows = self._rows(response, operation)
        if not rows:
            raise RemoteStoreError("Insert returned no row", operation=operation)
        return rows[0]

    async def update(
        self,
        table: str,
        filters: Dict[str, Any],
        values: Row,
    ) -> List[Row]:
        operation = f"update {table}"
        response = await self._request(
            "PATCH",
            f"/{table}",
            operation,
            params=self._filters(filters),
            json_body=values,
            prefer="return=representation",
        )
        return self._rows(response, operation)

    async def delete(self, table: str, filters: Dict[str, Any]) -> int:
        operation = f"delete {table}"
        response = await self._request(
            "DELETE",
            f"/{table}",
            operation,
            params=self._filters(filters),
            prefer="return=representation",
        )
        return len(self._rows(response, operation))

    async def upsert(
        self,
        table: str,
        row: Row,
        conflict_columns: Sequence[str] = ("id",),
    ) -> Row:
        operation = f"upsert {table}"
        response = await self._request(
            "POST",
            f"/{table}",
            operation,
            params={"on_conflict": ",".join(conflict_columns)},
            json_body=row,
            prefer="resolution=merge-duplicates,return=representation",
        )
        rows = self._rows(response, operation)
        if not rows:
            raise RemoteStoreError("Upsert returned no row", operation=operation)
        return rows[0]
