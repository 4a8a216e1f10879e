"""Store gateway backed by the Supabase PostgREST API."""

import logging
import time
from collections.abc import Sequence
from typing import Any

import httpx

from restaurant_menu_service.observability.metrics import (
    record_store_query,
    record_store_query_failure,
)
from restaurant_menu_service.repositories.store_gateway import Filter, Order, StoreGateway
from restaurant_menu_service.services.errors import UpstreamQueryError

logger = logging.getLogger(__name__)

# Characters that force quoting of a value inside an in.(...) list
_RESERVED_LIST_CHARS = set(',()"\\ ')


def _literal(value: Any) -> str:
    """Render a scalar filter value."""
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return "null"
    return str(value)


def _list_item(value: Any) -> str:
    """Render one member of an in.(...) list."""
    text = _literal(value)
    if any(char in _RESERVED_LIST_CHARS for char in text):
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return text


def encode_filter(query_filter: Filter) -> tuple[str, str]:
    """Encode a Filter as a PostgREST query parameter.

    Args:
        query_filter: Filter to encode

    Returns:
        tuple: (parameter name, parameter value)
    """
    if query_filter.operator == "in":
        members = ",".join(_list_item(v) for v in query_filter.value)
        return query_filter.column, f"in.({members})"

    if query_filter.operator == "ilike":
        return query_filter.column, f"ilike.{str(query_filter.value).replace('%', '*')}"

    return query_filter.column, f"{query_filter.operator}.{_literal(query_filter.value)}"


def encode_order(order: Sequence[Order]) -> list[tuple[str, str]]:
    """Encode ordering clauses, one parameter per (embedded) table."""
    grouped: dict[str, list[str]] = {}
    for clause in order:
        key = f"{clause.foreign_table}.order" if clause.foreign_table else "order"
        direction = "asc" if clause.ascending else "desc"
        grouped.setdefault(key, []).append(f"{clause.column}.{direction}")

    return [(key, ",".join(parts)) for key, parts in grouped.items()]


def _compact_columns(columns: str) -> str:
    """Strip whitespace from a multi-line select expression."""
    return "".join(columns.split())


class PostgrestGateway(StoreGateway):
    """HTTP gateway to a Supabase project's REST endpoint.

    A single httpx.AsyncClient is created lazily and shared by every request
    handled by the process; call ``close`` on shutdown.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout_seconds: float = 10.0,
    ) -> None:
        """Initialize the gateway.

        Args:
            base_url: Supabase project URL (e.g. "https://xyz.supabase.co")
            api_key: Supabase API key sent as apikey and bearer token
            timeout_seconds: Timeout applied to every store call
        """
        self.base_url = base_url.rstrip("/")
        self.rest_url = f"{self.base_url}/rest/v1"
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout_seconds))
        return self._client

    def _headers(self, prefer: str | None = None) -> dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def _request(
        self,
        method: str,
        table: str,
        params: list[tuple[str, str]],
        json: Any = None,
        prefer: str | None = None,
    ) -> list[dict[str, Any]]:
        """Send one request to the REST endpoint and decode the row list.

        Raises:
            UpstreamQueryError: On HTTP error status, transport failure or a non-JSON body
        """
        url = f"{self.rest_url}/{table}"
        started = time.perf_counter()

        try:
            response = await self._get_client().request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(prefer),
            )
            response.raise_for_status()
            data = response.json() if response.content else []

        except httpx.HTTPStatusError as e:
            logger.error(f"Store {method} on {table} failed: {e}")
            record_store_query_failure(table, method, type(e).__name__)
            raise UpstreamQueryError(
                f"Store query on {table} failed with status {e.response.status_code}"
            ) from e

        except httpx.RequestError as e:
            logger.error(f"Store {method} on {table} could not be sent: {e}")
            record_store_query_failure(table, method, type(e).__name__)
            raise UpstreamQueryError(f"Store query on {table} failed: {e}") from e

        except ValueError as e:
            logger.error(f"Store {method} on {table} returned a malformed body: {e}")
            record_store_query_failure(table, method, type(e).__name__)
            raise UpstreamQueryError(f"Store query on {table} returned invalid JSON") from e

        finally:
            record_store_query(table, method, time.perf_counter() - started)

        if isinstance(data, list):
            return data
        return [data] if data else []

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order: Sequence[Order] = (),
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        params = [("select", _compact_columns(columns))]
        params.extend(encode_filter(f) for f in filters)
        params.extend(encode_order(order))
        if limit is not None:
            params.append(("limit", str(limit)))

        return await self._request("GET", table, params)

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        rows = await self._request(
            "POST", table, [], json=[row], prefer="return=representation"
        )
        if not rows:
            raise UpstreamQueryError(f"Store insert on {table} returned no row")
        return rows[0]

    async def update(
        self, table: str, values: dict[str, Any], filters: Sequence[Filter]
    ) -> list[dict[str, Any]]:
        params = [encode_filter(f) for f in filters]
        return await self._request(
            "PATCH", table, params, json=values, prefer="return=representation"
        )

    async def delete(self, table: str, filters: Sequence[Filter]) -> list[dict[str, Any]]:
        params = [encode_filter(f) for f in filters]
        return await self._request("DELETE", table, params, prefer="return=representation")

    async def close(self) -> None:
        """Close the shared HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
