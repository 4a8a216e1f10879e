"""Unit tests for the PostgREST store gateway."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from restaurant_menu_service.repositories.postgrest_gateway import (
    PostgrestGateway,
    encode_filter,
    encode_order,
)
from restaurant_menu_service.repositories.store_gateway import Filter, Order, eq, ilike, in_
from restaurant_menu_service.services.errors import UpstreamQueryError


def _response(rows: object, status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.content = b"[]" if rows is not None else b""
    response.json.return_value = rows
    return response


@pytest.mark.unit
class TestEncoding:
    """Tests for filter and order encoding."""

    def test_eq_booleans_and_null(self) -> None:
        """Test scalar literal rendering."""
        assert encode_filter(eq("is_active", True)) == ("is_active", "eq.true")
        assert encode_filter(eq("is_active", False)) == ("is_active", "eq.false")
        assert encode_filter(Filter("location", "is", None)) == ("location", "is.null")
        assert encode_filter(eq("option_id", 7)) == ("option_id", "eq.7")

    def test_in_quotes_reserved_characters(self) -> None:
        """Test that list members containing separators are quoted."""
        assert encode_filter(in_("value_id", [1, 2, 3])) == ("value_id", "in.(1,2,3)")
        assert encode_filter(in_("name", ["a,b", 'say "hi"'])) == (
            "name",
            'in.("a,b","say \\"hi\\"")',
        )

    def test_ilike_wildcards(self) -> None:
        """Test that % wildcards become PostgREST * wildcards."""
        assert encode_filter(ilike("name", "%protein%")) == ("name", "ilike.*protein*")

    def test_order_grouped_per_table(self) -> None:
        """Test one order parameter per root or embedded table."""
        order = [
            Order("restaurant_id"),
            Order("menu_id", foreign_table="menu"),
            Order("menu_name", ascending=False, foreign_table="menu"),
        ]

        assert encode_order(order) == [
            ("order", "restaurant_id.asc"),
            ("menu.order", "menu_id.asc,menu_name.desc"),
        ]


@pytest.mark.unit
class TestPostgrestGateway:
    """Test suite for PostgrestGateway."""

    @pytest.fixture
    def gateway(self) -> PostgrestGateway:
        """Create a gateway with test configuration."""
        return PostgrestGateway(base_url="https://proj.supabase.co/", api_key="test-key")

    def test_initialization(self, gateway: PostgrestGateway) -> None:
        """Test that the REST URL is derived from the project URL."""
        assert gateway.rest_url == "https://proj.supabase.co/rest/v1"
        assert gateway.timeout_seconds == 10.0

    @pytest.mark.asyncio
    async def test_select_builds_query(self, gateway: PostgrestGateway) -> None:
        """Test select parameters and authentication headers."""
        mock_request = AsyncMock(return_value=_response([{"menu_id": "menu_1"}]))

        with patch("httpx.AsyncClient.request", mock_request):
            rows = await gateway.select(
                "menu",
                "menu_id,\n    menu_name",
                filters=[eq("restaurant_id", "rest_1")],
                order=[Order("menu_id")],
                limit=1,
            )

        assert rows == [{"menu_id": "menu_1"}]
        method, url = mock_request.call_args.args
        kwargs = mock_request.call_args.kwargs
        assert method == "GET"
        assert url == "https://proj.supabase.co/rest/v1/menu"
        assert kwargs["params"] == [
            ("select", "menu_id,menu_name"),
            ("restaurant_id", "eq.rest_1"),
            ("order", "menu_id.asc"),
            ("limit", "1"),
        ]
        assert kwargs["headers"]["apikey"] == "test-key"
        assert kwargs["headers"]["Authorization"] == "Bearer test-key"
        assert "Prefer" not in kwargs["headers"]

    @pytest.mark.asyncio
    async def test_select_empty_body(self, gateway: PostgrestGateway) -> None:
        """Test that an empty response body is an empty row list."""
        with patch("httpx.AsyncClient.request", new_callable=AsyncMock, return_value=_response(None)):
            rows = await gateway.select("menu")

        assert rows == []

    @pytest.mark.asyncio
    async def test_status_error_raises_upstream_error(self, gateway: PostgrestGateway) -> None:
        """Test that error statuses raise UpstreamQueryError."""
        mock_response = _response([], status_code=400)
        mock_response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "Bad request", request=MagicMock(), response=mock_response
        )

        with patch("httpx.AsyncClient.request", new_callable=AsyncMock, return_value=mock_response):
            with pytest.raises(UpstreamQueryError, match="status 400"):
                await gateway.select("menu_item")

    @pytest.mark.asyncio
    async def test_network_error_raises_upstream_error(self, gateway: PostgrestGateway) -> None:
        """Test that transport failures raise UpstreamQueryError."""
        with patch(
            "httpx.AsyncClient.request",
            new_callable=AsyncMock,
            side_effect=httpx.RequestError("Connection failed", request=MagicMock()),
        ):
            with pytest.raises(UpstreamQueryError) as exc_info:
                await gateway.select("menu_item")

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_non_json_body_raises_upstream_error(self, gateway: PostgrestGateway) -> None:
        """Test that an undecodable success body raises UpstreamQueryError."""
        mock_response = _response([])
        mock_response.content = b"<html>gateway timeout</html>"
        mock_response.json.side_effect = ValueError("Expecting value")

        with patch("httpx.AsyncClient.request", new_callable=AsyncMock, return_value=mock_response):
            with pytest.raises(UpstreamQueryError, match="invalid JSON"):
                await gateway.select("menu_item")

    @pytest.mark.asyncio
    async def test_insert_returns_stored_row(self, gateway: PostgrestGateway) -> None:
        """Test that insert posts one row and asks for the representation."""
        mock_request = AsyncMock(return_value=_response([{"restaurant_id": "rest_1"}]))

        with patch("httpx.AsyncClient.request", mock_request):
            row = await gateway.insert("restaurant", {"restaurant_id": "rest_1"})

        assert row == {"restaurant_id": "rest_1"}
        assert mock_request.call_args.args[0] == "POST"
        assert mock_request.call_args.kwargs["json"] == [{"restaurant_id": "rest_1"}]
        assert mock_request.call_args.kwargs["headers"]["Prefer"] == "return=representation"

    @pytest.mark.asyncio
    async def test_insert_without_returned_row(self, gateway: PostgrestGateway) -> None:
        """Test that an insert returning nothing is an error."""
        with patch("httpx.AsyncClient.request", new_callable=AsyncMock, return_value=_response([])):
            with pytest.raises(UpstreamQueryError):
                await gateway.insert("restaurant", {"restaurant_id": "rest_1"})

    @pytest.mark.asyncio
    async def test_update_and_delete_use_filters(self, gateway: PostgrestGateway) -> None:
        """Test PATCH and DELETE requests."""
        mock_request = AsyncMock(return_value=_response([{"menu_item_id": "item_1"}]))

        with patch("httpx.AsyncClient.request", mock_request):
            updated = await gateway.update(
                "menu_item", {"is_active": False}, [eq("menu_item_id", "item_1")]
            )
            deleted = await gateway.delete("menu_item", [eq("menu_item_id", "item_1")])

        assert updated == deleted == [{"menu_item_id": "item_1"}]
        patch_call, delete_call = mock_request.call_args_list
        assert patch_call.args[0] == "PATCH"
        assert patch_call.kwargs["json"] == {"is_active": False}
        assert patch_call.kwargs["params"] == [("menu_item_id", "eq.item_1")]
        assert delete_call.args[0] == "DELETE"

    @pytest.mark.asyncio
    async def test_close_releases_client(self, gateway: PostgrestGateway) -> None:
        """Test that close drops the shared client."""
        gateway._get_client()

        with patch("httpx.AsyncClient.aclose", new_callable=AsyncMock) as mock_close:
            await gateway.close()

        mock_close.assert_called_once()
        assert gateway._client is None
