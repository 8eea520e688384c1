"""Tests for the HTTP relay."""

from __future__ import annotations

from collections.abc import Callable

from fastapi.testclient import TestClient
import httpx
import pytest

from screener_dashboard.config import RELAY_PATH
from screener_dashboard.fetcher import DirectStrategy, DocumentRetriever, FetcherConfig
from screener_dashboard.server import create_app, default_retriever

Handler = Callable[[httpx.Request], httpx.Response]


def _client(handler: Handler) -> TestClient:
    def factory() -> DocumentRetriever:
        return DocumentRetriever(
            strategies=[DirectStrategy()],
            config=FetcherConfig(attempts_per_strategy=1, max_total_attempts=1),
            marker=None,
            transport=httpx.MockTransport(handler),
        )

    return TestClient(create_app(factory))


class TestRelay:
    """Tests for the market page relay endpoint."""

    def test_passes_markup_through(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="<table><tr><td>Industry</td></tr></table>")

        response = _client(handler).get(RELAY_PATH)

        assert response.status_code == 200
        assert response.text == "<table><tr><td>Industry</td></tr></table>"
        assert response.headers["content-type"].startswith("text/html")
        assert response.headers["cache-control"] == "no-store"
        assert str(seen[0].url) == "https://www.screener.in/market/"
        assert "Mozilla" in seen[0].headers["User-Agent"]

    def test_body_not_checked_for_marker(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>maintenance</html>")

        response = _client(handler).get(RELAY_PATH)

        assert response.status_code == 200
        assert response.text == "<html>maintenance</html>"

    @pytest.mark.parametrize("status", [403, 404, 503])
    def test_upstream_status_passed_through(self, status: int) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status, text="nope")

        response = _client(handler).get(RELAY_PATH)

        assert response.status_code == status
        assert response.json() == {"error": "Failed to fetch"}

    def test_transport_failure_is_500(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        response = _client(handler).get(RELAY_PATH)

        assert response.status_code == 500
        assert response.json() == {"error": "Error fetching data"}

    def test_single_upstream_request(self) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            raise httpx.ConnectError("unreachable", request=request)

        _client(handler).get(RELAY_PATH)

        assert calls == 1


class TestApp:
    """Tests for application wiring."""

    def test_healthz(self) -> None:
        response = TestClient(create_app()).get("/healthz")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_default_retriever_is_single_direct_request(self) -> None:
        retriever = default_retriever()
        assert [strategy.name for strategy in retriever.strategies] == ["direct"]
