"""
Tests for the Alpha Vantage client.

HTTP is served by httpx.MockTransport; no network access.
"""

import asyncio

import httpx
import pytest

from dealdesk.config import Settings
from dealdesk.integrations.alpha_vantage import AlphaVantageClient
from dealdesk.storage.cache import TTLCache, cache_key_for_symbol
from dealdesk.utils.errors import ConfigurationError, ProviderError, ResponseParseError


class FakeClock:
    def __init__(self, now=1_700_000_000_000):
        self.now = now

    def __call__(self):
        return self.now


def make_transport(overview, quote, calls=None, status_code=200):
    """Route by the 'function' query parameter."""
    def handler(request):
        function = request.url.params["function"]
        if calls is not None:
            calls.append(function)
        body = overview if function == "OVERVIEW" else quote
        return httpx.Response(status_code, json=body)
    return httpx.MockTransport(handler)


def fetch(client, symbol="MSFT"):
    return asyncio.run(client.fetch_financial_data(symbol))


class TestFetchFinancialData:

    def test_normalized_record(self, settings, sample_overview, sample_quote):
        client = AlphaVantageClient(settings, transport=make_transport(sample_overview, sample_quote))
        record = fetch(client)

        assert record.price == "410.50"
        assert record.change == "1.25"
        assert record.change_percent == "0.31"
        assert record.financials.revenue == "245.1B"
        assert record.financials.ebitda == "129.4B"
        assert record.financials.ebitda_margin == "35.9%"
        assert record.financials.gross_margin == "69.8%"
        assert record.stock_info.high_52_week == "468.35"
        assert record.stock_info.avg_volume == "7.4B"
        assert record.stock_info.market_cap == "3050.0B"
        assert record.stock_info.pe_ratio == "35.2"

    def test_request_parameters(self, settings, sample_overview, sample_quote):
        seen = []

        def handler(request):
            seen.append(request)
            body = sample_overview if request.url.params["function"] == "OVERVIEW" else sample_quote
            return httpx.Response(200, json=body)

        client = AlphaVantageClient(settings, transport=httpx.MockTransport(handler))
        fetch(client)

        assert sorted(r.url.params["function"] for r in seen) == ["GLOBAL_QUOTE", "OVERVIEW"]
        for request in seen:
            assert request.url.host == "av.test"
            assert request.url.params["symbol"] == "MSFT"
            assert request.url.params["apikey"] == "test-av-key"

    def test_requests_run_concurrently(self, settings, sample_overview, sample_quote):
        state = {"in_flight": 0, "peak": 0}

        async def handler(request):
            state["in_flight"] += 1
            state["peak"] = max(state["peak"], state["in_flight"])
            # Hold the request open so a sequential fetch never overlaps
            await asyncio.sleep(0.05)
            state["in_flight"] -= 1
            body = sample_overview if request.url.params["function"] == "OVERVIEW" else sample_quote
            return httpx.Response(200, json=body)

        client = AlphaVantageClient(settings, transport=httpx.MockTransport(handler))
        record = fetch(client)

        assert record.price == "410.50"
        assert state["peak"] == 2

    def test_result_is_cached(self, settings, memory_store, sample_overview, sample_quote):
        calls = []
        cache = TTLCache(memory_store, clock=FakeClock())
        client = AlphaVantageClient(
            settings, cache=cache, transport=make_transport(sample_overview, sample_quote, calls)
        )

        first = fetch(client)
        second = fetch(client)

        assert first == second
        assert len(calls) == 2
        assert cache_key_for_symbol("MSFT") in memory_store.keys()

    def test_expired_cache_refetches(self, settings, memory_store, sample_overview, sample_quote):
        calls = []
        clock = FakeClock()
        client = AlphaVantageClient(
            settings,
            cache=TTLCache(memory_store, clock=clock),
            transport=make_transport(sample_overview, sample_quote, calls),
        )

        fetch(client)
        clock.now += settings.cache_duration_ms + 1
        fetch(client)

        assert len(calls) == 4

    def test_invalid_symbol(self, settings, sample_quote):
        overview = {"Error Message": "Invalid API call."}
        client = AlphaVantageClient(settings, transport=make_transport(overview, sample_quote))

        with pytest.raises(ProviderError, match="Invalid symbol or request"):
            fetch(client, "NOPE")

    def test_rate_limit_note(self, settings, sample_overview):
        quote = {"Note": "Thank you for using Alpha Vantage! Our standard API call frequency is 5 calls per minute."}
        client = AlphaVantageClient(settings, transport=make_transport(sample_overview, quote))

        with pytest.raises(ProviderError, match="API limit reached"):
            fetch(client)

    def test_rate_limit_information(self, settings, sample_quote):
        overview = {"Information": "Our standard API rate limit is 25 requests per day."}
        client = AlphaVantageClient(settings, transport=make_transport(overview, sample_quote))

        with pytest.raises(ProviderError, match="API limit reached"):
            fetch(client)

    def test_missing_global_quote(self, settings, sample_overview):
        client = AlphaVantageClient(settings, transport=make_transport(sample_overview, {}))

        with pytest.raises(ResponseParseError):
            fetch(client)

    def test_http_error_status(self, settings, sample_overview, sample_quote):
        client = AlphaVantageClient(
            settings, transport=make_transport(sample_overview, sample_quote, status_code=500)
        )

        with pytest.raises(ProviderError) as exc_info:
            fetch(client)
        assert exc_info.value.status_code == 500
        assert "500" in str(exc_info.value)

    def test_network_failure_wrapped(self, settings):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = AlphaVantageClient(settings, transport=httpx.MockTransport(handler))

        with pytest.raises(ProviderError, match="request failed"):
            fetch(client)

    def test_non_json_body(self, settings):
        def handler(request):
            return httpx.Response(200, text="<html>maintenance</html>")

        client = AlphaVantageClient(settings, transport=httpx.MockTransport(handler))

        with pytest.raises(ResponseParseError):
            fetch(client)

    def test_failure_is_not_cached(self, settings, memory_store, sample_quote):
        overview = {"Note": "rate limited"}
        client = AlphaVantageClient(
            settings,
            cache=TTLCache(memory_store),
            transport=make_transport(overview, sample_quote),
        )

        with pytest.raises(ProviderError):
            fetch(client)
        assert len(memory_store) == 0

    def test_missing_key(self, sample_overview, sample_quote):
        calls = []
        client = AlphaVantageClient(
            Settings(alpha_vantage_api_key="YOUR_ALPHA_VANTAGE_KEY_HERE"),
            transport=make_transport(sample_overview, sample_quote, calls),
        )

        with pytest.raises(ConfigurationError):
            fetch(client)
        assert calls == []
