"""
Alpha Vantage Integration for Financial Data

Features:
- Fetch company OVERVIEW and GLOBAL_QUOTE concurrently for a ticker
- Detect error / rate-limit payloads before any parsing
- Normalize both records into a FinancialRecord
- TTL cache (default 1 hour) to stay under the free-tier rate limit
"""

import asyncio
from typing import Any, Dict, Optional

import httpx

from ..config import Settings
from ..finance.normalizer import normalize_financial_data
from ..finance.types import FinancialRecord
from ..storage.cache import TTLCache, cache_key_for_symbol
from ..utils.errors import ProviderError, ResponseParseError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class AlphaVantageClient:
    """
    Async client for the Alpha Vantage query API.

    The overview and quote requests are issued together and both must
    succeed; a failure in either aborts the fetch and nothing is cached.
    """

    def __init__(
        self,
        settings: Settings,
        cache: Optional[TTLCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None
    ):
        """
        Initialize the client.

        Args:
            settings: Application settings (API key, base URL, cache TTL)
            cache: TTLCache for normalized records (no caching if None)
            transport: Custom httpx transport (used by tests)
            timeout: Per-request timeout in seconds (None = no timeout)
        """
        self.settings = settings
        self.cache = cache
        self.base_url = settings.alpha_vantage_base_url
        self.cache_ttl = settings.cache_duration_ms
        self._transport = transport
        self._timeout = timeout

        logger.debug(f"AlphaVantageClient initialized (cache TTL: {self.cache_ttl}ms)")

    async def _query(self, client: httpx.AsyncClient, function: str, symbol: str, api_key: str) -> Dict[str, Any]:
        params = {"function": function, "symbol": symbol, "apikey": api_key}
        response = await client.get(self.base_url, params=params)

        if not response.is_success:
            raise ProviderError(
                f"Alpha Vantage error: {response.status_code} {response.reason_phrase}",
                provider="alpha_vantage",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ResponseParseError(f"Alpha Vantage {function} response is not JSON") from e

    async def fetch_financial_data(self, symbol: str) -> FinancialRecord:
        """
        Fetch and normalize financial data for a ticker.

        Args:
            symbol: Stock ticker (e.g., 'MSFT')

        Returns:
            FinancialRecord (from cache when a fresh entry exists)

        Raises:
            ConfigurationError: ALPHA_VANTAGE_API_KEY missing or placeholder
            ProviderError: HTTP failure, invalid symbol or rate limit
            ResponseParseError: Unexpected response body
        """
        api_key = self.settings.require_alpha_vantage_key()

        cache_key = cache_key_for_symbol(symbol)
        if self.cache is not None:
            cached = self.cache.get(cache_key)
            if cached is not None:
                try:
                    record = FinancialRecord.from_dict(cached)
                    logger.info(f"Using cached financial data for {symbol}")
                    return record
                except (AttributeError, TypeError) as e:
                    logger.debug(f"Cached record for {symbol} unusable, refetching: {e}")

        logger.info(f"Fetching {symbol} from Alpha Vantage...")
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                overview, quote = await asyncio.gather(
                    self._query(client, "OVERVIEW", symbol, api_key),
                    self._query(client, "GLOBAL_QUOTE", symbol, api_key),
                )
            record = normalize_financial_data(overview, quote)
        except httpx.HTTPError as e:
            logger.error(f"Financial data fetch failed for {symbol}: {e}")
            raise ProviderError(f"Alpha Vantage request failed: {e}", provider="alpha_vantage") from e
        except (ProviderError, ResponseParseError) as e:
            logger.error(f"Financial data fetch failed for {symbol}: {e}")
            raise

        if self.cache is not None:
            self.cache.set(cache_key, record.to_dict(), self.cache_ttl)

        logger.info(f"✓ Fetched financial data for {symbol}: ${record.price} (margin {record.financials.ebitda_margin})")
        return record
