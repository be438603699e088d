"""
Pytest configuration and shared fixtures.

Loaded automatically by pytest; fixtures are available to every test
without importing them.
"""

import pytest

from dealdesk.config import Settings
from dealdesk.finance.types import FinancialRecord, Financials, StockInfo
from dealdesk.llm.schemas import CompanyProfile
from dealdesk.storage.kv_store import InMemoryStore


# ============================================================================
# SETTINGS
# ============================================================================

@pytest.fixture
def settings():
    """Settings with both API keys configured."""
    return Settings(
        gemini_api_key="test-gemini-key",
        alpha_vantage_api_key="test-av-key",
        alpha_vantage_base_url="https://av.test/query",
        cache_duration_ms=3_600_000,
    )


@pytest.fixture
def memory_store():
    return InMemoryStore()


# ============================================================================
# TEST DATA
# ============================================================================

LONG_OVERVIEW = (
    "Microsoft Corporation develops, licenses and supports software, services, "
    "devices and solutions worldwide, including Azure cloud and Office 365."
)


@pytest.fixture
def public_profile():
    """Public software company with a long overview."""
    return CompanyProfile(
        name="Microsoft Corporation",
        symbol="MSFT",
        industry="Software",
        is_public=True,
        overview=LONG_OVERVIEW,
        history="Founded in 1975 by Bill Gates and Paul Allen.",
        products="Windows, Office, Azure, Xbox",
    )


@pytest.fixture
def private_profile():
    """Private company with a short overview."""
    return CompanyProfile(
        name="Acme Widgets",
        symbol=None,
        industry="Industrial Manufacturing",
        is_public=False,
        overview="Makes widgets.",
    )


def make_record(margin="25.0%", pe="18.5", change="1.25", price="410.50"):
    """FinancialRecord with the fields scoring looks at."""
    return FinancialRecord(
        price=price,
        change=change,
        change_percent="0.31",
        financials=Financials(
            revenue="245.1B",
            ebitda="129.4B",
            ebitda_margin=margin,
            gross_profit="171.0B",
            gross_margin="69.8%",
        ),
        stock_info=StockInfo(
            high_52_week="468.35",
            low_52_week="344.79",
            avg_volume="7.4B",
            market_cap="3050.0B",
            pe_ratio=pe,
        ),
    )


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def sample_overview():
    """Raw Alpha Vantage OVERVIEW payload."""
    return {
        "Symbol": "MSFT",
        "Name": "Microsoft Corporation",
        "RevenueTTM": "245122000000",
        "EBITDA": "129433000000",
        "ProfitMargin": "0.359",
        "GrossProfitTTM": "171008000000",
        "52WeekHigh": "468.35",
        "52WeekLow": "344.79",
        "SharesOutstanding": "7433038000",
        "MarketCapitalization": "3050000000000",
        "PERatio": "35.21",
    }


@pytest.fixture
def sample_quote():
    """Raw Alpha Vantage GLOBAL_QUOTE payload."""
    return {
        "Global Quote": {
            "01. symbol": "MSFT",
            "05. price": "410.5000",
            "09. change": "1.2500",
            "10. change percent": "0.3054%",
        }
    }


# ============================================================================
# MARKERS
# ============================================================================

def pytest_configure(config):
    """
    Register custom markers:
    - pytest -m unit          # Unit tests only
    - pytest -m "not slow"    # Skip slow tests
    - pytest -m integration   # Tests hitting real APIs
    """
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, isolated)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (real external APIs)"
    )
    config.addinivalue_line(
        "markers", "slow: Slow tests (can be skipped with -m 'not slow')"
    )
