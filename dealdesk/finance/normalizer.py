"""
Normalizer for Alpha Vantage payloads.

Maps the raw OVERVIEW and GLOBAL_QUOTE records onto a FinancialRecord.
Provider error indicators are checked first; nothing partial is built.
"""

from typing import Any, Dict, Optional

from .types import FinancialRecord, Financials, StockInfo, NOT_AVAILABLE
from ..utils.errors import ProviderError, ResponseParseError

# Fields whose presence means the provider refused the request
ERROR_FIELDS = ("Error Message", "Note", "Information")

# Placeholder values Alpha Vantage uses for missing data
MISSING_VALUES = ("", "None", "-", "N/A")


def to_number(value: Any) -> Optional[float]:
    """
    Parse a raw provider value into a float.

    Returns None for missing, placeholder ("None", "-") and non-numeric
    values. A trailing percent sign is ignored.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if text in MISSING_VALUES:
            return None
        try:
            number = float(text.rstrip("%").strip())
        except ValueError:
            return None

    # NaN and infinities are not usable metrics
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return number


def _format_plain(value: float) -> str:
    """en-US grouped number with up to three fraction digits."""
    text = f"{value:,.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def format_magnitude(value: Any) -> str:
    """
    Render a magnitude for display.

    Examples:
        1.5e9    -> '1.5B'
        2.345e6  -> '2.3M'
        1234.5   -> '1,234.5'
        'None'   -> 'N/A'
    """
    number = to_number(value)
    if number is None:
        return NOT_AVAILABLE
    if number >= 1e9:
        return f"{number / 1e9:.1f}B"
    if number >= 1e6:
        return f"{number / 1e6:.1f}M"
    return _format_plain(number)


def format_decimal(value: Any, places: int = 2) -> str:
    number = to_number(value)
    if number is None:
        return NOT_AVAILABLE
    return f"{number:.{places}f}"


def format_percentage(ratio: Optional[float]) -> str:
    """Render a 0-1 ratio as a one-decimal percentage ('0.253' -> '25.3%')."""
    if ratio is None:
        return NOT_AVAILABLE
    return f"{ratio * 100:.1f}%"


def gross_margin(gross_profit: Any, revenue: Any) -> str:
    profit = to_number(gross_profit)
    total = to_number(revenue)
    if profit is None or not total:
        return NOT_AVAILABLE
    return format_percentage(profit / total)


def check_provider_errors(payload: Any, source: str = "alpha_vantage") -> None:
    """
    Raise ProviderError if the payload is an error or rate-limit notice.

    Args:
        payload: Decoded JSON body
        source: Provider label for the error
    """
    if not isinstance(payload, dict):
        raise ResponseParseError(f"Expected a JSON object from {source}, got {type(payload).__name__}")

    for key in ERROR_FIELDS:
        if payload.get(key):
            if key == "Error Message":
                message = f"Invalid symbol or request: {payload[key]}"
            else:
                message = f"API limit reached: {payload[key]}"
            raise ProviderError(message, provider=source)


def normalize_financial_data(overview: Dict[str, Any], quote_payload: Dict[str, Any]) -> FinancialRecord:
    """
    Build a FinancialRecord from raw Alpha Vantage responses.

    Args:
        overview: OVERVIEW response body
        quote_payload: GLOBAL_QUOTE response body (with the 'Global Quote' wrapper)

    Returns:
        FinancialRecord

    Raises:
        ProviderError: Either payload carries an error or rate-limit field
        ResponseParseError: The quote payload has no 'Global Quote' object
    """
    check_provider_errors(overview)
    check_provider_errors(quote_payload)

    quote = quote_payload.get("Global Quote")
    if not isinstance(quote, dict):
        raise ResponseParseError("Quote response missing 'Global Quote' data")

    financials = Financials(
        revenue=format_magnitude(overview.get("RevenueTTM")),
        ebitda=format_magnitude(overview.get("EBITDA")),
        ebitda_margin=format_percentage(to_number(overview.get("ProfitMargin"))),
        gross_profit=format_magnitude(overview.get("GrossProfitTTM")),
        gross_margin=gross_margin(overview.get("GrossProfitTTM"), overview.get("RevenueTTM")),
    )

    stock_info = StockInfo(
        high_52_week=format_decimal(overview.get("52WeekHigh")),
        low_52_week=format_decimal(overview.get("52WeekLow")),
        # Sourced from SharesOutstanding; OVERVIEW carries no volume field
        avg_volume=format_magnitude(overview.get("SharesOutstanding")),
        market_cap=format_magnitude(overview.get("MarketCapitalization")),
        pe_ratio=format_decimal(overview.get("PERatio"), places=1),
    )

    return FinancialRecord(
        price=format_decimal(quote.get("05. price")),
        change=format_decimal(quote.get("09. change")),
        change_percent=format_decimal(quote.get("10. change percent")),
        financials=financials,
        stock_info=stock_info,
    )
