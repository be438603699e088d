"""
Financial data types for DealDesk.

FinancialRecord is the canonical, display-ready shape produced by the
normalizer. Every metric is a formatted string or the "N/A" sentinel; the
numeric views used by scoring parse those strings back on demand.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Literal, Optional

NOT_AVAILABLE = "N/A"

RiskLevel = Literal["low", "medium", "high"]


def parse_metric(value: Any) -> Optional[float]:
    """
    Parse a display metric ("25.0%", "1,234.5", "18.3") into a float.

    Returns None for the "N/A" sentinel, blanks and anything non-numeric.
    Magnitude-suffixed values ("1.2B") are not numeric here.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().rstrip("%").replace(",", "")
        if not text or text == NOT_AVAILABLE:
            return None
        try:
            number = float(text)
        except ValueError:
            return None

    if number != number or number in (float("inf"), float("-inf")):
        return None
    return number


@dataclass(frozen=True)
class Financials:
    """Income-statement metrics (formatted)."""
    revenue: str = NOT_AVAILABLE
    ebitda: str = NOT_AVAILABLE
    ebitda_margin: str = NOT_AVAILABLE
    gross_profit: str = NOT_AVAILABLE
    gross_margin: str = NOT_AVAILABLE

    def to_dict(self) -> Dict[str, str]:
        return {
            "revenue": self.revenue,
            "ebitda": self.ebitda,
            "ebitdaMargin": self.ebitda_margin,
            "grossProfit": self.gross_profit,
            "grossMargin": self.gross_margin,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Financials":
        return cls(
            revenue=str(data.get("revenue", NOT_AVAILABLE)),
            ebitda=str(data.get("ebitda", NOT_AVAILABLE)),
            ebitda_margin=str(data.get("ebitdaMargin", NOT_AVAILABLE)),
            gross_profit=str(data.get("grossProfit", NOT_AVAILABLE)),
            gross_margin=str(data.get("grossMargin", NOT_AVAILABLE)),
        )


@dataclass(frozen=True)
class StockInfo:
    """Market metrics (formatted)."""
    high_52_week: str = NOT_AVAILABLE
    low_52_week: str = NOT_AVAILABLE
    avg_volume: str = NOT_AVAILABLE
    market_cap: str = NOT_AVAILABLE
    pe_ratio: str = NOT_AVAILABLE

    def to_dict(self) -> Dict[str, str]:
        return {
            "high52Week": self.high_52_week,
            "low52Week": self.low_52_week,
            "avgVolume": self.avg_volume,
            "marketCap": self.market_cap,
            "peRatio": self.pe_ratio,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StockInfo":
        return cls(
            high_52_week=str(data.get("high52Week", NOT_AVAILABLE)),
            low_52_week=str(data.get("low52Week", NOT_AVAILABLE)),
            avg_volume=str(data.get("avgVolume", NOT_AVAILABLE)),
            market_cap=str(data.get("marketCap", NOT_AVAILABLE)),
            pe_ratio=str(data.get("peRatio", NOT_AVAILABLE)),
        )


@dataclass(frozen=True)
class FinancialRecord:
    """
    Canonical financial snapshot for one ticker.

    Built once per fetch by `normalize_financial_data` and never mutated.

    Attributes:
        price: Last traded price, two decimals
        change: Daily absolute change, two decimals
        change_percent: Daily change in percent, two decimals (no % sign)
        financials: Revenue/EBITDA/margins
        stock_info: 52-week range, volume, market cap, P/E
    """
    price: str = NOT_AVAILABLE
    change: str = NOT_AVAILABLE
    change_percent: str = NOT_AVAILABLE
    financials: Financials = field(default_factory=Financials)
    stock_info: StockInfo = field(default_factory=StockInfo)

    @property
    def ebitda_margin_value(self) -> Optional[float]:
        """EBITDA margin in percent (25.0 for "25.0%")."""
        return parse_metric(self.financials.ebitda_margin)

    @property
    def pe_ratio_value(self) -> Optional[float]:
        return parse_metric(self.stock_info.pe_ratio)

    @property
    def change_value(self) -> Optional[float]:
        return parse_metric(self.change)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization (cache format)."""
        return {
            "price": self.price,
            "change": self.change,
            "changePercent": self.change_percent,
            "financials": self.financials.to_dict(),
            "stockInfo": self.stock_info.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FinancialRecord":
        return cls(
            price=str(data.get("price", NOT_AVAILABLE)),
            change=str(data.get("change", NOT_AVAILABLE)),
            change_percent=str(data.get("changePercent", NOT_AVAILABLE)),
            financials=Financials.from_dict(data.get("financials") or {}),
            stock_info=StockInfo.from_dict(data.get("stockInfo") or {}),
        )


@dataclass(frozen=True)
class RiskAssessment:
    """Rating for one risk category, with a human-readable justification."""
    level: RiskLevel
    reason: str

    def to_dict(self) -> Dict[str, str]:
        return {"level": self.level, "reason": self.reason}


@dataclass(frozen=True)
class PipelineEntry:
    """
    One analyzed company in the deal pipeline.

    Attributes:
        name: Company name
        symbol: Ticker, or "PRIVATE" for private companies
        deal_score: Heuristic score 0-100
        date: Analysis date (M/D/YYYY)
        industry: Primary industry
    """
    name: str
    symbol: str
    deal_score: int
    date: str
    industry: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "symbol": self.symbol,
            "dealScore": self.deal_score,
            "date": self.date,
            "industry": self.industry,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PipelineEntry":
        return cls(
            name=str(data["name"]),
            symbol=str(data["symbol"]),
            deal_score=int(data["dealScore"]),
            date=str(data.get("date", "")),
            industry=str(data.get("industry") or "Technology"),
        )


@dataclass(frozen=True)
class IndustrySummary:
    """Aggregate of pipeline entries sharing an industry."""
    industry: str
    count: int
    avg_score: int
    companies: List[PipelineEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "industry": self.industry,
            "count": self.count,
            "avgScore": self.avg_score,
            "companies": [c.to_dict() for c in self.companies],
        }


def format_analysis_date(day: date) -> str:
    """Format a date as M/D/YYYY (no zero padding)."""
    return f"{day.month}/{day.day}/{day.year}"
