"""
Deal Scoring Module

Turns company profiles and Alpha Vantage data into decision inputs:
- FinancialRecord: Canonical display-ready financial snapshot
- normalize_financial_data: Raw provider payloads -> FinancialRecord
- calculate_deal_score: Heuristic 0-100 deal score
- classify_risks: Six pre-LOI risk ratings
"""

from .types import (
    FinancialRecord,
    Financials,
    StockInfo,
    RiskAssessment,
    PipelineEntry,
    IndustrySummary,
    NOT_AVAILABLE,
)
from .constants import THRESHOLDS, RISK_CATEGORIES
from .normalizer import format_magnitude, normalize_financial_data, check_provider_errors
from .scoring import calculate_deal_score
from .risk import classify_risks, overall_risk_level, risk_css_class, risk_icon

__all__ = [
    # Types
    "FinancialRecord",
    "Financials",
    "StockInfo",
    "RiskAssessment",
    "PipelineEntry",
    "IndustrySummary",
    "NOT_AVAILABLE",
    # Constants
    "THRESHOLDS",
    "RISK_CATEGORIES",
    # Normalizer
    "format_magnitude",
    "normalize_financial_data",
    "check_provider_errors",
    # Scoring
    "calculate_deal_score",
    "classify_risks",
    "overall_risk_level",
    "risk_css_class",
    "risk_icon",
]
