"""
Pre-LOI risk classification.

Six independent, deterministic ratings (low / medium / high) derived from
the company profile and, when available, its financial record.
"""

from typing import Dict, Mapping, Optional

from .constants import (
    GROWTH_SENSITIVE_KEYWORDS,
    RECURRING_REVENUE_KEYWORDS,
    RISK_CATEGORIES,
    RISK_CSS_CLASSES,
    RISK_ICONS,
    RISK_LEVEL_ORDER,
    RISK_THRESHOLDS,
    SEASONAL_KEYWORDS,
)
from .types import FinancialRecord, RiskAssessment
from ..llm.schemas import CompanyProfile


def _industry_mentions(profile: CompanyProfile, keywords) -> bool:
    industry = (profile.industry or "").lower()
    return any(keyword in industry for keyword in keywords)


def assess_cashflow(profile: CompanyProfile, financial: Optional[FinancialRecord]) -> RiskAssessment:
    if financial is None:
        return RiskAssessment("medium", "Financial data not available for analysis")

    margin_text = financial.financials.ebitda_margin
    margin = financial.ebitda_margin_value

    # An unparseable margin falls through to high, as a non-positive one does
    if margin is not None and margin > RISK_THRESHOLDS["CASHFLOW_LOW_MARGIN"]:
        return RiskAssessment("low", f"Strong EBITDA margin of {margin_text}")
    if margin is not None and margin > RISK_THRESHOLDS["CASHFLOW_MEDIUM_MARGIN"]:
        return RiskAssessment("medium", f"Moderate EBITDA margin of {margin_text}")
    return RiskAssessment("high", f"Low EBITDA margin of {margin_text}")


def assess_customer(profile: CompanyProfile, financial: Optional[FinancialRecord]) -> RiskAssessment:
    # No customer-level revenue data is available from either provider
    return RiskAssessment(
        "medium",
        "Customer concentration analysis requires detailed revenue breakdown data",
    )


def assess_revenue(profile: CompanyProfile, financial: Optional[FinancialRecord]) -> RiskAssessment:
    if profile.is_public and financial is not None:
        return RiskAssessment("low", "Public companies typically have established revenue models")
    return RiskAssessment("medium", "Revenue model assessment requires additional data")


def assess_consumability(profile: CompanyProfile, financial: Optional[FinancialRecord]) -> RiskAssessment:
    if _industry_mentions(profile, RECURRING_REVENUE_KEYWORDS):
        return RiskAssessment("low", "Software/SaaS models typically have high repeat usage")
    return RiskAssessment("medium", "Consumability varies by industry and business model")


def assess_seasonality(profile: CompanyProfile, financial: Optional[FinancialRecord]) -> RiskAssessment:
    if _industry_mentions(profile, SEASONAL_KEYWORDS):
        return RiskAssessment("medium", "Consumer-facing businesses often have seasonal patterns")
    return RiskAssessment("low", "Limited seasonal exposure based on industry")


def assess_recession(profile: CompanyProfile, financial: Optional[FinancialRecord]) -> RiskAssessment:
    # FIXME: both branches rate "medium"; only the reason differs. Likely
    # meant to separate resilient from cyclical industries.
    if _industry_mentions(profile, GROWTH_SENSITIVE_KEYWORDS):
        return RiskAssessment("medium", "Technology companies can be growth-sensitive but often resilient")
    return RiskAssessment("medium", "Recession resistance depends on specific business model")


_ASSESSORS = {
    "cashflow": assess_cashflow,
    "customer": assess_customer,
    "revenue": assess_revenue,
    "consumability": assess_consumability,
    "seasonality": assess_seasonality,
    "recession": assess_recession,
}


def classify_risks(
    profile: CompanyProfile,
    financial: Optional[FinancialRecord] = None
) -> Dict[str, RiskAssessment]:
    """
    Rate all six risk categories.

    Args:
        profile: Company profile from the AI lookup
        financial: Normalized financial record, if available

    Returns:
        Dict category -> RiskAssessment, in RISK_CATEGORIES order
    """
    return {category: _ASSESSORS[category](profile, financial) for category in RISK_CATEGORIES}


def overall_risk_level(risks: Mapping[str, RiskAssessment]) -> str:
    """Worst level present across categories ('low' if none)."""
    if not risks:
        return "low"
    return max((r.level for r in risks.values()), key=lambda level: RISK_LEVEL_ORDER.get(level, 1))


def risk_css_class(level: str) -> str:
    return RISK_CSS_CLASSES.get(level, RISK_CSS_CLASSES["medium"])


def risk_icon(level: str) -> str:
    return RISK_ICONS.get(level, RISK_ICONS["medium"])
