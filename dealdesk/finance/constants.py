"""
Constants for deal scoring and risk classification.

Defines score brackets, risk thresholds and industry keyword sets.
"""

from typing import Dict, Tuple

# ============================================================================
# Deal Score
# ============================================================================
# Fixed-weight additive heuristic. Brackets within a group are mutually
# exclusive: only the highest qualifying one applies.

THRESHOLDS: Dict[str, float] = {
    "BASE_SCORE": 50,
    "MIN_SCORE": 0,
    "MAX_SCORE": 100,

    # EBITDA margin brackets (percent, strict >)
    "MARGIN_STRONG": 20.0,
    "MARGIN_STRONG_BONUS": 25,
    "MARGIN_HEALTHY": 10.0,
    "MARGIN_HEALTHY_BONUS": 15,
    "MARGIN_POSITIVE": 0.0,
    "MARGIN_POSITIVE_BONUS": 8,

    # P/E brackets (strict <)
    "PE_ATTRACTIVE": 25.0,
    "PE_ATTRACTIVE_BONUS": 10,
    "PE_FAIR": 35.0,
    "PE_FAIR_BONUS": 5,

    # Positive daily price change
    "PRICE_TREND_BONUS": 10,

    # Overview text longer than this earns a research-quality bonus
    "OVERVIEW_MIN_LENGTH": 100,
    "OVERVIEW_BONUS": 5,
}

# ============================================================================
# Risk Classification
# ============================================================================

RISK_CATEGORIES: Tuple[str, ...] = (
    "cashflow",
    "customer",
    "revenue",
    "consumability",
    "seasonality",
    "recession",
)

RISK_THRESHOLDS: Dict[str, float] = {
    "CASHFLOW_LOW_MARGIN": 15.0,     # margin above -> low risk
    "CASHFLOW_MEDIUM_MARGIN": 5.0,   # margin above -> medium risk
}

# Industry keywords, matched against the lower-cased industry text
RECURRING_REVENUE_KEYWORDS: Tuple[str, ...] = ("software", "saas")
SEASONAL_KEYWORDS: Tuple[str, ...] = ("retail", "consumer")
GROWTH_SENSITIVE_KEYWORDS: Tuple[str, ...] = ("technology", "software")

RISK_LEVEL_ORDER: Dict[str, int] = {"low": 0, "medium": 1, "high": 2}

RISK_CSS_CLASSES: Dict[str, str] = {
    "low": "risk-low",
    "medium": "risk-medium",
    "high": "risk-high",
}

RISK_ICONS: Dict[str, str] = {
    "low": "✅",
    "medium": "⚠️",
    "high": "❌",
}
