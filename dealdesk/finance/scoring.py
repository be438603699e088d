"""
Deal score calculation.

An approximation heuristic, not a financial model: a baseline of 50 plus
fixed bonuses for margin, valuation, price trend and research depth,
clamped to 0-100. Thresholds live in constants.THRESHOLDS.
"""

from typing import Optional

from .constants import THRESHOLDS
from .types import FinancialRecord
from ..llm.schemas import CompanyProfile


def ebitda_margin_bonus(margin: Optional[float]) -> int:
    """
    Bonus for EBITDA margin (percent).

    Rules (highest qualifying bracket only):
    - > 20%: +25
    - > 10%: +15
    - > 0%:  +8
    - otherwise or unknown: 0
    """
    if margin is None:
        return 0
    if margin > THRESHOLDS["MARGIN_STRONG"]:
        return THRESHOLDS["MARGIN_STRONG_BONUS"]
    if margin > THRESHOLDS["MARGIN_HEALTHY"]:
        return THRESHOLDS["MARGIN_HEALTHY_BONUS"]
    if margin > THRESHOLDS["MARGIN_POSITIVE"]:
        return THRESHOLDS["MARGIN_POSITIVE_BONUS"]
    return 0


def pe_ratio_bonus(pe_ratio: Optional[float]) -> int:
    """
    Bonus for P/E ratio.

    Rules:
    - < 25: +10
    - < 35: +5
    - >= 35 or unknown: 0
    """
    if pe_ratio is None:
        return 0
    if pe_ratio < THRESHOLDS["PE_ATTRACTIVE"]:
        return THRESHOLDS["PE_ATTRACTIVE_BONUS"]
    if pe_ratio < THRESHOLDS["PE_FAIR"]:
        return THRESHOLDS["PE_FAIR_BONUS"]
    return 0


def price_trend_bonus(change: Optional[float]) -> int:
    """+10 when the daily price change is positive."""
    if change is not None and change > 0:
        return THRESHOLDS["PRICE_TREND_BONUS"]
    return 0


def overview_bonus(overview: Optional[str]) -> int:
    """+5 when the AI overview is longer than 100 characters."""
    if overview and len(overview) > THRESHOLDS["OVERVIEW_MIN_LENGTH"]:
        return THRESHOLDS["OVERVIEW_BONUS"]
    return 0


def calculate_deal_score(
    profile: CompanyProfile,
    financial: Optional[FinancialRecord] = None
) -> int:
    """
    Calculate the deal score (0-100).

    Formula:
        score = 50
              + ebitda_margin_bonus   (financial only)
              + pe_ratio_bonus        (financial only)
              + price_trend_bonus     (financial only)
              + overview_bonus

    Missing data is not an error: absent metrics contribute nothing.

    Args:
        profile: Company profile from the AI lookup
        financial: Normalized financial record, if the company is public
            and the fetch succeeded

    Returns:
        Integer score clamped to [0, 100]
    """
    score = THRESHOLDS["BASE_SCORE"]

    if financial is not None:
        score += ebitda_margin_bonus(financial.ebitda_margin_value)
        score += pe_ratio_bonus(financial.pe_ratio_value)
        score += price_trend_bonus(financial.change_value)

    score += overview_bonus(profile.overview)

    return int(max(THRESHOLDS["MIN_SCORE"], min(THRESHOLDS["MAX_SCORE"], score)))
