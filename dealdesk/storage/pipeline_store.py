"""
Deal pipeline persistence.

The pipeline is the running list of analyzed companies, one entry per
symbol, stored as a JSON array under a fixed key. It is loaded once on
construction and saved after every mutation.
"""

import json
from collections import OrderedDict
from datetime import date
from typing import Dict, List, Optional

from .kv_store import KeyValueStore
from ..finance.types import IndustrySummary, PipelineEntry, format_analysis_date
from ..llm.schemas import CompanyProfile
from ..utils.logger import get_logger

logger = get_logger(__name__)

PIPELINE_STORAGE_KEY = "dealPipeline"
PRIVATE_SYMBOL = "PRIVATE"
DEFAULT_INDUSTRY = "Technology"

# Industry comparison needs at least this many companies
MIN_COMPARISON_ENTRIES = 2


def make_pipeline_entry(
    profile: CompanyProfile,
    deal_score: int,
    today: Optional[date] = None
) -> PipelineEntry:
    """
    Build the pipeline record for a scored company.

    Private companies (no symbol) are stored under 'PRIVATE'; a blank
    industry falls back to 'Technology'.
    """
    return PipelineEntry(
        name=profile.name,
        symbol=profile.symbol or PRIVATE_SYMBOL,
        deal_score=deal_score,
        date=format_analysis_date(today or date.today()),
        industry=profile.industry or DEFAULT_INDUSTRY,
    )


def _round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


class PipelineStore:
    """
    Ordered, symbol-keyed list of PipelineEntry.

    Args:
        store: Backing KeyValueStore
        storage_key: Key holding the serialized pipeline
    """

    def __init__(self, store: KeyValueStore, storage_key: str = PIPELINE_STORAGE_KEY):
        self.store = store
        self.storage_key = storage_key
        self._entries: List[PipelineEntry] = self._load()
        logger.info(f"Pipeline contains {len(self._entries)} companies")

    def _load(self) -> List[PipelineEntry]:
        raw = self.store.get_item(self.storage_key)
        if not raw:
            return []

        try:
            items = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Stored pipeline unreadable, starting empty: {e}")
            return []

        if not isinstance(items, list):
            logger.warning("Stored pipeline is not a list, starting empty")
            return []

        entries: List[PipelineEntry] = []
        for item in items:
            try:
                entries.append(PipelineEntry.from_dict(item))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed pipeline entry {item!r}: {e}")
        return entries

    def _save(self) -> None:
        self.store.set_item(self.storage_key, json.dumps([e.to_dict() for e in self._entries]))

    def upsert(self, entry: PipelineEntry) -> None:
        """Replace the entry with the same symbol in place, or append."""
        for index, existing in enumerate(self._entries):
            if existing.symbol == entry.symbol:
                self._entries[index] = entry
                break
        else:
            self._entries.append(entry)

        self._save()
        logger.info(f"Added to pipeline: {entry.name} ({entry.symbol}) score={entry.deal_score}")

    def list(self) -> List[PipelineEntry]:
        return list(self._entries)

    def get(self, symbol: str) -> Optional[PipelineEntry]:
        for entry in self._entries:
            if entry.symbol == symbol:
                return entry
        return None

    def __len__(self) -> int:
        return len(self._entries)

    def group_by_industry(self) -> Dict[str, List[PipelineEntry]]:
        """Entries grouped by industry, in first-seen order."""
        groups: Dict[str, List[PipelineEntry]] = OrderedDict()
        for entry in self._entries:
            groups.setdefault(entry.industry or DEFAULT_INDUSTRY, []).append(entry)
        return groups

    def industry_comparison(self) -> Optional[Dict[str, IndustrySummary]]:
        """
        Per-industry company count and average deal score.

        Returns:
            Dict industry -> IndustrySummary, or None when the pipeline has
            fewer than 2 companies (insufficient data for a comparison)
        """
        if len(self._entries) < MIN_COMPARISON_ENTRIES:
            return None

        summaries: Dict[str, IndustrySummary] = OrderedDict()
        for industry, companies in self.group_by_industry().items():
            avg = sum(c.deal_score for c in companies) / len(companies)
            summaries[industry] = IndustrySummary(
                industry=industry,
                count=len(companies),
                avg_score=_round_half_up(avg),
                companies=companies,
            )
        return summaries
