"""
Research orchestration.

One research run: AI company lookup -> financial data (public companies
only) -> deal score + risk assessment -> pipeline upsert.

All state (pipeline, cache, documents) is passed in explicitly so runs are
isolated and testable.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Optional, Tuple

from .config import Settings
from .finance.risk import classify_risks, overall_risk_level
from .finance.scoring import calculate_deal_score
from .finance.types import FinancialRecord, PipelineEntry, RiskAssessment
from .integrations.alpha_vantage import AlphaVantageClient
from .llm.company_research import CompanyResearcher
from .llm.documents import DocumentContext
from .llm.schemas import CompanyProfile
from .storage.cache import TTLCache
from .storage.kv_store import JsonFileStore, KeyValueStore
from .storage.pipeline_store import PipelineStore, make_pipeline_entry
from .utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CompanyAnalysis:
    """
    Result of one research run, ready for a presentation layer.

    Attributes:
        profile: AI company profile (possibly degraded)
        financial: Normalized financial record, None for private companies
            or when the fetch failed
        deal_score: Heuristic score 0-100
        risks: Six risk assessments keyed by category
        pipeline_entry: Record stored in the pipeline
        financial_error: Why financial data is missing, if a fetch failed
    """
    profile: CompanyProfile
    financial: Optional[FinancialRecord]
    deal_score: int
    risks: Dict[str, RiskAssessment] = field(default_factory=dict)
    pipeline_entry: Optional[PipelineEntry] = None
    financial_error: Optional[str] = None

    @property
    def has_financials(self) -> bool:
        return self.financial is not None and self.profile.is_public

    @property
    def overall_risk(self) -> str:
        return overall_risk_level(self.risks)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "profile": self.profile.to_dict(),
            "financial": self.financial.to_dict() if self.financial else None,
            "dealScore": self.deal_score,
            "risks": {k: v.to_dict() for k, v in self.risks.items()},
            "overallRisk": self.overall_risk,
            "pipelineEntry": self.pipeline_entry.to_dict() if self.pipeline_entry else None,
            "financialError": self.financial_error,
        }


def analyze_company(
    profile: CompanyProfile,
    financial: Optional[FinancialRecord] = None
) -> Dict[str, Any]:
    """Score and classify a profile without touching any store."""
    return {
        "deal_score": calculate_deal_score(profile, financial),
        "risks": classify_risks(profile, financial),
    }


class ResearchService:
    """
    Runs company research end to end.

    Usage:
        service = ResearchService.from_settings(load_settings())
        analysis = await service.search_company("Microsoft")
    """

    def __init__(
        self,
        researcher: CompanyResearcher,
        financial_client: AlphaVantageClient,
        pipeline: PipelineStore
    ):
        self.researcher = researcher
        self.financial_client = financial_client
        self.pipeline = pipeline

    @classmethod
    def from_settings(cls, settings: Settings, store: Optional[KeyValueStore] = None) -> "ResearchService":
        """
        Wire the service from settings.

        Args:
            settings: Application settings
            store: Storage backend shared by cache and pipeline
                (JsonFileStore at settings.storage_path if None)
        """
        store = store if store is not None else JsonFileStore(settings.storage_path)
        return cls(
            researcher=CompanyResearcher(settings),
            financial_client=AlphaVantageClient(settings, cache=TTLCache(store)),
            pipeline=PipelineStore(store),
        )

    async def _fetch_financials(
        self,
        profile: CompanyProfile
    ) -> Tuple[Optional[FinancialRecord], Optional[str]]:
        if not (profile.symbol and profile.is_public):
            return None, None

        try:
            return await self.financial_client.fetch_financial_data(profile.symbol), None
        except Exception as e:
            # Financial data is optional: score with what we have
            logger.warning(f"Financial data unavailable for {profile.symbol}: {e}")
            return None, str(e)

    async def _complete(self, profile: CompanyProfile, today: Optional[date]) -> CompanyAnalysis:
        financial, financial_error = await self._fetch_financials(profile)

        result = analyze_company(profile, financial)
        entry = make_pipeline_entry(profile, result["deal_score"], today=today)
        self.pipeline.upsert(entry)

        return CompanyAnalysis(
            profile=profile,
            financial=financial,
            deal_score=result["deal_score"],
            risks=result["risks"],
            pipeline_entry=entry,
            financial_error=financial_error,
        )

    async def search_company(
        self,
        query: str,
        documents: Optional[DocumentContext] = None,
        today: Optional[date] = None
    ) -> CompanyAnalysis:
        """
        Research a company by name or ticker.

        With an empty query and attached documents, the company is
        identified from the documents instead.

        Raises:
            ValueError: Neither a query nor documents were given
        """
        query = (query or "").strip()
        if not query:
            if documents:
                return await self.analyze_documents(documents, today=today)
            raise ValueError("Please enter a company name or attach documents")

        logger.info(f"Searching for: {query}")
        profile = await self.researcher.research(query, documents)
        return await self._complete(profile, today)

    async def analyze_documents(
        self,
        documents: DocumentContext,
        today: Optional[date] = None
    ) -> CompanyAnalysis:
        """Research the company described by the attached documents."""
        logger.info(f"Analyzing documents: {', '.join(documents.names)}")
        profile = await self.researcher.research_documents(documents)
        return await self._complete(profile, today)
