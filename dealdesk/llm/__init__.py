"""LLM-based company research"""

from .company_research import CompanyResearcher, extract_json_block, fallback_profile
from .documents import Document, DocumentContext
from .schemas import CompanyProfile

__all__ = [
    'CompanyResearcher',
    'extract_json_block',
    'fallback_profile',
    'Document',
    'DocumentContext',
    'CompanyProfile',
]
