"""
Runtime configuration for DealDesk.

Values come from environment variables; a `.env` file at the project root is
loaded first so local keys never have to be exported by hand.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv

from .utils.errors import ConfigurationError

env_path = Path(__file__).parent.parent / '.env'

# Cache and document limits
DEFAULT_CACHE_DURATION_MS = 3_600_000  # 1 hour
DEFAULT_MAX_UPLOADED_FILES = 2
DEFAULT_MAX_DOCUMENT_LENGTH = 10_000  # characters sent to the LLM

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_ALPHA_VANTAGE_BASE_URL = "https://www.alphavantage.co/query"
DEFAULT_STORAGE_PATH = "data/dealdesk_storage.json"


def _is_configured(value: Optional[str]) -> bool:
    """A key counts as configured when it is set and not a template placeholder."""
    if not value or not value.strip():
        return False
    normalized = value.strip().upper()
    return not (normalized.startswith("YOUR_") or normalized.endswith("_HERE"))


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


@dataclass
class Settings:
    """
    Application settings.

    Attributes:
        gemini_api_key: Google Gemini API key
        alpha_vantage_api_key: Alpha Vantage API key
        gemini_model: Gemini model used for company research
        alpha_vantage_base_url: Alpha Vantage query endpoint
        cache_duration_ms: TTL for cached financial data (milliseconds)
        max_uploaded_files: Maximum number of documents per research run
        max_document_length: Characters of each document included in prompts
        storage_path: JSON file backing the cache and the pipeline
        log_level: Logging level name
    """
    gemini_api_key: Optional[str] = None
    alpha_vantage_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    alpha_vantage_base_url: str = DEFAULT_ALPHA_VANTAGE_BASE_URL
    cache_duration_ms: int = DEFAULT_CACHE_DURATION_MS
    max_uploaded_files: int = DEFAULT_MAX_UPLOADED_FILES
    max_document_length: int = DEFAULT_MAX_DOCUMENT_LENGTH
    storage_path: str = DEFAULT_STORAGE_PATH
    log_level: str = "INFO"

    def api_key_status(self) -> Dict[str, bool]:
        """Report which provider credentials are usable."""
        alpha_vantage = _is_configured(self.alpha_vantage_api_key)
        gemini = _is_configured(self.gemini_api_key)
        return {
            'alpha_vantage': alpha_vantage,
            'gemini': gemini,
            'both': alpha_vantage and gemini,
        }

    def require_gemini_key(self) -> str:
        if not _is_configured(self.gemini_api_key):
            raise ConfigurationError(
                "GEMINI_API_KEY not configured. Add it to your .env file to enable AI analysis"
            )
        return self.gemini_api_key

    def require_alpha_vantage_key(self) -> str:
        if not _is_configured(self.alpha_vantage_api_key):
            raise ConfigurationError("ALPHA_VANTAGE_API_KEY not configured")
        return self.alpha_vantage_api_key


def load_settings(dotenv_path: Optional[Path] = None) -> Settings:
    """
    Build Settings from the environment.

    Args:
        dotenv_path: Optional .env file to load (defaults to project root)

    Returns:
        Settings instance
    """
    load_dotenv(dotenv_path or env_path)

    return Settings(
        gemini_api_key=os.getenv('GEMINI_API_KEY'),
        alpha_vantage_api_key=os.getenv('ALPHA_VANTAGE_API_KEY'),
        gemini_model=os.getenv('GEMINI_MODEL', DEFAULT_GEMINI_MODEL),
        alpha_vantage_base_url=os.getenv('ALPHA_VANTAGE_BASE_URL', DEFAULT_ALPHA_VANTAGE_BASE_URL),
        cache_duration_ms=_int_env('CACHE_DURATION_MS', DEFAULT_CACHE_DURATION_MS),
        max_uploaded_files=_int_env('MAX_UPLOADED_FILES', DEFAULT_MAX_UPLOADED_FILES),
        max_document_length=_int_env('MAX_DOCUMENT_LENGTH', DEFAULT_MAX_DOCUMENT_LENGTH),
        storage_path=os.getenv('DEALDESK_STORAGE_PATH', DEFAULT_STORAGE_PATH),
        log_level=os.getenv('LOG_LEVEL', 'INFO'),
    )
