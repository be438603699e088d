"""
Company Research - qualitative company lookup using Gemini LLM

Asks Gemini for a short company profile (name, ticker, industry, overview,
history, products) and validates the JSON embedded in its answer.

A failed lookup does not abort the research run: the caller receives a
degraded CompanyProfile with `error` set, so the company still lands in the
pipeline.

Example:
    researcher = CompanyResearcher(settings)
    profile = await researcher.research("Microsoft")
    # profile.symbol -> 'MSFT', profile.is_public -> True
"""

import json
import re
from typing import Any, Dict, Optional

import google.generativeai as genai
from pydantic import ValidationError

from .documents import DocumentContext
from .schemas import CompanyProfile, UNKNOWN_COMPANY, UNKNOWN_INDUSTRY
from ..config import Settings
from ..utils.errors import ResponseParseError
from ..utils.logger import get_logger

logger = get_logger(__name__)

# First '{' through last '}' across newlines
JSON_BLOCK_PATTERN = re.compile(r"\{[\s\S]*\}")

GENERATION_CONFIG: Dict[str, Any] = {
    "temperature": 0.3,
    "top_k": 40,
    "top_p": 0.8,
    "max_output_tokens": 1000,
}

PROFILE_JSON_TEMPLATE = """{
    "name": "Full company name",
    "symbol": "Stock symbol if public, otherwise null",
    "overview": "2-3 sentence business description",
    "history": "2-3 sentence founding and key milestones",
    "products": "Key products and services description",
    "isPublic": true/false,
    "industry": "Primary industry"
}"""


def extract_json_block(text: str) -> Dict[str, Any]:
    """
    Locate and parse the JSON object embedded in free text.

    Raises:
        ResponseParseError: No object found, or it is not valid JSON
    """
    match = JSON_BLOCK_PATTERN.search(text or "")
    if not match:
        raise ResponseParseError("Could not parse AI response as JSON")

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Could not parse AI response as JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise ResponseParseError("AI response JSON is not an object")
    return parsed


def fallback_profile(query: str, error: str) -> CompanyProfile:
    """
    Degraded profile returned when the AI lookup fails.

    Never raises: a blank query is stored under a placeholder name.
    """
    name = (query or "").strip() or UNKNOWN_COMPANY
    return CompanyProfile(
        name=name,
        symbol=None,
        overview=f'Information for "{name}" could not be retrieved via AI. {error}',
        history="Historical information not available due to API error.",
        products="Product information not available due to API error.",
        is_public=False,
        industry=UNKNOWN_INDUSTRY,
        error=error,
    )


class CompanyResearcher:
    """
    Looks up company profiles with Gemini.

    Usage:
        researcher = CompanyResearcher(settings)
        profile = await researcher.research("Nvidia", documents)
    """

    def __init__(self, settings: Settings, model: Optional[Any] = None):
        """
        Initialize CompanyResearcher.

        Args:
            settings: Application settings (Gemini key and model name)
            model: Pre-built GenerativeModel (built from settings if None)

        Raises:
            ConfigurationError: GEMINI_API_KEY missing or placeholder
        """
        api_key = settings.require_gemini_key()
        self.model_name = settings.gemini_model

        if model is None:
            genai.configure(api_key=api_key)
            model = genai.GenerativeModel(self.model_name)
        self.model = model

        logger.info(f"CompanyResearcher initialized with {self.model_name}")

    def _build_prompt(self, query: str, documents: Optional[DocumentContext] = None) -> str:
        prompt = (
            f'Find detailed information about the company "{query}". '
            f"Provide a JSON response with:\n{PROFILE_JSON_TEMPLATE}"
        )
        section = documents.to_prompt_section() if documents else None
        if section:
            prompt += f"\n\nUse these documents as additional context:\n\n{section}"
        return prompt

    def _build_document_prompt(self, documents: DocumentContext) -> str:
        return (
            "Identify the company described in the documents below and summarize it. "
            f"Provide a JSON response with:\n{PROFILE_JSON_TEMPLATE}\n\n"
            f"{documents.to_prompt_section()}"
        )

    async def _generate_profile(self, prompt: str) -> CompanyProfile:
        response = await self.model.generate_content_async(
            prompt,
            generation_config=GENERATION_CONFIG,
        )

        raw_output = response.text
        logger.debug(f"Raw LLM output: {raw_output[:200]}...")

        data = extract_json_block(raw_output)
        try:
            return CompanyProfile.model_validate(data)
        except ValidationError as e:
            raise ResponseParseError(f"AI response failed validation: {e}") from e

    async def research(self, query: str, documents: Optional[DocumentContext] = None) -> CompanyProfile:
        """
        Look up a company by name or ticker.

        Args:
            query: Free-text company name or ticker
            documents: Optional documents to include as context

        Returns:
            CompanyProfile (degraded, with `error` set, if the lookup failed)
        """
        try:
            profile = await self._generate_profile(self._build_prompt(query, documents))
            logger.info(f"AI company info retrieved: {profile.name}")
            return profile
        except Exception as e:
            logger.error(f"AI company search failed for '{query}': {e}")
            return fallback_profile(query, str(e))

    async def research_documents(self, documents: DocumentContext) -> CompanyProfile:
        """
        Identify and profile a company from attached documents alone.

        Raises:
            ValueError: No documents attached
        """
        if not documents:
            raise ValueError("Please provide a company name or attach documents")

        label = ", ".join(documents.names)
        try:
            profile = await self._generate_profile(self._build_document_prompt(documents))
            logger.info(f"AI company info retrieved from documents: {profile.name}")
            return profile
        except Exception as e:
            logger.error(f"AI document analysis failed for {label}: {e}")
            return fallback_profile(label, str(e))
