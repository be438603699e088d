"""
Tests for the Gemini company lookup.

Gemini is mocked; coroutines are driven with asyncio.run.
"""

import asyncio
from unittest.mock import AsyncMock, Mock, patch

import pytest

from dealdesk.config import Settings
from dealdesk.llm.company_research import (
    CompanyResearcher,
    extract_json_block,
    fallback_profile,
)
from dealdesk.llm.documents import DocumentContext
from dealdesk.llm.schemas import CompanyProfile
from dealdesk.utils.errors import ConfigurationError, ResponseParseError


GEMINI_TEXT = '''Here is the information you requested:
```json
{
    "name": "Microsoft Corporation",
    "symbol": "MSFT",
    "overview": "Microsoft develops software, services and devices.",
    "history": "Founded in 1975 by Bill Gates and Paul Allen.",
    "products": "Windows, Office 365, Azure",
    "isPublic": true,
    "industry": "Software"
}
```
Let me know if you need more.'''


def make_researcher(settings, text=None, side_effect=None):
    model = Mock()
    response = Mock()
    response.text = text
    model.generate_content_async = AsyncMock(return_value=response, side_effect=side_effect)
    return CompanyResearcher(settings, model=model), model


class TestExtractJsonBlock:

    def test_embedded_json(self):
        data = extract_json_block(GEMINI_TEXT)
        assert data["symbol"] == "MSFT"
        assert data["isPublic"] is True

    def test_no_json(self):
        with pytest.raises(ResponseParseError, match="Could not parse"):
            extract_json_block("Sorry, I cannot help with that.")

    def test_invalid_json(self):
        with pytest.raises(ResponseParseError):
            extract_json_block("{name: 'unquoted'}")

    def test_empty_text(self):
        with pytest.raises(ResponseParseError):
            extract_json_block(None)


class TestFallbackProfile:

    def test_degraded_fields(self):
        profile = fallback_profile("Acme", "Gemini API error: 500")
        assert profile.name == "Acme"
        assert profile.symbol is None
        assert profile.industry == "Unknown"
        assert profile.is_public is False
        assert profile.error == "Gemini API error: 500"
        assert profile.has_error
        assert 'Information for "Acme" could not be retrieved via AI.' in profile.overview

    @pytest.mark.parametrize("query", ["", "   ", None])
    def test_blank_query_gets_placeholder_name(self, query):
        profile = fallback_profile(query, "boom")
        assert profile.name == "Unknown company"
        assert profile.error == "boom"


class TestCompanyProfileSchema:

    def test_camel_case_alias(self):
        profile = CompanyProfile.model_validate({"name": "X", "isPublic": True})
        assert profile.is_public is True
        assert profile.to_dict()["isPublic"] is True

    @pytest.mark.parametrize("raw", [None, "", "null", "N/A", " private "])
    def test_blank_symbols_are_private(self, raw):
        assert CompanyProfile(name="X", symbol=raw).symbol is None

    def test_symbol_uppercased(self):
        assert CompanyProfile(name="X", symbol=" msft ").symbol == "MSFT"

    def test_null_text_fields(self):
        profile = CompanyProfile.model_validate({"name": "X", "industry": None, "overview": None})
        assert profile.industry == "Unknown"
        assert profile.overview == ""

    def test_frozen(self):
        profile = CompanyProfile(name="X")
        with pytest.raises(Exception):
            profile.name = "Y"

    def test_name_required(self):
        with pytest.raises(Exception):
            CompanyProfile.model_validate({"symbol": "X"})


class TestCompanyResearcher:

    def test_requires_api_key(self):
        with pytest.raises(ConfigurationError):
            CompanyResearcher(Settings(gemini_api_key=None), model=Mock())

    def test_placeholder_key_rejected(self):
        with pytest.raises(ConfigurationError):
            CompanyResearcher(Settings(gemini_api_key="YOUR_GEMINI_API_KEY_HERE"), model=Mock())

    @patch('dealdesk.llm.company_research.genai')
    def test_builds_model_from_settings(self, mock_genai, settings):
        CompanyResearcher(settings)
        mock_genai.configure.assert_called_once_with(api_key="test-gemini-key")
        mock_genai.GenerativeModel.assert_called_once_with("gemini-2.5-flash")

    def test_research_success(self, settings):
        researcher, model = make_researcher(settings, text=GEMINI_TEXT)
        profile = asyncio.run(researcher.research("Microsoft"))

        assert profile.name == "Microsoft Corporation"
        assert profile.symbol == "MSFT"
        assert profile.is_public is True
        assert profile.error is None

        prompt = model.generate_content_async.call_args.args[0]
        assert '"Microsoft"' in prompt
        assert model.generate_content_async.call_args.kwargs["generation_config"]["temperature"] == 0.3

    def test_research_falls_back_on_api_error(self, settings):
        researcher, _ = make_researcher(settings, side_effect=RuntimeError("Gemini API error: 503"))
        profile = asyncio.run(researcher.research("Acme"))

        assert profile.name == "Acme"
        assert profile.industry == "Unknown"
        assert profile.error == "Gemini API error: 503"

    def test_research_falls_back_on_unparseable_text(self, settings):
        researcher, _ = make_researcher(settings, text="No JSON here")
        profile = asyncio.run(researcher.research("Acme"))
        assert profile.has_error
        assert "Could not parse AI response as JSON" in profile.error

    def test_research_falls_back_on_invalid_profile(self, settings):
        researcher, _ = make_researcher(settings, text='{"symbol": "ACME"}')
        profile = asyncio.run(researcher.research("Acme"))
        assert profile.has_error
        assert profile.name == "Acme"

    def test_documents_included_in_prompt(self, settings):
        researcher, model = make_researcher(settings, text=GEMINI_TEXT)
        documents = DocumentContext(max_document_length=20)
        documents.add("cim.txt", "Confidential information memorandum " * 10)

        asyncio.run(researcher.research("Microsoft", documents))

        prompt = model.generate_content_async.call_args.args[0]
        assert "--- Document: cim.txt ---" in prompt
        assert "Confidential information memorandum " * 2 not in prompt

    def test_research_documents(self, settings):
        researcher, model = make_researcher(settings, text=GEMINI_TEXT)
        documents = DocumentContext()
        documents.add("teaser.txt", "Microsoft teaser")

        profile = asyncio.run(researcher.research_documents(documents))
        assert profile.symbol == "MSFT"
        assert "Identify the company" in model.generate_content_async.call_args.args[0]

    def test_research_documents_requires_documents(self, settings):
        researcher, _ = make_researcher(settings, text=GEMINI_TEXT)
        with pytest.raises(ValueError):
            asyncio.run(researcher.research_documents(DocumentContext()))

    def test_research_documents_fallback_uses_document_names(self, settings):
        researcher, _ = make_researcher(settings, side_effect=RuntimeError("boom"))
        documents = DocumentContext()
        documents.add("a.txt", "x")
        documents.add("b.txt", "y")

        profile = asyncio.run(researcher.research_documents(documents))
        assert profile.name == "a.txt, b.txt"
        assert profile.error == "boom"

    def test_blank_query_falls_back(self, settings):
        researcher, _ = make_researcher(settings, side_effect=RuntimeError("boom"))
        profile = asyncio.run(researcher.research(""))

        assert profile.name == "Unknown company"
        assert profile.error == "boom"
        assert not profile.is_public
