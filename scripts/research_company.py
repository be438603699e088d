#!/usr/bin/env python3
"""
Research a company and manage the deal pipeline from the command line.

Usage:
    python scripts/research_company.py research "Microsoft"
    python scripts/research_company.py research "Acme Corp" --doc cim.txt --doc teaser.txt
    python scripts/research_company.py research --doc cim.txt      # identify from documents
    python scripts/research_company.py pipeline                     # list analyzed companies
    python scripts/research_company.py industries                   # industry comparison
"""

import sys
import json
import asyncio
import argparse
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dealdesk.config import load_settings
from dealdesk.llm.documents import DocumentContext
from dealdesk.research import ResearchService
from dealdesk.storage.kv_store import JsonFileStore
from dealdesk.storage.pipeline_store import PipelineStore
from dealdesk.utils.errors import ConfigurationError
from dealdesk.utils.logger import get_logger, set_log_level

logger = get_logger(__name__)


def _print_json(payload) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def cmd_research(args, settings) -> int:
    status = settings.api_key_status()
    logger.info(f"Alpha Vantage: {'✅ Configured' if status['alpha_vantage'] else '❌ Not configured'}")
    logger.info(f"Gemini: {'✅ Configured' if status['gemini'] else '❌ Not configured'}")

    documents = DocumentContext(
        max_documents=settings.max_uploaded_files,
        max_document_length=settings.max_document_length,
    )
    try:
        for doc_path in args.doc or []:
            path = Path(doc_path)
            documents.add(path.name, path.read_text(encoding="utf-8", errors="replace"))
    except (OSError, ValueError) as e:
        logger.error(f"Could not attach documents: {e}")
        return 1

    try:
        service = ResearchService.from_settings(settings)
        analysis = asyncio.run(service.search_company(args.query or "", documents))
    except ConfigurationError as e:
        logger.error(f"{e}")
        logger.error("Add your keys to the .env file:")
        logger.error("  GEMINI_API_KEY='your-api-key-here'")
        logger.error("  ALPHA_VANTAGE_API_KEY='your-api-key-here'")
        return 1
    except ValueError as e:
        logger.error(f"Search failed: {e}")
        return 1

    _print_json(analysis.to_dict())
    return 0


def cmd_pipeline(args, settings) -> int:
    pipeline = PipelineStore(JsonFileStore(settings.storage_path))
    if not len(pipeline):
        logger.info("No companies analyzed yet")
    _print_json([entry.to_dict() for entry in pipeline.list()])
    return 0


def cmd_industries(args, settings) -> int:
    pipeline = PipelineStore(JsonFileStore(settings.storage_path))
    comparison = pipeline.industry_comparison()
    if comparison is None:
        logger.info("Need multiple companies for comparison")
        _print_json({})
        return 0
    _print_json({industry: summary.to_dict() for industry, summary in comparison.items()})
    return 0


def main():
    """Main execution function."""
    parser = argparse.ArgumentParser(description="AI-assisted company research and deal pipeline")
    sub = parser.add_subparsers(dest="command", required=True)

    research = sub.add_parser("research", help="Research a company and add it to the pipeline")
    research.add_argument(
        'query',
        nargs='?',
        default='',
        help='Company name or ticker (omit to identify the company from --doc files)'
    )
    research.add_argument(
        '--doc',
        action='append',
        help='Plain-text document to include as context (repeatable)'
    )
    research.set_defaults(func=cmd_research)

    pipeline = sub.add_parser("pipeline", help="List analyzed companies")
    pipeline.set_defaults(func=cmd_pipeline)

    industries = sub.add_parser("industries", help="Average deal score per industry")
    industries.set_defaults(func=cmd_industries)

    args = parser.parse_args()

    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    logger.setLevel(set_log_level(settings.log_level))

    return args.func(args, settings)


if __name__ == "__main__":
    sys.exit(main())
