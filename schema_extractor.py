#!/usr/bin/env python3
"""
Bot API Schema Extractor

Extracts types, fields, methods and parameters from the Telegram Bot API
HTML documentation page:
- Block classification of the #dev_page_content body
- Concurrent Type / Method grouping passes
- JSON export of the resulting schema

Usage:
  python schema_extractor.py --output-dir out/
  python schema_extractor.py --html saved_api_page.html --dump-blocks
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import httpx
from bs4 import BeautifulSoup
from dotenv import load_dotenv

from docs_client import BotApiDocsClient, DocsFetchError
from utils.api_models import ApiSchema
from utils.api_parser import parse_api
from utils.errors import ApiSchemaError
from utils.html_blocks import Block, classify_blocks, describe_block

logger = logging.getLogger(__name__)

SCHEMA_FILENAME = "bot_api_schema.json"


def schema_to_dict(schema: ApiSchema) -> Dict[str, Any]:
    """JSON-ready representation, declarations sorted by name"""
    return {
        'types': [
            t.model_dump(mode='json') for t in sorted(schema.types, key=lambda t: t.name)
        ],
        'methods': [
            m.model_dump(mode='json') for m in sorted(schema.methods, key=lambda m: m.name)
        ],
    }


class BotApiSchemaExtractor:
    """Main class orchestrating the extraction process"""

    def __init__(self, flush_trailing: bool = True):
        self.flush_trailing = flush_trailing

    def classify(self, html: Union[str, bytes]) -> List[Block]:
        """Classify the documentation body into blocks"""
        soup = BeautifulSoup(html, 'html.parser')
        return classify_blocks(soup)

    async def extract(self, html: Union[str, bytes]) -> ApiSchema:
        """Extract the schema from a raw HTML document"""
        return await self.extract_blocks(self.classify(html))

    async def extract_blocks(self, blocks: List[Block]) -> ApiSchema:
        """Extract the schema from already classified blocks"""
        schema = await parse_api(blocks, flush_trailing=self.flush_trailing)
        logger.info(f"Extraction complete: {len(schema.types)} types, {len(schema.methods)} methods")
        return schema

    async def fetch_and_extract(self, client: BotApiDocsClient) -> ApiSchema:
        """Fetch the documentation page and extract its schema"""
        html = await client.fetch_html()
        return await self.extract(html)

    def export_results(self, schema: ApiSchema, output_dir: str = ".") -> Dict[str, Any]:
        """Export extraction results to a JSON file"""
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        data = schema_to_dict(schema)
        with open(output_path / SCHEMA_FILENAME, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        logger.info(f"Results exported to {output_path / SCHEMA_FILENAME}")
        return data


def extract_schema(html: Union[str, bytes], flush_trailing: bool = True) -> ApiSchema:
    """Synchronous wrapper around BotApiSchemaExtractor.extract"""
    return asyncio.run(BotApiSchemaExtractor(flush_trailing).extract(html))


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Extract the Bot API schema from its HTML documentation")
    parser.add_argument('--html', help="Parse a saved HTML page instead of fetching it")
    parser.add_argument('--url', help="Documentation page URL (default: BOT_API_DOCS_URL or core.telegram.org)")
    parser.add_argument('--output-dir', default=".", help="Directory for bot_api_schema.json")
    parser.add_argument('--dump-blocks', action='store_true', help="Print the classified blocks")
    parser.add_argument('--no-flush-trailing', action='store_true',
                        help="Drop a field-less declaration at the very end of the page")
    parser.add_argument('-v', '--verbose', action='store_true', help="Debug logging")
    return parser


async def main_wrapper(args: argparse.Namespace) -> ApiSchema:
    extractor = BotApiSchemaExtractor(flush_trailing=not args.no_flush_trailing)

    if args.html:
        html = Path(args.html).read_text(encoding='utf-8')
    else:
        client = BotApiDocsClient(docs_url=args.url)
        try:
            html = await client.fetch_html()
        finally:
            await client.close()

    blocks = extractor.classify(html)
    if args.dump_blocks:
        for block in blocks:
            print(describe_block(block))

    schema = await extractor.extract_blocks(blocks)
    extractor.export_results(schema, args.output_dir)
    return schema


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        schema = asyncio.run(main_wrapper(args))
    except (ApiSchemaError, DocsFetchError, httpx.HTTPError) as e:
        logger.error(f"Extraction failed: {e}")
        return 1

    print(f"\n=== EXTRACTION SUMMARY ===")
    print(f"Types: {len(schema.types)}")
    print(f"Methods: {len(schema.methods)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
