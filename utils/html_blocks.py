#!/usr/bin/env python3
"""
Block classification for the Bot API documentation page.

The page body is a flat run of <h4>, <p>, <table> and <ul> siblings inside
``#dev_page_content``. Nothing in the markup nests a declaration's
description and field table under its heading, so the only structure we get
is sibling order. This module turns that run into a list of tagged blocks and
decodes tables and lists on demand.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Set, Tuple, Union

from bs4 import BeautifulSoup, Tag

from .errors import StructureNotFound

logger = logging.getLogger(__name__)

CONTENT_MARKER = "dev_page_content"
HEADING_TAGS = {"h4"}
PARAGRAPH_TAGS = {"p"}
TABLE_TAGS = {"table"}
LIST_TAGS = {"ul"}
TABLE_CLASS = ["table"]


@dataclass(frozen=True)
class Heading:
    """Declaration heading, e.g. ``User`` or ``sendMessage``"""
    text: str


@dataclass(frozen=True)
class Paragraph:
    """Description paragraph, text kept verbatim"""
    text: str


@dataclass(frozen=True)
class FieldTable:
    """Field or parameter table, decoded lazily"""
    element: Tag

    @property
    def columns(self) -> List[str]:
        return decode_table(self.element)[0]

    @property
    def rows(self) -> List[Dict[str, str]]:
        return decode_table(self.element)[1]


@dataclass(frozen=True)
class ItemList:
    """Enum-like list of type names, decoded lazily"""
    element: Tag

    @property
    def items(self) -> Set[str]:
        return decode_list(self.element)


Block = Union[Heading, Paragraph, FieldTable, ItemList]


def find_content_root(document: Union[str, bytes, BeautifulSoup]) -> Tag:
    """Locate the container holding the documentation body."""
    soup = document if isinstance(document, BeautifulSoup) else BeautifulSoup(document, 'html.parser')
    root = soup.find(id=CONTENT_MARKER)
    if root is None:
        raise StructureNotFound(f'id="{CONTENT_MARKER}"')
    return root


def classify_blocks(document: Union[str, bytes, BeautifulSoup]) -> List[Block]:
    """
    Convert the children of the content container into blocks.

    Args:
        document: Raw HTML or an already parsed soup

    Returns:
        Blocks in document order

    Raises:
        StructureNotFound: if the content container is missing
    """
    root = find_content_root(document)
    blocks: List[Block] = []

    for child in root.children:
        if not isinstance(child, Tag):
            continue

        block = _classify_element(child)
        if block is None:
            logger.debug(f"Skipping <{child.name}> element")
            continue
        blocks.append(block)

    logger.info(f"Classified {len(blocks)} blocks")
    return blocks


def _classify_element(tag: Tag):
    name = (tag.name or "").lower()

    if name in HEADING_TAGS:
        text = tag.get_text().strip()
        # Prose sub-headings ("Formatting options") are not declaration names
        if not text or any(ch.isspace() for ch in text):
            return None
        return Heading(text)

    if name in PARAGRAPH_TAGS:
        return Paragraph(tag.get_text())

    if name in TABLE_TAGS:
        # Layout tables share the element; only field tables carry the class
        if tag.get('class') != TABLE_CLASS:
            return None
        return FieldTable(tag)

    if name in LIST_TAGS:
        if not decode_list(tag):
            return None
        return ItemList(tag)

    return None


def decode_table(table: Tag) -> Tuple[List[str], List[Dict[str, str]]]:
    """
    Decode a field table into its header columns and row mappings.

    A missing header or body yields no columns or no rows. Rows shorter than
    the header are partially filled; surplus cells are dropped.
    """
    columns: List[str] = []
    rows: List[Dict[str, str]] = []

    thead = table.find('thead')
    if thead is not None:
        columns = [th.get_text().strip() for th in thead.find_all('th')]

    tbody = table.find('tbody')
    if tbody is None:
        return columns, rows

    for tr in tbody.find_all('tr'):
        cells = tr.find_all('td', recursive=False)
        rows.append({column: cell.get_text().strip() for column, cell in zip(columns, cells)})

    return columns, rows


def decode_list(list_element: Tag) -> Set[str]:
    """Collect the trimmed, non-blank text of each list item."""
    items = set()
    for li in list_element.find_all('li', recursive=False):
        text = li.get_text().strip()
        if text:
            items.add(text)
    return items


def describe_block(block: Block) -> str:
    """One-line rendering of a block, used by the CLI block dump."""
    if isinstance(block, Heading):
        return f"H4      {block.text}"
    if isinstance(block, Paragraph):
        return f"P       {block.text.strip()[:80]}"
    if isinstance(block, FieldTable):
        return f"TABLE   {' | '.join(block.columns)} ({len(block.rows)} rows)"
    if isinstance(block, ItemList):
        return f"LIST    {', '.join(sorted(block.items))}"
    raise TypeError(f"Unknown block: {block!r}")
