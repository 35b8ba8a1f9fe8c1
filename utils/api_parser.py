#!/usr/bin/env python3
"""
Bot API Schema Builder

Groups the classified blocks of the documentation page into Type and Method
declarations. A heading names a declaration; the paragraph and table/list
that follow it describe it. Type names start uppercase, method names start
lowercase, and that is the only thing telling them apart.

The Type pass and the Method pass read the same block list independently and
run concurrently.
"""

import asyncio
import logging
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Sequence, Set, Tuple

from .api_models import ApiSchema, Field, Method, Parameter, Type
from .errors import AmbiguousShape, MissingColumn
from .html_blocks import Block, FieldTable, Heading, ItemList, Paragraph, decode_table
from .type_names import normalize_type_name

logger = logging.getLogger(__name__)

OPTIONAL_PREFIX = "Optional"


class ScanState(Enum):
    IDLE = "idle"
    AWAITING_SHAPE = "awaiting_shape"


class DeclarationScanner:
    """
    Finite-state machine over the block sequence.

    IDLE            no heading seen yet
    AWAITING_SHAPE  heading seen; paragraphs set its description and every
                    table or list under it finalizes a declaration

    Subclasses pick which names they own and how shape blocks become
    declarations; blocks for names they don't own are ignored.
    """

    def __init__(self, flush_trailing: bool = True):
        self.flush_trailing = flush_trailing
        self.state = ScanState.IDLE
        self.previous_block_kind: Optional[type] = None
        self.pending_name = ""
        self.pending_description = ""
        self._shape_kinds: Set[type] = set()
        self.declarations: list = []

    # Hooks

    def owns(self, name: str) -> bool:
        raise NotImplementedError

    def build_without_shape(self, name: str, description: str):
        raise NotImplementedError

    def build_from_table(self, name: str, description: str, table: FieldTable):
        raise NotImplementedError

    def build_from_list(self, name: str, description: str, item_list: ItemList):
        return None

    # Transitions

    def scan(self, blocks: Sequence[Block]) -> list:
        for block in blocks:
            self.feed(block)
        self.finish()
        return self.declarations

    def feed(self, block: Block):
        if isinstance(block, Heading):
            self._on_heading(block)
        elif isinstance(block, Paragraph):
            self._on_paragraph(block)
        elif isinstance(block, (FieldTable, ItemList)):
            self._on_shape(block)
        else:
            raise TypeError(f"Unknown block: {block!r}")
        self.previous_block_kind = type(block)

    def finish(self):
        if self.flush_trailing:
            self._flush_without_shape()

    def _on_heading(self, block: Heading):
        self._flush_without_shape()
        self.pending_name = block.text
        self.pending_description = ""
        self._shape_kinds = set()
        self.state = ScanState.AWAITING_SHAPE

    def _on_paragraph(self, block: Paragraph):
        # Last paragraph wins
        self.pending_description = block.text

    def _on_shape(self, block):
        if self.state is ScanState.IDLE:
            logger.debug(f"Ignoring {type(block).__name__} before the first heading")
            return

        self._shape_kinds.add(type(block))
        if len(self._shape_kinds) > 1:
            raise AmbiguousShape(self.pending_name)

        if not self.owns(self.pending_name):
            return

        if isinstance(block, FieldTable):
            declaration = self.build_from_table(self.pending_name, self.pending_description, block)
        else:
            declaration = self.build_from_list(self.pending_name, self.pending_description, block)
        self._emit(declaration)

    def _flush_without_shape(self):
        if (
            self.state is ScanState.AWAITING_SHAPE
            and self.previous_block_kind is Paragraph
            and self.owns(self.pending_name)
        ):
            self._emit(self.build_without_shape(self.pending_name, self.pending_description))

    def _emit(self, declaration):
        if declaration is None:
            return
        logger.debug(f"Finalized {type(declaration).__name__} '{declaration.name}'")
        self.declarations.append(declaration)


def _column(row: Dict[str, str], column: str, declaration: str, columns: List[str]) -> str:
    try:
        return row[column]
    except KeyError:
        raise MissingColumn(declaration, column, columns) from None


def field_from_row(row: Dict[str, str], declaration: str, columns: List[str]) -> Field:
    """Build a Field from a ``Field | Type | Description`` row."""
    name = _column(row, "Field", declaration, columns)
    type_name = _column(row, "Type", declaration, columns)
    description = _column(row, "Description", declaration, columns)
    return Field(
        name=name,
        type=normalize_type_name(type_name),
        optional=description.startswith(OPTIONAL_PREFIX),
        description=description,
    )


def parameter_from_row(row: Dict[str, str], declaration: str, columns: List[str]) -> Parameter:
    """Build a Parameter from a ``Parameter | Type | Required | Description`` row."""
    name = _column(row, "Parameter", declaration, columns)
    type_name = _column(row, "Type", declaration, columns)
    required = _column(row, "Required", declaration, columns)
    description = _column(row, "Description", declaration, columns)
    return Parameter(
        name=name,
        type=normalize_type_name(type_name),
        required=required != OPTIONAL_PREFIX,
        description=description,
    )


def _unique_fields(fields: List[Field], declaration: str) -> Tuple[Field, ...]:
    by_name: Dict[str, Field] = {}
    for field in fields:
        if field.name in by_name:
            logger.warning(f"Duplicate field '{field.name}' in '{declaration}' ignored")
            continue
        by_name[field.name] = field
    return tuple(by_name[name] for name in sorted(by_name))


class TypeScanner(DeclarationScanner):
    """Builds Type declarations from uppercase-led headings."""

    def owns(self, name: str) -> bool:
        return name[:1].isupper()

    def build_without_shape(self, name: str, description: str) -> Type:
        return Type(name=name, description=description)

    def build_from_table(self, name: str, description: str, table: FieldTable) -> Type:
        columns, rows = decode_table(table.element)
        fields = [field_from_row(row, name, columns) for row in rows]
        return Type(name=name, description=description, fields=_unique_fields(fields, name))

    def build_from_list(self, name: str, description: str, item_list: ItemList) -> Type:
        fields = [Field(name=item, type=item, optional=False, description="") for item in item_list.items]
        return Type(name=name, description=description, fields=_unique_fields(fields, name))


class MethodScanner(DeclarationScanner):
    """Builds Method declarations from lowercase-led headings."""

    def owns(self, name: str) -> bool:
        return name[:1].islower()

    def build_without_shape(self, name: str, description: str) -> Method:
        return Method(name=name, description=description)

    def build_from_table(self, name: str, description: str, table: FieldTable) -> Method:
        columns, rows = decode_table(table.element)
        parameters = tuple(parameter_from_row(row, name, columns) for row in rows)
        return Method(name=name, description=description, parameters=parameters)


def parse_types(blocks: Sequence[Block], flush_trailing: bool = True) -> FrozenSet[Type]:
    """Extract all Type declarations from the block sequence."""
    types = frozenset(TypeScanner(flush_trailing).scan(blocks))
    logger.info(f"Parsed {len(types)} types")
    return types


def parse_methods(blocks: Sequence[Block], flush_trailing: bool = True) -> FrozenSet[Method]:
    """Extract all Method declarations from the block sequence."""
    methods = frozenset(MethodScanner(flush_trailing).scan(blocks))
    logger.info(f"Parsed {len(methods)} methods")
    return methods


async def parse_api(blocks: Sequence[Block], flush_trailing: bool = True) -> ApiSchema:
    """
    Run the Type and Method passes concurrently and join them into a schema.

    Args:
        blocks: Classified blocks of the documentation page
        flush_trailing: Keep a field-less declaration at the very end of the page

    Returns:
        The extracted schema

    Raises:
        MissingColumn, AmbiguousShape: from either pass
    """
    blocks = tuple(blocks)
    types, methods = await asyncio.gather(
        asyncio.to_thread(parse_types, blocks, flush_trailing),
        asyncio.to_thread(parse_methods, blocks, flush_trailing),
    )
    return ApiSchema(types=types, methods=methods)
