"""
Exceptions raised while turning the Bot API documentation page into a schema.

All of them are fatal for the parse that raised them: the caller gets either a
complete schema or one of these.
"""

from typing import Optional


class ApiSchemaError(Exception):
    """Base class for schema extraction failures."""


class StructureNotFound(ApiSchemaError):
    """The content container is missing from the document."""

    def __init__(self, marker: str):
        self.marker = marker
        super().__init__(f"Couldn't find the start tag of the data ({marker})")


class MissingColumn(ApiSchemaError):
    """A table row lacks a column needed to build a field or parameter."""

    def __init__(self, declaration: str, column: str, columns: Optional[list] = None):
        self.declaration = declaration
        self.column = column
        self.columns = list(columns or [])
        super().__init__(
            f"Table for '{declaration}' has no '{column}' column "
            f"(got: {', '.join(self.columns) or 'none'})"
        )


class AmbiguousShape(ApiSchemaError):
    """A heading is followed by both a field table and an item list."""

    def __init__(self, declaration: str):
        self.declaration = declaration
        super().__init__(
            f"'{declaration}' is followed by both a table and a list before the next heading"
        )
