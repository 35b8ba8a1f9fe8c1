#!/usr/bin/env python3
"""
Type phrase normalization.

Maps the type column of the documentation ("Array of String",
"Integer or String", "User", ...) to canonical type tokens:

- ``int64``, ``float64``, ``bool``, ``string`` for primitives
- ``array<T>`` for sequences
- anything else is a declaration name and passes through unchanged
"""

import re

ARRAY_PREFIX = "Array of"

INT64 = "int64"
FLOAT64 = "float64"
BOOL = "bool"
STRING = "string"

PRIMITIVE_TYPES = {
    "Integer": INT64,
    "True": BOOL,
    "Boolean": BOOL,
    "Float": FLOAT64,
    "String": STRING,
    "InputFile or String": STRING,
    "Integer or String": STRING,
}

_ARRAY_TOKEN_RE = re.compile(r"^array<(.+)>$")


def sequence_of(token: str) -> str:
    """Wrap a canonical token as a sequence token."""
    return f"array<{token}>"


def element_type(token: str):
    """Return the element token of ``array<T>``, or None for non-sequence tokens."""
    match = _ARRAY_TOKEN_RE.match(token)
    return match.group(1) if match else None


def normalize_type_name(phrase: str) -> str:
    """
    Normalize a documentation type phrase to a canonical token.

    Total function: unknown phrases come back unchanged. "Array of" nesting
    has no fixed depth limit.
    """
    depth = 0
    rest = phrase
    while rest.startswith(ARRAY_PREFIX):
        rest = rest[len(ARRAY_PREFIX):].strip()
        depth += 1

    # "Array of" with no element type
    if not rest:
        return phrase

    token = PRIMITIVE_TYPES.get(rest, rest)
    for _ in range(depth):
        token = sequence_of(token)
    return token
