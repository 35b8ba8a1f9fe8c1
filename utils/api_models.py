#!/usr/bin/env python3
"""
Bot API schema models.

Declarations extracted from the documentation page. Everything here is frozen:
a schema is a snapshot of one page and is never updated after the parse.
"""

from typing import FrozenSet, Tuple

from pydantic import BaseModel, ConfigDict


class Field(BaseModel):
    """One field of a Type."""
    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    optional: bool = False
    description: str = ""


class Parameter(BaseModel):
    """One parameter of a Method. Required unless the docs say otherwise."""
    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    required: bool = True
    description: str = ""


class Type(BaseModel):
    """A data shape, e.g. ``User``. Fields are kept sorted by name."""
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    fields: Tuple[Field, ...] = ()

    def get_field(self, name: str):
        for field in self.fields:
            if field.name == name:
                return field
        return None


class Method(BaseModel):
    """A remote operation, e.g. ``sendMessage``. Parameters keep table order."""
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    parameters: Tuple[Parameter, ...] = ()

    @property
    def required_parameters(self) -> Tuple[Parameter, ...]:
        return tuple(p for p in self.parameters if p.required)


class ApiSchema(BaseModel):
    """Types and methods extracted from one documentation page."""
    model_config = ConfigDict(frozen=True)

    types: FrozenSet[Type] = frozenset()
    methods: FrozenSet[Method] = frozenset()

    def type_names(self) -> list:
        return sorted(t.name for t in self.types)

    def method_names(self) -> list:
        return sorted(m.name for m in self.methods)

    def get_type(self, name: str):
        return next((t for t in self.types if t.name == name), None)

    def get_method(self, name: str):
        return next((m for m in self.methods if m.name == name), None)
