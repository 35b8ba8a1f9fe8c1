#!/usr/bin/env python3
"""
Pydantic input models for extracted Bot API methods.

Turns a Method into a model that validates call arguments, the same way a
generated client would type its parameters.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, create_model

from .api_models import Method
from .type_names import BOOL, FLOAT64, INT64, STRING, element_type

PRIMITIVE_PY_TYPES = {
    INT64: int,
    FLOAT64: float,
    BOOL: bool,
    STRING: str,
}


def python_type_for(token: str) -> Any:
    """Map a canonical type token to a Python type."""
    inner = element_type(token)
    if inner is not None:
        return List[python_type_for(inner)]  # type: ignore
    # Declaration names (User, Message, ...) are plain JSON objects here
    return PRIMITIVE_PY_TYPES.get(token, Dict[str, Any])


def _clean_name(s: str) -> str:
    """Clean parameter name for Python (minimal changes)."""
    if re.match(r"^\d", s):
        s = "param_" + s
    return s


def build_input_model_from_method(method: Method) -> type[BaseModel]:
    """Build a Pydantic model for validating a method's call arguments."""
    fields: Dict[str, Tuple[Any, Any]] = {}

    for p in method.parameters:
        py_type = python_type_for(p.type)
        if not p.required:
            py_type = Optional[py_type]  # type: ignore
        default = Field(default=... if p.required else None, description=p.description)
        fields[_clean_name(p.name)] = (py_type, default)

    return create_model(f"{_clean_name(method.name)}_Input", **fields)  # type: ignore
