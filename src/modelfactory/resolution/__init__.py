"""
Resolution package: default values for generated factories.

Provides the tiered default resolver and Dart type rendering.
"""

from .resolver import DefaultResolver, resolve
from .types import render_type, render_parameter_type
from .config import (
    NULL_LITERAL,
    BUILTIN_DEFAULTS,
    PRIMITIVE_TYPE_NAMES,
    FACTORY_SUFFIX,
)

__all__ = [
    "DefaultResolver",
    "resolve",
    "render_type",
    "render_parameter_type",
    "NULL_LITERAL",
    "BUILTIN_DEFAULTS",
    "PRIMITIVE_TYPE_NAMES",
    "FACTORY_SUFFIX",
]
