"""
modelfactory - Factory builder generator for Dart model classes

Emits `<Model>Factory.build(...)` helpers with sensible defaults for every
field of an @ModelFactory-annotated class.
"""

__version__ = "1.0.0"

# Core exports
from modelfactory.schemas import (
    ClassDescriptor,
    DefaultOverrides,
    EnumType,
    FieldDescriptor,
    ListType,
    NamedType,
    PrimitiveType,
)
from modelfactory.resolution import DefaultResolver, resolve, render_type
from modelfactory.synthesis import FactoryEmitter, emit, generate_project
from modelfactory.parser import parse_file, discover_models

__all__ = [
    "__version__",
    "ClassDescriptor",
    "DefaultOverrides",
    "EnumType",
    "FieldDescriptor",
    "ListType",
    "NamedType",
    "PrimitiveType",
    "DefaultResolver",
    "resolve",
    "render_type",
    "FactoryEmitter",
    "emit",
    "generate_project",
    "parse_file",
    "discover_models",
]
