"""
Parsing of Dart type strings into type descriptors.
"""

import re
from typing import Dict, List, Optional, Tuple

from modelfactory.schemas import EnumType, ListType, NamedType, PrimitiveType, TypeRef
from .config import LIST_TYPE_NAME, PRIMITIVE_KINDS
from .dart_lexer import split_top_level


def normalize_type(type_str: str) -> str:
    """
    Normalize whitespace to Dart's display form.

    Example: "Map< String ,int >?" -> "Map<String, int>?"
    """
    compact = re.sub(r"\s+", "", type_str)
    return compact.replace(",", ", ")


def parse_type(
    type_str: str,
    enum_registry: Optional[Dict[str, List[str]]] = None,
) -> Tuple[TypeRef, bool]:
    """
    Parse a declared type.

    Args:
        type_str: Type as written in source, e.g. "List<String>?".
        enum_registry: Known enums (name -> ordered constant names).

    Returns:
        (type descriptor, is_nullable)
    """
    text = normalize_type(type_str)
    nullable = text.endswith("?")
    if nullable:
        text = text[:-1]
    return _parse_non_nullable(text, enum_registry or {}), nullable


def _parse_non_nullable(text: str, enum_registry: Dict[str, List[str]]) -> TypeRef:
    if text in PRIMITIVE_KINDS:
        return PrimitiveType(primitive=PRIMITIVE_KINDS[text])

    prefix = f"{LIST_TYPE_NAME}<"
    if text.startswith(prefix) and text.endswith(">"):
        inner = text[len(prefix):-1]
        arguments = split_top_level(inner, angle=True)
        if len(arguments) == 1:
            element, element_nullable = parse_type(inner, enum_registry)
            return ListType(element_type=element, element_nullable=element_nullable)

    if text in enum_registry:
        return EnumType(name=text, constants=list(enum_registry[text]))

    return NamedType(name=text)
