"""
Rendering of type descriptors back to Dart type strings.
"""

from modelfactory.schemas import EnumType, ListType, NamedType, PrimitiveType, TypeRef
from .config import PRIMITIVE_TYPE_NAMES


def render_type(type_ref: TypeRef) -> str:
    """
    Render a declared type exactly as it appears in source, without the
    outer nullability marker.

    Examples:
        PrimitiveType("string")            -> "String"
        ListType(PrimitiveType("integer"))  -> "List<int>"
        ListType(NamedType("Tag"), element_nullable=True) -> "List<Tag?>"
    """
    if isinstance(type_ref, PrimitiveType):
        return PRIMITIVE_TYPE_NAMES[type_ref.primitive]
    if isinstance(type_ref, ListType):
        inner = render_type(type_ref.element_type)
        if type_ref.element_nullable:
            inner += "?"
        return f"{type_ref.name}<{inner}>"
    if isinstance(type_ref, (EnumType, NamedType)):
        return type_ref.name
    raise TypeError(f"Unsupported type descriptor: {type_ref!r}")


def render_parameter_type(type_ref: TypeRef) -> str:
    """Builder parameters are always optional, whatever the field's nullability."""
    return f"{render_type(type_ref)}?"
