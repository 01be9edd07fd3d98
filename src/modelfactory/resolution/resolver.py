"""
Default-value resolution for generated factories.

Given a field descriptor and the three override layers, decide which Dart
expression the factory falls back to when the caller omits the argument.

Priority (first match wins):
    1. field-level override   (@FactoryDefault)
    2. class-level override   (@ModelFactory(defaults: {...}))
    3. nullable field         -> null
    4. global override        (type_defaults, keyed by rendered type string)
    5. built-in defaults      (enum first constant, primitives, List<T>)
    6. nested model           -> <Type>Factory.build()
"""

from typing import Optional, Tuple

from modelfactory.logging_config import logger
from modelfactory.schemas import (
    DefaultOverrides,
    EnumType,
    FieldDescriptor,
    ListType,
    PrimitiveType,
)
from .config import BUILTIN_DEFAULTS, NESTED_FACTORY_CALL, NULL_LITERAL
from .types import render_type


class DefaultResolver:
    """
    Resolves fallback expressions for the fields of one class.

    Holds the override layers for a single generation pass. Resolution is a
    pure function of (field, overrides); the resolver keeps no other state.
    """

    def __init__(self, overrides: Optional[DefaultOverrides] = None):
        self.overrides = overrides or DefaultOverrides()

    def resolve(self, field: FieldDescriptor) -> str:
        """
        Return the expression to use for `field` when no argument is given.

        Args:
            field: The field to resolve.

        Returns:
            A Dart expression string. Never raises for well-formed input.
        """
        expression, tier = self.resolve_with_tier(field)
        logger.debug(f"Resolved '{field.name}' via {tier}: {expression}")
        return expression

    def resolve_with_tier(self, field: FieldDescriptor) -> Tuple[str, str]:
        """
        Same as resolve(), but also reports which tier produced the value.
        """
        overrides = self.overrides

        field_default = overrides.field_level.get(field.name)
        if field_default is not None:
            return field_default, "field_level"

        class_default = overrides.class_level.get(field.name)
        if class_default is not None:
            return class_default, "class_level"

        # Nullability wins over global and built-in defaults
        if field.is_nullable:
            return NULL_LITERAL, "nullable"

        type_ref = field.declared_type
        type_str = render_type(type_ref)

        global_default = overrides.global_level.get(type_str)
        if global_default is not None:
            return global_default, "global_level"

        if isinstance(type_ref, EnumType) and type_ref.constants:
            return f"{type_str}.{type_ref.constants[0]}", "builtin"

        if isinstance(type_ref, PrimitiveType):
            return BUILTIN_DEFAULTS[type_ref.primitive], "builtin"

        if isinstance(type_ref, ListType):
            inner_field = FieldDescriptor(
                name=field.name,
                declared_type=type_ref.element_type,
                is_nullable=False,
            )
            inner, _ = self.resolve_with_tier(inner_field)
            return f"[{inner}]", "builtin"

        # Named models and enums without constants
        return NESTED_FACTORY_CALL.format(type_name=type_str), "nested_model"


def resolve(field: FieldDescriptor, overrides: Optional[DefaultOverrides] = None) -> str:
    """
    Resolve the fallback expression for a single field.

    Convenience wrapper around DefaultResolver for one-off lookups.
    """
    return DefaultResolver(overrides).resolve(field)
