"""
Factory emitter: turns a class's field descriptors into a Dart factory class.
"""

from typing import Any, Dict, List, NamedTuple, Optional, Sequence

from modelfactory.exceptions import InvalidGenerationSourceError
from modelfactory.logging_config import logger
from modelfactory.resolution import DefaultResolver, NULL_LITERAL, render_parameter_type
from modelfactory.resolution.config import FACTORY_SUFFIX
from modelfactory.schemas import ClassDescriptor, DefaultOverrides, FieldDescriptor, GeneratedFactory
from .config import EMITTER_CONFIG, INVALID_TARGET_MESSAGE


class _FieldInfo(NamedTuple):
    name: str
    param_type: str
    fake_code: str


class FactoryEmitter:
    """
    Emits `<ClassName>Factory` classes.

    Each field becomes one optional named parameter of the static builder;
    omitted arguments fall back to the resolver's expression.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = {**EMITTER_CONFIG, **(config or {})}

    def emit(
        self,
        class_name: str,
        fields: Sequence[FieldDescriptor],
        overrides: Optional[DefaultOverrides] = None,
    ) -> str:
        """
        Produce the full Dart definition of the factory for `class_name`.

        Fields are emitted in the order given; nothing is reordered or
        deduplicated.
        """
        resolver = DefaultResolver(overrides)
        factory_name = f"{class_name}{FACTORY_SUFFIX}"
        build = self.config["build_method"]
        ind = self.config["indent"]

        infos: List[_FieldInfo] = [
            _FieldInfo(
                name=field.name,
                param_type=render_parameter_type(field.declared_type),
                fake_code=resolver.resolve(field),
            )
            for field in fields
        ]

        lines = [
            f"class {factory_name} {{",
            f"{ind}const {factory_name}._();",
            "",
        ]

        if not infos:
            # An empty named-parameter list is not valid Dart
            lines.append(f"{ind}static {class_name} {build}() {{")
            lines.append(f"{ind * 2}return {class_name}();")
        else:
            lines.append(f"{ind}static {class_name} {build}({{")
            for info in infos:
                lines.append(f"{ind * 2}{info.param_type} {info.name},")
            lines.append(f"{ind}}}) {{")

            lines.append(f"{ind * 2}return {class_name}(")
            for info in infos:
                lines.append(f"{ind * 3}{info.name}: {self._argument(info)},")
            lines.append(f"{ind * 2});")

        lines.append(f"{ind}}}")
        lines.append("}")

        logger.debug(f"Emitted {factory_name} with {len(infos)} field(s)")
        return "\n".join(lines) + "\n"

    def emit_class(
        self,
        descriptor: ClassDescriptor,
        global_defaults: Optional[Dict[str, str]] = None,
    ) -> GeneratedFactory:
        """
        Emit the factory for a discovered element.

        Raises:
            InvalidGenerationSourceError: If the element is not a class.
        """
        if descriptor.element_kind != "class":
            raise InvalidGenerationSourceError(
                descriptor.name,
                INVALID_TARGET_MESSAGE,
                element_kind=descriptor.element_kind,
            )

        source = self.emit(
            descriptor.name,
            descriptor.fields,
            descriptor.overrides(global_defaults),
        )
        return GeneratedFactory(
            class_name=descriptor.name,
            factory_name=f"{descriptor.name}{FACTORY_SUFFIX}",
            source=source,
        )

    def _argument(self, info: _FieldInfo) -> str:
        if info.fake_code == NULL_LITERAL and self.config["elide_null_fallback"]:
            return info.name
        return f"{info.name} ?? {info.fake_code}"


def emit(
    class_name: str,
    fields: Sequence[FieldDescriptor],
    overrides: Optional[DefaultOverrides] = None,
) -> str:
    """Emit a factory with the default emitter configuration."""
    return FactoryEmitter().emit(class_name, fields, overrides)
