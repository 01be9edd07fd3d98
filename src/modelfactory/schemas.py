from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from modelfactory.logging_config import logger


PrimitiveKind = Literal["string", "integer", "float", "number", "boolean", "datetime"]
ElementKind = Literal["class", "enum", "mixin", "extension", "typedef", "function", "variable", "unknown"]


def drop_malformed_entries(raw: Any, source: str = "overrides") -> Dict[str, str]:
    """
    Keep only string -> string entries of an override mapping.

    Anything else is logged and dropped so that resolution falls through
    to the next tier instead of failing the generation pass.
    """
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        logger.warning(f"Ignoring {source}: expected a mapping, got {type(raw).__name__}")
        return {}

    result: Dict[str, str] = {}
    for key, value in raw.items():
        if isinstance(key, str) and isinstance(value, str):
            result[key] = value
        else:
            logger.warning(f"Ignoring malformed entry in {source}: {key!r} -> {value!r}")
    return result


# Type descriptor model

class PrimitiveType(BaseModel):
    """
    A built-in scalar type (String, int, double, num, bool, DateTime).
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["primitive"] = "primitive"
    primitive: PrimitiveKind


class EnumType(BaseModel):
    """
    An enum declaration. Constants keep their declaration order.
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["enum"] = "enum"
    name: str
    constants: List[str] = Field(default_factory=list)


class ListType(BaseModel):
    """
    A List<T> type. element_nullable only affects how the type is rendered.
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["list"] = "list"
    name: Literal["List"] = "List"
    element_type: "TypeRef"
    element_nullable: bool = False


class NamedType(BaseModel):
    """
    Any other declared type, assumed to be a model with its own factory.
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["named"] = "named"
    name: str


TypeRef = Annotated[
    Union[PrimitiveType, EnumType, ListType, NamedType],
    Field(discriminator="kind"),
]

ListType.model_rebuild()


class FieldDescriptor(BaseModel):
    """
    One public instance field of an annotated model class.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    declared_type: TypeRef
    is_nullable: bool = False


class DefaultOverrides(BaseModel):
    """
    The three override layers consulted by the resolver.

    field_level and class_level are keyed by field name, global_level by the
    rendered type string (e.g. "String", "List<String>").
    """
    model_config = ConfigDict(frozen=True)

    field_level: Dict[str, str] = Field(default_factory=dict)
    class_level: Dict[str, str] = Field(default_factory=dict)
    global_level: Dict[str, str] = Field(default_factory=dict)

    @field_validator("field_level", "class_level", "global_level", mode="before")
    @classmethod
    def _drop_malformed(cls, value: Any, info) -> Dict[str, str]:
        return drop_malformed_entries(value, source=info.field_name)


# Discovery results

class ClassDescriptor(BaseModel):
    """
    An element annotated with @ModelFactory, as found by the discovery front-end.
    """
    name: str
    element_kind: ElementKind = "class"
    fields: List[FieldDescriptor] = Field(default_factory=list)
    class_defaults: Dict[str, str] = Field(default_factory=dict)
    field_defaults: Dict[str, str] = Field(default_factory=dict)
    file_path: Optional[str] = None
    line: Optional[int] = None

    @field_validator("class_defaults", "field_defaults", mode="before")
    @classmethod
    def _drop_malformed(cls, value: Any, info) -> Dict[str, str]:
        return drop_malformed_entries(value, source=info.field_name)

    def overrides(self, global_level: Optional[Dict[str, str]] = None) -> DefaultOverrides:
        """Build the override layers for one generation pass over this class."""
        return DefaultOverrides(
            field_level=self.field_defaults,
            class_level=self.class_defaults,
            global_level=global_level or {},
        )


class ParsedLibrary(BaseModel):
    """
    Everything discovered in a single Dart source file.
    """
    file_path: str
    models: List[ClassDescriptor] = Field(default_factory=list)
    enums: Dict[str, List[str]] = Field(default_factory=dict)
    part_directives: List[str] = Field(default_factory=list)


# Generation results

class GeneratedFactory(BaseModel):
    class_name: str
    factory_name: str
    source: str


class GenerationIssue(BaseModel):
    """
    A non-recoverable problem with one annotated element.
    """
    element_name: str
    message: str
    file_path: Optional[str] = None
    line: Optional[int] = None


class GeneratedPart(BaseModel):
    """
    The generated part file for one source library.
    """
    source_file: str
    output_file: str
    factories: List[GeneratedFactory] = Field(default_factory=list)
    issues: List[GenerationIssue] = Field(default_factory=list)
    content: str = ""
    written: bool = False
