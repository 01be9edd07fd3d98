import re

from modelfactory.exceptions import ConfigError
from .dart_lexer import IDENTIFIER

DART_EXTENSION = ".dart"

# Annotation names (last segment, so prefixed imports like `@mf.ModelFactory` match too)
MODEL_ANNOTATION = "ModelFactory"
FIELD_ANNOTATION = "FactoryDefault"

# Named argument of @ModelFactory holding the class-level defaults table
CLASS_DEFAULTS_ARGUMENT = "defaults"

# Dart type names mapped to primitive kinds
PRIMITIVE_KINDS = {
    "String": "string",
    "int": "integer",
    "double": "float",
    "num": "number",
    "bool": "boolean",
    "DateTime": "datetime",
}

LIST_TYPE_NAME = "List"

# Member modifiers that may precede a field's type
FIELD_MODIFIERS = ("static", "final", "late", "const", "covariant", "external", "abstract")

# Regex patterns for declarations following an annotation, tried in order.
# Each pattern must match at the start of the declaration (after annotations).
DECLARATION_QUERIES = [
    ("class", re.compile(rf"(?:(?:abstract|base|final|interface|sealed|mixin)\s+)*class\s+({IDENTIFIER})")),
    ("enum", re.compile(rf"enum\s+({IDENTIFIER})")),
    ("mixin", re.compile(rf"(?:base\s+)?mixin\s+({IDENTIFIER})")),
    ("extension", re.compile(rf"extension\s+(?:type\s+)?({IDENTIFIER})?")),
    ("typedef", re.compile(rf"typedef\s+({IDENTIFIER})")),
    ("function", re.compile(rf"(?:external\s+)?(?:[\w$<>?,.\s]+?\s+)?(?:get\s+)?({IDENTIFIER})\s*(?:<[^()]*>)?\s*\(")),
    ("variable", re.compile(rf"(?:(?:final|const|late|var|static)\s+)*(?:[\w$<>?,.\s]+?\s+)?({IDENTIFIER})\s*[=;]")),
]

ENUM_QUERY = re.compile(rf"\benum\s+({IDENTIFIER})[^{{;]*\{{")
MODEL_ANNOTATION_QUERY = re.compile(rf"@\s*(?:{IDENTIFIER}\.)*{MODEL_ANNOTATION}\b")
PART_DIRECTIVE_QUERY = re.compile(r"^\s*part\s+(['\"])(.+?)\1\s*;", re.MULTILINE)

FIELD_DECLARATION = re.compile(
    rf"^(?P<modifiers>(?:(?:{'|'.join(FIELD_MODIFIERS)})\s+)*)(?P<type>.+?)\s+(?P<name>{IDENTIFIER})$",
    re.DOTALL,
)
TYPE_SHAPE = re.compile(rf"^{IDENTIFIER}(?:\.{IDENTIFIER})*(?:<.*>)?\??$", re.DOTALL)
DECLARATOR = re.compile(rf"^\s*({IDENTIFIER})\s*$")


def validate_extension(file_path) -> None:
    """
    Validate that a path points at a Dart source file.

    Raises:
        ConfigError: If the extension is not supported.
    """
    suffix = getattr(file_path, "suffix", "")
    if suffix != DART_EXTENSION:
        raise ConfigError(
            f"File extension '{suffix}' is not supported. Supported extensions: {DART_EXTENSION}"
        )
