"""
Configuration for default-value resolution.

Literals are Dart expressions, emitted verbatim into generated factories.
"""

# Literal emitted for nullable fields without a field- or class-level override
NULL_LITERAL = "null"

# Dart spelling of each primitive kind
PRIMITIVE_TYPE_NAMES = {
    "string": "String",
    "integer": "int",
    "float": "double",
    "number": "num",
    "boolean": "bool",
    "datetime": "DateTime",
}

# Built-in fake values per primitive kind (tier 5)
BUILTIN_DEFAULTS = {
    "string": "''",
    "integer": "0",
    "float": "0.0",
    "number": "0",
    "boolean": "false",
    "datetime": "DateTime(2000, 1, 1)",
}

# Name of the generated factory type and the call used for nested models
FACTORY_SUFFIX = "Factory"
NESTED_FACTORY_CALL = "{type_name}" + FACTORY_SUFFIX + ".build()"
