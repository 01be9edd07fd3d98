"""
Configuration for factory emission and part-file assembly.
"""

# Emission layout
EMITTER_CONFIG = {
    "indent": "  ",                  # Dart style: two spaces
    "build_method": "build",         # Name of the static builder
    "elide_null_fallback": True,     # Emit `x: x` instead of `x: x ?? null`
}

# Part file layout
PART_CONFIG = {
    "output_extension": ".factory.g.dart",
    "generator_name": "ModelFactoryGenerator",
}

PART_HEADER = "// GENERATED CODE - DO NOT MODIFY BY HAND"
PART_BANNER_RULE = "// " + "*" * 74

# Error message for annotations on non-class elements
INVALID_TARGET_MESSAGE = "@ModelFactory can only be used on classes"
