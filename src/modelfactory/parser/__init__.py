"""
This facade exposes the public API for the parser module.
"""
from .facade import parse_file, discover_models, collect_enums
from .type_parser import parse_type

__all__ = ["parse_file", "discover_models", "collect_enums", "parse_type"]
