from .facade import find_dart_sources
from .config import DEFAULT_IGNORE_PATTERNS

__all__ = ["find_dart_sources", "DEFAULT_IGNORE_PATTERNS"]
