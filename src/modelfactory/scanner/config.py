# Default patterns to ignore, mimicking common Dart project gitignore settings
DEFAULT_IGNORE_PATTERNS = [
    ".git/",
    ".dart_tool/",
    ".pub-cache/",
    ".modelfactory/",
    "build/",
    "*.g.dart",
]

SOURCE_EXTENSION = ".dart"
