from pathlib import Path
from typing import Dict, List, Optional, Sequence

from modelfactory.exceptions import ParserError
from modelfactory.logging_config import logger
from modelfactory.schemas import ParsedLibrary
from .config import validate_extension
from .dart_lexer import build_views
from .dart_parser import extract_enums, parse_dart_source


def _read_source(file_path: Path) -> str:
    try:
        return file_path.read_text(encoding="utf-8")
    except (IOError, UnicodeDecodeError) as e:
        raise ParserError(str(file_path), str(e)) from e


def parse_file(file_path: Path, enum_registry: Optional[Dict[str, List[str]]] = None) -> ParsedLibrary:
    """
    Parses a single Dart file to find @ModelFactory-annotated declarations.

    Enums referenced by fields are resolved against the file itself and the
    optional project-wide `enum_registry`.

    Raises:
        ConfigError: If the file is not a Dart source.
        ParserError: If the file cannot be read.
    """
    validate_extension(file_path)
    content = _read_source(file_path)
    return parse_dart_source(file_path, content, enum_registry)


def collect_enums(paths: Sequence[Path]) -> Dict[str, List[str]]:
    """
    Build a project-wide enum registry (name -> ordered constants).

    Unreadable files are logged and skipped.
    """
    enum_registry: Dict[str, List[str]] = {}
    for file_path in paths:
        try:
            content = _read_source(file_path)
        except ParserError as e:
            logger.warning(f"Skipping enums of unreadable file: {e}")
            continue
        enum_registry.update(extract_enums(build_views(content)))
    return enum_registry


def discover_models(
    paths: Sequence[Path],
    enum_registry: Optional[Dict[str, List[str]]] = None,
    failures: Optional[List[ParserError]] = None,
) -> List[ParsedLibrary]:
    """
    Parses several Dart files sharing one enum registry.

    Enums are collected from every file first, so a model can use an enum
    declared in another library.

    Args:
        paths: Dart sources to parse.
        enum_registry: Enums declared outside `paths` (e.g. the rest of the
            project). Enums found in `paths` take precedence.
        failures: If given, unreadable files are appended here and skipped
            instead of raising.

    Raises:
        ParserError: If a file cannot be read and `failures` is None.
    """
    sources = {}
    registry: Dict[str, List[str]] = dict(enum_registry or {})

    for file_path in paths:
        try:
            content = _read_source(file_path)
        except ParserError as e:
            if failures is None:
                raise
            logger.error(str(e))
            failures.append(e)
            continue
        sources[file_path] = content
        registry.update(extract_enums(build_views(content)))

    logger.debug(f"Enum registry built from {len(sources)} file(s): {len(registry)} enum(s)")

    libraries = [
        parse_dart_source(file_path, content, registry)
        for file_path, content in sources.items()
    ]
    logger.info(
        f"Discovered {sum(len(lib.models) for lib in libraries)} annotated element(s) "
        f"in {len(libraries)} file(s)"
    )
    return libraries
