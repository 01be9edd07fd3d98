"""
Facade for the synthesis module.
Runs generation passes over parsed libraries and writes part files.
"""

from pathlib import Path
from typing import Dict, Iterable, List, Optional

from loguru import logger

from modelfactory.exceptions import InvalidGenerationSourceError, ParserError
from modelfactory.parser import collect_enums, discover_models
from modelfactory.scanner import find_dart_sources
from modelfactory.schemas import GeneratedFactory, GeneratedPart, GenerationIssue, ParsedLibrary
from modelfactory.tracing import trace
from .emitter import FactoryEmitter
from .part_builder import build_part, output_path_for, part_directive_for


def generate_library(
    library: ParsedLibrary,
    global_defaults: Optional[Dict[str, str]] = None,
    emitter: Optional[FactoryEmitter] = None,
) -> GeneratedPart:
    """
    Run one generation pass per annotated element of a library.

    An invalid annotation target is recorded as an issue for that element
    only; the remaining elements are still generated.
    """
    emitter = emitter or FactoryEmitter()
    source_file = Path(library.file_path)
    output_file = output_path_for(source_file)

    factories: List[GeneratedFactory] = []
    issues: List[GenerationIssue] = []

    for descriptor in library.models:
        try:
            factories.append(emitter.emit_class(descriptor, global_defaults))
        except InvalidGenerationSourceError as e:
            logger.error(f"{descriptor.file_path}:{descriptor.line}: {e}")
            issues.append(
                GenerationIssue(
                    element_name=descriptor.name,
                    message=str(e),
                    file_path=descriptor.file_path,
                    line=descriptor.line,
                )
            )

    content = build_part(source_file, factories) if factories else ""

    if factories and output_file.name not in library.part_directives:
        logger.warning(
            f"{source_file} has no {part_directive_for(source_file)} directive; "
            f"the generated factories will not be visible to the library"
        )

    return GeneratedPart(
        source_file=str(source_file),
        output_file=str(output_file),
        factories=factories,
        issues=issues,
        content=content,
    )


def write_part(part: GeneratedPart) -> bool:
    """
    Write a generated part to disk. Parts without factories are skipped.

    Returns:
        True if the file was written.
    """
    if not part.factories:
        return False
    output_file = Path(part.output_file)
    output_file.write_text(part.content, encoding="utf-8")
    part.written = True
    logger.info(f"Wrote {output_file} ({len(part.factories)} factory/factories)")
    return True


def _unreadable_part(error: ParserError) -> GeneratedPart:
    source_file = Path(error.file_path)
    return GeneratedPart(
        source_file=str(source_file),
        output_file=str(output_path_for(source_file)),
        issues=[
            GenerationIssue(
                element_name=source_file.name,
                message=str(error),
                file_path=str(source_file),
            )
        ],
    )


@trace
def generate_project(
    paths: Iterable[Path],
    global_defaults: Optional[Dict[str, str]] = None,
    write: bool = True,
    respect_gitignore: bool = True,
    enum_roots: Optional[Iterable[Path]] = None,
) -> List[GeneratedPart]:
    """
    Scan, discover and generate factories for a set of files/directories.

    Args:
        paths: Files and/or directories to process.
        global_defaults: Type-level override map (see UserConfig.get_type_defaults).
        write: If False, nothing is written (dry run).
        respect_gitignore: Honor .gitignore while walking directories.
        enum_roots: Directories scanned for enum declarations in addition to
            `paths`, so a model can use an enum declared anywhere in the project.

    Returns:
        One GeneratedPart per library containing at least one annotated
        element, plus one per unreadable source (carrying the issue).
    """
    sources = find_dart_sources(paths, respect_gitignore=respect_gitignore)

    enum_registry = {}
    if enum_roots:
        enum_registry = collect_enums(find_dart_sources(enum_roots, respect_gitignore=respect_gitignore))

    failures: List[ParserError] = []
    libraries = discover_models(sources, enum_registry, failures=failures)
    emitter = FactoryEmitter()

    parts = [_unreadable_part(error) for error in failures]
    for library in libraries:
        if not library.models:
            continue
        part = generate_library(library, global_defaults, emitter)
        if write:
            write_part(part)
        parts.append(part)

    return parts
