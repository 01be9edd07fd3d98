"""
Assembly of `.factory.g.dart` part files.
"""

from pathlib import Path
from typing import Sequence

from modelfactory.schemas import GeneratedFactory
from .config import PART_BANNER_RULE, PART_CONFIG, PART_HEADER


def output_path_for(source_file: Path) -> Path:
    """
    Path of the part file generated for `source_file`.

    Example: lib/models/user.dart -> lib/models/user.factory.g.dart
    """
    return source_file.with_name(source_file.stem + PART_CONFIG["output_extension"])


def part_directive_for(source_file: Path) -> str:
    """The `part` directive the source library must contain."""
    return f"part '{output_path_for(source_file).name}';"


def build_part(source_file: Path, factories: Sequence[GeneratedFactory]) -> str:
    """
    Build the content of the part file for one library.

    Args:
        source_file: The library the part belongs to.
        factories: Emitted factories, in declaration order.

    Returns:
        Part file text, newline-terminated.
    """
    sections = [
        PART_HEADER,
        "",
        f"part of '{source_file.name}';",
        "",
        PART_BANNER_RULE,
        f"// {PART_CONFIG['generator_name']}",
        PART_BANNER_RULE,
        "",
    ]
    header = "\n".join(sections) + "\n"
    body = "\n".join(factory.source for factory in factories)
    return header + body
