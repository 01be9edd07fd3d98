import os
from pathlib import Path
from typing import Iterable, List

import pathspec

from modelfactory.logging_config import logger
from .config import DEFAULT_IGNORE_PATTERNS, SOURCE_EXTENSION


def _load_ignore_spec(directory: Path, respect_gitignore: bool) -> pathspec.PathSpec:
    all_patterns = list(DEFAULT_IGNORE_PATTERNS)
    if respect_gitignore:
        gitignore_path = directory / ".gitignore"
        if gitignore_path.is_file():
            try:
                with open(gitignore_path, "r") as f:
                    gitignore_patterns = f.read().splitlines()
                    all_patterns.extend(gitignore_patterns)
                    logger.debug(f"Loaded {len(gitignore_patterns)} patterns from '{gitignore_path}'")
            except OSError as e:
                logger.warning(f"Could not read .gitignore file at '{gitignore_path}'. Error: {e}")

    return pathspec.GitIgnoreSpec.from_lines(all_patterns)


def _walk(directory: Path, spec: pathspec.PathSpec) -> List[Path]:
    found: List[Path] = []
    for root, dirs, files in os.walk(directory):
        root_path = Path(root)

        # Prune ignored directories in place so os.walk never descends into them
        original_dirs = list(dirs)
        dirs[:] = []
        for d in sorted(original_dirs):
            dir_path_to_check = (root_path / d).relative_to(directory)
            if spec.match_file(f"{dir_path_to_check}/"):
                logger.debug(f"Ignoring directory '{dir_path_to_check}' due to ignore rules.")
            else:
                dirs.append(d)

        for file_name in files:
            file_path = root_path / file_name
            relative_path = file_path.relative_to(directory)
            if file_path.suffix != SOURCE_EXTENSION:
                continue
            if spec.match_file(str(relative_path)):
                logger.debug(f"Ignoring '{relative_path}' due to ignore rules")
                continue
            found.append(file_path)
    return found


def find_dart_sources(paths: Iterable[Path], respect_gitignore: bool = True) -> List[Path]:
    """
    Collect the Dart sources to generate factories for.

    Args:
        paths: Files and/or directories. Files are taken as given (generated
            `*.g.dart` files excepted); directories are walked recursively.
        respect_gitignore: If True, a directory's .gitignore is honored.

    Returns:
        Sorted, de-duplicated list of source files.
    """
    found = set()
    generated = pathspec.GitIgnoreSpec.from_lines(["*.g.dart"])

    for path in paths:
        path = Path(path)
        if path.is_dir():
            spec = _load_ignore_spec(path, respect_gitignore)
            found.update(_walk(path, spec))
        elif path.is_file():
            if path.suffix == SOURCE_EXTENSION and not generated.match_file(path.name):
                found.add(path)
            else:
                logger.debug(f"Skipping non-source file '{path}'")
        else:
            logger.warning(f"Path does not exist: '{path}'")

    sources = sorted(found)
    logger.info(f"Found {len(sources)} Dart source file(s)")
    return sources
