"""
modelfactory Synthesis Module

Emits factory classes and assembles them into generated part files.
"""

from .emitter import FactoryEmitter, emit
from .part_builder import build_part, output_path_for, part_directive_for
from .facade import generate_library, generate_project, write_part
from .config import EMITTER_CONFIG, PART_CONFIG

__all__ = [
    # Emission
    "FactoryEmitter",
    "emit",

    # Part files
    "build_part",
    "output_path_for",
    "part_directive_for",

    # Orchestration
    "generate_library",
    "generate_project",
    "write_part",

    # Configuration
    "EMITTER_CONFIG",
    "PART_CONFIG",
]
