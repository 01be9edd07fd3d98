"""
Common CLI helpers shared by command modules.
"""

from typing import Dict, Iterable, Optional

from modelfactory.exceptions import ConfigError


def parse_type_default_options(values: Optional[Iterable[str]]) -> Dict[str, str]:
    """
    Parse repeated `--default TYPE=EXPR` options.

    The split happens at the first `=`, so expressions may contain `=`.

    Raises:
        ConfigError: If an option has no `=` or an empty type.

    Examples:
        ["String='x'", "List<int>=[1]"] -> {"String": "'x'", "List<int>": "[1]"}
    """
    result: Dict[str, str] = {}
    for value in values or []:
        type_str, sep, code = value.partition("=")
        type_str = type_str.strip()
        if not sep or not type_str:
            raise ConfigError(f"Invalid default '{value}': expected TYPE=EXPR")
        result[type_str] = code.strip()
    return result
