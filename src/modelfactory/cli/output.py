"""
CLI Output Utilities

Machine-aware output functions that adapt based on machine mode.
"""

import json
from typing import Any, Optional

import typer
from rich.console import Console

from modelfactory.cli.config import CLIConfig

_console = Console()


def echo(message: str = "", **kwargs) -> None:
    """
    Print a message respecting machine mode.
    In machine mode, prints plain text.
    """
    if CLIConfig.is_machine_mode():
        print(message, **kwargs)
    else:
        typer.echo(message, **kwargs)


def print_json(data: Any, minified: Optional[bool] = None) -> None:
    """
    Print JSON data respecting machine mode.
    In machine mode, always minifies. In human mode, pretty prints.
    """
    if minified is None:
        minified = CLIConfig.is_machine_mode()

    if minified:
        echo(json.dumps(data, separators=(',', ':')))
    else:
        echo(json.dumps(data, indent=2))


def print_error(message: str, code: Optional[str] = None, input_value: Optional[str] = None) -> None:
    """
    Print an error message respecting machine mode.
    In machine mode, outputs a structured JSON error.
    """
    if CLIConfig.is_machine_mode():
        error_obj = {
            "status": "error",
            "message": message
        }
        if code:
            error_obj["code"] = code
        if input_value:
            error_obj["input"] = input_value
        print_json(error_obj)
    else:
        typer.echo(f"Error: {message}", err=True)


def get_console() -> Console:
    """
    Get the console instance for rich output.
    Note: Direct console usage should check machine mode.
    """
    return _console
