"""
CLI Config Commands

show: Print the merged configuration
set-default: Persist a global (type-level) default
"""

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from modelfactory.user_config import UserConfig
from .config import CLIConfig
from .output import echo, get_console, print_error, print_json

app = typer.Typer()
console = get_console()


@app.command("show")
def show_cmd(
    project_root: Optional[Path] = typer.Option(None, "--project-root", help="Project root (defaults to CWD)", file_okay=False),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show the merged configuration (defaults, global, local, build.yaml).
    """
    config = UserConfig(project_root)

    if CLIConfig.is_machine_mode() or json_output:
        print_json(config.get_all())
        return

    type_defaults = config.get_type_defaults()
    if not type_defaults:
        console.print("[dim]No type defaults configured.[/dim]")
    else:
        table = Table(title="Type defaults")
        table.add_column("Type", style="cyan")
        table.add_column("Expression", style="green")
        for type_str, code in sorted(type_defaults.items()):
            table.add_row(type_str, code)
        console.print(table)

    console.print(f"[dim]Respect .gitignore: {config.get('generator.respect_gitignore')}[/dim]")


@app.command("set-default")
def set_default_cmd(
    type_str: str = typer.Argument(..., help="Rendered type string, e.g. String or List<int>"),
    code: str = typer.Argument(..., help="Dart expression to use as the default"),
    is_global: bool = typer.Option(False, "--global", help="Write to ~/.modelfactory/config.json"),
    project_root: Optional[Path] = typer.Option(None, "--project-root", help="Project root (defaults to CWD)", file_okay=False),
):
    """
    Persist a type-level default.

    Examples:
        modelfactory config set-default String "'lorem'"
        modelfactory config set-default DateTime "DateTime(2024)" --global
    """
    config = UserConfig(project_root)
    if not config.set_type_default(type_str, code, is_global=is_global):
        print_error(f"Could not save default for '{type_str}'", code="CONFIG_WRITE_FAILED")
        raise typer.Exit(code=1)

    if CLIConfig.is_machine_mode():
        print_json({"command": "config.set-default", "status": "success", "type": type_str, "code": code})
    else:
        echo(f"Saved default for {type_str}: {code}")
