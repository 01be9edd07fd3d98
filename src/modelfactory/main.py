from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from modelfactory import __version__
from modelfactory.cli import config_cmd
from modelfactory.cli.common import parse_type_default_options
from modelfactory.cli.config import CLIConfig
from modelfactory.cli.output import echo, get_console, print_error, print_json
from modelfactory.exceptions import ConfigError, ModelFactoryError
from modelfactory.logging_config import logger, setup_logging
from modelfactory.parser import collect_enums, parse_file
from modelfactory.resolution import DefaultResolver, render_type
from modelfactory.scanner import find_dart_sources
from modelfactory.synthesis import generate_project
from modelfactory.user_config import UserConfig

app = typer.Typer()
console = get_console()


@app.callback()
def global_options(
    human: bool = typer.Option(
        False,
        "--human",
        "-H",
        help="Enable human mode: tables and colors (also via MODELFACTORY_HUMAN_MODE env var)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output (human mode only)"),
):
    """
    modelfactory: generate Dart factory builders for annotated model classes.

    Machine mode is the default (JSON output, no console logging).
    Use --human/-H for pretty output.
    """
    CLIConfig.set_machine_mode(False if human else None)
    setup_logging(
        level="DEBUG" if verbose else "INFO",
        suppress_console=CLIConfig.is_machine_mode(),
        force=True,
    )


app.add_typer(config_cmd.app, name="config", help="Configuration commands (show, set-default)")


def _load_global_defaults(config: UserConfig, defaults: Optional[List[str]]):
    try:
        cli_defaults = parse_type_default_options(defaults)
    except ConfigError as e:
        print_error(str(e), code="INVALID_DEFAULT")
        raise typer.Exit(code=2)
    return {**config.get_type_defaults(), **cli_defaults}


@app.command()
def generate(
    paths: List[Path] = typer.Argument(..., help="Dart files or directories to process", exists=True),
    dry_run: bool = typer.Option(False, "--dry-run", help="Generate without writing part files"),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
    defaults: Optional[List[str]] = typer.Option(None, "--default", "-d", help="Type default as TYPE=EXPR (repeatable)"),
    project_root: Optional[Path] = typer.Option(None, "--project-root", help="Project root for configuration (defaults to CWD)", file_okay=False),
    no_gitignore: bool = typer.Option(False, "--no-gitignore", help="Do not honor .gitignore while scanning"),
):
    """
    Generate <name>.factory.g.dart parts for every @ModelFactory class.

    Examples:
        modelfactory generate lib/
        modelfactory generate lib/models/user.dart --dry-run --json
        modelfactory generate lib/ -d "String='lorem'"
    """
    config = UserConfig(project_root)
    global_defaults = _load_global_defaults(config, defaults)
    respect_gitignore = bool(config.get("generator.respect_gitignore", True)) and not no_gitignore

    try:
        parts = generate_project(
            paths,
            global_defaults=global_defaults,
            write=not dry_run,
            respect_gitignore=respect_gitignore,
            enum_roots=[project_root or Path.cwd()],
        )
    except ModelFactoryError as e:
        print_error(str(e), code="GENERATION_FAILED")
        raise typer.Exit(code=1)

    issues = [issue for part in parts for issue in part.issues]

    if CLIConfig.is_machine_mode() or json_output:
        exclude = None if dry_run else {"content"}
        print_json({
            "command": "generate",
            "status": "error" if issues else "success",
            "dry_run": dry_run,
            "parts": [part.model_dump(exclude=exclude) for part in parts],
            "factory_count": sum(len(part.factories) for part in parts),
            "issue_count": len(issues),
        })
    else:
        if not parts:
            console.print("[yellow]No @ModelFactory classes found.[/yellow]")

        table = Table(title="Generated factories")
        table.add_column("Source", style="cyan")
        table.add_column("Output")
        table.add_column("Factories", style="green")
        table.add_column("Status")
        for part in parts:
            status = "dry run" if dry_run else ("written" if part.written else "skipped")
            if part.issues:
                status = f"[red]{len(part.issues)} error(s)[/red]"
            table.add_row(
                part.source_file,
                part.output_file,
                ", ".join(f.factory_name for f in part.factories) or "-",
                status,
            )
        if parts:
            console.print(table)

        for issue in issues:
            console.print(f"[red]{issue.file_path}:{issue.line}: {escape(issue.message)}[/red]")

        if dry_run:
            for part in parts:
                if part.content:
                    console.print(f"\n[bold]{part.output_file}[/bold]")
                    console.print(Syntax(part.content, "dart"))

    if issues:
        raise typer.Exit(code=1)


@app.command()
def inspect(
    file: Path = typer.Argument(..., help="Dart file to inspect", exists=True, dir_okay=False),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
    defaults: Optional[List[str]] = typer.Option(None, "--default", "-d", help="Type default as TYPE=EXPR (repeatable)"),
    project_root: Optional[Path] = typer.Option(None, "--project-root", help="Project root for configuration and enum lookup", file_okay=False),
):
    """
    Show the fields of each @ModelFactory class and how their defaults resolve.
    """
    config = UserConfig(project_root)
    global_defaults = _load_global_defaults(config, defaults)

    try:
        enum_sources = find_dart_sources([project_root or file.parent])
        library = parse_file(file, collect_enums(enum_sources))
    except ModelFactoryError as e:
        print_error(str(e), code="PARSE_FAILED", input_value=str(file))
        raise typer.Exit(code=1)

    models = []
    for descriptor in library.models:
        resolver = DefaultResolver(descriptor.overrides(global_defaults))
        fields = []
        for field in descriptor.fields:
            code, tier = resolver.resolve_with_tier(field)
            fields.append({
                "name": field.name,
                "type": render_type(field.declared_type) + ("?" if field.is_nullable else ""),
                "nullable": field.is_nullable,
                "default": code,
                "tier": tier,
            })
        models.append({
            "name": descriptor.name,
            "kind": descriptor.element_kind,
            "line": descriptor.line,
            "fields": fields,
        })

    logger.debug(f"Inspected {len(models)} element(s) in {file}")

    if CLIConfig.is_machine_mode() or json_output:
        print_json({"command": "inspect", "file": str(file), "models": models})
        return

    if not models:
        console.print(f"[yellow]No @ModelFactory elements in {file}[/yellow]")
    for model in models:
        if model["kind"] != "class":
            console.print(f"[red]{model['name']} (line {model['line']}): @ModelFactory on a {model['kind']}[/red]")
            continue
        table = Table(title=f"{model['name']} (line {model['line']})")
        table.add_column("Field", style="cyan")
        table.add_column("Type")
        table.add_column("Default", style="green")
        table.add_column("Source", style="dim")
        for field in model["fields"]:
            table.add_row(field["name"], field["type"], escape(field["default"]), field["tier"])
        console.print(table)


@app.command()
def version():
    """
    Prints the current version of modelfactory.
    """
    echo(f"modelfactory v{__version__}")


if __name__ == "__main__":
    app()
