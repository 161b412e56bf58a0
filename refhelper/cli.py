from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from refhelper import __version__
from refhelper.command_catalog import get_browse_commands, get_command_catalog
from refhelper.loader import discover_languages, is_remote_source, load_commands
from refhelper.logic import filter_commands, get_command_name, list_categories
from refhelper.render import THEMES, ExpansionState, build_table, render_status
from refhelper.session import ReferenceSession
from refhelper.utils.config import load_config
from refhelper.utils.types import ValidationReport
from refhelper.validator import validate_data_root

app = typer.Typer(help="Searchable reference tables for HTML, CSS, Python, shell and SQL.")
validate_app = typer.Typer(help="Validate every bundled reference dataset.", add_completion=False)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show refhelper version and exit.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug details to stderr."),
) -> None:
    del version
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _console(theme: Optional[str] = None) -> Console:
    if theme is None:
        theme = str(load_config().get("ui", {}).get("theme", "light"))
    return Console(theme=THEMES.get(theme, THEMES["light"]))


def _resolve_source(source: Optional[str]) -> str:
    if source:
        return source
    return str(load_config().get("data", {}).get("source", "datasets"))


def _print_report(report: ValidationReport) -> None:
    typer.echo("Starting data validation...")
    for item in report.files:
        if item.path != report.data_root:
            typer.echo(f"Validating {Path(item.path).name}...")
        for error in item.errors:
            typer.echo(f"❌ {error}", err=True)

    if report.passed:
        typer.echo("\n✅ All data files are valid.")
    else:
        typer.echo("\n❌ Validation Failed.", err=True)


@app.command()
def search(
    language: str = typer.Argument(..., help="Dataset language, e.g. html, css, python, shell, sql."),
    term: str = typer.Option("", "--search", "-s", help="Free-text search term."),
    category: str = typer.Option("", "--category", "-c", help="Exact category to keep."),
    expand: Optional[List[str]] = typer.Option(
        None,
        "--expand",
        "-e",
        help="Show the tips of this entry (repeatable).",
    ),
    expand_all: bool = typer.Option(False, "--expand-all", help="Show the tips of every entry."),
    source: Optional[str] = typer.Option(None, help="Data root directory or http(s) base URL."),
    as_json: bool = typer.Option(False, "--as-json", help="Print matching records as JSON"),
) -> None:
    config = load_config()
    result = load_commands(language, _resolve_source(source), http_settings=config.get("http", {}))
    console = _console()
    if not result.ok:
        console.print(render_status(result.status, "error"))
        raise typer.Exit(code=1)

    matches = filter_commands(result.commands, term, category)
    if as_json:
        typer.echo(json.dumps(matches, indent=2, ensure_ascii=False))
        return

    expanded = ExpansionState()
    for record in matches:
        name = get_command_name(record)
        if expand_all or name.lower() in {item.lower() for item in expand or []}:
            expanded.expand(name)
    console.print(build_table(matches, search_term=term.strip(), expanded=expanded, title=f"{language} reference"))
    console.print(f"{len(matches)} of {len(result.commands)} entries")


@app.command()
def categories(
    language: str = typer.Argument(..., help="Dataset language."),
    source: Optional[str] = typer.Option(None, help="Data root directory or http(s) base URL."),
) -> None:
    config = load_config()
    result = load_commands(language, _resolve_source(source), http_settings=config.get("http", {}))
    if not result.ok:
        typer.echo(result.status, err=True)
        raise typer.Exit(code=1)
    for category in list_categories(result.commands):
        typer.echo(category)


@app.command()
def languages(
    source: Optional[str] = typer.Option(None, help="Local data root directory."),
) -> None:
    resolved = _resolve_source(source)
    if is_remote_source(resolved):
        typer.echo("Language discovery needs a local data root.", err=True)
        raise typer.Exit(code=1)
    found = discover_languages(Path(resolved))
    if not found:
        typer.echo(f"No datasets found under {resolved}", err=True)
        raise typer.Exit(code=1)
    for language in found:
        typer.echo(language)


@app.command()
def validate(
    data_root: Optional[Path] = typer.Option(None, help="Directory holding <language>-reference-helper folders."),
    as_json: bool = typer.Option(False, "--as-json", help="Print the validation report as JSON"),
) -> None:
    root = data_root or Path(str(load_config().get("data", {}).get("root", "datasets")))
    report = validate_data_root(root)
    if as_json:
        payload = asdict(report)
        payload["passed"] = report.passed
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        _print_report(report)
    if not report.passed:
        raise typer.Exit(code=1)


@validate_app.command()
def validate_data() -> None:
    root = Path(str(load_config().get("data", {}).get("root", "datasets")))
    report = validate_data_root(root)
    _print_report(report)
    raise typer.Exit(code=0 if report.passed else 1)


def _browse_help(console: Console) -> None:
    table = Table(title="browse commands", show_header=False)
    table.add_column("Command", justify="left")
    table.add_column("Effect", justify="left")
    for command, effect in get_browse_commands():
        table.add_row(command, effect)
    console.print(table)


def _show(session: ReferenceSession, console: Console) -> None:
    if session.status:
        console.print(render_status(session.status, session.status_kind))
        return
    console.print(session.render())
    filters = [f"search={session.search_term!r}"] if session.search_term else []
    if session.category:
        filters.append(f"category={session.category!r}")
    summary = f"{len(session.visible())} of {len(session.commands)} entries"
    if filters:
        summary = f"{summary} ({', '.join(filters)})"
    console.print(summary)


@app.command()
def browse(
    language: Optional[str] = typer.Argument(None, help="Dataset language to open first."),
    source: Optional[str] = typer.Option(None, help="Data root directory or http(s) base URL."),
) -> None:
    session = ReferenceSession(source=source)
    console = _console(session.theme)
    session.load(language or session.language)
    _show(session, console)

    while True:
        try:
            line = typer.prompt(f"{session.language}>", default="", show_default=False)
        except (EOFError, typer.Abort):
            break

        command, _, argument = line.strip().partition(" ")
        argument = argument.strip()
        if command in {":quit", ":q"}:
            break
        if command == ":help":
            _browse_help(console)
            continue
        if command == ":lang":
            if not argument:
                console.print(render_status("Usage: :lang LANGUAGE", "error"))
                continue
            session.load(argument)
        elif command == ":cat":
            session.set_category(argument)
        elif command == ":open":
            if session.toggle(argument) is None:
                console.print(render_status(f"No entry named {argument!r}.", "error"))
                continue
        elif command == ":theme":
            console = _console(session.toggle_theme())
        else:
            session.set_search(line)
        _show(session, console)


@app.command("command-catalog")
def command_catalog() -> None:
    for command in get_command_catalog():
        typer.echo(command)


def run() -> None:
    app()


def run_validate_data() -> None:
    validate_app()
