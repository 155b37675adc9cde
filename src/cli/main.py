"""CLI principal (Typer).

Comandos:
- `serve`: levanta el gateway HTTP con uvicorn.
- `analyze` / `repo` / `fix`: cliente del gateway (lo que hace el front-end).
- `doctor`: diagnóstico de configuración y conectividad.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
import uvicorn
from pydantic import ValidationError
from rich.console import Console

from adapters import gateway_client
from cli import doctor
from cli.ui_components import (
    build_files_table,
    build_fix_panel,
    build_issues_table,
    build_summary_text,
    print_banner,
)
from core.config import AppSettings
from core.domain.models import AnalysisResult
from core.errors import AuditFixError
from core.logging_setup import configure_logging

app = typer.Typer(no_args_is_help=True, help="AuditFix: security audit gateway and client.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def _fail(exc: AuditFixError) -> None:
    _console.print(f"[red]Error:[/red] {exc.message}")
    raise typer.Exit(code=1)


@app.command()
def serve(
    host: str | None = typer.Option(None, help="Bind address (default from config)."),
    port: int | None = typer.Option(None, help="Bind port (default from config)."),
    reload: bool = typer.Option(False, help="Auto-reload on code changes (development)."),
) -> None:
    """Run the HTTP gateway."""

    settings = AppSettings()
    configure_logging(settings.log_level)
    print_banner(_console)
    uvicorn.run(
        "api.app:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_config=None,
    )


@app.command()
def analyze(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="File to analyse."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON."),
) -> None:
    """Validate a file locally and submit it for analysis."""

    settings = AppSettings()
    try:
        data = asyncio.run(gateway_client.analyze_file(path, settings=settings))
    except AuditFixError as exc:
        _fail(exc)
        return

    if as_json:
        _console.print_json(json.dumps(data))
        return

    try:
        result = AnalysisResult.model_validate(data)
    except ValidationError:
        # Formato del backend desconocido: mostrarlo tal cual.
        _console.print_json(json.dumps(data))
        return

    if not result.issues:
        _console.print(f"[green]No issues found in {result.file_name}.[/green]")
    else:
        _console.print(build_issues_table(result))
    _console.print(build_summary_text(result))


@app.command()
def repo(
    github_url: str = typer.Argument(..., help="owner/repo, github.com/owner/repo or a full URL."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw listing as JSON."),
) -> None:
    """List the code files of a public GitHub repository."""

    settings = AppSettings()
    try:
        listing = asyncio.run(gateway_client.list_repository(github_url, settings=settings))
    except AuditFixError as exc:
        _fail(exc)
        return

    if as_json:
        _console.print_json(json.dumps(listing))
        return
    _console.print(build_files_table(listing))


@app.command()
def fix(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="File containing the issue."),
    message: str = typer.Option(..., "--message", "-m", help="Issue description."),
    severity: str = typer.Option("medium", "--severity", "-s"),
    line: int = typer.Option(1, "--line", "-l", min=1),
    column: int = typer.Option(1, "--column", "-c", min=1),
    language: str = typer.Option("javascript", "--language"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the fixed code here."),
) -> None:
    """Ask the model for a fix of one issue."""

    settings = AppSettings()
    code = path.read_text(encoding="utf-8")
    try:
        data = asyncio.run(
            gateway_client.request_fix(
                original_code=code,
                issue={"message": message, "severity": severity, "line": line, "column": column},
                file_name=path.name,
                language=language,
                settings=settings,
            )
        )
    except AuditFixError as exc:
        _fail(exc)
        return

    _console.print(build_fix_panel(data))
    fixed_code = data.get("fixedCode") or ""
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(fixed_code, encoding="utf-8")
        _console.print(f"[green]Fixed code written to:[/green] {output}")
    else:
        _console.print(fixed_code, markup=False, highlight=False)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
