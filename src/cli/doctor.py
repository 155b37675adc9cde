"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.github_tree import github_headers
from adapters.http_client import build_async_client
from core.config import AppSettings, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings, headers: dict[str, str] | None = None) -> tuple[bool, str]:
    try:
        async with build_async_client(settings, extra_headers=headers) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc) or type(exc).__name__


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="AuditFix Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    if (settings.gemini_api_key or "").strip():
        table.add_row("Gemini key", "OK", f"Model {settings.gemini_model}")
    else:
        table.add_row("Gemini key", "MISSING", "/api/gemini-fix will answer 500 with fallback=true")
    if (settings.github_token or "").strip():
        table.add_row("GitHub token", "OK", "Authenticated rate limits")
    else:
        table.add_row("GitHub token", "OPTIONAL", "Anonymous GitHub API (60 requests/hour)")
    table.add_row("Backend URL", "OK", settings.backend_analyze_url)

    # Connectivity (best-effort)
    ok_backend, detail_backend = asyncio.run(_check_http(settings.backend_url, settings))
    table.add_row("Backend connectivity", "OK" if ok_backend else "FAIL", detail_backend)

    ok_github, detail_github = asyncio.run(
        _check_http(f"{settings.github_api_base.rstrip('/')}/rate_limit", settings, github_headers(settings))
    )
    table.add_row("GitHub API", "OK" if ok_github else "FAIL", detail_github)

    _console.print(table)

    if not ok_backend:
        _console.print(
            "\n[yellow]Note:[/yellow] uploads are forwarded to the analysis backend; start it or set AUDITFIX_BACKEND_URL."
        )


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    current = AppSettings()

    backend_url = typer.prompt("Analysis backend URL", default=current.backend_url, show_default=True).strip()
    model = typer.prompt("Gemini model", default=current.gemini_model, show_default=True).strip()
    api_key = typer.prompt("Gemini API key", hide_input=True, default="", show_default=False).strip()
    token = typer.prompt("GitHub token (optional)", hide_input=True, default="", show_default=False).strip()

    if not backend_url or not model:
        raise typer.BadParameter("backend URL and model are required")

    env_path = write_user_env_vars(
        {
            "AUDITFIX_BACKEND_URL": backend_url,
            "AUDITFIX_GEMINI_MODEL": model,
            "AUDITFIX_GEMINI_API_KEY": api_key or None,
            "AUDITFIX_GITHUB_TOKEN": token or None,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
