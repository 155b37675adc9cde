"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from typing import Any

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import AnalysisResult

_SEVERITY_STYLES = {
    "critical": "bold red",
    "high": "red",
    "medium": "yellow",
    "low": "green",
}


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("AuditFix", style="bold cyan")
    subtitle = Text("Upload • GitHub • AI fixes", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_issues_table(result: AnalysisResult) -> Table:
    table = Table(title=f"Issues in {result.file_name}")
    table.add_column("Severity", no_wrap=True)
    table.add_column("Type", style="cyan")
    table.add_column("Line", justify="right")
    table.add_column("Description", style="white")
    table.add_column("Suggestion", style="dim")
    for issue in result.issues:
        table.add_row(
            Text(issue.severity.upper(), style=_SEVERITY_STYLES.get(issue.severity, "white")),
            issue.type,
            "" if issue.line_number is None else str(issue.line_number),
            issue.description,
            issue.suggestion,
        )
    return table


def build_summary_text(result: AnalysisResult) -> Text:
    summary = result.summary
    text = Text(f"Total: {summary.total_issues}  ")
    for name in ("critical", "high", "medium", "low"):
        text.append(f"{name}: {getattr(summary, name)}  ", style=_SEVERITY_STYLES[name])
    return text


def build_files_table(listing: dict[str, Any]) -> Table:
    repo = listing.get("repository") or {}
    title = f"{repo.get('owner')}/{repo.get('repo')} @ {repo.get('branch')}"
    table = Table(title=title, caption=f"{listing.get('totalFiles', 0)} code file(s)")
    table.add_column("Directory", style="magenta")
    table.add_column("File", style="cyan")
    table.add_column("Ext", style="dim", no_wrap=True)
    table.add_column("Size", justify="right")
    for item in listing.get("files") or []:
        table.add_row(
            item.get("directory") or ".",
            item.get("displayName") or "",
            item.get("extension") or "",
            str(item.get("size", "")),
        )
    return table


def build_fix_panel(fix: dict[str, Any]) -> Panel:
    """Panel para presentar el fix generado por la IA."""

    body = Text()
    body.append((fix.get("explanation") or "").strip() + "\n")
    recommendations = fix.get("recommendations") or []
    if recommendations:
        body.append("\nRecommendations:\n", style="bold")
        for tip in recommendations:
            body.append(f"- {tip}\n")
    if fix.get("generatedAt"):
        body.append(f"\nGenerated at: {fix['generatedAt']}", style="dim")
    return Panel(body, title=Text("AI fix", style="bold yellow"), border_style="yellow")
