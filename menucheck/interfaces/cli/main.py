"""
CLI Main - Typer-based command-line interface.

Usage:
    menucheck review path/to/cardapio.pdf
    menucheck review path/to/cardapio.pdf --reference path/to/precos.docx
    menucheck serve
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from menucheck.adapters.documents import DocumentKind, detect_kind
from menucheck.config import InputValidationError, MenuCheckError, get_settings
from menucheck.domains.review import AnalysisOutcome, ReviewReport, friendly_message

app = typer.Typer(
    name="menucheck",
    help="MenuCheck - AI menu proofreading and price checking",
    add_completion=False,
)
console = Console()

DISCREPANCY_TITLES = {
    "price_mismatch": ("Inconsistência de Preço", "red"),
    "missing_in_menu": ("Item Faltando no Cardápio", "white"),
    "missing_in_reference": ("Item Extra no Cardápio (Não na Referência)", "yellow"),
}


def _print_error(error: MenuCheckError) -> None:
    console.print(f"[red]Error:[/red] {escape(friendly_message(error))}")


def _require_kind(path: Path, expected: DocumentKind) -> None:
    """Reject a file whose extension does not match its role."""
    if detect_kind(path.name) is not expected:
        raise InputValidationError(
            f"Por favor, selecione um arquivo {expected.value.upper()} válido.",
            {"filename": path.name},
        )


@app.command()
def review(
    menu_path: Path = typer.Argument(..., help="Path to the menu PDF"),
    reference: Path | None = typer.Option(
        None, "--reference", "-r", help="Reference price sheet (.docx)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
) -> None:
    """Proofread a menu and, with a reference, check its prices."""
    for path in (menu_path, reference):
        if path is not None and not path.exists():
            console.print(f"[red]Error:[/red] File not found: {escape(str(path))}")
            raise typer.Exit(1)

    try:
        _require_kind(menu_path, DocumentKind.PDF)
        if reference is not None:
            _require_kind(reference, DocumentKind.DOCX)
    except MenuCheckError as e:
        _print_error(e)
        raise typer.Exit(1)

    asyncio.run(_review_async(menu_path, reference, as_json))


async def _review_async(menu_path: Path, reference: Path | None, as_json: bool) -> None:
    """Async review implementation."""
    from menucheck.adapters.documents import read_document
    from menucheck.adapters.gemini import GeminiClient, GeminiConfig
    from menucheck.config import configure_logging
    from menucheck.domains.review import MenuReviewer

    settings = get_settings()
    configure_logging(settings.log_level)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Lendo documentos...", total=None)

        try:
            menu_text = await asyncio.to_thread(read_document, menu_path)
            reference_text = None
            if reference is not None:
                reference_text = await asyncio.to_thread(read_document, reference)

            progress.update(task, description="Analisando seu cardápio com a IA...")

            async with GeminiClient(GeminiConfig.from_settings(settings)) as client:
                report = await MenuReviewer(client).review(menu_text, reference_text)

        except MenuCheckError as e:
            _print_error(e)
            raise typer.Exit(1)

    if as_json:
        console.print_json(json.dumps(_report_dict(report)))
    else:
        _print_corrections(report.corrections)
        if report.comparison is not None:
            _print_comparison(report.comparison)

    if report.has_errors:
        raise typer.Exit(1)


def _report_dict(report: ReviewReport) -> dict[str, Any]:
    def outcome_dict(outcome: AnalysisOutcome) -> dict[str, Any]:
        return {
            "ok": outcome.ok,
            "results": [r.model_dump(by_alias=True, mode="json") for r in outcome.results],
            "error": friendly_message(outcome.error) if outcome.error is not None else None,
        }

    data = {"corrections": outcome_dict(report.corrections)}
    if report.comparison is not None:
        data["comparison"] = outcome_dict(report.comparison)
    return data


def _error_panel(outcome: AnalysisOutcome, title: str) -> Panel:
    return Panel(escape(friendly_message(outcome.error)), title=title, style="red")


def _print_corrections(outcome: AnalysisOutcome) -> None:
    if not outcome.ok:
        console.print(_error_panel(outcome, "Correções"))
        return
    if not outcome.results:
        console.print("[green]Nenhuma correção necessária.[/green]")
        return

    table = Table(title="Sugestões de Melhoria")
    table.add_column("Tipo", style="cyan")
    table.add_column("Original", style="red")
    table.add_column("Problema")
    table.add_column("Sugestão", style="green")

    for correction in outcome.results:
        table.add_row(
            correction.type.value,
            escape(correction.original),
            escape(correction.issue),
            escape(correction.suggestion),
        )

    console.print(table)


def _or_na(value: str | None) -> str:
    return escape(value) if value else "N/A"


def _print_comparison(outcome: AnalysisOutcome) -> None:
    if not outcome.ok:
        console.print(_error_panel(outcome, "Comparação"))
        return
    if not outcome.results:
        console.print("[green]Cardápio e referência estão consistentes.[/green]")
        return

    for result in outcome.results:
        title, color = DISCREPANCY_TITLES[result.issue.value]
        details = result.details
        lines = [f"[bold]{escape(result.item)}[/bold]"]
        if details.menu_name or details.reference_name:
            lines.append(
                f"Nome no cardápio: {_or_na(details.menu_name)} | "
                f"Nome na referência: {_or_na(details.reference_name)}"
            )
        lines.append(
            f"Preço no cardápio: {_or_na(details.menu_price)} | "
            f"Preço na referência: {_or_na(details.reference_price)}"
        )
        console.print(Panel("\n".join(lines), title=title, border_style=color))


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Host to bind (defaults to API_HOST)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to bind (defaults to API_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    console.print("\n[green]Starting MenuCheck API server[/green]")
    console.print(f"[dim]http://{host}:{port}[/dim]\n")

    uvicorn.run(
        "menucheck.interfaces.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


@app.command()
def version() -> None:
    """Show version information."""
    from menucheck import __version__

    console.print(f"MenuCheck v{__version__}")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
