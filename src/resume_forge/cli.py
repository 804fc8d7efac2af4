"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
import webbrowser
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from pydantic import BaseModel, ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from resume_forge.clients.factory import build_invoker
from resume_forge.config import AppConfig, load_config
from resume_forge.errors import AllProvidersUnavailable
from resume_forge.events.store import EventStore
from resume_forge.models.payload import CoverLetterPayload, ParsePayload, ResumePayload
from resume_forge.models.records import ConfidenceLevel, GenerationResult
from resume_forge.pipeline.orchestrator import GenerationPipeline
from resume_forge.prompts.registry import default_registry
from resume_forge.storage import FileDocumentStore
from resume_forge.utils.text_cleaning import looks_scanned

app = typer.Typer(
    name="resume-forge",
    help="Structured resume, cover letter and resume parsing generation",
    no_args_is_help=True,
)
console = Console()

LEVEL_COLORS = {
    ConfidenceLevel.HIGH: "green",
    ConfidenceLevel.MEDIUM: "yellow",
    ConfidenceLevel.LOW: "red",
}


@app.command("generate-resume")
def generate_resume(
    payload_file: Path = typer.Argument(help="Resume payload JSON file"),
    config_file: Path = typer.Option(None, "--config", "-c", help="config.yaml path"),
    open_browser: bool = typer.Option(False, "--open", help="Open the HTML result in a browser"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Generate a resume from a JSON payload."""
    _setup_logging(verbose)
    payload = _load_payload(payload_file, ResumePayload)
    outcome = _run(config_file, "Generating resume...", lambda p: p.generate_resume(payload))
    _report(outcome, open_browser)


@app.command("cover-letter")
def cover_letter(
    payload_file: Path = typer.Argument(help="Cover letter payload JSON file"),
    config_file: Path = typer.Option(None, "--config", "-c", help="config.yaml path"),
    open_browser: bool = typer.Option(False, "--open", help="Open the HTML result in a browser"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Write a cover letter from a JSON payload."""
    _setup_logging(verbose)
    payload = _load_payload(payload_file, CoverLetterPayload)
    outcome = _run(config_file, "Writing cover letter...", lambda p: p.write_cover_letter(payload))
    _report(outcome, open_browser)


@app.command("parse-resume")
def parse_resume(
    text_file: Path = typer.Argument(help="Text extracted from a resume file"),
    ocr: bool = typer.Option(False, "--ocr", help="Text came from OCR; use the error-correcting prompt"),
    config_file: Path = typer.Option(None, "--config", "-c", help="config.yaml path"),
    open_browser: bool = typer.Option(False, "--open", help="Open the HTML result in a browser"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Extract structured resume fields from extracted text."""
    _setup_logging(verbose)
    if not text_file.exists():
        console.print(f"[red]File not found: {text_file}[/red]")
        raise typer.Exit(1)

    text = text_file.read_text(encoding="utf-8")
    config = load_config(config_file)
    if not ocr and looks_scanned(text, config.pipeline.scanned_text_threshold):
        console.print(
            "[yellow]Very little text was extracted; the file may be scanned. "
            "Consider running OCR and passing --ocr.[/yellow]"
        )

    payload = ParsePayload(extracted_text=text, ocr_used=ocr)
    outcome = _run_with_config(config, "Parsing resume...", lambda p: p.parse_resume(payload))
    _report(outcome, open_browser)


@app.command()
def templates() -> None:
    """List the registered prompt templates."""
    table = Table(title="Prompt templates")
    table.add_column("Kind")
    table.add_column("Version")
    table.add_column("Variant")
    table.add_column("Model tier")
    table.add_column("Temperature", justify="right")
    table.add_column("Max tokens", justify="right")
    for tmpl in default_registry().templates():
        table.add_row(
            tmpl.kind.value,
            tmpl.version,
            "repair" if tmpl.repair_variant else "standard",
            tmpl.model_hint,
            f"{tmpl.temperature:.1f}",
            str(tmpl.max_tokens),
        )
    console.print(table)


@app.command()
def events(
    request_id: str = typer.Option(None, "--request-id", help="Only events for this request"),
    name: str = typer.Option(None, "--event", help="Only events with this name"),
    limit: int = typer.Option(50, "--limit", "-n", help="Maximum events to show"),
    config_file: Path = typer.Option(None, "--config", "-c", help="config.yaml path"),
) -> None:
    """Show recorded pipeline events and repair/fallback rates."""
    config = load_config(config_file)
    store = EventStore(config.events.resolved_db_path)
    rows = store.get_events(request_id=request_id, event=name, limit=limit)
    if not rows:
        console.print("[yellow]No events recorded.[/yellow]")
        return

    table = Table(title="Pipeline events")
    table.add_column("Time")
    table.add_column("Request")
    table.add_column("Event")
    table.add_column("Kind")
    table.add_column("Provider")
    table.add_column("Detail")
    for ev in rows:
        table.add_row(
            ev.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            ev.request_id[:8],
            ev.event,
            ev.document_kind or "",
            ev.provider or "",
            escape(json.dumps(ev.detail, ensure_ascii=False)),
        )
    console.print(table)

    stats = store.get_stats()
    console.print(
        f"Documents: {stats['documents']} | "
        f"repair rate: {stats['repair_rate']:.1f}% | fallback rate: {stats['fallback_rate']:.1f}%"
    )


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_payload(path: Path, model: type[BaseModel]):
    if not path.exists():
        console.print(f"[red]File not found: {path}[/red]")
        raise typer.Exit(1)
    try:
        return model.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as exc:
        console.print(f"[red]Invalid payload in {path}:[/red]\n{escape(str(exc))}")
        raise typer.Exit(1) from None


def _run(config_file: Path | None, status: str, call) -> tuple[GenerationResult, FileDocumentStore]:
    return _run_with_config(load_config(config_file), status, call)


def _run_with_config(config: AppConfig, status: str, call) -> tuple[GenerationResult, FileDocumentStore]:
    events = EventStore(config.events.resolved_db_path) if config.events.enabled else None
    store = FileDocumentStore(config.output.out_dir)
    invoker = build_invoker(config, events=events)
    pipeline = GenerationPipeline(
        invoker,
        store=store,
        events=events,
    )

    async def _go() -> GenerationResult:
        try:
            return await call(pipeline)
        finally:
            for provider in invoker.providers:
                await provider.aclose()

    try:
        with console.status(status):
            return asyncio.run(_go()), store
    except AllProvidersUnavailable as exc:
        lines = [
            escape(f"{a.provider_name}: {a.reason.value if a.reason else 'error'} {a.error_message}")
            for a in exc.attempts
        ]
        console.print(Panel("\n".join(lines), title="[red]All providers unavailable[/red]"))
        raise typer.Exit(2) from None


def _report(outcome: tuple[GenerationResult, FileDocumentStore], open_browser: bool) -> None:
    result, store = outcome
    document = result.document
    meta = result.metadata
    fallback = " (fallback)" if meta.get("used_fallback") else ""
    lines = [
        f"Provider: {meta.get('provider')}{fallback} | template v{meta.get('template_version')}",
        f"Elapsed: {result.elapsed_seconds:.1f}s",
    ]
    if document.was_repaired:
        detail = ", ".join(sorted(document.missing_fields)) or "unparseable JSON"
        lines.append(f"[yellow]Repaired output; defaulted: {detail}[/yellow]")
    if document.repaired_fields:
        lines.append(f"[yellow]Dropped malformed entries in: {', '.join(sorted(document.repaired_fields))}[/yellow]")
    console.print(Panel("\n".join(lines), title=document.kind.value))

    if result.confidence is not None:
        table = Table(title=f"Confidence: {result.confidence.overall.value}")
        table.add_column("Field")
        table.add_column("Level")
        for field_name, level in result.confidence.per_field.items():
            color = LEVEL_COLORS[level]
            table.add_row(field_name, f"[{color}]{level.value}[/{color}]")
        console.print(table)

    if result.record_id:
        html_path = store.html_path(result.record_id)
        console.print(f"[green]Saved: {html_path}[/green]")
        if open_browser:
            webbrowser.open(html_path.resolve().as_uri())


if __name__ == "__main__":
    app()
