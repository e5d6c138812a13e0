"""CLI for clarity-canvas: init / list / show / apply / refresh / remove-source commands."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from clarity_canvas.core.config import AppSettings, PersistenceConfig
from clarity_canvas.exceptions import ClarityError
from clarity_canvas.models import FieldPath, InputType
from clarity_canvas.schema import get_schema
from clarity_canvas.services import ProfileView, Services, build_services

app = typer.Typer(name="clarity", help="Review extracted facts into a scored clarity profile")
console = Console()

_BUCKET_STYLES = {"strong": "green", "developing": "yellow", "weak": "red", "empty": "dim"}


def _setup(store: Optional[Path], verbose: bool) -> Services:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)
    settings = AppSettings()
    if store is not None:
        settings.persistence = PersistenceConfig(backend="file", store_path=store)
    return build_services(settings, use_llm_collaborators=False)


def _load_chunks(chunks_file: Path) -> list[Any]:
    raw = json.loads(chunks_file.read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        raw = raw.get("chunks", [])
    if not isinstance(raw, list):
        raise typer.BadParameter(f"Expected a JSON array or {{'chunks': [...]}} in {chunks_file}")
    return raw


def _print_view(view: ProfileView, show_fields: bool) -> None:
    style = _BUCKET_STYLES.get(view.overall_bucket, "")
    console.print(
        f"[bold]{view.name or view.profile_id}[/bold]  overall "
        f"[{style}]{view.overall}[/{style}] ({view.overall_bucket})"
    )

    table = Table(title="Sections")
    table.add_column("Section", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Bucket")
    table.add_column("Completed", justify="right")
    for section in view.sections:
        style = _BUCKET_STYLES.get(section.bucket, "")
        table.add_row(
            section.name,
            str(section.score),
            f"[{style}]{section.bucket}[/{style}]",
            f"{section.completed_fields}/{section.total_fields}",
        )
    console.print(table)

    if show_fields:
        fields = Table(title="Fields")
        fields.add_column("Path", style="cyan")
        fields.add_column("Score", justify="right")
        fields.add_column("Sources", justify="right")
        fields.add_column("Updated")
        fields.add_column("Summary", max_width=60)
        for section in view.sections:
            for f in section.fields:
                if f.source_count:
                    fields.add_row(f.path, str(f.score), str(f.source_count), f.last_synthesized, f.summary or "")
        console.print(fields)

        # Full ids, newest first, for remove-source.
        for section in view.sections:
            for f in section.fields:
                for source in f.sources:
                    console.print(f"{f.path}  {source.id}  {source.captured_at:%Y-%m-%d %H:%M}")


def _resolve_path(field_path: str) -> FieldPath:
    parts = field_path.split(".")
    if len(parts) != 3:
        raise typer.BadParameter("Expected section.subsection.field", param_hint="field_path")
    path = get_schema().resolve(*parts)
    if path is None:
        console.print(f"[red]Unknown field {field_path}[/red]")
        raise typer.Exit(1)
    return path


@app.command()
def init(
    profile_id: str = typer.Argument(..., help="Profile identifier"),
    name: str = typer.Option("", help="Display name"),
    store: Optional[Path] = typer.Option(None, help="Profile store directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Create an empty profile (no-op if it already exists)."""
    services = _setup(store, verbose)
    try:
        _, created = services.profiles.init_profile(profile_id, name=name)
    except ClarityError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    if created:
        console.print(f"[green]Created profile {profile_id}[/green]")
    else:
        console.print(f"Profile {profile_id} already exists")


@app.command("list")
def list_profiles(
    store: Optional[Path] = typer.Option(None, help="Profile store directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """List stored profile ids."""
    services = _setup(store, verbose)
    try:
        profile_ids = services.profiles.list_profiles()
    except ClarityError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    if not profile_ids:
        console.print("No profiles")
        return
    for profile_id in profile_ids:
        console.print(profile_id)


@app.command()
def show(
    profile_id: str = typer.Argument(..., help="Profile identifier"),
    fields: bool = typer.Option(False, "--fields", help="List populated fields"),
    as_json: bool = typer.Option(False, "--json", help="Print the full view as JSON"),
    store: Optional[Path] = typer.Option(None, help="Profile store directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Show a profile with its scores."""
    services = _setup(store, verbose)
    try:
        view = services.profiles.view(profile_id)
    except ClarityError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if as_json:
        console.print_json(view.model_dump_json())
        return
    _print_view(view, fields)

    if view.weak_fields and not fields:
        console.print(f"\n{len(view.weak_fields)} field(s) below the weak threshold")


@app.command()
def apply(
    profile_id: str = typer.Argument(..., help="Profile identifier"),
    chunks_file: Path = typer.Argument(..., help="JSON file with extraction chunks"),
    override: bool = typer.Option(False, "--override", help="Approve low-confidence chunks too"),
    input_type: InputType = typer.Option(InputType.TEXT, "--input-type", help="How the text was captured"),
    store: Optional[Path] = typer.Option(None, help="Profile store directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Validate chunks, approve them all and commit to the profile."""
    services = _setup(store, verbose)
    raw_chunks = _load_chunks(chunks_file)

    try:
        session = services.reviews.open_session(profile_id, raw_chunks, input_type=input_type)
    except ClarityError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    for rejected in session.rejected_chunks:
        console.print(f"[yellow]Skipped chunk:[/yellow] {rejected.reason}")

    approval = session.approve_all(override=override)
    if approval.gate is not None:
        table = Table(title=f"Low-confidence chunks (< {approval.gate.threshold})")
        table.add_column("Target", style="cyan")
        table.add_column("Confidence", justify="right")
        table.add_column("Content", max_width=60)
        for rec_id in approval.gate.recommendation_ids:
            rec = session.get(rec_id)
            table.add_row(str(rec.path), f"{rec.confidence:.2f}", rec.effective_content)
        console.print(table)
        console.print("[red]Nothing committed.[/red] Re-run with --override to include them.")
        services.sessions.discard(session.id)
        raise typer.Exit(2)

    try:
        result = asyncio.run(services.reviews.commit_session(session.id))
    except ClarityError as e:
        console.print(f"[red]Commit failed: {e}[/red]")
        raise typer.Exit(1)

    for dropped in result.dropped:
        console.print(f"[yellow]Dropped:[/yellow] {dropped.reason}")

    console.print(
        f"[green]Updated {result.saved_count} field(s).[/green] "
        f"Overall {result.previous_scores.overall} -> {result.scores.overall} "
        f"({result.delta.overall:+d})"
    )
    changed = {k: v for k, v in result.delta.sections.items() if v}
    for section, change in changed.items():
        console.print(f"  {section}: {change:+d}")


@app.command()
def refresh(
    profile_id: str = typer.Argument(..., help="Profile identifier"),
    field_path: str = typer.Argument(..., help="section.subsection.field"),
    store: Optional[Path] = typer.Option(None, help="Profile store directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Re-synthesize one field from its current sources."""
    services = _setup(store, verbose)
    path = _resolve_path(field_path)

    try:
        profile = asyncio.run(services.profiles.refresh_field(profile_id, path))
    except ClarityError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    updated = profile.get_field(path)
    version = updated.synthesis_version if updated else 0
    console.print(f"[green]Refreshed {path}[/green] (version {version})")


@app.command("remove-source")
def remove_source(
    profile_id: str = typer.Argument(..., help="Profile identifier"),
    field_path: str = typer.Argument(..., help="section.subsection.field"),
    source_id: str = typer.Argument(..., help="Source id to remove"),
    store: Optional[Path] = typer.Option(None, help="Profile store directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Remove one source from a field and re-synthesize the rest."""
    services = _setup(store, verbose)

    path = _resolve_path(field_path)

    try:
        profile = asyncio.run(services.profiles.remove_source(profile_id, path, source_id))
    except ClarityError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    updated = profile.get_field(path)
    remaining = len(updated.sources) if updated else 0
    console.print(f"[green]Removed {source_id}[/green]; {remaining} source(s) left on {path}")


if __name__ == "__main__":
    app()
