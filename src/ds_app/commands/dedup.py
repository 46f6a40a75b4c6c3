# src/ds_app/commands/dedup.py
"""
'dedup' command.

Scans one directory for files whose names carry an OS or browser copy-suffix
("report copy.pdf", "photo - Copy (2).jpg", "setup (1).exe"), prints one
"Duplicate Set" block per group, and (with --apply, after confirmation)
deletes everything but the keeper of each group.

The default is a dry run: nothing is deleted.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ds_app.commands.common import prompt_existing_dir, resolve_dry_run
from ds_app.core.config import get_settings
from ds_app.core.errors import ScanError
from ds_app.core.logging import configure_logging
from ds_app.core.rich_progress import make_dedup_progress
from ds_app.modules.dedup.executor import DeletionExecutor
from ds_app.modules.dedup.schemas import (
    DedupMode,
    DedupResult,
    DeletionReport,
    DuplicateGroup,
)
from ds_app.modules.dedup.service import DedupService

__all__ = ["register"]


# =============================================================================
# Rendering
# =============================================================================
def _render_group(console: Console, group: DuplicateGroup, dry_run: bool) -> None:
    console.print("\n--- Duplicate Set ---")
    console.print(f"Normalized filename: {escape(group.normalized_name)}")
    if group.flagged:
        sizes = ", ".join(str(s) for s in group.sizes)
        console.print(f"Size: {sizes} bytes")
        console.print(
            "[yellow]Warning: sizes differ, these may not be true duplicates.[/yellow]"
        )
    else:
        console.print(f"Size: {group.keep.size} bytes")
    console.print(f"Keeping: {escape(group.keep.absolute_path)}")
    verb = "Would delete" if dry_run else "Will delete"
    for d in group.delete:
        console.print(f"{verb}: {escape(d.absolute_path)}")


def _render_table(console: Console, result: DedupResult) -> None:
    table = Table(title="Duplicate Sets", show_lines=False)
    table.add_column("Normalized name", overflow="fold")
    table.add_column("Keep", overflow="fold")
    table.add_column("# Delete", justify="right")
    table.add_column("Delete", overflow="fold")
    table.add_column("Sizes match", justify="center")

    for g in result.plan.groups:
        table.add_row(
            escape(g.normalized_name),
            escape(g.keep.filename),
            str(len(g.delete)),
            "\n".join(escape(d.filename) for d in g.delete),
            "no" if g.flagged else "yes",
        )
    console.print(table)


def _render_summary(console: Console, result: DedupResult) -> None:
    plan = result.plan
    console.print("\n================================")
    console.print(f"Summary: Found {plan.groups_count} duplicate set(s)")
    console.print(f"Total files to delete: {plan.total_files_to_delete}")
    if plan.flagged_groups:
        console.print(
            f"[yellow]{len(plan.flagged_groups)} set(s) have differing sizes.[/yellow]"
        )


def _render_deletion(console: Console, report: DeletionReport) -> None:
    for p in report.deleted:
        console.print(f"Deleted: {escape(p)}")
    for w in report.warnings:
        console.print(f"[yellow]Warning:[/yellow] {escape(w)}")
    for f in report.failed:
        console.print(f"[red]Error deleting '{escape(f.path)}': {escape(f.reason)}[/red]")

    console.print("\n================================")
    console.print("Deletion complete!")
    console.print(f"Files deleted: {len(report.deleted)}")
    if report.missing:
        console.print(f"Already missing: {len(report.missing)}")
    if report.skipped:
        console.print(f"Skipped (sizes differ): {len(report.skipped)}")
    if report.failed:
        console.print(f"Errors encountered: {len(report.failed)}")


# =============================================================================
# Runner
# =============================================================================
class DedupRunner:
    def __init__(
        self,
        root: Path,
        dry_run: bool,
        assume_yes: bool,
        include_mismatched: bool,
        show_table: bool,
        console: Console | None = None,
    ) -> None:
        self.root = root
        self.dry_run = dry_run
        self.assume_yes = assume_yes
        self.include_mismatched = include_mismatched
        self.show_table = show_table
        self.console = console or Console(soft_wrap=True)

    def run(self) -> int:
        console = self.console
        mode = DedupMode.dry_run if self.dry_run else DedupMode.execute
        if self.dry_run:
            console.print("Running in DRY RUN mode - no files will be deleted")

        # PLAN
        progress, reporter = make_dedup_progress(console)
        try:
            with progress:
                result = DedupService().plan(self.root, mode=mode, reporter=reporter)
        except ScanError as err:
            console.print(f"[red]Error:[/red] {escape(str(err))}")
            return 2

        for w in result.warnings:
            console.print(f"[yellow]Warning:[/yellow] {escape(w)}")
        if reporter.skipped["scan"]:
            console.print(
                f"Skipped while scanning: {reporter.skipped['scan']} "
                "(folders, symlinks, unreadable or special files)"
            )

        if result.plan.is_empty:
            console.print("\nNo duplicates found!")
            return 0

        if self.show_table:
            _render_table(console, result)
        else:
            for group in result.plan.groups:
                _render_group(console, group, self.dry_run)
        _render_summary(console, result)

        if self.dry_run:
            console.print("\n[DRY RUN MODE] No files were deleted.", markup=False)
            console.print("Run with --apply to actually delete files.")
            return 0

        # APPLY
        if not self.assume_yes and not typer.confirm(
            "\nProceed with deletion?", default=False
        ):
            console.print("Deletion cancelled.")
            return 0

        progress, reporter = make_dedup_progress(console)
        with progress:
            report = DeletionExecutor.for_result(result).execute(
                result.plan,
                include_flagged=self.include_mismatched,
                reporter=reporter,
            )
        _render_deletion(console, report)
        return 0 if report.ok else 1


# =============================================================================
# Entrypoint
# =============================================================================
def dedup(
    root: Path | None = typer.Argument(
        None, exists=False, file_okay=False, dir_okay=True, help="Directory to scan"
    ),
    apply: bool = typer.Option(False, "--apply", help="Delete duplicates"),
    plan: bool = typer.Option(False, "--plan", help="Plan only (dry-run)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
    include_mismatched: bool | None = typer.Option(
        None,
        "--include-mismatched/--skip-mismatched",
        help="Also delete from sets whose file sizes differ",
    ),
    table: bool = typer.Option(False, "--table", help="Show the plan as a table"),
) -> None:
    settings = get_settings()
    configure_logging(settings.effective_log_level, json=settings.LOG_JSON)

    if root is None:
        root = prompt_existing_dir(None, "root")
    if include_mismatched is None:
        include_mismatched = settings.DELETE_MISMATCHED

    dry_run = resolve_dry_run(apply, plan, default=settings.DRY_RUN_DEFAULT)
    code = DedupRunner(
        root,
        dry_run=dry_run,
        assume_yes=yes,
        include_mismatched=include_mismatched,
        show_table=table,
    ).run()
    if code:
        raise typer.Exit(code=code)


def register(app: typer.Typer) -> None:
    """Attach the dedup command to the given Typer app."""
    app.command(
        "dedup", help="Find and remove copy-suffixed duplicate files in a folder."
    )(dedup)
