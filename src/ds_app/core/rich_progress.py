# src/ds_app/core/rich_progress.py
from __future__ import annotations

from collections import Counter

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
)

from ds_app.core.progress import Phase, ProgressReporter


class DedupProgress(ProgressReporter):
    """
    Rich display for one dedup run.

    One row per phase. A phase that starts again (the scanner lists the
    folder, then reads metadata) reuses its row. Each row keeps a running
    count of the files the phase passed over, and `skipped` keeps the totals
    for the summary printed once the transient display is gone.
    """

    labels = {
        "scan": "Scanning",
        "group": "Grouping",
        "select": "Selecting",
        "delete": "Deleting",
    }

    def __init__(self, progress: Progress) -> None:
        self.progress = progress
        self.rows: dict[str, TaskID] = {}
        self.skipped: Counter[str] = Counter()

    def start(
        self, phase: Phase, total: int | None = None, text: str | None = None
    ) -> None:
        description = text or self.labels.get(phase, str(phase).title())
        row = self.rows.get(phase)
        if row is None:
            self.rows[phase] = self.progress.add_task(
                description, total=total, detail="", skipped=""
            )
        else:
            self.progress.reset(
                row, total=total, description=description, detail="", visible=True
            )

    def update(self, phase: Phase, advance: int = 1, text: str | None = None) -> None:
        row = self.rows.get(phase)
        if row is not None:
            self.progress.update(row, advance=advance, detail=text or "")

    def skip(self, phase: Phase, name: str, reason: str) -> None:
        self.skipped[phase] += 1
        row = self.rows.get(phase)
        if row is not None:
            self.progress.update(
                row,
                skipped=f"{self.skipped[phase]} skipped",
                detail=f"{name} ({reason})",
            )

    def end(self, phase: Phase) -> None:
        row = self.rows.get(phase)
        if row is None:
            return
        task = next(t for t in self.progress.tasks if t.id == row)
        if task.total is None:
            # listing has no meaningful bar
            self.progress.update(row, visible=False)
        else:
            self.progress.update(row, completed=task.total, detail="")


def make_dedup_progress(console: Console) -> tuple[Progress, DedupProgress]:
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TextColumn("[yellow]{task.fields[skipped]}"),
        # filenames are shown verbatim, never as markup
        TextColumn("{task.fields[detail]}", markup=False),
        console=console,
        transient=True,
    )
    return progress, DedupProgress(progress)
