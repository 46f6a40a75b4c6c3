# src/ds_app/modules/dedup/service.py
from __future__ import annotations

from pathlib import Path

from ds_app.core.config import get_settings
from ds_app.core.logging import get_logger
from ds_app.core.progress import NoOpReporter, ProgressReporter

from .grouper import DuplicateGrouper
from .planner import PlanBuilder
from .policy import SelectionPolicy
from .scanner import FileScanner
from .schemas import DedupMode, DedupResult

logger = get_logger(__name__)


class DedupService:
    """
    Directory in, plan out: scan -> normalize/group -> select -> build.

    Never touches the files it finds; deleting is up to the caller
    (see `executor.DeletionExecutor`).
    """

    def __init__(
        self,
        scanner: FileScanner | None = None,
        grouper: DuplicateGrouper | None = None,
        policy: SelectionPolicy | None = None,
        builder: PlanBuilder | None = None,
    ) -> None:
        if scanner is None:
            scanner = FileScanner(
                follow_file_symlinks=get_settings().FOLLOW_FILE_SYMLINKS
            )
        self.scanner = scanner
        self.grouper = grouper or DuplicateGrouper()
        self.policy = policy or SelectionPolicy()
        self.builder = builder or PlanBuilder()

    # ---- public API ----------------------------------------------------------
    def plan(
        self,
        root: Path,
        mode: DedupMode = DedupMode.dry_run,
        reporter: ProgressReporter | None = None,
    ) -> DedupResult:
        """
        Compute the keep/delete plan for `root`.

        `mode` is recorded on the result for the caller; it does not change the
        plan. Raises ScanError if `root` cannot be scanned.
        """
        reporter = reporter or NoOpReporter()
        scan = self.scanner.scan(Path(root), reporter=reporter)
        candidates = self.grouper.group(scan.entries, reporter=reporter)

        # SELECT
        reporter.start("select", total=len(candidates), text="Selecting keepers…")
        groups = []
        for cand in candidates:
            groups.append(self.policy.select(cand))
            reporter.update("select", 1, text=cand.normalized_name)
        reporter.end("select")

        plan = self.builder.build(groups)
        for group in plan.flagged_groups:
            logger.warning(
                "Size mismatch in duplicate set %r: sizes %s",
                group.normalized_name,
                group.sizes,
            )
        logger.info(
            "Scanned %s: %d file(s), %d duplicate set(s), %d to delete, %d warning(s)",
            root,
            len(scan.entries),
            plan.groups_count,
            plan.total_files_to_delete,
            len(scan.warnings),
        )
        return DedupResult(
            root=str(Path(root).expanduser().resolve()),
            mode=mode,
            plan=plan,
            warnings=scan.warnings,
        )


def plan(
    root: Path,
    mode: DedupMode = DedupMode.dry_run,
    reporter: ProgressReporter | None = None,
) -> DedupResult:
    return DedupService().plan(root, mode=mode, reporter=reporter)
