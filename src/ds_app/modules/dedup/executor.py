# src/ds_app/modules/dedup/executor.py
from __future__ import annotations

from pathlib import Path

from ds_app.core.errors import BadRequest
from ds_app.core.logging import get_logger
from ds_app.core.paths import ensure_within_root
from ds_app.core.progress import NoOpReporter, ProgressReporter

from .schemas import DedupResult, DeletionReport, FailedDeletion, Plan

logger = get_logger(__name__)


class DeletionExecutor:
    """
    Carries out a Plan by deleting each group's `delete` members.

    Keepers are never touched. Groups whose sizes disagree are skipped unless
    `include_flagged` is set. A file that is already gone is reported as
    missing rather than failing the run, so executing a plan twice is safe.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root).expanduser().resolve()

    @classmethod
    def for_result(cls, result: DedupResult) -> DeletionExecutor:
        return cls(Path(result.root))

    def execute(
        self,
        plan: Plan,
        include_flagged: bool = False,
        reporter: ProgressReporter | None = None,
    ) -> DeletionReport:
        reporter = reporter or NoOpReporter()
        report = DeletionReport()

        todo: list[Path] = []
        for group in plan.groups:
            if group.flagged and not include_flagged:
                report.skipped.extend(d.absolute_path for d in group.delete)
                continue
            keep = Path(group.keep.absolute_path)
            for d in group.delete:
                p = Path(d.absolute_path)
                if p == keep:
                    raise BadRequest(f"refusing to delete keeper {keep}")
                todo.append(p)

        reporter.start("delete", total=len(todo), text="Deleting duplicates…")
        for s in report.skipped:
            reporter.skip("delete", Path(s).name, "sizes differ")

        for p in todo:
            self._delete_one(p, report)
            reporter.update("delete", 1, text=p.name)
        reporter.end("delete")

        logger.info(
            "Deletion finished: %d deleted, %d missing, %d skipped, %d failed",
            len(report.deleted),
            len(report.missing),
            len(report.skipped),
            len(report.failed),
        )
        return report

    # ---- helpers ----
    def _delete_one(self, p: Path, report: DeletionReport) -> None:
        try:
            ensure_within_root(p, self.root)
        except ValueError as err:
            logger.error("Not deleting %s: %s", p, err)
            report.failed.append(FailedDeletion(path=str(p), reason=str(err)))
            return

        try:
            p.unlink()
        except FileNotFoundError:
            msg = f"Already deleted: {p}"
            logger.warning(msg)
            report.missing.append(str(p))
            report.warnings.append(msg)
        except OSError as err:
            logger.error("Error deleting '%s': %s", p, err)
            report.failed.append(
                FailedDeletion(path=str(p), reason=err.strerror or str(err))
            )
        else:
            logger.info("Deleted: %s", p)
            report.deleted.append(str(p))
