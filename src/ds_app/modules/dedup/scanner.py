# src/ds_app/modules/dedup/scanner.py
from __future__ import annotations

import os
import stat
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from ds_app.core.config import get_settings
from ds_app.core.errors import AccessError, ScanError
from ds_app.core.logging import get_logger
from ds_app.core.progress import NoOpReporter, ProgressReporter

from .schemas import FileEntry

logger = get_logger(__name__)


@dataclass
class ScanResult:
    entries: list[FileEntry] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class FileScanner:
    """
    Lists the regular files directly inside one directory (no recursion).

    Directory symlinks are never followed. Symlinks to regular files are only
    included when `follow_file_symlinks` is set. Per-file stat calls run on a
    thread pool; entries come back sorted by path either way.
    """

    def __init__(
        self, follow_file_symlinks: bool = False, workers: int | None = None
    ) -> None:
        self.follow_file_symlinks = follow_file_symlinks
        self.workers = workers

    def scan(self, root: Path, reporter: ProgressReporter | None = None) -> ScanResult:
        reporter = reporter or NoOpReporter()
        root = Path(root).expanduser()
        if not root.exists():
            raise ScanError(root, "path does not exist")
        if not root.is_dir():
            raise ScanError(root, "not a directory")
        root = root.resolve()

        # SCAN (listing)
        reporter.start("scan", total=None, text="Listing directory…")
        try:
            with os.scandir(root) as it:
                dirents = [(Path(d.path), d.is_symlink()) for d in it]
        except OSError as err:
            reporter.end("scan")
            raise ScanError(root, err.strerror or str(err)) from err
        reporter.end("scan")

        candidates = []
        for p, is_link in dirents:
            if is_link and not self.follow_file_symlinks:
                reporter.skip("scan", p.name, "symlink")
                continue
            candidates.append(p)

        # SCAN (metadata, parallel)
        workers = self.workers or get_settings().scan_workers
        reporter.start(
            "scan",
            total=len(candidates),
            text=f"Reading metadata… (workers={workers})",
        )

        result = ScanResult()
        with ThreadPoolExecutor(max_workers=workers) as ex:
            futs = {ex.submit(self._entry_for, p): p for p in candidates}
            for fut in as_completed(futs):
                p = futs[fut]
                try:
                    entry = fut.result()
                except AccessError as err:
                    logger.warning("Skipping %s: %s", p.name, err)
                    result.warnings.append(str(err))
                    reporter.skip("scan", p.name, "unreadable")
                else:
                    if entry is None:
                        reporter.skip("scan", p.name, "not a regular file")
                    else:
                        result.entries.append(entry)
                reporter.update("scan", 1, text=p.name)
        reporter.end("scan")

        # completion order is arbitrary; grouping needs a stable order
        result.entries.sort(key=lambda e: e.absolute_path)
        result.warnings.sort()
        return result

    # ---- helpers ----
    def _entry_for(self, path: Path) -> FileEntry | None:
        """FileEntry for a regular file, None for anything else."""
        try:
            st = self._stat(path)
        except FileNotFoundError:
            # vanished between listing and stat, or a dangling symlink
            return None
        except OSError as err:
            raise AccessError(path, err) from err

        if not stat.S_ISREG(st.st_mode):
            return None
        return FileEntry(
            absolute_path=str(path),
            filename=path.name,
            size=st.st_size,
            modified_at=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
        )

    @staticmethod
    def _stat(path: Path) -> os.stat_result:
        # symlinks only reach here when following them was requested
        return path.stat()
