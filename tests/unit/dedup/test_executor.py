"""
Unit tests for DeletionExecutor.

Tests:
- Deletes only the delete-set, never the keeper
- Idempotent: missing files are warnings
- Size-mismatched groups skipped unless included
- Root guardrail
- OS errors recorded, run continues
"""

from pathlib import Path

import pytest
from ds_app.core.progress import NoOpReporter
from ds_app.modules.dedup.executor import DeletionExecutor
from ds_app.modules.dedup.scanner import FileScanner
from ds_app.modules.dedup.schemas import DuplicateGroup, Plan
from ds_app.modules.dedup.service import DedupService


class SkipRecorder(NoOpReporter):
    def __init__(self):
        self.skipped = []

    def skip(self, phase, name, reason):
        self.skipped.append((phase, name, reason))


@pytest.fixture
def planned(tmp_path):
    def _planned():
        return DedupService(scanner=FileScanner(workers=2)).plan(tmp_path)

    return _planned


class TestExecute:
    """Happy path."""

    def test_deletes_duplicates_keeps_original(self, make_file, tmp_path, planned):
        make_file("report.pdf")
        make_file("report copy.pdf")
        make_file("report copy 2.pdf")
        make_file("other.txt")
        result = planned()

        report = DeletionExecutor.for_result(result).execute(result.plan)

        assert sorted(p.name for p in tmp_path.iterdir()) == ["other.txt", "report.pdf"]
        assert len(report.deleted) == 2
        assert report.ok
        assert report.missing == []

    def test_second_run_reports_missing(self, make_file, tmp_path, planned):
        make_file("a.txt")
        make_file("a copy.txt")
        result = planned()
        executor = DeletionExecutor(tmp_path)

        executor.execute(result.plan)
        again = executor.execute(result.plan)

        assert again.deleted == []
        assert again.missing == [str(tmp_path.resolve() / "a copy.txt")]
        assert len(again.warnings) == 1
        assert again.ok

    def test_empty_plan(self, tmp_path):
        report = DeletionExecutor(tmp_path).execute(Plan())
        assert report.deleted == [] and report.ok


class TestFlagged:
    """Groups whose sizes disagree."""

    def test_skipped_by_default(self, make_file, tmp_path, planned):
        make_file("data.csv", size=10)
        make_file("data (1).csv", size=20)
        result = planned()

        report = DeletionExecutor(tmp_path).execute(result.plan)

        assert (tmp_path / "data (1).csv").exists()
        assert report.skipped == [str(tmp_path.resolve() / "data (1).csv")]
        assert report.deleted == []

    def test_skips_reported(self, make_file, tmp_path, planned):
        make_file("data.csv", size=10)
        make_file("data (1).csv", size=20)
        result = planned()
        reporter = SkipRecorder()

        DeletionExecutor(tmp_path).execute(result.plan, reporter=reporter)

        assert reporter.skipped == [("delete", "data (1).csv", "sizes differ")]

    def test_included_on_request(self, make_file, tmp_path, planned):
        make_file("data.csv", size=10)
        make_file("data (1).csv", size=20)
        result = planned()

        report = DeletionExecutor(tmp_path).execute(result.plan, include_flagged=True)

        assert not (tmp_path / "data (1).csv").exists()
        assert (tmp_path / "data.csv").exists()
        assert len(report.deleted) == 1


class TestFailures:
    """Errors do not stop the run."""

    def test_outside_root_refused(self, make_file, tmp_path, planned):
        make_file("a.txt")
        make_file("a copy.txt")
        result = planned()
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()

        report = DeletionExecutor(elsewhere).execute(result.plan)

        assert (tmp_path / "a copy.txt").exists()
        assert len(report.failed) == 1
        assert "outside of root" in report.failed[0].reason
        assert not report.ok

    def test_os_error_recorded(self, make_file, tmp_path, planned, monkeypatch):
        make_file("a.txt")
        make_file("a copy.txt")
        make_file("b.txt")
        make_file("b copy.txt")
        result = planned()

        real_unlink = Path.unlink

        def flaky_unlink(self, missing_ok=False):
            if self.name == "a copy.txt":
                raise PermissionError(13, "Permission denied", str(self))
            return real_unlink(self, missing_ok=missing_ok)

        monkeypatch.setattr(Path, "unlink", flaky_unlink)

        report = DeletionExecutor(tmp_path).execute(result.plan)

        assert [f.reason for f in report.failed] == ["Permission denied"]
        assert not (tmp_path / "b copy.txt").exists()
        assert (tmp_path / "a copy.txt").exists()

    def test_keeper_is_never_deleted(self, entry, tmp_path):
        a, b = entry("a.txt", folder=str(tmp_path)), entry("a copy.txt", folder=str(tmp_path))
        group = DuplicateGroup(
            normalized_key=("a", ".txt"),
            normalized_name="a.txt",
            members=[a, b],
            keep=a,
            delete=[b],
        )
        (tmp_path / "a.txt").write_text("keep me")

        report = DeletionExecutor(tmp_path).execute(Plan(groups=[group], total_files_to_delete=1))

        assert (tmp_path / "a.txt").read_text() == "keep me"
        assert report.missing == [str(tmp_path / "a copy.txt")]
