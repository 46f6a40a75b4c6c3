# src/ds_app/modules/dedup/grouper.py
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from ds_app.core.progress import NoOpReporter, ProgressReporter

from .normalizer import FilenameNormalizer, NormalizedName
from .schemas import Confidence, FileEntry


@dataclass(frozen=True)
class Member:
    entry: FileEntry
    name: NormalizedName


@dataclass(frozen=True)
class GroupCandidate:
    """A bucket of >= 2 files sharing a normalized key, before a keeper is chosen."""

    key: tuple[str, str]
    members: tuple[Member, ...]
    confidence: Confidence

    @property
    def normalized_name(self) -> str:
        # Display the extension as the uncopied members spell it, if any
        for m in self.members:
            if not m.name.is_copy:
                return m.name.original_name
        return self.members[0].name.original_name

    @property
    def uncopied(self) -> tuple[Member, ...]:
        return tuple(m for m in self.members if not m.name.is_copy)


class DuplicateGrouper:
    def __init__(self, normalizer: FilenameNormalizer | None = None) -> None:
        self.normalizer = normalizer or FilenameNormalizer()

    def group(
        self, entries: Iterable[FileEntry], reporter: ProgressReporter | None = None
    ) -> list[GroupCandidate]:
        reporter = reporter or NoOpReporter()
        entries = list(entries)
        reporter.start("group", total=len(entries), text="Normalizing names…")

        buckets: dict[tuple[str, str], list[Member]] = {}
        for entry in entries:
            name = self.normalizer.normalize(entry.filename)
            buckets.setdefault(name.key, []).append(Member(entry, name))
            reporter.update("group", 1, text=entry.filename)
        reporter.end("group")

        candidates: list[GroupCandidate] = []
        for key in sorted(buckets):
            members = buckets[key]
            if len(members) < 2:
                continue  # nothing to deduplicate
            members.sort(key=lambda m: m.entry.absolute_path)
            same_size = len({m.entry.size for m in members}) == 1
            candidates.append(
                GroupCandidate(
                    key=key,
                    members=tuple(members),
                    confidence=Confidence.high if same_size else Confidence.size_mismatch,
                )
            )
        return candidates
