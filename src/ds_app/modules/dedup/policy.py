# src/ds_app/modules/dedup/policy.py
from __future__ import annotations

from collections.abc import Sequence

from .grouper import GroupCandidate, Member
from .schemas import DuplicateGroup, KeepReason


def _earliest_key(m: Member) -> tuple:
    # Total order: oldest first, then shortest name, then path
    return (m.entry.modified_at, len(m.entry.filename), m.entry.absolute_path)


class SelectionPolicy:
    """
    Picks the one file of a group to keep.

    1. A single member without a copy-suffix wins outright.
    2. Otherwise (several uncopied names, e.g. 'report.PDF' and 'report.pdf',
       or none at all) the earliest-modified member of the whole group wins.
    """

    def choose(self, members: Sequence[Member]) -> tuple[Member, KeepReason]:
        if not members:
            raise ValueError("cannot choose a keeper from an empty group")
        uncopied = [m for m in members if not m.name.is_copy]
        if len(uncopied) == 1:
            return uncopied[0], KeepReason.uncopied_name
        return min(members, key=_earliest_key), KeepReason.oldest

    def select(self, candidate: GroupCandidate) -> DuplicateGroup:
        keeper, reason = self.choose(candidate.members)
        members = [m.entry for m in candidate.members]
        return DuplicateGroup(
            normalized_key=candidate.key,
            normalized_name=candidate.normalized_name,
            members=members,
            keep=keeper.entry,
            delete=[e for e in members if e.absolute_path != keeper.entry.absolute_path],
            confidence=candidate.confidence,
            keep_reason=reason,
        )
