# src/ds_app/modules/dedup/schemas.py
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DedupMode(str, Enum):
    dry_run = "dry_run"
    execute = "execute"


class Confidence(str, Enum):
    high = "high"  # every member has the same byte size
    size_mismatch = "size_mismatch"  # names match a copy pattern, sizes do not


class KeepReason(str, Enum):
    uncopied_name = "uncopied_name"
    oldest = "oldest"


class FileEntry(BaseModel):
    """One regular file found directly inside the scanned directory."""

    model_config = ConfigDict(frozen=True)

    absolute_path: str = Field(..., examples=["/data/inbox/report copy.pdf"])
    filename: str = Field(..., examples=["report copy.pdf"])
    size: int = Field(..., ge=0, description="Size in bytes.", examples=[245832])
    modified_at: datetime = Field(..., description="Last modification time.")


class DuplicateGroup(BaseModel):
    """Files sharing a normalized name, with exactly one designated to keep."""

    model_config = ConfigDict(frozen=True)

    normalized_key: tuple[str, str] = Field(
        ...,
        description="(original stem, lower-cased extension).",
        examples=[("report", ".pdf")],
    )
    normalized_name: str = Field(..., examples=["report.pdf"])
    members: list[FileEntry] = Field(..., min_length=2)
    keep: FileEntry
    delete: list[FileEntry] = Field(default_factory=list)
    confidence: Confidence = Confidence.high
    keep_reason: KeepReason = KeepReason.uncopied_name

    @model_validator(mode="after")
    def _keep_is_member(self) -> DuplicateGroup:
        member_paths = [m.absolute_path for m in self.members]
        if self.keep.absolute_path not in member_paths:
            raise ValueError("keep must be one of the group members")
        expected = sorted(p for p in member_paths if p != self.keep.absolute_path)
        if sorted(d.absolute_path for d in self.delete) != expected:
            raise ValueError("delete must be exactly the members other than keep")
        return self

    @property
    def flagged(self) -> bool:
        return self.confidence is not Confidence.high

    @property
    def sizes(self) -> list[int]:
        return sorted({m.size for m in self.members})


class Plan(BaseModel):
    model_config = ConfigDict(frozen=True)

    groups: list[DuplicateGroup] = Field(default_factory=list)
    total_files_to_delete: int = Field(0, ge=0)

    @property
    def groups_count(self) -> int:
        return len(self.groups)

    @property
    def flagged_groups(self) -> list[DuplicateGroup]:
        return [g for g in self.groups if g.flagged]

    @property
    def is_empty(self) -> bool:
        return not self.groups


class DedupResult(BaseModel):
    """What one scan hands to the caller: the plan plus any skipped-file warnings."""

    model_config = ConfigDict(frozen=True)

    root: str = Field(..., examples=["/data/inbox"])
    mode: DedupMode = DedupMode.dry_run
    plan: Plan = Field(default_factory=Plan)
    warnings: list[str] = Field(default_factory=list)


class FailedDeletion(BaseModel):
    path: str
    reason: str


class DeletionReport(BaseModel):
    deleted: list[str] = Field(default_factory=list)
    missing: list[str] = Field(
        default_factory=list,
        description="Files that were already gone when deletion was attempted.",
    )
    skipped: list[str] = Field(
        default_factory=list,
        description="Files left alone because their group sizes disagree.",
    )
    failed: list[FailedDeletion] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed
