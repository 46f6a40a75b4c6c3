# src/ds_app/core/progress.py
from __future__ import annotations

from typing import Literal, Protocol, runtime_checkable


# Phases the service/executor may report
Phase = Literal["scan", "group", "select", "delete"]


@runtime_checkable
class ProgressReporter(Protocol):
    def start(self, phase: Phase, total: int | None = None, text: str | None = None) -> None: ...
    def update(self, phase: Phase, advance: int = 1, text: str | None = None) -> None: ...
    def skip(self, phase: Phase, name: str, reason: str) -> None: ...
    def end(self, phase: Phase) -> None: ...


class NoOpReporter:
    """Used when the caller passes no reporter."""

    def start(self, phase: Phase, total: int | None = None, text: str | None = None) -> None:
        pass

    def update(self, phase: Phase, advance: int = 1, text: str | None = None) -> None:
        pass

    def skip(self, phase: Phase, name: str, reason: str) -> None:
        pass

    def end(self, phase: Phase) -> None:
        pass
