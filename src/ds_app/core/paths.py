from __future__ import annotations

from pathlib import Path


def ensure_within_root(candidate: Path, root: Path) -> Path:
    """
    Guardrail: resolve and ensure `candidate` is under `root`.

    Only the parent directory is resolved so a symlink candidate is checked by
    where the link lives, not where it points.
    """
    candidate = candidate.parent.resolve() / candidate.name
    root = root.resolve()
    if root not in candidate.parents and candidate != root:
        raise ValueError(f"{candidate} is outside of root {root}")
    return candidate
