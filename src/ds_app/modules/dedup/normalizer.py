# src/ds_app/modules/dedup/normalizer.py
"""
Filename normalization.

Recovers the name a copy was made from: ``"report copy 2.pdf"`` normalizes to
stem ``"report"``, extension ``".pdf"``, copy index 2. Grammars are tried in a
fixed priority order and the first one that matches wins; when a lower-priority
grammar would also have matched, the shadowed reading is logged as a
``PatternAmbiguity`` at DEBUG level.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ds_app.core.logging import get_logger

from .grammars import DEFAULT_GRAMMARS, CopySuffixGrammar

__all__ = [
    "FilenameNormalizer",
    "NormalizedName",
    "PatternAmbiguity",
    "normalize",
    "split_name",
]

logger = get_logger(__name__)


@dataclass(frozen=True)
class NormalizedName:
    original_stem: str
    extension: str  # includes the leading dot, or "" when there is none
    copy_index: int | None = None
    is_copy: bool = False
    grammar: str | None = None

    @property
    def original_name(self) -> str:
        return f"{self.original_stem}{self.extension}"

    @property
    def key(self) -> tuple[str, str]:
        """Grouping identity: stems compare case-sensitively, extensions do not."""
        return (self.original_stem, self.extension.lower())


@dataclass(frozen=True)
class PatternAmbiguity:
    filename: str
    chosen: str
    shadowed: tuple[str, ...]


def split_name(filename: str) -> tuple[str, str]:
    """
    Split into (stem, extension), the extension keeping its dot.

    'a.tar.gz' -> ('a.tar', '.gz'); 'README' -> ('README', '');
    '.bashrc' -> ('.bashrc', ''); 'notes.' -> ('notes.', '').
    """
    idx = filename.rfind(".")
    if idx <= 0 or idx == len(filename) - 1:
        return filename, ""
    return filename[:idx], filename[idx:]


class FilenameNormalizer:
    def __init__(self, grammars: Sequence[CopySuffixGrammar] | None = None) -> None:
        self.grammars: tuple[CopySuffixGrammar, ...] = tuple(
            grammars if grammars is not None else DEFAULT_GRAMMARS
        )

    def normalize(self, filename: str) -> NormalizedName:
        if not filename:
            raise ValueError("filename must be non-empty")

        stem, ext = split_name(filename)
        for idx, grammar in enumerate(self.grammars):
            match = grammar.parse(stem)
            if match is None:
                continue
            if logger.isEnabledFor(logging.DEBUG):
                self._log_ambiguity(filename, stem, idx)
            return NormalizedName(
                original_stem=match.stem,
                extension=ext,
                copy_index=match.copy_index,
                is_copy=True,
                grammar=grammar.name,
            )
        return NormalizedName(original_stem=stem, extension=ext)

    def find_ambiguity(self, filename: str) -> PatternAmbiguity | None:
        """Report when more than one grammar could parse `filename`."""
        stem, _ = split_name(filename)
        matched = [g.name for g in self.grammars if g.parse(stem) is not None]
        if len(matched) < 2:
            return None
        return PatternAmbiguity(
            filename=filename, chosen=matched[0], shadowed=tuple(matched[1:])
        )

    def _log_ambiguity(self, filename: str, stem: str, chosen_idx: int) -> None:
        shadowed = tuple(
            g.name for g in self.grammars[chosen_idx + 1 :] if g.parse(stem) is not None
        )
        if shadowed:
            amb = PatternAmbiguity(
                filename=filename,
                chosen=self.grammars[chosen_idx].name,
                shadowed=shadowed,
            )
            logger.debug(
                "Pattern ambiguity for %r: using %s over %s",
                amb.filename,
                amb.chosen,
                ", ".join(amb.shadowed),
            )


_default = FilenameNormalizer()


def normalize(filename: str) -> NormalizedName:
    return _default.normalize(filename)
