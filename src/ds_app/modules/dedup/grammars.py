# src/ds_app/modules/dedup/grammars.py
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

__all__ = [
    "BrowserGrammar",
    "CompactGrammar",
    "CopySuffixGrammar",
    "DEFAULT_GRAMMARS",
    "SuffixMatch",
    "MacOSGrammar",
    "WindowsGrammar",
]

# Positive integer without leading zeros
_N = r"[1-9][0-9]*"


@dataclass(frozen=True)
class SuffixMatch:
    stem: str
    copy_index: int


class CopySuffixGrammar(ABC):
    """
    One way an OS or browser names a copy of a file.

    `parse` looks at a stem (no extension) and strips the copy-suffix if it sits
    at the very end; `render` builds the name such a copier would produce.
    """

    name: str
    pattern: re.Pattern[str]

    def parse(self, stem: str) -> SuffixMatch | None:
        m = self.pattern.fullmatch(stem)
        if m is None:
            return None
        n = m.group("n")
        return SuffixMatch(stem=m.group("stem"), copy_index=int(n) if n else 1)

    @abstractmethod
    def render(self, stem: str, extension: str, copy_index: int = 1) -> str:
        raise NotImplementedError


class MacOSGrammar(CopySuffixGrammar):
    """Finder: 'x copy.txt', 'x copy 2.txt'."""

    name = "macos"
    pattern = re.compile(rf"(?P<stem>.+) copy(?: (?P<n>{_N}))?", re.DOTALL)

    def render(self, stem: str, extension: str, copy_index: int = 1) -> str:
        if copy_index <= 1:
            return f"{stem} copy{extension}"
        return f"{stem} copy {copy_index}{extension}"


class WindowsGrammar(CopySuffixGrammar):
    """Explorer: 'x - Copy.txt', 'x - Copy (2).txt'. 'Copy' is case-sensitive."""

    name = "windows"
    pattern = re.compile(rf"(?P<stem>.+) - Copy(?: \((?P<n>{_N})\))?", re.DOTALL)

    def render(self, stem: str, extension: str, copy_index: int = 1) -> str:
        if copy_index <= 1:
            return f"{stem} - Copy{extension}"
        return f"{stem} - Copy ({copy_index}){extension}"


class BrowserGrammar(CopySuffixGrammar):
    """Download managers: 'x (1).txt'."""

    name = "browser"
    pattern = re.compile(rf"(?P<stem>.+) \((?P<n>{_N})\)", re.DOTALL)

    def render(self, stem: str, extension: str, copy_index: int = 1) -> str:
        return f"{stem} ({max(1, copy_index)}){extension}"


class CompactGrammar(CopySuffixGrammar):
    """Unspaced variant some tools emit: 'x(1).txt'."""

    name = "compact"
    pattern = re.compile(rf"(?P<stem>.*\S)\((?P<n>{_N})\)", re.DOTALL)

    def render(self, stem: str, extension: str, copy_index: int = 1) -> str:
        return f"{stem}({max(1, copy_index)}){extension}"


# Priority order: first match wins.
DEFAULT_GRAMMARS: tuple[CopySuffixGrammar, ...] = (
    MacOSGrammar(),
    WindowsGrammar(),
    BrowserGrammar(),
    CompactGrammar(),
)
