from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Tuple

from markdown_it.token import Token

EntityNames = Mapping[str, Iterable[str]]


class StructuralViolation(ValueError):
    """Raised when the heading stream is unbalanced or a TOC entry has no label."""


@dataclass(frozen=True)
class HeadingRecord:
    level: int
    anchor_id: str
    label: str


@dataclass(frozen=True)
class TocEntry:
    level: int
    anchor_id: str


@dataclass(frozen=True)
class CompanionFiles:
    load_profile: str = "jasmin_highlight.html"
    charts: str = "jasmin_main.html"


@dataclass(frozen=True)
class ExtractState:
    in_heading: bool = False
    level: int = 0
    buffer: Tuple[Token, ...] = ()
    text: str = ""
    counter: int = 0
    toc: Tuple[TocEntry, ...] = ()
    labels: Mapping[str, str] = field(default_factory=dict)


@dataclass
class Extraction:
    tokens: List[Token]
    toc: Tuple[TocEntry, ...]
    labels: Mapping[str, str]

    @property
    def headings(self) -> Tuple[HeadingRecord, ...]:
        return tuple(HeadingRecord(entry.level, entry.anchor_id, self.labels[entry.anchor_id]) for entry in self.toc)
