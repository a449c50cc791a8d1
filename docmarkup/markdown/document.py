# docmarkup/markdown/document.py
"""
Documents and the sections recorded against their source lines.

A Document is owned by whoever extracted it (a documented file or a readme).
The markup layer only annotates it: the sectionizer fills ``sections`` and
``display_name``, and the multiline preprocessor reads ``sections`` back to
inject anchors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from django.utils.text import slugify


@dataclass(frozen=True)
class Section:
    line_number: int
    anchor_id: str
    title: str


def unique_slug_factory() -> Callable[[str], str]:
    """
    Return an anchor factory that slugifies titles and de-duplicates them.

    Repeated titles get ``-2``, ``-3``, ... appended, matching the heading
    slugs produced elsewhere in the rendering pipeline.
    """
    used_slugs: Dict[str, int] = {}

    def unique_slug(title: str) -> str:
        base = slugify(title) or "section"
        count = used_slugs.get(base, 0)
        if count == 0:
            used_slugs[base] = 1
            return base
        count += 1
        used_slugs[base] = count
        return f"{base}-{count}"

    return unique_slug


@dataclass
class Document:
    raw_text: str = ""
    filename: str = ""
    kind: str = "file"
    display_name: Optional[str] = None
    sections: Dict[int, str] = field(default_factory=dict)
    section_list: List[Section] = field(default_factory=list)
    anchor_factory: Optional[Callable[[str], str]] = None
    warnings: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.anchor_factory is None:
            self.anchor_factory = unique_slug_factory()

    def add_document_section(self, line_number: int, title: str) -> str:
        anchor_id = self.anchor_factory(title)
        self.sections[line_number] = anchor_id
        self.section_list.append(Section(line_number, anchor_id, title))
        return anchor_id

    def warning(self, message: str) -> None:
        self.warnings.append(message)


def split_lines(text: str) -> List[str]:
    """Split on ``\\n`` only; a trailing newline does not produce an extra line."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines
