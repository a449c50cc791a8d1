# docmarkup/markdown/preprocessors/sections.py
"""
Sectionizer for readme-style documents.

The first line decides the heading depth that counts as a section:

    # Project title        -> display name "Project title", sections at "#"
    (no heading)           -> sections at "##"

Every later heading of exactly that depth is recorded on the Document so the
multiline preprocessor can drop an anchor in front of it and the page layer
can list it in a table of contents.

Sections sit at the same depth as the title, not one level below it. A readme
shaped like ``# Project`` followed by ``## Install`` and ``## Usage`` records
no sections; write the title with ``#`` and the sections with ``#`` too, or
leave the title heading out so ``##`` headings count.
"""

from typing import Optional, Tuple

from ..document import Document, split_lines

DEFAULT_SECTION_DEPTH = 2


def _split_heading(line: str, require_space: bool = False) -> Optional[Tuple[int, str]]:
    """Return (depth, raw title) for a Markdown ATX heading line, else None."""
    depth = len(line) - len(line.lstrip("#"))
    if depth == 0:
        return None
    rest = line[depth:]
    if require_space and not rest[:1].isspace():
        return None
    if not rest.strip():
        return None
    return depth, rest


def clean_heading_title(title: str) -> str:
    """
    Normalize a heading title.

    The carriage return has to go before the closing hashes, otherwise
    ``Title ##\\r`` keeps its hashes.
    """
    if title.endswith("\r"):
        title = title[:-1]
    stripped = title.rstrip()
    if stripped.endswith("#"):
        title = stripped.rstrip("#")
    return title.strip()


def add_sections(doc: Document, text: str) -> str:
    """
    Record section anchors on ``doc`` and return ``text`` unchanged.
    """
    target_depth = DEFAULT_SECTION_DEPTH
    for line_number, line in enumerate(split_lines(text), start=1):
        if line_number == 1:
            heading = _split_heading(line, require_space=True)
            if heading:
                target_depth, title = heading
                doc.display_name = clean_heading_title(title)
            continue

        heading = _split_heading(line)
        if heading and heading[0] == target_depth:
            title = clean_heading_title(heading[1])
            if title:
                doc.add_document_section(line_number, title)
    return text
