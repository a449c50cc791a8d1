# docmarkup/markdown/builtin.py
"""
Minimal Markdown renderer used when no Markdown library can be loaded.

Handles only block structure: ATX headings, indented code, raw HTML blocks
and paragraphs. Inline markup is left as written.
"""

from typing import List

from django.utils.html import escape

_RAW_BLOCK_ENDS = {"<pre": "</pre>", "<script": "</script>", "<style": "</style>"}


def _raw_block_end(line: str):
    lowered = line.lstrip().lower()
    for opening, closing in _RAW_BLOCK_ENDS.items():
        if lowered.startswith(opening):
            return closing
    return None


def render_builtin(text: str) -> str:
    lines = text.replace("\r\n", "\n").split("\n")
    blocks: List[str] = []
    paragraph: List[str] = []

    def flush_paragraph():
        if paragraph:
            blocks.append("<p>" + "\n".join(paragraph).strip() + "</p>")
            paragraph.clear()

    i = 0
    while i < len(lines):
        line = lines[i]
        stripped = line.strip()

        if not stripped:
            flush_paragraph()
            i += 1
            continue

        closing = _raw_block_end(line)
        if closing and not paragraph:
            raw = [line]
            while closing not in lines[i].lower() and i + 1 < len(lines):
                i += 1
                raw.append(lines[i])
            blocks.append("\n".join(raw))
            i += 1
            continue

        if line.startswith("    ") and not paragraph:
            code = []
            while i < len(lines) and (lines[i].startswith("    ") or not lines[i].strip()):
                code.append(lines[i][4:])
                i += 1
            while code and not code[-1].strip():
                code.pop()
            blocks.append("<pre><code>" + escape("\n".join(code)) + "\n</code></pre>")
            continue

        depth = len(stripped) - len(stripped.lstrip("#"))
        if 0 < depth <= 6 and stripped[depth:depth + 1] == " ":
            flush_paragraph()
            title = stripped[depth:].strip().rstrip("#").strip()
            blocks.append(f"<h{depth}>{title}</h{depth}>")
            i += 1
            continue

        paragraph.append(line)
        i += 1

    flush_paragraph()
    return "\n".join(blocks) + "\n" if blocks else ""
