# docmarkup/markdown/preprocessors/multiline.py
"""
Line-oriented preprocessing of whole documents before Markdown rendering.

One forward pass over the lines of a document that:
- applies ``@lookup <name>`` directives to the document's lookup context
- highlights fenced (```lang) and indented code blocks
- passes ``@plain`` indented blocks and untagged fences through as literal code
- drops an ``<a name>`` anchor in front of lines recorded as sections
- resolves inline references on every other line
"""

import logging
from typing import List, Optional, Tuple

from django.utils.html import format_html
from django.utils.safestring import mark_safe

from ..document import Document, split_lines
from ..references import LookupContext, ReferenceResolver

logger = logging.getLogger(__name__)

FENCE = "```"
LOOKUP_DIRECTIVE = "@lookup"
PLAIN_DIRECTIVE = "@plain"
CODE_INDENT = 4
PLAIN_INDENT = " " * 5


def indent_line(line: str) -> Tuple[int, str]:
    """Expand tabs to four spaces and return (indent width, expanded line)."""
    line = line.replace("\t", "    ")
    return len(line) - len(line.lstrip()), line


def is_blank(line: str) -> bool:
    return not line.strip()


def lookup_directive(line: str) -> Optional[str]:
    parts = line.split()
    if len(parts) == 2 and parts[0] == LOOKUP_DIRECTIVE:
        return parts[1]
    return None


class _LineCursor:
    """Hands out lines one at a time and remembers the current line number."""

    def __init__(self, text: str):
        self._lines = split_lines(text)
        self.line_number = 0

    def next(self) -> Optional[str]:
        if self.line_number >= len(self._lines):
            self.line_number = len(self._lines) + 1
            return None
        self.line_number += 1
        return self._lines[self.line_number - 1]


class MultilinePreprocessor:
    def __init__(self, resolver: ReferenceResolver, highlighter, escape_underscores: bool = False):
        self.resolver = resolver
        self.highlighter = highlighter
        self.escape_underscores = escape_underscores

    def process(
        self,
        text: str,
        doc: Optional[Document] = None,
        source_name: str = "",
        default_language: str = "lua",
        ctx: Optional[LookupContext] = None,
        sink=None,
    ) -> str:
        """
        Preprocess one document.

        Args:
            text: Raw documentation text
            doc: Document whose recorded sections get anchors, if any
            source_name: File name used for highlighting and diagnostics
            default_language: Language for indented code blocks
            ctx: Session lookup context; the local prefix starts empty here
            sink: Object receiving ``warning(message)`` for unresolved tags

        Returns:
            Text ready for a Markdown backend
        """
        document_pass = _DocumentPass(self, (ctx or LookupContext()).for_document(), source_name, sink)
        return document_pass.run(text, doc, default_language)


class _DocumentPass:
    """State of one ``process()`` call; the preprocessor itself stays read-only."""

    def __init__(self, preprocessor: MultilinePreprocessor, ctx: LookupContext, source_name: str, sink):
        self.resolver = preprocessor.resolver
        self.highlighter = preprocessor.highlighter
        self.escape_underscores = preprocessor.escape_underscores
        self.ctx = ctx
        self.source_name = source_name
        self.sink = sink
        self.output: List[str] = []

    def run(self, text: str, doc: Optional[Document], default_language: str) -> str:
        highlighting = self.highlighter.enabled
        cursor = _LineCursor(text)
        line = cursor.next()
        while line is not None:
            token = lookup_directive(line)
            if token:
                self.ctx.set_lookup(token)
                line = cursor.next()
                continue

            if highlighting and line.startswith(FENCE):
                line = self._fenced_block(line, cursor)
                continue

            indent, line = indent_line(line)
            if highlighting and indent >= CODE_INDENT:
                line = self._indented_block(line, indent, cursor, default_language)
                continue

            anchor = doc.sections.get(cursor.line_number) if doc is not None else None
            if anchor:
                self.output.append(format_html('<a name="{}"></a>', anchor))
            self.output.append(
                self._resolve(line, cursor.line_number, self.escape_underscores)
            )
            line = cursor.next()

        return "\n".join(self.output)

    def _fenced_block(self, fence_line: str, cursor: _LineCursor) -> Optional[str]:
        language = fence_line[len(FENCE):].strip()
        start_line = cursor.line_number + 1
        code: List[str] = []
        if not language:
            self.output.append("")

        line = cursor.next()
        while line is not None and not line.startswith(FENCE):
            if language:
                code.append(line)
            else:
                self.output.append(PLAIN_INDENT + line)
            line = cursor.next()

        if language:
            self._emit_code(code, language, start_line)
        else:
            self.output.append("")
        # skip the closing fence; an unterminated block simply ends here
        return cursor.next()

    def _indented_block(
        self, line: str, indent: int, cursor: _LineCursor, language: str
    ) -> Optional[str]:
        start_indent = indent
        start_line = cursor.line_number
        plain = line.strip() == PLAIN_DIRECTIVE
        code: List[str] = []

        if plain:
            line = cursor.next()
            if line is None:
                return None
            indent, line = indent_line(line)
            if indent < CODE_INDENT and not is_blank(line):
                return line
            self.output.append("")

        while True:
            body = line[min(indent, start_indent):]
            if plain:
                self.output.append(PLAIN_INDENT + body if body.strip() else "")
            else:
                code.append(body)
            line = cursor.next()
            if line is None:
                break
            indent, line = indent_line(line)
            if indent < CODE_INDENT and not is_blank(line):
                break

        if plain:
            self.output.append("")
            return line

        while len(code) > 1 and is_blank(code[-1]):
            code.pop()
        self._emit_code(code, language, start_line)
        return line

    def _emit_code(self, code: List[str], language: str, start_line: int) -> None:
        source = "\n".join(code)
        if not source:
            self.output.append("")
            return
        # the trailing newline lets a comment on the last line be recognised
        html = self.highlighter(language, self.source_name, source + "\n", start_line, False)
        html = self._resolve(html.rstrip("\n"), start_line, escape_underscores=False)
        # stylesheets from HtmlFormatter.get_style_defs() are scoped to this class
        css_class = getattr(self.highlighter, "css_class", None)
        if css_class:
            block = format_html('<pre class="{}">{}</pre>', css_class, mark_safe(html))
        else:
            block = f"<pre>{html}</pre>"
        self.output.extend(["", block, ""])

    def _resolve(self, text: str, line_number: int, escape_underscores: bool) -> str:
        result, diagnostics = self.resolver.scan(text, self.ctx, escape_underscores)
        for diagnostic in diagnostics:
            message = f"{self.source_name}:{line_number}: {diagnostic.message}"
            if self.sink is not None and hasattr(self.sink, "warning"):
                self.sink.warning(message)
            else:
                logger.warning(message)
        return result
