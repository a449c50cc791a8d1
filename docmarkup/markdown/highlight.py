# docmarkup/markdown/highlight.py
"""Syntax highlighting for code blocks found in documentation text."""

import logging

from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)


class Highlighter:
    """
    Highlight code to HTML without the surrounding block container.

    The multiline preprocessor adds the container itself, so the formatter
    runs with ``nowrap=True``. Setting ``name`` to ``"none"`` disables
    highlighting, which also turns off code block detection.
    """

    def __init__(self, name: str = "pygments", css_class: str = "highlight"):
        self.name = name
        self.css_class = css_class

    @property
    def enabled(self) -> bool:
        return self.name != "none"

    def _lexer(self, language: str, source_name: str):
        try:
            return get_lexer_by_name(language.strip(), stripnl=False)
        except ClassNotFound:
            logger.debug(f"{source_name}: no lexer for '{language}', using plain text")
            return TextLexer(stripnl=False)

    def __call__(
        self,
        language: str,
        source_name: str,
        code: str,
        start_line: int = 1,
        inline: bool = False,
    ) -> str:
        formatter = HtmlFormatter(
            nowrap=True,
            cssclass=self.css_class,
            linenostart=max(start_line, 1),
        )
        html = pygments_highlight(code, self._lexer(language, source_name), formatter)
        if inline:
            return html.strip()
        return html
