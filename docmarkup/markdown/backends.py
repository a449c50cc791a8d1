# docmarkup/markdown/backends.py
"""
Markdown rendering backends.

Each factory tries to load its library and returns a Backend, or None when the
library (or, for pandoc, the pandoc binary) is not available. Selection tries
the requested backend first and then every registered one in order.
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Tuple

from .builtin import render_builtin
from .config import get_pandoc_config

logger = logging.getLogger(__name__)


class MarkupRenderError(RuntimeError):
    """A backend failed while rendering. Not recoverable for the session."""


@dataclass(frozen=True)
class Backend:
    name: str
    render: Callable[[str], str]
    # link labels need their underscores escaped for this renderer
    underscore_quirk: bool = False


BackendFactory = Callable[[str], Optional[Backend]]


def _markdown_backend(name: str) -> Optional[Backend]:
    try:
        import markdown
    except ImportError:
        logger.warning("Python-Markdown not installed - 'markdown' backend unavailable")
        return None

    md = markdown.Markdown(extensions=["fenced_code", "tables", "def_list"])

    def render(text: str) -> str:
        return md.reset().convert(text)

    return Backend(name, render, underscore_quirk=True)


def _pandoc_backend(name: str) -> Optional[Backend]:
    try:
        import pypandoc
    except ImportError:
        logger.warning("pypandoc not installed - 'pandoc' backend unavailable")
        return None

    try:
        pypandoc.get_pandoc_version()
    except OSError:
        logger.warning("pandoc binary not found - 'pandoc' backend unavailable")
        return None

    pandoc_config = get_pandoc_config()

    def render(text: str) -> str:
        try:
            return pypandoc.convert_text(
                text,
                to="html5",
                format="markdown",
                extra_args=pandoc_config["extra_args"],
                filters=pandoc_config.get("filters", []),
            )
        except RuntimeError as e:
            logger.error(f"pandoc failed with error {e}")
            raise MarkupRenderError(f"pandoc failed: {e}") from e

    return Backend(name, render)


def _mistune_backend(name: str) -> Optional[Backend]:
    try:
        import mistune
    except ImportError:
        logger.warning("mistune not installed - 'mistune' backend unavailable")
        return None

    if hasattr(mistune, "create_markdown"):
        # mistune 2.x and 3.x; raw HTML has to survive for our links and <pre> blocks
        md = mistune.create_markdown(escape=False)
    elif hasattr(mistune, "Markdown"):
        # mistune 0.8
        md = mistune.Markdown(escape=False)
    else:
        logger.warning(f"Unsupported mistune version {getattr(mistune, '__version__', '?')}")
        return None

    def render(text: str) -> str:
        result = md(text)
        # parse() style results carry the parser state along with the html
        if isinstance(result, tuple):
            result = result[0]
        if not isinstance(result, str):
            raise MarkupRenderError(f"mistune returned {type(result).__name__}, expected str")
        return result

    return Backend(name, render)


def _markdown_it_backend(name: str) -> Optional[Backend]:
    try:
        from markdown_it import MarkdownIt
    except ImportError:
        logger.warning("markdown-it-py not installed - 'markdown-it' backend unavailable")
        return None

    md = MarkdownIt("commonmark", {"html": True})
    return Backend(name, md.render)


def _generic_backend(name: str) -> Optional[Backend]:
    """Use any importable module that exposes ``markdown(text)`` or ``render(text)``."""
    try:
        module = importlib.import_module(name)
    except (ImportError, ValueError, TypeError):
        # "" raises ValueError, relative names like ".x" raise TypeError
        return None
    for attr in ("markdown", "render"):
        render = getattr(module, attr, None)
        if callable(render):
            return Backend(name, render)
    return None


def _builtin_backend(name: str) -> Optional[Backend]:
    return Backend(name, render_builtin)


BACKENDS: Dict[str, BackendFactory] = {
    "markdown": _markdown_backend,
    "pandoc": _pandoc_backend,
    "mistune": _mistune_backend,
    "markdown-it": _markdown_it_backend,
    "builtin": _builtin_backend,
}


class BackendRegistry:
    """
    Ordered, read-only table of backend factories for one session.

    Args:
        factories: Mapping of name to factory; defaults to BACKENDS
        generic: Factory tried for names that are not registered
    """

    def __init__(
        self,
        factories: Optional[Dict[str, BackendFactory]] = None,
        generic: Optional[BackendFactory] = _generic_backend,
    ):
        self._factories = dict(BACKENDS if factories is None else factories)
        self._generic = generic

    def names(self) -> Iterable[str]:
        return list(self._factories)

    def _construct(self, name: str) -> Optional[Backend]:
        factory = self._factories.get(name, self._generic)
        if factory is None:
            return None
        return factory(name)

    def select(self, name: str) -> Tuple[Optional[Backend], str]:
        """
        Return ``(backend, actual_name)`` for the requested format.

        Falls back to the first registered backend that loads. When nothing
        loads the backend is None and the caller renders plain text.
        """
        backend = self._construct(name)
        if backend is not None:
            return backend, name

        for candidate in self._factories:
            if candidate == name:
                continue
            backend = self._construct(candidate)
            if backend is not None:
                logger.warning(f"format: {name} not found, using {candidate}")
                return backend, candidate

        return None, name
