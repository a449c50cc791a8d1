# docmarkup/markdown/renderer.py

import logging

from .backends import BackendRegistry
from .config import BACKTICK_FORMAT, PLAIN_FORMAT, get_markup_config
from .highlight import Highlighter
from .postprocessors import apply_postprocessors
from .preprocessors import MultilinePreprocessor, add_sections
from .references import LookupContext, ReferenceResolver

logger = logging.getLogger(__name__)

FILE_KIND = "file"
# items whose text is a whole page rather than a short description
PROJECT_LEVEL_KINDS = {"module", "script", "classmod", "submodule", "topic", "example", "manual"}


class MarkupProcessor:
    """
    Turn documentation text into HTML for one session.

    Call it as ``processor(text, item=None, plain=False)``. Files and
    top-level modules go through the multiline preprocessor, other items only
    get their references resolved; both are then rendered by the backend.
    Without a backend, or with ``plain=True``, text is only reference-resolved.
    """

    def __init__(self, resolver, backend, backend_name, config, highlighter):
        self.resolver = resolver
        self.backend = backend
        self.backend_name = backend_name
        self.context = LookupContext.for_package(config.get("package"))
        self.default_language = config.get("default_language") or "lua"

        escape_underscores = config.get("escape_underscores")
        if escape_underscores is None:
            escape_underscores = backend is not None and backend.underscore_quirk
        self.escape_underscores = bool(escape_underscores)
        self.preprocessor = MultilinePreprocessor(resolver, highlighter, self.escape_underscores)

    @property
    def is_plain(self):
        return self.backend is None

    def __call__(self, text, item=None, plain=False):
        if text is None:
            return ""
        if plain or self.is_plain:
            return self.render_plain(text, item)

        kind = getattr(item, "kind", None)
        if kind == FILE_KIND:
            text = self.preprocessor.process(
                text, item, item.filename, self.default_language, self.context, item
            )
        elif kind in PROJECT_LEVEL_KINDS:
            owner = getattr(item, "file", None)
            source_name = getattr(owner, "filename", None) or getattr(item, "filename", "")
            text = self.preprocessor.process(
                text, None, source_name, self.default_language, self.context, item
            )
        else:
            text = self.resolver.resolve_inline_references(
                text, self.context, item, self.escape_underscores
            )

        html = self.backend.render(text)
        return apply_postprocessors(html, {"item": item, "backend": self.backend_name})

    def render_plain(self, text, item=None):
        # separate paragraphs without a Markdown renderer
        text = text.replace("\n\n", "\n<p>")
        return self.resolver.resolve_inline_references(text, self.context, item)

    def process_document(self, doc):
        """Record the document's sections, then render its text."""
        text = add_sections(doc, doc.raw_text)
        return self(text, doc)

    def resolve_inline_references(self, text, item=None):
        escape = not self.is_plain and self.escape_underscores
        return self.resolver.resolve_inline_references(text, self.context, item, escape)

    def href(self, reference):
        return self.resolver.link_target(reference)


def create_processor(lookup, config=None, registry=None, highlighter=None, href=None):
    """
    Build the text processor for a documentation session.

    Args:
        lookup: ``lookup(qualified_name, is_type) -> Reference | None``
        config: Overrides for get_markup_config()
        registry: BackendRegistry to select from (default: all known backends)
        highlighter: Code highlighter; built from the config when omitted
        href: Optional function computing a Reference's link target

    Returns:
        MarkupProcessor
    """
    config = get_markup_config(config)
    requested = config["format"]
    backtick_references = config.get("backtick_references")
    if requested == BACKTICK_FORMAT:
        backtick_references = True
        requested = PLAIN_FORMAT

    backend, actual = None, requested
    if requested != PLAIN_FORMAT:
        backend, actual = (registry or BackendRegistry()).select(requested)
        if backend is None:
            logger.warning(f"format: {requested} not found, falling back to text")

    if backtick_references is None:
        backtick_references = backend is not None

    resolver = ReferenceResolver(
        lookup,
        href=href,
        custom_references=config.get("custom_references"),
        backtick_references=bool(backtick_references),
    )
    if highlighter is None:
        highlighter = Highlighter(config["highlighter"], config.get("pygments_css_class", "highlight"))
    return MarkupProcessor(resolver, backend, actual, config, highlighter)
