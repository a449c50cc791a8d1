# docmarkup/markdown/references.py
"""
Cross-reference resolution for documentation text.

Converts:
    @{pkg.mod.func}            -> <a href="...">pkg.mod.func</a>
    @{func|the function}       -> <a href="...">the function</a>
    @{issue:42}                -> custom resolver "issue", then the default one
    @{\\func}                  -> @{func}  (literal, used to document the syntax)
    `func`                     -> link when it resolves, <code>func</code> otherwise

Unresolvable tags become ``???`` and produce one diagnostic each. Diagnostics
are collected while scanning and written afterwards, either to the item that
owns the text or to this module's logger.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from django.utils.html import escape, format_html

logger = logging.getLogger(__name__)

PLACEHOLDER = "???"
NOT_FOUND = "not found"
# ``@lookup none`` switches off lookup of unqualified names for a document
NO_LOOKUP = "none."


class ReferenceNotFound(LookupError):
    """Raised by a lookup function to explain why a name did not resolve."""


@dataclass
class Reference:
    qualified_name: str
    label: Optional[str] = None
    type_hint: Optional[str] = None
    resolved_href: Optional[str] = None


@dataclass(frozen=True)
class Resolution:
    reference: Optional[Reference] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.reference is not None


@dataclass
class LookupContext:
    global_prefix: Optional[str] = None
    local_prefix: Optional[str] = None

    @classmethod
    def for_package(cls, package: Optional[str]) -> "LookupContext":
        return cls(global_prefix=f"{package}." if package else None)

    def for_document(self) -> "LookupContext":
        """Fresh context for one document: same package, no local prefix."""
        return LookupContext(global_prefix=self.global_prefix)

    def set_lookup(self, token: str) -> None:
        self.local_prefix = f"{token}."


@dataclass(frozen=True)
class Diagnostic:
    message: str
    line: Optional[int] = None


Lookup = Callable[[str, bool], Optional[Reference]]
CustomResolver = Callable[[str], Optional[Reference]]


def lookup_from_modules(modules: Sequence, current=None) -> Lookup:
    """
    Build a lookup function over documented modules.

    Names are resolved from ``current`` when a single module is being
    documented, otherwise from the first module. Each module must provide
    ``resolve_reference(name, modules, is_type)``.
    """

    def lookup(name: str, is_type: bool = False) -> Optional[Reference]:
        module = current if current is not None else (modules[0] if modules else None)
        if module is None:
            raise ReferenceNotFound("no modules to search")
        return module.resolve_reference(name, modules, is_type)

    return lookup


def report_diagnostics(diagnostics: Sequence[Diagnostic], sink=None) -> None:
    """Write diagnostics to ``sink.warning`` or, without a sink, to the log."""
    for diagnostic in diagnostics:
        if sink is not None and hasattr(sink, "warning"):
            sink.warning(diagnostic.message)
        else:
            logger.warning("nofile error: %s", diagnostic.message)


class ReferenceResolver:
    """
    Resolve names against the documentation model and rewrite inline tags.

    Args:
        lookup: ``lookup(qualified_name, is_type) -> Reference | None``; may
            raise ReferenceNotFound with a reason
        href: Optional function computing the link target of a Reference;
            without it the lookup's own ``resolved_href`` is used
        custom_references: Mapping of tag prefix to custom resolver
        backtick_references: Treat `name` spans as optional references
    """

    def __init__(
        self,
        lookup: Lookup,
        href: Optional[Callable[[Reference], Optional[str]]] = None,
        custom_references: Optional[Dict[str, CustomResolver]] = None,
        backtick_references: bool = False,
    ):
        self.lookup = lookup
        self.href = href
        self.custom_references = dict(custom_references or {})
        self.backtick_references = backtick_references

    def link_target(self, reference: Reference) -> str:
        target = self.href(reference) if self.href else reference.resolved_href
        return target or "#"

    def _found(self, reference: Reference) -> Resolution:
        return Resolution(
            reference=replace(reference, resolved_href=self.link_target(reference))
        )

    def _lookup(self, name: str, is_type: bool) -> Resolution:
        try:
            reference = self.lookup(name, is_type)
        except ReferenceNotFound as exc:
            return Resolution(error=str(exc) or NOT_FOUND)
        if reference is None:
            return Resolution(error=NOT_FOUND)
        return self._found(reference)

    def resolve(
        self, name: str, is_type: bool = False, ctx: Optional[LookupContext] = None
    ) -> Resolution:
        """
        Resolve ``name`` as written, then with the package prefix, then with
        the document's local prefix. A miss reports the reason of the first
        attempt.
        """
        ctx = ctx or LookupContext()
        if ctx.local_prefix == NO_LOOKUP and "." not in name:
            return Resolution(error=NOT_FOUND)

        first = self._lookup(name, is_type)
        if first.ok:
            return first

        for prefix in (ctx.global_prefix, ctx.local_prefix):
            if not prefix or prefix == NO_LOOKUP:
                continue
            retry = self._lookup(prefix + name, is_type)
            if retry.ok:
                return retry

        return first

    def _resolve_custom(self, qname: str) -> Tuple[Optional[Resolution], str]:
        prefix, colon, rest = qname.partition(":")
        resolver = self.custom_references.get(prefix) if colon else None
        if resolver is None:
            return None, qname
        reference = resolver(rest)
        if reference is None:
            return None, rest
        return self._found(reference), rest

    def render_tag(
        self,
        body: str,
        ctx: LookupContext,
        escape_underscores: bool,
        diagnostics: List[Diagnostic],
    ) -> str:
        if body.startswith("\\"):
            return "@{" + body[1:] + "}"

        qname, bar, label = body.partition("|")
        qname = qname.rstrip() if bar else body
        label = label.strip() or None

        resolution, name = self._resolve_custom(qname)
        if resolution is None:
            resolution = self.resolve(name, False, ctx)
        if not resolution.ok:
            diagnostics.append(Diagnostic(f"{resolution.error} {qname}"))
            return PLACEHOLDER

        reference = resolution.reference
        label = label or reference.label
        if label and escape_underscores:
            label = label.replace("_", "\\_")
        return str(format_html('<a href="{}">{}</a>', reference.resolved_href, label or qname))

    def render_backtick(self, name: str, ctx: LookupContext, escape_underscores: bool) -> str:
        resolution = self.resolve(name, False, ctx)
        label = name.replace("_", "\\_") if escape_underscores else name
        if resolution.ok:
            return str(format_html('<a href="{}">{}</a>', resolution.reference.resolved_href, label))
        return f"<code>{escape(label)}</code>"

    def scan(
        self,
        text: str,
        ctx: Optional[LookupContext] = None,
        escape_underscores: bool = False,
    ) -> Tuple[str, List[Diagnostic]]:
        """Rewrite every tag (and backtick span, when enabled) in ``text``."""
        ctx = ctx or LookupContext()
        diagnostics: List[Diagnostic] = []
        parts: List[str] = []
        pos = 0
        while True:
            tag_start = text.find("@{", pos)
            tick_start = text.find("`", pos) if self.backtick_references else -1
            starts = [i for i in (tag_start, tick_start) if i >= 0]
            if not starts:
                break
            start = min(starts)
            parts.append(text[pos:start])

            if start == tag_start:
                end = text.find("}", start + 2)
                if end < 0:
                    parts.append("@{")
                    pos = start + 2
                    continue
                parts.append(
                    self.render_tag(text[start + 2 : end], ctx, escape_underscores, diagnostics)
                )
            else:
                end = text.find("`", start + 1)
                if end < 0:
                    parts.append("`")
                    pos = start + 1
                    continue
                name = text[start + 1 : end]
                if name:
                    parts.append(self.render_backtick(name, ctx, escape_underscores))
                else:
                    parts.append("``")
            pos = end + 1

        parts.append(text[pos:])
        return "".join(parts), diagnostics

    def resolve_inline_references(
        self,
        text: str,
        ctx: Optional[LookupContext] = None,
        sink=None,
        escape_underscores: bool = False,
    ) -> str:
        result, diagnostics = self.scan(text, ctx, escape_underscores)
        report_diagnostics(diagnostics, sink)
        return result
