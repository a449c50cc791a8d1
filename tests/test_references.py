"""Tests for reference resolution and inline tag rewriting."""

import logging

from bs4 import BeautifulSoup
from conftest import FakeItem, FakeModel

from docmarkup.markdown.references import (
    NO_LOOKUP,
    PLACEHOLDER,
    LookupContext,
    Reference,
    ReferenceResolver,
    lookup_from_modules,
    report_diagnostics,
)


def _links(html):
    return BeautifulSoup(html, "html.parser").find_all("a")


class TestResolve:
    def test_unqualified_hit(self, model):
        resolver = ReferenceResolver(model.lookup)
        resolution = resolver.resolve("foo")
        assert resolution.ok
        assert resolution.reference.qualified_name == "foo"
        assert resolution.reference.resolved_href == "foo.html#foo"

    def test_retry_order_is_global_then_local(self):
        model = FakeModel(["mod.f"])
        resolver = ReferenceResolver(model.lookup)
        ctx = LookupContext(global_prefix="pkg.", local_prefix="mod.")
        resolution = resolver.resolve("f", ctx=ctx)
        assert resolution.ok
        assert model.tried == ["f", "pkg.f", "mod.f"]

    def test_global_prefix_wins_over_local(self):
        model = FakeModel(["pkg.f", "mod.f"])
        resolver = ReferenceResolver(model.lookup)
        ctx = LookupContext(global_prefix="pkg.", local_prefix="mod.")
        assert resolver.resolve("f", ctx=ctx).reference.qualified_name == "pkg.f"

    def test_failure_reports_first_reason(self):
        model = FakeModel([], reasons={"f": "no such function", "pkg.f": "no such module"})
        resolver = ReferenceResolver(model.lookup)
        resolution = resolver.resolve("f", ctx=LookupContext(global_prefix="pkg."))
        assert not resolution.ok
        assert resolution.error == "no such function"

    def test_failure_without_reason(self, model):
        resolution = ReferenceResolver(model.lookup).resolve("missing")
        assert resolution.error == "not found"
        assert resolution.reference is None

    def test_lookup_none_blocks_unqualified_names(self, model):
        resolver = ReferenceResolver(model.lookup)
        ctx = LookupContext(global_prefix="mod.", local_prefix=NO_LOOKUP)
        assert not resolver.resolve("foo", ctx=ctx).ok
        assert model.tried == []

    def test_lookup_none_allows_qualified_names(self, model):
        resolver = ReferenceResolver(model.lookup)
        ctx = LookupContext(local_prefix=NO_LOOKUP)
        assert resolver.resolve("mod.foo", ctx=ctx).ok

    def test_href_function_overrides_lookup_target(self, model):
        resolver = ReferenceResolver(model.lookup, href=lambda ref: f"/api/{ref.qualified_name}/")
        assert resolver.resolve("foo").reference.resolved_href == "/api/foo/"

    def test_resolution_does_not_mutate_model_reference(self, model):
        resolver = ReferenceResolver(model.lookup, href=lambda ref: "/elsewhere/")
        resolver.resolve("foo")
        assert model.references["foo"].resolved_href == "foo.html#foo"

    def test_lookup_from_modules_prefers_current(self):
        class Module:
            def __init__(self, names):
                self.names = names

            def resolve_reference(self, name, modules, is_type):
                if name in self.names:
                    return Reference(name)
                return None

        first, current = Module({"a"}), Module({"b"})
        assert lookup_from_modules([first, current])("a") is not None
        assert lookup_from_modules([first, current], current=current)("a") is None
        assert lookup_from_modules([first, current], current=current)("b") is not None


class TestInlineTags:
    def test_tag_becomes_link_with_reference_label(self, model):
        resolver = ReferenceResolver(model.lookup)
        html, diagnostics = resolver.scan("See @{mod.foo} here.")
        links = _links(html)
        assert len(links) == 1
        assert links[0]["href"] == "mod.html#mod.foo"
        assert links[0].get_text() == "foo"
        assert html.startswith("See ") and html.endswith(" here.")
        assert diagnostics == []

    def test_explicit_label(self, model):
        html, _ = ReferenceResolver(model.lookup).scan("@{mod.foo | the foo function}")
        assert _links(html)[0].get_text() == "the foo function"

    def test_label_falls_back_to_qualified_name(self):
        model = FakeModel([])
        model.references["x.y"] = Reference("x.y", resolved_href="#x.y")
        html, _ = ReferenceResolver(model.lookup).scan("@{x.y}")
        assert _links(html)[0].get_text() == "x.y"

    def test_label_is_html_escaped(self, model):
        html, _ = ReferenceResolver(model.lookup).scan("@{foo|a <b> & c}")
        assert "a &lt;b&gt; &amp; c" in html

    def test_escaped_tag_is_literal(self, model):
        html, diagnostics = ReferenceResolver(model.lookup).scan(r"Write @{\foo} to link.")
        assert html == "Write @{foo} to link."
        assert diagnostics == []
        assert model.tried == []

    def test_unresolved_tag_is_placeholder(self, model):
        html, diagnostics = ReferenceResolver(model.lookup).scan("see @{nope} and @{foo}")
        assert PLACEHOLDER in html
        assert len(_links(html)) == 1
        assert [d.message for d in diagnostics] == ["not found nope"]

    def test_unterminated_tag_is_left_alone(self, model):
        html, diagnostics = ReferenceResolver(model.lookup).scan("broken @{foo")
        assert html == "broken @{foo"
        assert diagnostics == []

    def test_local_context_applies(self, model):
        ctx = LookupContext(local_prefix="pkg.mod.")
        html, _ = ReferenceResolver(model.lookup).scan("@{baz}", ctx)
        assert _links(html)[0]["href"] == "pkg.html#pkg.mod.baz"

    def test_custom_resolver_first(self, model):
        issues = lambda name: Reference(f"issue {name}", label=f"#{name}", resolved_href=f"/issues/{name}")
        resolver = ReferenceResolver(model.lookup, custom_references={"issue": issues})
        html, _ = resolver.scan("fixed in @{issue:42}")
        link = _links(html)[0]
        assert link["href"] == "/issues/42"
        assert link.get_text() == "#42"
        assert model.tried == []

    def test_custom_miss_falls_through_on_unprefixed_name(self, model):
        resolver = ReferenceResolver(model.lookup, custom_references={"api": lambda name: None})
        html, diagnostics = resolver.scan("@{api:foo}")
        assert _links(html)[0]["href"] == "foo.html#foo"
        assert diagnostics == []
        assert model.tried == ["foo"]

    def test_unregistered_prefix_resolves_whole_name(self):
        model = FakeModel(["Class:method"])
        html, _ = ReferenceResolver(model.lookup).scan("@{Class:method}")
        assert len(_links(html)) == 1

    def test_underscores_escaped_only_when_asked(self, model):
        resolver = ReferenceResolver(model.lookup)
        escaped, _ = resolver.scan("@{mod.do_it}", escape_underscores=True)
        plain, _ = resolver.scan("@{mod.do_it}")
        assert ">do\\_it</a>" in escaped
        assert ">do_it</a>" in plain


class TestBacktickReferences:
    def test_disabled_by_default(self, model):
        html, _ = ReferenceResolver(model.lookup).scan("use `foo`")
        assert html == "use `foo`"

    def test_resolved_span_becomes_link(self, model):
        resolver = ReferenceResolver(model.lookup, backtick_references=True)
        html, _ = resolver.scan("use `foo` now")
        assert _links(html)[0].get_text() == "foo"

    def test_unresolved_span_becomes_code_without_warning(self, model):
        resolver = ReferenceResolver(model.lookup, backtick_references=True)
        html, diagnostics = resolver.scan("run `x < y` first")
        assert html == "run <code>x &lt; y</code> first"
        assert diagnostics == []

    def test_empty_and_unterminated_spans(self, model):
        resolver = ReferenceResolver(model.lookup, backtick_references=True)
        html, _ = resolver.scan("`` and ` and @{foo}")
        assert html.startswith("`` and ` and ")
        assert len(_links(html)) == 1


class TestDiagnostics:
    def test_sink_receives_one_warning_per_failure(self, model):
        item = FakeItem()
        resolver = ReferenceResolver(model.lookup)
        resolver.resolve_inline_references("@{a} @{b} @{foo}", sink=item)
        assert item.warnings == ["not found a", "not found b"]

    def test_without_sink_warnings_are_logged(self, model, caplog):
        with caplog.at_level(logging.WARNING, logger="docmarkup.markdown.references"):
            ReferenceResolver(model.lookup).resolve_inline_references("@{nope}")
        assert "nofile error: not found nope" in caplog.text

    def test_report_ignores_sinks_without_warning(self, caplog):
        from docmarkup.markdown.references import Diagnostic

        with caplog.at_level(logging.WARNING):
            report_diagnostics([Diagnostic("boom")], sink=object())
        assert "boom" in caplog.text
