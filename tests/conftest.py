import django
import pytest
from django.conf import settings
from django.utils.html import escape

from docmarkup.markdown.references import Reference, ReferenceNotFound


def pytest_configure():
    if not settings.configured:
        settings.configure(
            INSTALLED_APPS=["docmarkup"],
            TEMPLATES=[
                {
                    "BACKEND": "django.template.backends.django.DjangoTemplates",
                    "APP_DIRS": True,
                }
            ],
            USE_I18N=False,
        )
        django.setup()


class FakeModel:
    """Documentation model with a fixed set of known names."""

    def __init__(self, names, reasons=None):
        self.references = {}
        for name in names:
            self.references[name] = Reference(
                qualified_name=name,
                label=name.rsplit(".", 1)[-1],
                resolved_href=f"{name.split('.')[0]}.html#{name}",
            )
        self.reasons = reasons or {}
        self.tried = []

    def lookup(self, name, is_type=False):
        self.tried.append(name)
        if name in self.reasons:
            raise ReferenceNotFound(self.reasons[name])
        return self.references.get(name)


class FakeItem:
    def __init__(self, kind="function", file=None, filename=""):
        self.kind = kind
        self.file = file
        self.filename = filename
        self.warnings = []

    def warning(self, message):
        self.warnings.append(message)


class RecordingHighlighter:
    def __init__(self, enabled=True):
        self.enabled = enabled
        self.calls = []

    def __call__(self, language, source_name, code, start_line=1, inline=False):
        self.calls.append(
            {"language": language, "source_name": source_name, "code": code, "start_line": start_line}
        )
        code = escape(code.rstrip("\n"))
        return f'<span class="hl">{code}</span>'


@pytest.fixture
def model():
    return FakeModel(["mod.foo", "mod.do_it", "pkg.bar", "pkg.mod.baz", "foo"])


@pytest.fixture
def highlighter():
    return RecordingHighlighter()
