from django.conf import settings

PLAIN_FORMAT = "plain"
BACKTICK_FORMAT = "backtick"

DEFAULTS = {
    # markdown, pandoc, mistune, markdown-it, builtin, plain or backtick
    "format": "markdown",
    # "none" turns off code highlighting and code block detection
    "highlighter": "pygments",
    "pygments_css_class": "highlight",
    # package name prefixed to unqualified references
    "package": None,
    # None: on whenever a Markdown backend is active
    "backtick_references": None,
    # None: decided by the active backend
    "escape_underscores": None,
    "default_language": "lua",
    "parse_extra": {},
    "custom_references": {},
}


def get_markup_config(overrides=None):
    """
    Configuration for one documentation rendering session.

    Values come from DEFAULTS, then the ``DOCMARKUP`` Django setting (when
    settings are configured), then ``overrides``. The default language for
    indented code switches to C when ``parse_extra`` enables C parsing and no
    language was given explicitly.
    """
    user_config = dict(getattr(settings, "DOCMARKUP", {}) or {}) if settings.configured else {}
    user_config.update(overrides or {})
    config = dict(DEFAULTS)
    config.update(user_config)

    if (config.get("parse_extra") or {}).get("C") and "default_language" not in user_config:
        config["default_language"] = "c"
    return config


def get_pandoc_config():
    """
    Configuration for pypandoc/Pandoc markdown rendering.

    Raw HTML must pass through untouched: links, anchors and highlighted code
    blocks are already HTML by the time pandoc sees the text.
    """
    extra_args = [
        "--from=markdown+autolink_bare_uris+strikeout+superscript+subscript+pipe_tables+definition_lists+fenced_code_blocks+raw_html+intraword_underscores",
    ]
    if settings.configured:
        extra_args.extend(getattr(settings, "DOCMARKUP_PANDOC_EXTRA_ARGS", []))
    return {
        "extra_args": extra_args,
        "filters": [],
    }
