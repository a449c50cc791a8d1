# docmarkup/markdown/postprocessors/__init__.py

from .outer_paragraph import strip_outer_paragraph

POSTPROCESSORS = [
    strip_outer_paragraph,  # We add our own paragraph tags, if needed
    # Order matters - they run sequentially
]


def apply_postprocessors(html, context):
    """Apply all postprocessors in order"""
    for processor in POSTPROCESSORS:
        html = processor(html, context)
    return html
