# docmarkup/templatetags/markup_tags.py

from django import template
from django.utils.safestring import mark_safe

register = template.Library()


@register.simple_tag(takes_context=True)
def doc_markup(context, value, item=None):
    """Process documentation text with the session's ``markup_processor``."""
    processor = context["markup_processor"]
    return mark_safe(processor(value, item))


@register.simple_tag(takes_context=True)
def doc_markup_plain(context, value, item=None):
    """Resolve references only, without Markdown rendering."""
    processor = context["markup_processor"]
    return mark_safe(processor(value, item, plain=True))
