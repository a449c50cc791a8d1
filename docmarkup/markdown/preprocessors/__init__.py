# docmarkup/markdown/preprocessors/__init__.py

from .multiline import MultilinePreprocessor
from .sections import add_sections

__all__ = ["MultilinePreprocessor", "add_sections"]
