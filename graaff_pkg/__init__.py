"""
Graaff - a small static blog generator.

Graaff reads posts made of ``Key: Value`` front-matter and a markdown body,
renders each one through Jinja2 layouts, and writes an overview page listing
every post by publish date.
"""

__version__ = "1.0.0"

from .core import Graaff, PostProcessor, Summary
from .errors import GraaffError, FormatError, PipelineError, MissingFieldError, TemplateError

__all__ = [
    'Graaff', 'PostProcessor', 'Summary',
    'GraaffError', 'FormatError', 'PipelineError', 'MissingFieldError', 'TemplateError',
]
