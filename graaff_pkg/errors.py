"""
Exceptions raised by the Graaff build pipeline.

Every error here is fatal for the run: the CLI reports it and exits non-zero.
"""


class GraaffError(Exception):
    """Base class for all Graaff build errors."""


class FormatError(GraaffError):
    """A document does not contain the front-matter separator exactly once."""

    def __init__(self, filename, separator, count):
        self.filename = filename
        self.separator = separator
        self.count = count
        super().__init__(
            f"Error parsing {filename}: separator '{separator}' must appear exactly once "
            f"(found {count})"
        )


class PipelineError(GraaffError):
    """A document could not be turned into a post."""


class MissingFieldError(PipelineError):
    """A required front-matter field is absent or not a string."""

    def __init__(self, field, filename):
        self.field = field
        self.filename = filename
        super().__init__(f"Missing or invalid field '{field}' in {filename}")


class TemplateError(GraaffError):
    """A layout could not be loaded or rendered."""

    def __init__(self, template_name, cause):
        self.template_name = template_name
        self.cause = cause
        super().__init__(f"Template error in {template_name}: {cause}")
