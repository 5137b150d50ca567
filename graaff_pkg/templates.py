"""
Layout rendering on top of Jinja2.

Layouts live in a single directory and are addressed by filename. A page is
built in two passes: the content layout is rendered first and its output is
handed to the base layout as ``Content``.
"""

import logging

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Undefined
from jinja2 import TemplateError as JinjaTemplateError

from .errors import TemplateError


class TemplateCompositor:
    def __init__(self, layout_dir, strict=False):
        self.layout_dir = layout_dir
        self.strict = strict
        self.logger = logging.getLogger('Graaff')
        self.env = Environment(
            loader=FileSystemLoader(layout_dir),
            undefined=StrictUndefined if strict else Undefined,
        )

    def render(self, template_name, data):
        """Render a layout with the given variables."""
        try:
            template = self.env.get_template(template_name)
            return template.render(data)
        except JinjaTemplateError as e:
            raise TemplateError(template_name, e) from e

    def compose(self, base_name, content_name, data):
        """
        Render ``content_name`` and wrap it in ``base_name``.

        The content output is stored in ``data['Content']`` before the base
        layout is rendered, so the base sees the fresh fragment.
        """
        data['Content'] = self.render(content_name, data)
        self.logger.debug(f"Composed {content_name} into {base_name}")
        return self.render(base_name, data)
