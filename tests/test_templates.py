"""Tests for TemplateCompositor."""

import pytest
import os
from pathlib import Path

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from graaff_pkg.errors import TemplateError
from graaff_pkg.templates import TemplateCompositor


class TestTemplateCompositor:
    """Test cases for TemplateCompositor."""

    def test_render(self, layouts_dir):
        compositor = TemplateCompositor(layouts_dir)
        html = compositor.render('post.html', {'Title': 'Hello', 'Author': 'A', 'Post': '<p>Body</p>'})
        assert html == '<article><h1>Hello</h1><p class="meta">A</p><p>Body</p></article>'

    def test_render_unset_variable_is_empty(self, layouts_dir):
        compositor = TemplateCompositor(layouts_dir)
        html = compositor.render('special.html', {})
        assert html == '<div class="special"></div>'

    def test_render_strict_unset_variable(self, layouts_dir):
        compositor = TemplateCompositor(layouts_dir, strict=True)
        with pytest.raises(TemplateError, match="special.html"):
            compositor.render('special.html', {})

    def test_render_missing_template(self, layouts_dir):
        compositor = TemplateCompositor(layouts_dir)
        with pytest.raises(TemplateError) as excinfo:
            compositor.render('missing.html', {})
        assert excinfo.value.template_name == 'missing.html'

    def test_render_syntax_error(self, layouts_dir):
        Path(layouts_dir, 'broken.html').write_text("{% for post in Posts %}")
        compositor = TemplateCompositor(layouts_dir)
        with pytest.raises(TemplateError):
            compositor.render('broken.html', {'Posts': []})

    def test_compose_stores_content_before_base(self, layouts_dir):
        compositor = TemplateCompositor(layouts_dir)
        data = {'Title': 'Hello', 'Author': 'A', 'Post': '<p>Body</p>', 'Content': 'stale'}
        expected_content = compositor.render('post.html', dict(data))

        html = compositor.compose('base.html', 'post.html', data)

        assert data['Content'] == expected_content
        assert html == (
            "<html><head><title>Hello</title></head>"
            f"<body>{expected_content}<footer></footer></body></html>"
        )
        assert 'stale' not in html

    def test_compose_does_not_escape_content(self, layouts_dir):
        compositor = TemplateCompositor(layouts_dir)
        html = compositor.compose('base.html', 'special.html', {'Post': '<em>raw</em>'})
        assert '<div class="special"><em>raw</em></div>' in html

    def test_compose_result_is_a_snapshot(self, layouts_dir):
        compositor = TemplateCompositor(layouts_dir)
        data = {'Title': 'Hello', 'Post': '<p>Body</p>'}
        html = compositor.compose('base.html', 'special.html', data)
        before = str(html)

        data['Title'] = 'Changed'
        data['Content'] = 'Changed'

        assert html == before
        assert 'Changed' not in html

    def test_compose_missing_content_template(self, layouts_dir):
        compositor = TemplateCompositor(layouts_dir)
        data = {}
        with pytest.raises(TemplateError):
            compositor.compose('base.html', 'missing.html', data)
        assert 'Content' not in data
