"""Test configuration and fixtures for Graaff tests."""

import pytest
import logging
import tempfile
import shutil
from pathlib import Path


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def layouts_dir(temp_dir):
    """Create a layouts directory with base, post, overview and special layouts."""
    layouts = Path(temp_dir) / 'layouts'
    layouts.mkdir()

    (layouts / 'base.html').write_text(
        "<html><head><title>{{ Title }}</title></head>"
        "<body>{{ Content }}<footer>{{ SiteName }}</footer></body></html>"
    )
    (layouts / 'post.html').write_text(
        '<article><h1>{{ Title }}</h1><p class="meta">{{ Author }}</p>{{ Post }}</article>'
    )
    (layouts / 'overview.html').write_text(
        "<ul>{% for post in Posts %}"
        '<li><a href="{{ post.Filename }}">{{ post.Title }}</a>{{ post.Abstract }}</li>'
        "{% endfor %}</ul>"
    )
    (layouts / 'special.html').write_text(
        '<div class="special">{{ Post }}</div>'
    )
    return str(layouts)


@pytest.fixture
def posts_dir(temp_dir):
    """Create an empty posts directory."""
    posts = Path(temp_dir) / 'posts'
    posts.mkdir()
    return str(posts)


@pytest.fixture
def output_dir(temp_dir):
    """Path of the (not yet created) output directory."""
    return str(Path(temp_dir) / 'output')


@pytest.fixture
def config_file(temp_dir):
    """Path of the global variables file (not created by default)."""
    return str(Path(temp_dir) / 'variables.conf')


@pytest.fixture
def write_post(posts_dir):
    """Write a post made of front-matter lines, the separator and a body."""
    def _write_post(name, front_matter, body='A single paragraph.', separator='-----'):
        path = Path(posts_dir) / name
        path.write_text(f"{front_matter}\n{separator}\n{body}\n", encoding='utf-8')
        return str(path)
    return _write_post


@pytest.fixture(autouse=True)
def reset_graaff_logger():
    """Drop handlers added by Graaff so each test starts with a clean logger."""
    yield
    logger = logging.getLogger('Graaff')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
