import os
import time
import logging
from datetime import datetime
from typing import NamedTuple

import mistune

from .errors import MissingFieldError
from .parsing import change_extension, parse_config, parse_published, split_document, truncate
from .templates import TemplateCompositor

REQUIRED_FIELDS = ('Title', 'Published', 'Author')


class Summary(NamedTuple):
    """A post as it appears on the overview page."""
    Title: str
    Published: str
    Author: str
    Abstract: str
    Filename: str

    @classmethod
    def from_context(cls, context, abstract, filename, source=None):
        """Build a summary, checking that the required fields are present strings."""
        for field in REQUIRED_FIELDS:
            if not isinstance(context.get(field), str):
                raise MissingFieldError(field, source or filename)
        return cls(
            Title=context['Title'],
            Published=context['Published'],
            Author=context['Author'],
            Abstract=abstract,
            Filename=filename,
        )


def write_file(out_dir, name, html):
    """Write a rendered page into the output directory, creating it if needed."""
    os.makedirs(out_dir, exist_ok=True)
    out_path = os.path.join(out_dir, name)
    with open(out_path, 'w', encoding='utf-8') as f:
        f.write(html)
    return out_path


def sort_summaries(summaries, now=None):
    """
    Order summaries newest first, breaking ties on title.

    Published values that can't be parsed are treated as ``now``.
    """
    logger = logging.getLogger('Graaff')
    if now is None:
        now = datetime.now()

    keyed = []
    for summary in summaries:
        published = parse_published(summary.Published, now)
        if published is now:
            logger.warning(f"Could not parse Published '{summary.Published}' for {summary.Filename}, using current time")
        keyed.append((published, summary))

    keyed.sort(key=lambda item: item[1].Title)
    keyed.sort(key=lambda item: item[0], reverse=True)
    return [summary for _, summary in keyed]


class PostProcessor:
    def __init__(self, compositor, defaults, output_dir, base_template='base.html', post_template='post.html',
                 truncate_length=1, separator='-----', first_layout=None):
        self.compositor = compositor
        self.defaults = defaults
        self.output_dir = output_dir
        self.base_template = base_template
        self.post_template = post_template
        self.truncate_length = truncate_length
        self.separator = separator
        self.first_layout = first_layout
        self.logger = logging.getLogger('Graaff')
        self.markdown_parser = self.create_markdown_parser()

    def create_markdown_parser(self):
        """Create a Mistune markdown parser with a custom renderer."""
        class CustomRenderer(mistune.HTMLRenderer):
            def __init__(self):
                super().__init__(escape=False)
            def block_code(self, code, info=None):
                escaped_code = mistune.escape(code)
                return '<pre style="white-space: pre-wrap;"><code>{}</code></pre>\n'.format(escaped_code)
        return mistune.create_markdown(
            renderer=CustomRenderer(),
            plugins=['table', 'task_lists', 'strikethrough']
        )

    def markdown_filter(self, text):
        """Convert markdown text to HTML."""
        return self.markdown_parser(text)

    def process(self, file_path):
        """Render one post to the output directory and return its summary."""
        name = os.path.basename(file_path)
        with open(file_path, 'r', encoding='utf-8') as f:
            text = f.read()

        front_matter, body = split_document(text, self.separator, name)

        # Each post starts from the global defaults, never from the previous post.
        context = dict(self.defaults)
        parse_config(front_matter, context, '\n')
        context['Post'] = self.markdown_filter(body)

        # A global Layout only applies to the first post, like a front-matter one.
        first_layout, self.first_layout = self.first_layout, None
        layout = context.pop('Layout', None) or first_layout or self.post_template

        html_name = change_extension(name, 'html')
        summary = Summary.from_context(
            context,
            abstract=truncate(context['Post'], self.truncate_length),
            filename=html_name,
            source=name,
        )

        html = self.compositor.compose(self.base_template, layout, context)
        out_path = write_file(self.output_dir, html_name, html)
        self.logger.debug(f"Generated {out_path} from {file_path} using {layout}")
        return summary


class InfoFilter(logging.Filter):
    """Filter to allow only selected INFO messages to be shown in the console."""
    def filter(self, record):
        if record.levelno > logging.INFO:
            return True
        allowed_messages = [
            "Starting site build",
            "Site build completed in",
            "Total posts generated:",
            "Building index page",
        ]
        return any(msg in record.getMessage() for msg in allowed_messages)


class Graaff:
    def __init__(self, posts_dir='posts', output_dir='output', layout_dir='layouts', base_template='base.html',
                 post_template='post.html', overview_template='overview.html', index_file='index.html',
                 overview_title='Index', truncate_length=1, separator='-----', config='',
                 config_file='variables.conf', strict=False, log_dir=None):
        self.posts_dir = posts_dir
        self.output_dir = output_dir
        self.layout_dir = layout_dir
        self.base_template = base_template
        self.post_template = post_template
        self.overview_template = overview_template
        self.index_file = index_file
        self.overview_title = overview_title
        self.truncate_length = truncate_length
        self.separator = separator
        self.config = config or ''
        self.config_file = config_file
        self.strict = strict
        self.log_dir = log_dir
        self.posts_generated = 0

        if isinstance(truncate_length, bool) or not isinstance(truncate_length, int):
            raise ValueError(f"Truncate length must be an integer: {truncate_length!r}")
        if truncate_length < 0:
            raise ValueError(f"Truncate length must not be negative: {truncate_length}")
        if not isinstance(separator, str) or not separator:
            raise ValueError(f"Separator must be a non-empty string: {separator!r}")
        if not os.path.isdir(self.posts_dir):
            raise FileNotFoundError(f"Posts directory not found: {self.posts_dir}")
        if not os.path.isdir(self.layout_dir):
            raise FileNotFoundError(f"Layout directory not found: {self.layout_dir}")

        self.setup_logging()
        self.compositor = TemplateCompositor(self.layout_dir, strict=strict)

    def setup_logging(self):
        """Set up logging configuration."""
        self.logger = logging.getLogger('Graaff')
        self.logger.setLevel(logging.DEBUG)

        if not self.logger.handlers:
            # Console handler with filter
            console_handler = logging.StreamHandler()
            console_handler.setLevel(logging.INFO)
            console_handler.addFilter(InfoFilter())
            console_formatter = logging.Formatter('%(message)s')
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        # Only the latest build writes to a log file
        for handler in list(self.logger.handlers):
            if isinstance(handler, logging.FileHandler):
                self.logger.removeHandler(handler)
                handler.close()

        # File handler for all logs
        if self.log_dir:
            os.makedirs(self.log_dir, exist_ok=True)
            log_filename = datetime.now().strftime('graaff_%Y-%m-%d_%H-%M-%S.log')
            log_filepath = os.path.join(self.log_dir, log_filename)

            file_handler = logging.FileHandler(log_filepath)
            file_handler.setLevel(logging.DEBUG)
            file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def load_defaults(self):
        """
        Collect the variables shared by every page.

        The variables file is read first, then the inline config string, which
        overrides it. A missing variables file just means no file globals.
        """
        defaults = {}
        if self.config_file:
            if os.path.exists(self.config_file):
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    parse_config(f.read(), defaults, '\n')
                self.logger.debug(f"Loaded global variables from {self.config_file}")
            else:
                self.logger.debug(f"No global variables file at {self.config_file}")
        parse_config(self.config, defaults, ',')
        return defaults

    def get_post_files(self):
        """List the post files to render, sorted by filename."""
        post_files = []
        for name in sorted(os.listdir(self.posts_dir)):
            path = os.path.join(self.posts_dir, name)
            if name.startswith('.') or not os.path.isfile(path):
                continue
            post_files.append(path)
        return post_files

    def build_posts(self, defaults):
        """Render every post in order and collect their summaries."""
        first_layout = defaults.pop('Layout', None)
        processor = PostProcessor(
            self.compositor, defaults, self.output_dir,
            base_template=self.base_template,
            post_template=self.post_template,
            truncate_length=self.truncate_length,
            separator=self.separator,
            first_layout=first_layout,
        )

        post_files = self.get_post_files()
        if not post_files:
            self.logger.warning(f"No posts found in {self.posts_dir}")

        summaries = []
        for file_path in post_files:
            summaries.append(processor.process(file_path))
            self.posts_generated += 1
        return summaries

    def build_index(self, summaries, defaults):
        """Render the overview page listing all posts, newest first."""
        self.logger.info("Building index page")
        context = dict(defaults)
        context['Posts'] = sort_summaries(summaries)
        context['Title'] = self.overview_title
        html = self.compositor.compose(self.base_template, self.overview_template, context)
        out_path = write_file(self.output_dir, self.index_file, html)
        self.logger.debug(f"Generated index page at {out_path}")
        return context['Posts']

    def build(self):
        """Main build process."""
        start_time = time.time()
        self.logger.info("Starting site build...")
        self.posts_generated = 0

        defaults = self.load_defaults()
        summaries = self.build_posts(defaults)
        posts = self.build_index(summaries, defaults)

        total_time = time.time() - start_time
        self.logger.info(f"Site build completed in {total_time:.6f} seconds.")
        self.logger.info(f"Total posts generated: {self.posts_generated}")
        return posts
