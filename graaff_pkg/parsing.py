"""
Text helpers for the build pipeline: front-matter parsing, output filenames,
abstract truncation and publish dates.
"""

from datetime import datetime
from typing import Dict, Optional, Tuple

from .errors import FormatError

PARAGRAPH_END = '</p>'
DATE_FORMAT = '%Y-%m-%d'
DATETIME_FORMAT = '%Y-%m-%d %H:%M'


def parse_config(block: str, params: Dict[str, str], sep: str) -> Dict[str, str]:
    """
    Parse ``Key: Value`` entries separated by ``sep`` into ``params``.

    Empty entries are skipped. The value is everything after the first colon,
    so values may contain colons themselves. An entry without a colon maps the
    key to an empty string; entries with an empty key are ignored. Later keys
    overwrite earlier ones.

    Args:
        block: Text holding the entries
        sep: Separator between entries (``\\n`` for files, ``,`` for flags)

    Returns:
        The updated ``params`` mapping
    """
    for line in block.split(sep):
        if not line:
            continue
        key, _, value = line.partition(':')
        key = key.strip()
        if not key:
            continue
        params[key] = value.strip()
    return params


def change_extension(filename: str, extension: str) -> str:
    """Swap the final extension of a filename, e.g. post.md => post.html."""
    extension = extension.lstrip('.')
    base, dot, _ = filename.rpartition('.')
    if not dot:
        return f"{filename}.{extension}"
    return f"{base}.{extension}"


def split_document(text: str, separator: str, filename: str = '<document>') -> Tuple[str, str]:
    """Split a document into its front-matter and body."""
    parts = text.split(separator)
    if len(parts) != 2:
        raise FormatError(filename, separator, len(parts) - 1)
    return parts[0], parts[1]


def truncate(html: str, count: int) -> str:
    """
    Keep the first ``count`` paragraphs of rendered HTML.

    The text is cut after every closing ``</p>``; whatever follows the last
    one is a fragment of its own. Text with fewer fragments than ``count`` is
    returned as is.
    """
    if count < 0:
        raise ValueError(f"Truncate count must not be negative: {count}")
    pieces = html.split(PARAGRAPH_END)
    fragments = [piece + PARAGRAPH_END for piece in pieces[:-1]]
    fragments.append(pieces[-1])
    if len(fragments) < count:
        return html
    return ''.join(fragments[:count])


def parse_published(value, now: Optional[datetime] = None) -> datetime:
    """Parse a ``Published`` value, falling back to ``now`` when it can't be read."""
    if now is None:
        now = datetime.now()
    if not isinstance(value, str):
        return now
    if len(value) == 10:
        fmt = DATE_FORMAT
    elif len(value) == 16:
        fmt = DATETIME_FORMAT
    else:
        return now
    try:
        return datetime.strptime(value, fmt)
    except ValueError:
        return now
