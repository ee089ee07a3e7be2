"""Small helpers shared by the adapter and the normalizer."""

import mimetypes
import posixpath
from typing import Optional

DIRECTORY_MIMETYPE = "application/directory"
EMPTY_MIMETYPE = "application/x-empty"
DEFAULT_MIMETYPE = "application/octet-stream"


def dirname(path: str) -> str:
    """Parent directory of ``path`` with ``""`` for top-level entries."""
    parent = posixpath.dirname(path.strip("/"))
    return "" if parent in (".", "/") else parent


def join_path(directory: str, name: str) -> str:
    directory = directory.strip("/")
    name = name.strip("/")
    if not directory:
        return name
    if not name:
        return directory
    return f"{directory}/{name}"


def guess_mimetype(path: str, contents: bytes) -> str:
    """Infer a content-type from the file extension, then from the content.

    Args:
        path: Logical path of the object
        contents: Object body

    Returns:
        A media type such as ``text/plain`` or ``application/octet-stream``
    """
    guessed: Optional[str] = mimetypes.guess_type(path)[0]
    if guessed:
        return guessed

    if not contents:
        return EMPTY_MIMETYPE

    try:
        contents.decode("utf-8")
    except UnicodeDecodeError:
        return DEFAULT_MIMETYPE
    return "text/plain"
