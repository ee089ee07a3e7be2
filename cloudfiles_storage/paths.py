"""Path encoding for object URLs.

Object names are rooted under the container and every path segment is
percent-encoded on its own, so ``/`` keeps its meaning as a separator while
spaces, ``#``, ``?`` and non-ASCII characters are safe to embed in a URL.
"""

from typing import Optional
from urllib.parse import quote, unquote


def _encode_segment(segment: str) -> str:
    # quote() leaves "." and "..", which URL normalization would resolve away
    if segment in (".", ".."):
        return "%2E" * len(segment)
    return quote(segment, safe="")


def encode_path(path: str) -> str:
    """Percent-encode each ``/``-separated segment of ``path``.

    Dot segments are encoded too so ``a/../b`` names an object rather than
    climbing out of the container.
    """
    return "/".join(_encode_segment(segment) for segment in path.split("/"))


def decode_path(path: str) -> str:
    """Reverse :func:`encode_path`."""
    return "/".join(unquote(segment) for segment in path.split("/"))


class PathCodec:
    """Translate between logical paths and encoded, container-rooted object names.

    Example:
        ```python
        codec = PathCodec("photos")
        codec.apply_prefix("2024/summer trip.jpg")
        # 'photos/2024/summer%20trip.jpg'
        codec.remove_prefix("photos/2024/summer%20trip.jpg")
        # '2024/summer trip.jpg'
        ```

    Args:
        prefix: Root every path lives under (the container name). ``None``
            means paths are only encoded.
    """

    def __init__(self, prefix: Optional[str] = None):
        self.prefix = prefix.strip("/") if prefix else None

    @property
    def encoded_prefix(self) -> str:
        """Encoded prefix including its trailing separator, or ``""``."""
        if not self.prefix:
            return ""
        return encode_path(self.prefix) + "/"

    def encode(self, path: str) -> str:
        """Encode a logical path without adding the prefix."""
        return encode_path(path.lstrip("/"))

    def apply_prefix(self, path: str) -> str:
        """Encode ``path`` and root it under the prefix."""
        return self.encoded_prefix + self.encode(path)

    def remove_prefix(self, path: str) -> str:
        """Strip the prefix from an encoded object name and decode it."""
        prefix = self.encoded_prefix
        if prefix and path.startswith(prefix):
            path = path[len(prefix):]
        return decode_path(path)
