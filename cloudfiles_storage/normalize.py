"""
Response normalization.

Turns object-store responses into :class:`StoredObject` records. There are
two sources:
- Response headers after a write, update or metadata fetch
- Entries of a ``?format=json`` container listing

Both are first reduced to the listing shape
(``name``/``content_type``/``last_modified``/``bytes``) so a single
code path builds the final record.
"""

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .exceptions import MalformedResponseError
from .utils import DIRECTORY_MIMETYPE, dirname, join_path


@dataclass
class StoredObject:
    """Metadata for one object or (emulated) directory in a container."""

    type: str
    path: str
    dirname: str
    timestamp: Optional[int] = None
    mimetype: Optional[str] = None
    size: Optional[int] = None

    @property
    def is_dir(self) -> bool:
        return self.type == "dir"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def parse_timestamp(value: Optional[str]) -> int:
    """Convert a Last-Modified value to a Unix timestamp.

    HTTP-date strings (``Tue, 13 Sep 2016 15:49:57 GMT``) are what object
    responses carry; listings use ISO 8601 (``2016-09-13T15:49:57.606240``).
    Values without a timezone are taken as UTC.

    Raises:
        MalformedResponseError: If the value is missing or cannot be parsed
    """
    if not value:
        raise MalformedResponseError("Missing last-modified value")

    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise MalformedResponseError(f"Unparseable last-modified value: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp())


def split_mimetype(content_type: Optional[str]) -> List[str]:
    if not content_type:
        return [""]
    return content_type.split("; ")


def classify(content_type: Optional[str]) -> str:
    """``"dir"`` for directory markers, ``"file"`` for everything else."""
    parts = [part.strip().lower() for part in split_mimetype(content_type)]
    return "dir" if DIRECTORY_MIMETYPE in parts else "file"


def normalize_headers(headers: Mapping[str, str]) -> Dict[str, Any]:
    """Reduce response headers to a listing-shaped record.

    Args:
        headers: Case-insensitive response headers

    Returns:
        Dict with ``content_type``, ``last_modified`` and ``bytes``

    Raises:
        MalformedResponseError: If Last-Modified is absent
    """
    last_modified = headers.get("Last-Modified")
    if last_modified is None:
        raise MalformedResponseError("Response is missing the Last-Modified header")

    return {
        "content_type": headers.get("Content-Type"),
        "last_modified": last_modified,
        "bytes": headers.get("Content-Length"),
    }


def _to_size(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise MalformedResponseError(f"Invalid object size: {value!r}")


def normalize_object(record: Mapping[str, Any], path: str) -> StoredObject:
    """Build a :class:`StoredObject` from a listing-shaped record.

    When ``record`` has a ``name`` it is relative to ``path`` (the queried
    directory) and the two are joined. Without a name, ``path`` is the
    object itself.

    Args:
        record: Dict with ``content_type``, ``last_modified``, ``bytes`` and
            optionally ``name``
        path: Logical path of the object or of the listed directory

    Returns:
        Normalized object metadata
    """
    name = record.get("name")
    if name is not None:
        full_path = join_path(path, name)
    else:
        full_path = path.strip("/")

    content_type = record.get("content_type")
    mimetype = split_mimetype(content_type)[0] or None

    return StoredObject(
        type=classify(content_type),
        path=full_path,
        dirname=dirname(full_path),
        timestamp=parse_timestamp(record.get("last_modified")),
        mimetype=mimetype,
        size=_to_size(record.get("bytes")),
    )


def emulate_directories(objects: Iterable[StoredObject], directory: str = "") -> List[StoredObject]:
    """Add entries for implied parent directories missing from a listing.

    The object store is flat, so ``a/b/c.txt`` can exist without markers for
    ``a`` or ``a/b``. Only directories strictly inside ``directory`` are
    synthesized.

    Args:
        objects: Normalized listing entries
        directory: Directory the listing was taken from

    Returns:
        The entries plus emulated directories, sorted by path
    """
    directory = directory.strip("/")
    listing = list(objects)
    known = {obj.path for obj in listing if obj.is_dir}

    emulated: List[StoredObject] = []
    for obj in listing:
        parent = obj.dirname
        while parent and parent != directory and parent not in known:
            if directory and not parent.startswith(directory + "/"):
                break
            known.add(parent)
            emulated.append(StoredObject(type="dir", path=parent, dirname=dirname(parent)))
            parent = dirname(parent)

    return sorted(listing + emulated, key=lambda obj: obj.path)
