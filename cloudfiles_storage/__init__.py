"""
Rackspace Cloud Files backend for a path-based storage abstraction.

Maps filesystem-like verbs (write, read, rename, delete, list, stat) onto the
Cloud Files / OpenStack Swift REST API, after a one-time API-key login that
resolves the regional storage and CDN endpoints.

Example usage:
    ```python
    from cloudfiles_storage import CloudFilesAdapter, load_config

    # Explicit setup
    storage = CloudFilesAdapter("jdoe", api_key)
    storage.set_container_name("assets").object_store_service("cloudFiles", "DFW")

    # Or from cloudfiles.yaml
    storage = CloudFilesAdapter.from_config(load_config("cloudfiles.yaml"))

    obj = storage.write("notes/todo.txt", "buy milk")
    obj.mimetype, obj.size  # ('text/plain', 8)

    for entry in storage.list_contents("notes"):
        print(entry.type, entry.path)
    ```
"""

from .adapter import CloudFilesAdapter
from .base import StorageBackend
from .config import CloudFilesConfig, load_config
from .endpoints import ResolvedEndpoints, resolve_endpoints
from .exceptions import (
    AuthenticationError,
    CloudFilesError,
    ContainerNotConfiguredError,
    EndpointNotConfiguredError,
    MalformedResponseError,
    NotFoundError,
    TransportError,
    UnsupportedOperationError,
)
from .identity import UK_IDENTITY_ENDPOINT, US_IDENTITY_ENDPOINT, IdentityClient, Session
from .logging_config import setup_logging
from .normalize import StoredObject
from .paths import PathCodec
from .transport import HttpTransport

__all__ = [
    "CloudFilesAdapter",
    "StorageBackend",
    "CloudFilesConfig",
    "load_config",
    "ResolvedEndpoints",
    "resolve_endpoints",
    "AuthenticationError",
    "CloudFilesError",
    "ContainerNotConfiguredError",
    "EndpointNotConfiguredError",
    "MalformedResponseError",
    "NotFoundError",
    "TransportError",
    "UnsupportedOperationError",
    "UK_IDENTITY_ENDPOINT",
    "US_IDENTITY_ENDPOINT",
    "IdentityClient",
    "Session",
    "setup_logging",
    "StoredObject",
    "PathCodec",
    "HttpTransport",
]

__version__ = "0.1.0"
