"""Cloud Files storage backend over the object store's REST API."""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from urllib.parse import quote

import requests
from requests.structures import CaseInsensitiveDict

from .base import Contents, StorageBackend, WriteConfig
from .endpoints import DEFAULT_SERVICE_NAME, ResolvedEndpoints, resolve_endpoints
from .exceptions import (
    CloudFilesError,
    ContainerNotConfiguredError,
    EndpointNotConfiguredError,
    MalformedResponseError,
    NotFoundError,
    TransportError,
)
from .identity import UK_IDENTITY_ENDPOINT, US_IDENTITY_ENDPOINT, IdentityClient, Session
from .normalize import StoredObject, emulate_directories, normalize_headers, normalize_object
from .paths import PathCodec
from .transport import HttpTransport
from .utils import DIRECTORY_MIMETYPE, guess_mimetype

if TYPE_CHECKING:
    from .config import CloudFilesConfig

logger = logging.getLogger(__name__)

# One week, the longest TTL Cloud Files allows.
CDN_TTL = 604800
UPDATE_METADATA_HEADER = ("X-Object-Meta-Updated-By", "cloudfiles-storage")


class CloudFilesAdapter(StorageBackend):
    """Storage backend for Rackspace Cloud Files (OpenStack Swift).

    Authenticates once on construction. Endpoints and the container are
    configured afterwards and every path is stored under the container.

    Example:
        ```python
        storage = CloudFilesAdapter("jdoe", "0123abcd", CloudFilesAdapter.UK_IDENTITY_ENDPOINT)
        storage.set_container_name("assets").object_store_service("cloudFiles", "LON")

        storage.write("notes/todo.txt", "buy milk")
        storage.read("notes/todo.txt")  # b'buy milk'
        ```

    Args:
        username: Account username
        api_key: Account API key
        identity_endpoint: Identity service base URL
        container: Container name (can also be set with set_container_name)
        timeout: Request timeout in seconds
        http_session: requests session to send requests through
        transport: Preconfigured transport; overrides timeout and http_session

    Raises:
        AuthenticationError: If the identity service login fails
    """

    US_IDENTITY_ENDPOINT = US_IDENTITY_ENDPOINT
    UK_IDENTITY_ENDPOINT = UK_IDENTITY_ENDPOINT

    def __init__(
        self,
        username: str,
        api_key: str,
        identity_endpoint: str = US_IDENTITY_ENDPOINT,
        container: Optional[str] = None,
        timeout: float = 30,
        http_session: Optional[requests.Session] = None,
        transport: Optional[HttpTransport] = None,
    ):
        self.transport = transport or HttpTransport(timeout=timeout, session=http_session)
        self.session: Session = IdentityClient(identity_endpoint, self.transport).authenticate(username, api_key)
        self.endpoints = ResolvedEndpoints()
        self.container_name: Optional[str] = None
        self._codec = PathCodec()

        if container:
            self.set_container_name(container)

    @classmethod
    def from_config(cls, config: "CloudFilesConfig", **kwargs) -> "CloudFilesAdapter":
        """Build an adapter, set its container and resolve its endpoints.

        Raises:
            ValueError: If required configuration fields are missing
            AuthenticationError: If the identity service login fails
        """
        missing = config.validate()
        if missing:
            raise ValueError(f"Missing required configuration: {', '.join(missing)}")

        adapter = cls(
            config.username,
            config.api_key,
            config.identity_url,
            container=config.container,
            timeout=config.timeout,
            **kwargs,
        )
        return adapter.object_store_service(config.service_name, config.region)

    @property
    def token(self) -> str:
        return self.session.token

    def set_container_name(self, container_name: str) -> "CloudFilesAdapter":
        self.container_name = container_name
        self._codec = PathCodec(container_name)
        return self

    def object_store_service(self, service_name: str = DEFAULT_SERVICE_NAME, region: str = "DFW") -> "CloudFilesAdapter":
        """Resolve the storage and CDN endpoints for a catalog service and region.

        Args:
            service_name: Name of the service as it appears in the catalog
            region: Region code (DFW, IAD, ORD, LON, SYD, HKG)
        """
        self.endpoints = resolve_endpoints(self.session.service_catalog, service_name, region)
        logger.info(f"Using {service_name} in {region}: {self.endpoints.storage}")
        return self

    def close(self):
        self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # Request shaping

    def _require_container(self) -> str:
        if not self.container_name:
            raise ContainerNotConfiguredError("No container name set; call set_container_name() first")
        return self.container_name

    def _require_storage(self) -> str:
        self._require_container()
        if not self.endpoints.storage:
            raise EndpointNotConfiguredError(
                "Storage endpoint not resolved; call object_store_service() first"
            )
        return self.endpoints.storage.rstrip("/")

    def _require_cdn(self) -> str:
        container = self._require_container()
        if not self.endpoints.cdn:
            raise EndpointNotConfiguredError("No CDN endpoint resolved for this region")
        return f"{self.endpoints.cdn.rstrip('/')}/{quote(container, safe='')}"

    def _object_url(self, path: str) -> str:
        return f"{self._require_storage()}/{self._codec.apply_prefix(path)}"

    def _auth_headers(self, extra: Optional[Dict[str, str]] = None) -> CaseInsensitiveDict:
        headers = CaseInsensitiveDict(extra or {})
        headers["X-Auth-Token"] = self.token
        return headers

    @staticmethod
    def _to_bytes(contents: Contents) -> bytes:
        if isinstance(contents, str):
            return contents.encode("utf-8")
        return bytes(contents)

    def _put_object(self, path: str, data: bytes, headers: CaseInsensitiveDict) -> Optional[StoredObject]:
        url = self._object_url(path)
        try:
            response = self.transport.request("PUT", url, headers, data)
        except (TransportError, NotFoundError) as e:
            logger.warning(f"Failed to store '{path}': {e}")
            return None

        # The PUT response headers describe the (empty) response body, so the
        # object's own type and length come from what was sent.
        stored = CaseInsensitiveDict(response.headers)
        if headers.get("Content-Type"):
            stored["Content-Type"] = headers["Content-Type"]
        stored["Content-Length"] = str(len(data))

        return normalize_object(normalize_headers(stored), path)

    # Write verbs

    def write(self, path: str, contents: Contents, config: WriteConfig = None) -> Optional[StoredObject]:
        config = config or {}
        data = self._to_bytes(contents)

        headers = CaseInsensitiveDict()
        if data:
            headers["Content-Type"] = guess_mimetype(path, data)
        headers.update(config.get("headers") or {})
        if config.get("mimetype"):
            headers["Content-Type"] = config["mimetype"]
        headers["X-Auth-Token"] = self.token

        return self._put_object(path, data, headers)

    def update(self, path: str, contents: Contents, config: WriteConfig = None) -> Optional[StoredObject]:
        config = config or {}
        data = self._to_bytes(contents)

        headers = self._auth_headers(config.get("headers"))
        headers["Content-Type"] = guess_mimetype(path, data)
        headers[UPDATE_METADATA_HEADER[0]] = UPDATE_METADATA_HEADER[1]

        return self._put_object(path, data, headers)

    def create_dir(self, dirname: str, config: WriteConfig = None) -> Optional[StoredObject]:
        config = dict(config or {})
        headers = CaseInsensitiveDict(config.get("headers") or {})
        headers["Content-Type"] = DIRECTORY_MIMETYPE
        config["headers"] = headers
        config["mimetype"] = DIRECTORY_MIMETYPE

        return self.write(dirname, b"", config)

    def rename(self, path: str, new_path: str) -> bool:
        url = self._object_url(path)
        headers = self._auth_headers({"Destination": self._codec.apply_prefix(new_path)})

        try:
            response = self.transport.request("COPY", url, headers)
        except (TransportError, NotFoundError) as e:
            logger.warning(f"Failed to copy '{path}' to '{new_path}': {e}")
            return False

        if response.status_code != 201:
            logger.warning(f"Copy of '{path}' returned {response.status_code}; leaving source in place")
            return False

        return self.delete(path)

    def delete(self, path: str) -> bool:
        url = self._object_url(path)
        try:
            self.transport.request("DELETE", url, self._auth_headers())
        except (TransportError, NotFoundError) as e:
            logger.warning(f"Failed to delete '{path}': {e}")
            return False
        return True

    def delete_dir(self, dirname: str) -> bool:
        return self.delete(dirname)

    # Read verbs

    def _get_object(self, path: str) -> Optional[requests.Response]:
        url = self._object_url(path)
        try:
            return self.transport.request("GET", url, self._auth_headers())
        except TransportError as e:
            logger.warning(f"Failed to fetch '{path}': {e}")
            return None

    def has(self, path: str) -> bool:
        try:
            self.transport.request("GET", self._object_url(path), self._auth_headers())
        except CloudFilesError as e:
            logger.debug(f"'{path}' not available: {e}")
            return False
        return True

    def read(self, path: str) -> Optional[bytes]:
        response = self._get_object(path)
        if response is None:
            return None
        return response.content

    def get_metadata(self, path: str) -> Optional[StoredObject]:
        response = self._get_object(path)
        if response is None:
            return None
        return normalize_object(normalize_headers(response.headers), path)

    def list_contents(self, directory: str = "", recursive: bool = True) -> List[StoredObject]:
        directory = directory.strip("/")
        location = self._codec.apply_prefix(directory).rstrip("/")
        url = f"{self._require_storage()}/{location}"

        try:
            response = self.transport.request("GET", url, self._auth_headers(), params={"format": "json"})
        except (TransportError, NotFoundError) as e:
            logger.warning(f"Failed to list '{directory}': {e}")
            return []

        entries = self._parse_listing(response)
        objects = [normalize_object(entry, directory) for entry in entries]
        listing = emulate_directories(objects, directory)

        if not recursive:
            listing = [obj for obj in listing if obj.dirname == directory]
        return listing

    @staticmethod
    def _parse_listing(response: requests.Response) -> List[Dict[str, Any]]:
        # Empty containers answer 204 with no body.
        if not response.content:
            return []
        try:
            entries = response.json()
        except ValueError as e:
            raise MalformedResponseError(f"Listing is not valid JSON: {e}")
        if not isinstance(entries, list):
            raise MalformedResponseError("Listing is not a JSON array")
        return entries

    # CDN

    def enable_cdn(self, ttl: int = CDN_TTL) -> bool:
        """Enable public CDN distribution for the container.

        Returns:
            True if the CDN accepted the settings, False otherwise
        """
        url = self._require_cdn()
        headers = self._auth_headers({"X-CDN-Enabled": "True", "X-TTL": str(ttl)})
        try:
            self.transport.request("PUT", url, headers)
        except (TransportError, NotFoundError) as e:
            logger.warning(f"Failed to enable CDN for '{self.container_name}': {e}")
            return False
        logger.info(f"CDN enabled for container '{self.container_name}'")
        return True

    def get_public_url(self, path: str) -> Optional[str]:
        """Public CDN URL of ``path``.

        Returns:
            URL string, or None if the CDN could not be queried

        Raises:
            MalformedResponseError: If the CDN response has no X-Cdn-Uri header
        """
        url = self._require_cdn()
        try:
            response = self.transport.request("HEAD", url, self._auth_headers())
        except (TransportError, NotFoundError) as e:
            logger.warning(f"Failed to query CDN for '{self.container_name}': {e}")
            return None

        cdn_uri = response.headers.get("X-Cdn-Uri")
        if not cdn_uri:
            raise MalformedResponseError("CDN response is missing the X-Cdn-Uri header")
        return f"{cdn_uri.rstrip('/')}/{self._codec.encode(path)}"
