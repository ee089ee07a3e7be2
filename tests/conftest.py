"""Pytest configuration and fixtures for cloudfiles_storage tests."""

import json
from email.utils import formatdate
from datetime import datetime, timezone
from typing import Dict, Generator, List, Optional, Tuple
from urllib.parse import parse_qs, unquote, urlsplit

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from cloudfiles_storage import CloudFilesAdapter


class FakeCloudFiles(BaseAdapter):
    """In-memory identity, object store and CDN service.

    Mounted on a requests session so the adapter's real HTTP code path runs
    without a network. Objects are keyed by ``(container, name)`` with
    decoded names.
    """

    IDENTITY = "https://identity.test/v2.0/"
    STORAGE = "https://storage.test/v1/MossoCloudFS_1"
    CDN = "https://cdn.test/v1/MossoCloudFS_1"
    CDN_URI = "https://c0.cdn.test"
    TOKEN = "token-abc123"
    USERNAME = "jdoe"
    API_KEY = "secret-key"
    NOW = 1700000000

    def __init__(self):
        super().__init__()
        self.objects: Dict[Tuple[str, str], Tuple[bytes, str]] = {}
        self.cdn_headers: Dict[str, CaseInsensitiveDict] = {}
        self.requests: List[requests.PreparedRequest] = []
        self.fail_methods: set = set()
        self.copy_status = 201
        self.connection_error = False
        self.catalog = [
            {
                "name": "cloudFiles",
                "type": "object-store",
                "endpoints": [
                    {"region": "DFW", "tenantId": "MossoCloudFS_1", "publicURL": self.STORAGE},
                    {"region": "ORD", "tenantId": "MossoCloudFS_1", "publicURL": "https://storage-ord.test/v1/MossoCloudFS_1"},
                ],
            },
            {
                "name": "cloudFilesCDN",
                "type": "rax:object-cdn",
                "endpoints": [
                    {"region": "DFW", "tenantId": "MossoCloudFS_1", "publicURL": self.CDN},
                ],
            },
            {
                "name": "cloudServersOpenStack",
                "type": "compute",
                "endpoints": [
                    {"region": "DFW", "publicURL": "https://dfw.servers.test/v2/1"},
                ],
            },
        ]

    # Helpers for tests

    def put(self, container: str, name: str, data: bytes, content_type: str = "text/plain"):
        self.objects[(container, name)] = (data, content_type)

    def get(self, container: str, name: str) -> Optional[bytes]:
        entry = self.objects.get((container, name))
        return entry[0] if entry else None

    @property
    def last_request(self) -> requests.PreparedRequest:
        return self.requests[-1]

    # requests adapter interface

    def close(self):
        pass

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.requests.append(request)
        if self.connection_error:
            raise requests.ConnectionError("Connection refused")
        if request.method in self.fail_methods:
            return self._response(request, 500, b"Internal Server Error")

        url = urlsplit(request.url)
        base = f"{url.scheme}://{url.netloc}"

        if request.url.startswith(self.IDENTITY):
            return self._authenticate(request)

        if request.headers.get("X-Auth-Token") != self.TOKEN:
            return self._response(request, 401, b"Unauthorized")

        if request.url.startswith(self.STORAGE):
            path = url.path[len(urlsplit(self.STORAGE).path):].lstrip("/")
            return self._storage(request, path, parse_qs(url.query))

        if request.url.startswith(self.CDN):
            container = unquote(url.path[len(urlsplit(self.CDN).path):].strip("/"))
            return self._cdn(request, container)

        return self._response(request, 404, f"No route for {base}".encode())

    def _response(self, request, status: int, body: bytes = b"", headers: Optional[dict] = None) -> requests.Response:
        response = requests.Response()
        response.status_code = status
        response.headers = CaseInsensitiveDict(headers or {})
        response._content = body
        response.encoding = "utf-8"
        response.url = request.url
        response.request = request
        response.reason = "OK" if status < 400 else "Error"
        return response

    def _body(self, request) -> bytes:
        body = request.body or b""
        return body.encode("utf-8") if isinstance(body, str) else body

    def _http_date(self) -> str:
        return formatdate(self.NOW, usegmt=True)

    def _authenticate(self, request) -> requests.Response:
        payload = json.loads(self._body(request))
        creds = payload["auth"]["RAX-KSKEY:apiKeyCredentials"]
        if creds["username"] != self.USERNAME or creds["apiKey"] != self.API_KEY:
            body = {"unauthorized": {"code": 401, "message": "Username or api key is invalid."}}
            return self._response(request, 401, json.dumps(body).encode())

        body = {
            "access": {
                "token": {"id": self.TOKEN, "expires": "2030-01-01T00:00:00.000Z"},
                "serviceCatalog": self.catalog,
            }
        }
        return self._response(request, 200, json.dumps(body).encode(), {"Content-Type": "application/json"})

    def _storage(self, request, path: str, query: dict) -> requests.Response:
        container, _, encoded_name = path.partition("/")
        container = unquote(container)
        name = "/".join(unquote(segment) for segment in encoded_name.split("/")) if encoded_name else ""

        if request.method == "GET" and query.get("format") == ["json"]:
            return self._listing(request, container, name)

        key = (container, name)
        if request.method == "PUT":
            content_type = request.headers.get("Content-Type", "application/octet-stream")
            self.objects[key] = (self._body(request), content_type)
            return self._response(request, 201, b"", {
                "Last-Modified": self._http_date(),
                "Content-Length": "0",
                "Content-Type": "text/html; charset=UTF-8",
                "Etag": "d41d8cd98f00b204e9800998ecf8427e",
            })

        if key not in self.objects:
            return self._response(request, 404, b"<html><h1>Not Found</h1></html>")

        data, content_type = self.objects[key]

        if request.method in ("GET", "HEAD"):
            headers = {
                "Content-Type": content_type,
                "Content-Length": str(len(data)),
                "Last-Modified": self._http_date(),
            }
            return self._response(request, 200, data if request.method == "GET" else b"", headers)

        if request.method == "DELETE":
            del self.objects[key]
            return self._response(request, 204)

        if request.method == "COPY":
            if self.copy_status == 201:
                dest_container, _, dest_name = request.headers["Destination"].lstrip("/").partition("/")
                dest_key = (unquote(dest_container), "/".join(unquote(s) for s in dest_name.split("/")))
                self.objects[dest_key] = (data, content_type)
            return self._response(request, self.copy_status)

        return self._response(request, 405)

    def _listing(self, request, container: str, directory: str) -> requests.Response:
        prefix = f"{directory}/" if directory else ""
        iso_date = datetime.fromtimestamp(self.NOW, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")
        entries = [
            {
                "name": name[len(prefix):],
                "hash": "0" * 32,
                "bytes": len(data),
                "content_type": content_type,
                "last_modified": iso_date,
            }
            for (obj_container, name), (data, content_type) in sorted(self.objects.items())
            if obj_container == container and name.startswith(prefix) and name != directory
        ]
        if not entries:
            return self._response(request, 204)
        return self._response(request, 200, json.dumps(entries).encode(), {"Content-Type": "application/json; charset=utf-8"})

    def _cdn(self, request, container: str) -> requests.Response:
        if request.method == "PUT":
            self.cdn_headers[container] = CaseInsensitiveDict(request.headers)
            return self._response(request, 201)

        if request.method == "HEAD":
            if container not in self.cdn_headers:
                return self._response(request, 404)
            return self._response(request, 204, b"", {
                "X-Cdn-Enabled": "True",
                "X-Cdn-Uri": f"{self.CDN_URI}/{container}",
                "X-Ttl": self.cdn_headers[container].get("X-TTL", "259200"),
            })

        return self._response(request, 405)


@pytest.fixture
def fake() -> FakeCloudFiles:
    """Fresh in-memory Cloud Files service."""
    return FakeCloudFiles()


@pytest.fixture
def http_session(fake: FakeCloudFiles) -> Generator[requests.Session, None, None]:
    """requests session routed to the fake service."""
    session = requests.Session()
    session.mount("https://", fake)
    yield session
    session.close()


@pytest.fixture
def unconfigured_adapter(http_session: requests.Session) -> CloudFilesAdapter:
    """Authenticated adapter with no container or endpoints set."""
    return CloudFilesAdapter(
        FakeCloudFiles.USERNAME,
        FakeCloudFiles.API_KEY,
        FakeCloudFiles.IDENTITY,
        http_session=http_session,
    )


@pytest.fixture
def adapter(unconfigured_adapter: CloudFilesAdapter) -> CloudFilesAdapter:
    """Adapter bound to container 'assets' in DFW."""
    return unconfigured_adapter.set_container_name("assets").object_store_service("cloudFiles", "DFW")


@pytest.fixture
def test_content() -> bytes:
    """Generate test file content."""
    return b"This is test content for storage backend testing."
