"""
Identity service client.

Performs the one-time API-key login against the Rackspace identity service
(Keystone v2.0 with the ``RAX-KSKEY`` extension) and returns the access token
together with the service catalog used to locate storage endpoints.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .exceptions import AuthenticationError, CloudFilesError
from .transport import HttpTransport

logger = logging.getLogger(__name__)

US_IDENTITY_ENDPOINT = "https://identity.api.rackspacecloud.com/v2.0/"
UK_IDENTITY_ENDPOINT = "https://lon.identity.api.rackspacecloud.com/v2.0/"


@dataclass(frozen=True)
class ServiceEndpoint:
    """One region-scoped endpoint of a catalog service."""

    region: Optional[str]
    public_url: Optional[str]
    internal_url: Optional[str] = None
    tenant_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServiceEndpoint":
        return cls(
            region=data.get("region"),
            public_url=data.get("publicURL"),
            internal_url=data.get("internalURL"),
            tenant_id=data.get("tenantId"),
        )


@dataclass(frozen=True)
class CatalogService:
    """A named service and its endpoints."""

    name: Optional[str]
    type: Optional[str] = None
    endpoints: List[ServiceEndpoint] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CatalogService":
        return cls(
            name=data.get("name"),
            type=data.get("type"),
            endpoints=[ServiceEndpoint.from_dict(e) for e in data.get("endpoints") or []],
        )


@dataclass(frozen=True)
class Session:
    """Authenticated session: bearer token plus service catalog."""

    token: str
    service_catalog: List[CatalogService] = field(default_factory=list)


def parse_catalog(raw_catalog: List[Dict[str, Any]]) -> List[CatalogService]:
    return [CatalogService.from_dict(service) for service in raw_catalog]


class IdentityClient:
    """Authenticate with a username and API key.

    Args:
        identity_endpoint: Base URL of the identity service, e.g.
            :data:`US_IDENTITY_ENDPOINT`
        transport: HTTP transport used for the login request
    """

    def __init__(self, identity_endpoint: str, transport: HttpTransport):
        self.identity_endpoint = identity_endpoint
        self.transport = transport

    @property
    def tokens_url(self) -> str:
        return self.identity_endpoint.rstrip("/") + "/tokens"

    def authenticate(self, username: str, api_key: str) -> Session:
        """Exchange credentials for a token and service catalog.

        Raises:
            AuthenticationError: If the request fails, the service rejects the
                credentials, or the response lacks a token or catalog
        """
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        body = json.dumps({
            "auth": {
                "RAX-KSKEY:apiKeyCredentials": {
                    "username": username,
                    "apiKey": api_key,
                }
            }
        })

        try:
            response = self.transport.request("POST", self.tokens_url, headers, body)
        except CloudFilesError as e:
            logger.error(f"Authentication request failed: {e}")
            raise AuthenticationError(str(e)) from e

        try:
            access = response.json()["access"]
            token = access["token"]["id"]
            raw_catalog = access["serviceCatalog"]
        except (ValueError, KeyError, TypeError) as e:
            raise AuthenticationError(f"Unexpected identity response: {e}") from e

        if not token or not isinstance(raw_catalog, list):
            raise AuthenticationError("Identity response carries no token or service catalog")

        catalog = parse_catalog(raw_catalog)
        logger.info(f"Authenticated as {username}; catalog lists {len(catalog)} services")
        return Session(token=token, service_catalog=catalog)
