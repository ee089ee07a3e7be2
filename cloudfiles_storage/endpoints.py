"""Endpoint resolution from the service catalog."""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from .identity import CatalogService

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_NAME = "cloudFiles"
CDN_SERVICE_NAME = "cloudFilesCDN"


@dataclass(frozen=True)
class ResolvedEndpoints:
    """Storage endpoint plus optional CDN endpoint for one region."""

    storage: Optional[str] = None
    cdn: Optional[str] = None


def _find_public_url(catalog: Iterable[CatalogService], service_name: str, region: str) -> Optional[str]:
    # Sequential scan; a later duplicate overwrites an earlier match.
    url = None
    for service in catalog:
        if service.name != service_name:
            continue
        for endpoint in service.endpoints:
            if endpoint.region == region:
                url = endpoint.public_url
    return url


def resolve_endpoints(
    catalog: Iterable[CatalogService],
    service_name: str = DEFAULT_SERVICE_NAME,
    region: str = "DFW",
) -> ResolvedEndpoints:
    """Select the storage and CDN public URLs for ``region``.

    Args:
        catalog: Service catalog from the identity response
        service_name: Name of the object store as it appears in the catalog
        region: Region code (DFW, IAD, ORD, LON, SYD, HKG)

    Returns:
        Resolved endpoints; either may be ``None`` when nothing matched
    """
    catalog = list(catalog)
    resolved = ResolvedEndpoints(
        storage=_find_public_url(catalog, service_name, region),
        cdn=_find_public_url(catalog, CDN_SERVICE_NAME, region),
    )

    if resolved.storage is None:
        logger.warning(f"No '{service_name}' endpoint for region {region} in service catalog")
    if resolved.cdn is None:
        logger.debug(f"No '{CDN_SERVICE_NAME}' endpoint for region {region}")

    return resolved
