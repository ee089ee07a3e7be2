"""Tests for service catalog endpoint resolution."""

from cloudfiles_storage import resolve_endpoints
from cloudfiles_storage.identity import parse_catalog


def _catalog(*services):
    return parse_catalog(list(services))


def _service(name, *endpoints):
    return {
        "name": name,
        "endpoints": [{"region": region, "publicURL": url} for region, url in endpoints],
    }


class TestResolveEndpoints:
    """Test resolve_endpoints()."""

    def test_storage_and_cdn_resolved(self):
        catalog = _catalog(
            _service("cloudFiles", ("DFW", "https://dfw.storage"), ("ORD", "https://ord.storage")),
            _service("cloudFilesCDN", ("DFW", "https://dfw.cdn"), ("ORD", "https://ord.cdn")),
        )
        resolved = resolve_endpoints(catalog, "cloudFiles", "ORD")
        assert resolved.storage == "https://ord.storage"
        assert resolved.cdn == "https://ord.cdn"

    def test_unknown_region_leaves_both_unset(self):
        catalog = _catalog(
            _service("cloudFiles", ("DFW", "https://dfw.storage")),
            _service("cloudFilesCDN", ("DFW", "https://dfw.cdn")),
        )
        resolved = resolve_endpoints(catalog, "cloudFiles", "SYD")
        assert resolved.storage is None
        assert resolved.cdn is None

    def test_unknown_service_leaves_storage_unset(self):
        catalog = _catalog(_service("cloudFilesCDN", ("DFW", "https://dfw.cdn")))
        resolved = resolve_endpoints(catalog, "objectStore", "DFW")
        assert resolved.storage is None
        assert resolved.cdn == "https://dfw.cdn"

    def test_cdn_optional(self):
        catalog = _catalog(_service("cloudFiles", ("DFW", "https://dfw.storage")))
        resolved = resolve_endpoints(catalog, "cloudFiles", "DFW")
        assert resolved.storage == "https://dfw.storage"
        assert resolved.cdn is None

    def test_duplicate_region_last_wins(self):
        catalog = _catalog(
            _service("cloudFiles", ("DFW", "https://first"), ("DFW", "https://second")),
        )
        assert resolve_endpoints(catalog, "cloudFiles", "DFW").storage == "https://second"

    def test_duplicate_service_last_wins(self):
        catalog = _catalog(
            _service("cloudFiles", ("DFW", "https://first")),
            _service("cloudFiles", ("DFW", "https://second")),
        )
        assert resolve_endpoints(catalog, "cloudFiles", "DFW").storage == "https://second"

    def test_empty_catalog(self):
        resolved = resolve_endpoints([], "cloudFiles", "DFW")
        assert resolved.storage is None
        assert resolved.cdn is None
