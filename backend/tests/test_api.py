import pytest
from fastapi.testclient import TestClient

from dns_switcher.main import app
from dns_switcher.services.dns_option import CUSTOM_DNS_OPTION_NAME
from dns_switcher.services.routeros_api import open_lease_store

from fakes import MANAGED


@pytest.fixture
def api_client(store):
    app.dependency_overrides[open_lease_store] = lambda: store
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def _as(ip):
    return {"X-Real-IP": ip}


class TestDnsStatus:
    def test_default_when_no_lease(self, api_client):
        resp = api_client.get("/api/dns", headers=_as("10.0.0.5"))
        assert resp.status_code == 200
        assert resp.json() == {"ok": True, "data": {"status": "DEFAULT", "ip": "10.0.0.5"}}

    def test_custom(self, api_client, store):
        store.add_lease("10.0.0.5", comment=MANAGED)
        resp = api_client.get("/api/dns", headers=_as("10.0.0.5"))
        assert resp.json()["data"]["status"] == "CUSTOM"

    def test_unmanaged(self, api_client, store):
        store.add_lease("10.0.0.6", comment="manual-entry")
        resp = api_client.get("/api/dns", headers=_as("10.0.0.6"))
        assert resp.json()["data"]["status"] == "UNMANAGED"

    def test_peer_address_without_header_must_be_ipv4(self, api_client):
        # TestClient's peer host is "testclient"
        resp = api_client.get("/api/dns")
        assert resp.status_code == 400
        body = resp.json()
        assert body["ok"] is False
        assert body["error"]["code"] == "InvalidClientAddress"

    def test_invalid_header_value(self, api_client):
        resp = api_client.get("/api/dns", headers=_as("not-an-ip"))
        assert resp.status_code == 400


class TestSwitchToCustom:
    def test_creates_static_lease(self, api_client, store):
        store.arp["10.0.0.5"] = "AA:BB:CC:DD:EE:FF"

        resp = api_client.put("/api/dns", headers=_as("10.0.0.5"))

        assert resp.status_code == 200
        assert resp.json() == {"ok": True, "data": {"status": "CUSTOM", "ip": "10.0.0.5"}}
        assert store.options[CUSTOM_DNS_OPTION_NAME].value == "0x01010101"

    def test_no_identity(self, api_client, store):
        resp = api_client.put("/api/dns", headers=_as("10.0.0.9"))
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "NoIdentityFound"
        assert store.writes == []

    def test_foreign_lease_conflict(self, api_client, store):
        store.add_lease("10.0.0.6", comment="manual-entry")
        resp = api_client.put("/api/dns", headers=_as("10.0.0.6"))
        assert resp.status_code == 409
        body = resp.json()
        assert body["ok"] is False
        assert body["error"]["code"] == "ForeignLeaseConflict"
        assert "manual-entry" in body["error"]["message"]

    def test_option_failure_is_bad_gateway(self, api_client, store):
        store.arp["10.0.0.5"] = "AA:BB:CC:DD:EE:FF"
        store.fail_option_creation = True
        resp = api_client.put("/api/dns", headers=_as("10.0.0.5"))
        assert resp.status_code == 502
        assert resp.json()["error"]["code"] == "OptionCreationFailed"


class TestResetToDefault:
    def test_deletes_managed_lease(self, api_client, store):
        store.add_lease("10.0.0.5", comment=MANAGED)
        resp = api_client.delete("/api/dns", headers=_as("10.0.0.5"))
        assert resp.status_code == 200
        assert resp.json()["data"] == {"status": "DEFAULT", "ip": "10.0.0.5"}
        assert store.leases == {}

    def test_no_lease_is_noop(self, api_client, store):
        resp = api_client.delete("/api/dns", headers=_as("10.0.0.5"))
        assert resp.status_code == 200
        assert store.writes == []

    def test_foreign_lease_untouched(self, api_client, store):
        lease = store.add_lease("10.0.0.6", comment="manual-entry")
        resp = api_client.delete("/api/dns", headers=_as("10.0.0.6"))
        assert resp.status_code == 409
        assert store.leases[lease.id] == lease


class TestStoreUnavailable:
    def test_router_down_is_service_unavailable(self):
        from dns_switcher.exceptions import StoreUnavailable

        class DownStore:
            async def get_lease_by_address(self, ip):
                raise StoreUnavailable("Router 192.168.88.1:443 unreachable")

        app.dependency_overrides[open_lease_store] = lambda: DownStore()
        try:
            with TestClient(app) as client:
                resp = client.get("/api/dns", headers=_as("10.0.0.5"))
        finally:
            app.dependency_overrides.clear()
        assert resp.status_code == 503
        assert resp.json()["error"]["code"] == "StoreUnavailable"


class TestServiceEndpoints:
    def test_service_info(self, api_client):
        body = api_client.get("/api").json()
        assert body["service"] == "DNS Switcher"
        assert body["custom_dns"] == "1.1.1.1"
        assert "PUT /api/dns" in body["endpoints"]

    def test_health(self, api_client):
        assert api_client.get("/api/health").json()["status"] == "ok"

    def test_security_and_request_id_headers(self, api_client):
        resp = api_client.get("/api/health", headers={"X-Request-ID": "abc123"})
        assert resp.headers["X-Request-ID"] == "abc123"
        assert resp.headers["X-Content-Type-Options"] == "nosniff"


def test_proxy_header_ignored_when_disabled(api_client, monkeypatch):
    from dns_switcher.config import settings

    monkeypatch.setattr(settings, "TRUSTED_IP_HEADER", "")
    resp = api_client.get("/api/dns", headers=_as("10.0.0.5"))
    assert resp.status_code == 400


@pytest.fixture
def rate_limited(monkeypatch):
    from dns_switcher.extensions import limiter

    monkeypatch.setattr(limiter, "enabled", True)
    limiter.reset()
    yield limiter
    limiter.reset()


class TestRateLimiting:
    def test_clients_behind_proxy_have_separate_buckets(self, api_client, rate_limited):
        # Ten requests fill the bucket; further clients must not share it.
        codes = [api_client.delete("/api/dns", headers=_as(f"10.0.0.{n}")).status_code for n in range(1, 12)]
        assert codes == [200] * 11

    def test_limit_applies_per_client(self, api_client, rate_limited):
        codes = [api_client.delete("/api/dns", headers=_as("10.0.0.1")).status_code for _ in range(11)]
        assert codes == [200] * 10 + [429]
        assert api_client.delete("/api/dns", headers=_as("10.0.0.2")).status_code == 200

    def test_rejection_uses_error_envelope(self, api_client, rate_limited):
        for _ in range(10):
            api_client.put("/api/dns", headers=_as("10.0.0.1"))
        resp = api_client.put("/api/dns", headers=_as("10.0.0.1"))
        assert resp.status_code == 429
        body = resp.json()
        assert body["ok"] is False
        assert body["error"]["code"] == "RateLimitExceeded"
        assert body["error"]["message"].startswith("Rate limit exceeded")


def test_startup_logs_use_lazy_arguments(store, caplog):
    caplog.set_level("INFO", logger="dns_switcher.main")
    app.dependency_overrides[open_lease_store] = lambda: store
    try:
        with TestClient(app):
            pass
    finally:
        app.dependency_overrides.clear()

    startup = [r for r in caplog.records if r.name == "dns_switcher.main" and r.msg.startswith("Starting")]
    assert startup[0].msg == "Starting %s v%s"
    assert startup[0].getMessage() == "Starting DNS Switcher v1.0.0"
