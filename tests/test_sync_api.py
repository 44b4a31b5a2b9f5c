import json
import threading
import urllib.error
import urllib.request

import pytest

from tenzai_sync.orchestrator import SyncOrchestrator
from tenzai_sync.sync_api import SyncServer


@pytest.fixture
def api(odoo, store):
    def start(api_key=""):
        server = SyncServer(("127.0.0.1", 0), SyncOrchestrator(odoo, store), api_key)
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        servers.append(server)
        return "http://127.0.0.1:%d" % server.server_address[1]

    servers = []
    yield start
    for server in servers:
        server.shutdown()
        server.server_close()


def _call(url, method="GET", headers=None):
    req = urllib.request.Request(url, method=method, headers=headers or {}, data=b"" if method == "POST" else None)
    try:
        with urllib.request.urlopen(req, timeout=5) as resp:
            return resp.status, json.loads(resp.read())
    except urllib.error.HTTPError as e:
        return e.code, json.loads(e.read())


def test_health(api):
    status, body = _call(api() + "/health")

    assert status == 200
    assert body == {"status": "ok", "service": "tenzai-sync-api"}


def test_sync_products(api, store):
    store.add("products", code="SKU1", name="Rice")
    store.add("products", code="SKU2", name="Tea")

    status, body = _call(api() + "/sync/products", "POST")

    assert status == 200
    assert body["success"] is True
    assert body["message"] == "Synced 2 out of 2 products"
    assert body["data"]["synced_count"] == 2


def test_sync_purchase_orders_message(api, odoo):
    odoo.add("purchase.order", name="P00001", state="done", partner_id=[7, "Fuji"], user_id=[2, "Admin"])

    status, body = _call(api() + "/sync/purchase-orders", "POST")

    assert status == 200
    assert body["message"] == "Synced 1 out of 1 purchase orders"


def test_connection_test(api):
    status, body = _call(api() + "/sync/test")

    assert status == 200
    assert body["data"]["odoo"] is True
    assert body["data"]["supabase"] is True


def test_sync_error_is_500(api, store):
    store.fail_read = ConnectionError("supabase down")

    status, body = _call(api() + "/sync/suppliers", "POST")

    assert status == 500
    assert body["success"] is False
    assert "supabase down" in body["error"]


def test_unknown_path_and_wrong_method(api):
    base = api()

    assert _call(base + "/sync/warehouses", "POST")[0] == 404
    assert _call(base + "/sync/products")[0] == 404


def test_api_key_required_when_configured(api):
    base = api(api_key="k1")

    assert _call(base + "/sync/full", "POST")[0] == 401
    assert _call(base + "/sync/full", "POST", {"X-Sync-Key": "k1"})[0] == 200
    assert _call(base + "/sync/status?key=k1")[0] == 200
    assert _call(base + "/health")[0] == 200
