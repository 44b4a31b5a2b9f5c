#!/usr/bin/env python3
"""
Minimal HTTP API in front of the sync service, for n8n or a cron curl.
Stdlib http.server; one request at a time. Loads .env like the CLI.

  GET  /health                -> {"status": "ok", "service": "tenzai-sync-api"}
  GET  /sync/test             connectivity of Odoo and Supabase
  GET  /sync/status           connectivity plus local record counts
  POST /sync/products         push products to Odoo
  POST /sync/suppliers        push suppliers to Odoo
  POST /sync/purchase-orders  pull purchase orders from Odoo
  POST /sync/full             all of the above

If SYNC_API_KEY is set, requests must send it as X-Sync-Key or ?key=.
"""
import json
import sys
from http.server import BaseHTTPRequestHandler, HTTPServer
from urllib.parse import parse_qs, urlparse

from tenzai_sync.config import api_config, load_env
from tenzai_sync.orchestrator import SyncOrchestrator
from tenzai_sync.probe import check_connections

SERVICE_NAME = "tenzai-sync-api"


def _summary_route(run, label):
    def handle(orchestrator):
        summary = run(orchestrator)
        return (
            summary.to_dict(),
            f"Synced {summary.synced_count} out of {summary.total_count} {label}",
        )
    return handle


GET_ROUTES = {
    "/sync/test": lambda o: (check_connections(o.client, o.store), "Connection test completed"),
    "/sync/status": lambda o: (o.status(), "Status check completed"),
}

POST_ROUTES = {
    "/sync/products": _summary_route(lambda o: o.sync_products(), "products"),
    "/sync/suppliers": _summary_route(lambda o: o.sync_suppliers(), "suppliers"),
    "/sync/purchase-orders": _summary_route(lambda o: o.sync_purchase_orders(), "purchase orders"),
    "/sync/full": lambda o: (o.full_sync(), "Full sync completed"),
}


def _check_auth(handler: BaseHTTPRequestHandler, api_key: str) -> bool:
    if not api_key:
        return True
    key_header = handler.headers.get("X-Sync-Key", "").strip()
    qs = parse_qs(urlparse(handler.path).query)
    key_query = (qs.get("key") or [""])[0].strip()
    return key_header == api_key or key_query == api_key


class SyncHandler(BaseHTTPRequestHandler):
    def do_GET(self):
        path = urlparse(self.path).path.rstrip("/")
        if path == "/health":
            self._send(200, {"status": "ok", "service": SERVICE_NAME})
            return
        self._dispatch(GET_ROUTES, path)

    def do_POST(self):
        self._dispatch(POST_ROUTES, urlparse(self.path).path.rstrip("/"))

    def _dispatch(self, routes, path):
        route = routes.get(path)
        if route is None:
            self._send(404, {"success": False, "error": "Not found"})
            return
        if not _check_auth(self, self.server.api_key):
            self._send(401, {"success": False, "error": "Unauthorized"})
            return
        try:
            data, message = route(self.server.orchestrator)
        except Exception as e:
            sys.stderr.write("%s failed: %s\n" % (path, e))
            self._send(500, {"success": False, "error": str(e), "details": f"Failed to run {path}"})
            return
        self._send(200, {"success": True, "data": data, "message": message})

    def _send(self, status: int, payload):
        body = json.dumps(payload, default=str)
        self.send_response(status)
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Content-Length", str(len(body.encode("utf-8"))))
        self.end_headers()
        self.wfile.write(body.encode("utf-8"))

    def log_message(self, format, *args):
        # Quiet; log to stderr so systemd captures it
        sys.stderr.write("%s - - [%s] %s\n" % (self.address_string(), self.log_date_time_string(), format % args))


class SyncServer(HTTPServer):
    def __init__(self, address, orchestrator, api_key=""):
        super().__init__(address, SyncHandler)
        self.orchestrator = orchestrator
        self.api_key = api_key


def main():
    load_env()
    cfg = api_config()
    server = SyncServer((cfg["host"], cfg["port"]), SyncOrchestrator.from_env(), cfg["api_key"])
    print(
        "Sync API listening on %s:%s (SYNC_API_KEY=%s)"
        % (cfg["host"], cfg["port"], "set" if cfg["api_key"] else "not set"),
        file=sys.stderr,
        flush=True,
    )
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()


if __name__ == "__main__":
    main()
