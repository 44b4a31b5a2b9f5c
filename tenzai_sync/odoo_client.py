"""
Thin Odoo XML-RPC client used by the sync service.
Uses stdlib xmlrpc.client; auth via login + password (password can be API key).
Authenticates lazily: the first execute_kw without a uid logs in.
Never deletes: unlink and other non-whitelisted methods are refused.
"""
import threading
import xmlrpc.client
from urllib.parse import urljoin

from tenzai_sync.config import odoo_config

# Sync only reads, creates and overwrites; it never removes Odoo records
ALLOWED_METHODS = frozenset(
    {"read", "search_read", "search", "search_count", "fields_get", "create", "write"}
)


def _transport(url, timeout):
    base = xmlrpc.client.SafeTransport if url.startswith("https") else xmlrpc.client.Transport

    class _TimeoutTransport(base):
        def make_connection(self, host):
            conn = super().make_connection(host)
            conn.timeout = timeout
            return conn

    return _TimeoutTransport()


class OdooClient:
    def __init__(self, url, db, username, password, timeout=30):
        self.url = url.rstrip("/")
        self.db = db
        self.username = username
        self.password = password
        self.timeout = timeout
        self.uid = None
        # xmlrpc proxies hold one HTTP connection each; keep them per thread
        self._local = threading.local()

    @classmethod
    def from_env(cls):
        cfg = odoo_config()
        return cls(cfg["url"], cfg["db"], cfg["username"], cfg["password"], cfg["timeout"])

    def _proxy(self, path):
        return xmlrpc.client.ServerProxy(
            urljoin(self.url + "/", path),
            allow_none=True,
            transport=_transport(self.url, self.timeout),
        )

    def _cached_proxy(self, path):
        proxies = self._local.__dict__.setdefault("proxies", {})
        if path not in proxies:
            proxies[path] = self._proxy(path)
        return proxies[path]

    @property
    def common(self):
        return self._cached_proxy("xmlrpc/2/common")

    @property
    def object(self):
        return self._cached_proxy("xmlrpc/2/object")

    def authenticate(self):
        uid = self.common.authenticate(self.db, self.username, self.password, {})
        if not uid:
            raise PermissionError("Odoo authentication failed (check URL, db, user, password/api key)")
        self.uid = uid
        return uid

    def execute_kw(self, model, method, args, kwargs=None):
        if method not in ALLOWED_METHODS:
            raise PermissionError(
                f"Sync client: '{method}' not allowed. Use only: {sorted(ALLOWED_METHODS)}"
            )
        if not self.uid:
            self.authenticate()
        return self.object.execute_kw(
            self.db, self.uid, self.password, model, method, args, kwargs or {}
        )
