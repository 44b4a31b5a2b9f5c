import itertools

import pytest


class FakeOdoo:
    """In-memory stand-in for OdooClient.execute_kw.

    Records live in self.records[model][id]. `fail` maps (model, method) to a
    predicate on the call args; when it returns True the call raises.
    """

    def __init__(self):
        self.records = {}
        self.calls = []
        self.fail = {}
        self.uid = None
        self.auth_error = None
        self._ids = itertools.count(42)

    def add(self, model, **vals):
        rec_id = vals.pop("id", None) or next(self._ids)
        vals.setdefault("write_date", "2026-01-01 00:00:00")
        self.records.setdefault(model, {})[rec_id] = dict(vals, id=rec_id)
        return rec_id

    def authenticate(self):
        if self.auth_error:
            raise self.auth_error
        self.uid = 2
        return self.uid

    def _matches(self, rec, domain):
        for fname, op, value in domain:
            if op == "=" and rec.get(fname) != value:
                return False
            if op == "in" and rec.get(fname) not in value:
                return False
        return True

    def execute_kw(self, model, method, args, kwargs=None):
        kwargs = kwargs or {}
        self.calls.append((model, method, args, kwargs))
        should_fail = self.fail.get((model, method))
        if should_fail and should_fail(args):
            raise ConnectionError(f"injected {method} failure")
        table = self.records.setdefault(model, {})
        if method == "search_read":
            hits = [dict(r) for r in table.values() if self._matches(r, args[0])]
            order = kwargs.get("order", "id asc")
            if order.startswith("write_date desc"):
                hits.sort(key=lambda r: (r["write_date"], r["id"]), reverse=True)
            else:
                hits.sort(key=lambda r: r["id"])
            if kwargs.get("limit"):
                hits = hits[: kwargs["limit"]]
            return hits
        if method == "create":
            return self.add(model, **dict(args[0]))
        if method == "write":
            for rec_id in args[0]:
                table[rec_id].update(args[1])
            return True
        raise NotImplementedError(method)

    def methods(self, model=None):
        return [c[1] for c in self.calls if model is None or c[0] == model]


class FakeStore:
    """In-memory stand-in for SupabaseStore."""

    def __init__(self):
        self.tables = {}
        self.fail_write_back = 0
        self.fail_read = None
        self.fail_insert_for = set()
        self.ping_error = None
        self._ids = itertools.count(1000)

    def add(self, table, **row):
        row.setdefault("id", next(self._ids))
        row.setdefault("active", True)
        row.setdefault("odoo_id", None)
        self.tables.setdefault(table, []).append(row)
        return row

    def get(self, table, row_id):
        return next(r for r in self.tables.get(table, []) if r["id"] == row_id)

    def fetch_active(self, table):
        if self.fail_read:
            raise self.fail_read
        return [dict(r) for r in self.tables.get(table, []) if r.get("active")]

    def set_remote_id(self, table, row_id, remote_id):
        if self.fail_write_back:
            self.fail_write_back -= 1
            raise ConnectionError("injected write-back failure")
        self.get(table, row_id)["odoo_id"] = remote_id

    def find_by_remote_id(self, table, remote_id):
        for r in self.tables.get(table, []):
            if r.get("odoo_id") == remote_id:
                return {"id": r["id"]}
        return None

    def insert(self, table, row):
        if row.get("odoo_id") in self.fail_insert_for:
            raise ConnectionError("injected insert failure")
        return dict(self.add(table, **dict(row)))

    def count(self, table, active_only=False):
        rows = self.tables.get(table, [])
        if active_only:
            rows = [r for r in rows if r.get("active")]
        return len(rows)

    def ping(self):
        if self.ping_error:
            raise self.ping_error
        return True


@pytest.fixture
def odoo():
    return FakeOdoo()


@pytest.fixture
def store():
    return FakeStore()
