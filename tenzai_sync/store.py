"""
Supabase side of the sync: the local datastore the orchestrator reads from and
writes foreign ids back to. Rows are plain dicts; `odoo_id` holds the Odoo id.

Anything exposing the same methods (fetch_active, set_remote_id,
find_by_remote_id, insert, count, ping) can be passed to the orchestrator
instead.
"""
from supabase import create_client

from tenzai_sync.config import supabase_config

REMOTE_ID_COLUMN = "odoo_id"


class SupabaseStore:
    def __init__(self, client, schema="public"):
        self.client = client
        self.schema = schema

    @classmethod
    def from_env(cls):
        cfg = supabase_config()
        return cls(create_client(cfg["url"], cfg["key"]), cfg["schema"])

    def _table(self, table):
        return self.client.schema(self.schema).from_(table)

    def fetch_active(self, table):
        # Single bulk read, no pagination
        res = self._table(table).select("*").eq("active", True).execute()
        return list(res.data or [])

    def set_remote_id(self, table, row_id, remote_id):
        self._table(table).update({REMOTE_ID_COLUMN: remote_id}).eq("id", row_id).execute()

    def find_by_remote_id(self, table, remote_id):
        res = (
            self._table(table)
            .select("id")
            .eq(REMOTE_ID_COLUMN, remote_id)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None

    def insert(self, table, row):
        res = self._table(table).insert(row).execute()
        rows = res.data or []
        if not rows:
            raise RuntimeError(f"Insert into {table} returned no row")
        return rows[0]

    def count(self, table, active_only=False):
        query = self._table(table).select("id", count="exact")
        if active_only:
            query = query.eq("active", True)
        res = query.limit(1).execute()
        return res.count or 0

    def ping(self, table="products"):
        self._table(table).select("id").limit(1).execute()
        return True
