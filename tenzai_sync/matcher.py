"""
Find the Odoo record that corresponds to a local row, by natural key.

Several Odoo records can share a key (nothing in Odoo enforces uniqueness of
default_code or partner name), so the pick is an explicit policy:
  first        lowest Odoo id
  most_recent  latest write_date
  error        refuse to choose (DuplicateMatch)
"""
from tenzai_sync.config import DUPLICATE_POLICIES
from tenzai_sync.errors import DuplicateMatch, LookupFailed
from tenzai_sync.results import NOT_FOUND, RemoteMatch

_ORDER = {
    "first": "id asc",
    "most_recent": "write_date desc, id desc",
    "error": "id asc",
}


class RecordMatcher:
    def __init__(self, client, mapping, policy="first"):
        if policy not in DUPLICATE_POLICIES:
            raise ValueError(f"Unknown duplicate policy {policy!r}")
        self.client = client
        self.mapping = mapping
        self.policy = policy

    def match(self, row) -> RemoteMatch:
        key = self.mapping.key_of(row)
        if key is None:
            return NOT_FOUND
        # Two hits are enough to detect a duplicate
        limit = 2 if self.policy == "error" else 1
        try:
            hits = self.client.execute_kw(
                self.mapping.model,
                "search_read",
                [[[self.mapping.remote_key, "=", key]]],
                {"fields": ["id", "write_date"], "order": _ORDER[self.policy], "limit": limit},
            )
        except Exception as e:
            raise LookupFailed(f"Lookup of {self.mapping.model} {key!r} failed: {e}") from e
        if not hits:
            return NOT_FOUND
        if self.policy == "error" and len(hits) > 1:
            raise DuplicateMatch(
                f"{self.mapping.model} has more than one record with {self.mapping.remote_key}={key!r}"
            )
        return RemoteMatch(hits[0]["id"])
