"""
Create-or-update one local row in Odoo and write the Odoo id back to Supabase.

The Odoo change and the Supabase write-back are not atomic. When the write-back
still fails after its retries, the Odoo id is kept in `orphans` so the caller
can replay it; until then local and remote have drifted. The next sync pass
also heals it, since the natural-key lookup finds the record and updates it.
"""
import sys

from tenzai_sync.errors import CreateFailed, SyncError, UpdateFailed, WriteBackFailed
from tenzai_sync.matcher import RecordMatcher
from tenzai_sync.results import CREATED, FAILED, SKIPPED, UPDATED, SyncOutcome


class Reconciler:
    def __init__(self, client, store, mapping, matcher=None, write_back_retries=2):
        self.client = client
        self.store = store
        self.mapping = mapping
        self.matcher = matcher or RecordMatcher(client, mapping)
        self.write_back_retries = write_back_retries
        self.orphans = []

    def reconcile(self, row) -> SyncOutcome:
        row_id = row.get("id")
        label = self.mapping.label(row)
        if self.mapping.key_of(row) is None:
            return SyncOutcome(row_id, label, SKIPPED, error=f"missing {self.mapping.local_key}")
        try:
            match = self.matcher.match(row)
            if match.found:
                remote_id = self._update(match.remote_id, row)
                status = UPDATED
            else:
                remote_id = self._create(row)
                status = CREATED
            self.write_back(row_id, remote_id)
        except SyncError as e:
            return SyncOutcome(row_id, label, FAILED, error=str(e))
        except Exception as e:
            return SyncOutcome(row_id, label, FAILED, error=f"{type(e).__name__}: {e}")
        return SyncOutcome(row_id, label, status, remote_id=remote_id)

    def _create(self, row):
        try:
            new_id = self.client.execute_kw(
                self.mapping.model, "create", [self.mapping.create_values(row)]
            )
        except Exception as e:
            raise CreateFailed(f"Create in {self.mapping.model} failed: {e}") from e
        # create([vals]) may come back as [id] depending on the server version
        if isinstance(new_id, (list, tuple)):
            new_id = new_id[0] if new_id else None
        if not new_id:
            raise CreateFailed(f"Create in {self.mapping.model} returned no id")
        return new_id

    def _update(self, remote_id, row):
        try:
            self.client.execute_kw(
                self.mapping.model, "write", [[remote_id], self.mapping.to_remote(row)]
            )
        except Exception as e:
            raise UpdateFailed(f"Update of {self.mapping.model} {remote_id} failed: {e}") from e
        return remote_id

    def write_back(self, row_id, remote_id):
        last_error = None
        for _attempt in range(self.write_back_retries + 1):
            try:
                self.store.set_remote_id(self.mapping.table, row_id, remote_id)
                return
            except Exception as e:
                last_error = e
        self.orphans.append({"id": row_id, "odoo_id": remote_id, "error": str(last_error)})
        print(
            f"Write-back of {self.mapping.table} {row_id} -> odoo_id {remote_id} failed: {last_error}",
            file=sys.stderr,
        )
        raise WriteBackFailed(
            f"Odoo {self.mapping.model} {remote_id} saved but writing odoo_id to "
            f"{self.mapping.table} {row_id} failed: {last_error}",
            remote_id,
        )
