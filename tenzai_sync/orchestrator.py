"""
Sync passes over whole entity types.

Push (Supabase -> Odoo): products and suppliers, one Reconciler call per active
row. Pull (Odoo -> Supabase): confirmed purchase orders, inserted locally unless
a row with that odoo_id already exists. A failing row never stops the pass; the
summary lists every row with its status.

Two passes started at the same time are not serialized against each other.
"""
import sys
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

from tenzai_sync.config import sync_settings
from tenzai_sync.errors import LocalReadFailed, LookupFailed, SyncError
from tenzai_sync.mappings import PURCHASE_ORDERS, get_mapping
from tenzai_sync.matcher import RecordMatcher
from tenzai_sync.probe import check_connections
from tenzai_sync.reconciler import Reconciler
from tenzai_sync.results import CREATED, FAILED, SKIPPED, UPDATED, SyncOutcome, SyncSummary

DEFAULT_SETTINGS = {"duplicate_policy": "first", "workers": 1, "write_back_retries": 2}


class SyncOrchestrator:
    def __init__(self, client, store, settings=None):
        self.client = client
        self.store = store
        self.settings = dict(DEFAULT_SETTINGS)
        self.settings.update(settings or {})

    @classmethod
    def from_env(cls, **overrides):
        from tenzai_sync.odoo_client import OdooClient
        from tenzai_sync.store import SupabaseStore

        settings = sync_settings()
        settings.update({k: v for k, v in overrides.items() if v is not None})
        return cls(OdooClient.from_env(), SupabaseStore.from_env(), settings)

    def reconciler_for(self, mapping):
        matcher = RecordMatcher(self.client, mapping, self.settings["duplicate_policy"])
        return Reconciler(
            self.client,
            self.store,
            mapping,
            matcher=matcher,
            write_back_retries=self.settings["write_back_retries"],
        )

    def _run(self, func, rows):
        """Apply func to each row; results come back in row order."""
        workers = max(int(self.settings.get("workers") or 1), 1)
        if workers == 1 or len(rows) < 2:
            return [func(row) for row in rows]
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(func, rows))

    def sync_all(self, entity_type) -> SyncSummary:
        mapping = get_mapping(entity_type)
        try:
            rows = self.store.fetch_active(mapping.table)
        except Exception as e:
            raise LocalReadFailed(f"Reading active {mapping.table} failed: {e}") from e

        reconciler = self.reconciler_for(mapping)
        outcomes = self._run(reconciler.reconcile, rows)
        summary = SyncSummary(mapping.name, outcomes, list(reconciler.orphans))
        _report(summary)
        return summary

    def sync_products(self) -> SyncSummary:
        return self.sync_all("products")

    def sync_suppliers(self) -> SyncSummary:
        return self.sync_all("suppliers")

    def sync_purchase_orders(self) -> SyncSummary:
        pull = PURCHASE_ORDERS
        try:
            orders = self.client.execute_kw(
                pull.model,
                "search_read",
                [pull.domain],
                {"fields": pull.fields, "order": pull.order},
            )
        except Exception as e:
            raise LookupFailed(f"Reading {pull.model} from Odoo failed: {e}") from e

        outcomes = self._run(self._pull_order, orders or [])
        summary = SyncSummary(pull.name, outcomes)
        _report(summary)
        return summary

    def _pull_order(self, order):
        pull = PURCHASE_ORDERS
        remote_id = order.get("id")
        name = order.get("name")
        # Outcome ids are local purchase_orders ids; None when no local row exists
        try:
            # The Odoo id is the idempotency key
            existing = self.store.find_by_remote_id(pull.table, remote_id)
            if existing:
                return SyncOutcome(existing.get("id"), name, SKIPPED, remote_id=remote_id, error="already_exists")
            new_row = self.store.insert(pull.table, pull.to_local(order))
        except Exception as e:
            return SyncOutcome(None, name, FAILED, error=f"Odoo {pull.model} {remote_id}: {e}")
        return SyncOutcome(new_row.get("id"), name, CREATED, remote_id=remote_id)

    def full_sync(self):
        results = {}
        for key, run in (
            ("products", self.sync_products),
            ("suppliers", self.sync_suppliers),
            ("purchase_orders", self.sync_purchase_orders),
        ):
            try:
                results[key] = run().to_dict()
            except SyncError as e:
                print(f"{key} sync aborted: {e}", file=sys.stderr)
                results[key] = {"error": str(e)}
        results["timestamp"] = datetime.now(timezone.utc).isoformat()
        return results

    def replay_orphans(self, entity_type, orphans) -> SyncSummary:
        """Retry write-backs for Odoo ids a previous pass could not store locally."""
        mapping = get_mapping(entity_type)
        reconciler = self.reconciler_for(mapping)
        outcomes = []
        for orphan in orphans:
            row_id, remote_id = orphan["id"], orphan["odoo_id"]
            try:
                reconciler.write_back(row_id, remote_id)
            except SyncError as e:
                outcomes.append(SyncOutcome(row_id, None, FAILED, error=str(e)))
                continue
            outcomes.append(SyncOutcome(row_id, None, UPDATED, remote_id=remote_id))
        return SyncSummary(mapping.name, outcomes, list(reconciler.orphans))

    def status(self):
        statistics = {}
        for key, table, active_only in (
            ("products", "products", True),
            ("suppliers", "suppliers", True),
            ("purchase_orders", PURCHASE_ORDERS.table, False),
        ):
            try:
                statistics[key] = self.store.count(table, active_only=active_only)
            except Exception as e:
                statistics[key] = None
                print(f"Counting {table} failed: {e}", file=sys.stderr)
        return {
            "connections": check_connections(self.client, self.store),
            "statistics": statistics,
            "checked_at": datetime.now(timezone.utc).isoformat(),
        }


def _report(summary):
    for outcome in summary.failed():
        print(f"{summary.entity_type} {outcome.entity_id} ({outcome.name}): {outcome.error}", file=sys.stderr)
    print(
        f"Synced {summary.synced_count} out of {summary.total_count} {summary.entity_type} "
        f"({summary.failed_count} failed, {summary.skipped_count} skipped)",
        file=sys.stderr,
    )
