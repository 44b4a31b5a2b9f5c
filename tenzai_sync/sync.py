#!/usr/bin/env python3
"""
Run a TENZAI sync between Supabase and Odoo and print the summary as JSON.

  products         push active Supabase products to Odoo product.product
  suppliers        push active Supabase suppliers to Odoo res.partner
  purchase-orders  pull confirmed Odoo purchase orders into Supabase
  full             products, suppliers, then purchase orders
  test             check Odoo and Supabase connectivity
  status           connectivity plus local record counts
  replay-orphans   retry odoo_id write-backs listed in a saved summary

Run:
  python -m tenzai_sync.sync products                # print JSON to stdout
  python -m tenzai_sync.sync full --output out.json  # write to file
  python -m tenzai_sync.sync suppliers --workers 4 --duplicate-policy error
  python -m tenzai_sync.sync replay-orphans --input products.json

Exit code: 0 all rows synced, 2 some rows failed, 1 the run itself failed.
Loads ODOO_*, SUPABASE_* and SYNC_* from .env if present. All non-JSON
messages go to stderr.
"""
import argparse
import json
import sys

from tenzai_sync.config import DUPLICATE_POLICIES, load_env
from tenzai_sync.orchestrator import SyncOrchestrator
from tenzai_sync.probe import check_connections

COMMANDS = ("products", "suppliers", "purchase-orders", "full", "test", "status", "replay-orphans")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_PARTIAL = 2


def parse_args(argv=None):
    ap = argparse.ArgumentParser(prog="tenzai-sync", description="Sync TENZAI data between Supabase and Odoo")
    ap.add_argument("command", choices=COMMANDS)
    ap.add_argument("--output", "-o", help="Write JSON to file (default: stdout)")
    ap.add_argument("--workers", type=int, help="Rows processed in parallel (default: SYNC_WORKERS or 1)")
    ap.add_argument(
        "--duplicate-policy",
        choices=DUPLICATE_POLICIES,
        help="Which Odoo record wins when a natural key matches several (default: first)",
    )
    ap.add_argument("--input", "-i", help="replay-orphans: summary JSON file holding an \"orphans\" list")
    ap.add_argument("--entity", help="replay-orphans: products or suppliers (default: entity_type from the file)")
    return ap.parse_args(argv)


def load_orphans(path, entity=None):
    """Read the orphans of a saved sync summary; returns (entity_type, orphans)."""
    with open(path) as f:
        data = json.load(f)
    if isinstance(data, list):
        orphans = data
    else:
        orphans = data.get("orphans") or []
        entity = entity or data.get("entity_type")
    if not entity:
        raise ValueError("Pass --entity; the input file does not name its entity_type")
    return entity, orphans


def run(orchestrator, command, orphans_input=None, entity=None):
    """Run one command; returns (json-able result, exit code)."""
    if command == "replay-orphans":
        if not orphans_input:
            raise ValueError("replay-orphans needs --input FILE")
        entity, orphans = load_orphans(orphans_input, entity)
        summary = orchestrator.replay_orphans(entity, orphans)
        return summary.to_dict(), EXIT_OK if summary.ok else EXIT_PARTIAL
    if command == "test":
        result = check_connections(orchestrator.client, orchestrator.store)
        ok = result["odoo"] and result["supabase"]
        return result, EXIT_OK if ok else EXIT_ERROR
    if command == "status":
        return orchestrator.status(), EXIT_OK
    if command == "full":
        result = orchestrator.full_sync()
        parts = [v for k, v in result.items() if k != "timestamp"]
        if any("error" in p for p in parts):
            return result, EXIT_PARTIAL
        if any(p["failed_count"] for p in parts):
            return result, EXIT_PARTIAL
        return result, EXIT_OK
    if command == "purchase-orders":
        summary = orchestrator.sync_purchase_orders()
    else:
        summary = orchestrator.sync_all(command)
    return summary.to_dict(), EXIT_OK if summary.ok else EXIT_PARTIAL


def main(argv=None):
    args = parse_args(argv)
    load_env()
    orchestrator = SyncOrchestrator.from_env(
        workers=args.workers, duplicate_policy=args.duplicate_policy
    )
    result, code = run(orchestrator, args.command, args.input, args.entity)
    _write_output(result, args.output)
    return code


def _write_output(obj, path):
    s = json.dumps(obj, indent=2, default=str)
    if path:
        with open(path, "w") as f:
            f.write(s)
        print(f"Wrote {path}", file=sys.stderr)
    else:
        print(s)


def cli():
    try:
        sys.exit(main())
    except Exception as e:
        print(json.dumps({"error": str(e)}, indent=2), file=sys.stderr)
        sys.exit(EXIT_ERROR)


if __name__ == "__main__":
    cli()
