"""
Connectivity probe for Odoo and Supabase. Each side is checked on its own and
reported as a boolean plus a detail string. Informational only: syncs do not
call this first.
"""
from tenzai_sync.errors import ConnectivityFailed


def check_odoo(client):
    try:
        uid = client.authenticate()
    except Exception as e:
        raise ConnectivityFailed(f"Odoo unreachable: {e}") from e
    return f"Connected successfully (UID: {uid})"


def check_supabase(store):
    try:
        store.ping()
    except Exception as e:
        raise ConnectivityFailed(f"Supabase unreachable: {e}") from e
    return "Connected successfully"


def check_connections(client, store):
    results = {"supabase": False, "odoo": False, "details": {}}
    for system, check, target in (
        ("supabase", check_supabase, store),
        ("odoo", check_odoo, client),
    ):
        try:
            results["details"][system] = check(target)
            results[system] = True
        except ConnectivityFailed as e:
            results["details"][system] = str(e)
    return results
