"""
Settings for the sync scripts, read from the environment (or .env via python-dotenv).
Odoo, Supabase, sync behaviour and the HTTP API each get their own getter so a
script only fails on the variables it actually needs.
"""
import os

from dotenv import load_dotenv

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))

DUPLICATE_POLICIES = ("first", "most_recent", "error")


def load_env():
    """Load .env from the working directory, then from this package directory."""
    load_dotenv()
    _package_env = os.path.join(PACKAGE_DIR, ".env")
    if os.path.isfile(_package_env):
        load_dotenv(_package_env)


def _int_env(name, default):
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def odoo_config():
    url = os.environ.get("ODOO_URL", "").rstrip("/")
    db = os.environ.get("ODOO_DB", "")
    username = os.environ.get("ODOO_USERNAME", "")
    password = os.environ.get("ODOO_PASSWORD", "")
    if not all([url, db, username, password]):
        raise ValueError(
            "Set ODOO_URL, ODOO_DB, ODOO_USERNAME, ODOO_PASSWORD (or use .env)"
        )
    return {
        "url": url,
        "db": db,
        "username": username,
        "password": password,
        "timeout": _int_env("ODOO_TIMEOUT", 30),
    }


def supabase_config():
    # Prefer SUPABASE_*, fall back to the names used by the dashboard .env
    url = os.environ.get("SUPABASE_URL") or os.environ.get("VITE_SUPABASE_URL")
    key = (
        os.environ.get("SUPABASE_SERVICE_KEY")
        or os.environ.get("SUPABASE_SERVICE_ROLE_KEY")
        or os.environ.get("VITE_SUPABASE_SERVICE_KEY")
    )
    if not url:
        raise ValueError("Set SUPABASE_URL or VITE_SUPABASE_URL")
    if not key:
        raise ValueError(
            "Set SUPABASE_SERVICE_KEY or SUPABASE_SERVICE_ROLE_KEY "
            "(service role key required for sync; anon key cannot write)"
        )
    return {"url": url, "key": key, "schema": os.environ.get("SUPABASE_SCHEMA") or "public"}


def sync_settings():
    policy = (os.environ.get("SYNC_DUPLICATE_POLICY") or "first").strip().lower()
    if policy not in DUPLICATE_POLICIES:
        raise ValueError(
            f"SYNC_DUPLICATE_POLICY must be one of {', '.join(DUPLICATE_POLICIES)}, got {policy!r}"
        )
    workers = _int_env("SYNC_WORKERS", 1)
    retries = _int_env("SYNC_WRITE_BACK_RETRIES", 2)
    return {
        "duplicate_policy": policy,
        "workers": max(workers, 1),
        "write_back_retries": max(retries, 0),
    }


def api_config():
    return {
        "host": os.environ.get("SYNC_API_HOST", "0.0.0.0"),
        "port": _int_env("SYNC_API_PORT", 8765),
        "api_key": os.environ.get("SYNC_API_KEY", "").strip(),
    }
