"""Supabase <-> Odoo record sync for the TENZAI purchasing and inventory data."""
