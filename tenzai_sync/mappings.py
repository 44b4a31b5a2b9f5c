"""
Per-entity field mapping between Supabase rows and Odoo models.

Push mappings (products, suppliers) say how a local row is matched in Odoo
(natural key) and which Odoo fields a create/update writes. The purchase order
mapping goes the other way: Odoo purchase.order -> local purchase_orders row.
"""
from dataclasses import dataclass
from typing import Callable, List, Optional

# Supplier tier -> Odoo supplier_rank; unknown tiers rank lowest
SUPPLIER_RANKS = {"A": 3, "B": 2, "C": 1}


def _first(row, *names):
    """First non-None value among several possible column names."""
    for name in names:
        val = row.get(name)
        if val is not None:
            return val
    return None


def _m2o_id(val):
    """Odoo many2one comes back as [id, name] or False."""
    if isinstance(val, (list, tuple)) and len(val) >= 1:
        return val[0]
    return val or None


def supplier_rank(tier):
    return SUPPLIER_RANKS.get(str(tier or "").strip().upper(), 1)


def product_to_odoo(row):
    return {
        "name": row.get("name"),
        "list_price": _first(row, "list_price", "price"),
        "standard_price": _first(row, "cost_price", "cost"),
        "type": "product" if row.get("type") == "raw_material" else "service",
    }


def supplier_to_odoo(row):
    # name is the natural key, so update leaves it alone
    return {
        "email": row.get("email"),
        "phone": row.get("phone"),
        "street": row.get("address"),
        "city": row.get("city"),
        "supplier_rank": supplier_rank(row.get("supplier_rank")),
    }


@dataclass(frozen=True)
class EntityMapping:
    name: str
    table: str
    model: str
    local_key: str
    remote_key: str
    to_remote: Callable[[dict], dict]
    label_field: str = "name"

    def key_of(self, row) -> Optional[str]:
        key = row.get(self.local_key)
        if isinstance(key, str):
            key = key.strip()
        return key or None

    def create_values(self, row) -> dict:
        vals = dict(self.to_remote(row))
        # Create with the same stripped key the lookup searches for
        vals[self.remote_key] = self.key_of(row)
        return vals

    def label(self, row):
        return row.get(self.label_field) or row.get(self.local_key)


PRODUCTS = EntityMapping(
    name="products",
    table="products",
    model="product.product",
    local_key="code",
    remote_key="default_code",
    to_remote=product_to_odoo,
)

SUPPLIERS = EntityMapping(
    name="suppliers",
    table="suppliers",
    model="res.partner",
    local_key="name",
    remote_key="name",
    to_remote=supplier_to_odoo,
)


@dataclass(frozen=True)
class PullMapping:
    name: str
    table: str
    model: str
    domain: List[list]
    fields: List[str]
    to_local: Callable[[dict], dict]
    order: str = "id"


def purchase_order_to_local(order):
    return {
        "po_number": order.get("name"),
        "odoo_id": order["id"],
        "supplier_id": _m2o_id(order.get("partner_id")),
        "order_date": order.get("date_order") or None,
        "expected_date": order.get("date_planned") or None,
        "status": order.get("state"),
        "total_amount": order.get("amount_total"),
        "created_by": _m2o_id(order.get("user_id")),
    }


PURCHASE_ORDERS = PullMapping(
    name="purchase_orders",
    table="purchase_orders",
    model="purchase.order",
    domain=[["state", "in", ["purchase", "done"]]],
    fields=["id", "name", "partner_id", "amount_total", "state", "date_order", "date_planned", "user_id"],
    to_local=purchase_order_to_local,
)

MAPPINGS = {m.name: m for m in (PRODUCTS, SUPPLIERS)}


def get_mapping(name):
    key = name.replace("-", "_")
    if key not in MAPPINGS:
        raise KeyError(f"Unknown entity type {name!r}. Use one of: {sorted(MAPPINGS)}")
    return MAPPINGS[key]
