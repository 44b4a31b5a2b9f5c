import pytest

from tenzai_sync.mappings import (
    PRODUCTS,
    PURCHASE_ORDERS,
    SUPPLIERS,
    get_mapping,
    product_to_odoo,
    supplier_rank,
)


def test_product_fields():
    vals = product_to_odoo({"code": "SKU1", "name": "Rice", "price": 25.5, "cost": 20, "type": "raw_material"})

    assert vals == {"name": "Rice", "list_price": 25.5, "standard_price": 20, "type": "product"}


def test_product_non_raw_material_is_service():
    assert product_to_odoo({"name": "Delivery", "type": "finished"})["type"] == "service"


def test_product_create_adds_default_code():
    vals = PRODUCTS.create_values({"code": "SKU1", "name": "Rice", "list_price": 25.5})

    assert vals["default_code"] == "SKU1"
    assert vals["name"] == "Rice"
    assert vals["list_price"] == 25.5
    assert "default_code" not in PRODUCTS.to_remote({"code": "SKU1"})


@pytest.mark.parametrize("tier,rank", [("A", 3), ("B", 2), ("C", 1), ("b", 2), (None, 1), ("Z", 1)])
def test_supplier_rank(tier, rank):
    assert supplier_rank(tier) == rank


def test_supplier_create_includes_name():
    vals = SUPPLIERS.create_values({"name": "Fuji Foods", "city": "Tokyo", "supplier_rank": "A"})

    assert vals["name"] == "Fuji Foods"
    assert vals["city"] == "Tokyo"
    assert vals["supplier_rank"] == 3


def test_key_of_strips_and_blanks():
    assert PRODUCTS.key_of({"code": " SKU1 "}) == "SKU1"
    assert PRODUCTS.key_of({"code": ""}) is None
    assert PRODUCTS.key_of({}) is None


def test_purchase_order_to_local():
    row = PURCHASE_ORDERS.to_local(
        {
            "id": 5,
            "name": "P00005",
            "partner_id": [7, "Fuji Foods"],
            "user_id": False,
            "amount_total": 300.0,
            "state": "done",
            "date_order": "2026-10-01 09:00:00",
            "date_planned": "2026-10-03 09:00:00",
        }
    )

    assert row == {
        "po_number": "P00005",
        "odoo_id": 5,
        "supplier_id": 7,
        "order_date": "2026-10-01 09:00:00",
        "expected_date": "2026-10-03 09:00:00",
        "status": "done",
        "total_amount": 300.0,
        "created_by": None,
    }


def test_get_mapping():
    assert get_mapping("suppliers") is SUPPLIERS
    with pytest.raises(KeyError):
        get_mapping("inventory")


def test_create_values_use_stripped_key():
    assert PRODUCTS.create_values({"code": " SKU1 ", "name": "Rice"})["default_code"] == "SKU1"
    assert SUPPLIERS.create_values({"name": "Fuji Foods  "})["name"] == "Fuji Foods"
