"""Tests for line items and the order summary."""
from decimal import Decimal

from order import LineItem, OrderSummary
from conftest import ebook, paper


def test_line_item_prices():
    item = LineItem(product=paper("Dune", 50), discount=Decimal("20"))
    assert item.initial_price == Decimal("50")
    assert item.final_price == Decimal("30")
    assert not item.promotion_consumed
    assert not item.is_free


def test_line_item_shares_product():
    book = paper("Dune", 50)
    item = LineItem(product=book)
    assert item.product is book


def test_summary_skeleton_from_products():
    products = [paper("A", 50), ebook("B", 100)]
    summary = OrderSummary.from_products(products, delivery_fee=Decimal("200"))

    assert [item.product for item in summary.items] == products
    assert all(item.discount == 0 for item in summary.items)
    assert not any(item.promotion_consumed for item in summary.items)
    assert summary.order_discount == 0


def test_summary_totals_are_derived():
    summary = OrderSummary.from_products(
        [paper("A", 50), ebook("B", 100)],
        delivery_fee=Decimal("200")
    )
    assert summary.product_total == Decimal("150")
    assert summary.total == Decimal("350")

    summary.items[0].discount = Decimal("50")
    summary.add_discount(Decimal("25"))
    assert summary.product_total == Decimal("100")
    assert summary.total == Decimal("275")


def test_empty_summary_totals_zero():
    summary = OrderSummary()
    assert summary.product_total == 0
    assert summary.total == 0


def test_total_is_not_clamped():
    summary = OrderSummary.from_products([ebook("B", 100)], delivery_fee=Decimal("0"))
    summary.add_discount(Decimal("150"))
    assert summary.total == Decimal("-50")


def test_consumed_and_unconsumed_items():
    summary = OrderSummary.from_products([paper("A", 1), paper("B", 2)], Decimal("0"))
    summary.items[0].promotion_consumed = True
    assert [i.product.name for i in summary.consumed_items()] == ["A"]
    assert [i.product.name for i in summary.unconsumed_items()] == ["B"]


def test_order_ids_are_unique():
    assert OrderSummary().order_id != OrderSummary().order_id


def test_to_dict():
    summary = OrderSummary.from_products([ebook("B", 100)], delivery_fee=Decimal("0"))
    data = summary.to_dict()
    assert data["total"] == "100"
    assert data["item_count"] == 1
    assert data["items"][0]["final_price"] == "100"
