"""Tests for the delivery fee rule."""
from decimal import Decimal

import pytest

import config
from config import InvalidConfiguration
from delivery import DeliveryCalculator, calculate_delivery
from products import Product
from conftest import ebook, paper


@pytest.fixture
def calculator():
    return DeliveryCalculator(fee=200, free_threshold=1000)


def test_no_paper_books_is_free(calculator):
    assert calculator.calculate([ebook("A", 10), ebook("B", 20)]) == 0


def test_empty_order_is_free(calculator):
    assert calculator.calculate([]) == 0


def test_non_book_products_do_not_trigger_delivery(calculator):
    assert calculator.calculate([Product(name="Mug", author="", price=15)]) == 0


def test_paper_book_below_threshold_pays_fee(calculator):
    assert calculator.calculate([paper("A", 50), paper("B", 60)]) == Decimal("200")


def test_threshold_counts_all_products(calculator):
    # 100 of paper + 900 of e-books reaches the threshold
    products = [paper("A", 100), ebook("B", 900)]
    assert calculator.calculate(products) == 0


def test_just_below_threshold_pays_fee(calculator):
    products = [paper("A", "999.99")]
    assert calculator.calculate(products) == Decimal("200")


def test_at_threshold_is_free(calculator):
    assert calculator.calculate([paper("A", 1000)]) == 0


def test_defaults_come_from_configuration(monkeypatch):
    monkeypatch.setenv("DELIVERY_FEE", "150")
    monkeypatch.setenv("FREE_DELIVERY_THRESHOLD", "500")
    config.reload_config()

    calculator = DeliveryCalculator()
    assert calculator.fee == Decimal("150")
    assert calculator.free_threshold == Decimal("500")
    assert calculator.calculate([paper("A", 100)]) == Decimal("150")
    assert calculator.calculate([paper("A", 500)]) == 0


def test_calculate_delivery_uses_builtin_defaults():
    assert calculate_delivery([paper("A", 50)]) == Decimal("200")


def test_negative_fee_rejected():
    with pytest.raises(InvalidConfiguration):
        DeliveryCalculator(fee=-1, free_threshold=1000)
