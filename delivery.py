"""
Delivery Module
===============
Delivery fee rule.

Only orders with at least one paper book are charged. Those pay a flat fee
unless the price of all products together reaches the free-delivery
threshold.
"""

import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Optional, Sequence

from config import InvalidConfiguration, get_config, to_money
from products import Product


logger = logging.getLogger(__name__)


class DeliveryRule(ABC):
    """Computes a delivery fee from the product list."""

    @abstractmethod
    def calculate(self, products: Sequence[Product]) -> Decimal:
        pass


class DeliveryCalculator(DeliveryRule):
    """
    Flat-fee delivery with a free-delivery threshold.

    Args:
        fee: Fee for orders below the threshold (default from DELIVERY_FEE)
        free_threshold: Product sum at which delivery becomes free
            (default from FREE_DELIVERY_THRESHOLD)
    """

    def __init__(self, fee: Optional[Any] = None, free_threshold: Optional[Any] = None):
        if fee is None or free_threshold is None:
            delivery_config = get_config().delivery
            if fee is None:
                fee = delivery_config.fee
            if free_threshold is None:
                free_threshold = delivery_config.free_threshold

        self.fee = to_money(fee, field_name="delivery fee")
        self.free_threshold = to_money(free_threshold, field_name="free delivery threshold")

        if self.fee < 0:
            raise InvalidConfiguration(f"Delivery fee must be non-negative: {self.fee}")
        if self.free_threshold < 0:
            raise InvalidConfiguration(
                f"Free delivery threshold must be non-negative: {self.free_threshold}"
            )

    def calculate(self, products: Sequence[Product]) -> Decimal:
        paper_count = sum(1 for product in products if product.is_paper_book)
        if paper_count == 0:
            return Decimal("0")

        products_sum = sum((product.price for product in products), Decimal("0"))
        if products_sum < self.free_threshold:
            logger.debug(
                f"Delivery charged: {paper_count} paper book(s), "
                f"sum {products_sum} < {self.free_threshold}"
            )
            return self.fee

        return Decimal("0")


def calculate_delivery(products: Sequence[Product]) -> Decimal:
    """Delivery fee under the configured default rule."""
    return DeliveryCalculator().calculate(products)
