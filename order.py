"""
Order Module
============
Priced order summary produced by the cart.

An OrderSummary is an owned, mutable value: the cart creates a fresh one
per call and threads it through the promotion code and every automatic
promotion, each of which mutates it in place.

Totals are derived, never stored:
    product_total = sum(item.final_price)
    total         = product_total + delivery_fee - order_discount

The summary does not clamp total at zero. Each discount rule keeps its own
contribution within the total it sees.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List
import uuid

from products import Product


logger = logging.getLogger(__name__)


ZERO = Decimal("0")


# ============================================================================
# LINE ITEM
# ============================================================================

@dataclass
class LineItem:
    """
    One product placed in the order.

    The product is a shared reference. discount stays within
    [0, product.price]; promotion_consumed marks the item as claimed so that
    later rules skip it.
    """
    product: Product
    discount: Decimal = ZERO
    promotion_consumed: bool = False

    @property
    def initial_price(self) -> Decimal:
        return self.product.price

    @property
    def final_price(self) -> Decimal:
        return self.initial_price - self.discount

    @property
    def is_free(self) -> bool:
        return self.final_price == 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "product": self.product.to_dict(),
            "initial_price": str(self.initial_price),
            "discount": str(self.discount),
            "final_price": str(self.final_price),
            "promotion_consumed": self.promotion_consumed,
        }


# ============================================================================
# ORDER SUMMARY
# ============================================================================

@dataclass
class OrderSummary:
    """Line items plus delivery fee and order-level discount."""
    items: List[LineItem] = field(default_factory=list)
    delivery_fee: Decimal = ZERO
    order_discount: Decimal = ZERO
    order_id: str = field(default_factory=lambda: f"ord_{uuid.uuid4().hex[:12]}")

    @classmethod
    def from_products(cls, products: List[Product], delivery_fee: Decimal) -> "OrderSummary":
        """Build a skeleton: one unconsumed, undiscounted item per product."""
        return cls(
            items=[LineItem(product=product) for product in products],
            delivery_fee=delivery_fee,
        )

    @property
    def product_total(self) -> Decimal:
        return sum((item.final_price for item in self.items), ZERO)

    @property
    def total(self) -> Decimal:
        return self.product_total + self.delivery_fee - self.order_discount

    @property
    def item_count(self) -> int:
        return len(self.items)

    def add_item(self, item: LineItem) -> LineItem:
        """Append a line item (items are never removed)."""
        self.items.append(item)
        logger.debug(
            f"Order {self.order_id}: appended {item.product.name} "
            f"(final_price={item.final_price})"
        )
        return item

    def add_discount(self, amount: Decimal) -> Decimal:
        """Accumulate an order-level discount and return the new discount total."""
        self.order_discount += amount
        return self.order_discount

    def unconsumed_items(self) -> List[LineItem]:
        """Items not yet claimed by any promotion, in order."""
        return [item for item in self.items if not item.promotion_consumed]

    def consumed_items(self) -> List[LineItem]:
        """Items already claimed by a promotion, in order."""
        return [item for item in self.items if item.promotion_consumed]

    def to_dict(self) -> Dict[str, Any]:
        """Export to dictionary."""
        return {
            "order_id": self.order_id,
            "items": [item.to_dict() for item in self.items],
            "item_count": self.item_count,
            "product_total": str(self.product_total),
            "delivery_fee": str(self.delivery_fee),
            "order_discount": str(self.order_discount),
            "total": str(self.total),
        }
