"""
Cart (Order Assembly)
=====================
Central orchestration for pricing one order.

Pipeline (order is part of the contract):
1. One line item per product, in input order
2. Delivery fee from the delivery rule over the original product list
3. Promotion code, if any - before automatic promotions
4. Every automatic promotion, in provider order

Responsibilities:
- Build a fresh OrderSummary per call
- Run the rules in order against it
- NO pricing rules of its own; rule errors propagate to the caller
"""

import structlog
from typing import Optional, Sequence

from delivery import DeliveryCalculator, DeliveryRule
from order import OrderSummary
from products import Product
from promo_codes import PromotionCode
from promotions import DefaultPromotionProvider, PromotionProvider

try:
    from prometheus_client import Counter, Histogram
    METRICS_ENABLED = True
except ImportError:
    METRICS_ENABLED = False


# Structured logging
logger = structlog.get_logger(__name__)


# Prometheus Metrics
if METRICS_ENABLED:
    orders_assembled_total = Counter(
        'orders_assembled_total',
        'Total orders priced',
        ['promo_code']
    )
    order_total_value = Histogram(
        'order_total_value',
        'Final order total distribution'
    )
    order_items_count = Histogram(
        'order_items_count',
        'Line items per priced order',
        buckets=(1, 2, 3, 5, 10, 20, 50)
    )


class Cart:
    """
    Cart - prices a list of products.

    Args:
        delivery_calculator: Delivery fee rule (default: configured DeliveryCalculator)
        promotion_provider: Source of automatic promotions
            (default: DefaultPromotionProvider)
    """

    def __init__(
        self,
        delivery_calculator: Optional[DeliveryRule] = None,
        promotion_provider: Optional[PromotionProvider] = None
    ):
        self.delivery_calculator = delivery_calculator or DeliveryCalculator()
        self.promotion_provider = promotion_provider or DefaultPromotionProvider()

    def assemble_order(
        self,
        products: Sequence[Product],
        promo_code: Optional[PromotionCode] = None
    ) -> OrderSummary:
        """
        Price an order.

        Args:
            products: Products in the order, in display order
            promo_code: Optional single promotion code

        Returns:
            Fully priced OrderSummary
        """
        products = list(products)

        summary = OrderSummary.from_products(
            products,
            delivery_fee=self.delivery_calculator.calculate(products)
        )

        logger.debug(
            "order_started",
            order_id=summary.order_id,
            item_count=summary.item_count,
            delivery_fee=str(summary.delivery_fee)
        )

        if promo_code is not None:
            applied = promo_code.apply(summary)
            logger.info(
                "promo_code_applied" if applied else "promo_code_noop",
                order_id=summary.order_id,
                promo_code=promo_code.code
            )

        for promotion in self.promotion_provider.get_active_promotions():
            applied = promotion.apply(summary)
            logger.debug(
                "promotion_evaluated",
                order_id=summary.order_id,
                promotion=promotion.name,
                applied=applied
            )

        if METRICS_ENABLED:
            orders_assembled_total.labels(
                promo_code=promo_code.code if promo_code is not None else 'none'
            ).inc()
            order_total_value.observe(float(summary.total))
            order_items_count.observe(summary.item_count)

        logger.info(
            "order_assembled",
            order_id=summary.order_id,
            item_count=summary.item_count,
            product_total=str(summary.product_total),
            delivery_fee=str(summary.delivery_fee),
            order_discount=str(summary.order_discount),
            total=str(summary.total)
        )

        return summary


def assemble_order(
    products: Sequence[Product],
    promo_code: Optional[PromotionCode] = None
) -> OrderSummary:
    """Price an order with the default delivery rule and promotions."""
    return Cart().assemble_order(products, promo_code)
