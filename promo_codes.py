"""
Promotion Codes Module
======================
Caller-supplied discount codes. At most one code is applied per order,
before any automatic promotion.

Codes:
- FreeDeliveryCode:     discount equal to the delivery fee
- FreeBookCode:         makes one named book free
- PercentDiscountCode:  percentage of the order total
- FixedAmountCode:      fixed amount, capped at the order total

Every code keeps its contribution within [0, total at the time it runs].
Codes are validated when constructed; apply() never raises.
"""

import logging
from abc import ABC, abstractmethod
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Dict, Union

from config import InvalidConfiguration, to_money
from order import OrderSummary
from products import Book, BookKind

try:
    from prometheus_client import Counter
    METRICS_ENABLED = True
except ImportError:
    METRICS_ENABLED = False


logger = logging.getLogger(__name__)


CENT = Decimal("0.01")
ZERO = Decimal("0")
MAX_PERCENT = Decimal("100")


# ============================================================================
# METRICS
# ============================================================================

if METRICS_ENABLED:
    promo_codes_applied_total = Counter(
        'promo_codes_applied_total',
        'Promotion code applications',
        ['code', 'result']
    )


def _track(code: str, changed: bool):
    if METRICS_ENABLED:
        promo_codes_applied_total.labels(
            code=code,
            result='applied' if changed else 'noop'
        ).inc()


# ============================================================================
# PROMOTION CODE BASE
# ============================================================================

class PromotionCode(ABC):
    """Single discount rule selected by the customer."""

    code = "promo_code"

    @abstractmethod
    def apply(self, summary: OrderSummary) -> bool:
        """
        Apply the code to the summary in place, exactly once per order.

        Returns:
            True if the summary was changed
        """
        pass


# ============================================================================
# CODES
# ============================================================================

class FreeDeliveryCode(PromotionCode):
    """Refunds the delivery fee as an order-level discount."""

    code = "free_delivery"

    def apply(self, summary: OrderSummary) -> bool:
        # Not idempotent: a second call would refund the fee twice
        summary.add_discount(summary.delivery_fee)
        changed = summary.delivery_fee > 0
        _track(self.code, changed)
        logger.info(
            f"Order {summary.order_id}: free delivery "
            f"(discount {summary.delivery_fee})"
        )
        return changed

    def __repr__(self) -> str:
        return "FreeDeliveryCode()"


class FreeBookCode(PromotionCode):
    """
    Makes the first unconsumed copy of a named book free.

    Args:
        name: Exact book name
        kind: BookKind (or its string value) the copy must have
    """

    code = "free_book"

    def __init__(self, name: str, kind: Union[BookKind, str]):
        if not name or not str(name).strip():
            raise InvalidConfiguration("Free book code needs a book name")
        self.name = name
        self.kind = BookKind.parse(kind)

    @classmethod
    def for_book(cls, book: Book) -> "FreeBookCode":
        """Create a code targeting the given book's name and kind."""
        if not isinstance(book, Book):
            raise InvalidConfiguration(f"Free book code needs a book: {book!r}")
        return cls(book.name, book.kind)

    def apply(self, summary: OrderSummary) -> bool:
        item = next(
            (
                item for item in summary.unconsumed_items()
                if item.product.matches(self.name, self.kind)
            ),
            None
        )

        if item is None:
            logger.debug(
                f"Order {summary.order_id}: no unconsumed "
                f"{self.kind.value} copy of '{self.name}'"
            )
            _track(self.code, False)
            return False

        item.promotion_consumed = True
        item.discount += item.final_price

        _track(self.code, True)
        logger.info(f"Order {summary.order_id}: '{self.name}' made free")
        return True

    def __repr__(self) -> str:
        return f"FreeBookCode(name={self.name!r}, kind={self.kind.value!r})"


class PercentDiscountCode(PromotionCode):
    """
    Percentage off the order total, rounded half away from zero to cents.

    Args:
        percent: Discount percentage, 0..100
    """

    code = "percent"

    def __init__(self, percent: Any):
        percent = to_money(percent, field_name="percent")
        if percent > MAX_PERCENT or percent < 0:
            raise InvalidConfiguration(
                f"Percent must be between 0 and 100: {percent}"
            )
        self.percent = percent

    def apply(self, summary: OrderSummary) -> bool:
        total = summary.total
        if total <= 0:
            _track(self.code, False)
            return False

        discount = (total * self.percent / 100).quantize(CENT, rounding=ROUND_HALF_UP)
        summary.add_discount(discount)

        changed = discount > 0
        _track(self.code, changed)
        logger.info(
            f"Order {summary.order_id}: {self.percent}% off {total} "
            f"(discount {discount})"
        )
        return changed

    def __repr__(self) -> str:
        return f"PercentDiscountCode(percent={self.percent})"


class FixedAmountCode(PromotionCode):
    """
    Fixed amount off, never more than the order total at call time.

    Args:
        amount: Non-negative discount amount
    """

    code = "fixed"

    def __init__(self, amount: Any):
        amount = to_money(amount, field_name="amount")
        if amount < 0:
            raise InvalidConfiguration(f"Amount must be non-negative: {amount}")
        self.amount = amount

    def apply(self, summary: OrderSummary) -> bool:
        discount = max(ZERO, min(self.amount, summary.total))
        summary.add_discount(discount)

        changed = discount > 0
        _track(self.code, changed)
        logger.info(
            f"Order {summary.order_id}: fixed discount {discount} "
            f"(requested {self.amount})"
        )
        return changed

    def __repr__(self) -> str:
        return f"FixedAmountCode(amount={self.amount})"


# ============================================================================
# FACTORY
# ============================================================================

_CODE_FACTORIES: Dict[str, Callable[..., PromotionCode]] = {
    FreeDeliveryCode.code: FreeDeliveryCode,
    FreeBookCode.code: FreeBookCode,
    PercentDiscountCode.code: PercentDiscountCode,
    FixedAmountCode.code: FixedAmountCode,
}


def available_codes() -> list:
    """Names accepted by create_promo_code."""
    return sorted(_CODE_FACTORIES)


def create_promo_code(code: str, **params) -> PromotionCode:
    """
    Build a promotion code by kind name.

    Args:
        code: One of available_codes()
        **params: Constructor arguments (percent=, amount=, name=, kind=)

    Raises:
        InvalidConfiguration: Unknown kind or bad parameters
    """
    factory = _CODE_FACTORIES.get(code)
    if factory is None:
        raise InvalidConfiguration(
            f"Unknown promotion code: {code!r} "
            f"(expected one of {', '.join(available_codes())})"
        )

    try:
        return factory(**params)
    except TypeError as e:
        raise InvalidConfiguration(f"Bad parameters for {code!r}: {e}")


def parse_promo_code(text: str) -> PromotionCode:
    """
    Parse the command-line form of a promotion code.

    Forms:
        free_delivery
        percent:<percent>
        fixed:<amount>
        free_book:<name>:<paper|electronic>

    Raises:
        InvalidConfiguration: Malformed text
    """
    kind, _, arg = (text or "").strip().partition(":")

    if kind == FreeDeliveryCode.code:
        if arg:
            raise InvalidConfiguration(f"free_delivery takes no argument: {text!r}")
        return create_promo_code(kind)

    if not arg:
        raise InvalidConfiguration(f"Missing argument in promotion code: {text!r}")

    if kind == PercentDiscountCode.code:
        return create_promo_code(kind, percent=arg)

    if kind == FixedAmountCode.code:
        return create_promo_code(kind, amount=arg)

    if kind == FreeBookCode.code:
        name, sep, book_kind = arg.rpartition(":")
        if not sep:
            raise InvalidConfiguration(
                f"free_book needs <name>:<kind>: {text!r}"
            )
        return create_promo_code(kind, name=name, kind=book_kind)

    return create_promo_code(kind)
