"""
Promotions Module
=================
Automatic promotions, evaluated for every order.

Promotions run after the promotion code, in provider order. Each one
mutates the order summary in place and claims the items it uses by
marking them promotion_consumed, which hides them from later rules.

Built-in promotions:
- TwoPaperBooksForFreeEbook: any two paper books earn a free e-book
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from config import InvalidConfiguration, get_config
from order import LineItem, OrderSummary
from products import Book, BookKind, Product

try:
    from prometheus_client import Counter
    METRICS_ENABLED = True
except ImportError:
    METRICS_ENABLED = False


logger = logging.getLogger(__name__)


# ============================================================================
# METRICS
# ============================================================================

if METRICS_ENABLED:
    promotions_applied_total = Counter(
        'promotions_applied_total',
        'Automatic promotions that changed an order',
        ['promotion']
    )
    promotion_rewards_total = Counter(
        'promotion_rewards_total',
        'Reward items appended by automatic promotions',
        ['promotion']
    )


# ============================================================================
# PROMOTION BASE
# ============================================================================

class Promotion(ABC):
    """Automatic discount rule applied to every order."""

    name = "promotion"

    @abstractmethod
    def apply(self, summary: OrderSummary) -> bool:
        """
        Apply the promotion to the summary in place.

        Returns:
            True if the summary was changed
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


# ============================================================================
# TWO PAPER BOOKS -> FREE E-BOOK
# ============================================================================

class TwoPaperBooksForFreeEbook(Promotion):
    """
    Buy two paper books, get an electronic book for free.

    The paper books keep their price; the reward is appended as a separate
    line item discounted by its full price.
    """

    name = "two_paper_books_free_ebook"
    required_paper_books = 2

    def __init__(self, reward: Product):
        if not isinstance(reward, Book) or reward.kind is not BookKind.ELECTRONIC:
            raise InvalidConfiguration(
                f"Reward book should be electronic: {reward!r}"
            )
        self.reward = reward

    def apply(self, summary: OrderSummary) -> bool:
        paper_items = [
            item for item in summary.unconsumed_items()
            if item.product.is_paper_book
        ][:self.required_paper_books]

        if len(paper_items) < self.required_paper_books:
            logger.debug(
                f"Order {summary.order_id}: {self.name} skipped "
                f"({len(paper_items)} unconsumed paper book(s))"
            )
            return False

        for item in paper_items:
            item.promotion_consumed = True

        summary.add_item(LineItem(
            product=self.reward,
            discount=self.reward.price,
            promotion_consumed=True,
        ))

        if METRICS_ENABLED:
            promotions_applied_total.labels(promotion=self.name).inc()
            promotion_rewards_total.labels(promotion=self.name).inc()

        logger.info(
            f"Order {summary.order_id}: {self.name} applied, "
            f"free reward '{self.reward.name}' added"
        )
        return True

    def __repr__(self) -> str:
        return f"TwoPaperBooksForFreeEbook(reward={self.reward.name!r})"


# ============================================================================
# PROVIDERS
# ============================================================================

class PromotionProvider(ABC):
    """Source of the ordered list of active automatic promotions."""

    @abstractmethod
    def get_active_promotions(self) -> List[Promotion]:
        pass


class DefaultPromotionProvider(PromotionProvider):
    """
    Built-in promotion set.

    Promotions are constructed fresh on every call, so a misconfigured
    reward surfaces as InvalidConfiguration before any order is priced.

    Args:
        reward: Reward e-book; defaults to the REWARD_BOOK_* configuration
        enabled: Override PROMOTIONS_ENABLED
    """

    def __init__(self, reward: Optional[Product] = None, enabled: Optional[bool] = None):
        self._reward = reward
        self._enabled = enabled

    def _default_reward(self) -> Book:
        promo_config = get_config().promotions
        return Book(
            name=promo_config.reward_book_name,
            author=promo_config.reward_book_author,
            price=promo_config.reward_book_price,
            kind=BookKind.ELECTRONIC,
        )

    def get_active_promotions(self) -> List[Promotion]:
        enabled = self._enabled
        if enabled is None:
            enabled = get_config().promotions.enabled

        if not enabled:
            logger.debug("Automatic promotions disabled")
            return []

        reward = self._reward if self._reward is not None else self._default_reward()
        return [TwoPaperBooksForFreeEbook(reward)]


class StaticPromotionProvider(PromotionProvider):
    """Fixed, caller-assembled list of promotions."""

    def __init__(self, promotions: Sequence[Promotion] = ()):
        self._promotions = list(promotions)

    def get_active_promotions(self) -> List[Promotion]:
        return list(self._promotions)
