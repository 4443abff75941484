"""Tests for automatic promotions and promotion providers."""
from decimal import Decimal

import pytest

import config
from config import InvalidConfiguration
from order import OrderSummary
from products import BookKind, Product
from promotions import (
    DefaultPromotionProvider,
    StaticPromotionProvider,
    TwoPaperBooksForFreeEbook,
)
from conftest import ebook, paper


def make_summary(products, delivery_fee=0):
    return OrderSummary.from_products(products, delivery_fee=Decimal(delivery_fee))


class TestTwoPaperBooksForFreeEbook:
    def test_paper_reward_rejected(self):
        with pytest.raises(InvalidConfiguration):
            TwoPaperBooksForFreeEbook(paper("Reward", 100))

    def test_non_book_reward_rejected(self):
        with pytest.raises(InvalidConfiguration):
            TwoPaperBooksForFreeEbook(Product(name="Mug", author="", price=5))

    def test_single_paper_book_leaves_order_unchanged(self, reward):
        summary = make_summary([paper("A", 50), ebook("B", 100)])

        assert TwoPaperBooksForFreeEbook(reward).apply(summary) is False
        assert summary.item_count == 2
        assert not any(item.promotion_consumed for item in summary.items)

    def test_two_paper_books_earn_free_reward(self, reward):
        summary = make_summary([paper("A", 50), ebook("B", 100), paper("C", 60)])

        assert TwoPaperBooksForFreeEbook(reward).apply(summary) is True

        assert summary.item_count == 4
        assert summary.items[0].promotion_consumed
        assert not summary.items[1].promotion_consumed
        assert summary.items[2].promotion_consumed

        added = summary.items[-1]
        assert added.product is reward
        assert added.discount == reward.price
        assert added.final_price == 0
        assert added.promotion_consumed

    def test_paper_books_keep_their_price(self, reward):
        summary = make_summary([paper("A", 50), paper("C", 60)])
        TwoPaperBooksForFreeEbook(reward).apply(summary)

        assert [item.final_price for item in summary.items] == [
            Decimal("50"), Decimal("60"), Decimal("0")
        ]
        assert summary.order_discount == 0

    def test_only_first_two_paper_books_consumed(self, reward):
        summary = make_summary([paper("A", 1), paper("B", 2), paper("C", 3)])
        TwoPaperBooksForFreeEbook(reward).apply(summary)

        assert [item.promotion_consumed for item in summary.items] == [
            True, True, False, True
        ]
        assert summary.item_count == 4

    def test_consumed_paper_books_are_skipped(self, reward):
        summary = make_summary([paper("A", 1), paper("B", 2), paper("C", 3)])
        summary.items[0].promotion_consumed = True

        TwoPaperBooksForFreeEbook(reward).apply(summary)

        assert [item.promotion_consumed for item in summary.items[:3]] == [
            True, True, True
        ]
        assert summary.item_count == 4

    def test_second_run_needs_two_more_paper_books(self, reward):
        promotion = TwoPaperBooksForFreeEbook(reward)
        summary = make_summary([paper("A", 1), paper("B", 2), paper("C", 3)])

        assert promotion.apply(summary) is True
        assert promotion.apply(summary) is False
        assert summary.item_count == 4


class TestProviders:
    def test_default_provider_uses_configured_reward(self):
        promotions = DefaultPromotionProvider().get_active_promotions()

        assert len(promotions) == 1
        promotion = promotions[0]
        assert isinstance(promotion, TwoPaperBooksForFreeEbook)
        assert promotion.reward.name == "Master and Margarita"
        assert promotion.reward.price == Decimal("100")
        assert promotion.reward.kind is BookKind.ELECTRONIC

    def test_default_provider_reward_from_environment(self, monkeypatch):
        monkeypatch.setenv("REWARD_BOOK_NAME", "The White Guard")
        monkeypatch.setenv("REWARD_BOOK_PRICE", "80")
        config.reload_config()

        promotion = DefaultPromotionProvider().get_active_promotions()[0]
        assert promotion.reward.name == "The White Guard"
        assert promotion.reward.price == Decimal("80")

    def test_default_provider_builds_fresh_promotions(self):
        provider = DefaultPromotionProvider()
        first = provider.get_active_promotions()
        second = provider.get_active_promotions()
        assert first[0] is not second[0]

    def test_disabled_promotions(self, monkeypatch):
        monkeypatch.setenv("PROMOTIONS_ENABLED", "false")
        config.reload_config()
        assert DefaultPromotionProvider().get_active_promotions() == []

    def test_explicit_paper_reward_fails_on_evaluation(self):
        provider = DefaultPromotionProvider(reward=paper("Reward", 100))
        with pytest.raises(InvalidConfiguration):
            provider.get_active_promotions()

    def test_static_provider_returns_copy(self, reward):
        promotion = TwoPaperBooksForFreeEbook(reward)
        provider = StaticPromotionProvider([promotion])

        promotions = provider.get_active_promotions()
        promotions.clear()

        assert provider.get_active_promotions() == [promotion]
