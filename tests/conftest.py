"""Shared fixtures: clean configuration and sample books."""
import pytest

import config
from products import Book, BookKind


CONFIG_VARS = (
    "DELIVERY_FEE",
    "FREE_DELIVERY_THRESHOLD",
    "PROMOTIONS_ENABLED",
    "REWARD_BOOK_NAME",
    "REWARD_BOOK_AUTHOR",
    "REWARD_BOOK_PRICE",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    for var in CONFIG_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(config, "_config", None)
    yield
    config._config = None


def paper(name, price, author="Bulgakov"):
    return Book(name=name, author=author, price=price, kind=BookKind.PAPER)


def ebook(name, price, author="Bulgakov"):
    return Book(name=name, author=author, price=price, kind=BookKind.ELECTRONIC)


@pytest.fixture
def reward():
    return ebook("Master and Margarita", 100)


@pytest.fixture
def two_ebooks():
    return [ebook("Book 1", 100), ebook("Book 2", 300)]


@pytest.fixture
def two_paper():
    return [paper("Book 3", 50), paper("Book 4", 60)]
