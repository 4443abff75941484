"""
Products Module
===============
Sellable entities and their pricing-relevant attributes.

Products are immutable: line items reference them, never copy them.
Pricing rules ask a product what it is (is_paper_book, matches) instead of
inspecting its class.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Union

from config import InvalidConfiguration, to_money


logger = logging.getLogger(__name__)


# ============================================================================
# BOOK KIND
# ============================================================================

class BookKind(Enum):
    """Physical form of a book."""
    PAPER = "paper"
    ELECTRONIC = "electronic"

    @classmethod
    def parse(cls, value: Union["BookKind", str]) -> "BookKind":
        """
        Resolve a BookKind from an enum member or its value (case-insensitive).

        Raises:
            InvalidConfiguration: If value names no known kind
        """
        if isinstance(value, cls):
            return value

        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidConfiguration(f"Unknown book kind: {value!r}")


# ============================================================================
# PRODUCT
# ============================================================================

@dataclass(frozen=True)
class Product:
    """
    Base of the product hierarchy.

    CRITICAL: frozen=True - a product shared by several line items
    must not change under them.
    """
    name: str
    author: str
    price: Decimal

    def __post_init__(self):
        price = to_money(self.price, field_name=f"price for {self.name!r}")
        if price < 0:
            raise InvalidConfiguration(
                f"Price must be non-negative for {self.name!r}: {price}"
            )
        object.__setattr__(self, "price", price)

    @property
    def is_paper_book(self) -> bool:
        """True for products that need physical delivery as a book."""
        return False

    def matches(self, name: str, kind: BookKind) -> bool:
        """Check whether this product is the book with given name and kind."""
        return False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "author": self.author,
            "price": str(self.price),
        }


@dataclass(frozen=True)
class Book(Product):
    """A book, either on paper or electronic."""
    kind: BookKind = BookKind.PAPER

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "kind", BookKind.parse(self.kind))

    @property
    def is_paper_book(self) -> bool:
        return self.kind is BookKind.PAPER

    @property
    def is_electronic(self) -> bool:
        return self.kind is BookKind.ELECTRONIC

    def matches(self, name: str, kind: BookKind) -> bool:
        return self.name == name and self.kind is BookKind.parse(kind)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["kind"] = self.kind.value
        return data

    def __str__(self) -> str:
        return f"{self.name} by {self.author} ({self.kind.value}, {self.price})"
