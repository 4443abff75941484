"""
Bookshop Demo
=============
Prices a sample cart and prints the total followed by each item's name.

Usage:
    python main.py
    python main.py --with-paper
    python main.py --promo-code percent:10
    python main.py --promo-code "free_book:Book 2:electronic"
"""

import argparse
import logging
import sys
from typing import List, Optional

import structlog

from cart import Cart
from config import InvalidConfiguration, get_config, validate_configuration
from products import Book, BookKind, Product
from promo_codes import available_codes, parse_promo_code


logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO"):
    """
    Send stdlib and structlog records to stderr at the given level.

    stdout carries only the priced order.
    """
    logging.basicConfig(
        level=getattr(logging, level),
        stream=sys.stderr,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.KeyValueRenderer(
                key_order=["event", "order_id"],
                drop_missing=True
            ),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def sample_products(with_paper: bool = False) -> List[Product]:
    """Two e-books, plus two cheap paper books when requested."""
    products: List[Product] = [
        Book(name="Book 1", author="Bulgakov", price=100, kind=BookKind.ELECTRONIC),
        Book(name="Book 2", author="Bulgakov", price=300, kind=BookKind.ELECTRONIC),
    ]
    if with_paper:
        products += [
            Book(name="Book 3", author="Bulgakov", price=50, kind=BookKind.PAPER),
            Book(name="Book 4", author="Bulgakov", price=60, kind=BookKind.PAPER),
        ]
    return products


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bookshop-demo", description="Price a sample cart")
    parser.add_argument(
        "--promo-code",
        help=f"kind[:arg], kinds: {', '.join(available_codes())}",
    )
    parser.add_argument(
        "--with-paper",
        action="store_true",
        help="Add two paper books to the cart",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = create_parser().parse_args(argv)

    try:
        configure_logging(get_config().logging.log_level)
        validate_configuration()

        promo_code = parse_promo_code(args.promo_code) if args.promo_code else None
        logger.debug(f"Promotion code: {promo_code!r}")
        summary = Cart().assemble_order(sample_products(args.with_paper), promo_code)
    except InvalidConfiguration as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    print(summary.total)
    for item in summary.items:
        print(item.product.name)

    return 0


if __name__ == "__main__":
    sys.exit(main())
