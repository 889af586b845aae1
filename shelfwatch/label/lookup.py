"""Product details for a barcode from an ordered list of sources."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TypeVar

import requests

logger = logging.getLogger(__name__)

T = TypeVar("T")

_OPEN_FOOD_FACTS_URL = "https://world.openfoodfacts.org/api/v0/product/{barcode}.json"
_UPCITEMDB_URL = "https://api.upcitemdb.com/prod/trial/lookup"


@dataclass
class ProductInfo:
    name: str
    brand: str = ""
    category: str = ""
    description: str = ""
    image_url: str | None = None
    source: str = ""


_KNOWN_PRODUCTS: dict[str, ProductInfo] = {
    "8901450000898": ProductInfo(
        name="Maggi 2-Minute Noodles Masala",
        brand="Nestlé",
        category="Food & Beverages",
        description="Instant noodles with masala flavor",
        source="Known Database",
    ),
    "8901542001246": ProductInfo(
        name="Nycil Germ Expert Prickly Heat Powder",
        brand="Nycil",
        category="Cosmetics & Beauty",
        description="Antibacterial prickly heat powder with germ protection",
        source="Known Database",
    ),
}

# GS1 company prefix ranges, first three digits
_GS1_PREFIXES: tuple[tuple[int, int, str], ...] = (
    (0, 19, "USA"),
    (30, 39, "USA"),
    (60, 139, "USA"),
    (300, 379, "France"),
    (400, 440, "Germany"),
    (450, 459, "Japan"),
    (490, 499, "Japan"),
    (500, 509, "United Kingdom"),
    (690, 699, "China"),
    (754, 755, "Canada"),
    (800, 839, "Italy"),
    (840, 849, "Spain"),
    (870, 879, "Netherlands"),
    (890, 890, "India"),
    (930, 939, "Australia"),
)

# Category and brand guesses from GS1 India company prefixes
_CATEGORY_PREFIXES: dict[str, str] = {
    "8901": "Food & Beverages",
    "8902": "Cosmetics & Beauty",
    "8903": "Medicine & Health",
    "8904": "Personal Care",
    "8905": "Household Items",
}
_BRAND_PREFIXES: dict[str, str] = {
    "890142": "Hindustan Unilever",
    "890143": "ITC",
    "890144": "Dabur",
    "890145": "Nestlé",
    "890150": "Patanjali",
    "890151": "Emami",
    "890152": "Marico",
    "890154": "Nycil",
}

# Checked in order against the lower-cased category, first hit wins
_SHELF_LIFE_DAYS: tuple[tuple[tuple[str, ...], int], ...] = (
    (("milk", "dairy"), 7),
    (("bread", "bakery"), 5),
    (("meat", "fish"), 3),
    (("fruit", "vegetable"), 7),
    (("food",), 30),
    (("medicine", "pharmaceutical"), 730),
    (("cosmetic", "perfume", "beauty"), 1095),
)
DEFAULT_SHELF_LIFE_DAYS = 365


def first_success(
    strategies: Iterable[Callable[[str], T | None]], key: str
) -> T | None:
    """Call each strategy in order and return the first non-None answer.

    A strategy that raises is logged and skipped.
    """
    for strategy in strategies:
        name = getattr(strategy, "__name__", repr(strategy))
        try:
            result = strategy(key)
        except Exception as e:
            logger.warning("Lookup source %s failed: %s", name, e)
            continue
        if result is not None:
            logger.debug("Lookup source %s answered for %s", name, key)
            return result
    return None


def country_from_prefix(barcode: str) -> str:
    """Return the GS1 member country for an EAN/UPC prefix."""
    digits = barcode[-13:].zfill(13) if len(barcode) in (12, 13, 14) else barcode
    if len(digits) < 3 or not digits[:3].isdigit():
        return "Unknown"
    prefix = int(digits[:3])
    for low, high, country in _GS1_PREFIXES:
        if low <= prefix <= high:
            return country
    return "Unknown"


def predict_category(barcode: str) -> str:
    return _CATEGORY_PREFIXES.get(barcode[:4], "General")


def predict_brand(barcode: str) -> str:
    return _BRAND_PREFIXES.get(barcode[:6], "Unknown Brand")


def estimate_shelf_life(category: str | None) -> int:
    """Typical shelf life in days for a product category.

    Used when a label has no readable expiry date. Unrecognized categories
    get a year.
    """
    text = (category or "").lower()
    for keywords, days in _SHELF_LIFE_DAYS:
        if any(k in text for k in keywords):
            return days
    return DEFAULT_SHELF_LIFE_DAYS


class BarcodeLookup:
    """Resolve product details for a barcode.

    Sources are tried in order: the built-in table, Open Food Facts,
    UPCitemdb, and finally an estimate from the GS1 prefix that always
    answers.
    """

    def __init__(self, timeout: float = 5.0, use_network: bool = True) -> None:
        self._timeout = timeout
        self._use_network = use_network

    def strategies(self) -> list[Callable[[str], ProductInfo | None]]:
        sources: list[Callable[[str], ProductInfo | None]] = [self.known_product]
        if self._use_network:
            sources += [self.open_food_facts, self.upcitemdb]
        sources.append(self.estimate)
        return sources

    def lookup(self, barcode: str) -> ProductInfo:
        logger.info("Looking up barcode %s", barcode)
        return first_success(self.strategies(), barcode) or self.estimate(barcode)

    @staticmethod
    def known_product(barcode: str) -> ProductInfo | None:
        return _KNOWN_PRODUCTS.get(barcode)

    def open_food_facts(self, barcode: str) -> ProductInfo | None:
        response = requests.get(
            _OPEN_FOOD_FACTS_URL.format(barcode=barcode), timeout=self._timeout
        )
        response.raise_for_status()
        data = response.json()
        if data.get("status") != 1 or not data.get("product"):
            return None
        p = data["product"]
        return ProductInfo(
            name=p.get("product_name") or p.get("generic_name") or "Unknown Product",
            brand=p.get("brands") or "Unknown Brand",
            category=p.get("categories") or "Food & Beverages",
            description=p.get("ingredients_text") or "",
            image_url=p.get("image_url"),
            source="OpenFoodFacts",
        )

    def upcitemdb(self, barcode: str) -> ProductInfo | None:
        response = requests.get(
            _UPCITEMDB_URL, params={"upc": barcode}, timeout=self._timeout
        )
        response.raise_for_status()
        data = response.json()
        items = data.get("items") or []
        if data.get("code") != "OK" or not items:
            return None
        item = items[0]
        images = item.get("images") or []
        return ProductInfo(
            name=item.get("title") or "Unknown Product",
            brand=item.get("brand") or "Unknown Brand",
            category=item.get("category") or "General",
            description=item.get("description") or "",
            image_url=images[0] if images else None,
            source="UPC Database",
        )

    @staticmethod
    def estimate(barcode: str) -> ProductInfo:
        country = country_from_prefix(barcode)
        return ProductInfo(
            name=f"Product {barcode[-4:]}",
            brand=predict_brand(barcode),
            category=predict_category(barcode),
            description=f"Product registered in {country}",
            source="Estimated",
        )
