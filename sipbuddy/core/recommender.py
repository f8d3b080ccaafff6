import random
from typing import Callable, Iterable, List, Optional, Union

from sipbuddy.core.catalog import CatalogSnapshot
from sipbuddy.core.catalog_graph import category_tags, products_in_category, tags_for
from sipbuddy.core.tags import product_text, rule_tags
from sipbuddy.models.product import Product, RecommendationView, BEER, CATEGORIES
from sipbuddy.utils.exceptions import InvalidCategoryError
from sipbuddy.utils.logger import logger

DEFAULT_MAX_PRICE = 1000.0
DEFAULT_LIMIT = 5

MULTI_PACK_MARKERS = ("pk", "pack", "case", "variety", "6", "12", "18", "24")


def validate_category(category: str) -> str:
    if category not in CATEGORIES:
        raise InvalidCategoryError(category)
    return category


def coerce_max_price(value) -> float:
    if value is None or value == "":
        return DEFAULT_MAX_PRICE
    try:
        price = float(value)
    except (TypeError, ValueError):
        return DEFAULT_MAX_PRICE
    if price != price:  # NaN
        return DEFAULT_MAX_PRICE
    return max(price, 0.0)


def coerce_limit(value) -> int:
    if value is None or value == "":
        return DEFAULT_LIMIT
    try:
        limit = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_LIMIT
    return max(limit, 1)


def parse_tags(tags: Union[None, str, Iterable[str]]) -> List[str]:
    if not tags:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    return [t.strip() for t in tags if t and t.strip()]


def looks_like_multi_pack(product: Product) -> bool:
    fields = (product.size, product.title, product.description)
    return any(marker in (f or "").lower() for f in fields for marker in MULTI_PACK_MARKERS)


def matches_tags(text: str, extracted: List[str], wanted: List[str], vocabulary: Iterable[str] = ()) -> bool:
    """OR across wanted tags.

    A tag from the category's rule vocabulary matches only the product's own
    extracted tags. Any other tag is matched as free text against the product.
    """
    own = {t.lower() for t in extracted}
    known = {t.lower() for t in vocabulary}
    for tag in wanted:
        needle = tag.lower()
        if needle in own:
            return True
        if needle not in known and needle in text:
            return True
    return False


class Recommender:
    """Filters the current catalog snapshot for one category.

    Results come back shuffled; pass a seeded `random.Random` for a
    reproducible order.
    """

    def __init__(self, catalog: Callable[[], CatalogSnapshot], rng: Optional[random.Random] = None) -> None:
        self._catalog = catalog
        self.rng = rng or random.Random()

    def candidates(self, category: str, max_price=None, tags=None) -> List[Product]:
        return self._eligible(self._catalog(), category, max_price, tags)

    def _eligible(self, snap: CatalogSnapshot, category: str, max_price, tags) -> List[Product]:
        category = validate_category(category)
        max_price = coerce_max_price(max_price)
        wanted = parse_tags(tags)
        vocabulary = rule_tags(category)

        out = []
        for product_id in products_in_category(snap.graph, category):
            product = snap.get(product_id)
            if product is None:
                continue
            if category == BEER and not looks_like_multi_pack(product):
                continue
            if wanted and not matches_tags(
                product_text(product), tags_for(snap.graph, product.id, category), wanted, vocabulary
            ):
                continue
            if not (0 < product.price <= max_price):
                continue
            out.append(product)
        return out

    def recommend(self, category: str, max_price=None, tags=None, limit=None) -> List[RecommendationView]:
        snap = self._catalog()
        pool = self._eligible(snap, category, max_price, tags)
        self.rng.shuffle(pool)
        picked = pool[:coerce_limit(limit)]
        logger.info(f"{category}: {len(pool)} eligible, returning {len(picked)}")

        return [
            RecommendationView(
                id=p.id,
                name=p.display_name,
                price=p.price,
                image=p.image_url,
                tags=tags_for(snap.graph, p.id, category),
                size=p.size,
                purchase_link=p.link,
            )
            for p in picked
        ]

    def category_tags(self, category: str) -> List[str]:
        category = validate_category(category)
        return category_tags(self._catalog().graph, category)
