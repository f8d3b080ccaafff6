import random
from dataclasses import asdict
from typing import List, Dict, Any, Mapping, Optional

from sipbuddy.config.settings import Settings
from sipbuddy.core.catalog import CatalogHolder, CatalogSnapshot
from sipbuddy.core.estimator import estimate, estimate_liters, even_splits
from sipbuddy.core.recommender import Recommender
from sipbuddy.core.visualize import visualize_picks
from sipbuddy.data_access.loader import FeedFormat, load_with_fallback
from sipbuddy.data_access.settings_store import SettingsStore
from sipbuddy.models.product import RecommendationView, CATEGORIES
from sipbuddy.utils.exceptions import DataLoadError, PersistenceError
from sipbuddy.utils.logger import logger

ADMIN_ITEMS_LIMIT = 1000


def _feed_format(value: str, default: FeedFormat) -> FeedFormat:
    try:
        return FeedFormat.parse(value)
    except DataLoadError:
        logger.error(f"Unknown feed format {value!r}, using {default.value}")
        return default


class AppService:
    """High-level service shared by the HTTP API and the Streamlit app."""

    def __init__(self, settings: Optional[Settings] = None, rng: Optional[random.Random] = None) -> None:
        self.settings = settings or Settings.from_env()
        self.store = SettingsStore(self.settings.db_path)
        try:
            self.store.bootstrap()
        except PersistenceError as e:
            logger.error(f"Settings store unavailable, admin endpoints will fail: {e}")
        self.catalog = CatalogHolder(self._load_snapshot)
        self.catalog.reload()
        self.recommender = Recommender(self.catalog.snapshot, rng=rng)

    def _load_snapshot(self) -> CatalogSnapshot:
        primary = _feed_format(self.settings.feed_format, FeedFormat.SHOP)
        fallback = _feed_format(self.settings.fallback_feed_format, FeedFormat.DEPARTMENT)
        sources = [
            (self._source_path(primary, self.settings.feed_path), primary),
            (self._source_path(fallback, self.settings.fallback_feed_path), fallback),
        ]
        products, feed_format, source = load_with_fallback(sources)
        return CatalogSnapshot.build(products, feed_format.scheme, source)

    def _source_path(self, feed_format: FeedFormat, path: Optional[str]) -> Optional[str]:
        # the table feed always reads from the settings database
        if feed_format == FeedFormat.TABLE:
            return self.settings.db_path
        return path

    # ---------- catalog ----------

    def reload(self) -> CatalogSnapshot:
        return self.catalog.reload()

    def list_products(self) -> List[Dict[str, Any]]:
        return [asdict(p) for p in self.catalog.snapshot().products]

    def list_categories(self) -> List[str]:
        return list(CATEGORIES)

    def get_recommendations(self, category: str, max_price=None, tags=None, limit=None) -> List[RecommendationView]:
        return self.recommender.recommend(category, max_price=max_price, tags=tags, limit=limit)

    def get_category_tags(self, category: str) -> List[str]:
        return self.recommender.category_tags(category)

    # ---------- estimates ----------

    def estimate_party(self, guests, hours, splits: Optional[Mapping[str, Any]] = None,
                       categories: Optional[List[str]] = None) -> Dict[str, Dict[str, Any]]:
        if not splits:
            splits = even_splits([c for c in (categories or CATEGORIES) if c in CATEGORIES])
        return {c: e.to_dict() for c, e in estimate(guests, hours, splits).items()}

    def estimate_liters(self, guest_count=None, duration=None) -> Dict[str, float]:
        return estimate_liters(guest_count, duration)

    # ---------- admin ----------

    def list_admin_items(self) -> List[Dict[str, Any]]:
        settings = self.store.get_item_settings()
        products = sorted(self.catalog.snapshot().products, key=lambda p: p.display_name.lower())
        rows = []
        for p in products[:ADMIN_ITEMS_LIMIT]:
            s = settings.get(p.id)
            rows.append({
                "code_num": p.id,
                "name": p.display_name,
                "price": p.price,
                "size": p.size,
                "promotion": s.promotion if s else None,
                "hot": s.hot if s else None,
                "first_seen": s.first_seen if s else None,
                "last_purchase": s.last_purchase if s else None,
            })
        return rows

    def update_item(self, code: str, payload: Mapping[str, Any]) -> None:
        self.store.upsert_item_setting(
            code,
            promotion=payload.get("promotion", False),
            hot=payload.get("hot", False),
            first_seen=payload.get("first_seen"),
            last_purchase=payload.get("last_purchase"),
        )

    def list_weights(self) -> List[Dict[str, Any]]:
        return self.store.list_weights()

    def update_weights(self, updates: Mapping[str, Any]) -> None:
        # stored for the admin screen only; the recommender does not read them yet
        self.store.update_weights(updates)

    # ---------- presentation helpers ----------

    def build_visualization(self, category: str, picks: List[RecommendationView]):
        return visualize_picks(self.catalog.snapshot().graph, category, picks)
