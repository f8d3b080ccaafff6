import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

import networkx as nx

from sipbuddy.core.catalog_graph import build_catalog_graph
from sipbuddy.core.classifier import CategoryScheme
from sipbuddy.data_access.loader import drop_duplicate_ids
from sipbuddy.models.product import Product
from sipbuddy.utils.logger import logger


@dataclass(frozen=True)
class CatalogSnapshot:
    """One immutable load of the catalog, with its graph built alongside."""

    products: Tuple[Product, ...]
    scheme: CategoryScheme
    graph: nx.Graph
    source: str = "empty"
    by_id: Dict[str, Product] = field(default_factory=dict, repr=False)

    @classmethod
    def build(cls, products, scheme: CategoryScheme, source: str) -> "CatalogSnapshot":
        products = tuple(drop_duplicate_ids(list(products), source))
        return cls(
            products=products,
            scheme=scheme,
            graph=build_catalog_graph(list(products), scheme),
            source=source,
            by_id={p.id: p for p in products},
        )

    @classmethod
    def empty(cls, scheme: CategoryScheme = CategoryScheme.TEXT) -> "CatalogSnapshot":
        return cls.build((), scheme, "empty")

    def get(self, product_id: str) -> Optional[Product]:
        return self.by_id.get(product_id)

    def __len__(self) -> int:
        return len(self.products)


class CatalogHolder:
    """Process-wide owner of the current catalog snapshot.

    `reload()` builds the replacement completely before swapping the
    reference, so readers see either the old catalog or the new one.
    """

    def __init__(self, loader: Callable[[], CatalogSnapshot]) -> None:
        self._loader = loader
        self._lock = threading.Lock()
        self._snapshot: Optional[CatalogSnapshot] = None

    def snapshot(self) -> CatalogSnapshot:
        current = self._snapshot
        if current is None:
            return self.reload()
        return current

    def reload(self) -> CatalogSnapshot:
        with self._lock:
            fresh = self._loader()
            self._snapshot = fresh
        logger.info(f"Catalog ready: {len(fresh)} products from {fresh.source}")
        return fresh
