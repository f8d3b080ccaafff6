from dataclasses import dataclass, field
from typing import List, Optional

BEER = "Beer"
WINE = "Wine"
RTD = "RTD"
CATEGORIES = (BEER, WINE, RTD)

PLACEHOLDER_IMAGE = "https://via.placeholder.com/80?text=No+Image"

@dataclass(frozen=True)
class Product:
    id: str
    title: str
    brand: str
    price: float
    category_raw: str
    description: str = ""
    size: str = ""
    image_url: str = PLACEHOLDER_IMAGE
    link: str = ""

    @property
    def display_name(self) -> str:
        return self.title or self.brand

    @property
    def orderable(self) -> bool:
        return self.price > 0

@dataclass
class RecommendationView:
    id: str
    name: str
    price: float
    image: str
    tags: List[str] = field(default_factory=list)
    size: str = ""
    purchase_link: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "image": self.image,
            "tags": list(self.tags),
            "size": self.size,
            "purchaseLink": self.purchase_link,
        }

@dataclass
class QuantityEstimate:
    quantity: int
    unit: str
    size: str
    pack_size: int
    total_servings: int

    def to_dict(self) -> dict:
        return {
            "quantity": self.quantity,
            "unit": self.unit,
            "size": self.size,
            "packSize": self.pack_size,
            "totalServings": self.total_servings,
        }

@dataclass
class ItemSetting:
    code_num: str
    promotion: bool = False
    hot: bool = False
    first_seen: Optional[str] = None
    last_purchase: Optional[str] = None
