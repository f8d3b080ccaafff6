from dataclasses import dataclass
from typing import Dict, List, Tuple

from sipbuddy.models.product import Product, BEER, WINE, RTD


@dataclass(frozen=True)
class TagRule:
    tag: str
    keywords: Tuple[str, ...]
    excludes: Tuple[str, ...] = ()

    def matches(self, text: str) -> bool:
        if any(x in text for x in self.excludes):
            return False
        return any(k in text for k in self.keywords)


TAG_RULES: Dict[str, Tuple[TagRule, ...]] = {
    WINE: (
        TagRule("Chardonnay", ("chardonnay",)),
        TagRule("Cabernet Sauvignon", ("cabernet", "cab sav")),
        TagRule("Pinot Noir", ("pinot noir",)),
        TagRule("Pinot Grigio", ("pinot grigio", "pinot gris")),
        TagRule("Merlot", ("merlot",)),
        TagRule("Sauvignon Blanc", ("sauvignon blanc",)),
        TagRule("Prosecco", ("prosecco",)),
        TagRule("Champagne", ("champagne",)),
        TagRule("Riesling", ("riesling",)),
        TagRule("Moscato", ("moscato",)),
        TagRule("Red Blend", ("red",), excludes=("chardonnay",)),
        TagRule("White Blend", ("white",), excludes=("claw",)),
    ),
    BEER: (
        TagRule("Lager", ("lager", "corona", "stella")),
        TagRule("IPA", ("ipa", "pale ale")),
        TagRule("Stout", ("stout", "guinness")),
        TagRule("Wheat Beer", ("wheat", "blue moon")),
        TagRule("Light Beer", ("light",)),
        TagRule("Pilsner", ("pilsner", "heineken")),
    ),
    RTD: (
        TagRule("Hard Seltzer", ("seltzer", "white claw", "truly")),
        TagRule("Vodka Mix", ("vodka",)),
        TagRule("Margarita", ("margarita",)),
        TagRule("Mojito", ("mojito",)),
        TagRule("Flavored Malt", ("smirnoff",)),
        TagRule("Iced Tea", ("iced tea",)),
        TagRule("Lemonade", ("lemonade",)),
        TagRule("Cocktail", ("cocktail",)),
    ),
}


def product_text(product: Product) -> str:
    parts = [product.brand, product.title]
    if product.description and product.description != product.title:
        parts.append(product.description)
    return " ".join(parts).lower()


def extract_tags(text: str, category: str) -> List[str]:
    rules = TAG_RULES.get(category, ())
    text = text.lower()
    return sorted({rule.tag for rule in rules if rule.matches(text)})


def product_tags(product: Product, category: str) -> List[str]:
    return extract_tags(product_text(product), category)


def rule_tags(category: str) -> List[str]:
    """Every tag a category's rules can produce."""
    return [rule.tag for rule in TAG_RULES.get(category, ())]
