from enum import Enum
from typing import Dict, Optional, Tuple

from sipbuddy.models.product import Product, BEER, WINE, RTD


class CategoryScheme(str, Enum):
    """How a feed expresses its category column."""

    CODE = "code"   # fixed department codes, e.g. "BE"
    TEXT = "text"   # free-text paths, e.g. "beer > ipa"


DEPARTMENT_CODES: Dict[str, str] = {
    "BE": BEER,
    "BEER": BEER,
    "WI": WINE,
    "WINE": WINE,
}

BEER_CATEGORY_PATHS: Tuple[str, ...] = (
    "beer",
    "craft beer",
    "domestic beer",
    "imported beer",
    "ale",
    "lager",
    "ipa",
    "stout",
    "porter",
    "pilsner",
    "wheat beer",
    "light beer",
    "malt liquor",
)

WINE_CATEGORY_PATHS: Tuple[str, ...] = (
    "wine",
    "red wine",
    "white wine",
    "rose wine",
    "rosé",
    "sparkling wine",
    "champagne",
    "dessert wine",
    "fortified wine",
    "sake",
)

# RTD keyword groups, matched as lowercase substrings of brand + title + description.
HARD_SELTZERS: Tuple[str, ...] = (
    "hard seltzer", "white claw", "truly", "bud light seltzer", "vizzy",
    "bon & viv", "corona hard seltzer", "topo chico hard", "high noon",
    "michelob ultra organic seltzer", "press seltzer", "wild basin",
)
CANNED_COCKTAILS: Tuple[str, ...] = (
    "canned cocktail", "cutwater", "on the rocks", "buzzballz", "buzz balls",
    "long drink", "vodka soda", "gin & tonic", "gin and tonic", "mojito",
    "margarita", "paloma", "moscow mule", "cosmopolitan", "pina colada",
    "spritz", "sangria",
)
FLAVORED_MALT: Tuple[str, ...] = (
    "smirnoff ice", "mike's hard", "mikes hard", "twisted tea", "four loko",
    "joose", "seagram's escapes", "seagrams escapes", "bacardi silver",
    "redd's", "lime-a-rita", "arbor mist",
)
ALCOPOPS: Tuple[str, ...] = (
    "bartles & jaymes", "bartles and jaymes", "zima", "hooch", "breezer",
    "bacardi breezer", "wkd",
)
PREMIUM_RTD: Tuple[str, ...] = (
    "crown royal canned", "jack daniel's country cocktails",
    "jack daniels country cocktails", "jack & coke", "jack and coke",
    "jose cuervo authentic", "ketel one botanical spritz", "tip top",
    "simple cocktails", "loverboy", "two chicks", "nütrl", "nutrl",
)
GENERIC_RTD_PHRASES: Tuple[str, ...] = (
    "ready to drink", "ready-to-drink", "rtd", "pre-mixed", "premixed",
    "hard tea", "hard lemonade", "hard cider", "hard kombucha",
    "hard iced tea", "spiked", "cocktail", "alcopop", "malt beverage",
    "flavored malt", "seltzer",
)

RTD_KEYWORDS: Tuple[str, ...] = (
    HARD_SELTZERS + CANNED_COCKTAILS + FLAVORED_MALT
    + ALCOPOPS + PREMIUM_RTD + GENERIC_RTD_PHRASES
)

NON_ALCOHOLIC_PHRASES: Tuple[str, ...] = (
    "orange juice", "apple juice", "cranberry juice", "grape juice",
    "pineapple juice", "tomato juice", "lemon juice", "lime juice",
    "grapefruit juice", "simple syrup", "coca-cola", "coca cola", "coke zero",
    "diet coke", "pepsi", "sprite", "7up", "7-up", "dr pepper", "mountain dew",
    "ginger ale", "tonic water", "club soda", "sparkling water", "seltzer water",
    "mixer",
)
ALCOHOL_MARKERS: Tuple[str, ...] = ("hard", "alcoholic")


def search_text(product: Product) -> str:
    return f"{product.brand} {product.title} {product.description}".lower()


def _contains_any(text: str, needles) -> bool:
    return any(n in text for n in needles)


def is_definitely_non_alcoholic(text: str) -> bool:
    return _contains_any(text, NON_ALCOHOLIC_PHRASES) and not _contains_any(text, ALCOHOL_MARKERS)


def is_rtd(product: Product) -> bool:
    text = search_text(product)
    return _contains_any(text, RTD_KEYWORDS) and not is_definitely_non_alcoholic(text)


def classify(product: Product, scheme: CategoryScheme) -> Optional[str]:
    """Beer or Wine for a product, per the feed's category scheme; None otherwise.

    RTD never comes out of here: it is decided by `is_rtd` alone.
    """
    raw = (product.category_raw or "").strip()
    if not raw:
        return None
    if scheme == CategoryScheme.CODE:
        return DEPARTMENT_CODES.get(raw.upper())

    path = raw.lower()
    for category, allowed in ((WINE, WINE_CATEGORY_PATHS), (BEER, BEER_CATEGORY_PATHS)):
        if any(path.startswith(a) or a in path for a in allowed):
            return category
    return None


def matches_category(product: Product, category: str, scheme: CategoryScheme) -> bool:
    if category == RTD:
        return is_rtd(product)
    return classify(product, scheme) == category
