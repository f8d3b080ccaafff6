import re
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from sipbuddy.core.classifier import CategoryScheme
from sipbuddy.data_access.settings_store import SettingsStore
from sipbuddy.models.product import Product, PLACEHOLDER_IMAGE
from sipbuddy.utils.exceptions import DataLoadError, PersistenceError
from sipbuddy.utils.logger import logger

QUOTES = ('"', "'")
PRICE_RE = re.compile(r"-?(?:\d+(?:\.\d+)?|\.\d+)")
THOUSANDS_RE = re.compile(r"(?<=\d),(?=\d{3}\b)")


class FeedFormat(str, Enum):
    SHOP = "shop"              # header row, free-text category paths
    DEPARTMENT = "department"  # fixed columns, department codes
    TABLE = "table"            # liqcode table in the settings database

    @property
    def scheme(self) -> CategoryScheme:
        if self == FeedFormat.SHOP:
            return CategoryScheme.TEXT
        return CategoryScheme.CODE

    @classmethod
    def parse(cls, value: str) -> "FeedFormat":
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise DataLoadError(f"Unknown feed format: {value!r}") from e


# header aliases for self-describing feeds, first hit wins
SHOP_COLUMNS: Dict[str, Sequence[str]] = {
    "id": ("id", "sku", "code", "code_num", "item_id"),
    "title": ("title", "name", "product_name"),
    "description": ("description", "desc", "long_description"),
    "brand": ("brand", "vendor", "manufacturer"),
    "price": ("price", "sale_price", "regular_price"),
    "category": ("category", "product_type", "department", "google_product_category"),
    "size": ("size", "volume", "pack_size"),
    "image": ("image", "image_url", "image_link", "img"),
    "link": ("link", "url", "product_url", "purchase_link"),
}

# fixed layout: code, brand, description, department, price, size, image, link
DEPARTMENT_COLUMNS: Dict[str, int] = {
    "id": 0,
    "brand": 1,
    "description": 2,
    "category": 3,
    "price": 4,
    "size": 5,
    "image": 6,
    "link": 7,
}


def split_line(line: str, delimiter: str) -> List[str]:
    """Split on `delimiter` except inside a matching pair of quotes."""
    fields, current = [], []
    quote: Optional[str] = None
    for ch in line:
        if quote:
            if ch == quote:
                quote = None
            current.append(ch)
        elif ch in QUOTES and not current:
            quote = ch
            current.append(ch)
        elif ch == delimiter:
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
    fields.append("".join(current))
    return [_strip_quotes(f.strip()) for f in fields]


def _strip_quotes(value: str) -> str:
    if value[:1] in QUOTES:
        value = value[1:]
    if value[-1:] in QUOTES:
        value = value[:-1]
    return value.strip()


def sniff_delimiter(line: str) -> str:
    return "\t" if "\t" in line else ","


def parse_price(value) -> float:
    """First decimal number in the field, 0.0 when there is none."""
    match = PRICE_RE.search(THOUSANDS_RE.sub("", str(value or "")))
    if not match:
        return 0.0
    try:
        return max(float(match.group(0)), 0.0)
    except ValueError:
        return 0.0


def clean_image_url(value: str) -> str:
    value = (value or "").strip()
    if value.startswith(("http://", "https://")):
        return value
    return PLACEHOLDER_IMAGE


def _read_lines(path: str) -> List[str]:
    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            lines = [line.rstrip("\r\n") for line in f]
    except FileNotFoundError as e:
        logger.error(f"Feed not found: {path}")
        raise DataLoadError(f"Feed not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Unreadable feed {path}: {e}")
        raise DataLoadError(f"Unreadable feed: {path}") from e
    lines = [line for line in lines if line.strip()]
    if not lines:
        raise DataLoadError(f"Empty feed: {path}")
    return lines


def _pad(fields: List[str], width: int) -> List[str]:
    if len(fields) < width:
        fields = fields + [""] * (width - len(fields))
    return fields


def _build_product(row_number: int, values: Dict[str, str]) -> Product:
    title = values.get("title", "")
    return Product(
        id=values.get("id") or f"row-{row_number}",
        title=title,
        description=values.get("description", "") or title,
        brand=values.get("brand", ""),
        price=parse_price(values.get("price")),
        category_raw=values.get("category", ""),
        size=values.get("size", ""),
        image_url=clean_image_url(values.get("image", "")),
        link=values.get("link", ""),
    )


def _resolve_header(header: List[str]) -> Dict[str, int]:
    normalized = [h.strip().lower() for h in header]
    positions: Dict[str, int] = {}
    for field_name, aliases in SHOP_COLUMNS.items():
        for alias in aliases:
            if alias in normalized:
                positions[field_name] = normalized.index(alias)
                break
    return positions


def load_shop_feed(path: str) -> List[Product]:
    lines = _read_lines(path)
    delimiter = sniff_delimiter(lines[0])
    header = split_line(lines[0], delimiter)
    positions = _resolve_header(header)
    if "price" not in positions or not ({"title", "brand"} & positions.keys()):
        raise DataLoadError(f"Feed {path} has no usable header: {header}")

    products = []
    for row_number, line in enumerate(lines[1:], start=1):
        fields = _pad(split_line(line, delimiter), len(header))
        values = {name: fields[idx] for name, idx in positions.items()}
        products.append(_build_product(row_number, values))
    return products


def load_department_feed(path: str) -> List[Product]:
    lines = _read_lines(path)
    delimiter = sniff_delimiter(lines[0])
    width = max(DEPARTMENT_COLUMNS.values()) + 1

    products = []
    for row_number, line in enumerate(lines, start=1):
        fields = _pad(split_line(line, delimiter), width)
        values = {name: fields[idx] for name, idx in DEPARTMENT_COLUMNS.items()}
        products.append(_build_product(row_number, values))
    return products


def load_table_feed(db_path: str) -> List[Product]:
    try:
        rows = SettingsStore(db_path).fetch_catalog_rows()
    except PersistenceError as e:
        raise DataLoadError(f"Catalog table unavailable in {db_path}: {e}") from e
    return [
        Product(
            id=str(row["code_num"]),
            title=row["brand"],
            brand=row["brand"],
            price=parse_price(row["price"]),
            category_raw=row["type"] or "",
            size=row["size"] or "",
        )
        for row in rows
    ]


def drop_duplicate_ids(products: List[Product], source: str = "") -> List[Product]:
    """Keep the first product for each id; later rows with the same id are skipped."""
    seen = set()
    unique = []
    for p in products:
        if p.id in seen:
            logger.warning(f"Skipping duplicate product id {p.id!r} ({p.display_name}) in {source}")
            continue
        seen.add(p.id)
        unique.append(p)
    return unique


def load_catalog(path: str, feed_format: FeedFormat) -> List[Product]:
    if feed_format == FeedFormat.SHOP:
        products = load_shop_feed(path)
    elif feed_format == FeedFormat.DEPARTMENT:
        products = load_department_feed(path)
    else:
        products = load_table_feed(path)
    products = drop_duplicate_ids(products, path)
    logger.info(f"Loaded {len(products)} products from {path} ({feed_format.value})")
    return products


def load_with_fallback(sources: List[Tuple[Optional[str], FeedFormat]]) -> Tuple[List[Product], FeedFormat, str]:
    """Try each (path, format) in turn; an empty catalog if every one fails."""
    attempted = [(path, fmt) for path, fmt in sources if path]
    for path, feed_format in attempted:
        try:
            return load_catalog(path, feed_format), feed_format, path
        except DataLoadError as e:
            logger.warning(f"Could not load {feed_format.value} feed {path}: {e}")

    logger.error("No product feed could be loaded, serving an empty catalog")
    fallback_format = attempted[0][1] if attempted else FeedFormat.SHOP
    return [], fallback_format, "empty"
