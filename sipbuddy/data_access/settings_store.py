import os
import sqlite3
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional

from sipbuddy.models.product import ItemSetting
from sipbuddy.utils.exceptions import PersistenceError
from sipbuddy.utils.logger import logger

DEFAULT_WEIGHTS = {
    "promotion": 1.5,
    "hot": 1.3,
    "aging": 1.0,
    "new": 1.2,
}

SAMPLE_CATALOG = [
    ("B001", "Corona Extra", "BE", 12.99, "6-pack"),
    ("B002", "Stella Artois", "BE", 15.99, "6-pack"),
    ("B003", "Guinness", "BE", 18.99, "6-pack"),
    ("B004", "Heineken", "BE", 14.99, "6-pack"),
    ("B005", "Blue Moon", "BE", 13.99, "6-pack"),
    ("W001", "Kendall-Jackson Chardonnay", "WI", 24.99, "750ml"),
    ("W002", "Caymus Cabernet", "WI", 89.99, "750ml"),
    ("W003", "La Marca Prosecco", "WI", 19.99, "750ml"),
    ("W004", "Josh Cellars Pinot Noir", "WI", 16.99, "750ml"),
    ("W005", "Apothic Red", "WI", 12.99, "750ml"),
    ("R001", "White Claw Variety Pack", "RT", 17.99, "12-pack"),
    ("R002", "High Noon Vodka Soda", "RT", 19.99, "8-pack"),
    ("R003", "Truly Hard Seltzer", "RT", 16.99, "12-pack"),
    ("R004", "Bud Light Seltzer", "RT", 15.99, "12-pack"),
    ("R005", "Smirnoff Ice", "RT", 13.99, "6-pack"),
]

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS recommendation_weights (
        key   TEXT PRIMARY KEY,
        value REAL NOT NULL DEFAULT 1.0
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS item_settings (
        code_num      TEXT PRIMARY KEY,
        promotion     INTEGER DEFAULT 0,
        hot           INTEGER DEFAULT 0,
        first_seen    TEXT DEFAULT NULL,
        last_purchase TEXT DEFAULT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS liqcode (
        code_num TEXT PRIMARY KEY,
        brand    TEXT NOT NULL,
        type     TEXT NOT NULL,
        price    REAL NOT NULL,
        size     TEXT DEFAULT NULL
    )
    """,
)


TRUE_STRINGS = ("1", "true", "yes", "on")


def as_flag(value: Any) -> int:
    """0/1 for a checkbox value; JSON strings such as "false" count as false."""
    if isinstance(value, str):
        return int(value.strip().lower() in TRUE_STRINGS)
    return int(bool(value))


class SettingsStore:
    """SQLite-backed store for admin weights, per-item settings and the catalog table.

    Every call opens its own connection, so one failed write never holds up
    another.
    """

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            logger.error(f"Cannot open settings store {self.db_path}: {e}")
            raise PersistenceError(f"Cannot open settings store: {e}") from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"Settings store error on {self.db_path}: {e}")
            raise PersistenceError(str(e)) from e
        finally:
            conn.close()

    def bootstrap(self) -> None:
        """Create missing tables and seed defaults into empty ones."""
        folder = os.path.dirname(self.db_path)
        if folder:
            try:
                os.makedirs(folder, exist_ok=True)
            except OSError as e:
                raise PersistenceError(f"Cannot create {folder}: {e}") from e

        with self._connect() as conn:
            for statement in SCHEMA:
                conn.execute(statement)

            if conn.execute("SELECT COUNT(*) FROM recommendation_weights").fetchone()[0] == 0:
                conn.executemany(
                    "INSERT INTO recommendation_weights (key, value) VALUES (?, ?)",
                    list(DEFAULT_WEIGHTS.items()),
                )
                logger.info("Created default recommendation weights")

            if conn.execute("SELECT COUNT(*) FROM liqcode").fetchone()[0] == 0:
                conn.executemany(
                    "INSERT INTO liqcode (code_num, brand, type, price, size) VALUES (?, ?, ?, ?, ?)",
                    SAMPLE_CATALOG,
                )
                logger.info("Created sample catalog rows")
        logger.info(f"Settings store ready at {self.db_path}")

    # ---------- catalog table ----------

    def fetch_catalog_rows(self) -> List[sqlite3.Row]:
        with self._connect() as conn:
            return conn.execute(
                "SELECT code_num, brand, type, price, size FROM liqcode ORDER BY code_num"
            ).fetchall()

    # ---------- weights ----------

    def list_weights(self) -> List[Dict[str, Any]]:
        with self._connect() as conn:
            rows = conn.execute("SELECT key, value FROM recommendation_weights ORDER BY key").fetchall()
        return [{"key": row["key"], "value": row["value"]} for row in rows]

    def update_weight(self, key: str, value: float) -> bool:
        with self._connect() as conn:
            cur = conn.execute(
                "UPDATE recommendation_weights SET value = ? WHERE key = ?", (value, key)
            )
            return cur.rowcount > 0

    def update_weights(self, updates: Mapping[str, Any]) -> None:
        """Apply each key on its own; report every key that failed at the end."""
        failed: Dict[str, str] = {}
        for key, raw in updates.items():
            try:
                value = float(raw)
            except (TypeError, ValueError):
                failed[key] = f"not a number: {raw!r}"
                continue
            try:
                if not self.update_weight(key, value):
                    logger.warning(f"Ignoring unknown recommendation weight {key!r}")
            except PersistenceError as e:
                failed[key] = str(e)

        if failed:
            raise PersistenceError(
                "Failed to update weights: " + ", ".join(f"{k} ({v})" for k, v in failed.items())
            )

    # ---------- item settings ----------

    def get_item_settings(self) -> Dict[str, ItemSetting]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT code_num, promotion, hot, first_seen, last_purchase FROM item_settings"
            ).fetchall()
        return {
            row["code_num"]: ItemSetting(
                code_num=row["code_num"],
                promotion=bool(row["promotion"]),
                hot=bool(row["hot"]),
                first_seen=row["first_seen"],
                last_purchase=row["last_purchase"],
            )
            for row in rows
        }

    def upsert_item_setting(
        self,
        code: str,
        promotion: Any = False,
        hot: Any = False,
        first_seen: Optional[str] = None,
        last_purchase: Optional[str] = None,
    ) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO item_settings (code_num, promotion, hot, first_seen, last_purchase)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(code_num) DO UPDATE SET
                    promotion     = excluded.promotion,
                    hot           = excluded.hot,
                    first_seen    = excluded.first_seen,
                    last_purchase = excluded.last_purchase
                """,
                (code, as_flag(promotion), as_flag(hot), first_seen or None, last_purchase or None),
            )
        logger.info(f"Saved item settings for {code}")
