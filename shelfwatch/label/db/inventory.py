"""Product inventory CRUD operations."""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, timedelta
from pathlib import Path
from typing import TYPE_CHECKING

from ..lookup import estimate_shelf_life
from .schema import ensure_schema

if TYPE_CHECKING:
    from ..lookup import ProductInfo
    from ..ocr import ScanResult

logger = logging.getLogger(__name__)


class ProductDB:
    """Manages the products table."""

    def __init__(self, db_path: str | Path = "~/.config/shelfwatch/products.db") -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def add_product(
        self,
        name: str,
        *,
        brand: str = "",
        category: str = "General",
        barcode: str | None = None,
        expiry_date: str | None = None,
        quantity: float = 1.0,
        raw_text: str | None = None,
        image_path: str | None = None,
        source: str = "manual",
    ) -> int:
        """Insert a product and return its row ID."""
        conn = self._get_conn()
        cur = conn.execute(
            """INSERT INTO products
               (name, brand, category, barcode, expiry_date, quantity,
                raw_text, image_path, source, status)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, 'active')""",
            (
                name,
                brand,
                category,
                barcode,
                expiry_date,
                quantity,
                raw_text,
                image_path,
                source,
            ),
        )
        conn.commit()
        return cur.lastrowid

    def add_from_scan(
        self,
        result: ScanResult,
        *,
        product: ProductInfo | None = None,
        name: str | None = None,
        image_path: str | None = None,
        quantity: float = 1.0,
        today: date | None = None,
    ) -> int:
        """Store a scanned label, with looked-up details when available.

        An explicit name wins over the looked-up one; without either the
        product is named after the last digits of its barcode.

        A label with no readable expiry date gets one estimated from the
        shelf life of its category, as long as the product is identified by
        a barcode or a lookup.
        """
        if name is None:
            if product is not None:
                name = product.name
            elif result.barcode:
                name = f"Product {result.barcode[-4:]}"
            else:
                name = "Unknown Product"

        category = product.category if product else "General"
        expiry_date = result.expiry_date
        if expiry_date is None and (product is not None or result.barcode):
            days = estimate_shelf_life(category)
            expiry_date = ((today or date.today()) + timedelta(days=days)).isoformat()
            logger.info(
                "No expiry date on label for %s; estimated %s (%d-day shelf life)",
                name, expiry_date, days,
            )

        return self.add_product(
            name,
            brand=product.brand if product else "",
            category=category,
            barcode=result.barcode,
            expiry_date=expiry_date,
            quantity=quantity,
            raw_text=result.raw_text,
            image_path=image_path,
            source="scan",
        )

    def get(self, product_id: int) -> dict | None:
        conn = self._get_conn()
        row = conn.execute(
            "SELECT * FROM products WHERE id = ?", (product_id,)
        ).fetchone()
        return dict(row) if row else None

    def find_by_barcode(self, barcode: str) -> list[dict]:
        conn = self._get_conn()
        rows = conn.execute(
            "SELECT * FROM products WHERE barcode = ? ORDER BY id",
            (barcode,),
        ).fetchall()
        return [dict(r) for r in rows]

    def get_active(self) -> list[dict]:
        """Return all products with status='active', soonest expiry first."""
        conn = self._get_conn()
        rows = conn.execute(
            """SELECT * FROM products WHERE status = 'active'
               ORDER BY expiry_date IS NULL, expiry_date, id"""
        ).fetchall()
        return [dict(r) for r in rows]

    def get_expired(self) -> list[dict]:
        """Return products the expiry sweep has marked as expired."""
        conn = self._get_conn()
        rows = conn.execute(
            "SELECT * FROM products WHERE status = 'expired' ORDER BY expiry_date"
        ).fetchall()
        return [dict(r) for r in rows]

    def get_expiring_soon(self, days: int = 3, today: date | None = None) -> list[dict]:
        """Return active products expiring within the given number of days."""
        conn = self._get_conn()
        target = (today or date.today()).isoformat()
        rows = conn.execute(
            """SELECT * FROM products
               WHERE status = 'active'
                 AND expiry_date IS NOT NULL
                 AND expiry_date <= date(?, '+' || ? || ' days')
               ORDER BY expiry_date""",
            (target, days),
        ).fetchall()
        return [dict(r) for r in rows]

    def consume(self, product_id: int, amount: float = 1.0) -> None:
        """Mark a product as (partially) consumed.

        If consumed >= quantity, status is set to 'consumed'.
        """
        conn = self._get_conn()
        conn.execute(
            """UPDATE products
               SET consumed = MIN(consumed + ?, quantity),
                   status = CASE
                       WHEN consumed + ? >= quantity THEN 'consumed'
                       ELSE status
                   END,
                   updated_at = datetime('now', 'localtime')
               WHERE id = ?""",
            (amount, amount, product_id),
        )
        conn.commit()

    def mark_expired(self, today: date | None = None) -> int:
        """Set status='expired' for active products past their expiry_date.

        Returns:
            Number of rows updated.
        """
        conn = self._get_conn()
        cur = conn.execute(
            """UPDATE products
               SET status = 'expired',
                   updated_at = datetime('now', 'localtime')
               WHERE status = 'active'
                 AND expiry_date IS NOT NULL
                 AND expiry_date < ?""",
            ((today or date.today()).isoformat(),),
        )
        conn.commit()
        return cur.rowcount

    def delete(self, product_id: int) -> None:
        conn = self._get_conn()
        conn.execute("DELETE FROM products WHERE id = ?", (product_id,))
        conn.commit()
