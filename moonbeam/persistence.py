"""SQLite persistence for orders, status history, favorites and users."""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from moonbeam.accounts import RewardTier, Rewards, User, UserRole
from moonbeam.config import DB_PATH
from moonbeam.data import Catalog
from moonbeam.models import (
    CartLineItem,
    DrinkCustomization,
    Order,
    OrderStatus,
    PaymentMethod,
    PaymentType,
    StatusUpdate,
)
from moonbeam.pricing import round_money

logger = logging.getLogger(__name__)


def _iso(moment: datetime | None) -> str | None:
    return moment.isoformat() if moment is not None else None


def _parse(moment: str | None) -> datetime | None:
    return datetime.fromisoformat(moment) if moment else None


class SqliteStore:
    """Persists order snapshots and account data in one SQLite file."""

    def __init__(self, db_path: str | Path = DB_PATH):
        self.db_path = Path(db_path)

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def bootstrap_schema(self) -> None:
        """Create persistence schema if it does not already exist."""
        with self._connect() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS orders (
                    id TEXT PRIMARY KEY,
                    user_id TEXT,
                    created_at TEXT NOT NULL,
                    estimated_ready_at TEXT NOT NULL,
                    location_id TEXT NOT NULL,
                    pickup_name TEXT NOT NULL,
                    subtotal TEXT NOT NULL,
                    tax TEXT NOT NULL,
                    tip TEXT NOT NULL,
                    total TEXT NOT NULL,
                    status TEXT NOT NULL,
                    payment_method_id TEXT,
                    payment_type TEXT,
                    payment_last4 TEXT,
                    payment_brand TEXT
                );

                CREATE TABLE IF NOT EXISTS order_items (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    order_id TEXT NOT NULL,
                    line_index INTEGER NOT NULL,
                    line_id TEXT NOT NULL,
                    menu_item_id TEXT NOT NULL,
                    item_name TEXT NOT NULL,
                    quantity INTEGER NOT NULL,
                    unit_price TEXT NOT NULL,
                    customization TEXT NOT NULL,
                    FOREIGN KEY(order_id) REFERENCES orders(id) ON DELETE CASCADE
                );

                CREATE TABLE IF NOT EXISTS order_status_history (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    order_id TEXT NOT NULL,
                    status TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    message TEXT,
                    FOREIGN KEY(order_id) REFERENCES orders(id) ON DELETE CASCADE
                );

                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    email TEXT NOT NULL UNIQUE,
                    first_name TEXT NOT NULL,
                    last_name TEXT NOT NULL,
                    role TEXT NOT NULL,
                    is_active INTEGER NOT NULL,
                    created_at TEXT,
                    last_login_at TEXT,
                    stars INTEGER NOT NULL DEFAULT 0,
                    tier TEXT NOT NULL DEFAULT 'green',
                    stars_to_next_reward INTEGER NOT NULL DEFAULT 50
                );

                CREATE TABLE IF NOT EXISTS favorites (
                    user_id TEXT NOT NULL,
                    menu_item_id TEXT NOT NULL,
                    PRIMARY KEY (user_id, menu_item_id)
                );

                CREATE INDEX IF NOT EXISTS idx_order_items_order_id_line
                    ON order_items(order_id, line_index);

                CREATE INDEX IF NOT EXISTS idx_order_status_history_order_id
                    ON order_status_history(order_id);

                CREATE INDEX IF NOT EXISTS idx_orders_user_id
                    ON orders(user_id);
                """
            )

    def save_order(self, order: Order) -> None:
        """Persist a full order snapshot with its lines and status history."""
        if not order.items:
            raise ValueError("Cannot save an order without items")

        method = order.payment_method
        with self._connect() as conn:
            with conn:
                conn.execute(
                    """
                    INSERT INTO orders (
                        id, user_id, created_at, estimated_ready_at, location_id, pickup_name,
                        subtotal, tax, tip, total, status,
                        payment_method_id, payment_type, payment_last4, payment_brand
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        order.order_id,
                        order.user_id,
                        _iso(order.created_at),
                        _iso(order.estimated_ready_at),
                        order.location.location_id,
                        order.pickup_name,
                        str(round_money(order.subtotal)),
                        str(round_money(order.tax)),
                        str(round_money(order.tip)),
                        str(round_money(order.total)),
                        order.status.value,
                        method.method_id if method else None,
                        method.type.value if method else None,
                        method.last4 if method else None,
                        method.brand if method else None,
                    ),
                )

                for idx, line in enumerate(order.items):
                    conn.execute(
                        """
                        INSERT INTO order_items (
                            order_id, line_index, line_id, menu_item_id, item_name, quantity, unit_price, customization
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            order.order_id,
                            idx,
                            line.line_id,
                            line.menu_item.item_id,
                            line.name,
                            line.quantity,
                            str(line.unit_price),
                            json.dumps(line.customization.to_dict()),
                        ),
                    )

                for update in order.status_history:
                    self._insert_status(conn, order.order_id, update)
        logger.info("saved order order_id=%s lines=%d", order.order_id, len(order.items))

    @staticmethod
    def _insert_status(conn: sqlite3.Connection, order_id: str, update: StatusUpdate) -> None:
        conn.execute(
            "INSERT INTO order_status_history (order_id, status, created_at, message) VALUES (?, ?, ?, ?)",
            (order_id, update.status.value, _iso(update.timestamp), update.message),
        )

    def append_status(self, order_id: str, update: StatusUpdate) -> None:
        """Record a status change and update the order's current status."""
        with self._connect() as conn:
            with conn:
                cur = conn.execute("UPDATE orders SET status = ? WHERE id = ?", (update.status.value, order_id))
                if cur.rowcount == 0:
                    raise ValueError(f"Unknown order id: {order_id}")
                self._insert_status(conn, order_id, update)

    def load_orders(self, catalog: Catalog, user_id: str | None = None) -> list[Order]:
        """Load orders newest first, optionally only those placed by ``user_id``."""
        with self._connect() as conn:
            conn.row_factory = sqlite3.Row
            if user_id is None:
                rows = conn.execute("SELECT * FROM orders ORDER BY created_at DESC").fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM orders WHERE user_id = ? ORDER BY created_at DESC", (user_id,)
                ).fetchall()
            return [self._order_from_row(conn, row, catalog) for row in rows]

    def _order_from_row(self, conn: sqlite3.Connection, row: sqlite3.Row, catalog: Catalog) -> Order:
        order_id = row["id"]
        item_rows = conn.execute(
            "SELECT * FROM order_items WHERE order_id = ? ORDER BY line_index", (order_id,)
        ).fetchall()
        items = tuple(
            CartLineItem(
                line_id=item["line_id"],
                menu_item=catalog.get_item(item["menu_item_id"]),
                customization=DrinkCustomization.from_dict(json.loads(item["customization"])),
                quantity=int(item["quantity"]),
                unit_price=Decimal(item["unit_price"]),
                name=item["item_name"],
            )
            for item in item_rows
        )
        history_rows = conn.execute(
            "SELECT status, created_at, message FROM order_status_history WHERE order_id = ? ORDER BY id",
            (order_id,),
        ).fetchall()
        history = [
            StatusUpdate(OrderStatus(h["status"]), datetime.fromisoformat(h["created_at"]), h["message"])
            for h in history_rows
        ]
        method = None
        if row["payment_method_id"] is not None:
            method = PaymentMethod(
                method_id=row["payment_method_id"],
                type=PaymentType(row["payment_type"]),
                last4=row["payment_last4"],
                brand=row["payment_brand"],
            )
        return Order(
            order_id=order_id,
            items=items,
            subtotal=Decimal(row["subtotal"]),
            tax=Decimal(row["tax"]),
            tip=Decimal(row["tip"]),
            total=Decimal(row["total"]),
            location=catalog.get_location(row["location_id"]),
            status=OrderStatus(row["status"]),
            status_history=history,
            created_at=datetime.fromisoformat(row["created_at"]),
            estimated_ready_at=datetime.fromisoformat(row["estimated_ready_at"]),
            pickup_name=row["pickup_name"],
            payment_method=method,
            user_id=row["user_id"],
        )

    def add_favorite(self, user_id: str, menu_item_id: str) -> None:
        with self._connect() as conn:
            with conn:
                conn.execute(
                    "INSERT OR IGNORE INTO favorites (user_id, menu_item_id) VALUES (?, ?)", (user_id, menu_item_id)
                )

    def remove_favorite(self, user_id: str, menu_item_id: str) -> None:
        with self._connect() as conn:
            with conn:
                conn.execute("DELETE FROM favorites WHERE user_id = ? AND menu_item_id = ?", (user_id, menu_item_id))

    def list_favorites(self, user_id: str) -> list[str]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT menu_item_id FROM favorites WHERE user_id = ? ORDER BY rowid", (user_id,)
            ).fetchall()
        return [row[0] for row in rows]

    def save_user(self, user: User) -> None:
        """Insert or update a user's profile and star balance."""
        with self._connect() as conn:
            with conn:
                conn.execute(
                    """
                    INSERT INTO users (
                        id, email, first_name, last_name, role, is_active, created_at, last_login_at,
                        stars, tier, stars_to_next_reward
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        email = excluded.email,
                        first_name = excluded.first_name,
                        last_name = excluded.last_name,
                        role = excluded.role,
                        is_active = excluded.is_active,
                        last_login_at = excluded.last_login_at,
                        stars = excluded.stars,
                        tier = excluded.tier,
                        stars_to_next_reward = excluded.stars_to_next_reward
                    """,
                    (
                        user.user_id,
                        user.email,
                        user.first_name,
                        user.last_name,
                        user.role.value,
                        int(user.is_active),
                        _iso(user.created_at),
                        _iso(user.last_login_at),
                        user.rewards.stars,
                        user.rewards.tier.value,
                        user.rewards.stars_to_next_reward,
                    ),
                )

    def delete_user(self, user_id: str) -> None:
        with self._connect() as conn:
            with conn:
                conn.execute("DELETE FROM favorites WHERE user_id = ?", (user_id,))
                conn.execute("DELETE FROM users WHERE id = ?", (user_id,))

    def load_users(self) -> list[User]:
        with self._connect() as conn:
            conn.row_factory = sqlite3.Row
            rows = conn.execute("SELECT * FROM users ORDER BY created_at").fetchall()
        users = []
        for row in rows:
            users.append(
                User(
                    user_id=row["id"],
                    first_name=row["first_name"],
                    last_name=row["last_name"],
                    email=row["email"],
                    role=UserRole(row["role"]),
                    is_active=bool(row["is_active"]),
                    created_at=_parse(row["created_at"]),
                    last_login_at=_parse(row["last_login_at"]),
                    rewards=Rewards(
                        stars=int(row["stars"]),
                        tier=RewardTier(row["tier"]),
                        stars_to_next_reward=int(row["stars_to_next_reward"]),
                    ),
                    favorite_items=self.list_favorites(row["id"]),
                )
            )
        return users
