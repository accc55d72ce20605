"""
Order Repository - Data Access Layer for Orders and Order Items

Handles all database queries for orders and returns Order domain models
with related data (purchaser, items, products).

The write methods take the caller's cursor so the Order Composer can run
item inserts, pricing and the order insert inside one transaction.

Author: TM3
Date: 2026-10-19
"""
import uuid
from decimal import Decimal
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple
from uuid import UUID

from psycopg2.extras import execute_values

from app.domain.order import Order, OrderItem, ShippingInfo, UserSummary
from app.repositories.base import BaseRepository
from app.repositories.product_repository import ProductRepository

ORDER_SELECT = """
    SELECT
        o.id, o.order_items,
        o.shipping_address1, o.shipping_address2, o.city, o.zip, o.country, o.phone,
        o.status, o.total_price, o.user_id, o.date_ordered,
        u.name AS user_name,
        u.phone AS user_phone
    FROM orders o
    LEFT JOIN users u ON u.id = o.user_id
"""

ITEM_SELECT = """
    SELECT
        oi.id AS item_id, oi.product_id AS item_product_id, oi.quantity AS item_quantity,
        p.id, p.name, p.description, p.rich_description,
        p.image, p.images, p.brand, p.price, p.category_id,
        p.count_in_stock, p.rating, p.num_reviews, p.is_featured, p.date_created,
        c.name AS category_name,
        c.icon AS category_icon,
        c.color AS category_color
    FROM order_items oi
    LEFT JOIN products p ON p.id = oi.product_id
    LEFT JOIN categories c ON c.id = p.category_id
"""


class PricedLine(NamedTuple):
    """A persisted order item re-read with its product's current price (None if the product is gone)"""
    item_id: UUID
    product_id: UUID
    quantity: int
    price: Optional[Decimal]


class OrderRepository(BaseRepository):
    """
    Repository for Order data access

    All SQL queries for orders are centralized here.
    """

    @staticmethod
    def _map_row_to_order(row: dict, items: Optional[Dict[UUID, OrderItem]] = None) -> Order:
        """
        Map an ORDER_SELECT row to an Order

        When `items` is given, order_items is populated from it (in the
        stored order); otherwise it holds the bare item ids.
        """
        item_ids = list(row['order_items'] or [])
        order_items = item_ids
        if items is not None:
            order_items = [items.get(item_id, item_id) for item_id in item_ids]

        user = None
        if row.get('user_name') is not None:
            user = UserSummary(id=row['user_id'], name=row['user_name'], phone=row.get('user_phone') or "")

        return Order(
            id=row['id'],
            order_items=order_items,
            shipping_address1=row['shipping_address1'],
            shipping_address2=row.get('shipping_address2'),
            city=row['city'],
            zip=row['zip'],
            country=row['country'],
            phone=row['phone'],
            status=row['status'],
            total_price=row['total_price'],
            user_id=row['user_id'],
            user=user,
            date_ordered=row['date_ordered'],
        )

    def _load_items(self, cursor, item_ids: Sequence[UUID]) -> Dict[UUID, OrderItem]:
        """Load items (with product and category) for any number of orders in ONE query"""
        if not item_ids:
            return {}

        cursor.execute(f"{ITEM_SELECT} WHERE oi.id = ANY(%s)", (list(item_ids),))

        items = {}
        for row in cursor.fetchall():
            product = ProductRepository._map_row_to_product(row) if row.get('id') is not None else None
            items[row['item_id']] = OrderItem(
                id=row['item_id'],
                product_id=row['item_product_id'],
                quantity=row['item_quantity'],
                product=product,
            )
        return items

    # ------------------------------------------------------------------
    # Composition (caller-owned transaction)
    # ------------------------------------------------------------------

    def insert_items(self, lines: Sequence[Tuple[UUID, int]], cursor) -> List[UUID]:
        """
        Persist one order item per cart line

        Ids are generated here so the returned list follows cart order.

        Args:
            lines: (product_id, quantity) pairs
            cursor: cursor of the enclosing transaction

        Returns:
            New order item ids, one per line, same order as `lines`
        """
        rows = [(uuid.uuid4(), product_id, quantity) for product_id, quantity in lines]
        execute_values(
            cursor,
            "INSERT INTO order_items (id, product_id, quantity) VALUES %s",
            rows,
        )
        return [row[0] for row in rows]

    def price_items(self, item_ids: Sequence[UUID], cursor) -> Dict[UUID, PricedLine]:
        """Re-read persisted items joined with the current price of their product"""
        cursor.execute("""
            SELECT oi.id, oi.product_id, oi.quantity, p.price
            FROM order_items oi
            LEFT JOIN products p ON p.id = oi.product_id
            WHERE oi.id = ANY(%s)
        """, (list(item_ids),))

        return {
            row['id']: PricedLine(row['id'], row['product_id'], row['quantity'], row['price'])
            for row in cursor.fetchall()
        }

    def insert_order(
        self,
        item_ids: Sequence[UUID],
        shipping: ShippingInfo,
        user_id: UUID,
        total_price: Decimal,
        status: str,
        cursor,
    ) -> Order:
        order_id = uuid.uuid4()
        cursor.execute("""
            INSERT INTO orders (
                id, order_items, shipping_address1, shipping_address2,
                city, zip, country, phone, status, total_price, user_id
            ) VALUES (
                %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s
            )
            RETURNING
                id, order_items, shipping_address1, shipping_address2,
                city, zip, country, phone, status, total_price, user_id, date_ordered
        """, (
            order_id,
            list(item_ids),
            shipping.shipping_address1,
            shipping.shipping_address2,
            shipping.city,
            shipping.zip,
            shipping.country,
            shipping.phone,
            status,
            total_price,
            user_id,
        ))
        return self._map_row_to_order(cursor.fetchone())

    # ------------------------------------------------------------------
    # Deletion (caller-owned transaction)
    # ------------------------------------------------------------------

    def delete_order(self, order_id: UUID, cursor) -> Optional[List[UUID]]:
        """Delete an order; returns the ids of its items, or None if it did not exist"""
        cursor.execute("DELETE FROM orders WHERE id = %s RETURNING order_items", (order_id,))
        row = cursor.fetchone()
        if not row:
            return None
        return list(row['order_items'] or [])

    def delete_items(self, item_ids: Sequence[UUID], cursor) -> int:
        if not item_ids:
            return 0
        cursor.execute("DELETE FROM order_items WHERE id = ANY(%s)", (list(item_ids),))
        return cursor.rowcount

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find_all(self) -> List[Order]:
        """All orders, newest first, purchaser populated, items as ids"""
        with self._cursor() as cursor:
            cursor.execute(f"{ORDER_SELECT} ORDER BY o.date_ordered DESC")
            return [self._map_row_to_order(row) for row in cursor.fetchall()]

    def find_by_id(self, order_id: UUID) -> Optional[Order]:
        """Order with purchaser, items, products and categories populated"""
        with self._cursor() as cursor:
            cursor.execute(f"{ORDER_SELECT} WHERE o.id = %s", (order_id,))
            row = cursor.fetchone()
            if not row:
                return None

            items = self._load_items(cursor, row['order_items'] or [])
            return self._map_row_to_order(row, items)

    def find_by_user(self, user_id: UUID) -> List[Order]:
        """A user's orders, newest first, items populated"""
        with self._cursor() as cursor:
            cursor.execute(f"""
                {ORDER_SELECT}
                WHERE o.user_id = %s
                ORDER BY o.date_ordered DESC
            """, (user_id,))
            order_rows = cursor.fetchall()

            if not order_rows:
                return []

            # Get ALL order items for these orders in ONE QUERY (N+1 fix)
            all_item_ids = [item_id for row in order_rows for item_id in (row['order_items'] or [])]
            items = self._load_items(cursor, all_item_ids)

            return [self._map_row_to_order(row, items) for row in order_rows]

    def update_status(self, order_id: UUID, status: str) -> Optional[Order]:
        with self._cursor() as cursor:
            cursor.execute("""
                UPDATE orders SET status = %s
                WHERE id = %s
                RETURNING
                    id, order_items, shipping_address1, shipping_address2,
                    city, zip, country, phone, status, total_price, user_id, date_ordered
            """, (status, order_id))
            row = cursor.fetchone()
            return self._map_row_to_order(row) if row else None

    def total_sales(self) -> Decimal:
        with self._cursor() as cursor:
            cursor.execute("SELECT COALESCE(SUM(total_price), 0) AS totalsales FROM orders")
            return Decimal(cursor.fetchone()['totalsales'])

    def count(self) -> int:
        with self._cursor() as cursor:
            cursor.execute("SELECT COUNT(*) AS total FROM orders")
            return cursor.fetchone()['total']
