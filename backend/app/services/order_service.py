"""
Order Service
Composes carts into orders, deletes them, and answers order queries

Composition and deletion each run in ONE database transaction: a cart
becomes a complete, price-consistent order or nothing is persisted.

Author: TM3
Date: 2026-10-19
"""
import logging
from decimal import Decimal
from typing import List, Optional, Sequence

from app.connectors.stripe_connector import StripeConnector
from app.core.config import Settings
from app.core.database import Database
from app.core.exceptions import InvalidArgumentError, InvalidReferenceError, NotFoundError
from app.core.identifiers import parse_id
from app.domain.order import CartLine, CheckoutLine, Order, OrderCreate
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class OrderService:
    """
    Service for orders

    Handles:
    - Order composition (cart -> order items + order, total from stored prices)
    - Order deletion together with its items
    - Status updates, listings, per-user history, sales totals
    - Checkout sessions through the payment gateway
    """

    def __init__(
        self,
        db: Database,
        settings: Settings,
        orders: Optional[OrderRepository] = None,
        products: Optional[ProductRepository] = None,
        users: Optional[UserRepository] = None,
        payments: Optional[StripeConnector] = None,
    ):
        self.db = db
        self.settings = settings
        self.orders = orders or OrderRepository(db)
        self.products = products or ProductRepository(db)
        self.users = users or UserRepository(db)
        self.payments = payments or StripeConnector(settings)

    def compose_order(self, order_in: OrderCreate) -> Order:
        """
        Turn a submitted cart into a persisted order

        Steps:
        1. Validate the cart and every identifier before touching the store
        2. Check the purchasing user exists
        3. Persist one order item per cart line
        4. Re-read the items with their product's stored price
        5. totalPrice = sum(price * quantity)
        6. Persist the order referencing the items in cart order

        Args:
            order_in: Cart lines, shipping fields, status and user

        Returns:
            The persisted order (id and dateOrdered assigned by the store)

        Raises:
            InvalidArgumentError: empty cart
            InvalidIdentifierError: malformed user or product id
            InvalidReferenceError: unknown user or product
        """
        if not order_in.order_items:
            raise InvalidArgumentError("The order must contain at least one item")

        user_id = parse_id(order_in.user, "User")
        lines = [(parse_id(line.product, "Product"), line.quantity) for line in order_in.order_items]

        with self.db.transaction() as cursor:
            if not self.users.exists(user_id, cursor=cursor):
                raise InvalidReferenceError("Invalid User")

            item_ids = self.orders.insert_items(lines, cursor=cursor)
            priced = self.orders.price_items(item_ids, cursor=cursor)

            total_price = Decimal("0")
            for item_id in item_ids:
                line = priced.get(item_id)
                if line is None or line.price is None:
                    product_id = line.product_id if line else "unknown"
                    raise InvalidReferenceError(f"Invalid Product: {product_id}")
                total_price += line.price * line.quantity

            order = self.orders.insert_order(
                item_ids,
                shipping=order_in,
                user_id=user_id,
                total_price=total_price,
                status=order_in.status,
                cursor=cursor,
            )

        logger.info(f"Composed order {order.id}: {len(item_ids)} item(s), total {total_price} for user {user_id}")
        return order

    def delete_order(self, order_id: str) -> None:
        """
        Delete an order and every order item it references, atomically

        Raises:
            NotFoundError: no such order
        """
        parsed_id = parse_id(order_id, "Order")

        with self.db.transaction() as cursor:
            item_ids = self.orders.delete_order(parsed_id, cursor=cursor)
            if item_ids is None:
                raise NotFoundError("order not found")
            removed = self.orders.delete_items(item_ids, cursor=cursor)

        logger.info(f"Deleted order {parsed_id} and {removed} order item(s)")

    def list_orders(self) -> List[Order]:
        return self.orders.find_all()

    def get_order(self, order_id: str) -> Order:
        order = self.orders.find_by_id(parse_id(order_id, "Order"))
        if not order:
            raise NotFoundError("The order with given ID was not found")
        return order

    def update_status(self, order_id: str, status: str) -> Order:
        order = self.orders.update_status(parse_id(order_id, "Order"), status)
        if not order:
            raise NotFoundError("the order status can not be updated")
        logger.info(f"Order {order.id} moved to status {status}")
        return order

    def user_orders(self, user_id: str) -> List[Order]:
        return self.orders.find_by_user(parse_id(user_id, "User"))

    def total_sales(self) -> Decimal:
        return self.orders.total_sales()

    def count_orders(self) -> int:
        return self.orders.count()

    def checkout_lines(self, cart: Sequence[CartLine]) -> List[CheckoutLine]:
        """
        Price a cart for the payment gateway

        unit_amount is the stored price in minor currency units (price * 100).
        """
        if not cart:
            raise InvalidArgumentError("checkout session cannot be created - check the order items")

        product_ids = [parse_id(line.product, "Product") for line in cart]
        products = self.products.find_by_ids(product_ids)

        checkout = []
        for product_id, line in zip(product_ids, cart):
            product = products.get(product_id)
            if product is None:
                raise InvalidReferenceError(f"Invalid Product: {product_id}")
            checkout.append(CheckoutLine(
                name=product.name,
                unit_amount=int((product.price * 100).to_integral_value()),
                quantity=line.quantity,
            ))
        return checkout

    async def create_checkout_session(self, cart: Sequence[CartLine]) -> str:
        """Open a payment checkout session for a cart; returns the gateway's session id"""
        lines = self.checkout_lines(cart)
        return await self.payments.create_checkout_session(lines)
