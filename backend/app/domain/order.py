"""
Order Domain Models

An Order owns the OrderItems it was composed from; the items are created
together with the order and never shared between orders.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Union
from uuid import UUID

from pydantic import Field

from app.domain.base import DomainModel, Money
from app.domain.catalog import Product


class CartLine(DomainModel):
    """One line of a submitted cart: product reference + quantity"""
    product: str
    quantity: int = Field(..., ge=1)


class ShippingInfo(DomainModel):
    shipping_address1: str = Field(..., min_length=1)
    shipping_address2: Optional[str] = None
    city: str = Field(..., min_length=1)
    zip: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)


class OrderCreate(ShippingInfo):
    """
    Schema for composing a new order

    totalPrice is deliberately absent: it is always computed from the
    stored product prices.
    """
    order_items: List[CartLine] = Field(..., min_length=1)
    status: str = "Pending"
    user: str


class OrderStatusUpdate(DomainModel):
    status: str = Field(..., min_length=1)


class OrderItem(DomainModel):
    """Order line; `product` is populated on detail reads"""
    id: UUID
    product_id: UUID
    quantity: int = Field(..., ge=1)
    product: Optional[Product] = None


class UserSummary(DomainModel):
    """Purchaser details shown alongside an order"""
    id: UUID
    name: str
    phone: str = ""


class Order(ShippingInfo):
    """
    Order domain model

    Fields:
        id: Order identifier
        order_items: OrderItem ids in cart order, or the populated items
        status: Fulfillment state (Pending, Shipped, Delivered, ...)
        total_price: sum(quantity * product price) at composition time
        user_id: Purchasing user
        user: Populated purchaser summary (reads only)
        date_ordered: Creation timestamp
    """
    id: UUID
    order_items: List[Union[OrderItem, UUID]] = Field(..., min_length=1)
    status: str = "Pending"
    total_price: Money
    user_id: UUID
    user: Optional[UserSummary] = None
    date_ordered: datetime

    @property
    def item_ids(self) -> List[UUID]:
        return [item.id if isinstance(item, OrderItem) else item for item in self.order_items]


class CheckoutLine(DomainModel):
    """Line handed to the payment gateway; unit_amount is in minor currency units"""
    name: str
    unit_amount: int = Field(..., ge=0)
    quantity: int = Field(..., ge=1)


class TotalSales(DomainModel):
    totalsales: Money = Decimal("0")
