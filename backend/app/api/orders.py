"""
Orders API Endpoints
Order composition, status updates, checkout and sales queries

All routes require an admin token (see AccessGateMiddleware).

Author: TM3
Date: 2026-10-19
"""
from typing import List

from fastapi import APIRouter, Body, Depends

from app.api.dependencies import get_order_service
from app.domain.order import CartLine, OrderCreate, OrderStatusUpdate, TotalSales
from app.services.order_service import OrderService

router = APIRouter()


@router.get("")
async def get_orders(service: OrderService = Depends(get_order_service)):
    """All orders, newest first, with the purchaser's name"""
    return [order.to_dict() for order in service.list_orders()]


@router.get("/get/totalsales")
async def get_total_sales(service: OrderService = Depends(get_order_service)):
    return TotalSales(totalsales=service.total_sales()).to_dict()


@router.get("/get/count")
async def get_order_count(service: OrderService = Depends(get_order_service)):
    return {"orderCount": service.count_orders()}


@router.get("/get/userorders/{user_id}")
async def get_user_orders(user_id: str, service: OrderService = Depends(get_order_service)):
    """Order history of one user, newest first, items populated"""
    return [order.to_dict() for order in service.user_orders(user_id)]


@router.post("/create-checkout-session")
async def create_checkout_session(
    cart: List[CartLine] = Body(...),
    service: OrderService = Depends(get_order_service),
):
    """
    Open a hosted checkout session for a cart

    Body: [{"product": "<id>", "quantity": 2}, ...]
    Returns: {"id": "<checkout session id>"}
    """
    session_id = await service.create_checkout_session(cart)
    return {"id": session_id}


@router.get("/{order_id}")
async def get_order(order_id: str, service: OrderService = Depends(get_order_service)):
    """Order detail with user, items, products and their categories populated"""
    return service.get_order(order_id).to_dict()


@router.post("")
async def create_order(order_in: OrderCreate, service: OrderService = Depends(get_order_service)):
    """
    Compose an order from a cart

    totalPrice is computed from the stored product prices; any value sent
    by the client is ignored.
    """
    order = service.compose_order(order_in)
    return order.to_dict()


@router.put("/{order_id}")
async def update_order_status(
    order_id: str,
    data: OrderStatusUpdate,
    service: OrderService = Depends(get_order_service),
):
    return service.update_status(order_id, data.status).to_dict()


@router.delete("/{order_id}")
async def delete_order(order_id: str, service: OrderService = Depends(get_order_service)):
    service.delete_order(order_id)
    return {"success": True, "message": "the order is deleted"}
