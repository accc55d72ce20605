"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities.
These models enforce type safety and validation across the application.
"""
from app.domain.catalog import Category, CategoryCreate, CategoryUpdate, Product, ProductCreate, ProductUpdate
from app.domain.order import (
    CartLine,
    CheckoutLine,
    Order,
    OrderCreate,
    OrderItem,
    OrderStatusUpdate,
    ShippingInfo,
    TotalSales,
    UserSummary,
)
from app.domain.user import LoginRequest, LoginResponse, User, UserCreate, UserRecord, UserUpdate

__all__ = [
    'Category', 'CategoryCreate', 'CategoryUpdate',
    'Product', 'ProductCreate', 'ProductUpdate',
    'CartLine', 'CheckoutLine', 'Order', 'OrderCreate', 'OrderItem', 'OrderStatusUpdate',
    'ShippingInfo', 'TotalSales', 'UserSummary',
    'LoginRequest', 'LoginResponse', 'User', 'UserCreate', 'UserRecord', 'UserUpdate',
]
