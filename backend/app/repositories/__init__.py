"""
Repository Layer - Data Access

This layer handles all database queries and returns domain models.
Repositories abstract away SQL details from business logic.
"""
from app.repositories.category_repository import CategoryRepository
from app.repositories.order_repository import OrderRepository, PricedLine
from app.repositories.product_repository import ProductRepository
from app.repositories.user_repository import UserRepository

__all__ = [
    'CategoryRepository',
    'OrderRepository',
    'PricedLine',
    'ProductRepository',
    'UserRepository',
]
