"""
Catalog Domain Models

Category and Product entities plus the input schemas used to create and
update them. Product.price is the single source of truth for pricing at
order time.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from app.domain.base import DomainModel, Money


class Category(DomainModel):
    """Product category (e.g. "Electronics" with an icon name and a hex color)"""
    id: UUID
    name: str
    icon: Optional[str] = None
    color: Optional[str] = None


class CategoryCreate(DomainModel):
    name: str = Field(..., min_length=1)
    icon: Optional[str] = None
    color: Optional[str] = None


class CategoryUpdate(DomainModel):
    """Fields not supplied keep their stored value"""
    name: Optional[str] = Field(None, min_length=1)
    icon: Optional[str] = None
    color: Optional[str] = None


class Product(DomainModel):
    """
    Product domain model - represents a product in our catalog

    Fields:
        id: Product identifier
        name / description / rich_description / brand: Display data
        image: Fully qualified URL of the main image
        images: Gallery image URLs, in display order
        price: Unit price
        category_id: Category the product belongs to
        category: Populated category (reads only)
        count_in_stock: Units available (never decremented by orders)
        rating / num_reviews: Review summary
        is_featured: Shown on the storefront home page
        date_created: Creation timestamp
    """
    id: UUID
    name: str
    description: str = ""
    rich_description: str = ""
    image: str = ""
    images: List[str] = Field(default_factory=list)
    brand: str = ""
    price: Money = Decimal("0")
    category_id: UUID
    category: Optional[Category] = None
    count_in_stock: int = Field(..., ge=0)
    rating: Money = Decimal("0")
    num_reviews: int = 0
    is_featured: bool = False
    date_created: Optional[datetime] = None


class ProductCreate(DomainModel):
    """Schema for creating a new product (image arrives separately as an upload)"""
    name: str = Field(..., min_length=1)
    description: str = ""
    rich_description: str = ""
    brand: str = ""
    price: Decimal = Field(Decimal("0"), ge=0)
    category: str
    count_in_stock: int = Field(..., ge=0)
    rating: Decimal = Field(Decimal("0"), ge=0)
    num_reviews: int = Field(0, ge=0)
    is_featured: bool = False


class ProductUpdate(DomainModel):
    """Schema for updating a product; category is always required"""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    rich_description: Optional[str] = None
    brand: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    category: str
    count_in_stock: Optional[int] = Field(None, ge=0)
    rating: Optional[Decimal] = Field(None, ge=0)
    num_reviews: Optional[int] = Field(None, ge=0)
    is_featured: Optional[bool] = None
