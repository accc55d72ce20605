"""
Products API Endpoints
Handles product catalog management and queries

Reads are public; writes need an admin token (see AccessGateMiddleware).
Create/update take multipart forms so the image can travel with the fields.

Author: TM3
Date: 2026-10-19
"""
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from app.api.dependencies import get_catalog_service, request_base_url
from app.core.identifiers import parse_id_list
from app.domain.catalog import ProductCreate, ProductUpdate
from app.services.catalog_service import CatalogService

router = APIRouter()


@router.get("")
async def get_products(
    categories: Optional[str] = Query(None, description="Comma-separated category ids to filter by"),
    service: CatalogService = Depends(get_catalog_service),
):
    """
    Get all products, optionally only those in the given categories

    Example: /api/v1/products?categories=<id1>,<id2>
    """
    category_ids = parse_id_list(categories, "Category") if categories else None
    products = service.list_products(category_ids)
    return [product.to_dict() for product in products]


@router.get("/get/count")
async def get_product_count(service: CatalogService = Depends(get_catalog_service)):
    return {"productCount": service.count_products()}


@router.get("/get/featured/{count}")
async def get_featured_products(count: int, service: CatalogService = Depends(get_catalog_service)):
    """Featured products, at most `count` of them"""
    return [product.to_dict() for product in service.featured_products(count)]


@router.get("/{product_id}")
async def get_product(product_id: str, service: CatalogService = Depends(get_catalog_service)):
    return service.get_product(product_id).to_dict()


@router.post("")
async def create_product(
    name: str = Form(..., min_length=1),
    category: str = Form(...),
    count_in_stock: int = Form(..., alias="countInStock", ge=0),
    description: str = Form(""),
    rich_description: str = Form("", alias="richDescription"),
    brand: str = Form(""),
    price: Decimal = Form(Decimal("0"), ge=0),
    rating: Decimal = Form(Decimal("0"), ge=0),
    num_reviews: int = Form(0, alias="numReviews", ge=0),
    is_featured: bool = Form(False, alias="isFeatured"),
    image: Optional[UploadFile] = File(None),
    base_url: str = Depends(request_base_url),
    service: CatalogService = Depends(get_catalog_service),
):
    """
    Create a product (multipart form)

    Requires an existing category and an image file in the `image` field.
    """
    data = ProductCreate(
        name=name,
        description=description,
        rich_description=rich_description,
        brand=brand,
        price=price,
        category=category,
        count_in_stock=count_in_stock,
        rating=rating,
        num_reviews=num_reviews,
        is_featured=is_featured,
    )
    product = await service.create_product(data, image, base_url)
    return product.to_dict()


@router.put("/gallery-images/{product_id}")
async def update_gallery_images(
    product_id: str,
    images: Optional[List[UploadFile]] = File(None),
    base_url: str = Depends(request_base_url),
    service: CatalogService = Depends(get_catalog_service),
):
    """Replace the product gallery with the uploaded `images` (max 10)"""
    product = await service.update_gallery(product_id, images or [], base_url)
    return product.to_dict()


@router.put("/{product_id}")
async def update_product(
    product_id: str,
    category: str = Form(...),
    name: Optional[str] = Form(None, min_length=1),
    description: Optional[str] = Form(None),
    rich_description: Optional[str] = Form(None, alias="richDescription"),
    brand: Optional[str] = Form(None),
    price: Optional[Decimal] = Form(None, ge=0),
    count_in_stock: Optional[int] = Form(None, alias="countInStock", ge=0),
    rating: Optional[Decimal] = Form(None, ge=0),
    num_reviews: Optional[int] = Form(None, alias="numReviews", ge=0),
    is_featured: Optional[bool] = Form(None, alias="isFeatured"),
    image: Optional[UploadFile] = File(None),
    base_url: str = Depends(request_base_url),
    service: CatalogService = Depends(get_catalog_service),
):
    """Update a product; omitted fields and the image are kept as stored"""
    data = ProductUpdate(
        name=name,
        description=description,
        rich_description=rich_description,
        brand=brand,
        price=price,
        category=category,
        count_in_stock=count_in_stock,
        rating=rating,
        num_reviews=num_reviews,
        is_featured=is_featured,
    )
    product = await service.update_product(product_id, data, image, base_url)
    return product.to_dict()


@router.delete("/{product_id}")
async def delete_product(product_id: str, service: CatalogService = Depends(get_catalog_service)):
    service.delete_product(product_id)
    return {"success": True, "message": "the product is deleted"}
