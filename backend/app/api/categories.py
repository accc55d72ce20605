"""
Categories API Endpoints
"""
from fastapi import APIRouter, Depends

from app.api.dependencies import get_catalog_service
from app.domain.catalog import CategoryCreate, CategoryUpdate
from app.services.catalog_service import CatalogService

router = APIRouter()


@router.get("")
async def get_categories(service: CatalogService = Depends(get_catalog_service)):
    return [category.to_dict() for category in service.list_categories()]


@router.get("/get/count")
async def get_category_count(service: CatalogService = Depends(get_catalog_service)):
    return {"categoryCount": service.count_categories()}


@router.get("/{category_id}")
async def get_category(category_id: str, service: CatalogService = Depends(get_catalog_service)):
    return service.get_category(category_id).to_dict()


@router.post("")
async def create_category(data: CategoryCreate, service: CatalogService = Depends(get_catalog_service)):
    return service.create_category(data).to_dict()


@router.put("/{category_id}")
async def update_category(
    category_id: str,
    data: CategoryUpdate,
    service: CatalogService = Depends(get_catalog_service),
):
    return service.update_category(category_id, data).to_dict()


@router.delete("/{category_id}")
async def delete_category(category_id: str, service: CatalogService = Depends(get_catalog_service)):
    service.delete_category(category_id)
    return {"success": True, "message": "the category is deleted"}
