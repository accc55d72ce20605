"""
FastAPI dependencies shared by the routers

Services are built per request from the Database and Settings created once
in app.main.create_app(); tests override these functions.
"""
from fastapi import Request

from app.core.config import Settings
from app.core.database import Database
from app.services.catalog_service import CatalogService
from app.services.identity_service import IdentityService
from app.services.order_service import OrderService


def get_settings_dependency(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_catalog_service(request: Request) -> CatalogService:
    return CatalogService(get_database(request), get_settings_dependency(request))


def get_order_service(request: Request) -> OrderService:
    return OrderService(get_database(request), get_settings_dependency(request))


def get_identity_service(request: Request) -> IdentityService:
    settings = get_settings_dependency(request)
    return IdentityService(get_database(request), settings, pwd_context=request.app.state.pwd_context)


def request_base_url(request: Request) -> str:
    """scheme://host of the incoming request, used for upload URLs"""
    return str(request.base_url).rstrip("/")
