"""
Users API Endpoints
User administration plus the public /login and /register routes
"""
from fastapi import APIRouter, Depends

from app.api.dependencies import get_identity_service
from app.domain.user import LoginRequest, UserCreate, UserUpdate
from app.services.identity_service import IdentityService

router = APIRouter()


@router.get("")
async def get_users(service: IdentityService = Depends(get_identity_service)):
    return [user.to_dict() for user in service.list_users()]


@router.get("/get/count")
async def get_user_count(service: IdentityService = Depends(get_identity_service)):
    return {"userCount": service.count_users()}


@router.post("/login")
async def login(credentials: LoginRequest, service: IdentityService = Depends(get_identity_service)):
    """
    Exchange email + password for an access token

    Returns:
        {"user": "<email>", "token": "<jwt>"}
    """
    return service.login(credentials.email, credentials.password).to_dict()


@router.post("/register")
async def register(data: UserCreate, service: IdentityService = Depends(get_identity_service)):
    """Public sign-up; isAdmin in the body is ignored"""
    return service.register(data).to_dict()


@router.get("/{user_id}")
async def get_user(user_id: str, service: IdentityService = Depends(get_identity_service)):
    return service.get_user(user_id).to_dict()


@router.post("")
async def create_user(data: UserCreate, service: IdentityService = Depends(get_identity_service)):
    return service.create_user(data).to_dict()


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    data: UserUpdate,
    service: IdentityService = Depends(get_identity_service),
):
    return service.update_user(user_id, data).to_dict()


@router.delete("/{user_id}")
async def delete_user(user_id: str, service: IdentityService = Depends(get_identity_service)):
    service.delete_user(user_id)
    return {"success": True, "message": "the user is deleted"}
