"""
User profile routes
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_current_user, get_profile_service, require_admin
from app.core.config import settings
from app.models import Role
from app.schemas.user import AdminProfileUpdate, ProfileQuery, ProfileUpdate
from app.services.profile_service import ProfileService
from app.utils.responses import page_pagination, success_response
from app.utils.security import CurrentUser

router = APIRouter()

@router.get("/me")
async def get_my_profile(
    current_user: CurrentUser = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service)
):
    """Get the caller's profile"""
    profile = await profile_service.get_profile(current_user.id, current_user)
    return success_response(message="Profile retrieved successfully", data=profile)

@router.put("/me")
async def update_my_profile(
    data: ProfileUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service)
):
    """Rename the caller's profile"""
    profile = await profile_service.update_own_profile(current_user, data)
    return success_response(message="Profile updated successfully", data=profile)

@router.get("")
async def list_profiles(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    role: Optional[Role] = Query(None),
    search: Optional[str] = Query(None),
    current_user: CurrentUser = Depends(require_admin),
    profile_service: ProfileService = Depends(get_profile_service)
):
    """List profiles (admin only)"""
    query = ProfileQuery(page=page, limit=limit, role=role, search=search)
    profiles, total = await profile_service.list_profiles(query, current_user)
    return success_response(
        message="Profiles retrieved successfully",
        data=profiles,
        pagination=page_pagination(total, page, limit)
    )

@router.get("/{user_id}")
async def get_user_profile(
    user_id: str,
    current_user: CurrentUser = Depends(require_admin),
    profile_service: ProfileService = Depends(get_profile_service)
):
    """Get any user's profile (admin only)"""
    profile = await profile_service.get_profile(user_id, current_user)
    return success_response(message="Profile retrieved successfully", data=profile)

@router.put("/{user_id}")
async def update_user_profile(
    user_id: str,
    data: AdminProfileUpdate,
    current_user: CurrentUser = Depends(require_admin),
    profile_service: ProfileService = Depends(get_profile_service)
):
    """Update any user's name and role (admin only)"""
    profile = await profile_service.update_profile(user_id, data, current_user)
    return success_response(message="Profile updated successfully", data=profile)
