"""
Authentication routes
"""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_auth_service, get_current_user
from app.schemas.user import LoginRequest, RegisterRequest
from app.services.auth_service import AuthService
from app.utils.responses import success_response
from app.utils.security import CurrentUser

router = APIRouter()

@router.post("/register")
async def register(
    data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Register a new user"""
    result = await auth_service.register(data)
    return success_response(
        message="User registered successfully",
        data=result,
        status_code=201
    )

@router.post("/login")
async def login(
    data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Log in with email and password"""
    result = await auth_service.login(data)
    return success_response(message="Login successful", data=result)

@router.get("/me")
async def me(current_user: CurrentUser = Depends(get_current_user)):
    """Return the authenticated identity"""
    return success_response(
        message="User profile retrieved successfully",
        data={
            "id": current_user.id,
            "email": current_user.email,
            "role": current_user.role.value
        }
    )

@router.post("/logout")
async def logout(
    current_user: CurrentUser = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Revoke the caller's sessions at the identity provider"""
    await auth_service.logout(current_user)
    return success_response(message="Logged out successfully")
