"""
API Routes untuk Authentication
"""
from fastapi import APIRouter, Depends

from app.api.deps import get_current_user, raise_for_error
from app.schemas import LoginRequest
from app.services.auth_service import auth_service

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/login", summary="Login")
async def login(data: LoginRequest):
    """
    Login admin dan dapatkan access token.

    - **username**: Username
    - **password**: Password

    Token berisi `{id, username, isAdmin}` dan berlaku sesuai JWT_EXPIRES_MINUTES.
    """
    return raise_for_error(auth_service.login(data.username, data.password))


@router.get("/profile", summary="Get Profile")
async def get_profile(current_user: dict = Depends(get_current_user)):
    """
    Profil admin yang sedang login.

    Requires: Bearer token di header Authorization
    """
    return raise_for_error(auth_service.get_profile(current_user["id"]))


@router.get("/verify", summary="Verify Token")
async def verify_token(current_user: dict = Depends(get_current_user)):
    """Verify token dan kembalikan kapabilitas yang boleh dipakai client"""
    return {
        "success": True,
        "status": "valid",
        "user": current_user,
        "capabilities": {
            "can_view": True,
            "can_manage": current_user["is_admin"]
        }
    }
