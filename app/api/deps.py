"""
Dependencies bersama untuk routes: autentikasi dan konversi hasil service
"""
from typing import Optional, Dict, Any

from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.services.auth_service import auth_service

security = HTTPBearer(auto_error=False)


def _user_from_token(token: str) -> Optional[Dict[str, Any]]:
    payload = auth_service.decode_token(token)
    if not payload or payload.get("id") is None:
        return None
    return {
        "id": payload["id"],
        "username": payload.get("username"),
        "is_admin": bool(payload.get("isAdmin"))
    }


async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)):
    """Dependency untuk mendapatkan current user dari token"""
    if not credentials:
        raise HTTPException(status_code=401, detail="No token provided")

    user = _user_from_token(credentials.credentials)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return user


async def get_optional_user(credentials: HTTPAuthorizationCredentials = Depends(security)):
    """Dependency untuk mendapatkan user (optional, tidak error jika tidak ada)"""
    if not credentials:
        return None
    return _user_from_token(credentials.credentials)


async def require_admin(current_user: dict = Depends(get_current_user)):
    """Hanya admin yang boleh POST/PUT/DELETE"""
    if not current_user["is_admin"]:
        raise HTTPException(status_code=403, detail="Forbidden: Admin access required")
    return current_user


def raise_for_error(result: Dict[str, Any]) -> Dict[str, Any]:
    """Ubah hasil error dari service menjadi HTTPException"""
    if not result.get("success", False):
        raise HTTPException(status_code=result.get("code", 400), detail=result.get("message", "Request failed"))
    return result
