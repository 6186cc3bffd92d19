"""
Authentication Service - Login, Token Management, Default Admin
"""
import logging
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from passlib.context import CryptContext
from jose import JWTError, jwt

from app.config import get_settings
from app.database import get_db_context
from app.models import Admin

logger = logging.getLogger(__name__)
settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class AuthService:
    """Service untuk authentication admin"""

    @staticmethod
    def _error(code: int, message: str) -> Dict[str, Any]:
        return {"success": False, "code": code, "message": message}

    def hash_password(self, password: str) -> str:
        """Hash password dengan bcrypt"""
        return pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verifikasi password"""
        try:
            return pwd_context.verify(plain_password, hashed_password)
        except ValueError:
            # Hash tersimpan bukan format bcrypt
            return False

    def create_access_token(self, data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Buat JWT access token"""
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.utcnow() + expires_delta
        else:
            expire = datetime.utcnow() + timedelta(minutes=settings.jwt_expires_minutes)
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)

    def decode_token(self, token: str) -> Optional[dict]:
        """Decode JWT token; None jika tidak valid atau expired"""
        try:
            return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        except JWTError:
            return None

    def login(self, username: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        """Login admin, update last_login dan return token"""
        if not username or not password:
            return self._error(400, "Username and password are required")

        with get_db_context() as db:
            try:
                admin = db.query(Admin).filter(Admin.username == username).first()
                if not admin or not admin.is_active or not self.verify_password(password, admin.hashed_password):
                    logger.warning("Failed login attempt for '%s'", username)
                    return self._error(401, "Invalid credentials")

                admin.last_login = datetime.utcnow()
                db.commit()
                db.refresh(admin)

                token = self.create_access_token(
                    data={"id": admin.id, "username": admin.username, "isAdmin": True}
                )
                logger.info("Admin '%s' logged in", username)
                return {
                    "success": True,
                    "token": token,
                    "token_type": "bearer",
                    "user": admin.to_dict()
                }
            except Exception:
                db.rollback()
                logger.exception("Login failed for '%s'", username)
                return self._error(500, "Server error during login")

    def get_profile(self, admin_id: int) -> Dict[str, Any]:
        with get_db_context() as db:
            admin = db.get(Admin, admin_id)
            if not admin:
                return self._error(404, "User not found")
            return {"success": True, "user": admin.to_dict()}

    def create_default_admin(self, username: Optional[str] = None, password: Optional[str] = None) -> bool:
        """Buat admin default jika belum ada"""
        username = username or settings.default_admin_username
        password = password or settings.default_admin_password
        with get_db_context() as db:
            admin = db.query(Admin).filter(Admin.username == username).first()
            if admin:
                return False
            db.add(Admin(
                username=username,
                name="Administrator",
                hashed_password=self.hash_password(password),
                is_active=True
            ))
            db.commit()
            logger.info("Default admin created: %s", username)
            return True


# Global instance
auth_service = AuthService()
