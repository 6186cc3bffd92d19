"""
Storage Service - simpan dan hapus file upload (gambar arsip, lampiran surat)
"""
import logging
import os
import re
import uuid
from typing import Optional, Dict, Any

from app.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
DOCUMENT_EXTENSIONS = IMAGE_EXTENSIONS | {".pdf", ".doc", ".docx"}


class StorageService:
    """File disimpan di ``upload_dir/<subdir>/<uuid>_<nama>``; DB hanya menyimpan path relatif"""

    def __init__(self, upload_dir: str, max_bytes: int):
        self.upload_dir = upload_dir
        self.max_bytes = max_bytes

    def ensure_dir(self, subdir: str = "") -> str:
        path = os.path.join(self.upload_dir, subdir)
        os.makedirs(path, exist_ok=True)
        return path

    @staticmethod
    def _safe_name(filename: str) -> str:
        base = os.path.basename(filename or "")
        return re.sub(r"[^A-Za-z0-9._-]", "_", base) or "file"

    def validate(self, filename: str, content: bytes, allowed_extensions=DOCUMENT_EXTENSIONS) -> Optional[str]:
        """Return pesan error, atau None jika file valid"""
        if not filename:
            return "Invalid file name"
        ext = os.path.splitext(filename)[1].lower()
        if ext not in allowed_extensions:
            return f"File type {ext or '(none)'} is not allowed. Allowed: {', '.join(sorted(allowed_extensions))}"
        if len(content) > self.max_bytes:
            return f"File exceeds maximum size of {self.max_bytes // (1024 * 1024)} MB"
        return None

    def save(self, subdir: str, filename: str, content: bytes) -> str:
        """Tulis file dan kembalikan path relatif terhadap upload_dir"""
        self.ensure_dir(subdir)
        stored_name = f"{uuid.uuid4().hex}_{self._safe_name(filename)}"
        relative_path = f"{subdir}/{stored_name}" if subdir else stored_name
        with open(os.path.join(self.upload_dir, relative_path), "wb") as f:
            f.write(content)
        logger.info("Stored upload %s (%d bytes)", relative_path, len(content))
        return relative_path

    def delete(self, relative_path: Optional[str]) -> bool:
        """Hapus file; file yang sudah tidak ada di disk tidak dianggap error"""
        if not relative_path:
            return False
        full_path = os.path.join(self.upload_dir, relative_path)
        if not os.path.isfile(full_path):
            logger.warning("Upload %s not found on disk, skipping delete", relative_path)
            return False
        try:
            os.remove(full_path)
            logger.info("Deleted upload %s", relative_path)
            return True
        except OSError as e:
            logger.error("Could not delete upload %s: %s", relative_path, e)
            return False

    def info(self) -> Dict[str, Any]:
        return {"upload_dir": self.upload_dir, "max_upload_mb": self.max_bytes // (1024 * 1024)}


# Global instance
storage_service = StorageService(settings.upload_dir, settings.max_upload_mb * 1024 * 1024)
