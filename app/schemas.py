"""
Pydantic Schemas untuk Arsip & Surat BIAK

Field wajib secara domain sengaja dibuat Optional: validasinya ada di
service sehingga field yang kosong dibalas 400, bukan 422.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Any, List


# === Auth Schemas ===

class LoginRequest(BaseModel):
    """Schema untuk login admin"""
    username: Optional[str] = None
    password: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={"example": {"username": "admin", "password": "admin123"}}
    )


# === Hierarchy Schemas ===

class HierarchyNodeBody(BaseModel):
    """
    Body create/update node hierarki.

    Parent dikirim dengan nama kolomnya (category_id, subcategory_id,
    location_id, cabinet_id, shelf_id) sehingga field tambahan diizinkan.
    """
    name: Optional[str] = Field(None, description="Nama node")
    description: Optional[str] = Field(None, description="Keterangan (opsional)")

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "example": {"name": "Rak A", "description": "Rak dekat pintu", "cabinet_id": 1}
        }
    )


# === Letter Schemas ===

class LetterStatusUpdate(BaseModel):
    """Schema untuk update status surat"""
    status: Optional[str] = Field(None, description="Status baru (bebas, atau salah satu status baku)")
    note: Optional[str] = Field(None, description="Catatan")

    model_config = ConfigDict(
        json_schema_extra={"example": {"status": "Diteruskan ke Fakultas", "note": "Diantar kurir"}}
    )


class HistoryItemUpdate(BaseModel):
    """Schema untuk edit satu baris riwayat status"""
    status: Optional[str] = None
    note: Optional[str] = None


class RekapRow(BaseModel):
    period: str
    total: int


class RekapResponse(BaseModel):
    """Response rekap surat per periode"""
    success: bool
    group_by: str
    start_date: str
    end_date: str
    data: List[RekapRow]


# === Education Schemas ===

class NameBody(BaseModel):
    """Body untuk jenjang dan fakultas"""
    name: Optional[str] = None


class ProgramBody(BaseModel):
    """Body untuk program studi"""
    name: Optional[str] = None
    faculty_id: Optional[Any] = None
    level_id: Optional[Any] = None


# === Generic Responses ===

class MessageResponse(BaseModel):
    """Response sederhana dengan message"""
    success: bool
    message: str
