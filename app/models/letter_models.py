"""
SQLAlchemy Models untuk pelacakan surat BIAK
"""
import enum
from datetime import datetime
from typing import Optional
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Text

from app.database import Base


class LetterType(str, enum.Enum):
    BIASA = "biasa"
    PENGGANTI_IJAZAH = "pengganti_ijazah"
    KETERANGAN = "keterangan"


class LetterStatus(str, enum.Enum):
    """Status baku yang ditawarkan di UI; status lain tetap boleh (custom)"""
    DITERUSKAN_KE_FAKULTAS = "Diteruskan ke Fakultas"
    DITERUSKAN_KE_REKTOR = "Diteruskan ke Rektor"
    DITERUSKAN_KE_WAKIL = "Diteruskan ke Wakil"
    SELESAI = "Selesai"


KNOWN_STATUSES = {s.value for s in LetterStatus}

DETAIL_FIELDS = (
    "nim",
    "nama",
    "jenjang_pendidikan",
    "fakultas",
    "program_studi",
    "tanggal_lulus",
    "no_seri",
    "nirl",
    "telepon",
)


def status_kind(status: Optional[str]) -> Optional[str]:
    if not status:
        return None
    return "known" if status in KNOWN_STATUSES else "custom"


class Letter(Base):
    """Model untuk tabel letters"""
    __tablename__ = "letters"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    date = Column(Date, nullable=False, index=True)
    sender = Column(String(255), nullable=False)
    recipient = Column(String(255), nullable=False)
    subject = Column(String(500), nullable=False)
    letter_type = Column(String(50), nullable=False, default=LetterType.BIASA.value)
    current_status = Column(String(255), nullable=True, index=True)
    file_path = Column(String(500), nullable=True)
    created_by = Column(Integer, ForeignKey("admin.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "date": self.date.isoformat() if self.date else None,
            "sender": self.sender,
            "recipient": self.recipient,
            "subject": self.subject,
            "letter_type": self.letter_type,
            "current_status": self.current_status,
            "status_kind": status_kind(self.current_status),
            "file_path": self.file_path,
            "file_url": f"/uploads/{self.file_path}" if self.file_path else None,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None
        }


class LetterDetails(Base):
    """Detail tambahan untuk surat pengganti ijazah / keterangan (1:1)"""
    __tablename__ = "letter_details"

    id = Column(Integer, primary_key=True, autoincrement=True)
    letter_id = Column(Integer, ForeignKey("letters.id"), nullable=False, unique=True)
    nim = Column(String(50), nullable=True)
    nama = Column(String(255), nullable=True)
    jenjang_pendidikan = Column(String(50), nullable=True)
    fakultas = Column(String(100), nullable=True)
    program_studi = Column(String(255), nullable=True)
    tanggal_lulus = Column(Date, nullable=True)
    no_seri = Column(String(100), nullable=True)
    nirl = Column(String(100), nullable=True)
    telepon = Column(String(50), nullable=True)

    def to_dict(self):
        result = {field: getattr(self, field) for field in DETAIL_FIELDS}
        if self.tanggal_lulus:
            result["tanggal_lulus"] = self.tanggal_lulus.isoformat()
        return result


class LetterStatusHistory(Base):
    """Riwayat perubahan status surat"""
    __tablename__ = "letter_status_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    letter_id = Column(Integer, ForeignKey("letters.id"), nullable=False, index=True)
    status = Column(String(255), nullable=False)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "letter_id": self.letter_id,
            "status": self.status,
            "status_kind": status_kind(self.status),
            "note": self.note,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }
