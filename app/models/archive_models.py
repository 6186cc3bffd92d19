"""
SQLAlchemy Model untuk arsip fisik
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Text

from app.database import Base


class Archive(Base):
    """Model untuk tabel archives"""
    __tablename__ = "archives"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=True, index=True)
    location = Column(String(255), nullable=True)  # Keterangan lokasi bebas
    image = Column(String(500), nullable=True)  # Path relatif di UPLOAD_DIR
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)
    subcategory_id = Column(Integer, ForeignKey("subcategories.id"), nullable=True, index=True)
    position_id = Column(Integer, ForeignKey("positions.id"), nullable=True, index=True)
    created_by = Column(Integer, ForeignKey("admin.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "date": self.date.isoformat() if self.date else None,
            "location": self.location,
            "image": self.image,
            "image_url": f"/uploads/{self.image}" if self.image else None,
            "category_id": self.category_id,
            "subcategory_id": self.subcategory_id,
            "position_id": self.position_id,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None
        }
