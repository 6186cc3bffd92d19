"""
SQLAlchemy Models untuk data referensi pendidikan
"""
from sqlalchemy import Column, Integer, String, ForeignKey

from app.database import Base


class EducationLevel(Base):
    """Jenjang pendidikan (D3, S1, ...)"""
    __tablename__ = "education_levels"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), unique=True, nullable=False)

    def to_dict(self):
        return {"id": self.id, "name": self.name}


class Faculty(Base):
    """Fakultas"""
    __tablename__ = "faculties"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)

    def to_dict(self):
        return {"id": self.id, "name": self.name}


class Program(Base):
    """Program studi"""
    __tablename__ = "programs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    faculty_id = Column(Integer, ForeignKey("faculties.id"), nullable=True, index=True)
    level_id = Column(Integer, ForeignKey("education_levels.id"), nullable=True, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "faculty_id": self.faculty_id,
            "level_id": self.level_id
        }
