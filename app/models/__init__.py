"""
Models package for Arsip & Surat BIAK
"""
from app.database import Base
from app.models.user_models import Admin
from app.models.hierarchy_models import (
    Category,
    Subcategory,
    Position,
    FieldCategory,
    FieldSubcategory,
    Location,
    Cabinet,
    Shelf,
    FieldPosition,
)
from app.models.archive_models import Archive
from app.models.letter_models import (
    Letter,
    LetterDetails,
    LetterStatusHistory,
    LetterStatus,
    LetterType,
)
from app.models.education_models import EducationLevel, Faculty, Program

__all__ = [
    "Base",
    "Admin",
    "Category",
    "Subcategory",
    "Position",
    "FieldCategory",
    "FieldSubcategory",
    "Location",
    "Cabinet",
    "Shelf",
    "FieldPosition",
    "Archive",
    "Letter",
    "LetterDetails",
    "LetterStatusHistory",
    "LetterStatus",
    "LetterType",
    "EducationLevel",
    "Faculty",
    "Program",
]
