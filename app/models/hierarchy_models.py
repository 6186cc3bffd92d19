"""
SQLAlchemy Models untuk hierarki penempatan arsip

Dua keluarga tabel:
- katalog arsip (3 level): categories -> subcategories -> positions
- static field (6 level): field_categories -> field_subcategories ->
  locations -> cabinets -> shelves -> field_positions
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, UniqueConstraint

from app.database import Base


class HierarchyNodeMixin:
    """Kolom bersama untuk setiap node hierarki"""

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        result = {}
        for column in self.__table__.columns:
            value = getattr(self, column.name)
            if isinstance(value, datetime):
                value = value.isoformat()
            result[column.name] = value
        return result


# === Katalog arsip ===

class Category(HierarchyNodeMixin, Base):
    __tablename__ = "categories"
    __table_args__ = (UniqueConstraint("name", name="uq_categories_name"),)


class Subcategory(HierarchyNodeMixin, Base):
    __tablename__ = "subcategories"
    __table_args__ = (UniqueConstraint("category_id", "name", name="uq_subcategories_category_name"),)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)


class Position(HierarchyNodeMixin, Base):
    __tablename__ = "positions"
    __table_args__ = (UniqueConstraint("subcategory_id", "name", name="uq_positions_subcategory_name"),)

    subcategory_id = Column(Integer, ForeignKey("subcategories.id"), nullable=False, index=True)


# === Static field content management ===

class FieldCategory(HierarchyNodeMixin, Base):
    __tablename__ = "field_categories"
    __table_args__ = (UniqueConstraint("name", name="uq_field_categories_name"),)


class FieldSubcategory(HierarchyNodeMixin, Base):
    __tablename__ = "field_subcategories"
    __table_args__ = (UniqueConstraint("category_id", "name", name="uq_field_subcategories_category_name"),)

    category_id = Column(Integer, ForeignKey("field_categories.id"), nullable=False, index=True)


class Location(HierarchyNodeMixin, Base):
    __tablename__ = "locations"
    __table_args__ = (UniqueConstraint("subcategory_id", "name", name="uq_locations_subcategory_name"),)

    subcategory_id = Column(Integer, ForeignKey("field_subcategories.id"), nullable=False, index=True)


class Cabinet(HierarchyNodeMixin, Base):
    __tablename__ = "cabinets"
    __table_args__ = (UniqueConstraint("location_id", "name", name="uq_cabinets_location_name"),)

    location_id = Column(Integer, ForeignKey("locations.id"), nullable=False, index=True)


class Shelf(HierarchyNodeMixin, Base):
    __tablename__ = "shelves"
    __table_args__ = (UniqueConstraint("cabinet_id", "name", name="uq_shelves_cabinet_name"),)

    cabinet_id = Column(Integer, ForeignKey("cabinets.id"), nullable=False, index=True)


class FieldPosition(HierarchyNodeMixin, Base):
    __tablename__ = "field_positions"
    __table_args__ = (UniqueConstraint("shelf_id", "name", name="uq_field_positions_shelf_name"),)

    shelf_id = Column(Integer, ForeignKey("shelves.id"), nullable=False, index=True)
