"""
Hierarchy Service - CRUD generik untuk tabel hierarki bertingkat

Satu engine dipakai oleh dua keluarga tabel:
- catalog_hierarchy: categories -> subcategories -> positions (penempatan arsip)
- field_hierarchy: field_categories -> ... -> field_positions (static field)

Parent dan child setiap level ditentukan oleh urutan daftar level.
"""
import logging
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Sequence

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased

from app.database import get_db_context
from app.models import (
    Archive,
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
from app.utils.validators import parse_optional_int

logger = logging.getLogger(__name__)


@dataclass
class Dependent:
    """Tabel lain yang mereferensikan sebuah level"""
    model: Any
    column: str
    label: str
    on_delete: str = "restrict"  # "restrict" menolak delete, "detach" set NULL


@dataclass
class HierarchyLevel:
    key: str
    label: str
    plural: str
    model: Any
    parent_key: Optional[str] = None
    dependents: Sequence[Dependent] = field(default_factory=tuple)


class HierarchyService:
    """CRUD untuk satu keluarga tabel hierarki"""

    def __init__(self, name: str, levels: List[HierarchyLevel]):
        self.name = name
        self.levels = levels
        self._index = {level.key: i for i, level in enumerate(levels)}

    # === Level helpers ===

    def level(self, key: str) -> HierarchyLevel:
        return self.levels[self._index[key]]

    def parent_of(self, key: str) -> Optional[HierarchyLevel]:
        i = self._index[key]
        return self.levels[i - 1] if i > 0 else None

    def child_of(self, key: str) -> Optional[HierarchyLevel]:
        i = self._index[key]
        return self.levels[i + 1] if i + 1 < len(self.levels) else None

    def ancestors_of(self, key: str) -> List[HierarchyLevel]:
        """Ancestors dari yang terdekat ke root"""
        i = self._index[key]
        return list(reversed(self.levels[:i]))

    @staticmethod
    def _error(code: int, message: str) -> Dict[str, Any]:
        return {"success": False, "code": code, "message": message}

    # === Query helpers ===

    def _query_with_ancestors(self, db: Session, key: str):
        """
        Query node beserta nama setiap ancestor (LEFT JOIN berantai).

        Kolom tambahan diberi label ``<ancestor>_name`` dan ``<ancestor>_id``.
        """
        level = self.level(key)
        query = db.query(level.model)
        child_model, child_level = level.model, level
        for ancestor in self.ancestors_of(key):
            alias = aliased(ancestor.model)
            query = query.outerjoin(
                alias, getattr(child_model, child_level.parent_key) == alias.id
            ).add_columns(
                alias.id.label(f"{ancestor.key}_id"),
                alias.name.label(f"{ancestor.key}_name"),
            )
            child_model, child_level = alias, ancestor
        return query

    def _row_to_dict(self, key: str, row) -> Dict[str, Any]:
        if not self.ancestors_of(key):
            return row.to_dict()
        node, extras = row[0], row._mapping
        data = node.to_dict()
        for ancestor in self.ancestors_of(key):
            data[f"{ancestor.key}_name"] = extras[f"{ancestor.key}_name"]
        return data

    def _count(self, db: Session, model, column: str, value: int) -> int:
        return db.query(func.count(model.id)).filter(getattr(model, column) == value).scalar() or 0

    def _name_taken(self, db: Session, level: HierarchyLevel, name: str,
                    parent_id: Optional[int], exclude_id: Optional[int] = None) -> bool:
        query = db.query(level.model.id).filter(level.model.name == name)
        if level.parent_key:
            query = query.filter(getattr(level.model, level.parent_key) == parent_id)
        if exclude_id is not None:
            query = query.filter(level.model.id != exclude_id)
        return query.first() is not None

    def _resolve_parent(self, db: Session, key: str, raw_parent) -> Dict[str, Any]:
        """Validasi parent id untuk level non-root"""
        level = self.level(key)
        parent = self.parent_of(key)
        try:
            parent_id = parse_optional_int(raw_parent)
        except ValueError:
            return self._error(400, f"Invalid {parent.label} id")
        if parent_id is None:
            return self._error(400, f"{level.parent_key} is required")
        if not db.get(parent.model, parent_id):
            return self._error(404, f"{parent.label.capitalize()} not found")
        return {"success": True, "parent_id": parent_id}

    # === Operations ===

    def list_nodes(self, key: str, parent_id: Optional[int] = None) -> Dict[str, Any]:
        """Semua node pada level, atau hanya anak dari parent_id"""
        level = self.level(key)
        with get_db_context() as db:
            query = self._query_with_ancestors(db, key)
            if parent_id is not None and level.parent_key:
                parent = self.parent_of(key)
                if not db.get(parent.model, parent_id):
                    return self._error(404, f"{parent.label.capitalize()} not found")
                query = query.filter(getattr(level.model, level.parent_key) == parent_id)
            rows = query.order_by(level.model.name).all()
            return {"success": True, "data": [self._row_to_dict(key, row) for row in rows]}

    def get_node(self, key: str, node_id: int) -> Dict[str, Any]:
        level = self.level(key)
        with get_db_context() as db:
            row = self._query_with_ancestors(db, key).filter(level.model.id == node_id).first()
            if not row:
                return self._error(404, f"{level.label.capitalize()} not found")
            return {"success": True, "data": self._row_to_dict(key, row)}

    def create_node(self, key: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        level = self.level(key)
        name = (payload.get("name") or "").strip()
        if not name:
            return self._error(400, f"{level.label.capitalize()} name is required")

        with get_db_context() as db:
            try:
                parent_id = None
                if level.parent_key:
                    resolved = self._resolve_parent(db, key, payload.get(level.parent_key))
                    if not resolved["success"]:
                        return resolved
                    parent_id = resolved["parent_id"]

                if self._name_taken(db, level, name, parent_id):
                    return self._error(400, f"{level.label.capitalize()} with this name already exists")

                node = level.model(name=name, description=payload.get("description"))
                if level.parent_key:
                    setattr(node, level.parent_key, parent_id)
                db.add(node)
                db.commit()
                db.refresh(node)

                logger.info("[%s] Created %s #%s '%s'", self.name, level.label, node.id, name)
                return {
                    "success": True,
                    "message": f"{level.label.capitalize()} created successfully",
                    "data": node.to_dict()
                }
            except IntegrityError:
                db.rollback()
                return self._error(400, f"{level.label.capitalize()} with this name already exists")
            except Exception:
                db.rollback()
                logger.exception("[%s] Failed to create %s", self.name, level.label)
                return self._error(500, f"Server error while creating {level.label}")

    def update_node(self, key: str, node_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        level = self.level(key)
        with get_db_context() as db:
            try:
                node = db.get(level.model, node_id)
                if not node:
                    return self._error(404, f"{level.label.capitalize()} not found")

                name = node.name
                if "name" in payload:
                    name = (payload.get("name") or "").strip()
                if not name:
                    return self._error(400, f"{level.label.capitalize()} name is required")

                parent_id = None
                if level.parent_key:
                    raw_parent = payload.get(level.parent_key, getattr(node, level.parent_key))
                    resolved = self._resolve_parent(db, key, raw_parent)
                    if not resolved["success"]:
                        return resolved
                    parent_id = resolved["parent_id"]

                if self._name_taken(db, level, name, parent_id, exclude_id=node_id):
                    return self._error(400, f"{level.label.capitalize()} with this name already exists")

                node.name = name
                if "description" in payload:
                    node.description = payload.get("description")
                if level.parent_key:
                    setattr(node, level.parent_key, parent_id)
                db.commit()
                db.refresh(node)

                logger.info("[%s] Updated %s #%s", self.name, level.label, node_id)
                return {
                    "success": True,
                    "message": f"{level.label.capitalize()} updated successfully",
                    "data": node.to_dict()
                }
            except IntegrityError:
                db.rollback()
                return self._error(400, f"{level.label.capitalize()} with this name already exists")
            except Exception:
                db.rollback()
                logger.exception("[%s] Failed to update %s #%s", self.name, level.label, node_id)
                return self._error(500, f"Server error while updating {level.label}")

    def delete_node(self, key: str, node_id: int) -> Dict[str, Any]:
        """Hapus node; ditolak selama masih ada child atau dependent yang restrict"""
        level = self.level(key)
        child = self.child_of(key)
        with get_db_context() as db:
            try:
                node = db.get(level.model, node_id)
                if not node:
                    return self._error(404, f"{level.label.capitalize()} not found")

                if child and self._count(db, child.model, child.parent_key, node_id):
                    return self._error(
                        400, f"Cannot delete {level.label} with existing {child.plural}"
                    )

                for dependent in level.dependents:
                    if dependent.on_delete == "restrict":
                        if self._count(db, dependent.model, dependent.column, node_id):
                            return self._error(
                                400, f"Cannot delete {level.label} that is used by {dependent.label}"
                            )

                for dependent in level.dependents:
                    if dependent.on_delete == "detach":
                        column = getattr(dependent.model, dependent.column)
                        detached = db.query(dependent.model).filter(column == node_id).update(
                            {column: None}, synchronize_session=False
                        )
                        if detached:
                            logger.info(
                                "[%s] Detached %s %s from %s #%s",
                                self.name, detached, dependent.label, level.label, node_id
                            )

                db.delete(node)
                db.commit()

                logger.info("[%s] Deleted %s #%s", self.name, level.label, node_id)
                return {"success": True, "message": f"{level.label.capitalize()} deleted successfully"}
            except Exception:
                db.rollback()
                logger.exception("[%s] Failed to delete %s #%s", self.name, level.label, node_id)
                return self._error(500, f"Server error while deleting {level.label}")

    def get_path(self, key: str, node_id: int) -> Dict[str, Any]:
        """Rantai lengkap dari root sampai node (id dan nama setiap level)"""
        level = self.level(key)
        with get_db_context() as db:
            row = self._query_with_ancestors(db, key).filter(level.model.id == node_id).first()
            if not row:
                return self._error(404, f"{level.label.capitalize()} not found")

            node = row[0] if self.ancestors_of(key) else row
            extras = row._mapping if self.ancestors_of(key) else {}

            data = {}
            path = []
            for ancestor in reversed(self.ancestors_of(key)):
                ancestor_id = extras[f"{ancestor.key}_id"]
                ancestor_name = extras[f"{ancestor.key}_name"]
                data[f"{ancestor.key}_id"] = ancestor_id
                data[f"{ancestor.key}_name"] = ancestor_name
                path.append({"level": ancestor.key, "id": ancestor_id, "name": ancestor_name})
            data[f"{level.key}_id"] = node.id
            data[f"{level.key}_name"] = node.name
            path.append({"level": level.key, "id": node.id, "name": node.name})
            data["path"] = path
            return {"success": True, "data": data}

    def list_with_children(self, key: str) -> Dict[str, Any]:
        """Node pada level beserta daftar anak langsungnya"""
        level = self.level(key)
        child = self.child_of(key)
        result = self.list_nodes(key)
        if not child:
            return result

        with get_db_context() as db:
            children = db.query(child.model).order_by(child.model.name).all()
            grouped: Dict[int, List[Dict[str, Any]]] = {}
            for item in children:
                grouped.setdefault(getattr(item, child.parent_key), []).append(item.to_dict())

        for node in result["data"]:
            node[child.plural] = grouped.get(node["id"], [])
        return result


# Global instances
catalog_hierarchy = HierarchyService(
    "catalog",
    [
        HierarchyLevel(
            key="category",
            label="category",
            plural="categories",
            model=Category,
            dependents=(Dependent(Archive, "category_id", "archives"),),
        ),
        HierarchyLevel(
            key="subcategory",
            label="subcategory",
            plural="subcategories",
            model=Subcategory,
            parent_key="category_id",
            dependents=(Dependent(Archive, "subcategory_id", "archives"),),
        ),
        HierarchyLevel(
            key="position",
            label="position",
            plural="positions",
            model=Position,
            parent_key="subcategory_id",
            dependents=(Dependent(Archive, "position_id", "archives", on_delete="detach"),),
        ),
    ],
)

field_hierarchy = HierarchyService(
    "static-field",
    [
        HierarchyLevel(key="category", label="category", plural="categories", model=FieldCategory),
        HierarchyLevel(key="subcategory", label="subcategory", plural="subcategories",
                       model=FieldSubcategory, parent_key="category_id"),
        HierarchyLevel(key="location", label="location", plural="locations",
                       model=Location, parent_key="subcategory_id"),
        HierarchyLevel(key="cabinet", label="cabinet", plural="cabinets",
                       model=Cabinet, parent_key="location_id"),
        HierarchyLevel(key="shelf", label="shelf", plural="shelves",
                       model=Shelf, parent_key="cabinet_id"),
        HierarchyLevel(key="position", label="position", plural="positions",
                       model=FieldPosition, parent_key="shelf_id"),
    ],
)
