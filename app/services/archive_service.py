"""
Archive Service - CRUD arsip fisik dengan katalog kategori/subkategori/posisi
"""
import logging
import math
from typing import Optional, Dict, Any, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.database import get_db_context
from app.models import Admin, Archive, Category, Subcategory, Position
from app.services.storage_service import storage_service, IMAGE_EXTENSIONS
from app.utils.validators import parse_date, parse_optional_int, is_truthy

logger = logging.getLogger(__name__)

UPLOAD_SUBDIR = "archives"
SORTABLE_COLUMNS = {
    "created_at": Archive.created_at,
    "updated_at": Archive.updated_at,
    "date": Archive.date,
    "title": Archive.title,
}


class ArchiveError(Exception):
    """Validasi gagal di tengah transaksi; membawa status code untuk response"""

    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class ArchiveService:
    """Service untuk operasi arsip"""

    @staticmethod
    def _error(code: int, message: str) -> Dict[str, Any]:
        return {"success": False, "code": code, "message": message}

    # === Query helpers ===

    def _base_query(self, db: Session):
        return (
            db.query(Archive)
            .outerjoin(Category, Archive.category_id == Category.id)
            .outerjoin(Subcategory, Archive.subcategory_id == Subcategory.id)
            .outerjoin(Position, Archive.position_id == Position.id)
            .outerjoin(Admin, Archive.created_by == Admin.id)
            .add_columns(
                Category.name.label("category_name"),
                Subcategory.name.label("subcategory_name"),
                Position.name.label("position_name"),
                Admin.name.label("created_by_name"),
            )
        )

    @staticmethod
    def _row_to_dict(row) -> Dict[str, Any]:
        archive, extras = row[0], row._mapping
        data = archive.to_dict()
        data["category_name"] = extras["category_name"]
        data["subcategory_name"] = extras["subcategory_name"]
        data["position_name"] = extras["position_name"]
        data["created_by_name"] = extras["created_by_name"]
        data["location_hierarchy"] = {
            "category": extras["category_name"],
            "subcategory": extras["subcategory_name"],
            "position": extras["position_name"],
        }
        return data

    def _fetch(self, db: Session, archive_id: int) -> Optional[Dict[str, Any]]:
        row = self._base_query(db).filter(Archive.id == archive_id).first()
        return self._row_to_dict(row) if row else None

    # === Catalog resolution (look-up-or-create) ===

    def _resolve_category(self, db: Session, data: Dict[str, Any]) -> Optional[int]:
        """category_id numerik harus ada; nama dicari lalu dibuat jika belum ada"""
        raw_id = data.get("category_id")
        name = data.get("category_name")
        try:
            category_id = parse_optional_int(raw_id)
        except ValueError:
            # category_id berisi teks: perlakukan sebagai nama
            category_id, name = None, raw_id

        if category_id is not None:
            if not db.get(Category, category_id):
                raise ArchiveError(404, "Category not found")
            return category_id

        name = (name or "").strip()
        if not name:
            return None

        category = db.query(Category).filter(Category.name == name).first()
        if not category:
            category = Category(name=name)
            db.add(category)
            db.flush()
            logger.info("Created category #%s '%s' from archive form", category.id, name)
        return category.id

    def _resolve_subcategory(self, db: Session, data: Dict[str, Any], category_id: Optional[int],
                             default_category_id: Optional[int] = None) -> Tuple[Optional[int], Optional[int]]:
        """
        Return (subcategory_id, category_id).

        ``category_id`` adalah kategori yang dikirim eksplisit: subkategori by ID
        harus milik kategori itu. Tanpa kategori eksplisit, kategori mengikuti
        subkategori; ``default_category_id`` dipakai untuk membuat subkategori by nama.
        """
        raw_id = data.get("subcategory_id")
        name = data.get("subcategory_name")
        try:
            subcategory_id = parse_optional_int(raw_id)
        except ValueError:
            subcategory_id, name = None, raw_id

        if subcategory_id is not None:
            subcategory = db.get(Subcategory, subcategory_id)
            if not subcategory:
                raise ArchiveError(404, "Subcategory not found")
            if category_id is not None and subcategory.category_id != category_id:
                raise ArchiveError(400, "Subcategory does not belong to the selected category")
            return subcategory.id, subcategory.category_id

        if category_id is None:
            category_id = default_category_id
        name = (name or "").strip()
        if not name:
            return None, category_id
        if category_id is None:
            raise ArchiveError(400, "A category is required to create a subcategory by name")

        subcategory = db.query(Subcategory).filter(
            Subcategory.category_id == category_id, Subcategory.name == name
        ).first()
        if not subcategory:
            subcategory = Subcategory(name=name, category_id=category_id)
            db.add(subcategory)
            db.flush()
            logger.info("Created subcategory #%s '%s' from archive form", subcategory.id, name)
        return subcategory.id, category_id

    def _resolve_position(self, db: Session, raw_position, subcategory_id: Optional[int],
                          fallback: Optional[int], archive_id: Optional[int] = None) -> Optional[int]:
        """
        Validasi posisi. Posisi yang subkategorinya berbeda dengan subkategori arsip
        diabaikan diam-diam: nilai lama (fallback) dipertahankan.
        """
        try:
            position_id = parse_optional_int(raw_position)
        except ValueError:
            raise ArchiveError(400, "Invalid position_id")
        if position_id is None:
            return None

        position = db.get(Position, position_id)
        if not position:
            raise ArchiveError(404, "Position not found")

        if subcategory_id is not None and position.subcategory_id != subcategory_id:
            logger.warning(
                "Ignoring position #%s for archive %s: belongs to subcategory #%s, archive uses #%s",
                position_id, archive_id or "(new)", position.subcategory_id, subcategory_id
            )
            return fallback
        return position_id

    # === Operations ===

    def get_list(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        category_id: Optional[int] = None,
        category: Optional[str] = None,
        subcategory_id: Optional[int] = None,
        position_id: Optional[int] = None,
        date: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "DESC"
    ) -> Dict[str, Any]:
        """Daftar arsip dengan filter, sorting dan pagination"""
        try:
            exact_date = parse_date(date)
            start = parse_date(start_date)
            end = parse_date(end_date)
        except ValueError as e:
            return self._error(400, str(e))

        page = max(page, 1)
        limit = max(limit, 1)

        with get_db_context() as db:
            query = self._base_query(db)

            if search:
                pattern = f"%{search}%"
                query = query.filter(or_(Archive.title.like(pattern), Archive.description.like(pattern)))
            if category_id:
                query = query.filter(Archive.category_id == category_id)
            elif category:
                query = query.filter(Category.name == category)
            if subcategory_id:
                query = query.filter(Archive.subcategory_id == subcategory_id)
            if position_id:
                query = query.filter(Archive.position_id == position_id)
            if exact_date:
                query = query.filter(Archive.date == exact_date)
            else:
                if start:
                    query = query.filter(Archive.date >= start)
                if end:
                    query = query.filter(Archive.date <= end)

            total = query.count()

            column = SORTABLE_COLUMNS.get(sort_by, Archive.created_at)
            if (sort_order or "").upper() == "ASC":
                query = query.order_by(column.asc(), Archive.id.asc())
            else:
                query = query.order_by(column.desc(), Archive.id.desc())

            rows = query.offset((page - 1) * limit).limit(limit).all()

            return {
                "success": True,
                "data": [self._row_to_dict(row) for row in rows],
                "pagination": {
                    "total": total,
                    "page": page,
                    "limit": limit,
                    "total_pages": math.ceil(total / limit) if total else 0
                }
            }

    def get_by_id(self, archive_id: int) -> Dict[str, Any]:
        with get_db_context() as db:
            data = self._fetch(db, archive_id)
            if not data:
                return self._error(404, "Archive not found")
            return {"success": True, "data": data}

    def create(self, data: Dict[str, Any], image: Optional[Tuple[str, bytes]] = None,
               user_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Buat arsip baru.

        ``data`` berisi field form (title, description, date, location,
        category_id/category_name, subcategory_id/subcategory_name, position_id).
        ``image`` adalah tuple (filename, content) bila ada file gambar.
        """
        title = (data.get("title") or "").strip()
        if not title:
            return self._error(400, "Title is required")
        try:
            archive_date = parse_date(data.get("date"))
        except ValueError as e:
            return self._error(400, str(e))
        if image:
            problem = storage_service.validate(image[0], image[1], IMAGE_EXTENSIONS)
            if problem:
                return self._error(400, problem)

        stored_path = None
        with get_db_context() as db:
            try:
                category_id = self._resolve_category(db, data)
                subcategory_id, category_id = self._resolve_subcategory(db, data, category_id)
                position_id = self._resolve_position(db, data.get("position_id"), subcategory_id, None)

                archive = Archive(
                    title=title,
                    description=data.get("description") or None,
                    date=archive_date,
                    location=data.get("location") or None,
                    category_id=category_id,
                    subcategory_id=subcategory_id,
                    position_id=position_id,
                    created_by=user_id
                )
                db.add(archive)
                db.flush()

                if image:
                    stored_path = storage_service.save(UPLOAD_SUBDIR, image[0], image[1])
                    archive.image = stored_path

                db.commit()
                logger.info("Created archive #%s '%s'", archive.id, title)
                return {
                    "success": True,
                    "message": "Archive created successfully",
                    "data": self._fetch(db, archive.id)
                }
            except ArchiveError as e:
                db.rollback()
                storage_service.delete(stored_path)
                return self._error(e.code, e.message)
            except Exception:
                db.rollback()
                storage_service.delete(stored_path)
                logger.exception("Failed to create archive")
                return self._error(500, "Server error while creating archive")

    def update(self, archive_id: int, data: Dict[str, Any],
               image: Optional[Tuple[str, bytes]] = None) -> Dict[str, Any]:
        """Update arsip; field yang tidak dikirim mempertahankan nilai lama"""
        if "title" in data and not (data.get("title") or "").strip():
            return self._error(400, "Title cannot be empty")
        try:
            archive_date = parse_date(data.get("date")) if "date" in data else None
        except ValueError as e:
            return self._error(400, str(e))
        if image:
            problem = storage_service.validate(image[0], image[1], IMAGE_EXTENSIONS)
            if problem:
                return self._error(400, problem)

        stored_path = None
        old_image = None
        with get_db_context() as db:
            try:
                archive = db.get(Archive, archive_id)
                if not archive:
                    return self._error(404, "Archive not found")

                if "title" in data:
                    archive.title = data["title"].strip()
                if "description" in data:
                    archive.description = data.get("description") or None
                if "date" in data:
                    archive.date = archive_date
                if "location" in data:
                    archive.location = data.get("location") or None

                category_given = "category_id" in data or "category_name" in data
                category_id = archive.category_id
                if category_given:
                    category_id = self._resolve_category(db, data)

                subcategory_id = archive.subcategory_id
                if "subcategory_id" in data or "subcategory_name" in data:
                    subcategory_id, category_id = self._resolve_subcategory(
                        db, data, category_id if category_given else None, archive.category_id
                    )
                elif category_given and subcategory_id is not None:
                    subcategory = db.get(Subcategory, subcategory_id)
                    if subcategory is None or subcategory.category_id != category_id:
                        logger.warning(
                            "Clearing subcategory #%s of archive #%s: not in new category #%s",
                            subcategory_id, archive_id, category_id
                        )
                        subcategory_id = None

                position_id = archive.position_id
                if position_id is not None and subcategory_id != archive.subcategory_id:
                    position = db.get(Position, position_id)
                    if position is None or position.subcategory_id != subcategory_id:
                        logger.warning(
                            "Clearing position #%s of archive #%s: not in new subcategory #%s",
                            position_id, archive_id, subcategory_id
                        )
                        position_id = None
                if "position_id" in data:
                    position_id = self._resolve_position(
                        db, data.get("position_id"), subcategory_id, position_id, archive_id
                    )

                archive.category_id = category_id
                archive.subcategory_id = subcategory_id
                archive.position_id = position_id

                if image:
                    stored_path = storage_service.save(UPLOAD_SUBDIR, image[0], image[1])
                    old_image, archive.image = archive.image, stored_path
                elif is_truthy(data.get("clear_image")):
                    old_image, archive.image = archive.image, None

                db.commit()
                logger.info("Updated archive #%s", archive_id)
            except ArchiveError as e:
                db.rollback()
                storage_service.delete(stored_path)
                return self._error(e.code, e.message)
            except Exception:
                db.rollback()
                storage_service.delete(stored_path)
                logger.exception("Failed to update archive #%s", archive_id)
                return self._error(500, "Server error while updating archive")

            if old_image:
                storage_service.delete(old_image)
            return {
                "success": True,
                "message": "Archive updated successfully",
                "data": self._fetch(db, archive_id)
            }

    def delete(self, archive_id: int) -> Dict[str, Any]:
        """Hapus arsip beserta file gambarnya (setelah commit)"""
        with get_db_context() as db:
            try:
                archive = db.get(Archive, archive_id)
                if not archive:
                    return self._error(404, "Archive not found")
                image = archive.image
                db.delete(archive)
                db.commit()
            except Exception:
                db.rollback()
                logger.exception("Failed to delete archive #%s", archive_id)
                return self._error(500, "Server error while deleting archive")

        storage_service.delete(image)
        logger.info("Deleted archive #%s", archive_id)
        return {"success": True, "message": "Archive deleted successfully"}


# Global instance
archive_service = ArchiveService()
