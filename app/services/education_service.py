"""
Education Service - data referensi jenjang, fakultas dan program studi
"""
import logging
from typing import Optional, Dict, Any

from sqlalchemy import func

from app.database import get_db_context
from app.models import EducationLevel, Faculty, Program
from app.utils.validators import parse_optional_int

logger = logging.getLogger(__name__)

# key -> (model, label, kolom program yang mereferensikan)
LOOKUPS = {
    "level": (EducationLevel, "level", "level_id"),
    "faculty": (Faculty, "faculty", "faculty_id"),
}


class EducationService:
    """CRUD data referensi pendidikan untuk dropdown detail surat"""

    @staticmethod
    def _error(code: int, message: str) -> Dict[str, Any]:
        return {"success": False, "code": code, "message": message}

    # === Levels & faculties ===

    def list_lookup(self, key: str) -> Dict[str, Any]:
        model, _, _ = LOOKUPS[key]
        with get_db_context() as db:
            rows = db.query(model).order_by(model.name).all()
            return {"success": True, "data": [r.to_dict() for r in rows]}

    def create_lookup(self, key: str, name: Optional[str]) -> Dict[str, Any]:
        model, label, _ = LOOKUPS[key]
        name = (name or "").strip()
        if not name:
            return self._error(400, f"{label.capitalize()} name is required")

        with get_db_context() as db:
            try:
                if db.query(model.id).filter(model.name == name).first():
                    return self._error(400, f"{label.capitalize()} with this name already exists")
                item = model(name=name)
                db.add(item)
                db.commit()
                db.refresh(item)
                logger.info("Created %s #%s '%s'", label, item.id, name)
                return {
                    "success": True,
                    "message": f"{label.capitalize()} created successfully",
                    "id": item.id,
                    "data": item.to_dict()
                }
            except Exception:
                db.rollback()
                logger.exception("Failed to create %s", label)
                return self._error(500, f"Server error while creating {label}")

    def update_lookup(self, key: str, item_id: int, name: Optional[str]) -> Dict[str, Any]:
        model, label, _ = LOOKUPS[key]
        name = (name or "").strip()
        if not name:
            return self._error(400, f"{label.capitalize()} name is required")

        with get_db_context() as db:
            try:
                item = db.get(model, item_id)
                if not item:
                    return self._error(404, f"{label.capitalize()} not found")
                if db.query(model.id).filter(model.name == name, model.id != item_id).first():
                    return self._error(400, f"{label.capitalize()} with this name already exists")
                item.name = name
                db.commit()
                logger.info("Updated %s #%s", label, item_id)
                return {"success": True, "message": f"{label.capitalize()} updated successfully", "data": item.to_dict()}
            except Exception:
                db.rollback()
                logger.exception("Failed to update %s #%s", label, item_id)
                return self._error(500, f"Server error while updating {label}")

    def delete_lookup(self, key: str, item_id: int) -> Dict[str, Any]:
        model, label, program_column = LOOKUPS[key]
        with get_db_context() as db:
            try:
                item = db.get(model, item_id)
                if not item:
                    return self._error(404, f"{label.capitalize()} not found")
                in_use = db.query(func.count(Program.id)).filter(
                    getattr(Program, program_column) == item_id
                ).scalar()
                if in_use:
                    return self._error(400, f"Cannot delete {label} with existing programs")
                db.delete(item)
                db.commit()
                logger.info("Deleted %s #%s", label, item_id)
                return {"success": True, "message": f"{label.capitalize()} deleted successfully"}
            except Exception:
                db.rollback()
                logger.exception("Failed to delete %s #%s", label, item_id)
                return self._error(500, f"Server error while deleting {label}")

    # === Programs ===

    def _check_refs(self, db, faculty_id, level_id) -> Optional[Dict[str, Any]]:
        if faculty_id is not None and not db.get(Faculty, faculty_id):
            return self._error(404, "Faculty not found")
        if level_id is not None and not db.get(EducationLevel, level_id):
            return self._error(404, "Education level not found")
        return None

    def list_programs(self, faculty_id: Optional[int] = None, level_id: Optional[int] = None) -> Dict[str, Any]:
        with get_db_context() as db:
            query = db.query(Program)
            if faculty_id is not None:
                query = query.filter(Program.faculty_id == faculty_id)
            if level_id is not None:
                query = query.filter(Program.level_id == level_id)
            rows = query.order_by(Program.name).all()
            return {"success": True, "data": [r.to_dict() for r in rows]}

    def create_program(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Program wajib punya faculty_id; level_id opsional"""
        name = (payload.get("name") or "").strip()
        try:
            faculty_id = parse_optional_int(payload.get("faculty_id"))
            level_id = parse_optional_int(payload.get("level_id"))
        except ValueError:
            return self._error(400, "faculty_id and level_id must be numeric")
        if not name or faculty_id is None:
            return self._error(400, "Name and faculty_id are required")

        with get_db_context() as db:
            try:
                problem = self._check_refs(db, faculty_id, level_id)
                if problem:
                    return problem
                program = Program(name=name, faculty_id=faculty_id, level_id=level_id)
                db.add(program)
                db.commit()
                db.refresh(program)
                logger.info("Created program #%s '%s'", program.id, name)
                return {
                    "success": True,
                    "message": "Program created successfully",
                    "id": program.id,
                    "data": program.to_dict()
                }
            except Exception:
                db.rollback()
                logger.exception("Failed to create program")
                return self._error(500, "Server error while creating program")

    def update_program(self, program_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            faculty_id = parse_optional_int(payload.get("faculty_id"))
            level_id = parse_optional_int(payload.get("level_id"))
        except ValueError:
            return self._error(400, "faculty_id and level_id must be numeric")

        with get_db_context() as db:
            try:
                program = db.get(Program, program_id)
                if not program:
                    return self._error(404, "Program not found")
                problem = self._check_refs(db, faculty_id, level_id)
                if problem:
                    return problem

                name = (payload.get("name") or "").strip()
                if name:
                    program.name = name
                if faculty_id is not None:
                    program.faculty_id = faculty_id
                if "level_id" in payload:
                    program.level_id = level_id
                db.commit()
                logger.info("Updated program #%s", program_id)
                return {"success": True, "message": "Program updated successfully", "data": program.to_dict()}
            except Exception:
                db.rollback()
                logger.exception("Failed to update program #%s", program_id)
                return self._error(500, "Server error while updating program")

    def delete_program(self, program_id: int) -> Dict[str, Any]:
        with get_db_context() as db:
            try:
                program = db.get(Program, program_id)
                if not program:
                    return self._error(404, "Program not found")
                db.delete(program)
                db.commit()
                logger.info("Deleted program #%s", program_id)
                return {"success": True, "message": "Program deleted successfully"}
            except Exception:
                db.rollback()
                logger.exception("Failed to delete program #%s", program_id)
                return self._error(500, "Server error while deleting program")


# Global instance
education_service = EducationService()
