"""
Letter Service - CRUD surat BIAK, riwayat status dan rekap
"""
import io
import json
import logging
import math
from typing import Optional, Dict, Any, Tuple, List

import pandas as pd
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.database import get_db_context
from app.models import Admin, Letter, LetterDetails, LetterStatusHistory, LetterStatus, LetterType
from app.models.letter_models import DETAIL_FIELDS
from app.services.storage_service import storage_service
from app.utils.validators import normalize_date_string, parse_date, is_truthy

logger = logging.getLogger(__name__)

UPLOAD_SUBDIR = "letters"
REQUIRED_FIELDS = ("name", "date", "sender", "recipient", "subject", "letter_type")
DATE_FORMAT_MESSAGE = "Invalid date format. Use DD-MM-YYYY or YYYY-MM-DD"
SORTABLE_COLUMNS = {
    "created_at": Letter.created_at,
    "date": Letter.date,
    "name": Letter.name,
    "sender": Letter.sender,
    "recipient": Letter.recipient,
    "current_status": Letter.current_status,
}
GROUP_BY_OPTIONS = ("day", "week", "month")


class LetterError(Exception):
    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class LetterService:
    """Service untuk pelacakan surat"""

    @staticmethod
    def _error(code: int, message: str) -> Dict[str, Any]:
        return {"success": False, "code": code, "message": message}

    # === Helpers ===

    def _base_query(self, db: Session):
        return (
            db.query(Letter)
            .outerjoin(Admin, Letter.created_by == Admin.id)
            .add_columns(Admin.name.label("created_by_name"))
        )

    @staticmethod
    def _row_to_dict(row) -> Dict[str, Any]:
        data = row[0].to_dict()
        data["created_by_name"] = row._mapping["created_by_name"]
        return data

    @staticmethod
    def _parse_letter_type(value) -> str:
        letter_type = str(value or "").strip().lower()
        try:
            return LetterType(letter_type).value
        except ValueError:
            allowed = ", ".join(t.value for t in LetterType)
            raise LetterError(400, f"Invalid letter_type '{value}'. Allowed: {allowed}")

    @staticmethod
    def _parse_details(raw) -> Dict[str, Any]:
        """Details dikirim sebagai string JSON di form multipart"""
        if raw is None or raw == "":
            return {}
        if isinstance(raw, str):
            try:
                raw = json.loads(raw)
            except json.JSONDecodeError:
                raise LetterError(400, "Invalid details JSON")
        if not isinstance(raw, dict):
            raise LetterError(400, "Details must be a JSON object")

        details = {}
        for field in DETAIL_FIELDS:
            value = raw.get(field)
            if isinstance(value, str):
                value = value.strip() or None
            details[field] = value
        try:
            details["tanggal_lulus"] = parse_date(details["tanggal_lulus"])
        except ValueError:
            raise LetterError(400, "Invalid tanggal_lulus format. Use DD-MM-YYYY or YYYY-MM-DD")
        return details

    @staticmethod
    def _sync_current_status(db: Session, letter: Letter):
        """current_status selalu mengikuti baris riwayat terbaru"""
        latest = (
            db.query(LetterStatusHistory)
            .filter(LetterStatusHistory.letter_id == letter.id)
            .order_by(LetterStatusHistory.created_at.desc(), LetterStatusHistory.id.desc())
            .first()
        )
        letter.current_status = latest.status if latest else None

    def _validate_file(self, upload: Optional[Tuple[str, bytes]]):
        if upload:
            problem = storage_service.validate(upload[0], upload[1])
            if problem:
                raise LetterError(400, problem)

    # === Letters ===

    def get_list(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        sender: Optional[str] = None,
        recipient: Optional[str] = None,
        date: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        status: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "DESC"
    ) -> Dict[str, Any]:
        """Daftar surat dengan filter, sorting dan pagination"""
        try:
            exact_date = parse_date(date)
            start = parse_date(start_date)
            end = parse_date(end_date)
        except ValueError:
            return self._error(400, DATE_FORMAT_MESSAGE)

        page = max(page, 1)
        limit = max(limit, 1)

        with get_db_context() as db:
            query = self._base_query(db)

            if search:
                pattern = f"%{search}%"
                query = query.filter(or_(Letter.name.like(pattern), Letter.subject.like(pattern)))
            if sender:
                query = query.filter(Letter.sender.like(f"%{sender}%"))
            if recipient:
                query = query.filter(Letter.recipient.like(f"%{recipient}%"))
            if exact_date:
                query = query.filter(Letter.date == exact_date)
            elif start and end:
                query = query.filter(Letter.date.between(start, end))
            if status:
                query = query.filter(Letter.current_status == status)

            total = query.count()

            column = SORTABLE_COLUMNS.get(sort_by, Letter.created_at)
            if (sort_order or "").upper() == "ASC":
                query = query.order_by(column.asc(), Letter.id.asc())
            else:
                query = query.order_by(column.desc(), Letter.id.desc())

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

    def get_by_id(self, letter_id: int) -> Dict[str, Any]:
        """Detail surat beserta payload details (jika ada)"""
        with get_db_context() as db:
            row = self._base_query(db).filter(Letter.id == letter_id).first()
            if not row:
                return self._error(404, "Letter not found")
            data = self._row_to_dict(row)
            details = db.query(LetterDetails).filter(LetterDetails.letter_id == letter_id).first()
            data["details"] = details.to_dict() if details else None
            return {"success": True, "data": data}

    def create(self, data: Dict[str, Any], upload: Optional[Tuple[str, bytes]] = None,
               user_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Buat surat baru.

        Details hanya disimpan untuk letter_type selain ``biasa``;
        tanggal_lulus dinormalisasi seperti tanggal surat.
        """
        missing = [f for f in REQUIRED_FIELDS if not str(data.get(f) or "").strip()]
        if missing:
            return self._error(400, f"All fields are required: {', '.join(REQUIRED_FIELDS)}")

        try:
            letter_date = parse_date(data["date"])
        except ValueError:
            return self._error(400, DATE_FORMAT_MESSAGE)

        try:
            letter_type = self._parse_letter_type(data["letter_type"])
            details = None
            if letter_type != LetterType.BIASA.value:
                details = self._parse_details(data.get("details"))
            self._validate_file(upload)
        except LetterError as e:
            return self._error(e.code, e.message)

        stored_path = None
        with get_db_context() as db:
            try:
                letter = Letter(
                    name=data["name"].strip(),
                    date=letter_date,
                    sender=data["sender"].strip(),
                    recipient=data["recipient"].strip(),
                    subject=data["subject"].strip(),
                    letter_type=letter_type,
                    created_by=user_id
                )
                db.add(letter)
                db.flush()

                if details is not None:
                    db.add(LetterDetails(letter_id=letter.id, **details))

                if upload:
                    stored_path = storage_service.save(UPLOAD_SUBDIR, upload[0], upload[1])
                    letter.file_path = stored_path

                db.commit()
                logger.info("Created letter #%s (%s)", letter.id, letter_type)
                return {
                    "success": True,
                    "message": "Letter created successfully",
                    "id": letter.id,
                    "data": letter.to_dict()
                }
            except Exception:
                db.rollback()
                storage_service.delete(stored_path)
                logger.exception("Failed to create letter")
                return self._error(500, "Server error while creating letter")

    def update(self, letter_id: int, data: Dict[str, Any],
               upload: Optional[Tuple[str, bytes]] = None) -> Dict[str, Any]:
        """Update sebagian field; field kosong/tidak dikirim mempertahankan nilai lama"""
        letter_date = None
        if data.get("date") not in (None, ""):
            try:
                letter_date = parse_date(data["date"])
            except ValueError:
                return self._error(400, DATE_FORMAT_MESSAGE)

        stored_path = None
        old_file = None
        with get_db_context() as db:
            try:
                letter = db.get(Letter, letter_id)
                if not letter:
                    return self._error(404, "Letter not found")

                letter_type = letter.letter_type
                if data.get("letter_type"):
                    letter_type = self._parse_letter_type(data["letter_type"])
                details = None
                if letter_type != LetterType.BIASA.value and data.get("details") not in (None, ""):
                    details = self._parse_details(data["details"])
                self._validate_file(upload)

                for field in ("name", "sender", "recipient", "subject"):
                    value = str(data.get(field) or "").strip()
                    if value:
                        setattr(letter, field, value)
                if letter_date:
                    letter.date = letter_date
                letter.letter_type = letter_type

                existing = db.query(LetterDetails).filter(LetterDetails.letter_id == letter_id).first()
                if letter_type == LetterType.BIASA.value:
                    if existing:
                        db.delete(existing)
                elif details is not None:
                    if existing:
                        for key, value in details.items():
                            setattr(existing, key, value)
                    else:
                        db.add(LetterDetails(letter_id=letter_id, **details))
                elif not existing:
                    # Surat non-biasa selalu punya satu baris details
                    db.add(LetterDetails(letter_id=letter_id, **self._parse_details(None)))

                if upload:
                    stored_path = storage_service.save(UPLOAD_SUBDIR, upload[0], upload[1])
                    old_file, letter.file_path = letter.file_path, stored_path
                elif is_truthy(data.get("clear_file")):
                    old_file, letter.file_path = letter.file_path, None

                db.commit()
                db.refresh(letter)
                logger.info("Updated letter #%s", letter_id)
                result = letter.to_dict()
            except LetterError as e:
                db.rollback()
                return self._error(e.code, e.message)
            except Exception:
                db.rollback()
                storage_service.delete(stored_path)
                logger.exception("Failed to update letter #%s", letter_id)
                return self._error(500, "Server error while updating letter")

        if old_file:
            storage_service.delete(old_file)
        return {"success": True, "message": "Letter updated successfully", "data": result}

    def delete(self, letter_id: int) -> Dict[str, Any]:
        """Hapus riwayat, details, lalu surat dalam satu transaksi; file dihapus setelah commit"""
        with get_db_context() as db:
            try:
                letter = db.get(Letter, letter_id)
                if not letter:
                    return self._error(404, "Letter not found")
                file_path = letter.file_path

                db.query(LetterStatusHistory).filter(
                    LetterStatusHistory.letter_id == letter_id
                ).delete(synchronize_session=False)
                db.query(LetterDetails).filter(
                    LetterDetails.letter_id == letter_id
                ).delete(synchronize_session=False)
                db.delete(letter)
                db.commit()
            except Exception:
                db.rollback()
                logger.exception("Failed to delete letter #%s", letter_id)
                return self._error(500, "Server error while deleting letter")

        storage_service.delete(file_path)
        logger.info("Deleted letter #%s", letter_id)
        return {"success": True, "message": "Letter deleted successfully"}

    # === Status & history ===

    def update_status(self, letter_id: int, status: Optional[str], note: Optional[str] = None) -> Dict[str, Any]:
        """Set current_status dan tambahkan satu baris riwayat (tanpa cek transisi)"""
        status = (status or "").strip()
        if not status:
            return self._error(400, "Status is required")

        with get_db_context() as db:
            try:
                letter = db.get(Letter, letter_id)
                if not letter:
                    return self._error(404, "Letter not found")

                history = LetterStatusHistory(letter_id=letter_id, status=status, note=note or None)
                db.add(history)
                letter.current_status = status
                db.commit()
                db.refresh(history)

                logger.info("Letter #%s status -> '%s'", letter_id, status)
                return {
                    "success": True,
                    "message": "Letter status updated successfully",
                    "data": history.to_dict()
                }
            except Exception:
                db.rollback()
                logger.exception("Failed to update status for letter #%s", letter_id)
                return self._error(500, "Server error while updating letter status")

    def get_history(self, letter_id: int) -> Dict[str, Any]:
        with get_db_context() as db:
            if not db.get(Letter, letter_id):
                return self._error(404, "Letter not found")
            items = (
                db.query(LetterStatusHistory)
                .filter(LetterStatusHistory.letter_id == letter_id)
                .order_by(LetterStatusHistory.created_at.asc(), LetterStatusHistory.id.asc())
                .all()
            )
            return {"success": True, "data": [item.to_dict() for item in items]}

    def update_history_item(self, letter_id: int, history_id: int,
                            status: Optional[str], note: Optional[str] = None) -> Dict[str, Any]:
        status = (status or "").strip()
        if not status:
            return self._error(400, "Status is required")

        with get_db_context() as db:
            try:
                item = db.query(LetterStatusHistory).filter(
                    LetterStatusHistory.id == history_id,
                    LetterStatusHistory.letter_id == letter_id
                ).first()
                if not item:
                    return self._error(404, "History item not found")

                logger.info(
                    "Letter #%s history #%s edited: status '%s' -> '%s', note %r -> %r",
                    letter_id, history_id, item.status, status, item.note, note
                )
                item.status = status
                item.note = note or None
                db.flush()
                self._sync_current_status(db, db.get(Letter, letter_id))
                db.commit()
                db.refresh(item)
                return {"success": True, "message": "History item updated successfully", "data": item.to_dict()}
            except Exception:
                db.rollback()
                logger.exception("Failed to update history #%s", history_id)
                return self._error(500, "Server error while updating history item")

    def delete_history_item(self, letter_id: int, history_id: int) -> Dict[str, Any]:
        with get_db_context() as db:
            try:
                item = db.query(LetterStatusHistory).filter(
                    LetterStatusHistory.id == history_id,
                    LetterStatusHistory.letter_id == letter_id
                ).first()
                if not item:
                    return self._error(404, "History item not found")

                logger.info(
                    "Letter #%s history #%s deleted (was status '%s', note %r, created %s)",
                    letter_id, history_id, item.status, item.note, item.created_at
                )
                db.delete(item)
                db.flush()
                self._sync_current_status(db, db.get(Letter, letter_id))
                db.commit()
                return {"success": True, "message": "History item deleted successfully"}
            except Exception:
                db.rollback()
                logger.exception("Failed to delete history #%s", history_id)
                return self._error(500, "Server error while deleting history item")

    @staticmethod
    def get_statuses() -> Dict[str, Any]:
        return {"success": True, "data": [s.value for s in LetterStatus]}

    # === Rekap ===

    @staticmethod
    def _bucket(df: pd.DataFrame, group_by: str) -> pd.Series:
        dates = pd.to_datetime(df["date"])
        if group_by == "month":
            return dates.dt.strftime("%Y-%m")
        if group_by == "week":
            iso = dates.dt.isocalendar()
            return iso["year"].astype(str) + "-W" + iso["week"].astype(int).map("{:02d}".format)
        return dates.dt.strftime("%Y-%m-%d")

    def get_rekap(self, start_date: Optional[str], end_date: Optional[str],
                  group_by: Optional[str] = "day") -> Dict[str, Any]:
        """Jumlah surat per periode (day / ISO week / month) dalam rentang tanggal"""
        if not start_date or not end_date:
            return self._error(400, "start_date and end_date are required")
        try:
            start = parse_date(start_date)
            end = parse_date(end_date)
        except ValueError:
            return self._error(400, DATE_FORMAT_MESSAGE)
        group_by = (group_by or "day").lower()
        if group_by not in GROUP_BY_OPTIONS:
            return self._error(400, f"group_by must be one of: {', '.join(GROUP_BY_OPTIONS)}")

        with get_db_context() as db:
            try:
                counts = (
                    db.query(Letter.date, func.count(Letter.id))
                    .filter(Letter.date.between(start, end))
                    .group_by(Letter.date)
                    .all()
                )
            except Exception:
                logger.exception("Failed to build rekap")
                return self._error(500, "Server error while generating rekap")

        rows: List[Dict[str, Any]] = []
        if counts:
            df = pd.DataFrame(counts, columns=["date", "total"])
            df["period"] = self._bucket(df, group_by)
            summary = df.groupby("period", as_index=False)["total"].sum().sort_values("period")
            rows = [
                {"period": record["period"], "total": int(record["total"])}
                for record in summary.to_dict(orient="records")
            ]

        return {
            "success": True,
            "group_by": group_by,
            "start_date": normalize_date_string(start),
            "end_date": normalize_date_string(end),
            "data": rows
        }

    def export_rekap(self, start_date: Optional[str], end_date: Optional[str],
                     group_by: Optional[str] = "day", fmt: str = "csv") -> Dict[str, Any]:
        """Rekap sebagai file CSV atau XLSX"""
        fmt = (fmt or "csv").lower()
        if fmt not in ("csv", "xlsx"):
            return self._error(400, "format must be csv or xlsx")

        result = self.get_rekap(start_date, end_date, group_by)
        if not result["success"]:
            return result

        df = pd.DataFrame(result["data"], columns=["period", "total"])
        filename = f"rekap_{result['group_by']}_{result['start_date']}_{result['end_date']}.{fmt}"
        if fmt == "csv":
            content = df.to_csv(index=False).encode("utf-8")
            media_type = "text/csv"
        else:
            buffer = io.BytesIO()
            df.to_excel(buffer, index=False, sheet_name="Rekap", engine="openpyxl")
            content = buffer.getvalue()
            media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

        return {"success": True, "content": content, "media_type": media_type, "filename": filename}


# Global instance
letter_service = LetterService()
