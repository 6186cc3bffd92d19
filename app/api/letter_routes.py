"""
API Routes untuk Surat BIAK
"""
from fastapi import APIRouter, Query, UploadFile, File, Form, Depends
from fastapi.responses import Response
from typing import Optional

from app.api.deps import require_admin, raise_for_error
from app.schemas import LetterStatusUpdate, HistoryItemUpdate, RekapResponse
from app.services.letter_service import letter_service

router = APIRouter(prefix="/api/letters", tags=["Letters"])


async def _read_upload(upload: Optional[UploadFile]):
    if upload is None or not upload.filename:
        return None
    return upload.filename, await upload.read()


@router.get("", summary="Get Letters with Filters")
async def get_letters(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, description="Cari di nama dan perihal"),
    sender: Optional[str] = Query(None, description="Pengirim (partial match)"),
    recipient: Optional[str] = Query(None, description="Penerima (partial match)"),
    date: Optional[str] = Query(None, description="Tanggal persis"),
    start_date: Optional[str] = Query(None, description="Tanggal mulai (dipakai bersama end_date)"),
    end_date: Optional[str] = Query(None, description="Tanggal akhir"),
    status: Optional[str] = Query(None, description="Status saat ini (exact)"),
    sort_by: str = Query("created_at", description="created_at, date, name, sender, recipient, current_status"),
    sort_order: str = Query("DESC", description="ASC atau DESC")
):
    """Ambil daftar surat dengan filter dan pagination"""
    return raise_for_error(letter_service.get_list(
        page=page,
        limit=limit,
        search=search,
        sender=sender,
        recipient=recipient,
        date=date,
        start_date=start_date,
        end_date=end_date,
        status=status,
        sort_by=sort_by,
        sort_order=sort_order
    ))


# Route statis didaftarkan sebelum /{letter_id}

@router.get("/statuses", summary="Get Canonical Statuses")
async def get_statuses():
    """Daftar status baku yang ditawarkan di UI (status lain tetap boleh)"""
    return letter_service.get_statuses()


@router.get("/rekap/summary", response_model=RekapResponse, summary="Get Letter Rekap")
async def get_rekap(
    start_date: Optional[str] = Query(None, description="Tanggal mulai (wajib)"),
    end_date: Optional[str] = Query(None, description="Tanggal akhir (wajib)"),
    group_by: str = Query("day", description="day, week atau month")
):
    """
    Rekap jumlah surat per periode.

    - **day**: `YYYY-MM-DD`
    - **week**: minggu ISO `YYYY-Www`
    - **month**: `YYYY-MM`

    Perubahan format: periode minggu dulu berupa angka `YEARWEEK` (mis. `202401`).
    Sekarang selalu `2024-W01`; client lama perlu menyesuaikan parsing.
    """
    return raise_for_error(letter_service.get_rekap(start_date, end_date, group_by))


@router.get("/rekap/export", summary="Export Letter Rekap")
async def export_rekap(
    start_date: Optional[str] = Query(None),
    end_date: Optional[str] = Query(None),
    group_by: str = Query("day"),
    format: str = Query("csv", description="csv atau xlsx")
):
    """Download rekap sebagai CSV atau Excel"""
    result = raise_for_error(letter_service.export_rekap(start_date, end_date, group_by, format))
    return Response(
        content=result["content"],
        media_type=result["media_type"],
        headers={"Content-Disposition": f'attachment; filename="{result["filename"]}"'}
    )


@router.get("/{letter_id}", summary="Get Letter by ID")
async def get_letter(letter_id: int):
    """Detail surat termasuk `details` untuk surat pengganti ijazah / keterangan"""
    return raise_for_error(letter_service.get_by_id(letter_id))


@router.post("", status_code=201, summary="Create Letter")
async def create_letter(
    name: Optional[str] = Form(None),
    date: Optional[str] = Form(None),
    sender: Optional[str] = Form(None),
    recipient: Optional[str] = Form(None),
    subject: Optional[str] = Form(None),
    letter_type: Optional[str] = Form(None),
    details: Optional[str] = Form(None, description="JSON string detail surat"),
    file: Optional[UploadFile] = File(None),
    current_user: dict = Depends(require_admin)
):
    """
    Tambah surat baru (multipart/form-data).

    - **name, date, sender, recipient, subject, letter_type**: wajib
    - **letter_type**: biasa, pengganti_ijazah, keterangan
    - **details**: JSON (nim, nama, jenjang_pendidikan, fakultas, program_studi,
      tanggal_lulus, no_seri, nirl, telepon); diabaikan untuk surat biasa
    - **file**: lampiran (opsional)
    """
    data = {
        "name": name,
        "date": date,
        "sender": sender,
        "recipient": recipient,
        "subject": subject,
        "letter_type": letter_type,
        "details": details,
    }
    upload = await _read_upload(file)
    return raise_for_error(letter_service.create(data, upload, user_id=current_user["id"]))


@router.put("/{letter_id}", summary="Update Letter")
async def update_letter(
    letter_id: int,
    name: Optional[str] = Form(None),
    date: Optional[str] = Form(None),
    sender: Optional[str] = Form(None),
    recipient: Optional[str] = Form(None),
    subject: Optional[str] = Form(None),
    letter_type: Optional[str] = Form(None),
    details: Optional[str] = Form(None),
    clear_file: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    current_user: dict = Depends(require_admin)
):
    """Update surat; field kosong mempertahankan nilai lama. `clear_file=true` menghapus lampiran."""
    data = {
        "name": name,
        "date": date,
        "sender": sender,
        "recipient": recipient,
        "subject": subject,
        "letter_type": letter_type,
        "details": details,
        "clear_file": clear_file,
    }
    upload = await _read_upload(file)
    return raise_for_error(letter_service.update(letter_id, data, upload))


@router.delete("/{letter_id}", summary="Delete Letter")
async def delete_letter(letter_id: int, current_user: dict = Depends(require_admin)):
    """Hapus surat beserta riwayat status, details dan lampirannya"""
    return raise_for_error(letter_service.delete(letter_id))


@router.put("/{letter_id}/status", summary="Update Letter Status")
async def update_letter_status(letter_id: int, body: LetterStatusUpdate,
                               current_user: dict = Depends(require_admin)):
    """Set status saat ini dan tambahkan satu baris riwayat"""
    return raise_for_error(letter_service.update_status(letter_id, body.status, body.note))


@router.get("/{letter_id}/history", summary="Get Letter History")
async def get_letter_history(letter_id: int):
    """Riwayat status dari yang terlama ke terbaru"""
    return raise_for_error(letter_service.get_history(letter_id))


@router.put("/{letter_id}/history/{history_id}", summary="Update History Item")
async def update_history_item(letter_id: int, history_id: int, body: HistoryItemUpdate,
                              current_user: dict = Depends(require_admin)):
    return raise_for_error(letter_service.update_history_item(letter_id, history_id, body.status, body.note))


@router.delete("/{letter_id}/history/{history_id}", summary="Delete History Item")
async def delete_history_item(letter_id: int, history_id: int,
                              current_user: dict = Depends(require_admin)):
    return raise_for_error(letter_service.delete_history_item(letter_id, history_id))
