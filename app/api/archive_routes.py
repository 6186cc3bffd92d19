"""
API Routes untuk Arsip
"""
from fastapi import APIRouter, Query, UploadFile, File, Form, Depends
from typing import Optional

from app.api.deps import require_admin, raise_for_error
from app.services.archive_service import archive_service

router = APIRouter(prefix="/api/archives", tags=["Archives"])


async def _read_upload(upload: Optional[UploadFile]):
    if upload is None or not upload.filename:
        return None
    return upload.filename, await upload.read()


def _form_data(**fields) -> dict:
    """Hanya field yang dikirim yang ikut; sisanya dipertahankan saat update"""
    return {key: value for key, value in fields.items() if value is not None}


@router.get("", summary="Get Archives with Filters")
async def get_archives(
    page: int = Query(1, ge=1, description="Halaman"),
    limit: int = Query(10, ge=1, le=100, description="Jumlah per halaman"),
    search: Optional[str] = Query(None, description="Cari di judul dan deskripsi"),
    category_id: Optional[int] = Query(None, description="Filter by category ID"),
    category: Optional[str] = Query(None, description="Filter by nama kategori"),
    subcategory_id: Optional[int] = Query(None, description="Filter by subcategory ID"),
    position_id: Optional[int] = Query(None, description="Filter by position ID"),
    date: Optional[str] = Query(None, description="Tanggal persis (YYYY-MM-DD / DD-MM-YYYY)"),
    start_date: Optional[str] = Query(None, description="Tanggal mulai"),
    end_date: Optional[str] = Query(None, description="Tanggal akhir"),
    sort_by: str = Query("created_at", description="created_at, updated_at, date, title"),
    sort_order: str = Query("DESC", description="ASC atau DESC")
):
    """
    Ambil daftar arsip dengan filter dan pagination.

    Semua filter bersifat opsional dan bisa dikombinasikan.
    """
    return raise_for_error(archive_service.get_list(
        page=page,
        limit=limit,
        search=search,
        category_id=category_id,
        category=category,
        subcategory_id=subcategory_id,
        position_id=position_id,
        date=date,
        start_date=start_date,
        end_date=end_date,
        sort_by=sort_by,
        sort_order=sort_order
    ))


@router.get("/{archive_id}", summary="Get Archive by ID")
async def get_archive(archive_id: int):
    """Ambil detail arsip berdasarkan ID"""
    return raise_for_error(archive_service.get_by_id(archive_id))


@router.post("", status_code=201, summary="Create Archive")
async def create_archive(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    date: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    category_id: Optional[str] = Form(None),
    category_name: Optional[str] = Form(None),
    subcategory_id: Optional[str] = Form(None),
    subcategory_name: Optional[str] = Form(None),
    position_id: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    current_user: dict = Depends(require_admin)
):
    """
    Tambah arsip baru (multipart/form-data).

    - **title**: Judul (wajib)
    - **category_id** / **category_name**: kategori by ID atau nama (dibuat jika belum ada)
    - **subcategory_id** / **subcategory_name**: subkategori by ID atau nama
    - **position_id**: posisi; diabaikan jika bukan milik subkategori arsip
    - **image**: file gambar (opsional)
    """
    data = _form_data(
        title=title, description=description, date=date, location=location,
        category_id=category_id, category_name=category_name,
        subcategory_id=subcategory_id, subcategory_name=subcategory_name,
        position_id=position_id
    )
    upload = await _read_upload(image)
    return raise_for_error(archive_service.create(data, upload, user_id=current_user["id"]))


@router.put("/{archive_id}", summary="Update Archive")
async def update_archive(
    archive_id: int,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    date: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    category_id: Optional[str] = Form(None),
    category_name: Optional[str] = Form(None),
    subcategory_id: Optional[str] = Form(None),
    subcategory_name: Optional[str] = Form(None),
    position_id: Optional[str] = Form(None),
    clear_image: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    current_user: dict = Depends(require_admin)
):
    """Update arsip; field yang tidak dikirim tidak berubah. `clear_image=true` menghapus gambar."""
    data = _form_data(
        title=title, description=description, date=date, location=location,
        category_id=category_id, category_name=category_name,
        subcategory_id=subcategory_id, subcategory_name=subcategory_name,
        position_id=position_id, clear_image=clear_image
    )
    upload = await _read_upload(image)
    return raise_for_error(archive_service.update(archive_id, data, upload))


@router.delete("/{archive_id}", summary="Delete Archive")
async def delete_archive(archive_id: int, current_user: dict = Depends(require_admin)):
    """Hapus arsip beserta file gambarnya"""
    return raise_for_error(archive_service.delete(archive_id))
