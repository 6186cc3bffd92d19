"""
API Routes untuk data referensi pendidikan
"""
from fastapi import APIRouter, Query, Depends
from typing import Optional

from app.api.deps import require_admin, raise_for_error
from app.schemas import NameBody, ProgramBody
from app.services.education_service import education_service

router = APIRouter(prefix="/api/education", tags=["Education"])


# === Levels ===

@router.get("/levels", summary="Get Education Levels")
async def get_levels():
    return raise_for_error(education_service.list_lookup("level"))


@router.post("/levels", status_code=201, summary="Create Education Level")
async def create_level(body: NameBody, current_user: dict = Depends(require_admin)):
    return raise_for_error(education_service.create_lookup("level", body.name))


@router.put("/levels/{level_id}", summary="Update Education Level")
async def update_level(level_id: int, body: NameBody, current_user: dict = Depends(require_admin)):
    return raise_for_error(education_service.update_lookup("level", level_id, body.name))


@router.delete("/levels/{level_id}", summary="Delete Education Level")
async def delete_level(level_id: int, current_user: dict = Depends(require_admin)):
    return raise_for_error(education_service.delete_lookup("level", level_id))


# === Faculties ===

@router.get("/faculties", summary="Get Faculties")
async def get_faculties():
    return raise_for_error(education_service.list_lookup("faculty"))


@router.post("/faculties", status_code=201, summary="Create Faculty")
async def create_faculty(body: NameBody, current_user: dict = Depends(require_admin)):
    return raise_for_error(education_service.create_lookup("faculty", body.name))


@router.put("/faculties/{faculty_id}", summary="Update Faculty")
async def update_faculty(faculty_id: int, body: NameBody, current_user: dict = Depends(require_admin)):
    return raise_for_error(education_service.update_lookup("faculty", faculty_id, body.name))


@router.delete("/faculties/{faculty_id}", summary="Delete Faculty")
async def delete_faculty(faculty_id: int, current_user: dict = Depends(require_admin)):
    return raise_for_error(education_service.delete_lookup("faculty", faculty_id))


# === Programs ===

@router.get("/programs", summary="Get Programs")
async def get_programs(
    faculty_id: Optional[int] = Query(None, description="Filter by faculty ID"),
    level_id: Optional[int] = Query(None, description="Filter by level ID")
):
    """Program studi, bisa difilter per fakultas dan jenjang"""
    return raise_for_error(education_service.list_programs(faculty_id, level_id))


@router.post("/programs", status_code=201, summary="Create Program")
async def create_program(body: ProgramBody, current_user: dict = Depends(require_admin)):
    """
    Tambah program studi.

    - **name**: wajib
    - **faculty_id**: wajib, harus ada
    - **level_id**: opsional, harus ada jika diisi
    """
    return raise_for_error(education_service.create_program(body.model_dump(exclude_unset=True)))


@router.put("/programs/{program_id}", summary="Update Program")
async def update_program(program_id: int, body: ProgramBody, current_user: dict = Depends(require_admin)):
    return raise_for_error(education_service.update_program(program_id, body.model_dump(exclude_unset=True)))


@router.delete("/programs/{program_id}", summary="Delete Program")
async def delete_program(program_id: int, current_user: dict = Depends(require_admin)):
    return raise_for_error(education_service.delete_program(program_id))
