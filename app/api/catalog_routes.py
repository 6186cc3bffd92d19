"""
API Routes untuk katalog arsip: kategori, subkategori, posisi
"""
from fastapi import APIRouter, Query, Depends
from typing import Optional

from app.api.deps import require_admin, raise_for_error
from app.schemas import HierarchyNodeBody
from app.services.hierarchy_service import catalog_hierarchy

router = APIRouter(prefix="/api", tags=["Catalog"])


# === Categories ===

@router.get("/categories", summary="Get Categories")
async def get_categories():
    """Semua kategori beserta daftar subkategorinya"""
    return raise_for_error(catalog_hierarchy.list_with_children("category"))


@router.get("/categories/{category_id}", summary="Get Category by ID")
async def get_category(category_id: int):
    return raise_for_error(catalog_hierarchy.get_node("category", category_id))


@router.post("/categories", status_code=201, summary="Create Category")
async def create_category(body: HierarchyNodeBody, current_user: dict = Depends(require_admin)):
    return raise_for_error(catalog_hierarchy.create_node("category", body.model_dump(exclude_unset=True)))


@router.put("/categories/{category_id}", summary="Update Category")
async def update_category(category_id: int, body: HierarchyNodeBody,
                          current_user: dict = Depends(require_admin)):
    return raise_for_error(
        catalog_hierarchy.update_node("category", category_id, body.model_dump(exclude_unset=True))
    )


@router.delete("/categories/{category_id}", summary="Delete Category")
async def delete_category(category_id: int, current_user: dict = Depends(require_admin)):
    """Ditolak selama masih ada subkategori atau arsip yang memakai kategori ini"""
    return raise_for_error(catalog_hierarchy.delete_node("category", category_id))


# === Subcategories ===

@router.get("/subcategories", summary="Get Subcategories")
async def get_subcategories(category_id: Optional[int] = Query(None, description="Filter by category ID")):
    return raise_for_error(catalog_hierarchy.list_nodes("subcategory", parent_id=category_id))


@router.get("/subcategories/{subcategory_id}", summary="Get Subcategory by ID")
async def get_subcategory(subcategory_id: int):
    return raise_for_error(catalog_hierarchy.get_node("subcategory", subcategory_id))


@router.post("/subcategories", status_code=201, summary="Create Subcategory")
async def create_subcategory(body: HierarchyNodeBody, current_user: dict = Depends(require_admin)):
    return raise_for_error(catalog_hierarchy.create_node("subcategory", body.model_dump(exclude_unset=True)))


@router.put("/subcategories/{subcategory_id}", summary="Update Subcategory")
async def update_subcategory(subcategory_id: int, body: HierarchyNodeBody,
                             current_user: dict = Depends(require_admin)):
    return raise_for_error(
        catalog_hierarchy.update_node("subcategory", subcategory_id, body.model_dump(exclude_unset=True))
    )


@router.delete("/subcategories/{subcategory_id}", summary="Delete Subcategory")
async def delete_subcategory(subcategory_id: int, current_user: dict = Depends(require_admin)):
    return raise_for_error(catalog_hierarchy.delete_node("subcategory", subcategory_id))


# === Positions ===

@router.get("/positions", summary="Get Positions")
async def get_positions(subcategory_id: Optional[int] = Query(None, description="Filter by subcategory ID")):
    return raise_for_error(catalog_hierarchy.list_nodes("position", parent_id=subcategory_id))


@router.get("/positions/{position_id}", summary="Get Position by ID")
async def get_position(position_id: int):
    return raise_for_error(catalog_hierarchy.get_node("position", position_id))


@router.post("/positions", status_code=201, summary="Create Position")
async def create_position(body: HierarchyNodeBody, current_user: dict = Depends(require_admin)):
    return raise_for_error(catalog_hierarchy.create_node("position", body.model_dump(exclude_unset=True)))


@router.put("/positions/{position_id}", summary="Update Position")
async def update_position(position_id: int, body: HierarchyNodeBody,
                          current_user: dict = Depends(require_admin)):
    return raise_for_error(
        catalog_hierarchy.update_node("position", position_id, body.model_dump(exclude_unset=True))
    )


@router.delete("/positions/{position_id}", summary="Delete Position")
async def delete_position(position_id: int, current_user: dict = Depends(require_admin)):
    """Arsip yang memakai posisi ini dilepas (position_id menjadi NULL)"""
    return raise_for_error(catalog_hierarchy.delete_node("position", position_id))
