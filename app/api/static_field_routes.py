"""
API Routes untuk Static Field Content Management (hierarki 6 level)

Setiap level mendapat route yang sama bentuknya:
GET /{plural}, GET /{plural}/by-{parent}/{parent_id}, GET/PUT/DELETE /{plural}/{id}, POST /{plural}
"""
from fastapi import APIRouter, Depends

from app.api.deps import require_admin, raise_for_error
from app.schemas import HierarchyNodeBody
from app.services.hierarchy_service import field_hierarchy, HierarchyLevel

router = APIRouter(prefix="/api/static-fields", tags=["Static Fields"])


def register_level(level: HierarchyLevel):
    """Daftarkan route CRUD untuk satu level hierarki"""
    key = level.key
    base = f"/{level.plural}"
    parent = field_hierarchy.parent_of(key)

    async def list_nodes():
        return raise_for_error(field_hierarchy.list_nodes(key))

    router.add_api_route(base, list_nodes, methods=["GET"],
                         name=f"list_{level.plural}", summary=f"Get all {level.plural}")

    if parent:
        async def list_by_parent(parent_id: int):
            return raise_for_error(field_hierarchy.list_nodes(key, parent_id=parent_id))

        router.add_api_route(f"{base}/by-{parent.key}/{{parent_id}}", list_by_parent, methods=["GET"],
                             name=f"list_{level.plural}_by_{parent.key}",
                             summary=f"Get {level.plural} by {parent.label}")

    async def get_node(node_id: int):
        return raise_for_error(field_hierarchy.get_node(key, node_id))

    async def create_node(body: HierarchyNodeBody, current_user: dict = Depends(require_admin)):
        return raise_for_error(field_hierarchy.create_node(key, body.model_dump(exclude_unset=True)))

    async def update_node(node_id: int, body: HierarchyNodeBody, current_user: dict = Depends(require_admin)):
        return raise_for_error(field_hierarchy.update_node(key, node_id, body.model_dump(exclude_unset=True)))

    async def delete_node(node_id: int, current_user: dict = Depends(require_admin)):
        return raise_for_error(field_hierarchy.delete_node(key, node_id))

    router.add_api_route(f"{base}/{{node_id}}", get_node, methods=["GET"],
                         name=f"get_{key}", summary=f"Get {level.label} by ID")
    router.add_api_route(base, create_node, methods=["POST"], status_code=201,
                         name=f"create_{key}", summary=f"Create {level.label}")
    router.add_api_route(f"{base}/{{node_id}}", update_node, methods=["PUT"],
                         name=f"update_{key}", summary=f"Update {level.label}")
    router.add_api_route(f"{base}/{{node_id}}", delete_node, methods=["DELETE"],
                         name=f"delete_{key}", summary=f"Delete {level.label}")


@router.get("/positions/{position_id}/path", summary="Get Position Hierarchy Path")
async def get_position_path(position_id: int):
    """Rantai lengkap kategori -> subkategori -> lokasi -> lemari -> rak -> posisi"""
    return raise_for_error(field_hierarchy.get_path("position", position_id))


for _level in field_hierarchy.levels:
    register_level(_level)
