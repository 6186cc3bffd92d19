"""
Test hierarchy engine: archive catalog and static field levels
"""
import pytest

from app.models import Archive, Category, Position, FieldCategory, FieldSubcategory
from app.services.hierarchy_service import catalog_hierarchy, field_hierarchy


def build_field_chain():
    """Create category -> subcategory -> location -> cabinet -> shelf -> position"""
    ids = {}
    ids["category"] = field_hierarchy.create_node("category", {"name": "Arsip Akademik"})["data"]["id"]
    ids["subcategory"] = field_hierarchy.create_node(
        "subcategory", {"name": "Ijazah", "category_id": ids["category"]})["data"]["id"]
    ids["location"] = field_hierarchy.create_node(
        "location", {"name": "Gedung A", "subcategory_id": ids["subcategory"]})["data"]["id"]
    ids["cabinet"] = field_hierarchy.create_node(
        "cabinet", {"name": "Lemari 1", "location_id": ids["location"]})["data"]["id"]
    ids["shelf"] = field_hierarchy.create_node(
        "shelf", {"name": "Rak 3", "cabinet_id": ids["cabinet"]})["data"]["id"]
    ids["position"] = field_hierarchy.create_node(
        "position", {"name": "Box 12", "shelf_id": ids["shelf"]})["data"]["id"]
    return ids


class TestLevelTable:
    """Test parent/child derivation from level order"""

    def test_field_levels(self):
        assert [lvl.key for lvl in field_hierarchy.levels] == [
            "category", "subcategory", "location", "cabinet", "shelf", "position"
        ]
        assert field_hierarchy.parent_of("cabinet").key == "location"
        assert field_hierarchy.child_of("cabinet").key == "shelf"
        assert field_hierarchy.parent_of("category") is None
        assert field_hierarchy.child_of("position") is None

    def test_catalog_levels(self):
        assert field_hierarchy.level("position").model is not catalog_hierarchy.level("position").model
        assert catalog_hierarchy.child_of("subcategory").key == "position"


class TestStaticFieldCrud:
    """Test the six-level static field hierarchy"""

    def test_create_requires_name(self):
        result = field_hierarchy.create_node("category", {"name": "   "})
        assert result["success"] is False
        assert result["code"] == 400

    def test_create_requires_parent(self):
        result = field_hierarchy.create_node("location", {"name": "Gedung B"})
        assert result["code"] == 400

    def test_create_with_missing_parent(self):
        result = field_hierarchy.create_node("shelf", {"name": "Rak 9", "cabinet_id": 404})
        assert result["code"] == 404
        assert result["message"] == "Cabinet not found"

    def test_duplicate_name_within_parent(self):
        ids = build_field_chain()
        duplicate = field_hierarchy.create_node("shelf", {"name": "Rak 3", "cabinet_id": ids["cabinet"]})
        assert duplicate["code"] == 400

        other_cabinet = field_hierarchy.create_node(
            "cabinet", {"name": "Lemari 2", "location_id": ids["location"]})["data"]["id"]
        same_name_elsewhere = field_hierarchy.create_node("shelf", {"name": "Rak 3", "cabinet_id": other_cabinet})
        assert same_name_elsewhere["success"] is True

    def test_list_includes_ancestor_names(self):
        build_field_chain()
        rows = field_hierarchy.list_nodes("position")["data"]

        assert len(rows) == 1
        row = rows[0]
        assert row["name"] == "Box 12"
        assert row["shelf_name"] == "Rak 3"
        assert row["cabinet_name"] == "Lemari 1"
        assert row["location_name"] == "Gedung A"
        assert row["subcategory_name"] == "Ijazah"
        assert row["category_name"] == "Arsip Akademik"

    def test_list_by_parent(self):
        ids = build_field_chain()
        field_hierarchy.create_node("cabinet", {"name": "Lemari 0", "location_id": ids["location"]})

        rows = field_hierarchy.list_nodes("cabinet", parent_id=ids["location"])["data"]
        assert [r["name"] for r in rows] == ["Lemari 0", "Lemari 1"]
        assert field_hierarchy.list_nodes("cabinet", parent_id=999)["code"] == 404

    def test_update_revalidates_parent(self):
        ids = build_field_chain()
        result = field_hierarchy.update_node("shelf", ids["shelf"], {"name": "Rak 4", "cabinet_id": 999})
        assert result["code"] == 404

        result = field_hierarchy.update_node("shelf", ids["shelf"], {"name": "Rak 4"})
        assert result["success"] is True
        assert result["data"]["name"] == "Rak 4"
        assert result["data"]["cabinet_id"] == ids["cabinet"]

    @pytest.mark.parametrize("level", ["category", "subcategory", "location", "cabinet", "shelf"])
    def test_delete_blocked_while_children_exist(self, level, db_session):
        ids = build_field_chain()

        result = field_hierarchy.delete_node(level, ids[level])

        assert result["success"] is False
        assert result["code"] == 400
        assert result["message"].startswith(f"Cannot delete {level} with existing")
        # Nothing was removed
        for key, node_id in ids.items():
            assert field_hierarchy.get_node(key, node_id)["success"] is True

    def test_delete_leaf_then_parents(self, db_session):
        ids = build_field_chain()
        for level in ["position", "shelf", "cabinet", "location", "subcategory", "category"]:
            assert field_hierarchy.delete_node(level, ids[level])["success"] is True
            assert field_hierarchy.get_node(level, ids[level])["code"] == 404

        assert db_session.query(FieldCategory).count() == 0
        assert db_session.query(FieldSubcategory).count() == 0

    def test_get_path(self):
        ids = build_field_chain()
        data = field_hierarchy.get_path("position", ids["position"])["data"]

        assert data["position_name"] == "Box 12"
        assert data["category_id"] == ids["category"]
        assert [step["level"] for step in data["path"]] == [
            "category", "subcategory", "location", "cabinet", "shelf", "position"
        ]
        assert [step["name"] for step in data["path"]][-2:] == ["Rak 3", "Box 12"]


class TestCatalogHierarchy:
    """Test archive catalog categories, subcategories and positions"""

    def test_categories_nest_subcategories(self):
        cat = catalog_hierarchy.create_node("category", {"name": "Keuangan"})["data"]["id"]
        catalog_hierarchy.create_node("subcategory", {"name": "SPJ", "category_id": cat})
        catalog_hierarchy.create_node("subcategory", {"name": "Anggaran", "category_id": cat})
        catalog_hierarchy.create_node("category", {"name": "Akademik"})

        data = catalog_hierarchy.list_with_children("category")["data"]

        assert [c["name"] for c in data] == ["Akademik", "Keuangan"]
        assert data[0]["subcategories"] == []
        assert [s["name"] for s in data[1]["subcategories"]] == ["Anggaran", "SPJ"]

    def test_category_used_by_archive_cannot_be_deleted(self, db_session):
        cat = catalog_hierarchy.create_node("category", {"name": "Keuangan"})["data"]["id"]
        db_session.add(Archive(title="Laporan", category_id=cat))
        db_session.commit()

        result = catalog_hierarchy.delete_node("category", cat)

        assert result["code"] == 400
        assert "archives" in result["message"]
        assert db_session.get(Category, cat) is not None

    def test_delete_position_detaches_archives(self, db_session):
        cat = catalog_hierarchy.create_node("category", {"name": "Keuangan"})["data"]["id"]
        sub = catalog_hierarchy.create_node("subcategory", {"name": "SPJ", "category_id": cat})["data"]["id"]
        pos = catalog_hierarchy.create_node("position", {"name": "Rak 1", "subcategory_id": sub})["data"]["id"]
        archive = Archive(title="Kwitansi", category_id=cat, subcategory_id=sub, position_id=pos)
        db_session.add(archive)
        db_session.commit()

        assert catalog_hierarchy.delete_node("position", pos)["success"] is True

        db_session.expire_all()
        assert db_session.get(Position, pos) is None
        assert db_session.get(Archive, archive.id).position_id is None


class TestStaticFieldRoutes:
    """Test generated /api/static-fields routes"""

    def test_crud_flow(self, test_client, admin_headers):
        response = test_client.post("/api/static-fields/categories", json={"name": "Arsip"}, headers=admin_headers)
        assert response.status_code == 201
        cat_id = response.json()["data"]["id"]

        response = test_client.post(
            "/api/static-fields/subcategories",
            json={"name": "Ijazah", "category_id": cat_id},
            headers=admin_headers
        )
        assert response.status_code == 201

        response = test_client.get(f"/api/static-fields/subcategories/by-category/{cat_id}")
        assert response.status_code == 200
        assert response.json()["data"][0]["category_name"] == "Arsip"

        response = test_client.delete(f"/api/static-fields/categories/{cat_id}", headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Cannot delete category with existing subcategories"

    def test_missing_parent_is_404(self, test_client, admin_headers):
        response = test_client.post(
            "/api/static-fields/locations", json={"name": "Gedung", "subcategory_id": 77}, headers=admin_headers
        )
        assert response.status_code == 404

    def test_position_path_route(self, test_client):
        ids = build_field_chain()
        response = test_client.get(f"/api/static-fields/positions/{ids['position']}/path")

        assert response.status_code == 200
        assert response.json()["data"]["shelf_name"] == "Rak 3"

    def test_writes_require_admin(self, test_client):
        response = test_client.post("/api/static-fields/categories", json={"name": "Arsip"})
        assert response.status_code == 401
