"""
Test education reference data (levels, faculties, programs)
"""
import pytest

from app.models import Program
from app.services.education_service import education_service


@pytest.fixture
def faculty_and_level():
    faculty = education_service.create_lookup("faculty", "Fakultas Ilmu Komputer")["id"]
    level = education_service.create_lookup("level", "S1")["id"]
    return faculty, level


class TestLookups:
    """Test levels and faculties"""

    @pytest.mark.parametrize("key", ["level", "faculty"])
    def test_name_required(self, key):
        result = education_service.create_lookup(key, " ")
        assert result["code"] == 400

    def test_duplicate_name(self):
        education_service.create_lookup("level", "D3")
        result = education_service.create_lookup("level", "D3")

        assert result["code"] == 400
        assert result["message"] == "Level with this name already exists"

    def test_list_sorted(self):
        for name in ["S2", "D3", "S1"]:
            education_service.create_lookup("level", name)
        assert [row["name"] for row in education_service.list_lookup("level")["data"]] == ["D3", "S1", "S2"]

    def test_rename(self):
        faculty_id = education_service.create_lookup("faculty", "FIK")["id"]
        result = education_service.update_lookup("faculty", faculty_id, "Fakultas Ilmu Komputer")

        assert result["data"]["name"] == "Fakultas Ilmu Komputer"
        assert education_service.update_lookup("faculty", 999, "X")["code"] == 404

    def test_in_use_cannot_be_deleted(self, faculty_and_level):
        faculty, level = faculty_and_level
        education_service.create_program({"name": "Informatika", "faculty_id": faculty, "level_id": level})

        assert education_service.delete_lookup("faculty", faculty)["message"] == \
            "Cannot delete faculty with existing programs"
        assert education_service.delete_lookup("level", level)["code"] == 400

    def test_delete_unused(self):
        level_id = education_service.create_lookup("level", "S3")["id"]
        assert education_service.delete_lookup("level", level_id)["success"] is True
        assert education_service.list_lookup("level")["data"] == []


class TestPrograms:
    """Test programs and their references"""

    def test_name_and_faculty_required(self, faculty_and_level):
        faculty, _ = faculty_and_level
        assert education_service.create_program({"name": "Informatika"})["code"] == 400
        assert education_service.create_program({"faculty_id": faculty})["code"] == 400

    def test_unknown_references(self, faculty_and_level):
        faculty, _ = faculty_and_level
        assert education_service.create_program({"name": "X", "faculty_id": 999})["message"] == "Faculty not found"
        result = education_service.create_program({"name": "X", "faculty_id": faculty, "level_id": 999})
        assert result["message"] == "Education level not found"

    def test_filter_by_faculty_and_level(self, faculty_and_level):
        faculty, level = faculty_and_level
        other_faculty = education_service.create_lookup("faculty", "Fakultas Teknik")["id"]
        education_service.create_program({"name": "Sistem Informasi", "faculty_id": faculty, "level_id": level})
        education_service.create_program({"name": "Informatika", "faculty_id": faculty})
        education_service.create_program({"name": "Teknik Mesin", "faculty_id": other_faculty, "level_id": level})

        by_faculty = education_service.list_programs(faculty_id=faculty)["data"]
        assert [p["name"] for p in by_faculty] == ["Informatika", "Sistem Informasi"]

        by_both = education_service.list_programs(faculty_id=faculty, level_id=level)["data"]
        assert [p["name"] for p in by_both] == ["Sistem Informasi"]

    def test_update_and_delete(self, faculty_and_level, db_session):
        faculty, level = faculty_and_level
        program_id = education_service.create_program({"name": "Informatika", "faculty_id": faculty})["id"]

        result = education_service.update_program(program_id, {"name": "Teknik Informatika", "level_id": level})
        assert result["data"]["name"] == "Teknik Informatika"
        assert result["data"]["level_id"] == level
        assert result["data"]["faculty_id"] == faculty

        assert education_service.delete_program(program_id)["success"] is True
        assert db_session.query(Program).count() == 0


class TestEducationRoutes:
    """Test /api/education endpoints"""

    def test_program_flow(self, test_client, admin_headers):
        response = test_client.post("/api/education/faculties", json={"name": "FEB"}, headers=admin_headers)
        assert response.status_code == 201
        faculty_id = response.json()["id"]

        response = test_client.post(
            "/api/education/programs",
            json={"name": "Manajemen", "faculty_id": faculty_id},
            headers=admin_headers,
        )
        assert response.status_code == 201

        response = test_client.get("/api/education/programs", params={"faculty_id": faculty_id})
        assert [p["name"] for p in response.json()["data"]] == ["Manajemen"]

        response = test_client.delete(f"/api/education/faculties/{faculty_id}", headers=admin_headers)
        assert response.status_code == 400

    def test_levels_are_public(self, test_client):
        response = test_client.get("/api/education/levels")
        assert response.status_code == 200
        assert response.json() == {"success": True, "data": []}

    def test_writes_require_token(self, test_client):
        response = test_client.post("/api/education/levels", json={"name": "S1"})
        assert response.status_code == 401
