"""
Integration Tests for the records REST API
Tests for: list/create/update/delete per entity, joined lists, exports, errors
"""
import pytest

from app.exceptions import ExportError
from app.services.export_service import ExportService


def create(client, entity, payload) -> int:
    response = client.post(f"/{entity}", json=payload)
    assert response.status_code == 200, response.text
    return response.json()["id"]


@pytest.fixture
def seeded(client):
    group_id = create(client, "groups", {"speciality_code": "121", "speciality_name": "Software Engineering"})
    student_id = create(client, "students", {"first_name": "Taras", "last_name": "Shevchenko", "group_id": str(group_id)})
    teacher_id = create(client, "teachers", {"first_name": "Ivan", "last_name": "Franko"})
    subject_id = create(client, "subjects", {"name": "Databases"})
    grade_id = create(client, "grades", {
        "student_id": student_id, "teacher_id": teacher_id, "subject_id": subject_id,
        "grade": 95, "note": "Excellent",
    })
    return {
        "group": group_id, "student": student_id, "teacher": teacher_id,
        "subject": subject_id, "grade": grade_id,
    }


class TestRoot:
    def test_root_lists_sections(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert [s["name"] for s in response.json()["sections"]] == [
            "groups", "students", "teachers", "subjects", "grades"
        ]

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"


class TestGroupsApi:
    def test_empty_list(self, client):
        response = client.get("/groups")

        assert response.status_code == 200
        assert response.json() == []

    def test_create_and_list(self, client):
        group_id = create(client, "groups", {"speciality_code": "007", "speciality_name": "Law"})

        [group] = client.get("/groups").json()

        assert group["id"] == group_id
        assert group["speciality_code"] == 7
        assert group["speciality_name"] == "Law"
        assert "created_at" in group and "updated_at" in group

    def test_create_accepts_integer_code(self, client):
        create(client, "groups", {"speciality_code": 42, "speciality_name": "Chemistry"})

        assert client.get("/groups").json()[0]["speciality_code"] == 42

    def test_invalid_create_returns_field_errors(self, client):
        response = client.post("/groups", json={"speciality_code": "12", "speciality_name": "L"})

        assert response.status_code == 422
        assert response.json() == {"errors": {
            "speciality_code": "Speciality code must be exactly 3 digits",
            "speciality_name": "Speciality name must be at least 2 characters",
        }}
        assert client.get("/groups").json() == []

    def test_update(self, client):
        group_id = create(client, "groups", {"speciality_code": "121", "speciality_name": "Software Engineering"})

        response = client.put(f"/groups/{group_id}", json={"speciality_code": "122", "speciality_name": "Computer Science"})

        assert response.status_code == 200
        assert response.json() == {"message": "Group updated successfully"}
        [group] = client.get("/groups").json()
        assert (group["speciality_code"], group["speciality_name"]) == (122, "Computer Science")

    def test_invalid_update_keeps_record(self, client):
        group_id = create(client, "groups", {"speciality_code": "121", "speciality_name": "Software Engineering"})

        response = client.put(f"/groups/{group_id}", json={"speciality_code": "abc", "speciality_name": "Law"})

        assert response.status_code == 422
        assert client.get("/groups").json()[0]["speciality_code"] == 121

    @pytest.mark.parametrize("method", ["put", "delete"])
    def test_id_beyond_storage_range(self, client, method):
        kwargs = {"json": {"speciality_code": "121", "speciality_name": "Law"}} if method == "put" else {}

        response = getattr(client, method)("/groups/99999999999999999999", **kwargs)

        assert response.status_code == 422

    def test_non_text_name_rejected(self, client):
        response = client.post("/subjects", json={"name": 12})

        assert response.status_code == 422
        assert response.json() == {"errors": {"name": "Subject name must be text"}}

    def test_delete(self, client):
        group_id = create(client, "groups", {"speciality_code": "121", "speciality_name": "Software Engineering"})

        response = client.delete(f"/groups/{group_id}")

        assert response.json() == {"message": "Group deleted successfully"}
        assert client.get("/groups").json() == []


class TestJoinedLists:
    def test_students_include_group(self, client, seeded):
        [student] = client.get("/students").json()
        [group] = client.get("/groups").json()

        assert student["group_id"] == seeded["group"]
        assert student["group"] == group

    def test_grades_include_relations(self, client, seeded):
        [grade] = client.get("/grades").json()

        assert grade["grade"] == 95
        assert grade["note"] == "Excellent"
        assert grade["student"]["last_name"] == "Shevchenko"
        assert grade["teacher"]["last_name"] == "Franko"
        assert grade["subject"]["name"] == "Databases"

    def test_deleted_teacher_becomes_null(self, client, seeded):
        client.delete(f"/teachers/{seeded['teacher']}")

        [grade] = client.get("/grades").json()

        assert grade["teacher"] is None
        assert grade["teacher_id"] == seeded["teacher"]

    def test_grade_out_of_range(self, client, seeded):
        response = client.put(f"/grades/{seeded['grade']}", json={
            "student_id": seeded["student"], "teacher_id": seeded["teacher"],
            "subject_id": seeded["subject"], "grade": "101",
        })

        assert response.status_code == 422
        assert response.json()["errors"] == {"grade": "Grade must be between 0 and 100"}

    def test_student_with_huge_group_id(self, client, seeded):
        response = client.post("/students", json={
            "first_name": "Lesya", "last_name": "Ukrainka", "group_id": "99999999999999999999",
        })

        assert response.status_code == 422
        assert response.json()["errors"] == {"group_id": "Please select a group"}
        assert len(client.get("/students").json()) == 1

    def test_update_after_delete_leaves_record_deleted(self, client, seeded):
        client.delete(f"/subjects/{seeded['subject']}")

        response = client.put(f"/subjects/{seeded['subject']}", json={"name": "Networks"})

        assert response.status_code == 200
        assert client.get("/subjects").json() == []


class TestExports:
    def test_csv_export(self, client, seeded):
        response = client.get("/students/export/csv")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert 'filename="Students.csv"' in response.headers["content-disposition"]
        assert response.text == "Last Name,First Name,Group\nShevchenko,Taras,Software Engineering"

    def test_csv_export_of_groups_pads_code(self, client):
        create(client, "groups", {"speciality_code": "007", "speciality_name": "Law"})

        assert client.get("/groups/export/csv").text == "Speciality Code,Speciality Name\n007,Law"

    def test_pdf_export(self, client, seeded):
        response = client.get("/grades/export/pdf")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert 'filename="Grades.pdf"' in response.headers["content-disposition"]
        assert response.content.startswith(b"%PDF")


class TestPersistenceFailures:
    @pytest.mark.parametrize("entity", ["groups", "students", "teachers", "subjects", "grades"])
    def test_list_failure(self, broken_client, entity):
        response = broken_client.get(f"/{entity}")

        assert response.status_code == 500
        assert response.json() == {"error": f"Failed to fetch {entity}"}

    def test_create_failure(self, broken_client):
        response = broken_client.post("/subjects", json={"name": "Databases"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create subject"}

    def test_update_failure(self, broken_client):
        response = broken_client.put("/teachers/1", json={"first_name": "Ivan", "last_name": "Franko"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to update teacher"}

    def test_delete_failure(self, broken_client):
        response = broken_client.delete("/grades/1")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to delete grade"}

    def test_export_failure(self, broken_client):
        response = broken_client.get("/groups/export/csv")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to export groups"}

    def test_pdf_font_failure(self, client, monkeypatch):
        def missing_font():
            raise ExportError("PDF font not found")

        monkeypatch.setattr(ExportService, "register_font", missing_font)

        response = client.get("/subjects/export/pdf")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to export subjects"}
