import pytest
from django.db import DatabaseError

from academia.models import StudyMaterial

MATERIAL_URL = "https://campus-test-bucket.s3.us-east-1.amazonaws.com/academia/CSE/sem-3/1/notes.pdf"


def material(**overrides):
    data = {
        "title": "DBMS notes",
        "branch": "CSE",
        "semester": "3",
        "url": MATERIAL_URL,
        "file_type": "application/pdf",
        "description": "Unit 1 to 3",
    }
    data.update(overrides)
    return data


@pytest.mark.django_db
class TestStudyMaterials:
    def test_create_and_list_newest_first(self, alice, client_for):
        client = client_for(alice)
        for title in ["DBMS notes", "OS notes"]:
            response = client.post("/academia/materials/", material(title=title), format="json")
            assert response.status_code == 201
            assert response.data["uploaded_by_name"] == "Alice"
            assert response.data["uploaded_by"] == alice.id

        materials = client.get("/academia/materials/").data
        assert [m["title"] for m in materials] == ["OS notes", "DBMS notes"]

    def test_filter_by_branch_and_semester(self, alice, client_for):
        client = client_for(alice)
        client.post("/academia/materials/", material(title="cse3"), format="json")
        client.post("/academia/materials/", material(title="cse5", semester="5"), format="json")
        client.post("/academia/materials/", material(title="ece3", branch="ECE"), format="json")

        by_branch = client.get("/academia/materials/", {"branch": "CSE"}).data
        assert sorted(m["title"] for m in by_branch) == ["cse3", "cse5"]

        both = client.get("/academia/materials/", {"branch": "CSE", "semester": "3"}).data
        assert [m["title"] for m in both] == ["cse3"]

    def test_blank_title_uses_file_name(self, alice, client_for):
        response = client_for(alice).post("/academia/materials/", material(title="  "), format="json")
        assert response.status_code == 201
        assert response.data["title"] == "notes.pdf"

    def test_rejects_unknown_branch_and_semester(self, alice, client_for):
        response = client_for(alice).post(
            "/academia/materials/", material(branch="Law", semester="9"), format="json"
        )
        assert response.status_code == 400
        assert "branch" in response.data
        assert "semester" in response.data
        assert not StudyMaterial.objects.exists()

    def test_rejects_bad_url(self, alice, client_for):
        response = client_for(alice).post("/academia/materials/", material(url="notes.pdf"), format="json")
        assert response.status_code == 400
        assert "url" in response.data

    def test_store_failure_asks_for_retry(self, alice, client_for, monkeypatch):
        def fail(*args, **kwargs):
            raise DatabaseError("database is down")

        monkeypatch.setattr("academia.views.StudyMaterialSerializer.save", fail)
        response = client_for(alice).post("/academia/materials/", material(), format="json")
        assert response.status_code == 503
        assert response.data["retry"] is True

    def test_requires_authentication(self, api_client):
        assert api_client.get("/academia/materials/").status_code == 401
