"""
HTTP API tests
Routers, auth, response envelope and error mapping over ASGI
"""
from io import BytesIO

from openpyxl import load_workbook

from candidate_crm.services.export import XLSX_MEDIA_TYPE


async def create_candidate(api, headers, **overrides):
    body = {"name": "Ada Lovelace", "email": "ada@x.com", "job_type": "software_engineer"}
    body.update(overrides)
    response = await api.post("/api/candidates", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestAuth:

    async def test_missing_token(self, api):
        response = await api.get("/api/candidates")

        assert response.status_code == 401
        assert response.json() == {"is_success": False, "message": "Unauthorized", "data": None}

    async def test_invalid_token(self, api):
        response = await api.get("/api/candidates", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401


class TestHealth:

    async def test_health_reports_tables(self, api):
        response = await api.get("/health")

        assert response.status_code == 200
        assert response.json()["tables"] == {"candidates": True, "notes": True}


class TestCandidatesApi:

    async def test_create_and_get(self, api, auth_headers):
        headers = auth_headers()
        created = await create_candidate(api, headers, phone="", school="MIT")

        assert created["user_id"] == "user_1"
        assert created["status"] == "new"
        assert created["phone"] is None
        assert created["school"] == "MIT"

        response = await api.get(f"/api/candidates/{created['id']}", headers=headers)
        body = response.json()
        assert response.status_code == 200
        assert body["is_success"] is True
        assert body["message"] == "Candidate retrieved successfully"
        assert body["data"]["name"] == "Ada Lovelace"

    async def test_create_with_first_note(self, api, auth_headers):
        headers = auth_headers()
        created = await create_candidate(api, headers, note="Met at PyCon")

        response = await api.get(f"/api/candidates/{created['id']}/notes", headers=headers)

        assert [n["content"] for n in response.json()["data"]] == ["Met at PyCon"]

    async def test_create_validation(self, api, auth_headers):
        response = await api.post(
            "/api/candidates",
            json={"name": "", "job_type": "software_engineer"},
            headers=auth_headers(),
        )
        assert response.status_code == 422

        response = await api.post(
            "/api/candidates",
            json={"name": "Ada", "job_type": "astronaut"},
            headers=auth_headers(),
        )
        assert response.status_code == 422

    async def test_other_users_candidate_is_not_found(self, api, auth_headers):
        created = await create_candidate(api, auth_headers("user_1"))

        response = await api.get(f"/api/candidates/{created['id']}", headers=auth_headers("user_2"))

        assert response.status_code == 404
        assert response.json() == {"is_success": False, "message": "Candidate not found", "data": None}

    async def test_list_search_and_filters(self, api, auth_headers):
        headers = auth_headers()
        await create_candidate(api, headers, name="Ada", email="ada@x.com", current_company="Acme")
        await create_candidate(api, headers, name="Grace", email="grace@x.com", current_company="Navy",
                               status="hired")
        await create_candidate(api, auth_headers("user_2"), name="Foreign", email="f@x.com",
                               current_company="Acme")

        listed = (await api.get("/api/candidates", headers=headers)).json()
        assert sorted(c["name"] for c in listed["data"]) == ["Ada", "Grace"]

        searched = (await api.get("/api/candidates", params={"q": "acme"}, headers=headers)).json()
        assert searched["message"] == "Candidates search successful"
        assert [c["name"] for c in searched["data"]] == ["Ada"]

        blank = (await api.get("/api/candidates", params={"q": "   "}, headers=headers)).json()
        assert len(blank["data"]) == 2

        hired = (await api.get("/api/candidates", params={"status": "hired"}, headers=headers)).json()
        assert [c["name"] for c in hired["data"]] == ["Grace"]

    async def test_patch_and_delete(self, api, auth_headers):
        headers = auth_headers()
        created = await create_candidate(api, headers, phone="123")

        response = await api.patch(
            f"/api/candidates/{created['id']}", json={"status": "interviewing"}, headers=headers
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "interviewing"
        assert response.json()["data"]["phone"] == "123"
        patched = response.json()["data"]
        assert patched["created_at"].endswith("Z")
        assert patched["updated_at"].endswith("Z")

        response = await api.patch(f"/api/candidates/{created['id']}", json={"name": None}, headers=headers)
        assert response.status_code == 422

        response = await api.delete(f"/api/candidates/{created['id']}", headers=headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Candidate deleted successfully"

        response = await api.get(f"/api/candidates/{created['id']}", headers=headers)
        assert response.status_code == 404


class TestNotesApi:

    async def test_note_lifecycle(self, api, auth_headers):
        headers = auth_headers()
        candidate = await create_candidate(api, headers)

        response = await api.post(
            f"/api/candidates/{candidate['id']}/notes", json={"content": "First call"}, headers=headers
        )
        assert response.status_code == 201
        note = response.json()["data"]

        response = await api.patch(f"/api/notes/{note['id']}", json={"content": "Second call"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["data"]["content"] == "Second call"

        response = await api.delete(f"/api/notes/{note['id']}", headers=headers)
        assert response.status_code == 200

        response = await api.get(f"/api/candidates/{candidate['id']}/notes", headers=headers)
        assert response.json()["data"] == []

    async def test_note_content_limits(self, api, auth_headers):
        headers = auth_headers()
        candidate = await create_candidate(api, headers)
        url = f"/api/candidates/{candidate['id']}/notes"

        assert (await api.post(url, json={"content": ""}, headers=headers)).status_code == 422
        assert (await api.post(url, json={"content": "x" * 1001}, headers=headers)).status_code == 422
        assert (await api.post(url, json={"content": "x" * 1000}, headers=headers)).status_code == 201

    async def test_foreign_note_mutation(self, api, auth_headers):
        candidate = await create_candidate(api, auth_headers("user_1"))
        note = (await api.post(
            f"/api/candidates/{candidate['id']}/notes", json={"content": "mine"}, headers=auth_headers("user_1")
        )).json()["data"]

        response = await api.patch(f"/api/notes/{note['id']}", json={"content": "x"}, headers=auth_headers("user_2"))
        assert response.status_code == 404
        assert response.json()["message"] == "Note not found or not authorized"

        response = await api.delete(f"/api/notes/{note['id']}", headers=auth_headers("user_2"))
        assert response.status_code == 404


class TestResumesApi:

    async def test_parse_resume(self, api, auth_headers, fake_storage, resume_pdf):
        response = await api.post(
            "/api/resumes/parse",
            files={"file": ("ada.pdf", resume_pdf, "application/pdf")},
            headers=auth_headers(),
        )

        assert response.status_code == 200, response.text
        data = response.json()["data"]
        assert data["form"]["name"] == "Ada Lovelace"
        assert data["form"]["resume_url"] == data["resume_path"]
        assert data["resume_path"].startswith("user-1/resumes/")
        assert data["resume_path"] in fake_storage.objects

    async def test_parse_rejects_non_pdf(self, api, auth_headers, fake_storage):
        response = await api.post(
            "/api/resumes/parse",
            files={"file": ("resume.docx", b"PK\x03\x04", "application/octet-stream")},
            headers=auth_headers(),
        )

        assert response.status_code == 422
        assert response.json()["message"] == "Only PDF files are supported"
        assert fake_storage.objects == {}

    async def test_resume_url_refresh_and_delete(self, api, auth_headers, fake_storage):
        fake_storage.objects["user-1/resumes/1-ada.pdf"] = b"%PDF"
        headers = auth_headers()
        await create_candidate(api, headers, resume_url="user-1/resumes/1-ada.pdf", resume_filename="ada.pdf")

        response = await api.get("/api/resumes/url", params={"path": "user-1/resumes/1-ada.pdf"}, headers=headers)
        assert response.status_code == 200
        assert "/object/sign/resumes/user-1/resumes/1-ada.pdf" in response.json()["data"]["url"]

        response = await api.get(
            "/api/resumes/url", params={"path": "user-1/resumes/1-ada.pdf"}, headers=auth_headers("user_2")
        )
        assert response.status_code == 404

        response = await api.delete("/api/resumes", params={"path": "user-1/resumes/1-ada.pdf"}, headers=headers)
        assert response.status_code == 200
        assert fake_storage.objects == {}

    async def test_unreferenced_path_is_not_found(self, api, auth_headers, fake_storage):
        """A file in the caller's namespace still needs an owning candidate"""
        fake_storage.objects["user-1/resumes/1-orphan.pdf"] = b"%PDF"

        response = await api.get("/api/resumes/url", params={"path": "user-1/resumes/1-orphan.pdf"},
                                 headers=auth_headers())

        assert response.status_code == 404

    async def test_colliding_user_ids_cannot_share_resumes(self, api, auth_headers, fake_storage):
        """user_1 and user-1 sanitize to the same storage prefix but own nothing in common"""
        path = "user-1/resumes/1-secret.pdf"
        fake_storage.objects[path] = b"%PDF"
        await create_candidate(api, auth_headers("user_1"), resume_url=path)

        for intruder in ("user-1", "user.1"):
            response = await api.get("/api/resumes/url", params={"path": path}, headers=auth_headers(intruder))
            assert response.status_code == 404
            assert response.json()["message"] == "Resume file not found in storage"

            response = await api.delete("/api/resumes", params={"path": path}, headers=auth_headers(intruder))
            assert response.status_code == 404

        assert path in fake_storage.objects
        response = await api.get("/api/resumes/url", params={"path": path}, headers=auth_headers("user_1"))
        assert response.status_code == 200


class TestExportApi:

    async def test_export_all(self, api, auth_headers):
        headers = auth_headers()
        await create_candidate(api, headers, name="Ada")
        await create_candidate(api, auth_headers("user_2"), name="Foreign")

        response = await api.get("/api/export", headers=headers)

        assert response.status_code == 200
        assert response.headers["content-type"] == XLSX_MEDIA_TYPE
        assert 'filename="candidates-' in response.headers["content-disposition"]
        assert int(response.headers["content-length"]) == len(response.content)
        rows = list(load_workbook(BytesIO(response.content))["Candidates"].iter_rows(values_only=True))
        assert [row[0] for row in rows[1:]] == ["Ada"]

    async def test_filtered_export(self, api, auth_headers):
        headers = auth_headers()
        await create_candidate(api, headers, name="Ada", job_type="software_engineer")
        grace = await create_candidate(api, headers, name="Grace", job_type="data_scientist")

        response = await api.post("/api/export", json={"candidate_ids": [grace["id"]]}, headers=headers)

        assert response.status_code == 200
        assert "candidates_filtered_export_" in response.headers["content-disposition"]
        rows = list(load_workbook(BytesIO(response.content))["Candidates"].iter_rows(values_only=True))
        assert [row[0] for row in rows[1:]] == ["Grace"]

    async def test_filtered_export_without_matches(self, api, auth_headers):
        headers = auth_headers()
        await create_candidate(api, headers, name="Ada")

        response = await api.post("/api/export", json={"name": "nobody"}, headers=headers)

        assert response.status_code == 404
        assert response.json()["message"] == "No candidates found matching the filter criteria"
