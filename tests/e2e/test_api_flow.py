"""
End-to-end tests through the HTTP API.

Drives the full operator workflow with FastAPI's TestClient: inspect a
file, start an import, poll until STAGED, review the staged rows, then
approve or reject.
"""

import time

import pytest
from fastapi.testclient import TestClient

from asset_pipeline.api import create_app


@pytest.fixture
def client(settings, write_csv, asset_csv):
    write_csv("assets_q1", asset_csv)
    with TestClient(create_app(settings)) as test_client:
        yield test_client


def wait_until_settled(client: TestClient, job_id: str, timeout: float = 10.0) -> dict:
    """Poll the status endpoint until the job leaves RUNNING."""
    deadline = time.monotonic() + timeout
    while True:
        response = client.get(f"/pipeline/status/{job_id}")
        assert response.status_code == 200
        job = response.json()
        if job["status"] not in ("PENDING", "RUNNING"):
            return job
        if time.monotonic() > deadline:
            pytest.fail(f"Job {job_id} still {job['status']} after {timeout}s")
        time.sleep(0.05)


def start_import(client: TestClient, file_id: str = "assets_q1") -> str:
    response = client.post(f"/pipeline/import/{file_id}")
    assert response.status_code == 200
    body = response.json()
    assert body["message"].startswith(f"Import started for {file_id}")
    return body["jobId"]


@pytest.mark.e2e
class TestInspection:
    """Tests for read-only file inspection"""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_list_files(self, client):
        files = client.get("/pipeline/files").json()
        assert [f["id"] for f in files] == ["assets_q1"]
        assert files[0]["name"] == "assets_q1.csv"
        assert "modifiedAt" in files[0]

    def test_preview(self, client):
        preview = client.get("/pipeline/preview/assets_q1").json()
        assert preview["totalRows"] == 5
        assert preview["columns"][0] == "Asset Tag"
        assert preview["rows"][0]["Status"] == "active"

    def test_field_mappings(self, client):
        summary = client.get("/pipeline/field-mappings/assets_q1").json()
        assert summary["mappedCount"] == 8
        assert summary["unmappedFields"] == []
        assert summary["advisory"] is None
        fields = {m["csvAlias"]: m["assetField"] for m in summary["mappedFields"]}
        assert fields["Warranty Expiry"] == "warrantyExpiration"

    def test_dry_run_validation_stages_nothing(self, client):
        summary = client.get("/pipeline/validate/assets_q1").json()
        assert summary["totalRows"] == 5
        assert summary["validCount"] == 3
        assert summary["invalidCount"] == 2
        assert summary["isValid"] is False
        assert "Row 4: assetTag: Missing required field: Asset Tag" in summary["errors"]
        assert client.get("/pipeline/jobs").json() == []

    def test_rules_and_aliases(self, client):
        assert client.get("/pipeline/rules").json() == []
        aliases = client.get("/pipeline/aliases").json()
        assert {"csvAlias": "Asset Tag", "assetField": "assetTag", "confidence": 100, "isMapped": True} in aliases


@pytest.mark.e2e
class TestImportWorkflow:
    """Tests for import, review and the load decision"""

    def test_import_review_and_approve(self, client):
        job_id = start_import(client)
        job = wait_until_settled(client, job_id)
        assert job["status"] == "STAGED"
        assert job["progress"] == {"totalRows": 5, "processedRows": 5}
        assert (job["validRows"], job["invalidRows"]) == (3, 2)

        staged = client.get(f"/pipeline/staged/{job_id}").json()
        assert staged["validCount"] == 3
        assert staged["invalidCount"] == 2
        assert [row["rowNumber"] for row in staged["data"]] == [2, 3, 4, 5, 6]
        assert staged["data"][0]["willImport"] is True
        assert staged["data"][2]["willImport"] is False

        response = client.post(f"/pipeline/approve/{job_id}")
        assert response.status_code == 200
        assert response.json() == {
            "message": "Imported 3 assets",
            "importedCount": 3,
            "failedCount": 0,
            "errors": [],
        }

        job = client.get(f"/pipeline/status/{job_id}").json()
        assert job["status"] == "COMPLETED"
        assert job["importedRows"] == 3
        assert job["loadDecision"] == "approved"

        second = client.post(f"/pipeline/approve/{job_id}")
        assert second.status_code == 409
        assert "only STAGED jobs can be approved" in second.json()["detail"]

    def test_reject(self, client):
        job_id = start_import(client)
        wait_until_settled(client, job_id)

        response = client.post(f"/pipeline/reject/{job_id}")
        assert response.status_code == 200
        assert response.json() == {"message": "Import rejected; 5 staged rows cleared", "clearedCount": 5}

        again = client.post(f"/pipeline/reject/{job_id}")
        assert again.json()["clearedCount"] == 0

        job = client.get(f"/pipeline/status/{job_id}").json()
        assert job["status"] == "FAILED"
        assert job["errors"] == ["Import rejected by operator"]
        assert client.get(f"/pipeline/staged/{job_id}").json()["data"] == []
        assert client.post(f"/pipeline/approve/{job_id}").status_code == 409

    def test_failed_import_reports_errors(self, client, write_csv):
        write_csv("empty", "")
        job = wait_until_settled(client, start_import(client, "empty"))
        assert job["status"] == "FAILED"
        assert job["errors"] == ["EXTRACT phase failed: CSV file is empty"]

    def test_jobs_listing(self, client):
        first = start_import(client)
        wait_until_settled(client, first)
        jobs = client.get("/pipeline/jobs", params={"limit": 10}).json()
        assert [job["id"] for job in jobs] == [first]

    def test_metrics_exposed(self, client):
        wait_until_settled(client, start_import(client))
        response = client.get("/metrics")
        assert response.status_code == 200
        assert "asset_pipeline_jobs_started_total" in response.text


@pytest.mark.e2e
class TestErrorResponses:
    """Tests for HTTP error mapping"""

    @pytest.mark.parametrize("method,path", [
        ("post", "/pipeline/import/missing"),
        ("get", "/pipeline/preview/missing"),
        ("get", "/pipeline/validate/missing"),
        ("get", "/pipeline/status/job_missing"),
        ("get", "/pipeline/staged/job_missing"),
        ("post", "/pipeline/approve/job_missing"),
        ("post", "/pipeline/reject/job_missing"),
    ])
    def test_unknown_resources_are_404(self, client, method, path):
        response = getattr(client, method)(path)
        assert response.status_code == 404
        assert "not found" in response.json()["detail"]

    @pytest.mark.parametrize("path", [
        "/pipeline/preview/bad..id",
        "/pipeline/status/bad%20id",
        "/pipeline/jobs?limit=0",
        "/pipeline/jobs?limit=501",
    ])
    def test_invalid_input_is_400(self, client, path):
        assert client.get(path).status_code == 400
