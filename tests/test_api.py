"""Tests for the FastAPI backend"""

import pytest
from fastapi.testclient import TestClient

from src.backend.api import app
from src.core.config import config


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setitem(config.storage_config, 'data_dir', tmp_path)
    with TestClient(app) as test_client:
        yield test_client


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()['status'] == "healthy"


# ------------------------------------------------------------------
# Analysis
# ------------------------------------------------------------------

class TestAnalyze:
    def test_analyze_and_fetch(self, client, sample_survey, blood_report):
        response = client.post("/api/analyze", json={
            'survey': sample_survey,
            'reports': [blood_report],
            'submission_id': 'sub-1',
        })
        assert response.status_code == 200
        analysis = response.json()
        assert analysis['riskScore'] == 50
        assert analysis['riskLevel'] == 'medium'
        assert len(analysis['reportFindings']) == 3

        fetched = client.get(f"/api/analyses/{analysis['id']}")
        assert fetched.status_code == 200
        assert fetched.json()['submissionId'] == 'sub-1'

    def test_resubmission_returns_same_analysis(self, client, sample_survey):
        body = {'survey': sample_survey, 'submission_id': 'sub-1'}
        first = client.post("/api/analyze", json=body).json()
        second = client.post("/api/analyze", json=body).json()
        assert first['id'] == second['id']
        assert len(client.get("/api/analyses").json()) == 1

    def test_generated_submission_ids(self, client):
        client.post("/api/analyze", json={'survey': {}})
        client.post("/api/analyze", json={'survey': {}})
        assert len(client.get("/api/analyses").json()) == 2

    def test_unknown_patient(self, client, sample_survey):
        response = client.post("/api/analyze", json={
            'survey': sample_survey, 'patient_id': 'nobody',
        })
        assert response.status_code == 404

    def test_unknown_analysis(self, client):
        assert client.get("/api/analyses/missing").status_code == 404
        assert client.get("/api/patients/missing/analysis").status_code == 404

    def test_patient_analysis_after_seed(self, client):
        counts = client.post("/api/demo/seed").json()
        assert counts['patients'] == 3

        response = client.get("/api/patients/3/analysis")
        assert response.status_code == 200
        assert response.json()['riskLevel'] == 'high'


# ------------------------------------------------------------------
# Reports and goals
# ------------------------------------------------------------------

class TestReportsAndGoals:
    def test_upload_reports(self, client):
        response = client.post("/api/reports", json={'files': [
            {'name': 'cbc_march.pdf', 'type': 'application/pdf', 'size': 1536},
            {'name': 'discharge.pdf', 'type': 'application/pdf', 'size': 0},
        ]})
        assert response.status_code == 200
        reports = response.json()
        assert reports[0]['content']['type'] == 'Blood Test'
        assert reports[0]['displaySize'] == '1.5 KB'
        assert reports[1]['content']['status'] == 'Under Review'
        assert reports[1]['displaySize'] == '0 Bytes'

    def test_goal_toggle_and_progress(self, client, sample_survey):
        client.post("/api/analyze", json={'survey': sample_survey, 'submission_id': 's'})

        toggled = client.post("/api/goals/1/toggle").json()
        assert toggled == {'goal_id': 1, 'completed': True}

        progress = client.get("/api/goals/progress").json()
        assert progress['completion'] == 25.0

        assert client.post("/api/goals/1/toggle").json()['completed'] is False

    def test_invalid_files_left_out(self, client):
        response = client.post("/api/reports", json={'files': [
            {'name': 'blood.exe', 'type': 'application/x-msdownload', 'size': 1024},
            {'name': 'chest_xray.png', 'type': 'image/png', 'size': 2048},
            {'name': 'cbc_scan.pdf', 'type': 'application/pdf', 'size': 11 * 1024 * 1024},
        ]})
        assert response.status_code == 200
        assert [r['name'] for r in response.json()] == ['chest_xray.png']

    def test_only_invalid_files_rejected(self, client):
        response = client.post("/api/reports", json={'files': [
            {'name': 'blood.exe', 'type': 'application/x-msdownload', 'size': 52428800},
        ]})
        assert response.status_code == 400

    def test_sustainable_goals(self, client):
        goals = client.get("/api/goals/sustainable").json()
        assert [g['id'] for g in goals] == [101, 102, 103, 104, 105]
        assert goals[0]['frequency'] == 'Daily'


# ------------------------------------------------------------------
# Health camps
# ------------------------------------------------------------------

class TestCamps:
    @pytest.fixture(autouse=True)
    def seeded(self, client):
        client.post("/api/demo/seed")

    def test_search_with_availability(self, client):
        camps = client.get("/api/camps", params={'location': 'powai'}).json()
        assert [c['id'] for c in camps] == ['2']
        assert camps[0]['availability'] == 'success'
        assert len(client.get("/api/camps").json()) == 2
        assert client.get("/api/camps", params={'location': 'delhi'}).json() == []

    def test_book_then_duplicate(self, client):
        response = client.post("/api/camps/1/book", json={'patient_id': '2'})
        assert response.status_code == 200
        assert response.json()['campId'] == '1'

        duplicate = client.post("/api/camps/1/book", json={'patient_id': '2'})
        assert duplicate.status_code == 409

        camp = next(c for c in client.get("/api/camps").json() if c['id'] == '1')
        assert camp['booked'] == 46

    def test_book_unknown_camp(self, client):
        response = client.post("/api/camps/99/book", json={'patient_id': '2'})
        assert response.status_code == 404

    def test_cancel(self, client):
        client.post("/api/camps/2/book", json={'patient_id': '1'})
        response = client.post("/api/camps/2/cancel", json={'patient_id': '1'})
        assert response.status_code == 200

        camp = next(c for c in client.get("/api/camps").json() if c['id'] == '2')
        assert camp['booked'] == 28
        assert client.post("/api/camps/2/cancel", json={'patient_id': '1'}).status_code == 404
