"""Integration tests for the admin namespace.

Covers:
- every admin route (and unknown admin paths) rejects missing / wrong passwords
- session listing, download, delete, bulk download and bulk delete
- analysis and course reports, including their 400 cases and caching
- saving, listing, downloading and deleting reports
"""

import json

import pytest

pytestmark = pytest.mark.integration

ADMIN_ROUTES = [
    ("get", "/api/admin/sessions"),
    ("get", "/api/admin/sessions/workshop/x.json"),
    ("delete", "/api/admin/sessions/workshop/x.json"),
    ("get", "/api/admin/sessions-all/all"),
    ("delete", "/api/admin/sessions-all/all"),
    ("post", "/api/admin/analyze/workshop"),
    ("post", "/api/admin/course-report/adoption/x.json"),
    ("post", "/api/admin/save-analysis"),
    ("post", "/api/admin/save-course-report"),
    ("get", "/api/admin/reports"),
    ("get", "/api/admin/reports/analysis/x.txt"),
    ("delete", "/api/admin/reports/analysis/x.txt"),
    ("get", "/api/admin/does/not/exist"),
]


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("method,path", ADMIN_ROUTES)
def test_admin_route_requires_authorization(client, method, path):
    response = getattr(client, method)(path)

    assert response.status_code == 401
    assert response.json()["error"] == "Unauthorized"
    assert "debug_id" in response.json()


@pytest.mark.parametrize("method,path", ADMIN_ROUTES)
def test_admin_route_rejects_wrong_password(client, method, path):
    response = getattr(client, method)(path, headers={"Authorization": "Bearer wrong"})

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid password"


def test_unknown_admin_path_with_password_is_404(client, admin_headers):
    response = client.get("/api/admin/does/not/exist", headers=admin_headers)
    assert response.status_code == 404


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


def test_list_sessions_across_survey_types(client, admin_headers, start_session):
    start_session("workshop", name="Ada", email="ada@example.edu")
    start_session("faculty", name="Grace", email="grace@example.edu")

    response = client.get("/api/admin/sessions", headers=admin_headers)

    assert response.status_code == 200
    sessions = response.json()["sessions"]
    assert {s["survey_type"] for s in sessions} == {"workshop", "faculty"}
    assert sessions[0]["start_time"] >= sessions[1]["start_time"]
    assert all(s["status"] == "in_progress" for s in sessions)


def test_list_sessions_filters_by_type(client, admin_headers, start_session):
    start_session("workshop")
    start_session("faculty")

    response = client.get("/api/admin/sessions", params={"survey_type": "faculty"}, headers=admin_headers)

    assert [s["survey_type"] for s in response.json()["sessions"]] == ["faculty"]


def test_list_sessions_hides_password_hash(client, admin_headers, start_session):
    start_session("creative-curriculum", password="pw")

    response = client.get("/api/admin/sessions", headers=admin_headers)

    assert "password_hash" not in response.json()["sessions"][0]["participant"]


def test_list_sessions_invalid_type_is_400(client, admin_headers):
    response = client.get("/api/admin/sessions", params={"survey_type": "bogus"}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid survey type: bogus"


def test_download_session_returns_attachment(client, admin_headers, settings, start_session):
    session_id = start_session()
    [path] = (settings.sessions_dir / "workshop").glob("*.json")

    response = client.get(f"/api/admin/sessions/workshop/{path.name}", headers=admin_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    assert f'filename="{path.name}"' in response.headers["content-disposition"]
    assert json.loads(response.text)["session_id"] == session_id


def test_download_session_leaves_out_password_hash(client, admin_headers, settings, start_session):
    start_session("creative-curriculum", password="pw")
    [path] = (settings.sessions_dir / "creative-curriculum").glob("*.json")
    assert "password_hash" in json.loads(path.read_text(encoding="utf-8"))["participant"]

    response = client.get(f"/api/admin/sessions/creative-curriculum/{path.name}", headers=admin_headers)

    assert response.status_code == 200
    participant = json.loads(response.text)["participant"]
    assert participant["email"] == "ada@example.edu"
    assert "password_hash" not in participant


def test_download_missing_session_is_404(client, admin_headers):
    response = client.get("/api/admin/sessions/workshop/missing.json", headers=admin_headers)
    assert response.status_code == 404


def test_download_with_invalid_survey_type_is_400(client, admin_headers):
    response = client.get("/api/admin/sessions/bogus/x.json", headers=admin_headers)
    assert response.status_code == 400


def test_download_with_traversal_filename_is_400(client, admin_headers):
    response = client.get("/api/admin/sessions/workshop/..secret.json", headers=admin_headers)

    assert response.status_code == 400
    assert "Invalid filename" in response.json()["error"]


def test_delete_session(client, admin_headers, settings, start_session):
    start_session()
    [path] = (settings.sessions_dir / "workshop").glob("*.json")

    response = client.delete(f"/api/admin/sessions/workshop/{path.name}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Session deleted successfully"}
    assert not path.exists()


def test_delete_missing_session_is_404(client, admin_headers):
    response = client.delete("/api/admin/sessions/workshop/missing.json", headers=admin_headers)
    assert response.status_code == 404


def test_download_all_sessions_adds_survey_type(client, admin_headers, start_session):
    start_session("workshop")
    start_session("adoption")

    response = client.get("/api/admin/sessions-all/all", headers=admin_headers)

    assert response.status_code == 200
    assert 'filename="all-sessions-all.json"' in response.headers["content-disposition"]
    records = response.json()
    assert sorted(r["survey_type"] for r in records) == ["adoption", "workshop"]
    assert all("conversation" in r for r in records)


def test_download_all_sessions_leaves_out_password_hash(client, admin_headers, start_session):
    start_session("creative-curriculum", password="pw")

    response = client.get("/api/admin/sessions-all/creative-curriculum", headers=admin_headers)

    assert response.status_code == 200
    [record] = response.json()
    assert "password_hash" not in record["participant"]


def test_delete_all_sessions_of_one_type(client, admin_headers, settings, start_session):
    start_session("workshop", email="a@example.edu")
    start_session("workshop", email="b@example.edu")
    start_session("faculty")

    response = client.delete("/api/admin/sessions-all/workshop", headers=admin_headers)

    assert response.json() == {
        "success": True,
        "deleted_count": 2,
        "message": "Successfully deleted 2 session(s)",
    }
    assert list((settings.sessions_dir / "workshop").glob("*.json")) == []
    assert len(list((settings.sessions_dir / "faculty").glob("*.json"))) == 1


def test_delete_all_invalid_type_is_400(client, admin_headers):
    response = client.delete("/api/admin/sessions-all/bogus", headers=admin_headers)
    assert response.status_code == 400


# ---------------------------------------------------------------------------
# Analysis / course reports
# ---------------------------------------------------------------------------


def test_analyze_without_sessions_is_400(client, admin_headers):
    response = client.post("/api/admin/analyze/workshop", headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "No sessions to analyze"


def test_analyze_without_completed_sessions_is_400(client, admin_headers, start_session):
    start_session()

    response = client.post("/api/admin/analyze/workshop", headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "No completed sessions to analyze"


def _complete_session(client, start_session, survey_type, name="Ada Lovelace", answer="The hands-on prompting session."):
    session_id = start_session(survey_type, name=name)
    client.post(f"/api/{survey_type}/message", json={"session_id": session_id, "message": answer})
    client.post(
        f"/api/{survey_type}/complete",
        json={"session_id": session_id, "summary": "**Course Overview:** BIOL 101, concerns about integrity."},
    )
    return session_id


def test_analyze_completed_sessions(client, admin_headers, fake_llm, start_session):
    _complete_session(client, start_session, "workshop")

    response = client.post("/api/admin/analyze/workshop", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["analysis"].startswith("REPORT")
    call = fake_llm.calls[-1]
    assert call["system"] is None
    assert call["max_tokens"] == 4000
    prompt = call["messages"][0]["content"]
    assert "Ada Lovelace" in prompt
    assert "The hands-on prompting session." in prompt


def test_course_report_generated_then_cached(client, admin_headers, fake_llm, settings, start_session):
    _complete_session(client, start_session, "adoption")
    [path] = (settings.sessions_dir / "adoption").glob("*.json")
    calls_before = len(fake_llm.calls)
    url = f"/api/admin/course-report/adoption/{path.name}"

    first = client.post(url, headers=admin_headers)
    second = client.post(url, headers=admin_headers)

    assert first.status_code == 200
    assert second.json()["report"] == first.json()["report"]
    assert len(fake_llm.calls) == calls_before + 1
    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored["course_report"] == first.json()["report"]
    assert stored["course_report_generated"]


def test_course_report_for_survey_without_template_is_400(client, admin_headers):
    response = client.post("/api/admin/course-report/workshop/x.json", headers=admin_headers)
    assert response.status_code == 400


def test_course_report_for_in_progress_session_is_400(client, admin_headers, settings, start_session):
    start_session("adoption")
    [path] = (settings.sessions_dir / "adoption").glob("*.json")

    response = client.post(f"/api/admin/course-report/adoption/{path.name}", headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Can only generate reports for completed sessions"


def test_course_report_missing_file_is_404(client, admin_headers):
    response = client.post("/api/admin/course-report/adoption/missing.json", headers=admin_headers)
    assert response.status_code == 404


# ---------------------------------------------------------------------------
# Saved reports
# ---------------------------------------------------------------------------


def test_save_list_download_delete_analysis(client, admin_headers):
    saved = client.post(
        "/api/admin/save-analysis",
        json={"survey_type": "workshop", "analysis": "Findings..."},
        headers=admin_headers,
    )
    assert saved.status_code == 200
    filename = saved.json()["filename"]
    assert filename.startswith("workshop-analysis-")

    listing = client.get("/api/admin/reports", headers=admin_headers).json()
    assert [r["filename"] for r in listing["analysis"]] == [filename]
    assert listing["courses"] == []

    download = client.get(f"/api/admin/reports/analysis/{filename}", headers=admin_headers)
    assert download.text == "Findings..."
    assert download.headers["content-type"].startswith("text/plain")

    deleted = client.delete(f"/api/admin/reports/analysis/{filename}", headers=admin_headers)
    assert deleted.json() == {"success": True}
    assert client.get("/api/admin/reports", headers=admin_headers).json()["analysis"] == []


def test_save_course_report_sanitizes_name(client, admin_headers):
    response = client.post(
        "/api/admin/save-course-report",
        json={
            "survey_type": "adoption",
            "filename": "ada_at_example.edu_x.json",
            "participant_name": "Ada O'Neil",
            "report": "Report body",
        },
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["filename"].startswith("course-Ada_O_Neil-")


def test_save_analysis_requires_fields(client, admin_headers):
    response = client.post("/api/admin/save-analysis", json={"survey_type": "workshop"}, headers=admin_headers)
    assert response.status_code == 400


def test_report_invalid_type_is_400(client, admin_headers):
    response = client.get("/api/admin/reports/bogus/x.txt", headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid report type: bogus"


def test_missing_report_is_404(client, admin_headers):
    response = client.get("/api/admin/reports/courses/missing.txt", headers=admin_headers)
    assert response.status_code == 404
