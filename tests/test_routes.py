import re

import pytest
from fastapi.testclient import TestClient

from main import create_app
from models.analysis_result import DisasterType
from models.session_models import FileSelected, ImageDecoded
from routes.page_route import SESSION_COOKIE
from services.errors import ANALYSIS_FAILED_MESSAGE
from services.scan.session_store import SessionStore
from utils.settings import get_settings

from fakes import FakeClassifier, make_image_bytes, make_result


@pytest.fixture()
def classifier():
    return FakeClassifier()


@pytest.fixture()
def client(monkeypatch, classifier):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "4096")
    get_settings.cache_clear()
    app = create_app()
    with TestClient(app) as test_client:
        app.state.session_store = SessionStore(classifier)
        yield test_client
    get_settings.cache_clear()


def _upload(data=None, content_type="image/png"):
    return {"file": ("scan.png", data if data is not None else make_image_bytes(), content_type)}


def test_health(client):
    body = client.get("/health").json()
    assert body["ok"] is True
    assert body["openai_available"] is True


def test_missing_api_key_fails_startup(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setattr("utils.settings.load_dotenv", lambda *args, **kwargs: False)
    get_settings.cache_clear()
    with pytest.raises(RuntimeError):
        with TestClient(create_app()):
            pass
    get_settings.cache_clear()


def test_api_scan_flow(client, classifier):
    session_id = client.post("/api/sessions").json()["session_id"]

    response = client.post(f"/api/sessions/{session_id}/scans", files=_upload())
    assert response.status_code == 200
    state = response.json()["state"]
    assert state["phase"] == "result_ready"
    assert state["dashboard"]["badge"]["label"] == "Wildfire Detected"
    assert state["dashboard"]["confidence_text"] == "92.0%"
    assert [item["category"] for item in state["history"]] == ["FOREST_FIRE"]
    assert len(classifier.calls) == 1

    item_id = state["history"][0]["id"]
    restored = client.post(f"/api/sessions/{session_id}/history/{item_id}/restore").json()["state"]
    assert restored["dashboard"]["result"]["category"] == "FOREST_FIRE"
    assert len(classifier.calls) == 1

    cleared = client.delete(f"/api/sessions/{session_id}/history").json()["state"]
    assert cleared["history"] == []
    assert cleared["dashboard"] is not None


def test_api_classifier_failure_is_reported_in_state(client, classifier):
    classifier.fail = True
    session_id = client.post("/api/sessions").json()["session_id"]

    state = client.post(f"/api/sessions/{session_id}/scans", files=_upload()).json()["state"]

    assert state["error"] == ANALYSIS_FAILED_MESSAGE
    assert state["dashboard"] is None
    assert state["history"] == []


def test_api_request_errors(client):
    session_id = client.post("/api/sessions").json()["session_id"]

    assert client.get("/api/sessions/nope").status_code == 404
    assert client.post(f"/api/sessions/{session_id}/history/nope/restore").status_code == 404
    assert client.post(f"/api/sessions/{session_id}/scans", files=_upload(b"")).status_code == 400
    assert client.post(f"/api/sessions/{session_id}/scans", files=_upload(content_type="text/plain")).status_code == 415
    oversized = _upload(b"\x89PNG" + b"\x00" * 5000)
    assert client.post(f"/api/sessions/{session_id}/scans", files=oversized).status_code == 413


def test_page_flow_uses_cookie_session(client, classifier):
    page = client.get("/")
    assert page.status_code == 200
    assert "Deploy Satellite Imagery" in page.text
    assert SESSION_COOKIE not in client.cookies

    response = client.post("/scan", files=_upload())
    assert response.status_code == 200
    assert SESSION_COOKIE in client.cookies
    assert "Wildfire Detected" in response.text
    assert "92.0%" in response.text
    assert "Mission Log" in response.text

    client.post("/history/clear")
    assert "Mission Log" not in client.get("/").text
    assert len(classifier.calls) == 1


def test_page_shows_error_banner(client, classifier):
    classifier.fail = True
    client.get("/")
    response = client.post("/scan", files=_upload())
    assert ANALYSIS_FAILED_MESSAGE in response.text


def test_cookieless_page_views_do_not_store_sessions(client):
    for _ in range(50):
        client.cookies.clear()
        assert client.get("/").status_code == 200
    assert len(client.app.state.session_store) == 0


def test_cookieless_history_posts_do_not_store_sessions(client):
    client.post("/history/clear")
    client.post("/history/abc/restore")
    assert len(client.app.state.session_store) == 0


def test_page_has_analyzing_overlay(client):
    page = client.get("/").text
    assert 'class="analyzing-overlay"' in page
    assert "Analyzing Pixels..." in page
    assert 'data-busy-label="Processing Satellite Feed..."' in page
    assert 'class="dropzone busy"' not in page
    assert not re.search(r'<input type="file"[^>]*\sdisabled', page)


def test_page_renders_busy_dropzone_while_analyzing(client):
    client.post("/scan", files=_upload())
    session = client.app.state.session_store.get(client.cookies[SESSION_COOKIE])
    session.dispatch(FileSelected())
    session.dispatch(ImageDecoded(session.state.generation, "data:image/png;base64,AAAA"))

    page = client.get("/").text

    assert 'class="dropzone busy"' in page
    assert "Processing Satellite Feed..." in page
    assert re.search(r'<input type="file"[^>]*\sdisabled', page)


def test_page_restore_shows_history_entry(client):
    classifier = FakeClassifier([make_result(DisasterType.FIRE, 0.92), make_result(DisasterType.TSUNAMI, 0.5)])
    client.app.state.session_store = SessionStore(classifier)
    client.post("/scan", files=_upload())
    client.post("/scan", files=_upload())
    session = client.app.state.session_store.get(client.cookies[SESSION_COOKIE])
    oldest = session.state.history[-1]
    assert "Tsunami Detected" in client.get("/").text

    response = client.post(f"/history/{oldest.id}/restore")

    assert response.status_code == 200
    assert "Wildfire Detected" in response.text
    assert [item.id for item in session.state.history][-1] == oldest.id
    assert len(classifier.calls) == 2


def test_page_scan_without_file_is_a_no_op(client, classifier):
    client.post("/scan", files=_upload())
    before = client.app.state.session_store.get(client.cookies[SESSION_COOKIE]).state

    response = client.post("/scan", files={"file": ("", b"", "application/octet-stream")})

    assert response.status_code == 200
    assert "Wildfire Detected" in response.text
    after = client.app.state.session_store.get(client.cookies[SESSION_COOKIE]).state
    assert after == before
    assert len(classifier.calls) == 1


def test_page_scan_with_empty_upload_stores_no_session(client, classifier):
    response = client.post("/scan", files={"file": ("", b"", "application/octet-stream")})
    assert response.status_code == 200
    assert len(client.app.state.session_store) == 0
    assert classifier.calls == []
