from fastapi.testclient import TestClient

from reviewbot.app.config import Settings
from reviewbot.app.gateway import QuotaExceeded, Success
from reviewbot.app.main import create_app
from reviewbot.app.notices import AUTH_RETRY_MESSAGE, NoticeBoard
from reviewbot.app.service import ReviewBotService
from reviewbot.tests._fakes import CLEAN_REPORT, FakeAnalysis, FakeRegistrar, ManualScheduler


def _client(analysis, registrar_results=(True,)):
    service = ReviewBotService(
        settings=Settings(),
        registrar=FakeRegistrar(list(registrar_results)),
        analysis=analysis,
        scheduler=ManualScheduler(),
        notices=NoticeBoard(forward=None),
    )
    return TestClient(create_app(service))


def test_health():
    with _client(FakeAnalysis()) as client:
        resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_login_validation_rejects_bad_email():
    with _client(FakeAnalysis()) as client:
        resp = client.post("/api/login", json={"name": "Ada", "email": "not-an-email"})
    assert resp.status_code == 422


def test_login_failure_reports_retry_notice():
    with _client(FakeAnalysis(), registrar_results=(False,)) as client:
        resp = client.post("/api/login", json={"name": "Ada", "email": "ada@x.com"})
    body = resp.json()
    assert resp.status_code == 200
    assert body["ok"] is False
    assert body["session"] == "LOGGED_OUT"
    assert body["error"]["message"] == AUTH_RETRY_MESSAGE


def test_audit_requires_login():
    with _client(FakeAnalysis(audit=[Success(CLEAN_REPORT)])) as client:
        resp = client.post("/api/audit", json={"code": "int main(){}"})
    assert resp.json()["accepted"] is False
    assert resp.headers["X-UX-State"] == "LOGGED_OUT"


def test_audit_flow_and_cooldown_headers():
    analysis = FakeAnalysis(audit=[Success(CLEAN_REPORT), QuotaExceeded()])
    with _client(analysis) as client:
        assert client.post("/api/login", json={"name": " Ada ", "email": "ada@x.com"}).json()["ok"]

        first = client.post("/api/audit", json={"code": "int main(){}"})
        assert first.json()["accepted"] is True
        assert first.json()["state"]["report"]["headline"] == "Code Clean"
        assert first.headers["X-UX-State"] == "READY"
        assert "X-Cooldown-Seconds" not in first.headers

        second = client.post("/api/audit", json={})
        assert second.headers["X-UX-State"] == "COOLDOWN"
        assert second.headers["X-Cooldown-Seconds"] == "60"
        assert second.json()["state"]["audit_button_label"] == "Wait 60s"

        blocked = client.post("/api/optimize", json={})
        assert blocked.json()["accepted"] is False

    assert analysis.audit_calls == ["int main(){}", "int main(){}"]


def test_put_code_updates_editor():
    with _client(FakeAnalysis()) as client:
        resp = client.put("/api/code", json={"code": "class A {}"})
        assert resp.status_code == 200
        assert client.get("/api/state").json()["session"] == "LOGGED_OUT"
