#!/usr/bin/env python3
"""
HTTP surface tests. The lifespan is not entered, so the application
database is never touched; every request uses an in-memory session.
"""

import pytest
from fastapi.testclient import TestClient

from pageguard.database import get_db
from pageguard.main import app

API = "/api/v1"


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root_and_health(client):
    assert client.get("/").json()["service"] == "PageGuard"

    health = client.get(f"{API}/health").json()
    assert health["status"] == "healthy"
    assert health["service"] == "PageGuard"


def test_assess_spoofing_site(client):
    response = client.post(f"{API}/assess", json={"url": "http://paypal-login.com"})
    assert response.status_code == 200

    body = response.json()
    assert body["status"] == "success"
    assert body["trusted"] is False
    assert body["verdict"]["safety_score"] == 10
    assert body["verdict"]["risk_level"] == 4
    assert [f["kind"] for f in body["verdict"]["findings"]] == ["insecure_connection", "possible_spoofing"]
    assert body["decision"]["notify"] is True
    assert body["decision"]["priority"] == "urgent"
    assert body["decision"]["message"] == "Risk detected on paypal-login.com"


def test_assess_known_malicious_host(client):
    body = client.post(f"{API}/assess", json={"url": "https://evil-phishing.com/"}).json()
    assert body["verdict"]["safety_score"] == 0
    assert body["verdict"]["findings"][0]["kind"] == "known_malicious"


def test_assess_with_html(client):
    html = "<html><head><title>Verify</title></head><body>Suspicious activity on your card</body></html>"
    body = client.post(f"{API}/assess", json={"url": "https://shop.example", "html": html}).json()

    kinds = {f["kind"] for f in body["verdict"]["findings"]}
    assert kinds == {"suspicious_text", "suspicious_title"}
    assert body["verdict"]["safety_score"] == 100


def test_assess_respects_requested_sensitivity(client):
    body = client.post(
        f"{API}/assess",
        json={"url": "http://shop.example/?account=1", "sensitivity": "high+"},
    ).json()
    # 100 - 30 - 10 = 60 -> LOW
    assert body["verdict"]["risk_level"] == 1
    assert body["decision"]["notify"] is False
    assert body["decision"]["indicator"]["badge_text"] == "!"


def test_assess_without_url(client):
    assert client.post(f"{API}/assess", json={}).json() == {
        "status": "no_active_resource",
        "message": "Open a website to analyze its security.",
    }


@pytest.mark.parametrize("url", ["chrome://settings", "about:blank", "http://"])
def test_assess_rejects_unanalyzable_urls(client, url):
    response = client.post(f"{API}/assess", json={"url": url})
    assert response.status_code == 422
    assert client.get(f"{API}/history").json() == []


def test_invalid_sensitivity_is_rejected(client):
    response = client.post(f"{API}/assess", json={"url": "https://a.example", "sensitivity": "loud"})
    assert response.status_code == 422


def test_status_round_trip(client):
    url = "http://paypal-login.com/signin"

    unseen = client.get(f"{API}/status", params={"url": url}).json()
    assert unseen["recorded"] is False
    assert unseen["verdict"]["safety_score"] == 100
    assert unseen["summary"]["tone"] == "safe"

    client.post(f"{API}/assess", json={"url": url})

    seen = client.get(f"{API}/status", params={"url": url}).json()
    assert seen["recorded"] is True
    assert seen["verdict"]["safety_score"] == 10
    assert seen["summary"]["tone"] == "danger"
    assert seen["form_guard"] == {"confirm_before_submit": True, "flag_login_forms": True}


def test_status_without_url(client):
    assert client.get(f"{API}/status").json()["status"] == "no_active_resource"


def test_whitelist_lifecycle(client):
    first = client.post(f"{API}/whitelist", json={"host": " Paypal-Login.com "}).json()
    assert first == {"status": "success", "host": "paypal-login.com"}

    again = client.post(f"{API}/whitelist", json={"host": "paypal-login.com"}).json()
    assert again["message"] == "Host already whitelisted"
    assert client.get(f"{API}/whitelist").json() == ["paypal-login.com"]

    body = client.post(f"{API}/assess", json={"url": "http://paypal-login.com"}).json()
    assert body["trusted"] is True
    assert body["verdict"]["safety_score"] == 100
    assert body["verdict"]["findings"] == []

    assert "message" not in client.delete(f"{API}/whitelist/paypal-login.com").json()
    missing = client.delete(f"{API}/whitelist/paypal-login.com").json()
    assert missing["message"] == "Host was not whitelisted"
    assert client.get(f"{API}/whitelist").json() == []


def test_whitelist_rejects_empty_host(client):
    assert client.post(f"{API}/whitelist", json={"host": "   "}).status_code == 422


def test_history_newest_first(client):
    for host in ("a.example", "b.example", "c.example"):
        client.post(f"{API}/assess", json={"url": f"https://{host}/"})

    history = client.get(f"{API}/history", params={"limit": 2}).json()
    assert [v["host"] for v in history] == ["c.example", "b.example"]
    assert client.get(f"{API}/history", params={"limit": 0}).status_code == 422


def preflight(client, origin):
    return client.options(
        f"{API}/assess",
        headers={"Origin": origin, "Access-Control-Request-Method": "POST"},
    )


@pytest.mark.parametrize("origin", [
    "chrome-extension://abcdefghijklmnopabcdefghijklmnop",
    "moz-extension://3f1c2a9e-7d44-4b6a-9a51-0c2e8f6d1b77",
])
def test_cors_allows_extension_origins(client, origin):
    response = preflight(client, origin)
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == origin


def test_cors_rejects_web_origins(client):
    response = preflight(client, "http://localhost:3000")
    assert response.status_code == 400
    assert "access-control-allow-origin" not in response.headers
