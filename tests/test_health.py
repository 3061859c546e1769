def test_healthz(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json()["ok"] is True
    assert "time" in r.json()


def test_livez(client):
    r = client.get("/livez")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_readyz_ready(client):
    r = client.get("/readyz")
    assert r.status_code == 200
    assert r.json()["onepassword"] == {"ok": True, "detail": "ready"}


def test_readyz_missing_token(tmp_path):
    from fastapi.testclient import TestClient
    from onepassword_mcp.app import create_app
    from onepassword_mcp.settings import load_settings

    s = load_settings(LOG_DIR=str(tmp_path))
    r = TestClient(create_app(s)).get("/readyz")
    assert r.status_code == 503
    body = r.json()
    assert body["ok"] is False
    assert "Service account token is required" in body["onepassword"]["detail"]


def test_readyz_authentication_error(test_settings):
    from fastapi.testclient import TestClient
    from onepassword_mcp.account import AccountProvider
    from onepassword_mcp.app import create_app

    async def boom(*args):
        raise RuntimeError("invalid service account token")

    r = TestClient(create_app(test_settings, AccountProvider(test_settings, factory=boom))).get("/readyz")
    assert r.status_code == 503
    assert r.json()["onepassword"]["detail"] == "1Password error: invalid service account token"
