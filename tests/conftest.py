import sys
from pathlib import Path
import pytest
from fastapi.testclient import TestClient

# Ensure repo root is on sys.path so 'onepassword_mcp' is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fake_sdk import default_sdk  # noqa: E402

API_KEYS_JSON = '{"dev-api-key":"agent_api","dev-key":"agent_api"}'


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    # Keep the developer's shell from leaking into Settings()
    for name in (
        "MCP_LOG_LEVEL", "MCP_DEBUG", "OP_SERVICE_ACCOUNT_TOKEN", "OP_INTEGRATION_NAME",
        "OP_INTEGRATION_VERSION", "APP_CONFIG_FILE", "CONFIG_FILE", "API_KEYS_JSON",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def sdk():
    return default_sdk()


@pytest.fixture()
def test_settings(tmp_path):
    from onepassword_mcp.settings import load_settings
    return load_settings(
        OP_SERVICE_ACCOUNT_TOKEN="test-token",
        API_KEYS_JSON=API_KEYS_JSON,
        AUTH_API_KEY_ENABLED=True,
        RATE_LIMIT_ENABLED=False,
        LOG_DIR=str(tmp_path / "logs"),
        MCP_LOG_LEVEL="debug",
    )


@pytest.fixture()
def provider(test_settings, sdk):
    from onepassword_mcp.account import AccountProvider

    async def factory(token, name, version):
        return sdk
    return AccountProvider(test_settings, factory=factory)


@pytest.fixture()
def app(test_settings, provider):
    from onepassword_mcp.app import create_app
    return create_app(test_settings, provider)


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def headers():
    return {"X-API-Key": "dev-key", "Content-Type": "application/json"}


@pytest.fixture()
def rpc(client, headers):
    """POST one JSON-RPC request to /mcp/rpc and return the decoded body."""
    counter = {"id": 0}

    def call(method, params=None):
        counter["id"] += 1
        body = {"jsonrpc": "2.0", "id": counter["id"], "method": method}
        if params is not None:
            body["params"] = params
        r = client.post("/mcp/rpc", headers=headers, json=body)
        assert r.status_code == 200
        return r.json()
    return call
