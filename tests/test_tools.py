import asyncio
import json
import logging

import pytest

from onepassword_mcp import account as account_mod
from onepassword_mcp.account import AccountProvider
from onepassword_mcp.models import ALL_SCOPES, Principal
from onepassword_mcp.tools import TOOLS, call_tool
from onepassword_mcp.settings import load_settings

FULL = Principal(subject="agent_api", scopes=list(ALL_SCOPES))


def _call(provider, name, arguments=None, p=FULL):
    return asyncio.run(call_tool(name, arguments or {}, p, provider))


def _payload(result):
    assert "isError" not in result
    return json.loads(result["content"][0]["text"])


def test_all_tools_registered_with_schemas():
    assert set(TOOLS) == {
        "vault_list", "item_lookup", "item_delete", "password_create",
        "password_read", "password_update", "password_generate", "password_generate_memorable",
    }
    schema = TOOLS["password_generate"].schema()["inputSchema"]
    assert schema["properties"]["length"]["minimum"] == 8
    assert schema["properties"]["length"]["maximum"] == 128
    assert "includeSymbols" in schema["properties"]
    assert "vaultId" in TOOLS["item_lookup"].schema()["inputSchema"]["required"]
    assert TOOLS["password_generate_memorable"].description.endswith("Uses a ~500-word curated list for good entropy.")


def test_vault_list(provider):
    out = _payload(_call(provider, "vault_list"))
    assert out["vaults"][0] == {"id": "v1", "name": "Personal", "description": "My vault", "type": "USER_CREATED"}
    assert len(out["vaults"]) == 2


def test_item_lookup_filters_case_insensitively_and_limits(provider):
    out = _payload(_call(provider, "item_lookup", {"vaultId": "v1", "query": "github"}))
    assert [i["title"] for i in out["items"]] == ["GitHub Token", "GitHub SSH"]
    assert out["count"] == 2
    out = _payload(_call(provider, "item_lookup", {"vaultId": "v1", "limit": 1}))
    assert out["count"] == 1 and out["items"][0]["vaultId"] == "v1"


def test_item_lookup_rejects_bad_limit(provider):
    res = _call(provider, "item_lookup", {"vaultId": "v1", "limit": 500})
    assert res["isError"] is True
    assert res["content"][0]["text"].startswith("Error: limit")


def test_item_delete(provider, sdk):
    out = _payload(_call(provider, "item_delete", {"vaultId": "v1", "itemId": "i2"}))
    assert out == {"deleted": True, "vaultId": "v1", "itemId": "i2"}
    assert sdk.store["deleted"] == [("v1", "i2")]


def test_password_create_hides_secret_by_default(provider, sdk, monkeypatch):
    captured = {}

    def fake_params(vault_id, title, password, username, category, tags, notes, url):
        captured.update(vault_id=vault_id, title=title, username=username, category=category, url=url)
        return type("P", (), {"title": title, "vault_id": vault_id, "category": category})()

    monkeypatch.setattr(account_mod, "_create_params", fake_params)
    out = _payload(_call(provider, "password_create", {
        "vaultId": "v1", "title": "DB", "password": "pw-123", "username": "admin", "url": "https://db.example.com",
    }))
    assert out == {"id": "new-item", "title": "DB", "vaultId": "v1", "category": "Login"}
    assert captured["username"] == "admin" and captured["url"] == "https://db.example.com"

    out = _payload(_call(provider, "password_create", {
        "vaultId": "v1", "title": "DB2", "password": "pw-456", "category": "Password", "returnSecret": True,
    }))
    assert out["password"] == "pw-456"
    assert out["category"] == "Password"


def test_password_create_validates_url_and_category(provider):
    res = _call(provider, "password_create", {"vaultId": "v1", "title": "x", "password": "p", "url": "not a url"})
    assert res["isError"] is True
    res = _call(provider, "password_create", {"vaultId": "v1", "title": "x", "password": "p", "category": "Note"})
    assert res["isError"] is True
    assert res["content"][0]["text"].startswith("Error: category")


def test_password_read_by_reference(provider, sdk):
    out = _payload(_call(provider, "password_read", {"secretReference": "op://Personal/GitHub/password"}))
    assert out == {"value": "s3cret"}
    out = _payload(_call(provider, "password_read", {"secretReference": "op://Personal/GitHub/password", "reveal": False}))
    assert out == {"resolved": True}
    assert len(sdk.store["resolved"]) == 2


def test_password_read_by_ids(provider):
    assert _payload(_call(provider, "password_read", {"vaultId": "v1", "itemId": "i1"})) == {"value": "hunter2"}
    meta = _payload(_call(provider, "password_read", {"vaultId": "v1", "itemId": "i1", "field": "USERNAME", "reveal": False}))
    assert meta == {"id": "i1", "title": "GitHub", "field": "username", "fieldType": "Text"}


def test_password_read_requires_target(provider):
    res = _call(provider, "password_read", {"vaultId": "v1"})
    assert res["isError"] is True
    assert "secretReference" in res["content"][0]["text"]


def test_password_read_missing_field(provider):
    res = _call(provider, "password_read", {"vaultId": "v1", "itemId": "i1", "field": "otp"})
    assert res == {"content": [{"type": "text", "text": "Error: Field 'otp' not found on item."}], "isError": True}


def test_password_update_rotates_and_hides_secret(provider, sdk):
    out = _payload(_call(provider, "password_update", {"vaultId": "v1", "itemId": "i1", "newPassword": "rotated!"}))
    assert out == {"id": "i1", "title": "GitHub", "vaultId": "v1"}
    assert sdk.store["put"][0].fields[1].value == "rotated!"
    out = _payload(_call(provider, "password_update", {"vaultId": "v1", "itemId": "i1", "newPassword": "again", "returnSecret": True}))
    assert out["password"] == "again"


def test_password_generate_defaults_and_bounds(provider):
    out = _payload(_call(provider, "password_generate"))
    assert len(out["password"]) == 20
    out = _payload(_call(provider, "password_generate", {"length": 8, "includeSymbols": False, "includeNumbers": False, "includeUppercase": False}))
    assert out["password"].isalpha() and out["password"].islower()
    for bad in (7, 129):
        res = _call(provider, "password_generate", {"length": bad})
        assert res["isError"] is True


def test_password_generate_memorable(provider):
    out = _payload(_call(provider, "password_generate_memorable", {"wordCount": 4, "separator": "_", "includeNumber": False, "includeSymbol": False}))
    assert len(out["password"].split("_")) == 4
    assert _call(provider, "password_generate_memorable", {"wordCount": 11})["isError"] is True
    assert _call(provider, "password_generate_memorable", {"separator": "------"})["isError"] is True


def test_generators_work_without_token():
    provider = AccountProvider(load_settings(), factory=lambda *a: None)
    assert _payload(_call(provider, "password_generate", {"length": 12}))["password"]
    res = _call(provider, "vault_list")
    assert res["isError"] is True
    assert "Service account token is required" in res["content"][0]["text"]


def test_unknown_tool_and_missing_scope(provider):
    with pytest.raises(KeyError):
        _call(provider, "nope")
    reader = Principal(subject="ro", scopes=["read"])
    with pytest.raises(PermissionError):
        _call(provider, "item_delete", {"vaultId": "v1", "itemId": "i1"}, p=reader)
    # generators need no scope
    assert _payload(_call(provider, "password_generate", p=Principal(subject="none")))["password"]


def test_failure_log_never_contains_argument_values(provider, caplog):
    caplog.set_level(logging.DEBUG)
    _call(provider, "password_create", {"vaultId": "v1", "title": "t", "password": "TopSecretValue", "url": "bad url"})
    failed = [r for r in caplog.records if r.msg == "tool_failed"]
    assert failed
    assert all("TopSecretValue" not in json.dumps(getattr(r, "extra", {})) for r in caplog.records)


def test_password_create_rejects_empty_tag(provider, sdk):
    res = _call(provider, "password_create", {"vaultId": "v1", "title": "t", "password": "p", "tags": ["ok", ""]})
    assert res["isError"] is True
    assert res["content"][0]["text"].startswith("Error: tags.1")
    assert sdk.store["created"] == []


def test_unhashable_tool_name_is_unknown_tool(provider):
    with pytest.raises(KeyError):
        _call(provider, ["vault_list"])
