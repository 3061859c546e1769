import json
import os
import subprocess
import sys
from pathlib import Path


def test_http_request_logging(client, caplog):
    import logging
    caplog.set_level(logging.DEBUG)
    r = client.get("/healthz")
    assert r.status_code == 200
    # Find a request log record
    assert any(rec.name == "onepassword_mcp.request" and rec.msg == "request" for rec in caplog.records)


def test_route_response_logging(client, headers, caplog):
    import logging
    caplog.set_level(logging.INFO)
    r = client.get("/vaults", headers=headers)
    assert r.status_code == 200
    assert any(rec.name == "onepassword_mcp.response" and rec.msg == "vault_list" for rec in caplog.records)


def test_generated_passwords_are_never_logged(client, headers, caplog):
    import logging
    caplog.set_level(logging.DEBUG)
    pw = client.post("/passwords/generate", headers=headers, json={"length": 64}).json()["password"]
    assert pw not in caplog.text
    assert all(pw not in json.dumps(getattr(rec, "extra", {})) for rec in caplog.records)


def test_mcp_logging(rpc, caplog):
    import logging
    caplog.set_level(logging.DEBUG)
    rpc("initialize")
    # Expect mcp_result log for initialize
    assert any(rec.name == "onepassword_mcp.response" and rec.msg == "mcp_result" and getattr(rec, "extra", {}).get("method") == "initialize" for rec in caplog.records)

    rpc("tools/call", {"name": "item_lookup", "arguments": {"vaultId": "v1", "query": "git"}})
    results = [rec for rec in caplog.records if rec.msg == "mcp_result" and rec.extra.get("method") == "tools/call"]
    assert results and results[-1].extra["tool"] == "item_lookup"
    calls = [rec for rec in caplog.records if rec.msg == "tool_call"]
    # the search query is not among the logged fields
    assert calls and "query" not in calls[-1].extra


def test_json_formatter_shape():
    import logging
    from onepassword_mcp.logs import JSONFormatter

    rec = logging.LogRecord("onepassword_mcp.stdio", logging.INFO, __file__, 1, "stdio_result", None, None)
    rec.extra = {"id": 1, "status": "ok"}
    line = json.loads(JSONFormatter().format(rec))
    assert line["msg"] == "stdio_result"
    assert line["lvl"] == "info"
    assert line["logger"] == "onepassword_mcp.stdio"
    assert line["id"] == 1 and line["status"] == "ok"


def test_configure_logger_levels(tmp_path):
    import logging
    from onepassword_mcp.logs import configure_logger

    lg = configure_logger("onepassword_mcp.test_levels", "warn", str(tmp_path), "t.log")
    assert lg.level == logging.WARNING
    lg = configure_logger("onepassword_mcp.test_levels", "debug", str(tmp_path), "t.log")
    assert lg.level == logging.DEBUG
    # handlers are attached once
    assert len(lg.handlers) == 2
    assert (tmp_path / "t.log").exists()


def test_stdio_logging(tmp_path):
    # Run the stdio process and ensure stdout carries only JSON-RPC while logs go to stderr
    repo_root = Path(__file__).resolve().parent.parent
    env = {k: v for k, v in os.environ.items() if k != "OP_SERVICE_ACCOUNT_TOKEN"}
    env["LOG_DIR"] = str(tmp_path / "logs")
    proc = subprocess.Popen(
        [sys.executable, str(repo_root / "scripts" / "mcp_stdio.py"), "--log-level", "debug"],
        stdin=subprocess.PIPE, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True, env=env, cwd=str(tmp_path),
    )
    requests = [
        {"jsonrpc": "2.0", "id": 1, "method": "initialize"},
        {"jsonrpc": "2.0", "id": 99, "method": "shutdown"},
    ]
    try:
        out, err = proc.communicate("".join(json.dumps(r) + "\n" for r in requests), timeout=30)
    finally:
        if proc.poll() is None:
            proc.kill()
    assert proc.returncode == 0
    lines = [json.loads(line) for line in out.splitlines()]
    assert [m["id"] for m in lines] == [1, 99]
    assert "server_start" in err and "stdio_result" in err
    assert '"token_source": "missing"' in err
    stdio_log = tmp_path / "logs" / "stdio.log"
    assert stdio_log.exists()
    assert "stdio_request" in stdio_log.read_text(encoding="utf-8")
