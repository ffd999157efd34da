import json
import logging


def test_api_request_is_logged_with_request_id(admin_client, caplog):
    with caplog.at_level(logging.INFO, logger="app.api"):
        r = admin_client.get("/api/admin/lessons", headers={"X-Request-ID": "req-42"})
    assert r.status_code == 200
    assert r.headers["X-Request-ID"] == "req-42"

    lines = [rec.getMessage() for rec in caplog.records if rec.getMessage().startswith("request_done ")]
    assert len(lines) == 1
    record = json.loads(lines[0][len("request_done "):])
    assert record["request_id"] == "req-42"
    assert record["path"] == "/api/admin/lessons"
    assert record["method"] == "GET"
    assert record["status_code"] == 200
    assert record["duration_ms"] >= 0


def test_non_api_request_gets_id_but_no_log_line(anon_client, caplog):
    with caplog.at_level(logging.INFO, logger="app.api"):
        r = anon_client.get("/health")
    assert r.headers["X-Request-ID"]
    assert not [rec for rec in caplog.records if rec.getMessage().startswith("request_done ")]
