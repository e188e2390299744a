import json
import logging
from pathlib import Path

import pytest

import fnevent.cli as cli
from fnevent.log import JsonFormatter, configure_logging
from fnevent.utils import Settings, get_settings


ROOT = Path(__file__).resolve().parents[1]
ENTRY = f"{ROOT / 'examples' / 'user.py'}:handler"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.delenv("FNEVENT_HANDLER", raising=False)
    monkeypatch.delenv("FNEVENT_LOG_LEVEL", raising=False)
    monkeypatch.setenv("FNEVENT_CONFIG", str(tmp_path / "missing.json"))
    yield
    # handlers installed by the CLI hold the captured stderr of this test
    logger = logging.getLogger("fnevent")
    for h in list(logger.handlers):
        if getattr(h, "_fnevent", False):
            logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)


def run_cli(args, capsys):
    print(f"[fnevent CLI] $ fnevent {' '.join(args)}")
    capsys.readouterr()
    rc = cli.main(args)
    out = capsys.readouterr()
    return rc, out.out, out.err


def test_invoke_prints_event(capsys):
    rc, out, _ = run_cli(["invoke", ENTRY, "--path", "/api/user?id=7"], capsys)
    assert rc == 0
    assert json.loads(out) == {"statusCode": 200, "headers": {"content-type": "application/json"}, "body": "7"}


def test_invoke_uses_handler_from_env(monkeypatch, capsys):
    monkeypatch.setenv("FNEVENT_HANDLER", ENTRY)
    rc, out, _ = run_cli(["invoke", "--path", "/x"], capsys)
    assert rc == 0
    assert json.loads(out)["statusCode"] == 400


def test_invoke_event_file(tmp_path, capsys):
    ev = tmp_path / "event.json"
    ev.write_text(json.dumps({"Action": "Invoke", "body": json.dumps({"path": "/?id=abc"})}), encoding="utf-8")
    rc, out, _ = run_cli(["invoke", ENTRY, "--event", str(ev)], capsys)
    assert rc == 0
    assert json.loads(out)["body"] == "abc"


def test_invoke_binary_body(tmp_path, capsys):
    fn = tmp_path / "echo.py"
    fn.write_text("def handler(request):\n    return request.body\n", encoding="utf-8")
    rc, out, _ = run_cli(["invoke", f"{fn}:handler", "-X", "POST", "-H", "X-A: 1", "-d", "hi", "--binary"], capsys)
    assert rc == 0
    assert json.loads(out) == {"statusCode": 200, "body": "aGk=", "encoding": "base64"}


def test_invoke_without_entrypoint_fails(capsys):
    rc, _, err = run_cli(["invoke"], capsys)
    assert rc == 2
    assert "FNEVENT_HANDLER" in err


def test_invoke_bad_entrypoint_fails(capsys):
    rc, _, err = run_cli(["invoke", "nothing-here"], capsys)
    assert rc == 2
    assert "Invalid entrypoint" in err


def test_settings_precedence(monkeypatch, tmp_path):
    cfg = tmp_path / "config.json"
    cfg.write_text(json.dumps({"log_level": "debug", "handler": "a.py:h"}), encoding="utf-8")
    monkeypatch.setenv("FNEVENT_CONFIG", str(cfg))
    assert get_settings() == Settings(log_level="DEBUG", handler="a.py:h")

    monkeypatch.setenv("FNEVENT_HANDLER", "b.py:h")
    assert get_settings().handler == "b.py:h"


def test_settings_unreadable_config_falls_back(monkeypatch, tmp_path):
    cfg = tmp_path / "config.json"
    cfg.write_text("{broken", encoding="utf-8")
    monkeypatch.setenv("FNEVENT_CONFIG", str(cfg))
    assert get_settings() == Settings()


def test_json_formatter_includes_extras():
    record = logging.LogRecord("fnevent.http", logging.ERROR, __file__, 1, "internal server error", None, None)
    record.error = "ValueError('x')"
    data = json.loads(JsonFormatter().format(record))
    assert data == {
        "level": "ERROR",
        "logger": "fnevent.http",
        "message": "internal server error",
        "error": "ValueError('x')",
    }


def test_configure_logging_is_idempotent():
    logger = configure_logging("warning")
    count = len(logger.handlers)
    configure_logging("info")
    assert len(logger.handlers) == count
    assert logger.level == logging.INFO


def test_invoke_broken_module_exits_2(tmp_path, capsys):
    fn = tmp_path / "broken.py"
    fn.write_text("raise RuntimeError('boom at import')\n", encoding="utf-8")
    rc, _, err = run_cli(["invoke", f"{fn}:handler"], capsys)
    assert rc == 2
    assert "boom at import" in err
