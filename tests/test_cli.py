from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from voicerouter.cli.main import app

runner = CliRunner()

FIXTURES = Path(__file__).resolve().parent / "fixtures"


def test_normalize_prints_unified_json() -> None:
    result = runner.invoke(app, ["normalize", str(FIXTURES / "deepgram_listen.json"), "--provider", "deepgram"])

    assert result.exit_code == 0, result.output
    body = json.loads(result.output)
    assert body["success"] is True
    assert body["provider"] == "deepgram"
    assert body["data"]["text"] == "hey how are you"


def test_normalize_failed_call(tmp_path: Path) -> None:
    src = tmp_path / "body.json"
    src.write_text(json.dumps({"message": "quota exceeded"}), encoding="utf-8")

    result = runner.invoke(app, ["normalize", str(src), "-p", "gladia", "--failed", "--http-status", "429"])

    assert result.exit_code == 0, result.output
    body = json.loads(result.output)
    assert body["success"] is False
    assert body["error"]["message"] == "quota exceeded"
    assert body["error"]["status_code"] == 429


def test_normalize_writes_out_file(tmp_path: Path) -> None:
    out = tmp_path / "unified.json"

    result = runner.invoke(
        app,
        ["normalize", str(FIXTURES / "gladia_done.json"), "-p", "gladia", "--out", str(out)],
    )

    assert result.exit_code == 0, result.output
    assert json.loads(out.read_text(encoding="utf-8"))["data"]["language"] == "en"


def test_normalize_unknown_provider_is_usage_error() -> None:
    result = runner.invoke(app, ["normalize", str(FIXTURES / "gladia_done.json"), "-p", "nope"])

    assert result.exit_code == 2


def test_normalize_invalid_json_is_usage_error(tmp_path: Path) -> None:
    src = tmp_path / "broken.json"
    src.write_text("{", encoding="utf-8")

    result = runner.invoke(app, ["normalize", str(src), "-p", "gladia"])

    assert result.exit_code == 2


def test_webhook_with_query(tmp_path: Path) -> None:
    src = tmp_path / "hook.json"
    src.write_text("{}", encoding="utf-8")

    result = runner.invoke(
        app,
        ["webhook", str(src), "--query", "id=j-7", "--query", "status=error", "--user-agent", "Speechmatics-API/2.0"],
    )

    assert result.exit_code == 0, result.output
    body = json.loads(result.output)
    assert body["provider"] == "speechmatics"
    assert body["event"]["success"] is False
    assert body["event"]["transcript_id"] == "j-7"


def test_webhook_undetected_exits_nonzero(tmp_path: Path) -> None:
    src = tmp_path / "hook.json"
    src.write_text(json.dumps({"hello": "world"}), encoding="utf-8")

    result = runner.invoke(app, ["webhook", str(src)])

    assert result.exit_code == 1
    assert json.loads(result.output)["success"] is False


def test_providers_lists_tags() -> None:
    result = runner.invoke(app, ["providers"])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert "gladia (webhooks)" in lines
    assert "openai-whisper" in lines
