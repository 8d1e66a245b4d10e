import io
import json

import pytest

import main


@pytest.fixture
def config_file(tmp_path):
    cfg = tmp_path / "settings.yaml"
    cfg.write_text("log_level: WARNING\n", encoding="utf-8")
    return str(cfg)


def test_compile_argument(config_file, capsys):
    rc = main.main(["--config", config_file, "compile", '{"action":"color_chain","chain":"b","color":"blue"}'])
    assert rc == 0
    out = capsys.readouterr().out.strip()
    assert out == '{"action":"color","params":{"target":{"type":"chain","chain":"B"},"color":"#0000ff"}}'


def test_compile_stdin(config_file, capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("sure!\n```json\n{\"action\":\"reset_view\"}\n```\n"))
    assert main.main(["--config", config_file, "compile"]) == 0
    assert capsys.readouterr().out.strip() == '{"action":"reset_camera","params":{}}'


def test_compile_garbage(config_file, capsys):
    main.main(["--config", config_file, "compile", "I cannot do that"])
    assert json.loads(capsys.readouterr().out)["params"]["reason"] == "Model did not return valid JSON."


def test_chat_without_key(config_file, capsys, clean_env):
    rc = main.main(["--config", config_file, "chat", "spin the protein"])
    assert rc == 1
    data = json.loads(capsys.readouterr().out)
    assert data["error"] == "Server misconfigured: missing DEEPSEEK_API_KEY"


def test_no_subcommand_prints_help(config_file, capsys):
    assert main.main(["--config", config_file]) == 0
    assert "compile" in capsys.readouterr().out


def test_log_file(tmp_path, config_file):
    log_file = tmp_path / "logs" / "biolens.log"
    main.main(["--config", config_file, "--log-file", str(log_file), "compile", "{}"])
    assert log_file.exists()
