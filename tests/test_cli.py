"""Tests for the command line."""

import io
import json

import pytest

from mailcompat import __version__
from mailcompat.cli import main
from mailcompat.config import AnalysisConfig, Config, ReportConfig
from mailcompat.core.engines import ENGINES


@pytest.fixture
def email_file(tmp_path, positioned_email):
    path = tmp_path / "email.html"
    path.write_text(positioned_email, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def isolated_config(config_home):
    """Never read the real user's config.toml."""
    return config_home


def test_version(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_file_required(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 2
    assert "file" in capsys.readouterr().err


def test_paths(capsys, config_home):
    assert main(["--paths"]) == 0
    assert str(config_home / "config.toml") in capsys.readouterr().out


def test_text_report(capsys, email_file):
    assert main([str(email_file)]) == 0
    out = capsys.readouterr().out
    assert "Gmail (gmail-web): " in out
    assert '"position"' in out
    assert "at div#badge" in out
    assert "Thunderbird (thunderbird): 100/100" in out


def test_json_report(capsys, email_file):
    assert main([str(email_file), "--json", "--framework", "jsx"]) == 0
    data = json.loads(capsys.readouterr().out)

    assert data["framework"] == "jsx"
    assert list(data["scores"]) == [engine.id for engine in ENGINES]
    assert data["scores"]["gmail-web"]["score"] < 100
    assert any(w["feature"] == "position" for w in data["warnings"])


def test_engine_filter(capsys, email_file):
    assert main([str(email_file), "--json", "--engine", "gmail-web"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert list(data["scores"]) == ["gmail-web"]
    assert {w["engine_id"] for w in data["warnings"]} == {"gmail-web"}


def test_unknown_engine(capsys, email_file):
    assert main([str(email_file), "--engine", "lotus-notes"]) == 1
    assert "Unknown engine: lotus-notes" in capsys.readouterr().err


def test_transform(capsys, email_file):
    assert main([str(email_file), "--transform", "gmail-web"]) == 0
    captured = capsys.readouterr()
    assert 'style="color: red"' in captured.out
    assert "position" not in captured.out
    assert "warning: position:" in captured.err


def test_transform_json(capsys, email_file):
    assert main([str(email_file), "--transform", "outlook-windows", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["engine_id"] == "outlook-windows"
    assert data["warnings"][0]["feature"] == "position"


def test_stdin(capsys, monkeypatch, positioned_email):
    monkeypatch.setattr("sys.stdin", io.StringIO(positioned_email))
    assert main(["-", "--json"]) == 0
    assert json.loads(capsys.readouterr().out)["warnings"]


def test_missing_file(capsys, tmp_path):
    assert main([str(tmp_path / "nope.html")]) == 1
    assert "Cannot read" in capsys.readouterr().err


def test_missing_explicit_config(capsys, email_file, tmp_path):
    assert main([str(email_file), "--config", str(tmp_path / "none.toml")]) == 1
    assert "Config file not found" in capsys.readouterr().err


def test_config_defaults_apply(capsys, email_file):
    Config(
        analysis=AnalysisConfig(engines=["outlook-windows"]),
        report=ReportConfig(format="json"),
    ).save()
    assert main([str(email_file)]) == 0
    data = json.loads(capsys.readouterr().out)
    assert list(data["scores"]) == ["outlook-windows"]


def test_invalid_config(capsys, email_file):
    Config.config_file_path().parent.mkdir(parents=True, exist_ok=True)
    Config.config_file_path().write_text('[report]\nformat = "xml"\n')
    assert main([str(email_file)]) == 1
    assert "Configuration error" in capsys.readouterr().err


def test_input_too_large(capsys, email_file):
    Config(analysis=AnalysisConfig(max_html_bytes=10)).save()
    assert main([str(email_file)]) == 1
    assert "Input error" in capsys.readouterr().err
