"""Tests for the config loader and the CLI."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import io
import json

import pytest

from pobox_check import ConfigError, PatternError
from pobox_check.cli import main
from pobox_check.config import create_classifier, load_config, load_from_yaml
from pobox_check.patterns import DEFAULT_BLACKLIST, DEFAULT_WHITELIST


YAML_CONFIG = """\
pobox:
  remainder_scope: anywhere
  max_length: 200
  extra_blacklist:
    - '\\bApartado\\b'
"""


# ── load_config ──────────────────────────────────────────────────────

def test_load_config_defaults():
    config = load_config({})
    assert config.blacklist == list(DEFAULT_BLACKLIST)
    assert config.whitelist == list(DEFAULT_WHITELIST)
    assert config.remainder_scope == "leading"
    assert config.max_length == 1024
    assert load_config(None) == config


def test_load_config_nested_and_flat():
    nested = load_config({"pobox": {"remainder_scope": "anywhere"}})
    flat = load_config({"remainder_scope": "anywhere"})
    assert nested == flat
    assert nested.remainder_scope == "anywhere"


def test_load_config_extra_patterns():
    config = load_config({"extra_blacklist": [r"\bApartado\b"], "extra_whitelist": [r"\bPostweg\b"]})
    assert config.blacklist == list(DEFAULT_BLACKLIST) + [r"\bApartado\b"]
    assert config.whitelist == list(DEFAULT_WHITELIST) + [r"\bPostweg\b"]


def test_load_config_replace_lists():
    config = load_config({"blacklist": [r"\bBOX\b"], "whitelist": []})
    assert config.blacklist == [r"\bBOX\b"]
    assert config.whitelist == []


@pytest.mark.parametrize("data", [
    {"blacklist": r"\bBOX\b"},
    {"whitelist": [1, 2]},
    {"remainder_scope": "trailing"},
    {"max_length": "10"},
    {"max_length": 0},
    {"pobox": ["not", "a", "mapping"]},
])
def test_load_config_rejects(data):
    with pytest.raises(ConfigError):
        load_config(data)


def test_load_from_yaml(tmp_path):
    path = tmp_path / "pobox.yaml"
    path.write_text(YAML_CONFIG, encoding="utf-8")
    config = load_from_yaml(path)
    assert config.remainder_scope == "anywhere"
    assert config.max_length == 200
    assert config.blacklist[-1] == r"\bApartado\b"


def test_load_from_yaml_invalid(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("pobox: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_from_yaml(path)


def test_create_classifier():
    clf = create_classifier({"extra_blacklist": [r"\bApartado\b"]})
    assert clf.is_pobox("Apartado 45") is True
    assert create_classifier().is_pobox("PO Box 1") is True
    with pytest.raises(PatternError):
        create_classifier({"extra_whitelist": ["("]})


# ── CLI ──────────────────────────────────────────────────────────────

def _lines(capsys):
    return [json.loads(line) for line in capsys.readouterr().out.splitlines()]


def test_cli_check_args(capsys):
    main(["check", "P.O. Box 17", "Post Road 123"])
    out = _lines(capsys)
    assert out == [
        {"address": "P.O. Box 17", "pobox": True, "mode": "strict"},
        {"address": "Post Road 123", "pobox": False, "mode": "strict"},
    ]


def test_cli_check_stdin(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("PO Box 1\n\n   \nHauptstrasse 5\n"))
    main(["check"])
    out = _lines(capsys)
    # output lines stay aligned with input lines
    assert [(r["address"], r["pobox"]) for r in out] == [
        ("PO Box 1", True),
        ("", False),
        ("   ", False),
        ("Hauptstrasse 5", False),
    ]


def test_cli_check_overlong_line(capsys, monkeypatch):
    padded = "Firma " + "A" * 1100 + ", PO Box 5"
    monkeypatch.setattr("sys.stdin", io.StringIO(f"PO Box 1\n{padded}\nHauptstrasse 5\n"))
    main(["check"])
    out = _lines(capsys)
    assert [r["pobox"] for r in out] == [True, None, False]
    assert "limit is 1024" in out[1]["error"]


def test_cli_check_relaxed(capsys):
    main(["check", "--relaxed", "Post Road 5, PO Box 9"])
    (result,) = _lines(capsys)
    assert result["pobox"] is False
    assert result["mode"] == "relaxed"


def test_cli_check_explain(capsys):
    main(["check", "--explain", "Au 7, PF 33"])
    (result,) = _lines(capsys)
    assert result["pobox"] is False
    assert result["blacklist"] == [{"start": 6, "end": 11, "text": "PF 33"}]
    assert result["remainder"] == ["Au"]


def test_cli_remainder_scope_flag(capsys):
    main(["--remainder-scope", "anywhere", "check", "Postfach 41, 1023 Wien"])
    (result,) = _lines(capsys)
    assert result["pobox"] is False


def test_cli_config_file(tmp_path, capsys):
    path = tmp_path / "pobox.yaml"
    path.write_text(YAML_CONFIG, encoding="utf-8")
    main(["--config", str(path), "check", "Apartado 45", "Postfach 41, 1023 Wien"])
    out = _lines(capsys)
    assert [r["pobox"] for r in out] == [True, False]


def test_cli_patterns(capsys):
    main(["patterns"])
    data = json.loads(capsys.readouterr().out)
    assert data["blacklist"] == list(DEFAULT_BLACKLIST)
    assert data["whitelist"] == list(DEFAULT_WHITELIST)
    assert data["remainder_scope"] == "leading"


def test_cli_bad_config_exits(tmp_path, capsys):
    path = tmp_path / "bad.yaml"
    path.write_text("blacklist:\n  - '('\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main(["--config", str(path), "check", "PO Box 1"])
    assert exc.value.code == 2
    assert "invalid pattern" in capsys.readouterr().err

    with pytest.raises(SystemExit) as exc:
        main(["--config", str(tmp_path / "missing.yaml"), "patterns"])
    assert exc.value.code == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
