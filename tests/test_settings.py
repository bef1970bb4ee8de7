import json
from pathlib import Path

import pytest

from security_hook.config.ollama_config import get_ollama_model, get_ollama_url, set_ollama_model, set_ollama_url
from security_hook.config.scan_config import (
    get_max_content_chars,
    get_regex_safety_net,
    get_unavailable_policy,
    set_regex_safety_net,
    set_unavailable_policy,
)
from security_hook.config.settings_store import get_settings_file, set_setting


def test_defaults_without_settings_file():
    assert get_ollama_url() == "http://localhost:11434"
    assert get_ollama_model() == "llama3.2:3b"
    assert get_max_content_chars() == 5000
    assert get_unavailable_policy() == "fail"
    assert get_regex_safety_net() is False


def test_environment_overrides_defaults(monkeypatch):
    monkeypatch.setenv("SECURITY_HOOK_UNAVAILABLE_POLICY", "FALLBACK")
    monkeypatch.setenv("SECURITY_HOOK_REGEX_SAFETY_NET", "yes")
    assert get_unavailable_policy() == "fallback"
    assert get_regex_safety_net() is True


def test_invalid_policy_in_environment_falls_back_to_fail(monkeypatch):
    monkeypatch.setenv("SECURITY_HOOK_UNAVAILABLE_POLICY", "ignore")
    assert get_unavailable_policy() == "fail"


def test_settings_file_takes_precedence_over_environment(monkeypatch):
    monkeypatch.setenv("OLLAMA_MODEL", "from-env")
    assert set_ollama_model("from-file")
    assert get_ollama_model() == "from-file"

    saved = json.loads(Path(get_settings_file()).read_text(encoding="utf-8"))
    assert saved["ollama"]["model"] == "from-file"


def test_setters_validate_values():
    with pytest.raises(ValueError):
        set_unavailable_policy("sometimes")
    with pytest.raises(ValueError):
        set_ollama_url("localhost:11434")
    with pytest.raises(ValueError):
        set_setting("broker.active", "groww")


def test_regex_safety_net_setter_parses_strings():
    assert set_regex_safety_net("false")
    assert get_regex_safety_net() is False
    assert set_regex_safety_net("on")
    assert get_regex_safety_net() is True
