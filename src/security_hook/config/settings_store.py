import json
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

load_dotenv()


SETTINGS_FILE_ENV = "SECURITY_HOOK_SETTINGS_FILE"
DEFAULT_SETTINGS_FILE = "~/.config/security-hook/settings.json"

ENV_MAPPING: Dict[str, str] = {
    "ollama.url": "OLLAMA_URL",
    "ollama.model": "OLLAMA_MODEL",
    "ollama.probe_timeout": "OLLAMA_PROBE_TIMEOUT",
    "scan.max_content_chars": "SECURITY_HOOK_MAX_CONTENT_CHARS",
    "scan.unavailable_policy": "SECURITY_HOOK_UNAVAILABLE_POLICY",
    "scan.regex_safety_net": "SECURITY_HOOK_REGEX_SAFETY_NET",
    "scan.exclude_file": "SECURITY_HOOK_EXCLUDE_FILE",
}

# Empty values defer to ENV_MAPPING, then to the defaults of the typed
# getters in ollama_config and scan_config.
DEFAULT_SETTINGS: Dict[str, Any] = {
    "ollama": {
        "url": "",
        "model": "",
        "probe_timeout": "",
    },
    "scan": {
        "max_content_chars": "",
        "unavailable_policy": "",
        "regex_safety_net": "",
        "exclude_file": "",
    },
}


def _settings_file_path() -> Path:
    path_str = os.getenv(SETTINGS_FILE_ENV, DEFAULT_SETTINGS_FILE)
    return Path(path_str).expanduser()


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    return text in {"1", "true", "yes", "y", "on"}


def _apply_cast(value: Any, cast_type: Optional[type]) -> Any:
    if cast_type is None:
        return value
    if cast_type is bool:
        return parse_bool(value)
    if cast_type is int:
        return int(float(value))
    if cast_type is float:
        return float(value)
    if cast_type is str:
        return str(value)
    return cast_type(value)


def _has_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _get_nested(data: Dict[str, Any], dotted_key: str) -> Any:
    current: Any = data
    for part in dotted_key.split("."):
        if not isinstance(current, dict) or part not in current:
            return None
        current = current[part]
    return current


def _set_nested(data: Dict[str, Any], dotted_key: str, value: Any) -> Dict[str, Any]:
    parts = dotted_key.split(".")
    current = data
    for part in parts[:-1]:
        if part not in current or not isinstance(current[part], dict):
            current[part] = {}
        current = current[part]
    current[parts[-1]] = value
    return data


def load_settings() -> Dict[str, Any]:
    settings = deepcopy(DEFAULT_SETTINGS)
    path = _settings_file_path()
    if path.exists():
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
            if isinstance(payload, dict):
                settings = _deep_merge(settings, payload)
        except (json.JSONDecodeError, OSError):
            return settings
    return settings


def save_settings(settings: Dict[str, Any]) -> bool:
    path = _settings_file_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(settings, indent=2), encoding="utf-8")
        return True
    except OSError:
        return False


def get_setting(dotted_key: str, default: Any = None, cast_type: Optional[type] = None) -> Any:
    settings = load_settings()
    value = _get_nested(settings, dotted_key)
    if _has_value(value):
        try:
            return _apply_cast(value, cast_type)
        except (TypeError, ValueError):
            pass

    env_key = ENV_MAPPING.get(dotted_key)
    if env_key:
        env_value = os.getenv(env_key)
        if _has_value(env_value):
            try:
                return _apply_cast(env_value, cast_type)
            except (TypeError, ValueError):
                pass

    return default


def set_setting(dotted_key: str, value: Any) -> bool:
    if dotted_key not in ENV_MAPPING:
        supported = ", ".join(sorted(ENV_MAPPING))
        raise ValueError(f"Unknown setting '{dotted_key}'. Supported: {supported}")
    settings = load_settings()
    _set_nested(settings, dotted_key, value)
    return save_settings(settings)


def get_settings_file() -> str:
    return str(_settings_file_path())
