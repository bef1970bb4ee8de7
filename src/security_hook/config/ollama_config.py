from security_hook.config.settings_store import get_setting, set_setting

DEFAULT_OLLAMA_URL = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "llama3.2:3b"
DEFAULT_PROBE_TIMEOUT = 1.0


def get_ollama_url() -> str:
    url = str(get_setting("ollama.url", DEFAULT_OLLAMA_URL, str) or DEFAULT_OLLAMA_URL).strip()
    return url.rstrip("/")


def set_ollama_url(url: str) -> bool:
    selected = str(url or "").strip()
    if not selected.startswith(("http://", "https://")):
        raise ValueError(f"Ollama URL must start with http:// or https://, got '{url}'")
    return set_setting("ollama.url", selected.rstrip("/"))


def get_ollama_model() -> str:
    return str(get_setting("ollama.model", DEFAULT_OLLAMA_MODEL, str) or DEFAULT_OLLAMA_MODEL).strip()


def set_ollama_model(model: str) -> bool:
    selected = str(model or "").strip()
    if not selected:
        raise ValueError("Ollama model name cannot be empty")
    return set_setting("ollama.model", selected)


def get_probe_timeout() -> float:
    return max(0.1, float(get_setting("ollama.probe_timeout", DEFAULT_PROBE_TIMEOUT, float)))


def set_probe_timeout(seconds: float) -> bool:
    return set_setting("ollama.probe_timeout", max(0.1, float(seconds)))
