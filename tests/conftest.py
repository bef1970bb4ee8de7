import os
import shutil
import sys
from pathlib import Path
from uuid import uuid4

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

TMP_ROOT = ROOT / ".tmp" / "pytest"
TMP_ROOT.mkdir(parents=True, exist_ok=True)

# The package logger is built at import time.
os.environ.setdefault("SECURITY_HOOK_LOG_DIR", str(TMP_ROOT / "logs"))

ENV_KEYS = (
    "OLLAMA_URL",
    "OLLAMA_MODEL",
    "OLLAMA_PROBE_TIMEOUT",
    "SECURITY_HOOK_MAX_CONTENT_CHARS",
    "SECURITY_HOOK_UNAVAILABLE_POLICY",
    "SECURITY_HOOK_REGEX_SAFETY_NET",
    "SECURITY_HOOK_EXCLUDE_FILE",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    runtime_root = TMP_ROOT / "settings"
    runtime_root.mkdir(parents=True, exist_ok=True)
    temp_dir = runtime_root / f"security_hook_{uuid4().hex}"
    temp_dir.mkdir(parents=True, exist_ok=True)
    settings_file = temp_dir / "settings.json"
    monkeypatch.setenv("SECURITY_HOOK_SETTINGS_FILE", str(settings_file))
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    try:
        yield
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def hook_logs(caplog):
    # The package logger does not propagate, so attach caplog's handler to it.
    from security_hook.logging.logger import logger

    logger.addHandler(caplog.handler)
    caplog.set_level("DEBUG", logger=logger.name)
    try:
        yield caplog
    finally:
        logger.removeHandler(caplog.handler)


class FakeOllamaClient:
    def __init__(self, available=True, responses=None, error=None):
        self.base_url = "http://localhost:11434"
        self.model = "fake-model"
        self.available = available
        self.responses = list(responses or [])
        self.error = error
        self.prompts = []

    def is_available(self):
        return self.available

    def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if self.responses:
            return {"response": self.responses.pop(0)}
        return {"response": '{"hasSensitiveData": false}'}


class FakeGitIndex:
    def __init__(self, files, unreadable=()):
        self.files = dict(files)
        self.order = list(files.keys()) if isinstance(files, dict) else [path for path, _ in files]
        self.unreadable = set(unreadable)
        self.repo_root = None
        self.read_paths = []

    def ensure_available(self):
        return None

    def list_staged_paths(self):
        return list(self.order)

    def staged_files(self, paths=None):
        from security_hook.core.models import StagedFile

        result = []
        for path in paths if paths is not None else self.order:
            self.read_paths.append(path)
            if path in self.unreadable:
                continue
            result.append(StagedFile(path=path, content=self.files[path]))
        return result


@pytest.fixture
def fake_client():
    return FakeOllamaClient


@pytest.fixture
def fake_git_index():
    return FakeGitIndex
