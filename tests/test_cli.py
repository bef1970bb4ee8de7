import io

import pytest
from rich.console import Console

from security_hook.cli import app
from security_hook.cli.interface import CLInterface
from security_hook.core.models import Finding
from security_hook.core.pipeline import ScanReport


@pytest.fixture
def interface():
    return CLInterface(
        console=Console(file=io.StringIO(), width=200),
        err_console=Console(file=io.StringIO(), width=200),
    )


def _stdout(interface):
    return interface.console.file.getvalue()


def _stderr(interface):
    return interface.err_console.file.getvalue()


class StubCheck:
    report = ScanReport()
    error = None

    def __init__(self, git_index=None, client=None, policy=None):
        StubCheck.policy = policy

    def run(self):
        if StubCheck.error is not None:
            raise StubCheck.error
        return StubCheck.report


def test_run_blocks_commit_and_prints_findings(monkeypatch, interface):
    StubCheck.error = None
    StubCheck.report = ScanReport(
        findings=[Finding(line='key = "[AKIA...]"', type="AWS Access Key", file_path="src/app.py")],
        scanned_files=["src/app.py"],
        service_available=False,
    )
    monkeypatch.setattr(app, "SecurityCheck", StubCheck)

    exit_code = app.main(["run", "--policy", "fallback"], interface=interface)

    output = _stdout(interface)
    assert exit_code == 1
    assert StubCheck.policy == "fallback"
    assert "Security issues found! Commit blocked." in output
    assert "src/app.py" in output
    assert 'key = "[AKIA...]"' in output


def test_default_command_is_run(monkeypatch, interface):
    StubCheck.error = None
    StubCheck.report = ScanReport(scanned_files=["a.py"])
    monkeypatch.setattr(app, "SecurityCheck", StubCheck)

    assert app.main([], interface=interface) == 0
    assert "No security issues found. Commit allowed." in _stdout(interface)


def test_run_with_nothing_staged(monkeypatch, interface):
    StubCheck.error = None
    StubCheck.report = ScanReport()
    monkeypatch.setattr(app, "SecurityCheck", StubCheck)

    assert app.main(["run"], interface=interface) == 0
    assert "No files to scan. Commit allowed." in _stdout(interface)


def test_service_unavailable_exits_non_zero_on_stderr(monkeypatch, interface):
    import sys

    from security_hook.exception.exception import ServiceUnavailableError

    StubCheck.error = ServiceUnavailableError("Ollama is not available at http://localhost:11434.", sys)
    monkeypatch.setattr(app, "SecurityCheck", StubCheck)

    assert app.main(["run"], interface=interface) == 1
    assert "Ollama is not available" in _stderr(interface)
    assert "Ollama is not available" not in _stdout(interface)


def test_install_reports_failure_outside_repository(tmp_path, interface):
    assert app.main(["install", str(tmp_path)], interface=interface) == 1
    assert "does not appear to be a Git repository" in _stderr(interface)


def test_install_into_repository(tmp_path, interface):
    (tmp_path / ".git").mkdir()
    assert app.main(["install", str(tmp_path)], interface=interface) == 0
    assert (tmp_path / ".git" / "hooks" / "pre-commit").exists()


def test_init_exclude_creates_sample_once(tmp_path, interface):
    assert app.main(["init-exclude", str(tmp_path)], interface=interface) == 0
    assert (tmp_path / ".security-exclude").exists()
    assert app.main(["init-exclude", str(tmp_path)], interface=interface) == 0
    assert "already exists" in _stdout(interface)


def test_config_set_and_show(interface):
    assert app.main(["config", "set", "scan.unavailable_policy", "fallback"], interface=interface) == 0
    assert app.main(["config", "show"], interface=interface) == 0
    output = _stdout(interface)
    assert "scan.unavailable_policy" in output
    assert "fallback" in output


def test_config_set_rejects_invalid_value(interface):
    assert app.main(["config", "set", "scan.unavailable_policy", "maybe"], interface=interface) == 1
    assert "Unsupported policy" in _stderr(interface)
