from __future__ import annotations

import shutil
import subprocess
import sys
from pathlib import Path

from security_hook.core.models import StagedFile
from security_hook.exception.exception import StagedContentError, ToolMissingError
from security_hook.logging.logger import logger


def require_git():
    if shutil.which("git") is None:
        raise ToolMissingError("git is required but was not found on PATH.", sys)


def run_git(args: list[str], cwd: Path | str | None = None) -> subprocess.CompletedProcess:
    require_git()
    return subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=False,
        capture_output=True,
    )


def find_repo_root(cwd: Path | str | None = None) -> Path | None:
    completed = run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
    if completed.returncode != 0:
        return None
    output = completed.stdout.decode("utf-8", errors="replace").strip()
    return Path(output) if output else None


def _is_likely_binary(blob: bytes) -> bool:
    return b"\x00" in blob


class GitIndex:
    """Read-only view of the staged snapshot of a repository."""

    def __init__(self, repo_root: Path | str | None = None):
        self.repo_root = Path(repo_root) if repo_root else None

    def ensure_available(self):
        require_git()

    def list_staged_paths(self) -> list[str]:
        completed = run_git(
            ["diff", "--cached", "--name-only", "-z", "--diff-filter=ACMRTUXB"],
            cwd=self.repo_root,
        )
        if completed.returncode != 0:
            detail = completed.stderr.decode("utf-8", errors="replace").strip()
            logger.error("Could not list staged files: %s", detail or "unknown git error")
            return []
        paths: list[str] = []
        seen: set[str] = set()
        # With -z, surrounding whitespace belongs to the file name.
        for raw in completed.stdout.split(b"\x00"):
            if not raw:
                continue
            path = raw.decode("utf-8", errors="surrogateescape")
            if path not in seen:
                seen.add(path)
                paths.append(path)
        return paths

    def read_staged_content(self, path: str) -> str:
        completed = run_git(["show", f":{path}"], cwd=self.repo_root)
        if completed.returncode != 0:
            detail = completed.stderr.decode("utf-8", errors="replace").strip()
            raise StagedContentError(f"Could not read staged content of {path}: {detail}", sys)
        blob = completed.stdout
        if _is_likely_binary(blob):
            raise StagedContentError(f"Staged content of {path} looks binary", sys)
        try:
            return blob.decode("utf-8")
        except UnicodeDecodeError:
            return blob.decode("utf-8", errors="ignore")

    def staged_files(self, paths: list[str] | None = None) -> list[StagedFile]:
        if paths is None:
            paths = self.list_staged_paths()
        files: list[StagedFile] = []
        seen: set[str] = set()
        for path in paths:
            if path in seen:
                continue
            seen.add(path)
            try:
                content = self.read_staged_content(path)
            except StagedContentError as error:
                logger.warning("Skipping %s: %s", path, error.error_message)
                continue
            files.append(StagedFile(path=path, content=content))
        return files
