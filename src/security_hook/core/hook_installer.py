from __future__ import annotations

import os
import shutil
import sys
from pathlib import Path

from security_hook.core.git_index import run_git
from security_hook.exception.exception import HookInstallError
from security_hook.logging.logger import logger

HOOK_MARKER = "security-hook"
RUN_COMMAND = (
    "if command -v security-hook >/dev/null 2>&1; then\n"
    "  security-hook run\n"
    "else\n"
    "  python3 -m security_hook.cli.app run\n"
    "fi"
)

HOOK_BLOCK = f"""# Run the {HOOK_MARKER} secret scan
{RUN_COMMAND}
RESULT=$?
if [ $RESULT -ne 0 ]; then
  exit $RESULT
fi
"""

HOOK_CONTENT = f"""#!/usr/bin/env sh

{HOOK_BLOCK}
exit 0
"""

HUSKY_SHEBANG = "#!/usr/bin/env sh\n"
HUSKY_LEGACY_SOURCE = '. "$(dirname -- "$0")/_/husky.sh"\n'

DEFAULT_TEMPLATE_DIR = Path("~/.git-templates")


def _make_executable(path: Path):
    try:
        os.chmod(path, 0o755)
    except OSError:
        logger.warning("Could not mark %s as executable.", path)


def write_git_hook(hooks_dir: Path) -> Path:
    """Create ``pre-commit`` in ``hooks_dir`` or splice our block into an existing one.

    An existing hook that already mentions the marker is left as is. Any other
    existing hook is copied to ``pre-commit.bak`` before the block is inserted
    right after its shebang line.
    """
    hooks_dir = Path(hooks_dir)
    pre_commit = hooks_dir / "pre-commit"
    try:
        hooks_dir.mkdir(parents=True, exist_ok=True)
        if not pre_commit.exists():
            pre_commit.write_text(HOOK_CONTENT, encoding="utf-8")
        else:
            existing = pre_commit.read_text(encoding="utf-8")
            if HOOK_MARKER in existing:
                logger.info("%s already runs %s, leaving it untouched.", pre_commit, HOOK_MARKER)
                return pre_commit
            backup = pre_commit.with_name("pre-commit.bak")
            shutil.copy2(pre_commit, backup)
            lines = existing.splitlines(keepends=True)
            if lines and lines[0].startswith("#!"):
                updated = lines[0] + "\n" + HOOK_BLOCK + "".join(lines[1:])
            else:
                updated = "#!/usr/bin/env sh\n\n" + HOOK_BLOCK + existing
            pre_commit.write_text(updated, encoding="utf-8")
            logger.info("Updated existing pre-commit hook (backup saved as %s)", backup)
    except OSError as error:
        raise HookInstallError(f"Could not write {pre_commit}: {error}", sys) from error
    _make_executable(pre_commit)
    return pre_commit


def write_husky_hook(husky_dir: Path) -> Path:
    pre_commit = Path(husky_dir) / "pre-commit"
    try:
        if pre_commit.exists():
            existing = pre_commit.read_text(encoding="utf-8")
            if HOOK_MARKER not in existing:
                separator = "" if existing.endswith("\n") else "\n"
                pre_commit.write_text(f"{existing}{separator}\n{RUN_COMMAND}\n", encoding="utf-8")
        else:
            # Husky v8 and older ship _/husky.sh; newer releases need no sourcing.
            preamble = HUSKY_SHEBANG
            if (Path(husky_dir) / "_" / "husky.sh").is_file():
                preamble += HUSKY_LEGACY_SOURCE
            pre_commit.write_text(f"{preamble}\n{RUN_COMMAND}\n", encoding="utf-8")
    except OSError as error:
        raise HookInstallError(f"Could not write {pre_commit}: {error}", sys) from error
    _make_executable(pre_commit)
    return pre_commit


def install_hook(target_dir: Path | str | None = None) -> Path:
    """Install into a repository, preferring an existing Husky directory."""
    target = Path(target_dir or Path.cwd()).resolve()
    if not (target / ".git").exists():
        raise HookInstallError(f"{target} does not appear to be a Git repository", sys)

    husky_dir = target / ".husky"
    if husky_dir.is_dir():
        return write_husky_hook(husky_dir)
    return write_git_hook(target / ".git" / "hooks")


def install_global_hook() -> Path:
    """Install into the global template directory used by ``git init``."""
    completed = run_git(["config", "--global", "init.templateDir"])
    template_dir = completed.stdout.decode("utf-8", errors="replace").strip()
    if not template_dir:
        template_dir = str(DEFAULT_TEMPLATE_DIR.expanduser())
        configured = run_git(["config", "--global", "init.templateDir", template_dir])
        if configured.returncode != 0:
            detail = configured.stderr.decode("utf-8", errors="replace").strip()
            raise HookInstallError(f"Could not set init.templateDir: {detail}", sys)
    return write_git_hook(Path(template_dir).expanduser() / "hooks")
