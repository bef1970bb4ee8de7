"""Exclusion patterns for files that should never be sent to the classifier.

Patterns use a deliberately small glob dialect: ``.`` is literal, ``*`` is any
run of characters, and the result is searched anywhere in the lowercased path.
There is no ``?``, no character classes and no ``**``, and patterns are not
anchored to path segments, so ``test`` also excludes ``src/latest.py``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

from security_hook.logging.logger import logger

PACKAGE_DIR = Path(__file__).resolve().parents[1]
SAMPLE_EXCLUDE_FILE = PACKAGE_DIR / "security-exclude.sample"


@dataclass(frozen=True)
class ExclusionRules:
    patterns: tuple[str, ...] = ()
    source: Path | None = None
    _compiled: tuple[re.Pattern, ...] = field(default=(), repr=False, compare=False)

    @classmethod
    def from_patterns(cls, patterns: Iterable[str], source: Path | None = None) -> "ExclusionRules":
        kept: list[str] = []
        compiled: list[re.Pattern] = []
        for pattern in patterns:
            try:
                compiled.append(glob_to_regex(pattern))
            except re.error as error:
                logger.warning("Ignoring malformed exclusion pattern %r: %s", pattern, error)
                continue
            kept.append(pattern)
        return cls(patterns=tuple(kept), source=source, _compiled=tuple(compiled))

    def match(self, path: str) -> str | None:
        normalized = path.lower()
        for pattern, regex in zip(self.patterns, self._compiled):
            if regex.search(normalized):
                return pattern
        return None

    def __len__(self) -> int:
        return len(self.patterns)


def glob_to_regex(pattern: str) -> re.Pattern:
    return re.compile(pattern.replace(".", r"\.").replace("*", ".*"))


def match_exclusion(path: str, patterns: ExclusionRules | Sequence[str]) -> str | None:
    rules = patterns if isinstance(patterns, ExclusionRules) else ExclusionRules.from_patterns(patterns)
    return rules.match(path)


def should_exclude(path: str, patterns: ExclusionRules | Sequence[str]) -> bool:
    return match_exclusion(path, patterns) is not None


def parse_exclusion_lines(raw: bytes) -> list[str]:
    patterns: list[str] = []
    for number, raw_line in enumerate(raw.splitlines(), 1):
        try:
            line = raw_line.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("Skipping undecodable line %d in exclusion file", number)
            continue
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        patterns.append(line)
    return patterns


def default_search_paths(repo_root: Path | None, file_name: str = ".security-exclude") -> list[Path]:
    paths: list[Path] = []
    if repo_root is not None:
        paths.append(Path(repo_root) / file_name)
    paths.append(PACKAGE_DIR / file_name)
    paths.append(SAMPLE_EXCLUDE_FILE)
    return paths


def load_exclusion_patterns(search_paths: Sequence[Path]) -> ExclusionRules:
    """Load patterns from the first existing file in ``search_paths``.

    A missing file yields empty rules; the scan then runs unfiltered.
    """
    for candidate in search_paths:
        path = Path(candidate)
        if not path.is_file():
            continue
        if path.resolve() == SAMPLE_EXCLUDE_FILE.resolve():
            logger.warning(
                "Using sample exclusion file. Consider creating your own .security-exclude "
                "in the repository root."
            )
        logger.info("Loading exclusion patterns from: %s", path)
        try:
            raw = path.read_bytes()
        except OSError as error:
            logger.warning("Could not read exclusion file %s: %s", path, error)
            return ExclusionRules(source=path)
        rules = ExclusionRules.from_patterns(parse_exclusion_lines(raw), source=path)
        logger.info("Loaded %d exclusion patterns.", len(rules))
        return rules

    checked = ", ".join(str(path) for path in search_paths)
    logger.warning("No exclusion file found. (Checked %s)", checked)
    return ExclusionRules()


def create_exclude_file(target_dir: Path, file_name: str = ".security-exclude") -> Path | None:
    """Copy the bundled sample into ``target_dir``; never overwrites."""
    target = Path(target_dir) / file_name
    if target.exists():
        logger.info("%s already exists, leaving it untouched.", target)
        return None
    target.write_text(SAMPLE_EXCLUDE_FILE.read_text(encoding="utf-8"), encoding="utf-8")
    return target
