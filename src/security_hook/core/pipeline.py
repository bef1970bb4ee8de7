from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Iterable

from security_hook.config.scan_config import UNAVAILABLE_POLICIES, get_exclude_file_name, get_unavailable_policy
from security_hook.core.classifier import ContentClassifier
from security_hook.core.exclusions import ExclusionRules, default_search_paths, load_exclusion_patterns
from security_hook.core.git_index import GitIndex, find_repo_root
from security_hook.core.models import Finding, ScanResult
from security_hook.core.ollama_client import OllamaClient
from security_hook.exception.exception import ServiceUnavailableError
from security_hook.logging.logger import logger


@dataclass
class ScanReport:
    findings: list[Finding] = field(default_factory=list)
    scanned_files: list[str] = field(default_factory=list)
    excluded_files: list[str] = field(default_factory=list)
    skipped_files: list[str] = field(default_factory=list)
    service_available: bool | None = None

    @property
    def exit_code(self) -> int:
        return 1 if self.findings else 0


def aggregate_findings(results: Iterable[tuple[str, ScanResult]]) -> list[Finding]:
    """Flatten per-file results in file order, stamping each finding with its path."""
    findings: list[Finding] = []
    for file_path, result in results:
        for issue in result.issues:
            findings.append(issue.with_file(file_path))
    return findings


class SecurityCheck:
    """Scan the staged snapshot once: filter, classify, aggregate."""

    def __init__(
        self,
        git_index: GitIndex | None = None,
        client: OllamaClient | None = None,
        rules: ExclusionRules | None = None,
        policy: str | None = None,
    ):
        self.git_index = git_index or GitIndex()
        self.client = client or OllamaClient()
        self.rules = rules
        self.policy = (policy or get_unavailable_policy()).strip().lower()
        if self.policy not in UNAVAILABLE_POLICIES:
            supported = ", ".join(UNAVAILABLE_POLICIES)
            raise ValueError(f"Unsupported policy '{policy}'. Supported: {supported}")

    def _load_rules(self) -> ExclusionRules:
        if self.rules is not None:
            return self.rules
        repo_root = self.git_index.repo_root or find_repo_root()
        return load_exclusion_patterns(default_search_paths(repo_root, get_exclude_file_name()))

    def _check_service(self) -> bool:
        if self.client.is_available():
            return True
        if self.policy == "fail":
            raise ServiceUnavailableError(
                f"Ollama is not available at {self.client.base_url}. "
                "This hook requires Ollama to function; start it or set the policy to 'fallback'.",
                sys,
            )
        logger.warning("Ollama is not available at %s, falling back to regex detection.", self.client.base_url)
        return False

    def run(self) -> ScanReport:
        self.git_index.ensure_available()
        rules = self._load_rules()
        report = ScanReport()

        to_scan: list[str] = []
        for path in self.git_index.list_staged_paths():
            pattern = rules.match(path)
            if pattern is not None:
                logger.info("Skipping excluded file: %s (matched pattern: %s)", path, pattern)
                report.excluded_files.append(path)
                continue
            to_scan.append(path)

        if not to_scan:
            return report

        report.service_available = self._check_service()
        classifier = ContentClassifier(self.client, service_available=report.service_available)
        backend = "Ollama" if report.service_available else "regex detectors"

        results: list[tuple[str, ScanResult]] = []
        for staged_file in self.git_index.staged_files(to_scan):
            logger.info("Scanning file with %s: %s", backend, staged_file.path)
            results.append((staged_file.path, classifier.classify(staged_file.content, staged_file.path)))
            report.scanned_files.append(staged_file.path)

        scanned = set(report.scanned_files)
        report.skipped_files = [path for path in to_scan if path not in scanned]
        report.findings = aggregate_findings(results)
        return report
