import re
from dataclasses import dataclass

from security_hook.core.models import DEFAULT_SUGGESTION, Finding, ScanResult


@dataclass(frozen=True)
class Detector:
    type: str
    pattern: re.Pattern
    suggestion: str = DEFAULT_SUGGESTION


DETECTORS = (
    Detector(
        type="AWS Access Key",
        pattern=re.compile(r"AKIA[0-9A-Z]{16}"),
        suggestion="Remove the key, rotate it in AWS IAM and load credentials from the environment.",
    ),
    Detector(
        type="Private Key",
        pattern=re.compile(r"-----BEGIN [A-Z ]*PRIVATE KEY-----"),
        suggestion="Never commit private keys. Store them outside the repository.",
    ),
    Detector(
        type="Hardcoded Credential",
        pattern=re.compile(r"""(api_key|password|secret)\s*=\s*["'][^"']+["']"""),
    ),
)


def scan_with_detectors(content: str, detectors=DETECTORS) -> ScanResult:
    """Run every detector over each line; one finding per detector per line."""
    issues = []
    for line in content.splitlines():
        for detector in detectors:
            if detector.pattern.search(line):
                issues.append(Finding(line=line.strip(), type=detector.type, suggestion=detector.suggestion))
    if not issues:
        return ScanResult.clean()
    return ScanResult.flagged(issues)
