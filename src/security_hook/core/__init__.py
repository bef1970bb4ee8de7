from security_hook.core.classifier import ContentClassifier
from security_hook.core.exclusions import ExclusionRules, load_exclusion_patterns, should_exclude
from security_hook.core.git_index import GitIndex
from security_hook.core.models import Finding, ScanResult, StagedFile
from security_hook.core.ollama_client import OllamaClient
from security_hook.core.pipeline import ScanReport, SecurityCheck, aggregate_findings

__all__ = [
    "ContentClassifier",
    "ExclusionRules",
    "Finding",
    "GitIndex",
    "OllamaClient",
    "ScanReport",
    "ScanResult",
    "SecurityCheck",
    "StagedFile",
    "aggregate_findings",
    "load_exclusion_patterns",
    "should_exclude",
]
