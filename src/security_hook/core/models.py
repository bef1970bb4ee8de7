from dataclasses import dataclass, field, replace
from typing import Any, Dict, List

DEFAULT_SUGGESTION = "Move sensitive data to a .env file and add it to .gitignore."


@dataclass(frozen=True)
class StagedFile:
    path: str
    content: str


@dataclass(frozen=True)
class Finding:
    line: str
    type: str
    suggestion: str = DEFAULT_SUGGESTION
    file_path: str = ""

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Finding":
        def _text(key: str, default: str) -> str:
            value = payload.get(key)
            if value is None:
                return default
            text = str(value).strip()
            return text or default

        return cls(
            line=_text("line", "N/A"),
            type=_text("type", "Unknown issue"),
            suggestion=_text("suggestion", DEFAULT_SUGGESTION),
        )

    def with_file(self, file_path: str) -> "Finding":
        return replace(self, file_path=file_path)

    def to_payload(self) -> Dict[str, str]:
        payload = {"line": self.line, "type": self.type, "suggestion": self.suggestion}
        if self.file_path:
            payload["filePath"] = self.file_path
        return payload


@dataclass(frozen=True)
class ScanResult:
    """Verdict for a single file.

    Serialized with the keys the inference prompt asks for:
    ``{"hasSensitiveData": false}`` or
    ``{"hasSensitiveData": true, "issues": [...]}``.
    """

    has_sensitive_data: bool
    issues: tuple = field(default_factory=tuple)

    def __post_init__(self):
        if not self.has_sensitive_data and self.issues:
            raise ValueError("A clean ScanResult cannot carry issues")

    @classmethod
    def clean(cls) -> "ScanResult":
        return cls(has_sensitive_data=False)

    @classmethod
    def flagged(cls, issues: List[Finding]) -> "ScanResult":
        if not issues:
            issues = [Finding(line="N/A", type="Unspecified", suggestion="Review manually")]
        return cls(has_sensitive_data=True, issues=tuple(issues))

    @classmethod
    def from_payload(cls, payload: Any) -> "ScanResult | None":
        """Validate a decoded JSON value, returning None when it is not a verdict."""
        if not isinstance(payload, dict):
            return None
        flag = payload.get("hasSensitiveData")
        if not isinstance(flag, bool):
            return None
        if not flag:
            return cls.clean()

        raw_issues = payload.get("issues")
        issues: List[Finding] = []
        if isinstance(raw_issues, list):
            issues = [Finding.from_payload(item) for item in raw_issues if isinstance(item, dict)]
        return cls.flagged(issues)

    def to_payload(self) -> Dict[str, Any]:
        if not self.has_sensitive_data:
            return {"hasSensitiveData": False}
        return {
            "hasSensitiveData": True,
            "issues": [issue.to_payload() for issue in self.issues],
        }
