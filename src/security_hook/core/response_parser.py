"""Best-effort extraction of a ScanResult from free-form model output.

Small models do not reliably return bare JSON, so the text is run through an
ordered list of strategies and the first one that yields a valid verdict wins.
When none does, the file is reported as a parsing error so the commit is
blocked for manual review.
"""

from __future__ import annotations

import json
import re
from typing import Any, Callable, Optional

from security_hook.core.models import Finding, ScanResult

ParseStrategy = Callable[[str], Optional[ScanResult]]

FENCE_PATTERN = re.compile(r"```[a-zA-Z]*[ \t]*\n?(.*?)```", re.DOTALL)
HEURISTIC_TRUE = re.compile(r"hasSensitiveData[^\n]*?true")
HEURISTIC_FALSE = re.compile(r"hasSensitiveData[^\n]*?false")
HEURISTIC_FIELDS = {
    "line": (re.compile(r'"line"\s*:\s*"((?:[^"\\]|\\.)*)"'), "Found sensitive data"),
    "type": (re.compile(r'"type"\s*:\s*"((?:[^"\\]|\\.)*)"'), "Unknown"),
    "suggestion": (re.compile(r'"suggestion"\s*:\s*"((?:[^"\\]|\\.)*)"'), "Review manually"),
}


def _load(text: str) -> Any:
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        return None


def parse_direct(text: str) -> ScanResult | None:
    return ScanResult.from_payload(_load(text.strip()))


def parse_fenced(text: str) -> ScanResult | None:
    for block in FENCE_PATTERN.findall(text):
        result = ScanResult.from_payload(_load(block.strip()))
        if result is not None:
            return result
    return None


def parse_embedded_object(text: str) -> ScanResult | None:
    if "hasSensitiveData" not in text:
        return None
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            payload, _ = decoder.raw_decode(text, start)
        except ValueError:
            payload = None
        result = ScanResult.from_payload(payload)
        if result is not None:
            return result
        start = text.find("{", start + 1)
    return None


def parse_heuristic(text: str) -> ScanResult | None:
    if HEURISTIC_TRUE.search(text):
        fields = {}
        for name, (pattern, default) in HEURISTIC_FIELDS.items():
            match = pattern.search(text)
            fields[name] = match.group(1).strip() if match and match.group(1).strip() else default
        return ScanResult.flagged([Finding(**fields)])
    if HEURISTIC_FALSE.search(text):
        return ScanResult.clean()
    return None


PARSE_STRATEGIES: tuple[ParseStrategy, ...] = (
    parse_direct,
    parse_fenced,
    parse_embedded_object,
    parse_heuristic,
)


def parsing_error(suggestion: str) -> ScanResult:
    return ScanResult.flagged([Finding(line="N/A", type="OllamaParsingError", suggestion=suggestion)])


def parse_scan_response(text: str) -> ScanResult:
    for strategy in PARSE_STRATEGIES:
        result = strategy(text)
        if result is not None:
            return result
    return parsing_error("Could not parse valid JSON from response. Check Ollama model output.")


def parse_generate_payload(payload: dict[str, Any]) -> ScanResult:
    response_text = payload.get("response")
    if not isinstance(response_text, str) or not response_text.strip():
        return parsing_error("Could not extract response field from Ollama API result.")
    return parse_scan_response(response_text)
