from __future__ import annotations

import json

from security_hook.config.scan_config import get_max_content_chars, get_regex_safety_net
from security_hook.core.models import Finding, ScanResult
from security_hook.core.ollama_client import OllamaClient
from security_hook.core.regex_detectors import scan_with_detectors
from security_hook.core.response_parser import parse_generate_payload
from security_hook.exception.exception import ServiceError
from security_hook.logging.logger import logger

PROMPT_TEMPLATE = """TASK: Check if this code contains sensitive information (passwords, API keys, tokens, private keys, connection strings with credentials, etc.)

OUTPUT RULES:
- Response must be valid JSON only
- No explanations, no text, no markdown
- ONLY return one of the two JSON formats shown below

EXAMPLE RESPONSE FOR CLEAN CODE:
{{"hasSensitiveData": false}}

EXAMPLE RESPONSE FOR PROBLEMATIC CODE:
{{"hasSensitiveData": true, "issues": [{{"line": "const apiKey = '1234abcd'", "type": "API Key", "suggestion": "Store in environment variable"}}]}}

CODE TO ANALYZE FROM FILE {file_path}:
{content}"""


def build_prompt(content: str, file_path: str) -> str:
    # Path is embedded as a quoted, escaped JSON string.
    return PROMPT_TEMPLATE.format(file_path=json.dumps(file_path), content=content)


def truncate_content(content: str, file_path: str, max_chars: int) -> str:
    if len(content) <= max_chars:
        return content
    logger.warning(
        "Content of %s truncated from %d to %d characters before scanning.",
        file_path,
        len(content),
        max_chars,
    )
    return content[:max_chars]


class ContentClassifier:
    """Classify one file's content with the inference service or the regex detectors.

    ``service_available`` is decided once per run by the pipeline's liveness
    probe. When it is False the regex detectors are the only classifier.
    """

    def __init__(
        self,
        client: OllamaClient | None = None,
        service_available: bool = True,
        max_content_chars: int | None = None,
        regex_safety_net: bool | None = None,
    ):
        self.client = client
        self.service_available = service_available and client is not None
        self.max_content_chars = max_content_chars or get_max_content_chars()
        self.regex_safety_net = get_regex_safety_net() if regex_safety_net is None else regex_safety_net

    def classify(self, content: str, file_path: str) -> ScanResult:
        # Only the model request is capped; the detectors always see the full blob.
        if not self.service_available:
            return scan_with_detectors(content)

        prompt_content = truncate_content(content, file_path, self.max_content_chars)
        result = self._classify_with_service(prompt_content, file_path)
        if not self.regex_safety_net:
            return result

        regex_result = scan_with_detectors(content)
        if not regex_result.has_sensitive_data:
            return result
        return ScanResult.flagged(list(result.issues) + list(regex_result.issues))

    def _classify_with_service(self, content: str, file_path: str) -> ScanResult:
        try:
            payload = self.client.generate(build_prompt(content, file_path))
        except ServiceError as error:
            logger.error("Ollama call failed for %s: %s", file_path, error.error_message)
            return ScanResult.flagged(
                [
                    Finding(
                        line="N/A",
                        type="OllamaAPIError",
                        suggestion="Ollama API call failed. Check that Ollama is running and the model is available.",
                    )
                ]
            )
        return parse_generate_payload(payload)
