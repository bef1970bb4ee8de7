from __future__ import annotations

import sys
from typing import Any

import requests

from security_hook.config.ollama_config import get_ollama_model, get_ollama_url, get_probe_timeout
from security_hook.exception.exception import ServiceError


class OllamaClient:
    """Minimal client for a local Ollama server."""

    TAGS_PATH = "/api/tags"
    GENERATE_PATH = "/api/generate"

    def __init__(
        self,
        base_url: str | None = None,
        model: str | None = None,
        probe_timeout: float | None = None,
    ):
        self.base_url = (base_url or get_ollama_url()).rstrip("/")
        self.model = model or get_ollama_model()
        self.probe_timeout = probe_timeout if probe_timeout is not None else get_probe_timeout()

    def is_available(self) -> bool:
        try:
            response = requests.get(f"{self.base_url}{self.TAGS_PATH}", timeout=self.probe_timeout)
        except requests.RequestException:
            return False
        return response.ok

    def list_models(self) -> list[str]:
        try:
            response = requests.get(f"{self.base_url}{self.TAGS_PATH}", timeout=max(self.probe_timeout, 5.0))
        except requests.RequestException as error:
            raise ServiceError(f"Ollama model listing failed: {error}", sys) from error
        if response.status_code >= 400:
            raise ServiceError(f"Ollama API error {response.status_code} on {self.TAGS_PATH}", sys)
        try:
            payload = response.json()
        except ValueError as error:
            raise ServiceError("Ollama returned a non-JSON model list.", sys) from error
        models = payload.get("models") if isinstance(payload, dict) else None
        names = [str(item.get("name")) for item in models or [] if isinstance(item, dict) and item.get("name")]
        return sorted(names)

    def generate(self, prompt: str) -> dict[str, Any]:
        """Run one non-streaming generation and return the decoded body.

        No client-side timeout: a loaded model can take a while to answer.
        """
        body = {"model": self.model, "prompt": prompt, "stream": False}
        try:
            response = requests.post(
                f"{self.base_url}{self.GENERATE_PATH}",
                json=body,
                headers={"Content-Type": "application/json"},
                timeout=None,
            )
        except requests.RequestException as error:
            raise ServiceError(f"Ollama request failed: {error}", sys) from error

        if response.status_code >= 400:
            raise ServiceError(
                f"Ollama API error {response.status_code} on {self.GENERATE_PATH}: {response.text[:200]}",
                sys,
            )

        try:
            payload = response.json()
        except ValueError:
            payload = {"raw": response.text}
        return payload if isinstance(payload, dict) else {"raw": payload}
