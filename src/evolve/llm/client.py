"""
HTTP wrapper for OpenAI-compatible /chat/completions endpoints.

Defaults to BytePlus ModelArk; any OpenAI-compatible provider works by
setting LLM_BASE_URL / LLM_MODEL.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://ark.ap-southeast.bytepluses.com/api/v3"
DEFAULT_MODEL = "doubao-lite-4k"


class LLMAPIError(Exception):
    """Raised when the LLM API returns an error."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(f"LLM API error {status_code}: {message}")


def _first_env(*names: str) -> str:
    for name in names:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return ""


@dataclass
class LLMClient:
    """
    HTTP wrapper for OpenAI-compatible /chat/completions endpoints.

    Configure via environment variables:
        LLM_API_KEY / BYTEPLUS_API_KEY — API key
        LLM_BASE_URL / BYTEPLUS_BASE_URL — API base URL (default: BytePlus ModelArk)
        LLM_MODEL / BYTEPLUS_MODEL_ENDPOINT — model or endpoint name

    One request per call unless max_retries is raised.
    """

    api_key: str = ""
    model: str = ""
    base_url: str = ""
    timeout: float = 30.0
    max_retries: int = 0

    def __post_init__(self):
        self._load_dotenv()
        if not self.base_url:
            self.base_url = (
                _first_env("LLM_BASE_URL", "BYTEPLUS_BASE_URL") or DEFAULT_BASE_URL
            ).rstrip("/")
        if not self.model:
            self.model = _first_env("LLM_MODEL", "BYTEPLUS_MODEL_ENDPOINT") or DEFAULT_MODEL
        if not self.api_key:
            self.api_key = self._load_api_key()

    def _load_dotenv(self) -> None:
        """Load .env file into os.environ (only vars not already set)."""
        for parent in [Path.cwd()] + list(Path(__file__).resolve().parents):
            env_path = parent / ".env"
            if env_path.exists():
                for line in env_path.read_text().splitlines():
                    line = line.strip()
                    if not line or line.startswith("#"):
                        continue
                    if "=" in line:
                        key, value = line.split("=", 1)
                        key, value = key.strip(), value.strip()
                        if key and key not in os.environ:
                            os.environ[key] = value
                break  # only load the first .env found

    def _load_api_key(self) -> str:
        key = _first_env("LLM_API_KEY", "BYTEPLUS_API_KEY")
        if key:
            return key
        raise LLMAPIError(401, "No LLM_API_KEY or BYTEPLUS_API_KEY found in env or .env file")

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _do_request(self, url: str, body: Dict[str, Any]) -> str:
        """Make a single chat completion request. Returns content or raises."""
        resp = requests.post(
            url,
            headers=self._headers(),
            json=body,
            timeout=self.timeout,
        )

        if resp.status_code == 200:
            try:
                data = resp.json()
            except ValueError:
                raise LLMAPIError(502, f"Non-JSON completion body: {resp.text[:200]}")
            try:
                content = data["choices"][0]["message"].get("content")
            except (KeyError, IndexError, TypeError, AttributeError):
                raise LLMAPIError(502, f"Malformed completion payload: {str(data)[:200]}")
            return content or ""

        if resp.status_code == 429:
            retry_after = resp.headers.get("Retry-After", "?")
            raise LLMAPIError(429, f"Rate limited (Retry-After: {retry_after}s)")

        raise LLMAPIError(resp.status_code, resp.text)

    def chat_completion(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 1000,
        top_p: Optional[float] = None,
        response_format: Optional[Dict[str, str]] = None,
    ) -> str:
        """
        Call /chat/completions and return the assistant's content.

        Raises LLMAPIError on failure.
        """
        body: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if top_p is not None:
            body["top_p"] = top_p
        if response_format is not None:
            body["response_format"] = response_format

        url = f"{self.base_url}/chat/completions"

        last_error: Optional[LLMAPIError] = None
        for attempt in range(self.max_retries + 1):
            try:
                return self._do_request(url, body)
            except LLMAPIError as e:
                if e.status_code in (400, 401, 403, 404, 429):
                    raise
                last_error = e
            except requests.exceptions.Timeout:
                logger.warning(f"[LLMClient] Request timed out (attempt {attempt + 1}/{self.max_retries + 1})")
                last_error = LLMAPIError(408, "Request timed out")
            except requests.exceptions.ConnectionError as e:
                logger.warning(f"[LLMClient] Connection error: {e}")
                last_error = LLMAPIError(0, f"Connection error: {e}")
            except requests.exceptions.RequestException as e:
                logger.warning(f"[LLMClient] Request failed: {e}")
                last_error = LLMAPIError(0, f"Request failed: {e}")

            if attempt < self.max_retries:
                time.sleep(2 ** attempt)

        raise last_error  # type: ignore
