"""Gemini API client for Sentiment Board."""
import json
import logging
from typing import Dict, Any, Optional

import requests

from sentiment_board.config import DEFAULT_MODEL, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiClient:
    """Client for the Google Gemini generateContent REST API."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        timeout: int = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """Initialize client with an API key supplied by the caller."""
        if not api_key:
            raise ValueError("GeminiClient requires a non-empty API key")

        self.api_key = api_key
        self.base_url = BASE_URL
        self.default_model = model
        self.timeout = timeout
        self.session = session or requests.Session()

    def generate(
        self,
        prompt: str,
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        response_format: Optional[str] = None,
        response_schema: Optional[Dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Generate content using Gemini API.

        Args:
            prompt: The input text prompt
            model: Model name (defaults to the configured model)
            temperature: Sampling temperature (0.0-1.0)
            max_tokens: Maximum tokens in response
            response_format: 'json' for JSON mode, None for text
            response_schema: OpenAPI-style schema constraining JSON output
            timeout: Request timeout in seconds

        Returns:
            Dict with 'ok', 'text', 'raw', 'error' keys
        """
        model = model or self.default_model
        timeout = timeout or self.timeout
        url = f"{self.base_url}/{model}:generateContent"

        generation_config: Dict[str, Any] = {"temperature": temperature}
        if max_tokens:
            generation_config["maxOutputTokens"] = max_tokens
        if response_format == "json":
            generation_config["response_mime_type"] = "application/json"
            if response_schema is not None:
                generation_config["response_schema"] = response_schema

        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }

        try:
            response = self.session.post(
                url,
                params={"key": self.api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=timeout,
            )
        except requests.exceptions.Timeout:
            logger.warning("Gemini request to %s timed out after %ss", model, timeout)
            return {
                "ok": False,
                "text": None,
                "raw": None,
                "error": f"Request timed out after {timeout} seconds",
            }
        except requests.exceptions.RequestException as e:
            logger.warning("Gemini request to %s failed: %s", model, e)
            return {"ok": False, "text": None, "raw": None, "error": f"Request failed: {e}"}

        if response.status_code != 200:
            logger.warning("Gemini returned HTTP %s", response.status_code)
            return {
                "ok": False,
                "text": None,
                "raw": None,
                "error": f"HTTP {response.status_code}: {response.text[:500]}",
            }

        try:
            data = response.json()
        except ValueError as e:
            return {"ok": False, "text": None, "raw": response.text, "error": f"Non-JSON API response: {e}"}

        return {"ok": True, "text": self._extract_text(data), "raw": data, "error": None}

    def _extract_text(self, data: Dict[str, Any]) -> Optional[str]:
        """Extract text content from API response."""
        try:
            candidates = data.get("candidates") or []
            if not candidates or not isinstance(candidates[0], dict):
                return None

            content = candidates[0].get("content")
            if not isinstance(content, dict):
                return None
            parts = content.get("parts") or []
            if not parts:
                return None

            # Combine all text parts
            return "".join(str(part.get("text") or "") for part in parts if isinstance(part, dict))

        except (AttributeError, TypeError, KeyError, IndexError) as e:
            logger.warning("Unexpected Gemini response shape: %s", e)
            return None

    def generate_json(
        self,
        prompt: str,
        response_schema: Optional[Dict[str, Any]] = None,
        temperature: float = 0.3,
        model: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Generate JSON response using Gemini.

        Returns:
            Dict with 'ok', 'data' (parsed JSON), 'raw', 'error' keys
        """
        result = self.generate(
            prompt=prompt,
            model=model,
            response_format="json",
            response_schema=response_schema,
            temperature=temperature,
            timeout=timeout,
        )

        if not result["ok"]:
            return {"ok": False, "data": None, "raw": result["raw"], "error": result["error"]}

        text = (result["text"] or "").strip()
        if not text:
            return {"ok": False, "data": None, "raw": result["raw"], "error": "Empty response from API"}

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            return {
                "ok": False,
                "data": None,
                "raw": result["raw"],
                "error": f"Failed to parse JSON: {e}",
            }

        return {"ok": True, "data": data, "raw": result["raw"], "error": None}
