"""Batch sentiment analysis via Gemini, reconciled against the submitted inputs."""
import json
import logging
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError as SchemaError

from sentiment_board.gemini_client import GeminiClient
from sentiment_board.models import AnalysisRequestItem, AnalysisResult, new_id
from sentiment_board.schema import BatchPayload, RESPONSE_SCHEMA

logger = logging.getLogger(__name__)


def _filled(value: Optional[str], fallback: str) -> str:
    """Return `value` unless it is missing or blank."""
    return value if value and value.strip() else fallback


class AnalysisError(RuntimeError):
    """The analysis call failed or returned a payload that breaks the schema."""


class BatchAnalyzer:
    """
    Sends a whole batch of texts to Gemini in one request.

    Results come back in input order; any text or source the model leaves
    empty is filled in from the submitted item at the same position.
    """

    def __init__(self, gemini_client: GeminiClient, temperature: float = 0.2):
        """Initialize with Gemini client."""
        self.client = gemini_client
        self.temperature = temperature

    def build_prompt(self, items: Sequence[AnalysisRequestItem]) -> str:
        batch = json.dumps([item.to_dict() for item in items], indent=2, ensure_ascii=False)
        return f"""Perform a sentiment analysis on the following batch of text inputs. For each input, provide a detailed analysis.

Analyze the following JSON array of texts:
{batch}

For each object in the array, determine the sentiment, a confidence score between 0.0 and 1.0, up to three key keywords, a list of up to three detected emotions (like joy, sadness, anger), and a brief one-sentence explanation.
Return exactly one result per input, in the same order as the input array.
Follow the provided JSON schema for the output. Ensure the sentiment value is one of the following uppercase strings: 'POSITIVE', 'NEGATIVE', 'NEUTRAL', 'MIXED'. If no specific emotions are detected, provide an empty array for the 'emotions' field.
"""

    def analyze(self, items: Sequence[AnalysisRequestItem]) -> List[AnalysisResult]:
        """
        Analyze a non-empty batch.

        Args:
            items: Ordered request items (validated by the caller)

        Returns:
            One AnalysisResult per item, in the same order

        Raises:
            AnalysisError: transport failure, unparseable or malformed payload
        """
        items = list(items)
        logger.info("Analyzing batch of %d item(s)", len(items))

        resp = self.client.generate_json(
            self.build_prompt(items),
            response_schema=RESPONSE_SCHEMA,
            temperature=self.temperature,
        )
        if not resp.get("ok"):
            raise AnalysisError(f"Gemini API request failed: {resp.get('error')}")

        return self.reconcile(items, resp.get("data"))

    def reconcile(self, items: Sequence[AnalysisRequestItem], data: Any) -> List[AnalysisResult]:
        if not isinstance(data, dict) or "results" not in data:
            raise AnalysisError("Invalid response structure from Gemini API: missing 'results'")

        try:
            payload = BatchPayload.model_validate(data)
        except SchemaError as e:
            raise AnalysisError(f"Invalid response structure from Gemini API: {e}") from e

        if len(payload.results) != len(items):
            raise AnalysisError(
                f"Gemini returned {len(payload.results)} result(s) for {len(items)} input(s)"
            )

        out: List[AnalysisResult] = []
        for item, result in zip(items, payload.results):
            out.append(AnalysisResult(
                id=new_id(),
                text=_filled(result.text, item.text),
                source=_filled(result.source, item.source),
                sentiment=result.sentiment,
                confidence=float(result.confidence),
                keywords=tuple(result.keywords),
                emotions=tuple(result.emotions),
                explanation=result.explanation,
            ))
        return out
