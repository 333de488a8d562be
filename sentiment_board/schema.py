"""Schema for the structured output the analysis model must return.

The pydantic models validate the untrusted payload; RESPONSE_SCHEMA is the
same shape in the OpenAPI subset Gemini accepts as `response_schema`.
"""
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from sentiment_board.models import Sentiment

MAX_KEYWORDS = 3
MAX_EMOTIONS = 3


class ResultPayload(BaseModel):
    """One per-item analysis as returned by the model."""

    text: Optional[str] = Field(default=None, description="The original text that was analyzed.")
    source: Optional[str] = Field(default=None, description="The original source identifier for the text.")
    sentiment: Sentiment = Field(description="POSITIVE, NEGATIVE, NEUTRAL or MIXED.")
    confidence: float = Field(ge=0.0, le=1.0, description="Confidence in the sentiment, 0.0 to 1.0.")
    keywords: List[str] = Field(description="Up to three keywords central to the sentiment.")
    emotions: List[str] = Field(default_factory=list, description="Up to three detected emotions.")
    explanation: str = Field(description="One-sentence explanation of the sentiment.")

    @field_validator("sentiment", mode="before")
    @classmethod
    def _upper_sentiment(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("keywords", mode="after")
    @classmethod
    def _cap_keywords(cls, value: List[str]) -> List[str]:
        return value[:MAX_KEYWORDS]

    @field_validator("emotions", mode="before")
    @classmethod
    def _emotions_default(cls, value):
        return [] if value is None else value

    @field_validator("emotions", mode="after")
    @classmethod
    def _cap_emotions(cls, value: List[str]) -> List[str]:
        return value[:MAX_EMOTIONS]


class BatchPayload(BaseModel):
    results: List[ResultPayload]


RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "results": {
            "type": "ARRAY",
            "description": "An array of sentiment analysis results for each input text.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "text": {"type": "STRING", "description": "The original text that was analyzed."},
                    "source": {"type": "STRING", "description": "The original source identifier for the text."},
                    "sentiment": {
                        "type": "STRING",
                        "enum": [s.value for s in Sentiment],
                        "description": "The overall sentiment of the text.",
                    },
                    "confidence": {
                        "type": "NUMBER",
                        "description": "A score from 0.0 to 1.0 representing confidence in the sentiment.",
                    },
                    "keywords": {
                        "type": "ARRAY",
                        "description": "Up to three keywords or topics central to the sentiment of the text.",
                        "items": {"type": "STRING"},
                    },
                    "explanation": {
                        "type": "STRING",
                        "description": "A brief, one-sentence explanation highlighting key phrases or tones.",
                    },
                    "emotions": {
                        "type": "ARRAY",
                        "description": "Up to three emotions detected in the text; empty if none.",
                        "items": {"type": "STRING"},
                    },
                },
                "required": ["text", "source", "sentiment", "confidence", "keywords", "explanation", "emotions"],
            },
        }
    },
    "required": ["results"],
}
