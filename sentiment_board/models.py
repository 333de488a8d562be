"""Core data types shared by the collector, the analyzer and the dashboard."""
import uuid
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, Any, Tuple


class Sentiment(str, Enum):
    POSITIVE = "POSITIVE"
    NEGATIVE = "NEGATIVE"
    NEUTRAL = "NEUTRAL"
    MIXED = "MIXED"


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class Entry:
    """One editable (text, source) row in the input panel."""
    text: str = ""
    source: str = ""
    id: str = field(default_factory=new_id)

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()

    def to_item(self) -> "AnalysisRequestItem":
        return AnalysisRequestItem(text=self.text, source=self.source)


@dataclass(frozen=True)
class AnalysisRequestItem:
    text: str
    source: str

    def to_dict(self) -> Dict[str, str]:
        return {"text": self.text, "source": self.source}


@dataclass(frozen=True)
class AnalysisResult:
    id: str
    text: str
    source: str
    sentiment: Sentiment
    confidence: float
    keywords: Tuple[str, ...]
    emotions: Tuple[str, ...]
    explanation: str

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["sentiment"] = self.sentiment.value
        data["keywords"] = list(self.keywords)
        data["emotions"] = list(self.emotions)
        return data
