"""Summary statistics, chart data and exports built from analysis results."""
import json
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd

from sentiment_board.models import AnalysisResult, Sentiment

CSV_COLUMNS = ["id", "source", "text", "sentiment", "confidence", "emotions", "explanation"]
CSV_FILENAME = "sentiment-analysis-results.csv"
JSON_FILENAME = "sentiment-analysis-results.json"

SENTIMENT_COLORS = {
    Sentiment.POSITIVE: "#22c55e",
    Sentiment.NEGATIVE: "#ef4444",
    Sentiment.NEUTRAL: "#64748b",
    Sentiment.MIXED: "#f97316",
}

ALL = "ALL"


def sentiment_counts(results: Sequence[AnalysisResult]) -> Dict[Sentiment, int]:
    counts = {s: 0 for s in Sentiment}
    for r in results:
        counts[r.sentiment] += 1
    return counts


def summarize(results: Sequence[AnalysisResult]) -> Dict[str, Any]:
    """
    Dashboard summary cards.

    Returns:
        Dict with total, per-sentiment percentages, most_common and
        avg_confidence. On a tie, most_common is the tied label whose first
        occurrence comes last.
    """
    total = len(results)
    counts = sentiment_counts(results)
    if total == 0:
        return {
            "total": 0,
            "percentages": {s: 0.0 for s in Sentiment},
            "most_common": Sentiment.NEUTRAL,
            "avg_confidence": 0.0,
        }

    most_common = Sentiment.NEUTRAL
    for s in dict.fromkeys(r.sentiment for r in results):
        if not counts[most_common] > counts[s]:
            most_common = s
    return {
        "total": total,
        "percentages": {s: counts[s] / total * 100 for s in Sentiment},
        "most_common": most_common,
        "avg_confidence": sum(r.confidence for r in results) / total,
    }


def filter_results(results: Sequence[AnalysisResult], sentiment: Optional[Union[str, Sentiment]] = ALL) -> List[AnalysisResult]:
    if not sentiment or sentiment == ALL:
        return list(results)
    wanted = Sentiment(sentiment)
    return [r for r in results if r.sentiment is wanted]


def chart_spec(results: Sequence[AnalysisResult]) -> Dict[str, Any]:
    """Plotly bar chart spec (data + layout) of counts per sentiment."""
    counts = sentiment_counts(results)
    labels = [s.value for s in Sentiment]
    bar = {
        "type": "bar",
        "x": [label.title() for label in labels],
        "y": [counts[s] for s in Sentiment],
        "marker": {"color": [SENTIMENT_COLORS[s] for s in Sentiment]},
        "name": "Inputs",
        "hovertemplate": "%{x}: %{y}<extra></extra>",
    }
    layout = {
        "margin": {"t": 10, "r": 20, "l": 40, "b": 40},
        "yaxis": {"tickformat": "d", "rangemode": "tozero"},
        "height": 280,
    }
    return {"data": [bar], "layout": layout}


def results_frame(results: Sequence[AnalysisResult]) -> pd.DataFrame:
    rows = []
    for r in results:
        rows.append({
            "id": r.id,
            "source": r.source,
            "text": r.text,
            "sentiment": r.sentiment.value,
            "confidence": r.confidence,
            "emotions": "; ".join(r.emotions),
            "explanation": r.explanation,
        })
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


def to_csv(results: Sequence[AnalysisResult]) -> str:
    """CSV export with minimal quoting (comma, quote or newline fields are quoted)."""
    return results_frame(results).to_csv(index=False, lineterminator="\n")


def to_json(results: Sequence[AnalysisResult]) -> str:
    return json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False)
