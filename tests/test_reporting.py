import csv
import io
import json

import pytest

from sentiment_board import reporting
from sentiment_board.models import AnalysisResult, Sentiment


def make_result(sentiment=Sentiment.POSITIVE, confidence=0.8, **kw):
    fields = dict(
        id="id-1",
        text="Nice phone",
        source="Review",
        sentiment=sentiment,
        confidence=confidence,
        keywords=("phone",),
        emotions=("joy", "surprise"),
        explanation="Positive tone.",
    )
    fields.update(kw)
    return AnalysisResult(**fields)


def test_csv_header_and_emotions_join():
    text = reporting.to_csv([make_result()])
    lines = text.split("\n")
    assert lines[0] == "id,source,text,sentiment,confidence,emotions,explanation"
    assert lines[1] == "id-1,Review,Nice phone,POSITIVE,0.8,joy; surprise,Positive tone."


def test_csv_escaping_round_trips():
    explanation = 'Says "great", but, hmm\nsecond line'
    text = reporting.to_csv([make_result(explanation=explanation, text='a "quoted" word')])

    assert '"Says ""great"", but, hmm' in text
    rows = list(csv.DictReader(io.StringIO(text)))
    assert rows[0]["explanation"] == explanation
    assert rows[0]["text"] == 'a "quoted" word'


def test_csv_empty_results_has_header_only():
    assert reporting.to_csv([]).strip() == ",".join(reporting.CSV_COLUMNS)


def test_json_export():
    data = json.loads(reporting.to_json([make_result()]))
    assert data[0]["sentiment"] == "POSITIVE"
    assert data[0]["emotions"] == ["joy", "surprise"]


def test_summarize():
    results = [
        make_result(Sentiment.POSITIVE, 1.0),
        make_result(Sentiment.POSITIVE, 0.5),
        make_result(Sentiment.NEGATIVE, 0.6),
        make_result(Sentiment.MIXED, 0.3),
    ]
    summary = reporting.summarize(results)
    assert summary["total"] == 4
    assert summary["most_common"] is Sentiment.POSITIVE
    assert summary["avg_confidence"] == pytest.approx(0.6)
    assert summary["percentages"][Sentiment.POSITIVE] == pytest.approx(50.0)
    assert summary["percentages"][Sentiment.NEUTRAL] == 0


def test_summarize_tie_goes_to_label_seen_last():
    results = [make_result(Sentiment.POSITIVE), make_result(Sentiment.NEGATIVE)]
    assert reporting.summarize(results)["most_common"] is Sentiment.NEGATIVE

    results = [make_result(Sentiment.NEUTRAL), make_result(Sentiment.MIXED), make_result(Sentiment.NEUTRAL)]
    assert reporting.summarize(results)["most_common"] is Sentiment.NEUTRAL


def test_summarize_tie_order_of_first_appearance():
    results = [
        make_result(Sentiment.MIXED),
        make_result(Sentiment.POSITIVE),
        make_result(Sentiment.MIXED),
        make_result(Sentiment.POSITIVE),
    ]
    assert reporting.summarize(results)["most_common"] is Sentiment.POSITIVE


def test_summarize_empty():
    summary = reporting.summarize([])
    assert summary["total"] == 0
    assert summary["most_common"] is Sentiment.NEUTRAL


def test_filter_results():
    results = [make_result(Sentiment.POSITIVE), make_result(Sentiment.NEGATIVE)]
    assert len(reporting.filter_results(results, reporting.ALL)) == 2
    assert [r.sentiment for r in reporting.filter_results(results, "NEGATIVE")] == [Sentiment.NEGATIVE]


def test_chart_spec_counts_in_enum_order():
    spec = reporting.chart_spec([make_result(Sentiment.MIXED), make_result(Sentiment.MIXED)])
    bar = spec["data"][0]
    assert bar["x"] == ["Positive", "Negative", "Neutral", "Mixed"]
    assert bar["y"] == [0, 0, 0, 2]
