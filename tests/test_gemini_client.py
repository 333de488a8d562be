import json

import pytest
import requests

from sentiment_board.gemini_client import GeminiClient


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def post(self, url, **kwargs):
        self.requests.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def candidate(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def test_requires_api_key():
    with pytest.raises(ValueError):
        GeminiClient("")


def test_generate_json_sends_schema_and_parses():
    session = FakeSession(FakeResponse(payload=candidate(json.dumps({"results": []}))))
    client = GeminiClient("k", model="m", session=session)

    resp = client.generate_json("hi", response_schema={"type": "OBJECT"}, temperature=0.2)

    assert resp["ok"] and resp["data"] == {"results": []}
    url, kwargs = session.requests[0]
    assert url.endswith("/m:generateContent")
    assert kwargs["params"] == {"key": "k"}
    config = kwargs["json"]["generationConfig"]
    assert config == {
        "temperature": 0.2,
        "response_mime_type": "application/json",
        "response_schema": {"type": "OBJECT"},
    }


def test_http_error_reported():
    client = GeminiClient("k", session=FakeSession(FakeResponse(503, text="unavailable")))
    resp = client.generate_json("hi")
    assert not resp["ok"]
    assert resp["error"].startswith("HTTP 503")


def test_timeout_reported():
    client = GeminiClient("k", timeout=5, session=FakeSession(error=requests.exceptions.Timeout()))
    resp = client.generate("hi")
    assert not resp["ok"]
    assert "timed out after 5" in resp["error"]


def test_connection_error_reported():
    client = GeminiClient("k", session=FakeSession(error=requests.exceptions.ConnectionError("refused")))
    assert not client.generate("hi")["ok"]


def test_non_json_text_reported():
    client = GeminiClient("k", session=FakeSession(FakeResponse(payload=candidate("not json"))))
    resp = client.generate_json("hi")
    assert not resp["ok"]
    assert resp["error"].startswith("Failed to parse JSON")


def test_empty_candidates_reported():
    client = GeminiClient("k", session=FakeSession(FakeResponse(payload={"candidates": []})))
    resp = client.generate_json("hi")
    assert resp["error"] == "Empty response from API"


@pytest.mark.parametrize("payload", [
    {"candidates": [{"content": ["not", "a", "dict"]}]},
    {"candidates": [{"content": {"parts": "oops"}}]},
    {"candidates": "oops"},
    {"candidates": {"first": {}}},
    ["not", "a", "dict"],
])
def test_unexpected_candidate_shapes_do_not_raise(payload):
    client = GeminiClient("k", session=FakeSession(FakeResponse(payload=payload)))
    resp = client.generate_json("hi")
    assert resp["ok"] is False
    assert resp["error"] == "Empty response from API"


def test_null_part_text_treated_as_empty():
    payload = {"candidates": [{"content": {"parts": [{"text": None}]}}]}
    client = GeminiClient("k", session=FakeSession(FakeResponse(payload=payload)))
    resp = client.generate_json("hi")
    assert resp["ok"] is False
    assert resp["error"] == "Empty response from API"


def test_multiple_parts_concatenated():
    payload = {"candidates": [{"content": {"parts": [
        {"text": '{"results": '},
        {"text": None},
        {"inlineData": {}},
        {"text": "[]}"},
    ]}}]}
    client = GeminiClient("k", session=FakeSession(FakeResponse(payload=payload)))
    resp = client.generate_json("hi")
    assert resp["ok"]
    assert resp["data"] == {"results": []}
