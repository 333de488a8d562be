import pytest


class FakeGeminiClient:
    """Stands in for GeminiClient.generate_json; records every call."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def generate_json(self, prompt, response_schema=None, temperature=0.3, model=None, timeout=None):
        self.calls.append({"prompt": prompt, "response_schema": response_schema, "temperature": temperature})
        if self.error is not None:
            raise self.error
        return self.response


def ok(data):
    return {"ok": True, "data": data, "raw": None, "error": None}


def result_obj(text="", source="", sentiment="POSITIVE", confidence=0.9, **extra):
    obj = {
        "text": text,
        "source": source,
        "sentiment": sentiment,
        "confidence": confidence,
        "keywords": ["camera"],
        "emotions": ["joy"],
        "explanation": "Praises the product.",
    }
    obj.update(extra)
    return obj


@pytest.fixture
def fake_client():
    return FakeGeminiClient()
