import pytest


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeBenepik:
    """Stands in for ``BenepikClient`` in service tests."""

    def __init__(self, status=200, body=None, error=None):
        self.status = status
        self.body = body if body is not None else success_body()
        self.error = error
        self.payloads = []

    def send_rewards(self, payload):
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return self.status, self.body


def success_body():
    return {
        "success": True,
        "data": {
            "code": 1000,
            "success": 1,
            "message": "Rewards accepted",
            "batchResponse": [{"code": 1000, "success": 1, "message": "Accepted"}],
        },
    }


@pytest.fixture
def fake_benepik():
    return FakeBenepik


@pytest.fixture
def benepik_http(monkeypatch):
    """Patch ``requests.post`` in the Benepik client and record every call."""
    calls = []
    state = {"response": FakeResponse(200, success_body())}

    def fake_post(url, **kwargs):
        calls.append({"url": url, **kwargs})
        response = state["response"]
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr("rewards.benepik.requests.post", fake_post)

    class Recorder:
        def respond(self, response):
            state["response"] = response

    recorder = Recorder()
    recorder.calls = calls
    return recorder


@pytest.fixture
def fake_response():
    return FakeResponse
