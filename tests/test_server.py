import json

import pytest
from fastapi.testclient import TestClient

from biolens.api.server import create_app
from biolens.config import Settings
from biolens.intent.llm_interpreter import ChatResult


class DummyInterpreter:
    def __init__(self, result=None):
        self.calls = []
        self.result = result

    def interpret(self, message, mode="command"):
        self.calls.append((message, mode))
        if self.result is not None:
            return self.result
        return ChatResult(mode=mode, raw="{}", result='{"action":"reset_camera","params":{}}', model="dummy")


@pytest.fixture
def interpreter():
    return DummyInterpreter()


@pytest.fixture
def client(interpreter):
    return TestClient(create_app(Settings(), interpreter=interpreter))


def test_chat_ok(client, interpreter):
    resp = client.post("/api/chat", json={"message": "  reset the view  "})
    assert resp.status_code == 200
    assert resp.headers["cache-control"] == "no-store"
    assert resp.json() == {
        "mode": "command",
        "raw": "{}",
        "result": '{"action":"reset_camera","params":{}}',
        "model": "dummy",
    }
    assert interpreter.calls == [("reset the view", "command")]


def test_chat_answer_mode(client, interpreter):
    resp = client.post("/api/chat", json={"message": "what is ATP?", "mode": "answer"})
    assert resp.json()["mode"] == "answer"
    assert interpreter.calls == [("what is ATP?", "answer")]


def test_unknown_mode_means_command(client, interpreter):
    client.post("/api/chat", json={"message": "hi", "mode": "poetry"})
    assert interpreter.calls == [("hi", "command")]


@pytest.mark.parametrize("body", [{}, {"message": ""}, {"message": "   "}, {"message": 5}, {"message": ["x"]}])
def test_invalid_message(client, interpreter, body):
    resp = client.post("/api/chat", json=body)
    assert resp.status_code == 400
    data = resp.json()
    assert data["error"] == "Invalid request"
    assert json.loads(data["result"]) == {
        "action": "noop",
        "params": {"reason": "Invalid request: message must be a non-empty string"},
    }
    assert interpreter.calls == []


def test_missing_body(client):
    assert client.post("/api/chat").status_code == 400


@pytest.mark.parametrize("method", ["get", "put", "delete"])
def test_method_not_allowed(client, method):
    resp = getattr(client, method)("/api/chat")
    assert resp.status_code == 405
    assert resp.headers["allow"] == "POST"
    assert resp.json()["error"] == "Method Not Allowed"
    assert json.loads(resp.json()["result"])["action"] == "noop"


def test_provider_error_is_passed_through():
    failed = ChatResult(
        mode="command",
        raw="",
        result='{"action":"noop","params":{"reason":"DeepSeek API failed: HTTP 502"}}',
        error="DeepSeek API failed: HTTP 502",
        details="bad gateway",
    )
    client = TestClient(create_app(Settings(), interpreter=DummyInterpreter(failed)))
    data = client.post("/api/chat", json={"message": "spin"}).json()
    assert data["error"] == "DeepSeek API failed: HTTP 502"
    assert data["details"] == "bad gateway"


def test_health(client):
    assert client.get("/health").json() == {"ok": True, "model": "deepseek-chat"}


def test_without_api_key():
    client = TestClient(create_app(Settings(api_key=None)))
    data = client.post("/api/chat", json={"message": "color chain A red"}).json()
    assert data["error"] == "Server misconfigured: missing DEEPSEEK_API_KEY"


@pytest.mark.parametrize("content", [b"not json", b"[1, 2]", b'"message"', b"\xff\xfe"])
def test_non_object_body(client, interpreter, content):
    resp = client.post("/api/chat", content=content, headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid request"
    assert interpreter.calls == []


def test_unencodable_result_still_returns_envelope():
    odd = ChatResult(mode="command", raw="bad \ud800", result='{"action":"noop","params":{"reason":"\ud800"}}')
    client = TestClient(create_app(Settings(), interpreter=DummyInterpreter(odd)))
    resp = client.post("/api/chat", json={"message": "hi"})
    assert resp.status_code == 200
    assert resp.json()["raw"] == "bad ?"
