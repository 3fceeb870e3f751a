from types import SimpleNamespace

import pytest

from store_attendance.verification.client import VisionClient, extract_json, image_part, text_part


class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(content):
    completions = FakeCompletions(content)
    sdk = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return VisionClient(api_key="k", base_url="http://ai.local/v1/", model="gemini-2.5-flash", client=sdk), completions


def test_generate_json_sends_one_multimodal_message():
    client, completions = _client('{"verified": true, "identityScore": 91}')
    parts = [image_part("data:image/png;base64,AAAA"), text_part("hola")]

    assert client.generate_json(parts) == {"verified": True, "identityScore": 91}
    assert completions.kwargs["model"] == "gemini-2.5-flash"
    assert completions.kwargs["messages"] == [{"role": "user", "content": parts}]
    assert completions.kwargs["response_format"] == {"type": "json_object"}


def test_json_wrapped_in_prose_is_extracted():
    client, _ = _client('Claro:\n```json\n{"score": 80, "summary": "ok"}\n```')
    assert client.generate_json([text_part("x")]) == {"score": 80, "summary": "ok"}


def test_list_content_is_joined():
    client, _ = _client([{"type": "text", "text": '{"a"'}, {"type": "text", "text": ": 1}"}])
    assert client.generate_json([text_part("x")]) == {"a": 1}


def test_empty_answer_raises():
    client, _ = _client("")
    with pytest.raises(ValueError):
        client.generate_json([text_part("x")])


def test_non_object_json_raises():
    with pytest.raises(ValueError):
        extract_json("[1, 2]")
