import json

import pytest

from wen.errors import DecodeError
from wen.exchange import get_provider
from wen.models import NormalizedRequest
from wen.provider import Provider, ProviderKind
from wen.providers.anthropic import MessagesProvider
from wen.providers.openai import ChatCompletionProvider


def _request(**overrides) -> NormalizedRequest:
    fields = {
        "model": "m-1",
        "system_prompt": "be brief",
        "user_text": "what is 2+2",
        "streaming": False,
    }
    fields.update(overrides)
    return NormalizedRequest(**fields)


def test_adapters_satisfy_protocol():
    assert isinstance(ChatCompletionProvider(), Provider)
    assert isinstance(MessagesProvider(), Provider)


def test_chat_completion_encodes_system_then_user():
    payload = json.loads(ChatCompletionProvider().encode_request(_request(streaming=True)))

    assert payload == {
        "model": "m-1",
        "messages": [
            {"role": "system", "content": "be brief"},
            {"role": "user", "content": "what is 2+2"},
        ],
        "stream": True,
    }


def test_messages_encodes_single_user_entry_and_top_level_system():
    payload = json.loads(MessagesProvider().encode_request(_request(max_tokens=256)))

    assert payload["messages"] == [{"role": "user", "content": "what is 2+2"}]
    assert payload["system"] == "be brief"
    assert payload["model"] == "m-1"
    assert payload["stream"] is False
    assert payload["max_tokens"] == 256


def test_encode_keeps_non_ascii_text():
    body = ChatCompletionProvider().encode_request(_request(user_text="你好"))
    assert "你好" in body.decode("utf-8")


def test_headers():
    assert ChatCompletionProvider().headers("k") == {"Authorization": "Bearer k"}
    headers = MessagesProvider().headers("k")
    assert headers["Authorization"] == "Bearer k"
    assert headers["x-api-key"] == "k"
    assert headers["anthropic-version"] == "2023-06-01"


def test_chat_completion_buffered_zero_choices_is_empty_response():
    with pytest.raises(DecodeError, match="empty response"):
        ChatCompletionProvider().decode_buffered('{"choices": []}')


def test_chat_completion_buffered_one_choice():
    body = json.dumps({"choices": [{"message": {"role": "assistant", "content": "X"}}]})
    assert ChatCompletionProvider().decode_buffered(body) == "X"


def test_messages_buffered():
    body = json.dumps({"content": [{"type": "text", "text": "Y"}, {"type": "text", "text": "Z"}]})
    assert MessagesProvider().decode_buffered(body) == "Y"


def test_messages_buffered_no_content_is_empty_response():
    with pytest.raises(DecodeError, match="empty response"):
        MessagesProvider().decode_buffered('{"content": []}')


@pytest.mark.parametrize("body", ["not json", "[1, 2]"])
def test_buffered_rejects_non_object_body(body):
    with pytest.raises(DecodeError, match="failed to parse response"):
        ChatCompletionProvider().decode_buffered(body)


def test_chat_completion_stream_frames():
    provider = ChatCompletionProvider()

    assert provider.decode_stream_frame('data: {"choices":[{"delta":{"content":"He"}}]}') == ("He", False)
    assert provider.decode_stream_frame('data: {"choices":[{"delta":{}}]}') == ("", False)
    assert provider.decode_stream_frame('data: {"choices":[]}') == ("", False)
    assert provider.decode_stream_frame("data: [DONE]") == ("", True)


def test_stream_frame_ignores_non_data_lines():
    provider = ChatCompletionProvider()

    assert provider.decode_stream_frame(": keep-alive") == ("", False)
    assert provider.decode_stream_frame("event: message") == ("", False)


def test_stream_frame_skips_malformed_json():
    assert ChatCompletionProvider().decode_stream_frame("data: {oops") == ("", False)
    assert MessagesProvider().decode_stream_frame("data: {oops") == ("", False)


def test_messages_stream_only_uses_content_deltas():
    provider = MessagesProvider()

    delta = 'data: {"type":"content_block_delta","index":0,"delta":{"type":"text_delta","text":"Hi"}}'
    assert provider.decode_stream_frame(delta) == ("Hi", False)
    assert provider.decode_stream_frame('data: {"type":"message_start","message":{}}') == ("", False)
    assert provider.decode_stream_frame('data: {"type":"ping"}') == ("", False)
    assert provider.decode_stream_frame("data: [DONE]") == ("", True)


@pytest.mark.parametrize(
    "name, kind",
    [
        ("openai", ProviderKind.CHAT_COMPLETION),
        ("anthropic", ProviderKind.MESSAGES),
        ("Anthropic", ProviderKind.CHAT_COMPLETION),
        ("anthropic ", ProviderKind.CHAT_COMPLETION),
        ("mistral", ProviderKind.CHAT_COMPLETION),
        ("", ProviderKind.CHAT_COMPLETION),
        (None, ProviderKind.CHAT_COMPLETION),
    ],
)
def test_provider_kind_parse(name, kind):
    assert ProviderKind.parse(name) is kind


def test_unknown_provider_behaves_like_openai():
    unknown = get_provider("mistral")
    openai = get_provider("openai")
    request = _request()
    body = '{"choices": [{"message": {"content": "X"}}]}'
    frame = 'data: {"choices":[{"delta":{"content":"He"}}]}'

    assert isinstance(unknown, ChatCompletionProvider)
    assert unknown.encode_request(request) == openai.encode_request(request)
    assert unknown.decode_buffered(body) == openai.decode_buffered(body)
    assert unknown.decode_stream_frame(frame) == openai.decode_stream_frame(frame)


@pytest.mark.parametrize(
    "frame",
    [
        'data: {"choices": {"x": 1}}',
        'data: {"choices": ["text"]}',
        'data: {"choices": [{"delta": "text"}]}',
        'data: {"choices": [{"delta": {"content": 5}}]}',
        'data: {"choices": [{"delta": {"content": ["a"]}}]}',
    ],
)
def test_chat_completion_stream_frame_with_wrong_types_is_skipped(frame):
    assert ChatCompletionProvider().decode_stream_frame(frame) == ("", False)


@pytest.mark.parametrize(
    "frame",
    [
        'data: {"type": "content_block_delta", "delta": "text"}',
        'data: {"type": "content_block_delta", "delta": {"text": 5}}',
        'data: {"type": "content_block_delta", "delta": {"text": {"a": 1}}}',
    ],
)
def test_messages_stream_frame_with_wrong_types_is_skipped(frame):
    assert MessagesProvider().decode_stream_frame(frame) == ("", False)


@pytest.mark.parametrize(
    "body",
    [
        '{"choices": {"x": 1}}',
        '{"choices": ["text"]}',
        '{"choices": [{"message": "text"}]}',
        '{"choices": [{"message": {"content": 5}}]}',
        '{"choices": [{"message": {"content": ["a"]}}]}',
    ],
)
def test_chat_completion_buffered_wrong_types(body):
    with pytest.raises(DecodeError, match="failed to parse response"):
        ChatCompletionProvider().decode_buffered(body)


@pytest.mark.parametrize(
    "body",
    [
        '{"content": {"text": "x"}}',
        '{"content": ["x"]}',
        '{"content": [{"text": 5}]}',
    ],
)
def test_messages_buffered_wrong_types(body):
    with pytest.raises(DecodeError, match="failed to parse response"):
        MessagesProvider().decode_buffered(body)


def test_buffered_null_content_is_empty_string():
    assert ChatCompletionProvider().decode_buffered('{"choices": [{"message": {"content": null}}]}') == ""
    assert ChatCompletionProvider().decode_buffered('{"choices": [{}]}') == ""
    assert MessagesProvider().decode_buffered('{"content": [{"type": "tool_use"}]}') == ""


def test_buffered_null_choices_is_empty_response():
    with pytest.raises(DecodeError, match="empty response"):
        ChatCompletionProvider().decode_buffered('{"choices": null}')
