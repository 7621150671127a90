"""Chat-completions style adapter (OpenAI and compatible endpoints)."""

import logging

from wen.errors import DecodeError
from wen.models import NormalizedRequest
from wen.provider import dump_payload, load_body, parse_frame, typed_field

logger = logging.getLogger(__name__)


class ChatCompletionProvider:
    """Messages go in a two-entry list; answers come back under ``choices``."""

    name = "openai"

    def headers(self, api_key: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {api_key}"}

    def encode_request(self, request: NormalizedRequest) -> bytes:
        payload = {
            "model": request.model,
            "messages": [
                {"role": "system", "content": request.system_prompt},
                {"role": "user", "content": request.user_text},
            ],
            "stream": request.streaming,
        }
        logger.debug(
            "Sending to %s: system=%r user=%r",
            self.name,
            request.system_prompt,
            request.user_text,
        )
        return dump_payload(payload)

    def decode_buffered(self, body: str) -> str:
        data = load_body(body)
        choices = typed_field(data, "choices", list, [])
        if not choices:
            raise DecodeError("empty response: no choices returned")
        if not isinstance(choices[0], dict):
            raise DecodeError("failed to parse response: choice is not an object")
        message = typed_field(choices[0], "message", dict, {})
        return typed_field(message, "content", str, "")

    def decode_stream_frame(self, line: str) -> tuple[str, bool]:
        data, done = parse_frame(line)
        if data is None:
            return "", done
        try:
            choices = typed_field(data, "choices", list, [])
            if not choices or not isinstance(choices[0], dict):
                return "", False
            delta = typed_field(choices[0], "delta", dict, {})
            return typed_field(delta, "content", str, ""), False
        except DecodeError as e:
            logger.debug("Skipping stream frame: %s", e)
            return "", False
