"""Messages style adapter (Anthropic)."""

import logging

from wen.errors import DecodeError
from wen.models import NormalizedRequest
from wen.provider import dump_payload, load_body, parse_frame, typed_field

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"
CONTENT_DELTA = "content_block_delta"


class MessagesProvider:
    """System prompt travels beside a single user message; answers come back under ``content``."""

    name = "anthropic"

    def headers(self, api_key: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {api_key}",
            "x-api-key": api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

    def encode_request(self, request: NormalizedRequest) -> bytes:
        payload = {
            "model": request.model,
            "max_tokens": request.max_tokens,
            "messages": [{"role": "user", "content": request.user_text}],
            "system": request.system_prompt,
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
        blocks = typed_field(data, "content", list, [])
        if not blocks:
            raise DecodeError("empty response: no content returned")
        if not isinstance(blocks[0], dict):
            raise DecodeError("failed to parse response: content block is not an object")
        return typed_field(blocks[0], "text", str, "")

    def decode_stream_frame(self, line: str) -> tuple[str, bool]:
        data, done = parse_frame(line)
        if data is None or data.get("type") != CONTENT_DELTA:
            return "", done
        try:
            delta = typed_field(data, "delta", dict, {})
            return typed_field(delta, "text", str, ""), False
        except DecodeError as e:
            logger.debug("Skipping stream frame: %s", e)
            return "", False
