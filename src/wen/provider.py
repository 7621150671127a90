"""Provider protocol: the vendor wire-format abstraction layer."""

import enum
import json
import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from wen.errors import DecodeError, EncodeError

if TYPE_CHECKING:
    from wen.models import NormalizedRequest

logger = logging.getLogger(__name__)

DONE_SENTINEL = "[DONE]"
DATA_PREFIX = "data:"


class ProviderKind(str, enum.Enum):
    CHAT_COMPLETION = "openai"
    MESSAGES = "anthropic"

    @classmethod
    def parse(cls, name: str | None) -> "ProviderKind":
        """Map a configured provider name to a kind; unknown names get the default."""
        try:
            return cls(name)
        except ValueError:
            return cls.CHAT_COMPLETION


@runtime_checkable
class Provider(Protocol):
    name: str

    def headers(self, api_key: str) -> dict[str, str]: ...

    def encode_request(self, request: "NormalizedRequest") -> bytes: ...

    def decode_buffered(self, body: str) -> str: ...

    def decode_stream_frame(self, line: str) -> tuple[str, bool]: ...


def frame_payload(line: str) -> str | None:
    """Return the payload of a ``data:`` line, or None for any other line."""
    if not line.startswith(DATA_PREFIX):
        return None
    payload = line[len(DATA_PREFIX) :]
    if payload.startswith(" "):
        payload = payload[1:]
    return payload


def parse_frame(line: str) -> tuple[dict[str, Any] | None, bool]:
    """Split one event-stream line into (json object, is_terminal).

    Non-data lines and frames that are not a JSON object yield ``(None, False)``.
    """
    payload = frame_payload(line)
    if payload is None:
        return None, False
    if payload.strip() == DONE_SENTINEL:
        return None, True
    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        logger.debug("Skipping malformed stream frame: %r", payload[:200])
        return None, False
    if not isinstance(data, dict):
        logger.debug("Skipping non-object stream frame: %r", payload[:200])
        return None, False
    return data, False


def load_body(body: str) -> dict[str, Any]:
    """Parse a buffered response body, raising DecodeError if it is not a JSON object."""
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise DecodeError(f"failed to parse response: {e}") from e
    if not isinstance(data, dict):
        raise DecodeError(f"failed to parse response: expected an object, got {body[:200]!r}")
    return data


def dump_payload(payload: dict[str, Any]) -> bytes:
    """Serialize a request payload to UTF-8 JSON."""
    try:
        return json.dumps(payload, ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise EncodeError(f"failed to encode request: {e}") from e


def typed_field(data: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    """Return ``data[key]`` if it is a ``kind``; missing or null gives ``default``.

    A value of any other type raises DecodeError.
    """
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, kind):
        raise DecodeError(
            f"failed to parse response: {key!r} is {type(value).__name__}, "
            f"expected {kind.__name__}"
        )
    return value
