"""HTTP transport protocol and its requests-backed implementation."""

from collections.abc import Iterator
from typing import Protocol, runtime_checkable

import requests

from wen.errors import TransportError

DEFAULT_TIMEOUT = 60.0


@runtime_checkable
class TransportReply(Protocol):
    status: int

    def read(self) -> str: ...

    def lines(self) -> Iterator[str]: ...

    def close(self) -> None: ...


@runtime_checkable
class Transport(Protocol):
    def post(
        self, url: str, body: bytes, headers: dict[str, str], *, stream: bool
    ) -> TransportReply: ...


class RequestsReply:
    """Wrap a ``requests.Response`` so callers only ever see text and TransportError."""

    def __init__(self, response: requests.Response) -> None:
        self._response = response
        self.status = response.status_code

    def read(self) -> str:
        try:
            return self._response.content.decode("utf-8", errors="replace")
        except requests.RequestException as e:
            raise TransportError(f"failed to read response: {e}", status=self.status) from e

    def lines(self) -> Iterator[str]:
        try:
            for raw in self._response.iter_lines():
                yield raw.decode("utf-8", errors="replace")
        except requests.RequestException as e:
            raise TransportError(
                f"failed to read streaming response: {e}", status=self.status
            ) from e

    def close(self) -> None:
        self._response.close()


class RequestsTransport:
    """POST with ``requests``; one attempt, no session reuse."""

    def __init__(self, timeout: float | None = DEFAULT_TIMEOUT) -> None:
        self._timeout = timeout

    def post(
        self, url: str, body: bytes, headers: dict[str, str], *, stream: bool
    ) -> RequestsReply:
        try:
            response = requests.post(
                url, data=body, headers=headers, stream=stream, timeout=self._timeout
            )
        except requests.RequestException as e:
            raise TransportError(f"failed to send request: {e}") from e
        return RequestsReply(response)
