"""Drive one buffered or streaming exchange with the completion API."""

import logging
from collections.abc import Callable, Iterator
from contextlib import closing

from wen.errors import TransportError
from wen.markup import render
from wen.models import NormalizedRequest
from wen.provider import Provider, ProviderKind
from wen.providers.anthropic import MessagesProvider
from wen.providers.openai import ChatCompletionProvider
from wen.transport import Transport, TransportReply

logger = logging.getLogger(__name__)

PROVIDERS: dict[ProviderKind, type] = {
    ProviderKind.CHAT_COMPLETION: ChatCompletionProvider,
    ProviderKind.MESSAGES: MessagesProvider,
}


def get_provider(kind: ProviderKind | str) -> Provider:
    """Return the adapter for ``kind``; anything unknown gets the chat-completions one."""
    if not isinstance(kind, ProviderKind):
        kind = ProviderKind.parse(kind)
    return PROVIDERS.get(kind, ChatCompletionProvider)()


class Exchange:
    """One request, one response, no retry.

    In streaming mode every decoded fragment is rendered and handed to ``emit``
    as soon as it arrives; tags split across fragments are not reassembled.
    Buffered answers are returned untranslated and never emitted here.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        url: str,
        api_key: str,
        emit: Callable[[str], None] | None = None,
    ) -> None:
        self._transport = transport
        self._url = url
        self._api_key = api_key
        self._emit = emit

    def execute(self, request: NormalizedRequest) -> str:
        if not request.streaming:
            return self._execute_buffered(request)
        parts: list[str] = []
        for fragment in self.fragments(request):
            if self._emit is not None:
                self._emit(render(fragment))
            parts.append(fragment)
        return "".join(parts)

    def fragments(self, request: NormalizedRequest) -> Iterator[str]:
        """Yield raw answer fragments of a streaming exchange in arrival order."""
        provider = get_provider(request.provider)
        reply = self._send(provider, request, stream=True)
        with closing(reply):
            self._check_status(reply)
            for line in reply.lines():
                if not line:
                    continue
                fragment, done = provider.decode_stream_frame(line)
                if done:
                    break
                if fragment:
                    yield fragment

    def _execute_buffered(self, request: NormalizedRequest) -> str:
        provider = get_provider(request.provider)
        reply = self._send(provider, request, stream=False)
        with closing(reply):
            self._check_status(reply)
            body = reply.read()
        return provider.decode_buffered(body)

    def _send(
        self, provider: Provider, request: NormalizedRequest, *, stream: bool
    ) -> TransportReply:
        body = provider.encode_request(request)
        headers = {"Content-Type": "application/json", **provider.headers(self._api_key)}
        if stream:
            headers["Accept"] = "text/event-stream"
        logger.debug("POST %s (provider=%s, stream=%s)", self._url, provider.name, stream)
        return self._transport.post(self._url, body, headers, stream=stream)

    @staticmethod
    def _check_status(reply: TransportReply) -> None:
        if 200 <= reply.status < 300:
            return
        detail = reply.read()
        raise TransportError(
            f"API returned error (HTTP {reply.status}): {detail}",
            status=reply.status,
            detail=detail,
        )
