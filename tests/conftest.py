from collections.abc import Iterator

import pytest


class FakeReply:
    def __init__(self, status: int = 200, body: str = "", lines: list[str] | None = None):
        self.status = status
        self._body = body
        self._lines = lines or []
        self.closed = False

    def read(self) -> str:
        return self._body

    def lines(self) -> Iterator[str]:
        yield from self._lines

    def close(self) -> None:
        self.closed = True


class FakeTransport:
    """Records every post and answers with a canned reply."""

    def __init__(self, reply: FakeReply):
        self.reply = reply
        self.calls: list[dict] = []

    def post(self, url, body, headers, *, stream):
        self.calls.append({"url": url, "body": body, "headers": headers, "stream": stream})
        return self.reply


@pytest.fixture
def make_transport():
    def _make(**kwargs) -> FakeTransport:
        return FakeTransport(FakeReply(**kwargs))

    return _make
