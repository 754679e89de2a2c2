import pytest

from ftpctl.core.commands import ClientCommandHandler
from ftpctl.core.session import ControlSession


class FakeTransport:
    """Records every line written to the control channel."""

    def __init__(self):
        self.sent = []

    def write(self, text):
        self.sent.append(text)


class FakeOpener:
    def __init__(self):
        self.calls = []

    def __call__(self, host, port):
        self.calls.append((host, port))
        return ("data-channel", host, port)


def feed(session, *lines):
    for line in lines:
        session.on_line(line)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def opener():
    return FakeOpener()


@pytest.fixture
def session(transport, opener):
    s = ControlSession("127.0.0.1", user="alice", password="secret", data_channel_opener=opener)
    s.connection_made(transport)
    return s


@pytest.fixture
def logged_in(session, transport):
    feed(session, "220 Welcome", "331 Password required", "230 Logged in")
    transport.sent.clear()
    return session


@pytest.fixture
def handler(logged_in):
    return ClientCommandHandler(logged_in)
