import logging
import socket
import threading
import time
from typing import Callable, Optional

from ftpctl.core.commands import ClientCommandHandler
from ftpctl.core.errors import FTPConnectError, FTPError
from ftpctl.core.session import TERMINATOR, ControlSession

logger = logging.getLogger(__name__)


class LineFramer:
    """Splits a byte stream on the terminator and hands out decoded lines."""

    def __init__(self, on_line: Callable[[str], None], terminator: str = TERMINATOR, encoding: str = "utf-8"):
        self.on_line = on_line
        self.terminator = terminator.encode(encoding)
        self.encoding = encoding
        self.buffer = b""

    def feed(self, data: bytes):
        self.buffer += data
        while self.terminator in self.buffer:
            raw, self.buffer = self.buffer.split(self.terminator, 1)
            self.on_line(raw.decode(self.encoding, errors="replace"))


class ControlConnectionManager:
    def __init__(self, session: ControlSession, timeout: float = 10.0):
        self.session = session
        self.host = session.host
        self.port = session.port
        self.timeout = timeout
        self.socket: socket.socket = None
        self.framer = LineFramer(session.on_line)
        self.reader: Optional[threading.Thread] = None
        self.last_error: Optional[Exception] = None
        # Serializa el cierre entre el hilo lector y los llamadores
        self.lock = threading.Lock()

    def connect(self):
        if self.socket is not None:
            raise RuntimeError("Connection already established.")
        try:
            logger.info(f"Connecting to {self.host}:{self.port} (timeout={self.timeout}s)")
            self.socket = socket.create_connection((self.host, self.port), timeout=self.timeout)
            logger.info(f"✓ Connected to {self.host}:{self.port}")
        except OSError as e:
            logger.error(f"✗ Failed to connect to {self.host}:{self.port} - {e}")
            self.socket = None
            raise FTPConnectError(f"Failed to connect to {self.host}:{self.port} - {e}") from e
        self.session.connection_made(self)

    def start(self):
        """Connects and processes incoming lines on a daemon thread."""
        self.connect()
        self.reader = threading.Thread(target=self.run, daemon=True)
        self.reader.start()
        return self

    def disconnect(self):
        with self.lock:
            sock, self.socket = self.socket, None
        if sock:
            try:
                logger.info(f"Closing connection to {self.host}:{self.port}")
                sock.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            sock.close()
            logger.info(f"✓ Disconnected from {self.host}:{self.port}")

        reader = self.reader
        if reader is not None and reader is not threading.current_thread():
            reader.join(timeout=1.0)

        if self.session.connected:
            self.session.connection_lost()

    def write(self, text: str):
        sock = self.socket
        if sock is None:
            raise FTPConnectError("No connection established.")
        sock.sendall(text.encode('utf-8'))

    def run(self):
        """Reads the control channel until EOF, a fatal error or disconnect."""
        try:
            for chunk in self.recv_chunks():
                self.framer.feed(chunk)
            logger.info(f"Server {self.host}:{self.port} closed the connection")
        except FTPError as e:
            logger.error(f"✗ Session with {self.host}:{self.port} terminated - {e}")
            self.last_error = e
        except Exception as e:
            logger.exception(f"✗ Session with {self.host}:{self.port} crashed - {e}")
            self.last_error = e
        finally:
            self.disconnect()

    def recv_chunks(self, chunk_size: int = 4096):
        """Generador de chunks de bytes hasta EOF; expira el intercambio en curso si vence el timeout."""
        while True:
            sock = self.socket
            if sock is None:
                return
            try:
                chunk = sock.recv(chunk_size)
            except socket.timeout:
                if self.session.busy:
                    self.session.expire()
                continue
            except OSError as e:
                logger.debug(f"recv_chunks: socket read interrupted: {e}")
                return

            if not chunk:
                return
            yield chunk

    def wait_until_idle(self, timeout: Optional[float] = None, interval: float = 0.05) -> bool:
        """Polls until every queued command has been answered."""
        deadline = None if timeout is None else time.monotonic() + timeout
        while not self.session.idle:
            if self.socket is None:
                return False
            if deadline is not None and time.monotonic() >= deadline:
                return False
            time.sleep(interval)
        return True


def open_client(config, data_channel_opener=None):
    """Session + command handler + running connection for a ClientConfig."""
    session = ControlSession(data_channel_opener=data_channel_opener, **config.session_kwargs())
    handler = ClientCommandHandler(session)
    conn = ControlConnectionManager(session, timeout=config.timeout)
    conn.start()
    return conn, handler
