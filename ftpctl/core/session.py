import logging
import threading
from collections import deque
from typing import Callable, Deque, List, Optional

from ftpctl.core.commands import mask_command
from ftpctl.core.data_connection import DataConnectionManager
from ftpctl.core.errors import FTPConnectError, FTPTimeoutError
from ftpctl.core.handlers import LoginState, handle_login
from ftpctl.core.response import Response, ResponseAccumulator

logger = logging.getLogger(__name__)

FTP_PORT = 21
TERMINATOR = "\r\n"

Continuation = Callable[["ControlSession", str], None]


class PendingCommand:
    def __init__(self, text: str, follow_up: Optional[Continuation] = None):
        self.text = text
        self.follow_up = follow_up

    def __repr__(self):
        return f"PendingCommand(text={self.text!r}, follow_up={self.follow_up is not None})"


class ControlSession:
    """
    Motor del canal de control de un cliente FTP.

    Serializa los comandos de una única conexión de control: mantiene la cola
    de comandos pendientes, arma las respuestas multilínea y ejecuta la
    continuación armada con la última línea de cada respuesta completa.

    Campos principales:
        - commands (Deque[PendingCommand]): comandos aún no enviados, en orden FIFO.
        - accumulator (ResponseAccumulator): líneas de la respuesta en curso.
        - handler (Continuation | None): la única continuación armada.
        - busy (bool): hay un intercambio en vuelo.
        - connected (bool): el transporte está activo.
        - login_state (LoginState | None): estado del handshake USER/PASS.
        - data_channel: último canal de datos abierto por PASV (no se gestiona su ciclo de vida).

    El transporte es cualquier objeto con write(text: str). El framer de líneas
    llama a on_line() una vez por línea completa, ya sin terminador.
    """

    def __init__(self, host: str, port: int = FTP_PORT, user: str = "anonymous", password: str = "",
                 data_channel_opener: Optional[Callable[[str, int], object]] = None):
        if not host:
            raise ValueError("host is required")

        # Lock para compartir la sesión entre el hilo lector y los llamadores
        self.lock = threading.RLock()

        self.host = host
        self.port = port or FTP_PORT
        self.user = user
        self.password = password
        self.data_channel_opener = data_channel_opener or DataConnectionManager.open

        self.commands: Deque[PendingCommand] = deque()
        self.accumulator = ResponseAccumulator()
        self.handler: Optional[Continuation] = None
        self.listeners: List[Callable[[str, Response], None]] = []

        self.transport = None
        self.busy = False
        self.connected = False
        self.login_state: Optional[LoginState] = None
        self.current_command: Optional[str] = None
        self.data_channel = None

    # ----------------- transport lifecycle -----------------
    def connection_made(self, transport):
        """Transport is up: the greeting exchange is now in flight."""
        with self.lock:
            self.transport = transport
            self.connected = True
            self.busy = True
            self.current_command = "CONNECT"
            self.login_state = LoginState.AWAIT_GREETING
            self.handler = handle_login
            logger.info(f"Control channel open to {self.host}:{self.port}")

    def connection_lost(self):
        with self.lock:
            if self.commands:
                logger.warning(f"Dropping {len(self.commands)} queued command(s)")
            self.transport = None
            self.connected = False
            self.busy = False
            self.handler = None
            self.commands.clear()
            self.accumulator.reset()
            logger.info(f"Control channel to {self.host}:{self.port} closed")

    # ----------------- command queue -----------------
    def enqueue(self, text: str, follow_up: Optional[Continuation] = None):
        with self.lock:
            self.commands.append(PendingCommand(text, follow_up))
            if not self.busy and self.connected:
                self.dispatch_next()

    def dispatch_next(self):
        with self.lock:
            if not self.commands:
                self.busy = False
                return

            command = self.commands.popleft()
            if command.follow_up is not None:
                self.handler = command.follow_up
            self.push(command.text)
            self.busy = True

    def push(self, text: str):
        """Writes one command line, bypassing the queue."""
        if self.transport is None:
            raise FTPConnectError("No connection established.")
        logger.debug(f"→ SEND: {mask_command(text)}")
        self.current_command = text
        self.transport.write(text + TERMINATOR)

    # ----------------- handler chain -----------------
    def arm(self, continuation: Continuation):
        self.handler = continuation

    def on_line(self, line: str):
        """Feeds one decoded line. Errors raised by continuations propagate."""
        with self.lock:
            self.busy = True

            response = self.accumulator.feed(line)
            if response is None:
                return

            for received in response.lines:
                logger.debug(f"← RECV: {received}")
            self._notify(response)

            handler = self.handler
            if handler is not None:
                self.handler = None
                handler(self, response.last_line)
                # The continuation kept control by arming a follow-up
                if self.handler is not None:
                    return

            self.dispatch_next()

    def expire(self):
        """Abandons the exchange in flight after a timeout."""
        with self.lock:
            command = self.current_command
            self.handler = None
            self.accumulator.reset()
            self.busy = False
            logger.error(f"✗ Timed out waiting for reply to {mask_command(command or '')}")
            raise FTPTimeoutError(f"No reply from {self.host}:{self.port} to {mask_command(command or '')}")

    # ----------------- helpers -----------------
    def add_listener(self, callback: Callable[[str, Response], None]):
        """callback(command, response) runs for every completed reply."""
        self.listeners.append(callback)

    def _notify(self, response: Response):
        for callback in self.listeners:
            callback(self.current_command, response)

    @property
    def idle(self) -> bool:
        with self.lock:
            return not self.busy and not self.commands

    @property
    def logged_in(self) -> bool:
        return self.login_state is LoginState.LOGGED_IN

    def __repr__(self):
        return (f"ControlSession(host={self.host}, port={self.port}, connected={self.connected}, "
                f"busy={self.busy}, queued={len(self.commands)})")
