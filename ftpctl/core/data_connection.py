import logging
import socket
import threading
from typing import Optional

logger = logging.getLogger(__name__)


class DataConnectionManager:
    def __init__(self, ip: str, port: int, timeout: float = 10.0):
        """
        Maneja la conexión de datos PASV del cliente FTP.
        """
        if not 1 <= port <= 65535:
            raise ValueError(f"Invalid data port: {port}")
        self.ip = ip
        self.port = port
        self.timeout = timeout
        self.data_socket: Optional[socket.socket] = None
        self.chunks = []
        self.error: Optional[Exception] = None
        self.done = threading.Event()
        self.thread: Optional[threading.Thread] = None

    @classmethod
    def open(cls, ip: str, port: int) -> "DataConnectionManager":
        """
        Abre el canal de datos y recibe el contenido en segundo plano.
        El canal de control no espera por esta conexión.
        """
        channel = cls(ip, port)
        channel.thread = threading.Thread(target=channel._run, daemon=True)
        channel.thread.start()
        return channel

    def connect(self):
        """
        Establece la conexión TCP con el servidor en el canal de datos.
        """
        self.data_socket = socket.create_connection((self.ip, self.port), timeout=self.timeout)
        logger.info(f"[DATA] Connected to {self.ip}:{self.port}")

    def close(self):
        """
        Cierra la conexión de datos.
        """
        if self.data_socket:
            self.data_socket.close()
            self.data_socket = None
            logger.info(f"[DATA] Disconnected from {self.ip}:{self.port}")

    def _run(self):
        try:
            self.connect()
            self.receive()
        except OSError as e:
            logger.error(f"[DATA] Transfer from {self.ip}:{self.port} failed - {e}")
            self.error = e
        finally:
            self.close()
            self.done.set()

    def receive(self):
        """
        Recibe bytes hasta que el servidor cierra la conexión.
        """
        while True:
            data = self.data_socket.recv(4096)
            if not data:
                break
            self.chunks.append(data)

    def wait(self, timeout: Optional[float] = None) -> bytes:
        """Blocks until the transfer ends and returns the payload."""
        if not self.done.wait(timeout):
            raise TimeoutError(f"Data transfer from {self.ip}:{self.port} still running")
        if self.error:
            raise self.error
        return b"".join(self.chunks)

    def save(self, local_path: str, timeout: Optional[float] = None) -> str:
        """
        Guarda el contenido recibido en local_path.
        """
        with open(local_path, 'wb') as f:
            f.write(self.wait(timeout))
        logger.info(f"[DATA] File downloaded to {local_path}")
        return local_path
