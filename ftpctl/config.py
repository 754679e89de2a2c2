import logging
import os

logger = logging.getLogger(__name__)

FTP_PORT = 21


class ClientConfig:
    """
    Parámetros de conexión del cliente.

    Campos:
        - host (str): servidor FTP (obligatorio).
        - port (int): puerto del canal de control, 21 por defecto.
        - user (str): usuario para USER, "anonymous" por defecto.
        - password (str): contraseña para PASS.
        - timeout (float): segundos sin respuesta antes de abandonar un intercambio.
    """

    def __init__(self, host: str, port: int = FTP_PORT, user: str = "anonymous", password: str = "",
                 timeout: float = 10.0):
        if not host:
            raise ValueError("FTP host is required")
        port = int(port)
        if not 1 <= port <= 65535:
            raise ValueError(f"Invalid port: {port}")
        self.host = host
        self.port = port
        self.user = user or "anonymous"
        self.password = password or ""
        self.timeout = float(timeout)

    @classmethod
    def from_env(cls, **overrides) -> "ClientConfig":
        """Reads FTP_HOST, FTP_PORT, FTP_USER, FTP_PASS and FTP_TIMEOUT; overrides win when not None."""
        values = {
            "host": os.getenv("FTP_HOST"),
            "port": os.getenv("FTP_PORT", FTP_PORT),
            "user": os.getenv("FTP_USER", "anonymous"),
            "password": os.getenv("FTP_PASS", ""),
            "timeout": os.getenv("FTP_TIMEOUT", 10.0),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        logger.debug(f"Config: host={values['host']} port={values['port']} user={values['user']}")
        return cls(**values)

    def session_kwargs(self) -> dict:
        return {"host": self.host, "port": self.port, "user": self.user, "password": self.password}

    def __repr__(self):
        return f"ClientConfig(host={self.host}, port={self.port}, user={self.user}, timeout={self.timeout})"
