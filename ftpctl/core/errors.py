"""Excepciones del cliente FTP."""


class FTPError(Exception):
    """Base class for exceptions in this package."""
    pass


class FTPConnectError(FTPError, ConnectionError):
    """For connection-related errors on the control channel."""
    pass


class FTPLoginError(FTPError):
    """Login handshake rejected by the server. Terminates the session."""
    pass


class FTPTimeoutError(FTPError, TimeoutError):
    """The server did not complete an exchange in time."""
    pass


class FTPCommandError(FTPError, ValueError):
    """Unknown verb or bad arguments, raised before anything is queued."""
    pass
