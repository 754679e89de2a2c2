"""ftpctl: cliente FTP con motor de canal de control basado en continuaciones."""

__version__ = "0.1.0"
