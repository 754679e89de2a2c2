import argparse
import logging
import sys

from ftpctl.config import ClientConfig
from ftpctl.core.connection import open_client
from ftpctl.core.errors import FTPError

logger = logging.getLogger("ftpctl")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ftpctl", description="Run FTP commands over one control connection")
    parser.add_argument("host", nargs="?", help="Servidor FTP (o variable FTP_HOST)")
    parser.add_argument("commands", nargs="*", help='Comandos a ejecutar, p.ej. "CWD pub" "PWD"')
    parser.add_argument("--port", type=int, default=None, help="Puerto del canal de control (21)")
    parser.add_argument("--user", default=None, help="Usuario (FTP_USER, anonymous)")
    parser.add_argument("--password", default=None, help="Contraseña (FTP_PASS)")
    parser.add_argument("--timeout", type=float, default=None, help="Timeout de respuesta en segundos")
    parser.add_argument("--download", metavar="PATH", default=None, help="Descarga PATH por PASV + RETR")
    parser.add_argument("--output", metavar="FILE", default=None, help="Archivo local para --download")
    parser.add_argument("-v", "--verbose", action="store_true", help="Muestra el tráfico del canal de control")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        config = ClientConfig.from_env(host=args.host, port=args.port, user=args.user,
                                       password=args.password, timeout=args.timeout)
    except ValueError as e:
        logger.error(f"✗ {e}")
        return 2

    try:
        conn, handler = open_client(config)
    except FTPError as e:
        logger.error(f"✗ {e}")
        return 1

    try:
        for line in args.commands:
            handler.raw(line)
        if args.download:
            handler.download(args.download)

        if not conn.wait_until_idle(timeout=None if config.timeout <= 0 else config.timeout * (len(args.commands) + 2)):
            logger.error("✗ Commands did not complete")

        for entry in handler.get_history():
            parsed = entry["parsed"]
            print(f"{entry['command']}: {parsed.code} {parsed.message}")

        channel = conn.session.data_channel
        if args.download and channel is not None:
            channel.save(args.output or args.download.rsplit("/", 1)[-1], timeout=config.timeout)

        if conn.session.connected:
            handler.quit()
            conn.wait_until_idle(timeout=config.timeout)
    except (FTPError, OSError) as e:
        logger.error(f"✗ {e}")
        return 1
    finally:
        conn.disconnect()

    if conn.last_error is not None:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
