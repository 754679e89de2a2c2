import logging
import shlex
from datetime import datetime, timezone

from ftpctl.core.errors import FTPCommandError
from ftpctl.core.handlers import FOLLOW_UP_HANDLERS, pasv_handler
from ftpctl.core.parser import Parser

logger = logging.getLogger(__name__)

# verb -> accepts arguments
COMMANDS = {
    # Comandos sin parámetros
    "ABOR": False,
    "PWD": False,
    "CDUP": False,
    "NOOP": False,
    "QUIT": False,
    "SYST": False,
    # Comandos con uno o más parámetros
    "CWD": True,
    "DELE": True,
    "LIST": True,
    "MDTM": True,
    "MKD": True,
    "MODE": True,
    "NLST": True,
    "PASS": True,
    "RETR": True,
    "RMD": True,
    "RNFR": True,
    "RNTO": True,
    "SITE": True,
    "STAT": True,
    "STOR": True,
    "USER": True,
}

# Accepted from typed command lines on top of COMMANDS
EXTRA_COMMANDS = {
    "PASV": False,
    "TYPE": True,
}


def format_command(verb: str, *args) -> str:
    """VERB, or VERB followed by its arguments separated by single spaces."""
    verb = verb.upper()
    table = {**COMMANDS, **EXTRA_COMMANDS}
    if verb not in table:
        raise FTPCommandError(f"Command '{verb}' not recognized")
    if args and not table[verb]:
        raise FTPCommandError(f"{verb} takes no arguments")
    return " ".join([verb] + [str(arg) for arg in args])


def mask_command(text: str) -> str:
    if text.upper().startswith("PASS "):
        return "PASS ****"
    return text


class ClientCommandHandler:
    def __init__(self, session, parser: Parser = None):
        self.session = session
        self.parser = parser or Parser()
        # history as list of dicts: {"time":..., "command":..., "raw":..., "parsed":..., "error":bool}
        self.history = []
        session.add_listener(self._record)

    def send(self, verb: str, *args, follow_up=None):
        text = format_command(verb, *args)
        self.session.enqueue(text, follow_up or FOLLOW_UP_HANDLERS.get(verb.upper()))
        return text

    def raw(self, line: str):
        """Queues a command line typed by a user, e.g. 'cwd "My Files"'."""
        parts = shlex.split(line.strip())
        if not parts:
            raise FTPCommandError("Empty command")
        return self.send(parts[0], *parts[1:])

    # Comandos sin parámetros
    def abor(self):
        return self.send("ABOR")

    def pwd(self):
        return self.send("PWD")

    def cdup(self):
        return self.send("CDUP")

    def noop(self):
        return self.send("NOOP")

    def quit(self):
        return self.send("QUIT")

    def syst(self):
        return self.send("SYST")

    # Comandos con parámetros
    def cwd(self, *args):
        return self.send("CWD", *args)

    def dele(self, *args):
        return self.send("DELE", *args)

    def list(self, *args):
        return self.send("LIST", *args)

    def mdtm(self, *args):
        return self.send("MDTM", *args)

    def mkd(self, *args):
        return self.send("MKD", *args)

    def mode(self, *args):
        return self.send("MODE", *args)

    def nlst(self, *args):
        return self.send("NLST", *args)

    def pass_(self, *args):
        return self.send("PASS", *args)

    def retr(self, *args):
        return self.send("RETR", *args)

    def rmd(self, *args):
        return self.send("RMD", *args)

    def rnfr(self, *args):
        return self.send("RNFR", *args)

    def rnto(self, *args):
        return self.send("RNTO", *args)

    def site(self, *args):
        return self.send("SITE", *args)

    def stat(self, *args):
        return self.send("STAT", *args)

    def stor(self, *args):
        return self.send("STOR", *args)

    def user(self, *args):
        return self.send("USER", *args)

    # Operaciones compuestas
    def set_binary(self, enabled: bool):
        """http://cr.yp.to/ftp/type.html"""
        return self.send("TYPE", "I" if enabled else "A")

    type = set_binary

    def pasv(self):
        return self.send("PASV", follow_up=pasv_handler())

    def download(self, path: str = None):
        """
        TYPE I, then PASV when a path is given. A 227 reply opens the data
        channel and RETR path follows on the control channel.
        """
        self.set_binary(True)
        if path:
            self.send("PASV", follow_up=pasv_handler(path))

    get = download

    # Helpers for UI
    def _record(self, command, response):
        parsed = self.parser.parse_reply(response.text)
        self.history.append({
            "time": datetime.now(timezone.utc),
            "command": mask_command(command or ""),
            "raw": response.text,
            "parsed": parsed,
            "error": parsed.is_error
        })

    def get_history(self):
        """Return a copy of the history list."""
        return list(self.history)

    def clear_history(self):
        self.history.clear()
