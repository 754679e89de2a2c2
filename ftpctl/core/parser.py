import logging
import re
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

RE_PASV = re.compile(r"[-\d]+,[-\d]+,[-\d]+,[-\d]+,([-\d]+),([-\d]+)")

RE_LEADING_INT = re.compile(r"-?\d+")

REPLY_TYPES = {
    '1': 'preliminary',
    '2': 'success',
    '3': 'missing_info',
    '4': 'error',
    '5': 'error'
}


class Reply:
    def __init__(self, code: str, message: str, type: str):
        self.code = code
        self.message = message
        self.type = type

    @property
    def is_error(self) -> bool:
        return self.type in ("error", "unknown")

    def __repr__(self):
        return f"Reply(code={self.code}, type={self.type}, message={self.message!r})"


class Parser:
    def parse_reply(self, data: str) -> Reply:
        """Classifies a (possibly multiline) reply by its leading code."""
        data = data.strip()
        code = data[:3]

        if len(code) != 3 or not code.isdigit():
            logger.error(f"Invalid FTP response format: {data} (code={code})")
            return Reply("000", data, "unknown")

        # Strip the "NNN " / "NNN-" prefix from every line that carries it
        lines = []
        for line in data.split("\n"):
            if line[:3] == code and line[3:4] in (" ", "-"):
                line = line[4:]
            lines.append(line)
        message = "\n".join(lines)

        reply = Reply(code, message, REPLY_TYPES.get(code[0], 'unknown'))
        logger.debug(f"Parsed response: code={code}, type={reply.type}, message={message[:50]}")
        return reply

    def parse_pasv_port(self, message: str) -> Optional[int]:
        """Data port encoded in a 227 reply, or None when the address is absent."""
        match = RE_PASV.search(message)
        if not match:
            return None
        port = (_leading_int(match.group(1)) & 255) * 256 + (_leading_int(match.group(2)) & 255)
        logger.debug(f"PASV parsed port: {port}")
        return port

    def parse_pasv_address(self, message: str) -> Optional[Tuple[str, int]]:
        """(ip, port) announced by a 227 reply, or None."""
        match = re.search(r"(\d+),(\d+),(\d+),(\d+),(\d+),(\d+)", message)
        if not match:
            return None
        parts = [int(p) for p in match.groups()]
        ip = '.'.join(str(p) for p in parts[:4])
        port = ((parts[4] & 255) << 8) + (parts[5] & 255)
        return ip, port


def _leading_int(group: str) -> int:
    """Leading (optionally signed) digits of a PASV group; 0 when there are none."""
    match = RE_LEADING_INT.match(group)
    return int(match.group()) if match else 0
