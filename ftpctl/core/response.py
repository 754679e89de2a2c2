import logging
import re
from typing import List, Optional

logger = logging.getLogger(__name__)

RE_MULTILINE = re.compile(r"^(\d{3})-")
RE_RESPONSE = re.compile(r"^(\d{3}) ")


class Response:
    """
    One logical server reply, possibly spread across several lines.

    Fields:
        - entries (List[str]): buffered entries. A multiline block is a single
          entry whose lines are joined with '\\n'.
    """

    def __init__(self, entries: List[str]):
        self.entries = list(entries)

    @property
    def lines(self) -> List[str]:
        out = []
        for entry in self.entries:
            out.extend(entry.split("\n"))
        return out

    @property
    def last_line(self) -> str:
        """Closing line, the one carrying the authoritative reply code."""
        return self.lines[-1] if self.entries else ""

    @property
    def code(self) -> str:
        return self.last_line[:3]

    @property
    def text(self) -> str:
        return "\n".join(self.entries)

    def __len__(self):
        return len(self.entries)

    def __repr__(self):
        return f"Response(code={self.code}, entries={self.entries})"


class ResponseAccumulator:
    """
    Folds decoded control-channel lines into complete replies.

    States:
        - SingleLine: multiline_code is None.
        - InMultiline(code): multiline_code holds the 3-digit code of the
          opener. Every line is appended to the last entry until a line
          starts with that code followed by a space.

    feed(line) returns the completed Response, or None while more lines are
    needed. Lines that are neither openers nor terminal lines are buffered
    but never complete a reply.
    """

    def __init__(self):
        self.buffer: List[str] = []
        self.multiline_code: Optional[str] = None

    @property
    def in_multiline(self) -> bool:
        return self.multiline_code is not None

    def feed(self, line: str) -> Optional[Response]:
        if self.multiline_code is not None:
            if self.buffer:
                self.buffer[-1] += "\n" + line
            else:
                self.buffer.append(line)

            close = RE_RESPONSE.match(line)
            if not close or close.group(1) != self.multiline_code:
                return None
            self.multiline_code = None
        else:
            self.buffer.append(line)

            opener = RE_MULTILINE.match(line)
            if opener:
                self.multiline_code = opener.group(1)
                return None

            if not RE_RESPONSE.match(line):
                logger.debug("Buffered line without reply code: %r", line)
                return None

        return self._complete()

    def reset(self):
        self.buffer = []
        self.multiline_code = None

    def _complete(self) -> Response:
        response = Response(self.buffer)
        self.reset()
        return response
