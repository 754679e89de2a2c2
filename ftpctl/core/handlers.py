"""
Continuations for multi-step exchanges on the control channel.

Each handler receives (session, line) where line is the closing line of the
reply that just completed. A handler keeps control by arming another
continuation with session.arm(); when it returns without arming one, the
session goes back to its command queue.

Login:  AWAIT_GREETING -> AWAIT_USER_ACK -> AWAIT_PASS_ACK -> LOGGED_IN
PASV:   227 opens the data channel; anything else is ignored.
"""

import logging
from enum import Enum
from functools import partial
from typing import Optional

from ftpctl.core.errors import FTPLoginError
from ftpctl.core.parser import Parser

logger = logging.getLogger(__name__)

_parser = Parser()


class LoginState(Enum):
    AWAIT_GREETING = "await_greeting"
    AWAIT_USER_ACK = "await_user_ack"
    AWAIT_PASS_ACK = "await_pass_ack"
    LOGGED_IN = "logged_in"


def reply_code(line: str) -> str:
    return line[:3]


# ----------------- login -----------------
# state -> {reply code: next state}
LOGIN_TRANSITIONS = {
    LoginState.AWAIT_GREETING: {"220": LoginState.AWAIT_USER_ACK},
    LoginState.AWAIT_USER_ACK: {"230": LoginState.LOGGED_IN,
                                "331": LoginState.AWAIT_PASS_ACK,
                                "332": LoginState.AWAIT_PASS_ACK},
    LoginState.AWAIT_PASS_ACK: {"230": LoginState.LOGGED_IN},
}

LOGIN_ERRORS = {
    LoginState.AWAIT_GREETING: "ftp login failed",
    LoginState.AWAIT_USER_ACK: "ftp login failed: user name not accepted",
    LoginState.AWAIT_PASS_ACK: "ftp login failed: password not accepted",
}


def handle_login(session, line: str):
    """Advances session.login_state by one reply; any unexpected code is fatal."""
    state = session.login_state
    next_state = LOGIN_TRANSITIONS.get(state, {}).get(reply_code(line))
    if next_state is None:
        raise FTPLoginError(LOGIN_ERRORS.get(state, "ftp login failed"))

    session.login_state = next_state
    if next_state is LoginState.AWAIT_USER_ACK:
        session.push(f"USER {session.user}")
        session.arm(handle_login)
    elif next_state is LoginState.AWAIT_PASS_ACK:
        session.push(f"PASS {session.password}")
        session.arm(handle_login)
    else:
        logger.info("✓ Logged in to %s:%s as %s", session.host, session.port, session.user)


# ----------------- PASV -----------------
def handle_pasv(session, line: str, path: Optional[str] = None):
    """
    227 -> open the data channel on session.host and the announced port.
    Failures are soft: no data channel, no exception.
    With a path, the continuation goes on with RETR over that channel.
    """
    if reply_code(line) != "227":
        logger.warning("PASV failed: %s", line)
        return

    port = _parser.parse_pasv_port(line)
    if not port:
        logger.warning("PASV reply without address: %s", line)
        return

    announced = _parser.parse_pasv_address(line)
    if announced and announced[0] != session.host:
        logger.debug("PASV announced %s, connecting to %s instead", announced[0], session.host)

    session.data_channel = session.data_channel_opener(session.host, port)
    logger.info("Data channel requested on %s:%d", session.host, port)

    if path:
        session.push(f"RETR {path}")
        session.arm(handle_transfer)


def pasv_handler(path: Optional[str] = None):
    """Continuation for a PASV reply, optionally followed by RETR path."""
    if path is None:
        return handle_pasv
    return partial(handle_pasv, path=path)


def handle_transfer(session, line: str):
    """RETR progress: 125/150 mark the start, the next reply ends it."""
    code = reply_code(line)
    if code in ("125", "150"):
        session.arm(handle_transfer)
        return
    if code[:1] != "2":
        logger.warning("Transfer failed: %s", line)
    else:
        logger.info("Transfer complete: %s", line)


# Continuations armed when the verb is sent from the command surface
FOLLOW_UP_HANDLERS = {
    "PASV": handle_pasv,
}

__all__ = [
    "LoginState",
    "FOLLOW_UP_HANDLERS",
    "LOGIN_TRANSITIONS",
    "handle_login",
    "handle_pasv",
    "handle_transfer",
    "pasv_handler",
]
