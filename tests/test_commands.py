import pytest

from conftest import feed
from ftpctl.core.commands import COMMANDS, format_command, mask_command
from ftpctl.core.errors import FTPCommandError

NO_ARGS = ["ABOR", "PWD", "CDUP", "NOOP", "QUIT", "SYST"]
WITH_ARGS = ["CWD", "DELE", "LIST", "MDTM", "MKD", "MODE", "NLST", "PASS", "RETR", "RMD",
             "RNFR", "RNTO", "SITE", "STAT", "STOR", "USER"]


def test_verb_table_matches_command_surface():
    assert sorted(v for v, takes_args in COMMANDS.items() if not takes_args) == sorted(NO_ARGS)
    assert sorted(v for v, takes_args in COMMANDS.items() if takes_args) == sorted(WITH_ARGS)


def test_format_command():
    assert format_command("pwd") == "PWD"
    assert format_command("SITE", "CHMOD", 644, "file.txt") == "SITE CHMOD 644 file.txt"
    assert format_command("LIST") == "LIST"


def test_format_rejects_unknown_verbs_and_extra_args():
    with pytest.raises(FTPCommandError):
        format_command("XYZZY")
    with pytest.raises(FTPCommandError):
        format_command("PWD", "/tmp")


@pytest.mark.parametrize("verb", NO_ARGS)
def test_no_argument_methods(handler, transport, verb):
    getattr(handler, verb.lower())()
    assert transport.sent == [f"{verb}\r\n"]


@pytest.mark.parametrize("verb", WITH_ARGS)
def test_argument_methods(handler, transport, verb):
    method = getattr(handler, "pass_" if verb == "PASS" else verb.lower())
    method("a", "b")
    assert transport.sent == [f"{verb} a b\r\n"]


def test_set_binary(handler, logged_in, transport):
    handler.set_binary(False)
    handler.type(True)
    feed(logged_in, "200 ok")
    assert transport.sent == ["TYPE A\r\n", "TYPE I\r\n"]


def test_raw_command_line_respects_quotes(handler, transport):
    handler.raw('cwd "My Files"')
    assert transport.sent == ["CWD My Files\r\n"]


def test_raw_rejects_empty_and_unknown(handler):
    with pytest.raises(FTPCommandError):
        handler.raw("   ")
    with pytest.raises(FTPCommandError):
        handler.raw("lsit")
    assert not handler.session.commands


def test_history_records_each_exchange(handler, logged_in):
    handler.pwd()
    handler.cwd("missing")
    feed(logged_in, '257 "/" is current directory', "550 No such directory")
    history = handler.get_history()
    assert [h["command"] for h in history] == ["PWD", "CWD missing"]
    assert history[0]["parsed"].code == "257"
    assert not history[0]["error"]
    assert history[1]["error"]


def test_history_masks_password(session, transport):
    from ftpctl.core.commands import ClientCommandHandler

    handler = ClientCommandHandler(session)
    feed(session, "220 Welcome", "331 Password required", "230 Logged in")
    assert [h["command"] for h in handler.get_history()] == ["CONNECT", "USER alice", "PASS ****"]


def test_clear_history(handler, logged_in):
    handler.noop()
    feed(logged_in, "200 ok")
    history = handler.get_history()
    handler.clear_history()
    assert handler.get_history() == []
    assert len(history) == 1


def test_mask_command():
    assert mask_command("pass hunter2") == "PASS ****"
    assert mask_command("PASV") == "PASV"
