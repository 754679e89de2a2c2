from ftpctl.ui.levenstein import _levenstein, get_suggestion


def test_distance():
    assert _levenstein("", "abc") == 3
    assert _levenstein("LIST", "LIST") == 0
    assert _levenstein("LSIT", "LIST") == 2
    assert _levenstein("kitten", "sitting") == 3


def test_suggestion():
    assert get_suggestion("lst") == "LIST"
    assert get_suggestion("pasw") in ("PASS", "PASV")
    assert get_suggestion("typ") == "TYPE"
    assert get_suggestion("completelyunrelated") == ""
