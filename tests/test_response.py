from ftpctl.core.response import Response, ResponseAccumulator


def test_single_line_reply_completes_immediately():
    acc = ResponseAccumulator()
    response = acc.feed("230 Logged in")
    assert response is not None
    assert response.entries == ["230 Logged in"]
    assert response.code == "230"
    assert acc.buffer == []


def test_multiline_reply_is_one_response():
    acc = ResponseAccumulator()
    assert acc.feed("211-Extensions supported") is None
    assert acc.in_multiline
    response = acc.feed("211 END")
    assert response.entries == ["211-Extensions supported\n211 END"]
    assert response.lines == ["211-Extensions supported", "211 END"]
    assert response.last_line == "211 END"
    assert not acc.in_multiline
    assert acc.buffer == []


def test_multiline_body_lines_are_not_new_replies():
    acc = ResponseAccumulator()
    assert acc.feed("211-Features:") is None
    assert acc.feed(" MDTM") is None
    assert acc.feed("200 looks like a reply but is body text") is None
    response = acc.feed("211 End")
    assert len(response) == 1
    assert response.lines[2] == "200 looks like a reply but is body text"


def test_mismatched_closing_code_keeps_buffering():
    acc = ResponseAccumulator()
    acc.feed("211-Extensions supported")
    assert acc.feed("220 not the end") is None
    assert acc.multiline_code == "211"
    response = acc.feed("211 END")
    assert response.lines == ["211-Extensions supported", "220 not the end", "211 END"]


def test_dash_after_code_in_multiline_does_not_close():
    acc = ResponseAccumulator()
    acc.feed("230-Welcome")
    assert acc.feed("230-More welcome") is None
    assert acc.feed("230 Logged in").code == "230"


def test_malformed_line_stalls_until_terminal_line():
    acc = ResponseAccumulator()
    assert acc.feed("garbage without code") is None
    assert acc.feed("12 short") is None
    response = acc.feed("200 OK")
    assert response.entries == ["garbage without code", "12 short", "200 OK"]
    assert response.last_line == "200 OK"


def test_code_without_space_is_not_terminal():
    acc = ResponseAccumulator()
    assert acc.feed("200") is None


def test_reset_clears_partial_state():
    acc = ResponseAccumulator()
    acc.feed("211-Extensions")
    acc.reset()
    assert acc.buffer == []
    assert acc.multiline_code is None
    assert acc.feed("200 OK").entries == ["200 OK"]


def test_empty_response_has_no_code():
    response = Response([])
    assert response.last_line == ""
    assert response.code == ""
