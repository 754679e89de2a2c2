import pytest

from ftpctl.config import ClientConfig


def test_defaults():
    config = ClientConfig("ftp.example.com")
    assert config.port == 21
    assert config.user == "anonymous"
    assert config.password == ""
    assert config.session_kwargs() == {"host": "ftp.example.com", "port": 21,
                                       "user": "anonymous", "password": ""}


def test_host_required():
    with pytest.raises(ValueError):
        ClientConfig("")


def test_port_range():
    with pytest.raises(ValueError):
        ClientConfig("h", port=70000)


def test_from_env(monkeypatch):
    monkeypatch.setenv("FTP_HOST", "env.example.com")
    monkeypatch.setenv("FTP_PORT", "2121")
    monkeypatch.setenv("FTP_USER", "bob")
    monkeypatch.setenv("FTP_PASS", "pw")
    monkeypatch.setenv("FTP_TIMEOUT", "3")
    config = ClientConfig.from_env()
    assert (config.host, config.port, config.user, config.password, config.timeout) == \
        ("env.example.com", 2121, "bob", "pw", 3.0)


def test_overrides_win_over_env(monkeypatch):
    monkeypatch.setenv("FTP_HOST", "env.example.com")
    monkeypatch.setenv("FTP_USER", "bob")
    config = ClientConfig.from_env(host="cli.example.com", user=None, port=990)
    assert config.host == "cli.example.com"
    assert config.user == "bob"
    assert config.port == 990


def test_from_env_without_host(monkeypatch):
    monkeypatch.delenv("FTP_HOST", raising=False)
    with pytest.raises(ValueError):
        ClientConfig.from_env()
