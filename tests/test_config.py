from __future__ import annotations

from ipaddress import IPv4Address

import pytest

from movie_feed.core.client_ip import ClientIpSource
from movie_feed.core.config import ConfigError, load_settings


def test_defaults(monkeypatch):
    monkeypatch.setenv("MOVIE_FEED_TMDB_TOKEN", "secret")

    settings = load_settings()

    assert settings.token == "secret"
    assert str(settings.api.listen_address) == "127.0.0.1"
    assert settings.api.listen_port == 8080
    assert settings.api.client_ip_source is ClientIpSource.CONNECT_INFO
    assert settings.log_level == "INFO"
    assert settings.cache_ttl == 3600
    assert "secret" not in repr(settings)


def test_dotted_variables(monkeypatch):
    monkeypatch.setenv("MOVIE_FEED.TMDB_TOKEN", "dotted")
    monkeypatch.setenv("MOVIE_FEED.API.LISTEN_ADDRESS", "0.0.0.0")
    monkeypatch.setenv("MOVIE_FEED.API.LISTEN_PORT", "9000")

    settings = load_settings()

    assert settings.token == "dotted"
    assert settings.api.listen_address == IPv4Address("0.0.0.0")
    assert settings.api.listen_port == 9000


def test_unknown_variables_are_ignored(monkeypatch):
    monkeypatch.setenv("MOVIE_FEED_TMDB_TOKEN", "secret")
    monkeypatch.setenv("MOVIE_FEED.SOMETHING_ELSE", "x")
    monkeypatch.setenv("MOVIE_FEED.API.UNUSED", "y")
    monkeypatch.setenv("MOVIE_FEED.API.LISTEN_PORT", "9001")
    monkeypatch.setenv("MOVIE_FEED_OTHER_THING", "z")

    settings = load_settings()

    assert settings.token == "secret"
    assert settings.api.listen_port == 9001


def test_underscore_nested_variables(monkeypatch):
    monkeypatch.setenv("MOVIE_FEED_TMDB_TOKEN", "secret")
    monkeypatch.setenv("MOVIE_FEED_API__LISTEN_PORT", "8181")
    monkeypatch.setenv("MOVIE_FEED_CLIENT_IP_SOURCE", "RightmostXForwardedFor")
    monkeypatch.setenv("MOVIE_FEED_LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.api.listen_port == 8181
    assert settings.api.client_ip_source is ClientIpSource.RIGHTMOST_X_FORWARDED_FOR
    assert settings.log_level == "DEBUG"


def test_token_file(monkeypatch, tmp_path):
    token_file = tmp_path / "token"
    token_file.write_text("from-file\n", encoding="utf-8")
    monkeypatch.setenv("MOVIE_FEED.TMDB_TOKEN_FILE", str(token_file))

    assert load_settings().token == "from-file"


def test_missing_token(monkeypatch):
    with pytest.raises(ConfigError, match="TMDB_TOKEN"):
        load_settings()


def test_token_and_token_file_are_exclusive(monkeypatch, tmp_path):
    token_file = tmp_path / "token"
    token_file.write_text("from-file", encoding="utf-8")
    monkeypatch.setenv("MOVIE_FEED_TMDB_TOKEN", "secret")
    monkeypatch.setenv("MOVIE_FEED_TMDB_TOKEN_FILE", str(token_file))

    with pytest.raises(ConfigError, match="only one of"):
        load_settings()


@pytest.mark.parametrize("content", [None, "   \n"])
def test_unusable_token_file(monkeypatch, tmp_path, content):
    token_file = tmp_path / "token"
    if content is not None:
        token_file.write_text(content, encoding="utf-8")
    monkeypatch.setenv("MOVIE_FEED_TMDB_TOKEN_FILE", str(token_file))

    with pytest.raises(ConfigError, match="token file"):
        load_settings()


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("MOVIE_FEED_API__LISTEN_PORT", "70000"),
        ("MOVIE_FEED.API.LISTEN_ADDRESS", "localhost"),
        ("MOVIE_FEED_CLIENT_IP_SOURCE", "Carrier Pigeon"),
        ("MOVIE_FEED_LOG_LEVEL", "chatty"),
    ],
)
def test_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv("MOVIE_FEED_TMDB_TOKEN", "secret")
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigError):
        load_settings()


def test_errors_do_not_leak_token(monkeypatch):
    monkeypatch.setenv("MOVIE_FEED.TMDB_TOKEN", "super-secret")
    monkeypatch.setenv("MOVIE_FEED_API__LISTEN_PORT", "not-a-port")

    with pytest.raises(ConfigError) as excinfo:
        load_settings()

    assert "super-secret" not in str(excinfo.value)
