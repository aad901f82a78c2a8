"""Tests for the share client: URL handling and end-to-end sharing."""

import pytest

from client.share import ShareClient, build_share_url, parse_share_url
from core.envelope import PASSWORD_ALPHABET, decrypt_text
from core.errors import (
    AuthenticationFailure,
    ExchangeError,
    InvalidRequest,
    RecordExpired,
    RecordNotFound,
)


class TestShareUrl:
    """build_share_url / parse_share_url"""

    def test_build(self) -> None:
        assert build_share_url("https://n.example.com/", "AbCdEfGhIjKl", "pw-_123") == (
            "https://n.example.com/AbCdEfGhIjKl~pw-_123"
        )

    def test_parse(self) -> None:
        assert parse_share_url("https://n.example.com/AbCdEfGhIjKl~pw-_123") == ("AbCdEfGhIjKl", "pw-_123")

    def test_password_with_reserved_characters(self) -> None:
        url = build_share_url("https://n.example.com", "AbCdEfGhIjKl", "a/b?c#d e~f")
        assert parse_share_url(url) == ("AbCdEfGhIjKl", "a/b?c#d e~f")

    @pytest.mark.parametrize(
        "url",
        ["https://n.example.com/AbCdEfGhIjKl", "https://n.example.com/~pw", "https://n.example.com/AbCd~", ""],
    )
    def test_parse_invalid(self, url) -> None:
        with pytest.raises(InvalidRequest):
            parse_share_url(url)


class TestShareClient:
    """ShareClient against the real app (via TestClient)."""

    @pytest.fixture
    def share(self, api):
        return ShareClient(http=api)

    def test_share_and_open(self, share) -> None:
        url = share.share("meet at noon", ttl=600)
        assert url.startswith("http://testserver/")

        text_id, password = parse_share_url(url)
        assert len(text_id) == 12
        assert len(password) == 16
        assert set(password) <= set(PASSWORD_ALPHABET)
        assert share.open(url) == "meet at noon"

    def test_server_never_sees_password(self, share, api) -> None:
        url = share.share("secret", password="hunter2hunter2")
        text_id, _ = parse_share_url(url)
        stored = api.get(f"/api/fetch/{text_id}").json()["data"]

        assert "hunter2" not in stored["cipher_text"]
        assert "secret" not in stored["cipher_text"]
        assert decrypt_text(stored["cipher_text"], stored["iv"], "hunter2hunter2") == "secret"

    def test_wrong_password(self, share) -> None:
        url = share.share("secret", password="right")
        text_id, _ = parse_share_url(url)
        with pytest.raises(AuthenticationFailure):
            share.open(build_share_url("http://testserver", text_id, "wrong"))

    def test_unknown_id(self, share) -> None:
        with pytest.raises(RecordNotFound):
            share.open("http://testserver/nonexistent0~pw")

    def test_expired(self, share, force_expire) -> None:
        url = share.share("short lived", ttl=1)
        text_id, _ = parse_share_url(url)
        force_expire(text_id)

        with pytest.raises(RecordExpired):
            share.open(url)
        with pytest.raises(RecordNotFound):
            share.open(url)

    def test_rejected_submit(self, share) -> None:
        with pytest.raises(ExchangeError) as info:
            share.share("x", ttl=-1)
        assert info.value.status == 400
