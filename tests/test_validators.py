"""Tests for code parsing and URL validation."""

import socket

import pytest

from shorturl.core import validators
from shorturl.core.exceptions import InvalidCodeError, InvalidURLError
from shorturl.core.validators import MAX_CODE, parse_code, split_url, validate_url, validate_url_length


class TestParseCode:

    def test_valid_codes(self):
        assert parse_code("1") == 1
        assert parse_code("42") == 42
        assert parse_code(" 42\n") == 42
        assert parse_code("0042") == 42
        assert parse_code(17) == 17

    def test_invalid_codes(self):
        invalid_codes = ["", "   ", "abc", "12abc", "1.0", "-3", "+3", "0", "²", "1" * 40, 0, -1, True]
        for raw_code in invalid_codes:
            with pytest.raises(InvalidCodeError):
                parse_code(raw_code)

    def test_code_must_fit_the_code_column(self):
        assert parse_code(MAX_CODE) == 2 ** 63 - 1
        for raw_code in [MAX_CODE + 1, 2 ** 64]:
            with pytest.raises(InvalidCodeError):
                parse_code(raw_code)

    def test_error_keeps_the_raw_input(self):
        with pytest.raises(InvalidCodeError) as exc_info:
            parse_code("x1")
        assert exc_info.value.raw_code == "x1"


class TestSplitURL:

    def test_protocol_and_domain(self):
        assert split_url("https://example.com/path") == ("https://", "example.com")
        assert split_url("http://www.example.com") == ("http://", "example.com")
        assert split_url("HTTPS://Example.com:8080/x") == ("HTTPS://", "Example.com")

    def test_missing_protocol(self):
        protocol, domain = split_url("example.com/path")
        assert protocol is None
        assert domain == "example.com"

    def test_url_length(self):
        assert validate_url_length("https://example.com")
        assert not validate_url_length("")
        assert not validate_url_length("https://example.com/" + "a" * 3000)


class TestValidateURL:

    @pytest.mark.asyncio
    async def test_valid_url_without_dns(self):
        assert await validate_url(" https://example.com/a ", verify_domain=False) == "https://example.com/a"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["example.com", "ftp://example.com", "www.example.com/https://x.com"])
    async def test_missing_protocol(self, url):
        with pytest.raises(InvalidURLError) as exc_info:
            await validate_url(url, verify_domain=False)
        assert exc_info.value.reason == "invalid URL; must specify protocol."

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", [None, "", "   "])
    async def test_empty_url(self, url):
        with pytest.raises(InvalidURLError):
            await validate_url(url, verify_domain=False)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["https://exa mple.com", "https://exa<mple.com/"])
    async def test_malformed_url(self, url):
        with pytest.raises(InvalidURLError) as exc_info:
            await validate_url(url, verify_domain=False)
        assert exc_info.value.reason == "invalid URL; malformed address."

    @pytest.mark.asyncio
    async def test_too_long_url(self):
        with pytest.raises(InvalidURLError):
            await validate_url("https://example.com/" + "a" * 100, max_length=50, verify_domain=False)

    @pytest.mark.asyncio
    async def test_unresolvable_domain(self, monkeypatch):
        async def never_resolves(domain):
            return False

        monkeypatch.setattr(validators, "domain_resolves", never_resolves)

        with pytest.raises(InvalidURLError) as exc_info:
            await validate_url("https://no-such-host.example/page")

        assert exc_info.value.reason == "invalid URL; domain no-such-host.example not found"


class TestDomainResolves:

    @pytest.mark.asyncio
    async def test_lookup_failure(self, monkeypatch):
        def failing_getaddrinfo(*args, **kwargs):
            raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")

        monkeypatch.setattr(socket, "getaddrinfo", failing_getaddrinfo)

        assert await validators.domain_resolves("no-such-host.example") is False

    @pytest.mark.asyncio
    async def test_lookup_success(self, monkeypatch):
        def fake_getaddrinfo(*args, **kwargs):
            return [(socket.AF_INET, socket.SOCK_STREAM, 6, "", ("93.184.216.34", 0))]

        monkeypatch.setattr(socket, "getaddrinfo", fake_getaddrinfo)

        assert await validators.domain_resolves("example.com") is True
