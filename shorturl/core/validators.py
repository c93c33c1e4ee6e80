"""
Input Validators and Sanitizers

This module validates the two untrusted inputs the service receives:
- Short codes from the URL path (strings that must become positive integers)
- Long URLs from the request body (protocol and domain checks)

Domain resolution is best-effort: it only tells us whether DNS knows
the host right now.
"""

import asyncio
import logging
import re
import socket
from typing import Optional, Tuple, Union

from pydantic import HttpUrl, TypeAdapter, ValidationError

from shorturl.core.exceptions import InvalidCodeError, InvalidURLError

logger = logging.getLogger(__name__)

# Optional protocol, optional "www.", then the host
URL_PATTERN = re.compile(r"(https?://)?(www\.)?([\w.\-]+)/*", re.IGNORECASE)

HTTP_URL_ADAPTER = TypeAdapter(HttpUrl)

MAX_CODE_DIGITS = 18

# Codes are stored in a signed 64-bit INTEGER column
MAX_CODE = 2 ** 63 - 1


def parse_code(raw_code: Union[int, str]) -> int:
    """
    Normalize a short code to its integer form.

    Args:
        raw_code: Code as delivered by the caller (path parameter or int)

    Returns:
        The code as a positive integer that fits the code column

    Raises:
        InvalidCodeError: If the code is not a positive decimal integer
            or is larger than MAX_CODE
    """
    if isinstance(raw_code, bool):
        raise InvalidCodeError(str(raw_code))

    if isinstance(raw_code, int):
        if raw_code < 1 or raw_code > MAX_CODE:
            raise InvalidCodeError(str(raw_code))
        return raw_code

    if not isinstance(raw_code, str):
        raise InvalidCodeError(repr(raw_code))

    candidate = raw_code.strip()

    # str.isdigit() accepts unicode digits like "²"
    if not candidate or len(candidate) > MAX_CODE_DIGITS or not re.fullmatch(r"[0-9]+", candidate):
        raise InvalidCodeError(raw_code)

    code = int(candidate)
    if code < 1:
        raise InvalidCodeError(raw_code)
    return code


def validate_url_length(url: str, max_length: int = 2048) -> bool:
    """
    Validate URL length to prevent DoS attacks.

    Args:
        url: The URL to validate
        max_length: Maximum allowed length (default: 2048 per RFC 7230)

    Returns:
        True if URL length is valid, False otherwise
    """
    return bool(url) and len(url) <= max_length


def split_url(url: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Extract protocol and domain from a URL.

    Returns:
        (protocol, domain) where either may be None. The protocol keeps its
        trailing "://"; a leading "www." is not part of the domain.
    """
    match = URL_PATTERN.search(url or "")
    if not match:
        return None, None
    return match.group(1), match.group(3)


async def domain_resolves(domain: str) -> bool:
    """Return True if DNS has an address for ``domain``."""
    loop = asyncio.get_running_loop()
    try:
        infos = await loop.getaddrinfo(domain, None)
    except (socket.gaierror, UnicodeError, OSError) as e:
        logger.info(f"Domain lookup failed for {domain}: {e}")
        return False
    if infos:
        logger.debug(f"Domain {domain} resolved to {infos[0][4][0]}")
    return bool(infos)


async def validate_url(url: Optional[str], max_length: int = 2048, verify_domain: bool = True) -> str:
    """
    Validate a URL submitted for shortening.

    Args:
        url: The submitted URL
        max_length: Maximum accepted length
        verify_domain: Whether to check that the domain resolves

    Returns:
        The URL, stripped of surrounding whitespace

    Raises:
        InvalidURLError: With a user-facing reason
    """
    url = (url or "").strip()
    if not url:
        raise InvalidURLError(url, reason="invalid URL; no URL given.")

    if not validate_url_length(url, max_length):
        raise InvalidURLError(url, reason=f"invalid URL; longer than {max_length} characters.")

    protocol, domain = split_url(url)
    logger.debug(f"Protocol: {protocol}; Domain to check: {domain}")

    # The protocol must start the URL, not appear somewhere inside it
    if protocol is None or not url.lower().startswith(protocol.lower()):
        raise InvalidURLError(url, reason="invalid URL; must specify protocol.")

    if not domain:
        raise InvalidURLError(url, reason="invalid URL; missing domain.")

    try:
        HTTP_URL_ADAPTER.validate_python(url)
    except ValidationError as e:
        logger.debug(f"Rejected malformed URL {url!r}: {e.errors()[0]['msg']}")
        raise InvalidURLError(url, reason="invalid URL; malformed address.")

    if verify_domain and not await domain_resolves(domain):
        raise InvalidURLError(url, reason=f"invalid URL; domain {domain} not found")

    return url
