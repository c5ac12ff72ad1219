"""Signature verification for version 3 webhooks."""

from __future__ import annotations

import binascii
import hashlib
import hmac
from collections.abc import Mapping
from typing import IO

SIGNATURE_PREFIX = "v1="
SIGNATURE_HEADER = "X-PagerDuty-Signature"
BODY_READ_LIMIT = 2 * 1024 * 1024


class WebhookError(Exception):
    """Base class for webhook verification failures."""

    default_message = "webhook verification failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class NoValidSignaturesError(WebhookError):
    """No signature matched; answer with HTTP 403."""

    default_message = "invalid webhook signature"


class MalformedHeaderError(WebhookError):
    """The signature header is missing or unusable; answer with HTTP 400."""

    default_message = "X-PagerDuty-Signature header is either missing or malformed"


class MalformedBodyError(WebhookError):
    """The body is empty; answer with HTTP 400."""

    default_message = "HTTP request body is either empty or malformed"


def _header_value(headers: Mapping[str, str], name: str) -> str:
    if name in headers:
        return headers[name] or ""
    folded = name.casefold()
    for key, value in headers.items():
        if key.casefold() == folded:
            return value or ""
    return ""


def _read_body(body: bytes | str | IO[bytes]) -> bytes:
    if isinstance(body, str):
        body = body.encode()
    elif hasattr(body, "read"):
        body = body.read(BODY_READ_LIMIT)
    return bytes(body[:BODY_READ_LIMIT])


def calculate_signature(payload: bytes, secret: str) -> bytes:
    """Return the HMAC-SHA256 digest of ``payload`` keyed with ``secret``."""
    return hmac.new(secret.encode(), payload, hashlib.sha256).digest()


def extract_payload_signatures(header: str) -> list[bytes]:
    """Decode the ``v1=`` signatures of a signature header, skipping the rest."""
    signatures = []
    for part in header.split(","):
        if not part.startswith(SIGNATURE_PREFIX):
            continue
        try:
            signatures.append(binascii.unhexlify(part[len(SIGNATURE_PREFIX):]))
        except (binascii.Error, ValueError):
            continue
    return signatures


def verify_signature(
    headers: Mapping[str, str],
    body: bytes | str | IO[bytes],
    secret: str,
) -> bytes:
    """Check a webhook's signature and return the body that was checked.

    At most 2 MiB of the body are read. Raises MalformedHeaderError,
    MalformedBodyError or NoValidSignaturesError.
    """
    header = _header_value(headers, SIGNATURE_HEADER)
    if not header:
        raise MalformedHeaderError()

    payload = _read_body(body)
    if not payload:
        raise MalformedBodyError()

    signatures = extract_payload_signatures(header)
    if not signatures:
        raise MalformedHeaderError()

    expected = calculate_signature(payload, secret)
    if any(hmac.compare_digest(expected, signature) for signature in signatures):
        return payload
    raise NoValidSignaturesError()