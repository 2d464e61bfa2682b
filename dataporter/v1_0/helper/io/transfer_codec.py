import base64
import binascii
import string

DATA_URL_PREFIX = "data:application/octet-stream;base64,"

_B64_ALPHABET = frozenset(string.ascii_letters + string.digits + "+/")


def to_transfer_payload(data: bytes) -> str:
    """Binary file content -> base64 text for text-only transports."""
    return base64.b64encode(bytes(data or b"")).decode("ascii")


def from_transfer_payload(payload: str) -> bytes:
    """
    Exact inverse of `to_transfer_payload`.

    Best effort on malformed text: a `data:` URL prefix is accepted,
    characters outside the base64 alphabet are ignored and missing padding is
    restored. Never raises.
    """
    if not payload:
        return b""
    text = payload.strip()
    if text.startswith("data:") and "," in text:
        text = text.split(",", 1)[1]

    body = "".join(ch for ch in text if ch in _B64_ALPHABET)
    # a lone trailing sextet cannot encode a byte
    if len(body) % 4 == 1:
        body = body[:-1]
    body += "=" * (-len(body) % 4)
    try:
        return base64.b64decode(body)
    except (binascii.Error, ValueError):
        return b""


def to_data_url(payload: str) -> str:
    return DATA_URL_PREFIX + payload


def decode_text(data: bytes) -> str:
    """Raw text of an uploaded file for preview (UTF-8, BOM stripped)."""
    return (data or b"").decode("utf-8-sig", errors="replace")
