"""
Bytes to text and back.

Rules:
- Try UTF-8 first; a leading BOM selects utf-8-sig so it survives the rewrite.
- Otherwise detect best-effort via charset-normalizer.
- NUL bytes near the start mean binary content.
- If nothing decodes cleanly, refuse. Text decoded with replacement
  characters must never be written back over the original.
"""

from __future__ import annotations

import logging
from typing import Tuple

from charset_normalizer import from_bytes

logger = logging.getLogger(__name__)

UTF8_BOM = b"\xef\xbb\xbf"
BINARY_SNIFF = 2048


class UndecodableError(ValueError):
    """Raised when content cannot be read as text in any detected encoding."""


def decode_text(raw: bytes) -> Tuple[str, str]:
    """Return (text, encoding_used). Newlines are left exactly as found."""
    if b"\x00" in raw[:BINARY_SNIFF]:
        raise UndecodableError("binary content")

    decode_used = "utf-8-sig" if raw.startswith(UTF8_BOM) else "utf-8"
    try:
        return raw.decode(decode_used), decode_used
    except UnicodeDecodeError:
        pass

    match = from_bytes(raw).best()
    if match is None:
        raise UndecodableError("no text encoding detected")

    detected = match.encoding
    try:
        text = raw.decode(detected)
    except (UnicodeDecodeError, LookupError) as e:
        raise UndecodableError(f"decode as {detected} failed: {e}") from e

    logger.debug("detected encoding %s", detected)
    return text, detected


def encode_text(text: str, encoding: str) -> bytes:
    return text.encode(encoding)
