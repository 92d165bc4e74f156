"""
Share link builder - packs a whole contract into a single URL parameter

    state -> compact record -> JSON text -> zlib -> urlsafe base64 -> ?data=...

No server round trip is involved; the receiving page decodes the parameter.
"""

import base64
import binascii
import json
import logging
import zlib
from typing import Optional
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from ...config import SHARE_BASE_URL, SHARE_MAX_BYTES
from ...errors import InvalidShareLink
from ..contracts.state import ContractState
from .codec import CompactRecord, decode, encode

logger = logging.getLogger(__name__)

SHARE_PARAM = "data"

MODE_AUTHORING = "authoring"
MODE_RECEIVED = "received"


def serialize_record(record: CompactRecord) -> str:
    return json.dumps(record, ensure_ascii=False, separators=(",", ":"))


def compress_text(text: str) -> str:
    """zlib + URL-safe base64 without padding"""
    try:
        compressed = zlib.compress(text.encode("utf-8"), 9)
    except (zlib.error, UnicodeEncodeError) as e:
        raise InvalidShareLink(f"Failed to compress share payload: {e}") from e
    return base64.urlsafe_b64encode(compressed).decode("ascii").rstrip("=")


def decompress_text(payload: str) -> str:
    padding = 4 - len(payload) % 4
    payload_padded = payload + ("=" * padding if padding != 4 else "")
    try:
        compressed = base64.urlsafe_b64decode(payload_padded.encode("ascii"))
        decompressor = zlib.decompressobj()
        data = decompressor.decompress(compressed, SHARE_MAX_BYTES)
        if decompressor.unconsumed_tail:
            raise InvalidShareLink(f"Share payload expands beyond {SHARE_MAX_BYTES} bytes")
        if not decompressor.eof:
            raise InvalidShareLink("Share payload is truncated")
        return data.decode("utf-8")
    except (binascii.Error, zlib.error, UnicodeError, ValueError) as e:
        raise InvalidShareLink(f"Failed to decompress share payload: {e}") from e


def build_link(state: ContractState, base_url: Optional[str] = None) -> str:
    """Append the compressed compact record to base_url as ?data=..."""
    base_url = base_url or SHARE_BASE_URL
    payload = compress_text(serialize_record(encode(state)))

    parts = urlparse(base_url)
    query = [
        (key, value)
        for key, values in parse_qs(parts.query, keep_blank_values=True).items()
        if key != SHARE_PARAM
        for value in values
    ]
    query.append((SHARE_PARAM, payload))

    url = urlunparse(parts._replace(query=urlencode(query)))
    logger.info(f"🔗 Built share link ({len(url)} chars, payload {len(payload)} chars)")
    return url


def extract_payload(url: str) -> Optional[str]:
    values = parse_qs(urlparse(url).query, keep_blank_values=True).get(SHARE_PARAM)
    if not values:
        return None
    return values[0]


def share_mode(url: str) -> str:
    """'received' when the URL carries a contract, otherwise 'authoring'"""
    return MODE_RECEIVED if extract_payload(url) is not None else MODE_AUTHORING


def parse_link(url: str) -> Optional[ContractState]:
    """Decode the contract carried by url; None when there is no data parameter"""
    payload = extract_payload(url)
    if payload is None:
        return None
    if not payload:
        raise InvalidShareLink("Share link data parameter is empty")

    text = decompress_text(payload)
    state = decode(text)
    logger.info("📥 Opened shared contract")
    return state
