"""
Serialization helpers for the two on-disk value formats.

Transaction bodies are stored as raw deflate streams (no zlib header) at
maximum compression. The hash-state list is stored as a JSON array of
{"Hash": ..., "Confirmed": ...} objects.
"""

import json
import zlib
from typing import Iterable, List, Optional

from .errors import CorruptDataError
from .transaction import TrackedHash

DEFLATE_LEVEL = zlib.Z_BEST_COMPRESSION
RAW_DEFLATE_WBITS = -15


def encode_body(payload: bytes) -> bytes:
    """Compress a raw transaction payload."""
    zw = zlib.compressobj(DEFLATE_LEVEL, zlib.DEFLATED, RAW_DEFLATE_WBITS)
    return zw.compress(bytes(payload)) + zw.flush()


def decode_body(data: bytes) -> bytes:
    """
    Inflate a stored body. A truncated or malformed stream raises
    CorruptDataError instead of returning a partial payload.
    """
    zr = zlib.decompressobj(RAW_DEFLATE_WBITS)
    try:
        payload = zr.decompress(bytes(data)) + zr.flush()
    except zlib.error as e:
        raise CorruptDataError(f"malformed deflate stream: {e}") from e
    if not zr.eof:
        raise CorruptDataError("truncated deflate stream")
    if zr.unused_data:
        raise CorruptDataError(
            f"{len(zr.unused_data)} trailing byte(s) after deflate stream"
        )
    return payload


def encode_hash_state(states: Iterable[TrackedHash]) -> bytes:
    return json.dumps(
        [{"Hash": s.hash, "Confirmed": bool(s.confirmed)} for s in states]
    ).encode("utf-8")


def decode_hash_state(data: Optional[bytes]) -> List[TrackedHash]:
    """Decode the hash-state record; an absent or empty value is an empty list."""
    if not data:
        return []
    try:
        raw = json.loads(data)
    except (ValueError, UnicodeDecodeError) as e:
        raise CorruptDataError(f"malformed hash state: {e}") from e
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise CorruptDataError("hash state is not a list")

    states: List[TrackedHash] = []
    for entry in raw:
        if not isinstance(entry, dict) or not isinstance(entry.get("Hash"), str):
            raise CorruptDataError(f"malformed hash state entry: {entry!r}")
        states.append(TrackedHash(entry["Hash"], bool(entry.get("Confirmed", False))))
    return states
