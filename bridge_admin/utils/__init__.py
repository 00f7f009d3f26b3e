"""Small self-contained codecs and hashing helpers."""

from .bytes import (  # noqa: F401
    ensure_bytes,
    from_b64,
    from_hex,
    to_b64,
    to_hex,
    uleb128_decode,
    uleb128_encode,
)
from .base58 import b58decode, b58encode  # noqa: F401
from .hashing import blake2b_256  # noqa: F401
