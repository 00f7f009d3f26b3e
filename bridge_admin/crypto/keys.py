"""
bridge_admin.crypto.keys
========================

Ed25519 key handles for operators and multisig participants.

Key features
------------
- Keypairs backed by `cryptography`'s Ed25519 implementation
- Secret key import from every format operators keep around:
  base64 `flag || sk` (CLI keystore export), `suiprivkey1...` bech32, raw hex
- Address derivation: blake2b-256(flag || public_key)
- Transaction signing over the intent message: the signed digest is
  blake2b-256(intent || tx_bytes) with intent = [scope=0, version=0, app=0]
- Serialized signature format: base64(flag || signature || public_key)

Notes
-----
Only Ed25519 participants are supported. Other schemes still have their flag
listed in `SignatureScheme` so that foreign signatures and public keys are
recognised and rejected with a clear error instead of being misparsed.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519

from ..errors import ConfigurationError
from ..utils import bech32
from ..utils.bytes import from_hex, to_b64
from ..utils.hashing import blake2b_256

__all__ = [
    "SignatureScheme",
    "TRANSACTION_INTENT",
    "Ed25519PublicKey",
    "Ed25519Keypair",
    "intent_digest",
    "parse_serialized_signature",
    "public_key_from_sui_bytes",
]

PUBLIC_KEY_SIZE = 32
SECRET_KEY_SIZE = 32
SIGNATURE_SIZE = 64

# IntentScope::TransactionData, IntentVersion::V0, AppId::Sui
TRANSACTION_INTENT = bytes([0, 0, 0])


class SignatureScheme(IntEnum):
    ED25519 = 0x00
    SECP256K1 = 0x01
    SECP256R1 = 0x02
    MULTISIG = 0x03
    ZKLOGIN = 0x05
    PASSKEY = 0x06


def intent_digest(tx_bytes: bytes) -> bytes:
    """Digest that participants actually sign for a transaction."""
    return blake2b_256(TRANSACTION_INTENT + bytes(tx_bytes))


# --- Public keys ---------------------------------------------------------------


@dataclass(frozen=True)
class Ed25519PublicKey:
    raw: bytes

    scheme = SignatureScheme.ED25519

    def __post_init__(self) -> None:
        if len(self.raw) != PUBLIC_KEY_SIZE:
            raise ConfigurationError(
                f"Ed25519 public key must be {PUBLIC_KEY_SIZE} bytes, got {len(self.raw)}"
            )

    @classmethod
    def from_base64(cls, value: str) -> "Ed25519PublicKey":
        """Accept base64 of the raw 32-byte key or of the 33-byte flag-prefixed form."""
        try:
            raw = base64.b64decode(value.strip(), validate=True)
        except (binascii.Error, ValueError) as e:
            raise ConfigurationError(f"public key is not valid base64: {e}") from e
        return public_key_from_sui_bytes(raw) if len(raw) == PUBLIC_KEY_SIZE + 1 else cls(raw)

    @classmethod
    def from_hex(cls, value: str) -> "Ed25519PublicKey":
        try:
            raw = from_hex(value)
        except ValueError as e:
            raise ConfigurationError(f"public key is not valid hex: {e}") from e
        return public_key_from_sui_bytes(raw) if len(raw) == PUBLIC_KEY_SIZE + 1 else cls(raw)

    @classmethod
    def parse(cls, value: str) -> "Ed25519PublicKey":
        """Hex when 0x-prefixed, base64 otherwise."""
        v = value.strip()
        return cls.from_hex(v) if v.startswith(("0x", "0X")) else cls.from_base64(v)

    def to_sui_bytes(self) -> bytes:
        """flag || public_key, the form embedded in addresses and multisig key lists."""
        return bytes([self.scheme]) + self.raw

    def to_base64(self) -> str:
        return to_b64(self.raw)

    def to_sui_address(self) -> str:
        return "0x" + blake2b_256(self.to_sui_bytes()).hex()

    def verify(self, message: bytes, signature: bytes) -> bool:
        try:
            ed25519.Ed25519PublicKey.from_public_bytes(self.raw).verify(signature, message)
        except InvalidSignature:
            return False
        return True

    def verify_transaction(self, tx_bytes: bytes, signature: bytes) -> bool:
        return self.verify(intent_digest(tx_bytes), signature)


def public_key_from_sui_bytes(data: bytes) -> Ed25519PublicKey:
    """Parse flag || public_key."""
    if not data:
        raise ConfigurationError("empty public key")
    flag = data[0]
    if flag != SignatureScheme.ED25519:
        raise ConfigurationError(f"unsupported public key scheme flag 0x{flag:02x}")
    return Ed25519PublicKey(bytes(data[1:]))


# --- Keypairs ------------------------------------------------------------------


class Ed25519Keypair:
    """An operator's signing key. The secret never leaves this object except via export."""

    def __init__(self, private_key: ed25519.Ed25519PrivateKey) -> None:
        self._sk = private_key
        raw_pk = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
        self._pk = Ed25519PublicKey(raw_pk)

    def __repr__(self) -> str:
        return f"Ed25519Keypair(address={self.address})"

    @classmethod
    def generate(cls) -> "Ed25519Keypair":
        return cls(ed25519.Ed25519PrivateKey.generate())

    @classmethod
    def from_secret_key(cls, secret: bytes) -> "Ed25519Keypair":
        if len(secret) != SECRET_KEY_SIZE:
            raise ConfigurationError(
                f"Ed25519 secret key must be {SECRET_KEY_SIZE} bytes, got {len(secret)}"
            )
        return cls(ed25519.Ed25519PrivateKey.from_private_bytes(bytes(secret)))

    @classmethod
    def from_encoded(cls, value: str) -> "Ed25519Keypair":
        """
        Import a secret key in any supported encoding:

        - `suiprivkey1...`  bech32 of flag || sk
        - `0x...` / 64 hex  raw 32-byte secret
        - base64            flag || sk (33 bytes, keystore format) or raw 32 bytes
        """
        v = (value or "").strip()
        if not v:
            raise ConfigurationError("empty secret key")
        if v.startswith(bech32.SUI_PRIVATE_KEY_HRP + "1"):
            try:
                _, payload, _ = bech32.decode_bytes(v, expected_hrp=bech32.SUI_PRIVATE_KEY_HRP)
            except bech32.Bech32Error as e:
                raise ConfigurationError(f"invalid bech32 secret key: {e}") from e
            return cls._from_flagged(payload)
        if v.startswith(("0x", "0X")) or (len(v) == 64 and all(c in "0123456789abcdefABCDEF" for c in v)):
            try:
                return cls.from_secret_key(from_hex(v))
            except ValueError as e:
                raise ConfigurationError(f"invalid hex secret key: {e}") from e
        try:
            raw = base64.b64decode(v, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ConfigurationError(f"secret key is not bech32, hex or base64: {e}") from e
        if len(raw) == SECRET_KEY_SIZE + 1:
            return cls._from_flagged(raw)
        return cls.from_secret_key(raw)

    @classmethod
    def _from_flagged(cls, payload: bytes) -> "Ed25519Keypair":
        if len(payload) != SECRET_KEY_SIZE + 1:
            raise ConfigurationError(f"flagged secret key must be 33 bytes, got {len(payload)}")
        if payload[0] != SignatureScheme.ED25519:
            raise ConfigurationError(f"unsupported secret key scheme flag 0x{payload[0]:02x}")
        return cls.from_secret_key(payload[1:])

    @property
    def public_key(self) -> Ed25519PublicKey:
        return self._pk

    @property
    def address(self) -> str:
        return self._pk.to_sui_address()

    def secret_bytes(self) -> bytes:
        return self._sk.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )

    def export_secret_key(self) -> str:
        """`suiprivkey1...` export of this key."""
        return bech32.encode_bytes(
            bech32.SUI_PRIVATE_KEY_HRP, bytes([SignatureScheme.ED25519]) + self.secret_bytes()
        )

    def sign(self, message: bytes) -> bytes:
        return self._sk.sign(bytes(message))

    def sign_transaction_raw(self, tx_bytes: bytes) -> bytes:
        """64-byte signature over the intent digest of `tx_bytes`."""
        return self.sign(intent_digest(tx_bytes))

    def sign_transaction(self, tx_bytes: bytes) -> str:
        """Serialized signature: base64(flag || signature || public_key)."""
        sig = self.sign_transaction_raw(tx_bytes)
        return to_b64(bytes([SignatureScheme.ED25519]) + sig + self._pk.raw)


def parse_serialized_signature(value: Union[str, bytes]) -> Tuple[SignatureScheme, bytes, Ed25519PublicKey]:
    """
    Split a single-key serialized signature into (scheme, signature, public_key).

    Multisig signatures are rejected here: they have their own layout.
    """
    if isinstance(value, str):
        try:
            raw = base64.b64decode(value.strip(), validate=True)
        except (binascii.Error, ValueError) as e:
            raise ConfigurationError(f"signature is not valid base64: {e}") from e
    else:
        raw = bytes(value)
    if not raw:
        raise ConfigurationError("empty signature")
    flag = raw[0]
    if flag != SignatureScheme.ED25519:
        raise ConfigurationError(f"unsupported signature scheme flag 0x{flag:02x}")
    expected = 1 + SIGNATURE_SIZE + PUBLIC_KEY_SIZE
    if len(raw) != expected:
        raise ConfigurationError(f"Ed25519 signature must be {expected} bytes, got {len(raw)}")
    sig = raw[1 : 1 + SIGNATURE_SIZE]
    pk = Ed25519PublicKey(raw[1 + SIGNATURE_SIZE :])
    return SignatureScheme.ED25519, sig, pk
