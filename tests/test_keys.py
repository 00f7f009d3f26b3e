import base64
import hashlib

import pytest

from bridge_admin.crypto.keys import (
    Ed25519Keypair,
    Ed25519PublicKey,
    SignatureScheme,
    intent_digest,
    parse_serialized_signature,
)
from bridge_admin.errors import ConfigurationError
from bridge_admin.utils.bytes import from_b64

# RFC 8032, section 7.1, test 1
RFC_SECRET = "9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60"
RFC_PUBLIC = "d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a"


def test_public_key_and_address_derivation():
    kp = Ed25519Keypair.from_encoded(RFC_SECRET)
    assert kp.public_key.raw.hex() == RFC_PUBLIC
    expected = hashlib.blake2b(b"\x00" + bytes.fromhex(RFC_PUBLIC), digest_size=32).hexdigest()
    assert kp.address == "0x" + expected


def test_secret_key_formats_agree():
    kp = Ed25519Keypair.from_encoded(RFC_SECRET)
    flagged = base64.b64encode(b"\x00" + bytes.fromhex(RFC_SECRET)).decode()
    exported = kp.export_secret_key()
    assert exported.startswith("suiprivkey1")
    for encoded in (flagged, exported, "0x" + RFC_SECRET):
        assert Ed25519Keypair.from_encoded(encoded).public_key == kp.public_key


@pytest.mark.parametrize(
    "bad",
    [
        "",
        "not a key at all!",
        base64.b64encode(b"\x01" + bytes(32)).decode(),  # secp256k1 flag
        "suiprivkey1qqqqqqqqq",
    ],
)
def test_invalid_secret_keys(bad):
    with pytest.raises(ConfigurationError):
        Ed25519Keypair.from_encoded(bad)


def test_public_key_parsing():
    kp = Ed25519Keypair.from_encoded(RFC_SECRET)
    raw_b64 = kp.public_key.to_base64()
    flagged_b64 = base64.b64encode(kp.public_key.to_sui_bytes()).decode()
    assert Ed25519PublicKey.parse(raw_b64) == kp.public_key
    assert Ed25519PublicKey.parse(flagged_b64) == kp.public_key
    assert Ed25519PublicKey.parse("0x" + RFC_PUBLIC) == kp.public_key
    with pytest.raises(ConfigurationError):
        Ed25519PublicKey.parse(base64.b64encode(bytes(31)).decode())


def test_transaction_signature_layout_and_verification():
    kp = Ed25519Keypair.from_encoded(RFC_SECRET)
    tx_bytes = b"\x00\x00some transaction bytes"
    serialized = kp.sign_transaction(tx_bytes)

    raw = from_b64(serialized)
    assert len(raw) == 1 + 64 + 32
    assert raw[0] == SignatureScheme.ED25519
    assert raw[65:] == kp.public_key.raw

    scheme, sig, pk = parse_serialized_signature(serialized)
    assert scheme == SignatureScheme.ED25519 and pk == kp.public_key
    assert pk.verify(intent_digest(tx_bytes), sig)
    assert pk.verify_transaction(tx_bytes, sig)
    assert not pk.verify_transaction(tx_bytes + b"x", sig)


def test_intent_digest_prefix():
    expected = hashlib.blake2b(b"\x00\x00\x00" + b"abc", digest_size=32).digest()
    assert intent_digest(b"abc") == expected


def test_keypair_repr_hides_secret():
    kp = Ed25519Keypair.from_encoded(RFC_SECRET)
    assert RFC_SECRET not in repr(kp)
    assert kp.address in repr(kp)
