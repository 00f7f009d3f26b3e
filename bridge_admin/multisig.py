"""
bridge_admin.multisig
=====================

Weighted k-of-n multisig: composing the aggregate key, signing with a set of
participant keys, and collecting partial signatures offline.

Primary entry points
--------------------
- compose_multisig(participants, threshold) -> MultisigPublicKey
    Validates the policy and returns the aggregate key. Its address is
    blake2b-256(0x03 || threshold:u16le || for each participant:
    flag || public_key || weight:u8), so participant order is significant.

- MultisigSigner(multisig_pk, keypairs)
    Signs a transaction with every supplied participant key and combines the
    signatures. Raises InsufficientWeightError before any signing when the
    supplied keys cannot reach the threshold.

- SignatureSet(multisig_pk, tx_bytes)
    Incremental collection of participant signatures produced elsewhere
    (`bridge-admin tx sign` on each operator's machine), combined once ready.

Serialized multisig layout
--------------------------
0x03 || BCS(MultiSig) where

    MultiSig          { sigs: vector<CompressedSignature>, bitmap: u16, multisig_pk: MultiSigPublicKey }
    MultiSigPublicKey { pk_map: vector<(PublicKey, u8)>, threshold: u16 }

CompressedSignature and PublicKey are enums over the signature schemes
(Ed25519 = variant 0 with a fixed [u8; 64] / [u8; 32] payload). Bit i of the
bitmap is set when the participant at index i signed; signatures are ordered
by ascending participant index.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

from .bcs import Deserializer, Serializer
from .crypto.keys import (
    PUBLIC_KEY_SIZE,
    SIGNATURE_SIZE,
    Ed25519Keypair,
    Ed25519PublicKey,
    SignatureScheme,
    parse_serialized_signature,
)
from .errors import BcsError, ConfigurationError, InsufficientWeightError
from .utils.bytes import from_b64, to_b64
from .utils.hashing import blake2b_256

log = logging.getLogger(__name__)

__all__ = [
    "MAX_SIGNERS",
    "Participant",
    "MultisigPublicKey",
    "compose_multisig",
    "MultisigSigner",
    "SignatureSet",
    "combine_signatures",
    "decode_multisig_signature",
    "policy_from_keypairs",
]

MAX_SIGNERS = 10
MAX_WEIGHT = 0xFF
MAX_THRESHOLD = 0xFFFF


@dataclass(frozen=True)
class Participant:
    public_key: Ed25519PublicKey
    weight: int


@dataclass(frozen=True)
class MultisigPublicKey:
    """The group's aggregate key. Build it with `compose_multisig` so the policy is validated."""

    participants: Tuple[Participant, ...]
    threshold: int

    @property
    def total_weight(self) -> int:
        return sum(p.weight for p in self.participants)

    @property
    def address(self) -> str:
        ser = Serializer().u8(SignatureScheme.MULTISIG).u16(self.threshold)
        for p in self.participants:
            ser.raw(p.public_key.to_sui_bytes()).u8(p.weight)
        return "0x" + blake2b_256(ser.output()).hex()

    def index_of(self, public_key: Ed25519PublicKey) -> int:
        for i, p in enumerate(self.participants):
            if p.public_key == public_key:
                return i
        raise ConfigurationError(
            f"public key {public_key.to_base64()} is not a participant of multisig {self.address}"
        )

    def weight_of(self, indexes: Iterable[int]) -> int:
        return sum(self.participants[i].weight for i in set(indexes))

    def write_bcs(self, ser: Serializer) -> None:
        def _entry(s: Serializer, p: Participant) -> None:
            s.variant(p.public_key.scheme).fixed_bytes(p.public_key.raw, PUBLIC_KEY_SIZE).u8(p.weight)

        ser.sequence(self.participants, _entry)
        ser.u16(self.threshold)

    def to_bytes(self) -> bytes:
        """BCS of MultiSigPublicKey."""
        ser = Serializer()
        self.write_bcs(ser)
        return ser.output()

    def to_base64(self) -> str:
        return to_b64(bytes([SignatureScheme.MULTISIG]) + self.to_bytes())

    def public_keys_sui_bytes(self) -> List[bytes]:
        """flag || pk for every participant, in policy order (the contract's `vector<vector<u8>>` argument)."""
        return [p.public_key.to_sui_bytes() for p in self.participants]

    def weights(self) -> List[int]:
        return [p.weight for p in self.participants]

    def to_dict(self) -> Dict[str, object]:
        return {
            "address": self.address,
            "threshold": self.threshold,
            "participants": [
                {
                    "public_key": p.public_key.to_base64(),
                    "address": p.public_key.to_sui_address(),
                    "weight": p.weight,
                }
                for p in self.participants
            ],
        }


def _read_multisig_pk(de: Deserializer) -> MultisigPublicKey:
    def _entry(d: Deserializer) -> Participant:
        scheme = d.variant()
        if scheme != SignatureScheme.ED25519:
            raise BcsError(f"unsupported public key scheme {scheme} in multisig")
        pk = Ed25519PublicKey(d.fixed_bytes(PUBLIC_KEY_SIZE))
        return Participant(pk, d.u8())

    participants = tuple(de.sequence(_entry))
    threshold = de.u16()
    return MultisigPublicKey(participants, threshold)


def compose_multisig(participants: Sequence[Participant], threshold: int) -> MultisigPublicKey:
    """
    Validate a multisig policy and return its aggregate key.

    Raises ConfigurationError when the list is empty or too long, a public key
    repeats, a weight is outside 1..255, or the threshold is outside
    1..65535 or above the sum of weights.
    """
    parts = tuple(participants)
    if not parts:
        raise ConfigurationError("multisig needs at least one participant", field="participants")
    if len(parts) > MAX_SIGNERS:
        raise ConfigurationError(
            f"multisig supports at most {MAX_SIGNERS} participants, got {len(parts)}",
            field="participants",
        )
    seen = set()
    for p in parts:
        if isinstance(p.weight, bool) or not isinstance(p.weight, int) or not 1 <= p.weight <= MAX_WEIGHT:
            raise ConfigurationError(
                f"participant weight must be an integer in 1..{MAX_WEIGHT}, got {p.weight!r}",
                field="weight",
            )
        if p.public_key.raw in seen:
            raise ConfigurationError(
                f"duplicate participant public key {p.public_key.to_base64()}", field="participants"
            )
        seen.add(p.public_key.raw)
    if isinstance(threshold, bool) or not isinstance(threshold, int) or not 1 <= threshold <= MAX_THRESHOLD:
        raise ConfigurationError(
            f"threshold must be an integer in 1..{MAX_THRESHOLD}, got {threshold!r}", field="threshold"
        )
    total = sum(p.weight for p in parts)
    if threshold > total:
        raise ConfigurationError(
            f"threshold {threshold} is unreachable: participants only carry weight {total}",
            field="threshold",
        )
    return MultisigPublicKey(parts, threshold)


# --- Combining -----------------------------------------------------------------


def _serialize(multisig_pk: MultisigPublicKey, by_index: Dict[int, bytes]) -> str:
    order = sorted(by_index)
    bitmap = 0
    for i in order:
        bitmap |= 1 << i
    ser = Serializer().u8(SignatureScheme.MULTISIG)
    ser.sequence(
        [by_index[i] for i in order],
        lambda s, sig: s.variant(SignatureScheme.ED25519).fixed_bytes(sig, SIGNATURE_SIZE),
    )
    ser.u16(bitmap)
    multisig_pk.write_bcs(ser)
    return to_b64(ser.output())


def decode_multisig_signature(value: str) -> Tuple[MultisigPublicKey, Dict[int, bytes]]:
    """Inverse of the combined serialization: (aggregate key, {participant index: signature})."""
    try:
        raw = from_b64(value)
    except ValueError as e:
        raise BcsError(f"multisig signature: {e}") from e
    if not raw or raw[0] != SignatureScheme.MULTISIG:
        raise BcsError("not a multisig signature (missing 0x03 flag)")
    de = Deserializer(raw[1:])

    def _sig(d: Deserializer) -> bytes:
        scheme = d.variant()
        if scheme != SignatureScheme.ED25519:
            raise BcsError(f"unsupported compressed signature scheme {scheme}")
        return d.fixed_bytes(SIGNATURE_SIZE)

    sigs = de.sequence(_sig)
    bitmap = de.u16()
    multisig_pk = _read_multisig_pk(de)
    de.assert_finished()
    indexes = [i for i in range(16) if bitmap & (1 << i)]
    if len(indexes) != len(sigs):
        raise BcsError(f"bitmap marks {len(indexes)} signers but {len(sigs)} signatures present")
    return multisig_pk, dict(zip(indexes, sigs))


class SignatureSet:
    """
    Participant signatures over one transaction, collected one at a time.

    Every added signature is verified against the participant's public key and
    the transaction bytes; a signature from a non-participant or over other
    bytes raises ConfigurationError.
    """

    def __init__(self, multisig_pk: MultisigPublicKey, tx_bytes: bytes) -> None:
        self.multisig_pk = multisig_pk
        self.tx_bytes = bytes(tx_bytes)
        self._sigs: Dict[int, bytes] = {}

    def __len__(self) -> int:
        return len(self._sigs)

    @property
    def weight(self) -> int:
        return self.multisig_pk.weight_of(self._sigs)

    @property
    def is_ready(self) -> bool:
        return self.weight >= self.multisig_pk.threshold

    def signers(self) -> List[Ed25519PublicKey]:
        return [self.multisig_pk.participants[i].public_key for i in sorted(self._sigs)]

    def add(self, public_key: Ed25519PublicKey, signature: bytes) -> int:
        """Add one raw 64-byte signature; returns the accumulated weight."""
        idx = self.multisig_pk.index_of(public_key)
        if not public_key.verify_transaction(self.tx_bytes, signature):
            raise ConfigurationError(
                f"signature from {public_key.to_sui_address()} does not verify against these transaction bytes"
            )
        if idx in self._sigs:
            log.debug("multisig: replacing signature of participant %d", idx)
        self._sigs[idx] = bytes(signature)
        return self.weight

    def add_serialized(self, serialized: str) -> int:
        """Add a base64(flag || sig || pk) signature as produced by a single key."""
        _, sig, pk = parse_serialized_signature(serialized)
        return self.add(pk, sig)

    def add_keypair(self, keypair: Ed25519Keypair) -> int:
        return self.add(keypair.public_key, keypair.sign_transaction_raw(self.tx_bytes))

    def combine(self) -> str:
        """Serialized multisig signature. Raises InsufficientWeightError below threshold."""
        weight = self.weight
        if weight < self.multisig_pk.threshold:
            raise InsufficientWeightError(
                message=f"collected signatures cannot authorize multisig {self.multisig_pk.address}",
                weight=weight,
                threshold=self.multisig_pk.threshold,
            )
        return _serialize(self.multisig_pk, self._sigs)


def combine_signatures(multisig_pk: MultisigPublicKey, tx_bytes: bytes, serialized: Iterable[str]) -> str:
    sigs = SignatureSet(multisig_pk, tx_bytes)
    for s in serialized:
        sigs.add_serialized(s)
    return sigs.combine()


class MultisigSigner:
    """
    Signs on behalf of a multisig address with a subset of its participants' keys.

    The supplied keys are checked up front: at least one key, every key belongs
    to the aggregate key, and together they reach the threshold. A signer that
    could only ever produce an unusable signature is never constructed.
    """

    def __init__(self, multisig_pk: MultisigPublicKey, keypairs: Sequence[Ed25519Keypair]) -> None:
        if not keypairs:
            raise ConfigurationError("at least one signer is required to create a multisig signer")
        self.multisig_pk = multisig_pk
        self._keypairs: List[Ed25519Keypair] = list(keypairs)
        indexes = [multisig_pk.index_of(kp.public_key) for kp in self._keypairs]
        weight = multisig_pk.weight_of(indexes)
        if weight < multisig_pk.threshold:
            raise InsufficientWeightError(
                message=f"{len(indexes)} key(s) cannot authorize multisig {multisig_pk.address}",
                weight=weight,
                threshold=multisig_pk.threshold,
            )

    @property
    def address(self) -> str:
        return self.multisig_pk.address

    def sign_transaction(self, tx_bytes: bytes) -> str:
        sigs = SignatureSet(self.multisig_pk, tx_bytes)
        for kp in self._keypairs:
            sigs.add_keypair(kp)
        log.debug("multisig: %d signature(s), weight %d/%d", len(sigs), sigs.weight, self.multisig_pk.threshold)
        return sigs.combine()


def policy_from_keypairs(
    users: Sequence[Tuple[Ed25519Keypair, int]], threshold: int
) -> MultisigPublicKey:
    """Compose the aggregate key from (keypair, weight) pairs, as the signer configs carry them."""
    return compose_multisig([Participant(kp.public_key, w) for kp, w in users], threshold)
