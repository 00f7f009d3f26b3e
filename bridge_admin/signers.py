"""
Signer configurations accepted by every state-mutating action.

A signer configuration is one of exactly two variants:

- SimpleSignerConfig: a single operator key signs for its own address.
- MultisigSignerConfig: an aggregate multisig key plus the participant keys
  available on this machine.

`resolve_signer` turns either variant into a `TransactionSigner`; any other
object is rejected with ConfigurationError rather than ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence, Tuple, Union

from .crypto.keys import Ed25519Keypair
from .errors import ConfigurationError
from .multisig import MultisigPublicKey, MultisigSigner, policy_from_keypairs

__all__ = [
    "TransactionSigner",
    "SimpleSignerConfig",
    "MultisigSignerConfig",
    "SignerConfig",
    "resolve_signer",
]


class TransactionSigner(Protocol):
    """What the dispatcher needs from a signer: the sender address and a serialized signature."""

    @property
    def address(self) -> str: ...

    def sign_transaction(self, tx_bytes: bytes) -> str: ...


@dataclass(frozen=True)
class SimpleSignerConfig:
    keypair: Ed25519Keypair


@dataclass(frozen=True)
class MultisigSignerConfig:
    multisig_pk: MultisigPublicKey
    keypairs: Tuple[Ed25519Keypair, ...]

    @classmethod
    def from_users(cls, users: Sequence[Tuple[Ed25519Keypair, int]], threshold: int) -> "MultisigSignerConfig":
        """Every participant is local: compose the policy from (keypair, weight) pairs and sign with all of them."""
        return cls(policy_from_keypairs(users, threshold), tuple(kp for kp, _ in users))

    @property
    def address(self) -> str:
        return self.multisig_pk.address


SignerConfig = Union[SimpleSignerConfig, MultisigSignerConfig]


def resolve_signer(config: SignerConfig) -> TransactionSigner:
    if isinstance(config, SimpleSignerConfig):
        return config.keypair
    if isinstance(config, MultisigSignerConfig):
        return MultisigSigner(config.multisig_pk, config.keypairs)
    raise ConfigurationError(
        f"invalid signer configuration {type(config).__name__}: "
        "provide SimpleSignerConfig or MultisigSignerConfig"
    )
