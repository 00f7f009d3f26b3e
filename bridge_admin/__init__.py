"""
bridge-admin: admin tooling for the LBTC bridge contracts on Sui.
Convenience exports for the most common APIs.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .config import AdminConfig, CapabilityType, Network  # noqa: F401
from .errors import (  # noqa: F401
    BridgeAdminError,
    ConfigurationError,
    InsufficientWeightError,
    RemoteRejectionError,
    RpcError,
    TransactionFailedError,
    TransportError,
)

# Keys & multisig
from .crypto.keys import Ed25519Keypair, Ed25519PublicKey  # noqa: F401
from .multisig import MultisigPublicKey, MultisigSigner, Participant, compose_multisig  # noqa: F401
from .signers import MultisigSignerConfig, SimpleSignerConfig, resolve_signer  # noqa: F401

# RPC
from .rpc.http import RpcClient  # noqa: F401
from .rpc.ledger import LedgerClient  # noqa: F401

# Tx helpers
from .tx.build import TransactionBuilder  # noqa: F401
from .tx.send import execute_transaction, sign_and_execute, wait_for_transaction  # noqa: F401

__all__ = [
    "__version__",
    # Core
    "AdminConfig", "CapabilityType", "Network",
    "BridgeAdminError", "ConfigurationError", "InsufficientWeightError",
    "RemoteRejectionError", "RpcError", "TransactionFailedError", "TransportError",
    # Keys & multisig
    "Ed25519Keypair", "Ed25519PublicKey",
    "MultisigPublicKey", "MultisigSigner", "Participant", "compose_multisig",
    "MultisigSignerConfig", "SimpleSignerConfig", "resolve_signer",
    # RPC
    "RpcClient", "LedgerClient",
    # Tx
    "TransactionBuilder", "execute_transaction", "sign_and_execute", "wait_for_transaction",
]
