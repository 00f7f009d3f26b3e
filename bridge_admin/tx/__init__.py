"""
bridge_admin.tx
===============

Transaction helpers: build, encode, and send.

Submodules
----------
- build : `TransactionBuilder` (inputs, Move calls, gas resolution against a ledger).
- encode: BCS `TransactionData` layouts, decoding for inspection, transaction digest.
- send  : Single-shot submission, dev-inspect simulation and opt-in finality polling.

Typical usage
-------------
    from bridge_admin.tx import TransactionBuilder, sign_and_execute

    tx = TransactionBuilder()
    tx.move_call(f"{pkg}::treasury::toggle_withdrawal", [tx.object(treasury_id)], type_arguments=[coin_type])
    result = sign_and_execute(ledger, tx, config.signer_config())
"""

from . import build, encode, send  # noqa: F401
from .build import TransactionBuilder  # noqa: F401
from .encode import TransactionData, transaction_digest  # noqa: F401
from .send import dev_inspect, execute_transaction, sign_and_execute, wait_for_transaction  # noqa: F401

__all__ = [
    "build",
    "encode",
    "send",
    "TransactionBuilder",
    "TransactionData",
    "transaction_digest",
    "dev_inspect",
    "execute_transaction",
    "sign_and_execute",
    "wait_for_transaction",
]
