"""JSON-RPC transport and typed fullnode wrappers."""

from .http import RpcClient  # noqa: F401
from .ledger import LedgerClient  # noqa: F401
