"""Move types, addresses and ledger result shapes."""

from .core import DevInspectResult, ExecutionResult  # noqa: F401
from .move import (  # noqa: F401
    StructTag,
    TypeTag,
    TypeTagKind,
    decode_value,
    encode_pure,
    normalize_address,
    parse_type_tag,
)
