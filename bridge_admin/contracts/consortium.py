"""Entry points of the `consortium` module (validator sets and payload validation)."""

from __future__ import annotations

from .schema import ModuleBinding, ModuleSchema, fn, mut, pure, ref

__all__ = ["CONSORTIUM", "bind_consortium"]

CONSORTIUM = ModuleSchema.of(
    "consortium",
    fn("add_admin", mut("consortium"), pure("admin", "address")),
    fn("remove_admin", mut("consortium"), pure("admin", "address")),
    fn("set_initial_validator_set", mut("consortium"), pure("valset", "vector<u8>")),
    fn("set_next_validator_set", mut("consortium"), pure("payload", "vector<u8>"), pure("proof", "vector<u8>")),
    fn("set_valset_action", mut("consortium"), pure("action", "u32")),
    fn("validate_payload", mut("consortium"), pure("payload", "vector<u8>"), pure("proof", "vector<u8>")),
    fn("get_epoch", ref("consortium"), returns=("u256",)),
    fn("is_payload_used", ref("consortium"), pure("payload_hash", "vector<u8>"), returns=("bool",)),
)


def bind_consortium(package_id: str) -> ModuleBinding:
    return ModuleBinding(package_id, CONSORTIUM)
