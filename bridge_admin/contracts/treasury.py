"""Entry points of the `treasury` module (ControlledTreasury<T>)."""

from __future__ import annotations

from .schema import ModuleBinding, ModuleSchema, arg, fn, mut, pure, ref

__all__ = ["TREASURY", "bind_treasury"]

_T = ("T",)
_VEC_BYTES = "vector<u8>"
_MULTISIG_ARGS = (
    pure("pks", "vector<vector<u8>>"),
    pure("weights", "vector<u8>"),
    pure("threshold", "u16"),
)


def _setter(name: str, type_: str):
    return fn(f"set_{name}", mut("treasury"), pure("value", type_), type_params=_T)


def _getter(name: str, type_: str):
    return fn(f"get_{name}", ref("treasury"), type_params=_T, returns=(type_,))


TREASURY = ModuleSchema.of(
    "treasury",
    # capabilities
    fn("new_admin_cap", returns=("AdminCap",)),
    fn("new_minter_cap", pure("limit", "u64"), returns=("MinterCap",)),
    fn("new_pauser_cap", returns=("PauserCap",)),
    fn("add_capability", mut("treasury"), pure("owner", "address"), arg("cap"), type_params=("T", "Cap")),
    fn("remove_capability", mut("treasury"), pure("owner", "address"), type_params=("T", "Cap")),
    fn("has_cap", ref("treasury"), pure("owner", "address"), type_params=("T", "Cap"), returns=("bool",)),
    fn("list_roles", ref("treasury"), pure("owner", "address"), type_params=_T, returns=("vector<0x1::string::String>",)),
    fn(
        "add_witness_mint_capability",
        mut("treasury"),
        pure("owner", "0x1::string::String"),
        arg("cap", "MinterCap"),
        type_params=_T,
    ),
    fn("witness_has_minter_cap", ref("treasury"), pure("owner", "0x1::string::String"), type_params=_T, returns=("bool",)),
    fn(
        "get_witness_minter_cap_left",
        ref("treasury"),
        pure("owner", "0x1::string::String"),
        type_params=_T,
        returns=("u64",),
    ),
    # supply
    fn(
        "mint_and_transfer",
        mut("treasury"),
        pure("amount", "u64"),
        pure("to", "address"),
        mut("denylist"),
        *_MULTISIG_ARGS,
        pure("txid", _VEC_BYTES),
        pure("idx", "u32"),
        type_params=_T,
    ),
    fn(
        "mint_with_witness",
        arg("witness", "W"),
        mut("treasury"),
        pure("amount", "u64"),
        pure("to", "address"),
        mut("denylist"),
        type_params=("T", "W"),
    ),
    fn("burn", mut("treasury"), arg("coin", "Coin<T>"), type_params=_T),
    fn("redeem", mut("treasury"), arg("coin", "Coin<T>"), pure("script_pubkey", _VEC_BYTES), type_params=_T),
    fn(
        "claim",
        mut("treasury"),
        mut("consortium"),
        mut("denylist"),
        pure("payload", _VEC_BYTES),
        pure("proof", _VEC_BYTES),
        type_params=_T,
    ),
    fn(
        "mint_with_fee",
        mut("treasury"),
        mut("consortium"),
        mut("denylist"),
        mut("bascule"),
        pure("payload", _VEC_BYTES),
        pure("proof", _VEC_BYTES),
        pure("fee_payload", _VEC_BYTES),
        pure("signature", _VEC_BYTES),
        pure("public_key", _VEC_BYTES),
        ref("clock"),
        type_params=_T,
    ),
    # pause and flags
    fn("enable_global_pause_v2", mut("treasury"), mut("denylist"), type_params=_T),
    fn("disable_global_pause_v2", mut("treasury"), mut("denylist"), type_params=_T),
    fn("enable_global_pause", mut("treasury"), mut("denylist"), *_MULTISIG_ARGS, type_params=_T),
    fn("disable_global_pause", mut("treasury"), mut("denylist"), *_MULTISIG_ARGS, type_params=_T),
    fn("is_global_pause_enabled", ref("denylist"), type_params=_T, returns=("bool",)),
    fn("toggle_withdrawal", mut("treasury"), type_params=_T),
    fn("is_withdrawal_enabled", ref("treasury"), type_params=_T, returns=("bool",)),
    fn("toggle_bascule_check", mut("treasury"), type_params=_T),
    fn("is_bascule_check_enabled", ref("treasury"), type_params=_T, returns=("bool",)),
    # parameters
    _setter("mint_fee", "u64"),
    _getter("mint_fee", "u64"),
    _setter("burn_commission", "u64"),
    _getter("burn_commission", "u64"),
    _setter("dust_fee_rate", "u64"),
    _getter("dust_fee_rate", "u64"),
    _setter("treasury_address", "address"),
    _getter("treasury_address", "address"),
    _setter("chain_id", "u256"),
    _getter("chain_id", "u256"),
    _setter("action_bytes", "u32"),
    _getter("action_bytes", "u32"),
    _setter("fee_action_bytes", "u32"),
    _getter("fee_action_bytes", "u32"),
)


def bind_treasury(package_id: str) -> ModuleBinding:
    return ModuleBinding(package_id, TREASURY)
