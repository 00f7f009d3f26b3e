"""The `test_witness` module used to exercise witness-authorized minting."""

from __future__ import annotations

from .schema import ModuleBinding, ModuleSchema, fn

__all__ = ["WITNESS", "bind_witness", "witness_type"]

WITNESS = ModuleSchema.of(
    "test_witness",
    fn("create_witness", returns=("TestWitness",)),
)


def bind_witness(package_id: str) -> ModuleBinding:
    return ModuleBinding(package_id, WITNESS)


def witness_type(package_id: str) -> str:
    return f"{package_id}::test_witness::TestWitness"
