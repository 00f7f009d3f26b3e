"""
Call schemas for the bridge's on-chain modules.

Each module exposes a `ModuleSchema` table and a factory binding it to a
package id:

    from bridge_admin.contracts import bind_treasury
    t = bind_treasury(config.package_id)
    t.call(tx, "toggle_withdrawal", [config.treasury_id], [config.coin_type])
"""

from .consortium import CONSORTIUM, bind_consortium  # noqa: F401
from .schema import FunctionSpec, ModuleBinding, ModuleSchema, Param, ParamKind  # noqa: F401
from .treasury import TREASURY, bind_treasury  # noqa: F401
from .witness import WITNESS, bind_witness, witness_type  # noqa: F401

__all__ = [
    "CONSORTIUM",
    "TREASURY",
    "WITNESS",
    "FunctionSpec",
    "ModuleBinding",
    "ModuleSchema",
    "Param",
    "ParamKind",
    "bind_consortium",
    "bind_treasury",
    "bind_witness",
    "witness_type",
]
