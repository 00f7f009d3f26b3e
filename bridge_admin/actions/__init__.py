"""
Admin actions on the bridge contracts.

Submodules
----------
- capabilities: grant/revoke AdminCap, MinterCap, PauserCap; witness mint caps; role views.
- supply      : mint_and_transfer, mint_with_witness, burn, redeem, claim, mint_with_fee.
- pause       : global pause (v2 and multisig-argument variants), withdrawal and Bascule toggles.
- params      : treasury fee/address/chain-id/action-selector setters and getters.
- consortium  : validator sets, consortium admins, payload validation and lookup.
- scenarios   : multi-step flows composed from the above.
"""

from . import capabilities, consortium, params, pause, scenarios, supply  # noqa: F401

__all__ = ["capabilities", "consortium", "params", "pause", "scenarios", "supply"]
