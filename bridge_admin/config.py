"""
Operator configuration: ledger endpoint, deployed object ids and the multisig key registry.

- Built explicitly with `AdminConfig.from_env()` (process environment plus
  `.env` / `.test-witness.env` files read with python-dotenv) and passed
  into every action; nothing reads the environment at call time.
- Validated eagerly: malformed ids, keys, weights or an unreachable
  threshold raise ConfigurationError while loading.
- Commands state which deployment ids they need via `require(...)` before
  they build anything.

Environment
-----------
SUI_NETWORK                 explicit fullnode URL (http/https)
SUI_ENV                     devnet | testnet | mainnet | localnet (default devnet)
PACKAGE_ID                  bridge package id
SHARED_CONTROLLED_TREASURY  ControlledTreasury<LBTC> shared object
SHARED_CONSORTIUM           Consortium shared object
SHARED_BASCULE              Bascule shared object (auto-claim only)
DENYLIST                    deny list object (default 0x403)
TEST_WITNESS_PACKAGE_ID     test witness package (witness minting only)
MULTISIG_ADDRESS            expected multisig address, checked against the composed key
MULTISIG_THRESHOLD          multisig threshold (default 2)
USER_<n>_PK                 participant public key, base64 or 0x-hex (n = 1, 2, ...)
USER_<n>_SK                 participant secret key, optional (base64 flag||sk, suiprivkey1..., hex)
USER_<n>_WEIGHT             participant weight (default 1)
USER_<n>_ADDRESS            participant address, checked against the public key
BRIDGE_GAS_BUDGET           fixed gas budget in MIST (default: estimate by dry run)
BRIDGE_HTTP_TIMEOUT         HTTP timeout in seconds (default 30)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from dotenv import dotenv_values

from .crypto.keys import Ed25519Keypair, Ed25519PublicKey
from .errors import ConfigurationError
from .multisig import MultisigPublicKey, Participant, compose_multisig
from .signers import MultisigSignerConfig, SignerConfig, SimpleSignerConfig
from .types.move import normalize_address

log = logging.getLogger(__name__)

__all__ = [
    "Network",
    "CapabilityType",
    "ParticipantConfig",
    "AdminConfig",
    "DEFAULT_DENYLIST",
    "CLOCK_OBJECT_ID",
    "ONE_LBTC",
]

DEFAULT_DENYLIST = "0x403"
CLOCK_OBJECT_ID = "0x6"
ONE_LBTC = 10**8
DEFAULT_THRESHOLD = 2
DEFAULT_WEIGHT = 1
DEFAULT_TIMEOUT = 30.0
MAX_PARTICIPANTS_SCANNED = 10

ENV_FILES = (".env", ".test-witness.env")


class Network(str, Enum):
    DEVNET = "devnet"
    TESTNET = "testnet"
    MAINNET = "mainnet"
    LOCALNET = "localnet"

    @property
    def fullnode_url(self) -> str:
        if self is Network.LOCALNET:
            return "http://127.0.0.1:9000"
        return f"https://fullnode.{self.value}.sui.io:443"


class CapabilityType(str, Enum):
    """Roles held in the controlled treasury. Anything else is rejected before a call is built."""

    ADMIN = "AdminCap"
    MINTER = "MinterCap"
    PAUSER = "PauserCap"

    @classmethod
    def parse(cls, value: "str | CapabilityType") -> "CapabilityType":
        if isinstance(value, cls):
            return value
        for cap in cls:
            if str(value).strip().lower() in (cap.value.lower(), cap.name.lower()):
                return cap
        raise ConfigurationError(
            f"unsupported capability type {value!r}; expected one of "
            + ", ".join(c.value for c in cls),
            field="capability",
        )


@dataclass(frozen=True)
class ParticipantConfig:
    public_key: Ed25519PublicKey
    weight: int = DEFAULT_WEIGHT
    keypair: Optional[Ed25519Keypair] = field(default=None, repr=False)

    @property
    def address(self) -> str:
        return self.public_key.to_sui_address()


def _ensure_scheme(url: str, allowed: Tuple[str, ...] = ("http", "https")) -> str:
    lower = url.lower()
    if not any(lower.startswith(f"{sch}://") for sch in allowed):
        raise ConfigurationError(f"URL must start with {allowed}, got: {url!r}", field="SUI_NETWORK")
    return url


def _object_id(env: Mapping[str, str], name: str, default: Optional[str] = None) -> Optional[str]:
    raw = env.get(name) or default
    if not raw:
        return None
    try:
        return normalize_address(raw)
    except ValueError as e:
        raise ConfigurationError(str(e), field=name) from e


def _int(env: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw, 0)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}", field=name) from None


def _load_participants(env: Mapping[str, str]) -> Tuple[ParticipantConfig, ...]:
    out = []
    for n in range(1, MAX_PARTICIPANTS_SCANNED + 2):
        prefix = f"USER_{n}_"
        pk_raw = env.get(prefix + "PK")
        sk_raw = env.get(prefix + "SK")
        if not pk_raw and not sk_raw:
            break
        keypair = Ed25519Keypair.from_encoded(sk_raw) if sk_raw else None
        if pk_raw:
            pk = Ed25519PublicKey.parse(pk_raw)
            if keypair is not None and keypair.public_key != pk:
                raise ConfigurationError(f"{prefix}SK does not match {prefix}PK", field=prefix + "SK")
        else:
            pk = keypair.public_key  # type: ignore[union-attr]
        weight = _int(env, prefix + "WEIGHT", DEFAULT_WEIGHT)
        part = ParticipantConfig(public_key=pk, weight=weight, keypair=keypair)  # type: ignore[arg-type]
        expected = env.get(prefix + "ADDRESS")
        if expected and normalize_address(expected) != part.address:
            raise ConfigurationError(
                f"{prefix}ADDRESS {expected} does not match its public key ({part.address})",
                field=prefix + "ADDRESS",
            )
        out.append(part)
    return tuple(out)


@dataclass(frozen=True)
class AdminConfig:
    rpc_url: str = field(default_factory=lambda: Network.DEVNET.fullnode_url)
    network: Network = Network.DEVNET
    package_id: Optional[str] = None
    treasury_id: Optional[str] = None
    consortium_id: Optional[str] = None
    bascule_id: Optional[str] = None
    denylist_id: str = field(default_factory=lambda: normalize_address(DEFAULT_DENYLIST))
    test_witness_package_id: Optional[str] = None
    multisig_address: Optional[str] = None
    threshold: int = DEFAULT_THRESHOLD
    participants: Tuple[ParticipantConfig, ...] = ()
    gas_budget: Optional[int] = None
    request_timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        _ensure_scheme(self.rpc_url)
        if self.gas_budget is not None and self.gas_budget <= 0:
            raise ConfigurationError("gas budget must be positive", field="BRIDGE_GAS_BUDGET")
        if self.request_timeout <= 0:
            raise ConfigurationError("HTTP timeout must be positive", field="BRIDGE_HTTP_TIMEOUT")
        if self.participants:
            composed = self.multisig_public_key()
            if self.multisig_address and normalize_address(self.multisig_address) != composed.address:
                raise ConfigurationError(
                    f"MULTISIG_ADDRESS {self.multisig_address} does not match the composed "
                    f"multisig address {composed.address}",
                    field="MULTISIG_ADDRESS",
                )

    # --- loading -----------------------------------------------------------

    @classmethod
    def from_env(
        cls,
        env_files: Sequence[str] = ENV_FILES,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "AdminConfig":
        """
        Merge dotenv files (in order) with the process environment and build a
        validated config. Values already in the environment win over files.
        """
        merged: Dict[str, str] = {}
        for path in env_files:
            if path and os.path.isfile(path):
                log.debug("config: loading %s", path)
                merged.update({k: v for k, v in dotenv_values(path).items() if v is not None})
        merged.update(os.environ if environ is None else environ)
        return cls.from_mapping(merged)

    @classmethod
    def from_mapping(cls, env: Mapping[str, str]) -> "AdminConfig":
        name = (env.get("SUI_ENV") or Network.DEVNET.value).strip().lower()
        try:
            network = Network(name)
        except ValueError:
            raise ConfigurationError(
                f"SUI_ENV must be one of {', '.join(n.value for n in Network)}, got {name!r}",
                field="SUI_ENV",
            ) from None
        rpc_url = env.get("SUI_NETWORK") or network.fullnode_url

        timeout_raw = env.get("BRIDGE_HTTP_TIMEOUT")
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
        except ValueError:
            raise ConfigurationError(
                f"BRIDGE_HTTP_TIMEOUT must be a number, got {timeout_raw!r}", field="BRIDGE_HTTP_TIMEOUT"
            ) from None

        return cls(
            rpc_url=rpc_url,
            network=network,
            package_id=_object_id(env, "PACKAGE_ID"),
            treasury_id=_object_id(env, "SHARED_CONTROLLED_TREASURY"),
            consortium_id=_object_id(env, "SHARED_CONSORTIUM"),
            bascule_id=_object_id(env, "SHARED_BASCULE"),
            denylist_id=_object_id(env, "DENYLIST", DEFAULT_DENYLIST),  # type: ignore[arg-type]
            test_witness_package_id=_object_id(env, "TEST_WITNESS_PACKAGE_ID"),
            multisig_address=_object_id(env, "MULTISIG_ADDRESS"),
            threshold=_int(env, "MULTISIG_THRESHOLD", DEFAULT_THRESHOLD),  # type: ignore[arg-type]
            participants=_load_participants(env),
            gas_budget=_int(env, "BRIDGE_GAS_BUDGET", None),
            request_timeout=timeout,
        )

    def with_overrides(self, **overrides: Any) -> "AdminConfig":
        """Copy with keyword overrides (re-validated). Unknown keys are ignored."""
        known = {f.name for f in fields(self)}
        return replace(self, **{k: v for k, v in overrides.items() if k in known and v is not None})

    # --- requirements --------------------------------------------------------

    _REQUIREMENT_ENV = {
        "package_id": "PACKAGE_ID",
        "treasury_id": "SHARED_CONTROLLED_TREASURY",
        "consortium_id": "SHARED_CONSORTIUM",
        "bascule_id": "SHARED_BASCULE",
        "test_witness_package_id": "TEST_WITNESS_PACKAGE_ID",
    }

    def require(self, *names: str) -> "AdminConfig":
        """Fail fast when a command needs deployment ids that are not configured."""
        missing = [self._REQUIREMENT_ENV.get(n, n) for n in names if not getattr(self, n)]
        if missing:
            raise ConfigurationError(f"missing required configuration: {', '.join(missing)}")
        return self

    # --- derived values ------------------------------------------------------

    @property
    def coin_type(self) -> str:
        self.require("package_id")
        return f"{self.package_id}::lbtc::LBTC"

    def cap_type(self, cap: "CapabilityType | str") -> str:
        self.require("package_id")
        return f"{self.package_id}::treasury::{CapabilityType.parse(cap).value}"

    def multisig_public_key(self) -> MultisigPublicKey:
        if not self.participants:
            raise ConfigurationError("no multisig participants configured (USER_<n>_PK)", field="participants")
        return compose_multisig(
            [Participant(p.public_key, p.weight) for p in self.participants], self.threshold
        )

    def local_keypairs(self) -> Tuple[Ed25519Keypair, ...]:
        return tuple(p.keypair for p in self.participants if p.keypair is not None)

    def signer_config(self, simple: bool = False) -> SignerConfig:
        """
        Multisig signer over the configured participants (default), or the
        first local participant key as a simple signer.
        """
        keys = self.local_keypairs()
        if not keys:
            raise ConfigurationError("no participant secret keys configured (USER_<n>_SK)", field="participants")
        if simple:
            return SimpleSignerConfig(keys[0])
        return MultisigSignerConfig(self.multisig_public_key(), keys)

    def to_dict(self) -> Dict[str, Any]:
        """Printable view; secret keys are never included."""
        out: Dict[str, Any] = {
            "rpc_url": self.rpc_url,
            "network": self.network.value,
            "package_id": self.package_id,
            "treasury_id": self.treasury_id,
            "consortium_id": self.consortium_id,
            "bascule_id": self.bascule_id,
            "denylist_id": self.denylist_id,
            "test_witness_package_id": self.test_witness_package_id,
            "threshold": self.threshold,
            "participants": [
                {
                    "address": p.address,
                    "public_key": p.public_key.to_base64(),
                    "weight": p.weight,
                    "has_secret": p.keypair is not None,
                }
                for p in self.participants
            ],
            "gas_budget": self.gas_budget,
            "request_timeout": self.request_timeout,
        }
        out["multisig_address"] = self.multisig_public_key().address if self.participants else self.multisig_address
        return out
