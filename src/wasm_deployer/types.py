"""Data types and dataclasses for wasm-deployer library."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

# Coins are given either as "1000uluna,5uusd" or as {"uluna": 1000}
CoinsInput = Union[str, Dict[str, int]]


@dataclass
class PendingTransaction:
    """A broadcast transaction that has not been seen in a block yet."""

    txhash: str
    submitted_at: float  # time.monotonic() at broadcast


@dataclass
class BroadcastResult:
    """Node answer to a sync broadcast."""

    txhash: str
    code: int = 0
    raw_log: str = ""
    codespace: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.code == 0


@dataclass
class TxResult:
    """Execution result of a transaction included in a block."""

    txhash: str
    height: int
    code: int = 0
    raw_log: str = ""
    logs: Optional[List[Dict[str, Any]]] = None

    @property
    def succeeded(self) -> bool:
        return self.code == 0


@dataclass
class InstantiateOptions:
    """Optional settings for instantiating a contract."""

    sequence: Optional[int] = None  # Manual account sequence
    admin: Optional[str] = None  # Migration admin address
    coins: Optional[CoinsInput] = None  # Funds sent with the init message
    label: Optional[str] = None  # Instance label


@dataclass
class InstantiateResult:
    """Address of a new contract instance plus the raw log it came from."""

    address: str
    raw_log: str


@dataclass
class ContractBuildInfo:
    """Build information for one contract from the deploy config."""

    name: str
    src: str  # Contract source folder, relative to the config root


@dataclass
class RefsConfig:
    """Where the reference file lives and where it is mirrored to."""

    base_path: Path
    copy_refs_to: List[Path] = field(default_factory=list)


@dataclass
class DeployConfig:
    """Parsed deploy configuration file."""

    root: Path  # Directory relative paths are resolved against
    contracts: Dict[str, ContractBuildInfo]
    refs: RefsConfig
