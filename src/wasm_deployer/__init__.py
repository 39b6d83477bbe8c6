"""
wasm-deployer: Python library for deploying wasm smart contracts and tracking their references
"""

from importlib.metadata import PackageNotFoundError, version

from .config import load_config
from .deployer import Deployer
from .exceptions import (
    ArtifactNotFoundError,
    BroadcastRejectedError,
    ConfigurationError,
    DeploymentError,
    EventNotFoundError,
    ExecutionFailedError,
    InclusionTimeoutError,
    LedgerClientError,
    LedgerError,
    MalformedLogError,
    ParseError,
    RefsError,
    ToolchainError,
)
from .lcd import LCDClient, Signer
from .parsers import extract_log_value, find_event_attribute
from .refs import Refs
from .types import InstantiateOptions, InstantiateResult, TxResult
from .waiter import wait_for_inclusion

try:
    __version__ = version("wasm-deployer")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "Deployer",
    "Refs",
    "LCDClient",
    "Signer",
    "load_config",
    "wait_for_inclusion",
    "extract_log_value",
    "find_event_attribute",
    "InstantiateOptions",
    "InstantiateResult",
    "TxResult",
    "DeploymentError",
    "ConfigurationError",
    "ArtifactNotFoundError",
    "RefsError",
    "LedgerClientError",
    "ToolchainError",
    "LedgerError",
    "BroadcastRejectedError",
    "InclusionTimeoutError",
    "ExecutionFailedError",
    "ParseError",
    "MalformedLogError",
    "EventNotFoundError",
]
