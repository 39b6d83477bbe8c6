"""Shared pytest fixtures for wasm-deployer tests."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from wasm_deployer.config import parse_config
from wasm_deployer.paths import wasm_artifact_path
from wasm_deployer.refs import Refs
from wasm_deployer.types import BroadcastResult, DeployConfig, TxResult


class FakeSigner:
    """Signer double that records what it was asked to sign."""

    def __init__(self, address: str = "terra1deployer"):
        self.address = address
        self.calls: List[Dict[str, Any]] = []

    def sign(self, msgs, sequence=None, fee_denoms=None) -> str:
        self.calls.append({"msgs": msgs, "sequence": sequence, "fee_denoms": fee_denoms})
        return f"signed-tx-{len(self.calls)}"


class FakeLedger:
    """
    Ledger double.

    Each broadcast gets the next queued (broadcast code, tx code, raw_log)
    outcome; tx_info reports "not included" ``pending_polls`` times first.
    """

    def __init__(self, sequence: int = 5, pending_polls: int = 0):
        self.sequence = sequence
        self.pending_polls = pending_polls
        self.outcomes: List[Dict[str, Any]] = []
        self.broadcasts: List[str] = []
        self.polls: Dict[str, int] = {}
        self.sequence_queries = 0
        self._txs: Dict[str, Dict[str, Any]] = {}

    def queue(self, raw_log: str, code: int = 0, broadcast_code: int = 0) -> None:
        self.outcomes.append({"raw_log": raw_log, "code": code, "broadcast_code": broadcast_code})

    def broadcast_sync(self, tx_bytes: str) -> BroadcastResult:
        self.broadcasts.append(tx_bytes)
        outcome = self.outcomes.pop(0)
        txhash = f"TXHASH{len(self.broadcasts)}"
        if outcome["broadcast_code"]:
            return BroadcastResult(
                txhash=txhash, code=outcome["broadcast_code"], raw_log=outcome["raw_log"]
            )
        self._txs[txhash] = outcome
        return BroadcastResult(txhash=txhash)

    def tx_info(self, txhash: str) -> Optional[TxResult]:
        self.polls[txhash] = self.polls.get(txhash, 0) + 1
        if self.polls[txhash] <= self.pending_polls:
            return None
        outcome = self._txs[txhash]
        return TxResult(
            txhash=txhash, height=100, code=outcome["code"], raw_log=outcome["raw_log"]
        )

    def account_sequence(self, address: str) -> int:
        self.sequence_queries += 1
        return self.sequence


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_refs_json(fixtures_dir: Path) -> Dict[str, Any]:
    """Load and return the sample refs fixture."""
    with open(fixtures_dir / "sample_refs.json") as f:
        return json.load(f)


@pytest.fixture
def temp_refs_file(tmp_path: Path, sample_refs_json: Dict[str, Any]) -> Path:
    """Create a temporary refs.json file with sample data."""
    refs_path = tmp_path / "refs.json"
    with open(refs_path, "w") as f:
        json.dump(sample_refs_json, f, indent=2)
    return refs_path


@pytest.fixture
def store_code_raw_log(fixtures_dir: Path) -> str:
    """Raw log of a store_code transaction assigning code id 42."""
    return (fixtures_dir / "store_code_raw_log.json").read_text().strip()


@pytest.fixture
def instantiate_raw_log(fixtures_dir: Path) -> str:
    """Raw log of an instantiate transaction."""
    return (fixtures_dir / "instantiate_raw_log.json").read_text().strip()


@pytest.fixture
def deploy_config(tmp_path: Path) -> DeployConfig:
    """Config for a 'vault' contract whose optimized artifact exists."""
    config = parse_config(
        {
            "contracts": {
                "vault": {"src": "contracts/vault"},
                "unbuilt": {"src": "contracts/unbuilt"},
            },
            "refs": {"base_path": "refs.json", "copy_refs_to": ["frontend/refs.json"]},
        },
        tmp_path,
    )
    wasm = wasm_artifact_path(config.contracts["vault"], config.root)
    wasm.parent.mkdir(parents=True)
    wasm.write_bytes(b"\x00asm\x01\x00\x00\x00")
    return config


@pytest.fixture
def signer() -> FakeSigner:
    return FakeSigner()


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def refs(deploy_config: DeployConfig) -> Refs:
    return Refs.load(deploy_config.refs.base_path)
