"""Reference store for deployed code IDs and contract addresses."""

import json
import logging
import shutil
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from .exceptions import RefsError

logger = logging.getLogger(__name__)

CODE_ID_KEY = "codeId"
ADDRESS_KEY = "contractAddress"

RefsData = Dict[str, Dict[str, Dict[str, str]]]


def load_refs_file(path: Union[Path, str]) -> RefsData:
    """
    Load a reference file or return empty dict.

    Args:
        path: Path to the refs JSON file

    Returns:
        Dictionary mapping network -> contract -> {codeId, contractAddress}
        Empty dict if the file doesn't exist

    Raises:
        RefsError: If the file exists but is not a network -> contract -> object mapping
    """
    try:
        with open(path) as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except json.JSONDecodeError as e:
        raise RefsError(f"Reference file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise RefsError(f"Reference file {path} must contain a JSON object")

    for network, contracts in data.items():
        if not isinstance(contracts, dict):
            raise RefsError(f"Reference file {path}: network {network!r} must map to an object")
        for name, entry in contracts.items():
            if not isinstance(entry, dict):
                raise RefsError(
                    f"Reference file {path}: {network}.{name} must map to an object"
                )
    return data


def merge_refs(base: RefsData, overlay: RefsData) -> RefsData:
    """
    Merge two refs documents field by field, overlay winning.

    Networks and contracts present only in ``base`` are kept.
    """
    merged: RefsData = {
        network: {name: dict(entry) for name, entry in contracts.items()}
        for network, contracts in base.items()
    }
    for network, contracts in overlay.items():
        network_refs = merged.setdefault(network, {})
        for name, entry in contracts.items():
            network_refs.setdefault(name, {}).update(entry)
    return merged


class Refs:
    """
    In-memory table of deployment outputs keyed by network and contract.

    Load once at process start, hand the same object to every Deployer and
    call save_refs() after each change. Writes from threads of one process
    are serialised; several processes sharing one file need an external lock.
    """

    def __init__(self, data: Optional[RefsData] = None):
        self._refs: RefsData = merge_refs({}, data or {})
        self._lock = threading.Lock()

    @classmethod
    def load(cls, path: Union[Path, str]) -> "Refs":
        """
        Load a store from disk; a missing file gives an empty store.

        Raises:
            RefsError: If the file exists but is unreadable
        """
        return cls(load_refs_file(path))

    def _entry(self, network: str, contract: str) -> Dict[str, str]:
        return self._refs.get(network, {}).get(contract, {})

    def _set(self, network: str, contract: str, key: str, value: str) -> None:
        with self._lock:
            self._refs.setdefault(network, {}).setdefault(contract, {})[key] = str(value)

    def get_code_id(self, network: str, contract: str) -> Optional[str]:
        """Get the latest stored code ID, or None."""
        return self._entry(network, contract).get(CODE_ID_KEY)

    def set_code_id(self, network: str, contract: str, code_id: str) -> None:
        """Record a code ID, replacing any previous one."""
        self._set(network, contract, CODE_ID_KEY, code_id)

    def get_address(self, network: str, contract: str) -> Optional[str]:
        """Get the latest contract address, or None."""
        return self._entry(network, contract).get(ADDRESS_KEY)

    def set_address(self, network: str, contract: str, address: str) -> None:
        """Record a contract address, replacing any previous one."""
        self._set(network, contract, ADDRESS_KEY, address)

    def networks(self) -> List[str]:
        return sorted(self._refs.keys())

    def contracts(self, network: str) -> List[str]:
        return sorted(self._refs.get(network, {}).keys())

    def to_dict(self) -> RefsData:
        """Get a deep copy of the snapshot."""
        with self._lock:
            return merge_refs({}, self._refs)

    def save_refs(
        self,
        base_path: Union[Path, str],
        copy_refs_to: Iterable[Union[Path, str]] = (),
    ) -> Path:
        """
        Write the snapshot to disk and mirror it to copy targets.

        The file at ``base_path`` is re-read and the in-memory snapshot is
        merged over it, so entries recorded by earlier runs survive.

        Args:
            base_path: Primary refs file
            copy_refs_to: Extra locations receiving an identical copy;
                          an existing directory gets a file of the same name

        Returns:
            Path of the primary refs file

        Raises:
            RefsError: If the existing primary file is unreadable
        """
        base_path = Path(base_path)

        with self._lock:
            merged = merge_refs(load_refs_file(base_path), self._refs)
            self._refs = merged

            base_path.parent.mkdir(parents=True, exist_ok=True)
            with open(base_path, "w") as f:
                json.dump(merged, f, indent=2, sort_keys=True)
                f.write("\n")

            for target in copy_refs_to:
                target = Path(target)
                if target.is_dir():
                    target = target / base_path.name
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(base_path, target)
                logger.debug("Copied refs to %s", target)

        logger.debug("Saved refs to %s", base_path)
        return base_path
