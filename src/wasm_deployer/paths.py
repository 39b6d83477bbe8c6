"""Path management utilities for wasm-deployer library."""

import platform
from pathlib import Path
from typing import Optional, Union

from .types import ContractBuildInfo


def host_arch() -> str:
    """
    Get the host CPU architecture in optimizer terms.

    Returns:
        "arm64" on ARM hosts, "x86_64" otherwise
    """
    machine = platform.machine().lower()
    if machine in ("arm64", "aarch64"):
        return "arm64"
    return "x86_64"


def get_default_config_path() -> Path:
    """
    Get default deploy config path.

    Returns:
        Path to ./config.json
    """
    return Path.cwd() / "config.json"


def contract_dir(info: ContractBuildInfo, root: Union[Path, str]) -> Path:
    """
    Get the source folder of a contract.

    Args:
        info: Contract build information
        root: Directory the config's relative paths are resolved against

    Returns:
        Absolute path to the contract folder
    """
    return (Path(root) / info.src).absolute()


def wasm_artifact_name(contract: str, arch: Optional[str] = None) -> str:
    """
    Get the optimizer's output file name for a contract.

    Args:
        contract: Contract name, e.g. "token-vault"
        arch: Host architecture (defaults to host_arch())

    Returns:
        File name, e.g. "token_vault.wasm" or "token_vault-arm64.wasm"
    """
    if arch is None:
        arch = host_arch()

    filename = contract.replace("-", "_")
    if arch == "arm64":
        filename += "-arm64"
    return filename + ".wasm"


def wasm_artifact_path(
    info: ContractBuildInfo, root: Union[Path, str], arch: Optional[str] = None
) -> Path:
    """
    Get the deterministic path of a contract's optimized bytecode.

    Args:
        info: Contract build information
        root: Directory the config's relative paths are resolved against
        arch: Host architecture (defaults to host_arch())

    Returns:
        Path to <src>/artifacts/<artifact name>
    """
    return contract_dir(info, root) / "artifacts" / wasm_artifact_name(info.name, arch)
