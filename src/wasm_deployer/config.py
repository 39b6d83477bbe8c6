"""Deploy configuration loading for wasm-deployer library."""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .constants import CONFIG_PATH_ENV
from .exceptions import ConfigurationError
from .paths import get_default_config_path
from .types import ContractBuildInfo, DeployConfig, RefsConfig


def parse_config(data: Dict[str, Any], root: Union[Path, str]) -> DeployConfig:
    """
    Build a DeployConfig from the decoded config document.

    Args:
        data: Decoded JSON document
        root: Directory relative paths are resolved against

    Returns:
        DeployConfig object

    Raises:
        ConfigurationError: If required sections are missing or mistyped
    """
    root = Path(root).absolute()

    contracts_data = data.get("contracts")
    if not isinstance(contracts_data, dict):
        raise ConfigurationError("Config is missing the 'contracts' section")

    contracts: Dict[str, ContractBuildInfo] = {}
    for name, build_info in contracts_data.items():
        if not isinstance(build_info, dict) or "src" not in build_info:
            raise ConfigurationError(f"Contract {name} has no 'src' in config file")
        contracts[name] = ContractBuildInfo(name=name, src=build_info["src"])

    refs_data = data.get("refs")
    if not isinstance(refs_data, dict) or "base_path" not in refs_data:
        raise ConfigurationError("Config is missing 'refs.base_path'")

    copy_refs_to = refs_data.get("copy_refs_to", [])
    if isinstance(copy_refs_to, str):
        copy_refs_to = [copy_refs_to]

    refs = RefsConfig(
        base_path=root / refs_data["base_path"],
        copy_refs_to=[root / p for p in copy_refs_to],
    )

    return DeployConfig(root=root, contracts=contracts, refs=refs)


def load_config(config_path: Optional[Union[Path, str]] = None) -> DeployConfig:
    """
    Load the deploy configuration file.

    Args:
        config_path: Path to config JSON
                     (defaults to $WASM_DEPLOYER_CONFIG, then ./config.json)

    Returns:
        DeployConfig with paths resolved against the config file's directory

    Raises:
        ConfigurationError: If the file is missing, not JSON, or incomplete
    """
    if config_path is None:
        config_path = os.environ.get(CONFIG_PATH_ENV) or get_default_config_path()

    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Deploy config not found at {path}")

    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Deploy config {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Deploy config {path} must be a JSON object")

    return parse_config(data, path.parent)
