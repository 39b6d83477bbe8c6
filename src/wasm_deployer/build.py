"""Build and optimize toolchain glue for wasm-deployer library."""

import logging
import shlex
import subprocess
import tomllib
from pathlib import Path
from string import Template
from typing import Dict, List, Optional, Union

from .constants import OPTIMIZE_PLACEHOLDERS, OPTIMIZER_IMAGES
from .exceptions import ArtifactNotFoundError, ConfigurationError, ToolchainError
from .paths import contract_dir, host_arch
from .types import ContractBuildInfo

logger = logging.getLogger(__name__)


def _run(cmd: Union[List[str], str], cwd: Path, what: str, log: bool) -> None:
    shell = isinstance(cmd, str)
    try:
        subprocess.run(
            cmd,
            cwd=cwd,
            shell=shell,
            check=True,
            capture_output=not log,
            text=True,
        )
    except FileNotFoundError as e:
        raise ToolchainError(f"Failed to {what}: {e}") from e
    except subprocess.CalledProcessError as e:
        raise ToolchainError(f"Failed to {what}: {e.stderr or e}") from e


def render_optimize_command(template: str, values: Dict[str, str]) -> str:
    """
    Substitute placeholders in a custom optimize command.

    Only ${contract} and ${workspace} are recognised, values are shell-quoted.

    Args:
        template: Command from [package.metadata.scripts] optimize
        values: Placeholder values

    Returns:
        Command line ready for the shell

    Raises:
        ConfigurationError: If the template uses any other placeholder
    """
    allowed = {k: shlex.quote(v) for k, v in values.items() if k in OPTIMIZE_PLACEHOLDERS}
    try:
        return Template(template).substitute(allowed)
    except (KeyError, ValueError) as e:
        raise ConfigurationError(
            f"Invalid placeholder in optimize command {template!r}: {e}; "
            f"allowed are {', '.join(OPTIMIZE_PLACEHOLDERS)}"
        ) from e


def read_optimize_script(cargo_file: Path) -> Optional[str]:
    """Get the custom optimize command from Cargo.toml, if any."""
    with open(cargo_file, "rb") as f:
        cargo = tomllib.load(f)
    return cargo.get("package", {}).get("metadata", {}).get("scripts", {}).get("optimize")


def default_optimize_command(
    contract: str, folder: Path, arch: Optional[str] = None
) -> List[str]:
    """Get the docker rust-optimizer command for the host architecture."""
    image = OPTIMIZER_IMAGES[arch or host_arch()]
    return [
        "docker", "run", "--rm",
        "-v", f"{folder}:/code",
        "--mount", f"type=volume,source={contract}_cache,target=/code/target",
        "--mount", "type=volume,source=registry_cache,target=/usr/local/cargo/registry",
        image,
    ]


def build_contract(info: ContractBuildInfo, root: Union[Path, str], log: bool = False) -> None:
    """
    Compile a contract to wasm with cargo.

    Raises:
        ToolchainError: If cargo fails
    """
    folder = contract_dir(info, root)
    logger.info("Building %s...", info.name)
    _run(["cargo", "wasm"], folder, f"build {info.name}", log)
    logger.info("Built %s successfully.", info.name)


def optimize_contract(
    info: ContractBuildInfo,
    root: Union[Path, str],
    log: bool = False,
    arch: Optional[str] = None,
) -> None:
    """
    Produce the optimized artifact of a contract.

    Uses [package.metadata.scripts] optimize from Cargo.toml when present,
    otherwise the containerized rust-optimizer.

    Raises:
        ArtifactNotFoundError: If Cargo.toml is missing
        ConfigurationError: If the custom command has unknown placeholders
        ToolchainError: If the optimizer fails
    """
    folder = contract_dir(info, root)
    cargo_file = folder / "Cargo.toml"
    if not cargo_file.exists():
        raise ArtifactNotFoundError(f"Cargo.toml not found in {folder}")

    script = read_optimize_script(cargo_file)
    if script:
        cmd: Union[List[str], str] = render_optimize_command(
            script, {"contract": info.name, "workspace": str(Path(root).absolute())}
        )
    else:
        cmd = default_optimize_command(info.name, folder, arch)

    logger.info("Optimizing %s...", info.name)
    _run(cmd, folder, f"optimize {info.name}", log)
    logger.info("Optimized %s successfully.", info.name)
