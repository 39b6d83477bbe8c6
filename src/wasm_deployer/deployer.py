"""Main API for wasm-deployer library."""

import logging
from typing import Any, Dict, List, Optional, Protocol

from . import build
from .constants import (
    DEFAULT_FEE_DENOM,
    DEFAULT_INSTANCE_LABEL,
    DEFAULT_POLL_ATTEMPTS,
    DEFAULT_POLL_INTERVAL,
    INSTANTIATE_LOOKUPS,
    STORE_CODE_LOOKUPS,
)
from .exceptions import (
    ArtifactNotFoundError,
    BroadcastRejectedError,
    ConfigurationError,
    LedgerError,
    ParseError,
    RefsError,
)
from .lcd import Signer
from .messages import MsgInstantiateContract, MsgMigrateCode, MsgStoreCode
from .parsers import extract_log_value
from .paths import wasm_artifact_path
from .refs import Refs
from .types import (
    BroadcastResult,
    ContractBuildInfo,
    DeployConfig,
    InstantiateOptions,
    InstantiateResult,
    TxResult,
)
from .waiter import wait_for_inclusion

logger = logging.getLogger(__name__)


class LedgerClient(Protocol):
    def broadcast_sync(self, tx_bytes: str) -> BroadcastResult: ...

    def tx_info(self, txhash: str) -> Optional[TxResult]: ...

    def account_sequence(self, address: str) -> int: ...


class Deployer:
    """
    Builds, uploads and instantiates contracts on one network.

    Every successful upload or instantiation is written to the shared Refs
    store and saved to disk before the call returns.
    """

    def __init__(
        self,
        network: str,
        config: DeployConfig,
        signer: Signer,
        client: LedgerClient,
        refs: Refs,
        fee_denom: str = DEFAULT_FEE_DENOM,
        poll_attempts: int = DEFAULT_POLL_ATTEMPTS,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        poll_timeout: Optional[float] = None,
    ):
        """
        Initialize the deployer.

        Args:
            network: Network name used as the refs partition key
            config: Parsed deploy configuration
            signer: Signs transactions for the deploying account
            client: Ledger client used to broadcast and query
            refs: Reference store, shared between deployers of one process
            fee_denom: Fee denomination used when none is given
            poll_attempts: Inclusion queries per transaction
            poll_interval: Seconds between inclusion queries
            poll_timeout: Optional wall-clock bound on inclusion waiting
        """
        self.network = network
        self.config = config
        self.signer = signer
        self.client = client
        self.refs = refs
        self.fee_denom = fee_denom
        self.poll_attempts = poll_attempts
        self.poll_interval = poll_interval
        self.poll_timeout = poll_timeout

    def _build_info(self, contract: str) -> ContractBuildInfo:
        if contract not in self.config.contracts:
            raise ConfigurationError(
                f"Contract {contract} build information not found in config file."
            )
        return self.config.contracts[contract]

    def _save_refs(self) -> None:
        self.refs.save_refs(self.config.refs.base_path, self.config.refs.copy_refs_to)

    def _submit(self, contract: str, tx_bytes: str, action: str) -> TxResult:
        """Broadcast a signed transaction and wait for it to land in a block."""
        result = self.client.broadcast_sync(tx_bytes)
        if not result.accepted:
            raise BroadcastRejectedError(
                f"Error {action} for {contract}:\n{result.raw_log}",
                raw_log=result.raw_log,
                txhash=result.txhash or None,
            )

        logger.debug("Broadcast %s for %s as %s", action, contract, result.txhash)
        return wait_for_inclusion(
            self.client,
            result.txhash,
            max_attempts=self.poll_attempts,
            interval=self.poll_interval,
            timeout=self.poll_timeout,
        )

    def build_contract(self, contract: str, log: bool = False) -> None:
        """
        Compile a contract with cargo.

        Raises:
            ConfigurationError: If contract is not in the config
            ToolchainError: If the build fails
        """
        build.build_contract(self._build_info(contract), self.config.root, log=log)

    def optimize_contract(self, contract: str, log: bool = False) -> None:
        """
        Optimize a contract's bytecode.

        Raises:
            ConfigurationError: If contract is not in the config
            ArtifactNotFoundError: If Cargo.toml is missing
            ToolchainError: If the optimizer fails
        """
        build.optimize_contract(self._build_info(contract), self.config.root, log=log)

    def store_code(self, contract: str, migrate_code_id: Optional[int] = None) -> str:
        """
        Upload a contract's optimized bytecode.

        Args:
            contract: Contract name from the config
            migrate_code_id: Replace the code under this ID instead of storing new code

        Returns:
            Code ID assigned by the ledger

        Raises:
            ConfigurationError: If contract is not in the config
            ArtifactNotFoundError: If the wasm artifact is missing
            BroadcastRejectedError: If the node rejects the transaction
            InclusionTimeoutError: If the transaction is not seen in a block in time
            ExecutionFailedError: If the transaction reverted
            ParseError: If the code ID cannot be read from the raw log
        """
        info = self._build_info(contract)
        wasm = wasm_artifact_path(info, self.config.root)
        if not wasm.exists():
            raise ArtifactNotFoundError(f'WASM file "{wasm}" not found in artifacts folder')

        wasm_byte_code = wasm.read_bytes()
        sender = self.signer.address
        if migrate_code_id is not None:
            msg: Any = MsgMigrateCode(sender, int(migrate_code_id), wasm_byte_code)
        else:
            msg = MsgStoreCode(sender, wasm_byte_code)

        logger.info("Uploading bytecode for %s...", contract)
        try:
            tx_bytes = self.signer.sign([msg.to_data()])
            res = self._submit(contract, tx_bytes, "storing wasm file")
            try:
                code_id = extract_log_value(res.raw_log, STORE_CODE_LOOKUPS)
            except ParseError as e:
                raise type(e)(
                    f"Error parsing raw_log from store_code transaction: {e}",
                    raw_log=res.raw_log,
                    txhash=res.txhash,
                ) from e
        except LedgerError:
            logger.error("Uploading bytecode for %s failed", contract)
            raise

        self.refs.set_code_id(self.network, contract, code_id)
        try:
            self._save_refs()
        except (RefsError, OSError):
            logger.error("Saving refs failed; %s on %s has code id %s", contract, self.network, code_id)
            raise
        logger.info("Uploaded bytecode for %s, code id: %s", contract, code_id)
        return code_id

    def instantiate(
        self,
        contract: str,
        init_msg: Any,
        options: Optional[InstantiateOptions] = None,
    ) -> InstantiateResult:
        """
        Create a contract instance from the stored code ID.

        Args:
            contract: Contract name
            init_msg: JSON-serializable init payload
            options: Sequence override, admin, funds and label

        Returns:
            InstantiateResult with the new address and raw log

        Raises:
            ConfigurationError: If no code ID is stored for the contract
            BroadcastRejectedError: If the node rejects the transaction
            InclusionTimeoutError: If the transaction is not seen in a block in time
            ExecutionFailedError: If the transaction reverted
            ParseError: If the address cannot be read from the raw log
        """
        options = options or InstantiateOptions()

        code_id = self.refs.get_code_id(self.network, contract)
        if not code_id:
            raise ConfigurationError(f"Contract {contract} code id not found in refs.")
        try:
            numeric_code_id = int(code_id)
        except ValueError as e:
            raise ConfigurationError(
                f"Contract {contract} has invalid code id {code_id!r} in refs."
            ) from e

        logger.info("Instantiating %s with code id %s...", contract, code_id)

        # Caller-managed sequences allow several in-flight txs from one account
        if options.sequence is not None:
            sequence = options.sequence
        else:
            sequence = self.client.account_sequence(self.signer.address)

        msg = MsgInstantiateContract(
            sender=self.signer.address,
            admin=options.admin,
            code_id=numeric_code_id,
            init_msg=init_msg,
            init_coins=options.coins,
            label=options.label or DEFAULT_INSTANCE_LABEL,
        )
        fee_denoms: List[str] = [self.fee_denom]

        try:
            tx_bytes = self.signer.sign([msg.to_data()], sequence=sequence, fee_denoms=fee_denoms)
            res = self._submit(contract, tx_bytes, "instantiating")
            try:
                address = extract_log_value(res.raw_log, INSTANTIATE_LOOKUPS)
            except ParseError as e:
                raise type(e)(
                    f"Error instantiating {contract}:\n{res.raw_log}",
                    raw_log=res.raw_log,
                    txhash=res.txhash,
                ) from e
        except LedgerError:
            logger.error("Instantiating %s failed", contract)
            raise

        self.refs.set_address(self.network, contract, address)
        self._save_refs()
        logger.info("Instantiated %s with address %s", contract, address)
        return InstantiateResult(address=address, raw_log=res.raw_log)

    def deploy(
        self,
        contract: str,
        init_msg: Any,
        options: Optional[InstantiateOptions] = None,
        build_first: bool = True,
    ) -> InstantiateResult:
        """
        Run the whole pipeline: build, optimize, store code, instantiate.

        Args:
            contract: Contract name
            init_msg: JSON-serializable init payload
            options: Instantiate options
            build_first: Set False to upload an existing artifact as is

        Returns:
            InstantiateResult of the new instance
        """
        if build_first:
            self.build_contract(contract)
            self.optimize_contract(contract)
        self.store_code(contract)
        return self.instantiate(contract, init_msg, options)

    def references(self) -> Dict[str, Dict[str, str]]:
        """Get this network's recorded code IDs and addresses."""
        return self.refs.to_dict().get(self.network, {})
