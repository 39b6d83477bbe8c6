"""Custom exception classes for wasm-deployer library."""

from typing import Optional


class DeploymentError(Exception):
    """Base exception for deployment-related errors."""

    pass


class ConfigurationError(DeploymentError, ValueError):
    """Raised when build information or a required reference is missing."""

    pass


class ArtifactNotFoundError(DeploymentError, FileNotFoundError):
    """Raised when a bytecode artifact or Cargo.toml is not found."""

    pass


class RefsError(DeploymentError, ValueError):
    """Raised when the reference file exists but cannot be read."""

    pass


class LedgerClientError(DeploymentError, RuntimeError):
    """Raised when the ledger endpoint cannot be reached or answers garbage."""

    pass


class ToolchainError(DeploymentError, RuntimeError):
    """Raised when a build or optimize command exits with an error."""

    pass


class LedgerError(DeploymentError):
    """
    Base exception for failures reported by the ledger itself.

    The ledger's diagnostic text is kept verbatim in ``raw_log`` so an
    operator can tell an on-chain revert from a problem in this tool.
    """

    def __init__(
        self,
        message: str,
        raw_log: Optional[str] = None,
        txhash: Optional[str] = None,
    ):
        super().__init__(message)
        self.raw_log = raw_log
        self.txhash = txhash


class BroadcastRejectedError(LedgerError):
    """Raised when the node rejects a transaction at broadcast time."""

    pass


class InclusionTimeoutError(LedgerError, TimeoutError):
    """
    Raised when a broadcast transaction is not seen in a block in time.

    The transaction may still land later, so retrying the whole operation
    can submit it twice.
    """

    pass


class ExecutionFailedError(LedgerError):
    """Raised when a transaction was included in a block but reverted."""

    pass


class ParseError(LedgerError, ValueError):
    """Raised when a value cannot be extracted from a transaction raw log."""

    pass


class MalformedLogError(ParseError):
    """Raised when a raw log is not a well-formed JSON list of messages."""

    pass


class EventNotFoundError(ParseError):
    """Raised when the expected event or attribute is absent from a raw log."""

    pass
