"""Block inclusion polling for wasm-deployer library."""

import logging
import time
from typing import Callable, Optional, Protocol

from .constants import DEFAULT_POLL_ATTEMPTS, DEFAULT_POLL_INTERVAL
from .exceptions import ExecutionFailedError, InclusionTimeoutError, LedgerClientError
from .types import PendingTransaction, TxResult

logger = logging.getLogger(__name__)


class TxQuery(Protocol):
    def tx_info(self, txhash: str) -> Optional[TxResult]: ...


def wait_for_inclusion(
    client: TxQuery,
    txhash: str,
    max_attempts: int = DEFAULT_POLL_ATTEMPTS,
    interval: float = DEFAULT_POLL_INTERVAL,
    timeout: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> TxResult:
    """
    Poll the ledger until a broadcast transaction is included in a block.

    Args:
        client: Ledger client; tx_info() returns None until inclusion
        txhash: Hash returned by the broadcast
        max_attempts: Number of queries before giving up
        interval: Seconds to sleep between queries
        timeout: Optional wall-clock budget in seconds
        sleep: Sleep function (injectable for tests)
        clock: Monotonic clock (injectable for tests)

    Returns:
        TxResult of the included transaction

    Raises:
        ExecutionFailedError: If the transaction was included but failed
        InclusionTimeoutError: If the budget ran out before inclusion
    """
    pending = PendingTransaction(txhash=txhash, submitted_at=clock())

    attempt = 0
    for attempt in range(1, max_attempts + 1):
        try:
            result = client.tx_info(pending.txhash)
        except LedgerClientError as e:
            # Flaky endpoint, count it as a miss
            logger.warning("Querying tx %s failed (attempt %d): %s", txhash, attempt, e)
            result = None

        if result is not None:
            if not result.succeeded:
                raise ExecutionFailedError(
                    f"Transaction {txhash} failed with code {result.code}:\n{result.raw_log}",
                    raw_log=result.raw_log,
                    txhash=txhash,
                )
            logger.debug("Tx %s included at height %d", txhash, result.height)
            return result

        if attempt == max_attempts:
            break
        if timeout is not None and clock() - pending.submitted_at + interval > timeout:
            break

        logger.debug("Tx %s not included yet (%d/%d)", txhash, attempt, max_attempts)
        sleep(interval)

    raise InclusionTimeoutError(
        f"Transaction {txhash} not included in a block after {attempt} attempts. "
        "It may still be included later; check before resubmitting.",
        txhash=txhash,
    )
