"""LCD (REST) ledger client for wasm-deployer library."""

import os
from typing import Any, Dict, List, Optional, Protocol

import requests

from .constants import DEFAULT_REQUEST_TIMEOUT, LCD_URL_ENV
from .exceptions import ConfigurationError, LedgerClientError
from .types import BroadcastResult, TxResult


class Signer(Protocol):
    """
    Signs transactions for one account.

    Key handling and wire encoding live outside this library; sign() must
    return base64-encoded transaction bytes ready for broadcast.
    """

    address: str

    def sign(
        self,
        msgs: List[Dict[str, Any]],
        sequence: Optional[int] = None,
        fee_denoms: Optional[List[str]] = None,
    ) -> str: ...


class LCDClient:
    """Minimal LCD client: broadcast, transaction lookup, account sequence."""

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.url = url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_env(cls, **kwargs: Any) -> "LCDClient":
        """
        Create a client from $WASM_DEPLOYER_LCD_URL.

        Raises:
            ConfigurationError: If the variable is not set
        """
        url = os.environ.get(LCD_URL_ENV)
        if not url:
            raise ConfigurationError(f"LCD URL required: set ${LCD_URL_ENV}")
        return cls(url, **kwargs)

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        try:
            return self.session.request(
                method, f"{self.url}{path}", timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            raise LedgerClientError(f"Network error during LCD call: {e}") from e

    @staticmethod
    def _json(response: requests.Response) -> Dict[str, Any]:
        if response.status_code != 200:
            raise LedgerClientError(
                f"LCD request failed with status {response.status_code}: {response.text}"
            )
        try:
            return response.json()
        except ValueError as e:
            raise LedgerClientError(f"LCD returned invalid JSON: {e}") from e

    def broadcast_sync(self, tx_bytes: str) -> BroadcastResult:
        """
        Submit a signed transaction and wait only for mempool acceptance.

        Args:
            tx_bytes: Base64-encoded signed transaction

        Returns:
            BroadcastResult; a non-zero code means the node rejected it
        """
        response = self._request(
            "POST",
            "/cosmos/tx/v1beta1/txs",
            json={"tx_bytes": tx_bytes, "mode": "BROADCAST_MODE_SYNC"},
        )
        tx_response = self._json(response).get("tx_response", {})

        return BroadcastResult(
            txhash=tx_response.get("txhash", ""),
            code=int(tx_response.get("code", 0)),
            raw_log=tx_response.get("raw_log", ""),
            codespace=tx_response.get("codespace") or None,
        )

    def tx_info(self, txhash: str) -> Optional[TxResult]:
        """
        Look up a transaction by hash.

        Returns:
            TxResult if included in a block, None if not (yet) known
        """
        response = self._request("GET", f"/cosmos/tx/v1beta1/txs/{txhash}")

        # Unknown hashes come back as 404, or 400 on older nodes
        if response.status_code == 400 and "not found" in response.text.lower():
            return None
        if response.status_code == 404:
            return None

        tx_response = self._json(response).get("tx_response")
        if not tx_response:
            return None

        return TxResult(
            txhash=tx_response.get("txhash", txhash),
            height=int(tx_response.get("height", 0)),
            code=int(tx_response.get("code", 0)),
            raw_log=tx_response.get("raw_log", ""),
            logs=tx_response.get("logs"),
        )

    def account_sequence(self, address: str) -> int:
        """
        Get the current on-chain sequence of an account.

        Raises:
            LedgerClientError: If the account is unknown or the answer is malformed
        """
        response = self._request("GET", f"/cosmos/auth/v1beta1/accounts/{address}")
        account = self._json(response).get("account", {})

        # Vesting accounts wrap the base account
        while "sequence" not in account:
            for key in ("base_account", "base_vesting_account"):
                if key in account:
                    account = account[key]
                    break
            else:
                raise LedgerClientError(f"No sequence in account response for {address}")

        return int(account["sequence"])
