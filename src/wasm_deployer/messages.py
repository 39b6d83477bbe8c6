"""Ledger messages built by the deployer."""

import base64
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .types import CoinsInput

_COIN_RE = re.compile(r"^(\d+)([a-zA-Z][a-zA-Z0-9/:._-]{1,127})$")


def parse_coins(coins: Optional[CoinsInput]) -> List[Dict[str, str]]:
    """
    Normalize coins to the ledger's [{"denom", "amount"}] form.

    Args:
        coins: "1000uluna,5uusd", {"uluna": 1000}, or None

    Returns:
        List of coin dicts sorted by denom

    Raises:
        ValueError: If a coin string cannot be parsed
    """
    if not coins:
        return []

    if isinstance(coins, str):
        amounts: Dict[str, int] = {}
        for part in coins.split(","):
            match = _COIN_RE.match(part.strip())
            if match is None:
                raise ValueError(f"Invalid coin: {part!r}")
            amounts[match.group(2)] = amounts.get(match.group(2), 0) + int(match.group(1))
    else:
        amounts = {denom: int(amount) for denom, amount in coins.items()}

    return [{"denom": d, "amount": str(amounts[d])} for d in sorted(amounts)]


@dataclass
class MsgStoreCode:
    """Upload new contract bytecode."""

    sender: str
    wasm_byte_code: bytes

    def to_data(self) -> Dict[str, Any]:
        return {
            "@type": "/terra.wasm.v1beta1.MsgStoreCode",
            "sender": self.sender,
            "wasm_byte_code": base64.b64encode(self.wasm_byte_code).decode(),
        }


@dataclass
class MsgMigrateCode:
    """Replace the bytecode stored under an existing code ID."""

    sender: str
    code_id: int
    wasm_byte_code: bytes

    def to_data(self) -> Dict[str, Any]:
        return {
            "@type": "/terra.wasm.v1beta1.MsgMigrateCode",
            "sender": self.sender,
            "code_id": str(self.code_id),
            "wasm_byte_code": base64.b64encode(self.wasm_byte_code).decode(),
        }


@dataclass
class MsgInstantiateContract:
    """Create a contract instance from a stored code ID."""

    sender: str
    admin: Optional[str]
    code_id: int
    init_msg: Any
    init_coins: Optional[CoinsInput] = None
    label: Optional[str] = None

    def to_data(self) -> Dict[str, Any]:
        return {
            "@type": "/terra.wasm.v1beta1.MsgInstantiateContract",
            "sender": self.sender,
            "admin": self.admin or "",
            "code_id": str(self.code_id),
            "init_msg": self.init_msg,
            "init_coins": parse_coins(self.init_coins),
            "label": self.label or "",
        }
