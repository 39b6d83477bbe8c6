"""Transaction raw log parsers for wasm-deployer library."""

import json
from typing import Any, Dict, List, Sequence, Tuple, Union

from .exceptions import EventNotFoundError, MalformedLogError


def parse_raw_log(raw_log: str) -> List[Dict[str, Any]]:
    """
    Decode a transaction raw log.

    Args:
        raw_log: JSON text, one entry per message: [{"events": [...]}, ...]

    Returns:
        List of per-message log entries

    Raises:
        MalformedLogError: If raw_log is not a JSON list
    """
    try:
        log = json.loads(raw_log)
    except (TypeError, json.JSONDecodeError) as e:
        raise MalformedLogError(f"raw_log is not valid JSON: {e}", raw_log=raw_log) from e

    if not isinstance(log, list):
        raise MalformedLogError("raw_log is not a list of message logs", raw_log=raw_log)

    return log


def _message_events(log: List[Any], msg_index: int, raw_log: str) -> List[Dict[str, Any]]:
    if msg_index >= len(log):
        raise EventNotFoundError(
            f"raw_log has no entry for message {msg_index}", raw_log=raw_log
        )

    entry = log[msg_index]
    if not isinstance(entry, dict) or not isinstance(entry.get("events", []), list):
        raise MalformedLogError(
            f"raw_log entry {msg_index} has no events list", raw_log=raw_log
        )
    return entry.get("events", [])


def _attribute_value(event: Dict[str, Any], attr_key: str, raw_log: str) -> Any:
    attributes = event.get("attributes", [])
    if not isinstance(attributes, list):
        raise MalformedLogError(
            f"raw_log event {event.get('type')} has no attributes list", raw_log=raw_log
        )
    for attribute in attributes:
        if isinstance(attribute, dict) and attribute.get("key") == attr_key:
            return attribute.get("value")
    return None


def extract_log_value(
    raw_log: str,
    lookups: Sequence[Tuple[str, str]],
    msg_index: int = 0,
) -> str:
    """
    Extract one attribute value from a raw log.

    Lookups are tried in order and the first event carrying the attribute
    wins, which absorbs event renames between ledger versions.

    Args:
        raw_log: Transaction raw log
        lookups: Ordered (event type, attribute key) pairs
        msg_index: Which message of the transaction to inspect

    Returns:
        Attribute value

    Raises:
        MalformedLogError: If raw_log is not well-formed
        EventNotFoundError: If no lookup matches
    """
    events = _message_events(parse_raw_log(raw_log), msg_index, raw_log)

    for event_type, attr_key in lookups:
        for event in events:
            if not isinstance(event, dict) or event.get("type") != event_type:
                continue
            value = _attribute_value(event, attr_key, raw_log)
            if value is not None:
                return str(value)

    wanted = ", ".join(f"{t}.{k}" for t, k in lookups)
    raise EventNotFoundError(f"No event attribute matching {wanted} in raw_log", raw_log=raw_log)


def find_event_attribute(
    raw_log: str,
    event_types: Union[str, Sequence[str]],
    attr_key: str,
    msg_index: int = 0,
) -> str:
    """
    Extract an attribute from the first matching event type.

    Args:
        raw_log: Transaction raw log
        event_types: Event type, or candidate types in priority order
        attr_key: Attribute key to read

    Returns:
        Attribute value

    Raises:
        MalformedLogError: If raw_log is not well-formed
        EventNotFoundError: If no candidate event carries the attribute
    """
    if isinstance(event_types, str):
        event_types = [event_types]
    return extract_log_value(raw_log, [(t, attr_key) for t in event_types], msg_index)
