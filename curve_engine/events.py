"""
Typed decoding of bonding-curve event logs.

Logs are dispatched on their first topic (the keccak hash of the event
signature). Anything that is not a well-formed TokensPurchased or
TokensSold log decodes to UnknownEvent and is meant to be skipped.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

from eth_abi import decode as abi_decode
from eth_abi.exceptions import DecodingError
from eth_utils import keccak, to_bytes

logger = logging.getLogger(__name__)

TOKENS_PURCHASED_SIGNATURE = "TokensPurchased(address,uint256,uint256)"
TOKENS_SOLD_SIGNATURE = "TokensSold(address,uint256,uint256,uint256)"

TOKENS_PURCHASED_TOPIC = "0x" + keccak(text=TOKENS_PURCHASED_SIGNATURE).hex()
TOKENS_SOLD_TOPIC = "0x" + keccak(text=TOKENS_SOLD_SIGNATURE).hex()


@dataclass(frozen=True)
class LogLocation:
    """Where a log sits on chain."""
    tx_hash: str
    log_index: int
    block_number: int
    address: str


@dataclass(frozen=True)
class TokensPurchasedEvent:
    location: LogLocation
    user: str
    eth_amount: int
    tokens_out: int


@dataclass(frozen=True)
class TokensSoldEvent:
    location: LogLocation
    user: str
    tokens_in: int
    eth_out: int
    fee: int


@dataclass(frozen=True)
class UnknownEvent:
    location: LogLocation
    topic: Optional[str]


DecodedEvent = Union[TokensPurchasedEvent, TokensSoldEvent, UnknownEvent]


def _as_bytes(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        return to_bytes(hexstr=value)
    raise TypeError(f"Expected bytes or hex string, got {type(value).__name__}")


def _as_hex(value: Any) -> str:
    if value is None:
        return ""
    return "0x" + _as_bytes(value).hex()


def _topic_address(topic: bytes) -> str:
    if len(topic) != 32:
        raise DecodingError(f"Indexed address topic has {len(topic)} bytes")
    return "0x" + topic[-20:].hex()


def _location(log: Mapping[str, Any]) -> LogLocation:
    address = log.get("address") or ""
    return LogLocation(
        tx_hash=_as_hex(log.get("transactionHash")),
        log_index=int(log.get("logIndex") or 0),
        block_number=int(log.get("blockNumber") or 0),
        address=address.lower(),
    )


def _decode_purchased(log: Mapping[str, Any], topics: list[bytes]) -> TokensPurchasedEvent:
    eth_amount, tokens_out = abi_decode(["uint256", "uint256"], _as_bytes(log["data"]))
    return TokensPurchasedEvent(
        location=_location(log),
        user=_topic_address(topics[1]),
        eth_amount=eth_amount,
        tokens_out=tokens_out,
    )


def _decode_sold(log: Mapping[str, Any], topics: list[bytes]) -> TokensSoldEvent:
    tokens_in, eth_out, fee = abi_decode(
        ["uint256", "uint256", "uint256"], _as_bytes(log["data"])
    )
    return TokensSoldEvent(
        location=_location(log),
        user=_topic_address(topics[1]),
        tokens_in=tokens_in,
        eth_out=eth_out,
        fee=fee,
    )


_DECODERS: dict[str, Callable[[Mapping[str, Any], list[bytes]], DecodedEvent]] = {
    TOKENS_PURCHASED_TOPIC: _decode_purchased,
    TOKENS_SOLD_TOPIC: _decode_sold,
}


def decode_log(log: Mapping[str, Any]) -> DecodedEvent:
    """
    Decode a raw log into a typed event.

    Args:
        log: Raw log as returned by eth_getLogs or a transaction receipt

    Returns:
        TokensPurchasedEvent, TokensSoldEvent, or UnknownEvent
    """
    topics = [_as_bytes(t) for t in log.get("topics") or []]
    topic = _as_hex(topics[0]) if topics else None

    decoder = _DECODERS.get(topic) if topic else None
    if decoder is None:
        return UnknownEvent(location=_location(log), topic=topic)

    try:
        if len(topics) < 2:
            raise DecodingError("Missing indexed user topic")
        return decoder(log, topics)
    except (DecodingError, KeyError) as e:
        logger.debug(f"Malformed log for topic {topic}: {e}")
        return UnknownEvent(location=_location(log), topic=topic)


def decode_logs(
    logs: list[Mapping[str, Any]],
    address: Optional[str] = None,
) -> list[DecodedEvent]:
    """
    Decode logs, optionally keeping only those emitted by `address`.

    Unknown logs are dropped.
    """
    events = []
    for log in logs:
        if address is not None and (log.get("address") or "").lower() != address.lower():
            continue
        event = decode_log(log)
        if isinstance(event, UnknownEvent):
            continue
        events.append(event)
    return events
