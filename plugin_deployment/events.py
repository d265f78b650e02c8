from typing import Any, Dict, Iterable, List, Optional

from eth_abi.exceptions import DecodingError
from eth_utils import is_same_address
from hexbytes import HexBytes
from web3 import Web3
from web3.datastructures import AttributeDict
from web3.exceptions import LogTopicError, MismatchedABI, Web3Exception

_DECODE_ERRORS = (
    MismatchedABI,
    LogTopicError,
    Web3Exception,
    DecodingError,
    KeyError,
    TypeError,
    ValueError,
)

# decoding needs no provider
_w3 = Web3()


def get_event(abi: List[Dict], event_name: str):
    """Returns the web3 contract event `event_name` of an ABI, unbound to any address."""
    contract = _w3.eth.contract(abi=abi)
    return getattr(contract.events, event_name)


def normalize_log(log: Dict[str, Any]) -> AttributeDict:
    """Returns a log entry in the shape web3's event decoder expects."""
    return AttributeDict(
        {
            "address": log["address"],
            "topics": [HexBytes(topic) for topic in log.get("topics") or []],
            "data": HexBytes(log.get("data") or b""),
            "logIndex": log.get("logIndex", 0),
            "transactionIndex": log.get("transactionIndex", 0),
            "transactionHash": HexBytes(log.get("transactionHash") or b""),
            "blockHash": HexBytes(log.get("blockHash") or b""),
            "blockNumber": log.get("blockNumber", 0),
        }
    )


def decode_log(event, log: Dict[str, Any]) -> Optional[AttributeDict]:
    """Decodes a single log against a contract event, or returns None if it does not match."""
    try:
        return event().process_log(normalize_log(log))
    except _DECODE_ERRORS:
        return None


def decode_events(
    logs: Iterable[Dict[str, Any]], event, emitter: Optional[str] = None
) -> List[AttributeDict]:
    """Decodes all logs matching `event`, in receipt order, optionally from a single emitter."""
    decoded = list()
    for log in logs:
        if emitter is not None and not is_same_address(log["address"], emitter):
            continue
        event_data = decode_log(event, log)
        if event_data is not None:
            decoded.append(event_data)
    return decoded
