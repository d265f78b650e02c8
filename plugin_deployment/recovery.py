"""
Recovery of a freshly created plugin repo address from a `createPluginRepo` receipt.

Strategies run in order and the first address found wins:

1. decode the receipt logs against the PluginRepoRegistry interface;
2. ask the name service for the plugin repo's ENS domain;
3. scan log topics for a 20-byte word that has contract code on-chain.

The last one is a heuristic: an unrelated contract address appearing in an
earlier topic is accepted just the same.
"""

from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional, Tuple

from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address
from hexbytes import HexBytes

from plugin_deployment.abis import PLUGIN_REPO_REGISTRY_ABI
from plugin_deployment.constants import GAS_LIMIT
from plugin_deployment.errors import AddressNotRecovered
from plugin_deployment.events import decode_events, get_event
from plugin_deployment.fees import build_overrides, get_fee_data
from plugin_deployment.transactions import (
    receipt_block_number,
    receipt_logs,
    receipt_tx_hash,
    submit_create_plugin_repo,
)

PLUGIN_REPO_REGISTERED = "PluginRepoRegistered"

Lookup = Callable[[], Optional[str]]
Strategy = Callable[[], Optional[str]]


def plugin_repo_from_registry_event(
    receipt: Any, registry_address: Optional[str] = None
) -> Optional[str]:
    """Returns the `pluginRepo` argument of the first PluginRepoRegistered event."""
    event = get_event(PLUGIN_REPO_REGISTRY_ABI, PLUGIN_REPO_REGISTERED)
    for event_data in decode_events(receipt_logs(receipt), event, emitter=registry_address):
        if event_data["event"] == PLUGIN_REPO_REGISTERED:
            return event_data["args"]["pluginRepo"]
    return None


def plugin_repo_from_lookup(lookup: Lookup) -> Optional[str]:
    try:
        return lookup()
    except Exception as e:
        print(f"Plugin repo lookup failed: {e}")
        return None


def _topic_addresses(logs: Iterable[Dict[str, Any]]) -> List[str]:
    candidates = list()
    for log in logs:
        for topic in log.get("topics") or []:
            word = HexBytes(topic)
            if len(word) < 20:
                continue
            candidate = to_checksum_address(word[-20:])
            if candidate not in candidates:
                candidates.append(candidate)
    return candidates


def plugin_repo_from_topics(receipt: Any, w3) -> Optional[str]:
    """
    Returns the first address encoded in the lower 20 bytes of a log topic
    that has contract code deployed.
    """
    for candidate in _topic_addresses(receipt_logs(receipt)):
        try:
            code = w3.eth.get_code(candidate)
        except Exception:
            continue
        if code and len(HexBytes(code)) > 0:
            print(f"Detected contract address from logs: {candidate}")
            return candidate
    return None


def recovery_strategies(
    receipt: Any, w3, lookup: Lookup, registry_address: Optional[str] = None
) -> List[Tuple[str, Strategy]]:
    return [
        (
            "registry event",
            lambda: plugin_repo_from_registry_event(receipt, registry_address=registry_address),
        ),
        ("ENS lookup", lambda: plugin_repo_from_lookup(lookup)),
        ("log topics", lambda: plugin_repo_from_topics(receipt, w3)),
    ]


def recover_plugin_repo_address(
    receipt: Any,
    w3,
    lookup: Lookup,
    registry_address: Optional[str] = None,
    ens_domain: Optional[str] = None,
) -> ChecksumAddress:
    """
    Recovers the plugin repo address created by a `createPluginRepo` transaction.
    Raises AddressNotRecovered when every strategy comes up empty.
    """
    strategies = recovery_strategies(receipt, w3, lookup, registry_address=registry_address)
    for name, strategy in strategies:
        address = strategy()
        if address:
            return to_checksum_address(address)
        print(f"(i) No plugin repo address found via {name}.")

    print(f"Receipt logs: {receipt_logs(receipt)}")
    raise AddressNotRecovered(tx_hash=receipt_tx_hash(receipt), ens_domain=ens_domain)


class RepoCreation(NamedTuple):
    address: ChecksumAddress
    tx_hash: str
    block_number: int
    subdomain: str


def create_plugin_repo(
    transactor,
    factory,
    w3,
    subdomain: str,
    maintainer: ChecksumAddress,
    lookup: Lookup,
    registry_address: Optional[str] = None,
    ens_domain: Optional[str] = None,
    gas_limit: int = GAS_LIMIT,
) -> RepoCreation:
    """
    Creates a plugin repo through the factory with explicit fee overrides
    and recovers the address of the new repo from the receipt.
    """
    overrides = build_overrides(get_fee_data(w3), gas_limit=gas_limit)
    receipt = submit_create_plugin_repo(
        transactor=transactor,
        factory=factory,
        subdomain=subdomain,
        maintainer=maintainer,
        overrides=overrides,
        w3=w3,
    )
    address = recover_plugin_repo_address(
        receipt=receipt,
        w3=w3,
        lookup=lookup,
        registry_address=registry_address,
        ens_domain=ens_domain,
    )
    return RepoCreation(
        address=address,
        tx_hash=receipt_tx_hash(receipt),
        block_number=receipt_block_number(receipt),
        subdomain=subdomain,
    )
