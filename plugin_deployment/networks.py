import os
import re
from typing import List, Optional

from ape import networks

from plugin_deployment.constants import (
    DEFAULT_PRODUCTION_NETWORK,
    NETWORK_FALLBACKS,
    NETWORK_SUFFIXES,
    WELL_KNOWN_NETWORKS,
)
from plugin_deployment.errors import UnsupportedNetwork
from plugin_deployment.registry import NetworkName, NetworkRegistry
from plugin_deployment.utils import is_local_network

NETWORK_NAME_ENVVAR = "NETWORK_NAME"


def network_name_from_provider() -> NetworkName:
    """
    Returns the name of the connected ape network in the framework's naming:
    `ethereum:sepolia` is `sepolia`, `harmony:mainnet` is `harmony-mainnet`.
    """
    network = networks.provider.network
    ecosystem_name = network.ecosystem.name
    if ecosystem_name == "ethereum" or is_local_network(network.name):
        return network.name
    return f"{ecosystem_name}-{network.name}"


def production_network_name(
    network_name: NetworkName,
    registry: NetworkRegistry,
    env_network_name: Optional[str] = None,
) -> NetworkName:
    """
    Returns the name of the production network a deployment targets.
    Local networks stand in for $NETWORK_NAME (default sepolia).
    """
    if is_local_network(network_name):
        env_network_name = env_network_name or os.environ.get(NETWORK_NAME_ENVVAR)
        if env_network_name:
            network_name = env_network_name
        else:
            print(
                f"No network has been provided in the '.env' file. "
                f"Defaulting to '{DEFAULT_PRODUCTION_NETWORK}' as the production network."
            )
            network_name = DEFAULT_PRODUCTION_NETWORK

    if registry.network_name_by_alias(network_name) is not None:
        return network_name

    # downstream resolution tries aliases again
    mapped = NETWORK_FALLBACKS.get(network_name)
    if mapped is None:
        raise UnsupportedNetwork(network_name)
    return mapped


def _family(network_name: NetworkName) -> str:
    """`harmony-testnet`, `harmony_testnet` and `harmonyTestnet` all belong to `harmony`."""
    return re.split(r"[-_]|(?=[A-Z])", network_name, maxsplit=1)[0].lower()


def _candidates(network_name: NetworkName) -> List[NetworkName]:
    candidates = [network_name]
    for suffix in NETWORK_SUFFIXES:
        if network_name.endswith(suffix):
            candidates.append(network_name[: -len(suffix)])
        else:
            candidates.append(network_name)
    # well-known names only stand in for a well-known input of the same network family
    if any(candidate in WELL_KNOWN_NETWORKS for candidate in candidates):
        family = _family(network_name)
        candidates.extend(name for name in WELL_KNOWN_NETWORKS if _family(name) == family)

    # ordered de-duplication; empty names are never valid
    seen = set()
    unique = list()
    for candidate in candidates:
        if candidate and candidate not in seen:
            seen.add(candidate)
            unique.append(candidate)
    return unique


def _probe(candidate: NetworkName, registry: NetworkRegistry) -> Optional[NetworkName]:
    """Returns the canonical name for a candidate, or None if it does not qualify."""
    try:
        alias = registry.network_name_by_alias(candidate)
        if alias is not None:
            return alias
        deployment = registry.latest_network_deployment(candidate)
    except Exception:
        return None
    if isinstance(deployment, dict) and len(deployment) > 0:
        return candidate
    return None


def resolve_network_name(network_name: NetworkName, registry: NetworkRegistry) -> NetworkName:
    """
    Resolves a production network name into a canonical network key of the registry.
    Raises UnsupportedNetwork when no candidate qualifies.
    """
    for candidate in _candidates(network_name):
        canonical = _probe(candidate, registry)
        if canonical is not None:
            return canonical
    raise UnsupportedNetwork(network_name)


def resolve_connected_network(registry: NetworkRegistry) -> NetworkName:
    """Resolves the canonical network key for the connected ape provider."""
    production_name = production_network_name(network_name_from_provider(), registry)
    network_name = resolve_network_name(production_name, registry)
    print(f"(i) Resolved network '{production_name}' to '{network_name}'")
    return network_name
