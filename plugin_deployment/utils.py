import json
import os
import random
import time
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from ape import Contract, networks
from ape.contracts import ContractInstance
from eth_typing import ChecksumAddress
from eth_utils import is_address, to_checksum_address

from plugin_deployment.constants import (
    LOCAL_NETWORKS,
    PLUGIN_ENS_SUBDOMAIN_CHARACTERS,
    PLUGIN_ENS_SUBDOMAIN_LENGTH,
)
from plugin_deployment.errors import InvalidAddressInput


def _load_yaml(filepath: Path) -> dict:
    """Loads a YAML file."""
    with open(filepath, "r") as file:
        return yaml.safe_load(file)


def _load_json(filepath: Path) -> dict:
    """Loads a JSON file."""
    with open(filepath, "r") as file:
        return json.load(file)


def require_address(
    name: str, value: Optional[str], fallback: Optional[str] = None
) -> ChecksumAddress:
    """
    Returns the checksummed form of `value` (or `fallback` when `value` is empty).
    Raises InvalidAddressInput before anything touches the chain.
    """
    resolved = (value or fallback or "").strip()
    if not is_address(resolved):
        raise InvalidAddressInput(name=name, value=resolved)
    return to_checksum_address(resolved)


def address_from_env(name: str, fallback: Optional[str] = None) -> ChecksumAddress:
    return require_address(name=name, value=os.environ.get(name), fallback=fallback)


def contract_at(address: str, abi: List[Dict]) -> ContractInstance:
    """Returns an ape contract instance for an address, typed by a bare ABI."""
    return Contract(address, abi=abi)


def generate_random_name(length: int = PLUGIN_ENS_SUBDOMAIN_LENGTH) -> str:
    return "".join(random.choice(PLUGIN_ENS_SUBDOMAIN_CHARACTERS) for _ in range(length))


def to_metadata_bytes(value: str) -> bytes:
    """Encodes a metadata URI the way the plugin repo stores it."""
    return value.encode("utf-8")


def is_local_network(network_name: Optional[str] = None) -> bool:
    if network_name is None:
        network_name = networks.provider.network.name
    return network_name in LOCAL_NETWORKS


def check_etherscan_plugin() -> None:
    """
    Checks that the ape-etherscan plugin is installed and that
    the appropriate API key environment variable is set.
    """
    if is_local_network():
        # unnecessary for local deployment
        return
    try:
        import ape_etherscan  # noqa: F401
        from ape_etherscan.utils import API_KEY_ENV_KEY_MAP
    except ImportError:
        raise ImportError("Please install the ape-etherscan plugin to verify contracts.")
    ecosystem_name = networks.provider.network.ecosystem.name
    explorer_envvar = API_KEY_ENV_KEY_MAP.get(ecosystem_name)
    if explorer_envvar and not os.environ.get(explorer_envvar):
        raise ValueError(f"{explorer_envvar} is not set.")


def verify_contracts(contracts: List[ContractInstance]) -> None:
    explorer = networks.provider.network.explorer
    if explorer is None:
        print("(i) No block explorer configured for this network; skipping verification.")
        return
    for instance in contracts:
        print(f"(i) Verifying {instance.contract_type.name} at {instance.address}...")
        explorer.publish_contract(instance.address)


BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(value: int) -> str:
    encoded = ""
    while True:
        value, remainder = divmod(value, 36)
        encoded = BASE36_DIGITS[remainder] + encoded
        if value == 0:
            return encoded


def random_suffix() -> str:
    """A mostly-unique subdomain suffix: base36 unix milliseconds plus six random characters."""
    timestamp = _base36(int(time.time() * 1000))
    return timestamp + "".join(random.choice(BASE36_DIGITS) for _ in range(6))
