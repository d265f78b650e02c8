from typing import Dict, Optional

from ape.utils import ZERO_ADDRESS
from ens import ENS
from eth_typing import ChecksumAddress
from eth_utils import is_address, is_same_address, to_checksum_address
from web3.exceptions import ContractLogicError, Web3Exception

from plugin_deployment.abis import ADDR_RESOLVER_ABI, ENS_ABI, ENS_SUBDOMAIN_REGISTRAR_ABI
from plugin_deployment.constants import (
    PLUGIN_ENS_DOMAIN,
    PLUGIN_ENS_SUBDOMAIN_REGISTRAR,
    SEPOLIA,
    SEPOLIA_PLUGIN_ENS_DOMAIN,
)


def plugin_ens_domain(subdomain: str, network_name: str) -> str:
    """Returns the full ENS name a plugin repo is registered under."""
    if network_name == SEPOLIA:
        return f"{subdomain}.{SEPOLIA_PLUGIN_ENS_DOMAIN}"
    return f"{subdomain}.{PLUGIN_ENS_DOMAIN}"


def find_plugin_repo(
    w3, network_deployment: Optional[Dict[str, Dict[str, str]]], ens_domain: str
) -> Optional[ChecksumAddress]:
    """
    Returns the address of the plugin repo registered under `ens_domain`, or None
    if the name is unclaimed or the network's subdomain registrar cannot be used.
    """
    registrar_info = (network_deployment or {}).get(PLUGIN_ENS_SUBDOMAIN_REGISTRAR)
    if not registrar_info or not is_address(registrar_info.get("address", "")):
        print(
            f"No {PLUGIN_ENS_SUBDOMAIN_REGISTRAR} in network deployments; "
            f"cannot look up '{ens_domain}'."
        )
        return None

    registrar_address = to_checksum_address(registrar_info["address"])
    registrar = w3.eth.contract(address=registrar_address, abi=ENS_SUBDOMAIN_REGISTRAR_ABI)
    try:
        ens_address = registrar.functions.ens().call()
    except (ContractLogicError, Web3Exception, ValueError) as e:
        # e.g. an uninitialized registrar; treat the name as unclaimed
        print(f"Registrar call failed for {registrar_address}: {e}")
        return None

    node = ENS.namehash(ens_domain)
    ens = w3.eth.contract(address=to_checksum_address(ens_address), abi=ENS_ABI)
    if not ens.functions.recordExists(node).call():
        return None

    resolver_address = ens.functions.resolver(node).call()
    if is_same_address(resolver_address, ZERO_ADDRESS):
        return None
    resolver = w3.eth.contract(address=to_checksum_address(resolver_address), abi=ADDR_RESOLVER_ABI)
    plugin_repo_address = resolver.functions.addr(node).call()
    if is_same_address(plugin_repo_address, ZERO_ADDRESS):
        return None
    return to_checksum_address(plugin_repo_address)
