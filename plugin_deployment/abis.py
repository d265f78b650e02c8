"""
ABI fragments of the Aragon OSx contracts this tooling calls into or decodes logs against.
Only the entries used here are declared; selectors and topics follow from the signatures.
"""

from typing import Dict, List


def _input(name: str, type_: str, indexed: bool = None) -> dict:
    entry = {"name": name, "type": type_, "internalType": type_}
    if indexed is not None:
        entry["indexed"] = indexed
    return entry


def _view(name: str, inputs: list, output_type: str) -> dict:
    return {
        "type": "function",
        "name": name,
        "stateMutability": "view",
        "inputs": inputs,
        "outputs": [_input("", output_type)],
    }


PLUGIN_REPO_REGISTRY_ABI: List[Dict] = [
    {
        "type": "event",
        "name": "PluginRepoRegistered",
        "anonymous": False,
        "inputs": [
            _input("subdomain", "string", indexed=False),
            _input("pluginRepo", "address", indexed=False),
        ],
    },
]

PLUGIN_REPO_ABI: List[Dict] = [
    {
        "type": "function",
        "name": "createVersion",
        "stateMutability": "nonpayable",
        "inputs": [
            _input("_release", "uint8"),
            _input("_pluginSetup", "address"),
            _input("_buildMetadata", "bytes"),
            _input("_releaseMetadata", "bytes"),
        ],
        "outputs": [],
    },
    {
        "type": "event",
        "name": "VersionCreated",
        "anonymous": False,
        "inputs": [
            _input("release", "uint8", indexed=False),
            _input("build", "uint16", indexed=False),
            _input("pluginSetup", "address", indexed=True),
            _input("buildMetadata", "bytes", indexed=False),
        ],
    },
]

PLUGIN_REPO_FACTORY_ABI: List[Dict] = [
    {
        "type": "function",
        "name": "createPluginRepo",
        "stateMutability": "nonpayable",
        "inputs": [_input("_subdomain", "string"), _input("_initialOwner", "address")],
        "outputs": [_input("", "address")],
    },
]

ENS_SUBDOMAIN_REGISTRAR_ABI: List[Dict] = [_view("ens", [], "address")]

ENS_ABI: List[Dict] = [
    _view("recordExists", [_input("node", "bytes32")], "bool"),
    _view("resolver", [_input("node", "bytes32")], "address"),
]

ADDR_RESOLVER_ABI: List[Dict] = [_view("addr", [_input("node", "bytes32")], "address")]

DAO_ABI: List[Dict] = [
    {
        "type": "function",
        "name": "grant",
        "stateMutability": "nonpayable",
        "inputs": [
            _input("_where", "address"),
            _input("_who", "address"),
            _input("_permissionId", "bytes32"),
        ],
        "outputs": [],
    },
]
