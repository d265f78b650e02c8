import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional

import requests
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from plugin_deployment.constants import (
    NETWORKS_FILEPATH,
    NETWORKS_FILEPATH_ENVVAR,
    NETWORKS_URL_ENVVAR,
    NETWORKS_URL_TIMEOUT,
    OUTPUT_JSON_FORMAT,
)
from plugin_deployment.errors import DeploymentsUnavailable
from plugin_deployment.utils import _load_json, _load_yaml

ChainId = int
ContractName = str
NetworkName = str


class NetworkDeployment(NamedTuple):
    """Well-known OSx contract addresses for a single canonical network."""

    name: NetworkName
    chain_id: ChainId
    aliases: List[str]
    contracts: Dict[ContractName, ChecksumAddress]


def _read_network(name: NetworkName, data: Dict[str, Any]) -> NetworkDeployment:
    contracts = dict()
    for contract_name, artifact in (data.get("deployments") or {}).items():
        contracts[contract_name] = to_checksum_address(artifact["address"])
    return NetworkDeployment(
        name=name,
        chain_id=int(data["chain_id"]),
        aliases=list(data.get("aliases", [])),
        contracts=contracts,
    )


class NetworkRegistry:
    """
    Canonical network names, their aliases and the OSx framework deployments on each.
    Stands in for the framework's published network configuration.
    """

    def __init__(self, networks: Dict[NetworkName, NetworkDeployment]):
        self.networks = networks

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NetworkRegistry":
        networks = {name: _read_network(name, entry) for name, entry in data.items()}
        return cls(networks=networks)

    @classmethod
    def from_file(cls, filepath: Path) -> "NetworkRegistry":
        """Loads a JSON or YAML networks file."""
        if Path(filepath).suffix in (".yml", ".yaml"):
            return cls.from_dict(_load_yaml(filepath))
        return cls.from_dict(_load_json(filepath))

    @classmethod
    def from_url(cls, url: str) -> "NetworkRegistry":
        response = requests.get(url, timeout=NETWORKS_URL_TIMEOUT)
        response.raise_for_status()
        return cls.from_dict(response.json())

    @classmethod
    def from_env(cls) -> "NetworkRegistry":
        """
        Loads the networks published at $OSX_NETWORKS_URL, else the file named by
        $OSX_NETWORKS_FILEPATH, else the bundled networks file.
        """
        url = os.environ.get(NETWORKS_URL_ENVVAR)
        if url:
            return cls.from_url(url)
        filepath = os.environ.get(NETWORKS_FILEPATH_ENVVAR)
        return cls.from_file(Path(filepath) if filepath else NETWORKS_FILEPATH)

    def network_name_by_alias(self, alias: str) -> Optional[NetworkName]:
        """Returns the canonical network name for an alias, or None if unknown."""
        for name, network in self.networks.items():
            if alias == name or alias in network.aliases:
                return name
        return None

    def latest_network_deployment(
        self, network_name: NetworkName
    ) -> Optional[Dict[ContractName, Dict[str, ChecksumAddress]]]:
        """Returns the deployment bundle for a canonical network, or None if unknown or empty."""
        network = self.networks.get(network_name)
        if network is None or not network.contracts:
            return None
        return {name: {"address": address} for name, address in network.contracts.items()}

    def get_network(self, network_name: NetworkName) -> NetworkDeployment:
        try:
            return self.networks[network_name]
        except KeyError:
            raise DeploymentsUnavailable(
                f"Deployments are not available on network {network_name}."
            )

    def contract_address(
        self, network_name: NetworkName, contract_name: ContractName
    ) -> ChecksumAddress:
        network = self.get_network(network_name)
        try:
            return network.contracts[contract_name]
        except KeyError:
            raise DeploymentsUnavailable(
                f"{contract_name} address is missing in network deployments for {network_name}."
            )


def write_deployment_output(output: Dict[str, Any], output_dir: Path, prefix: str) -> Path:
    """Writes a run summary to `<output_dir>/<prefix>-<unix ms>.json` and returns its path."""
    output_dir.mkdir(parents=True, exist_ok=True)
    timestamp = int(datetime.now(timezone.utc).timestamp() * 1000)
    filepath = output_dir / f"{prefix}-{timestamp}.json"
    with open(filepath, "w") as file:
        json.dump(output, file, **OUTPUT_JSON_FORMAT)
    return filepath


def generated_at() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
