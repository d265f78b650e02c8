import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional

from eth_typing import ChecksumAddress

from plugin_deployment.constants import (
    DEFAULT_ALLOWLIST_PROXY_ADDRESS,
    DELEGATION_SETUP_CONTRACT_NAME,
    HARMONY_DEFAULTS,
    HIP_SETUP_CONTRACT_NAME,
    METADATA_DIR,
)
from plugin_deployment.utils import (
    _load_json,
    address_from_env,
    generate_random_name,
    to_metadata_bytes,
)

DEFAULT_PLUGIN_SETUP_CONTRACT_NAME = HIP_SETUP_CONTRACT_NAME

BUILD_METADATA_FILEPATH = METADATA_DIR / "build-metadata.json"
RELEASE_METADATA_FILEPATH = METADATA_DIR / "release-metadata.json"


class VersionTag(NamedTuple):
    """The first version of a plugin is v1.1."""

    release: int = 1
    build: int = 1

    @classmethod
    def parse(cls, value: str) -> "VersionTag":
        release, _, build = value.strip().lstrip("v").partition(".")
        return cls(release=int(release), build=int(build or 1))

    def __str__(self) -> str:
        return f"v{self.release}.{self.build}"


def setup_contract_args() -> Dict[str, List[ChecksumAddress]]:
    """
    Constructor arguments of each plugin setup contract.
    Both take the same three addresses, in a different order.
    """
    oracle = address_from_env("ORACLE_ADDRESS", HARMONY_DEFAULTS["ORACLE_ADDRESS"])
    allowlist = address_from_env("ALLOWLIST_PROXY_ADDRESS", DEFAULT_ALLOWLIST_PROXY_ADDRESS)
    opt_in_registry = address_from_env(
        "OPT_IN_REGISTRY_ADDRESS", HARMONY_DEFAULTS["OPT_IN_REGISTRY_ADDRESS"]
    )
    return {
        HIP_SETUP_CONTRACT_NAME: [oracle, allowlist, opt_in_registry],
        DELEGATION_SETUP_CONTRACT_NAME: [oracle, opt_in_registry, allowlist],
    }


@dataclass(frozen=True)
class PluginSettings:
    plugin_setup_contract_name: str
    ens_subdomain: str
    version: VersionTag
    build_metadata: Dict[str, Any] = field(default_factory=dict)
    release_metadata: Dict[str, Any] = field(default_factory=dict)
    build_metadata_uri: str = ""
    release_metadata_uri: str = ""
    setup_args: Dict[str, List[ChecksumAddress]] = field(default_factory=dict)

    @classmethod
    def from_env(
        cls,
        build_metadata_filepath: Path = BUILD_METADATA_FILEPATH,
        release_metadata_filepath: Path = RELEASE_METADATA_FILEPATH,
    ) -> "PluginSettings":
        """
        Reads the plugin settings from the environment.

        PLUGIN_SETUP_CONTRACT_NAME                         setup contract name
        PLUGIN_REPO_ENS_SUBDOMAIN_NAME                     random 8 characters when unset
        VERSION                                            e.g. `1.2`, defaults to v1.1
        BUILD_METADATA_URI, RELEASE_METADATA_URI           pinned metadata locations
        """
        version = os.environ.get("VERSION")
        return cls(
            plugin_setup_contract_name=os.environ.get(
                "PLUGIN_SETUP_CONTRACT_NAME", DEFAULT_PLUGIN_SETUP_CONTRACT_NAME
            ),
            ens_subdomain=(
                os.environ.get("PLUGIN_REPO_ENS_SUBDOMAIN_NAME") or generate_random_name()
            ).strip(),
            version=VersionTag.parse(version) if version else VersionTag(),
            build_metadata=_load_json(build_metadata_filepath),
            release_metadata=_load_json(release_metadata_filepath),
            build_metadata_uri=os.environ.get("BUILD_METADATA_URI", "").strip(),
            release_metadata_uri=os.environ.get("RELEASE_METADATA_URI", "").strip(),
            setup_args=setup_contract_args(),
        )

    def setup_args_for(self, contract_name: Optional[str] = None) -> List[ChecksumAddress]:
        contract_name = contract_name or self.plugin_setup_contract_name
        try:
            return self.setup_args[contract_name]
        except KeyError:
            raise ValueError(f"No constructor arguments configured for {contract_name}")

    @property
    def build_metadata_bytes(self) -> bytes:
        return to_metadata_bytes(self.build_metadata_uri)

    @property
    def release_metadata_bytes(self) -> bytes:
        return to_metadata_bytes(self.release_metadata_uri)
