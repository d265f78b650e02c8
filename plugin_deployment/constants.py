from pathlib import Path

import plugin_deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(plugin_deployment.__file__).parent
ARTIFACTS_DIR = DEPLOYMENT_DIR / "artifacts"
METADATA_DIR = DEPLOYMENT_DIR / "metadata"
NETWORKS_FILEPATH = ARTIFACTS_DIR / "networks.json"
OUTPUT_DIR = Path.cwd() / "tmp"

NETWORKS_FILEPATH_ENVVAR = "OSX_NETWORKS_FILEPATH"
NETWORKS_URL_ENVVAR = "OSX_NETWORKS_URL"
NETWORKS_URL_TIMEOUT = 10  # seconds

#
# Networks
#

SEPOLIA = "sepolia"
HARMONY = "harmony"
HARMONY_MAINNET = "harmony-mainnet"
HARMONY_TESTNET = "harmony-testnet"
ETHEREUM_MAINNET = "ethereum-mainnet"

HARMONY_CHAIN_ID = 1666600000

LOCAL_NETWORKS = ["local", "localhost", "hardhat", "coverage"]
DEFAULT_PRODUCTION_NETWORK = SEPOLIA

# raw network name -> canonical name, used when the registry knows no such alias
NETWORK_FALLBACKS = {
    "harmony": HARMONY_MAINNET,
    "harmonyTestnet": HARMONY_TESTNET,
    "harmony_testnet": HARMONY_TESTNET,
    "mainnet": ETHEREUM_MAINNET,
    "sepolia": SEPOLIA,
}

# tried after the raw name and its suffix-stripped variants
WELL_KNOWN_NETWORKS = [
    HARMONY,
    HARMONY_MAINNET,
    HARMONY_TESTNET,
    ETHEREUM_MAINNET,
    "mainnet",
    SEPOLIA,
]

NETWORK_SUFFIXES = ["-mainnet", "-testnet"]

#
# Contracts
#

PLUGIN_REPO_FACTORY = "PluginRepoFactory"
PLUGIN_REPO_REGISTRY = "PluginRepoRegistryProxy"
PLUGIN_ENS_SUBDOMAIN_REGISTRAR = "PluginENSSubdomainRegistrarProxy"

HARMONY_DEFAULTS = {
    "PLUGIN_REPO_FACTORY_ADDRESS": "0x753e32a799F319d25aCf138b343003ce0A5171eB",
    "PLUGIN_REPO_REGISTRY_ADDRESS": "0x24416Fcd035314C952A16549b47E8251aCdd844E",
    "MANAGEMENT_DAO_ADDRESS": "0x8f9a805603B6fd5df7e8d284CA66CcaF77C3BeF6",
    "ORACLE_ADDRESS": "0xA55d9ef16Af921b70Fed1421C1D298Ca5A3a18F1",
    "OPT_IN_REGISTRY_ADDRESS": "0xefd431a6c97bff60dd60eeadedee3ce38e561180",
}

DEFAULT_ALLOWLIST_PROXY_ADDRESS = "0xe7b0445369b7a653ad4f05f79b5797bc3fefcef7"

ALLOWLIST_CONTRACT_NAME = "HIPPluginAllowlist"
HIP_SETUP_CONTRACT_NAME = "HarmonyHIPVotingSetup"
DELEGATION_SETUP_CONTRACT_NAME = "HarmonyDelegationVotingSetup"

MANAGE_ALLOWLIST_PERMISSION = "MANAGE_ALLOWLIST_PERMISSION"

OZ_DEPENDENCY_NAME = "openzeppelin"
OZ_VERSION = "5.0.0"

# EIP1967 implementation slot - https://eips.ethereum.org/EIPS/eip-1967#logic-contract-address
EIP1967_IMPLEMENTATION_SLOT = 0x360894A13BA1A3210667C828492DB98DCA3E2076CC3735A920A3CA505D382BBC

#
# ENS
#

PLUGIN_ENS_SUBDOMAIN_CHARACTERS = "abcdefghijklmnopqrstuvwxyz-0123456789"
PLUGIN_ENS_SUBDOMAIN_LENGTH = 8
SEPOLIA_PLUGIN_ENS_DOMAIN = "plugin.aragon-dao.eth"
PLUGIN_ENS_DOMAIN = "plugin.dao.eth"

#
# Fees
#

# Deliberate over-estimate; some providers do not implement eth_estimateGas
GAS_LIMIT = 5_000_000
GAS_PRICE_BUFFER_PERCENT = 110
DEFAULT_MAX_PRIORITY_FEE = 1_500_000_000  # 1.5 gwei

#
# Verification
#

VERIFICATION_ATTEMPTS = 3
VERIFICATION_DELAY = 2  # seconds

#
# Output
#

OUTPUT_JSON_FORMAT = {"indent": 2}
