import pytest

from plugin_deployment.errors import UnsupportedNetwork
from plugin_deployment.networks import (
    _candidates,
    production_network_name,
    resolve_network_name,
)


@pytest.mark.parametrize(
    "raw_name,canonical",
    [
        ("harmony", "harmony-mainnet"),
        ("harmonyMainnet", "harmony-mainnet"),
        ("harmony-mainnet", "harmony-mainnet"),
        ("harmonyTestnet", "harmony-testnet"),
        ("harmony_testnet", "harmony-testnet"),
        ("harmony-testnet", "harmony-testnet"),
        ("mainnet", "mainnet"),
        ("ethereum-mainnet", "mainnet"),
        ("homestead", "mainnet"),
        ("sepolia", "sepolia"),
    ],
)
def test_resolve_alias_table(registry, raw_name, canonical):
    assert resolve_network_name(raw_name, registry) == canonical


def test_resolve_strips_network_suffix(registry):
    # "sepolia-testnet" is unknown, but stripping "-testnet" yields a canonical name
    assert resolve_network_name("sepolia-testnet", registry) == "sepolia"


def test_resolve_accepts_candidate_with_deployments():
    class DeploymentsOnlyRegistry:
        def network_name_by_alias(self, alias):
            return None

        def latest_network_deployment(self, name):
            if name == "polygon":
                return {"PluginRepoFactory": {"address": "0x" + "01" * 20}}
            return {}

    # no alias is known, but the stripped candidate has deployments
    assert resolve_network_name("polygon-mainnet", DeploymentsOnlyRegistry()) == "polygon"


def test_resolve_unknown_network(registry):
    with pytest.raises(UnsupportedNetwork) as e:
        resolve_network_name("polygon", registry)
    assert e.value.network_name == "polygon"
    assert "polygon" in str(e.value)


def test_resolve_swallows_probe_errors():
    class FlakyRegistry:
        def __init__(self):
            self.probed = list()

        def network_name_by_alias(self, alias):
            self.probed.append(alias)
            if alias == "harmony-mainnet":
                return "harmony-mainnet"
            raise RuntimeError("registry unavailable")

        def latest_network_deployment(self, name):
            raise RuntimeError("registry unavailable")

    flaky = FlakyRegistry()
    assert resolve_network_name("harmony", flaky) == "harmony-mainnet"
    assert flaky.probed == ["harmony", "harmony-mainnet"]


def test_candidates_order_and_deduplication():
    assert _candidates("harmony-testnet") == [
        "harmony-testnet",
        "harmony",
        "harmony-mainnet",
    ]
    assert _candidates("sepolia") == ["sepolia"]
    assert _candidates("mainnet") == ["mainnet"]


def test_candidates_skip_empty_names():
    # stripping "-mainnet" from "-mainnet" leaves nothing to probe
    assert "" not in _candidates("-mainnet")


def test_production_network_name_for_local_network(registry, capsys, monkeypatch):
    monkeypatch.delenv("NETWORK_NAME", raising=False)
    assert production_network_name("hardhat", registry, env_network_name="harmony") == "harmony"

    assert production_network_name("local", registry) == "sepolia"
    assert "Defaulting to 'sepolia'" in capsys.readouterr().out


def test_production_network_name_reads_environment(registry, monkeypatch):
    monkeypatch.setenv("NETWORK_NAME", "harmonyTestnet")
    assert production_network_name("localhost", registry) == "harmonyTestnet"


def test_production_network_name_fallback_table(registry):
    del registry.networks["sepolia"]
    assert production_network_name("sepolia", registry) == "sepolia"
    assert production_network_name("harmony-mainnet", registry) == "harmony-mainnet"


def test_production_network_name_unsupported(registry):
    with pytest.raises(UnsupportedNetwork):
        production_network_name("polygon", registry)


@pytest.mark.parametrize("raw_name", ["harmony-devnet", "harmonyDevnet", "sepolia-devnet"])
def test_resolve_unlisted_name_of_known_family(registry, raw_name):
    assert _candidates(raw_name) == [raw_name]
    with pytest.raises(UnsupportedNetwork):
        resolve_network_name(raw_name, registry)
