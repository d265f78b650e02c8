import pytest

from plugin_deployment.constants import PLUGIN_ENS_SUBDOMAIN_CHARACTERS
from plugin_deployment.errors import InvalidAddressInput
from plugin_deployment.utils import (
    BASE36_DIGITS,
    _base36,
    address_from_env,
    generate_random_name,
    is_local_network,
    random_suffix,
    require_address,
    to_metadata_bytes,
)
from tests.conftest import MAINTAINER_ADDRESS, OTHER_ADDRESS


def test_require_address_checksums():
    assert require_address("MAINTAINER", MAINTAINER_ADDRESS.lower()) == MAINTAINER_ADDRESS
    assert require_address("MAINTAINER", f"  {MAINTAINER_ADDRESS}\n") == MAINTAINER_ADDRESS


def test_require_address_fallback():
    assert require_address("ORACLE", None, fallback=OTHER_ADDRESS) == OTHER_ADDRESS
    assert require_address("ORACLE", "", fallback=OTHER_ADDRESS) == OTHER_ADDRESS
    address = require_address("ORACLE", MAINTAINER_ADDRESS, fallback=OTHER_ADDRESS)
    assert address == MAINTAINER_ADDRESS


@pytest.mark.parametrize("value", [None, "", "0x1234", "not-an-address", "0x" + "zz" * 20])
def test_require_address_rejects(value):
    with pytest.raises(InvalidAddressInput) as e:
        require_address("ORACLE_ADDRESS", value)
    assert e.value.name == "ORACLE_ADDRESS"
    assert "ORACLE_ADDRESS" in str(e.value)


def test_address_from_env(monkeypatch):
    monkeypatch.setenv("ORACLE_ADDRESS", OTHER_ADDRESS.lower())
    assert address_from_env("ORACLE_ADDRESS", fallback=MAINTAINER_ADDRESS) == OTHER_ADDRESS
    monkeypatch.delenv("ORACLE_ADDRESS")
    assert address_from_env("ORACLE_ADDRESS", fallback=MAINTAINER_ADDRESS) == MAINTAINER_ADDRESS


def test_generate_random_name():
    name = generate_random_name()
    assert len(name) == 8
    assert set(name) <= set(PLUGIN_ENS_SUBDOMAIN_CHARACTERS)
    assert len(generate_random_name(length=3)) == 3


def test_base36():
    assert _base36(0) == "0"
    assert _base36(35) == "z"
    assert _base36(36) == "10"
    assert _base36(36**3 + 1) == "1001"


def test_random_suffix():
    suffix = random_suffix()
    assert len(suffix) > 6
    assert set(suffix) <= set(BASE36_DIGITS)
    assert random_suffix() != random_suffix()


def test_to_metadata_bytes():
    assert to_metadata_bytes("ipfs://QmBuild") == b"ipfs://QmBuild"
    assert to_metadata_bytes("") == b""


@pytest.mark.parametrize(
    "network_name,local",
    [("local", True), ("hardhat", True), ("sepolia", False), ("harmony-mainnet", False)],
)
def test_is_local_network(network_name, local):
    assert is_local_network(network_name) is local
