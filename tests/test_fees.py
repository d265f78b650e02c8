from types import SimpleNamespace

import pytest
from web3.exceptions import MethodUnavailable

from plugin_deployment.constants import GAS_LIMIT
from plugin_deployment.fees import FeeData, FeeOverrides, build_overrides, get_fee_data
from tests.conftest import FakeEth

GWEI = 10**9


def test_eip1559_fields_take_precedence():
    fee_data = FeeData(
        gas_price=30 * GWEI, max_fee_per_gas=50 * GWEI, max_priority_fee_per_gas=2 * GWEI
    )
    overrides = build_overrides(fee_data)
    assert overrides == FeeOverrides(
        gas_limit=GAS_LIMIT, max_fee_per_gas=50 * GWEI, max_priority_fee_per_gas=2 * GWEI
    )
    assert overrides.gas_price is None


def test_eip1559_without_priority_fee():
    overrides = build_overrides(FeeData(max_fee_per_gas=50 * GWEI))
    assert overrides.max_fee_per_gas == 50 * GWEI
    assert overrides.max_priority_fee_per_gas is None
    assert overrides.gas_price is None


@pytest.mark.parametrize("gas_price", [1, 7, 100, 30 * GWEI, 2**200 + 3])
def test_legacy_gas_price_is_buffered(gas_price):
    overrides = build_overrides(FeeData(gas_price=gas_price))
    assert overrides.max_fee_per_gas is None
    assert gas_price <= overrides.gas_price
    assert overrides.gas_price * 100 <= gas_price * 110
    assert overrides.gas_price == gas_price * 110 // 100


def test_legacy_gas_price_falls_back_to_raw_price():
    class Unmultipliable:
        def __int__(self):
            raise OverflowError("cannot convert")

        def __bool__(self):
            return True

    price = Unmultipliable()
    overrides = build_overrides(FeeData(gas_price=price))
    assert overrides.gas_price is price


def test_no_fee_data_sets_only_gas_limit():
    assert build_overrides(FeeData()) == FeeOverrides(gas_limit=GAS_LIMIT)


def test_gas_limit_is_configurable():
    assert build_overrides(FeeData(gas_price=GWEI), gas_limit=1_000_000).gas_limit == 1_000_000


def test_never_both_gas_price_and_max_fee():
    for fee_data in (
        FeeData(gas_price=GWEI, max_fee_per_gas=2 * GWEI),
        FeeData(gas_price=GWEI),
        FeeData(max_fee_per_gas=2 * GWEI, max_priority_fee_per_gas=GWEI),
        FeeData(),
    ):
        overrides = build_overrides(fee_data)
        assert overrides.gas_price is None or overrides.max_fee_per_gas is None


def test_transaction_kwargs():
    overrides = FeeOverrides(gas_limit=GAS_LIMIT, max_fee_per_gas=3, max_priority_fee_per_gas=1)
    assert overrides.as_transaction_kwargs() == {
        "gas_limit": GAS_LIMIT,
        "max_fee": 3,
        "max_priority_fee": 1,
    }
    assert FeeOverrides(gas_limit=21_000, gas_price=5).as_dict() == {
        "gasLimit": 21_000,
        "gasPrice": 5,
    }


def test_fee_data_without_base_fee():
    # harmony blocks carry no base fee
    eth = FakeEth(gas_price=100 * GWEI, latest_block={"number": 1})
    fee_data = get_fee_data(SimpleNamespace(eth=eth))
    assert fee_data == FeeData(gas_price=100 * GWEI)


def test_fee_data_with_base_fee():
    eth = FakeEth(gas_price=12 * GWEI, latest_block={"number": 1, "baseFeePerGas": 10 * GWEI})
    fee_data = get_fee_data(SimpleNamespace(eth=eth))
    assert fee_data.gas_price == 12 * GWEI
    assert fee_data.max_priority_fee_per_gas == 1_500_000_000
    assert fee_data.max_fee_per_gas == 2 * 10 * GWEI + 1_500_000_000


@pytest.mark.parametrize(
    "error",
    [ValueError("method not found"), MethodUnavailable("the method eth_gasPrice does not exist")],
)
def test_fee_data_when_gas_price_is_rejected(error):
    eth = FakeEth(gas_price=error, latest_block={"baseFeePerGas": 1})
    fee_data = get_fee_data(SimpleNamespace(eth=eth))
    assert fee_data.gas_price is None
    assert fee_data.max_fee_per_gas == 2 + 1_500_000_000
