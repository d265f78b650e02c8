from dataclasses import dataclass
from typing import Any, Dict, Optional

from web3.exceptions import Web3Exception

from plugin_deployment.constants import (
    DEFAULT_MAX_PRIORITY_FEE,
    GAS_LIMIT,
    GAS_PRICE_BUFFER_PERCENT,
)


@dataclass(frozen=True)
class FeeData:
    """A snapshot of the network fee oracle."""

    gas_price: Optional[int] = None
    max_fee_per_gas: Optional[int] = None
    max_priority_fee_per_gas: Optional[int] = None


@dataclass(frozen=True)
class FeeOverrides:
    """
    Transaction fee overrides. Either the EIP-1559 pair or the legacy
    gas price is populated, never both.
    """

    gas_limit: int
    max_fee_per_gas: Optional[int] = None
    max_priority_fee_per_gas: Optional[int] = None
    gas_price: Optional[Any] = None

    def as_transaction_kwargs(self) -> Dict[str, Any]:
        """Returns the overrides as ape transaction keyword arguments."""
        kwargs = {"gas_limit": self.gas_limit}
        if self.max_fee_per_gas is not None:
            kwargs["max_fee"] = self.max_fee_per_gas
        if self.max_priority_fee_per_gas is not None:
            kwargs["max_priority_fee"] = self.max_priority_fee_per_gas
        if self.gas_price is not None:
            kwargs["gas_price"] = self.gas_price
        return kwargs

    def as_dict(self) -> Dict[str, Any]:
        overrides = {"gasLimit": self.gas_limit}
        if self.max_fee_per_gas is not None:
            overrides["maxFeePerGas"] = self.max_fee_per_gas
        if self.max_priority_fee_per_gas is not None:
            overrides["maxPriorityFeePerGas"] = self.max_priority_fee_per_gas
        if self.gas_price is not None:
            overrides["gasPrice"] = self.gas_price
        return overrides


def get_fee_data(w3) -> FeeData:
    """
    Reads the current fee snapshot. EIP-1559 fields are only reported when
    the latest block carries a base fee (Harmony blocks do not).
    """
    gas_price = None
    try:
        gas_price = w3.eth.gas_price
    except (ValueError, Web3Exception):
        # some providers reject eth_gasPrice; the EIP-1559 fields may still do
        pass

    block = w3.eth.get_block("latest")
    base_fee = block.get("baseFeePerGas")
    if not base_fee:
        return FeeData(gas_price=gas_price)

    max_priority_fee = DEFAULT_MAX_PRIORITY_FEE
    return FeeData(
        gas_price=gas_price,
        max_fee_per_gas=base_fee * 2 + max_priority_fee,
        max_priority_fee_per_gas=max_priority_fee,
    )


def _buffered(gas_price: Any) -> Any:
    try:
        return int(gas_price) * GAS_PRICE_BUFFER_PERCENT // 100
    except (TypeError, ValueError, OverflowError):
        return gas_price


def build_overrides(fee_data: FeeData, gas_limit: int = GAS_LIMIT) -> FeeOverrides:
    """
    Builds fee overrides for a state-changing call, preferring EIP-1559 fields.
    Falls back to the legacy gas price plus a 10% buffer.
    """
    if fee_data.max_fee_per_gas:
        return FeeOverrides(
            gas_limit=gas_limit,
            max_fee_per_gas=fee_data.max_fee_per_gas,
            max_priority_fee_per_gas=fee_data.max_priority_fee_per_gas or None,
        )

    if fee_data.gas_price:
        return FeeOverrides(gas_limit=gas_limit, gas_price=_buffered(fee_data.gas_price))

    return FeeOverrides(gas_limit=gas_limit)
