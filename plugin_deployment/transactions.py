from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from eth_abi.exceptions import DecodingError
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address, to_hex
from hexbytes import HexBytes
from web3.exceptions import ContractLogicError

from plugin_deployment.abis import PLUGIN_REPO_FACTORY_ABI
from plugin_deployment.errors import ReceiptUnavailable, SimulationFailed, TransactionReverted
from plugin_deployment.fees import FeeOverrides

CREATE_PLUGIN_REPO = "createPluginRepo"


def receipt_tx_hash(receipt: Any) -> str:
    """Returns the transaction hash of an ape receipt or a web3 receipt mapping."""
    tx_hash = getattr(receipt, "txn_hash", None)
    if tx_hash is None:
        tx_hash = receipt["transactionHash"]
    return tx_hash if isinstance(tx_hash, str) else to_hex(HexBytes(tx_hash))


def receipt_block_number(receipt: Any) -> int:
    block_number = getattr(receipt, "block_number", None)
    if block_number is None:
        block_number = receipt["blockNumber"]
    return int(block_number)


def receipt_status(receipt: Any) -> int:
    status = getattr(receipt, "status", None)
    if status is None:
        status = receipt["status"]
    return int(status)


def receipt_logs(receipt: Any) -> List[Dict[str, Any]]:
    logs = getattr(receipt, "logs", None)
    if logs is None:
        logs = receipt.get("logs") or []
    return list(logs)


def check_receipt(receipt: Any, label: str, w3) -> Any:
    """
    Raises if a transaction produced no receipt or reverted; returns the receipt otherwise.
    A reverted transaction is re-fetched for diagnostics, but a failure to do so
    never masks the revert itself.
    """
    if receipt is None:
        print(f"Transaction receipt is undefined for {label}")
        raise ReceiptUnavailable(label=label)

    if receipt_status(receipt) != 0:
        return receipt

    tx_hash = receipt_tx_hash(receipt)
    try:
        transaction = w3.eth.get_transaction(tx_hash)
    except Exception as e:
        print(f"{label} reverted (failed to fetch tx info) {tx_hash}: {e}")
        raise TransactionReverted(label=label, tx_hash=tx_hash)

    print(f"{label} reverted", {"txHash": tx_hash, "receipt": receipt, "txInfo": transaction})
    raise TransactionReverted(label=label, tx_hash=tx_hash, transaction=transaction)


def submit_create_plugin_repo(
    transactor,
    factory,
    subdomain: str,
    maintainer: ChecksumAddress,
    overrides: FeeOverrides,
    w3,
) -> Any:
    """
    Sends `createPluginRepo` through the plugin repo factory and waits for its receipt.
    Raises ReceiptUnavailable or TransactionReverted.
    """
    receipt = transactor.transact(
        getattr(factory, CREATE_PLUGIN_REPO),
        subdomain,
        maintainer,
        raise_on_revert=False,
        **overrides.as_transaction_kwargs(),
    )
    if receipt is not None:
        print(f"{CREATE_PLUGIN_REPO} tx hash: {receipt_tx_hash(receipt)}")
    return check_receipt(receipt, label=CREATE_PLUGIN_REPO, w3=w3)


def simulate_create_plugin_repo(
    w3,
    factory_address: ChecksumAddress,
    subdomain: str,
    maintainer: ChecksumAddress,
    overrides: Optional[FeeOverrides] = None,
) -> ChecksumAddress:
    """
    Dry-runs `createPluginRepo` with eth_call and returns the would-be plugin repo address.
    Raises SimulationFailed with the revert reason.
    """
    factory = w3.eth.contract(address=factory_address, abi=PLUGIN_REPO_FACTORY_ABI)
    call_params = {"from": maintainer}
    if overrides is not None:
        call_params["gas"] = overrides.gas_limit
    function = getattr(factory.functions, CREATE_PLUGIN_REPO)(subdomain, maintainer)
    try:
        result = function.call(call_params)
    except ContractLogicError as e:
        raise SimulationFailed(f"{CREATE_PLUGIN_REPO} would revert: {e}") from e
    except DecodingError as e:
        raise SimulationFailed(f"Failed to decode {CREATE_PLUGIN_REPO} call result: {e}") from e
    return to_checksum_address(result)


@dataclass
class TransactionDiagnostics:
    tx_hash: str
    transaction: Optional[Any] = None
    receipt: Optional[Any] = None
    call_result: Optional[str] = None
    call_error: Optional[str] = None
    log_code_sizes: Dict[str, int] = field(default_factory=dict)

    @property
    def log_count(self) -> int:
        if self.receipt is None:
            return 0
        return len(receipt_logs(self.receipt))


def inspect_transaction(w3, tx_hash: str) -> TransactionDiagnostics:
    """
    Collects what the chain knows about a transaction: the transaction, its receipt,
    the result (or revert reason) of replaying it as a call, and the code size
    of every log emitter.
    """
    diagnostics = TransactionDiagnostics(tx_hash=tx_hash)
    diagnostics.transaction = w3.eth.get_transaction(tx_hash)
    diagnostics.receipt = w3.eth.get_transaction_receipt(tx_hash)

    transaction = diagnostics.transaction
    if transaction:
        call = {
            "to": transaction["to"],
            "data": transaction["input"],
            "from": transaction["from"],
            "value": transaction.get("value") or 0,
        }
        block = diagnostics.receipt["blockNumber"] if diagnostics.receipt else "latest"
        try:
            diagnostics.call_result = to_hex(HexBytes(w3.eth.call(call, block)))
        except Exception as e:
            # the revert reason is the point of replaying the call
            diagnostics.call_error = str(e)

    for log in receipt_logs(diagnostics.receipt) if diagnostics.receipt else []:
        address = log["address"]
        try:
            diagnostics.log_code_sizes[address] = len(w3.eth.get_code(address))
        except Exception:
            continue

    return diagnostics
