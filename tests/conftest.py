from collections import defaultdict
from types import SimpleNamespace

import pytest
from eth_abi import encode
from eth_utils import to_checksum_address
from hexbytes import HexBytes
from web3 import Web3

from plugin_deployment.registry import NetworkRegistry

# Common constants
FACTORY_ADDRESS = to_checksum_address("0x753e32a799f319d25acf138b343003ce0a5171eb")
REGISTRY_ADDRESS = to_checksum_address("0x24416fcd035314c952a16549b47e8251acdd844e")
REGISTRAR_ADDRESS = to_checksum_address("0x" + "a1" * 20)
ENS_REGISTRY_ADDRESS = to_checksum_address("0x" + "e5" * 20)
RESOLVER_ADDRESS = to_checksum_address("0x" + "5e" * 20)
PLUGIN_REPO_ADDRESS = to_checksum_address("0x" + "2e" * 20)
SETUP_ADDRESS = to_checksum_address("0x" + "5e7" + "0" * 37)
MAINTAINER_ADDRESS = to_checksum_address("0x" + "ab" * 20)
OTHER_ADDRESS = to_checksum_address("0x" + "0f" * 20)
ZERO_ADDRESS = "0x" + "0" * 40

TX_HASH = "0x" + "11" * 32

PLUGIN_REPO_REGISTERED_TOPIC = Web3.keccak(text="PluginRepoRegistered(string,address)")
VERSION_CREATED_TOPIC = Web3.keccak(text="VersionCreated(uint8,uint16,address,bytes)")


# Utility functions
def address_topic(address):
    return HexBytes(b"\x00" * 12 + bytes(HexBytes(address)))


def make_log(address, topics, data=b"", log_index=0, block_number=100):
    return {
        "address": address,
        "topics": [HexBytes(topic) for topic in topics],
        "data": HexBytes(data),
        "logIndex": log_index,
        "transactionIndex": 0,
        "transactionHash": HexBytes(TX_HASH),
        "blockHash": HexBytes("0x" + "22" * 32),
        "blockNumber": block_number,
    }


def plugin_repo_registered_log(repo_address, subdomain="my-plugin", emitter=REGISTRY_ADDRESS):
    data = encode(["string", "address"], [subdomain, repo_address])
    return make_log(emitter, [PLUGIN_REPO_REGISTERED_TOPIC], data)


def version_created_log(
    repo_address, release=1, build=1, setup_address=SETUP_ADDRESS, metadata=b"ipfs://build"
):
    data = encode(["uint8", "uint16", "bytes"], [release, build, metadata])
    return make_log(repo_address, [VERSION_CREATED_TOPIC, address_topic(setup_address)], data)


class FakeReceipt:
    """Quacks like an ape ReceiptAPI."""

    def __init__(self, status=1, txn_hash=TX_HASH, block_number=100, logs=None):
        self.status = status
        self.txn_hash = txn_hash
        self.block_number = block_number
        self.logs = logs or []


def web3_receipt(status=1, logs=None, block_number=100):
    return {
        "status": status,
        "transactionHash": HexBytes(TX_HASH),
        "blockNumber": block_number,
        "logs": logs or [],
    }


class FakeCall:
    def __init__(self, handler, args, calls):
        self.handler = handler
        self.args = args
        self.calls = calls

    def call(self, *call_args):
        self.calls.append((self.args, call_args))
        result = self.handler(*self.args)
        if isinstance(result, Exception):
            raise result
        return result


class FakeFunctions:
    def __init__(self, handlers, calls):
        self._handlers = handlers
        self._calls = calls

    def __getattr__(self, name):
        handler = self._handlers[name]
        return lambda *args: FakeCall(handler, args, self._calls[name])


class FakeContract:
    """A web3 contract whose view functions are answered by plain callables."""

    def __init__(self, address, **handlers):
        self.address = address
        self.calls = defaultdict(list)
        self.functions = FakeFunctions(handlers, self.calls)


class FakeEth:
    """Stands in for the `eth` namespace of a connected web3 instance."""

    def __init__(
        self,
        gas_price=None,
        latest_block=None,
        code=None,
        contracts=None,
        transactions=None,
        receipts=None,
        storage=None,
        logs=None,
    ):
        self._gas_price = gas_price
        self.latest_block = latest_block if latest_block is not None else {"number": 100}
        self.code = code or {}
        self.contracts = contracts or {}
        self.transactions = transactions or {}
        self.receipts = list(receipts or [])
        self.storage = storage or {}
        self.logs = logs or []
        self.calls = defaultdict(list)

    @property
    def gas_price(self):
        self.calls["gas_price"].append(())
        if isinstance(self._gas_price, Exception):
            raise self._gas_price
        return self._gas_price

    def get_block(self, block_identifier):
        self.calls["get_block"].append(block_identifier)
        return self.latest_block

    def get_code(self, address):
        self.calls["get_code"].append(address)
        code = self.code.get(to_checksum_address(address), b"")
        if isinstance(code, Exception):
            raise code
        return HexBytes(code)

    def get_transaction(self, tx_hash):
        self.calls["get_transaction"].append(tx_hash)
        transaction = self.transactions.get(tx_hash)
        if isinstance(transaction, Exception):
            raise transaction
        return transaction

    def get_transaction_receipt(self, tx_hash):
        self.calls["get_transaction_receipt"].append(tx_hash)
        receipt = self.receipts.pop(0) if self.receipts else None
        if isinstance(receipt, Exception):
            raise receipt
        return receipt

    def get_storage_at(self, address, slot):
        self.calls["get_storage_at"].append((address, slot))
        return HexBytes(self.storage.get((address, slot), b"\x00" * 32))

    def get_logs(self, filter_params):
        self.calls["get_logs"].append(filter_params)
        if isinstance(self.logs, Exception):
            raise self.logs
        return self.logs

    def call(self, transaction, block_identifier="latest"):
        self.calls["call"].append((transaction, block_identifier))
        result = self.contracts.get("__call__", b"")
        if isinstance(result, Exception):
            raise result
        return HexBytes(result)

    def contract(self, address=None, abi=None):
        self.calls["contract"].append(address)
        return self.contracts[address]


class FakeTransactor:
    """Records transactions and answers them with prepared receipts."""

    def __init__(self, *receipts):
        self.receipts = list(receipts)
        self.transactions = list()

    def transact(self, method, *args, **txn_kwargs):
        self.transactions.append(SimpleNamespace(method=method, args=args, kwargs=txn_kwargs))
        return self.receipts.pop(0) if self.receipts else None


def fake_contract_instance(address, *methods):
    """An ape contract instance whose transaction methods are plain markers."""
    return SimpleNamespace(address=address, **{method: method for method in methods})


# Fixtures
@pytest.fixture
def networks_data():
    return {
        "harmony-mainnet": {
            "chain_id": 1666600000,
            "aliases": ["harmony", "harmonyMainnet"],
            "deployments": {
                "PluginRepoFactory": {"address": FACTORY_ADDRESS},
                "PluginRepoRegistryProxy": {"address": REGISTRY_ADDRESS},
            },
        },
        "harmony-testnet": {
            "chain_id": 1666700000,
            "aliases": ["harmonyTestnet", "harmony_testnet"],
            "deployments": {},
        },
        "mainnet": {
            "chain_id": 1,
            "aliases": ["ethereum-mainnet", "homestead"],
            "deployments": {
                "PluginRepoFactory": {"address": FACTORY_ADDRESS},
            },
        },
        "sepolia": {
            "chain_id": 11155111,
            "aliases": [],
            "deployments": {
                "PluginRepoFactory": {"address": FACTORY_ADDRESS},
                "PluginENSSubdomainRegistrarProxy": {"address": REGISTRAR_ADDRESS},
            },
        },
    }


@pytest.fixture
def registry(networks_data):
    return NetworkRegistry.from_dict(networks_data)


@pytest.fixture
def w3():
    return SimpleNamespace(eth=FakeEth())
