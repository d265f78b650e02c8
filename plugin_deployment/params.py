import typing
from collections import OrderedDict
from typing import Any, List, Tuple

from ape import networks, project
from ape.api import AccountAPI, ReceiptAPI
from ape.cli.choices import select_account
from ape.contracts.base import ContractContainer, ContractInstance, ContractTransactionHandler
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address
from hexbytes import HexBytes

from plugin_deployment.confirm import _confirm_parameters, _continue
from plugin_deployment.constants import EIP1967_IMPLEMENTATION_SLOT, OZ_DEPENDENCY_NAME, OZ_VERSION
from plugin_deployment.utils import check_etherscan_plugin, verify_contracts


def _named_args(abis: List[Any], args: Tuple[Any, ...]) -> OrderedDict:
    """Pairs positional arguments with the input names of the matching ABI."""
    for abi in abis:
        if len(abi.inputs) == len(args):
            return OrderedDict(
                (inp.name or f"arg{i}", arg) for i, (inp, arg) in enumerate(zip(abi.inputs, args))
            )
    return OrderedDict((f"arg{i}", arg) for i, arg in enumerate(args))


def _oz_dependency():
    return project.dependencies[OZ_DEPENDENCY_NAME][OZ_VERSION]


def implementation_address(w3, proxy_address: str) -> ChecksumAddress:
    """Reads the logic contract address of an EIP-1967 proxy from its implementation slot."""
    slot = HexBytes(w3.eth.get_storage_at(proxy_address, EIP1967_IMPLEMENTATION_SLOT))
    if not any(slot):
        raise ValueError(
            f"Implementation slot for contract at {proxy_address} is empty. "
            "Are you sure this is an EIP1967-compatible proxy?"
        )
    return to_checksum_address(slot[-20:])


class Transactor:
    """
    Represents an ape account plus annotated transaction execution.
    """

    def __init__(self, account: typing.Optional[AccountAPI] = None, autosign: bool = False):
        if account is None:
            self._account = select_account()
        else:
            self._account = account
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        self._autosign = autosign
        self._account.set_autosign(autosign)

    def get_account(self) -> AccountAPI:
        """Returns the transactor account."""
        return self._account

    def transact(self, method: ContractTransactionHandler, *args, **txn_kwargs) -> ReceiptAPI:
        named_args = _named_args(method.abis, args)
        base_message = (
            f"\nTransacting {method.contract.contract_type.name}"
            f"[{method.contract.address[:10]}].{method.abis[0].name}"
        )
        if named_args:
            pretty_args = "\n\t".join(f"{k}={v}" for k, v in named_args.items())
            message = f"{base_message} with arguments:\n\t{pretty_args}"
        else:
            message = f"{base_message} with no arguments"
        if txn_kwargs:
            message += f"\n\ttransaction options: {txn_kwargs}"
        print(message)
        if not self._autosign:
            _continue()

        return method(*args, sender=self._account, **txn_kwargs)


class PluginDeployer(Transactor):
    """
    Deploys plugin setup contracts and upgradeable proxies from an ape account.
    """

    def __init__(
        self,
        verify: bool = False,
        account: typing.Optional[AccountAPI] = None,
        autosign: bool = False,
    ):
        super().__init__(account, autosign)
        if verify:
            check_etherscan_plugin()
        self.verify = verify
        self._print_deployment_info()

        if not self._autosign:
            # Confirms the start of the deployment.
            _continue()

    def deploy(self, container: ContractContainer, *args, **txn_kwargs) -> ContractInstance:
        contract_name = container.contract_type.name
        if not self._autosign:
            constructor = container.contract_type.constructor
            abis = [constructor] if constructor else []
            _confirm_parameters(_named_args(abis, args), contract_name)
        return self.get_account().deploy(container, *args, **txn_kwargs)

    def deploy_uups_proxy(
        self, container: ContractContainer, *initializer_args, **txn_kwargs
    ) -> Tuple[ContractInstance, ContractInstance]:
        """
        Deploys `container` behind an ERC1967 proxy initialized with `initializer_args`.
        Returns the proxy (as `container`) and the implementation.
        """
        implementation = self.deploy(container, **txn_kwargs)
        data = implementation.initialize.encode_input(*initializer_args)
        proxy_container = _oz_dependency().ERC1967Proxy
        print(
            f"\nDeploying {proxy_container.contract_type.name} "
            f"contract to proxy {container.contract_type.name}."
        )
        proxy = self.deploy(proxy_container, implementation.address, data, **txn_kwargs)
        print(
            f"\nWrapping {container.contract_type.name} into "
            f"{proxy_container.contract_type.name} at {proxy.address}."
        )
        return container.at(proxy.address), implementation

    def finalize(self, deployments: List[ContractInstance]) -> None:
        """Optionally publishes the deployments to block explorers."""
        if self.verify:
            verify_contracts(contracts=deployments)

    def _print_deployment_info(self):
        print(
            f"Account: {self.get_account().address}",
            f"Verify: {self.verify}",
            f"Ecosystem: {networks.provider.network.ecosystem.name}",
            f"Network: {networks.provider.network.name}",
            f"Chain ID: {networks.provider.network.chain_id}",
            f"Gas Price: {networks.provider.gas_price}",
            sep="\n",
        )
