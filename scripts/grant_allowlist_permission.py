#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option
from dotenv import load_dotenv
from eth_utils import to_hex
from web3 import Web3

from plugin_deployment.abis import DAO_ABI
from plugin_deployment.constants import MANAGE_ALLOWLIST_PERMISSION
from plugin_deployment.options import autosign_option
from plugin_deployment.params import Transactor
from plugin_deployment.transactions import receipt_block_number, receipt_tx_hash
from plugin_deployment.types import ChecksumAddress
from plugin_deployment.utils import contract_at

load_dotenv()


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@click.option(
    "--allowlist",
    help="Address of the HIPPluginAllowlist proxy.",
    type=ChecksumAddress(),
    envvar="HIP_PLUGIN_ALLOWLIST_ADDRESS",
    required=True,
)
@click.option(
    "--executor",
    help="Address to grant the allowlist management permission to.",
    type=ChecksumAddress(),
    envvar="GLOBAL_EXECUTOR_ADDRESS",
    required=True,
)
@click.option(
    "--dao",
    help="Address of the management DAO.",
    type=ChecksumAddress(),
    envvar=["MANAGEMENT_DAO_PROXY_ADDRESS", "MANAGEMENT_DAO_ADDRESS"],
    required=True,
)
@autosign_option
def cli(network, account, allowlist, executor, dao, autosign):
    """Grants MANAGE_ALLOWLIST_PERMISSION on the allowlist to an executor, through the DAO."""
    permission_id = Web3.keccak(text=MANAGE_ALLOWLIST_PERMISSION)
    click.echo("Granting allowlist permission...")
    click.echo(f"Management DAO: {dao}")
    click.echo(f"Allowlist: {allowlist}")
    click.echo(f"Executor: {executor}")
    click.echo(f"Permission: {MANAGE_ALLOWLIST_PERMISSION} {to_hex(permission_id)}")

    transactor = Transactor(account, autosign=autosign)
    receipt = transactor.transact(
        contract_at(dao, DAO_ABI).grant, allowlist, executor, permission_id
    )
    click.echo(f"Transaction sent: {receipt_tx_hash(receipt)}")
    click.echo(f"Grant confirmed in block: {receipt_block_number(receipt)}")


if __name__ == "__main__":
    cli()
