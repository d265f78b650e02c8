import click

from plugin_deployment.constants import GAS_LIMIT
from plugin_deployment.types import ChecksumAddress, MinInt, Subdomain, TransactionHash

autosign_option = click.option(
    "--autosign",
    help="Automatically sign transactions.",
    is_flag=True,
)

verify_option = click.option(
    "--verify/--no-verify",
    help="Publish the deployed contracts to the block explorer.",
    default=False,
)

subdomain_option = click.option(
    "--subdomain",
    "-s",
    help="ENS subdomain of the plugin repo. Defaults to $PLUGIN_REPO_ENS_SUBDOMAIN_NAME.",
    type=Subdomain(),
    envvar="PLUGIN_REPO_ENS_SUBDOMAIN_NAME",
    required=False,
)

maintainer_option = click.option(
    "--maintainer",
    "-m",
    help="Initial owner of the plugin repo. Defaults to the transacting account.",
    type=ChecksumAddress(),
    required=False,
)

gas_limit_option = click.option(
    "--gas-limit",
    help="Gas limit of state-changing transactions.",
    type=MinInt(21_000),
    envvar="GAS_LIMIT",
    default=GAS_LIMIT,
    show_default=True,
)

repo_address_option = click.option(
    "--repo",
    "-r",
    "repo_address",
    help="Address of the plugin repo.",
    type=ChecksumAddress(),
    envvar="PLUGIN_REPO_ADDRESS",
    required=True,
)

setup_address_option = click.option(
    "--setup",
    "setup_address",
    help=(
        "Address of a deployed plugin setup contract. "
        "Deploys $PLUGIN_SETUP_CONTRACT_NAME when omitted."
    ),
    type=ChecksumAddress(),
    envvar="PLUGIN_SETUP_ADDRESS",
    required=False,
)

release_option = click.option(
    "--release",
    help="Release number to publish a build for. Defaults to the configured version.",
    type=MinInt(1),
    required=False,
)

tx_hash_option = click.option(
    "--tx-hash",
    "-t",
    help="Hash of the transaction to inspect.",
    type=TransactionHash(),
    envvar="TX_HASH",
    required=True,
)
