#!/usr/bin/python3

import click
from ape import networks
from ape.cli import ConnectedProviderCommand, account_option, network_option
from dotenv import load_dotenv

from plugin_deployment.constants import PLUGIN_REPO_FACTORY
from plugin_deployment.errors import SimulationFailed
from plugin_deployment.fees import build_overrides, get_fee_data
from plugin_deployment.networks import resolve_connected_network
from plugin_deployment.options import gas_limit_option, maintainer_option, subdomain_option
from plugin_deployment.registry import NetworkRegistry
from plugin_deployment.settings import PluginSettings
from plugin_deployment.transactions import simulate_create_plugin_repo

load_dotenv()


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@subdomain_option
@maintainer_option
@gas_limit_option
def cli(network, account, subdomain, maintainer, gas_limit):
    """Dry-runs createPluginRepo with eth_call and prints the would-be plugin repo address."""
    subdomain = subdomain or PluginSettings.from_env().ens_subdomain
    registry = NetworkRegistry.from_env()
    network_name = resolve_connected_network(registry)
    click.echo(f"Network deployments: {sorted(registry.get_network(network_name).contracts)}")

    factory_address = registry.contract_address(network_name, PLUGIN_REPO_FACTORY)
    click.echo(f"PluginRepoFactory address from deployments: {factory_address}")

    w3 = networks.provider.web3
    overrides = build_overrides(get_fee_data(w3), gas_limit=gas_limit)
    click.echo(f"Simulating createPluginRepo('{subdomain}') with {overrides.as_dict()}...")
    try:
        address = simulate_create_plugin_repo(
            w3,
            factory_address=factory_address,
            subdomain=subdomain,
            maintainer=maintainer or account.address,
            overrides=overrides,
        )
    except SimulationFailed as e:
        raise click.ClickException(str(e))
    click.echo(f"createPluginRepo would create a plugin repo at {address}")


if __name__ == "__main__":
    cli()
