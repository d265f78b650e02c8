#!/usr/bin/python3

import click
from ape import networks
from ape.cli import ConnectedProviderCommand, account_option, network_option
from dotenv import load_dotenv

from plugin_deployment.abis import PLUGIN_REPO_FACTORY_ABI
from plugin_deployment.constants import PLUGIN_REPO_FACTORY, PLUGIN_REPO_REGISTRY
from plugin_deployment.ens_lookup import find_plugin_repo, plugin_ens_domain
from plugin_deployment.networks import resolve_connected_network
from plugin_deployment.options import (
    autosign_option,
    gas_limit_option,
    maintainer_option,
    subdomain_option,
)
from plugin_deployment.params import Transactor
from plugin_deployment.recovery import create_plugin_repo
from plugin_deployment.registry import NetworkRegistry
from plugin_deployment.settings import PluginSettings
from plugin_deployment.utils import contract_at

load_dotenv()


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@subdomain_option
@maintainer_option
@gas_limit_option
@autosign_option
def cli(network, account, subdomain, maintainer, gas_limit, autosign):
    """
    Creates a plugin repo under Aragon's ENS base domain through the PluginRepoFactory.
    Skipped when the ENS name is claimed already.
    """
    settings = PluginSettings.from_env()
    subdomain = subdomain or settings.ens_subdomain

    registry = NetworkRegistry.from_env()
    network_name = resolve_connected_network(registry)
    network_deployment = registry.latest_network_deployment(network_name)
    w3 = networks.provider.web3

    ens_domain = plugin_ens_domain(subdomain, network_name)
    existing = find_plugin_repo(w3, network_deployment, ens_domain)
    if existing is not None:
        click.echo(f"ENS name '{ens_domain}' was claimed already at '{existing}'. Skipping.")
        return

    click.echo(f"Creating the '{ens_domain}' plugin repo through Aragon's 'PluginRepoFactory'...")
    factory_address = registry.contract_address(network_name, PLUGIN_REPO_FACTORY)
    registry_address = registry.get_network(network_name).contracts.get(PLUGIN_REPO_REGISTRY)

    transactor = Transactor(account, autosign=autosign)
    creation = create_plugin_repo(
        transactor=transactor,
        factory=contract_at(factory_address, PLUGIN_REPO_FACTORY_ABI),
        w3=w3,
        subdomain=subdomain,
        maintainer=maintainer or transactor.get_account().address,
        lookup=lambda: find_plugin_repo(w3, network_deployment, ens_domain),
        registry_address=registry_address,
        ens_domain=ens_domain,
        gas_limit=gas_limit,
    )
    click.echo(f"PluginRepo '{ens_domain}' deployed at '{creation.address}'.")


if __name__ == "__main__":
    cli()
