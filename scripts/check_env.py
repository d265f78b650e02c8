#!/usr/bin/python3

import click
from ape import networks
from ape.cli import ConnectedProviderCommand, account_option, network_option
from dotenv import load_dotenv

from plugin_deployment.errors import UnsupportedNetwork
from plugin_deployment.networks import network_name_from_provider, resolve_connected_network
from plugin_deployment.registry import NetworkRegistry

load_dotenv()


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
def cli(network, account):
    """Prints the deployer account and the connected network."""
    provider = networks.provider
    click.echo(f"Deployer: {account.address}")
    click.echo(f"Network: {network_name_from_provider()} {provider.chain_id}")
    click.echo(f"Gas Price: {provider.gas_price}")
    try:
        network_name = resolve_connected_network(NetworkRegistry.from_env())
    except UnsupportedNetwork as e:
        click.secho(f"WARNING: {e}; no OSx deployments are known for it.", fg="yellow")
    else:
        click.echo(f"OSx network: {network_name}")


if __name__ == "__main__":
    cli()
