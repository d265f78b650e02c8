#!/usr/bin/python3

import click
from ape import networks
from ape.cli import ConnectedProviderCommand, network_option
from dotenv import load_dotenv

from plugin_deployment.options import tx_hash_option
from plugin_deployment.transactions import inspect_transaction

load_dotenv()


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@tx_hash_option
def cli(network, tx_hash):
    """Prints what the chain knows about a transaction, including its revert reason."""
    click.echo(f"Inspecting tx {tx_hash}")
    diagnostics = inspect_transaction(networks.provider.web3, tx_hash)
    click.echo(f"TX: {diagnostics.transaction}")
    click.echo(f"RECEIPT: {diagnostics.receipt}")

    if diagnostics.log_count:
        click.echo(f"Logs count: {diagnostics.log_count}")
    else:
        click.echo("No logs in receipt")

    if diagnostics.call_error is not None:
        click.echo(f"Call error (likely revert reason): {diagnostics.call_error}")
    elif diagnostics.call_result is not None:
        click.echo(f"Call result (may be revert data): {diagnostics.call_result}")

    for address, code_size in diagnostics.log_code_sizes.items():
        click.echo(f"Log address {address} code size: {code_size}")


if __name__ == "__main__":
    cli()
