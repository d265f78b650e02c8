#!/usr/bin/python3

import json

import click
from ape import networks, project
from ape.cli import ConnectedProviderCommand, account_option, network_option
from dotenv import load_dotenv

from plugin_deployment.abis import PLUGIN_REPO_ABI
from plugin_deployment.constants import OUTPUT_JSON_FORMAT
from plugin_deployment.options import (
    autosign_option,
    release_option,
    repo_address_option,
    setup_address_option,
    verify_option,
)
from plugin_deployment.params import PluginDeployer
from plugin_deployment.publish import publish_version, published_versions
from plugin_deployment.settings import PluginSettings
from plugin_deployment.utils import contract_at

load_dotenv()


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@repo_address_option
@setup_address_option
@release_option
@verify_option
@autosign_option
def cli(network, account, repo_address, setup_address, release, verify, autosign):
    """Publishes a new build of a plugin release on an existing plugin repo."""
    settings = PluginSettings.from_env()
    release = release or settings.version.release
    w3 = networks.provider.web3

    published = published_versions(w3, repo_address)
    if published is None:
        click.secho(
            "WARNING: Could not list the builds already published; continuing.", fg="yellow"
        )
        published = list()
    else:
        click.echo(f"(i) {len(published)} build(s) published on {repo_address} so far.")
    for event in published:
        click.echo(
            f"\tv{event['args']['release']}.{event['args']['build']} "
            f"setup={event['args']['pluginSetup']} block={event['blockNumber']}"
        )

    if not settings.build_metadata_uri or not settings.release_metadata_uri:
        click.secho(
            "WARNING: BUILD_METADATA_URI or RELEASE_METADATA_URI is empty; "
            "the metadata below will not be discoverable.",
            fg="yellow",
        )
        metadata = {"build": settings.build_metadata, "release": settings.release_metadata}
        click.echo(json.dumps(metadata, **OUTPUT_JSON_FORMAT))

    deployer = PluginDeployer(verify=verify, account=account, autosign=autosign)
    deployments = list()
    if setup_address is None:
        setup = deployer.deploy(
            getattr(project, settings.plugin_setup_contract_name), *settings.setup_args_for()
        )
        deployments.append(setup)
        setup_address = setup.address

    record = publish_version(
        transactor=deployer,
        repo=contract_at(repo_address, PLUGIN_REPO_ABI),
        w3=w3,
        setup_address=setup_address,
        release=release,
        build_metadata=settings.build_metadata_bytes,
        release_metadata=settings.release_metadata_bytes,
    )
    click.echo(json.dumps(record.as_dict(), **OUTPUT_JSON_FORMAT))
    deployer.finalize(deployments=deployments)


if __name__ == "__main__":
    cli()
