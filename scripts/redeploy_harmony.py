#!/usr/bin/python3

import json
import os

import click
from ape import networks, project
from ape.cli import ConnectedProviderCommand, account_option, network_option
from dotenv import load_dotenv

from plugin_deployment.abis import PLUGIN_REPO_ABI, PLUGIN_REPO_FACTORY_ABI
from plugin_deployment.constants import (
    ALLOWLIST_CONTRACT_NAME,
    DELEGATION_SETUP_CONTRACT_NAME,
    HARMONY,
    HARMONY_CHAIN_ID,
    HARMONY_DEFAULTS,
    HARMONY_MAINNET,
    HIP_SETUP_CONTRACT_NAME,
    OUTPUT_DIR,
    OUTPUT_JSON_FORMAT,
)
from plugin_deployment.ens_lookup import find_plugin_repo, plugin_ens_domain
from plugin_deployment.options import autosign_option, gas_limit_option, verify_option
from plugin_deployment.params import PluginDeployer, implementation_address
from plugin_deployment.publish import publish_version
from plugin_deployment.recovery import create_plugin_repo
from plugin_deployment.registry import NetworkRegistry, generated_at, write_deployment_output
from plugin_deployment.settings import PluginSettings
from plugin_deployment.utils import address_from_env, contract_at, random_suffix

load_dotenv()

OUTPUT_PREFIX = "harmony-redeploy-output"


def _subdomain(envvar: str, prefix: str) -> str:
    return (os.environ.get(envvar) or f"{prefix}-{random_suffix()}").strip()


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@verify_option
@gas_limit_option
@autosign_option
def cli(network, account, verify, gas_limit, autosign):
    """
    Redeploys the Harmony voting plugins: the allowlist proxy, both setup
    contracts, a plugin repo per setup and v1.1 of each.
    """
    chain_id = networks.provider.chain_id
    if int(chain_id) != HARMONY_CHAIN_ID:
        raise click.ClickException(
            f"Wrong network. Expected chainId={HARMONY_CHAIN_ID}, got chainId={chain_id}"
        )

    factory_address = address_from_env(
        "PLUGIN_REPO_FACTORY_ADDRESS", HARMONY_DEFAULTS["PLUGIN_REPO_FACTORY_ADDRESS"]
    )
    repo_registry_address = address_from_env(
        "PLUGIN_REPO_REGISTRY_ADDRESS", HARMONY_DEFAULTS["PLUGIN_REPO_REGISTRY_ADDRESS"]
    )
    management_dao_address = address_from_env(
        "MANAGEMENT_DAO_ADDRESS", HARMONY_DEFAULTS["MANAGEMENT_DAO_ADDRESS"]
    )
    oracle_address = address_from_env("ORACLE_ADDRESS", HARMONY_DEFAULTS["ORACLE_ADDRESS"])
    opt_in_registry_address = address_from_env(
        "OPT_IN_REGISTRY_ADDRESS", HARMONY_DEFAULTS["OPT_IN_REGISTRY_ADDRESS"]
    )

    hip_subdomain = _subdomain("HARMONY_HIP_REPO_SUBDOMAIN", "harmony-hip")
    delegation_subdomain = _subdomain("HARMONY_DELEGATION_REPO_SUBDOMAIN", "harmony-delegation")
    settings = PluginSettings.from_env()

    print(
        f"PluginRepoFactory: {factory_address}",
        f"PluginRepoRegistry: {repo_registry_address}",
        f"Management DAO: {management_dao_address}",
        sep="\n",
    )

    deployer = PluginDeployer(verify=verify, account=account, autosign=autosign)
    w3 = networks.provider.web3

    # allowlist behind a UUPS proxy
    allowlist, _ = deployer.deploy_uups_proxy(
        getattr(project, ALLOWLIST_CONTRACT_NAME), management_dao_address
    )
    allowlist_implementation = implementation_address(w3, allowlist.address)
    print(f"{ALLOWLIST_CONTRACT_NAME} proxy: {allowlist.address}")
    print(f"{ALLOWLIST_CONTRACT_NAME} implementation: {allowlist_implementation}")

    hip_setup = deployer.deploy(
        getattr(project, HIP_SETUP_CONTRACT_NAME),
        oracle_address,
        allowlist.address,
        opt_in_registry_address,
    )
    delegation_setup = deployer.deploy(
        getattr(project, DELEGATION_SETUP_CONTRACT_NAME),
        oracle_address,
        opt_in_registry_address,
        allowlist.address,
    )
    print(f"{HIP_SETUP_CONTRACT_NAME}: {hip_setup.address}")
    print(f"{DELEGATION_SETUP_CONTRACT_NAME}: {delegation_setup.address}")

    registry = NetworkRegistry.from_env()
    network_deployment = registry.latest_network_deployment(HARMONY_MAINNET)
    factory = contract_at(factory_address, PLUGIN_REPO_FACTORY_ABI)
    maintainer = deployer.get_account().address

    repos = dict()
    for setup, subdomain in ((hip_setup, hip_subdomain), (delegation_setup, delegation_subdomain)):
        ens_domain = plugin_ens_domain(subdomain, HARMONY_MAINNET)
        creation = create_plugin_repo(
            transactor=deployer,
            factory=factory,
            w3=w3,
            subdomain=subdomain,
            maintainer=maintainer,
            lookup=lambda domain=ens_domain: find_plugin_repo(w3, network_deployment, domain),
            registry_address=repo_registry_address,
            ens_domain=ens_domain,
            gas_limit=gas_limit,
        )
        print(f"{setup.contract_type.name} PluginRepo: {creation.address} subdomain: {subdomain}")

        record = publish_version(
            transactor=deployer,
            repo=contract_at(creation.address, PLUGIN_REPO_ABI),
            w3=w3,
            setup_address=setup.address,
            release=settings.version.release,
            build_metadata=settings.build_metadata_bytes,
            release_metadata=settings.release_metadata_bytes,
        )
        repos[setup.contract_type.name] = (creation, record)

    contracts = {
        ALLOWLIST_CONTRACT_NAME: {
            "implementation": allowlist_implementation,
            "proxy": allowlist.address,
        },
        HIP_SETUP_CONTRACT_NAME: {"address": hip_setup.address},
        DELEGATION_SETUP_CONTRACT_NAME: {"address": delegation_setup.address},
    }
    for setup_name, (creation, record) in repos.items():
        repo_name = setup_name.replace("Setup", "Plugin") + "Repo"
        contracts[repo_name] = {
            "address": creation.address,
            "createTxHash": creation.tx_hash,
            "createBlockNumber": creation.block_number,
            "publishTxHash": record.tx_hash,
            "publishBlockNumber": record.block_number,
        }

    output = {
        "network": HARMONY,
        "chainId": HARMONY_CHAIN_ID,
        "generatedAt": generated_at(),
        "inputs": {
            "pluginRepoFactory": factory_address,
            "pluginRepoRegistry": repo_registry_address,
            "managementDao": management_dao_address,
            "oracle": oracle_address,
            "optInRegistry": opt_in_registry_address,
            "hipRepoSubdomain": hip_subdomain,
            "delegationRepoSubdomain": delegation_subdomain,
        },
        "contracts": contracts,
    }

    output_filepath = write_deployment_output(output, output_dir=OUTPUT_DIR, prefix=OUTPUT_PREFIX)
    print("---")
    print(f"(i) Wrote deployment output to: {output_filepath}")
    print(json.dumps(output, **OUTPUT_JSON_FORMAT))

    deployer.finalize(deployments=[allowlist, hip_setup, delegation_setup])


if __name__ == "__main__":
    cli()
