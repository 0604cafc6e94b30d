#!/usr/bin/python3

import click
from dotenv import load_dotenv

from populator.ipfs import IPFSClient
from populator.metadata import load_mock_data
from populator.options import (
    auto_option,
    fund_eth_option,
    ipfs_option,
    mnemonic_option,
    network_option,
    provider_uri_option,
    start_stage_option,
    wallet_count_option,
)
from populator.registry import AddressBook
from populator.sequence import PopulationSequence, Stage, get_stages
from populator.stages import PopulationContext
from populator.transactor import Transactor, _continue
from populator.wallets import provision_wallets


@click.command(name="populate-data")
@network_option
@mnemonic_option
@provider_uri_option
@wallet_count_option
@ipfs_option
@start_stage_option
@fund_eth_option
@auto_option
def cli(network, mnemonic, provider_uri, count, ipfs, start_stage, fund_eth, auto):
    """Populate a deployed network with mock accounts, subgraphs, signal, indexers and allocations."""
    stages = get_stages(fund_eth=fund_eth)
    start = Stage(start_stage) if start_stage else None
    if start is not None and start not in stages:
        raise click.BadOptionUsage(
            option_name="--start-stage",
            message=f"Cannot start at {start.value} without --fund-eth.",
        )

    address_book = AddressBook.from_network(network)
    wallets = provision_wallets(mnemonic=mnemonic, provider_uri=provider_uri, count=count)
    address_book.check_chain_id(wallets.governor.web3)

    click.echo(
        "\n".join(
            [
                f"Network: {address_book.network}",
                f"Chain ID: {address_book.chain_id}",
                f"Governor: {wallets.governor.address}",
                f"Users: {len(wallets.users)}",
                f"Proxies: {len(wallets.proxies)}",
                f"IPFS: {ipfs}",
                f"Stages: {', '.join(stage.value for stage in stages)}",
            ]
        )
    )
    if not auto:
        _continue()

    context = PopulationContext(
        address_book=address_book,
        transactor=Transactor(autosign=auto),
        ipfs=IPFSClient(api_url=ipfs),
        wallets=wallets,
        mock_data=load_mock_data(),
    )
    sequence = PopulationSequence(context=context, stages=stages, start=start)
    completed = sequence.run()
    click.secho(f"\nPopulated {network} with {len(completed)} stages.", fg="green")


if __name__ == "__main__":
    load_dotenv()
    cli()
