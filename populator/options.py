import click

from populator.constants import (
    DEFAULT_IPFS_API,
    DEFAULT_WALLET_COUNT,
    ETH_FUNDING_AMOUNT,
    IPFS_ENVVAR,
    MNEMONIC_ENVVAR,
    PROVIDER_URI_ENVVAR,
    SUPPORTED_NETWORKS,
)
from populator.sequence import Stage
from populator.types import Mnemonic, WalletCount

network_option = click.option(
    "--network",
    "-n",
    help="Name of the network whose address book is used",
    type=click.Choice(SUPPORTED_NETWORKS),
    required=True,
)

mnemonic_option = click.option(
    "--mnemonic",
    "-m",
    help=f"Seed phrase the wallets are derived from (or set {MNEMONIC_ENVVAR}).",
    envvar=MNEMONIC_ENVVAR,
    type=Mnemonic(),
    required=True,
)

provider_uri_option = click.option(
    "--provider-uri",
    "-p",
    help=f"JSON-RPC endpoint of the network (or set {PROVIDER_URI_ENVVAR}).",
    envvar=PROVIDER_URI_ENVVAR,
    type=str,
    required=True,
)

wallet_count_option = click.option(
    "--count",
    "-c",
    help="Number of wallets to derive; the first half are users, the second half proxies.",
    type=WalletCount(),
    default=DEFAULT_WALLET_COUNT,
    show_default=True,
)

ipfs_option = click.option(
    "--ipfs",
    help=f"IPFS API the metadata is pinned to (or set {IPFS_ENVVAR}).",
    envvar=IPFS_ENVVAR,
    type=str,
    default=DEFAULT_IPFS_API,
    show_default=True,
)

start_stage_option = click.option(
    "--start-stage",
    "-s",
    help="Resume the population at this stage, skipping the ones before it.",
    type=click.Choice([stage.name.lower() for stage in Stage]),
    default=None,
)

fund_eth_option = click.option(
    "--fund-eth",
    help=f"Send {ETH_FUNDING_AMOUNT} ETH from the governor to every other wallet first.",
    is_flag=True,
)

auto_option = click.option(
    "--auto",
    help="Automatically sign transactions.",
    is_flag=True,
)
