"""
The population stages. Each one drives one or more connected contracts across
the provisioned wallets and sends every call through the Transactor, so a stage
returns only after its last transaction is confirmed.

Wallet i is always paired with entry i of the mock data (account and subgraph
metadata, deployment id, indexer endpoint, channel key) and with proxy i.
"""

import math
from typing import NamedTuple, Sequence

from populator.connected import (
    ConnectedCuration,
    ConnectedENS,
    ConnectedEpochManager,
    ConnectedEthereumDIDRegistry,
    ConnectedGNS,
    ConnectedGraphToken,
    ConnectedServiceRegistry,
    ConnectedStaking,
)
from populator.constants import (
    ALLOCATION_PRICE,
    CURATION_APPROVAL_AMOUNT,
    DEFAULT_EPOCH_LENGTH,
    DEFAULT_THAWING_PERIOD,
    DEPRECATED_SUBGRAPH_ACCOUNT,
    ETH_FUNDING_AMOUNT,
    FIRST_SUBGRAPH_NUMBER,
    GRT_FUNDING_AMOUNT,
    MIN_EPOCH_LENGTH,
    MIN_THAWING_PERIOD,
    REDEEM_SHARES,
    REREGISTERED_INDEXERS,
    SETTLERS,
    SIGNAL_AMOUNT,
    SIGNAL_AMOUNT_BIG,
    STAKE_AMOUNT,
    UNSTAKERS,
)
from populator.ipfs import IPFSClient
from populator.metadata import MockData, ens_name, ens_namehash
from populator.registry import AddressBook
from populator.transactor import EtherTransfer, Transactor, check_governor
from populator.wallets import Role, Wallet, Wallets


class AlignmentError(ValueError):
    pass


class PopulationContext(NamedTuple):
    address_book: AddressBook
    transactor: Transactor
    ipfs: IPFSClient
    wallets: Wallets
    mock_data: MockData


def check_aligned(name: str, collection: Sequence, wallets: Sequence[Wallet]) -> None:
    """Every wallet needs its own entry; extra entries are left unused."""
    if len(collection) < len(wallets):
        raise AlignmentError(
            f"{len(wallets)} wallets need as many {name}, only {len(collection)} available"
        )


def send_eth(ctx: PopulationContext, amount: str = ETH_FUNDING_AMOUNT) -> None:
    """Sends ETH to the accounts that act as indexers, curators, etc."""
    print("Sending ETH...")
    governor = ctx.wallets.governor
    check_governor(governor.address, ctx.address_book)
    recipients = [w for w in ctx.wallets.all() if w.role != Role.GOVERNOR]
    for wallet in recipients:
        ctx.transactor.transact(EtherTransfer(signer=governor, to=wallet.address, amount=amount))


def populate_graph_token(ctx: PopulationContext, amount: str = GRT_FUNDING_AMOUNT) -> None:
    """Sends GRT to the accounts that act as indexers, curators, etc."""
    print("Running graph token contract calls...")
    users, proxies = ctx.wallets.users, ctx.wallets.proxies
    check_aligned("proxies", proxies, users)
    graph_token = ConnectedGraphToken(ctx.address_book, ctx.wallets.governor)
    print("Sending GRT to indexers, curators, and proxies...")
    for user, proxy in zip(users, proxies):
        ctx.transactor.transact(graph_token.transfer_with_decimals(user.address, amount))
        ctx.transactor.transact(graph_token.transfer_with_decimals(proxy.address, amount))


def populate_ethereum_did_registry(ctx: PopulationContext) -> None:
    print("Running did registry contract calls...")
    users, accounts = ctx.wallets.users, ctx.mock_data.accounts
    check_aligned("account metadatas", accounts, users)
    for user, account_metadata in zip(users, accounts):
        edr = ConnectedEthereumDIDRegistry(ctx.address_book, user)
        print(
            f"Calling setAttribute on DID registry for {account_metadata.name} "
            f"and account {user.address} ..."
        )
        ctx.transactor.transact(edr.pin_ipfs_and_set_attribute(ctx.ipfs, account_metadata))


def populate_ens(ctx: PopulationContext) -> None:
    print("Running ENS contract calls...")
    users, subgraphs = ctx.wallets.users, ctx.mock_data.subgraphs
    check_aligned("subgraph metadatas", subgraphs, users)
    for user, subgraph_metadata in zip(users, subgraphs):
        ens = ConnectedENS(ctx.address_book, user)
        name = ens_name(subgraph_metadata.subgraph_display_name)
        print(f"Setting {name} for {user.address} on ens ...")
        ctx.transactor.transact(ens.set_test_record(name))
        ctx.transactor.transact(ens.set_text(name))


def populate_gns(ctx: PopulationContext) -> None:
    """Publishes a subgraph per user, a new version of each, then deprecates one."""
    print("Running GNS contract calls...")
    users, subgraphs = ctx.wallets.users, ctx.mock_data.subgraphs
    deployment_ids = ctx.mock_data.deployment_ids
    check_aligned("subgraph metadatas", subgraphs, users)
    check_aligned("deployment ids", deployment_ids, users)
    if len(users) <= DEPRECATED_SUBGRAPH_ACCOUNT:
        raise AlignmentError(f"No user {DEPRECATED_SUBGRAPH_ACCOUNT} to deprecate a subgraph for")

    for user, subgraph_metadata, deployment_id in zip(users, subgraphs, deployment_ids):
        gns = ConnectedGNS(ctx.address_book, user)
        name = ens_name(subgraph_metadata.subgraph_display_name)
        name_identifier = ens_namehash(name)
        print(f"Publishing {name} for {user.address} on GNS ...")
        ctx.transactor.transact(
            gns.pin_ipfs_and_new_subgraph(
                ctx.ipfs,
                user.address,
                deployment_id.base58,
                name_identifier,
                name,
                subgraph_metadata,
            )
        )
        print(f"Updating version of {name} for {user.address} on GNS ...")
        # TODO: look up the account's latest subgraph number so re-runs version the right subgraph
        ctx.transactor.transact(
            gns.pin_ipfs_and_new_version(
                ctx.ipfs,
                user.address,
                deployment_id.base58,
                name_identifier,
                name,
                subgraph_metadata,
                FIRST_SUBGRAPH_NUMBER,
            )
        )

    deprecator = users[DEPRECATED_SUBGRAPH_ACCOUNT]
    gns = ConnectedGNS(ctx.address_book, deprecator)
    print(f"Deprecating subgraph {FIRST_SUBGRAPH_NUMBER} of {deprecator.address} on GNS ...")
    ctx.transactor.transact(gns.deprecate(deprecator.address, FIRST_SUBGRAPH_NUMBER))


def populate_curation(ctx: PopulationContext) -> None:
    """
    Every user signals on its own deployment, then on a few shared ones
    so their bonding curves move. Half of the users then redeem some signal.
    """
    print("Running curation contract calls...")
    users, deployment_ids = ctx.wallets.users, ctx.mock_data.deployment_ids
    check_aligned("deployment ids", deployment_ids, users)
    shared = [d.bytes32 for d in deployment_ids[:3]]
    if len(shared) < 3:
        raise AlignmentError("Curation needs at least 3 deployment ids")

    for user, deployment_id in zip(users, deployment_ids):
        curation = ConnectedCuration(ctx.address_book, user)
        graph_token = ConnectedGraphToken(ctx.address_book, user)
        print("First calling approve() to ensure curation contract can call transferFrom()...")
        ctx.transactor.transact(
            graph_token.approve_with_decimals(curation.address, CURATION_APPROVAL_AMOUNT)
        )
        print("Now calling multiple signal() txs on curation...")
        ctx.transactor.transact(curation.signal_with_decimals(deployment_id.bytes32, SIGNAL_AMOUNT))
        ctx.transactor.transact(curation.signal_with_decimals(shared[0], SIGNAL_AMOUNT))
        ctx.transactor.transact(curation.signal_with_decimals(shared[1], SIGNAL_AMOUNT))
        ctx.transactor.transact(curation.signal_with_decimals(shared[2], SIGNAL_AMOUNT_BIG))

    print("Running redeem transactions...")
    for user in users[: math.ceil(len(users) / 2)]:
        curation = ConnectedCuration(ctx.address_book, user)
        ctx.transactor.transact(curation.redeem_with_decimals(shared[1], REDEEM_SHARES))


def populate_service_registry(ctx: PopulationContext) -> None:
    """Registers every user as an indexer; the first few unregister and register again."""
    print("Running service registry contract calls...")
    users, endpoints = ctx.wallets.users, ctx.mock_data.indexer_endpoints
    check_aligned("indexer endpoints", endpoints, users)
    for index, (user, endpoint) in enumerate(zip(users, endpoints)):
        service_registry = ConnectedServiceRegistry(ctx.address_book, user)
        print("Registering an indexer in the service registry...")
        ctx.transactor.transact(service_registry.register(endpoint.url, endpoint.geohash))
        if index < REREGISTERED_INDEXERS:
            print("Unregistering a few to test...")
            ctx.transactor.transact(service_registry.unregister())
            print("Re-registering them...")
            ctx.transactor.transact(service_registry.register(endpoint.url, endpoint.geohash))


def populate_staking(ctx: PopulationContext) -> None:
    """
    Stakes for every user, unstakes and withdraws for a few, opens an allocation
    per user and settles some of them from the proxies.

    Epochs are shortened to one block and the thawing period removed so that
    withdrawals and settlements go through right away; both are set back to
    their defaults at the end.
    """
    print("Running staking contract calls...")
    governor = ctx.wallets.governor
    check_governor(governor.address, ctx.address_book)
    users, proxies = ctx.wallets.users, ctx.wallets.proxies
    deployment_ids = ctx.mock_data.deployment_ids
    channel_pub_keys = ctx.mock_data.channel_pub_keys
    check_aligned("proxies", proxies, users)
    check_aligned("deployment ids", deployment_ids, users)
    check_aligned("channel keys", channel_pub_keys, users)

    epoch_manager = ConnectedEpochManager(ctx.address_book, governor)
    governor_staking = ConnectedStaking(ctx.address_book, governor)

    for user in users:
        staking = ConnectedStaking(ctx.address_book, user)
        graph_token = ConnectedGraphToken(ctx.address_book, user)
        print(
            "First calling approve() to ensure staking contract "
            "can call transferFrom() from the stakers..."
        )
        ctx.transactor.transact(graph_token.approve_with_decimals(staking.address, STAKE_AMOUNT))
        print("Now calling stake()...")
        ctx.transactor.transact(staking.stake_with_decimals(STAKE_AMOUNT))

    print(f"Calling governor function to set epoch length to {MIN_EPOCH_LENGTH}...")
    ctx.transactor.transact(epoch_manager.set_epoch_length(MIN_EPOCH_LENGTH))
    print(f"Calling governor function to set thawing period to {MIN_THAWING_PERIOD}...")
    ctx.transactor.transact(governor_staking.set_thawing_period(MIN_THAWING_PERIOD))

    print(f"Approve, stake extra, initialize unstake and withdraw for {UNSTAKERS} users...")
    for user in users[:UNSTAKERS]:
        staking = ConnectedStaking(ctx.address_book, user)
        graph_token = ConnectedGraphToken(ctx.address_book, user)
        ctx.transactor.transact(graph_token.approve_with_decimals(staking.address, STAKE_AMOUNT))
        ctx.transactor.transact(staking.stake_with_decimals(STAKE_AMOUNT))
        ctx.transactor.transact(staking.unstake_with_decimals(STAKE_AMOUNT))
        ctx.transactor.transact(staking.withdraw())

    print(f"Create {len(users)} allocations...")
    for user, proxy, deployment_id, channel_pub_key in zip(
        users, proxies, deployment_ids, channel_pub_keys
    ):
        staking = ConnectedStaking(ctx.address_book, user)
        ctx.transactor.transact(
            staking.allocate_with_decimals(
                STAKE_AMOUNT,
                ALLOCATION_PRICE,
                proxy.address,
                deployment_id.bytes32,
                channel_pub_key,
            )
        )

    print("Run Epoch....")
    ctx.transactor.transact(epoch_manager.run_epoch())

    print(f"Settle {SETTLERS} allocations...")
    for proxy in proxies[:SETTLERS]:
        # settlements come from the channel proxies, not the stakers
        graph_token = ConnectedGraphToken(ctx.address_book, proxy)
        staking = ConnectedStaking(ctx.address_book, proxy)
        print(
            "First calling approve() to ensure staking contract "
            "can call transferFrom() from the proxies..."
        )
        ctx.transactor.transact(graph_token.approve_with_decimals(staking.address, STAKE_AMOUNT))
        print("Settling a channel...")
        ctx.transactor.transact(staking.settle_with_decimals(STAKE_AMOUNT))

    print("Setting epoch length back to default")
    ctx.transactor.transact(epoch_manager.set_epoch_length(DEFAULT_EPOCH_LENGTH))
    print("Setting back the thawing period to default")
    ctx.transactor.transact(governor_staking.set_thawing_period(DEFAULT_THAWING_PERIOD))
