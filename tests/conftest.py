import json
from unittest.mock import MagicMock

import pytest
from hexbytes import HexBytes
from web3 import Web3

from populator.constants import (
    CURATION,
    ENS_PUBLIC_RESOLVER,
    ENS_TEST_REGISTRAR,
    EPOCH_MANAGER,
    ETHEREUM_DID_REGISTRY,
    GNS,
    GRAPH_TOKEN,
    SERVICE_REGISTRY,
    STAKING,
)
from populator.metadata import load_mock_data
from populator.registry import AddressBook, AddressBookEntry
from populator.stages import PopulationContext
from populator.transactor import Transactor
from populator.utils import bytes32_to_ipfs_hash
from populator.wallets import Wallet, role_for_index, split_wallets

WALLET_COUNT = 20

CONTRACT_NAMES = [
    GRAPH_TOKEN,
    EPOCH_MANAGER,
    CURATION,
    GNS,
    STAKING,
    SERVICE_REGISTRY,
    ETHEREUM_DID_REGISTRY,
    ENS_TEST_REGISTRAR,
    ENS_PUBLIC_RESOLVER,
]


# Digit-only addresses are their own checksum form
def fake_address(n: int) -> str:
    return f"0x{n:040d}"


def wallet_address(index: int) -> str:
    return fake_address(index + 1)


def contract_address(name: str) -> str:
    return fake_address(1000 + CONTRACT_NAMES.index(name))


class RecordingTransactor(Transactor):
    """Confirms every call without a network, keeping them in the order they were sent."""

    def __init__(self, fail_on=None):
        super().__init__(autosign=True)
        self.calls = list()
        self.fail_on = fail_on

    def _execute(self, call):
        self.calls.append(call)
        failed = self.fail_on is not None and self.fail_on(call)
        return {
            "status": 0 if failed else 1,
            "blockNumber": len(self.calls),
            "transactionHash": HexBytes(len(self.calls).to_bytes(32, "big")),
        }

    def methods(self):
        return [getattr(call, "method", None) for call in self.calls]

    def calls_to(self, method):
        return [call for call in self.calls if getattr(call, "method", None) == method]


class FakeIPFS:
    """Content-addresses pinned documents the same way every time."""

    def __init__(self):
        self.documents = list()

    def pin_json(self, document):
        self.documents.append(document)
        digest = Web3.keccak(text=json.dumps(document, sort_keys=True))
        return bytes32_to_ipfs_hash(digest)


@pytest.fixture()
def web3():
    w3 = MagicMock()
    w3.eth.contract.side_effect = lambda address, abi: MagicMock(address=address)
    w3.eth.chain_id = 1337
    return w3


@pytest.fixture()
def wallet_list(web3):
    wallets = list()
    for index in range(WALLET_COUNT):
        account = MagicMock()
        account.address = wallet_address(index)
        wallets.append(
            Wallet(
                index=index,
                role=role_for_index(index, WALLET_COUNT),
                account=account,
                web3=web3,
            )
        )
    return wallets


@pytest.fixture()
def wallets(wallet_list):
    return split_wallets(wallet_list)


@pytest.fixture()
def address_book(wallets):
    entry = AddressBookEntry(
        network="testnet",
        chain_id=1337,
        governor=wallets.governor.address,
        contracts={name: contract_address(name) for name in CONTRACT_NAMES},
    )
    return AddressBook(entry=entry)


@pytest.fixture()
def transactor():
    return RecordingTransactor()


@pytest.fixture()
def ipfs():
    return FakeIPFS()


@pytest.fixture(scope="module")
def mock_data():
    return load_mock_data()


@pytest.fixture()
def context(address_book, transactor, ipfs, wallets, mock_data):
    return PopulationContext(
        address_book=address_book,
        transactor=transactor,
        ipfs=ipfs,
        wallets=wallets,
        mock_data=mock_data,
    )
