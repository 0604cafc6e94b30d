from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Union

from eth_typing import ChecksumAddress
from hexbytes import HexBytes

from populator.constants import (
    CURATION,
    DID_ATTRIBUTE_NAME,
    DID_ATTRIBUTE_VALIDITY,
    ENS_PUBLIC_RESOLVER,
    ENS_TEST_REGISTRAR,
    EPOCH_MANAGER,
    ETHEREUM_DID_REGISTRY,
    GNS,
    GRAPH_NAME_SERVICE,
    GRAPH_TOKEN,
    SERVICE_REGISTRY,
    STAKING,
)
from populator.ipfs import IPFSClient
from populator.metadata import (
    AccountMetadata,
    SubgraphMetadata,
    ens_labelhash,
    ens_namehash,
)
from populator.registry import AddressBook
from populator.transactor import ContractCall
from populator.utils import ipfs_hash_to_bytes32, to_base_units
from populator.wallets import Wallet

Amount = Union[str, int]
DeploymentIDBytes = Union[str, bytes]


#
# Capabilities
#


class GraphTokenAPI(ABC):
    @abstractmethod
    def transfer_with_decimals(self, to: ChecksumAddress, amount: Amount) -> ContractCall:
        raise NotImplementedError

    @abstractmethod
    def approve_with_decimals(self, spender: ChecksumAddress, amount: Amount) -> ContractCall:
        raise NotImplementedError


class EpochManagerAPI(ABC):
    @abstractmethod
    def set_epoch_length(self, blocks: int) -> ContractCall:
        raise NotImplementedError

    @abstractmethod
    def run_epoch(self) -> ContractCall:
        raise NotImplementedError


class CurationAPI(ABC):
    @abstractmethod
    def signal_with_decimals(
        self, deployment_id: DeploymentIDBytes, amount: Amount
    ) -> ContractCall:
        raise NotImplementedError

    @abstractmethod
    def redeem_with_decimals(
        self, deployment_id: DeploymentIDBytes, shares: Amount
    ) -> ContractCall:
        raise NotImplementedError


class GNSAPI(ABC):
    @abstractmethod
    def pin_ipfs_and_new_subgraph(
        self,
        ipfs: IPFSClient,
        graph_account: ChecksumAddress,
        deployment_id: str,
        name_identifier: bytes,
        name: str,
        metadata: SubgraphMetadata,
    ) -> ContractCall:
        raise NotImplementedError

    @abstractmethod
    def pin_ipfs_and_new_version(
        self,
        ipfs: IPFSClient,
        graph_account: ChecksumAddress,
        deployment_id: str,
        name_identifier: bytes,
        name: str,
        metadata: SubgraphMetadata,
        subgraph_number: int,
    ) -> ContractCall:
        raise NotImplementedError

    @abstractmethod
    def deprecate(self, graph_account: ChecksumAddress, subgraph_number: int) -> ContractCall:
        raise NotImplementedError


class StakingAPI(ABC):
    @abstractmethod
    def stake_with_decimals(self, amount: Amount) -> ContractCall:
        raise NotImplementedError

    @abstractmethod
    def unstake_with_decimals(self, amount: Amount) -> ContractCall:
        raise NotImplementedError

    @abstractmethod
    def withdraw(self) -> ContractCall:
        raise NotImplementedError

    @abstractmethod
    def allocate_with_decimals(
        self,
        amount: Amount,
        price: Amount,
        channel_proxy: ChecksumAddress,
        deployment_id: DeploymentIDBytes,
        channel_pub_key: str,
    ) -> ContractCall:
        raise NotImplementedError

    @abstractmethod
    def settle_with_decimals(self, amount: Amount) -> ContractCall:
        raise NotImplementedError

    @abstractmethod
    def set_thawing_period(self, blocks: int) -> ContractCall:
        raise NotImplementedError


class ServiceRegistryAPI(ABC):
    @abstractmethod
    def register(self, url: str, geohash: str) -> ContractCall:
        raise NotImplementedError

    @abstractmethod
    def unregister(self) -> ContractCall:
        raise NotImplementedError


class EthereumDIDRegistryAPI(ABC):
    @abstractmethod
    def pin_ipfs_and_set_attribute(
        self, ipfs: IPFSClient, metadata: AccountMetadata
    ) -> ContractCall:
        raise NotImplementedError


class ENSAPI(ABC):
    @abstractmethod
    def set_test_record(self, name: str) -> ContractCall:
        raise NotImplementedError

    @abstractmethod
    def set_text(self, name: str) -> ContractCall:
        raise NotImplementedError


#
# Implementations
#


class ConnectedContract:
    """
    A deployed contract from the address book bound to a single signer.
    Calls are built here and sent by a Transactor.
    """

    CONTRACT_NAME: str = NotImplemented

    def __init__(self, address_book: AddressBook, wallet: Wallet):
        self.address_book = address_book
        self.configured_wallet = wallet
        self.contract = self._connect(self.CONTRACT_NAME)

    @property
    def address(self) -> ChecksumAddress:
        return self.contract.address

    def _connect(self, contract_name: str):
        address = self.address_book.get_address(contract_name)
        abi = self.address_book.get_abi(contract_name)
        return self.configured_wallet.web3.eth.contract(address=address, abi=abi)

    def _call(self, method: str, *args, contract=None, contract_name: str = None) -> ContractCall:
        if contract is None:
            contract, contract_name = self.contract, self.CONTRACT_NAME
        abi = self.address_book.get_abi(contract_name)
        named_args = _name_args(abi=abi, method=method, args=args)
        function = getattr(contract.functions, method)(*args)
        return ContractCall(
            signer=self.configured_wallet,
            contract_name=contract_name,
            address=contract.address,
            method=method,
            named_args=named_args,
            function=function,
        )


def _name_args(abi, method: str, args: tuple) -> OrderedDict:
    """Pairs call arguments with the names of the ABI inputs they are passed to."""
    candidates = [entry for entry in abi if entry.get("name") == method]
    for entry in candidates:
        inputs = entry.get("inputs", [])
        if len(inputs) == len(args):
            return OrderedDict((i["name"], arg) for i, arg in zip(inputs, args))
    if not candidates:
        raise ValueError(f"No method named {method} in ABI")
    raise ValueError(f"Wrong number of arguments for {method}: got {len(args)}")


def _bytes32(value: DeploymentIDBytes) -> HexBytes:
    value = HexBytes(value)
    if len(value) != 32:
        raise ValueError(f"Expected 32 bytes, got {len(value)}")
    return value


class ConnectedGraphToken(ConnectedContract, GraphTokenAPI):
    CONTRACT_NAME = GRAPH_TOKEN

    def transfer_with_decimals(self, to: ChecksumAddress, amount: Amount) -> ContractCall:
        return self._call("transfer", to, to_base_units(amount))

    def approve_with_decimals(self, spender: ChecksumAddress, amount: Amount) -> ContractCall:
        return self._call("approve", spender, to_base_units(amount))


class ConnectedEpochManager(ConnectedContract, EpochManagerAPI):
    CONTRACT_NAME = EPOCH_MANAGER

    def set_epoch_length(self, blocks: int) -> ContractCall:
        return self._call("setEpochLength", blocks)

    def run_epoch(self) -> ContractCall:
        return self._call("runEpoch")


class ConnectedCuration(ConnectedContract, CurationAPI):
    CONTRACT_NAME = CURATION

    def signal_with_decimals(
        self, deployment_id: DeploymentIDBytes, amount: Amount
    ) -> ContractCall:
        return self._call("signal", _bytes32(deployment_id), to_base_units(amount))

    def redeem_with_decimals(
        self, deployment_id: DeploymentIDBytes, shares: Amount
    ) -> ContractCall:
        return self._call("redeem", _bytes32(deployment_id), to_base_units(shares))


class ConnectedGNS(ConnectedContract, GNSAPI):
    CONTRACT_NAME = GNS

    def pin_ipfs_and_new_subgraph(
        self,
        ipfs: IPFSClient,
        graph_account: ChecksumAddress,
        deployment_id: str,
        name_identifier: bytes,
        name: str,
        metadata: SubgraphMetadata,
    ) -> ContractCall:
        metadata_hash = ipfs.pin_json(metadata.to_document())
        return self._call(
            "publishNewSubgraph",
            graph_account,
            ipfs_hash_to_bytes32(deployment_id),
            _bytes32(name_identifier),
            name,
            ipfs_hash_to_bytes32(metadata_hash),
        )

    def pin_ipfs_and_new_version(
        self,
        ipfs: IPFSClient,
        graph_account: ChecksumAddress,
        deployment_id: str,
        name_identifier: bytes,
        name: str,
        metadata: SubgraphMetadata,
        subgraph_number: int,
    ) -> ContractCall:
        metadata_hash = ipfs.pin_json(metadata.to_document())
        return self._call(
            "publishNewVersion",
            graph_account,
            subgraph_number,
            ipfs_hash_to_bytes32(deployment_id),
            _bytes32(name_identifier),
            name,
            ipfs_hash_to_bytes32(metadata_hash),
        )

    def deprecate(self, graph_account: ChecksumAddress, subgraph_number: int) -> ContractCall:
        return self._call("deprecate", graph_account, subgraph_number)


class ConnectedStaking(ConnectedContract, StakingAPI):
    CONTRACT_NAME = STAKING

    def stake_with_decimals(self, amount: Amount) -> ContractCall:
        return self._call("stake", to_base_units(amount))

    def unstake_with_decimals(self, amount: Amount) -> ContractCall:
        return self._call("unstake", to_base_units(amount))

    def withdraw(self) -> ContractCall:
        return self._call("withdraw")

    def allocate_with_decimals(
        self,
        amount: Amount,
        price: Amount,
        channel_proxy: ChecksumAddress,
        deployment_id: DeploymentIDBytes,
        channel_pub_key: str,
    ) -> ContractCall:
        return self._call(
            "allocate",
            _bytes32(deployment_id),
            to_base_units(amount),
            HexBytes(channel_pub_key),
            channel_proxy,
            to_base_units(price),
        )

    def settle_with_decimals(self, amount: Amount) -> ContractCall:
        return self._call("settle", to_base_units(amount))

    def set_thawing_period(self, blocks: int) -> ContractCall:
        return self._call("setThawingPeriod", blocks)


class ConnectedServiceRegistry(ConnectedContract, ServiceRegistryAPI):
    CONTRACT_NAME = SERVICE_REGISTRY

    def register(self, url: str, geohash: str) -> ContractCall:
        return self._call("register", url, geohash)

    def unregister(self) -> ContractCall:
        return self._call("unregister")


class ConnectedEthereumDIDRegistry(ConnectedContract, EthereumDIDRegistryAPI):
    CONTRACT_NAME = ETHEREUM_DID_REGISTRY

    def pin_ipfs_and_set_attribute(
        self, ipfs: IPFSClient, metadata: AccountMetadata
    ) -> ContractCall:
        metadata_hash = ipfs.pin_json(metadata.to_document())
        return self._call(
            "setAttribute",
            self.configured_wallet.address,
            DID_ATTRIBUTE_NAME,
            ipfs_hash_to_bytes32(metadata_hash),
            DID_ATTRIBUTE_VALIDITY,
        )


class ConnectedENS(ConnectedContract, ENSAPI):
    """The test registrar hands out `<label>.test` names; the resolver holds their records."""

    CONTRACT_NAME = ENS_TEST_REGISTRAR

    def __init__(self, address_book: AddressBook, wallet: Wallet):
        super().__init__(address_book, wallet)
        self.resolver = self._connect(ENS_PUBLIC_RESOLVER)

    def set_test_record(self, name: str) -> ContractCall:
        return self._call("register", ens_labelhash(name), self.configured_wallet.address)

    def set_text(self, name: str) -> ContractCall:
        return self._call(
            "setText",
            ens_namehash(name),
            GRAPH_NAME_SERVICE,
            self.configured_wallet.address,
            contract=self.resolver,
            contract_name=ENS_PUBLIC_RESOLVER,
        )

