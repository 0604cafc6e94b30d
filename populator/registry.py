from pathlib import Path
from typing import Dict, NamedTuple, Optional

from eth_typing import ABI, ChecksumAddress
from eth_utils import to_checksum_address
from web3 import Web3

from populator.constants import ABIS_DIR, ARTIFACTS_DIR, LOCAL_NETWORKS
from populator.utils import _load_json

ChainId = int
ContractName = str


class AddressBookEntry(NamedTuple):
    """Represents the deployment of the protocol contracts on a single network."""

    network: str
    chain_id: ChainId
    governor: ChecksumAddress
    contracts: Dict[ContractName, ChecksumAddress]


def address_book_filepath(network: str, artifacts_dir: Path = ARTIFACTS_DIR) -> Path:
    p = artifacts_dir / f"{network}.json"
    if not p.exists():
        raise AddressBook.UnknownNetwork(f"No address book found for network '{network}'")
    return p


def read_address_book(filepath: Path) -> AddressBookEntry:
    data = _load_json(filepath)
    contracts = {
        name: to_checksum_address(address) for name, address in data["contracts"].items()
    }
    return AddressBookEntry(
        network=data.get("network", filepath.stem),
        chain_id=int(data["chain_id"]),
        governor=to_checksum_address(data["governor"]),
        contracts=contracts,
    )


class AddressBook:
    """
    Static record of where the protocol contracts live on a network,
    and the ABIs needed to talk to them.
    """

    class UnknownNetwork(ValueError):
        pass

    class UnknownContract(ValueError):
        pass

    class ChainIdMismatch(ValueError):
        pass

    def __init__(self, entry: AddressBookEntry, abis_dir: Path = ABIS_DIR):
        self.entry = entry
        self.abis_dir = abis_dir
        self._abis: Dict[ContractName, ABI] = dict()

    @classmethod
    def from_network(
        cls, network: str, artifacts_dir: Path = ARTIFACTS_DIR, abis_dir: Optional[Path] = None
    ) -> "AddressBook":
        filepath = address_book_filepath(network=network, artifacts_dir=artifacts_dir)
        return cls(entry=read_address_book(filepath), abis_dir=abis_dir or ABIS_DIR)

    @property
    def network(self) -> str:
        return self.entry.network

    @property
    def chain_id(self) -> ChainId:
        return self.entry.chain_id

    @property
    def governor(self) -> ChecksumAddress:
        return self.entry.governor

    def get_address(self, contract_name: ContractName) -> ChecksumAddress:
        try:
            return self.entry.contracts[contract_name]
        except KeyError:
            raise self.UnknownContract(
                f"{contract_name} is not registered for network '{self.network}'"
            )

    def get_abi(self, contract_name: ContractName) -> ABI:
        if contract_name not in self._abis:
            abi_filepath = self.abis_dir / f"{contract_name}.json"
            if not abi_filepath.exists():
                raise self.UnknownContract(f"No ABI found for {contract_name}")
            self._abis[contract_name] = _load_json(abi_filepath)
        return self._abis[contract_name]

    def check_chain_id(self, w3: Web3) -> None:
        """
        Checks that the provider is connected to the chain this address book describes.
        Local networks are skipped since their chain id depends on the node configuration.
        """
        if self.network in LOCAL_NETWORKS:
            return
        provider_chain_id = w3.eth.chain_id
        if provider_chain_id != self.chain_id:
            raise self.ChainIdMismatch(
                f"chain_id of the {self.network} address book ({self.chain_id}) does not match "
                f"chain_id of the provider ({provider_chain_id})."
            )
