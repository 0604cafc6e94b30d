from pathlib import Path
from typing import Dict, List, NamedTuple

from ens import ENS
from hexbytes import HexBytes

from populator.constants import (
    ENS_TEST_TLD,
    MOCK_DATA_DIR,
    RESERVED_DISPLAY_NAME,
    RESERVED_DISPLAY_NAME_ENS,
)
from populator.utils import _load_yaml, bytes32_to_ipfs_hash


class AccountMetadata(NamedTuple):
    name: str
    display_name: str
    description: str
    image: str
    website: str
    code_repository: str
    is_organization: bool

    def to_document(self) -> Dict:
        """The JSON document pinned to IPFS for this account."""
        return {
            "name": self.name,
            "displayName": self.display_name,
            "description": self.description,
            "image": self.image,
            "website": self.website,
            "codeRepository": self.code_repository,
            "isOrganization": self.is_organization,
        }


class SubgraphMetadata(NamedTuple):
    subgraph_display_name: str
    subgraph_description: str
    subgraph_image: str
    subgraph_code_repository: str
    subgraph_website: str
    version_label: str
    version_description: str

    def to_document(self) -> Dict:
        """The JSON document pinned to IPFS for this subgraph."""
        return {
            "subgraphDisplayName": self.subgraph_display_name,
            "subgraphDescription": self.subgraph_description,
            "subgraphImage": self.subgraph_image,
            "subgraphCodeRepository": self.subgraph_code_repository,
            "subgraphWebsite": self.subgraph_website,
            "versionLabel": self.version_label,
            "versionDescription": self.version_description,
        }


class DeploymentID(NamedTuple):
    """A subgraph deployment identifier in both of its encodings."""

    base58: str
    bytes32: HexBytes

    @classmethod
    def from_bytes32(cls, digest) -> "DeploymentID":
        digest = HexBytes(digest)
        return cls(base58=bytes32_to_ipfs_hash(digest), bytes32=digest)


class IndexerEndpoint(NamedTuple):
    url: str
    geohash: str


class MockData(NamedTuple):
    accounts: List[AccountMetadata]
    subgraphs: List[SubgraphMetadata]
    deployment_ids: List[DeploymentID]
    channel_pub_keys: List[str]
    indexer_endpoints: List[IndexerEndpoint]


#
# Naming
#


def ens_name(display_name: str) -> str:
    """The name a display name is registered under on ENS and the GNS."""
    # "The Graph" is already reserved, its mock account uses another name
    if display_name == RESERVED_DISPLAY_NAME:
        return RESERVED_DISPLAY_NAME_ENS
    return display_name


def ens_label(name: str) -> str:
    return "".join(name.split()).lower()


def ens_labelhash(name: str) -> HexBytes:
    return HexBytes(ENS.labelhash(ens_label(name)))


def ens_namehash(name: str) -> HexBytes:
    return HexBytes(ENS.namehash(f"{ens_label(name)}.{ENS_TEST_TLD}"))


#
# Loading
#


def load_account_metadatas(filepath: Path) -> List[AccountMetadata]:
    entries = _load_yaml(filepath)["accounts"]
    return [AccountMetadata(**entry) for entry in entries]


def load_subgraph_metadatas(filepath: Path) -> List[SubgraphMetadata]:
    entries = _load_yaml(filepath)["subgraphs"]
    return [SubgraphMetadata(**entry) for entry in entries]


def load_mock_data(mock_data_dir: Path = MOCK_DATA_DIR) -> MockData:
    network_data = _load_yaml(mock_data_dir / "network.yml")
    return MockData(
        accounts=load_account_metadatas(mock_data_dir / "accounts.yml"),
        subgraphs=load_subgraph_metadatas(mock_data_dir / "subgraphs.yml"),
        deployment_ids=[DeploymentID.from_bytes32(d) for d in network_data["deployment_ids"]],
        channel_pub_keys=list(network_data["channel_pub_keys"]),
        indexer_endpoints=[IndexerEndpoint(**e) for e in network_data["indexer_endpoints"]],
    )
