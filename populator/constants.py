from pathlib import Path

from web3 import Web3

import populator

#
# Filesystem
#

PACKAGE_DIR = Path(populator.__file__).parent
ARTIFACTS_DIR = PACKAGE_DIR / "artifacts"
ABIS_DIR = ARTIFACTS_DIR / "abis"
MOCK_DATA_DIR = PACKAGE_DIR / "mock_data"

#
# Networks
#

KOVAN = "kovan"
GANACHE = "ganache"

SUPPORTED_NETWORKS = [KOVAN, GANACHE]
LOCAL_NETWORKS = [GANACHE]

#
# Environment
#

MNEMONIC_ENVVAR = "MNEMONIC"
PROVIDER_URI_ENVVAR = "ETHEREUM_PROVIDER_URI"
IPFS_ENVVAR = "IPFS_API_URL"

DEFAULT_IPFS_API = "https://api.thegraph.com/ipfs/"

#
# Wallets
#

HD_PATH = "m/44'/60'/0'/0/{}"
DEFAULT_WALLET_COUNT = 20  # first half users, second half proxies

#
# Contracts
#

GRAPH_TOKEN = "GraphToken"
EPOCH_MANAGER = "EpochManager"
CURATION = "Curation"
GNS = "GNS"
STAKING = "Staking"
SERVICE_REGISTRY = "ServiceRegistry"
ETHEREUM_DID_REGISTRY = "EthereumDIDRegistry"
ENS_TEST_REGISTRAR = "TestRegistrar"
ENS_PUBLIC_RESOLVER = "PublicResolver"

# Attribute name and ENS text key read by the network subgraph
GRAPH_NAME_SERVICE = "GRAPH NAME SERVICE"
DID_ATTRIBUTE_NAME = Web3.keccak(text=GRAPH_NAME_SERVICE)
DID_ATTRIBUTE_VALIDITY = 0

ENS_TEST_TLD = "test"

#
# Population
#

ETH_FUNDING_AMOUNT = "0.25"
GRT_FUNDING_AMOUNT = "100000"

# Curation
SIGNAL_AMOUNT = "5000"
SIGNAL_AMOUNT_BIG = "10000"
CURATION_APPROVAL_AMOUNT = "25000"
REDEEM_SHARES = "1"  # shares, not tokens

# Staking
STAKE_AMOUNT = "10000"
ALLOCATION_PRICE = "0"
UNSTAKERS = 3
SETTLERS = 5
MIN_EPOCH_LENGTH = 1
MIN_THAWING_PERIOD = 0
DEFAULT_EPOCH_LENGTH = 5760
DEFAULT_THAWING_PERIOD = 20

# Service registry
REREGISTERED_INDEXERS = 2

# Name service
DEPRECATED_SUBGRAPH_ACCOUNT = 5
FIRST_SUBGRAPH_NUMBER = 0

# Display name that differs from its ENS name in the mock data
RESERVED_DISPLAY_NAME = "The Graph"
RESERVED_DISPLAY_NAME_ENS = "graphprotocol"
