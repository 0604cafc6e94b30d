from enum import Enum
from typing import List, NamedTuple

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_typing import ChecksumAddress
from web3 import Web3

from populator.constants import DEFAULT_WALLET_COUNT, HD_PATH

Account.enable_unaudited_hdwallet_features()


class Role(Enum):
    GOVERNOR = "governor"
    USER = "user"
    PROXY = "proxy"


class Wallet(NamedTuple):
    """A mnemonic-derived signer bound to the network it transacts on."""

    index: int
    role: Role
    account: LocalAccount
    web3: Web3

    @property
    def address(self) -> ChecksumAddress:
        return self.account.address

    def __repr__(self) -> str:
        return f"Wallet({self.index}, {self.role.value}, {self.address})"


class Wallets(NamedTuple):
    governor: Wallet
    users: List[Wallet]
    proxies: List[Wallet]

    def all(self) -> List[Wallet]:
        return [*self.users, *self.proxies]


def role_for_index(index: int, count: int) -> Role:
    if index == 0:
        return Role.GOVERNOR
    if index < count // 2:
        return Role.USER
    return Role.PROXY


def derive_account(mnemonic: str, index: int) -> LocalAccount:
    return Account.from_mnemonic(mnemonic, account_path=HD_PATH.format(index))


def configure_wallets(
    mnemonic: str, provider_uri: str, count: int = DEFAULT_WALLET_COUNT
) -> List[Wallet]:
    """
    Derives `count` wallets at sequential indices of the standard derivation path,
    all bound to the same provider. The first wallet is the governor, the rest of
    the first half are users and the second half are proxies.
    """
    if count < 2 or count % 2 != 0:
        raise ValueError(f"Wallet count must be an even number of at least 2, got {count}")
    w3 = Web3(Web3.HTTPProvider(provider_uri))
    wallets = list()
    for index in range(count):
        wallet = Wallet(
            index=index,
            role=role_for_index(index, count),
            account=derive_account(mnemonic, index),
            web3=w3,
        )
        wallets.append(wallet)
    return wallets


def split_wallets(wallets: List[Wallet]) -> Wallets:
    """Groups the wallets by role; the governor is also the first user."""
    users = [w for w in wallets if w.role in (Role.GOVERNOR, Role.USER)]
    proxies = [w for w in wallets if w.role == Role.PROXY]
    governors = [w for w in wallets if w.role == Role.GOVERNOR]
    if len(governors) != 1:
        raise ValueError(f"Expected exactly one governor wallet, got {len(governors)}")
    return Wallets(governor=governors[0], users=users, proxies=proxies)


def provision_wallets(
    mnemonic: str, provider_uri: str, count: int = DEFAULT_WALLET_COUNT
) -> Wallets:
    return split_wallets(configure_wallets(mnemonic, provider_uri, count))
