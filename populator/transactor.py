import typing
from collections import OrderedDict
from typing import Any, NamedTuple

from eth_typing import ChecksumAddress
from web3 import Web3
from web3.types import TxParams, TxReceipt

from populator.registry import AddressBook
from populator.utils import to_base_units
from populator.wallets import Wallet


class GovernorError(Exception):
    pass


class TransactionFailed(Exception):
    def __init__(self, call, receipt: TxReceipt):
        self.call = call
        self.receipt = receipt
        tx_hash = Web3.to_hex(receipt["transactionHash"])
        super().__init__(f"{call.describe()} reverted in transaction {tx_hash}")


class ContractCall(NamedTuple):
    """A contract method call, bound to its signer but not yet sent."""

    signer: Wallet
    contract_name: str
    address: ChecksumAddress
    method: str
    named_args: typing.OrderedDict[str, Any]
    function: Any  # web3 ContractFunction

    def describe(self) -> str:
        return f"{self.contract_name}[{self.address[:10]}].{self.method}"

    def build(self, params: TxParams) -> TxParams:
        return self.function.build_transaction(params)


class EtherTransfer(NamedTuple):
    signer: Wallet
    to: ChecksumAddress
    amount: str  # in ether

    @property
    def named_args(self) -> typing.OrderedDict[str, Any]:
        return OrderedDict(to=self.to, value=to_base_units(self.amount))

    def describe(self) -> str:
        return f"{self.amount} ETH transfer"

    def build(self, params: TxParams) -> TxParams:
        w3 = self.signer.web3
        priority_fee = w3.eth.max_priority_fee
        base_fee = w3.eth.get_block("latest").get("baseFeePerGas", w3.eth.gas_price)
        return {
            **params,
            "to": self.to,
            "value": to_base_units(self.amount),
            "gas": 21_000,
            "maxPriorityFeePerGas": priority_fee,
            "maxFeePerGas": base_fee * 2 + priority_fee,
        }


def _continue() -> None:
    """Asks the user to continue."""
    answer = input("Continue Y/N? ")
    if answer.lower().strip() == "n":
        print("Aborting population!")
        exit(-1)


def check_governor(address: ChecksumAddress, address_book: AddressBook) -> None:
    """Governor-only calls are refused before anything is sent."""
    if address != address_book.governor:
        raise GovernorError(
            f"{address} is not the governor of {address_book.network} ({address_book.governor})"
        )


class Transactor:
    """
    Sends calls one at a time and waits for each to be confirmed
    before returning, so calls are confirmed in the order they are made.
    """

    def __init__(self, autosign: bool = False):
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        self._autosign = autosign

    def transact(self, call) -> TxReceipt:
        base_message = f"\nTransacting {call.describe()} from {call.signer.address}"
        if call.named_args:
            pretty_args = "\n\t".join(f"{k}={_format_arg(v)}" for k, v in call.named_args.items())
            message = f"{base_message} with arguments:\n\t{pretty_args}"
        else:
            message = f"{base_message} with no arguments"
        print(message)
        if not self._autosign:
            _continue()

        receipt = self._execute(call)
        if receipt["status"] == 0:
            raise TransactionFailed(call=call, receipt=receipt)
        print(f"  Transaction included in block #{receipt['blockNumber']}")
        return receipt

    def _execute(self, call) -> TxReceipt:
        signer = call.signer
        w3 = signer.web3
        params = {
            "from": signer.address,
            "nonce": w3.eth.get_transaction_count(signer.address, "pending"),
            "chainId": w3.eth.chain_id,
        }
        signed_tx = signer.account.sign_transaction(call.build(params))
        tx_hash = w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        print(f"  Transaction pending: {Web3.to_hex(tx_hash)}")
        return w3.eth.wait_for_transaction_receipt(tx_hash)


def _format_arg(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return str(value)
