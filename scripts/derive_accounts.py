#!/usr/bin/python3

import click
from dotenv import load_dotenv

from populator.constants import HD_PATH
from populator.options import mnemonic_option, wallet_count_option
from populator.wallets import derive_account, role_for_index


@click.command(name="derive-accounts")
@mnemonic_option
@wallet_count_option
@click.option(
    "--show-private-keys",
    help="Also print the private key of every account.",
    is_flag=True,
)
def cli(mnemonic, count, show_private_keys):
    """Derive the population accounts from a mnemonic, e.g. to fund them beforehand."""
    for i in range(count):
        path = HD_PATH.format(i)
        account = derive_account(mnemonic, i)
        role = role_for_index(i, count)
        click.echo(f"Account {i} ({role.value}, Path - {path}):")
        click.echo(f"\tAddress: {account.address} ")
        if show_private_keys:
            click.echo(f"\tPrivate Key: {account.key.hex()}")
        click.echo("----------------------------------")


if __name__ == "__main__":
    load_dotenv()
    cli()
