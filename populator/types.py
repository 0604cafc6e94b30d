import click

MNEMONIC_WORD_COUNTS = (12, 15, 18, 21, 24)


class WalletCount(click.ParamType):
    name = "wallet_count"

    def __init__(self, min_value: int = 2):
        self.min_value = min_value

    def convert(self, value, param, ctx):
        try:
            ivalue = int(value)
        except ValueError:
            self.fail(f"{value} is not a valid integer", param, ctx)
        if ivalue < self.min_value:
            self.fail(
                f"{value} is less than the minimum allowed value of {self.min_value}", param, ctx
            )
        if ivalue % 2 != 0:
            self.fail(f"{value} cannot be split evenly into users and proxies", param, ctx)
        return ivalue


class Mnemonic(click.ParamType):
    name = "mnemonic"

    def convert(self, value, param, ctx):
        words = value.split()
        if len(words) not in MNEMONIC_WORD_COUNTS:
            # never echo the phrase itself
            self.fail(
                f"Mnemonic has {len(words)} words; expected one of {MNEMONIC_WORD_COUNTS}",
                param,
                ctx,
            )
        return " ".join(words)
