import pytest
from click.testing import CliRunner

from populator.constants import MNEMONIC_ENVVAR, PROVIDER_URI_ENVVAR
from populator.sequence import DEFAULT_STAGES, Stage
from scripts import derive_accounts, populate_data

TEST_MNEMONIC = "test test test test test test test test test test test junk"
PROVIDER_URI = "http://127.0.0.1:8545"


@pytest.fixture()
def runs(monkeypatch, wallets):
    """Stands in for the wallets and the sequence, keeping what the command passed them."""
    runs = list()

    def provision_wallets(mnemonic, provider_uri, count):
        runs.append(dict(mnemonic=mnemonic, provider_uri=provider_uri, count=count))
        return wallets

    class Sequence:
        def __init__(self, context, stages=None, start=None):
            runs.append(dict(context=context, stages=stages, start=start))
            self.stages = stages

        def run(self):
            return self.stages

    monkeypatch.setattr(populate_data, "provision_wallets", provision_wallets)
    monkeypatch.setattr(populate_data, "PopulationSequence", Sequence)
    return runs


def invoke(*args, **kwargs):
    runner = CliRunner()
    base = ["--network", "ganache", "--mnemonic", TEST_MNEMONIC, "--provider-uri", PROVIDER_URI]
    return runner.invoke(populate_data.cli, [*base, *args], catch_exceptions=False, **kwargs)


def test_populate_data(runs):
    result = invoke("--auto")
    assert result.exit_code == 0, result.output
    assert "Network: ganache" in result.output
    assert "Populated ganache with 7 stages." in result.output

    provisioned, sequenced = runs
    assert provisioned == dict(mnemonic=TEST_MNEMONIC, provider_uri=PROVIDER_URI, count=20)
    assert sequenced["stages"] == DEFAULT_STAGES
    assert sequenced["start"] is None

    context = sequenced["context"]
    assert context.address_book.network == "ganache"
    assert context.ipfs.api_url == "https://api.thegraph.com/ipfs/"
    assert len(context.mock_data.subgraphs) == 10


def test_populate_data_from_environment(runs):
    runner = CliRunner()
    env = {MNEMONIC_ENVVAR: TEST_MNEMONIC, PROVIDER_URI_ENVVAR: PROVIDER_URI}
    result = runner.invoke(populate_data.cli, ["-n", "ganache", "--auto"], env=env)
    assert result.exit_code == 0, result.output
    assert runs[0]["provider_uri"] == PROVIDER_URI
    # the phrase is never echoed
    assert TEST_MNEMONIC not in result.output


def test_fund_eth_and_start_stage(runs):
    result = invoke("--auto", "--fund-eth", "--start-stage", "curate")
    assert result.exit_code == 0, result.output
    assert runs[1]["stages"] == list(Stage)
    assert runs[1]["start"] == Stage.CURATE


def test_start_at_fund_eth_requires_flag(runs):
    result = CliRunner().invoke(
        populate_data.cli,
        ["-n", "ganache", "-m", TEST_MNEMONIC, "-p", PROVIDER_URI, "-s", "fund_eth", "--auto"],
    )
    assert result.exit_code == 2
    assert "without --fund-eth" in result.output
    assert not runs


def test_confirmation(runs):
    result = invoke(input="n\n")
    assert result.exit_code != 0
    assert "Continue Y/N?" in result.output
    assert len(runs) == 1  # wallets only

    result = invoke(input="y\n")
    assert result.exit_code == 0, result.output
    assert len(runs) == 3


@pytest.mark.parametrize(
    "args",
    [
        ["--count", "7"],
        ["--count", "0"],
        ["--count", "many"],
        ["--network", "mainnet"],
        ["--start-stage", "deploy"],
    ],
)
def test_invalid_options(runs, args):
    result = CliRunner().invoke(
        populate_data.cli,
        ["-n", "ganache", "-m", TEST_MNEMONIC, "-p", PROVIDER_URI, "--auto", *args],
    )
    assert result.exit_code == 2
    assert not runs


def test_invalid_mnemonic(runs):
    result = CliRunner().invoke(
        populate_data.cli, ["-n", "ganache", "-m", "test junk", "-p", PROVIDER_URI, "--auto"]
    )
    assert result.exit_code == 2
    assert "Mnemonic has 2 words" in result.output
    assert "--mnemonic" in result.output


def test_derive_accounts():
    result = CliRunner().invoke(derive_accounts.cli, ["-m", TEST_MNEMONIC, "--count", "4"])
    assert result.exit_code == 0, result.output
    assert "Account 0 (governor, Path - m/44'/60'/0'/0/0):" in result.output
    assert "Account 1 (user, Path - m/44'/60'/0'/0/1):" in result.output
    assert "Account 3 (proxy, Path - m/44'/60'/0'/0/3):" in result.output
    assert "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266" in result.output
    assert "Private Key" not in result.output

    result = CliRunner().invoke(
        derive_accounts.cli, ["-m", TEST_MNEMONIC, "-c", "2", "--show-private-keys"]
    )
    assert result.exit_code == 0, result.output
    assert result.output.count("Private Key") == 2
