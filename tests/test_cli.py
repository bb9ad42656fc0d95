from __future__ import annotations

import os

import pytest

from testnet_bridge import cli
from testnet_bridge.types import BatchSummary

KEY_A = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
KEY_B = "0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d"

RUNNER_ENV = (
    "RPC_URL",
    "ACCOUNTS_FILE",
    "SHUFFLE_ACCOUNTS",
    "AMOUNT_MIN_ETH",
    "AMOUNT_MAX_ETH",
    "SLIPPAGE_FACTOR",
    "VALUE_BUFFER",
    "MAX_FEE_PER_GAS_WEI",
    "MAX_ATTEMPTS",
    "RETRY_DELAY",
    "FATAL_ERRORS",
    "PACING_MIN",
    "PACING_MAX",
    "CHAIN_BOOK",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    saved = dict(os.environ)
    for name in RUNNER_ENV:
        monkeypatch.delenv(name, raising=False)
    # keep load_dotenv from picking up a developer's .env
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)
    yield
    # load_dotenv writes straight into os.environ
    os.environ.clear()
    os.environ.update(saved)


@pytest.fixture
def batches(monkeypatch):
    calls = []

    async def fake_run_batch(config, accounts):
        calls.append((config, list(accounts)))
        return BatchSummary(results=[])

    monkeypatch.setattr(cli, "run_batch", fake_run_batch)
    return calls


def _env_file(tmp_path, body=""):
    path = tmp_path / "runner.env"
    path.write_text(body)
    return str(path)


def test_malformed_accounts_file_exits_before_any_rpc(tmp_path, batches):
    accounts = tmp_path / "privates.txt"
    accounts.write_text(f"{KEY_A}\nnot-a-key\n")

    code = cli.main(["--accounts", str(accounts), "--env-file", _env_file(tmp_path)])

    assert code == cli.EXIT_ACCOUNTS_UNREADABLE
    assert batches == []


def test_missing_accounts_file(tmp_path, batches):
    code = cli.main(
        ["--accounts", str(tmp_path / "absent.txt"), "--env-file", _env_file(tmp_path)]
    )

    assert code == cli.EXIT_ACCOUNTS_UNREADABLE
    assert batches == []


def test_invalid_configuration(tmp_path, monkeypatch, batches):
    monkeypatch.setenv("MAX_ATTEMPTS", "zero")

    code = cli.main(["--env-file", _env_file(tmp_path)])

    assert code == cli.EXIT_CONFIG_ERROR
    assert batches == []


def test_empty_accounts_file_is_a_clean_run(tmp_path, batches):
    accounts = tmp_path / "privates.txt"
    accounts.write_text("")

    code = cli.main(["--accounts", str(accounts), "--env-file", _env_file(tmp_path)])

    assert code == cli.EXIT_OK
    assert batches == []


def test_accounts_are_handed_to_the_batch_in_file_order(tmp_path, batches):
    accounts = tmp_path / "privates.txt"
    accounts.write_text(f"{KEY_A}:first\n{KEY_B}\n")
    env_file = _env_file(tmp_path, "RPC_URL=http://127.0.0.1:9999\nMAX_ATTEMPTS=3\n")

    code = cli.main(["--accounts", str(accounts), "--env-file", env_file, "--no-shuffle"])

    assert code == cli.EXIT_OK
    ((config, loaded),) = batches
    assert config.rpc_url == "http://127.0.0.1:9999"
    assert config.retry.max_attempts == 3
    assert [account.address for account in loaded] == [
        "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266",
        "0x70997970C51812dc3A010C7d01b50e0d17dc79C8",
    ]


def test_accounts_file_from_environment(tmp_path, batches):
    accounts = tmp_path / "keys.txt"
    accounts.write_text(f"{KEY_B}\n")
    env_file = _env_file(tmp_path, f"ACCOUNTS_FILE={accounts}\nSHUFFLE_ACCOUNTS=false\n")

    code = cli.main(["--env-file", env_file])

    assert code == cli.EXIT_OK
    ((config, loaded),) = batches
    assert config.shuffle is False
    assert len(loaded) == 1
