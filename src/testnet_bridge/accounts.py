"""Load signing accounts from a newline-delimited private key file."""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import cast

from eth_account import Account
from eth_account.signers.local import LocalAccount

from .exceptions import ConfigDecodeError

logger = logging.getLogger(__name__)

CREDENTIAL_DELIMITER = ":"


def decode_account_line(line: str, line_number: int, path: str | None = None) -> LocalAccount:
    """Decode one ``private_key[:aux]`` line into a signing account.

    Errors name the line number only; key material never ends up in messages.
    """
    credentials = line.strip().split(CREDENTIAL_DELIMITER, 1)[0].strip()
    if not credentials:
        raise ConfigDecodeError(
            f"Empty credential on line {line_number}", path=path, line_number=line_number
        )

    try:
        return cast(LocalAccount, Account.from_key(credentials))
    except Exception as exc:
        raise ConfigDecodeError(
            f"Invalid private key on line {line_number}",
            path=path,
            line_number=line_number,
            details={"error_type": type(exc).__name__},
        ) from exc


def load_accounts(
    path: str | Path, *, shuffle: bool = False, rng: random.Random | None = None
) -> list[LocalAccount]:
    """Read every account from ``path``; any bad line fails the whole load."""

    source = Path(path)
    try:
        content = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigDecodeError(
            f"Unable to read account file {source}",
            path=str(source),
            details={"error": str(exc)},
        ) from exc

    accounts = [
        decode_account_line(line, number, str(source))
        for number, line in enumerate(content.splitlines(), start=1)
    ]

    if shuffle:
        (rng or random).shuffle(accounts)

    logger.info("Loaded %s account(s) from %s", len(accounts), source)
    return accounts
