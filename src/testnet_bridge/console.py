"""Coloured console logging."""

from __future__ import annotations

import logging
import sys

from colorama import Fore, Style, just_fix_windows_console

PREFIX = "Testnet Bridge => "

LEVEL_COLOURS = {
    logging.DEBUG: Fore.MAGENTA,
    logging.INFO: Fore.CYAN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED,
}


class ColorFormatter(logging.Formatter):
    """Render records as ``Testnet Bridge => [LEVEL] message`` with level colours."""

    def __init__(self, *, use_colour: bool = True, datefmt: str = "%Y-%m-%d %H:%M:%S"):
        super().__init__(datefmt=datefmt)
        self.use_colour = use_colour

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        timestamp = self.formatTime(record, self.datefmt)
        level = f"[{record.levelname}]"

        if self.use_colour:
            colour = LEVEL_COLOURS.get(record.levelno, Fore.WHITE)
            line = (
                f"{Style.DIM}{timestamp}{Style.RESET_ALL} "
                f"{Style.BRIGHT}{PREFIX}{Style.RESET_ALL}"
                f"{colour + Style.BRIGHT}{level}{Style.RESET_ALL} {message}"
            )
        else:
            line = f"{timestamp} {PREFIX}{level} {message}"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(level: str | int = "INFO", *, use_colour: bool | None = None) -> None:
    """Install a single coloured stream handler on the root logger."""

    if use_colour is None:
        use_colour = sys.stdout.isatty()
    if use_colour:
        just_fix_windows_console()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ColorFormatter(use_colour=use_colour))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)

    # web3 and its HTTP stack are chatty at DEBUG
    for name in ("web3", "urllib3", "aiohttp"):
        logging.getLogger(name).setLevel(max(root.level, logging.INFO))
