"""Utility functions for the testnet bridge runner."""

import random
from collections.abc import Mapping, Sequence
from decimal import ROUND_DOWN, Decimal, localcontext
from typing import Any

from hexbytes import HexBytes

from .exceptions import ValidationError

WEI_PER_ETHER = Decimal(10**18)


def scale_amount(amount: int, factor: Decimal) -> int:
    """Multiply an integer amount by a decimal factor, rounding down.

    The factor is applied as an exact integer ratio so that large uint256
    amounts never lose precision.
    """
    if amount < 0:
        raise ValidationError("Amount cannot be negative", field="amount", value=amount)
    if factor < 0:
        raise ValidationError("Factor cannot be negative", field="factor", value=factor)

    numerator, denominator = factor.as_integer_ratio()
    return amount * numerator // denominator


def apply_slippage(amount_out: int, slippage: Decimal) -> int:
    """Return the minimum accepted output for a quoted amount."""
    if not Decimal(0) < slippage <= Decimal(1):
        raise ValidationError(
            "Slippage factor must be in (0, 1]", field="slippage", value=slippage
        )
    return scale_amount(amount_out, slippage)


def apply_value_buffer(amount_in: int, buffer: Decimal) -> int:
    """Inflate the input amount to cover protocol fees skimmed from msg.value."""
    if buffer < 1:
        raise ValidationError("Value buffer must be >= 1", field="value_buffer", value=buffer)
    return scale_amount(amount_in, buffer)


def to_wei(amount: float | Decimal | str) -> int:
    """Convert an ether amount to wei, truncating below 1 wei."""
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    if value < 0:
        raise ValidationError("Value cannot be negative", field="amount", value=amount)

    with localcontext() as ctx:
        ctx.prec = 78
        return int((value * WEI_PER_ETHER).to_integral_value(rounding=ROUND_DOWN))


def from_wei(amount: int) -> Decimal:
    """Convert wei to ether."""
    with localcontext() as ctx:
        ctx.prec = 78
        return Decimal(amount) / WEI_PER_ETHER


def random_amount_wei(
    minimum: Decimal, maximum: Decimal, rng: random.Random | None = None
) -> int:
    """Draw an ether amount uniformly from ``[minimum, maximum)`` and return it in wei."""
    if not Decimal(0) < minimum < maximum:
        raise ValidationError(
            "Amount range must satisfy 0 < minimum < maximum",
            field="amount_range",
            value=(minimum, maximum),
        )

    low = to_wei(minimum)
    high = to_wei(maximum)
    source = rng or random
    return source.randrange(low, high)


def explorer_tx_url(base_url: str, tx_hash: str) -> str:
    """Build a block explorer link for a transaction hash."""
    if not base_url.endswith("/"):
        base_url = base_url + "/"
    return f"{base_url}tx/{tx_hash}"


def to_0x_hex(value: bytes | str) -> str:
    if isinstance(value, str):
        return value if value.startswith("0x") else f"0x{value}"
    return HexBytes(value).to_0x_hex()


def serialise_receipt(receipt: Any) -> Any:
    """Serialise web3 receipt objects into JSON-friendly structures."""
    if receipt is None:
        return None
    if isinstance(receipt, Mapping):
        return {key: serialise_receipt(value) for key, value in receipt.items()}
    if isinstance(receipt, Sequence) and not isinstance(
        receipt, str | bytes | bytearray | HexBytes
    ):
        return [serialise_receipt(item) for item in receipt]
    if isinstance(receipt, bytes | bytearray | HexBytes):
        return HexBytes(receipt).to_0x_hex()
    return receipt
