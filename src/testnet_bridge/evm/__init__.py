"""EVM building blocks: connections, quoting, transaction assembly and dispatch."""

from .builder import TransactionBuilder, build_transaction
from .connections import Web3Connections
from .quoter import QuoteClient
from .transactions import TransactionDispatcher, sign_transaction

__all__ = [
    "QuoteClient",
    "TransactionBuilder",
    "TransactionDispatcher",
    "Web3Connections",
    "build_transaction",
    "sign_transaction",
]
