"""Connection helpers for the bridge runner's RPC node."""

from __future__ import annotations

import logging

from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.contract import AsyncContract

from ..abi import BRIDGE_ABI, QUOTER_ABI
from ..config import ChainConfig
from ..exceptions import RpcError

logger = logging.getLogger(__name__)


class Web3Connections:
    """Manage the async Web3 provider and contract handles for one chain pair."""

    def __init__(self, rpc_url: str, chain: ChainConfig, *, request_timeout: float = 10.0):
        self.rpc_url = rpc_url
        self.chain = chain
        self._request_timeout = request_timeout
        self._web3: AsyncWeb3 | None = None
        self._quoter: AsyncContract | None = None
        self._bridge: AsyncContract | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def connect(self) -> None:
        """Initialise the provider and contract handles.

        An unreachable node is only logged here; each attempt surfaces its own
        RPC failures to the retry loop.
        """

        provider = AsyncHTTPProvider(
            self.rpc_url, request_kwargs={"timeout": self._request_timeout}
        )
        web3 = AsyncWeb3(provider)
        self.attach(web3)

        if await web3.is_connected():
            logger.info("Connected to RPC at %s (%s)", self.rpc_url, self.chain.name)
        else:
            logger.warning("RPC at %s is not reachable yet", self.rpc_url)

    def attach(self, web3: AsyncWeb3) -> None:
        """Bind an existing Web3 instance and build contract handles on it."""

        self._web3 = web3
        self._quoter = web3.eth.contract(address=self.chain.quoter_address, abi=QUOTER_ABI)
        self._bridge = web3.eth.contract(address=self.chain.bridge_address, abi=BRIDGE_ABI)

    async def disconnect(self) -> None:
        web3 = self._web3
        self._web3 = None
        self._quoter = None
        self._bridge = None
        if web3 is not None:
            disconnect = getattr(web3.provider, "disconnect", None)
            if disconnect is not None:
                await disconnect()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def web3(self) -> AsyncWeb3:
        if self._web3 is None:
            raise RpcError("RPC provider not connected", stage="connect", endpoint=self.rpc_url)
        return self._web3

    @property
    def quoter(self) -> AsyncContract:
        if self._quoter is None:
            raise RpcError(
                "Quoter contract not available; call connect() first",
                stage="connect",
                endpoint=self.rpc_url,
            )
        return self._quoter

    @property
    def bridge(self) -> AsyncContract:
        if self._bridge is None:
            raise RpcError(
                "Bridge contract not available; call connect() first",
                stage="connect",
                endpoint=self.rpc_url,
            )
        return self._bridge
