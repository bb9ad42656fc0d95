"""Minimal contract ABIs used by the bridge runner."""

QUOTER_ABI = [
    {
        "inputs": [
            {"internalType": "address", "name": "tokenIn", "type": "address"},
            {"internalType": "address", "name": "tokenOut", "type": "address"},
            {"internalType": "uint24", "name": "fee", "type": "uint24"},
            {"internalType": "uint256", "name": "amountIn", "type": "uint256"},
            {"internalType": "uint160", "name": "sqrtPriceLimitX96", "type": "uint160"},
        ],
        "name": "quoteExactInputSingle",
        "outputs": [{"internalType": "uint256", "name": "amountOut", "type": "uint256"}],
        "stateMutability": "nonpayable",
        "type": "function",
    }
]

BRIDGE_ABI = [
    {
        "inputs": [
            {"internalType": "uint256", "name": "amountIn", "type": "uint256"},
            {"internalType": "uint256", "name": "amountOutMin", "type": "uint256"},
            {"internalType": "uint16", "name": "dstChainId", "type": "uint16"},
            {"internalType": "address", "name": "to", "type": "address"},
            {"internalType": "address payable", "name": "refundAddress", "type": "address"},
            {"internalType": "address", "name": "zroPaymentAddress", "type": "address"},
            {"internalType": "bytes", "name": "adapterParams", "type": "bytes"},
        ],
        "name": "swapAndBridge",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function",
    }
]
