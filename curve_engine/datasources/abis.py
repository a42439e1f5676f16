"""Contract ABIs for the bonding curve and its ERC-20 token."""

_SETTINGS_COMPONENTS = [
    {"name": "virtualEth", "type": "uint256"},
    {"name": "bondingTarget", "type": "uint256"},
    {"name": "minContribution", "type": "uint256"},
    {"name": "poolFee", "type": "uint24"},
    {"name": "sellFee", "type": "uint24"},
    {"name": "uniswapV3Factory", "type": "address"},
    {"name": "positionManager", "type": "address"},
    {"name": "weth", "type": "address"},
    {"name": "feeTo", "type": "address"},
]


def _view(name: str, output_type: str, inputs: list | None = None) -> dict:
    return {
        "name": name,
        "type": "function",
        "stateMutability": "view",
        "inputs": inputs or [],
        "outputs": [{"name": "", "type": output_type}],
    }


BONDING_CURVE_ABI = [
    {
        "name": "buyTokens",
        "type": "function",
        "stateMutability": "payable",
        "inputs": [{"name": "minTokens", "type": "uint256"}],
        "outputs": [{"name": "tokensToReceive", "type": "uint256"}],
    },
    {
        "name": "sellTokens",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "tokenAmount", "type": "uint256"},
            {"name": "minETH", "type": "uint256"},
        ],
        "outputs": [
            {"name": "ethToReceive", "type": "uint256"},
            {"name": "fee", "type": "uint256"},
        ],
    },
    _view("token", "address"),
    _view("currentPhase", "uint8"),
    _view("ethReserve", "uint256"),
    _view("tokenReserve", "uint256"),
    _view("totalETHCollected", "uint256"),
    _view("isFinalized", "bool"),
    {
        "name": "getBondingCurveSettings",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "tuple", "components": _SETTINGS_COMPONENTS}],
    },
    {
        "name": "TokensPurchased",
        "type": "event",
        "anonymous": False,
        "inputs": [
            {"name": "user", "type": "address", "indexed": True},
            {"name": "ethAmount", "type": "uint256", "indexed": False},
            {"name": "tokensOut", "type": "uint256", "indexed": False},
        ],
    },
    {
        "name": "TokensSold",
        "type": "event",
        "anonymous": False,
        "inputs": [
            {"name": "user", "type": "address", "indexed": True},
            {"name": "tokensIn", "type": "uint256", "indexed": False},
            {"name": "ethOut", "type": "uint256", "indexed": False},
            {"name": "fee", "type": "uint256", "indexed": False},
        ],
    },
    {
        "name": "CurveFinalized",
        "type": "event",
        "anonymous": False,
        "inputs": [
            {"name": "pool", "type": "address", "indexed": True},
            {"name": "lpTokenId", "type": "uint256", "indexed": False},
        ],
    },
]

TOKEN_ABI = [
    _view("name", "string"),
    _view("symbol", "string"),
    _view("decimals", "uint8"),
    _view("totalSupply", "uint256"),
    _view("balanceOf", "uint256", [{"name": "account", "type": "address"}]),
    _view(
        "allowance",
        "uint256",
        [
            {"name": "owner", "type": "address"},
            {"name": "spender", "type": "address"},
        ],
    ),
    {
        "name": "approve",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "spender", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "name": "Transfer",
        "type": "event",
        "anonymous": False,
        "inputs": [
            {"name": "from", "type": "address", "indexed": True},
            {"name": "to", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ],
    },
    {
        "name": "Approval",
        "type": "event",
        "anonymous": False,
        "inputs": [
            {"name": "owner", "type": "address", "indexed": True},
            {"name": "spender", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ],
    },
]
