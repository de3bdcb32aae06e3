"""Minimal ABI fragments for the contracts the API reads.

Only the view functions actually called are listed. The price feed exposes
several generations of price getters; all return a 30-decimal USD price.
"""

_ADDRESS_IN = {"name": "_token", "type": "address"}
_BOOL_IN = {"name": "", "type": "bool"}
_UINT_OUT = [{"name": "", "type": "uint256"}]


def _view(name: str, inputs: list[dict], outputs: list[dict] = _UINT_OUT) -> dict:
    return {
        "constant": True,
        "inputs": inputs,
        "name": name,
        "outputs": outputs,
        "stateMutability": "view",
        "type": "function",
    }


PRICE_FEED_ABI = [
    _view("getPriceV2", [_ADDRESS_IN, _BOOL_IN, _BOOL_IN]),
    _view("getPrice", [_ADDRESS_IN, _BOOL_IN, _BOOL_IN, _BOOL_IN]),
    _view("getPriceV1", [_ADDRESS_IN, _BOOL_IN, _BOOL_IN]),
    _view("getPrimaryPrice", [_ADDRESS_IN, _BOOL_IN]),
    # Token address fields, read once at boot
    _view("btc", [], [{"name": "", "type": "address"}]),
    _view("eth", [], [{"name": "", "type": "address"}]),
    _view("bnb", [], [{"name": "", "type": "address"}]),
]

VAULT_ABI = [
    _view("getMinPrice", [_ADDRESS_IN]),
    _view("guaranteedUsd", [{"name": "", "type": "address"}]),
    _view("globalShortSizes", [{"name": "", "type": "address"}]),
]

ERC20_ABI = [
    _view("totalSupply", []),
    _view("decimals", [], [{"name": "", "type": "uint8"}]),
]

ORACLE_TOKEN_FIELDS = ("btc", "eth", "bnb")
