from typing import Any

from safe_eth.eth.utils import fast_to_checksum_address

from ..utils.utils import int_or_none, str_to_datetime
from .models import Balance, Erc20Info, TokenInfo, TokenType


def parse_token_info(data: dict[str, Any]) -> TokenInfo:
    """
    :param data: `{"type": "ERC20", "address": "0x...", "name": "Gnosis", "symbol": "GNO",
        "decimals": 18, "logoUri": "https://..."}`
    :return: TokenInfo
    :raises ValueError: for unknown token types
    """
    return TokenInfo(
        token_type=TokenType(data["type"]),
        address=fast_to_checksum_address(data["address"]),
        name=data["name"],
        symbol=data["symbol"],
        decimals=int_or_none(data.get("decimals")),
        logo_uri=data.get("logoUri"),
    )


def parse_erc20_info(data: dict[str, Any] | None) -> Erc20Info | None:
    if not data:
        return None
    return Erc20Info(
        name=data["name"],
        symbol=data["symbol"],
        decimals=int_or_none(data.get("decimals")),
        logo_uri=data.get("logoUri"),
    )


def parse_balance(data: dict[str, Any]) -> Balance:
    token_address = data.get("tokenAddress")
    return Balance(
        token_address=fast_to_checksum_address(token_address) if token_address else None,
        token=parse_erc20_info(data.get("token")),
        balance=int(data["balance"]),
        eth_value=data.get("ethValue"),
        timestamp=str_to_datetime(data.get("timestamp")),
        fiat_balance=data.get("fiatBalance"),
        fiat_conversion=data.get("fiatConversion"),
        fiat_code=data.get("fiatCode"),
    )


def parse_balances(data: list[dict[str, Any]]) -> list[Balance]:
    return [parse_balance(balance) for balance in data]
