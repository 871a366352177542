import dataclasses
import datetime
from enum import Enum

from eth_typing import ChecksumAddress


class TokenType(Enum):
    ERC20 = "ERC20"
    ERC721 = "ERC721"
    ERC1155 = "ERC1155"


@dataclasses.dataclass(eq=True, frozen=True)
class TokenInfo:
    token_type: TokenType
    address: ChecksumAddress
    name: str
    symbol: str
    decimals: int | None
    logo_uri: str | None


@dataclasses.dataclass(eq=True, frozen=True)
class Erc20Info:
    name: str
    symbol: str
    decimals: int | None
    logo_uri: str | None


@dataclasses.dataclass(eq=True, frozen=True)
class Balance:
    """
    Balance of a Safe for a token. ``token_address`` and ``token`` are ``None`` for the
    native token
    """

    token_address: ChecksumAddress | None
    token: Erc20Info | None
    balance: int
    eth_value: str
    timestamp: datetime.datetime | None
    fiat_balance: str
    fiat_conversion: str
    fiat_code: str

    @property
    def is_native_token(self) -> bool:
        return self.token_address is None
