from enum import Enum

from eth_typing import ChecksumAddress
from safe_eth.eth.utils import fast_to_checksum_address

from ..history.filters import PaginatedQueryFilters, QueryFilters


class TokenFilter(Enum):
    NAME = "name"
    ADDRESS = "address"
    SYMBOL = "symbol"
    DECIMALS = "decimals"
    DECIMALS_GT = "decimals__gt"
    DECIMALS_LT = "decimals__lt"
    LIMIT = "limit"
    OFFSET = "offset"


class TokenFilters(PaginatedQueryFilters):
    """
    Filters for ``v1/tokens/``
    """

    filter_enum = TokenFilter

    DECIMALS_KEYS = (
        TokenFilter.DECIMALS,
        TokenFilter.DECIMALS_GT,
        TokenFilter.DECIMALS_LT,
    )

    def name(self, name: str) -> "TokenFilters":
        return self._set(TokenFilter.NAME, name)

    def address(self, address: ChecksumAddress) -> "TokenFilters":
        return self._set(TokenFilter.ADDRESS, fast_to_checksum_address(address))

    def symbol(self, symbol: str) -> "TokenFilters":
        return self._set(TokenFilter.SYMBOL, symbol)

    def min_decimals(self, decimals: int) -> "TokenFilters":
        """
        Filter tokens with ``decimals >= min_decimals``. Clears exact decimals filter
        """
        self._clear([TokenFilter.DECIMALS])
        return self._set(TokenFilter.DECIMALS_GT, decimals - 1)

    def max_decimals(self, decimals: int) -> "TokenFilters":
        """
        Filter tokens with ``decimals <= max_decimals``. Clears exact decimals filter
        """
        self._clear([TokenFilter.DECIMALS])
        return self._set(TokenFilter.DECIMALS_LT, decimals + 1)

    def decimals(self, decimals: int) -> "TokenFilters":
        """
        Filter tokens by exact decimals. Clears min and max decimals filters
        """
        self._clear(self.DECIMALS_KEYS)
        return self._set(TokenFilter.DECIMALS, decimals)


class BalanceFilter(Enum):
    TRUSTED = "trusted"
    EXCLUDE_SPAM = "exclude_spam"


class BalanceFilters(QueryFilters):
    """
    Filters for ``v1/safes/{address}/balances/usd/``. Endpoint is not paginated
    """

    filter_enum = BalanceFilter

    def trusted(self, trusted: bool) -> "BalanceFilters":
        """
        Return only trusted tokens
        """
        return self._set(BalanceFilter.TRUSTED, trusted)

    def exclude_spam(self, exclude_spam: bool) -> "BalanceFilters":
        """
        Exclude tokens marked as spam
        """
        return self._set(BalanceFilter.EXCLUDE_SPAM, exclude_spam)
