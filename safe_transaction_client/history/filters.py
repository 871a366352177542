import copy
from enum import Enum
from typing import Any, Iterable

from eth_typing import ChecksumAddress
from hexbytes import HexBytes
from safe_eth.eth.utils import fast_to_checksum_address
from safe_eth.util.util import to_0x_hex_str

from ..utils.utils import boolean_to_query_param


class QueryFilters:
    """
    Typed filter builder. Filters are stored using the members of a closed `Enum` whose values
    are the query param keys, and they are only converted to strings when building the request
    """

    filter_enum: type[Enum]

    def __init__(self):
        self.filters: dict[Enum, Any] = {}

    def __eq__(self, other):
        return type(self) is type(other) and self.filters == other.filters

    def __repr__(self):
        return f"{self.__class__.__name__}({self.to_query_params()})"

    def copy(self):
        return copy.deepcopy(self)

    def _set(self, key: Enum, value: Any):
        self.filters[key] = value
        return self

    def _clear(self, keys: Iterable[Enum]):
        for key in keys:
            self.filters.pop(key, None)

    @staticmethod
    def _serialize_value(value: Any) -> str:
        if isinstance(value, bool):
            return boolean_to_query_param(value)
        if isinstance(value, (bytes, bytearray)):
            return to_0x_hex_str(value)
        if isinstance(value, Enum):
            return str(value.value)
        return str(value)

    def to_query_params(self) -> dict[str, str]:
        return {
            key.value: self._serialize_value(value)
            for key, value in self.filters.items()
        }


class PaginatedQueryFilters(QueryFilters):
    """
    Filters for paginated endpoints, ``filter_enum`` must define ``LIMIT`` and ``OFFSET``
    """

    def limit(self, limit: int):
        """
        Specify page size. If there are more results, response will be paginated
        """
        return self._set(self.filter_enum.LIMIT, limit)

    def offset(self, offset: int):
        """
        Offset in results. Used by pagination, not recommended to be set manually
        """
        return self._set(self.filter_enum.OFFSET, offset)


class MultisigTransactionFilter(Enum):
    NONCE = "nonce"
    NONCE_GTE = "nonce__gte"
    NONCE_LTE = "nonce__lte"
    VALUE = "value"
    VALUE_GT = "value__gt"
    VALUE_LT = "value__lt"
    SAFE_TX_HASH = "safe_tx_hash"
    TO = "to"
    EXECUTED = "executed"
    TRUSTED = "trusted"
    TRANSACTION_HASH = "transaction_hash"
    ORDERING = "ordering"
    LIMIT = "limit"
    OFFSET = "offset"


class MultisigTransactionOrdering(Enum):
    NONCE = "nonce"
    NONCE_DESC = "-nonce"
    CREATED = "created"
    CREATED_DESC = "-created"
    MODIFIED = "modified"
    MODIFIED_DESC = "-modified"


class MultisigTransactionFilters(PaginatedQueryFilters):
    """
    Filters for ``v1/safes/{address}/multisig-transactions/``. Exact `nonce` and `value`
    filters clear the range filters for the same field and vice versa
    """

    filter_enum = MultisigTransactionFilter

    NONCE_KEYS = (
        MultisigTransactionFilter.NONCE,
        MultisigTransactionFilter.NONCE_GTE,
        MultisigTransactionFilter.NONCE_LTE,
    )
    # API doesn't support `value__gte` nor `value__lte`
    VALUE_KEYS = (
        MultisigTransactionFilter.VALUE,
        MultisigTransactionFilter.VALUE_GT,
        MultisigTransactionFilter.VALUE_LT,
    )

    def min_nonce(self, min_nonce: int) -> "MultisigTransactionFilters":
        """
        Filter transactions with ``nonce >= min_nonce``. Clears exact nonce filter
        """
        self._clear([MultisigTransactionFilter.NONCE])
        return self._set(MultisigTransactionFilter.NONCE_GTE, min_nonce)

    def max_nonce(self, max_nonce: int) -> "MultisigTransactionFilters":
        """
        Filter transactions with ``nonce <= max_nonce``. Clears exact nonce filter
        """
        self._clear([MultisigTransactionFilter.NONCE])
        return self._set(MultisigTransactionFilter.NONCE_LTE, max_nonce)

    def nonce(self, nonce: int) -> "MultisigTransactionFilters":
        """
        Filter by exact nonce. Clears min and max nonce filters
        """
        self._clear(self.NONCE_KEYS)
        return self._set(MultisigTransactionFilter.NONCE, nonce)

    def min_value(self, min_value: int) -> "MultisigTransactionFilters":
        """
        Filter transactions with ``value >= min_value``. Clears exact value filter
        """
        self._clear([MultisigTransactionFilter.VALUE])
        return self._set(MultisigTransactionFilter.VALUE_GT, min_value - 1)

    def max_value(self, max_value: int) -> "MultisigTransactionFilters":
        """
        Filter transactions with ``value <= max_value``. Clears exact value filter
        """
        self._clear([MultisigTransactionFilter.VALUE])
        return self._set(MultisigTransactionFilter.VALUE_LT, max_value + 1)

    def value(self, value: int) -> "MultisigTransactionFilters":
        """
        Filter by exact value. Clears min and max value filters
        """
        self._clear(self.VALUE_KEYS)
        return self._set(MultisigTransactionFilter.VALUE, value)

    def safe_tx_hash(self, safe_tx_hash: bytes | str) -> "MultisigTransactionFilters":
        return self._set(MultisigTransactionFilter.SAFE_TX_HASH, HexBytes(safe_tx_hash))

    def to(self, address: ChecksumAddress) -> "MultisigTransactionFilters":
        return self._set(MultisigTransactionFilter.TO, fast_to_checksum_address(address))

    def executed(self, executed: bool) -> "MultisigTransactionFilters":
        return self._set(MultisigTransactionFilter.EXECUTED, executed)

    def trusted(self, trusted: bool) -> "MultisigTransactionFilters":
        return self._set(MultisigTransactionFilter.TRUSTED, trusted)

    def transaction_hash(
        self, transaction_hash: bytes | str
    ) -> "MultisigTransactionFilters":
        """
        Filter by the hash of the Ethereum transaction that executed the multisig transaction
        """
        return self._set(
            MultisigTransactionFilter.TRANSACTION_HASH, HexBytes(transaction_hash)
        )

    def ordering(
        self, ordering: MultisigTransactionOrdering
    ) -> "MultisigTransactionFilters":
        return self._set(
            MultisigTransactionFilter.ORDERING, MultisigTransactionOrdering(ordering)
        )
