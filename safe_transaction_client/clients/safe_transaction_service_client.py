import logging
from urllib.parse import urljoin

from eth_typing import ChecksumAddress
from hexbytes import HexBytes
from safe_eth.eth.utils import fast_to_checksum_address
from safe_eth.util.util import to_0x_hex_str

from .. import config
from ..history.filters import MultisigTransactionFilters
from ..history.models import (
    MetaTransactionData,
    MultisigTransaction,
    PaginatedResponse,
    ProposeRequest,
    SafeInfo,
)
from ..history.pagination import PaginatedQuery
from ..history.serializers import (
    parse_estimation,
    parse_multisig_transaction,
    parse_safe_info,
    serialize_estimate_request,
    serialize_propose_request,
)
from ..networks import TxService
from ..tokens.filters import BalanceFilters, TokenFilters
from ..tokens.models import Balance, TokenInfo
from ..tokens.serializers import parse_balances, parse_token_info
from .base_client import BaseHTTPClient, parse_json_response

logger = logging.getLogger(__name__)


class SafeTransactionServiceClient(BaseHTTPClient):
    """
    Client for the read and write endpoints of the Safe Transaction Service

    https://docs.safe.global/core-api/transaction-service-overview
    """

    # Max page size allowed by the service
    MAX_PAGE_SIZE = 200

    def __init__(
        self,
        tx_service: TxService,
        request_timeout: int = 10,
        pool_connections: int = 10,
        pool_maxsize: int = 100,
    ):
        super().__init__(
            request_timeout=request_timeout,
            pool_connections=pool_connections,
            pool_maxsize=pool_maxsize,
        )
        self.tx_service = tx_service
        # `urljoin` drops last path segment if not finished by `/`
        self.base_url = (
            tx_service.url if tx_service.url.endswith("/") else tx_service.url + "/"
        )

    def __str__(self):
        return f"SafeTransactionServiceClient url={self.base_url} chain-id={self.chain_id}"

    @classmethod
    def by_chain_id(cls, chain_id: int, **kwargs) -> "SafeTransactionServiceClient":
        """
        :raises UnknownNetwork: if there's no known service for ``chain_id``
        """
        return cls(TxService.by_chain_id(chain_id), **kwargs)

    @classmethod
    def ethereum(cls, **kwargs) -> "SafeTransactionServiceClient":
        return cls.by_chain_id(1, **kwargs)

    @property
    def chain_id(self) -> int:
        return self.tx_service.chain_id

    def build_url(self, path: str) -> str:
        return urljoin(self.base_url, path)

    def _get_safe_path(self, safe_address: ChecksumAddress) -> str:
        return f"v1/safes/{fast_to_checksum_address(safe_address)}/"

    # Safes
    def get_safe_info(self, safe_address: ChecksumAddress) -> SafeInfo:
        """
        :param safe_address:
        :return: Current information of the Safe. It's always requested, as ``nonce`` and
            ``owners`` can change between calls
        """
        url = self.build_url(self._get_safe_path(safe_address))
        return parse_json_response(parse_safe_info, self._do_get(url), url)

    def get_balances(
        self, safe_address: ChecksumAddress, filters: BalanceFilters | None = None
    ) -> list[Balance]:
        url = self.build_url(self._get_safe_path(safe_address) + "balances/usd/")
        params = filters.to_query_params() if filters else None
        return parse_json_response(parse_balances, self._do_get(url, params), url)

    # Multisig transactions
    def get_multisig_transaction(self, safe_tx_hash: bytes | str) -> MultisigTransaction:
        """
        :param safe_tx_hash:
        :return: Canonical record for the transaction, including confirmations from every owner
        """
        url = self.build_url(
            f"v1/multisig-transactions/{to_0x_hex_str(HexBytes(safe_tx_hash))}/"
        )
        return parse_json_response(parse_multisig_transaction, self._do_get(url), url)

    def iter_multisig_transactions(
        self,
        safe_address: ChecksumAddress,
        filters: MultisigTransactionFilters | None = None,
    ) -> PaginatedQuery[MultisigTransaction]:
        """
        :param safe_address:
        :param filters:
        :return: Lazy iterable over every multisig transaction matching ``filters``, following
            every page. Nothing is requested until iteration starts
        """
        return PaginatedQuery(
            self._do_get,
            self.build_url(self._get_safe_path(safe_address) + "multisig-transactions/"),
            parse_multisig_transaction,
            params=filters.to_query_params() if filters else None,
        )

    def get_multisig_transactions(
        self,
        safe_address: ChecksumAddress,
        filters: MultisigTransactionFilters | None = None,
    ) -> PaginatedResponse[MultisigTransaction]:
        """
        :return: First page of multisig transactions matching ``filters``
        """
        return self.iter_multisig_transactions(safe_address, filters).first_page()

    def get_next_nonce(self, safe_address: ChecksumAddress) -> int:
        """
        Every page of the history is retrieved, so the nonce is calculated over the complete
        set of transactions known by the service

        :param safe_address:
        :return: Highest nonce of the multisig transactions plus one, ``0`` if there are no
            transactions
        """
        filters = MultisigTransactionFilters().limit(self.MAX_PAGE_SIZE)
        nonces = [
            multisig_transaction.nonce
            for multisig_transaction in self.iter_multisig_transactions(
                safe_address, filters
            )
        ]
        next_nonce = max(nonces) + 1 if nonces else 0
        logger.debug("Next nonce for safe=%s is %d", safe_address, next_nonce)
        return next_nonce

    def estimate_safe_tx_gas(
        self, safe_address: ChecksumAddress, meta_tx: MetaTransactionData
    ) -> int:
        """
        :param safe_address:
        :param meta_tx:
        :return: ``safeTxGas`` estimation for the transaction
        """
        url = self.build_url(
            self._get_safe_path(safe_address) + "multisig-transactions/estimations/"
        )
        return parse_json_response(
            parse_estimation,
            self._do_post(url, serialize_estimate_request(meta_tx)),
            url,
        )

    def post_proposal(self, propose_request: ProposeRequest) -> None:
        """
        Sends the proposal to the service. Service returns an empty body if everything
        went right, so ``get_multisig_transaction`` must be used to get the stored transaction

        :param propose_request:
        """
        url = self.build_url(
            self._get_safe_path(propose_request.safe) + "multisig-transactions/"
        )
        response = self._do_post(url, serialize_propose_request(propose_request))
        if response is not None:
            logger.debug(
                "Not expected body for proposal safe-tx-hash=%s: %s",
                propose_request.safe_tx_hash,
                response,
            )

    # Tokens
    def iter_tokens(
        self, filters: TokenFilters | None = None
    ) -> PaginatedQuery[TokenInfo]:
        return PaginatedQuery(
            self._do_get,
            self.build_url("v1/tokens/"),
            parse_token_info,
            params=filters.to_query_params() if filters else None,
        )

    def get_tokens(
        self, filters: TokenFilters | None = None
    ) -> PaginatedResponse[TokenInfo]:
        return self.iter_tokens(filters).first_page()


def get_default_client() -> SafeTransactionServiceClient:
    """
    :return: Client configured using environment variables, see ``config``
    """
    if config.SAFE_TRANSACTION_SERVICE_URL:
        tx_service = TxService(
            config.SAFE_TRANSACTION_SERVICE_URL,
            config.SAFE_TRANSACTION_SERVICE_CHAIN_ID,
        )
    else:
        tx_service = TxService.by_chain_id(config.SAFE_TRANSACTION_SERVICE_CHAIN_ID)
    return SafeTransactionServiceClient(
        tx_service,
        request_timeout=config.SAFE_TRANSACTION_SERVICE_REQUEST_TIMEOUT,
        pool_connections=config.SAFE_TRANSACTION_SERVICE_POOL_CONNECTIONS,
        pool_maxsize=config.SAFE_TRANSACTION_SERVICE_POOL_MAXSIZE,
    )
