from unittest import TestCase, mock

from eth_account import Account
from requests import Session
from requests.exceptions import ConnectionError as RequestsConnectionError

from ...history.filters import MultisigTransactionFilters
from ...history.models import MetaTransactionData, SafeTransactionData
from ...history.signers import EthAccountSigner, build_propose_request
from ...history.tests.mocks.mocks_safe_transaction_service import (
    SAFE_ADDRESS,
    SAFE_TX_HASH,
    balances_mock,
    build_multisig_transaction_mock,
    build_paginated_mock,
    multisig_transaction_mock,
    safe_info_mock,
    token_info_mock,
)
from ...history.tests.utils import build_response, skip_on
from ...networks import TxService
from ...tokens.filters import BalanceFilters, TokenFilters
from ...tokens.models import TokenType
from ..exceptions import (
    SafeServiceApiError,
    SafeServiceConnectionError,
    SafeServiceMalformedResponse,
    SafeServiceServerError,
)
from ..safe_transaction_service_client import (
    SafeTransactionServiceClient,
    get_default_client,
)


class TestSafeTransactionServiceClient(TestCase):
    BASE_URL = "https://safe-transaction-mainnet.safe.global/api/"

    def setUp(self):
        self.client = SafeTransactionServiceClient.ethereum()

    def test_init(self):
        self.assertEqual(self.client.chain_id, 1)
        self.assertEqual(self.client.base_url, self.BASE_URL)
        self.assertEqual(
            self.client.build_url("v1/tokens/"), self.BASE_URL + "v1/tokens/"
        )

        # Url without trailing slash
        client = SafeTransactionServiceClient(
            TxService("http://localhost:8000/api", 1337)
        )
        self.assertEqual(client.chain_id, 1337)
        self.assertEqual(
            client.build_url("v1/about/"), "http://localhost:8000/api/v1/about/"
        )

    def test_get_default_client(self):
        client = get_default_client()
        self.assertEqual(client.chain_id, 1)
        self.assertEqual(client.base_url, self.BASE_URL)

    def test_get_safe_info(self):
        with mock.patch.object(
            Session, "request", return_value=build_response(json_data=safe_info_mock)
        ) as request_mock:
            safe_info = self.client.get_safe_info(SAFE_ADDRESS.lower())
            self.assertEqual(safe_info.address, SAFE_ADDRESS)
            self.assertEqual(safe_info.nonce, 3)
            request_mock.assert_called_once_with(
                "GET",
                f"{self.BASE_URL}v1/safes/{SAFE_ADDRESS}/",
                params=None,
                json=None,
                timeout=10,
            )

    def test_get_multisig_transaction(self):
        with mock.patch.object(
            Session,
            "request",
            return_value=build_response(json_data=multisig_transaction_mock),
        ) as request_mock:
            multisig_transaction = self.client.get_multisig_transaction(SAFE_TX_HASH)
            self.assertEqual(multisig_transaction.safe_tx_hash, SAFE_TX_HASH)
            self.assertEqual(
                request_mock.call_args[0][1],
                f"{self.BASE_URL}v1/multisig-transactions/{SAFE_TX_HASH}/",
            )

    def test_get_multisig_transactions(self):
        with mock.patch.object(
            Session,
            "request",
            return_value=build_response(
                json_data=build_paginated_mock([multisig_transaction_mock])
            ),
        ) as request_mock:
            page = self.client.get_multisig_transactions(
                SAFE_ADDRESS, MultisigTransactionFilters().executed(False).limit(10)
            )
            self.assertEqual(page.count, 1)
            self.assertEqual(page.results[0].nonce, 3)
            self.assertEqual(
                request_mock.call_args[1]["params"],
                {"executed": "false", "limit": "10"},
            )

    def test_get_next_nonce(self):
        next_url = f"{self.BASE_URL}v1/safes/{SAFE_ADDRESS}/multisig-transactions/?limit=200&offset=200"
        with mock.patch.object(
            Session,
            "request",
            side_effect=[
                build_response(
                    json_data=build_paginated_mock(
                        [
                            build_multisig_transaction_mock(3),
                            build_multisig_transaction_mock(1),
                        ],
                        count=3,
                        next_url=next_url,
                    )
                ),
                build_response(
                    json_data=build_paginated_mock(
                        [build_multisig_transaction_mock(0)], count=3
                    )
                ),
            ],
        ) as request_mock:
            self.assertEqual(self.client.get_next_nonce(SAFE_ADDRESS), 4)
            self.assertEqual(request_mock.call_count, 2)
            self.assertEqual(
                request_mock.call_args_list[0][1]["params"], {"limit": "200"}
            )
            self.assertEqual(request_mock.call_args_list[1][0][1], next_url)
            self.assertIsNone(request_mock.call_args_list[1][1]["params"])

        with mock.patch.object(
            Session,
            "request",
            return_value=build_response(json_data=build_paginated_mock([])),
        ):
            self.assertEqual(self.client.get_next_nonce(SAFE_ADDRESS), 0)

    def test_estimate_safe_tx_gas(self):
        to = Account.create().address
        with mock.patch.object(
            Session,
            "request",
            return_value=build_response(json_data={"safeTxGas": "63417"}),
        ) as request_mock:
            self.assertEqual(
                self.client.estimate_safe_tx_gas(SAFE_ADDRESS, MetaTransactionData(to)),
                63417,
            )
            self.assertEqual(request_mock.call_args[0][0], "POST")
            self.assertEqual(
                request_mock.call_args[0][1],
                f"{self.BASE_URL}v1/safes/{SAFE_ADDRESS}/multisig-transactions/estimations/",
            )
            self.assertEqual(
                request_mock.call_args[1]["json"],
                {"to": to, "value": "0", "data": None, "operation": 0},
            )

    def test_post_proposal(self):
        account = Account.create()
        propose_request = build_propose_request(
            EthAccountSigner(account),
            SafeTransactionData(MetaTransactionData(Account.create().address, 1), 5),
            SAFE_ADDRESS,
            1,
        )
        with mock.patch.object(
            Session, "request", return_value=build_response(status_code=201)
        ) as request_mock:
            self.assertIsNone(self.client.post_proposal(propose_request))
            self.assertEqual(
                request_mock.call_args[0][1],
                f"{self.BASE_URL}v1/safes/{SAFE_ADDRESS}/multisig-transactions/",
            )
            payload = request_mock.call_args[1]["json"]
            self.assertEqual(payload["nonce"], "5")
            self.assertEqual(payload["sender"], account.address)
            self.assertEqual(
                payload["contractTransactionHash"], propose_request.safe_tx_hash
            )

    def test_api_error(self):
        with mock.patch.object(
            Session,
            "request",
            return_value=build_response(
                status_code=422,
                json_data={
                    "code": 1,
                    "message": "Checksum address validation failed",
                    "arguments": [SAFE_ADDRESS],
                },
            ),
        ):
            with self.assertRaises(SafeServiceApiError) as context:
                self.client.get_safe_info(SAFE_ADDRESS)
            self.assertEqual(context.exception.code, 1)
            self.assertEqual(
                context.exception.message, "Checksum address validation failed"
            )
            self.assertEqual(context.exception.arguments, [SAFE_ADDRESS])
            self.assertEqual(
                str(context.exception),
                'Code: 1, Message: "Checksum address validation failed"',
            )

        with mock.patch.object(
            Session,
            "request",
            return_value=build_response(status_code=422, content=b"<html></html>"),
        ):
            with self.assertRaises(SafeServiceMalformedResponse):
                self.client.get_safe_info(SAFE_ADDRESS)

    def test_api_error_success_status(self):
        with mock.patch.object(
            Session,
            "request",
            return_value=build_response(
                json_data={"code": 1, "message": "bad nonce", "arguments": []}
            ),
        ):
            with self.assertRaises(SafeServiceApiError) as context:
                self.client.get_safe_info(SAFE_ADDRESS)
            self.assertEqual(context.exception.code, 1)
            self.assertEqual(context.exception.message, "bad nonce")
            self.assertEqual(context.exception.arguments, [])

        # `code` without `arguments` is not an error envelope
        with mock.patch.object(
            Session,
            "request",
            return_value=build_response(json_data={"code": 1, "message": "bad nonce"}),
        ):
            with self.assertRaises(SafeServiceMalformedResponse):
                self.client.get_safe_info(SAFE_ADDRESS)

    def test_server_error(self):
        with mock.patch.object(
            Session,
            "request",
            return_value=build_response(status_code=404, content=b"Not found"),
        ):
            with self.assertRaises(SafeServiceServerError) as context:
                self.client.get_multisig_transaction(SAFE_TX_HASH)
            self.assertEqual(context.exception.status_code, 404)

        with mock.patch.object(
            Session, "request", return_value=build_response(status_code=503)
        ):
            with self.assertRaises(SafeServiceServerError) as context:
                self.client.get_safe_info(SAFE_ADDRESS)
            self.assertEqual(context.exception.status_code, 503)

    def test_connection_error(self):
        with mock.patch.object(
            Session, "request", side_effect=RequestsConnectionError("Connection refused")
        ):
            with self.assertRaises(SafeServiceConnectionError):
                self.client.get_safe_info(SAFE_ADDRESS)

            # It's also an `IOError`
            with self.assertRaises(IOError):
                self.client.get_safe_info(SAFE_ADDRESS)

    def test_malformed_response(self):
        with mock.patch.object(
            Session, "request", return_value=build_response(content=b"not json")
        ):
            with self.assertRaises(SafeServiceMalformedResponse):
                self.client.get_safe_info(SAFE_ADDRESS)

        with mock.patch.object(
            Session, "request", return_value=build_response(json_data={"nonce": 1})
        ):
            with self.assertRaises(SafeServiceMalformedResponse):
                self.client.get_safe_info(SAFE_ADDRESS)

        # Empty body where a body is expected
        with mock.patch.object(Session, "request", return_value=build_response()):
            with self.assertRaises(SafeServiceMalformedResponse):
                self.client.get_safe_info(SAFE_ADDRESS)

    def test_get_tokens(self):
        with mock.patch.object(
            Session,
            "request",
            return_value=build_response(
                json_data=build_paginated_mock([token_info_mock])
            ),
        ) as request_mock:
            page = self.client.get_tokens(TokenFilters().symbol("GNO").min_decimals(18))
            self.assertEqual(page.results[0].token_type, TokenType.ERC20)
            self.assertEqual(page.results[0].symbol, "GNO")
            self.assertEqual(request_mock.call_args[0][1], f"{self.BASE_URL}v1/tokens/")
            self.assertEqual(
                request_mock.call_args[1]["params"],
                {"symbol": "GNO", "decimals__gt": "17"},
            )

    def test_get_balances(self):
        with mock.patch.object(
            Session, "request", return_value=build_response(json_data=balances_mock)
        ) as request_mock:
            balances = self.client.get_balances(
                SAFE_ADDRESS, BalanceFilters().trusted(True).exclude_spam(True)
            )
            self.assertEqual(len(balances), 2)
            self.assertTrue(balances[0].is_native_token)
            self.assertEqual(balances[0].balance, 7 * 10**18)
            self.assertFalse(balances[1].is_native_token)
            self.assertEqual(balances[1].token.symbol, "GNO")
            self.assertEqual(
                request_mock.call_args[0][1],
                f"{self.BASE_URL}v1/safes/{SAFE_ADDRESS}/balances/usd/",
            )
            self.assertEqual(
                request_mock.call_args[1]["params"],
                {"trusted": "true", "exclude_spam": "true"},
            )

    @skip_on(
        (SafeServiceConnectionError, SafeServiceServerError),
        reason="Safe Transaction Service is not available",
    )
    def test_get_tokens_live(self):
        gno_address = "0x6810e776880C02933D47DB1b9fc05908e5386b96"
        page = self.client.get_tokens(TokenFilters().address(gno_address))
        self.assertEqual(page.count, 1)
        self.assertEqual(page.results[0].address, gno_address)
        self.assertEqual(page.results[0].symbol, "GNO")
