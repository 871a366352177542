"""
Conversion between the client dataclasses and the JSON used by the Safe Transaction Service.

Service uses camelCase field names, checksummed addresses, ``0x`` prefixed hex strings for bytes
and decimal strings for ``uint256`` values (numbers would lose precision on most JSON parsers)
"""

from typing import Any, Callable

from eth_typing import ChecksumAddress
from safe_eth.eth.constants import NULL_ADDRESS
from safe_eth.eth.utils import fast_to_checksum_address
from safe_eth.safe.enums import SafeOperationEnum
from safe_eth.util.util import to_0x_hex_str

from ..utils.utils import hex_or_none, int_or_none, str_to_datetime
from .models import (
    MetaTransactionData,
    MultisigConfirmation,
    MultisigTransaction,
    PaginatedResponse,
    ProposeRequest,
    SafeInfo,
    SafeTransactionData,
    T,
)


def _address_or_none(value: str | None) -> ChecksumAddress | None:
    return fast_to_checksum_address(value) if value else None


def _address_or_null_address(value: str | None) -> ChecksumAddress:
    return fast_to_checksum_address(value) if value else NULL_ADDRESS


def _bytes_to_hex_or_none(value: bytes | None) -> str | None:
    return to_0x_hex_str(value) if value else None


# ================================================ #
#            Request Serializers
# ================================================ #
def serialize_safe_transaction_data(safe_tx: SafeTransactionData) -> dict[str, Any]:
    return {
        "to": safe_tx.to,
        "value": str(safe_tx.value),
        "data": _bytes_to_hex_or_none(safe_tx.data),
        "operation": safe_tx.operation.value,
        "safeTxGas": str(safe_tx.safe_tx_gas),
        "baseGas": str(safe_tx.base_gas),
        "gasPrice": str(safe_tx.gas_price),
        "gasToken": safe_tx.gas_token,
        "refundReceiver": safe_tx.refund_receiver,
        "nonce": str(safe_tx.nonce),
    }


def serialize_propose_request(propose_request: ProposeRequest) -> dict[str, Any]:
    payload = {
        "safe": propose_request.safe,
        **serialize_safe_transaction_data(propose_request.safe_tx),
        "contractTransactionHash": propose_request.safe_tx_hash,
        "sender": propose_request.sender,
        "signature": to_0x_hex_str(propose_request.signature),
    }
    if propose_request.propose_signature.origin is not None:
        payload["origin"] = propose_request.propose_signature.origin
    return payload


def serialize_estimate_request(meta_tx: MetaTransactionData) -> dict[str, Any]:
    return {
        "to": meta_tx.to,
        "value": str(meta_tx.value),
        "data": _bytes_to_hex_or_none(meta_tx.data),
        "operation": meta_tx.resolved_operation.value,
    }


# ================================================ #
#            Response Serializers
# ================================================ #
def parse_safe_info(data: dict[str, Any]) -> SafeInfo:
    return SafeInfo(
        address=fast_to_checksum_address(data["address"]),
        nonce=int(data["nonce"]),
        threshold=int(data["threshold"]),
        owners=tuple(fast_to_checksum_address(owner) for owner in data["owners"]),
        master_copy=_address_or_null_address(data.get("masterCopy")),
        modules=tuple(
            fast_to_checksum_address(module) for module in data.get("modules") or []
        ),
        fallback_handler=_address_or_null_address(data.get("fallbackHandler")),
        guard=_address_or_null_address(data.get("guard")),
        version=data.get("version"),
    )


def parse_multisig_confirmation(data: dict[str, Any]) -> MultisigConfirmation:
    return MultisigConfirmation(
        owner=fast_to_checksum_address(data["owner"]),
        submission_date=str_to_datetime(data["submissionDate"]),
        transaction_hash=data.get("transactionHash"),
        signature=hex_or_none(data.get("signature")),
        signature_type=data.get("signatureType"),
    )


def parse_multisig_transaction(data: dict[str, Any]) -> MultisigTransaction:
    """
    :param data: Multisig transaction as returned by the service
    :return: MultisigTransaction
    :raises KeyError|ValueError|TypeError: if data is not valid
    """
    return MultisigTransaction(
        safe=fast_to_checksum_address(data["safe"]),
        to=fast_to_checksum_address(data["to"]),
        value=int(data.get("value") or 0),
        data=hex_or_none(data.get("data")),
        operation=SafeOperationEnum(int(data["operation"])),
        gas_token=_address_or_null_address(data.get("gasToken")),
        safe_tx_gas=int(data.get("safeTxGas") or 0),
        base_gas=int(data.get("baseGas") or 0),
        gas_price=int(data.get("gasPrice") or 0),
        refund_receiver=_address_or_null_address(data.get("refundReceiver")),
        nonce=int(data["nonce"]),
        safe_tx_hash=data["safeTxHash"],
        submission_date=str_to_datetime(data["submissionDate"]),
        modified=str_to_datetime(data.get("modified")),
        is_executed=bool(data["isExecuted"]),
        trusted=bool(data.get("trusted")),
        confirmations=tuple(
            parse_multisig_confirmation(confirmation)
            for confirmation in data.get("confirmations") or []
        ),
        execution_date=str_to_datetime(data.get("executionDate")),
        block_number=int_or_none(data.get("blockNumber")),
        transaction_hash=data.get("transactionHash"),
        executor=_address_or_none(data.get("executor")),
        is_successful=data.get("isSuccessful"),
        eth_gas_price=int_or_none(data.get("ethGasPrice")),
        max_fee_per_gas=int_or_none(data.get("maxFeePerGas")),
        max_priority_fee_per_gas=int_or_none(data.get("maxPriorityFeePerGas")),
        gas_used=int_or_none(data.get("gasUsed")),
        fee=int_or_none(data.get("fee")),
        origin=data.get("origin"),
        data_decoded=data.get("dataDecoded"),
        confirmations_required=int_or_none(data.get("confirmationsRequired")),
        signatures=hex_or_none(data.get("signatures")),
        proposer=_address_or_none(data.get("proposer")),
    )


def parse_paginated_response(
    data: dict[str, Any], parse_result: Callable[[dict[str, Any]], T]
) -> PaginatedResponse[T]:
    """
    :param data: Paginated response like `{"count": 1, "next": None, "previous": None, "results": [...]}`
    :param parse_result: Function to parse every element on ``results``
    :return: PaginatedResponse
    """
    return PaginatedResponse(
        count=int(data["count"]),
        next=data.get("next"),
        previous=data.get("previous"),
        results=tuple(parse_result(result) for result in data["results"]),
    )


def parse_estimation(data: dict[str, Any]) -> int:
    """
    :param data: `{"safeTxGas": "63417"}`
    :return: ``safeTxGas`` estimation
    """
    return int(data["safeTxGas"])
