"""
EIP-712 encoding and hashing for Safe transactions.

Equivalent to ``Safe.getTransactionHash`` on the Safe contracts (v1.3.0 onwards, where the
domain separator includes the ``chainId``):

    safeTxHash = keccak256(0x19 || 0x01 || domainSeparator || keccak256(encodeStruct(safeTx)))
"""

from eth_abi import encode as abi_encode
from eth_typing import ChecksumAddress, Hash32
from safe_eth.eth.utils import fast_keccak

from .constants import DOMAIN_SEPARATOR_TYPEHASH, EIP712_PREFIX, SAFE_TX_TYPEHASH
from .models import SafeTransactionData

SAFE_TX_ABI_TYPES = [
    "bytes32",
    "address",
    "uint256",
    "bytes32",
    "uint8",
    "uint256",
    "uint256",
    "uint256",
    "address",
    "address",
    "uint256",
]


def encode_safe_tx_struct(safe_tx: SafeTransactionData) -> bytes:
    """
    :param safe_tx:
    :return: ABI encoded ``SafeTx`` struct, preimage of the struct hash. Missing ``data``
        is encoded as ``keccak256(b"")`` and missing ``operation`` as ``CALL``
    """
    return abi_encode(
        SAFE_TX_ABI_TYPES,
        [
            SAFE_TX_TYPEHASH,
            safe_tx.to,
            safe_tx.value,
            fast_keccak(safe_tx.data or b""),
            safe_tx.operation.value,
            safe_tx.safe_tx_gas,
            safe_tx.base_gas,
            safe_tx.gas_price,
            safe_tx.gas_token,
            safe_tx.refund_receiver,
            safe_tx.nonce,
        ],
    )


def get_domain_separator(chain_id: int, verifying_contract: ChecksumAddress) -> Hash32:
    return fast_keccak(
        abi_encode(
            ["bytes32", "uint256", "address"],
            [DOMAIN_SEPARATOR_TYPEHASH, chain_id, verifying_contract],
        )
    )


def get_safe_tx_struct_hash(safe_tx: SafeTransactionData) -> Hash32:
    return fast_keccak(encode_safe_tx_struct(safe_tx))


def get_safe_tx_hash_preimage(
    safe_tx: SafeTransactionData, verifying_contract: ChecksumAddress, chain_id: int
) -> bytes:
    """
    :return: 66 bytes, ``0x19 || 0x01 || domainSeparator || structHash``
    """
    return (
        EIP712_PREFIX
        + get_domain_separator(chain_id, verifying_contract)
        + get_safe_tx_struct_hash(safe_tx)
    )


def get_safe_tx_hash(
    safe_tx: SafeTransactionData, verifying_contract: ChecksumAddress, chain_id: int
) -> Hash32:
    """
    Calculates the `safeTxHash`, the canonical identifier of the transaction on the
    service. It's not cached, so it's always consistent with the provided fields

    :param safe_tx:
    :param verifying_contract: Safe address
    :param chain_id:
    :return: 32 bytes digest to be signed by the owners
    """
    return fast_keccak(
        get_safe_tx_hash_preimage(safe_tx, verifying_contract, chain_id)
    )
