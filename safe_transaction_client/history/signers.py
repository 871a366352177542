import logging
from abc import ABC, abstractmethod

from eth_account.signers.local import LocalAccount
from eth_typing import ChecksumAddress
from hexbytes import HexBytes
from safe_eth.safe.signatures import signature_to_bytes
from safe_eth.util.util import to_0x_hex_str

from .eip712 import get_safe_tx_hash
from .exceptions import SignerException
from .models import ProposeRequest, ProposeSignature, SafeTransactionData

logger = logging.getLogger(__name__)


class SafeTxSigner(ABC):
    """
    Capability able to sign a 32 bytes digest and report its own address. Implementations
    can wrap local keys, hardware wallets, remote signers...
    """

    chain_id: int | None = None

    @property
    @abstractmethod
    def address(self) -> ChecksumAddress:
        raise NotImplementedError

    @abstractmethod
    def sign_hash(self, message_hash: bytes) -> bytes:
        """
        :param message_hash: 32 bytes digest
        :return: 65 bytes signature ``r || s || v``
        """
        raise NotImplementedError


class EthAccountSigner(SafeTxSigner):
    def __init__(self, account: LocalAccount, chain_id: int | None = None):
        self.account = account
        self.chain_id = chain_id

    def __str__(self):
        return f"EthAccountSigner address={self.address} chain-id={self.chain_id}"

    @property
    def address(self) -> ChecksumAddress:
        return self.account.address

    def sign_hash(self, message_hash: bytes) -> bytes:
        # `safeTxHash` is already EIP712 encoded, so no prefix must be added
        signed_message = self.account.unsafe_sign_hash(message_hash)
        return signature_to_bytes(signed_message.v, signed_message.r, signed_message.s)


def sign_safe_tx_hash(
    signer: SafeTxSigner, safe_tx_hash: bytes, origin: str | None = None
) -> ProposeSignature:
    """
    :param signer:
    :param safe_tx_hash:
    :param origin: Optional provenance tag stored by the service
    :return: `ProposeSignature` for the provided digest
    :raises SignerException: if signer fails for any reason. Signing is never retried
    """
    try:
        signature = signer.sign_hash(HexBytes(safe_tx_hash))
    except Exception as exc:
        logger.warning(
            "Signer %s could not sign safe-tx-hash=%s",
            signer.address,
            to_0x_hex_str(safe_tx_hash),
        )
        raise SignerException(f"Signer {signer.address} failed: {exc}") from exc
    return ProposeSignature(signer.address, signature, origin)


def sign_safe_tx(
    signer: SafeTxSigner,
    safe_tx: SafeTransactionData,
    verifying_contract: ChecksumAddress,
    chain_id: int,
    origin: str | None = None,
) -> ProposeSignature:
    safe_tx_hash = get_safe_tx_hash(safe_tx, verifying_contract, chain_id)
    return sign_safe_tx_hash(signer, safe_tx_hash, origin=origin)


def build_propose_request(
    signer: SafeTxSigner,
    safe_tx: SafeTransactionData,
    safe_address: ChecksumAddress,
    chain_id: int,
    origin: str | None = None,
) -> ProposeRequest:
    """
    Signs the transaction and builds the payload for the service, so
    ``contractTransactionHash`` always matches the embedded transaction
    """
    safe_tx_hash = get_safe_tx_hash(safe_tx, safe_address, chain_id)
    propose_signature = sign_safe_tx_hash(signer, safe_tx_hash, origin=origin)
    return ProposeRequest(safe_address, safe_tx, safe_tx_hash, propose_signature)
