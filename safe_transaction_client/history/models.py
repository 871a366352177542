import dataclasses
import datetime
from typing import Any, Generic, Sequence, TypeVar

from eth_typing import ChecksumAddress, HexStr
from hexbytes import HexBytes
from safe_eth.eth.constants import NULL_ADDRESS
from safe_eth.eth.utils import fast_to_checksum_address
from safe_eth.safe.enums import SafeOperationEnum
from safe_eth.util.util import to_0x_hex_str

from .constants import SIGNATURE_LENGTH
from .exceptions import InvalidOperation

T = TypeVar("T")

ALLOWED_OPERATIONS = (SafeOperationEnum.CALL, SafeOperationEnum.DELEGATE_CALL)


def _set_checksum_address(instance: Any, field_name: str) -> None:
    # Frozen dataclasses require `object.__setattr__` on `__post_init__`
    object.__setattr__(
        instance, field_name, fast_to_checksum_address(getattr(instance, field_name))
    )


@dataclasses.dataclass(eq=True, frozen=True)
class MetaTransactionData:
    """
    Call intended to be executed by the Safe. ``operation=None`` is equivalent to
    ``SafeOperationEnum.CALL``, defaulting happens when encoding so the stored value is
    never modified
    """

    to: ChecksumAddress
    value: int = 0
    data: bytes | None = None
    operation: SafeOperationEnum | None = None

    def __post_init__(self):
        _set_checksum_address(self, "to")
        if self.value < 0:
            raise ValueError(f"value={self.value} cannot be negative")
        if self.data is not None:
            object.__setattr__(self, "data", HexBytes(self.data))
        if self.operation is not None:
            try:
                operation = SafeOperationEnum(self.operation)
            except ValueError as exc:
                raise InvalidOperation(
                    f"Operation={self.operation} is not valid"
                ) from exc
            if operation not in ALLOWED_OPERATIONS:
                raise InvalidOperation(
                    f"Operation={operation.name} is not supported for proposals"
                )
            object.__setattr__(self, "operation", operation)

    @property
    def resolved_operation(self) -> SafeOperationEnum:
        return self.operation if self.operation is not None else SafeOperationEnum.CALL


@dataclasses.dataclass(eq=True, frozen=True)
class GasConfig:
    """
    Refund and execution accounting parameters, unrelated to the call payload
    """

    safe_tx_gas: int = 0
    base_gas: int = 0
    gas_price: int = 0
    gas_token: ChecksumAddress = NULL_ADDRESS
    refund_receiver: ChecksumAddress = NULL_ADDRESS

    def __post_init__(self):
        _set_checksum_address(self, "gas_token")
        _set_checksum_address(self, "refund_receiver")


@dataclasses.dataclass(eq=True, frozen=True)
class SafeTransactionData:
    """
    Complete pre-image of the `safeTxHash`. Frozen: any change would invalidate a
    signature already produced for it
    """

    meta_tx: MetaTransactionData
    nonce: int
    gas: GasConfig = dataclasses.field(default_factory=GasConfig)

    def __post_init__(self):
        if self.nonce < 0:
            raise ValueError(f"nonce={self.nonce} cannot be negative")

    @property
    def to(self) -> ChecksumAddress:
        return self.meta_tx.to

    @property
    def value(self) -> int:
        return self.meta_tx.value

    @property
    def data(self) -> bytes | None:
        return self.meta_tx.data

    @property
    def operation(self) -> SafeOperationEnum:
        return self.meta_tx.resolved_operation

    @property
    def safe_tx_gas(self) -> int:
        return self.gas.safe_tx_gas

    @property
    def base_gas(self) -> int:
        return self.gas.base_gas

    @property
    def gas_price(self) -> int:
        return self.gas.gas_price

    @property
    def gas_token(self) -> ChecksumAddress:
        return self.gas.gas_token

    @property
    def refund_receiver(self) -> ChecksumAddress:
        return self.gas.refund_receiver


@dataclasses.dataclass(eq=True, frozen=True)
class ProposeSignature:
    sender: ChecksumAddress
    signature: bytes  # r + s + v, 65 bytes
    origin: str | None = None

    def __post_init__(self):
        _set_checksum_address(self, "sender")
        object.__setattr__(self, "signature", HexBytes(self.signature))
        if len(self.signature) != SIGNATURE_LENGTH:
            raise ValueError(
                f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(self.signature)}"
            )

    @property
    def r(self) -> int:
        return int.from_bytes(self.signature[:32], byteorder="big")

    @property
    def s(self) -> int:
        return int.from_bytes(self.signature[32:64], byteorder="big")

    @property
    def v(self) -> int:
        return self.signature[64]


@dataclasses.dataclass(eq=True, frozen=True)
class ProposeRequest:
    """
    Payload submitted to the service. ``contract_transaction_hash`` must be the
    `safeTxHash` of ``safe_tx``, use ``signers.build_propose_request`` to build it
    """

    safe: ChecksumAddress
    safe_tx: SafeTransactionData
    contract_transaction_hash: bytes
    propose_signature: ProposeSignature

    def __post_init__(self):
        _set_checksum_address(self, "safe")
        object.__setattr__(
            self, "contract_transaction_hash", HexBytes(self.contract_transaction_hash)
        )

    @property
    def safe_tx_hash(self) -> HexStr:
        return to_0x_hex_str(self.contract_transaction_hash)

    @property
    def sender(self) -> ChecksumAddress:
        return self.propose_signature.sender

    @property
    def signature(self) -> bytes:
        return self.propose_signature.signature


@dataclasses.dataclass(eq=True, frozen=True)
class SafeInfo:
    """
    Snapshot of the Safe as tracked by the service. Never cached, nonce can change
    between calls
    """

    address: ChecksumAddress
    nonce: int
    threshold: int
    owners: Sequence[ChecksumAddress]
    master_copy: ChecksumAddress
    modules: Sequence[ChecksumAddress]
    fallback_handler: ChecksumAddress
    guard: ChecksumAddress
    version: str | None = None


@dataclasses.dataclass(eq=True, frozen=True)
class MultisigConfirmation:
    owner: ChecksumAddress
    submission_date: datetime.datetime
    transaction_hash: HexStr | None
    signature: bytes
    signature_type: str


@dataclasses.dataclass(eq=True, frozen=True)
class MultisigTransaction:
    """
    Canonical record of a multisig transaction stored by the service
    """

    safe: ChecksumAddress
    to: ChecksumAddress
    value: int
    data: bytes | None
    operation: SafeOperationEnum
    gas_token: ChecksumAddress
    safe_tx_gas: int
    base_gas: int
    gas_price: int
    refund_receiver: ChecksumAddress
    nonce: int
    safe_tx_hash: HexStr
    submission_date: datetime.datetime
    modified: datetime.datetime | None
    is_executed: bool
    trusted: bool
    confirmations: Sequence[MultisigConfirmation]
    execution_date: datetime.datetime | None = None
    block_number: int | None = None
    transaction_hash: HexStr | None = None
    executor: ChecksumAddress | None = None
    is_successful: bool | None = None
    eth_gas_price: int | None = None
    max_fee_per_gas: int | None = None
    max_priority_fee_per_gas: int | None = None
    gas_used: int | None = None
    fee: int | None = None
    origin: Any = None
    data_decoded: dict[str, Any] | None = None
    confirmations_required: int | None = None
    signatures: bytes | None = None
    proposer: ChecksumAddress | None = None

    def to_safe_transaction_data(self) -> SafeTransactionData:
        """
        :return: `SafeTransactionData` so the `safeTxHash` can be recalculated locally
        """
        return SafeTransactionData(
            MetaTransactionData(self.to, self.value, self.data, self.operation),
            self.nonce,
            GasConfig(
                self.safe_tx_gas,
                self.base_gas,
                self.gas_price,
                self.gas_token,
                self.refund_receiver,
            ),
        )


@dataclasses.dataclass(eq=True, frozen=True)
class PaginatedResponse(Generic[T]):
    count: int
    next: str | None
    previous: str | None
    results: Sequence[T]
