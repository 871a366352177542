import dataclasses
import logging
import threading
from enum import Enum
from typing import Callable

from eth_typing import ChecksumAddress
from hexbytes import HexBytes
from safe_eth.eth.utils import fast_to_checksum_address
from safe_eth.util.util import to_0x_hex_str
from web3.types import TxParams

from ...clients.safe_transaction_service_client import SafeTransactionServiceClient
from ...networks import TxService
from ..eip712 import get_safe_tx_hash
from ..exceptions import (
    InvalidProposalState,
    MissingToAddress,
    SignerNotConfigured,
    WrongSigner,
)
from ..models import (
    GasConfig,
    MetaTransactionData,
    MultisigTransaction,
    ProposeRequest,
    SafeTransactionData,
)
from ..signers import SafeTxSigner, sign_safe_tx_hash

logger = logging.getLogger(__name__)


class ProposalState(Enum):
    BUILT = 0
    HASHED = 1
    SIGNED = 2
    SUBMITTED = 3
    CONFIRMED = 4
    ERRORED = 5


@dataclasses.dataclass
class Proposal:
    """
    Tracks a proposal through ``BUILT -> HASHED -> SIGNED -> SUBMITTED -> CONFIRMED``.
    ``ERRORED`` is reachable from every transition. Only ``confirm`` can leave it, to
    reconcile a submission with unknown outcome
    """

    safe_address: ChecksumAddress
    chain_id: int
    safe_tx: SafeTransactionData
    origin: str | None = None
    state: ProposalState = ProposalState.BUILT
    safe_tx_hash: bytes | None = None
    propose_request: ProposeRequest | None = None
    multisig_transaction: MultisigTransaction | None = None
    error: Exception | None = None

    def __str__(self):
        safe_tx_hash = to_0x_hex_str(self.safe_tx_hash) if self.safe_tx_hash else None
        return (
            f"Proposal safe={self.safe_address} nonce={self.safe_tx.nonce} "
            f"safe-tx-hash={safe_tx_hash} state={self.state.name}"
        )


class ProposalLog:
    """
    Append only log of every `ProposeRequest` built, for auditing purposes. It's never used
    to decide anything about the proposals
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._proposals: list[ProposeRequest] = []

    def __len__(self):
        with self._lock:
            return len(self._proposals)

    def append(self, propose_request: ProposeRequest) -> None:
        with self._lock:
            self._proposals.append(propose_request)

    def snapshot(self) -> tuple[ProposeRequest, ...]:
        with self._lock:
            return tuple(self._proposals)


class ProposalService:
    """
    Proposes transactions to the Safe Transaction Service: gets a fresh nonce, hashes,
    signs, submits and retrieves the stored transaction.

    Nonces are never cached. Two concurrent proposals for the same Safe can get the same
    nonce, callers must serialize them if that's not desired
    """

    def __init__(
        self,
        client: SafeTransactionServiceClient,
        signer: SafeTxSigner | None,
        proposal_log: ProposalLog | None = None,
        submit_to_api: bool = True,
    ):
        """
        :param client:
        :param signer:
        :param proposal_log: Shared log, a new one is created if not provided
        :param submit_to_api: If ``False`` proposals are signed and logged but never sent
        :raises SignerNotConfigured: if no signer is provided
        :raises WrongSigner: if signer is configured for a different chain than the service
        """
        if signer is None:
            raise SignerNotConfigured("Proposing transactions requires a signer")
        if signer.chain_id is not None and signer.chain_id != client.chain_id:
            raise WrongSigner(
                f"chain-id={signer.chain_id}", f"chain-id={client.chain_id}"
            )
        self.client = client
        self.signer = signer
        self.proposal_log = proposal_log or ProposalLog()
        self.submit_to_api = submit_to_api

    @classmethod
    def from_signer(cls, signer: SafeTxSigner, **kwargs) -> "ProposalService":
        """
        :param signer: Signer with ``chain_id`` configured
        :return: ProposalService using the known service for the chain of the signer
        :raises UnknownNetwork: if there's no known service for the chain
        """
        if signer.chain_id is None:
            raise SignerNotConfigured(f"Signer {signer.address} has no chain-id")
        return cls(
            SafeTransactionServiceClient(TxService.by_chain_id(signer.chain_id)),
            signer,
            **kwargs,
        )

    def _transition(
        self,
        proposal: Proposal,
        allowed_states: tuple[ProposalState, ...],
        new_state: ProposalState,
        fn: Callable[[], None],
    ) -> Proposal:
        if proposal.state not in allowed_states:
            raise InvalidProposalState(
                f"Cannot move {proposal} to {new_state.name}, expected state "
                f"{' or '.join(state.name for state in allowed_states)}"
            )
        try:
            fn()
        except Exception as exc:
            proposal.state = ProposalState.ERRORED
            proposal.error = exc
            logger.warning(
                "%s cannot move to %s: %s", proposal, new_state.name, exc
            )
            raise
        proposal.state = new_state
        logger.debug("%s", proposal)
        return proposal

    def build(
        self,
        safe_address: ChecksumAddress,
        meta_tx: MetaTransactionData,
        gas_config: GasConfig | None = None,
        nonce: int | None = None,
        origin: str | None = None,
    ) -> Proposal:
        """
        :param safe_address:
        :param meta_tx:
        :param gas_config: Refund parameters, zeroed if not provided
        :param nonce: If not provided, next nonce is requested to the service
        :param origin:
        :return: Proposal on ``BUILT`` state
        """
        if nonce is None:
            nonce = self.client.get_next_nonce(safe_address)
        safe_tx = SafeTransactionData(meta_tx, nonce, gas_config or GasConfig())
        return Proposal(
            fast_to_checksum_address(safe_address),
            self.client.chain_id,
            safe_tx,
            origin=origin,
        )

    def hash(self, proposal: Proposal) -> Proposal:
        def _hash():
            proposal.safe_tx_hash = get_safe_tx_hash(
                proposal.safe_tx, proposal.safe_address, proposal.chain_id
            )

        return self._transition(
            proposal, (ProposalState.BUILT,), ProposalState.HASHED, _hash
        )

    def sign(self, proposal: Proposal) -> Proposal:
        """
        Signs the proposal and stores the resulting `ProposeRequest` on the proposal log

        :raises SignerException: if signer fails
        """

        def _sign():
            propose_signature = sign_safe_tx_hash(
                self.signer, proposal.safe_tx_hash, origin=proposal.origin
            )
            proposal.propose_request = ProposeRequest(
                proposal.safe_address,
                proposal.safe_tx,
                proposal.safe_tx_hash,
                propose_signature,
            )
            self.proposal_log.append(proposal.propose_request)

        return self._transition(
            proposal, (ProposalState.HASHED,), ProposalState.SIGNED, _sign
        )

    def submit(self, proposal: Proposal) -> Proposal:
        """
        :raises WrongSigner: if request was signed by other signer
        :raises SafeServiceClientException:
        """

        def _submit():
            if proposal.propose_request.sender != self.signer.address:
                raise WrongSigner(proposal.propose_request.sender, self.signer.address)
            self.client.post_proposal(proposal.propose_request)

        return self._transition(
            proposal, (ProposalState.SIGNED,), ProposalState.SUBMITTED, _submit
        )

    def confirm(self, proposal: Proposal) -> Proposal:
        """
        Retrieves the transaction stored by the service. As it's a read by `safeTxHash`, it
        can be retried to reconcile a proposal whose submission result is not known

        :raises SafeServiceClientException:
        """
        if proposal.state == ProposalState.ERRORED and proposal.safe_tx_hash is None:
            raise InvalidProposalState(f"{proposal} was never hashed")

        def _confirm():
            proposal.multisig_transaction = self.client.get_multisig_transaction(
                proposal.safe_tx_hash
            )
            proposal.error = None

        return self._transition(
            proposal,
            (
                ProposalState.SUBMITTED,
                ProposalState.CONFIRMED,
                ProposalState.ERRORED,
            ),
            ProposalState.CONFIRMED,
            _confirm,
        )

    def propose_proposal(self, proposal: Proposal) -> Proposal:
        self.sign(self.hash(proposal))
        if not self.submit_to_api:
            logger.info("%s not submitted to the service", proposal)
            return proposal
        return self.confirm(self.submit(proposal))

    def propose(
        self,
        safe_address: ChecksumAddress,
        meta_tx: MetaTransactionData,
        gas_config: GasConfig | None = None,
        origin: str | None = None,
    ) -> Proposal:
        """
        Gets the next nonce, hashes, signs, submits and retrieves the transaction

        :param safe_address:
        :param meta_tx:
        :param gas_config:
        :param origin:
        :return: Proposal on ``CONFIRMED`` state, or ``SIGNED`` if ``submit_to_api=False``
        """
        proposal = self.build(safe_address, meta_tx, gas_config, origin=origin)
        return self.propose_proposal(proposal)

    def propose_safe_tx(
        self,
        safe_address: ChecksumAddress,
        safe_tx: SafeTransactionData,
        origin: str | None = None,
    ) -> Proposal:
        """
        Same as ``propose`` but nonce is already set on ``safe_tx``
        """
        proposal = Proposal(
            fast_to_checksum_address(safe_address),
            self.client.chain_id,
            safe_tx,
            origin=origin,
        )
        return self.propose_proposal(proposal)

    @staticmethod
    def tx_params_to_meta_tx(tx_params: TxParams) -> MetaTransactionData:
        """
        :param tx_params: web3 transaction, only ``to``, ``value`` and ``data`` are used
        :return: MetaTransactionData for a ``CALL``
        :raises MissingToAddress: if ``to`` is not provided
        """
        to = tx_params.get("to")
        if not to:
            raise MissingToAddress("Transaction must specify `to` address")
        data = tx_params.get("data")
        return MetaTransactionData(
            to,
            int(tx_params.get("value") or 0),
            HexBytes(data) if data else None,
        )

    def propose_tx_params(
        self,
        safe_address: ChecksumAddress,
        tx_params: TxParams,
        origin: str | None = None,
    ) -> Proposal:
        return self.propose(
            safe_address, self.tx_params_to_meta_tx(tx_params), origin=origin
        )
