class SafeProposalException(Exception):
    pass


class MissingToAddress(SafeProposalException):
    pass


class InvalidOperation(SafeProposalException):
    pass


class SignerNotConfigured(SafeProposalException):
    pass


class WrongSigner(SafeProposalException):
    def __init__(self, specified: str, available: str):
        super().__init__(
            f"Wrong signer: request specified {specified}, client has {available}"
        )
        self.specified = specified
        self.available = available


class UnknownNetwork(SafeProposalException):
    def __init__(self, chain_id: int):
        super().__init__(
            f"No known service URL for chain-id={chain_id}. If using a custom "
            f"transaction service, provide a `TxService` instead of a chain id"
        )
        self.chain_id = chain_id


class InvalidProposalState(SafeProposalException):
    pass


class SignerException(Exception):
    """
    Raised when the signing capability fails (hardware rejection, user cancellation...).
    Not related to `SafeProposalException` nor to the service exceptions, so callers can
    tell a declined signature apart from a service problem
    """
